import logging
from typing import Iterable

from ..schemas import AppSnapshot

logger = logging.getLogger(__name__)


def commit_to_today(snap: AppSnapshot, selected_ids: Iterable[str]) -> AppSnapshot:
    """
    Move the selected tasks from the Pending Queue to the end of the Daily Set.

    Selection order is irrelevant: the moved tasks keep the order they had
    in the queue, so planning priority survives into execution. Earlier
    commits of the day stay in place.
    """
    selected = set(selected_ids)
    moving = [t for t in snap.tasks if t.id in selected]
    remaining = [t for t in snap.tasks if t.id not in selected]
    logger.info("[commit] %d task(s) moved to today", len(moving))
    return snap.model_copy(update={
        "tasks": remaining,
        "today_tasks": [*snap.today_tasks, *moving],
    })
