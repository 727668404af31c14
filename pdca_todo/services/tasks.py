"""
Task store: the Pending Queue, its ordering, and task linkage.

Nothing outside this module reorders the queue; ``move_task`` is the only
reordering primitive.
"""
import logging

from ..schemas import AppSnapshot, Task, TaskStatus, TaskType

logger = logging.getLogger(__name__)

STRATEGIC_DEFAULTS = {"title": "", "type": TaskType.STRATEGIC, "estimate": 60, "is_continuous": True}
NORMAL_DEFAULTS = {"title": "New task", "type": TaskType.NORMAL, "estimate": 30, "is_continuous": False}
FLASH_MEMO_ESTIMATE = 15


def find_task(snap: AppSnapshot, task_id: str) -> Task | None:
    for t in (*snap.tasks, *snap.today_tasks):
        if t.id == task_id:
            return t
    return None

def add_task(snap: AppSnapshot, goal_id: str | None = None, subgoal_id: str | None = None, **defaults) -> AppSnapshot:
    if subgoal_id is not None and goal_id is None:
        logger.warning("[tasks] refusing sub-goal link %s without its goal", subgoal_id)
        return snap
    base = STRATEGIC_DEFAULTS if goal_id is not None else NORMAL_DEFAULTS
    fields = {**base, **{k: v for k, v in defaults.items() if v is not None}}
    task = Task(goal_id=goal_id, subgoal_id=subgoal_id, status=TaskStatus.TODO, **fields)
    return snap.model_copy(update={"tasks": [*snap.tasks, task]})

def add_flash_memo(snap: AppSnapshot, text: str) -> AppSnapshot:
    """Quick capture into the Pending Queue; usable whatever the timer is doing."""
    text = text.strip()
    if not text:
        return snap
    task = Task(title=text, type=TaskType.NORMAL, estimate=FLASH_MEMO_ESTIMATE, is_continuous=False)
    return snap.model_copy(update={"tasks": [*snap.tasks, task]})

def coerce_estimate(value) -> int:
    # form input: anything that isn't a non-negative whole number becomes 0
    try:
        n = int(value)
    except (TypeError, ValueError):
        return 0
    return n if n > 0 else 0

def update_task(snap: AppSnapshot, task_id: str, title: str | None = None, estimate=None) -> AppSnapshot:
    changes = {}
    if title is not None:
        changes["title"] = title
    if estimate is not None:
        changes["estimate"] = coerce_estimate(estimate)
    if not changes:
        return snap

    def patch(tasks: list[Task]) -> list[Task]:
        return [t.model_copy(update=changes) if t.id == task_id else t for t in tasks]

    return snap.model_copy(update={"tasks": patch(snap.tasks), "today_tasks": patch(snap.today_tasks)})

def move_task(snap: AppSnapshot, index: int, direction: str) -> AppSnapshot:
    """Swap the task at ``index`` with its neighbour; boundaries are no-ops."""
    tasks = list(snap.tasks)
    if not 0 <= index < len(tasks):
        return snap
    if direction == "up" and index > 0:
        other = index - 1
    elif direction == "down" and index < len(tasks) - 1:
        other = index + 1
    else:
        return snap
    tasks[index], tasks[other] = tasks[other], tasks[index]
    return snap.model_copy(update={"tasks": tasks})

def delete_task(snap: AppSnapshot, task_id: str) -> AppSnapshot:
    return snap.model_copy(update={
        "tasks": [t for t in snap.tasks if t.id != task_id],
        "today_tasks": [t for t in snap.today_tasks if t.id != task_id],
    })

def flash_memos(snap: AppSnapshot) -> list[Task]:
    """The Check-phase inbox: normal tasks still waiting in the queue."""
    return [t for t in snap.tasks if t.type == TaskType.NORMAL]

def daily_progress(snap: AppSnapshot) -> tuple[int, int]:
    done = sum(1 for t in snap.today_tasks if t.status == TaskStatus.DONE)
    return done, len(snap.today_tasks)
