"""
End-of-day analysis for the Check phase.

``derive_analysis`` is recomputed from scratch on every read; the only
state it depends on besides the Daily Set and the execution logs is the
append-only set of dismissed task ids.
"""
from typing import Iterable

from ..schemas import AnalysisItem, AppSnapshot, ExecutionLog, Task, TaskStatus, TaskType

PROBLEM = "problem"
SUCCESS = "success"

REASON_INCOMPLETE = "incomplete"
REASON_SHORTFALL = "quality/focus shortfall"
REASON_COMPLETED = "completed"

LOW_RATING = 2

GUIDES = {
    PROBLEM: "Why didn't it go well (not enough action, a planning mistake, something unexpected)? "
             "What will you do differently next time?",
    SUCCESS: "Why did it go well (the plan, focus, the environment)? "
             "How will you reuse this pattern (make it a routine, apply it elsewhere)?",
}

FAILURE_FACTORS = [
    {"id": "A", "label": "A. Not enough action", "detail": "No time, or forgot"},
    {"id": "B", "label": "B. Quality/quantity shortfall", "detail": "Optimistic estimate, poor focus"},
    {"id": "C", "label": "C. Unexpected", "detail": "Interruptions, feeling unwell"},
    {"id": "D", "label": "D. Wrong hypothesis", "detail": "Little effect, pointless"},
]

SUCCESS_FACTORS = [
    {"id": "A", "label": "A. Keep", "detail": "Make it a repeatable routine"},
    {"id": "B", "label": "B. Apply", "detail": "Use the same approach on other tasks and projects"},
    {"id": "C", "label": "C. Systemize", "detail": "Tooling or automation to make it cheaper"},
    {"id": "D", "label": "D. Log", "detail": "Record it as a win for motivation"},
]


def _item(task: Task, kind: str, reason: str, log: ExecutionLog | None = None) -> AnalysisItem:
    return AnalysisItem(task=task, kind=kind, reason=reason, log=log, guide=GUIDES[kind])

def derive_analysis(
    today_tasks: list[Task],
    execution_logs: list[ExecutionLog],
    dismissed_ids: Iterable[str] = (),
) -> list[AnalysisItem]:
    """
    Ordered review list, first match wins per task id:
      1. strategic tasks of the day that are not done  -> problem
      2. logs rated quality <= 2 or focus <= 2         -> problem (log attached)
      3. remaining done tasks                           -> success (log joined by task id)
    """
    by_id = {t.id: t for t in today_tasks}
    seen: set[str] = set()
    items: list[AnalysisItem] = []

    for t in today_tasks:
        if t.type == TaskType.STRATEGIC and t.status != TaskStatus.DONE:
            items.append(_item(t, PROBLEM, REASON_INCOMPLETE))
            seen.add(t.id)

    for log in execution_logs:
        if log.quality > LOW_RATING and log.focus > LOW_RATING:
            continue
        task = by_id.get(log.task_id)
        if task is None or task.id in seen:
            continue
        items.append(_item(task, PROBLEM, REASON_SHORTFALL, log))
        seen.add(task.id)

    logs_by_task: dict[str, ExecutionLog] = {}
    for log in execution_logs:
        logs_by_task.setdefault(log.task_id, log)

    for t in today_tasks:
        if t.status == TaskStatus.DONE and t.id not in seen:
            items.append(_item(t, SUCCESS, REASON_COMPLETED, logs_by_task.get(t.id)))
            seen.add(t.id)

    dismissed = set(dismissed_ids)
    return [i for i in items if i.task.id not in dismissed]

def analysis_for(snap: AppSnapshot) -> list[AnalysisItem]:
    return derive_analysis(snap.today_tasks, snap.execution_logs, snap.dismissed_analysis_ids)

def dismiss(snap: AppSnapshot, task_id: str) -> AppSnapshot:
    """Mark an analysis item as thought through; there is no way back."""
    if task_id in snap.dismissed_analysis_ids:
        return snap
    return snap.model_copy(update={"dismissed_analysis_ids": [*snap.dismissed_analysis_ids, task_id]})
