from pdca_todo.schemas import AppSnapshot, ExecutionLog, Task, TaskStatus, TaskType
from pdca_todo.services.analysis import (
    PROBLEM,
    REASON_COMPLETED,
    REASON_INCOMPLETE,
    REASON_SHORTFALL,
    SUCCESS,
    analysis_for,
    derive_analysis,
    dismiss,
)

DONE = TaskStatus.DONE


def day():
    today = [
        Task(id="s-open", type=TaskType.STRATEGIC, goal_id="g"),
        Task(id="s-low", type=TaskType.STRATEGIC, goal_id="g", status=DONE, is_continuous=True),
        Task(id="n-good", status=DONE, is_continuous=True),
        Task(id="n-plain", status=DONE),
        Task(id="n-open"),
    ]
    logs = [
        ExecutionLog(task_id="s-low", quality=2, focus=5, fatigue=3),
        ExecutionLog(task_id="n-good", quality=5, focus=4, fatigue=2),
        ExecutionLog(task_id="not-today", quality=1, focus=1, fatigue=1),
    ]
    return today, logs

def summary(items):
    return [(i.task.id, i.kind, i.reason) for i in items]


def test_categories_in_order():
    today, logs = day()
    assert summary(derive_analysis(today, logs)) == [
        ("s-open", PROBLEM, REASON_INCOMPLETE),
        ("s-low", PROBLEM, REASON_SHORTFALL),
        ("n-good", SUCCESS, REASON_COMPLETED),
        ("n-plain", SUCCESS, REASON_COMPLETED),
    ]

def test_logs_are_attached_by_task_id():
    today, logs = day()
    items = {i.task.id: i for i in derive_analysis(today, logs)}
    assert items["s-open"].log is None
    assert items["s-low"].log == logs[0]
    assert items["n-good"].log == logs[1]
    assert items["n-plain"].log is None
    assert items["s-open"].guide and items["n-good"].guide != items["s-open"].guide

def test_incomplete_strategic_task_is_never_a_success():
    # a low log for an unfinished strategic task must not add a second entry
    today = [Task(id="s", type=TaskType.STRATEGIC, goal_id="g")]
    for q, f in [(1, 1), (5, 5), (2, 5), (5, 2)]:
        logs = [ExecutionLog(task_id="s", quality=q, focus=f)]
        assert summary(derive_analysis(today, logs)) == [("s", PROBLEM, REASON_INCOMPLETE)]

def test_low_focus_alone_is_a_shortfall():
    today = [Task(id="n", status=DONE, is_continuous=True)]
    logs = [ExecutionLog(task_id="n", quality=5, focus=2)]
    assert summary(derive_analysis(today, logs)) == [("n", PROBLEM, REASON_SHORTFALL)]

def test_derivation_is_pure():
    today, logs = day()
    first = derive_analysis(today, logs, ["n-plain"])
    second = derive_analysis(today, logs, ["n-plain"])
    assert first == second
    assert [t.id for t in today] == ["s-open", "s-low", "n-good", "n-plain", "n-open"]

def test_dismissed_items_never_come_back():
    today, logs = day()
    snap = AppSnapshot(today_tasks=today, execution_logs=logs)
    snap = dismiss(snap, "s-open")
    assert "s-open" not in [i.task.id for i in analysis_for(snap)]

    # further state changes don't resurrect it
    today = [t.model_copy(update={"status": DONE}) if t.id == "s-open" else t for t in snap.today_tasks]
    snap = snap.model_copy(update={"today_tasks": today})
    assert "s-open" not in [i.task.id for i in analysis_for(snap)]

def test_dismiss_is_idempotent():
    snap = dismiss(AppSnapshot(), "x")
    assert dismiss(snap, "x") is snap
    assert snap.dismissed_analysis_ids == ["x"]
