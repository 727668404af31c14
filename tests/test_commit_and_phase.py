from pdca_todo.schemas import AppSnapshot, Phase, Task
from pdca_todo.services.commit import commit_to_today
from pdca_todo.services.phase import PhaseController


def ids(task_list):
    return [t.id for t in task_list]


def test_commit_keeps_queue_order_not_selection_order():
    snap = AppSnapshot(tasks=[Task(id="t1"), Task(id="t2"), Task(id="t3")])
    after = commit_to_today(snap, ["t3", "t1"])
    assert ids(after.today_tasks) == ["t1", "t3"]
    assert ids(after.tasks) == ["t2"]

def test_commits_are_additive():
    snap = AppSnapshot(tasks=[Task(id="t1"), Task(id="t2")], today_tasks=[Task(id="t0")])
    after = commit_to_today(snap, {"t2"})
    after = commit_to_today(after, {"t1"})
    assert ids(after.today_tasks) == ["t0", "t2", "t1"]
    assert after.tasks == []

def test_empty_selection_moves_nothing():
    snap = AppSnapshot(tasks=[Task(id="t1")])
    after = commit_to_today(snap, [])
    assert ids(after.tasks) == ["t1"]
    assert after.today_tasks == []

def test_task_lives_in_one_queue_only():
    snap = AppSnapshot(tasks=[Task(id=f"t{i}") for i in range(5)])
    after = commit_to_today(snap, ["t1", "t4", "missing"])
    assert not set(ids(after.tasks)) & set(ids(after.today_tasks))
    assert sorted(ids(after.tasks) + ids(after.today_tasks)) == sorted(ids(snap.tasks))


def test_phase_graph_is_free():
    pc = PhaseController()
    assert pc.current == Phase.PLAN_STRATEGY
    for phase in [Phase.CHECK, Phase.PLAN_QUEUE, Phase.DO, Phase.PLAN_STRATEGY, Phase.CHECK, Phase.CHECK]:
        assert pc.navigate(phase) == phase
    assert pc.navigate("plan-queue") == Phase.PLAN_QUEUE

def test_commit_forces_do_phase():
    pc = PhaseController(Phase.PLAN_QUEUE)
    pc.committed()
    assert pc.current == Phase.DO


def test_workflow_commit_switches_to_do_and_persists(workflow, store):
    workflow.apply(lambda s: s.model_copy(update={"tasks": [Task(id="t1"), Task(id="t2"), Task(id="t3")]}))
    workflow.navigate(Phase.PLAN_QUEUE)
    workflow.commit({"t3", "t1"})
    assert workflow.phase.current == Phase.DO
    saved = store.load()
    assert saved.current_phase == Phase.DO
    assert ids(saved.today_tasks) == ["t1", "t3"]
    assert ids(saved.tasks) == ["t2"]

def test_reentering_a_phase_keeps_data(workflow):
    workflow.apply(lambda s: s.model_copy(update={"tasks": [Task(id="t1")]}))
    before = workflow.snapshot.tasks
    workflow.navigate(Phase.CHECK)
    workflow.navigate(Phase.PLAN_QUEUE)
    workflow.navigate(Phase.PLAN_QUEUE)
    assert workflow.snapshot.tasks == before
