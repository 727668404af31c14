from pdca_todo.schemas import AppSnapshot, Task
from pdca_todo.services import goals, routines


def planned():
    snap = goals.add_goal(AppSnapshot(), title="Ship the app")
    g = snap.goals[0]
    kpi = g.subgoals[0]
    return snap.model_copy(update={
        "tasks": [
            Task(id="q1", goal_id=g.id, subgoal_id=kpi.id),
            Task(id="q2"),
            Task(id="q3", goal_id=g.id),
        ],
        "today_tasks": [Task(id="d1", goal_id=g.id, subgoal_id=kpi.id), Task(id="d2")],
    }), g.id, kpi.id


def test_new_goal_starts_with_one_empty_subgoal():
    snap = goals.add_goal(AppSnapshot())
    assert len(snap.goals) == 1
    assert [s.title for s in snap.goals[0].subgoals] == [""]

def test_delete_goal_cascades_to_both_queues():
    snap, gid, _ = planned()
    after = goals.delete_goal(snap, gid)
    assert after.goals == []
    assert [t.id for t in after.tasks] == ["q2"]
    assert [t.id for t in after.today_tasks] == ["d2"]
    # the original snapshot is untouched
    assert len(snap.tasks) == 3

def test_delete_unknown_goal_is_noop():
    snap, _, _ = planned()
    assert goals.delete_goal(snap, "nope") is snap

def test_delete_subgoal_unlinks_but_keeps_tasks():
    snap, gid, kid = planned()
    after = goals.delete_subgoal(snap, gid, kid)
    assert goals.find_goal(after, gid).subgoals == []
    q1 = next(t for t in after.tasks if t.id == "q1")
    d1 = next(t for t in after.today_tasks if t.id == "d1")
    assert (q1.goal_id, q1.subgoal_id) == (gid, None)
    assert (d1.goal_id, d1.subgoal_id) == (gid, None)

def test_update_and_toggle():
    snap, gid, kid = planned()
    snap = goals.update_goal(snap, gid, title="Ship v2", deadline="2026-03-31")
    snap = goals.toggle_goal(snap, gid)
    snap = goals.update_subgoal(snap, gid, kid, title="Define MVP", progress=40.0)
    snap = goals.toggle_subgoal(snap, gid, kid)
    g = goals.find_goal(snap, gid)
    assert (g.title, g.deadline, g.is_expanded) == ("Ship v2", "2026-03-31", False)
    s = goals.find_subgoal(snap, gid, kid)
    assert (s.title, s.progress, s.is_expanded) == ("Define MVP", 40.0, False)

def test_link_info_and_subgoal_listing():
    snap, gid, kid = planned()
    snap = goals.update_subgoal(snap, gid, kid, title="Define MVP")
    q1, q2, q3 = snap.tasks
    assert goals.link_info(snap, q1) == {"goal_title": "Ship the app", "subgoal_title": "Define MVP"}
    assert goals.link_info(snap, q3) == {"goal_title": "Ship the app", "subgoal_title": ""}
    assert goals.link_info(snap, q2) is None
    assert [t.id for t in goals.tasks_for_subgoal(snap, gid, kid)] == ["q1", "q3"]

def test_routines_lifecycle():
    snap = routines.add_routine(AppSnapshot(), "Review the day")
    assert routines.add_routine(snap, "  ") is snap
    rid = snap.routines[0].id
    assert snap.routines[0].timing == "night"
    snap = routines.toggle_routine(snap, rid)
    snap = routines.rename_routine(snap, rid, "Daily review")
    assert (snap.routines[0].title, snap.routines[0].done) == ("Daily review", True)
    assert routines.delete_routine(snap, rid).routines == []
