"""
Goal hierarchy store: KGIs owning KPIs (sub-goals).

Every function takes an ``AppSnapshot`` and returns a new one; unknown ids
leave the snapshot as it was.
"""
import logging

from ..schemas import AppSnapshot, Goal, SubGoal, Task

logger = logging.getLogger(__name__)


# ---------- lookups ----------

def find_goal(snap: AppSnapshot, goal_id: str | None) -> Goal | None:
    if goal_id is None:
        return None
    return next((g for g in snap.goals if g.id == goal_id), None)

def find_subgoal(snap: AppSnapshot, goal_id: str | None, subgoal_id: str | None) -> SubGoal | None:
    goal = find_goal(snap, goal_id)
    if goal is None or subgoal_id is None:
        return None
    return next((s for s in goal.subgoals if s.id == subgoal_id), None)

def link_info(snap: AppSnapshot, task: Task) -> dict | None:
    """Titles of the goal (and sub-goal) a task is linked to, or None."""
    goal = find_goal(snap, task.goal_id)
    if goal is None:
        return None
    sub = find_subgoal(snap, task.goal_id, task.subgoal_id)
    return {"goal_title": goal.title, "subgoal_title": sub.title if sub else ""}

def tasks_for_subgoal(snap: AppSnapshot, goal_id: str, subgoal_id: str) -> list[Task]:
    # unlinked tasks of the goal show under every sub-goal card
    return [
        t for t in snap.tasks
        if t.goal_id == goal_id and (t.subgoal_id is None or t.subgoal_id == subgoal_id)
    ]


# ---------- goals ----------

def add_goal(snap: AppSnapshot, title: str = "New goal (KGI)", deadline: str = "") -> AppSnapshot:
    goal = Goal(title=title, deadline=deadline, subgoals=[SubGoal()])
    return snap.model_copy(update={"goals": [*snap.goals, goal]})

def update_goal(snap: AppSnapshot, goal_id: str, **fields) -> AppSnapshot:
    changes = {k: v for k, v in fields.items() if v is not None and k in ("title", "deadline", "is_expanded")}
    goals = [g.model_copy(update=changes) if g.id == goal_id else g for g in snap.goals]
    return snap.model_copy(update={"goals": goals})

def toggle_goal(snap: AppSnapshot, goal_id: str) -> AppSnapshot:
    goal = find_goal(snap, goal_id)
    if goal is None:
        return snap
    return update_goal(snap, goal_id, is_expanded=not goal.is_expanded)

def delete_goal(snap: AppSnapshot, goal_id: str) -> AppSnapshot:
    """Drop the goal and every task pointing at it, from both queues, in one snapshot."""
    if find_goal(snap, goal_id) is None:
        return snap
    tasks = [t for t in snap.tasks if t.goal_id != goal_id]
    today = [t for t in snap.today_tasks if t.goal_id != goal_id]
    removed = len(snap.tasks) - len(tasks) + len(snap.today_tasks) - len(today)
    logger.info("[goals] deleted %s with %d linked task(s)", goal_id, removed)
    return snap.model_copy(update={
        "goals": [g for g in snap.goals if g.id != goal_id],
        "tasks": tasks,
        "today_tasks": today,
    })


# ---------- sub-goals ----------

def _replace_subgoals(snap: AppSnapshot, goal_id: str, fn) -> AppSnapshot:
    goals = [g.model_copy(update={"subgoals": fn(g.subgoals)}) if g.id == goal_id else g for g in snap.goals]
    return snap.model_copy(update={"goals": goals})

def add_subgoal(snap: AppSnapshot, goal_id: str, title: str = "") -> AppSnapshot:
    return _replace_subgoals(snap, goal_id, lambda subs: [*subs, SubGoal(title=title)])

def update_subgoal(snap: AppSnapshot, goal_id: str, subgoal_id: str, **fields) -> AppSnapshot:
    changes = {k: v for k, v in fields.items() if v is not None and k in ("title", "progress", "is_expanded")}
    return _replace_subgoals(
        snap, goal_id,
        lambda subs: [s.model_copy(update=changes) if s.id == subgoal_id else s for s in subs],
    )

def toggle_subgoal(snap: AppSnapshot, goal_id: str, subgoal_id: str) -> AppSnapshot:
    sub = find_subgoal(snap, goal_id, subgoal_id)
    if sub is None:
        return snap
    return update_subgoal(snap, goal_id, subgoal_id, is_expanded=not sub.is_expanded)

def delete_subgoal(snap: AppSnapshot, goal_id: str, subgoal_id: str) -> AppSnapshot:
    """Remove a sub-goal; its tasks stay linked to the goal but lose the sub-goal link."""
    if find_subgoal(snap, goal_id, subgoal_id) is None:
        return snap
    snap = _replace_subgoals(snap, goal_id, lambda subs: [s for s in subs if s.id != subgoal_id])

    def unlink(tasks: list[Task]) -> list[Task]:
        return [
            t.model_copy(update={"subgoal_id": None}) if t.goal_id == goal_id and t.subgoal_id == subgoal_id else t
            for t in tasks
        ]

    return snap.model_copy(update={"tasks": unlink(snap.tasks), "today_tasks": unlink(snap.today_tasks)})
