from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_workflow, require_api_key
from ..services import goals as store
from ..services import tasks as task_store
from ..services.workflow import Workflow
from .. import schemas

router = APIRouter(prefix="/goals", tags=["goals"], dependencies=[Depends(require_api_key)])

# ---------- helpers ----------

def goal_or_404(wf: Workflow, goal_id: str) -> schemas.Goal:
    g = store.find_goal(wf.snapshot, goal_id)
    if not g:
        raise HTTPException(404, "Goal not found")
    return g

def subgoal_or_404(wf: Workflow, goal_id: str, subgoal_id: str) -> schemas.SubGoal:
    goal_or_404(wf, goal_id)
    s = store.find_subgoal(wf.snapshot, goal_id, subgoal_id)
    if not s:
        raise HTTPException(404, "Sub-goal not found")
    return s

# ---------- goals ----------

@router.get("")
def list_goals(wf: Workflow = Depends(get_workflow)):
    return [g.model_dump(mode="json") for g in wf.snapshot.goals]

@router.post("")
def create_goal(payload: schemas.GoalCreate, wf: Workflow = Depends(get_workflow)):
    snap = wf.apply(store.add_goal, title=payload.title, deadline=payload.deadline)
    g = snap.goals[-1]
    return {"ok": True, "goal_id": g.id, "subgoal_id": g.subgoals[0].id}

@router.patch("/{goal_id}")
def update_goal(goal_id: str, payload: schemas.GoalUpdate, wf: Workflow = Depends(get_workflow)):
    goal_or_404(wf, goal_id)
    wf.apply(store.update_goal, goal_id, **payload.model_dump())
    return {"ok": True}

@router.post("/{goal_id}/toggle")
def toggle_goal(goal_id: str, wf: Workflow = Depends(get_workflow)):
    goal_or_404(wf, goal_id)
    snap = wf.apply(store.toggle_goal, goal_id)
    return {"ok": True, "is_expanded": store.find_goal(snap, goal_id).is_expanded}

@router.delete("/{goal_id}")
def delete_goal(goal_id: str, wf: Workflow = Depends(get_workflow)):
    """Delete a goal together with every task linked to it, queued or committed."""
    goal_or_404(wf, goal_id)
    before = wf.snapshot
    after = wf.apply(store.delete_goal, goal_id)
    return {
        "ok": True,
        "deleted": {
            "queued": len(before.tasks) - len(after.tasks),
            "today": len(before.today_tasks) - len(after.today_tasks),
        },
    }

# ---------- sub-goals ----------

@router.post("/{goal_id}/subgoals")
def create_subgoal(goal_id: str, wf: Workflow = Depends(get_workflow)):
    goal_or_404(wf, goal_id)
    snap = wf.apply(store.add_subgoal, goal_id)
    return {"ok": True, "subgoal_id": store.find_goal(snap, goal_id).subgoals[-1].id}

@router.patch("/{goal_id}/subgoals/{subgoal_id}")
def update_subgoal(goal_id: str, subgoal_id: str, payload: schemas.SubGoalUpdate, wf: Workflow = Depends(get_workflow)):
    subgoal_or_404(wf, goal_id, subgoal_id)
    wf.apply(store.update_subgoal, goal_id, subgoal_id, **payload.model_dump())
    return {"ok": True}

@router.post("/{goal_id}/subgoals/{subgoal_id}/toggle")
def toggle_subgoal(goal_id: str, subgoal_id: str, wf: Workflow = Depends(get_workflow)):
    subgoal_or_404(wf, goal_id, subgoal_id)
    snap = wf.apply(store.toggle_subgoal, goal_id, subgoal_id)
    return {"ok": True, "is_expanded": store.find_subgoal(snap, goal_id, subgoal_id).is_expanded}

@router.delete("/{goal_id}/subgoals/{subgoal_id}")
def delete_subgoal(goal_id: str, subgoal_id: str, wf: Workflow = Depends(get_workflow)):
    subgoal_or_404(wf, goal_id, subgoal_id)
    wf.apply(store.delete_subgoal, goal_id, subgoal_id)
    return {"ok": True}

# ---------- strategy tasks ----------

@router.get("/{goal_id}/subgoals/{subgoal_id}/tasks")
def list_subgoal_tasks(goal_id: str, subgoal_id: str, wf: Workflow = Depends(get_workflow)):
    subgoal_or_404(wf, goal_id, subgoal_id)
    return [t.model_dump(mode="json") for t in store.tasks_for_subgoal(wf.snapshot, goal_id, subgoal_id)]

@router.post("/{goal_id}/subgoals/{subgoal_id}/tasks")
def create_strategy_task(goal_id: str, subgoal_id: str, wf: Workflow = Depends(get_workflow)):
    subgoal_or_404(wf, goal_id, subgoal_id)
    snap = wf.apply(task_store.add_task, goal_id, subgoal_id)
    return {"ok": True, "task_id": snap.tasks[-1].id}
