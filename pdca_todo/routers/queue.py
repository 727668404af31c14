from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_workflow, require_api_key
from ..services import tasks as store
from ..services.goals import link_info
from ..services.workflow import Workflow
from .. import schemas
from .goals import goal_or_404, subgoal_or_404

router = APIRouter(prefix="/queue", tags=["queue"], dependencies=[Depends(require_api_key)])

@router.get("")
def list_queue(wf: Workflow = Depends(get_workflow)):
    snap = wf.snapshot
    return [
        {"index": i, **t.model_dump(mode="json"), "link": link_info(snap, t)}
        for i, t in enumerate(snap.tasks)
    ]

@router.post("")
def create_task(payload: schemas.TaskCreate, wf: Workflow = Depends(get_workflow)):
    if payload.subgoal_id and not payload.goal_id:
        raise HTTPException(422, "subgoal_id requires goal_id")
    if payload.subgoal_id:
        subgoal_or_404(wf, payload.goal_id, payload.subgoal_id)
    elif payload.goal_id:
        goal_or_404(wf, payload.goal_id)
    snap = wf.apply(
        store.add_task, payload.goal_id, payload.subgoal_id,
        title=payload.title, estimate=payload.estimate,
    )
    return {"ok": True, "task_id": snap.tasks[-1].id}

@router.patch("/{task_id}")
def update_task(task_id: str, payload: schemas.TaskUpdate, wf: Workflow = Depends(get_workflow)):
    if not store.find_task(wf.snapshot, task_id):
        raise HTTPException(404, "Task not found")
    wf.apply(store.update_task, task_id, title=payload.title, estimate=payload.estimate)
    return {"ok": True}

@router.delete("/{task_id}")
def delete_task(task_id: str, wf: Workflow = Depends(get_workflow)):
    if not store.find_task(wf.snapshot, task_id):
        raise HTTPException(404, "Task not found")
    wf.apply(store.delete_task, task_id)
    return {"ok": True}

@router.post("/move")
def move_task(payload: schemas.MovePayload, wf: Workflow = Depends(get_workflow)):
    snap = wf.apply(store.move_task, payload.index, payload.direction)
    return {"ok": True, "order": [t.id for t in snap.tasks]}

@router.post("/commit")
def commit_today(payload: schemas.CommitPayload, wf: Workflow = Depends(get_workflow)):
    """Move the selected tasks into today's plan (queue order kept) and switch to Do."""
    snap = wf.commit(payload.task_ids)
    return {
        "ok": True,
        "phase": snap.current_phase.value,
        "today": [t.id for t in snap.today_tasks],
        "queue": [t.id for t in snap.tasks],
    }
