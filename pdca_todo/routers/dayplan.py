from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_workflow, require_api_key
from ..services import routines as routine_store
from ..services import tasks as task_store
from ..services.goals import link_info
from ..services.workflow import Workflow
from .. import schemas

router = APIRouter(prefix="/day", tags=["day"], dependencies=[Depends(require_api_key)])

# ---------- helpers ----------

def run_or_409(wf: Workflow, action: str, *args) -> dict:
    ok, result = wf.execute(action, *args)
    if not ok:
        raise HTTPException(409, result)
    return wf.execution_status()

def routine_or_404(wf: Workflow, routine_id: str):
    if not any(r.id == routine_id for r in wf.snapshot.routines):
        raise HTTPException(404, "Routine not found")

# ---------- today's plan ----------

@router.get("/today")
def get_today(wf: Workflow = Depends(get_workflow)):
    snap = wf.snapshot
    done, total = task_store.daily_progress(snap)
    return {
        "done": done,
        "total": total,
        "tasks": [{**t.model_dump(mode="json"), "link": link_info(snap, t)} for t in snap.today_tasks],
        "timer": wf.execution_status(),
    }

# ---------- execution ----------

@router.get("/timer")
def get_timer(wf: Workflow = Depends(get_workflow)):
    return wf.execution_status()

@router.post("/start/{task_id}")
def start_task(task_id: str, wf: Workflow = Depends(get_workflow)):
    if wf.find_today(task_id) is None:
        raise HTTPException(404, "Task not found in today's plan")
    ok, result = wf.start_task(task_id)
    if not ok:
        raise HTTPException(409, result)
    return wf.execution_status()

@router.post("/acknowledge")
def acknowledge(wf: Workflow = Depends(get_workflow)):
    return run_or_409(wf, "acknowledge")

@router.post("/pause")
def pause(wf: Workflow = Depends(get_workflow)):
    return run_or_409(wf, "pause")

@router.post("/resume")
def resume(wf: Workflow = Depends(get_workflow)):
    # at 00:00 the timer stays paused until time is added
    return run_or_409(wf, "resume")

@router.post("/adjust")
def adjust(payload: schemas.AdjustPayload, wf: Workflow = Depends(get_workflow)):
    return run_or_409(wf, "adjust", payload.minutes)

@router.post("/complete")
def complete(wf: Workflow = Depends(get_workflow)):
    status = run_or_409(wf, "complete")
    status["needs_rating"] = status["state"] == "completing"
    return status

@router.post("/rate")
def rate(payload: schemas.RatingPayload, wf: Workflow = Depends(get_workflow)):
    return run_or_409(wf, "rate", payload.quality, payload.focus, payload.fatigue)

# ---------- flash memo ----------

@router.post("/memo")
def flash_memo(payload: schemas.MemoCreate, wf: Workflow = Depends(get_workflow)):
    if not payload.text.strip():
        raise HTTPException(422, "Memo text is empty")
    snap = wf.apply(task_store.add_flash_memo, payload.text)
    return {"ok": True, "task_id": snap.tasks[-1].id}

# ---------- routines ----------

@router.get("/routines")
def list_routines(wf: Workflow = Depends(get_workflow)):
    return [r.model_dump(mode="json") for r in wf.snapshot.routines]

@router.post("/routines")
def create_routine(payload: schemas.RoutineCreate, wf: Workflow = Depends(get_workflow)):
    if not payload.title.strip():
        raise HTTPException(422, "Routine title is empty")
    snap = wf.apply(routine_store.add_routine, payload.title, payload.timing)
    return {"ok": True, "routine_id": snap.routines[-1].id}

@router.post("/routines/{routine_id}/toggle")
def toggle_routine(routine_id: str, wf: Workflow = Depends(get_workflow)):
    routine_or_404(wf, routine_id)
    snap = wf.apply(routine_store.toggle_routine, routine_id)
    return {"ok": True, "done": next(r.done for r in snap.routines if r.id == routine_id)}

@router.patch("/routines/{routine_id}")
def rename_routine(routine_id: str, payload: schemas.RoutineUpdate, wf: Workflow = Depends(get_workflow)):
    routine_or_404(wf, routine_id)
    wf.apply(routine_store.rename_routine, routine_id, payload.title)
    return {"ok": True}

@router.delete("/routines/{routine_id}")
def delete_routine(routine_id: str, wf: Workflow = Depends(get_workflow)):
    routine_or_404(wf, routine_id)
    wf.apply(routine_store.delete_routine, routine_id)
    return {"ok": True}
