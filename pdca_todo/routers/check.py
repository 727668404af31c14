from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_workflow, require_api_key
from ..services import analysis
from ..services import tasks as task_store
from ..services.goals import link_info
from ..services.workflow import Workflow

router = APIRouter(prefix="/check", tags=["check"], dependencies=[Depends(require_api_key)])

@router.get("/analysis")
def get_analysis(wf: Workflow = Depends(get_workflow)):
    snap = wf.snapshot
    return {
        "items": [
            {**item.model_dump(mode="json"), "link": link_info(snap, item.task)}
            for item in wf.analysis()
        ],
        "failure_factors": analysis.FAILURE_FACTORS,
        "success_factors": analysis.SUCCESS_FACTORS,
    }

@router.post("/analysis/{task_id}/dismiss")
def dismiss_item(task_id: str, wf: Workflow = Depends(get_workflow)):
    if not any(item.task.id == task_id for item in wf.analysis()):
        raise HTTPException(404, "Analysis item not found")
    wf.apply(analysis.dismiss, task_id)
    return {"ok": True}

# ---------- flash memo inbox ----------

@router.get("/inbox")
def inbox(wf: Workflow = Depends(get_workflow)):
    return [t.model_dump(mode="json") for t in task_store.flash_memos(wf.snapshot)]

@router.delete("/inbox/{task_id}")
def clear_memo(task_id: str, wf: Workflow = Depends(get_workflow)):
    if not any(t.id == task_id for t in task_store.flash_memos(wf.snapshot)):
        raise HTTPException(404, "Memo not found")
    wf.apply(task_store.delete_task, task_id)
    return {"ok": True}

@router.post("/finish")
def finish_review(wf: Workflow = Depends(get_workflow)):
    return {"ok": True, "phase": wf.finish_review().value}
