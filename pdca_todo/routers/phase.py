from fastapi import APIRouter, Depends

from ..deps import get_workflow, require_api_key
from ..services.workflow import Workflow
from .. import schemas

router = APIRouter(prefix="/phase", tags=["phase"], dependencies=[Depends(require_api_key)])

@router.get("")
def get_phase(wf: Workflow = Depends(get_workflow)):
    return {"phase": wf.phase.current.value}

@router.post("")
def set_phase(payload: schemas.PhasePayload, wf: Workflow = Depends(get_workflow)):
    return {"ok": True, "phase": wf.navigate(payload.phase).value}
