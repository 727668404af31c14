import importlib
import logging
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .deps import engine, get_workflow, require_api_key, reset_workflow
from .jobs import start_scheduler, stop_scheduler
from .services.workflow import Workflow
from . import models

logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="PDCA Todo API", version="0.1.0")

# CORS (dev-friendly; the UI runs on its own origin)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)

@app.get("/health")
def health():
    return {"ok": True}

@app.get("/state", dependencies=[Depends(require_api_key)])
def state(wf: Workflow = Depends(get_workflow)):
    """The whole snapshot, as the UI renders it."""
    return wf.snapshot.model_dump(mode="json")

def _include_routers() -> None:
    for modname in [
        "goals",
        "queue",
        "dayplan",
        "check",
        "phase",
    ]:
        try:
            mod = importlib.import_module(f"{__package__}.routers.{modname}")
            app.include_router(mod.router)
            logger.info("[routers] mounted %s", modname)
        except Exception as e:
            logger.error("[routers] skip %s: %s", modname, e)

@app.on_event("startup")
def _on_startup():
    # 1) create the snapshot table
    models.Base.metadata.create_all(bind=engine)
    # 2) load the snapshot and arm the tick scheduler
    get_workflow()
    start_scheduler()

@app.on_event("shutdown")
def _on_shutdown():
    reset_workflow()
    stop_scheduler()

# Include routers immediately (not in startup event)
_include_routers()
