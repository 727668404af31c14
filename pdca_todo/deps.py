from fastapi import Header, HTTPException
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from .config import settings
from .services.persistence import SnapshotStore
from .services.workflow import Workflow

engine = create_engine(settings.database_url, pool_pre_ping=True, future=True)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

_workflow: Workflow | None = None

def get_workflow() -> Workflow:
    # one live snapshot per process, loaded lazily after tables exist
    global _workflow
    if _workflow is None:
        _workflow = Workflow(SnapshotStore(SessionLocal, settings.snapshot_key))
    return _workflow

def reset_workflow():
    global _workflow
    if _workflow is not None:
        _workflow.shutdown()
    _workflow = None

def require_api_key(x_api_key: str | None = Header(default=None)):
    if not x_api_key or x_api_key != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")
