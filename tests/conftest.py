import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pdca_todo import models
from pdca_todo.config import settings
from pdca_todo.deps import get_workflow
from pdca_todo.main import app
from pdca_todo.services.persistence import SnapshotStore
from pdca_todo.services.workflow import Workflow


class ManualTicker:
    """Stands in for the scheduler job; tests fire ticks by hand."""

    def __init__(self, callback):
        self.callback = callback
        self.active = False
        self.starts = 0

    def start(self):
        if not self.active:
            self.starts += 1
        self.active = True

    def cancel(self):
        self.active = False

    def fire(self, n: int = 1):
        for _ in range(n):
            self.callback()


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    models.Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    engine.dispose()

@pytest.fixture
def store(session_factory):
    return SnapshotStore(session_factory, "test-data")

@pytest.fixture
def workflow(store):
    wf = Workflow(store, ticker_factory=ManualTicker)
    yield wf
    wf.shutdown()

@pytest.fixture
def client(workflow):
    app.dependency_overrides[get_workflow] = lambda: workflow
    c = TestClient(app, headers={"x-api-key": settings.api_key})
    yield c
    app.dependency_overrides.clear()
