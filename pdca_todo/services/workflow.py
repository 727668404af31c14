import logging
import threading

from ..jobs import CountdownTicker
from ..schemas import AppSnapshot, Phase, Task, TaskStatus
from .analysis import analysis_for
from .commit import commit_to_today
from .execution import Completion, ExecutionEngine, apply_completion
from .goals import link_info
from .persistence import SnapshotStore
from .phase import PhaseController

logger = logging.getLogger(__name__)


class Workflow:
    """
    Owner of the live snapshot.

    Every action computes a whole new snapshot, swaps it in and writes it
    out. The lock serialises user actions against the background countdown
    tick so each one is complete before the next is observable.
    """

    def __init__(self, store: SnapshotStore, ticker_factory=CountdownTicker):
        self.store = store
        self._lock = threading.RLock()
        self.snapshot = store.load()
        self.phase = PhaseController(self.snapshot.current_phase)
        ticker = ticker_factory(self.tick) if ticker_factory else None
        self.engine = ExecutionEngine(ticker=ticker)

    def _replace(self, snap: AppSnapshot):
        self.snapshot = snap
        # a failed write is logged by the store and retried with the next mutation
        self.store.save(snap)

    def apply(self, fn, *args, **kwargs) -> AppSnapshot:
        """Run a pure ``snapshot -> snapshot`` store operation."""
        with self._lock:
            snap = fn(self.snapshot, *args, **kwargs)
            if snap is not self.snapshot:
                self._replace(snap)
                self._drop_orphaned_task()
            return self.snapshot

    # ---------- phases ----------

    def navigate(self, phase: Phase | str) -> Phase:
        with self._lock:
            state = self.phase.navigate(phase)
            if self.snapshot.current_phase != state:
                self._replace(self.snapshot.model_copy(update={"current_phase": state}))
            return state

    def commit(self, task_ids) -> AppSnapshot:
        with self._lock:
            snap = commit_to_today(self.snapshot, task_ids)
            self.phase.committed()
            self._replace(snap.model_copy(update={"current_phase": self.phase.current}))
            return self.snapshot

    def finish_review(self) -> Phase:
        return self.navigate(Phase.PLAN_QUEUE)

    # ---------- execution ----------

    def find_today(self, task_id: str) -> Task | None:
        return next((t for t in self.snapshot.today_tasks if t.id == task_id), None)

    def _drop_orphaned_task(self):
        # the running task may have been deleted directly or by a goal cascade
        task = self.engine.active_task
        if task is not None and self.find_today(task.id) is None:
            logger.info("[workflow] active task %s was removed, timer reset", task.id)
            self.engine.discard()

    def start_task(self, task_id: str):
        with self._lock:
            task = self.find_today(task_id)
            if task is None:
                return False, "Task not found in today's plan"
            if task.status == TaskStatus.DONE:
                return False, "Task already done"
            return self.engine.try_trigger("start", task)

    def execute(self, action: str, *args):
        with self._lock:
            ok, result = self.engine.try_trigger(action, *args)
            if ok and isinstance(result, Completion):
                self._replace(apply_completion(self.snapshot, result))
            return ok, result

    def tick(self):
        with self._lock:
            self.engine.tick()

    def execution_status(self) -> dict:
        with self._lock:
            status = self.engine.status()
            task = self.engine.active_task
            status["link"] = link_info(self.snapshot, task) if task else None
            return status

    # ---------- check ----------

    def analysis(self):
        with self._lock:
            return analysis_for(self.snapshot)

    def shutdown(self):
        with self._lock:
            self.engine.shutdown()
