"""
Execution engine: one active task at a time, a countdown, and the
completion protocol.

    idle -> ritual -> running <-> paused -> completing -> idle

Strategic tasks stop in ``ritual`` until their goal linkage is
acknowledged; everything else is armed straight away. The countdown
stops at zero but never completes a task on its own. ``discard`` drops
the active task without a completion when it leaves the Daily Set.
"""
import logging
from dataclasses import dataclass

from transitions import Machine, MachineError

from ..schemas import AppSnapshot, ExecutionLog, Task, TaskStatus, TaskType

logger = logging.getLogger(__name__)

STATES = [
    "idle",
    "ritual",
    {"name": "running", "on_enter": "_start_ticking", "on_exit": "_stop_ticking"},
    "paused",
    "completing",
]

TRANSITIONS = [
    {"trigger": "begin_ritual",   "source": "idle",                  "dest": "ritual"},
    {"trigger": "arm",            "source": ["idle", "ritual"],      "dest": "running", "before": "_arm_timer"},
    {"trigger": "pause",          "source": "running",               "dest": "paused"},
    {"trigger": "resume",         "source": "paused",                "dest": "running", "conditions": "has_time_left"},
    {"trigger": "expire",         "source": "running",               "dest": "paused"},
    {"trigger": "request_rating", "source": ["running", "paused"],   "dest": "completing"},
    {"trigger": "finish",         "source": ["running", "paused", "completing"], "dest": "idle", "after": "_clear"},
    {"trigger": "discard",        "source": ["ritual", "running", "paused", "completing"], "dest": "idle", "after": "_clear"},
]

# actions reachable through try_trigger
ACTIONS = {"start", "acknowledge", "pause", "resume", "adjust", "complete", "rate"}


@dataclass
class Completion:
    task_id: str
    log: ExecutionLog | None = None


def format_time(seconds: int) -> str:
    m, s = divmod(max(0, seconds), 60)
    return f"{m:02d}:{s:02d}"


class ExecutionEngine:
    def __init__(self, ticker=None):
        self.ticker = ticker
        self.active_task: Task | None = None
        self.remaining = 0
        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial="idle",
            auto_transitions=False,
            send_event=False,
        )

    # ---------- callbacks ----------

    def _arm_timer(self):
        self.remaining = self.active_task.estimate * 60

    def _start_ticking(self):
        if self.ticker is not None:
            self.ticker.start()

    def _stop_ticking(self):
        if self.ticker is not None:
            self.ticker.cancel()

    def _clear(self):
        self.active_task = None
        self.remaining = 0

    def has_time_left(self) -> bool:
        return self.remaining > 0

    def _expire_if_empty(self):
        if self.state == "running" and self.remaining <= 0:
            self.expire()

    # ---------- actions ----------

    def start(self, task: Task):
        if self.state != "idle":
            raise MachineError(f"Cannot start a task while '{self.state}'")
        self.active_task = task
        if task.type == TaskType.STRATEGIC:
            self.begin_ritual()
        else:
            self.arm()
            self._expire_if_empty()
        return self.state

    def acknowledge(self):
        if self.state != "ritual":
            raise MachineError(f"Nothing to acknowledge while '{self.state}'")
        self.arm()
        self._expire_if_empty()
        return self.state

    def tick(self):
        """One second of countdown; a no-op unless running."""
        if self.state != "running":
            return
        self.remaining = max(0, self.remaining - 1)
        self._expire_if_empty()

    def adjust(self, minutes: int) -> int:
        if self.state == "idle":
            raise MachineError("Cannot adjust time with no active task")
        self.remaining = max(0, self.remaining + minutes * 60)
        return self.remaining

    def complete(self) -> Completion | None:
        """
        Finish the active task. Continuous tasks move to ``completing`` and
        return None until ``rate`` is called; others are done immediately.
        """
        if self.state not in ("running", "paused"):
            raise MachineError(f"Cannot complete while '{self.state}'")
        task = self.active_task
        if task.is_continuous:
            self.request_rating()
            return None
        self.finish()
        logger.info("[exec] completed %s", task.id)
        return Completion(task_id=task.id)

    def rate(self, quality: int = 3, focus: int = 3, fatigue: int = 3) -> Completion:
        if self.state != "completing":
            raise MachineError(f"No rating pending while '{self.state}'")
        log = ExecutionLog(task_id=self.active_task.id, quality=quality, focus=focus, fatigue=fatigue)
        self.finish()
        logger.info("[exec] completed %s (q=%d f=%d t=%d)", log.task_id, quality, focus, fatigue)
        return Completion(task_id=log.task_id, log=log)

    def try_trigger(self, action: str, *args):
        """
        Run an action by name.

        Returns:
            (True, result) on success
            (False, error_message) on failure
        """
        if action not in ACTIONS:
            return False, f"Unknown action: {action}"
        try:
            return True, getattr(self, action)(*args)
        except MachineError as e:
            return False, str(e.value)

    def shutdown(self):
        self._stop_ticking()

    # ---------- view ----------

    def status(self) -> dict:
        task = self.active_task
        total = task.estimate * 60 if task else 0
        return {
            "state": self.state,
            "task_id": task.id if task else None,
            "title": task.title if task else None,
            "type": task.type.value if task else None,
            "remaining": self.remaining,
            "display": format_time(self.remaining),
            "progress": (self.remaining / total) if total else 0.0,
        }


def apply_completion(snap: AppSnapshot, completion: Completion) -> AppSnapshot:
    """Flip the Daily Set entry to done in place and record at most one log for it."""
    today = [
        t.model_copy(update={"status": TaskStatus.DONE}) if t.id == completion.task_id else t
        for t in snap.today_tasks
    ]
    logs = snap.execution_logs
    if completion.log is not None and not any(entry.task_id == completion.task_id for entry in logs):
        logs = [*logs, completion.log]
    return snap.model_copy(update={"today_tasks": today, "execution_logs": logs})
