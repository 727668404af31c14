from enum import Enum
from typing import Literal
from uuid import uuid4
from pydantic import BaseModel, Field, model_validator


# helper to mint ids; every entity in the snapshot is keyed by one
def new_id() -> str:
    return str(uuid4())


class Phase(str, Enum):
    PLAN_STRATEGY = "plan-strategy"
    PLAN_QUEUE = "plan-queue"
    DO = "do"
    CHECK = "check"

class TaskType(str, Enum):
    STRATEGIC = "strategic"
    NORMAL = "normal"
    ROUTINE = "routine"

class TaskStatus(str, Enum):
    TODO = "todo"
    DONE = "done"


# ---------- goal hierarchy ----------

class SubGoal(BaseModel):
    """KPI: owned by exactly one Goal."""
    id: str = Field(default_factory=new_id)
    title: str = ""
    is_expanded: bool = True
    progress: float | None = None

class Goal(BaseModel):
    """KGI: top-level goal with an optional deadline ("" when unset)."""
    id: str = Field(default_factory=new_id)
    title: str = ""
    deadline: str = ""
    is_expanded: bool = True
    subgoals: list[SubGoal] = Field(default_factory=list)


# ---------- tasks ----------

class Task(BaseModel):
    id: str = Field(default_factory=new_id)
    goal_id: str | None = None
    subgoal_id: str | None = None
    title: str = ""
    type: TaskType = TaskType.NORMAL
    status: TaskStatus = TaskStatus.TODO
    estimate: int = Field(default=30, ge=0)        # minutes
    is_continuous: bool = False

    @model_validator(mode="after")
    def _subgoal_needs_goal(self):
        # a sub-goal link without its parent goal is not representable
        if self.goal_id is None:
            self.subgoal_id = None
        return self

class Routine(BaseModel):
    id: str = Field(default_factory=new_id)
    title: str
    timing: str = Field(default="night", pattern="^(morning|night)$")
    done: bool = False

class ExecutionLog(BaseModel):
    task_id: str
    quality: int = Field(default=3, ge=1, le=5)
    focus: int = Field(default=3, ge=1, le=5)
    fatigue: int = Field(default=3, ge=1, le=5)


# ---------- snapshot ----------

class AppSnapshot(BaseModel):
    """
    Everything the app persists. ``tasks`` is the Pending Queue and
    ``today_tasks`` the Daily Set; a task id lives in at most one of them.
    ``AppSnapshot()`` is the empty-but-valid fallback.
    """
    goals: list[Goal] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    today_tasks: list[Task] = Field(default_factory=list)
    routines: list[Routine] = Field(default_factory=list)
    execution_logs: list[ExecutionLog] = Field(default_factory=list)
    current_phase: Phase = Phase.PLAN_STRATEGY
    dismissed_analysis_ids: list[str] = Field(default_factory=list)


class AnalysisItem(BaseModel):
    task: Task
    kind: str                      # "problem" | "success"
    reason: str
    log: ExecutionLog | None = None
    guide: str = ""


# ---------- payloads ----------

class GoalCreate(BaseModel):
    title: str = "New goal (KGI)"
    deadline: str = ""

class GoalUpdate(BaseModel):
    title: str | None = None
    deadline: str | None = None
    is_expanded: bool | None = None

class SubGoalUpdate(BaseModel):
    title: str | None = None
    progress: float | None = None
    is_expanded: bool | None = None

class TaskCreate(BaseModel):
    goal_id: str | None = None
    subgoal_id: str | None = None
    title: str | None = None
    estimate: int | None = Field(default=None, ge=0)

class TaskUpdate(BaseModel):
    title: str | None = None
    estimate: int | str | None = None    # raw form input, coerced by the store

class MovePayload(BaseModel):
    index: int
    direction: str = Field(..., pattern="^(up|down)$")

class CommitPayload(BaseModel):
    task_ids: list[str] = Field(default_factory=list)

class RatingPayload(BaseModel):
    quality: int = Field(default=3, ge=1, le=5)
    focus: int = Field(default=3, ge=1, le=5)
    fatigue: int = Field(default=3, ge=1, le=5)

class AdjustPayload(BaseModel):
    minutes: Literal[-5, -1, 1, 5]

class MemoCreate(BaseModel):
    text: str

class RoutineCreate(BaseModel):
    title: str
    timing: str = Field(default="night", pattern="^(morning|night)$")

class RoutineUpdate(BaseModel):
    title: str

class PhasePayload(BaseModel):
    phase: Phase
