"""
PDCA phase controller.

Four states, freely navigable; the only programmatic transition is
``committed`` (tasks committed to today -> do). Phases carry no data of
their own, so entering one never resets anything.
"""
from transitions import Machine

from ..schemas import Phase

STATES = [p.value for p in Phase]

TRANSITIONS = [
    {"trigger": "go_plan_strategy", "source": "*", "dest": "plan-strategy"},
    {"trigger": "go_plan_queue",    "source": "*", "dest": "plan-queue"},
    {"trigger": "go_do",            "source": "*", "dest": "do"},
    {"trigger": "go_check",         "source": "*", "dest": "check"},
    {"trigger": "committed",        "source": "*", "dest": "do"},
]

NAVIGATION = {
    Phase.PLAN_STRATEGY: "go_plan_strategy",
    Phase.PLAN_QUEUE: "go_plan_queue",
    Phase.DO: "go_do",
    Phase.CHECK: "go_check",
}


class PhaseController:
    def __init__(self, initial: Phase | str = Phase.PLAN_STRATEGY):
        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial=Phase(initial).value,
            auto_transitions=False,
            send_event=False,
        )

    @property
    def current(self) -> Phase:
        return Phase(self.state)

    def navigate(self, phase: Phase | str) -> Phase:
        self.trigger(NAVIGATION[Phase(phase)])
        return self.current
