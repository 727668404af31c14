import logging
import pytz
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler

from .config import settings

logger = logging.getLogger(__name__)

_tz = pytz.timezone(settings.timezone)
scheduler = BackgroundScheduler(timezone=_tz)


def start_scheduler():
    # Avoid a second start if the reloader boots the app twice
    if not scheduler.running:
        scheduler.start()

def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)


class CountdownTicker:
    """
    The repeating one-second tick behind the execution timer.

    Single owner, single job: ``start`` is idempotent and ``cancel`` must be
    called on every exit from the running state so no orphaned tick source
    survives.
    """

    def __init__(self, callback, sched: BackgroundScheduler | None = None, seconds: int | None = None):
        self.callback = callback
        self.scheduler = sched or scheduler
        self.seconds = seconds or settings.tick_seconds
        self.job = None

    @property
    def active(self) -> bool:
        return self.job is not None

    def start(self):
        if self.job is not None:
            return
        self.job = self.scheduler.add_job(
            self.callback, "interval", seconds=self.seconds,
            max_instances=1, coalesce=True,
        )
        logger.debug("[jobs] countdown tick started (%s)", self.job.id)

    def cancel(self):
        if self.job is None:
            return
        try:
            self.scheduler.remove_job(self.job.id)
        except JobLookupError:
            pass  # already gone with a scheduler shutdown
        logger.debug("[jobs] countdown tick cancelled (%s)", self.job.id)
        self.job = None
