import logging
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler

from daybrief_app.app_state import Synchronizer
from daybrief_engine.config import settings

logger = logging.getLogger(__name__)

CLOCK_FORMAT = "%H:%M:%S"


def tick_clock(sync: Synchronizer) -> None:
    sync.set_clock(datetime.now().strftime(CLOCK_FORMAT))


def start_scheduler(sync: Synchronizer, interval_seconds: int | None = None) -> BackgroundScheduler:
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        tick_clock,
        "interval",
        seconds=interval_seconds or settings.clock_interval_seconds,
        args=[sync],
        id="clock",
        coalesce=True,
        max_instances=1,
    )
    scheduler.start()
    logger.info("Scheduler started: clock every %ss", interval_seconds or settings.clock_interval_seconds)
    return scheduler
