import logging
import re

import pytest

from daybrief_app.logging_config import setup_logging
from daybrief_app.scheduler import start_scheduler, tick_clock


def test_tick_sets_clock(sync, view):
    tick_clock(sync)
    sync.flush(5)
    assert re.fullmatch(r"\d\d:\d\d:\d\d", sync.snapshot().clock_text)
    assert view.clock_text == sync.snapshot().clock_text


def test_scheduler_registers_clock_job(sync):
    scheduler = start_scheduler(sync, interval_seconds=3600)
    try:
        job = scheduler.get_job("clock")
        assert job is not None
        assert job.args == (sync,)
    finally:
        scheduler.shutdown(wait=False)


@pytest.fixture
def clean_loggers():
    yield
    for name in ("daybrief_app", "daybrief_engine"):
        lg = logging.getLogger(name)
        for h in list(lg.handlers):
            lg.removeHandler(h)
            h.close()
        lg.propagate = True


def test_setup_logging_writes_rotating_file(tmp_path, clean_loggers):
    logger = setup_logging(logging.DEBUG, log_dir=tmp_path)
    logging.getLogger("daybrief_engine.test").info("hello from engine")
    for h in logger.handlers:
        h.flush()
    assert "hello from engine" in (tmp_path / "app.log").read_text()


def test_repeated_setup_does_not_duplicate_lines(tmp_path, clean_loggers):
    setup_logging(logging.INFO, log_dir=tmp_path)
    logger = setup_logging(logging.INFO, log_dir=tmp_path)
    for name in ("daybrief_app", "daybrief_engine"):
        assert len(logging.getLogger(name).handlers) == 2

    logging.getLogger("daybrief_app.test").info("once only")
    for h in logger.handlers:
        h.flush()
    assert (tmp_path / "app.log").read_text().count("once only") == 1
