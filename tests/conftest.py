from concurrent.futures import Future

import httpx
import pytest

from daybrief_app.app_state import Synchronizer
from daybrief_app.runtime import Runtime
from daybrief_app.view_model import DashboardView
from daybrief_engine.storage.freshness import FreshnessStore


@pytest.fixture
def store(tmp_path):
    return FreshnessStore(tmp_path)


@pytest.fixture
def runtime():
    rt = Runtime()
    yield rt
    rt.shutdown()


@pytest.fixture
def view():
    return DashboardView()


@pytest.fixture
def sync(view):
    s = Synchronizer(view=view)
    yield s
    s.close()


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class FakeRefresher:
    def __init__(self):
        self.calls = 0

    def refresh(self) -> Future:
        self.calls += 1
        f: Future = Future()
        f.set_result(True)
        return f
