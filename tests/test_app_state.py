import threading

from daybrief_app.app_state import AppState, Page, Synchronizer
from daybrief_app.view_model import DashboardView


class RecordingView(DashboardView):
    def __init__(self):
        super().__init__()
        self.seen = []
        self.commits = 0

    def commit(self):
        self.commits += 1


def test_presentations_run_in_submission_order():
    view = RecordingView()
    sync = Synchronizer(view=view)
    try:
        for i in range(200):
            sync.present(lambda v, i=i: v.seen.append(i))
        assert sync.flush(5)
        assert view.seen == list(range(200))
        assert view.commits == 200
    finally:
        sync.close()


def test_presentations_from_many_threads_each_run_once():
    view = RecordingView()
    sync = Synchronizer(view=view)

    def producer(t):
        for n in range(50):
            sync.present(lambda v, item=(t, n): v.seen.append(item))

    threads = [threading.Thread(target=producer, args=(t,)) for t in range(4)]
    try:
        for th in threads:
            th.start()
        for th in threads:
            th.join()
        sync.flush(5)
        assert len(view.seen) == 200
        for t in range(4):
            assert [n for (tt, n) in view.seen if tt == t] == list(range(50))
    finally:
        sync.close()


def test_dead_view_drops_silently():
    dropped = []
    sync = Synchronizer(view=RecordingView())
    try:
        assert not sync.view_alive()
        sync.present(lambda v: 1 / 0, on_drop=lambda: dropped.append("a"))
        sync.present(lambda v: None)
        assert sync.flush(5)
        assert dropped == ["a"]
    finally:
        sync.close()


def test_failing_callback_does_not_stop_queue():
    view = RecordingView()
    sync = Synchronizer(view=view)
    try:
        sync.present(lambda v: 1 / 0)
        sync.present(lambda v: v.seen.append("after"))
        sync.flush(5)
        assert view.seen == ["after"]
    finally:
        sync.close()


def test_present_after_close_is_dropped():
    view = RecordingView()
    sync = Synchronizer(view=view)
    sync.close()
    dropped = []
    sync.present(lambda v: v.seen.append(1), on_drop=lambda: dropped.append(True))
    assert view.seen == []
    assert dropped == [True]


def test_mutations_are_serialized():
    sync = Synchronizer(AppState(clock_text="0"))

    def bump(state):
        state.clock_text = str(int(state.clock_text) + 1)

    def worker():
        for _ in range(500):
            sync.mutate(bump)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    try:
        for th in threads:
            th.start()
        for th in threads:
            th.join()
        assert sync.snapshot().clock_text == "4000"
    finally:
        sync.close()


def test_snapshot_is_a_copy_and_guest_is_default():
    sync = Synchronizer()
    try:
        snap = sync.snapshot()
        snap.current_page = Page.NEWS
        assert sync.snapshot().current_page == Page.WEATHER
        assert sync.current_user() == "guest"
        sync.set_current_user("alice")
        assert sync.current_user() == "alice"
    finally:
        sync.close()


def test_setters_reach_state_and_view():
    view = RecordingView()
    sync = Synchronizer(view=view)
    try:
        view.login_error = "Invalid PIN"
        sync.set_page(Page.SETTINGS)
        sync.set_clock("12:00:01")
        sync.set_login(True)
        sync.flush(5)
        state = sync.snapshot()
        assert (state.current_page, state.clock_text, state.is_logged_in) == (Page.SETTINGS, "12:00:01", True)
        assert (view.current_page, view.clock_text, view.is_logged_in) == (Page.SETTINGS, "12:00:01", True)
        assert view.login_error == ""
    finally:
        sync.close()


def test_close_racing_presenters_settles_every_item():
    view = RecordingView()
    sync = Synchronizer(view=view)
    dropped = []
    started = threading.Barrier(5)

    def producer():
        started.wait()
        for n in range(500):
            sync.present(lambda v, n=n: v.seen.append(n), on_drop=lambda: dropped.append(1))

    threads = [threading.Thread(target=producer) for _ in range(4)]
    for th in threads:
        th.start()
    started.wait()
    sync.close(timeout=None)
    for th in threads:
        th.join()

    assert len(view.seen) + len(dropped) == 2000
    assert sync.flush(timeout=None) is True
