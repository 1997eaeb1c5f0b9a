from jsonsmith.services.debounce_service import Debouncer


class _FakeHost:
    """Minimal stand-in for the tk `after` scheduling API."""

    def __init__(self):
        self.jobs = {}
        self.delays = []
        self._counter = 0

    def after(self, delay_ms, fn):
        self._counter += 1
        after_id = f"after#{self._counter}"
        self.jobs[after_id] = fn
        self.delays.append(delay_ms)
        return after_id

    def after_cancel(self, after_id):
        self.jobs.pop(after_id, None)

    def run_all(self):
        jobs, self.jobs = self.jobs, {}
        for fn in jobs.values():
            fn()


def test_only_latest_schedule_fires():
    host = _FakeHost()
    calls = []
    debouncer = Debouncer(host, 300, calls.append)
    debouncer.schedule("a")
    debouncer.schedule("b")
    debouncer.schedule("c")
    assert len(host.jobs) == 1
    assert debouncer.pending
    host.run_all()
    assert calls == ["c"]
    assert not debouncer.pending
    assert host.delays == [300, 300, 300]


def test_flush_runs_now_and_drops_pending():
    host = _FakeHost()
    calls = []
    debouncer = Debouncer(host, 300, calls.append)
    debouncer.schedule("late")
    debouncer.flush("now")
    host.run_all()
    assert calls == ["now"]


def test_cancel_without_pending_is_a_no_op():
    host = _FakeHost()
    debouncer = Debouncer(host, 10, lambda: None)
    debouncer.cancel()
    assert host.jobs == {}


def test_negative_delay_is_clamped():
    assert Debouncer(_FakeHost(), -5, lambda: None).delay_ms == 0


def test_failed_after_cancel_is_tolerated():
    class _BrokenCancelHost(_FakeHost):
        def after_cancel(self, after_id):
            raise ValueError("already gone")

    host = _BrokenCancelHost()
    calls = []
    debouncer = Debouncer(host, 5, calls.append)
    debouncer.schedule(1)
    debouncer.schedule(2)
    assert debouncer.pending
    host.jobs = {key: fn for key, fn in host.jobs.items() if key == "after#2"}
    host.run_all()
    assert calls == [2]
