import threading

from navutil.node_thread import NodeThread


class _FakeExecutor:
    def __init__(self):
        self.events = []
        self.spinning = threading.Event()
        self._cancelled = threading.Event()
        self.cancel_count = 0

    def add_node(self, node):
        self.events.append(("add", node))

    def remove_node(self, node):
        self.events.append(("remove", node))

    def spin(self):
        self.events.append(("spin", None))
        self.spinning.set()
        self._cancelled.wait(timeout=5)

    def cancel(self):
        self.cancel_count += 1
        self._cancelled.set()


def test_spins_node_and_removes_after_close():
    executor = _FakeExecutor()
    node = object()
    thread = NodeThread(executor, node)
    assert executor.spinning.wait(timeout=5)
    assert thread.alive
    thread.close()
    assert not thread.alive
    assert executor.events == [("add", node), ("spin", None), ("remove", node)]


def test_executor_only_spins():
    executor = _FakeExecutor()
    thread = NodeThread(executor)
    assert executor.spinning.wait(timeout=5)
    thread.close()
    assert executor.events == [("spin", None)]
    assert executor.cancel_count == 1


def test_close_twice_cancels_once():
    executor = _FakeExecutor()
    thread = NodeThread(executor)
    thread.close()
    thread.close()
    assert executor.cancel_count == 1
    assert not thread.alive


def test_context_manager_closes():
    executor = _FakeExecutor()
    node = "planner"
    with NodeThread(executor, node) as thread:
        assert executor.spinning.wait(timeout=5)
        assert thread.alive
    assert not thread.alive
    assert executor.events[-1] == ("remove", node)


def test_close_before_spin_starts_still_finishes():
    executor = _FakeExecutor()
    thread = NodeThread(executor, "n")
    thread.close()
    assert not thread.alive
    assert ("remove", "n") in executor.events