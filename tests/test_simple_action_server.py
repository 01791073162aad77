import threading
import time

import pytest

from navutil.simple_action_server import CancelResponse, GoalResponse, SimpleActionServer


class FakeHandle:
    def __init__(self, goal, goal_id=b"\x01" * 16):
        self.goal = goal
        self.goal_id = goal_id
        self.status = "executing"
        self.canceling = False
        self.result = None
        self.feedback = []

    def is_active(self):
        return self.status == "executing"

    def is_canceling(self):
        return self.canceling and self.is_active()

    def abort(self, result):
        self.status = "aborted"
        self.result = result

    def canceled(self, result):
        self.status = "canceled"
        self.result = result

    def succeed(self, result):
        self.status = "succeeded"
        self.result = result

    def get_goal(self):
        return self.goal

    def get_goal_id(self):
        return self.goal_id

    def publish_feedback(self, feedback):
        self.feedback.append(feedback)


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def make_server(execute, completions=None, **kwargs):
    def on_complete():
        if completions is not None:
            completions.append(True)

    server = SimpleActionServer("test_action", execute, on_complete, **kwargs)
    server.activate()
    return server


def test_handle_goal_depends_on_activation():
    server = SimpleActionServer("test_action", lambda: None)
    assert server.handle_goal(b"", "goal") is GoalResponse.REJECT
    assert not server.is_server_active()
    server.activate()
    assert server.handle_goal(b"", "goal") is GoalResponse.ACCEPT_AND_EXECUTE
    server.deactivate()
    assert server.handle_goal(b"", "goal") is GoalResponse.REJECT


def test_handle_cancel():
    server = make_server(lambda: None)
    handle = FakeHandle("goal")
    assert server.handle_cancel(handle) is CancelResponse.ACCEPT
    handle.status = "succeeded"
    assert server.handle_cancel(handle) is CancelResponse.REJECT


def test_goal_succeeds():
    server = None

    def execute():
        server.succeeded_current({"done": True})

    server = make_server(execute)
    handle = FakeHandle("goal")
    server.handle_accepted(handle)
    assert wait_for(lambda: not server.is_running())
    assert handle.status == "succeeded"
    assert handle.result == {"done": True}


def test_unfinished_goal_is_aborted_with_empty_result():
    completions = []
    server = make_server(lambda: None, completions)
    handle = FakeHandle("goal")
    server.handle_accepted(handle)
    assert wait_for(lambda: not server.is_running())
    assert handle.status == "aborted"
    assert handle.result == {}
    assert completions == [True]


def test_exception_in_callback_terminates_goal():
    completions = []

    def execute():
        raise RuntimeError("boom")

    server = make_server(execute, completions)
    handle = FakeHandle("goal")
    server.handle_accepted(handle)
    assert wait_for(lambda: not server.is_running())
    assert handle.status == "aborted"
    assert completions == [True]


def test_pending_goal_runs_after_current():
    release = threading.Event()
    seen = []
    server = None

    def execute():
        goal = server.get_current_goal()
        seen.append(goal)
        if goal == "first":
            release.wait(2)
        else:
            server.succeeded_current()

    server = make_server(execute)
    first, second = FakeHandle("first"), FakeHandle("second")
    server.handle_accepted(first)
    assert wait_for(lambda: seen == ["first"])
    server.handle_accepted(second)
    assert server.is_preempt_requested()
    assert server.get_pending_goal() == "second"
    release.set()
    assert wait_for(lambda: not server.is_running())
    assert seen == ["first", "second"]
    assert first.status == "aborted"
    assert second.status == "succeeded"
    assert not server.is_preempt_requested()


def test_new_goal_replaces_occupied_pending_slot():
    release = threading.Event()
    server = make_server(lambda: release.wait(2))
    first, second, third = FakeHandle("first"), FakeHandle("second"), FakeHandle("third")
    server.handle_accepted(first)
    server.handle_accepted(second)
    server.handle_accepted(third)
    assert second.status == "aborted"
    assert server.get_pending_goal() == "third"
    server.terminate_pending_goal()
    assert third.status == "aborted"
    assert not server.is_preempt_requested()
    assert server.get_pending_goal() is None
    release.set()
    assert wait_for(lambda: not server.is_running())


def test_accept_pending_goal_aborts_current():
    release = threading.Event()
    server = make_server(lambda: release.wait(2))
    first, second = FakeHandle("first"), FakeHandle("second")
    server.handle_accepted(first)
    server.handle_accepted(second)
    assert server.accept_pending_goal() == "second"
    assert first.status == "aborted"
    assert server.get_current_goal() == "second"
    assert server.accept_pending_goal() is None
    server.terminate_all()
    release.set()
    assert wait_for(lambda: not server.is_running())
    assert second.status == "aborted"


def test_canceling_goal_is_reported_canceled():
    release = threading.Event()
    server = make_server(lambda: release.wait(2))
    handle = FakeHandle("goal")
    server.handle_accepted(handle)
    handle.canceling = True
    assert server.is_cancel_requested()
    server.terminate_current("partial")
    assert handle.status == "canceled"
    assert handle.result == "partial"
    release.set()
    assert wait_for(lambda: not server.is_running())


def test_queries_without_goal():
    server = make_server(lambda: None)
    assert server.is_cancel_requested() is False
    assert server.get_current_goal() is None
    assert server.get_current_goal_id() == bytes(16)
    assert server.get_pending_goal() is None
    assert server.accept_pending_goal() is None
    assert not server.is_running()


def test_feedback_and_goal_id_reach_current_handle():
    release = threading.Event()
    server = make_server(lambda: release.wait(2))
    handle = FakeHandle("goal", goal_id=b"\x07" * 16)
    server.handle_accepted(handle)
    server.publish_feedback("halfway")
    assert handle.feedback == ["halfway"]
    assert server.get_current_goal_id() == b"\x07" * 16
    server.succeeded_current()
    server.publish_feedback("late")
    assert handle.feedback == ["halfway"]
    assert handle.status == "succeeded"
    release.set()
    assert wait_for(lambda: not server.is_running())


def test_deactivate_past_deadline_terminates_goal():
    completions = []
    handle = FakeHandle("goal")

    def execute():
        while handle.is_active():
            time.sleep(0.01)

    server = make_server(execute, completions, server_timeout=0.05)
    server.handle_accepted(handle)
    assert wait_for(server.is_running)
    server.deactivate()
    assert handle.status == "aborted"
    assert not server.is_running()
    assert not server.is_server_active()
    assert len(completions) >= 1


@pytest.mark.parametrize("factory, expected", [(dict, {}), (list, [])])
def test_result_factory_used_for_termination(factory, expected):
    release = threading.Event()
    server = make_server(lambda: release.wait(2), result_factory=factory)
    handle = FakeHandle("goal")
    server.handle_accepted(handle)
    server.terminate_all()
    assert handle.status == "aborted"
    assert handle.result == expected
    release.set()
    assert wait_for(lambda: not server.is_running())