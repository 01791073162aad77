"""A single-goal action server that runs goals on a worker thread with preemption."""

from __future__ import annotations

import enum
import logging
import threading
import time
from collections.abc import Callable
from typing import Any, Protocol

__all__ = ["GoalResponse", "CancelResponse", "SimpleActionServer"]

_EMPTY_GOAL_ID = bytes(16)


class GoalResponse(enum.Enum):
    """Answer to a request for a new goal."""

    REJECT = 1
    ACCEPT_AND_EXECUTE = 2
    ACCEPT_AND_DEFER = 3


class CancelResponse(enum.Enum):
    """Answer to a request to cancel a goal."""

    REJECT = 1
    ACCEPT = 2


class _GoalHandle(Protocol):
    def is_active(self) -> bool: ...

    def is_canceling(self) -> bool: ...

    def abort(self, result: Any) -> None: ...

    def canceled(self, result: Any) -> None: ...

    def succeed(self, result: Any) -> None: ...

    def get_goal(self) -> Any: ...

    def get_goal_id(self) -> bytes: ...

    def publish_feedback(self, feedback: Any) -> None: ...


def _is_active(handle: _GoalHandle | None) -> bool:
    return handle is not None and handle.is_active()


class SimpleActionServer:
    """Run one goal at a time, keeping at most one newer goal pending.

    ``execute_callback`` does the work for the current goal and is expected to
    finish it with :meth:`succeeded_current` or one of the terminate methods.
    ``completion_callback`` is told whenever the server itself ends a goal.
    ``result_factory`` builds the empty result sent when goals are terminated.
    """

    def __init__(
        self,
        action_name: str,
        execute_callback: Callable[[], None],
        completion_callback: Callable[[], None] | None = None,
        server_timeout: float = 0.5,
        result_factory: Callable[[], Any] = dict,
        logger: logging.Logger | None = None,
    ) -> None:
        self.action_name = action_name
        self._execute_callback = execute_callback
        self._completion_callback = completion_callback
        self.server_timeout = server_timeout
        self._result_factory = result_factory
        self._logger = logger if logger is not None else logging.getLogger(__name__)

        self._lock = threading.RLock()
        self._server_active = False
        self._stop_execution = False
        self._preempt_requested = False
        self._current_handle: _GoalHandle | None = None
        self._pending_handle: _GoalHandle | None = None
        self._execution_thread: threading.Thread | None = None

    # -- logging -----------------------------------------------------------

    def _log(self, level: int, msg: str) -> None:
        self._logger.log(level, "[%s] [ActionServer] %s", self.action_name, msg)

    def _debug(self, msg: str) -> None:
        self._log(logging.DEBUG, msg)

    def _info(self, msg: str) -> None:
        self._log(logging.INFO, msg)

    def _warn(self, msg: str) -> None:
        self._log(logging.WARNING, msg)

    def _error(self, msg: str) -> None:
        self._log(logging.ERROR, msg)

    def _notify_completion(self) -> None:
        if self._completion_callback is not None:
            self._completion_callback()

    # -- goal handling -----------------------------------------------------

    def handle_goal(self, uuid: bytes, goal: Any) -> GoalResponse:
        """Accept every goal while the server is active, reject otherwise."""
        with self._lock:
            if not self._server_active:
                return GoalResponse.REJECT
            self._debug("Received request for goal acceptance")
            return GoalResponse.ACCEPT_AND_EXECUTE

    def handle_cancel(self, handle: _GoalHandle) -> CancelResponse:
        """Accept cancellation of active goals only."""
        with self._lock:
            if not handle.is_active():
                self._warn(
                    "Received request for goal cancellation,"
                    "but the handle is inactive, so reject the request"
                )
                return CancelResponse.REJECT
            self._debug("Received request for goal cancellation")
            return CancelResponse.ACCEPT

    def handle_accepted(self, handle: _GoalHandle) -> None:
        """Start executing ``handle`` or park it as the pending goal."""
        with self._lock:
            self._debug("Receiving a new goal")
            if _is_active(self._current_handle) or self.is_running():
                self._debug("An older goal is active, moving the new goal to a pending slot.")
                if _is_active(self._pending_handle):
                    self._debug(
                        "The pending slot is occupied."
                        " The previous pending goal will be terminated and replaced."
                    )
                    self._pending_handle = self._terminate(self._pending_handle)
                self._pending_handle = handle
                self._preempt_requested = True
                return

            if _is_active(self._pending_handle):
                self._error("Forgot to handle a preemption. Terminating the pending goal.")
                self._pending_handle = self._terminate(self._pending_handle)
                self._preempt_requested = False

            self._current_handle = handle
            self._debug("Executing goal asynchronously.")
            self._execution_thread = threading.Thread(target=self.work, daemon=True)
            self._execution_thread.start()

    def work(self) -> None:
        """Execute the current goal and any goals that become pending meanwhile."""
        while not self._stop_execution and _is_active(self._current_handle):
            self._debug("Executing the goal...")
            try:
                self._execute_callback()
            except Exception as ex:  # noqa: BLE001 - any failure ends the action
                self._logger.error(
                    'Action server failed while executing action callback: "%s"', ex
                )
                self.terminate_all()
                self._notify_completion()
                return

            self._debug("Blocking processing of new goal handles.")
            with self._lock:
                if self._stop_execution:
                    self._warn("Stopping the thread per request.")
                    self.terminate_all()
                    self._notify_completion()
                    break

                if _is_active(self._current_handle):
                    self._warn("Current goal was not completed successfully.")
                    self._current_handle = self._terminate(self._current_handle)
                    self._notify_completion()

                if _is_active(self._pending_handle):
                    self._debug("Executing a pending handle on the existing thread.")
                    self.accept_pending_goal()
                else:
                    self._debug("Done processing available goals.")
                    break
        self._debug("Worker thread done.")

    # -- lifecycle ---------------------------------------------------------

    def activate(self) -> None:
        """Start accepting goals."""
        with self._lock:
            self._server_active = True
            self._stop_execution = False

    def deactivate(self) -> None:
        """Stop accepting goals and wait for the worker thread to finish."""
        self._debug("Deactivating...")
        with self._lock:
            self._server_active = False
            self._stop_execution = True

        thread = self._execution_thread
        if thread is None:
            return

        if self.is_running():
            self._warn(
                "Requested to deactivate server but goal is still executing."
                " Should check if action server is running before deactivating."
            )

        start = time.monotonic()
        while True:
            thread.join(0.1)
            if not thread.is_alive():
                break
            self._info("Waiting for async process to finish.")
            if time.monotonic() - start >= self.server_timeout:
                self.terminate_all()
                self._notify_completion()
                self._error("Action callback is still running and missed deadline to stop")

        self._debug("Deactivation completed.")

    def is_running(self) -> bool:
        """Whether the worker thread is still executing goals."""
        thread = self._execution_thread
        return thread is not None and thread.is_alive()

    def is_server_active(self) -> bool:
        """Whether the server accepts new goals."""
        with self._lock:
            return self._server_active

    def is_preempt_requested(self) -> bool:
        """Whether a newer goal waits in the pending slot."""
        with self._lock:
            return self._preempt_requested

    # -- goals -------------------------------------------------------------

    def accept_pending_goal(self) -> Any:
        """Make the pending goal current and return it, or None if there is none."""
        with self._lock:
            pending = self._pending_handle
            if pending is None or not pending.is_active():
                self._error("Attempting to get pending goal when not available")
                return None

            if _is_active(self._current_handle) and self._current_handle is not pending:
                self._debug("Cancelling the previous goal")
                self._current_handle.abort(self._result_factory())

            self._current_handle = pending
            self._pending_handle = None
            self._preempt_requested = False
            self._debug("Preempted goal")
            return pending.get_goal()

    def terminate_pending_goal(self) -> None:
        """End the pending goal, if there is one."""
        with self._lock:
            pending = self._pending_handle
            if pending is None or not pending.is_active():
                self._error("Attempting to terminate pending goal when not available")
                return
            self._pending_handle = self._terminate(pending)
            self._preempt_requested = False
            self._debug("Pending goal terminated")

    def get_current_goal(self) -> Any:
        """The goal being executed, or None when there is no active goal."""
        with self._lock:
            if not _is_active(self._current_handle):
                self._error("A goal is not available or has reached a final state")
                return None
            return self._current_handle.get_goal()

    def get_current_goal_id(self) -> bytes:
        """The id of the goal being executed, or sixteen zero bytes without one."""
        with self._lock:
            if not _is_active(self._current_handle):
                self._error("A goal is not available or has reached a final state")
                return _EMPTY_GOAL_ID
            return self._current_handle.get_goal_id()

    def get_pending_goal(self) -> Any:
        """The pending goal, or None when there is none."""
        with self._lock:
            pending = self._pending_handle
            if pending is None or not pending.is_active():
                self._error("Attempting to get pending goal when not available")
                return None
            return pending.get_goal()

    def is_cancel_requested(self) -> bool:
        """Whether the client asked to cancel the pending goal, or else the current one."""
        with self._lock:
            if self._current_handle is None:
                self._error("Checking for cancel but current goal is not available")
                return False
            if self._pending_handle is not None:
                return self._pending_handle.is_canceling()
            return self._current_handle.is_canceling()

    def terminate_all(self, result: Any = None) -> None:
        """End both the current and the pending goal."""
        with self._lock:
            if result is None:
                result = self._result_factory()
            self._current_handle = self._terminate(self._current_handle, result)
            self._pending_handle = self._terminate(self._pending_handle, result)
            self._preempt_requested = False

    def terminate_current(self, result: Any = None) -> None:
        """End the current goal."""
        with self._lock:
            self._current_handle = self._terminate(self._current_handle, result)

    def succeeded_current(self, result: Any = None) -> None:
        """Report success for the current goal."""
        with self._lock:
            if _is_active(self._current_handle):
                self._debug("Setting succeed on current goal.")
                if result is None:
                    result = self._result_factory()
                self._current_handle.succeed(result)
                self._current_handle = None

    def publish_feedback(self, feedback: Any) -> None:
        """Send ``feedback`` to the client of the current goal."""
        handle = self._current_handle
        if not _is_active(handle):
            self._error("Trying to publish feedback when the current goal handle is not active")
            return
        handle.publish_feedback(feedback)

    def _terminate(
        self, handle: _GoalHandle | None, result: Any = None
    ) -> _GoalHandle | None:
        """Cancel or abort ``handle``; return what the slot should hold afterwards."""
        with self._lock:
            if not _is_active(handle):
                return handle
            if result is None:
                result = self._result_factory()
            if handle.is_canceling():
                self._info("Client requested to cancel the goal. Cancelling.")
                handle.canceled(result)
            else:
                self._warn("Aborting handle.")
                handle.abort(result)
            return None