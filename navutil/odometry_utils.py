"""Moving-average smoothing of odometry velocities."""

from __future__ import annotations

import copy
import logging
import threading
from collections import deque

from navutil.messages import Odometry, Twist, TwistStamped

__all__ = ["OdomSmoother"]

_log = logging.getLogger(__name__)


class OdomSmoother:
    """Average the twists of odometry messages received within a time window.

    When ``node`` is given, the smoother subscribes itself through
    ``node.create_subscription(Odometry, odom_topic, callback)``; otherwise
    messages are fed in by calling :meth:`odom_callback` directly.
    """

    def __init__(self, node=None, filter_duration: float = 0.3, odom_topic: str = "odom") -> None:
        self._history_duration_ns = round(filter_duration * 1_000_000_000)
        self._history: deque[Odometry] = deque()
        self._cumulate = Twist()
        self._smoothed = TwistStamped()
        self._lock = threading.Lock()
        self.odom_topic = odom_topic
        self.subscription = None
        if node is not None:
            self.subscription = node.create_subscription(
                Odometry, odom_topic, self.odom_callback
            )

    def odom_callback(self, msg: Odometry) -> None:
        """Add an odometry message and refresh the smoothed velocity."""
        with self._lock:
            if self._history:
                current_ns = msg.header.stamp.nanoseconds()
                while (
                    self._history
                    and current_ns - self._history[0].header.stamp.nanoseconds()
                    > self._history_duration_ns
                ):
                    oldest = self._history.popleft()
                    self._cumulate = self._cumulate - oldest.twist
            self._history.append(copy.deepcopy(msg))
            self._update_state()

    def _update_state(self) -> None:
        latest = self._history[-1]
        self._cumulate = self._cumulate + latest.twist
        self._smoothed = TwistStamped(
            header=copy.deepcopy(latest.header),
            twist=self._cumulate / len(self._history),
        )

    @property
    def twist(self) -> Twist:
        """The smoothed twist."""
        with self._lock:
            return copy.deepcopy(self._smoothed.twist)

    @property
    def twist_stamped(self) -> TwistStamped:
        """The smoothed twist with the header of the latest message."""
        with self._lock:
            return copy.deepcopy(self._smoothed)

    @property
    def raw_twist(self) -> Twist:
        """The twist of the latest message, unsmoothed."""
        with self._lock:
            if not self._history:
                _log.error(
                    "OdomSmoother has not received any data yet, returning empty Twist"
                )
                return Twist()
            return copy.deepcopy(self._history[-1].twist)

    @property
    def raw_twist_stamped(self) -> TwistStamped:
        """The header and twist of the latest message, unsmoothed."""
        with self._lock:
            if not self._history:
                _log.error(
                    "OdomSmoother has not received any data yet, returning empty Twist"
                )
                return TwistStamped()
            latest = self._history[-1]
            return TwistStamped(
                header=copy.deepcopy(latest.header), twist=copy.deepcopy(latest.twist)
            )