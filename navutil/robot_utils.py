"""Robot pose and transform helpers built on a transform buffer."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Protocol

from navutil.messages import Header, Pose, PoseStamped, Quaternion, Time, Twist, Vector3

__all__ = [
    "TransformException",
    "LookupException",
    "ConnectivityException",
    "ExtrapolationException",
    "TimeoutException",
    "Transform",
    "validate_twist",
    "get_current_pose",
    "transform_pose_in_target_frame",
    "get_transform",
    "get_transform_at_times",
]

_log = logging.getLogger(__name__)


class TransformException(Exception):
    """Base error for failed transform lookups."""


class LookupException(TransformException):
    """A frame needed for the transform is unknown."""


class ConnectivityException(TransformException):
    """The two frames are not connected in the transform tree."""


class ExtrapolationException(TransformException):
    """The requested time lies outside the buffered data."""


class TimeoutException(TransformException):
    """The transform did not become available in time."""


@dataclass
class Transform:
    """A rigid transform: a translation followed by a rotation."""

    translation: Vector3 = field(default_factory=Vector3)
    rotation: Quaternion = field(default_factory=Quaternion)

    @classmethod
    def identity(cls) -> Transform:
        """The transform that leaves every pose unchanged."""
        return cls(Vector3(0.0, 0.0, 0.0), Quaternion(0.0, 0.0, 0.0, 1.0))


class _TransformBuffer(Protocol):
    def transform(self, pose: PoseStamped, target_frame: str, timeout: float) -> PoseStamped: ...

    def lookup_transform(
        self, target_frame: str, source_frame: str, time: Time, timeout: float
    ) -> Transform: ...

    def lookup_transform_full(
        self,
        target_frame: str,
        target_time: Time,
        source_frame: str,
        source_time: Time,
        fixed_frame: str,
        timeout: float,
    ) -> Transform: ...


def validate_twist(msg: Twist) -> bool:
    """Whether every component of ``msg`` is a finite number."""
    values = (
        msg.linear.x, msg.linear.y, msg.linear.z,
        msg.angular.x, msg.angular.y, msg.angular.z,
    )
    return all(math.isfinite(value) for value in values)


def transform_pose_in_target_frame(
    input_pose: PoseStamped,
    tf_buffer: _TransformBuffer,
    target_frame: str,
    transform_timeout: float = 0.1,
) -> PoseStamped | None:
    """Express ``input_pose`` in ``target_frame``; log and return None on failure."""
    try:
        return tf_buffer.transform(input_pose, target_frame, transform_timeout)
    except LookupException as ex:
        _log.error("No Transform available Error looking up target frame: %s", ex)
    except ConnectivityException as ex:
        _log.error("Connectivity Error looking up target frame: %s", ex)
    except ExtrapolationException as ex:
        _log.error("Extrapolation Error looking up target frame: %s", ex)
    except TimeoutException:
        _log.error("Transform timeout with tolerance: %.4f", transform_timeout)
    except TransformException:
        _log.error(
            "Failed to transform from %s to %s", input_pose.header.frame_id, target_frame
        )
    return None


def get_current_pose(
    tf_buffer: _TransformBuffer,
    global_frame: str = "map",
    robot_frame: str = "base_link",
    transform_timeout: float = 0.1,
    stamp: Time | None = None,
) -> PoseStamped | None:
    """Return the robot's pose in ``global_frame``, or None if it cannot be found."""
    robot_pose = PoseStamped(
        header=Header(stamp=stamp if stamp is not None else Time(), frame_id=robot_frame),
        pose=Pose(),
    )
    return transform_pose_in_target_frame(
        robot_pose, tf_buffer, global_frame, transform_timeout
    )


def get_transform(
    source_frame_id: str,
    target_frame_id: str,
    transform_tolerance: float,
    tf_buffer: _TransformBuffer,
) -> Transform | None:
    """Latest transform from source to target frame; None if the lookup fails."""
    if source_frame_id == target_frame_id:
        return Transform.identity()
    try:
        return tf_buffer.lookup_transform(
            target_frame_id, source_frame_id, Time(), transform_tolerance
        )
    except TransformException as ex:
        _log.error(
            'Failed to get "%s"->"%s" frame transform: %s',
            source_frame_id, target_frame_id, ex,
        )
        return None


def get_transform_at_times(
    source_frame_id: str,
    source_time: Time,
    target_frame_id: str,
    target_time: Time,
    fixed_frame_id: str,
    transform_tolerance: float,
    tf_buffer: _TransformBuffer,
) -> Transform | None:
    """Transform from source at ``source_time`` to target at ``target_time``.

    ``fixed_frame_id`` is the frame assumed constant over time. Returns None
    if the lookup fails.
    """
    try:
        return tf_buffer.lookup_transform_full(
            target_frame_id, target_time,
            source_frame_id, source_time,
            fixed_frame_id, transform_tolerance,
        )
    except TransformException as ex:
        _log.error(
            'Failed to get "%s"->"%s" frame transform: %s',
            source_frame_id, target_frame_id, ex,
        )
        return None