"""Navigation helpers: names, Bresenham lines, messages, transforms, odometry smoothing and a simple action server."""

__version__ = "0.1.0"