# navutil

Small building blocks for robot navigation software. Pure Python, no
dependencies outside the standard library.

## Modules

- `navutil.string_utils`
  - `split(tokenstring, delimiter)`: splits on a single-character delimiter and
    keeps empty tokens (`split("", ":")` is `[""]`, `split("foo:bar:", ":")` is
    `["foo", "bar", ""]`). A delimiter of any other length raises `ValueError`.
  - `strip_leading_slash(value)`: removes one leading `/`.
- `navutil.node_utils`
  - `sanitize_node_name(name)`: replaces every character that is not an ASCII
    letter or digit with `_`.
  - `add_namespaces(top_ns, sub_ns)`: joins two namespaces; when `top_ns` ends
    in `/` the result is made absolute.
  - `time_to_string(length)`: the last `length` digits of the current time in
    nanoseconds, zero-padded on the left if needed.
  - `generate_internal_node_name(prefix)`: `sanitize_node_name(prefix)` followed
    by `_` and eight clock digits.
- `navutil.line_iterator`
  - `LineIterator(x0, y0, x1, y1)`: walks the grid cells from `(x0, y0)` to
    `(x1, y1)` using Bresenham's algorithm. Use `is_valid()`, `advance()` and
    the `x`/`y` attributes, or iterate it to get `(x, y)` pairs.
- `navutil.messages`
  - Dataclasses `Time`, `Header`, `Vector3`, `Twist`, `TwistStamped`,
    `Odometry`, `Point`, `Quaternion`, `Pose`, `PoseStamped`.
  - `Time` is immutable and non-negative: `Time.from_seconds`,
    `Time.from_nanoseconds`, `nanoseconds()`, `seconds()`; adding a number of
    seconds gives a new `Time`, subtracting two `Time`s gives seconds.
  - `Vector3` and `Twist` support `+`, `-` and division by a number.
  - Occupancy grid constants `OCC_GRID_UNKNOWN` (-1), `OCC_GRID_FREE` (0) and
    `OCC_GRID_OCCUPIED` (100).
- `navutil.robot_utils`
  - `validate_twist(msg)`: `True` when every component is finite.
  - `transform_pose_in_target_frame(input_pose, tf_buffer, target_frame, transform_timeout)`
    and `get_current_pose(tf_buffer, global_frame, robot_frame, transform_timeout, stamp)`:
    return a `PoseStamped`, or `None` (with an error logged) when the lookup fails.
  - `get_transform(...)` and `get_transform_at_times(...)`: return a `Transform`,
    or `None` on failure; `get_transform` returns `Transform.identity()` when the
    two frames are the same.
  - Exceptions `TransformException` and its subclasses `LookupException`,
    `ConnectivityException`, `ExtrapolationException`, `TimeoutException`.
- `navutil.odometry_utils`
  - `OdomSmoother(node, filter_duration, odom_topic)`: moving average of the
    twists of odometry messages within `filter_duration` seconds of the latest.
    Feed it with `odom_callback(msg)`, or pass a `node` with
    `create_subscription(msg_type, topic, callback)` to subscribe it. Read the
    properties `twist`, `twist_stamped`, `raw_twist` and `raw_twist_stamped`.
- `navutil.node_thread`
  - `NodeThread(executor, node=None)`: calls `executor.spin()` on a background
    thread (adding and removing `node` around it when given); `close()` calls
    `executor.cancel()` and joins. Usable as a context manager.
- `navutil.simple_action_server`
  - `SimpleActionServer(action_name, execute_callback, completion_callback, server_timeout, result_factory, logger)`:
    runs one goal at a time on a worker thread, keeps at most one newer goal
    pending for preemption, and handles cancellation. `GoalResponse` and
    `CancelResponse` are the answers from `handle_goal` and `handle_cancel`.

## Examples

```python
from navutil.string_utils import split
from navutil.line_iterator import LineIterator

split("foo::bar", ":")   # ['foo', '', 'bar']

list(LineIterator(0, 0, 3, 1))
# [(0, 0), (1, 0), (2, 1), (3, 1)]
```

Smoothing odometry:

```python
from navutil.messages import Odometry, Time
from navutil.odometry_utils import OdomSmoother

smoother = OdomSmoother(None, 0.3, "odom")
msg = Odometry()
msg.header.stamp = Time.from_seconds(0.0)
msg.twist.linear.x = 1.0
smoother.odom_callback(msg)
smoother.twist.linear.x   # 1.0
```

## What this package does not do

It has no messaging layer, executor, transform tree or action transport of its
own. `NodeThread` needs an executor object, `OdomSmoother` optionally a node
object, the `robot_utils` lookups a transform buffer with `transform`,
`lookup_transform` and `lookup_transform_full`, and `SimpleActionServer` goal
handle objects — all supplied by the caller. There is no costmap, no lifecycle
node and no command-line tool.

## Tests

```
pip install -e .[test]
pytest
```