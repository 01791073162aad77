"""Run an executor's spin loop on a background thread."""

from __future__ import annotations

import threading

__all__ = ["NodeThread"]


class NodeThread:
    """Spin ``executor`` on a dedicated thread until closed.

    ``executor`` must provide ``spin()`` and ``cancel()``. When ``node`` is
    given, the thread adds it with ``executor.add_node(node)`` before spinning
    and removes it with ``executor.remove_node(node)`` afterwards.
    """

    def __init__(self, executor, node=None) -> None:
        self.executor = executor
        self.node = node
        self._closed = False
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        if self.node is None:
            self.executor.spin()
            return
        self.executor.add_node(self.node)
        try:
            self.executor.spin()
        finally:
            self.executor.remove_node(self.node)

    def close(self) -> None:
        """Cancel the executor and wait for the thread to finish."""
        if self._closed:
            return
        self._closed = True
        self.executor.cancel()
        self._thread.join()

    @property
    def alive(self) -> bool:
        """Whether the spinning thread is still running."""
        return self._thread.is_alive()

    def __enter__(self) -> NodeThread:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()