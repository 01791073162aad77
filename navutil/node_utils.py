"""Helpers for building node names and namespaces."""

from __future__ import annotations

import re
import time

__all__ = [
    "sanitize_node_name",
    "add_namespaces",
    "time_to_string",
    "generate_internal_node_name",
]

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def sanitize_node_name(potential_node_name: str) -> str:
    """Replace every character that is not an ASCII letter or digit with ``_``."""
    return _NON_ALNUM.sub("_", potential_node_name)


def add_namespaces(top_ns: str, sub_ns: str) -> str:
    """Join two namespaces, making the result absolute when ``top_ns`` ends in ``/``."""
    if top_ns.endswith("/"):
        if top_ns.startswith("/"):
            return top_ns + sub_ns
        return "/" + top_ns + sub_ns
    return top_ns + "/" + sub_ns


def time_to_string(length: int) -> str:
    """Return the last ``length`` digits of the current time in nanoseconds.

    When the time has fewer digits than ``length`` it is left-padded with zeros.
    """
    if length < 0:
        raise ValueError("length must not be negative")
    digits = str(time.time_ns()).zfill(length)
    return digits[len(digits) - length:]


def generate_internal_node_name(prefix: str = "") -> str:
    """Build a unique-ish node name from ``prefix`` and the clock."""
    return f"{sanitize_node_name(prefix)}_{time_to_string(8)}"