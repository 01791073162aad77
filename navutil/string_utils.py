"""Small string helpers for frame and topic names."""

from __future__ import annotations

__all__ = ["strip_leading_slash", "split"]


def strip_leading_slash(value: str) -> str:
    """Return ``value`` without a single leading ``/``, if it has one."""
    return value[1:] if value.startswith("/") else value


def split(tokenstring: str, delimiter: str) -> list[str]:
    """Split ``tokenstring`` on every occurrence of ``delimiter``.

    Empty tokens are kept, so an empty input yields ``[""]`` and a trailing
    delimiter yields a trailing empty token.
    """
    if len(delimiter) != 1:
        raise ValueError("delimiter must be a single character")
    return tokenstring.split(delimiter)