
from __future__ import annotations

import contextlib
import secrets
from typing import Iterator


def wipe(buf: bytearray | memoryview) -> None:
    """Overwrite a mutable buffer with zeros in place"""
    for i in range(len(buf)):
        buf[i] = 0


@contextlib.contextmanager
def scrubbed(value: str | bytes | bytearray) -> Iterator[bytearray]:
    """Yield a mutable UTF-8 copy of ``value`` that is zeroed on exit.

    Python strings are immutable, so the caller's original object cannot be
    cleared; this only bounds the lifetime of the copy handed to crypto code.
    """
    if isinstance(value, str):
        buf = bytearray(value.encode("utf-8"))
    else:
        buf = bytearray(value)
    try:
        yield buf
    finally:
        wipe(buf)


def constant_time_compare(lhs: bytes | bytearray | str, rhs: bytes | bytearray | str) -> bool:
    """Compare two byte sequences without leaking timing information"""
    if isinstance(lhs, str):
        lhs = lhs.encode("utf-8")
    if isinstance(rhs, str):
        rhs = rhs.encode("utf-8")
    return secrets.compare_digest(bytes(lhs), bytes(rhs))


__all__ = ["constant_time_compare", "scrubbed", "wipe"]
