
from __future__ import annotations

import contextlib
import errno
import os
import secrets
from pathlib import Path

FILE_MODE = 0o600
TEMP_PREFIX = "."
TEMP_SUFFIX = ".tmp"

# errnos meaning "this filesystem cannot hard link", not "target exists"
_NO_LINK_ERRNOS = {errno.EPERM, errno.ENOTSUP, errno.EOPNOTSUPP, errno.EXDEV, errno.EMLINK}


def is_temp_name(filename: str) -> bool:
    return filename.startswith(TEMP_PREFIX) and filename.endswith(TEMP_SUFFIX)


def temp_path_for(target: Path) -> Path:
    token = secrets.token_hex(8)
    return target.parent / f"{TEMP_PREFIX}{target.name}.{token}{TEMP_SUFFIX}"


def write_temp(target: Path, data: bytes) -> Path:
    """Write ``data`` to a fresh, fsynced temp file beside ``target``.

    The temp name starts with ``.`` and ends with ``.tmp`` so listings never
    mistake it for a record.
    """
    temp = temp_path_for(target)
    fd = os.open(temp, os.O_WRONLY | os.O_CREAT | os.O_EXCL, FILE_MODE)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
    except BaseException:
        discard(temp)
        raise
    return temp


def publish_exclusive(temp: Path, target: Path) -> None:
    """Move ``temp`` to ``target`` atomically, failing if ``target`` exists.

    Raises FileExistsError when the name is taken. ``temp`` is gone afterwards
    whether or not publishing succeeded.
    """
    try:
        try:
            os.link(temp, target)
        except FileExistsError:
            raise
        except OSError as exc:
            if exc.errno not in _NO_LINK_ERRNOS:
                raise
            if os.path.lexists(target):
                raise FileExistsError(errno.EEXIST, "Record already exists", str(target)) from None
            os.rename(temp, target)
    finally:
        discard(temp)
    fsync_dir(target.parent)


def rename_exclusive(source: Path, target: Path) -> None:
    """Atomically rename ``source`` to ``target`` unless ``target`` exists."""
    if os.path.lexists(target):
        raise FileExistsError(errno.EEXIST, "Record already exists", str(target))
    os.rename(source, target)
    fsync_dir(target.parent)


def remove(path: Path) -> None:
    os.unlink(path)
    fsync_dir(path.parent)


def discard(path: Path) -> None:
    """Best-effort removal of an unpublished temp file"""
    with contextlib.suppress(OSError):
        os.unlink(path)


def fsync_dir(directory: Path) -> None:
    # Windows cannot open a directory handle
    if os.name == "nt":
        return
    fd = os.open(directory, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


__all__ = [
    "FILE_MODE",
    "discard",
    "fsync_dir",
    "is_temp_name",
    "publish_exclusive",
    "remove",
    "rename_exclusive",
    "temp_path_for",
    "write_temp",
]
