"""Validation helpers for security-sensitive inputs."""
from __future__ import annotations

from ..core.exceptions import InvalidKeyName

MAX_NAME_LENGTH = 128
MAX_SCRYPT_MEMORY = 1 << 30
_FORBIDDEN_CHARS = frozenset("/\\\x00")


def validate_key_name(name: str) -> str:
    """Ensure ``name`` can safely be used as a record file name.

    Parameters
    ----------
    name:
        Operator-chosen key label.

    Returns
    -------
    str
        The unchanged name.

    Raises
    ------
    InvalidKeyName
        If the name is empty, too long, non-ASCII, contains a path separator
        or control character, or starts with ``.`` (reserved for temp files).
    """

    if not isinstance(name, str) or not name:
        raise InvalidKeyName("Key name must not be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidKeyName(f"Key name must be at most {MAX_NAME_LENGTH} characters")
    if not name.isascii() or not name.isprintable():
        raise InvalidKeyName(f"Key name {name!r} must be printable ASCII")
    if any(ch in _FORBIDDEN_CHARS for ch in name):
        raise InvalidKeyName(f"Key name {name!r} must not contain path separators")
    if name.startswith("."):
        raise InvalidKeyName(f"Key name {name!r} must not start with '.'")
    if name != name.strip():
        raise InvalidKeyName(f"Key name {name!r} must not have surrounding whitespace")
    return name


def check_scrypt_cost(n: int, r: int, p: int) -> None:
    """Reject scrypt parameters that are malformed or would exhaust memory.

    Stored records carry their own parameters, so a tampered file must not be
    able to request gigabytes of RAM before authentication even runs.
    """

    if n < 2**10 or n > 2**20 or n & (n - 1):
        raise ValueError("scrypt n must be a power of two in [2**10, 2**20]")
    if not 1 <= r <= 32 or not 1 <= p <= 16:
        raise ValueError("scrypt r must be in [1, 32] and p in [1, 16]")
    if 128 * n * r > MAX_SCRYPT_MEMORY:
        raise ValueError("scrypt parameters exceed the memory limit")


__all__ = ["MAX_NAME_LENGTH", "MAX_SCRYPT_MEMORY", "check_scrypt_cost", "validate_key_name"]
