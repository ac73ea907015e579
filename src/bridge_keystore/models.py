# Shared domain models: chain identifiers, key handles and display results.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .utils.memory import constant_time_compare, wipe


class Chain(str, Enum):
    COSMOS = "cosmos"
    ETHEREUM = "eth"

    @classmethod
    def parse(cls, value: "str | Chain") -> "Chain":
        if isinstance(value, Chain):
            return value
        lowered = value.strip().lower()
        if lowered in {"ethereum", "evm"}:
            return cls.ETHEREUM
        return cls(lowered)


class RawPrivateKey:
    """Mutable holder for private scalar bytes.

    Use as a context manager so the buffer is zeroed on exit.
    """

    __slots__ = ("_buf",)

    def __init__(self, data: bytes | bytearray) -> None:
        self._buf = bytearray(data)

    def __len__(self) -> int:
        return len(self._buf)

    def __enter__(self) -> "RawPrivateKey":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.wipe()

    def __repr__(self) -> str:
        return f"RawPrivateKey(<{len(self._buf)} bytes redacted>)"

    __str__ = __repr__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RawPrivateKey):
            return NotImplemented
        return constant_time_compare(self._buf, other._buf)

    __hash__ = None  # type: ignore[assignment]

    @property
    def buffer(self) -> bytearray:
        return self._buf

    def to_int(self) -> int:
        return int.from_bytes(self._buf, "big")

    def wipe(self) -> None:
        wipe(self._buf)

    @property
    def wiped(self) -> bool:
        return not any(self._buf)


@dataclass(slots=True, frozen=True)
class KeyInfo:
    """Listing entry for a stored key"""
    name: str
    chain: Chain
    address: str


@dataclass(slots=True, frozen=True)
class KeyIdentity:
    """Public identity of a stored key; safe to display"""
    name: str
    chain: Chain
    address: str
    public_key: bytes
    derivation_path: Optional[str] = None

    @property
    def public_key_hex(self) -> str:
        return self.public_key.hex()


__all__ = ["Chain", "KeyIdentity", "KeyInfo", "RawPrivateKey"]
