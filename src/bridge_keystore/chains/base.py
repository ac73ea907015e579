"""Capability set shared by chain adapters.

Adapters are plain classes that satisfy :class:`ChainAdapter` structurally;
there is no common base class to inherit from. Curve arithmetic is delegated
to ``cryptography``'s EC backend.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from ..core.exceptions import InvalidPrivateKey
from ..models import Chain, RawPrivateKey

SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_KEY_SIZE = 32
HARDENED_LIMIT = 2**31


@runtime_checkable
class ChainAdapter(Protocol):
    chain: Chain
    coin_type: int
    file_suffix: str
    curve_order: int
    private_key_size: int

    def public_key_from_private(self, key: RawPrivateKey) -> bytes: ...

    def address_from_public_key(self, public_key: bytes) -> str: ...

    def serialize_private_key(self, key: RawPrivateKey) -> bytearray: ...

    def deserialize_private_key(self, data: bytes | bytearray) -> RawPrivateKey: ...

    def derivation_path(self, account_index: int = 0) -> str: ...


def bip44_path(coin_type: int, account_index: int) -> str:
    if not 0 <= account_index < HARDENED_LIMIT:
        raise ValueError(f"Account index must be in [0, {HARDENED_LIMIT - 1}]")
    return f"m/44'/{coin_type}'/{account_index}'/0/0"


def check_scalar(data: bytes | bytearray, *, order: int = SECP256K1_ORDER, size: int = SECP256K1_KEY_SIZE) -> None:
    if len(data) != size:
        raise InvalidPrivateKey(f"Private key must be {size} bytes, got {len(data)}")
    if not 0 < int.from_bytes(data, "big") < order:
        raise InvalidPrivateKey("Private key scalar is outside the curve order")


def secp256k1_public_point(key: RawPrivateKey, *, compressed: bool) -> bytes:
    check_scalar(key.buffer)
    private = ec.derive_private_key(key.to_int(), ec.SECP256K1())
    fmt = (
        serialization.PublicFormat.CompressedPoint
        if compressed
        else serialization.PublicFormat.UncompressedPoint
    )
    return private.public_key().public_bytes(serialization.Encoding.X962, fmt)


def secp256k1_serialize(key: RawPrivateKey) -> bytearray:
    check_scalar(key.buffer)
    return bytearray(key.buffer)


def secp256k1_deserialize(data: bytes | bytearray) -> RawPrivateKey:
    check_scalar(data)
    return RawPrivateKey(data)


__all__ = [
    "ChainAdapter",
    "HARDENED_LIMIT",
    "SECP256K1_KEY_SIZE",
    "SECP256K1_ORDER",
    "bip44_path",
    "check_scalar",
    "secp256k1_deserialize",
    "secp256k1_public_point",
    "secp256k1_serialize",
]
