# Cosmos-SDK adapter: compressed secp256k1 keys, bech32 account addresses.
from __future__ import annotations

from bip_utils import AtomAddrEncoder

from ..models import Chain, RawPrivateKey
from .base import (
    SECP256K1_KEY_SIZE,
    SECP256K1_ORDER,
    bip44_path,
    secp256k1_deserialize,
    secp256k1_public_point,
    secp256k1_serialize,
)

COSMOS_COIN_TYPE = 118
DEFAULT_PREFIX = "cosmos"


class CosmosAdapter:
    chain = Chain.COSMOS
    coin_type = COSMOS_COIN_TYPE
    file_suffix = ".cosmos.json"
    curve_order = SECP256K1_ORDER
    private_key_size = SECP256K1_KEY_SIZE

    def __init__(self, prefix: str = DEFAULT_PREFIX) -> None:
        self.prefix = prefix

    def __repr__(self) -> str:
        return f"CosmosAdapter(prefix={self.prefix!r})"

    def public_key_from_private(self, key: RawPrivateKey) -> bytes:
        return secp256k1_public_point(key, compressed=True)

    def address_from_public_key(self, public_key: bytes) -> str:
        # bech32(prefix, RIPEMD160(SHA256(compressed_pubkey)))
        try:
            return AtomAddrEncoder.EncodeKey(bytes(public_key), hrp=self.prefix)
        except (TypeError, ValueError) as exc:
            raise ValueError("Invalid secp256k1 public key") from exc

    def serialize_private_key(self, key: RawPrivateKey) -> bytearray:
        return secp256k1_serialize(key)

    def deserialize_private_key(self, data: bytes | bytearray) -> RawPrivateKey:
        return secp256k1_deserialize(data)

    def derivation_path(self, account_index: int = 0) -> str:
        return bip44_path(self.coin_type, account_index)
