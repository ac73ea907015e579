# Ethereum adapter: uncompressed secp256k1 keys, EIP-55 checksummed addresses.
from __future__ import annotations

from bip_utils import EthAddrEncoder

from ..models import Chain, RawPrivateKey
from .base import (
    SECP256K1_KEY_SIZE,
    SECP256K1_ORDER,
    bip44_path,
    secp256k1_deserialize,
    secp256k1_public_point,
    secp256k1_serialize,
)

ETHEREUM_COIN_TYPE = 60


class EthereumAdapter:
    chain = Chain.ETHEREUM
    coin_type = ETHEREUM_COIN_TYPE
    file_suffix = ".eth.json"
    curve_order = SECP256K1_ORDER
    private_key_size = SECP256K1_KEY_SIZE

    def __repr__(self) -> str:
        return "EthereumAdapter()"

    def public_key_from_private(self, key: RawPrivateKey) -> bytes:
        return secp256k1_public_point(key, compressed=False)

    def address_from_public_key(self, public_key: bytes) -> str:
        # "0x" + EIP-55(keccak256(X || Y)[-20:])
        try:
            return EthAddrEncoder.EncodeKey(bytes(public_key))
        except (TypeError, ValueError) as exc:
            raise ValueError("Invalid secp256k1 public key") from exc

    def serialize_private_key(self, key: RawPrivateKey) -> bytearray:
        return secp256k1_serialize(key)

    def deserialize_private_key(self, data: bytes | bytearray) -> RawPrivateKey:
        return secp256k1_deserialize(data)

    def derivation_path(self, account_index: int = 0) -> str:
        return bip44_path(self.coin_type, account_index)
