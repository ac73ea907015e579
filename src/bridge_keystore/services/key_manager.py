# Manage the lifecycle of keys (add, import, list, show, rename, delete).
from __future__ import annotations

from pathlib import Path
from typing import Iterator, Mapping, Optional

import structlog

from ..chains.base import ChainAdapter
from ..chains.registry import build_adapters
from ..config import AppConfig
from ..core.exceptions import CorruptRecord, DecryptionFailed, InvalidPrivateKey, NameAlreadyExists
from ..crypto.codec import SecretCodec
from ..crypto.derivation import derive_from_mnemonic, generate_random, validate_mnemonic
from ..models import Chain, KeyIdentity, KeyInfo, RawPrivateKey
from ..storage.keystore import CorruptHandler, RecordStore
from ..storage.record import KeyRecord, secret_aad
from ..utils.memory import constant_time_compare, wipe
from ..utils.validation import validate_key_name

logger = structlog.get_logger(__name__)


class KeyManager:
    """The six keystore operations consumed by the command layer.

    Passphrases and mnemonics arrive as already-resolved strings; nothing here
    prompts. Decrypted keys are never cached between calls.
    """

    def __init__(
        self,
        store: RecordStore,
        codec: SecretCodec | None = None,
        adapters: Optional[Mapping[Chain, ChainAdapter]] = None,
    ) -> None:
        self.store = store
        self.codec = codec or SecretCodec()
        self.adapters = dict(adapters or store.adapters)

    @classmethod
    def from_config(cls, config: AppConfig, root: Path | None = None) -> "KeyManager":
        adapters = build_adapters(config.keystore)
        store = RecordStore(root or config.keystore.path, adapters)
        return cls(store, SecretCodec(config.kdf), adapters)

    def adapter(self, chain: Chain | str) -> ChainAdapter:
        chain = Chain.parse(chain)
        try:
            return self.adapters[chain]
        except KeyError:
            raise ValueError(f"Chain {chain.value} is not configured") from None

    # ----- Creation -----
    def add(self, name: str, chain: Chain | str, passphrase: str) -> KeyIdentity:
        chain = Chain.parse(chain)
        self._check_new(name, chain, passphrase)
        adapter = self.adapter(chain)
        with generate_random(adapter) as key:
            identity = self._store_key(name, adapter, key, passphrase, derivation_path=None)
        logger.info("key_added", name=name, chain=chain.value, address=identity.address)
        return identity

    def import_mnemonic(
        self,
        name: str,
        chain: Chain | str,
        mnemonic: str,
        passphrase: str,
        *,
        account_index: int = 0,
        bip39_passphrase: str = "",
    ) -> KeyIdentity:
        chain = Chain.parse(chain)
        self._check_new(name, chain, passphrase)
        validate_mnemonic(mnemonic)
        adapter = self.adapter(chain)
        key, path = derive_from_mnemonic(mnemonic, adapter, account_index, bip39_passphrase)
        with key:
            identity = self._store_key(name, adapter, key, passphrase, derivation_path=path)
        logger.info("key_imported", name=name, chain=chain.value, address=identity.address, path=path)
        return identity

    # ----- Relabel / remove -----
    def rename(self, old_name: str, new_name: str, chain: Chain | str) -> None:
        chain = Chain.parse(chain)
        self.store.rename(old_name, new_name, chain)
        logger.info("key_renamed", name=old_name, new_name=new_name, chain=chain.value)

    def delete(self, name: str, chain: Chain | str) -> None:
        chain = Chain.parse(chain)
        self.store.delete(name, chain)
        logger.info("key_deleted", name=name, chain=chain.value)

    # ----- Reads -----
    def list(self, chain: Chain | str, on_corrupt: Optional[CorruptHandler] = None) -> Iterator[KeyInfo]:
        return self.store.list(Chain.parse(chain), on_corrupt=on_corrupt)

    def show(self, name: str, chain: Chain | str, passphrase: str) -> KeyIdentity:
        """Decrypt ``name`` to prove the passphrase and re-derive its public identity."""
        chain = Chain.parse(chain)
        adapter = self.adapter(chain)
        record = self.store.get(name, chain)
        try:
            plaintext = self.codec.decrypt(record.encrypted_secret, passphrase, aad=record.aad())
        except DecryptionFailed:
            logger.warning("decryption_failed", name=name, chain=chain.value)
            raise
        with plaintext:
            try:
                key = adapter.deserialize_private_key(plaintext.buffer)
            except InvalidPrivateKey:
                raise CorruptRecord(name, chain.value, "decrypted key is not a valid scalar") from None

        with key:
            public_key = adapter.public_key_from_private(key)
        if not constant_time_compare(public_key, record.public_key_bytes):
            raise CorruptRecord(name, chain.value, "stored public key does not match private key")
        return KeyIdentity(
            name=name,
            chain=chain,
            address=adapter.address_from_public_key(public_key),
            public_key=public_key,
            derivation_path=record.derivation_path,
        )

    # ----- Helpers -----
    def _check_new(self, name: str, chain: Chain, passphrase: str) -> None:
        validate_key_name(name)
        if not passphrase:
            raise ValueError("Passphrase must not be empty")
        # add() re-checks atomically
        if self.store.exists(name, chain):
            raise NameAlreadyExists(name, chain.value)

    def _store_key(
        self,
        name: str,
        adapter: ChainAdapter,
        key: RawPrivateKey,
        passphrase: str,
        *,
        derivation_path: Optional[str],
    ) -> KeyIdentity:
        public_key = adapter.public_key_from_private(key)
        address = adapter.address_from_public_key(public_key)
        aad = secret_aad(adapter.chain, public_key.hex())
        serialized = adapter.serialize_private_key(key)
        try:
            secret = self.codec.encrypt(serialized, passphrase, aad=aad)
        finally:
            wipe(serialized)
        record = KeyRecord(
            chain=adapter.chain,
            public_key=public_key.hex(),
            address=address,
            derivation_path=derivation_path,
            encrypted_secret=secret,
        )
        self.store.add(name, adapter.chain, record)
        return KeyIdentity(
            name=name,
            chain=adapter.chain,
            address=address,
            public_key=public_key,
            derivation_path=derivation_path,
        )


__all__ = ["KeyManager"]
