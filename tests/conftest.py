from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from bridge_keystore.chains.registry import build_adapters
from bridge_keystore.config import KdfConfig
from bridge_keystore.crypto.codec import SecretCodec
from bridge_keystore.crypto.derivation import generate_random
from bridge_keystore.logging import configure_logging
from bridge_keystore.models import Chain
from bridge_keystore.services.key_manager import KeyManager
from bridge_keystore.storage.keystore import RecordStore
from bridge_keystore.storage.record import KeyRecord, secret_aad

PASSPHRASE = "correct horse battery staple"


@pytest.fixture(autouse=True)
def _logging() -> None:
    configure_logging("info")


@pytest.fixture
def fast_kdf() -> KdfConfig:
    return KdfConfig(n=2**10, r=8, p=1)


@pytest.fixture
def codec(fast_kdf: KdfConfig) -> SecretCodec:
    return SecretCodec(fast_kdf)


@pytest.fixture
def keystore_dir(tmp_path: Path) -> Path:
    root = tmp_path / "keystore"
    root.mkdir(mode=0o700)
    return root


@pytest.fixture
def store(keystore_dir: Path) -> RecordStore:
    return RecordStore(keystore_dir)


@pytest.fixture
def manager(store: RecordStore, codec: SecretCodec) -> KeyManager:
    return KeyManager(store, codec)


@pytest.fixture
def make_record(codec: SecretCodec) -> Callable[[Chain], KeyRecord]:
    adapters = build_adapters()

    def _make(chain: Chain) -> KeyRecord:
        adapter = adapters[chain]
        with generate_random(adapter) as key:
            public_key = adapter.public_key_from_private(key)
            secret = codec.encrypt(
                adapter.serialize_private_key(key), PASSPHRASE, aad=secret_aad(chain, public_key.hex())
            )
        return KeyRecord(
            chain=chain,
            public_key=public_key.hex(),
            address=adapter.address_from_public_key(public_key),
            encrypted_secret=secret,
        )

    return _make
