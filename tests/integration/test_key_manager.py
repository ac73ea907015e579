from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from bridge_keystore.config import AppConfig, KdfConfig, KeystoreConfig
from bridge_keystore.core.exceptions import (
    CorruptRecord,
    DecryptionFailed,
    EntropySourceError,
    InvalidKeyName,
    InvalidMnemonic,
    NameAlreadyExists,
    NotFound,
)
from bridge_keystore.crypto import derivation
from bridge_keystore.logging import configure_logging
from bridge_keystore.models import Chain
from bridge_keystore.services.key_manager import KeyManager

PASSPHRASE = "correct horse battery staple"

ABANDON_MNEMONIC = " ".join(["abandon"] * 11 + ["about"])


def _files(root: Path) -> list[str]:
    return sorted(p.name for p in root.iterdir())


@pytest.mark.parametrize("chain", list(Chain))
def test_add_then_show(manager: KeyManager, chain: Chain) -> None:
    added = manager.add("relayer", chain, PASSPHRASE)
    shown = manager.show("relayer", chain, PASSPHRASE)
    assert shown.address == added.address
    assert shown.public_key == added.public_key
    assert shown.derivation_path is None
    assert [(i.name, i.address) for i in manager.list(chain)] == [("relayer", added.address)]


def test_import_is_reproducible(manager: KeyManager) -> None:
    first = manager.import_mnemonic("a", Chain.ETHEREUM, ABANDON_MNEMONIC, PASSPHRASE)
    second = manager.import_mnemonic("b", Chain.ETHEREUM, ABANDON_MNEMONIC, "another passphrase")
    assert first.address == second.address == "0x9858EfFD232B4033E47d90003D41EC34EcaEda94"
    assert first.derivation_path == "m/44'/60'/0'/0/0"
    shown = manager.show("b", Chain.ETHEREUM, "another passphrase")
    assert shown.derivation_path == "m/44'/60'/0'/0/0"


def test_import_account_index(manager: KeyManager) -> None:
    zero = manager.import_mnemonic("zero", Chain.COSMOS, ABANDON_MNEMONIC, PASSPHRASE)
    one = manager.import_mnemonic("one", Chain.COSMOS, ABANDON_MNEMONIC, PASSPHRASE, account_index=1)
    assert zero.address != one.address
    assert one.derivation_path == "m/44'/118'/1'/0/0"
    assert zero.address.startswith("cosmos1")


def test_name_uniqueness_per_chain(manager: KeyManager, keystore_dir: Path) -> None:
    original = manager.add("dup", Chain.COSMOS, PASSPHRASE)
    with pytest.raises(NameAlreadyExists):
        manager.add("dup", Chain.COSMOS, PASSPHRASE)
    with pytest.raises(NameAlreadyExists):
        manager.import_mnemonic("dup", Chain.COSMOS, ABANDON_MNEMONIC, PASSPHRASE)
    assert manager.show("dup", Chain.COSMOS, PASSPHRASE).address == original.address
    manager.add("dup", Chain.ETHEREUM, PASSPHRASE)
    assert _files(keystore_dir) == ["dup.cosmos.json", "dup.eth.json"]


def test_rename_preserves_identity(manager: KeyManager) -> None:
    added = manager.add("old", Chain.ETHEREUM, PASSPHRASE)
    manager.rename("old", "new", Chain.ETHEREUM)
    assert manager.show("new", Chain.ETHEREUM, PASSPHRASE).address == added.address
    with pytest.raises(NotFound):
        manager.show("old", Chain.ETHEREUM, PASSPHRASE)


def test_rename_onto_existing_changes_nothing(manager: KeyManager) -> None:
    a = manager.add("a", Chain.COSMOS, PASSPHRASE)
    b = manager.add("b", Chain.COSMOS, PASSPHRASE)
    with pytest.raises(NameAlreadyExists):
        manager.rename("a", "b", Chain.COSMOS)
    assert [(i.name, i.address) for i in manager.list(Chain.COSMOS)] == [("a", a.address), ("b", b.address)]


def test_delete_removes_only_that_key(manager: KeyManager) -> None:
    manager.add("keep", Chain.ETHEREUM, PASSPHRASE)
    manager.add("drop", Chain.ETHEREUM, PASSPHRASE)
    manager.add("drop", Chain.COSMOS, PASSPHRASE)
    manager.delete("drop", Chain.ETHEREUM)
    assert [i.name for i in manager.list(Chain.ETHEREUM)] == ["keep"]
    assert [i.name for i in manager.list(Chain.COSMOS)] == ["drop"]
    with pytest.raises(NotFound):
        manager.show("drop", Chain.ETHEREUM, PASSPHRASE)


def test_wrong_passphrase_leaves_record_intact(manager: KeyManager, keystore_dir: Path) -> None:
    manager.add("locked", Chain.COSMOS, PASSPHRASE)
    before = (keystore_dir / "locked.cosmos.json").read_bytes()
    with pytest.raises(DecryptionFailed):
        manager.show("locked", Chain.COSMOS, "not the passphrase")
    assert (keystore_dir / "locked.cosmos.json").read_bytes() == before
    manager.show("locked", Chain.COSMOS, PASSPHRASE)


def test_swapped_secret_fails_authentication(manager: KeyManager, keystore_dir: Path) -> None:
    manager.add("one", Chain.ETHEREUM, PASSPHRASE)
    manager.add("two", Chain.ETHEREUM, PASSPHRASE)
    one = json.loads((keystore_dir / "one.eth.json").read_text(encoding="utf-8"))
    two = json.loads((keystore_dir / "two.eth.json").read_text(encoding="utf-8"))
    one["encrypted_secret"] = two["encrypted_secret"]
    (keystore_dir / "one.eth.json").write_text(json.dumps(one), encoding="utf-8")
    with pytest.raises(DecryptionFailed):
        manager.show("one", Chain.ETHEREUM, PASSPHRASE)


@pytest.mark.parametrize(
    "phrase",
    [
        " ".join(["abandon"] * 12),
        " ".join(["abandon"] * 12 + ["about"]),
        " ".join(["abandon"] * 11 + ["notaword"]),
    ],
)
@pytest.mark.parametrize("chain", list(Chain))
def test_invalid_mnemonic_creates_nothing(
    manager: KeyManager, keystore_dir: Path, phrase: str, chain: Chain
) -> None:
    with pytest.raises(InvalidMnemonic):
        manager.import_mnemonic("bad", chain, phrase, PASSPHRASE)
    assert _files(keystore_dir) == []


def test_missing_entropy_creates_nothing(
    manager: KeyManager, keystore_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _no_entropy(n: int) -> bytes:
        raise OSError("getrandom failed")

    monkeypatch.setattr(derivation.os, "urandom", _no_entropy)
    with pytest.raises(EntropySourceError):
        manager.add("fresh", Chain.ETHEREUM, PASSPHRASE)
    assert _files(keystore_dir) == []


def test_rejects_bad_input_before_writing(manager: KeyManager, keystore_dir: Path) -> None:
    with pytest.raises(InvalidKeyName):
        manager.add("../outside", Chain.COSMOS, PASSPHRASE)
    with pytest.raises(ValueError):
        manager.add("empty", Chain.COSMOS, "")
    with pytest.raises(ValueError):
        manager.add("x", "solana", PASSPHRASE)
    assert _files(keystore_dir) == []


def test_corrupt_record_skipped_by_list(manager: KeyManager, keystore_dir: Path) -> None:
    manager.add("fine", Chain.COSMOS, PASSPHRASE)
    (keystore_dir / "junk.cosmos.json").write_bytes(b"\x00\x01")
    reported: list[CorruptRecord] = []
    assert [i.name for i in manager.list(Chain.COSMOS, on_corrupt=reported.append)] == ["fine"]
    assert [exc.name for exc in reported] == ["junk"]
    with pytest.raises(CorruptRecord):
        manager.show("junk", Chain.COSMOS, PASSPHRASE)


def test_prefix_change_marks_records_corrupt(keystore_dir: Path, fast_kdf: KdfConfig) -> None:
    cosmos = KeyManager.from_config(AppConfig(keystore=KeystoreConfig(path=keystore_dir), kdf=fast_kdf))
    added = cosmos.add("hub", Chain.COSMOS, PASSPHRASE)
    assert added.address.startswith("cosmos1")

    gravity_config = AppConfig(keystore=KeystoreConfig(path=keystore_dir, cosmos_prefix="gravity"), kdf=fast_kdf)
    gravity = KeyManager.from_config(gravity_config)
    with pytest.raises(CorruptRecord):
        gravity.show("hub", Chain.COSMOS, PASSPHRASE)


def test_secrets_never_logged(manager: KeyManager) -> None:
    stream = io.StringIO()
    configure_logging("info", stream=stream)
    manager.import_mnemonic("logged", Chain.ETHEREUM, ABANDON_MNEMONIC, PASSPHRASE)
    manager.show("logged", Chain.ETHEREUM, PASSPHRASE)
    with pytest.raises(DecryptionFailed):
        manager.show("logged", Chain.ETHEREUM, "wrong passphrase")
    manager.rename("logged", "renamed", Chain.ETHEREUM)
    manager.delete("renamed", Chain.ETHEREUM)

    output = stream.getvalue()
    events = [json.loads(line)["msg"] for line in output.splitlines()]
    assert events == ["key_imported", "decryption_failed", "key_renamed", "key_deleted"]
    assert PASSPHRASE not in output
    assert "wrong passphrase" not in output
    assert "abandon" not in output
