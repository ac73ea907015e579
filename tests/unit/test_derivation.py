import pytest

from bridge_keystore.chains import CosmosAdapter, EthereumAdapter
from bridge_keystore.chains.base import SECP256K1_ORDER
from bridge_keystore.core.exceptions import EntropySourceError, InvalidMnemonic
from bridge_keystore.crypto import derivation
from bridge_keystore.crypto.derivation import (
    derive_from_mnemonic,
    generate_mnemonic,
    generate_random,
    validate_mnemonic,
)

ABANDON_MNEMONIC = " ".join(["abandon"] * 11 + ["about"])


def test_known_ethereum_vector() -> None:
    adapter = EthereumAdapter()
    key, path = derive_from_mnemonic(ABANDON_MNEMONIC, adapter)
    assert path == "m/44'/60'/0'/0/0"
    address = adapter.address_from_public_key(adapter.public_key_from_private(key))
    assert address == "0x9858EfFD232B4033E47d90003D41EC34EcaEda94"


def test_derivation_is_deterministic_and_chain_specific() -> None:
    cosmos, eth = CosmosAdapter(), EthereumAdapter()
    first, _ = derive_from_mnemonic(ABANDON_MNEMONIC, cosmos)
    second, path = derive_from_mnemonic("  ABANDON " + ABANDON_MNEMONIC[8:] + "\n", cosmos)
    other, _ = derive_from_mnemonic(ABANDON_MNEMONIC, eth)
    assert first == second
    assert first != other
    assert path == "m/44'/118'/0'/0/0"


def test_account_index_changes_key() -> None:
    adapter = CosmosAdapter()
    zero, _ = derive_from_mnemonic(ABANDON_MNEMONIC, adapter, account_index=0)
    one, path = derive_from_mnemonic(ABANDON_MNEMONIC, adapter, account_index=1)
    assert zero != one
    assert path == "m/44'/118'/1'/0/0"


def test_bip39_passphrase_changes_key() -> None:
    adapter = EthereumAdapter()
    plain, _ = derive_from_mnemonic(ABANDON_MNEMONIC, adapter)
    salted, _ = derive_from_mnemonic(ABANDON_MNEMONIC, adapter, passphrase="TREZOR")
    assert plain != salted


@pytest.mark.parametrize(
    "phrase",
    [
        " ".join(["abandon"] * 12),
        " ".join(["abandon"] * 12 + ["about"]),
        " ".join(["abandon"] * 11 + ["notaword"]),
        "",
    ],
)
def test_invalid_mnemonics_rejected(phrase: str) -> None:
    with pytest.raises(InvalidMnemonic) as excinfo:
        validate_mnemonic(phrase)
    assert "abandon" not in str(excinfo.value)


@pytest.mark.parametrize("words", [12, 15, 18, 21, 24])
def test_generated_mnemonics_validate(words: int) -> None:
    phrase = generate_mnemonic(words)
    assert len(phrase.split()) == words
    assert validate_mnemonic(phrase) == phrase


def test_generate_mnemonic_rejects_odd_length() -> None:
    with pytest.raises(ValueError):
        generate_mnemonic(13)


def test_generate_random_rejection_samples(monkeypatch: pytest.MonkeyPatch) -> None:
    candidates = iter([b"\x00" * 32, SECP256K1_ORDER.to_bytes(32, "big"), b"\x00" * 31 + b"\x07"])
    monkeypatch.setattr(derivation.os, "urandom", lambda n: next(candidates))
    key = generate_random(EthereumAdapter())
    assert key.to_int() == 7


def test_generate_random_reports_missing_entropy(monkeypatch: pytest.MonkeyPatch) -> None:
    def _no_entropy(n: int) -> bytes:
        raise NotImplementedError("no randomness source")

    monkeypatch.setattr(derivation.os, "urandom", _no_entropy)
    with pytest.raises(EntropySourceError):
        generate_random(CosmosAdapter())


def test_raw_private_key_wipes_and_redacts() -> None:
    with generate_random(CosmosAdapter()) as key:
        assert "redacted" in repr(key)
        assert not key.wiped
    assert key.wiped
