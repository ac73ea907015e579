"""Private key generation from fresh entropy or a BIP39 mnemonic.

Mnemonic derivation is deterministic: the same phrase, BIP39 passphrase and
account index always give the same key, which is how an operator recovers a
deleted key.
"""
from __future__ import annotations

import os
from typing import Tuple

import structlog
from bip_utils import (
    Bip32Slip10Secp256k1,
    Bip39MnemonicGenerator,
    Bip39MnemonicValidator,
    Bip39SeedGenerator,
    Bip39WordsNum,
)

from ..chains.base import ChainAdapter
from ..core.exceptions import EntropySourceError, InvalidMnemonic
from ..models import RawPrivateKey
from ..utils.memory import wipe

VALID_WORD_COUNTS = (12, 15, 18, 21, 24)

_WORDS_NUM = {
    12: Bip39WordsNum.WORDS_NUM_12,
    15: Bip39WordsNum.WORDS_NUM_15,
    18: Bip39WordsNum.WORDS_NUM_18,
    21: Bip39WordsNum.WORDS_NUM_21,
    24: Bip39WordsNum.WORDS_NUM_24,
}

logger = structlog.get_logger(__name__)


def generate_random(adapter: ChainAdapter) -> RawPrivateKey:
    """Draw a uniformly random scalar in ``[1, n-1]`` for the adapter's curve."""
    while True:
        try:
            candidate = bytearray(os.urandom(adapter.private_key_size))
        except (NotImplementedError, OSError) as exc:
            raise EntropySourceError("System random source is unavailable") from exc
        try:
            if 0 < int.from_bytes(candidate, "big") < adapter.curve_order:
                return RawPrivateKey(candidate)
        finally:
            wipe(candidate)


def normalize_mnemonic(mnemonic: str) -> str:
    return " ".join(mnemonic.split()).lower()


def validate_mnemonic(mnemonic: str) -> str:
    """Return the normalized phrase or raise :class:`InvalidMnemonic`."""
    phrase = normalize_mnemonic(mnemonic)
    count = len(phrase.split()) if phrase else 0
    if count not in VALID_WORD_COUNTS:
        raise InvalidMnemonic(
            f"Mnemonic must have 12, 15, 18, 21 or 24 words, got {count}"
        )
    if not Bip39MnemonicValidator().IsValid(phrase):
        raise InvalidMnemonic("Mnemonic contains an unknown word or fails its checksum")
    return phrase


def derive_from_mnemonic(
    mnemonic: str,
    adapter: ChainAdapter,
    account_index: int = 0,
    passphrase: str = "",
) -> Tuple[RawPrivateKey, str]:
    phrase = validate_mnemonic(mnemonic)
    path = adapter.derivation_path(account_index)
    seed = bytearray(Bip39SeedGenerator(phrase).Generate(passphrase))
    try:
        node = Bip32Slip10Secp256k1.FromSeedAndPath(bytes(seed), path)
        key = RawPrivateKey(node.PrivateKey().Raw().ToBytes())
    finally:
        wipe(seed)
    logger.debug("key_derived", chain=adapter.chain.value, path=path)
    return key, path


def generate_mnemonic(word_count: int = 24) -> str:
    try:
        words_num = _WORDS_NUM[word_count]
    except KeyError:
        raise ValueError(f"Word count must be one of {VALID_WORD_COUNTS}") from None
    return Bip39MnemonicGenerator().FromWordsNumber(words_num).ToStr()


__all__ = [
    "VALID_WORD_COUNTS",
    "derive_from_mnemonic",
    "generate_mnemonic",
    "generate_random",
    "normalize_mnemonic",
    "validate_mnemonic",
]
