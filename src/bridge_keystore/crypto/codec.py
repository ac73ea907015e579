"""Passphrase-based encryption of private key material.

The encrypted form is self-describing: it records the cipher, the scrypt cost
parameters and salt, and the nonce next to the ciphertext, so records written
under older KDF settings stay decodable after the configured defaults change.
"""
from __future__ import annotations

import binascii
import os
from typing import Final, Literal

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from pydantic import BaseModel, Field, model_validator

from ..config import KdfConfig
from ..core.exceptions import DecryptionFailed
from ..models import RawPrivateKey
from ..utils.b64 import b64d, b64e
from ..utils.memory import scrubbed, wipe
from ..utils.validation import check_scrypt_cost
from .kdf import ScryptKdf, derive_key

SECRET_VERSION: Final[int] = 1
CIPHER_NAME: Final[str] = "AES-256-GCM"
NONCE_SIZE: Final[int] = 12
AES256_KEY_SIZE: Final[int] = 32


class KdfParams(BaseModel):
    algorithm: Literal["scrypt"] = "scrypt"
    salt: str
    n: int
    r: int
    p: int
    length: int = Field(default=AES256_KEY_SIZE)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _validate(self) -> "KdfParams":
        check_scrypt_cost(self.n, self.r, self.p)
        if self.length != AES256_KEY_SIZE:
            raise ValueError("AES-256-GCM requires a 32-byte derived key")
        return self


class EncryptedSecret(BaseModel):
    version: int = Field(default=SECRET_VERSION)
    cipher: Literal["AES-256-GCM"] = CIPHER_NAME
    kdf: KdfParams
    nonce: str
    ciphertext: str

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _validate(self) -> "EncryptedSecret":
        if self.version != SECRET_VERSION:
            raise ValueError(f"Unsupported secret version {self.version}")
        return self

    def __repr__(self) -> str:
        return f"EncryptedSecret(cipher={self.cipher!r}, <redacted>)"

    __str__ = __repr__


class SecretCodec:
    """AES-256-GCM under a scrypt-derived key, fresh salt and nonce per call"""

    def __init__(self, kdf_config: KdfConfig | None = None) -> None:
        self._kdf = ScryptKdf(kdf_config)

    def encrypt(self, plaintext: bytes | bytearray, passphrase: str, *, aad: bytes = b"") -> EncryptedSecret:
        cfg = self._kdf.cfg
        salt = self._kdf.random_salt()
        nonce = os.urandom(NONCE_SIZE)
        with scrubbed(passphrase) as pw:
            key = self._kdf.derive(pw, salt)
        try:
            ct = AESGCM(key).encrypt(nonce, plaintext, aad)
        finally:
            wipe(key)
        return EncryptedSecret(
            kdf=KdfParams(salt=b64e(salt), n=cfg.n, r=cfg.r, p=cfg.p, length=cfg.length),
            nonce=b64e(nonce),
            ciphertext=b64e(ct),
        )

    def decrypt(self, secret: EncryptedSecret, passphrase: str, *, aad: bytes = b"") -> RawPrivateKey:
        """Return the plaintext key; use it as a context manager so it is wiped"""
        try:
            salt = b64d(secret.kdf.salt)
            nonce = b64d(secret.nonce)
            ct = b64d(secret.ciphertext)
        except (binascii.Error, ValueError) as exc:
            raise DecryptionFailed("Encrypted secret could not be decoded") from exc
        if len(nonce) != NONCE_SIZE:
            raise DecryptionFailed("Encrypted secret could not be decoded")

        params = secret.kdf
        with scrubbed(passphrase) as pw:
            key = derive_key(pw, salt, n=params.n, r=params.r, p=params.p, length=params.length)
        try:
            plaintext = bytearray(AESGCM(key).decrypt(nonce, ct, aad))
        except InvalidTag as exc:
            raise DecryptionFailed("Decryption failed: wrong passphrase or corrupted data") from exc
        finally:
            wipe(key)
        try:
            return RawPrivateKey(plaintext)
        finally:
            wipe(plaintext)


__all__ = ["CIPHER_NAME", "EncryptedSecret", "KdfParams", "NONCE_SIZE", "SecretCodec"]
