# Scrypt KDF with parameterization.
from __future__ import annotations

import os

from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from ..config import KdfConfig
from ..utils.validation import check_scrypt_cost


class ScryptKdf:
    def __init__(self, cfg: KdfConfig | None = None):
        self.cfg = cfg or KdfConfig()

    def random_salt(self) -> bytes:
        return os.urandom(self.cfg.salt_length)

    def derive(self, passphrase: bytearray, salt: bytes) -> bytearray:
        return derive_key(passphrase, salt, n=self.cfg.n, r=self.cfg.r, p=self.cfg.p, length=self.cfg.length)


def derive_key(passphrase: bytearray, salt: bytes, *, n: int, r: int, p: int, length: int) -> bytearray:
    """Derive a symmetric key into a mutable buffer the caller must wipe"""
    check_scrypt_cost(n, r, p)
    kdf = Scrypt(salt=salt, length=length, n=n, r=r, p=p)
    return bytearray(kdf.derive(passphrase))
