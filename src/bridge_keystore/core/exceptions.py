
from __future__ import annotations

"""Central exception hierarchy

Messages carry the key name and chain so an operator can act on them. They
never carry passphrases, mnemonic words or key bytes.
"""


class KeystoreError(Exception):
    """Base exception for all keystore failures"""


class EntropySourceError(KeystoreError):
    """Raised when the operating system random source is unavailable"""


class InvalidMnemonic(KeystoreError):
    """Raised when a mnemonic has the wrong word count or a bad checksum"""


class InvalidPrivateKey(KeystoreError):
    """Raised when private key bytes are not a valid scalar for the curve"""


class InvalidKeyName(KeystoreError, ValueError):
    """Raised when a key name cannot be used as a record file name"""


class DecryptionFailed(KeystoreError):
    """Raised when an encrypted secret fails authentication.

    Wrong passphrase and corrupted ciphertext are deliberately reported the same way.
    """


class RecordError(KeystoreError):
    """Base for failures tied to a single named record"""

    def __init__(self, name: str, chain: str, message: str | None = None) -> None:
        self.name = name
        self.chain = chain
        super().__init__(message or self._default_message())

    def _default_message(self) -> str:
        return f"{self.chain} key '{self.name}'"


class NameAlreadyExists(RecordError):
    def _default_message(self) -> str:
        return f"{self.chain} key '{self.name}' already exists"


class NotFound(RecordError):
    def _default_message(self) -> str:
        return f"{self.chain} key '{self.name}' not found"


class CorruptRecord(RecordError):
    """Raised when a record file exists but cannot be parsed or is inconsistent"""

    def __init__(self, name: str, chain: str, reason: str) -> None:
        self.reason = reason
        super().__init__(name, chain, f"{chain} key '{name}' is corrupt: {reason}")


class StorageIOError(KeystoreError):
    """Raised when the underlying filesystem operation fails"""

    def __init__(self, message: str, *, name: str | None = None, chain: str | None = None) -> None:
        self.name = name
        self.chain = chain
        super().__init__(message)


__all__ = [
    "KeystoreError",
    "EntropySourceError",
    "InvalidMnemonic",
    "InvalidPrivateKey",
    "InvalidKeyName",
    "DecryptionFailed",
    "RecordError",
    "NameAlreadyExists",
    "NotFound",
    "CorruptRecord",
    "StorageIOError",
]
