"""Core building blocks shared by every layer."""
from .exceptions import (
    CorruptRecord,
    DecryptionFailed,
    EntropySourceError,
    InvalidKeyName,
    InvalidMnemonic,
    InvalidPrivateKey,
    KeystoreError,
    NameAlreadyExists,
    NotFound,
    RecordError,
    StorageIOError,
)

__all__ = [
    "CorruptRecord",
    "DecryptionFailed",
    "EntropySourceError",
    "InvalidKeyName",
    "InvalidMnemonic",
    "InvalidPrivateKey",
    "KeystoreError",
    "NameAlreadyExists",
    "NotFound",
    "RecordError",
    "StorageIOError",
]
