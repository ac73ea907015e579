"""Key management for the bridge orchestrator: Cosmos and Ethereum signing keys."""

__version__ = "0.1.0"

from .core.exceptions import (
    CorruptRecord,
    DecryptionFailed,
    EntropySourceError,
    InvalidKeyName,
    InvalidMnemonic,
    KeystoreError,
    NameAlreadyExists,
    NotFound,
    StorageIOError,
)
from .models import Chain, KeyIdentity, KeyInfo
from .services.key_manager import KeyManager
from .storage.keystore import RecordStore

__all__ = [
    "Chain",
    "CorruptRecord",
    "DecryptionFailed",
    "EntropySourceError",
    "InvalidKeyName",
    "InvalidMnemonic",
    "KeyIdentity",
    "KeyInfo",
    "KeyManager",
    "KeystoreError",
    "NameAlreadyExists",
    "NotFound",
    "RecordStore",
    "StorageIOError",
    "__version__",
]
