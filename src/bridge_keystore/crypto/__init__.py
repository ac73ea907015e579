"""Key derivation and secret encryption."""
from .codec import EncryptedSecret, KdfParams, SecretCodec
from .derivation import derive_from_mnemonic, generate_mnemonic, generate_random, validate_mnemonic
from .kdf import ScryptKdf

__all__ = [
    "EncryptedSecret",
    "KdfParams",
    "ScryptKdf",
    "SecretCodec",
    "derive_from_mnemonic",
    "generate_mnemonic",
    "generate_random",
    "validate_mnemonic",
]
