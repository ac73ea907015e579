"""Utility exports."""
from .b64 import b64d, b64e
from .memory import constant_time_compare, scrubbed, wipe
from .validation import MAX_NAME_LENGTH, MAX_SCRYPT_MEMORY, check_scrypt_cost, validate_key_name

__all__ = [
    "b64d",
    "b64e",
    "constant_time_compare",
    "scrubbed",
    "wipe",
    "MAX_NAME_LENGTH",
    "MAX_SCRYPT_MEMORY",
    "check_scrypt_cost",
    "validate_key_name",
]
