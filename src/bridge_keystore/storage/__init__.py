"""Durable per-key record storage."""
from .keystore import RecordStore
from .paths import RecordPaths
from .record import KeyRecord

__all__ = ["KeyRecord", "RecordPaths", "RecordStore"]
