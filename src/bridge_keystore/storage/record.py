
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..crypto.codec import EncryptedSecret
from ..models import Chain

RECORD_VERSION = 1


class KeyRecord(BaseModel):
    """On-disk form of a stored key.

    ``name`` is not serialized: the record's name is its file name, so a
    rename never has to rewrite the file.
    """

    name: str = Field(default="", exclude=True)
    version: int = Field(default=RECORD_VERSION)
    chain: Chain
    public_key: str
    address: str
    derivation_path: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    encrypted_secret: EncryptedSecret

    model_config = {"frozen": True}

    @field_validator("public_key")
    @classmethod
    def _hex_public_key(cls, value: str) -> str:
        try:
            raw = bytes.fromhex(value)
        except ValueError:
            raise ValueError("public_key must be hex") from None
        if len(raw) not in (33, 65):
            raise ValueError("public_key must be a 33 or 65 byte SEC1 point")
        return value.lower()

    @model_validator(mode="after")
    def _validate(self) -> "KeyRecord":
        if self.version != RECORD_VERSION:
            raise ValueError(f"Unsupported record version {self.version}")
        return self

    @property
    def public_key_bytes(self) -> bytes:
        return bytes.fromhex(self.public_key)

    def aad(self) -> bytes:
        return secret_aad(self.chain, self.public_key)

    def with_name(self, name: str) -> "KeyRecord":
        return self.model_copy(update={"name": name})

    def to_bytes(self) -> bytes:
        return json.dumps(self.model_dump(mode="json"), indent=2, sort_keys=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, payload: bytes) -> "KeyRecord":
        try:
            data = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ValueError("record is not valid JSON") from exc
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(describe_validation_error(exc)) from None


def secret_aad(chain: Chain, public_key_hex: str) -> bytes:
    """Associated data binding an encrypted secret to its chain and public key"""
    return f"{chain.value}:{public_key_hex.lower()}".encode("ascii")


def describe_validation_error(exc: ValidationError) -> str:
    # Field locations only; the offending input may be ciphertext.
    fields = sorted({".".join(str(part) for part in err["loc"]) or "<root>" for err in exc.errors()})
    return f"invalid fields: {', '.join(fields)}"


__all__ = ["KeyRecord", "RECORD_VERSION", "describe_validation_error", "secret_aad"]
