"""Configuration loading utilities."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .paths import default_keystore_dir, keystore_dir_override, runtime_config_dir
from .utils.validation import check_scrypt_cost


class KdfConfig(BaseModel):
    """Parameters for deriving keys with scrypt"""

    algorithm: str = Field(default="scrypt")
    length: int = Field(default=32, ge=32, le=32, description="AES-256 key size")
    salt_length: int = Field(default=16, ge=16, le=64)
    n: int = Field(default=2**15, ge=2**10, le=2**20)
    r: int = Field(default=8, ge=1, le=32)
    p: int = Field(default=1, ge=1, le=16)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _validate_cost(self) -> "KdfConfig":
        check_scrypt_cost(self.n, self.r, self.p)
        return self

    @field_validator("algorithm")
    @classmethod
    def _scrypt_only(cls, value: str) -> str:
        if value.lower() != "scrypt":
            raise ValueError(f"Unsupported KDF: {value}")
        return value.lower()


class KeystoreConfig(BaseModel):
    path: Path = Field(default_factory=default_keystore_dir, description="Keystore root directory")
    cosmos_prefix: str = Field(default="cosmos", description="Bech32 human-readable part for Cosmos addresses")

    @field_validator("cosmos_prefix")
    @classmethod
    def _validate_prefix(cls, value: str) -> str:
        value = value.strip()
        if not value or not value.isascii() or not value.isalnum() or value.lower() != value:
            raise ValueError("cosmos_prefix must be lowercase alphanumeric ASCII")
        return value

    @field_validator("path")
    @classmethod
    def _expand(cls, value: Path) -> Path:
        return Path(value).expanduser()


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Logging verbosity level")

    def normalized_level(self) -> str:
        return self.level.upper()


class AppConfig(BaseModel):
    keystore: KeystoreConfig = Field(default_factory=KeystoreConfig)
    kdf: KdfConfig = Field(default_factory=KdfConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def config_search_paths(explicit: Optional[Path] = None) -> Iterable[Path]:
    if explicit:
        yield explicit
    yield Path.cwd() / ".bridge-keys" / "config.yaml"
    yield runtime_config_dir() / "config.yaml"


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load the first config file found; ``BRIDGE_KEYS_HOME`` beats its ``keystore.path``."""
    config = AppConfig()
    for candidate in config_search_paths(path):
        if candidate.is_file():
            try:
                with candidate.open("r", encoding="utf-8") as handle:
                    data = yaml.safe_load(handle) or {}
                config = AppConfig.model_validate(data)
            except (yaml.YAMLError, ValidationError) as exc:
                raise ValueError(f"Invalid configuration in {candidate}: {exc}") from exc
            break
    override = keystore_dir_override()
    if override is not None:
        keystore = config.keystore.model_copy(update={"path": override})
        config = config.model_copy(update={"keystore": keystore})
    return config


def dump_default_config(target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        # keystore.path is left out; it resolves at load time
        data = AppConfig().model_dump(mode="json", exclude={"keystore": {"path"}})
        yaml.safe_dump(data, handle, sort_keys=False)


__all__ = [
    "AppConfig",
    "KdfConfig",
    "KeystoreConfig",
    "LoggingConfig",
    "config_search_paths",
    "dump_default_config",
    "load_config",
]
