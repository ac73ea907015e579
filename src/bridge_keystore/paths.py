"""Shared filesystem path helpers."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from platformdirs import PlatformDirs

_APP_NAME = "bridge-keys"
_HOME_ENV = "BRIDGE_KEYS_HOME"


def runtime_config_dir() -> Path:
    """Return the per-user configuration directory."""
    dirs = PlatformDirs(appname=_APP_NAME, appauthor=None, roaming=False)
    return Path(dirs.user_config_path)


def keystore_dir_override() -> Optional[Path]:
    """Return the keystore root named by ``BRIDGE_KEYS_HOME``, if set."""
    value = os.getenv(_HOME_ENV)
    return Path(value).expanduser() if value else None


def default_keystore_dir() -> Path:
    """Return the keystore root, honouring ``BRIDGE_KEYS_HOME``."""
    override = keystore_dir_override()
    if override is not None:
        return override
    dirs = PlatformDirs(appname=_APP_NAME, appauthor=None, roaming=False)
    return Path(dirs.user_data_path) / "keystore"
