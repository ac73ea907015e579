# Map key names to record file paths inside the keystore root.
from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional

from ..models import Chain
from ..utils.validation import validate_key_name
from ..core.exceptions import InvalidKeyName
from .file_io import is_temp_name


class RecordPaths:
    """Compute record paths; never creates directories"""

    def __init__(self, root: Path, suffixes: Mapping[Chain, str]):
        self.root = root
        self.suffixes = dict(suffixes)

    def suffix(self, chain: Chain) -> str:
        try:
            return self.suffixes[chain]
        except KeyError:
            raise ValueError(f"No record suffix registered for chain {chain.value}") from None

    def record(self, name: str, chain: Chain) -> Path:
        return self.root / f"{validate_key_name(name)}{self.suffix(chain)}"

    def name_from_file(self, filename: str, chain: Chain) -> Optional[str]:
        """Return the key name for ``filename`` if it is a record of ``chain``"""
        suffix = self.suffix(chain)
        if is_temp_name(filename) or not filename.endswith(suffix):
            return None
        name = filename[: -len(suffix)]
        try:
            return validate_key_name(name)
        except InvalidKeyName:
            return None
