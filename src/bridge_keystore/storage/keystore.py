from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Callable, Iterator, Mapping, Optional

import structlog

from ..chains.base import ChainAdapter
from ..chains.registry import build_adapters
from ..core.exceptions import CorruptRecord, NameAlreadyExists, NotFound, StorageIOError
from ..models import Chain, KeyInfo
from ..utils.validation import validate_key_name
from . import file_io
from .paths import RecordPaths
from .record import KeyRecord

logger = structlog.get_logger(__name__)

CorruptHandler = Callable[[CorruptRecord], None]


class RecordStore:
    """Directory of one JSON file per key, namespaced by chain suffix.

    Layout:
      - <root>/<name>.cosmos.json
      - <root>/<name>.eth.json
      - <root>/.<file>.<token>.tmp   (in-flight writes, never listed)

    Every mutation is a single atomic link, rename or unlink, so the directory
    is always in either its pre- or post-operation state.
    """

    def __init__(self, root: Path | str, adapters: Optional[Mapping[Chain, ChainAdapter]] = None) -> None:
        root = Path(root).expanduser()
        if not root.is_dir():
            raise StorageIOError(f"Keystore directory {root} does not exist or is not a directory")
        self.adapters = dict(adapters or build_adapters())
        self.paths = RecordPaths(root, {chain: a.file_suffix for chain, a in self.adapters.items()})

    @property
    def root(self) -> Path:
        return self.paths.root

    def exists(self, name: str, chain: Chain) -> bool:
        return os.path.lexists(self.paths.record(name, chain))

    # ----- Mutations -----
    def add(self, name: str, chain: Chain, record: KeyRecord) -> Path:
        validate_key_name(name)
        if record.chain != chain:
            raise ValueError(f"Record is for chain {record.chain.value}, not {chain.value}")
        target = self.paths.record(name, chain)
        if os.path.lexists(target):
            raise NameAlreadyExists(name, chain.value)

        payload = record.to_bytes()
        try:
            temp = file_io.write_temp(target, payload)
            file_io.publish_exclusive(temp, target)
        except FileExistsError:
            raise NameAlreadyExists(name, chain.value) from None
        except OSError as exc:
            raise StorageIOError(
                f"Could not write {chain.value} key '{name}': {exc.strerror}", name=name, chain=chain.value
            ) from exc
        return target

    def rename(self, old_name: str, new_name: str, chain: Chain) -> None:
        validate_key_name(old_name)
        validate_key_name(new_name)
        source = self.paths.record(old_name, chain)
        target = self.paths.record(new_name, chain)
        if not os.path.lexists(source):
            raise NotFound(old_name, chain.value)
        if old_name == new_name:
            raise NameAlreadyExists(new_name, chain.value)
        try:
            file_io.rename_exclusive(source, target)
        except FileExistsError:
            raise NameAlreadyExists(new_name, chain.value) from None
        except FileNotFoundError:
            raise NotFound(old_name, chain.value) from None
        except OSError as exc:
            raise StorageIOError(
                f"Could not rename {chain.value} key '{old_name}': {exc.strerror}", name=old_name, chain=chain.value
            ) from exc

    def delete(self, name: str, chain: Chain) -> None:
        validate_key_name(name)
        path = self.paths.record(name, chain)
        try:
            file_io.remove(path)
        except FileNotFoundError:
            raise NotFound(name, chain.value) from None
        except OSError as exc:
            raise StorageIOError(
                f"Could not delete {chain.value} key '{name}': {exc.strerror}", name=name, chain=chain.value
            ) from exc

    def sweep_temp_files(self) -> int:
        """Remove temp files left behind by interrupted writes"""
        removed = 0
        for entry in self._scan():
            if file_io.is_temp_name(entry.name) and entry.is_file(follow_symlinks=False):
                file_io.discard(Path(entry.path))
                removed += 1
        if removed:
            logger.info("temp_files_swept", count=removed)
        return removed

    # ----- Reads -----
    def get(self, name: str, chain: Chain) -> KeyRecord:
        validate_key_name(name)
        path = self.paths.record(name, chain)
        try:
            with path.open("rb") as handle:
                mode = stat.S_IMODE(os.fstat(handle.fileno()).st_mode)
                payload = handle.read()
        except FileNotFoundError:
            if path.is_symlink():
                raise CorruptRecord(name, chain.value, "record target missing") from None
            raise NotFound(name, chain.value) from None
        except IsADirectoryError:
            raise CorruptRecord(name, chain.value, "record path is a directory") from None
        except OSError as exc:
            raise StorageIOError(
                f"Could not read {chain.value} key '{name}': {exc.strerror}", name=name, chain=chain.value
            ) from exc
        if os.name == "posix" and mode & 0o077:
            logger.warning("insecure_record_permissions", name=name, chain=chain.value, mode=oct(mode))

        try:
            record = KeyRecord.from_bytes(payload)
        except ValueError as exc:
            raise CorruptRecord(name, chain.value, str(exc)) from None
        if record.chain != chain:
            raise CorruptRecord(name, chain.value, f"record belongs to chain {record.chain.value}")
        self._check_address(record, name, chain)
        return record.with_name(name)

    def list(self, chain: Chain, on_corrupt: Optional[CorruptHandler] = None) -> Iterator[KeyInfo]:
        """Yield metadata for every readable record of ``chain``, sorted by name.

        Unparseable records are logged, handed to ``on_corrupt`` and skipped.
        Secrets are never decrypted. Each call rescans the directory.
        """
        names = sorted(
            name
            for name in (self.paths.name_from_file(entry.name, chain) for entry in self._scan())
            if name is not None
        )
        for name in names:
            try:
                record = self.get(name, chain)
            except NotFound:
                # removed since the scan
                logger.debug("record_vanished", name=name, chain=chain.value)
                continue
            except CorruptRecord as exc:
                logger.warning("corrupt_record_skipped", name=name, chain=chain.value, reason=exc.reason)
                if on_corrupt is not None:
                    on_corrupt(exc)
                continue
            yield KeyInfo(name=name, chain=chain, address=record.address)

    # ----- Helpers -----
    def _scan(self) -> list[os.DirEntry[str]]:
        try:
            with os.scandir(self.root) as entries:
                return list(entries)
        except OSError as exc:
            raise StorageIOError(f"Could not read keystore directory {self.root}: {exc.strerror}") from exc

    def _check_address(self, record: KeyRecord, name: str, chain: Chain) -> None:
        adapter = self.adapters[chain]
        try:
            expected = adapter.address_from_public_key(record.public_key_bytes)
        except ValueError:
            raise CorruptRecord(name, chain.value, "public key is not a valid curve point") from None
        if expected != record.address:
            raise CorruptRecord(name, chain.value, "address does not match public key")


__all__ = ["CorruptHandler", "RecordStore"]
