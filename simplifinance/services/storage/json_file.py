"""
Local JSON Snapshot Storage

DESIGN DECISION: Entries live in a single local key-value snapshot file,
a JSON object whose configured key holds the whole entry array.
This is the desktop equivalent of a browser's local storage:
1. No database setup required
2. The user can inspect or back up one file
3. Other keys in the same file are preserved on write

TRADEOFFS:
- Every save rewrites the whole file (fine for personal volumes)
- Writes go to a temp file first and are moved into place, so a crash
  mid-write never leaves a half-written snapshot behind
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import TypeAdapter, ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from simplifinance.config import get_settings
from simplifinance.models.entry import FinancialEntry
from simplifinance.services.storage.interface import (
    EntryStorageInterface,
    SnapshotCorruptError,
    StorageError,
)


_ENTRY_LIST = TypeAdapter(list[FinancialEntry])


def decode_entries(raw) -> list[FinancialEntry]:
    """
    Validate a decoded JSON value as an entry list.

    Raises SnapshotCorruptError on anything that is not a list of valid
    entries.
    """
    if not isinstance(raw, list):
        raise SnapshotCorruptError(
            f"Expected a list of entries, got {type(raw).__name__}"
        )
    try:
        return _ENTRY_LIST.validate_python(raw)
    except ValidationError as e:
        raise SnapshotCorruptError(f"Invalid entry in snapshot: {e}")


def encode_entries(entries: list[FinancialEntry]) -> list[dict]:
    return [entry.to_snapshot() for entry in entries]


class JsonFileEntryStorage(EntryStorageInterface):
    """
    File-backed implementation of the entry snapshot.

    Only the configured storage key is read or written; the rest of the
    file is carried through untouched.
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        storage_key: Optional[str] = None,
        save_attempts: Optional[int] = None,
    ):
        settings = get_settings().storage
        self._path = Path(path) if path is not None else settings.snapshot_path
        self._key = storage_key or settings.storage_key
        self._save_attempts = save_attempts or settings.save_attempts

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return f"{self._path}#{self._key}"

    def _read_document(self) -> dict:
        """Read the whole key-value document; missing file is an empty one."""
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read snapshot {self._path}: {e}")

        if not text.strip():
            return {}
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise SnapshotCorruptError(f"Snapshot is not valid JSON: {e}")

        if not isinstance(document, dict):
            raise SnapshotCorruptError(
                f"Snapshot root must be an object, got {type(document).__name__}"
            )
        return document

    def load_all(self) -> list[FinancialEntry]:
        document = self._read_document()
        raw = document.get(self._key)
        if raw is None:
            return []
        # Older writers stored the array as a JSON string under the key
        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError as e:
                raise SnapshotCorruptError(f"Stored value is not valid JSON: {e}")
        return decode_entries(raw)

    def save_all(self, entries: list[FinancialEntry]) -> None:
        try:
            document = self._read_document()
        except SnapshotCorruptError:
            # The corrupt document is replaced wholesale
            document = {}
        document[self._key] = encode_entries(entries)

        writer = retry(
            retry=retry_if_exception_type(OSError),
            stop=stop_after_attempt(self._save_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            reraise=True,
        )(self._write_document)

        try:
            writer(document)
        except OSError as e:
            raise StorageError(f"Failed to write snapshot {self._path}: {e}")

    def _write_document(self, document: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
