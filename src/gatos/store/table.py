"""File-backed record store.

One CSV file is the source of truth. Creates append a single row; updates
and deletes rewrite the whole file through a temp file and ``os.replace`` so
readers never see a half-written table. The next id lives in memory: seeded
once by :meth:`RecordStore.initialize` and only ever advanced by
:meth:`RecordStore.create`, so ids are never reused within a process even
after deletes.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from gatos.errors import MalformedRowError, StorageReadError, StorageWriteError
from gatos.store.codec import LINE_TERMINATOR, append_rows, read_table, write_table
from gatos.store.locks import SharedExclusiveLock
from gatos.store.records import Record, validate_fields

logger = logging.getLogger(__name__)


class RecordStore:
    """CRUD access to the cats table."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._next_id = 1
        self._lock = SharedExclusiveLock()

    @property
    def next_id(self) -> int:
        """The id the next create will receive."""
        return self._next_id

    # ── Initialization ────────────────────────────────────────

    def initialize(self) -> int:
        """Scan the table once and seed the id counter. Returns the next id."""
        with self._lock.exclusive():
            records = self._load()
            self._next_id = max((r.id for r in records), default=0) + 1
        logger.info(
            "Loaded %d records from %s, next id: %d", len(records), self.path, self._next_id
        )
        return self._next_id

    # ── Reads ─────────────────────────────────────────────────

    def list(self) -> list[Record]:
        """Every record in file order. Empty if the table does not exist yet."""
        with self._lock.shared():
            return self._load()

    def get_by_id(self, record_id: int) -> Record | None:
        for record in self.list():
            if record.id == record_id:
                return record
        return None

    # ── Writes ────────────────────────────────────────────────

    def create(self, fields: Mapping[str, Any]) -> Record:
        """Validate, assign the next id, and append one row.

        The counter advances before the append, so a failed write leaves a
        gap: the id is never handed out again.
        """
        values = validate_fields(fields)
        with self._lock.exclusive():
            record = Record(id=self._next_id, **values)
            self._next_id += 1
            self._append(record)
        logger.info("Created record %d (%s)", record.id, record.name)
        return record

    def replace_by_id(self, record_id: int, fields: Mapping[str, Any]) -> Record | None:
        """Overwrite every attribute of a record, keeping its id.

        Returns None, without touching the file, if no record has that id.
        """
        values = validate_fields(fields)
        with self._lock.exclusive():
            records = self._load()
            for index, existing in enumerate(records):
                if existing.id == record_id:
                    break
            else:
                logger.warning("Record %d not found for update", record_id)
                return None
            updated = Record(id=record_id, **values)
            records[index] = updated
            self._rewrite(records)
        logger.info("Updated record %d", record_id)
        return updated

    def delete_by_id(self, record_id: int) -> int:
        """Remove records with this id. Returns how many were removed."""
        with self._lock.exclusive():
            records = self._load()
            remaining = [r for r in records if r.id != record_id]
            removed = len(records) - len(remaining)
            if removed:
                self._rewrite(remaining)
        if removed:
            logger.info("Deleted record %d", record_id)
        else:
            logger.warning("Record %d not found for deletion", record_id)
        return removed

    # ── File access (caller holds the lock) ───────────────────

    def _load(self) -> list[Record]:
        try:
            with self.path.open(encoding="utf-8", newline="") as f:
                return list(read_table(f))
        except FileNotFoundError:
            return []
        except UnicodeDecodeError as e:
            raise MalformedRowError(f"{self.path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageReadError(f"Cannot read {self.path}: {e}") from e

    def _append(self, record: Record) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            unterminated = self._last_line_unterminated()
            with self.path.open("a", encoding="utf-8", newline="") as f:
                if f.tell() == 0:
                    write_table(f, [record])
                else:
                    if unterminated:
                        f.write(LINE_TERMINATOR)
                    append_rows(f, [record])
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise StorageWriteError(f"Cannot append to {self.path}: {e}") from e

    def _rewrite(self, records: list[Record]) -> None:
        """Replace the table atomically with header + ``records``."""
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
        except OSError as e:
            raise StorageWriteError(f"Cannot create temp file for {self.path}: {e}") from e

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                write_table(f, records)
                f.flush()
                os.fsync(f.fileno())
            shutil.copymode(self.path, tmp_path)
            os.replace(tmp_path, self.path)
            self._fsync_dir()
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageWriteError(f"Cannot rewrite {self.path}: {e}") from e

    def _last_line_unterminated(self) -> bool:
        """True if the table is non-empty and does not end in a newline."""
        try:
            with self.path.open("rb") as f:
                if f.seek(0, os.SEEK_END) == 0:
                    return False
                f.seek(-1, os.SEEK_END)
                return f.read(1) not in (b"\n", b"\r")
        except FileNotFoundError:
            return False

    def _fsync_dir(self) -> None:
        """Make a rename in the table's directory durable."""
        fd = os.open(self.path.parent, os.O_RDONLY)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)
