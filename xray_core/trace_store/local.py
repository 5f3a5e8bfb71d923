"""Local filesystem trace store.

Layout:
    {base_path}/traces/{trace_id}.json    <- one pretty-printed JSON record per trace

Writes go to a uniquely named temp file in the same directory and are
published with ``os.replace``, so a reader sees either the previous record or
the new one, never a partial write.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from xray_core.exceptions import StorageError
from xray_core.logging import get_xray_logger
from xray_core.records import Trace, TraceListItem
from xray_core.settings import settings
from xray_core.trace_store._helpers import apply_changes, sort_newest_first, validate_trace_id

logger = get_xray_logger(__name__)

TRACES_DIRNAME = "traces"
TRACE_SUFFIX = ".json"
TEMP_SUFFIX = ".tmp"


class LocalTraceStore:
    """Filesystem-backed trace store.

    Traces are browsable JSON files. Listing tolerates concurrent saves and
    deletes: records that vanish or are unreadable mid-listing are skipped.
    """

    def __init__(self, base_path: Path | str | None = None) -> None:
        self._base_path = Path(base_path) if base_path is not None else settings.xray_dir
        self._update_lock = threading.Lock()

    @property
    def base_path(self) -> Path:
        """Root directory of the store."""
        return self._base_path

    @property
    def traces_dir(self) -> Path:
        """Directory holding one JSON file per trace."""
        return self._base_path / TRACES_DIRNAME

    async def save(self, trace: Trace) -> None:
        """Atomically write a trace, replacing any record with the same id."""
        await asyncio.to_thread(self._save_sync, trace)

    async def get(self, trace_id: str) -> Trace | None:
        """Read a trace by id. Returns None when no record exists."""
        return await asyncio.to_thread(self._get_sync, trace_id)

    async def list(self) -> list[TraceListItem]:
        """Summaries of all readable traces, newest first."""
        return await asyncio.to_thread(self._list_sync)

    async def update(self, trace_id: str, changes: Mapping[str, Any]) -> Trace | None:
        """Merge top-level fields into a stored trace and save it."""
        return await asyncio.to_thread(self._update_sync, trace_id, changes)

    async def delete(self, trace_id: str) -> bool:
        """Delete a trace. Returns False if it did not exist."""
        return await asyncio.to_thread(self._delete_sync, trace_id)

    async def clear(self) -> int:
        """Delete every trace, skipping (and logging) records that cannot be removed."""
        return await asyncio.to_thread(self._clear_sync)

    # --- Sync implementation (called via asyncio.to_thread) ---

    def _path(self, trace_id: str) -> Path:
        return self.traces_dir / f"{validate_trace_id(trace_id)}{TRACE_SUFFIX}"

    def _save_sync(self, trace: Trace) -> None:
        path = self._path(trace.id)
        try:
            payload = trace.to_json()
        except ValueError as e:
            logger.error(f"Failed to serialize trace {trace.id}: {e}")
            raise StorageError(f"Failed to serialize trace {trace.id}: {e}") from e

        try:
            self.traces_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.traces_dir, prefix=f".{trace.id}.", suffix=TEMP_SUFFIX)
            tmp_path = Path(tmp_name)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, path)
            except BaseException:
                tmp_path.unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(f"Failed to save trace {trace.id} to {path}: {e}")
            raise StorageError(f"Failed to save trace {trace.id}: {e}") from e

    def _read(self, path: Path) -> Trace | None:
        """Read and parse one record. None if the file does not exist."""
        try:
            content = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read trace file {path}: {e}") from e
        try:
            return Trace.from_json(content)
        except (ValidationError, UnicodeDecodeError) as e:
            raise StorageError(f"Trace file {path} is corrupt: {e}") from e

    def _get_sync(self, trace_id: str) -> Trace | None:
        path = self._path(trace_id)
        try:
            return self._read(path)
        except StorageError as e:
            logger.warning(str(e))
            raise

    def _trace_files(self) -> list[Path]:
        if not self.traces_dir.is_dir():
            return []
        try:
            return sorted(self.traces_dir.glob(f"*{TRACE_SUFFIX}"))
        except OSError as e:
            logger.error(f"Failed to enumerate traces in {self.traces_dir}: {e}")
            raise StorageError(f"Failed to enumerate traces in {self.traces_dir}: {e}") from e

    def _list_sync(self) -> list[TraceListItem]:
        items: list[TraceListItem] = []
        for path in self._trace_files():
            try:
                trace = self._read(path)
            except StorageError as e:
                logger.warning(f"Skipping unreadable trace: {e}")
                continue
            if trace is None:
                # Deleted between enumeration and read
                continue
            items.append(trace.list_item())
        return sort_newest_first(items)

    def _update_sync(self, trace_id: str, changes: Mapping[str, Any]) -> Trace | None:
        with self._update_lock:
            trace = self._get_sync(trace_id)
            if trace is None:
                return None
            updated = apply_changes(trace, changes)
            self._save_sync(updated)
            return updated

    def _delete_sync(self, trace_id: str) -> bool:
        path = self._path(trace_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to delete trace {trace_id}: {e}")
            raise StorageError(f"Failed to delete trace {trace_id}: {e}") from e
        return True

    def _clear_sync(self) -> int:
        removed = 0
        for path in self._trace_files():
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(f"Failed to remove trace file {path}: {e}")
        return removed
