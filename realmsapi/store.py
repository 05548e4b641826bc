"""
Append-only JSON record store.

One store per record kind (aggregated realms, raw user profiles). The whole
collection lives in memory, is loaded from its backing file at startup and is
rewritten to disk after every append. Appends are serialised per store with an
``asyncio.Lock`` so that concurrent requests cannot lose each other's writes;
the file is replaced atomically (write to a sibling temp file, then rename).

Usage:
    store = RecordStore(Path("data/client/database.json"), kind="realms")
    store.load()
    await store.append({"id": "123", "name": "My Realm"})
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from realmsapi.errors import RecordStoreError
from realmsapi.utils.logging import get_logger

log = get_logger(__name__)

Record = Dict[str, Any]


class RecordStore:
    """
    Ordered, append-only collection of JSON records mirrored to one file.

    The store never deduplicates or compacts; repeated lookups of the same
    entity append new records.
    """

    def __init__(self, path: Path | str, kind: str = "records") -> None:
        self.path = Path(path)
        self.kind = kind
        self._records: List[Record] = []
        self._lock: Optional[asyncio.Lock] = None
        self._loaded = False

    def load(self) -> Tuple[Record, ...]:
        """
        Read every record from the backing file.

        A missing or empty file yields an empty store. A file that is not a
        JSON array (or the legacy ``{"data": [...]}`` wrapper) raises
        ``RecordStoreError``.
        """
        if not self.path.exists():
            log.warning(
                f"[STORE] {self.kind}: backing file not found, starting empty",
                extra={"store": self.kind, "path": str(self.path)},
            )
            self._records = []
            self._loaded = True
            return ()

        try:
            content = self.path.read_text(encoding="utf-8")
            data = json.loads(content) if content.strip() else []
        except (OSError, ValueError) as exc:
            raise RecordStoreError(f"Cannot read {self.kind} store at {self.path}: {exc}") from exc

        if isinstance(data, dict) and isinstance(data.get("data"), list):
            data = data["data"]
        if not isinstance(data, list):
            raise RecordStoreError(
                f"{self.kind} store at {self.path} must hold a JSON array, "
                f"found {type(data).__name__}"
            )

        self._records = list(data)
        self._loaded = True
        log.info(
            f"[STORE] {self.kind}: loaded {len(self._records)} record(s)",
            extra={"store": self.kind, "path": str(self.path), "records": len(self._records)},
        )
        return tuple(self._records)

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def records(self) -> Tuple[Record, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(tuple(self._records))

    def _get_lock(self) -> asyncio.Lock:
        # Created lazily so the store can be built outside a running loop.
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def append(self, record: Record) -> None:
        """
        Append one record and synchronously persist the whole collection.

        Raises ``OSError`` when the backing file cannot be written; the
        in-memory sequence is rolled back in that case.
        """
        async with self._get_lock():
            self._records.append(record)
            snapshot = list(self._records)
            try:
                await asyncio.to_thread(self._write, snapshot)
            except OSError:
                self._records.pop()
                log.exception(
                    f"[STORE] {self.kind}: flush failed",
                    extra={"store": self.kind, "path": str(self.path)},
                )
                raise
        log.debug(
            f"[STORE] {self.kind}: appended record #{len(snapshot)}",
            extra={"store": self.kind, "records": len(snapshot)},
        )

    def flush(self) -> None:
        """Rewrite the backing file from the in-memory sequence."""
        self._write(list(self._records))

    def _write(self, records: List[Record]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


__all__ = ["Record", "RecordStore"]
