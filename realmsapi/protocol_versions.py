"""
Static lookup from Bedrock network protocol ids to release labels.

The table ships with the package (``realmsapi/data/protocol.json``) and can be
replaced through ``PROTOCOL_TABLE_PATH``. It is loaded once and never mutated.
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Union

from realmsapi.domain.models import ProtocolVersion
from realmsapi.utils.logging import get_logger

log = get_logger(__name__)


class ProtocolVersionTable:
    """Exact-match mapping {protocol id -> version label}."""

    def __init__(self, entries: Iterable[ProtocolVersion]) -> None:
        table = {}
        for entry in entries:
            table[entry.version] = entry.minecraft_version
        self._table: Mapping[int, str] = MappingProxyType(table)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "ProtocolVersionTable":
        """
        Load the table from ``path`` or, when omitted, from the packaged copy.
        """
        if path is None:
            raw = resources.files("realmsapi.data").joinpath("protocol.json").read_text("utf-8")
            source = "package:realmsapi/data/protocol.json"
        else:
            raw = Path(path).read_text(encoding="utf-8")
            source = str(path)
        entries = [ProtocolVersion.model_validate(item) for item in json.loads(raw)]
        log.debug("Protocol table loaded", extra={"source": source, "entries": len(entries)})
        return cls(entries)

    def lookup(self, protocol_id: int) -> Optional[str]:
        return self._table.get(protocol_id)

    def resolve(self, protocol_id: int) -> Union[int, str]:
        """Label for ``protocol_id``, or the id itself when the table lacks it."""
        label = self.lookup(protocol_id)
        return protocol_id if label is None else label

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, protocol_id: object) -> bool:
        return protocol_id in self._table


__all__ = ["ProtocolVersionTable"]
