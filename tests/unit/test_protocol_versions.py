from __future__ import annotations

import json
from pathlib import Path

import pytest

from realmsapi.domain.models import ProtocolVersion
from realmsapi.protocol_versions import ProtocolVersionTable

KNOWN_PROTOCOL = 766
KNOWN_LABEL = "1.21.50"
UNKNOWN_PROTOCOL = 123456


def test_packaged_table_resolves_known_protocol(protocols: ProtocolVersionTable) -> None:
    assert KNOWN_PROTOCOL in protocols
    assert protocols.lookup(KNOWN_PROTOCOL) == KNOWN_LABEL
    assert protocols.resolve(KNOWN_PROTOCOL) == KNOWN_LABEL


def test_unknown_protocol_falls_back_to_raw_id(protocols: ProtocolVersionTable) -> None:
    assert protocols.lookup(UNKNOWN_PROTOCOL) is None
    assert protocols.resolve(UNKNOWN_PROTOCOL) == UNKNOWN_PROTOCOL
    assert protocols.resolve(0) == 0


def test_every_packaged_entry_resolves_to_its_label(protocols: ProtocolVersionTable) -> None:
    assert len(protocols) > 10
    for protocol_id in (390, 589, 685, 818):
        assert isinstance(protocols.resolve(protocol_id), str)


def test_lookup_is_exact_match_only() -> None:
    table = ProtocolVersionTable(
        [
            ProtocolVersion(version=10, minecraft_version="1.0"),
            ProtocolVersion(version=20, minecraft_version="2.0"),
        ]
    )
    assert table.lookup(15) is None
    assert table.resolve(15) == 15
    assert table.resolve(20) == "2.0"


def test_load_from_custom_path(tmp_path: Path) -> None:
    path = tmp_path / "protocol.json"
    path.write_text(
        json.dumps([{"version": 1, "minecraftVersion": "alpha"}]), encoding="utf-8"
    )
    table = ProtocolVersionTable.load(path)
    assert len(table) == 1
    assert table.lookup(1) == "alpha"


def test_table_is_read_only(protocols: ProtocolVersionTable) -> None:
    with pytest.raises(TypeError):
        protocols._table[1] = "hacked"  # type: ignore[index]
