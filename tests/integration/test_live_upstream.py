"""
Smoke test against the real Realms and Xbox Live services.

Run with: RUN_INTEGRATION_TESTS=1 REALM_CODE=<invite code> pytest tests/integration/
(credentials come from REALMS_AUTHORIZATION / XBL_AUTHORIZATION).
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from realmsapi.aggregator import RealmAggregator
from realmsapi.config import Settings
from realmsapi.domain.models import AggregationError, Realm
from realmsapi.gateway.http import HttpUpstreamGateway
from realmsapi.protocol_versions import ProtocolVersionTable
from realmsapi.store import RecordStore

pytestmark = pytest.mark.skipif(
    os.getenv("RUN_INTEGRATION_TESTS", "0") != "1" or not os.getenv("REALM_CODE"),
    reason="Live tests require RUN_INTEGRATION_TESTS=1, REALM_CODE and upstream credentials",
)


@pytest.mark.asyncio
async def test_live_lookup(tmp_path: Path) -> None:
    settings = Settings(realms_db_path=tmp_path / "database.json")
    store = RecordStore(settings.realms_db_path, kind="realms")
    store.load()

    async with HttpUpstreamGateway(settings) as gateway:
        aggregator = RealmAggregator(gateway, store, ProtocolVersionTable.load(), settings)
        result = await aggregator.resolve(os.environ["REALM_CODE"])

    assert isinstance(result, (Realm, AggregationError))
    if isinstance(result, Realm):
        assert len(store) == 1
