from __future__ import annotations

import asyncio
import json
import sys
from typing import Any, Dict, Optional, Tuple

import typer

from realmsapi.aggregator import RealmAggregator
from realmsapi.config import get_settings
from realmsapi.domain.models import AggregationError, FetchError
from realmsapi.gateway.http import HttpUpstreamGateway
from realmsapi.profiles import UserProfileFetcher
from realmsapi.protocol_versions import ProtocolVersionTable
from realmsapi.reporter import print_realm, print_store_summary
from realmsapi.store import RecordStore
from realmsapi.utils.logging import configure_logging

app = typer.Typer(help="Realms lookup service CLI.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    protocols = ProtocolVersionTable.load(settings.protocol_table_path)
    typer.echo(
        f"listen={settings.host}:{settings.port} | "
        f"realms_db={settings.realms_db_path} xbox_users_db={settings.xbox_users_db_path} | "
        f"protocols={len(protocols)} | realms_api={settings.realms_api_url} | "
        f"retries={settings.upstream_retry_attempts} timeout={settings.upstream_timeout_seconds}s"
    )


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default from settings)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default from settings)."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes (development)."),
) -> None:
    """
    Run the HTTP API with uvicorn.
    """
    import uvicorn

    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    uvicorn.run(
        "realmsapi.api:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


async def _lookup(code: str) -> Dict[str, Any]:
    settings = get_settings()
    store = RecordStore(settings.realms_db_path, kind="realms")
    store.load()
    async with HttpUpstreamGateway(settings) as gateway:
        aggregator = RealmAggregator(
            gateway, store, ProtocolVersionTable.load(settings.protocol_table_path), settings
        )
        result = await aggregator.resolve(code)
    if isinstance(result, AggregationError):
        return result.to_response()
    return result.to_record()


@app.command()
def lookup(
    code: str = typer.Argument(..., help="Realm invite code."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON record."),
) -> None:
    """
    Resolve one realm code and persist the record, like GET /api/realms/{code}.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    record = asyncio.run(_lookup(code))
    if as_json:
        typer.echo(json.dumps(record, indent=2))
    else:
        print_realm(record)
    if record.get("valid") is False:
        raise typer.Exit(code=1)


async def _profile(xuid: str) -> Tuple[Dict[str, Any], bool]:
    settings = get_settings()
    store = RecordStore(settings.xbox_users_db_path, kind="xbox_users")
    store.load()
    async with HttpUpstreamGateway(settings) as gateway:
        result = await UserProfileFetcher(gateway, store).resolve(xuid)
    return result.to_response(), isinstance(result, FetchError)


@app.command()
def profile(xuid: str = typer.Argument(..., help="Xbox user id.")) -> None:
    """
    Fetch one Xbox Live profile and persist it, like GET /api/xbox/{xuid}.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    payload, failed = asyncio.run(_profile(xuid))
    typer.echo(json.dumps(payload, indent=2))
    if failed:
        raise typer.Exit(code=1)


@app.command()
def stats() -> None:
    """
    Summarise the record stores.
    """
    settings = get_settings()
    configure_logging(level="WARNING")
    realms = RecordStore(settings.realms_db_path, kind="realms")
    users = RecordStore(settings.xbox_users_db_path, kind="xbox_users")
    print_store_summary(realms.load(), users.load())


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
