"""
FastAPI application exposing the realm and profile lookups.

Routes:
    GET /api/realms/         self-describing document (endpoints + Realm schema)
    GET /api/realms/{code}   aggregated realm record, or a ``valid: false`` body
    GET /api/xbox/{xuid}     raw profile annotated with request_id/timestamp

Realm lookup failures are reported in the body with a 200 status; profile
failures answer 500. Unmatched routes and uncaught faults get the JSON
``error_code`` bodies produced by the handlers below.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from realmsapi import __version__
from realmsapi.aggregator import RealmAggregator
from realmsapi.config import Settings, get_settings
from realmsapi.domain.models import AggregationError, FetchError, Realm, new_request_id
from realmsapi.gateway.abstract import UpstreamGateway
from realmsapi.gateway.http import HttpUpstreamGateway
from realmsapi.profiles import UserProfileFetcher
from realmsapi.protocol_versions import ProtocolVersionTable
from realmsapi.store import RecordStore
from realmsapi.utils.logging import get_logger

log = get_logger(__name__)

SERVER_ERROR_MESSAGE = "There was error on server-side (If you are admin check terminal to see)"


@dataclass
class Services:
    """Collaborators shared by every request of one app instance."""

    settings: Settings
    gateway: UpstreamGateway
    realm_store: RecordStore
    profile_store: RecordStore
    protocols: ProtocolVersionTable
    aggregator: RealmAggregator
    profiles: UserProfileFetcher


def api_document() -> Dict[str, Any]:
    """Static description of the realm endpoints and the Realm record schema."""
    return {
        "realmsapi": {
            "documentation": {
                "GET /api/realms/": "Returns documentation for the API.",
                "GET /api/realms/:realmCode": (
                    "Fetches information for a specified realm using its realm code."
                ),
            },
            "endpoints": {
                "GET /api/realms/": "Provides a summary of available API documentation.",
                "GET /api/realms/:realmCode": (
                    "Retrieves detailed information about a specific realm "
                    "identified by its realm code."
                ),
                "GET /api/xbox/:xuid": "Retrieves the Xbox Live profile of a user by xuid.",
            },
            "schemas": {
                "Realm": Realm.model_json_schema(by_alias=True),
            },
        }
    }


def _load_store(store: RecordStore) -> None:
    if not store.loaded:
        store.load()


def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[UpstreamGateway] = None,
    realm_store: Optional[RecordStore] = None,
    profile_store: Optional[RecordStore] = None,
    protocols: Optional[ProtocolVersionTable] = None,
) -> FastAPI:
    """
    Build the application.

    Any collaborator left as ``None`` is created from ``settings``. An
    injected gateway is not closed on shutdown; one created here is.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned_gateway = gateway is None
        upstream = gateway if gateway is not None else HttpUpstreamGateway(settings)
        realms = (
            realm_store
            if realm_store is not None
            else RecordStore(settings.realms_db_path, kind="realms")
        )
        users = (
            profile_store
            if profile_store is not None
            else RecordStore(settings.xbox_users_db_path, kind="xbox_users")
        )
        _load_store(realms)
        _load_store(users)
        table = (
            protocols
            if protocols is not None
            else ProtocolVersionTable.load(settings.protocol_table_path)
        )

        app.state.services = Services(
            settings=settings,
            gateway=upstream,
            realm_store=realms,
            profile_store=users,
            protocols=table,
            aggregator=RealmAggregator(upstream, realms, table, settings),
            profiles=UserProfileFetcher(upstream, users),
        )
        log.info(
            "[API START] realms lookup service ready",
            extra={"realms": len(realms), "xbox_users": len(users), "protocols": len(table)},
        )
        try:
            yield
        finally:
            if owned_gateway:
                await upstream.aclose()  # type: ignore[attr-defined]
            log.info("[API STOP] realms lookup service stopped")

    app = FastAPI(title="Realms API", version=__version__, lifespan=lifespan)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unknown paths and unsupported methods both count as unmatched routes.
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content={"error_code": 404, "message": "Page Not Found", "request_id": new_request_id()},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error_code": exc.status_code,
                "message": str(exc.detail),
                "request_id": new_request_id(),
            },
        )

    @app.exception_handler(Exception)
    async def server_error(request: Request, exc: Exception) -> JSONResponse:
        log.error(
            f"[API FAULT] {request.method} {request.url.path}",
            exc_info=exc,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=500,
            content={"error_code": 500, "message": SERVER_ERROR_MESSAGE, "request_id": new_request_id()},
        )

    @app.get("/api/realms/")
    async def realms_documentation() -> Dict[str, Any]:
        return api_document()

    @app.get("/api/realms/{code}")
    async def realm_lookup(code: str, request: Request) -> Dict[str, Any]:
        services: Services = request.app.state.services
        result = await services.aggregator.resolve(code)
        if isinstance(result, AggregationError):
            return result.to_response()
        return result.to_record()

    @app.get("/api/xbox/{xuid}")
    async def xbox_profile(xuid: str, request: Request) -> Any:
        services: Services = request.app.state.services
        result = await services.profiles.resolve(xuid)
        if isinstance(result, FetchError):
            return JSONResponse(status_code=500, content=result.to_response())
        return result.to_response()

    return app


__all__ = ["create_app", "api_document", "Services", "SERVER_ERROR_MESSAGE"]
