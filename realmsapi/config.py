"""
Configuration settings for the Realms lookup service.

Uses Pydantic Settings to load environment variables for the HTTP listener,
record store locations, upstream endpoints/credentials and logging. Credentials
are pre-acquired authorization headers; acquiring and refreshing them is left
to whatever deploys the service.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # HTTP listener
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3000, alias="PORT")

    # Record stores
    realms_db_path: Path = Field(Path("data/client/database.json"), alias="REALMS_DB_PATH")
    xbox_users_db_path: Path = Field(
        Path("data/client/xboxusers.json"), alias="XBOX_USERS_DB_PATH"
    )
    protocol_table_path: Optional[Path] = Field(None, alias="PROTOCOL_TABLE_PATH")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Upstream providers
    realms_api_url: str = Field("https://pocket.realms.minecraft.net", alias="REALMS_API_URL")
    realms_client_version: str = Field("1.21.50", alias="REALMS_CLIENT_VERSION")
    realms_authorization: str = Field("", alias="REALMS_AUTHORIZATION")
    xbl_authorization: str = Field("", alias="XBL_AUTHORIZATION")
    upstream_timeout_seconds: float = Field(10.0, alias="UPSTREAM_TIMEOUT_SECONDS")
    upstream_retry_attempts: int = Field(3, alias="UPSTREAM_RETRY_ATTEMPTS")
    ping_timeout_seconds: float = Field(5.0, alias="PING_TIMEOUT_SECONDS")
    default_server_port: int = Field(19132, alias="DEFAULT_SERVER_PORT")

    # Derived invite links
    invite_base_url: str = Field("https://realms.gg/", alias="INVITE_BASE_URL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
