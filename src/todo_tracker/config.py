"""Configuration management for Todo Tracker."""

from __future__ import annotations

from datetime import datetime, timedelta
from functools import lru_cache
from typing import Literal

import structlog
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()


def _get_workspace_client():
    """Return a WorkspaceClient for Lakebase lookups."""
    from databricks.sdk import WorkspaceClient

    return WorkspaceClient()


class OAuthTokenManager:
    """Caches the Lakebase OAuth database credential, refreshing it before expiry."""

    def __init__(self) -> None:
        self._token: str | None = None
        self._expires_at: datetime | None = None
        self._endpoint_name: str | None = None

    def get_token(self, endpoint_name: str) -> str | None:
        if not endpoint_name:
            return None

        if (
            self._token
            and self._endpoint_name == endpoint_name
            and self._expires_at
            and datetime.now() < self._expires_at - timedelta(minutes=5)
        ):
            return self._token

        try:
            logger.info("generating_oauth_token", endpoint=endpoint_name)
            cred = _get_workspace_client().postgres.generate_database_credential(
                endpoint=endpoint_name
            )
            self._token = cred.token
            self._endpoint_name = endpoint_name
            self._expires_at = datetime.now() + timedelta(minutes=55)
            return self._token
        except Exception as e:
            logger.error("oauth_token_generation_failed", error=str(e))
            return None


_token_manager = OAuthTokenManager()


class StoreSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend: Literal["memory", "dynamodb", "lakebase"] = "dynamodb"
    todos_table: str = Field(
        default="todos",
        validation_alias=AliasChoices("STORE_TODOS_TABLE", "DYNAMODB_TODOS_TABLE"),
    )
    categories_table: str = Field(
        default="categories",
        validation_alias=AliasChoices(
            "STORE_CATEGORIES_TABLE", "DYNAMODB_CATEGORIES_TABLE"
        ),
    )


class DynamoSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="AWS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    region: str = "us-east-1"
    access_key_id: str = ""
    secret_access_key: str = ""
    endpoint_url: str = ""

    def client_kwargs(self) -> dict:
        """Keyword arguments for boto3; empty credentials defer to the default chain."""
        kwargs: dict = {"region_name": self.region}
        if self.access_key_id and self.secret_access_key:
            kwargs["aws_access_key_id"] = self.access_key_id
            kwargs["aws_secret_access_key"] = self.secret_access_key
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url
        return kwargs


class LakebaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LAKEBASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = ""
    database: str = "todotracker"
    user: str = ""
    password: str = ""
    endpoint_name: str = ""

    def get_host(self) -> str:
        """Return the configured host or look it up from the Lakebase endpoint."""
        if self.host:
            return self.host
        endpoint = _get_workspace_client().postgres.get_endpoint(name=self.endpoint_name)
        return endpoint.status.hosts.host

    def get_user(self) -> str:
        """Get the Postgres role, falling back to the Databricks identity.

        Service principals authenticate as their client_id, users as their email.
        """
        if self.user:
            return self.user

        w = _get_workspace_client()
        if w.config.client_id:
            return w.config.client_id
        return w.current_user.me().user_name

    def get_password(self) -> str:
        if self.password:
            return self.password
        token = _token_manager.get_token(endpoint_name=self.endpoint_name)
        return token or self.password


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    default_user_id: str = "default-user"

    @property
    def store(self) -> StoreSettings:
        return StoreSettings()

    @property
    def dynamodb(self) -> DynamoSettings:
        return DynamoSettings()

    @property
    def lakebase(self) -> LakebaseSettings:
        return LakebaseSettings()


@lru_cache
def get_settings() -> Settings:
    return Settings()
