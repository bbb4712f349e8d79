from __future__ import annotations

from typing import Any

import httpx
from pydantic import Field, confloat, conint, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import Defaults


class OptOutSettings(BaseSettings):
    """
    The opt-out switch alone.

    Read before anything else so an opted-out run never depends on the
    rest of the environment being valid.
    """

    model_config = SettingsConfigDict(frozen=True, extra="ignore")

    disable_telemetry: bool = Field(
        default=False,
        validation_alias="DISABLE_TELEMETRY",
        description="Opt-out switch. Only the exact string 'true' disables telemetry.",
    )

    @field_validator("disable_telemetry", mode="before")
    @classmethod
    def _parse_opt_out(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        return value == "true"

    def telemetry_enabled(self) -> bool:
        return not self.disable_telemetry


class ResponderConfig(OptOutSettings):
    """Run configuration, read once from the process environment at startup."""

    model_config = SettingsConfigDict(
        env_prefix="RESPONDER_",
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    telemetry_endpoint: str = Field(
        default=Defaults.TELEMETRY_ENDPOINT,
        validation_alias="TELEMETRY_ENDPOINT",
        description="Collection endpoint override. Empty means the default endpoint.",
    )
    kubeconfig: str = Field(
        default="",
        validation_alias="KUBECONFIG",
        description="Kubeconfig path for out-of-cluster runs. Empty means in-cluster credentials.",
    )

    system_namespace: str = Field(default=Defaults.SYSTEM_NAMESPACE)
    max_retries: conint(ge=1) = Field(default=Defaults.MAX_RETRIES)
    retry_delay_seconds: confloat(ge=0) = Field(default=Defaults.RETRY_DELAY_SECONDS)
    request_timeout_seconds: confloat(gt=0) = Field(default=Defaults.REQUEST_TIMEOUT_SECONDS)

    @field_validator("telemetry_endpoint", mode="before")
    @classmethod
    def _resolve_endpoint(cls, value: Any) -> str:
        if value is None or not str(value).strip():
            return Defaults.TELEMETRY_ENDPOINT
        endpoint = str(value).strip()
        try:
            url = httpx.URL(endpoint)
        except httpx.InvalidURL as exc:
            raise ValueError(f"invalid telemetry endpoint {endpoint!r}: {exc}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"telemetry endpoint must be an absolute http(s) URL: {endpoint!r}")
        return endpoint

    @field_validator("system_namespace", "kubeconfig", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("system_namespace")
    @classmethod
    def _require_namespace(cls, value: str) -> str:
        if not value:
            raise ValueError("system_namespace must not be empty")
        return value
