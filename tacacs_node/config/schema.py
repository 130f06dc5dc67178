"""Pydantic schema for node access configuration validation."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import TRANSPORTS
from .defaults import default_port


class NodeConfigSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")
    host: str = Field(..., description="Device management address")
    port: int | None = Field(default=None, ge=1, le=65535)
    transport: str = Field(default="http")
    username: str = Field(..., min_length=1)
    password: str = Field(default="", repr=False)
    timeout: float = Field(default=30.0, gt=0, le=600)
    connect_timeout: float = Field(default=10.0, gt=0, le=120)
    verify_tls: bool = Field(default=True)
    retries: int = Field(default=2, ge=0, le=10)

    @field_validator("host")
    @classmethod
    def _validate_host(cls, v: str) -> str:
        v = v.strip()
        if not v or not re.fullmatch(r"[A-Za-z0-9_.:\-\[\]]+", v):
            raise ValueError("host must be a hostname or IP address")
        return v

    @field_validator("transport")
    @classmethod
    def _validate_transport(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in TRANSPORTS:
            raise ValueError(f"transport must be one of: {list(TRANSPORTS)}")
        return v

    @model_validator(mode="after")
    def _fill_port(self) -> NodeConfigSchema:
        if self.port is None:
            self.port = default_port(self.transport)
        return self

    @property
    def base_url(self) -> str:
        host = self.host
        # bare IPv6 literals need brackets in a URL
        if ":" in host and not host.startswith("["):
            host = f"[{host}]"
        return f"{self.transport}://{host}:{self.port}"


class CommandReferenceConfigSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")
    path: str = Field(default="")


class TacacsNodeConfigSchema(BaseModel):
    node: NodeConfigSchema
    command_reference: CommandReferenceConfigSchema = Field(
        default_factory=CommandReferenceConfigSchema
    )
    log_level: str = Field(default="WARNING")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("log_level must be a standard logging level name")
        return v


def validate_config(payload: dict) -> TacacsNodeConfigSchema:
    """Validate configuration payload with Pydantic schema."""

    return TacacsNodeConfigSchema(**payload)
