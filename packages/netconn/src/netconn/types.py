"""
Core type definitions — target address, connection options and TLS modes.
"""
from __future__ import annotations

import logging
import numbers
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

import httpx
from pydantic import (
    BaseModel,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)

from .errors import InvalidArgument

logger = logging.getLogger(__name__)

# ─── Schemes ──────────────────────────────────────────────────────────────────

DEFAULT_PORTS: dict[str, int] = {
    "http": 80,
    "https": 443,
}

TLS_SCHEME = "https"


class VerifyMode(Enum):
    """Peer verification applied during the TLS handshake."""

    NONE = "none"
    PEER = "peer"


# ─── Address ──────────────────────────────────────────────────────────────────

class Address(BaseModel):
    """A parsed endpoint. Build one with :meth:`parse` or field by field."""

    model_config = {"frozen": True}

    scheme: str
    host: str
    port: int | None = None

    @field_validator("scheme")
    @classmethod
    def _lowercase_scheme(cls, value: str) -> str:
        return value.lower()

    @model_validator(mode="before")
    @classmethod
    def _default_port(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("port") is None:
            scheme = str(data.get("scheme", "")).lower()
            if scheme in DEFAULT_PORTS:
                data = {**data, "port": DEFAULT_PORTS[scheme]}
        return data

    @classmethod
    def parse(cls, url: str | httpx.URL) -> "Address":
        try:
            parsed = url if isinstance(url, httpx.URL) else httpx.URL(url)
        except httpx.InvalidURL as exc:
            raise InvalidArgument(f"Cannot parse URL {url!r}: {exc}") from exc
        if not parsed.scheme or not parsed.host:
            raise InvalidArgument(f"URL {str(parsed)!r} needs both a scheme and a host")
        return cls(scheme=parsed.scheme, host=parsed.host, port=parsed.port)

    @property
    def is_tls(self) -> bool:
        return self.scheme == TLS_SCHEME

    @property
    def authority(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port is None:
            return host
        return f"{host}:{self.port}"

    def __str__(self) -> str:
        return f"{self.scheme}://{self.authority}"


# ─── Options ──────────────────────────────────────────────────────────────────

class Options(BaseModel):
    """
    Connection options. Every field is optional; ``None`` means "leave the
    transport default alone". Unknown keys are dropped on validation.

    ``timeout`` is intentionally untyped: a non-numeric value is kept as-is
    and later skipped by the builder instead of failing validation. Typed
    fields that cannot be coerced become None, which skips their feature.
    """

    model_config = {"frozen": True, "extra": "ignore", "arbitrary_types_allowed": True}

    timeout: Any = None
    debug_output: Any = None
    http_proxyaddr: str | None = None
    http_proxyport: int | None = None
    http_proxyuser: str | None = None
    http_proxypass: str | None = None
    pem: bytes | None = None
    pem_password: str | None = None

    @field_validator(
        "http_proxyaddr",
        "http_proxyport",
        "http_proxyuser",
        "http_proxypass",
        "pem",
        "pem_password",
        mode="wrap",
    )
    @classmethod
    def _skip_mismatched(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        # A value of the wrong type disables its feature instead of failing
        try:
            return handler(value)
        except ValidationError:
            logger.debug("Ignoring option %s of type %s", info.field_name, type(value).__name__)
            return None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "Options":
        return cls.model_validate({str(k): v for k, v in mapping.items()})

    @property
    def numeric_timeout(self) -> float | int | Decimal | None:
        """The timeout when it is a real number or a Decimal, otherwise None."""
        value = self.timeout
        if isinstance(value, bool) or not isinstance(value, (numbers.Real, Decimal)):
            return None
        return value

    @property
    def debug_sink(self) -> Any:
        """``debug_output`` when it can be written to, otherwise None."""
        sink = self.debug_output
        if sink is None or not callable(getattr(sink, "write", None)):
            return None
        return sink

    @property
    def has_proxy(self) -> bool:
        return self.http_proxyaddr is not None and self.http_proxyport is not None
