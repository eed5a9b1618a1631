"""
The configured connection value and its httpx materialisation.

A Connection only holds settings. ``client()`` turns them into an
``httpx.Client``; nothing here performs network I/O by itself.
"""
from __future__ import annotations

import ssl
from typing import Any

import httpx
from pydantic import BaseModel

from .certificates import load_client_certificate, private_key_bytes
from .types import VerifyMode
from .utils.http_proxy import make_proxy

# httpx's own default, used for whichever timeout was not configured
DEFAULT_TIMEOUT = 5.0


class Connection(BaseModel):
    model_config = {"arbitrary_types_allowed": True}

    host: str
    port: int | None = None
    proxy_address: str | None = None
    proxy_port: int | None = None
    proxy_user: str | None = None
    proxy_pass: str | None = None
    use_ssl: bool = False
    open_timeout: float | None = None
    read_timeout: float | None = None
    debug_output: Any = None
    cert: Any = None
    key: Any = None
    verify_mode: VerifyMode | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Connection):
            return NotImplemented
        return self._comparable() == other._comparable()

    def _comparable(self) -> dict[str, Any]:
        # Parsed private keys have no value equality of their own
        values = dict(self.__dict__)
        if self.key is not None:
            values["key"] = private_key_bytes(self.key)
        return values

    # ── Settings ──────────────────────────────────────────────────────────────

    def set_debug_output(self, sink: Any) -> None:
        """
        Write a trace of every request and response to ``sink``: the request
        line, status line, headers and bodies. Streamed request bodies that
        were never buffered are noted but not written.
        """
        self.debug_output = sink

    @property
    def is_proxy(self) -> bool:
        return self.proxy_address is not None and self.proxy_port is not None

    @property
    def base_url(self) -> str:
        scheme = "https" if self.use_ssl else "http"
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port is None:
            return f"{scheme}://{host}"
        return f"{scheme}://{host}:{self.port}"

    # ── httpx materialisation ─────────────────────────────────────────────────

    def timeout(self) -> httpx.Timeout:
        connect = DEFAULT_TIMEOUT if self.open_timeout is None else self.open_timeout
        read = DEFAULT_TIMEOUT if self.read_timeout is None else self.read_timeout
        return httpx.Timeout(DEFAULT_TIMEOUT, connect=float(connect), read=float(read))

    def proxy(self) -> httpx.Proxy | None:
        if not self.is_proxy:
            return None
        return make_proxy(self.proxy_address, self.proxy_port, self.proxy_user, self.proxy_pass)

    def ssl_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        if self.verify_mode is VerifyMode.NONE:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        elif self.verify_mode is VerifyMode.PEER:
            context.verify_mode = ssl.CERT_REQUIRED
        if self.cert is not None and self.key is not None:
            load_client_certificate(context, self.cert, self.key)
        return context

    def event_hooks(self) -> dict[str, list]:
        if self.debug_output is None:
            return {}
        return {
            "request": [self._trace_request],
            "response": [self._trace_response],
        }

    def client(self, **kwargs: Any) -> httpx.Client:
        """Create an httpx.Client bound to this connection's settings."""
        kwargs.setdefault("base_url", self.base_url)
        kwargs.setdefault("timeout", self.timeout())
        kwargs.setdefault("trust_env", False)
        kwargs.setdefault("event_hooks", self.event_hooks())
        proxy = self.proxy()
        if proxy is not None:
            kwargs.setdefault("proxy", proxy)
        if self.use_ssl:
            kwargs.setdefault("verify", self.ssl_context())
        return httpx.Client(**kwargs)

    # ── Tracing ───────────────────────────────────────────────────────────────

    def _trace_request(self, request: httpx.Request) -> None:
        target = request.url.raw_path.decode("ascii", errors="replace")
        lines = [f"-> {request.method} {target} HTTP/1.1"]
        lines.extend(f"-> {name}: {value}" for name, value in request.headers.items())
        try:
            body = request.content
        except httpx.RequestNotRead:
            lines.append("-> <streamed body>")
        else:
            lines.extend(_body_lines("-> ", body))
        self._write_trace(lines)

    def _trace_response(self, response: httpx.Response) -> None:
        # Event hooks run before the body is read
        response.read()
        lines = [f"<- {response.http_version} {response.status_code} {response.reason_phrase}"]
        lines.extend(f"<- {name}: {value}" for name, value in response.headers.items())
        lines.extend(_body_lines("<- ", response.content))
        self._write_trace(lines)

    def _write_trace(self, lines: list[str]) -> None:
        self.debug_output.write("\n".join(lines) + "\n")
        flush = getattr(self.debug_output, "flush", None)
        if callable(flush):
            flush()


def _body_lines(prefix: str, body: bytes) -> list[str]:
    if not body:
        return []
    text = body.decode("utf-8", errors="replace")
    return [prefix] + [f"{prefix}{line}" for line in text.splitlines()]
