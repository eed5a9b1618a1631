"""
ConnectionBuilder — turns an Address and Options into a configured Connection.

Each call to :meth:`ConnectionBuilder.connection` runs the same fixed
sequence of independent steps against a fresh Connection:

1. base construction (host, port and proxy endpoint)
2. TLS activation, decided by scheme alone
3. open/read timeouts, only for numeric values
4. proxy credentials
5. debug tracing
6. client certificate and peer verification, https only
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from . import certificates
from .connection import Connection
from .errors import InvalidArgument
from .types import Address, Options, VerifyMode
from .utils.http_proxy import redact_proxy_url

logger = logging.getLogger(__name__)


class ConnectionBuilder:
    def __init__(self, address: Address, options: Options | Mapping[str, Any] | None = None) -> None:
        if not isinstance(address, Address):
            raise InvalidArgument(
                f"address must be a netconn Address, got {type(address).__name__}; "
                "use Address.parse() for URL strings"
            )
        if options is None:
            config = Options()
        elif isinstance(options, Options):
            config = options
        elif isinstance(options, Mapping):
            config = Options.from_mapping(options)
        else:
            raise InvalidArgument(f"options must be Options or a mapping, got {type(options).__name__}")

        self._address = address
        self._options = options if options is not None else config
        self._config = config

    @classmethod
    def call(cls, address: Address, options: Options | Mapping[str, Any] | None = None) -> Connection:
        """Shortcut for ``ConnectionBuilder(address, options).connection()``."""
        return cls(address, options).connection()

    @property
    def address(self) -> Address:
        return self._address

    @property
    def options(self) -> Options | Mapping[str, Any]:
        """The options exactly as they were passed in."""
        return self._options

    def connection(self) -> Connection:
        conn = self._new_connection()
        self._configure_tls(conn)
        self._configure_timeouts(conn)
        self._configure_proxy(conn)
        self._configure_debug_output(conn)
        self._configure_pem(conn)
        return conn

    # ── Steps ─────────────────────────────────────────────────────────────────

    def _new_connection(self) -> Connection:
        config = self._config
        if config.has_proxy:
            return Connection(
                host=self._address.host,
                port=self._address.port,
                proxy_address=config.http_proxyaddr,
                proxy_port=config.http_proxyport,
            )
        return Connection(host=self._address.host, port=self._address.port)

    def _configure_tls(self, conn: Connection) -> None:
        if self._address.is_tls:
            conn.use_ssl = True
        logger.debug("Connection to %s (tls=%s)", self._address.authority, conn.use_ssl)

    def _configure_timeouts(self, conn: Connection) -> None:
        timeout = self._config.numeric_timeout
        if timeout is None:
            if self._config.timeout is not None:
                logger.debug("Ignoring non-numeric timeout %r", self._config.timeout)
            return
        conn.open_timeout = timeout
        conn.read_timeout = timeout

    def _configure_proxy(self, conn: Connection) -> None:
        config = self._config
        if not config.has_proxy:
            if config.http_proxyaddr is not None or config.http_proxyport is not None:
                logger.debug("Ignoring proxy settings without both http_proxyaddr and http_proxyport")
            return
        if config.http_proxyuser is not None:
            conn.proxy_user = config.http_proxyuser
        if config.http_proxypass is not None:
            conn.proxy_pass = config.http_proxypass
        logger.debug(
            "Routing through proxy %s",
            redact_proxy_url(config.http_proxyaddr, config.http_proxyport, conn.proxy_user),
        )

    def _configure_debug_output(self, conn: Connection) -> None:
        sink = self._config.debug_sink
        if sink is None:
            if self._config.debug_output is not None:
                logger.debug("Ignoring debug_output without a write method: %r", self._config.debug_output)
            return
        conn.set_debug_output(sink)

    def _configure_pem(self, conn: Connection) -> None:
        config = self._config
        if not self._address.is_tls or config.pem is None:
            return
        conn.cert = certificates.parse_certificate(config.pem)
        if config.pem_password is not None:
            conn.key = certificates.parse_key(config.pem, config.pem_password)
        else:
            conn.key = certificates.parse_key(config.pem)
        conn.verify_mode = VerifyMode.PEER
        logger.debug("Client certificate configured; peer verification enabled")
