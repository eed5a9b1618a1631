"""
HTTP proxy configuration for httpx clients.

Turns the discrete proxy host/port/credential settings of a connection
into the ``httpx.Proxy`` value that ``httpx.Client(proxy=...)`` expects.
"""

from __future__ import annotations

from urllib.parse import quote

import httpx


def get_proxy_url(address: str, port: int, scheme: str = "http") -> str:
    """Return the proxy URL for the given host and port."""
    host = f"[{address}]" if ":" in address else address
    return f"{scheme}://{host}:{port}"


def make_proxy(
    address: str,
    port: int,
    user: str | None = None,
    password: str | None = None,
) -> httpx.Proxy:
    """Create an httpx.Proxy; a user enables basic auth, the password defaults to empty."""
    auth = (user, password or "") if user is not None else None
    return httpx.Proxy(get_proxy_url(address, port), auth=auth)


def redact_proxy_url(address: str, port: int, user: str | None = None) -> str:
    """Proxy URL safe for logs: the user is shown, never the password."""
    url = get_proxy_url(address, port)
    if user is None:
        return url
    scheme, _, rest = url.partition("://")
    return f"{scheme}://{quote(user, safe='')}:***@{rest}"
