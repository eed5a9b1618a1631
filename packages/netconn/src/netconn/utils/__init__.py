from .http_proxy import get_proxy_url, make_proxy, redact_proxy_url

__all__ = [
    "get_proxy_url",
    "make_proxy",
    "redact_proxy_url",
]
