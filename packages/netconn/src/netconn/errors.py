"""
Exception hierarchy for netconn.
"""
from __future__ import annotations


class NetconnError(Exception):
    """Base class for all netconn errors."""


class InvalidArgument(NetconnError, ValueError):
    """Raised when a builder or address receives an unusable argument."""


class CertificateError(NetconnError, ValueError):
    """Raised when PEM certificate or key material cannot be parsed."""
