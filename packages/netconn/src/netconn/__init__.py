"""
netconn — configured HTTP(S) connections from an address and options.
"""

from .builder import ConnectionBuilder
from .certificates import parse_certificate, parse_key
from .connection import Connection
from .errors import CertificateError, InvalidArgument, NetconnError
from .types import DEFAULT_PORTS, Address, Options, VerifyMode

__version__ = "0.1.0"

__all__ = [
    "Address",
    "CertificateError",
    "Connection",
    "ConnectionBuilder",
    "DEFAULT_PORTS",
    "InvalidArgument",
    "NetconnError",
    "Options",
    "VerifyMode",
    "parse_certificate",
    "parse_key",
]
