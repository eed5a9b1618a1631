"""
PEM parsing for client certificates and private keys.

Thin wrappers over ``cryptography`` that normalise every parse failure
into :class:`~netconn.errors.CertificateError`.
"""
from __future__ import annotations

import os
import secrets
import ssl
import tempfile
from typing import Any

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from .errors import CertificateError


def parse_certificate(data: bytes) -> x509.Certificate:
    """Parse a PEM encoded X.509 certificate."""
    try:
        return x509.load_pem_x509_certificate(data)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise CertificateError(f"Invalid PEM certificate: {exc}") from exc


def parse_key(data: bytes, password: str | bytes | None = None) -> Any:
    """
    Parse a PEM encoded private key.

    ``password`` decrypts an encrypted key and is ignored for a plain one.
    A wrong or missing password on an encrypted key is a CertificateError.
    """
    if isinstance(password, str):
        password = password.encode("utf-8")
    try:
        return serialization.load_pem_private_key(data, password=password)
    except TypeError as exc:
        if password is None:
            raise CertificateError(f"Invalid PEM private key: {exc}") from exc
        # Password given for an unencrypted key
        try:
            return serialization.load_pem_private_key(data, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm):
            raise CertificateError(f"Invalid PEM private key: {exc}") from exc
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise CertificateError(f"Invalid PEM private key: {exc}") from exc


def private_key_bytes(key: Any) -> Any:
    """Unencrypted PKCS8 PEM of ``key``, usable for value comparison."""
    if not hasattr(key, "private_bytes"):
        return key
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def load_client_certificate(context: ssl.SSLContext, cert: x509.Certificate, key: Any) -> None:
    """Install an in-memory certificate/key pair on an SSL context."""
    # load_cert_chain only reads from disk; the key is stored encrypted with a one-time password
    one_time_password = secrets.token_bytes(32)
    fd, path = tempfile.mkstemp(suffix=".pem")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(cert.public_bytes(serialization.Encoding.PEM))
            f.write(
                key.private_bytes(
                    encoding=serialization.Encoding.PEM,
                    format=serialization.PrivateFormat.PKCS8,
                    encryption_algorithm=serialization.BestAvailableEncryption(one_time_password),
                )
            )
        context.load_cert_chain(certfile=path, password=one_time_password)
    except ssl.SSLError as exc:
        raise CertificateError(f"Certificate and key do not form a usable pair: {exc}") from exc
    finally:
        os.unlink(path)
