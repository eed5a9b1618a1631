"""
Root conftest.py — shared PEM fixtures and custom markers.

Markers:
  @pytest.mark.network — talks to real remote hosts; skipped unless NETWORK_TESTS=1
"""
from __future__ import annotations

import datetime
import os
from dataclasses import dataclass

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID


# ---------------------------------------------------------------------------
# PEM material
# ---------------------------------------------------------------------------

PEM_PASSWORD = "password"


@dataclass(frozen=True)
class PemBundle:
    cert_pem: bytes
    key_pem: bytes
    encrypted_key_pem: bytes

    @property
    def plain(self) -> bytes:
        """Certificate followed by an unencrypted key."""
        return self.cert_pem + self.key_pem

    @property
    def encrypted(self) -> bytes:
        """Certificate followed by a key encrypted with PEM_PASSWORD."""
        return self.cert_pem + self.encrypted_key_pem


def _make_bundle(common_name: str) -> PemBundle:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    return PemBundle(
        cert_pem=cert.public_bytes(serialization.Encoding.PEM),
        key_pem=key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ),
        encrypted_key_pem=key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.BestAvailableEncryption(PEM_PASSWORD.encode()),
        ),
    )


@pytest.fixture(scope="session")
def pem_bundle() -> PemBundle:
    return _make_bundle("client.netconn.test")


@pytest.fixture(scope="session")
def other_pem_bundle() -> PemBundle:
    return _make_bundle("other.netconn.test")


# ---------------------------------------------------------------------------
# Custom markers
# ---------------------------------------------------------------------------

def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "network: mark test as requiring outbound network access (run with NETWORK_TESTS=1 or --network flag)",
    )


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--network",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.network (requires internet access)",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip @pytest.mark.network tests unless --network flag or NETWORK_TESTS=1 is set."""
    run_network = config.getoption("--network") or os.environ.get("NETWORK_TESTS", "").lower() in ("1", "true", "yes")
    skip_network = pytest.mark.skip(reason="Network test — run with --network or NETWORK_TESTS=1")
    for item in items:
        if "network" in item.keywords and not run_network:
            item.add_marker(skip_network)
