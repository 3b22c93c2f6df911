"""
Shared fixtures for the keybox-codegen test suite.

Provides a temporary keybox directory and a freshly generated EC
certificate/private-key pair (DER bytes plus PEM text) for tests that
need real credential material.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID


@dataclass(frozen=True, slots=True)
class EcCredentials:
    certificate_der: bytes
    certificate_pem: str
    private_key_der: bytes
    private_key_pem: str
    subject: str


@pytest.fixture()
def keybox_dir(tmp_path: Path) -> Path:
    """Empty directory standing in for KEYBOX_PATH."""
    directory = tmp_path / "keybox"
    directory.mkdir()
    return directory


@pytest.fixture()
def output_path(tmp_path: Path) -> Path:
    """Location of the generated artifact for a test run."""
    return tmp_path / "ec_constants.rs"


@pytest.fixture(scope="session")
def ec_credentials() -> EcCredentials:
    """Self-signed P-256 certificate and its PKCS#8 private key."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "keybox-codegen test")])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + datetime.timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    return EcCredentials(
        certificate_der=cert.public_bytes(serialization.Encoding.DER),
        certificate_pem=cert.public_bytes(serialization.Encoding.PEM).decode("ascii"),
        private_key_der=key.private_bytes(
            serialization.Encoding.DER,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        ),
        private_key_pem=key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        ).decode("ascii"),
        subject=cert.subject.rfc4514_string(),
    )
