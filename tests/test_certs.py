# tests/test_certs.py

from __future__ import annotations

import datetime
import ssl

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from tasklist_sync.config import ClientConfig
from tasklist_sync.core.certs import fingerprint, get_certificate
from tasklist_sync.core.client import _verify_option
from tasklist_sync.core.errors import HttpError


def _self_signed_pem() -> str:
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "localhost")])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + datetime.timedelta(days=1))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.PEM).decode("ascii")


def test_fingerprint_format() -> None:
    fp = fingerprint(_self_signed_pem())

    parts = fp.split(":")
    assert len(parts) == 32
    assert all(len(p) == 2 for p in parts)
    assert fp == fp.upper()


def test_ca_builds_dedicated_ssl_context() -> None:
    verify = _verify_option(ClientConfig(server="https://localhost:8000", ca=_self_signed_pem()))

    assert isinstance(verify, ssl.SSLContext)
    assert verify.verify_mode == ssl.CERT_REQUIRED
    assert len(verify.get_ca_certs()) == 1


@pytest.mark.asyncio
async def test_get_certificate_ignores_plain_http() -> None:
    assert await get_certificate("http://localhost:3000") is None


@pytest.mark.asyncio
async def test_get_certificate_unreachable_server() -> None:
    # Port 1 on localhost is not expected to accept connections.
    assert await get_certificate("https://127.0.0.1:1", timeout=1.0) is None


def test_invalid_ca_is_client_error() -> None:
    with pytest.raises(HttpError) as exc_info:
        _verify_option(ClientConfig(server="https://localhost:8000", ca="not a certificate"))

    assert exc_info.value.status == 500
