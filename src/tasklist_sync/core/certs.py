# src/tasklist_sync/core/certs.py

"""
TLS certificate helpers.

Used to pin a self-signed server: fetch its certificate once (without
verification), show the fingerprint to the user, then pass the PEM as
ClientConfig.ca.
"""

from __future__ import annotations

import asyncio
import logging
import ssl

import httpx
from cryptography import x509
from cryptography.hazmat.primitives import hashes

logger = logging.getLogger(__name__)

DEFAULT_HTTPS_PORT = 443


async def get_certificate(server_url: str, *, timeout: float = 10.0) -> str | None:
    """
    Get the server's certificate in PEM format.

    Returns None for non-https URLs or when the server can't be reached.
    """
    url = httpx.URL(server_url)
    if url.scheme != "https" or not url.host:
        return None

    address = (url.host, url.port or DEFAULT_HTTPS_PORT)
    try:
        return await asyncio.to_thread(ssl.get_server_certificate, address, timeout=timeout)
    except (OSError, ssl.SSLError) as e:
        logger.warning("Failed to fetch certificate from %s:%s: %s", address[0], address[1], e)
        return None


def fingerprint(pem: str) -> str:
    """SHA-256 fingerprint of a PEM certificate, as colon separated hex."""
    cert = x509.load_pem_x509_certificate(pem.encode("ascii"))
    return cert.fingerprint(hashes.SHA256()).hex(":").upper()
