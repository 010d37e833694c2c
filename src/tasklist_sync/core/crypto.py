# src/tasklist_sync/core/crypto.py

"""
Passphrase-based encryption of the serialized task list.

The envelope is an ASCII-armored OpenPGP message with a symmetric
(passphrase) session key, the same format other clients of the server
produce and read:

    -----BEGIN PGP MESSAGE-----

    <radix-64 packets>
    -----END PGP MESSAGE-----

Each call picks a fresh S2K salt and session key, so encrypting the same
text twice gives two different envelopes.

S2K key derivation is CPU heavy; both directions run in a worker thread so
the event loop is only suspended, never blocked.
"""

from __future__ import annotations

import asyncio
import logging

import pgpy
from pgpy.constants import HashAlgorithm, SymmetricKeyAlgorithm

from .errors import DecryptionError

logger = logging.getLogger(__name__)

ARMOR_BEGIN = "-----BEGIN PGP MESSAGE-----"

CIPHER = SymmetricKeyAlgorithm.AES256
S2K_HASH = HashAlgorithm.SHA256


def encrypt_sync(data: str, passphrase: str) -> str:
    message = pgpy.PGPMessage.new(data)
    encrypted = message.encrypt(passphrase, cipher=CIPHER, hash=S2K_HASH)
    return str(encrypted)


def decrypt_sync(envelope: str, passphrase: str) -> str:
    if not looks_encrypted(envelope):
        raise DecryptionError("Malformed encrypted message")

    # PGPy raises a mix of its own, struct and builtin errors on bad packets.
    try:
        message = pgpy.PGPMessage.from_blob(envelope)
    except Exception as e:
        raise DecryptionError("Malformed encrypted message") from e

    if not message.is_encrypted:
        raise DecryptionError("Message is not encrypted")

    try:
        plain = message.decrypt(passphrase).message
    except Exception as e:
        raise DecryptionError("Wrong encryption key or corrupted data") from e

    # Literal data in binary mode comes back as bytes.
    if isinstance(plain, (bytes, bytearray)):
        try:
            return bytes(plain).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionError("Decrypted data is not valid UTF-8") from e
    if not isinstance(plain, str):
        raise DecryptionError("Decrypted message has no literal data")
    return plain


async def encrypt(data: str, passphrase: str) -> str:
    return await asyncio.to_thread(encrypt_sync, data, passphrase)


async def decrypt(envelope: str, passphrase: str) -> str:
    """Decrypt an armored OpenPGP message. Raises DecryptionError."""
    return await asyncio.to_thread(decrypt_sync, envelope, passphrase)


def looks_encrypted(text: str) -> bool:
    return text.lstrip().startswith(ARMOR_BEGIN)
