"""Master key derivation (Argon2id) and vault encryption (AES-256-GCM)."""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.argon2 import Argon2id

from .constants import AUTH_TAG_LEN, MASTER_KEY_LEN, NONCE_LEN

# Default Argon2id parameters: 19 MiB of memory, 2 passes, 1 lane.
_ARGON2_MEMORY_KIB = 19 * 1024
_ARGON2_ITERATIONS = 2
_ARGON2_LANES = 1
_MIN_SALT_LEN = 8


class CryptoError(Exception):
    """Raised when key derivation, encryption or decryption fails."""


def derive_key(password: str, salt: bytes) -> bytes:
    """Derive a master key of MASTER_KEY_LEN bytes from a password and salt."""
    salt = bytes(salt)
    if len(salt) < _MIN_SALT_LEN:
        raise CryptoError(
            f"Argon2 key derivation failed: salt is too short ({len(salt)} bytes)"
        )
    try:
        kdf = Argon2id(
            salt=salt,
            length=MASTER_KEY_LEN,
            iterations=_ARGON2_ITERATIONS,
            lanes=_ARGON2_LANES,
            memory_cost=_ARGON2_MEMORY_KIB,
        )
        return kdf.derive(password.encode("utf-8"))
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise CryptoError(f"Argon2 key derivation failed: {exc}") from exc


def _cipher(key: bytes) -> AESGCM:
    if len(key) != MASTER_KEY_LEN:
        raise CryptoError(
            f"Invalid key length: expected {MASTER_KEY_LEN} bytes, got {len(key)}"
        )
    return AESGCM(bytes(key))


def encrypt_data(key: bytes, plaintext: bytes) -> tuple[bytes, bytes, bytes]:
    """Encrypt plaintext under a fresh random nonce.

    Returns (nonce, ciphertext, auth_tag).
    """
    cipher = _cipher(key)
    nonce = os.urandom(NONCE_LEN)
    try:
        sealed = cipher.encrypt(nonce, bytes(plaintext), None)
    except (ValueError, OverflowError) as exc:
        raise CryptoError(f"Failed to encrypt data: {exc}") from exc
    return nonce, sealed[:-AUTH_TAG_LEN], sealed[-AUTH_TAG_LEN:]


def decrypt_data(key: bytes, nonce: bytes, ciphertext: bytes, auth_tag: bytes) -> bytes:
    """Authenticate and decrypt ciphertext; raise CryptoError on any failure."""
    cipher = _cipher(key)
    if len(nonce) != NONCE_LEN:
        raise CryptoError(
            f"Invalid nonce length: expected {NONCE_LEN} bytes, got {len(nonce)}"
        )
    try:
        return cipher.decrypt(bytes(nonce), bytes(ciphertext) + bytes(auth_tag), None)
    except InvalidTag as exc:
        raise CryptoError("Failed to decrypt data: authentication failed") from exc
    except (ValueError, OverflowError) as exc:
        raise CryptoError(f"Failed to decrypt data: {exc}") from exc