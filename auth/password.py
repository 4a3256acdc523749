"""
Password hashing and verification.

PBKDF2-HMAC-SHA256 with a random 16-byte salt and a 32-byte derived key.

Stored credential format::

    <hex salt>:<hex key>                  (10 000 iterations)
    <iterations>$<hex salt>:<hex key>     (any other work factor)

The untagged form is the legacy format, so existing credentials keep
verifying; the tagged form lets the work factor be raised later without
breaking them.
"""

from __future__ import annotations

import hmac
import os
from typing import Optional, Tuple

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

DEFAULT_ITERATIONS = 10000
SALT_BYTES = 16
KEY_BYTES = 32


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_BYTES,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))


def _parse(credential: str) -> Optional[Tuple[int, bytes, bytes]]:
    """Split a stored credential into (iterations, salt, key), or None if malformed."""
    if not isinstance(credential, str):
        return None

    iterations = DEFAULT_ITERATIONS
    body = credential
    if "$" in credential:
        prefix, body = credential.split("$", 1)
        if not prefix.isdigit() or int(prefix) <= 0:
            return None
        iterations = int(prefix)

    salt_hex, sep, key_hex = body.partition(":")
    if not sep or not salt_hex or not key_hex:
        return None
    try:
        return iterations, bytes.fromhex(salt_hex), bytes.fromhex(key_hex)
    except ValueError:
        return None


def hash_password(password: str, iterations: Optional[int] = None) -> str:
    """Derive a salted credential string for ``password``."""
    iterations = iterations or DEFAULT_ITERATIONS
    salt = os.urandom(SALT_BYTES)
    encoded = f"{salt.hex()}:{_derive(password, salt, iterations).hex()}"
    if iterations == DEFAULT_ITERATIONS:
        return encoded
    return f"{iterations}${encoded}"


def verify_password(password: str, credential: str) -> bool:
    """Constant-time check of ``password`` against a stored credential.

    Malformed credentials simply fail verification.
    """
    parsed = _parse(credential)
    if parsed is None or not isinstance(password, str):
        return False
    iterations, salt, expected = parsed
    return hmac.compare_digest(_derive(password, salt, iterations), expected)


def needs_rehash(credential: str, iterations: Optional[int] = None) -> bool:
    """True when ``credential`` was derived with a different work factor."""
    parsed = _parse(credential)
    if parsed is None:
        return False
    return parsed[0] != (iterations or DEFAULT_ITERATIONS)
