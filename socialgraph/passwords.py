"""Password hashing."""

import hashlib
import hmac
import secrets
from base64 import b64encode, b64decode
from binascii import Error as Base64Error

from .exceptions import PasswordAuthenticationFailed

SALT_LENGTH = 16
DEFAULT_ITERATIONS = 260000


def _hash_salt_and_password(salt: bytes, password: str,
                            iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt,
                               iterations)


def hash_password(password: str,
                  iterations: int = DEFAULT_ITERATIONS) -> str:
    """
    Generate a salted hash of a password.

    The result is ``<iterations>$<base64(salt + digest)>``, so a stored hash
    can still be checked after the iteration count is raised.
    """
    salt = secrets.token_bytes(SALT_LENGTH)
    hashed = _hash_salt_and_password(salt, password, iterations)
    return f"{iterations}${b64encode(salt + hashed).decode('ascii')}"


def check_password(password: str, encrypted: str) -> bool:
    """Check a password against a hash made by :func:`hash_password`."""
    try:
        iterations, encoded = encrypted.split('$', 1)
        decoded = b64decode(encoded)
        rounds = int(iterations)
    except (ValueError, Base64Error) as e:
        raise PasswordAuthenticationFailed('Malformed password hash') from e

    salt = decoded[:SALT_LENGTH]
    enc_hashed = decoded[SALT_LENGTH:]
    pass_hashed = _hash_salt_and_password(salt, password, rounds)
    if not hmac.compare_digest(pass_hashed, enc_hashed):
        raise PasswordAuthenticationFailed('Incorrect password')
    return True
