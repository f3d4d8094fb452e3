"""Functions for working with auth tokens on user requests."""

from typing import Optional
import secrets
import time

import jwt

from .exceptions import InvalidToken

ALGORITHM = 'HS256'


def issue(user_id: str, secret: str, expires: int = 0) -> str:
    """
    Encode a signed token asserting ``user_id``.

    Parameters
    ----------
    user_id : str
    secret : str
        Signing key.
    expires : int
        Lifetime of the token in seconds. If 0, the token does not expire.

    """
    now = int(time.time())
    claims = {
        'user_id': user_id,
        'iat': now,
        'nonce': secrets.token_hex(8)
    }
    if expires:
        claims['exp'] = now + expires
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def verify(token: Optional[str], secret: str) -> str:
    """Decode an auth token and get the user id that it asserts."""
    if not token:
        raise InvalidToken('No token')
    try:
        data: dict = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.exceptions.InvalidTokenError as e:
        raise InvalidToken('Not a valid token') from e

    user_id = data.get('user_id')
    if not user_id or not isinstance(user_id, str):
        raise InvalidToken('Token does not assert a user')
    return user_id
