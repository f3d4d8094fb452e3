"""
Token authentication of user requests.

:func:`authenticate` turns the raw value of an ``Authorization`` header into
an :class:`.AuthContext`, or raises :class:`.Unauthenticated`. It has no side
effects; a request that fails authentication never reaches the route.

Flask routes are protected with the :func:`authenticated` and
:func:`admin_required` decorators:

.. code-block:: python

   @blueprint.route('/requests/<string:user_id>', methods=['GET'])
   @authenticated
   def get_requests(user_id: str) -> tuple:
       caller = request.auth.user
       ...

When the decorated route function is called...

- If the header is missing, or the token does not verify, or the token names
  a user that does not exist, an :class:`Unauthorized` exception is raised.
- For :func:`admin_required`, if the user is not an admin a
  :class:`Forbidden` exception is raised.
- Otherwise the :class:`.AuthContext` is attached to the Flask request object
  as ``request.auth`` and the route is called with its original parameters.

"""

from typing import Any, Callable, NamedTuple, Optional
from functools import wraps
import logging

from flask import current_app, request
from werkzeug.exceptions import Forbidden, Unauthorized

from . import domain, tokens
from .exceptions import InvalidToken, Unauthenticated
from .services.userstore import UserStore, current_store

logger = logging.getLogger(__name__)


class AuthContext(NamedTuple):
    """The authenticated caller of a request."""

    user: domain.User
    token: str


def authenticate(header: Optional[str], store: UserStore,
                 secret: str) -> AuthContext:
    """
    Resolve an ``Authorization`` header value to a user.

    The header carries the raw token; no ``Bearer`` prefix is expected.

    Raises
    ------
    :class:`.Unauthenticated`
        The header is absent, the token is not valid, or the user it names
        does not exist.

    """
    try:
        user_id = tokens.verify(header, secret)
    except InvalidToken as e:
        raise Unauthenticated(str(e)) from e
    user = store.get(user_id)
    if user is None:
        raise Unauthenticated(f'Token names unknown user {user_id}')
    return AuthContext(user=user, token=header)  # type: ignore


def _authenticate_request() -> AuthContext:
    try:
        return authenticate(request.headers.get('Authorization'),
                            current_store(),
                            current_app.config['JWT_SECRET'])
    except Unauthenticated as e:
        logger.debug('Not authenticated: %s', e)
        raise Unauthorized('please authenticate using valid token') from e


def authenticated(func: Callable) -> Callable:
    """Require a valid token on requests to the decorated route."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        request.auth = _authenticate_request()
        return func(*args, **kwargs)
    return wrapper


def admin_required(func: Callable) -> Callable:
    """Require a valid token for an admin user."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        auth = _authenticate_request()
        if not auth.user.is_admin:
            logger.debug('User %s is not an admin', auth.user.id)
            raise Forbidden('You are not allowed to do that')
        request.auth = auth
        return func(*args, **kwargs)
    return wrapper
