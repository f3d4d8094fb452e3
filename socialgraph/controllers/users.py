"""Handles requests about user records."""

from http import HTTPStatus

from .. import domain
from ..exceptions import SocialGraphError
from ..services.userstore import UserStore
from .util import Response, error_response

STORE_OK = {'status': 'ok', 'store': 'available'}
STORE_DOWN = {'status': 'degraded', 'store': 'unavailable'}


def list_users(store: UserStore) -> Response:
    """Get the profiles of all users."""
    try:
        users = store.find()
    except SocialGraphError as e:
        return error_response(e)
    return [domain.UserProfile.from_user(user).to_dict() for user in users], \
        HTTPStatus.OK, {}


def service_status(store: UserStore) -> Response:
    """Health check."""
    if store.is_available():
        return STORE_OK, HTTPStatus.OK, {}
    return STORE_DOWN, HTTPStatus.SERVICE_UNAVAILABLE, {}
