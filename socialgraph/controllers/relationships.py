"""Handles follow requests and relationship listings."""

from typing import Any, Callable, List, Optional
from http import HTTPStatus
import logging

from .. import domain, relationships
from ..exceptions import Forbidden, SocialGraphError
from ..services.userstore import UserStore
from .util import Response, error_response

logger = logging.getLogger(__name__)

MISSING_ACTOR = {'reason': 'userId is required'}
NOT_ALLOWED = 'You are not allowed to do that'
REQUEST_SENT = 'your request has been sent'
REQUEST_ACCEPTED = 'request accepted'
REQUEST_DECLINED = 'request declined'
UNFOLLOWED = 'user has been unfollowed'


def _actor_id(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    actor_id = payload.get('userId')
    if not actor_id or not isinstance(actor_id, str):
        return None
    return actor_id


def _as_list(entries: List[domain.Connection]) -> List[dict]:
    return [entry.to_dict() for entry in entries]


def _listing(lister: Callable[..., List[domain.Connection]],
             store: UserStore, user_id: str, **kwargs: Any) -> Response:
    try:
        entries = lister(store, user_id, **kwargs)
    except SocialGraphError as e:
        return error_response(e)
    return _as_list(entries), HTTPStatus.OK, {}


def get_friends(store: UserStore, user_id: str) -> Response:
    """Get the ``{id, name}`` of everyone ``user_id`` follows."""
    return _listing(relationships.list_friends, store, user_id)


def get_requests(store: UserStore, user_id: str) -> Response:
    """Get the ``{id, name}`` of everyone waiting on ``user_id``."""
    return _listing(relationships.list_requests, store, user_id)


def get_suggestions(store: UserStore, user_id: str, policy: str) -> Response:
    """Get the ``{id, name}`` of users that ``user_id`` might follow."""
    return _listing(relationships.list_suggestions, store, user_id,
                    policy=policy)



def _require_caller(caller_id: str, party_id: str) -> None:
    """Only the user whose lists are being changed may ask for the change."""
    if caller_id != party_id:
        raise Forbidden(f'{caller_id} cannot act for {party_id}')


def send_request(store: UserStore, target_id: str, payload: Any,
                 caller_id: str) -> Response:
    """
    Ask to follow ``target_id``.

    Parameters
    ----------
    store : :class:`.UserStore`
    target_id : str
        The user to follow.
    payload : dict
        ``userId`` is the user who wants to follow.
    caller_id : str
        The authenticated user. Must be the one who wants to follow.

    Returns
    -------
    str or dict
        Confirmation, or the reason for failure.
    int
        An HTTP status code.
    dict
        Some extra headers to add to the response.

    """
    actor_id = _actor_id(payload)
    if actor_id is None:
        return MISSING_ACTOR, HTTPStatus.BAD_REQUEST, {}
    try:
        _require_caller(caller_id, actor_id)
        relationships.send_request(store, target_id, actor_id)
    except SocialGraphError as e:
        return error_response(e, reason=_reason(e))
    return REQUEST_SENT, HTTPStatus.OK, {}


def accept_request(store: UserStore, target_id: str, payload: Any,
                   caller_id: str) -> Response:
    """Let the ``userId`` in the payload follow ``target_id``, the caller."""
    actor_id = _actor_id(payload)
    if actor_id is None:
        return MISSING_ACTOR, HTTPStatus.BAD_REQUEST, {}
    try:
        _require_caller(caller_id, target_id)
        requests = relationships.accept_request(store, target_id, actor_id)
    except SocialGraphError as e:
        return error_response(e, reason=_reason(e))
    return {'message': REQUEST_ACCEPTED, 'requests': _as_list(requests)}, \
        HTTPStatus.OK, {}


def decline_request(store: UserStore, target_id: str, payload: Any,
                    caller_id: str) -> Response:
    """Drop the pending request of the ``userId`` in the payload."""
    actor_id = _actor_id(payload)
    if actor_id is None:
        return MISSING_ACTOR, HTTPStatus.BAD_REQUEST, {}
    try:
        _require_caller(caller_id, target_id)
        requests = relationships.decline_request(store, target_id, actor_id)
    except SocialGraphError as e:
        return error_response(e, reason=_reason(e))
    return {'message': REQUEST_DECLINED, 'requests': _as_list(requests)}, \
        HTTPStatus.OK, {}


def unfollow(store: UserStore, target_id: str, payload: Any,
             caller_id: str) -> Response:
    """Stop the ``userId`` in the payload following ``target_id``."""
    actor_id = _actor_id(payload)
    if actor_id is None:
        return MISSING_ACTOR, HTTPStatus.BAD_REQUEST, {}
    try:
        _require_caller(caller_id, actor_id)
        relationships.unfollow(store, target_id, actor_id)
    except SocialGraphError as e:
        return error_response(e, reason=_reason(e))
    return UNFOLLOWED, HTTPStatus.OK, {}


def _reason(error: SocialGraphError) -> Optional[str]:
    if isinstance(error, Forbidden):
        return NOT_ALLOWED
    return None
