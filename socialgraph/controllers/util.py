"""Helpers shared by controllers."""

from typing import Dict, Optional, Tuple, Type
from http import HTTPStatus
import logging

from .. import exceptions

logger = logging.getLogger(__name__)

Response = Tuple[Optional[object], int, dict]

SERVER_ERROR = {'reason': 'something went wrong, please try again'}

STATUS_CODES: Dict[Type[exceptions.SocialGraphError], int] = {
    exceptions.ValidationError: HTTPStatus.BAD_REQUEST,
    exceptions.EmailInUse: HTTPStatus.BAD_REQUEST,
    exceptions.Conflict: HTTPStatus.FORBIDDEN,
    exceptions.InvalidCredentials: HTTPStatus.NOT_FOUND,
    exceptions.NotFound: HTTPStatus.NOT_FOUND,
    exceptions.InvalidToken: HTTPStatus.UNAUTHORIZED,
    exceptions.Unauthenticated: HTTPStatus.UNAUTHORIZED,
    exceptions.Forbidden: HTTPStatus.FORBIDDEN,
    exceptions.PartialTransition: HTTPStatus.CONFLICT,
}


def status_for(error: exceptions.SocialGraphError) -> int:
    """Get the HTTP status for an error, using its most specific class."""
    for klass in type(error).__mro__:
        if klass in STATUS_CODES:
            return STATUS_CODES[klass]
    return HTTPStatus.INTERNAL_SERVER_ERROR


def error_response(error: exceptions.SocialGraphError,
                   reason: Optional[str] = None) -> Response:
    """
    Render an error as response data.

    ``reason`` replaces the default message. Store failures and anything
    else that maps to a 500 get a generic body, so no internals are leaked.
    """
    code = status_for(error)
    if code == HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error('Unhandled error: %s', error, exc_info=error)
        return SERVER_ERROR, code, {}

    data: dict = {'reason': reason or str(error)}
    if isinstance(error, exceptions.ValidationError):
        data['errors'] = error.errors
    elif isinstance(error, exceptions.PartialTransition):
        data.update({
            'transition': error.transition,
            'applied': error.applied,
            'failed': error.failed,
            'rolledBack': error.rolled_back
        })
    return data, code, {}
