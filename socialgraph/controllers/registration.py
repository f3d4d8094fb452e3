"""
Controllers for signup and login.

Users sign up with a name, email address and password, and log in with the
email address and password. Both return the user's profile together with a
freshly issued token, which the client sends back in the ``Authorization``
header.
"""

from typing import Any, Dict
from http import HTTPStatus
import logging

from werkzeug.datastructures import MultiDict
from wtforms import Form, PasswordField, StringField
from wtforms.validators import DataRequired, Email, Length

from .. import domain, passwords, tokens
from ..exceptions import EmailInUse, InvalidCredentials, SocialGraphError, \
    ValidationError
from ..services.userstore import UserStore
from .util import Response, error_response

logger = logging.getLogger(__name__)

EMAIL_IN_USE = 'email already in use'
INVALID_SIGNUP = 'invalid signup data'
INVALID_CREDENTIALS = 'invalid credentials'


class SignupForm(Form):
    """Signup data."""

    name = StringField('Name', validators=[DataRequired(), Length(min=3)])
    email = StringField('Email',
                        validators=[DataRequired(),
                                    Email(message='enter valid email')])
    password = PasswordField(
        'Password',
        validators=[DataRequired(),
                    Length(min=5,
                           message='password must be at least 5 characters')]
    )


def _as_form_data(payload: Any) -> MultiDict:
    if not isinstance(payload, dict):
        return MultiDict()
    return MultiDict({key: str(value) for key, value in payload.items()
                      if value is not None})


def _with_token(user: domain.User, secret: str, expires: int) -> Dict:
    data: dict = domain.UserProfile.from_user(user).to_dict()
    data['token'] = tokens.issue(user.id, secret, expires)
    return data


def signup(store: UserStore, payload: Any, secret: str,
           expires: int = 0,
           iterations: int = passwords.DEFAULT_ITERATIONS) -> Response:
    """
    Create a new user.

    Parameters
    ----------
    store : :class:`.UserStore`
    payload : dict
        Should contain ``name``, ``email`` and ``password``.
    secret : str
        Token signing key.
    expires : int
        Token lifetime in seconds; 0 for no expiry.
    iterations : int
        Password hashing iterations.

    Returns
    -------
    dict
        The new user's profile, plus ``token``.
    int
        An HTTP status code.
    dict
        Some extra headers to add to the response.

    """
    form = SignupForm(_as_form_data(payload))
    if not form.validate():
        logger.debug('Signup data not valid: %s', form.errors)
        return error_response(ValidationError(INVALID_SIGNUP, form.errors))

    try:
        if store.find_one(email=form.email.data) is not None:
            raise EmailInUse(EMAIL_IN_USE)
        user = store.create(
            name=form.name.data,
            email=form.email.data,
            password_hash=passwords.hash_password(form.password.data,
                                                  iterations)
        )
    except EmailInUse as e:
        return error_response(e, EMAIL_IN_USE)
    except SocialGraphError as e:
        return error_response(e)
    return _with_token(user, secret, expires), HTTPStatus.OK, {}


def login(store: UserStore, payload: Any, secret: str,
          expires: int = 0) -> Response:
    """
    Check a user's email and password, and issue a new token.

    An unknown email and a wrong password get the same response.
    """
    data = payload if isinstance(payload, dict) else {}
    email = data.get('email')
    password = data.get('password')
    try:
        if not isinstance(email, str) or not isinstance(password, str):
            raise InvalidCredentials('Missing email or password')
        user = store.find_one(email=email)
        if user is None:
            raise InvalidCredentials(f'No user with email {email}')
        passwords.check_password(password, user.password_hash)
    except InvalidCredentials as e:
        logger.debug('Login failed: %s', e)
        return error_response(e, INVALID_CREDENTIALS)
    except SocialGraphError as e:
        return error_response(e)
    logger.info('User %s logged in', user.id)
    return _with_token(user, secret, expires), HTTPStatus.OK, {}
