"""Provides routes for the users API."""

from flask import Blueprint, current_app, request
from flask.json import jsonify

from .auth import admin_required, authenticated
from .controllers import registration, relationships, users
from .services.userstore import current_store

blueprint = Blueprint('users', __name__, url_prefix='/api/users')


def _payload() -> dict:
    data = request.get_json(force=True, silent=True)    # Ignore Content-Type.
    return data if isinstance(data, dict) else {}


@blueprint.route('/status', methods=['GET'])
def ok() -> tuple:
    """Health check endpoint."""
    data, status_code, headers = users.service_status(current_store())
    return jsonify(data), status_code, headers


@blueprint.route('/', methods=['GET'])
@admin_required
def list_users() -> tuple:
    """List every user. Admins only."""
    data, status_code, headers = users.list_users(current_store())
    return jsonify(data), status_code, headers


@blueprint.route('/signup', methods=['POST'])
def signup() -> tuple:
    """Create a new user and log them in."""
    data, status_code, headers = registration.signup(
        current_store(), _payload(),
        secret=current_app.config['JWT_SECRET'],
        expires=current_app.config['JWT_EXPIRES'],
        iterations=current_app.config['PASSWORD_HASH_ITERATIONS']
    )
    return jsonify(data), status_code, headers


@blueprint.route('/login', methods=['POST'])
def login() -> tuple:
    """Log in with email and password."""
    data, status_code, headers = registration.login(
        current_store(), _payload(),
        secret=current_app.config['JWT_SECRET'],
        expires=current_app.config['JWT_EXPIRES']
    )
    return jsonify(data), status_code, headers


@blueprint.route('/friends/<string:user_id>', methods=['GET'])
@authenticated
def get_friends(user_id: str) -> tuple:
    """Users that ``user_id`` follows."""
    data, status_code, headers = \
        relationships.get_friends(current_store(), user_id)
    return jsonify(data), status_code, headers


@blueprint.route('/others-friends/<string:user_id>', methods=['GET'])
def get_others_friends(user_id: str) -> tuple:
    """Users that ``user_id`` follows, for anyone to see."""
    data, status_code, headers = \
        relationships.get_friends(current_store(), user_id)
    return jsonify(data), status_code, headers


@blueprint.route('/suggestions/<string:user_id>', methods=['GET'])
def get_suggestions(user_id: str) -> tuple:
    """Users that ``user_id`` might want to follow."""
    data, status_code, headers = relationships.get_suggestions(
        current_store(), user_id,
        policy=current_app.config['SUGGESTION_POLICY']
    )
    return jsonify(data), status_code, headers


@blueprint.route('/requests/<string:user_id>', methods=['GET'])
@authenticated
def get_requests(user_id: str) -> tuple:
    """Pending requests to follow ``user_id``."""
    data, status_code, headers = \
        relationships.get_requests(current_store(), user_id)
    return jsonify(data), status_code, headers


@blueprint.route('/<string:target_id>/request', methods=['POST'])
@authenticated
def send_request(target_id: str) -> tuple:
    """Ask to follow ``target_id``."""
    data, status_code, headers = \
        relationships.send_request(current_store(), target_id, _payload(),
                                   caller_id=request.auth.user.id)
    return jsonify(data), status_code, headers


@blueprint.route('/<string:target_id>/accept', methods=['PUT'])
@authenticated
def accept_request(target_id: str) -> tuple:
    """Accept a request to follow ``target_id``."""
    data, status_code, headers = \
        relationships.accept_request(current_store(), target_id, _payload(),
                                     caller_id=request.auth.user.id)
    return jsonify(data), status_code, headers


@blueprint.route('/<string:target_id>/decline', methods=['PUT'])
@authenticated
def decline_request(target_id: str) -> tuple:
    """Decline a request to follow ``target_id``."""
    data, status_code, headers = \
        relationships.decline_request(current_store(), target_id, _payload(),
                                      caller_id=request.auth.user.id)
    return jsonify(data), status_code, headers


@blueprint.route('/<string:target_id>/unfollow', methods=['PUT'])
@authenticated
def unfollow(target_id: str) -> tuple:
    """Stop following ``target_id``."""
    data, status_code, headers = \
        relationships.unfollow(current_store(), target_id, _payload(),
                               caller_id=request.auth.user.id)
    return jsonify(data), status_code, headers
