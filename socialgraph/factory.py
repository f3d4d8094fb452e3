"""Application factory for the social graph app."""

from typing import Any
import logging

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException

from . import routes
from .controllers.util import error_response, SERVER_ERROR
from .exceptions import SocialGraphError
from .services import userstore

logger = logging.getLogger(__name__)


def create_web_app(**config: Any) -> Flask:
    """
    Initialize and configure the social graph application.

    Keyword arguments override values from :mod:`socialgraph.config`.
    """
    app = Flask('socialgraph')
    app.config.from_pyfile('config.py')
    app.config.update(config)
    logging.getLogger('socialgraph').setLevel(app.config['LOGLEVEL'])

    store = userstore.init_app(app)
    app.register_blueprint(routes.blueprint)

    if app.config['CREATE_DB']:
        store.create_all()

    register_error_handlers(app)
    return app


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""
    app.errorhandler(HTTPException)(jsonify_exception)
    app.errorhandler(SocialGraphError)(jsonify_service_error)
    app.errorhandler(Exception)(jsonify_unexpected)


def jsonify_exception(error: HTTPException) -> Response:
    """Render exceptions as JSON."""
    exc_resp = error.get_response()
    response: Response = jsonify(reason=error.description)
    response.status_code = exc_resp.status_code
    return response


def jsonify_service_error(error: SocialGraphError) -> Response:
    """Render errors that escaped a controller, e.g. from the auth gate."""
    data, status_code, _ = error_response(error)
    response: Response = jsonify(data)
    response.status_code = status_code
    return response


def jsonify_unexpected(error: Exception) -> Response:
    """Render anything else as a 500 with no detail."""
    logger.exception('Unhandled exception: %s', error)
    response: Response = jsonify(SERVER_ERROR)
    response.status_code = 500
    return response
