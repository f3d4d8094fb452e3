"""Web Server Gateway Interface entry-point."""

import atexit

from socialgraph import app_logging
from socialgraph.factory import create_web_app
from socialgraph.services import userstore

__flask_app__ = create_web_app()
app_logging.setup_logger(__flask_app__.config['LOGLEVEL'],
                         json=__flask_app__.config['LOGJSON'])
atexit.register(__flask_app__.extensions[userstore.EXTENSION].close)


def application(environ, start_response):    # type: ignore
    """WSGI application."""
    return __flask_app__(environ, start_response)
