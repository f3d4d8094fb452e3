"""Provides application for development purposes."""

from socialgraph import app_logging
from socialgraph.factory import create_web_app

app = create_web_app(CREATE_DB=True)
app_logging.setup_logger(app.config['LOGLEVEL'], json=app.config['LOGJSON'])
app.config['DEBUG'] = True

if __name__ == "__main__":
    app.run(debug=True)
