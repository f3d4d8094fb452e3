import pytest

from socialgraph.factory import create_web_app
from socialgraph.services import userstore


@pytest.fixture()
def app():
    return create_web_app(SQLALCHEMY_DATABASE_URI='sqlite://',
                          CREATE_DB=True,
                          JWT_SECRET='foosecret',
                          PASSWORD_HASH_ITERATIONS=1000,
                          TESTING=True)


@pytest.fixture()
def store(app):
    store = app.extensions[userstore.EXTENSION]
    yield store
    store.drop_all()
    store.close()


@pytest.fixture()
def client(app, store):
    return app.test_client()
