"""Tests for :mod:`socialgraph.auth`."""

from unittest import TestCase, mock

from flask import Flask
from werkzeug.exceptions import Forbidden, Unauthorized

from socialgraph import auth, tokens
from socialgraph.exceptions import Unauthenticated
from socialgraph.services import userstore

from .util import make_user, temporary_store


class TestAuthenticate(TestCase):
    """:func:`.auth.authenticate` resolves a token to a user."""

    def setUp(self):
        self._store = temporary_store()
        self.store = self._store.__enter__()
        self.user = make_user(self.store)

    def tearDown(self):
        self._store.__exit__(None, None, None)

    def test_valid_token(self):
        """The context carries the user and the raw token."""
        token = tokens.issue(self.user.id, 'foosecret')
        context = auth.authenticate(token, self.store, 'foosecret')
        self.assertEqual(context.user.id, self.user.id)
        self.assertEqual(context.token, token)

    def test_no_token(self):
        """An absent header is refused."""
        with self.assertRaises(Unauthenticated):
            auth.authenticate(None, self.store, 'foosecret')
        with self.assertRaises(Unauthenticated):
            auth.authenticate('', self.store, 'foosecret')

    def test_invalid_token(self):
        """A token that does not verify is refused."""
        with self.assertRaises(Unauthenticated):
            auth.authenticate('Bogus', self.store, 'foosecret')

    def test_unknown_user(self):
        """A valid token for a user that does not exist is refused."""
        token = tokens.issue('nobody', 'foosecret')
        with self.assertRaises(Unauthenticated):
            auth.authenticate(token, self.store, 'foosecret')


class TestDecorators(TestCase):
    """The route decorators never call the route without a user."""

    def setUp(self):
        self._store = temporary_store()
        self.store = self._store.__enter__()
        self.user = make_user(self.store)
        self.admin = make_user(self.store, is_admin=True)
        self.app = Flask('test')
        self.app.config['JWT_SECRET'] = 'foosecret'
        self.app.extensions[userstore.EXTENSION] = self.store

    def tearDown(self):
        self._store.__exit__(None, None, None)

    def _headers(self, user_id):
        return {'Authorization': tokens.issue(user_id, 'foosecret')}

    def test_authenticated_without_token(self):
        """The route is not called, and Unauthorized is raised."""
        route = mock.MagicMock()
        protected = auth.authenticated(route)
        with self.app.test_request_context('/'):
            with self.assertRaises(Unauthorized):
                protected()
        route.assert_not_called()

    def test_authenticated_with_bad_token(self):
        """A bad token is treated like no token."""
        route = mock.MagicMock()
        protected = auth.authenticated(route)
        with self.app.test_request_context(
                '/', headers={'Authorization': 'Bogus'}):
            with self.assertRaises(Unauthorized):
                protected()
        route.assert_not_called()

    def test_authenticated(self):
        """The context is attached to the request before the route runs."""
        from flask import request

        def route(user_id):
            return request.auth.user.id, user_id

        protected = auth.authenticated(route)
        with self.app.test_request_context(
                '/', headers=self._headers(self.user.id)):
            self.assertEqual(protected(user_id='foo'), (self.user.id, 'foo'))

    def test_admin_required_for_non_admin(self):
        """A regular user is forbidden."""
        route = mock.MagicMock()
        protected = auth.admin_required(route)
        with self.app.test_request_context(
                '/', headers=self._headers(self.user.id)):
            with self.assertRaises(Forbidden):
                protected()
        route.assert_not_called()

    def test_admin_required_without_token(self):
        """No token is still Unauthorized, not Forbidden."""
        route = mock.MagicMock()
        protected = auth.admin_required(route)
        with self.app.test_request_context('/'):
            with self.assertRaises(Unauthorized):
                protected()
        route.assert_not_called()

    def test_admin_required_for_admin(self):
        """An admin gets through."""
        route = mock.MagicMock(return_value='ok')
        protected = auth.admin_required(route)
        with self.app.test_request_context(
                '/', headers=self._headers(self.admin.id)):
            self.assertEqual(protected(), 'ok')
        route.assert_called_once()
