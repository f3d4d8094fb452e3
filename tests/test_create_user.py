"""Tests for the :mod:`create_user` script."""

import os
import tempfile
from unittest import TestCase

from click.testing import CliRunner

from create_user import create_user
from socialgraph import tokens
from socialgraph.services.userstore import UserStore


class TestCreateUser(TestCase):
    """Create users from the command line."""

    def setUp(self):
        fd, self.db_path = tempfile.mkstemp(suffix='.db')
        os.close(fd)
        self.env = {'SQLALCHEMY_DATABASE_URI': f'sqlite:///{self.db_path}',
                    'JWT_SECRET': 'foosecret',
                    'PASSWORD_HASH_ITERATIONS': '1000'}
        self.runner = CliRunner()

    def tearDown(self):
        os.remove(self.db_path)

    def _invoke(self, *args):
        return self.runner.invoke(create_user,
                                  ['--name', 'Ada', '--email', 'ada@x.com',
                                   '--password', 'secret', *args],
                                  env=self.env)

    def test_create_admin(self):
        """An admin user is created and a valid token is printed."""
        result = self._invoke('--admin')
        self.assertEqual(result.exit_code, 0, result.output)

        lines = result.output.strip().splitlines()
        user_id = lines[0].split()[-1]
        self.assertEqual(tokens.verify(lines[1], 'foosecret'), user_id)

        store = UserStore.from_uri(self.env['SQLALCHEMY_DATABASE_URI'])
        try:
            user = store.get(user_id)
        finally:
            store.close()
        self.assertEqual(user.email, 'ada@x.com')
        self.assertTrue(user.is_admin)

    def test_email_in_use(self):
        """The same email cannot be used twice."""
        self.assertEqual(self._invoke().exit_code, 0)
        result = self._invoke()
        self.assertEqual(result.exit_code, 1)
        self.assertIn('ada@x.com is already in use', result.output)
