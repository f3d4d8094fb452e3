"""Tests for :mod:`socialgraph.services.userstore`."""

from unittest import TestCase, mock

from sqlalchemy.exc import OperationalError

from socialgraph import domain
from socialgraph.domain import FOLLOWERS, FOLLOWINGS, REQUESTS
from socialgraph.exceptions import EmailInUse, NotFound, StoreError
from socialgraph.services.userstore import UserStore

from .util import make_user, temporary_store


class TestCreateAndGet(TestCase):
    """Users are created and loaded by id or email."""

    def test_create(self):
        """A new user gets an id and empty relationship lists."""
        with temporary_store() as store:
            user = store.create(name='Alice', email='a@x.com',
                                password_hash='1$abc')
            self.assertTrue(user.id)
            self.assertFalse(user.is_admin)
            self.assertIsNotNone(user.created)

            loaded = store.get(user.id)
            self.assertEqual(loaded.name, 'Alice')
            self.assertEqual(loaded.email, 'a@x.com')
            self.assertEqual(loaded.password_hash, '1$abc')
            self.assertEqual(loaded.followers, [])
            self.assertEqual(loaded.followings, [])
            self.assertEqual(loaded.requests, [])

    def test_email_is_unique(self):
        """A second user with the same email cannot be created."""
        with temporary_store() as store:
            store.create(name='Alice', email='a@x.com', password_hash='h')
            with self.assertRaises(EmailInUse):
                store.create(name='Alicia', email='a@x.com',
                             password_hash='h')
            self.assertEqual(len(store.find()), 1)

    def test_get_unknown(self):
        """Getting a user that does not exist returns None."""
        with temporary_store() as store:
            self.assertIsNone(store.get('nope'))

    def test_find_one_by_email(self):
        """Users can be found by email."""
        with temporary_store() as store:
            user = make_user(store)
            self.assertEqual(store.find_one(email=user.email).id, user.id)
            self.assertIsNone(store.find_one(email='nobody@example.com'))

    def test_find(self):
        """Users can be listed by id, or all but some."""
        with temporary_store() as store:
            alice, bob, carol = [make_user(store) for _ in range(3)]
            self.assertEqual([u.id for u in store.find()],
                             [alice.id, bob.id, carol.id])
            self.assertEqual([u.id for u in store.find(exclude=[bob.id])],
                             [alice.id, carol.id])
            self.assertEqual(
                {u.id for u in store.find(ids=[carol.id, 'nope'])},
                {carol.id}
            )
            self.assertEqual(store.find(ids=[]), [])


class TestPushAndPull(TestCase):
    """Relationship lists are changed one entry at a time."""

    def setUp(self):
        self._store = temporary_store()
        self.store = self._store.__enter__()
        self.alice = make_user(self.store, name='Alice')
        self.bob = make_user(self.store, name='Bob')

    def tearDown(self):
        self._store.__exit__(None, None, None)

    def test_push(self):
        """An entry is appended to the list."""
        self.assertTrue(
            self.store.push(self.alice.id, REQUESTS, self.bob.connection())
        )
        alice = self.store.get(self.alice.id)
        self.assertEqual(alice.requests,
                         [domain.Connection(id=self.bob.id, name='Bob')])
        self.assertEqual(alice.followers, [])

    def test_push_keeps_order(self):
        """Entries come back in the order they were pushed."""
        carol = make_user(self.store, name='Carol')
        self.store.push(self.alice.id, FOLLOWERS, carol.connection())
        self.store.push(self.alice.id, FOLLOWERS, self.bob.connection())
        self.assertEqual(
            [e.id for e in self.store.get(self.alice.id).followers],
            [carol.id, self.bob.id]
        )

    def test_push_duplicate(self):
        """Pushing an id already in the list changes nothing."""
        self.store.push(self.alice.id, FOLLOWERS, self.bob.connection())
        self.assertFalse(
            self.store.push(self.alice.id, FOLLOWERS, self.bob.connection())
        )
        self.assertEqual(len(self.store.get(self.alice.id).followers), 1)

    def test_same_id_in_different_lists(self):
        """Lists are independent of one another."""
        self.assertTrue(
            self.store.push(self.alice.id, FOLLOWERS, self.bob.connection())
        )
        self.assertTrue(
            self.store.push(self.alice.id, FOLLOWINGS, self.bob.connection())
        )

    def test_push_self(self):
        """A user cannot be pushed into their own list."""
        with self.assertRaises(ValueError):
            self.store.push(self.alice.id, FOLLOWERS, self.alice.connection())

    def test_push_unknown_field(self):
        """Only relationship lists can be pushed to."""
        with self.assertRaises(ValueError):
            self.store.push(self.alice.id, 'friends', self.bob.connection())

    def test_push_unknown_user(self):
        """The owner of the list must exist."""
        with self.assertRaises(NotFound):
            self.store.push('nope', FOLLOWERS, self.bob.connection())

    def test_push_unknown_user_is_not_a_store_failure(self):
        """An unknown owner is rolled back quietly, not logged as an error."""
        with mock.patch('socialgraph.services.userstore.logger') as logger:
            with self.assertRaises(NotFound):
                self.store.push('nope', FOLLOWERS, self.bob.connection())
        self.assertFalse(logger.error.called)

    def test_pull(self):
        """The entry is removed and returned."""
        self.store.push(self.alice.id, REQUESTS, self.bob.connection())
        removed = self.store.pull(self.alice.id, REQUESTS, self.bob.id)
        self.assertEqual(removed, self.bob.connection())
        self.assertEqual(self.store.get(self.alice.id).requests, [])

    def test_pull_missing(self):
        """Pulling an id that is not there returns None."""
        self.assertIsNone(self.store.pull(self.alice.id, REQUESTS,
                                          self.bob.id))


class TestStoreFailures(TestCase):
    """Database problems are raised as :class:`.StoreError`."""

    def test_get_when_db_is_unavailable(self):
        """When the database squawks, raises a StoreError."""
        with temporary_store() as store:
            with mock.patch.object(store, '_sessions') as mock_sessions:
                mock_sessions.return_value.get.side_effect = \
                    OperationalError('statement', {}, None)
                with self.assertRaises(StoreError):
                    store.get('abc')

    def test_is_available(self):
        """Availability reflects whether a query succeeds."""
        with temporary_store() as store:
            self.assertTrue(store.is_available())
            with mock.patch.object(store, '_sessions') as mock_sessions:
                mock_sessions.return_value.execute.side_effect = \
                    OperationalError('statement', {}, None)
                self.assertFalse(store.is_available())

    def test_in_memory_database_is_shared(self):
        """Every session uses the one connection of an in-memory database."""
        store = UserStore.from_uri('sqlite:///:memory:')
        self.assertEqual(type(store.engine.pool).__name__, 'StaticPool')
        store.close()
