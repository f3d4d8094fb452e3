"""
Persistence for user records.

:class:`.UserStore` exposes user records as documents: each user carries its
``followers``, ``followings`` and ``requests`` lists, and those lists are
changed with :meth:`.UserStore.push` and :meth:`.UserStore.pull`. Every
public method is its own transaction and touches a single user record, so a
caller that needs to change two records makes two calls.

The store is created explicitly and handed to whatever needs it. In the web
application, :func:`init_app` builds one from the Flask config and
:func:`current_store` fetches it for the current application.
"""

from typing import Generator, Iterable, List, Optional
from contextlib import contextmanager
from datetime import datetime, timezone
import logging
import uuid

from flask import Flask, current_app
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .. import domain
from ..exceptions import EmailInUse, NotFound, SocialGraphError, StoreError
from .models import Base, DBListEntry, DBUser

logger = logging.getLogger(__name__)

EXTENSION = 'userstore'


class UserStore:
    """Reads and atomic single-record updates on user records."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_uri(cls, uri: str, echo: bool = False) -> 'UserStore':
        """Create a store for the database at ``uri``."""
        if uri in ('sqlite://', 'sqlite:///:memory:'):
            # An in-memory database only exists on its connection, so every
            # session has to share that one connection.
            engine = create_engine(uri, echo=echo,
                                   connect_args={'check_same_thread': False},
                                   poolclass=StaticPool)
        elif uri.startswith('sqlite'):
            engine = create_engine(uri, echo=echo,
                                   connect_args={'check_same_thread': False,
                                                 'timeout': 30})
        else:
            engine = create_engine(uri, echo=echo, pool_pre_ping=True)
        return cls(engine)

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """Context manager for database transaction."""
        session = self._sessions()
        try:
            yield session
            session.commit()
        except SocialGraphError as e:
            logger.debug('Rolling back: %s', e)
            session.rollback()
            raise
        except Exception as e:
            logger.error('Commit failed, rolling back: %s', str(e))
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        """Create all tables in the database."""
        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        """Drop all tables in the database."""
        Base.metadata.drop_all(self.engine)

    def close(self) -> None:
        """Release all pooled connections."""
        self.engine.dispose()

    def is_available(self) -> bool:
        """Check our connection to the database."""
        try:
            with self.transaction() as session:
                session.execute(text('SELECT 1'))
        except Exception as e:
            logger.error('Encountered an error talking to database: %s', e)
            return False
        return True

    def get(self, user_id: str) -> Optional[domain.User]:
        """Get a user by id, or ``None`` if there is no such user."""
        try:
            with self.transaction() as session:
                db_user = session.get(DBUser, user_id)
                if db_user is None:
                    return None
                return _to_domain(db_user)
        except SQLAlchemyError as e:
            raise StoreError(f'Could not load user {user_id}') from e

    def find_one(self, email: str) -> Optional[domain.User]:
        """Get the user with an email address, if there is one."""
        try:
            with self.transaction() as session:
                db_user = session.query(DBUser) \
                    .filter(DBUser.email == email) \
                    .first()
                if db_user is None:
                    return None
                return _to_domain(db_user)
        except SQLAlchemyError as e:
            raise StoreError('Could not query users by email') from e

    def find(self, ids: Optional[Iterable[str]] = None,
             exclude: Iterable[str] = ()) -> List[domain.User]:
        """
        Get users in signup order.

        Parameters
        ----------
        ids : iterable or None
            If given, only these users are returned. Unknown ids are ignored.
        exclude : iterable
            Ids of users to leave out.

        """
        try:
            with self.transaction() as session:
                query = session.query(DBUser)
                if ids is not None:
                    query = query.filter(DBUser.user_id.in_(list(ids)))
                excluded = list(exclude)
                if excluded:
                    query = query.filter(DBUser.user_id.notin_(excluded))
                query = query.order_by(DBUser.created, DBUser.user_id)
                return [_to_domain(db_user) for db_user in query.all()]
        except SQLAlchemyError as e:
            raise StoreError('Could not query users') from e

    def create(self, name: str, email: str, password_hash: str,
               is_admin: bool = False) -> domain.User:
        """
        Add a new user record.

        Raises
        ------
        :class:`.EmailInUse`
            Another user already has ``email``.
        :class:`.StoreError`
            When there is some other problem.

        """
        db_user = DBUser(
            user_id=uuid.uuid4().hex,
            name=name,
            email=email,
            password_hash=password_hash,
            is_admin=is_admin,
            created=datetime.now(tz=timezone.utc)
        )
        try:
            with self.transaction() as session:
                session.add(db_user)
        except IntegrityError as e:
            raise EmailInUse(f'{email} is already in use') from e
        except SQLAlchemyError as e:
            raise StoreError('Could not create user') from e
        logger.info('Created user %s', db_user.user_id)
        return domain.User(
            id=db_user.user_id,
            name=name,
            email=email,
            password_hash=password_hash,
            is_admin=is_admin,
            created=db_user.created
        )

    def push(self, user_id: str, field: str,
             entry: domain.Connection) -> bool:
        """
        Add ``entry`` to the end of a relationship list.

        Returns ``False`` and leaves the list alone if an entry with the same
        id is already there. The check and the write happen in the database
        in one statement, so two concurrent pushes of the same id cannot both
        succeed.

        Raises
        ------
        :class:`.NotFound`
            There is no user ``user_id``.
        :class:`.StoreError`
            When there is some other problem.

        """
        _check_field(field)
        if entry.id == user_id:
            raise ValueError(f'{user_id} cannot be in its own {field}')
        try:
            with self.transaction() as session:
                if session.get(DBUser, user_id) is None:
                    raise NotFound(f'No such user {user_id}')
                session.add(DBListEntry(owner_id=user_id, field=field,
                                        entry_id=entry.id,
                                        entry_name=entry.name))
        except IntegrityError:
            logger.debug('%s already in %s of %s', entry.id, field, user_id)
            return False
        except SQLAlchemyError as e:
            raise StoreError(f'Could not update {field} of {user_id}') from e
        return True

    def pull(self, user_id: str, field: str,
             entry_id: str) -> Optional[domain.Connection]:
        """
        Remove the entry for ``entry_id`` from a relationship list.

        Returns the removed entry, or ``None`` if there was nothing to remove.
        """
        _check_field(field)
        try:
            with self.transaction() as session:
                db_entry = session.query(DBListEntry) \
                    .filter(DBListEntry.owner_id == user_id) \
                    .filter(DBListEntry.field == field) \
                    .filter(DBListEntry.entry_id == entry_id) \
                    .first()
                if db_entry is None:
                    return None
                removed = domain.Connection(id=db_entry.entry_id,
                                            name=db_entry.entry_name)
                session.delete(db_entry)
        except SQLAlchemyError as e:
            raise StoreError(f'Could not update {field} of {user_id}') from e
        return removed


def _check_field(field: str) -> None:
    if field not in domain.LIST_FIELDS:
        raise ValueError(f'Not a relationship list: {field}')


def _to_domain(db_user: DBUser) -> domain.User:
    lists: dict = {field: [] for field in domain.LIST_FIELDS}
    for db_entry in db_user.entries:
        lists[db_entry.field].append(
            domain.Connection(id=db_entry.entry_id, name=db_entry.entry_name)
        )
    created = db_user.created
    if created is not None and created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)    # SQLite drops it.
    return domain.User(
        id=db_user.user_id,
        name=db_user.name,
        email=db_user.email,
        password_hash=db_user.password_hash,
        is_admin=bool(db_user.is_admin),
        created=created,
        **lists
    )


def init_app(app: Flask) -> UserStore:
    """Create the store from the application config and attach it."""
    store = UserStore.from_uri(app.config['SQLALCHEMY_DATABASE_URI'],
                               echo=app.config.get('SQLALCHEMY_ECHO', False))
    app.extensions[EXTENSION] = store
    return store


def current_store() -> UserStore:
    """Get the store attached to the current application."""
    store: UserStore = current_app.extensions[EXTENSION]
    return store
