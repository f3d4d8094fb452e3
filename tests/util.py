"""Testing helpers."""

from contextlib import contextmanager
from itertools import count
from typing import Generator, Optional

from mimesis import Person

from socialgraph import domain, passwords
from socialgraph.services.userstore import UserStore

_serial = count()


@contextmanager
def temporary_store(database_url: str = 'sqlite://') \
        -> Generator[UserStore, None, None]:
    """Provide a user store on an empty database for testing purposes."""
    store = UserStore.from_uri(database_url)
    store.create_all()
    try:
        yield store
    finally:
        store.drop_all()
        store.close()


def make_user(store: UserStore, name: Optional[str] = None,
              password: str = 'secret', is_admin: bool = False) -> domain.User:
    """Add a user with a synthetic name and a unique email address."""
    return store.create(
        name=name or Person().full_name(),
        email=f'user{next(_serial)}@example.com',
        password_hash=passwords.hash_password(password, iterations=1000),
        is_admin=is_admin
    )
