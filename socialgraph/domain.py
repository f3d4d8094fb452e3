"""Defines user and connection concepts for the social graph."""

from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

FOLLOWERS = 'followers'
FOLLOWINGS = 'followings'
REQUESTS = 'requests'
LIST_FIELDS = (FOLLOWERS, FOLLOWINGS, REQUESTS)
"""Relationship lists carried on every :class:`.User`."""


class Connection(BaseModel):
    """An entry in one of a user's relationship lists."""

    id: str
    """Identifier of the other user."""

    name: str
    """Name of the other user, as captured when the entry was made."""

    def to_dict(self) -> dict:
        """Represent this entry as it appears in API responses."""
        return {'id': self.id, 'name': self.name}


def _contains(entries: List[Connection], user_id: str) -> bool:
    return any(entry.id == user_id for entry in entries)


class User(BaseModel):
    """A user record, including credentials. Never sent to clients."""

    id: str
    """Opaque identifier assigned at signup."""

    name: str

    email: str
    """Unique across all users."""

    password_hash: str
    """See :func:`socialgraph.passwords.hash_password`."""

    is_admin: bool = False

    created: Optional[datetime] = None

    followers: List[Connection] = []
    """Users who follow this user."""

    followings: List[Connection] = []
    """Users this user follows."""

    requests: List[Connection] = []
    """Pending requests from users who want to follow this user."""

    def connection(self) -> Connection:
        """Get the entry that represents this user in another user's list."""
        return Connection(id=self.id, name=self.name)

    def has_follower(self, user_id: str) -> bool:
        """Whether ``user_id`` follows this user."""
        return _contains(self.followers, user_id)

    def has_request_from(self, user_id: str) -> bool:
        """Whether ``user_id`` has a pending request to follow this user."""
        return _contains(self.requests, user_id)


class UserProfile(BaseModel):
    """
    The public projection of a :class:`.User`.

    This is the only representation of a user that leaves the service. It has
    no credential field, so there is nothing to strip before responding.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    is_admin: bool = Field(default=False, alias='isAdmin')
    followers: List[Connection] = []
    followings: List[Connection] = []
    requests: List[Connection] = []
    created: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> 'UserProfile':
        """Project a :class:`.User` onto its public fields."""
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            is_admin=user.is_admin,
            followers=user.followers,
            followings=user.followings,
            requests=user.requests,
            created=user.created
        )

    def to_dict(self) -> dict:
        """Serialize for a JSON response."""
        data: dict = self.model_dump(mode='json', by_alias=True)
        return data
