"""Database models for user records."""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Enum, \
    ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship

from ..domain import LIST_FIELDS

Base = declarative_base()


class DBUser(Base):
    """A user and their credentials."""

    __tablename__ = 'users'

    user_id = Column(String(32), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    created = Column(DateTime(timezone=True), nullable=False)

    entries = relationship('DBListEntry', back_populates='owner',
                           order_by='DBListEntry.position',
                           lazy='selectin')


class DBListEntry(Base):
    """
    One ``{id, name}`` element of a user's relationship list.

    The unique constraint makes each list a set: pushing an id that is already
    in the list fails in the database, whichever writer gets there second.
    """

    __tablename__ = 'user_list_entries'
    __table_args__ = (
        UniqueConstraint('owner_id', 'field', 'entry_id',
                         name='uq_list_entry'),
        CheckConstraint('owner_id != entry_id', name='ck_no_self_entry'),
    )

    position = Column(Integer, primary_key=True, autoincrement=True)
    """Insertion order of the entry within its list."""

    owner_id = Column(ForeignKey('users.user_id'), nullable=False,
                      index=True)
    field = Column(Enum(*LIST_FIELDS, name='list_field'), nullable=False)
    entry_id = Column(String(32), nullable=False)
    entry_name = Column(String(255), nullable=False)

    owner = relationship('DBUser', back_populates='entries')
