"""
Follow requests and follow relationships between users.

Every transition takes the id of the **target** user, the id of the **actor**
and a :class:`.UserStore`. The actor is the user who wants to follow (or stop
following) the target:

- :func:`send_request` puts the actor in ``target.requests``.
- :func:`accept_request` moves the actor from ``target.requests`` to
  ``target.followers`` and adds the target to ``actor.followings``.
- :func:`decline_request` drops the actor from ``target.requests``.
- :func:`unfollow` removes the actor from ``target.followers`` and the target
  from ``actor.followings``.

The store only updates one record at a time. Transitions that touch more than
one list go through a :class:`.Transition`, which undoes the steps already
applied if a later one fails and then raises :class:`.PartialTransition`.
"""

from typing import Callable, List, Optional, Tuple
import logging

from . import domain
from .domain import FOLLOWERS, FOLLOWINGS, REQUESTS
from .exceptions import AlreadyConnected, AlreadyRequested, NotConnected, \
    NotFound, PartialTransition, SelfAction, StoreError
from .services.userstore import UserStore

logger = logging.getLogger(__name__)

FIRST_FOLLOWING = 'first_following'
EXCLUDE_FOLLOWINGS = 'exclude_followings'
SUGGESTION_POLICIES = (FIRST_FOLLOWING, EXCLUDE_FOLLOWINGS)


class Transition:
    """
    A sequence of single-record updates that should apply together.

    Each successful step registers its inverse. When a step fails, the steps
    already applied are undone newest first and :class:`.PartialTransition`
    is raised. If the very first step fails there is nothing to undo, and the
    original error propagates unchanged.

    Undoing a pull pushes the entry back, so it returns at the end of its
    list rather than at its old place.
    """

    def __init__(self, store: UserStore, name: str) -> None:
        self.store = store
        self.name = name
        self.applied: List[Tuple[str, Callable[[], object]]] = []

    def push(self, user_id: str, field: str,
             entry: domain.Connection) -> bool:
        """Push onto a list; see :meth:`.UserStore.push`."""
        step = f'push {entry.id} onto {field} of {user_id}'
        changed = self._run(step,
                            lambda: self.store.push(user_id, field, entry))
        if changed:
            self.applied.append(
                (step, lambda: self.store.pull(user_id, field, entry.id))
            )
        return bool(changed)

    def pull(self, user_id: str, field: str,
             entry_id: str) -> Optional[domain.Connection]:
        """Pull from a list; see :meth:`.UserStore.pull`."""
        step = f'pull {entry_id} from {field} of {user_id}'
        removed = self._run(step,
                            lambda: self.store.pull(user_id, field, entry_id))
        if removed is not None:
            self.applied.append(
                (step, lambda: self.store.push(user_id, field, removed))
            )
        return removed

    def _run(self, step: str, operation: Callable) -> object:
        try:
            return operation()
        except (StoreError, NotFound) as e:
            if not self.applied:
                raise
            logger.error('%s: "%s" failed: %s', self.name, step, e)
            rolled_back = self.rollback()
            raise PartialTransition(self.name,
                                    [done for done, _ in self.applied],
                                    step, rolled_back) from e

    def rollback(self) -> bool:
        """Undo applied steps. Returns ``False`` if any could not be undone."""
        complete = True
        for step, undo in reversed(self.applied):
            try:
                undo()
            except (StoreError, NotFound) as e:
                logger.error('%s: could not undo "%s": %s', self.name, step, e)
                complete = False
        return complete


def _refuse_self(target_id: str, actor_id: str, action: str) -> None:
    if target_id == actor_id:
        raise SelfAction(f'{actor_id} cannot {action} themselves')


def _load(store: UserStore, user_id: str) -> domain.User:
    user = store.get(user_id)
    if user is None:
        raise NotFound(f'No such user {user_id}')
    return user


def send_request(store: UserStore, target_id: str, actor_id: str) -> None:
    """
    Ask to follow ``target_id`` on behalf of ``actor_id``.

    Raises
    ------
    :class:`.SelfAction`
    :class:`.NotFound`
        Either user does not exist.
    :class:`.AlreadyConnected`
        The actor already follows the target.
    :class:`.AlreadyRequested`
        The actor already has a pending request with the target.

    """
    _refuse_self(target_id, actor_id, 'send a request to')
    target = _load(store, target_id)
    actor = _load(store, actor_id)
    if target.has_follower(actor_id):
        raise AlreadyConnected(f'{actor_id} already follows {target_id}')
    if target.has_request_from(actor_id):
        raise AlreadyRequested(f'{actor_id} already asked to follow '
                               f'{target_id}')
    if not store.push(target_id, REQUESTS, actor.connection()):
        raise AlreadyRequested(f'{actor_id} already asked to follow '
                               f'{target_id}')
    logger.info('%s asked to follow %s', actor_id, target_id)


def accept_request(store: UserStore, target_id: str,
                   actor_id: str) -> List[domain.Connection]:
    """
    Let ``actor_id`` follow ``target_id``.

    Returns the target's pending requests after the actor's has been removed.

    Raises
    ------
    :class:`.SelfAction`
    :class:`.NotFound`
    :class:`.AlreadyConnected`
        The actor already follows the target. Also raised for the loser of two
        concurrent accepts of the same pair.
    :class:`.PartialTransition`

    """
    _refuse_self(target_id, actor_id, 'follow')
    target = _load(store, target_id)
    actor = _load(store, actor_id)
    if target.has_follower(actor_id):
        raise AlreadyConnected(f'{actor_id} already follows {target_id}')

    transition = Transition(store, 'accept')
    if not transition.push(target_id, FOLLOWERS, actor.connection()):
        raise AlreadyConnected(f'{actor_id} already follows {target_id}')
    transition.pull(target_id, REQUESTS, actor_id)
    transition.push(actor_id, FOLLOWINGS, target.connection())
    logger.info('%s now follows %s', actor_id, target_id)
    return _load(store, target_id).requests


def decline_request(store: UserStore, target_id: str,
                    actor_id: str) -> List[domain.Connection]:
    """
    Drop any pending request from ``actor_id`` to follow ``target_id``.

    Declining a request that does not exist is not an error. Returns the
    target's pending requests.
    """
    _refuse_self(target_id, actor_id, 'decline')
    _load(store, target_id)
    if store.pull(target_id, REQUESTS, actor_id) is not None:
        logger.info('%s declined %s', target_id, actor_id)
    return _load(store, target_id).requests


def unfollow(store: UserStore, target_id: str, actor_id: str) -> None:
    """
    Stop ``actor_id`` following ``target_id``.

    Raises
    ------
    :class:`.SelfAction`
    :class:`.NotFound`
    :class:`.NotConnected`
        The actor does not follow the target.
    :class:`.PartialTransition`

    """
    _refuse_self(target_id, actor_id, 'unfollow')
    target = _load(store, target_id)
    _load(store, actor_id)
    if not target.has_follower(actor_id):
        raise NotConnected(f'{actor_id} does not follow {target_id}')

    transition = Transition(store, 'unfollow')
    transition.pull(target_id, FOLLOWERS, actor_id)
    transition.pull(actor_id, FOLLOWINGS, target_id)
    logger.info('%s unfollowed %s', actor_id, target_id)


def _resolve(store: UserStore,
             entries: List[domain.Connection]) -> List[domain.Connection]:
    """Look up current names. Entries for missing users are dropped."""
    ids = [entry.id for entry in entries]
    users = {user.id: user for user in store.find(ids=ids)}
    return [users[user_id].connection() for user_id in ids
            if user_id in users]


def list_friends(store: UserStore, user_id: str) -> List[domain.Connection]:
    """Get the users that ``user_id`` follows."""
    return _resolve(store, _load(store, user_id).followings)


def list_requests(store: UserStore, user_id: str) -> List[domain.Connection]:
    """Get the users waiting for ``user_id`` to accept their request."""
    return _resolve(store, _load(store, user_id).requests)


def list_suggestions(store: UserStore, user_id: str,
                     policy: str = FIRST_FOLLOWING) \
        -> List[domain.Connection]:
    """
    Get users that ``user_id`` might want to follow.

    With the ``first_following`` policy, everyone except the first user in
    ``followings`` is suggested; that includes the user themselves and the
    rest of the users they already follow. If they follow nobody, everyone is
    suggested. With ``exclude_followings``, the user and everyone they follow
    are left out.
    """
    if policy not in SUGGESTION_POLICIES:
        raise ValueError(f'Unknown suggestion policy: {policy}')
    user = _load(store, user_id)
    if policy == EXCLUDE_FOLLOWINGS:
        exclude = [user.id] + [entry.id for entry in user.followings]
    elif user.followings:
        exclude = [user.followings[0].id]
    else:
        exclude = []
    return [other.connection() for other in store.find(exclude=exclude)]
