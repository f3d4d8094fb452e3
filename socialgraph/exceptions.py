"""Exceptions."""

from typing import Dict, List, Optional


class SocialGraphError(RuntimeError):
    """Base class for errors raised by this service."""


class ValidationError(SocialGraphError):
    """Submitted data failed validation."""

    def __init__(self, message: str,
                 errors: Optional[Dict[str, List[str]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or {}


class Conflict(SocialGraphError):
    """The request conflicts with the current state of a record."""


class EmailInUse(Conflict):
    """Another user already has this email address."""


class SelfAction(Conflict):
    """A user attempted a relationship transition with themselves."""


class AlreadyConnected(Conflict):
    """The actor already follows the target."""


class AlreadyRequested(Conflict):
    """The actor already has a pending request to follow the target."""


class NotConnected(Conflict):
    """The actor does not follow the target."""


class NotFound(SocialGraphError):
    """User does not exist."""


class InvalidCredentials(SocialGraphError):
    """Failed to authenticate user with provided credentials."""


class PasswordAuthenticationFailed(InvalidCredentials):
    """Password is not correct."""


class InvalidToken(SocialGraphError):
    """Token is absent, malformed, expired, or has a bad signature."""


class Unauthenticated(SocialGraphError):
    """Request could not be tied to a known user."""


class Forbidden(SocialGraphError):
    """Authenticated user may not perform this action."""


class StoreError(SocialGraphError):
    """The record store failed to complete an operation."""


class PartialTransition(SocialGraphError):
    """
    A multi-step relationship transition stopped part way through.

    ``applied`` lists the steps that had completed when ``failed`` could not
    be carried out. ``rolled_back`` is ``True`` if every applied step was
    undone afterwards; if ``False`` the records need to be reconciled.
    """

    def __init__(self, transition: str, applied: List[str], failed: str,
                 rolled_back: bool) -> None:
        super().__init__(f'{transition} failed at "{failed}" after '
                         f'{len(applied)} applied step(s)')
        self.transition = transition
        self.applied = applied
        self.failed = failed
        self.rolled_back = rolled_back
