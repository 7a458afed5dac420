"""Error types for the execution session core.

Defines a small hierarchy of exceptions raised by the session store and the
execution service when a caller breaks the session contract (unknown session,
bad action index, action already resolved, malformed outcome). Policy denials
are *not* errors: they surface as failed actions in the normal decision.
"""

from __future__ import annotations


class SessionError(Exception):
    """Base error for all session contract violations."""


class SessionNotFoundError(SessionError):
    """Raised when no session exists for the given id."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session {session_id} was not found.")


class InvalidActionReferenceError(SessionError):
    """Raised when an action index does not exist in the session."""

    def __init__(self, action_index: int) -> None:
        self.action_index = action_index
        super().__init__(f"Action index {action_index} is out of range.")


class ActionAlreadyResolvedError(SessionError):
    """Raised when an operation targets an action that is no longer pending."""

    def __init__(self, action_index: int, state: str) -> None:
        self.action_index = action_index
        self.state = state
        super().__init__(f"Action {action_index} is already {state}.")


class InvalidOutcomeError(SessionError):
    """Raised for outcome reports that cannot be applied as given."""
