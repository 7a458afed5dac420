"""Execution-control core for the editor agent.

This package is the "engine room" that decides what a planner-proposed action
list may do against the editor.

Design overview
---------------

- The **policy** layer classifies every action: risk, auto-approval, clamped
  parameters, hard denials and the per-session change-unit budget.
- The **session** layer owns the mutable lifecycle of a running plan: retries,
  approvals, iteration windows and checkpoints.
- The **decision** layer reads a session and produces the single
  authoritative "what happens next" answer.

Typical usage
-------------

Most applications should use ``agent_core.service.ExecutionService`` (built by
``agent_core.factory.build_execution_service``):

1. Start a session with a request and a validated plan.
2. Execute the action named by the decision outside of this package.
3. Report the outcome, approve or reject gated actions, or resume.
4. Repeat until the decision is ``completed`` or ``failed``.
"""

from .errors import (
    ActionAlreadyResolvedError,
    InvalidActionReferenceError,
    InvalidOutcomeError,
    SessionError,
    SessionNotFoundError,
)
from .schemas.domain import ExecutionMode, RiskLevel, SessionStatus
from .service import ExecutionService
from .session.store import SessionStore

__all__ = [
    "ActionAlreadyResolvedError",
    "ExecutionMode",
    "ExecutionService",
    "InvalidActionReferenceError",
    "InvalidOutcomeError",
    "RiskLevel",
    "SessionError",
    "SessionNotFoundError",
    "SessionStatus",
    "SessionStore",
]
