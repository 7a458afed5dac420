"""High-level orchestration service for execution sessions.

``ExecutionService`` is the application-facing API of the execution core. It
exposes the four external operations and delegates every state transition to
the ``SessionStore``.

Workflow
--------

- ``start_session``:

  1. Resolves the ``PolicyConfig`` for the request through the
     ``PolicyProvider``.
  2. Creates a session whose actions are classified, clamped and budgeted.
  3. Returns the first decision.

- ``report_outcome``: records one execution result (or none, to re-read the
  current decision) and returns the next decision.

- ``approve_action`` / ``resume_session``: resolve approval gates and
  checkpoints, or merge host context such as a manual stop request.

``ExecutionService`` is intentionally thin: it does not contain policy or
decision logic itself.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..core.logging_config import get_logger
from ..core.monitoring import log_session_event
from .errors import InvalidOutcomeError
from .policy.provider import PolicyProvider
from .schemas.domain import SessionStatus
from .schemas.plan import Plan
from .session.models import ActionOutcome, SessionDecision, SessionStartRequest
from .session.store import SessionStore

logger = get_logger(__name__)


class ExecutionService:
    """Drive sessions from plan submission to a terminal status."""

    def __init__(self, *, policy_provider: PolicyProvider, store: Optional[SessionStore] = None) -> None:
        self._policy_provider = policy_provider
        self._store = store if store is not None else SessionStore()

    @property
    def store(self) -> SessionStore:
        return self._store

    def start_session(self, request: SessionStartRequest, plan: Plan) -> SessionDecision:
        """Create a session for ``plan`` and return its first decision."""
        policy_config = self._policy_provider.get(request)
        decision = self._store.create(request, plan, policy_config)
        log_session_event(
            "Session created",
            decision.session_id,
            mode=request.mode.value,
            actions=len(plan.actions),
            status=decision.status.value,
        )
        return self._observe(decision)

    def report_outcome(
        self,
        session_id: str,
        action_index: Optional[int] = None,
        ok: Optional[bool] = None,
        message: Optional[str] = None,
    ) -> SessionDecision:
        """
        Record the result of executing one action.

        Without ``action_index`` nothing is recorded and the current decision
        is returned.

        Raises:
            InvalidOutcomeError: ``action_index`` is given without ``ok``.
        """
        outcome = None
        if action_index is not None:
            if ok is None:
                logger.warning(f"Session {session_id}: outcome for action {action_index} is missing 'ok'")
                raise InvalidOutcomeError(f"Outcome for action {action_index} must state whether it succeeded.")
            outcome = ActionOutcome(action_index=action_index, ok=ok, message=message)
        return self._observe(self._store.next(session_id, outcome))

    def approve_action(self, session_id: str, action_index: int, approved: bool) -> SessionDecision:
        decision = self._store.approve(session_id, action_index, approved)
        log_session_event("Action approval resolved", session_id, action_index=action_index, approved=approved)
        return self._observe(decision)

    def resume_session(self, session_id: str, context: Optional[Mapping[str, Any]] = None) -> SessionDecision:
        return self._observe(self._store.resume(session_id, context))

    def _observe(self, decision: SessionDecision) -> SessionDecision:
        if decision.status in (SessionStatus.completed, SessionStatus.failed):
            logger.info(f"Session {decision.session_id} is {decision.status.value}: {decision.message}")
            log_session_event(
                "Session finished",
                decision.session_id,
                status=decision.status.value,
                stop_condition=decision.matched_stop_condition.type if decision.matched_stop_condition else None,
            )
        else:
            logger.debug(f"Session {decision.session_id} is {decision.status.value}: {decision.message}")
        return decision
