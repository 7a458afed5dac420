"""In-memory session store.

``SessionStore`` owns the mutable lifecycle of every running plan:

- ``create``: classify the plan's actions through ``GlobalPolicy`` (including
  the session change budget), wrap them as ``SessionAction`` entries and
  compute the iteration layout.
- ``next``: apply an externally reported outcome, counting attempts against
  the retry budget.
- ``approve``: resolve an approval gate, or reject the action outright.
- ``resume``: merge an updated host context and re-evaluate.

Every operation advances the iteration cursor and returns a fresh
``SessionDecision`` computed by the decision engine.

Concurrency
-----------

Transitions are serialized per session id. A short table lock guards only the
id -> session mapping, so sessions never wait on each other.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Mapping, Optional, Tuple

from ...core.logging_config import get_logger
from ..decision.engine import evaluate
from ..errors import ActionAlreadyResolvedError, InvalidActionReferenceError, SessionNotFoundError
from ..policy.global_policy import GlobalPolicy
from ..policy.models import PolicyConfig
from ..schemas.domain import ActionState
from ..schemas.plan import Plan
from .iteration import actions_per_iteration_for, advance_iteration, max_iterations_for
from .models import (
    REJECTED_BY_USER_MESSAGE,
    ActionOutcome,
    Session,
    SessionAction,
    SessionDecision,
    SessionStartRequest,
)

logger = get_logger(__name__)


class SessionStore:
    """Create, mutate and look up sessions held in process memory."""

    def __init__(self, *, default_max_retries: int = 2) -> None:
        """
        Initialize an empty store.

        Args:
            default_max_retries: Retry budget for requests that do not carry one.
        """
        if default_max_retries < 0:
            raise ValueError("default_max_retries must be >= 0")
        self._default_max_retries = default_max_retries
        self._sessions: Dict[str, Session] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._table_lock = threading.Lock()

    def create(self, request: SessionStartRequest, plan: Plan, policy_config: PolicyConfig) -> SessionDecision:
        """
        Create a session for a validated plan and return its first decision.

        The plan and request are copied; the caller's objects are never
        referenced by the session.
        """
        plan = plan.model_copy(deep=True)
        request = request.model_copy(deep=True)

        policy = GlobalPolicy(policy_config)
        decisions = policy.classify_all(plan.actions, request.mode)
        actions = [
            SessionAction(
                action=decision.action,
                approved=decision.approved,
                state=ActionState.failed if decision.hard_denied else ActionState.pending,
                last_message=decision.message,
            )
            for decision in decisions
        ]

        max_iterations = max_iterations_for(plan)
        session = Session(
            request=request,
            plan=plan,
            max_retries=request.max_retries if request.max_retries is not None else self._default_max_retries,
            actions=actions,
            max_iterations=max_iterations,
            actions_per_iteration=actions_per_iteration_for(len(actions), max_iterations),
        )
        advance_iteration(session)

        with self._table_lock:
            self._sessions[session.id] = session
            self._locks[session.id] = threading.Lock()

        denied = sum(1 for d in decisions if d.hard_denied)
        gated = sum(1 for d in decisions if not d.hard_denied and not d.approved)
        logger.info(
            f"Created session {session.id} (mode={request.mode.value}, actions={len(actions)}, "
            f"gated={gated}, hard_denied={denied}, iterations={max_iterations})"
        )
        return evaluate(session)

    def next(self, session_id: str, outcome: Optional[ActionOutcome] = None) -> SessionDecision:
        """
        Record an execution outcome (if any) and return the next decision.

        Raises:
            SessionNotFoundError: Unknown session id.
            InvalidActionReferenceError: The outcome names an action that does not exist.
            ActionAlreadyResolvedError: The outcome names an action that is no longer pending.
        """
        session, lock = self._lookup(session_id)
        with lock:
            if outcome is not None:
                self._apply_outcome(session, outcome)
            advance_iteration(session)
            return evaluate(session)

    def approve(self, session_id: str, action_index: int, approved: bool) -> SessionDecision:
        """
        Approve or reject a pending action.

        Rejection fails the action immediately regardless of its retry budget.
        Either answer clears an iteration checkpoint held on this action.
        """
        session, lock = self._lookup(session_id)
        with lock:
            item = self._pending_action(session, action_index)
            item.approved = approved
            if not approved:
                item.state = ActionState.failed
                item.last_message = REJECTED_BY_USER_MESSAGE
                logger.info(f"Session {session_id}: action {action_index} rejected by user")
            else:
                logger.info(f"Session {session_id}: action {action_index} approved")
            if session.checkpoint_pending and session.checkpoint_action_index == action_index:
                session.checkpoint_pending = False
                session.checkpoint_action_index = None
            advance_iteration(session)
            return evaluate(session)

    def resume(self, session_id: str, context: Optional[Mapping[str, Any]] = None) -> SessionDecision:
        """Merge an updated host context, re-check the iteration cursor and re-evaluate."""
        session, lock = self._lookup(session_id)
        with lock:
            if context:
                merged = {**session.request.context, **dict(context)}
                session.request = session.request.model_copy(update={"context": merged})
                logger.debug(f"Session {session_id}: context updated ({', '.join(sorted(context))})")
            advance_iteration(session)
            return evaluate(session)

    def get(self, session_id: str) -> Session:
        """Return a deep copy of a session for inspection."""
        session, lock = self._lookup(session_id)
        with lock:
            return session.model_copy(deep=True)

    def __contains__(self, session_id: object) -> bool:
        with self._table_lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._table_lock:
            return len(self._sessions)

    def _lookup(self, session_id: str) -> Tuple[Session, threading.Lock]:
        with self._table_lock:
            session = self._sessions.get(session_id)
            if session is None:
                logger.warning(f"Session lookup failed: {session_id}")
                raise SessionNotFoundError(session_id)
            return session, self._locks[session_id]

    def _pending_action(self, session: Session, action_index: int) -> SessionAction:
        if action_index < 0 or action_index >= len(session.actions):
            logger.warning(f"Session {session.id}: action index {action_index} is out of range")
            raise InvalidActionReferenceError(action_index)
        item = session.actions[action_index]
        if item.state != ActionState.pending:
            logger.warning(f"Session {session.id}: action {action_index} is already {item.state.value}")
            raise ActionAlreadyResolvedError(action_index, item.state.value)
        return item

    def _apply_outcome(self, session: Session, outcome: ActionOutcome) -> None:
        item = self._pending_action(session, outcome.action_index)
        item.attempts += 1
        item.last_message = outcome.message

        if outcome.ok:
            item.state = ActionState.succeeded
            logger.debug(f"Session {session.id}: action {outcome.action_index} succeeded")
            return

        if item.attempts >= session.max_retries + 1:
            item.state = ActionState.failed
            logger.warning(
                f"Session {session.id}: action {outcome.action_index} failed after {item.attempts} attempt(s)"
            )
        else:
            logger.info(
                f"Session {session.id}: action {outcome.action_index} attempt {item.attempts} failed; "
                f"{session.max_retries + 1 - item.attempts} retry(ies) left"
            )
