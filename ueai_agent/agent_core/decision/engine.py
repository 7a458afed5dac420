"""Decision engine.

``evaluate`` turns the current state of a session into the single
``SessionDecision`` the caller acts on next. It is pure: it reads the session,
never mutates it, and returns the same decision for the same state.

Evaluation order
----------------

1. Recompute the plan's checks from action states.
2. Match stop conditions in declaration order (first match wins).
3. Without a match, fall back to the action states: a failed action fails the
   session, no pending actions completes it, and otherwise the first pending
   action is either awaiting approval or ready to execute.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..schemas.domain import ActionState, SessionStatus
from ..schemas.plan import AllChecksPassedCondition, Check, RiskThresholdCondition, StopCondition
from ..session.models import IterationInfo, Session, SessionDecision
from .checks import evaluate_checks
from .stop_conditions import above_threshold, describe, match_stop_condition


def _first_index(session: Session, state: ActionState) -> Optional[int]:
    for index, item in enumerate(session.actions):
        if item.state == state:
            return index
    return None


def _join(*parts: Optional[str]) -> str:
    return " ".join(part for part in parts if part)


class _DecisionBuilder:
    """Fills the fields every decision shares."""

    def __init__(self, session: Session, checks: List[Check], matched: Optional[StopCondition]) -> None:
        self.session = session
        self.checks = checks
        self.matched = matched
        self.succeeded = sum(1 for item in session.actions if item.state == ActionState.succeeded)
        self.total = len(session.actions)

    @property
    def progress(self) -> str:
        return f"Progress: {self.succeeded}/{self.total} actions completed."

    def build(self, status: SessionStatus, message: str, action_index: Optional[int] = None) -> SessionDecision:
        session = self.session
        fields: Dict[str, Any] = {}
        if action_index is not None:
            item = session.actions[action_index]
            fields = {
                "next_action_index": action_index,
                "next_action": item.action,
                "next_action_state": item.state,
                "next_action_attempts": item.attempts,
                "next_action_approved": item.approved,
            }
        return SessionDecision(
            session_id=session.id,
            status=status,
            summary=session.plan.summary,
            steps=list(session.plan.steps),
            iteration=IterationInfo(
                current=session.current_iteration + 1,
                max=session.max_iterations,
                actions_per_iteration=session.actions_per_iteration,
                checkpoint_pending=session.checkpoint_pending,
                checkpoint_action_index=session.checkpoint_action_index,
            ),
            checks=self.checks,
            matched_stop_condition=self.matched,
            message=message,
            **fields,
        )


def _stopped(builder: _DecisionBuilder, condition: StopCondition) -> SessionDecision:
    session = builder.session
    reason = describe(condition, session)

    if isinstance(condition, AllChecksPassedCondition):
        return builder.build(SessionStatus.completed, _join(reason, builder.progress))

    if isinstance(condition, RiskThresholdCondition):
        for index in above_threshold(session, condition):
            item = session.actions[index]
            if item.state == ActionState.pending:
                message = _join(
                    f"Action {index + 1} exceeds the risk threshold "
                    f"(risk={item.action.risk.value} > {condition.max_risk.value}) and is waiting for approval.",
                    builder.progress,
                )
                return builder.build(SessionStatus.awaiting_approval, message, index)

    index = _first_index(session, ActionState.failed)
    if index is None:
        index = _first_index(session, ActionState.pending)
    return builder.build(SessionStatus.failed, _join(reason, builder.progress), index)


def evaluate(session: Session) -> SessionDecision:
    """Compute the next decision for ``session`` without changing it."""
    checks = evaluate_checks(session)
    matched = match_stop_condition(session, checks)
    builder = _DecisionBuilder(session, checks, matched)

    if matched is not None:
        return _stopped(builder, matched)

    failed_index = _first_index(session, ActionState.failed)
    if failed_index is not None:
        failed = session.actions[failed_index]
        message = _join(
            f"Action {failed_index + 1} failed after {failed.attempts} attempt(s).",
            f"Last error: {failed.last_message}" if failed.last_message else None,
            builder.progress,
        )
        return builder.build(SessionStatus.failed, message, failed_index)

    pending_index = _first_index(session, ActionState.pending)
    if pending_index is None:
        return builder.build(
            SessionStatus.completed, f"All actions are completed ({builder.succeeded}/{builder.total})."
        )

    pending = session.actions[pending_index]
    last_result = f"Last result: {pending.last_message}" if pending.last_message else None
    if not pending.approved:
        message = _join(
            f"Action {pending_index + 1} is waiting for approval (risk={pending.action.risk.value}).",
            last_result,
            builder.progress,
        )
        return builder.build(SessionStatus.awaiting_approval, message, pending_index)

    message = _join(
        f"Action {pending_index + 1} is ready to execute "
        f"(attempt {pending.attempts + 1}/{session.max_retries + 1}).",
        last_result,
        builder.progress,
    )
    return builder.build(SessionStatus.ready_to_execute, message, pending_index)
