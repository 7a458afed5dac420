"""Stop-condition matching.

Conditions are evaluated in the order the plan declares them and the first
match wins. Each condition type has a predicate and a human-readable reason
used in the resulting decision message.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence

from ..schemas.domain import ActionState, CheckStatus, risk_gt
from ..schemas.plan import (
    AllChecksPassedCondition,
    Check,
    ManualStopCondition,
    MaxIterationsCondition,
    NoProgressCondition,
    RiskThresholdCondition,
    StopCondition,
    UserDeniedCondition,
)
from ..session.models import REJECTED_BY_USER_MESSAGE, Session, SessionAction


def total_attempts(session: Session) -> int:
    return sum(item.attempts for item in session.actions)


def _has_pending(session: Session) -> bool:
    return any(item.state == ActionState.pending for item in session.actions)


def above_threshold(session: Session, condition: RiskThresholdCondition) -> List[int]:
    """Indices of unapproved actions whose risk exceeds the threshold, in any state."""
    return [
        index
        for index, item in enumerate(session.actions)
        if not item.approved and risk_gt(item.action.risk, condition.max_risk)
    ]


def _is_user_rejection(item: SessionAction) -> bool:
    return item.state == ActionState.failed and item.last_message == REJECTED_BY_USER_MESSAGE


def _all_checks_passed(session: Session, checks: Sequence[Check], condition: Any) -> bool:
    return (
        bool(checks)
        and all(check.status == CheckStatus.passed for check in checks)
        and not _has_pending(session)
    )


def _max_iterations(session: Session, checks: Sequence[Check], condition: MaxIterationsCondition) -> bool:  # noqa: ARG001
    return _has_pending(session) and total_attempts(session) >= condition.value


def _no_progress(session: Session, checks: Sequence[Check], condition: NoProgressCondition) -> bool:  # noqa: ARG001
    return (
        _has_pending(session)
        and not any(item.state == ActionState.succeeded for item in session.actions)
        and total_attempts(session) >= condition.iterations
    )


def _risk_threshold(session: Session, checks: Sequence[Check], condition: RiskThresholdCondition) -> bool:  # noqa: ARG001
    return bool(above_threshold(session, condition))


def _user_denied(session: Session, checks: Sequence[Check], condition: Any) -> bool:  # noqa: ARG001
    return any(_is_user_rejection(item) for item in session.actions)


def _manual_stop(session: Session, checks: Sequence[Check], condition: Any) -> bool:  # noqa: ARG001
    return session.request.manual_stop


_PREDICATES: Dict[type, Callable[[Session, Sequence[Check], Any], bool]] = {
    AllChecksPassedCondition: _all_checks_passed,
    MaxIterationsCondition: _max_iterations,
    NoProgressCondition: _no_progress,
    RiskThresholdCondition: _risk_threshold,
    UserDeniedCondition: _user_denied,
    ManualStopCondition: _manual_stop,
}


def match_stop_condition(session: Session, checks: Sequence[Check]) -> Optional[StopCondition]:
    """Return the first declared stop condition that holds, or None."""
    for condition in session.plan.stop_conditions:
        if _PREDICATES[type(condition)](session, checks, condition):
            return condition
    return None


def describe(condition: StopCondition, session: Session) -> str:
    """Explain why ``condition`` stopped the session."""
    if isinstance(condition, AllChecksPassedCondition):
        return "Stop condition all_checks_passed matched: every check passed."
    if isinstance(condition, MaxIterationsCondition):
        return (
            f"Stop condition max_iterations matched: {total_attempts(session)} attempt(s) reached the limit of "
            f"{condition.value} with actions still pending."
        )
    if isinstance(condition, NoProgressCondition):
        return (
            f"Stop condition no_progress matched: no action succeeded after "
            f"{total_attempts(session)} attempt(s)."
        )
    if isinstance(condition, RiskThresholdCondition):
        return (
            f"Stop condition risk_threshold matched: an unapproved action exceeds risk "
            f"{condition.max_risk.value}."
        )
    if isinstance(condition, UserDeniedCondition):
        return "Stop condition user_denied matched: an action was rejected by the user."
    return "Stop condition manual_stop matched: execution was stopped by the host."
