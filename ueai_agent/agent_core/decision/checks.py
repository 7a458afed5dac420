from __future__ import annotations

from typing import Callable, Dict, List

from ..schemas.domain import ActionState, CheckStatus, CheckType, RiskLevel
from ..schemas.plan import Check
from ..session.models import Session


def _constraint_status(session: Session) -> CheckStatus:
    if any(item.state == ActionState.failed for item in session.actions):
        return CheckStatus.failed
    return CheckStatus.passed


def _success_status(session: Session) -> CheckStatus:
    if any(item.state == ActionState.failed for item in session.actions):
        return CheckStatus.failed
    if not any(item.state == ActionState.pending for item in session.actions):
        return CheckStatus.passed
    return CheckStatus.pending


def _safety_status(session: Session) -> CheckStatus:
    high = [item for item in session.actions if item.action.risk == RiskLevel.high]
    if any(item.state == ActionState.failed for item in high):
        return CheckStatus.failed
    if any(item.state == ActionState.pending and not item.approved for item in high):
        return CheckStatus.pending
    return CheckStatus.passed


_CHECK_RULES: Dict[CheckType, Callable[[Session], CheckStatus]] = {
    CheckType.constraint: _constraint_status,
    CheckType.success: _success_status,
    CheckType.safety: _safety_status,
}


def evaluate_checks(session: Session) -> List[Check]:
    """Recompute every plan check from the session's current action states.

    Returns copies; the plan's own checks are left untouched.
    """
    return [check.model_copy(update={"status": _CHECK_RULES[check.type](session)}) for check in session.plan.checks]
