from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RiskLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


_RISK_ORDER = {RiskLevel.low: 0, RiskLevel.medium: 1, RiskLevel.high: 2}


def risk_ge(a: RiskLevel, b: RiskLevel) -> bool:
    """Check if risk level 'a' is greater than or equal to 'b'."""
    return _RISK_ORDER[a] >= _RISK_ORDER[b]


def risk_gt(a: RiskLevel, b: RiskLevel) -> bool:
    """Check if risk level 'a' is strictly greater than 'b'."""
    return _RISK_ORDER[a] > _RISK_ORDER[b]


def max_risk(a: RiskLevel, b: RiskLevel) -> RiskLevel:
    """Return the higher of two risk levels."""
    return a if risk_ge(a, b) else b


class ExecutionMode(str, Enum):
    """How much the caller trusts the plan.

    ``interactive`` asks for approval on every action; ``autonomous`` lets
    low-risk actions run without a prompt.
    """

    interactive = "interactive"
    autonomous = "autonomous"


class ActionState(str, Enum):
    pending = "pending"
    succeeded = "succeeded"
    failed = "failed"


class SessionStatus(str, Enum):
    ready_to_execute = "ready_to_execute"
    awaiting_approval = "awaiting_approval"
    completed = "completed"
    failed = "failed"


class TargetMode(str, Enum):
    selection = "selection"
    by_name = "byName"


class CheckType(str, Enum):
    constraint = "constraint"
    success = "success"
    safety = "safety"


class CheckStatus(str, Enum):
    pending = "pending"
    passed = "passed"
    failed = "failed"
    unknown = "unknown"


class CheckFailAction(str, Enum):
    stop = "stop"
    revise_subgoals = "revise_subgoals"
    require_approval = "require_approval"


class GoalPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
