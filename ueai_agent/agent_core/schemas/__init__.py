"""Schemas and DTOs for the agent core."""

from .actions import Action
from .domain import (
    ActionState,
    CheckStatus,
    CheckType,
    ExecutionMode,
    RiskLevel,
    SessionStatus,
    TargetMode,
)
from .plan import Check, Goal, Plan, StopCondition, Subgoal

__all__ = [
    "Action",
    "ActionState",
    "Check",
    "CheckStatus",
    "CheckType",
    "ExecutionMode",
    "Goal",
    "Plan",
    "RiskLevel",
    "SessionStatus",
    "StopCondition",
    "Subgoal",
    "TargetMode",
]
