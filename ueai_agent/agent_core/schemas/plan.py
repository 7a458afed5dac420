"""Plan schemas handed to the execution core by the planning layer.

The plan is assumed to have been validated upstream (unique subgoal and check
ids, resolvable ``dependsOn`` references). The core carries goal and subgoals
through untouched and only interprets actions, checks and stop conditions.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from .actions import Action
from .base import BaseSchema, FrozenSchema
from .domain import CheckFailAction, CheckStatus, CheckType, GoalPriority, RiskLevel


class Goal(BaseSchema):
    id: str
    description: str
    priority: GoalPriority = GoalPriority.medium


class Subgoal(BaseSchema):
    id: str
    description: str
    depends_on: list[str] = Field(default_factory=list)


class Check(BaseSchema):
    id: str
    description: str
    type: CheckType
    source: Optional[str] = None
    status: CheckStatus = CheckStatus.pending
    on_fail: CheckFailAction = CheckFailAction.stop


class AllChecksPassedCondition(FrozenSchema):
    type: Literal["all_checks_passed"] = "all_checks_passed"


class MaxIterationsCondition(FrozenSchema):
    type: Literal["max_iterations"] = "max_iterations"
    value: int = Field(ge=1)


class NoProgressCondition(FrozenSchema):
    type: Literal["no_progress"] = "no_progress"
    iterations: int = Field(ge=1)


class RiskThresholdCondition(FrozenSchema):
    type: Literal["risk_threshold"] = "risk_threshold"
    max_risk: RiskLevel


class UserDeniedCondition(FrozenSchema):
    type: Literal["user_denied"] = "user_denied"


class ManualStopCondition(FrozenSchema):
    type: Literal["manual_stop"] = "manual_stop"


StopCondition = Annotated[
    Union[
        AllChecksPassedCondition,
        MaxIterationsCondition,
        NoProgressCondition,
        RiskThresholdCondition,
        UserDeniedCondition,
        ManualStopCondition,
    ],
    Field(discriminator="type"),
]


class Plan(BaseSchema):
    summary: str
    steps: list[str] = Field(default_factory=list)
    actions: list[Action] = Field(default_factory=list)
    goal: Optional[Goal] = None
    subgoals: list[Subgoal] = Field(default_factory=list)
    checks: list[Check] = Field(default_factory=list)
    stop_conditions: list[StopCondition] = Field(default_factory=list)
