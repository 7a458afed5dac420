from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import Field

from ..schemas.actions import Action
from ..schemas.base import BaseSchema
from ..schemas.domain import ActionState, ExecutionMode, SessionStatus, _utc_now
from ..schemas.plan import Check, Plan, StopCondition

REJECTED_BY_USER_MESSAGE = "Rejected by user."


class SessionStartRequest(BaseSchema):
    prompt: str
    mode: ExecutionMode = ExecutionMode.interactive
    max_retries: Optional[int] = Field(
        default=None, ge=0, description="Extra attempts per action; the service default applies when omitted."
    )
    context: Dict[str, Any] = Field(default_factory=dict)

    @property
    def manual_stop(self) -> bool:
        return self.context.get("manualStop") is True


class ActionOutcome(BaseSchema):
    """One externally reported execution result."""

    action_index: int
    ok: bool
    message: Optional[str] = None


class SessionAction(BaseSchema):
    action: Action
    approved: bool
    state: ActionState = ActionState.pending
    attempts: int = 0
    last_message: Optional[str] = None


class Session(BaseSchema):
    """
    Mutable state of one running plan.

    Owned by ``SessionStore``. ``current_iteration`` is a 0-based cursor over
    ``max_iterations`` windows of ``actions_per_iteration`` actions each.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    created_at: datetime = Field(default_factory=_utc_now)

    request: SessionStartRequest
    plan: Plan
    max_retries: int = Field(ge=0)
    actions: List[SessionAction] = Field(default_factory=list)

    current_iteration: int = 0
    max_iterations: int = Field(default=1, ge=1)
    actions_per_iteration: int = Field(default=1, ge=1)
    iteration_start_action_index: int = 0
    checkpoint_pending: bool = False
    checkpoint_action_index: Optional[int] = None


class IterationInfo(BaseSchema):
    current: int = Field(description="1-based number of the iteration in progress.")
    max: int
    actions_per_iteration: int
    checkpoint_pending: bool
    checkpoint_action_index: Optional[int] = None


class SessionDecision(BaseSchema):
    """The single "what happens next" answer returned after every session call."""

    session_id: str
    status: SessionStatus
    summary: str
    steps: List[str] = Field(default_factory=list)
    iteration: IterationInfo
    checks: List[Check] = Field(default_factory=list)
    matched_stop_condition: Optional[StopCondition] = None

    next_action_index: Optional[int] = None
    next_action: Optional[Action] = None
    next_action_state: Optional[ActionState] = None
    next_action_attempts: Optional[int] = None
    next_action_approved: Optional[bool] = None

    message: str
