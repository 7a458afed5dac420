"""Session lifecycle types and iteration control.

``SessionStore`` lives in ``ueai_agent.agent_core.session.store``; it is not
re-exported here because it depends on the decision engine, which in turn
reads these session types.
"""

from .iteration import advance_iteration
from .models import (
    REJECTED_BY_USER_MESSAGE,
    ActionOutcome,
    IterationInfo,
    Session,
    SessionAction,
    SessionDecision,
    SessionStartRequest,
)

__all__ = [
    "REJECTED_BY_USER_MESSAGE",
    "ActionOutcome",
    "IterationInfo",
    "Session",
    "SessionAction",
    "SessionDecision",
    "SessionStartRequest",
    "advance_iteration",
]
