"""Iteration windows and checkpoints.

A session's actions are split into ``max_iterations`` consecutive windows of
``actions_per_iteration`` actions. When the first pending action leaves the
current window, the session moves to the next iteration; if that action is
not yet approved, a checkpoint forces an explicit human decision before the
new window proceeds, even in autonomous mode.
"""

from __future__ import annotations

import math
from typing import Optional

from ...core.logging_config import get_logger
from ..schemas.domain import ActionState
from ..schemas.plan import MaxIterationsCondition, Plan
from .models import Session

logger = get_logger(__name__)


def max_iterations_for(plan: Plan) -> int:
    """Iteration budget from the first ``max_iterations`` stop condition, default 1."""
    for condition in plan.stop_conditions:
        if isinstance(condition, MaxIterationsCondition):
            return condition.value
    return 1


def actions_per_iteration_for(action_count: int, max_iterations: int) -> int:
    return max(1, math.ceil(action_count / max_iterations))


def first_pending_index(session: Session) -> Optional[int]:
    for index, item in enumerate(session.actions):
        if item.state == ActionState.pending:
            return index
    return None


def advance_iteration(session: Session) -> bool:
    """
    Move the session into the next iteration window if needed.

    Returns:
        True when the iteration cursor moved.
    """
    index = first_pending_index(session)
    if index is None:
        return False

    window_end = session.iteration_start_action_index + session.actions_per_iteration - 1
    if session.iteration_start_action_index <= index <= window_end:
        return False
    if session.current_iteration + 1 >= session.max_iterations:
        return False

    session.current_iteration += 1
    session.iteration_start_action_index = index
    session.checkpoint_pending = False
    session.checkpoint_action_index = None

    item = session.actions[index]
    if not item.approved:
        session.checkpoint_pending = True
        session.checkpoint_action_index = index
        notice = (
            f"Iteration {session.current_iteration + 1}/{session.max_iterations} checkpoint: "
            f"approve action {index + 1} before continuing."
        )
        item.last_message = f"{item.last_message} {notice}" if item.last_message else notice
        logger.info(f"Session {session.id}: {notice}")
    else:
        logger.debug(
            f"Session {session.id}: advanced to iteration "
            f"{session.current_iteration + 1}/{session.max_iterations} at action {index + 1}"
        )
    return True
