"""Decision engine: check evaluation, stop conditions and next-step resolution."""

from .checks import evaluate_checks
from .engine import evaluate
from .stop_conditions import match_stop_condition

__all__ = ["evaluate", "evaluate_checks", "match_stop_condition"]
