"""Global policy decisions for editor actions.

``GlobalPolicy`` is the runtime authority used by the session store to decide
how each proposed action may proceed before anything reaches the editor.

Design goals
------------

- Centralize allow/deny decisions outside of prompts and planners.
- Provide a single place to implement:

  - the actor-class allow-list for creation,
  - numeric clamping of counts, intensities and brush values,
  - min/max range repair for landscape generation,
  - hard denials that no approval can override,
  - asset path checks,
  - change-unit estimation and the per-session change budget.

Classification never edits the caller's action: every handler returns a new
(frozen) action built with ``model_copy``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, get_args

from ...core.logging_config import get_logger
from ..schemas.actions import (
    Action,
    AddActorLabelPrefixAction,
    AddActorTagAction,
    BeginTransactionAction,
    CommitTransactionAction,
    CreateActorAction,
    DeleteActorAction,
    DuplicateActorsAction,
    GetSceneSummaryAction,
    GetSelectionAction,
    LandscapeGenerateAction,
    LandscapePaintLayerAction,
    LandscapeSculptAction,
    ModifyActorAction,
    ModifyComponentAction,
    RedoAction,
    RollbackTransactionAction,
    SetActorFolderAction,
    SetComponentMaterialAction,
    SetComponentStaticMeshAction,
    SetDirectionalLightIntensityAction,
    SetFogDensityAction,
    SetPostProcessExposureCompensationAction,
    TargetedAction,
    UndoAction,
    Vector2,
)
from ..schemas.domain import ExecutionMode, RiskLevel, TargetMode, max_risk
from .models import (
    ALLOWED_CREATE_ACTOR_CLASSES,
    PolicyConfig,
    PolicyDecision,
    is_allowed_asset_path,
    should_auto_approve,
)

logger = get_logger(__name__)

DIRECTIONAL_LIGHT_INTENSITY_RANGE = (0.0, 200000.0)
FOG_DENSITY_RANGE = (0.0, 5.0)
EXPOSURE_COMPENSATION_RANGE = (-15.0, 15.0)
BRUSH_FALLOFF_RANGE = (0.0, 1.0)

# Silent clamps applied to landscape.generate parameters.
GENERATE_CLAMPS: Dict[str, tuple[float, float]] = {
    "max_height": (100, 10000),
    "mountain_count": (1, 8),
    "mountain_width_min": (1, 200000),
    "mountain_width_max": (1, 200000),
    "crater_count_min": (1, 500),
    "crater_count_max": (1, 500),
    "crater_width_min": (1, 200000),
    "crater_width_max": (1, 200000),
}

# Paired min/max parameters swapped back into order when inverted.
GENERATE_RANGE_PAIRS = (
    ("mountain_width_min", "mountain_width_max"),
    ("river_count_min", "river_count_max"),
    ("river_width_min", "river_width_max"),
    ("lake_count_min", "lake_count_max"),
    ("lake_width_min", "lake_width_max"),
    ("crater_count_min", "crater_count_max"),
    ("crater_width_min", "crater_width_max"),
)

SCULPT_AREA_PER_UNIT = 250000
GENERATE_AREA_PER_UNIT = 200000
GENERATE_FULL_AREA_UNITS = 250
GENERATE_DEFAULT_UNITS = 200

_PER_TARGET_ACTIONS = (
    ModifyActorAction,
    DeleteActorAction,
    ModifyComponentAction,
    SetComponentMaterialAction,
    SetComponentStaticMeshAction,
    AddActorTagAction,
    SetActorFolderAction,
    AddActorLabelPrefixAction,
    SetDirectionalLightIntensityAction,
    SetFogDensityAction,
    SetPostProcessExposureCompensationAction,
)

_TARGETED_ACTIONS = get_args(TargetedAction)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _fmt(value: float) -> str:
    """Render numbers in policy messages without a trailing ``.0``."""
    return str(int(value)) if float(value).is_integer() else str(value)


@dataclass
class _Verdict:
    """Mutable accumulator for the rules that fire on one action."""

    risk: RiskLevel
    gated: bool = False
    hard_denied: bool = False
    messages: List[str] = field(default_factory=list)

    def require_approval(self, reason: str, risk: RiskLevel) -> None:
        self.gated = True
        self.risk = max_risk(self.risk, risk)
        self.messages.append(reason)

    def deny(self, reason: str) -> None:
        self.gated = True
        self.hard_denied = True
        self.risk = RiskLevel.high
        self.messages.append(reason)

    @property
    def message(self) -> Optional[str]:
        return " ".join(self.messages) if self.messages else None


class GlobalPolicy:
    """Aggregate policy decisions for a single session.

    ``GlobalPolicy`` is configured by ``PolicyConfig`` and is pure: the same
    action, config and mode always produce the same ``PolicyDecision``.
    """

    # Action variant -> name of the handler method that classifies it.
    HANDLERS: Dict[type, str] = {
        GetSceneSummaryAction: "_passthrough",
        GetSelectionAction: "_passthrough",
        CreateActorAction: "_classify_create",
        ModifyActorAction: "_passthrough",
        DeleteActorAction: "_classify_delete",
        ModifyComponentAction: "_passthrough",
        SetComponentMaterialAction: "_classify_material",
        SetComponentStaticMeshAction: "_classify_static_mesh",
        AddActorTagAction: "_passthrough",
        SetActorFolderAction: "_passthrough",
        AddActorLabelPrefixAction: "_passthrough",
        DuplicateActorsAction: "_classify_duplicate",
        SetDirectionalLightIntensityAction: "_classify_light_intensity",
        SetFogDensityAction: "_classify_fog_density",
        SetPostProcessExposureCompensationAction: "_classify_exposure",
        LandscapeSculptAction: "_classify_landscape_brush",
        LandscapePaintLayerAction: "_classify_landscape_brush",
        LandscapeGenerateAction: "_classify_landscape_generate",
        UndoAction: "_passthrough",
        RedoAction: "_passthrough",
        BeginTransactionAction: "_passthrough",
        CommitTransactionAction: "_passthrough",
        RollbackTransactionAction: "_passthrough",
    }

    def __init__(self, config: PolicyConfig) -> None:
        self._cfg = config
        self._handlers: Dict[type, Callable[[Any, _Verdict], Any]] = {
            action_type: getattr(self, name) for action_type, name in self.HANDLERS.items()
        }

    @property
    def config(self) -> PolicyConfig:
        """Return the underlying configuration object."""
        return self._cfg

    def classify(self, action: Action, mode: ExecutionMode) -> PolicyDecision:
        """
        Classify a single action.

        Applies the kind-specific rules (allow-list, clamps, hard denials,
        standing approval gates, asset path checks), then target-name
        truncation, then the auto-approval rule.

        Args:
            action: The proposed action. It is never modified.
            mode: The session's execution mode.

        Returns:
            A PolicyDecision holding the clamped action and the verdict.

        Raises:
            TypeError: If the action kind has no registered handler.
        """
        handler = self._handlers.get(type(action))
        if handler is None:
            raise TypeError(f"no policy handler for action type: {type(action).__name__}")

        verdict = _Verdict(risk=action.risk)
        clamped = handler(action, verdict)

        if verdict.hard_denied:
            denied = clamped.model_copy(update={"risk": verdict.risk})
            logger.warning(f"Hard-denied {action.command}: {verdict.message}")
            return PolicyDecision(
                risk=verdict.risk,
                approved=False,
                action=denied,
                message=verdict.message,
                hard_denied=True,
                estimated_changes=self.estimate_changes(denied),
            )

        if isinstance(clamped, _TARGETED_ACTIONS):
            clamped = self._truncate_target_names(clamped, verdict)

        approved = not verdict.gated and should_auto_approve(mode, verdict.risk)
        final = clamped.model_copy(update={"risk": verdict.risk})
        return PolicyDecision(
            risk=verdict.risk,
            approved=approved,
            action=final,
            message=verdict.message,
            hard_denied=False,
            estimated_changes=self.estimate_changes(final),
        )

    def classify_all(self, actions: Sequence[Action], mode: ExecutionMode) -> List[PolicyDecision]:
        """
        Classify an ordered action list and enforce the session change budget.

        Estimated change-units are accumulated in order. An action whose
        inclusion would push the running total past
        ``max_session_change_units`` is hard-denied and adds nothing; later
        actions keep being measured against the same running total.
        Already hard-denied actions never consume budget.
        """
        limit = self._cfg.max_session_change_units
        consumed = 0
        decisions: List[PolicyDecision] = []
        for action in actions:
            decision = self.classify(action, mode)
            if not decision.hard_denied:
                next_consumed = consumed + decision.estimated_changes
                if next_consumed > limit:
                    message = f"Policy hard-deny: session change budget exceeded ({next_consumed} > {limit} units)."
                    logger.warning(f"Budget overflow on {action.command}: {message}")
                    decision = replace(decision, approved=False, hard_denied=True, message=message)
                else:
                    consumed = next_consumed
            decisions.append(decision)
        logger.debug(f"Session budget consumed {consumed}/{limit} change-units over {len(decisions)} action(s)")
        return decisions

    def estimate_target_count(self, action: Action) -> int:
        """Number of actors an action touches; selections use the configured estimate."""
        if not isinstance(action, _TARGETED_ACTIONS):
            return 0
        if action.params.target == TargetMode.by_name:
            return max(1, len(action.params.actor_names or []))
        return self._cfg.selection_target_estimate

    def estimate_changes(self, action: Action) -> int:
        """
        Estimate the change-units (blast radius) of an action.

        Returns:
            Object count for creation, targets times copies for duplication,
            target count for per-target edits, an area-derived figure for
            landscape operations, and 0 for read-only or control commands.
        """
        if isinstance(action, CreateActorAction):
            return action.params.count
        if isinstance(action, DuplicateActorsAction):
            return self.estimate_target_count(action) * action.params.count
        if isinstance(action, _PER_TARGET_ACTIONS):
            return self.estimate_target_count(action)
        if isinstance(action, (LandscapeSculptAction, LandscapePaintLayerAction)):
            area = abs(action.params.size.x * action.params.size.y)
            return max(1, _round_half_up(area / SCULPT_AREA_PER_UNIT))
        if isinstance(action, LandscapeGenerateAction):
            if action.params.use_full_area:
                return GENERATE_FULL_AREA_UNITS
            if action.params.size is not None:
                area = abs(action.params.size.x * action.params.size.y)
                return max(1, _round_half_up(area / GENERATE_AREA_PER_UNIT))
            return GENERATE_DEFAULT_UNITS
        return 0

    # Handlers. Each returns the (possibly clamped) action and records its
    # verdict on ``verdict``.

    def _passthrough(self, action: Action, verdict: _Verdict) -> Action:  # noqa: ARG002
        return action

    def _classify_create(self, action: CreateActorAction, verdict: _Verdict) -> CreateActorAction:
        params = action.params
        if params.actor_class not in ALLOWED_CREATE_ACTOR_CLASSES:
            verdict.require_approval(
                f"Policy: actorClass '{params.actor_class}' is not in the allowlist.", RiskLevel.high
            )
        if params.count > self._cfg.max_create_count:
            params = params.model_copy(update={"count": self._cfg.max_create_count})
            verdict.require_approval(f"Policy: create count capped to {params.count}.", RiskLevel.medium)
        return action.model_copy(update={"params": params})

    def _classify_duplicate(self, action: DuplicateActorsAction, verdict: _Verdict) -> DuplicateActorsAction:
        if action.params.count <= self._cfg.max_duplicate_count:
            return action
        params = action.params.model_copy(update={"count": self._cfg.max_duplicate_count})
        verdict.require_approval(f"Policy: duplicate count capped to {params.count}.", RiskLevel.medium)
        return action.model_copy(update={"params": params})

    def _classify_light_intensity(
        self, action: SetDirectionalLightIntensityAction, verdict: _Verdict
    ) -> SetDirectionalLightIntensityAction:
        clamped = _clamp(action.params.intensity, *DIRECTIONAL_LIGHT_INTENSITY_RANGE)
        if clamped == action.params.intensity:
            return action
        verdict.require_approval(
            f"Policy: directional light intensity clamped to {_fmt(clamped)}.", RiskLevel.medium
        )
        return action.model_copy(update={"params": action.params.model_copy(update={"intensity": clamped})})

    def _classify_fog_density(self, action: SetFogDensityAction, verdict: _Verdict) -> SetFogDensityAction:
        clamped = _clamp(action.params.density, *FOG_DENSITY_RANGE)
        if clamped == action.params.density:
            return action
        verdict.require_approval(f"Policy: fog density clamped to {_fmt(clamped)}.", RiskLevel.medium)
        return action.model_copy(update={"params": action.params.model_copy(update={"density": clamped})})

    def _classify_exposure(
        self, action: SetPostProcessExposureCompensationAction, verdict: _Verdict
    ) -> SetPostProcessExposureCompensationAction:
        clamped = _clamp(action.params.exposure_compensation, *EXPOSURE_COMPENSATION_RANGE)
        if clamped == action.params.exposure_compensation:
            return action
        verdict.require_approval(f"Policy: exposure compensation clamped to {_fmt(clamped)}.", RiskLevel.medium)
        return action.model_copy(
            update={"params": action.params.model_copy(update={"exposure_compensation": clamped})}
        )

    def _classify_landscape_brush(self, action: Any, verdict: _Verdict) -> Any:
        params = action.params
        max_size = max(1.0, self._cfg.max_landscape_brush_size)
        max_strength = max(0.01, self._cfg.max_landscape_brush_strength)
        size = Vector2(
            x=_clamp(abs(params.size.x), 1.0, max_size),
            y=_clamp(abs(params.size.y), 1.0, max_size),
        )
        strength = _clamp(params.strength, 0.0, max_strength)
        falloff = _clamp(params.falloff, *BRUSH_FALLOFF_RANGE)
        had_clamp = (
            size.x != params.size.x
            or size.y != params.size.y
            or strength != params.strength
            or falloff != params.falloff
        )

        if had_clamp:
            reason = (
                f"Policy: landscape brush values were clamped (size<={_fmt(max_size)}, "
                f"strength<={_fmt(max_strength)}). Approval is required."
            )
            action = action.model_copy(
                update={
                    "params": params.model_copy(update={"size": size, "strength": strength, "falloff": falloff})
                }
            )
        else:
            reason = "Policy: landscape edits always require approval."
        verdict.require_approval(reason, RiskLevel.medium)
        return action

    def _classify_landscape_generate(
        self, action: LandscapeGenerateAction, verdict: _Verdict
    ) -> LandscapeGenerateAction:
        params = action.params
        updates: Dict[str, Any] = {}

        for name, (lo, hi) in GENERATE_CLAMPS.items():
            value = getattr(params, name)
            if value is None:
                continue
            clamped = _clamp(value, lo, hi)
            if clamped != value:
                updates[name] = clamped

        for low_name, high_name in GENERATE_RANGE_PAIRS:
            low = updates.get(low_name, getattr(params, low_name))
            high = updates.get(high_name, getattr(params, high_name))
            if low is not None and high is not None and low > high:
                updates[low_name], updates[high_name] = high, low

        if not params.use_full_area and (params.center is None or params.size is None):
            updates.update({"use_full_area": True, "center": None, "size": None})

        verdict.require_approval("Policy: landscape generation always requires approval.", RiskLevel.medium)
        if not updates:
            return action
        return action.model_copy(update={"params": params.model_copy(update=updates)})

    def _classify_delete(self, action: DeleteActorAction, verdict: _Verdict) -> DeleteActorAction:
        params = action.params
        if params.target == TargetMode.selection:
            verdict.deny(
                "Policy hard-deny: scene.deleteActor target=selection is blocked. "
                "Use target=byName with explicit actorNames."
            )
        elif len(params.actor_names or []) > self._cfg.max_delete_by_name_count:
            verdict.deny(
                f"Policy hard-deny: scene.deleteActor byName supports up to "
                f"{self._cfg.max_delete_by_name_count} actors."
            )
        else:
            verdict.require_approval("Policy: delete actions always require approval.", RiskLevel.high)
        return action

    def _classify_material(self, action: SetComponentMaterialAction, verdict: _Verdict) -> SetComponentMaterialAction:
        if not is_allowed_asset_path(action.params.material_path):
            verdict.require_approval("Policy: materialPath must start with /Game/ or /Engine/.", RiskLevel.high)
        return action

    def _classify_static_mesh(
        self, action: SetComponentStaticMeshAction, verdict: _Verdict
    ) -> SetComponentStaticMeshAction:
        if not is_allowed_asset_path(action.params.mesh_path):
            verdict.require_approval("Policy: meshPath must start with /Game/ or /Engine/.", RiskLevel.high)
        return action

    def _truncate_target_names(self, action: Any, verdict: _Verdict) -> Any:
        params = action.params
        names = params.actor_names
        limit = self._cfg.max_target_names
        if params.target != TargetMode.by_name or not names or len(names) <= limit:
            return action
        truncated = list(names[:limit])
        verdict.require_approval(f"Policy: actorNames capped to {len(truncated)}.", RiskLevel.medium)
        return action.model_copy(update={"params": params.model_copy(update={"actor_names": truncated})})


def _check_handler_coverage() -> None:
    """Fail at import time if an ``Action`` variant has no policy handler."""
    variants = set(get_args(get_args(Action)[0]))
    missing = sorted(v.__name__ for v in variants - set(GlobalPolicy.HANDLERS))
    if missing:
        raise TypeError(f"GlobalPolicy has no handler for: {missing}")


_check_handler_coverage()
