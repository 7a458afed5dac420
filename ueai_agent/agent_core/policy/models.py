from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import Field

from ..schemas.actions import Action
from ..schemas.base import BaseSchema
from ..schemas.domain import ExecutionMode, RiskLevel

ALLOWED_CREATE_ACTOR_CLASSES = frozenset(
    {
        "Actor",
        "StaticMeshActor",
        "PointLight",
        "SpotLight",
        "DirectionalLight",
        "RectLight",
        "SkyLight",
        "ExponentialHeightFog",
        "PostProcessVolume",
        "CameraActor",
    }
)

ALLOWED_ASSET_PATH_PREFIXES = ("/Game/", "/Engine/")


class PolicyConfig(BaseSchema):
    """
    Scalar limits applied by ``GlobalPolicy`` to every proposed action.

    The policy layer has no built-in defaults: callers resolve a fully
    populated config (see ``ueai_agent.core.config.Settings.policy``) and pass
    it in per session.
    """
    max_create_count: int = Field(ge=1, description="Upper bound for scene.createActor count.")
    max_duplicate_count: int = Field(ge=1, description="Upper bound for scene.duplicateActors count.")
    max_target_names: int = Field(ge=1, description="Longest actorNames list kept on a by-name target.")
    max_delete_by_name_count: int = Field(
        ge=1, description="Deleting more named actors than this is hard-denied."
    )
    selection_target_estimate: int = Field(
        ge=1,
        description="Assumed actor count for target=selection, since the live selection size is unknown.",
    )
    max_session_change_units: int = Field(
        ge=1, description="Cumulative change-unit budget for all actions of one session."
    )
    max_landscape_brush_size: float = Field(gt=0, description="Largest landscape brush extent per axis.")
    max_landscape_brush_strength: float = Field(gt=0, description="Largest landscape brush strength.")


@dataclass(frozen=True)
class PolicyDecision:
    """
    Result of a policy evaluation for a single action.

    Attributes:
        risk: The (possibly re-assigned) risk level of the action.
        approved: Whether the action may run without a human approving it.
        action: The action after clamping, carrying ``risk`` as its risk tag.
        message: Human-readable rationale for any clamp, gate, or denial.
        hard_denied: Whether the action is rejected outright; approval cannot override this.
        estimated_changes: Estimated change-units the action would cost.
    """
    risk: RiskLevel
    approved: bool
    action: Action
    message: Optional[str]
    hard_denied: bool
    estimated_changes: int


def should_auto_approve(mode: ExecutionMode, risk: RiskLevel) -> bool:
    """Only low-risk actions in autonomous mode skip the approval prompt."""
    return mode == ExecutionMode.autonomous and risk == RiskLevel.low


def is_allowed_asset_path(path: str) -> bool:
    """Return True when ``path`` lives under one of the engine's virtual roots."""
    return path.strip().startswith(ALLOWED_ASSET_PATH_PREFIXES)
