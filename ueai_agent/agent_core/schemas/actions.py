"""Editor action schemas.

Every action proposed by a planner is one variant of the closed ``Action``
union, discriminated on ``command``. Each variant pairs a command literal with
a command-specific ``params`` model and a planner-assigned ``risk`` tag.

Actions are frozen. The policy layer never edits an action in place; it
returns a clamped copy built with ``model_copy(update=...)``.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from .base import FrozenSchema
from .domain import RiskLevel, TargetMode


class Vector2(FrozenSchema):
    x: float
    y: float


class Vector3(FrozenSchema):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class Rotator(FrozenSchema):
    pitch: float = 0.0
    yaw: float = 0.0
    roll: float = 0.0


class EmptyParams(FrozenSchema):
    """Parameters for commands that take none."""


class TargetedParams(FrozenSchema):
    """Common targeting fields: the current selection or an explicit name list."""

    target: TargetMode = TargetMode.selection
    actor_names: Optional[list[str]] = None


class TransformDelta(TargetedParams):
    delta_location: Optional[Vector3] = None
    delta_rotation: Optional[Rotator] = None
    delta_scale: Optional[Vector3] = None
    scale: Optional[Vector3] = None


class CreateActorParams(FrozenSchema):
    actor_class: str
    location: Optional[Vector3] = None
    rotation: Optional[Rotator] = None
    count: int = Field(default=1, ge=1)


class ModifyActorParams(TransformDelta):
    pass


class DeleteActorParams(TargetedParams):
    pass


class ModifyComponentParams(TransformDelta):
    component_name: str
    visibility: Optional[bool] = None


class SetComponentMaterialParams(TargetedParams):
    component_name: str
    material_path: str
    material_slot: Optional[int] = Field(default=None, ge=0)


class SetComponentStaticMeshParams(TargetedParams):
    component_name: str
    mesh_path: str


class AddActorTagParams(TargetedParams):
    tag: str


class SetActorFolderParams(TargetedParams):
    folder_path: str = ""


class AddActorLabelPrefixParams(TargetedParams):
    prefix: str


class DuplicateActorsParams(TargetedParams):
    count: int = Field(default=1, ge=1)
    offset: Optional[Vector3] = None


class SetDirectionalLightIntensityParams(TargetedParams):
    intensity: float


class SetFogDensityParams(TargetedParams):
    density: float


class SetPostProcessExposureCompensationParams(TargetedParams):
    exposure_compensation: float


class LandscapeSculptParams(TargetedParams):
    center: Vector2
    size: Vector2
    strength: float
    falloff: float
    mode: Literal["raise", "lower"] = "raise"


class LandscapePaintLayerParams(TargetedParams):
    center: Vector2
    size: Vector2
    layer_name: str
    strength: float
    falloff: float
    mode: Literal["add", "remove"] = "add"


class LandscapeGenerateParams(TargetedParams):
    theme: Literal["moon_surface", "nature_island"] = "nature_island"
    detail_level: Literal["low", "medium", "high", "cinematic"] = "medium"
    moon_profile: Optional[Literal["moon_surface"]] = None
    use_full_area: bool = True
    center: Optional[Vector2] = None
    size: Optional[Vector2] = None
    seed: Optional[int] = None
    mountain_count: Optional[int] = None
    mountain_width_min: Optional[float] = None
    mountain_width_max: Optional[float] = None
    max_height: Optional[float] = None
    river_count_min: Optional[int] = None
    river_count_max: Optional[int] = None
    river_width_min: Optional[float] = None
    river_width_max: Optional[float] = None
    lake_count_min: Optional[int] = None
    lake_count_max: Optional[int] = None
    lake_width_min: Optional[float] = None
    lake_width_max: Optional[float] = None
    crater_count_min: Optional[int] = None
    crater_count_max: Optional[int] = None
    crater_width_min: Optional[float] = None
    crater_width_max: Optional[float] = None


class _ActionBase(FrozenSchema):
    risk: RiskLevel = RiskLevel.low


# Read-only context


class GetSceneSummaryAction(_ActionBase):
    command: Literal["context.getSceneSummary"] = "context.getSceneSummary"
    params: EmptyParams = Field(default_factory=EmptyParams)


class GetSelectionAction(_ActionBase):
    command: Literal["context.getSelection"] = "context.getSelection"
    params: EmptyParams = Field(default_factory=EmptyParams)


# Scene edits


class CreateActorAction(_ActionBase):
    command: Literal["scene.createActor"] = "scene.createActor"
    params: CreateActorParams


class ModifyActorAction(_ActionBase):
    command: Literal["scene.modifyActor"] = "scene.modifyActor"
    params: ModifyActorParams


class DeleteActorAction(_ActionBase):
    command: Literal["scene.deleteActor"] = "scene.deleteActor"
    params: DeleteActorParams


class ModifyComponentAction(_ActionBase):
    command: Literal["scene.modifyComponent"] = "scene.modifyComponent"
    params: ModifyComponentParams


class SetComponentMaterialAction(_ActionBase):
    command: Literal["scene.setComponentMaterial"] = "scene.setComponentMaterial"
    params: SetComponentMaterialParams


class SetComponentStaticMeshAction(_ActionBase):
    command: Literal["scene.setComponentStaticMesh"] = "scene.setComponentStaticMesh"
    params: SetComponentStaticMeshParams


class AddActorTagAction(_ActionBase):
    command: Literal["scene.addActorTag"] = "scene.addActorTag"
    params: AddActorTagParams


class SetActorFolderAction(_ActionBase):
    command: Literal["scene.setActorFolder"] = "scene.setActorFolder"
    params: SetActorFolderParams


class AddActorLabelPrefixAction(_ActionBase):
    command: Literal["scene.addActorLabelPrefix"] = "scene.addActorLabelPrefix"
    params: AddActorLabelPrefixParams


class DuplicateActorsAction(_ActionBase):
    command: Literal["scene.duplicateActors"] = "scene.duplicateActors"
    params: DuplicateActorsParams


class SetDirectionalLightIntensityAction(_ActionBase):
    command: Literal["scene.setDirectionalLightIntensity"] = "scene.setDirectionalLightIntensity"
    params: SetDirectionalLightIntensityParams


class SetFogDensityAction(_ActionBase):
    command: Literal["scene.setFogDensity"] = "scene.setFogDensity"
    params: SetFogDensityParams


class SetPostProcessExposureCompensationAction(_ActionBase):
    command: Literal["scene.setPostProcessExposureCompensation"] = "scene.setPostProcessExposureCompensation"
    params: SetPostProcessExposureCompensationParams


# Landscape (area effect)


class LandscapeSculptAction(_ActionBase):
    command: Literal["landscape.sculpt"] = "landscape.sculpt"
    params: LandscapeSculptParams


class LandscapePaintLayerAction(_ActionBase):
    command: Literal["landscape.paintLayer"] = "landscape.paintLayer"
    params: LandscapePaintLayerParams


class LandscapeGenerateAction(_ActionBase):
    command: Literal["landscape.generate"] = "landscape.generate"
    params: LandscapeGenerateParams


# Editor history and transaction control


class UndoAction(_ActionBase):
    command: Literal["editor.undo"] = "editor.undo"
    params: EmptyParams = Field(default_factory=EmptyParams)


class RedoAction(_ActionBase):
    command: Literal["editor.redo"] = "editor.redo"
    params: EmptyParams = Field(default_factory=EmptyParams)


class BeginTransactionAction(_ActionBase):
    command: Literal["session.beginTransaction"] = "session.beginTransaction"
    params: EmptyParams = Field(default_factory=EmptyParams)


class CommitTransactionAction(_ActionBase):
    command: Literal["session.commitTransaction"] = "session.commitTransaction"
    params: EmptyParams = Field(default_factory=EmptyParams)


class RollbackTransactionAction(_ActionBase):
    command: Literal["session.rollbackTransaction"] = "session.rollbackTransaction"
    params: EmptyParams = Field(default_factory=EmptyParams)


Action = Annotated[
    Union[
        GetSceneSummaryAction,
        GetSelectionAction,
        CreateActorAction,
        ModifyActorAction,
        DeleteActorAction,
        ModifyComponentAction,
        SetComponentMaterialAction,
        SetComponentStaticMeshAction,
        AddActorTagAction,
        SetActorFolderAction,
        AddActorLabelPrefixAction,
        DuplicateActorsAction,
        SetDirectionalLightIntensityAction,
        SetFogDensityAction,
        SetPostProcessExposureCompensationAction,
        LandscapeSculptAction,
        LandscapePaintLayerAction,
        LandscapeGenerateAction,
        UndoAction,
        RedoAction,
        BeginTransactionAction,
        CommitTransactionAction,
        RollbackTransactionAction,
    ],
    Field(discriminator="command"),
]

# Actions whose params carry ``target``/``actorNames``.
TargetedAction = Union[
    ModifyActorAction,
    DeleteActorAction,
    ModifyComponentAction,
    SetComponentMaterialAction,
    SetComponentStaticMeshAction,
    AddActorTagAction,
    SetActorFolderAction,
    AddActorLabelPrefixAction,
    DuplicateActorsAction,
    SetDirectionalLightIntensityAction,
    SetFogDensityAction,
    SetPostProcessExposureCompensationAction,
    LandscapeSculptAction,
    LandscapePaintLayerAction,
    LandscapeGenerateAction,
]
