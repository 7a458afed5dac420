"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
All values are bound from environment variables and an optional ``.env`` file.

Policy limits are declared here rather than in the policy layer: the execution
core has no built-in defaults and receives a fully populated ``PolicyConfig``
through ``Settings.policy``.
"""

from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from ..agent_core.policy.models import PolicyConfig

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class LogfireConfig(BaseModel):
    """Pydantic Logfire monitoring configuration."""

    enabled: bool = Field(default=False, description="Whether Logfire monitoring is switched on")
    token: Optional[str] = Field(default=None, description="Logfire write token")
    service_name: str = Field(default="ueai-agent", description="Service name reported to Logfire")
    environment: str = Field(default="development", description="Deployment environment reported to Logfire")

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="UEAI_AGENT_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="UEAI_AGENT_LOG_FORMAT",
    )

    # =====================================================================
    # Policy Limits
    # =====================================================================
    policy_max_create_count: int = Field(
        default=50, ge=1, description="Upper bound for scene.createActor count", alias="AGENT_POLICY_MAX_CREATE_COUNT"
    )
    policy_max_duplicate_count: int = Field(
        default=10,
        ge=1,
        description="Upper bound for scene.duplicateActors count",
        alias="AGENT_POLICY_MAX_DUPLICATE_COUNT",
    )
    policy_max_target_names: int = Field(
        default=50, ge=1, description="Longest kept actorNames list", alias="AGENT_POLICY_MAX_TARGET_NAMES"
    )
    policy_max_delete_by_name_count: int = Field(
        default=20,
        ge=1,
        description="Largest by-name delete that is not hard-denied",
        alias="AGENT_POLICY_MAX_DELETE_BY_NAME_COUNT",
    )
    policy_selection_target_estimate: int = Field(
        default=5,
        ge=1,
        description="Assumed actor count for target=selection",
        alias="AGENT_POLICY_SELECTION_TARGET_ESTIMATE",
    )
    policy_max_session_change_units: int = Field(
        default=120,
        ge=1,
        description="Cumulative change-unit budget per session",
        alias="AGENT_POLICY_MAX_SESSION_CHANGE_UNITS",
    )
    policy_max_landscape_brush_size: float = Field(
        default=1000,
        gt=0,
        description="Largest landscape brush extent per axis",
        alias="AGENT_POLICY_MAX_LANDSCAPE_BRUSH_SIZE",
    )
    policy_max_landscape_brush_strength: float = Field(
        default=0.4,
        gt=0,
        description="Largest landscape brush strength",
        alias="AGENT_POLICY_MAX_LANDSCAPE_BRUSH_STRENGTH",
    )

    # =====================================================================
    # Session Defaults
    # =====================================================================
    default_max_retries: int = Field(
        default=2,
        ge=0,
        description="Retry budget for session requests that do not specify one",
        alias="AGENT_DEFAULT_MAX_RETRIES",
    )

    # =====================================================================
    # Monitoring Configuration
    # =====================================================================
    logfire_enabled: bool = Field(default=False, alias="LOGFIRE_ENABLED")
    logfire_token: Optional[str] = Field(default=None, alias="LOGFIRE_TOKEN")
    logfire_service_name: str = Field(default="ueai-agent", alias="LOGFIRE_SERVICE_NAME")
    logfire_environment: str = Field(default="development", alias="LOGFIRE_ENVIRONMENT")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def policy(self) -> "PolicyConfig":
        """Get the policy limits applied to new sessions."""
        from ..agent_core.policy.models import PolicyConfig

        return PolicyConfig(
            max_create_count=self.policy_max_create_count,
            max_duplicate_count=self.policy_max_duplicate_count,
            max_target_names=self.policy_max_target_names,
            max_delete_by_name_count=self.policy_max_delete_by_name_count,
            selection_target_estimate=self.policy_selection_target_estimate,
            max_session_change_units=self.policy_max_session_change_units,
            max_landscape_brush_size=self.policy_max_landscape_brush_size,
            max_landscape_brush_strength=self.policy_max_landscape_brush_strength,
        )

    @property
    def logfire(self) -> LogfireConfig:
        """Get Logfire monitoring configuration."""
        return LogfireConfig(
            enabled=self.logfire_enabled,
            token=self.logfire_token,
            service_name=self.logfire_service_name,
            environment=self.logfire_environment,
        )


settings = Settings()
