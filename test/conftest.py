from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

import pytest

from ueai_agent.agent_core.policy.models import PolicyConfig
from ueai_agent.agent_core.policy.provider import StaticPolicyProvider
from ueai_agent.agent_core.schemas.domain import ExecutionMode, RiskLevel
from ueai_agent.agent_core.schemas.plan import Plan
from ueai_agent.agent_core.service import ExecutionService
from ueai_agent.agent_core.session.models import SessionStartRequest
from ueai_agent.agent_core.session.store import SessionStore


@pytest.fixture
def policy_config() -> PolicyConfig:
    """Policy limits matching the shipped configuration defaults."""
    return PolicyConfig(
        max_create_count=50,
        max_duplicate_count=10,
        max_target_names=50,
        max_delete_by_name_count=20,
        selection_target_estimate=5,
        max_session_change_units=120,
        max_landscape_brush_size=1000,
        max_landscape_brush_strength=0.4,
    )


@pytest.fixture
def store() -> SessionStore:
    return SessionStore(default_max_retries=2)


@pytest.fixture
def service(policy_config: PolicyConfig) -> ExecutionService:
    return ExecutionService(policy_provider=StaticPolicyProvider(default=policy_config), store=SessionStore())


@pytest.fixture
def make_request() -> Callable[..., SessionStartRequest]:
    def _make(
        mode: ExecutionMode = ExecutionMode.autonomous,
        max_retries: Optional[int] = 2,
        context: Optional[Dict[str, Any]] = None,
    ) -> SessionStartRequest:
        return SessionStartRequest(prompt="test prompt", mode=mode, max_retries=max_retries, context=context or {})

    return _make


@pytest.fixture
def tag_action() -> Callable[..., Dict[str, Any]]:
    """Wire-shaped scene.addActorTag action targeting one named actor."""

    def _make(risk: RiskLevel = RiskLevel.low, name: str = "Cube_1") -> Dict[str, Any]:
        return {
            "command": "scene.addActorTag",
            "params": {"target": "byName", "actorNames": [name], "tag": "reviewed"},
            "risk": risk.value,
        }

    return _make


@pytest.fixture
def make_plan() -> Callable[..., Plan]:
    """Build a ``Plan`` from wire-shaped action, check and stop-condition dicts."""

    def _make(
        actions: Iterable[Dict[str, Any]],
        checks: Iterable[Dict[str, Any]] = (),
        stop_conditions: Iterable[Dict[str, Any]] = (),
        summary: str = "Test plan",
    ) -> Plan:
        actions_list: List[Dict[str, Any]] = list(actions)
        return Plan.model_validate(
            {
                "summary": summary,
                "steps": [f"step {i + 1}" for i in range(len(actions_list))],
                "actions": actions_list,
                "checks": list(checks),
                "stopConditions": list(stop_conditions),
            }
        )

    return _make
