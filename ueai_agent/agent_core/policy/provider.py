from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Protocol

from ..schemas.domain import ExecutionMode
from .models import PolicyConfig

if TYPE_CHECKING:
    from ..session.models import SessionStartRequest

logger = logging.getLogger(__name__)


class PolicyProvider(Protocol):
    """Resolve the effective PolicyConfig for a session start request.

    Implementations can incorporate per-mode or per-project overrides.
    """

    def get(self, request: SessionStartRequest) -> PolicyConfig: ...


@dataclass(frozen=True)
class StaticPolicyProvider(PolicyProvider):
    """PolicyProvider backed by an in-memory mapping.

    Lookup order:

    1) mode override (if one is registered for the request's mode)
    2) default

    Returned configs are deep-copied to prevent accidental mutation.
    """

    default: PolicyConfig
    by_mode: Dict[ExecutionMode, PolicyConfig] | None = None

    def get(self, request: SessionStartRequest) -> PolicyConfig:
        if self.by_mode and request.mode in self.by_mode:
            logger.debug(f"Using {request.mode.value} policy override")
            return self.by_mode[request.mode].model_copy(deep=True)
        return self.default.model_copy(deep=True)
