"""Convenience factories for wiring the execution core.

The intent is to keep application wiring and tests concise, while still
allowing deployments to provide their own policy provider or session store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .policy.provider import PolicyProvider, StaticPolicyProvider
from .service import ExecutionService
from .session.store import SessionStore

if TYPE_CHECKING:
    from ..core.config import Settings


def build_session_store(settings: Optional[Settings] = None) -> SessionStore:
    """Construct an empty ``SessionStore`` using the configured retry default."""
    from ..core.config import Settings

    cfg = settings or Settings()
    return SessionStore(default_max_retries=cfg.default_max_retries)


def build_execution_service(
    settings: Optional[Settings] = None,
    *,
    policy_provider: Optional[PolicyProvider] = None,
) -> ExecutionService:
    """Construct an ``ExecutionService`` from settings.

    When no provider is given, every session uses ``settings.policy``.
    """
    from ..core.config import Settings

    cfg = settings or Settings()
    provider = policy_provider if policy_provider is not None else StaticPolicyProvider(default=cfg.policy)
    return ExecutionService(policy_provider=provider, store=build_session_store(cfg))
