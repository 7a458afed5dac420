"""Policy subsystem for editor action safety and approvals.

The policy layer provides *runtime* decisions for every action a planner
proposes, before anything reaches the editor. It is intentionally separate
from planning so that limits are governed by configuration rather than by
whatever the planner happened to emit.

Components
----------

- ``PolicyConfig``: the scalar limits (counts, name lists, brush values and
  the per-session change-unit budget).
- ``PolicyDecision``: the verdict for one action (risk, approval, clamped
  action, rationale, hard denial, estimated change-units).
- ``PolicyProvider`` / ``StaticPolicyProvider``: resolve the config that
  applies to a new session.

``GlobalPolicy`` applies the configuration and exposes the classification and
budget folding used by the session store.
"""

from .global_policy import GlobalPolicy
from .models import PolicyConfig, PolicyDecision, should_auto_approve
from .provider import PolicyProvider, StaticPolicyProvider

__all__ = [
    "GlobalPolicy",
    "PolicyConfig",
    "PolicyDecision",
    "PolicyProvider",
    "StaticPolicyProvider",
    "should_auto_approve",
]
