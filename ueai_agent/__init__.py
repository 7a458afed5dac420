"""UEAI Agent.

This package contains the execution-control core of an editor AI agent: the
component set that turns a natural-language instruction's plan of editor
actions into a safely gated, resumable, partially retryable execution.

High-level architecture
-----------------------

Planning (turning a prompt into actions) happens outside this package. What
arrives here is a validated plan; what leaves is a stream of decisions:

- ``ready_to_execute``: run the named action in the editor and report back.
- ``awaiting_approval``: a human must approve or reject the named action.
- ``completed`` / ``failed``: the session is over.

Core subpackages
----------------

- ``ueai_agent.agent_core``:

  - Action, plan and session schemas.
  - The policy engine (risk, clamping, hard denials, change-unit budget).
  - The session store (retries, approvals, iteration checkpoints).
  - The decision engine (checks and stop conditions).

- ``ueai_agent.core``:

  - Settings, logging configuration and optional Logfire monitoring.
"""
