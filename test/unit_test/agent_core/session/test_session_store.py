from __future__ import annotations

import pytest

from ueai_agent.agent_core.errors import (
    ActionAlreadyResolvedError,
    InvalidActionReferenceError,
    SessionNotFoundError,
)
from ueai_agent.agent_core.schemas.domain import ActionState, ExecutionMode, RiskLevel, SessionStatus
from ueai_agent.agent_core.session.models import ActionOutcome, SessionStartRequest
from ueai_agent.agent_core.session.store import SessionStore


def test_create_autonomous_low_risk_is_ready(store, policy_config, make_plan, make_request, tag_action) -> None:
    d = store.create(make_request(), make_plan([tag_action(), tag_action()]), policy_config)

    assert d.status == SessionStatus.ready_to_execute
    assert d.next_action_index == 0
    assert d.next_action_approved is True
    assert d.next_action_attempts == 0
    assert d.next_action_state == ActionState.pending
    assert d.summary == "Test plan"
    assert d.steps == ["step 1", "step 2"]
    assert d.iteration.current == 1 and d.iteration.max == 1
    assert d.message == "Action 1 is ready to execute (attempt 1/3). Progress: 0/2 actions completed."


def test_passing_checks_do_not_finish_a_fresh_session(
    store, policy_config, make_plan, make_request, tag_action
) -> None:
    plan = make_plan(
        [tag_action(), tag_action()],
        checks=[{"id": "c1", "description": "nothing fails", "type": "constraint"}],
        stop_conditions=[{"type": "all_checks_passed"}],
    )
    d = store.create(make_request(), plan, policy_config)
    assert d.status == SessionStatus.ready_to_execute
    assert d.matched_stop_condition is None

    d = store.next(d.session_id, ActionOutcome(action_index=0, ok=True))
    assert d.status == SessionStatus.ready_to_execute

    d = store.next(d.session_id, ActionOutcome(action_index=1, ok=True))
    assert d.status == SessionStatus.completed
    assert d.matched_stop_condition.type == "all_checks_passed"


def test_create_interactive_waits_for_approval(store, policy_config, make_plan, make_request, tag_action) -> None:
    d = store.create(make_request(mode=ExecutionMode.interactive), make_plan([tag_action()]), policy_config)
    assert d.status == SessionStatus.awaiting_approval
    assert d.message == "Action 1 is waiting for approval (risk=low). Progress: 0/1 actions completed."


def test_success_moves_to_next_action(store, policy_config, make_plan, make_request, tag_action) -> None:
    d = store.create(make_request(), make_plan([tag_action(), tag_action()]), policy_config)
    d = store.next(d.session_id, ActionOutcome(action_index=0, ok=True, message="tagged"))

    assert d.next_action_index == 1
    assert d.message == "Action 2 is ready to execute (attempt 1/3). Progress: 1/2 actions completed."
    session = store.get(d.session_id)
    assert session.actions[0].state == ActionState.succeeded
    assert session.actions[0].attempts == 1
    assert session.actions[0].last_message == "tagged"


def test_failure_is_retried_then_terminal(store, policy_config, make_plan, make_request, tag_action) -> None:
    d = store.create(make_request(max_retries=1), make_plan([tag_action()]), policy_config)

    d = store.next(d.session_id, ActionOutcome(action_index=0, ok=False, message="boom"))
    assert d.status == SessionStatus.ready_to_execute
    assert d.message == (
        "Action 1 is ready to execute (attempt 2/2). Last result: boom Progress: 0/1 actions completed."
    )

    d = store.next(d.session_id, ActionOutcome(action_index=0, ok=False, message="boom again"))
    assert d.status == SessionStatus.failed
    assert d.next_action_attempts == 2
    assert d.message == "Action 1 failed after 2 attempt(s). Last error: boom again Progress: 0/1 actions completed."


@pytest.mark.parametrize("max_retries", [0, 1, 2, 4])
def test_terminal_failure_happens_exactly_at_retry_budget(
    store, policy_config, make_plan, make_request, tag_action, max_retries: int
) -> None:
    d = store.create(make_request(max_retries=max_retries), make_plan([tag_action()]), policy_config)
    for attempt in range(1, max_retries + 2):
        d = store.next(d.session_id, ActionOutcome(action_index=0, ok=False))
        session = store.get(d.session_id)
        assert session.actions[0].attempts == attempt
        expected = ActionState.failed if attempt == max_retries + 1 else ActionState.pending
        assert session.actions[0].state == expected


def test_request_without_retry_budget_uses_store_default(policy_config, make_plan, tag_action) -> None:
    store = SessionStore(default_max_retries=4)
    request = SessionStartRequest(prompt="x", mode=ExecutionMode.autonomous)
    d = store.create(request, make_plan([tag_action()]), policy_config)
    assert "(attempt 1/5)" in d.message


def test_outcome_for_unknown_index_is_rejected_without_mutation(
    store, policy_config, make_plan, make_request, tag_action
) -> None:
    d = store.create(make_request(), make_plan([tag_action()]), policy_config)
    for index in (1, -1):
        with pytest.raises(InvalidActionReferenceError):
            store.next(d.session_id, ActionOutcome(action_index=index, ok=True))
    assert store.get(d.session_id).actions[0].attempts == 0


def test_outcome_for_resolved_action_is_rejected(store, policy_config, make_plan, make_request, tag_action) -> None:
    d = store.create(make_request(), make_plan([tag_action(), tag_action()]), policy_config)
    store.next(d.session_id, ActionOutcome(action_index=0, ok=True))

    with pytest.raises(ActionAlreadyResolvedError) as exc:
        store.next(d.session_id, ActionOutcome(action_index=0, ok=True))
    assert str(exc.value) == "Action 0 is already succeeded."
    assert store.get(d.session_id).actions[0].attempts == 1


def test_unknown_session_id(store) -> None:
    with pytest.raises(SessionNotFoundError):
        store.next("missing")
    with pytest.raises(SessionNotFoundError):
        store.approve("missing", 0, True)
    with pytest.raises(SessionNotFoundError):
        store.resume("missing")
    with pytest.raises(SessionNotFoundError) as exc:
        store.get("missing")
    assert str(exc.value) == "Session missing was not found."


def test_approve_makes_action_ready(store, policy_config, make_plan, make_request, tag_action) -> None:
    d = store.create(make_request(mode=ExecutionMode.interactive), make_plan([tag_action()]), policy_config)
    d = store.approve(d.session_id, 0, True)
    assert d.status == SessionStatus.ready_to_execute
    assert d.next_action_approved is True


def test_reject_fails_action_immediately(store, policy_config, make_plan, make_request, tag_action) -> None:
    d = store.create(
        make_request(mode=ExecutionMode.interactive, max_retries=5), make_plan([tag_action()]), policy_config
    )
    d = store.approve(d.session_id, 0, False)

    assert d.status == SessionStatus.failed
    assert d.message == "Action 1 failed after 0 attempt(s). Last error: Rejected by user. Progress: 0/1 actions completed."
    with pytest.raises(ActionAlreadyResolvedError):
        store.approve(d.session_id, 0, True)


def test_approve_out_of_range(store, policy_config, make_plan, make_request, tag_action) -> None:
    d = store.create(make_request(), make_plan([tag_action()]), policy_config)
    with pytest.raises(InvalidActionReferenceError):
        store.approve(d.session_id, 3, True)


def test_hard_denied_action_starts_failed(store, policy_config, make_plan, make_request) -> None:
    plan = make_plan([{"command": "scene.deleteActor", "params": {"target": "selection"}, "risk": "low"}])
    d = store.create(make_request(), plan, policy_config)

    assert d.status == SessionStatus.failed
    assert d.next_action_index == 0
    assert d.next_action_attempts == 0
    assert d.next_action.risk == RiskLevel.high
    assert d.message.startswith(
        "Action 1 failed after 0 attempt(s). Last error: Policy hard-deny: scene.deleteActor target=selection"
    )


def test_budget_overflow_fails_the_action_at_creation(store, policy_config, make_plan, make_request) -> None:
    def create(count: int) -> dict:
        return {"command": "scene.createActor", "params": {"actorClass": "PointLight", "count": count}}

    d = store.create(make_request(), make_plan([create(50), create(50), create(30)]), policy_config)
    session = store.get(d.session_id)

    assert [a.state for a in session.actions] == [ActionState.pending, ActionState.pending, ActionState.failed]
    assert session.actions[2].last_message == "Policy hard-deny: session change budget exceeded (130 > 120 units)."
    assert d.status == SessionStatus.failed
    assert d.next_action_index == 2


def test_session_holds_its_own_copy_of_the_plan(store, policy_config, make_plan, make_request, tag_action) -> None:
    plan = make_plan([tag_action()])
    d = store.create(make_request(), plan, policy_config)
    plan.summary = "changed"
    plan.steps.append("extra")

    assert store.next(d.session_id).summary == "Test plan"
    assert store.get(d.session_id).plan.steps == ["step 1"]


def test_get_returns_detached_copy(store, policy_config, make_plan, make_request, tag_action) -> None:
    d = store.create(make_request(), make_plan([tag_action()]), policy_config)
    snapshot = store.get(d.session_id)
    snapshot.actions[0].state = ActionState.failed

    assert store.next(d.session_id).status == SessionStatus.ready_to_execute


def test_resume_merges_context(store, policy_config, make_plan, make_request, tag_action) -> None:
    d = store.create(make_request(context={"level": "Main"}), make_plan([tag_action()]), policy_config)
    store.resume(d.session_id, {"manualStop": True})

    assert store.get(d.session_id).request.context == {"level": "Main", "manualStop": True}


def test_store_tracks_sessions(store, policy_config, make_plan, make_request, tag_action) -> None:
    d = store.create(make_request(), make_plan([tag_action()]), policy_config)
    assert d.session_id in store
    assert "other" not in store
    assert len(store) == 1


def test_negative_default_retry_budget_is_rejected() -> None:
    with pytest.raises(ValueError):
        SessionStore(default_max_retries=-1)
