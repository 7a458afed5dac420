"""End-to-end session scenarios driven through ``ExecutionService``.

Each test plays the host's side of the loop: start a session, execute or
approve whatever the decision names, report back, and follow the decisions
until the session reaches a terminal status.
"""

from __future__ import annotations

from ueai_agent.agent_core.schemas.domain import ActionState, ExecutionMode, RiskLevel, SessionStatus
from ueai_agent.agent_core.session.models import REJECTED_BY_USER_MESSAGE

_TERMINAL = (SessionStatus.completed, SessionStatus.failed)


class TestAutonomousRoundTrip:
    def test_low_risk_plan_completes_after_one_report_per_action(self, service, make_plan, make_request, tag_action):
        actions = [tag_action(name=f"Cube_{i}") for i in range(4)]
        decision = service.start_session(make_request(mode=ExecutionMode.autonomous), make_plan(actions))

        reports = 0
        while decision.status not in _TERMINAL:
            assert decision.status == SessionStatus.ready_to_execute
            assert decision.next_action_index == reports
            decision = service.report_outcome(
                decision.session_id, action_index=decision.next_action_index, ok=True, message="ok"
            )
            reports += 1

        assert decision.status == SessionStatus.completed
        assert reports == len(actions)
        assert decision.message == "All actions are completed (4/4)."

    def test_retries_are_spent_before_failing(self, service, make_plan, make_request, tag_action):
        decision = service.start_session(make_request(max_retries=1), make_plan([tag_action()]))

        decision = service.report_outcome(decision.session_id, action_index=0, ok=False, message="Actor not found")
        assert decision.status == SessionStatus.ready_to_execute
        assert decision.next_action_attempts == 1

        decision = service.report_outcome(decision.session_id, action_index=0, ok=False, message="Actor not found")
        assert decision.status == SessionStatus.failed
        assert decision.message.startswith("Action 1 failed after 2 attempt(s). Last error: Actor not found")


class TestApprovalFlow:
    def test_rejection_matches_user_denied(self, service, make_plan, make_request, tag_action):
        plan = make_plan([tag_action(risk=RiskLevel.medium)], stop_conditions=[{"type": "user_denied"}])
        decision = service.start_session(make_request(mode=ExecutionMode.interactive), plan)
        assert decision.status == SessionStatus.awaiting_approval

        decision = service.approve_action(decision.session_id, 0, False)

        assert decision.status == SessionStatus.failed
        assert decision.matched_stop_condition.type == "user_denied"
        session = service.store.get(decision.session_id)
        assert session.actions[0].state == ActionState.failed
        assert session.actions[0].last_message == REJECTED_BY_USER_MESSAGE

    def test_medium_action_pauses_autonomous_run(self, service, make_plan, make_request, tag_action):
        plan = make_plan([tag_action(RiskLevel.low), tag_action(RiskLevel.medium), tag_action(RiskLevel.low)])
        decision = service.start_session(make_request(mode=ExecutionMode.autonomous), plan)
        sid = decision.session_id
        assert decision.status == SessionStatus.ready_to_execute

        decision = service.report_outcome(sid, action_index=0, ok=True)
        assert decision.status == SessionStatus.awaiting_approval
        assert decision.next_action_index == 1
        assert decision.next_action_approved is False

        decision = service.approve_action(sid, 1, True)
        assert decision.status == SessionStatus.ready_to_execute
        assert decision.next_action_index == 1

        decision = service.report_outcome(sid, action_index=1, ok=True)
        assert decision.status == SessionStatus.ready_to_execute
        assert decision.next_action_index == 2

        decision = service.report_outcome(sid, action_index=2, ok=True)
        assert decision.status == SessionStatus.completed


class TestPolicyAtCreation:
    def test_delete_selection_is_hard_denied(self, service, make_plan, make_request):
        plan = make_plan([{"command": "scene.deleteActor", "params": {"target": "selection"}, "risk": "low"}])
        decision = service.start_session(make_request(mode=ExecutionMode.autonomous), plan)

        assert decision.status == SessionStatus.failed
        assert decision.next_action_index == 0
        assert decision.next_action_approved is False
        assert "Policy hard-deny: scene.deleteActor target=selection is blocked." in decision.message

        session = service.store.get(decision.session_id)
        assert session.actions[0].attempts == 0
        assert session.actions[0].action.risk == RiskLevel.high

    def test_decisions_are_idempotent(self, service, make_plan, make_request, tag_action):
        plan = make_plan(
            [tag_action(RiskLevel.high), tag_action()],
            checks=[{"id": "safe", "description": "no risky failures", "type": "safety"}],
            stop_conditions=[{"type": "no_progress", "iterations": 3}],
        )
        decision = service.start_session(make_request(mode=ExecutionMode.interactive), plan)

        first = service.report_outcome(decision.session_id)
        second = service.report_outcome(decision.session_id)

        assert first.model_dump_json() == second.model_dump_json()
        assert first.model_dump_json() == decision.model_dump_json()
