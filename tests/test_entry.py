"""
Tests for the entry decision and the wizard the host opens.
"""
import pytest

from factories import FakeClock, drive_to_final_step, fill_step4, make_principal

from interest_assessment.entry import EntryDecision, open_wizard, resolve_entry
from interest_assessment.wizard import StepOutcome


class TestResolveEntry:
    def test_anonymous_goes_to_login(self, service):
        assert resolve_entry(None, service) is EntryDecision.REDIRECT_LOGIN

    def test_non_student_goes_to_dashboard(self, service):
        assert resolve_entry(make_principal(role="admin"), service) is EntryDecision.REDIRECT_DASHBOARD

    def test_new_student_sees_wizard(self, service, principal):
        assert resolve_entry(principal, service) is EntryDecision.SHOW_WIZARD

    def test_completed_student_moves_on(self, service, store, principal):
        store.save_interest_assessment(principal.user_id, {"done": True})
        decision = resolve_entry(principal, service)
        assert decision is EntryDecision.REDIRECT_NEXT
        assert decision.value == "diagnostic-assessment"


class TestOpenWizard:
    def test_no_session_unless_shown(self, service):
        decision, session = open_wizard(None, service)
        assert decision is EntryDecision.REDIRECT_LOGIN
        assert session is None

    def test_end_to_end_completion(self, service, store, principal):
        decision, session = open_wizard(principal, service, clock=FakeClock())
        assert decision is EntryDecision.SHOW_WIZARD
        drive_to_final_step(session)
        fill_step4(session)

        assert session.advance() is StepOutcome.SUBMITTED
        assert session.result.completed
        assert service.is_completed(principal)
        assert resolve_entry(principal, service) is EntryDecision.REDIRECT_NEXT

        stored = store.get_student(principal.user_id)
        assert "advance" in stored["wizard_trace_json"]

    def test_missing_student_surfaces_submit_error(self, service):
        unregistered = make_principal(user_id="u-404", unique_id="STU-404")
        _, session = open_wizard(unregistered, service, clock=FakeClock())
        drive_to_final_step(session)
        fill_step4(session)

        assert session.advance() is StepOutcome.SUBMIT_FAILED
        assert "submit" in session.errors
        assert not session.closed

    @pytest.mark.parametrize("debounce_ms", [0, 500])
    def test_debounce_passed_through(self, service, principal, debounce_ms):
        _, session = open_wizard(principal, service, debounce_ms=debounce_ms)
        assert session.guard.debounce_ms == debounce_ms
