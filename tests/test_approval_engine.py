"""Unit tests for the pure approval state machine."""

import pytest

from claimflow.models import ClaimStatus, LogAction, UserRole
from claimflow.services import approval_engine


class TestNextStatus:
    def test_four_approvals_reach_disbursed_and_fifth_has_no_next(self):
        status = ClaimStatus.SUBMITTED
        for _ in range(4):
            status = approval_engine.next_status(status)
        assert status is ClaimStatus.DISBURSED
        assert approval_engine.next_status(status) is None

    @pytest.mark.parametrize(
        "current,expected",
        [
            (ClaimStatus.SUBMITTED, ClaimStatus.APPROVED_L1),
            (ClaimStatus.APPROVED_L1, ClaimStatus.APPROVED_L2),
            (ClaimStatus.APPROVED_L2, ClaimStatus.APPROVED_L3),
            (ClaimStatus.APPROVED_L3, ClaimStatus.DISBURSED),
        ],
    )
    def test_each_step_advances_one_level(self, current, expected):
        assert approval_engine.next_status(current) is expected

    def test_rejected_has_no_next_status(self):
        assert approval_engine.next_status(ClaimStatus.REJECTED) is None


class TestApplyAction:
    def test_reject_from_any_in_flight_status(self):
        for status in (ClaimStatus.SUBMITTED, ClaimStatus.APPROVED_L1, ClaimStatus.APPROVED_L3):
            assert approval_engine.apply_action(status, LogAction.REJECT) is ClaimStatus.REJECTED

    @pytest.mark.parametrize("terminal", [ClaimStatus.DISBURSED, ClaimStatus.REJECTED])
    def test_terminal_statuses_accept_nothing(self, terminal):
        assert approval_engine.apply_action(terminal, LogAction.APPROVE) is None
        assert approval_engine.apply_action(terminal, LogAction.REJECT) is None

    def test_submit_is_not_a_transition(self):
        assert approval_engine.apply_action(ClaimStatus.SUBMITTED, LogAction.SUBMIT) is None


class TestDeriveStatus:
    def test_fold_of_full_history(self):
        actions = [LogAction.SUBMIT] + [LogAction.APPROVE] * 4
        assert approval_engine.derive_status(actions) is ClaimStatus.DISBURSED

    def test_fold_ending_in_rejection(self):
        actions = [LogAction.SUBMIT, LogAction.APPROVE, LogAction.REJECT]
        assert approval_engine.derive_status(actions) is ClaimStatus.REJECTED

    def test_history_must_open_with_submit(self):
        assert approval_engine.derive_status([LogAction.APPROVE]) is None
        assert approval_engine.derive_status([]) is None

    def test_actions_after_terminal_are_illegal(self):
        actions = [LogAction.SUBMIT, LogAction.REJECT, LogAction.APPROVE]
        assert approval_engine.derive_status(actions) is None


class TestStageNames:
    def test_labels_per_role(self):
        assert approval_engine.stage_name(UserRole.L1_ADMIN) == "L1 - Accounts"
        assert approval_engine.stage_name(UserRole.L2_ADMIN) == "L2 - Finance"
        assert approval_engine.stage_name(UserRole.L3_ADMIN) == "L3 - CEO"
        assert approval_engine.stage_name("L4_ADMIN") == "L4 - Final Disbursement"

    def test_unknown_role_falls_back_to_raw_string(self):
        assert approval_engine.stage_name("AUDITOR") == "AUDITOR"
        assert approval_engine.stage_name(UserRole.USER) == "USER"

    def test_role_for_stage_reverses_labels(self):
        assert approval_engine.role_for_stage("L3 - CEO") is UserRole.L3_ADMIN
        assert approval_engine.role_for_stage("L2_ADMIN") is UserRole.L2_ADMIN
        assert approval_engine.role_for_stage("Submission") is None

    def test_pending_role_and_status_are_inverse(self):
        for role in (UserRole.L1_ADMIN, UserRole.L2_ADMIN, UserRole.L3_ADMIN, UserRole.L4_ADMIN):
            assert approval_engine.pending_role(approval_engine.pending_status(role)) is role
        assert approval_engine.pending_status(UserRole.USER) is None
        assert approval_engine.pending_role(ClaimStatus.DISBURSED) is None
