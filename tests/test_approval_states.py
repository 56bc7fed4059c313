"""Unit tests for the visit state table."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from vms.services.approval_states import (
    ApprovalStatus,
    VisitTransition,
    TERMINAL_STATES,
    available_transitions,
    can_transition,
    get_transition_rule,
)


class TestTransitionTable:
    def test_pending_can_only_check_in(self):
        assert available_transitions(ApprovalStatus.PENDING) == [VisitTransition.CHECK_IN]

    def test_checked_in_can_only_check_out(self):
        assert available_transitions(ApprovalStatus.CHECKED_IN) == [VisitTransition.CHECK_OUT]

    def test_checked_out_is_terminal(self):
        assert ApprovalStatus.CHECKED_OUT in TERMINAL_STATES
        assert available_transitions(ApprovalStatus.CHECKED_OUT) == []

    def test_checkout_before_checkin_not_allowed(self):
        assert not can_transition(ApprovalStatus.PENDING, VisitTransition.CHECK_OUT)

    def test_rule_records_timestamp_column(self):
        assert get_transition_rule("PENDING", VisitTransition.CHECK_IN).stamps == "in_time"
        assert get_transition_rule("CHECKED_IN", VisitTransition.CHECK_OUT).stamps == "out_time"

    def test_accepts_plain_strings_from_db(self):
        rule = get_transition_rule("CHECKED_IN", VisitTransition.CHECK_OUT)
        assert rule.to_state == ApprovalStatus.CHECKED_OUT

    def test_unknown_state_rejected(self):
        with pytest.raises(ValueError):
            get_transition_rule("APPROVED", VisitTransition.CHECK_IN)
