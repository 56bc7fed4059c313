# vms/services/approval_states.py
"""
Visit approval states and the transitions between them.

    ┌──────────┐  check_in   ┌────────────┐  check_out  ┌─────────────┐
    │ PENDING  │────────────►│ CHECKED_IN │────────────►│ CHECKED_OUT │
    └──────────┘             └────────────┘             └─────────────┘
         ▲                         ▲
    pre_register             walk_in (no PENDING step)

CHECKED_OUT is terminal. A pre-registered visit and a walk-in share the same
states, so reports never need to know which path a visit took.
"""

from enum import Enum
from typing import NamedTuple, Optional


class ApprovalStatus(str, Enum):
    PENDING = "PENDING"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class VisitTransition(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class TransitionRule(NamedTuple):
    from_state: ApprovalStatus
    to_state: ApprovalStatus
    transition: VisitTransition
    stamps: str              # timestamp column set by this transition


TRANSITION_RULES: list[TransitionRule] = [
    TransitionRule(ApprovalStatus.PENDING, ApprovalStatus.CHECKED_IN, VisitTransition.CHECK_IN, "in_time"),
    TransitionRule(ApprovalStatus.CHECKED_IN, ApprovalStatus.CHECKED_OUT, VisitTransition.CHECK_OUT, "out_time"),
]

_RULES_BY_KEY = {(r.from_state, r.transition): r for r in TRANSITION_RULES}

INITIAL_STATE = ApprovalStatus.PENDING
WALK_IN_STATE = ApprovalStatus.CHECKED_IN
TERMINAL_STATES = {ApprovalStatus.CHECKED_OUT}


def get_transition_rule(current, transition: VisitTransition) -> Optional[TransitionRule]:
    """Rule for `transition` out of `current`, or None if it is not allowed."""
    return _RULES_BY_KEY.get((ApprovalStatus(current), transition))


def can_transition(current, transition: VisitTransition) -> bool:
    return get_transition_rule(current, transition) is not None


def available_transitions(current) -> list[VisitTransition]:
    return [t for t in VisitTransition if can_transition(current, t)]
