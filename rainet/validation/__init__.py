from .invariant_checks import (
    InvariantViolation,
    check_boost_slots,
    check_card_conservation,
    check_firewalls,
    check_invariants,
    check_setup_counters,
)

__all__ = [
    "InvariantViolation",
    "check_boost_slots",
    "check_card_conservation",
    "check_firewalls",
    "check_invariants",
    "check_setup_counters",
]
