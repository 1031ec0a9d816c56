"""Booking status transitions.

    pending ──> confirmed ──> checked_in ──> checked_out
       │            │  └────> no_show
       └────────────┴───────> cancelled

No transition skips a state or moves backwards. No code path triggers
``no_show`` yet; the slot is kept so the status can be introduced without
a schema change.
"""

from __future__ import annotations

from shared.domain.exceptions import InvalidStateError

PENDING = "pending"
CONFIRMED = "confirmed"
CHECKED_IN = "checked_in"
CHECKED_OUT = "checked_out"
CANCELLED = "cancelled"
NO_SHOW = "no_show"

TRANSITIONS: dict[str, frozenset[str]] = {
    PENDING: frozenset({CONFIRMED, CANCELLED}),
    CONFIRMED: frozenset({CHECKED_IN, CANCELLED, NO_SHOW}),
    CHECKED_IN: frozenset({CHECKED_OUT}),
    CHECKED_OUT: frozenset(),
    CANCELLED: frozenset(),
    NO_SHOW: frozenset(),
}

HOLDING_STATUSES = (PENDING, CONFIRMED, CHECKED_IN)
OCCUPYING_STATUSES = (CONFIRMED, CHECKED_IN)
TERMINAL_STATUSES = tuple(status for status, targets in TRANSITIONS.items() if not targets)


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def ensure_transition(current: str, target: str, action: str) -> None:
    if not can_transition(current, target):
        raise InvalidStateError(
            f"Cannot {action} a booking in status '{current}'.",
            code=f"cannot_{action.replace(' ', '_')}",
        )
