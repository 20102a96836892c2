"""
Cycle lifecycle rules.

Cycles move planned -> active -> {completed | cancelled}; no other moves are
allowed and the two end states are terminal. These helpers only check and
derive values, they never modify a cycle.
"""

from datetime import datetime
from typing import Dict, FrozenSet, Iterable, Union

from delivery_analytics.models import CycleStatus, Ticket
from delivery_analytics.utils.errors import ValidationError

CYCLE_TRANSITIONS: Dict[CycleStatus, FrozenSet[CycleStatus]] = {
    CycleStatus.PLANNED: frozenset({CycleStatus.ACTIVE, CycleStatus.CANCELLED}),
    CycleStatus.ACTIVE: frozenset({CycleStatus.COMPLETED, CycleStatus.CANCELLED}),
    CycleStatus.COMPLETED: frozenset(),
    CycleStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({CycleStatus.COMPLETED, CycleStatus.CANCELLED})


def _as_status(value: Union[str, CycleStatus], field: str) -> CycleStatus:
    try:
        return CycleStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in CycleStatus)
        raise ValidationError(
            f"Invalid cycle status {value!r}. Must be one of: {allowed}", field=field
        ) from None


def can_transition(current: Union[str, CycleStatus], target: Union[str, CycleStatus]) -> bool:
    """True when a cycle may move from ``current`` to ``target`` (staying put is allowed)"""
    current = _as_status(current, "status")
    target = _as_status(target, "status")
    return current == target or target in CYCLE_TRANSITIONS[current]


def validate_cycle_transition(current: Union[str, CycleStatus], target: Union[str, CycleStatus]) -> CycleStatus:
    """Return the target status, or raise ValidationError for a forbidden move"""
    if not can_transition(current, target):
        raise ValidationError(
            f"Cannot transition from {CycleStatus(current).value} to {CycleStatus(target).value}",
            field="status",
        )
    return CycleStatus(target)


def completion_velocity(tickets: Iterable[Ticket]) -> int:
    """Story points of done tickets; recorded as the cycle velocity on completion"""
    return sum(t.points for t in tickets if t.is_done)


def validate_cycle_dates(start_date: datetime, end_date: datetime) -> None:
    if (start_date.tzinfo is None) != (end_date.tzinfo is None):
        raise ValidationError(
            "start_date and end_date must both be naive or both be timezone-aware",
            field="end_date",
        )
    if end_date <= start_date:
        raise ValidationError(
            f"end_date ({end_date.isoformat()}) must be after start_date ({start_date.isoformat()})",
            field="end_date",
        )


def validate_reference_time(as_of: datetime, start_date: datetime) -> None:
    """as_of must be comparable with the cycle bounds"""
    if (as_of.tzinfo is None) != (start_date.tzinfo is None):
        raise ValidationError(
            "as_of must be naive or timezone-aware like the cycle dates", field="as_of"
        )
