"""
Cycle progress calculator.

Point-in-time progress of one cycle: tickets and points done, days used and
left, and a per-status ticket breakdown for board views.
"""

import logging
from datetime import datetime

from delivery_analytics.lifecycle import validate_cycle_dates, validate_reference_time
from delivery_analytics.models import CycleProgress, CycleSnapshot, TicketStatus
from delivery_analytics.utils.numeric import ceil_days, percentage

logger = logging.getLogger(__name__)


class CycleProgressCalculator:
    """Calculates progress metrics for a cycle"""

    @staticmethod
    def calculate(snapshot: CycleSnapshot, as_of: datetime) -> CycleProgress:
        cycle = snapshot.cycle
        tickets = snapshot.tickets
        validate_cycle_dates(cycle.start_date, cycle.end_date)
        validate_reference_time(as_of, cycle.start_date)

        total_points = sum(t.points for t in tickets)
        completed_points = sum(t.points for t in tickets if t.is_done)

        days_total = max(1, ceil_days(cycle.start_date, cycle.end_date))
        days_remaining = max(0, ceil_days(as_of, cycle.end_date))
        # Before the cycle starts the remaining days exceed the cycle length
        days_elapsed = max(0, days_total - days_remaining)

        tickets_by_status = {status.value: 0 for status in TicketStatus}
        for ticket in tickets:
            tickets_by_status[ticket.status.value] += 1

        logger.debug("Progress for cycle %s: %d/%d points", cycle.id, completed_points, total_points)

        return CycleProgress(
            cycle_id=cycle.id,
            total_tickets=len(tickets),
            completed_tickets=tickets_by_status[TicketStatus.DONE.value],
            total_points=total_points,
            completed_points=completed_points,
            completion_percentage=percentage(completed_points, total_points),
            days_total=days_total,
            days_elapsed=days_elapsed,
            days_remaining=days_remaining,
            tickets_by_status=tickets_by_status,
        )
