"""
Burndown chart calculator.

Generates the daily remaining-work series of a cycle (ideal vs actual) and a
projection of where the cycle will land at its current pace.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Union

from delivery_analytics.lifecycle import validate_cycle_dates, validate_reference_time
from delivery_analytics.models import (
    BurndownPoint, BurndownResult, BurndownSummary,
    ChartDataPoint, ChartResponse, ChartSeries, ChartType,
    CycleSnapshot, Metric, Ticket,
)
from delivery_analytics.utils.errors import ValidationError
from delivery_analytics.utils.numeric import ceil_days, percentage, round_half_up, safe_divide

logger = logging.getLogger(__name__)


def resolve_metric(metric: Union[str, Metric]) -> Metric:
    """Parse a metric selector, raising ValidationError for anything unknown"""
    try:
        return Metric(metric)
    except ValueError:
        raise ValidationError(
            f"Invalid metric: {metric!r}. Must be one of: points, count", field="metric"
        ) from None


class BurndownCalculator:
    """Calculates burndown series and summary for a single cycle"""

    @staticmethod
    def calculate(
        start_date: datetime,
        end_date: datetime,
        tickets: Sequence[Ticket],
        as_of: datetime,
        metric: Union[str, Metric] = Metric.POINTS,
        cycle_id: Optional[str] = None,
        cycle_name: Optional[str] = None,
    ) -> BurndownResult:
        """
        Calculate the burndown of a cycle.

        Args:
            start_date: Cycle start
            end_date: Cycle end, strictly after start_date
            tickets: Tickets planned into the cycle
            as_of: Reference instant; dates after it have no actuals
            metric: 'points' sums story points, 'count' counts tickets

        Returns:
            BurndownResult with one point per day, ascending

        Raises:
            ValidationError: unknown metric, end_date <= start_date, or
                timestamps that mix naive and timezone-aware values
        """
        metric = resolve_metric(metric)
        BurndownCalculator.validate(start_date, end_date, tickets, as_of)

        total_work = BurndownCalculator._work(tickets, metric)
        days_total = max(1, ceil_days(start_date, end_date))
        ideal_daily_burn = total_work / days_total

        points = [
            BurndownCalculator._point(instant, start_date, tickets, as_of, metric, total_work, ideal_daily_burn)
            for instant in BurndownCalculator._timeline(start_date, end_date, days_total)
        ]

        summary = BurndownCalculator._summarize(
            start_date, end_date, tickets, as_of, metric, total_work, days_total
        )

        logger.debug(
            "Burndown for cycle %s: %s %s over %d days, %d points",
            cycle_id, total_work, metric.value, days_total, len(points)
        )

        return BurndownResult(
            cycle_id=cycle_id,
            cycle_name=cycle_name,
            metric=metric,
            ideal_daily_burn=round_half_up(ideal_daily_burn, 1),
            summary=summary,
            points=points,
        )

    @staticmethod
    def calculate_for_cycle(
        snapshot: CycleSnapshot,
        as_of: datetime,
        metric: Union[str, Metric] = Metric.POINTS,
    ) -> BurndownResult:
        """Calculate the burndown of a cycle snapshot"""
        cycle = snapshot.cycle
        return BurndownCalculator.calculate(
            cycle.start_date,
            cycle.end_date,
            snapshot.tickets,
            as_of,
            metric,
            cycle_id=cycle.id,
            cycle_name=cycle.name,
        )

    @staticmethod
    def validate(
        start_date: datetime,
        end_date: datetime,
        tickets: Sequence[Ticket],
        as_of: datetime,
    ) -> None:
        validate_cycle_dates(start_date, end_date)
        validate_reference_time(as_of, start_date)
        aware = start_date.tzinfo is not None
        for ticket in tickets:
            if ticket.completed_at is not None and (ticket.completed_at.tzinfo is not None) != aware:
                raise ValidationError(
                    f"Ticket {ticket.id} completed_at must be naive or timezone-aware like the cycle dates",
                    field="completed_at",
                    details={"ticket_id": ticket.id},
                )

    @staticmethod
    def to_chart(result: BurndownResult) -> ChartResponse:
        """Render ideal and actual lines for charting"""
        ideal_series = ChartSeries(
            name="Ideal",
            data=[
                ChartDataPoint(date=p.date, value=p.ideal_remaining, label=p.date.isoformat())
                for p in result.points
            ],
            color="#94a3b8",  # Gray
            type="line",
        )
        actual_series = ChartSeries(
            name="Actual",
            data=[
                ChartDataPoint(
                    date=p.date,
                    value=p.actual_remaining,
                    label=p.date.isoformat(),
                    metadata={"completed": p.completed_to_date},
                )
                for p in result.points
            ],
            color="#3b82f6",  # Blue
            type="line",
        )
        title = f"{result.cycle_name} Burndown" if result.cycle_name else "Cycle Burndown"
        return ChartResponse(
            chart_type=ChartType.BURNDOWN,
            title=title,
            series=[ideal_series, actual_series],
            metadata={"metric": result.metric.value, **result.summary.model_dump()},
        )

    @staticmethod
    def _work(tickets: Sequence[Ticket], metric: Metric) -> int:
        if metric == Metric.POINTS:
            return sum(t.points for t in tickets)
        return len(tickets)

    @staticmethod
    def _timeline(start_date: datetime, end_date: datetime, days_total: int) -> List[datetime]:
        """
        One instant per calendar day from start, with the last point pinned to end.

        For whole-day cycles this is simply start + 0..days_total days. For a
        fractional span the final instant is end itself so the ideal line
        always reaches zero; a daily instant on the same date as end is
        replaced by it.
        """
        instants = [start_date + timedelta(days=k) for k in range(days_total)]
        if instants[-1].date() == end_date.date():
            instants.pop()
        instants.append(end_date)
        return instants

    @staticmethod
    def _point(
        instant: datetime,
        start_date: datetime,
        tickets: Sequence[Ticket],
        as_of: datetime,
        metric: Metric,
        total_work: int,
        ideal_daily_burn: float,
    ) -> BurndownPoint:
        day_index = ceil_days(start_date, instant)
        ideal_remaining = max(0, total_work - ideal_daily_burn * day_index)

        actual_remaining = None
        completed_to_date = None
        if instant <= as_of:
            completed = [
                t for t in tickets
                if t.is_done and t.completed_at is not None and t.completed_at <= instant
            ]
            completed_to_date = BurndownCalculator._work(completed, metric)
            actual_remaining = round_half_up(total_work - completed_to_date, 1)
            completed_to_date = round_half_up(completed_to_date, 1)

        return BurndownPoint(
            date=instant.date(),
            day_index=day_index,
            ideal_remaining=round_half_up(ideal_remaining, 1),
            actual_remaining=actual_remaining,
            completed_to_date=completed_to_date,
        )

    @staticmethod
    def _summarize(
        start_date: datetime,
        end_date: datetime,
        tickets: Sequence[Ticket],
        as_of: datetime,
        metric: Metric,
        total_work: int,
        days_total: int,
    ) -> BurndownSummary:
        completed_work = BurndownCalculator._work([t for t in tickets if t.is_done], metric)
        remaining_work = total_work - completed_work

        days_elapsed = max(1, ceil_days(start_date, min(as_of, end_date)))
        velocity_per_day = round_half_up(safe_divide(completed_work, days_elapsed), 1)
        days_remaining = max(0, ceil_days(as_of, end_date))

        if velocity_per_day > 0:
            projected_completion = completed_work + velocity_per_day * days_remaining
        else:
            projected_completion = completed_work
        projected_completion = round_half_up(projected_completion, 1)

        return BurndownSummary(
            total_work=total_work,
            completed_work=completed_work,
            remaining_work=remaining_work,
            percent_complete=percentage(completed_work, total_work),
            days_total=days_total,
            days_elapsed=days_elapsed,
            days_remaining=days_remaining,
            velocity_per_day=velocity_per_day,
            projected_completion=projected_completion,
            on_track=projected_completion >= total_work,
        )
