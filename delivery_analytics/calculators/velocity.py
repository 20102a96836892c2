"""
Velocity analyzer.

Aggregates committed vs completed points over recent closed cycles, detects
the velocity trend and produces rule-based recommendations.
"""

import logging
from typing import List, Optional, Sequence, Union

from delivery_analytics.models import (
    ChartDataPoint, ChartResponse, ChartSeries, ChartType,
    CycleSnapshot, CycleVelocity, VelocityReport, VelocitySettings, VelocityTrend,
)
from delivery_analytics.utils.errors import ValidationError
from delivery_analytics.utils.numeric import (
    coefficient_of_variation, mean, percentage, population_variance,
    round_half_up, std_dev,
)

logger = logging.getLogger(__name__)

RECOMMEND_MORE_HISTORY = "Complete more cycles to get accurate velocity predictions"
RECOMMEND_REDUCE_COMMITMENT = "Consider reducing cycle commitments - completion rate is below {rate}%"
RECOMMEND_RAISE_COMMITMENT = "Team is consistently exceeding commitments - consider increasing velocity"
RECOMMEND_ESTIMATION = "High velocity variance detected - work on improving estimation consistency"
RECOMMEND_STABLE = "Velocity is stable and predictable - good job!"

# Trend detection needs at least this many cycles, whatever the window
MIN_TREND_CYCLES = 6


class VelocityAnalyzer:
    """Calculates velocity statistics from cycle history"""

    @staticmethod
    def summarize_cycle(snapshot: CycleSnapshot) -> CycleVelocity:
        """Committed and completed points of one cycle, from its tickets"""
        tickets = snapshot.tickets
        committed = sum(t.points for t in tickets)
        done = [t for t in tickets if t.is_done]
        completed = sum(t.points for t in done)
        return CycleVelocity(
            cycle_id=snapshot.cycle.id,
            cycle_name=snapshot.cycle.name,
            cycle_number=snapshot.cycle.cycle_number,
            committed_points=committed,
            completed_points=completed,
            completion_rate=percentage(completed, committed),
            ticket_count=len(tickets),
            completed_tickets=len(done),
        )

    @staticmethod
    def calculate(
        history: Sequence[Union[CycleSnapshot, CycleVelocity]],
        limit: int = 10,
        settings: Optional[VelocitySettings] = None,
    ) -> VelocityReport:
        """
        Analyse velocity over the most recent cycles.

        Args:
            history: Closed cycles, most recent first
            limit: Number of cycles to analyse, taken from the front
            settings: Trend window and recommendation thresholds

        Returns:
            VelocityReport with statistics and recommendations
        """
        settings = settings or VelocitySettings()
        VelocityAnalyzer.validate(limit, settings)

        cycles = [
            VelocityAnalyzer.summarize_cycle(c) if isinstance(c, CycleSnapshot)
            else VelocityAnalyzer._with_completion_rate(c)
            for c in list(history)[:limit]
        ]
        velocities = [c.completed_points for c in cycles]

        average_velocity = round_half_up(mean(velocities))
        average_completion_rate = round_half_up(mean([c.completion_rate for c in cycles]))
        variance = population_variance(velocities)
        cv = coefficient_of_variation(velocities)
        high_variance = len(cycles) >= settings.min_cycles and cv > settings.high_variance_cv

        trend = VelocityAnalyzer._calculate_trend(velocities, settings)

        recommendations = VelocityAnalyzer._generate_recommendations(
            len(cycles), average_completion_rate, high_variance, settings
        )

        logger.debug(
            "Velocity over %d cycles: avg=%s trend=%s cv=%.1f",
            len(cycles), average_velocity, trend.value, cv
        )

        return VelocityReport(
            cycles=cycles,
            total_cycles_analyzed=len(cycles),
            average_velocity=average_velocity,
            average_completion_rate=average_completion_rate,
            trend=trend,
            best_cycle=max(cycles, key=lambda c: c.completed_points) if cycles else None,
            worst_cycle=min(cycles, key=lambda c: c.completed_points) if cycles else None,
            variance=round_half_up(variance, 1),
            std_dev=round_half_up(std_dev(velocities), 1),
            coefficient_of_variation=round_half_up(cv, 1),
            high_variance=high_variance,
            recommendations=recommendations,
        )

    @staticmethod
    def validate(limit: int, settings: VelocitySettings) -> None:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValidationError(f"limit must be a positive integer, got {limit!r}", field="limit")
        if settings.trend_window < 1:
            raise ValidationError(
                f"trend_window must be at least 1, got {settings.trend_window}", field="trend_window"
            )

    @staticmethod
    def to_chart(report: VelocityReport) -> ChartResponse:
        """Committed vs completed bars, oldest cycle first"""
        ordered = list(reversed(report.cycles))
        committed_series = ChartSeries(
            name="Committed",
            data=[
                ChartDataPoint(label=VelocityAnalyzer._label(c), value=c.committed_points)
                for c in ordered
            ],
            color="#94a3b8",  # Gray
            type="bar",
        )
        completed_series = ChartSeries(
            name="Completed",
            data=[
                ChartDataPoint(
                    label=VelocityAnalyzer._label(c),
                    value=c.completed_points,
                    metadata={"completion_rate": c.completion_rate},
                )
                for c in ordered
            ],
            color="#10b981",  # Green
            type="bar",
        )
        return ChartResponse(
            chart_type=ChartType.VELOCITY,
            title="Velocity Trend",
            series=[committed_series, completed_series],
            metadata={
                "average_velocity": report.average_velocity,
                "trend": report.trend.value,
                "total_cycles_analyzed": report.total_cycles_analyzed,
            },
        )

    @staticmethod
    def _label(cycle: CycleVelocity) -> str:
        if cycle.cycle_number is not None:
            return f"Cycle {cycle.cycle_number}"
        return cycle.cycle_name

    @staticmethod
    def _with_completion_rate(cycle: CycleVelocity) -> CycleVelocity:
        return cycle.model_copy(
            update={"completion_rate": percentage(cycle.completed_points, cycle.committed_points)}
        )

    @staticmethod
    def _calculate_trend(velocities: List[int], settings: VelocitySettings) -> VelocityTrend:
        """
        Compare the mean of the most recent window with the window before it.

        Needs two full windows of history and at least MIN_TREND_CYCLES
        cycles; anything shorter is stable.
        """
        window = settings.trend_window
        if len(velocities) < max(window * 2, MIN_TREND_CYCLES):
            return VelocityTrend.STABLE

        recent = mean(velocities[:window])
        previous = mean(velocities[window:window * 2])

        if recent > previous * settings.improving_factor:
            return VelocityTrend.IMPROVING
        elif recent < previous * settings.declining_factor:
            return VelocityTrend.DECLINING
        return VelocityTrend.STABLE

    @staticmethod
    def _generate_recommendations(
        cycle_count: int,
        average_completion_rate: int,
        high_variance: bool,
        settings: VelocitySettings,
    ) -> List[str]:
        recommendations = []

        if cycle_count < settings.min_cycles:
            recommendations.append(RECOMMEND_MORE_HISTORY)

        if cycle_count > 0:
            if average_completion_rate < settings.low_completion_rate:
                recommendations.append(
                    RECOMMEND_REDUCE_COMMITMENT.format(rate=settings.low_completion_rate)
                )
            if average_completion_rate > settings.high_completion_rate:
                recommendations.append(RECOMMEND_RAISE_COMMITMENT)

        if high_variance:
            recommendations.append(RECOMMEND_ESTIMATION)

        if not recommendations:
            recommendations.append(RECOMMEND_STABLE)

        return recommendations
