"""Analytics service - main entry point for delivery analytics."""

from typing import Optional, Sequence, Union
from datetime import datetime
import logging

from delivery_analytics.calculators.burndown import BurndownCalculator, resolve_metric
from delivery_analytics.calculators.cycle_progress import CycleProgressCalculator
from delivery_analytics.calculators.risk import RiskScorer, validate_thresholds as validate_risk_thresholds
from delivery_analytics.calculators.velocity import VelocityAnalyzer
from delivery_analytics.calculators.workload import (
    WorkloadDistributor,
    validate_thresholds as validate_workload_thresholds,
)
from delivery_analytics.models import (
    AnalyticsOptions,
    AnalyticsResult,
    AnalyticsSnapshot,
    BurndownResult,
    CycleProgress,
    CycleSnapshot,
    CycleVelocity,
    RiskFactor,
    RiskReport,
    TeamMember,
    VelocityReport,
    WorkloadReport,
)
from delivery_analytics.utils.config import AnalyticsConfig, get_config

logger = logging.getLogger(__name__)


class AnalyticsService:
    """
    Orchestrates the calculators against a snapshot.

    The service keeps no state between calls and performs no I/O: records are
    fetched by the host (see ``delivery_analytics.adapters``) and passed in.
    Every input is validated before anything is computed, so a call either
    returns a complete result or raises a single ValidationError.
    """

    def __init__(self, config: Optional[AnalyticsConfig] = None):
        """
        Initialize analytics service.

        Args:
            config: Source of default options; the global config when omitted.
        """
        self.config = config or get_config()

    def default_options(self, as_of: datetime) -> AnalyticsOptions:
        """Options built from the configured defaults"""
        return self.config.to_options(as_of)

    def validate_options(self, options: AnalyticsOptions) -> None:
        resolve_metric(options.metric)
        VelocityAnalyzer.validate(options.limit, options.velocity)
        validate_workload_thresholds(options.workload_thresholds)
        validate_risk_thresholds(options.risk_thresholds)

    def get_burndown(self, cycle: CycleSnapshot, options: AnalyticsOptions) -> BurndownResult:
        self.validate_options(options)
        return BurndownCalculator.calculate_for_cycle(cycle, options.as_of, options.metric)

    def get_cycle_progress(self, cycle: CycleSnapshot, options: AnalyticsOptions) -> CycleProgress:
        self.validate_options(options)
        return CycleProgressCalculator.calculate(cycle, options.as_of)

    def get_velocity(
        self,
        history: Sequence[Union[CycleSnapshot, CycleVelocity]],
        options: AnalyticsOptions,
    ) -> VelocityReport:
        self.validate_options(options)
        return VelocityAnalyzer.calculate(history, options.limit, options.velocity)

    def get_workload(
        self,
        members: Sequence[TeamMember],
        unassigned_open_tickets: int,
        options: AnalyticsOptions,
    ) -> WorkloadReport:
        self.validate_options(options)
        return WorkloadDistributor.calculate(members, unassigned_open_tickets, options.workload_thresholds)

    def get_risk_report(self, risks: Sequence[RiskFactor], options: AnalyticsOptions) -> RiskReport:
        self.validate_options(options)
        return RiskScorer.summarize(risks, options.risk_thresholds)

    def analyze(self, snapshot: AnalyticsSnapshot, options: AnalyticsOptions) -> AnalyticsResult:
        """
        Run every analysis the snapshot has data for.

        Args:
            snapshot: Records fetched by the host
            options: Metric, history limit, as_of and thresholds

        Returns:
            AnalyticsResult; burndown and progress are None without a cycle
        """
        self._validate_snapshot(snapshot, options)

        burndown = None
        progress = None
        if snapshot.cycle is not None:
            burndown = BurndownCalculator.calculate_for_cycle(snapshot.cycle, options.as_of, options.metric)
            progress = CycleProgressCalculator.calculate(snapshot.cycle, options.as_of)

        result = AnalyticsResult(
            as_of=options.as_of,
            metric=resolve_metric(options.metric),
            burndown=burndown,
            progress=progress,
            velocity=VelocityAnalyzer.calculate(snapshot.cycle_history, options.limit, options.velocity),
            workload=WorkloadDistributor.calculate(
                snapshot.members, snapshot.unassigned_open_tickets, options.workload_thresholds
            ),
            risks=RiskScorer.summarize(snapshot.risks, options.risk_thresholds),
        )

        logger.info(
            "Analytics computed: cycle=%s history=%d members=%d risks=%d",
            snapshot.cycle.cycle.id if snapshot.cycle else None,
            result.velocity.total_cycles_analyzed,
            result.workload.summary.total_members,
            result.risks.summary.total,
        )
        return result

    def _validate_snapshot(self, snapshot: AnalyticsSnapshot, options: AnalyticsOptions) -> None:
        """Reject bad input up front so no partial result is ever produced"""
        self.validate_options(options)
        if snapshot.cycle is not None:
            cycle = snapshot.cycle.cycle
            BurndownCalculator.validate(cycle.start_date, cycle.end_date, snapshot.cycle.tickets, options.as_of)
        WorkloadDistributor.validate(snapshot.unassigned_open_tickets, options.workload_thresholds)
        for risk in snapshot.risks:
            RiskScorer.assess(risk, options.risk_thresholds)
