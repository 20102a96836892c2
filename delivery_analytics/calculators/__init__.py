"""
Calculators for delivery analytics.

Each calculator is a set of pure functions that turns a read-only snapshot
into an analytics result.
"""

from delivery_analytics.calculators.burndown import BurndownCalculator, resolve_metric
from delivery_analytics.calculators.cycle_progress import CycleProgressCalculator
from delivery_analytics.calculators.risk import RiskScorer, classify_risk
from delivery_analytics.calculators.velocity import VelocityAnalyzer
from delivery_analytics.calculators.workload import WorkloadDistributor, classify_workload

__all__ = [
    'BurndownCalculator',
    'CycleProgressCalculator',
    'RiskScorer',
    'VelocityAnalyzer',
    'WorkloadDistributor',
    'classify_risk',
    'classify_workload',
    'resolve_metric',
]
