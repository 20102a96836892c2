"""
Delivery analytics engine.

Turns read-only snapshots of tickets, cycles, team members and risk factors
into burndown series, velocity trends, workload classifications and risk
scores. The engine performs no I/O and keeps no state between calls.
"""

from delivery_analytics.models import (
    AnalyticsOptions,
    AnalyticsResult,
    AnalyticsSnapshot,
    Cycle,
    CycleSnapshot,
    CycleStatus,
    Metric,
    RiskFactor,
    RiskLevel,
    TeamMember,
    Ticket,
    TicketStatus,
    WorkloadStatus,
)
from delivery_analytics.service import AnalyticsService
from delivery_analytics.utils.errors import AnalyticsError, ValidationError

__all__ = [
    'AnalyticsError',
    'AnalyticsOptions',
    'AnalyticsResult',
    'AnalyticsService',
    'AnalyticsSnapshot',
    'Cycle',
    'CycleSnapshot',
    'CycleStatus',
    'Metric',
    'RiskFactor',
    'RiskLevel',
    'TeamMember',
    'Ticket',
    'TicketStatus',
    'ValidationError',
    'WorkloadStatus',
]
