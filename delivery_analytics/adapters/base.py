"""
Base Analytics Repository

Defines the interface hosts implement to fetch records for the engine, and
the helper that turns those records into an AnalyticsSnapshot. The engine
itself never calls a repository; it only sees the snapshot.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from delivery_analytics.models import AnalyticsSnapshot, CycleSnapshot, RiskFactor, TeamMember
from delivery_analytics.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class BaseAnalyticsRepository(ABC):
    """
    Abstract base class for analytics data sources.

    Implementations are responsible for scoping records to what the caller
    may read (organization, domain) and for any persistence details.
    """

    @abstractmethod
    async def get_cycle(self, cycle_id: str) -> Optional[CycleSnapshot]:
        """
        Fetch one cycle with its tickets.

        Returns:
            CycleSnapshot, or None when the cycle does not exist
        """
        pass

    @abstractmethod
    async def get_completed_cycles(self, limit: int = 10) -> List[CycleSnapshot]:
        """
        Fetch closed cycles with their tickets.

        Returns:
            At most ``limit`` cycles, most recent first
        """
        pass

    @abstractmethod
    async def get_team_members(self, cycle_id: Optional[str] = None) -> List[TeamMember]:
        """
        Fetch team members with their assigned tickets.

        Args:
            cycle_id: When given, only tickets in this cycle are attached
        """
        pass

    @abstractmethod
    async def count_unassigned_open_tickets(self) -> int:
        """Number of tickets that are not done and have no assignee"""
        pass

    @abstractmethod
    async def get_risk_factors(self) -> List[RiskFactor]:
        pass


async def load_snapshot(
    repository: BaseAnalyticsRepository,
    cycle_id: Optional[str] = None,
    limit: int = 10,
) -> AnalyticsSnapshot:
    """
    Fetch everything one analytics call needs.

    Raises:
        ValidationError: limit is not positive
        NotFoundError: cycle_id was given but the repository has no such cycle
    """
    if limit < 1:
        raise ValidationError(f"limit must be a positive integer, got {limit!r}", field="limit")

    cycle = None
    if cycle_id is not None:
        cycle = await repository.get_cycle(cycle_id)
        if cycle is None:
            raise NotFoundError(f"Cycle not found: {cycle_id}", details={"cycle_id": cycle_id})

    history = await repository.get_completed_cycles(limit)
    members = await repository.get_team_members(cycle_id)
    unassigned = await repository.count_unassigned_open_tickets()
    risks = await repository.get_risk_factors()

    logger.info(
        "Loaded snapshot: cycle=%s history=%d members=%d risks=%d",
        cycle_id, len(history), len(members), len(risks)
    )

    return AnalyticsSnapshot(
        cycle=cycle,
        cycle_history=history,
        members=members,
        unassigned_open_tickets=unassigned,
        risks=risks,
    )
