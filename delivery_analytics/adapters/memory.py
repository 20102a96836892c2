"""
In-memory analytics repository.

Serves records held in plain lists. Useful for tests, demos and hosts that
already have everything loaded.
"""

from typing import Dict, List, Optional, Sequence

from delivery_analytics.adapters.base import BaseAnalyticsRepository
from delivery_analytics.models import (
    Cycle, CycleSnapshot, CycleStatus, RiskFactor, TeamMember, Ticket,
)


class InMemoryRepository(BaseAnalyticsRepository):
    """Repository backed by lists of cycles, tickets, members and risks"""

    def __init__(
        self,
        cycles: Sequence[Cycle] = (),
        tickets: Sequence[Ticket] = (),
        members: Sequence[TeamMember] = (),
        risks: Sequence[RiskFactor] = (),
    ):
        """
        Args:
            cycles: All cycles
            tickets: All tickets; ``cycle_id`` and ``assigned_to`` link them up
            members: Team members; their ``tickets`` are filled from ``tickets``
            risks: Risk register
        """
        self._cycles: Dict[str, Cycle] = {c.id: c for c in cycles}
        self._tickets: List[Ticket] = list(tickets)
        self._members: List[TeamMember] = list(members)
        self._risks: List[RiskFactor] = list(risks)

    def _snapshot(self, cycle: Cycle) -> CycleSnapshot:
        return CycleSnapshot(
            cycle=cycle,
            tickets=[t for t in self._tickets if t.cycle_id == cycle.id],
        )

    async def get_cycle(self, cycle_id: str) -> Optional[CycleSnapshot]:
        cycle = self._cycles.get(cycle_id)
        if cycle is None:
            return None
        return self._snapshot(cycle)

    async def get_completed_cycles(self, limit: int = 10) -> List[CycleSnapshot]:
        completed = [c for c in self._cycles.values() if c.status == CycleStatus.COMPLETED]
        completed.sort(key=lambda c: c.end_date, reverse=True)
        return [self._snapshot(c) for c in completed[:limit]]

    async def get_team_members(self, cycle_id: Optional[str] = None) -> List[TeamMember]:
        members = []
        for member in self._members:
            assigned = [
                t for t in self._tickets
                if t.assigned_to == member.id and (cycle_id is None or t.cycle_id == cycle_id)
            ]
            members.append(member.model_copy(update={"tickets": assigned}))
        return members

    async def count_unassigned_open_tickets(self) -> int:
        return sum(1 for t in self._tickets if t.assigned_to is None and not t.is_done)

    async def get_risk_factors(self) -> List[RiskFactor]:
        return list(self._risks)
