"""
Mock data generators for analytics testing and development.

Provides realistic, reproducible cycles, tickets, team members and risks
without needing a real data source.
"""

import random
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from delivery_analytics.adapters.memory import InMemoryRepository
from delivery_analytics.models import (
    Cycle, CycleStatus, RiskFactor, RiskStatus, RiskType,
    TeamMember, Ticket, TicketStatus,
)


class MockDataGenerator:
    """Generates reproducible mock records for analytics"""

    # Realistic names for team members
    TEAM_MEMBERS = [
        "Alice Chen", "Bob Smith", "Charlie Johnson", "Diana Martinez",
        "Ethan Brown", "Fiona O'Neill", "George Kim", "Hannah Patel"
    ]

    # Ticket title templates
    TICKET_TEMPLATES = [
        "Implement {feature}",
        "Fix bug in {feature}",
        "Add tests for {feature}",
        "Optimize {feature} performance",
    ]

    FEATURES = [
        "user login", "dashboard", "reporting", "notifications",
        "data export", "search", "filtering", "pagination",
    ]

    RISK_NAMES = [
        "Key engineer on leave", "Third-party API deprecation",
        "Unclear acceptance criteria", "Database migration complexity",
        "Vendor contract renewal", "Scope creep from stakeholders",
    ]

    POINT_SIZES = [1, 2, 3, 5, 8, 13]

    def __init__(self, seed: int = 42, base_date: Optional[datetime] = None):
        """
        Args:
            seed: Random seed; the same seed always yields the same records
            base_date: Start of the first generated cycle
        """
        self._random = random.Random(seed)
        self.base_date = base_date or datetime(2025, 1, 6)
        self.ticket_counter = 1000

    def _ticket_title(self) -> str:
        template = self._random.choice(self.TICKET_TEMPLATES)
        return template.format(feature=self._random.choice(self.FEATURES))

    def member_ids(self, team_size: int) -> List[str]:
        return [f"user-{i + 1}" for i in range(team_size)]

    def generate_members(self, team_size: int = 5) -> List[TeamMember]:
        """Team members without tickets; tickets link to them by id"""
        return [
            TeamMember(
                id=member_id,
                name=name,
                email=f"{name.split()[0].lower()}@example.com",
                role="developer",
            )
            for member_id, name in zip(self.member_ids(team_size), self.TEAM_MEMBERS)
        ]

    def generate_ticket(
        self,
        cycle: Cycle,
        status: Optional[TicketStatus] = None,
        assigned_to: Optional[str] = None,
    ) -> Ticket:
        """Generate a ticket inside a cycle; done tickets get a completion time within it"""
        self.ticket_counter += 1

        if status is None:
            status = self._random.choice(list(TicketStatus))

        span_days = max(1, (cycle.end_date - cycle.start_date).days)
        created_at = cycle.start_date - timedelta(days=self._random.randint(0, 5))
        completed_at = None
        if status == TicketStatus.DONE:
            completed_at = cycle.start_date + timedelta(
                days=self._random.randint(0, span_days - 1),
                hours=self._random.randint(9, 17),
            )

        return Ticket(
            id=f"TICKET-{self.ticket_counter}",
            title=self._ticket_title(),
            status=status,
            story_points=self._random.choice(self.POINT_SIZES),
            assigned_to=assigned_to,
            cycle_id=cycle.id,
            created_at=created_at,
            completed_at=completed_at,
        )

    def generate_cycle(
        self,
        cycle_number: int,
        status: CycleStatus = CycleStatus.COMPLETED,
        duration_days: int = 14,
    ) -> Cycle:
        start = self.base_date + timedelta(days=(cycle_number - 1) * duration_days)
        return Cycle(
            id=f"CYCLE-{cycle_number}",
            name=f"Cycle {cycle_number}",
            cycle_number=cycle_number,
            start_date=start,
            end_date=start + timedelta(days=duration_days),
            status=status,
        )

    def generate_cycle_tickets(
        self,
        cycle: Cycle,
        num_tickets: int = 12,
        completion_ratio: float = 0.8,
        member_ids: Optional[List[str]] = None,
    ) -> List[Ticket]:
        """Tickets for a cycle, roughly ``completion_ratio`` of them done"""
        tickets = []
        for _ in range(num_tickets):
            if self._random.random() < completion_ratio:
                status = TicketStatus.DONE
            else:
                status = self._random.choice(
                    [TicketStatus.TODO, TicketStatus.IN_PROGRESS, TicketStatus.IN_REVIEW, TicketStatus.BLOCKED]
                )
            assignee = None
            if member_ids and self._random.random() < 0.9:
                assignee = self._random.choice(member_ids)
            tickets.append(self.generate_ticket(cycle, status=status, assigned_to=assignee))
        return tickets

    def generate_cycle_history(
        self,
        num_cycles: int = 6,
        team_size: int = 5,
    ) -> Tuple[List[Cycle], List[Ticket]]:
        """Completed cycles in chronological order, plus their tickets"""
        member_ids = self.member_ids(team_size)
        cycles: List[Cycle] = []
        tickets: List[Ticket] = []
        for number in range(1, num_cycles + 1):
            cycle = self.generate_cycle(number)
            cycles.append(cycle)
            tickets.extend(self.generate_cycle_tickets(
                cycle,
                num_tickets=self._random.randint(10, 16),
                completion_ratio=self._random.uniform(0.65, 1.0),
                member_ids=member_ids,
            ))
        return cycles, tickets

    def generate_risks(self, num_risks: int = 6) -> List[RiskFactor]:
        return [
            RiskFactor(
                id=f"RISK-{i + 1}",
                name=self.RISK_NAMES[i % len(self.RISK_NAMES)],
                risk_type=self._random.choice(list(RiskType)),
                probability=self._random.randint(1, 5),
                impact=self._random.randint(1, 5),
                status=self._random.choice(list(RiskStatus)),
            )
            for i in range(num_risks)
        ]

    def generate_repository(
        self,
        num_cycles: int = 6,
        team_size: int = 5,
        num_risks: int = 6,
    ) -> InMemoryRepository:
        """
        A repository with closed history, one active cycle after it, a team
        and a risk register.
        """
        member_ids = self.member_ids(team_size)
        cycles, tickets = self.generate_cycle_history(num_cycles, team_size)

        active = self.generate_cycle(num_cycles + 1, status=CycleStatus.ACTIVE)
        cycles.append(active)
        tickets.extend(self.generate_cycle_tickets(active, num_tickets=14, completion_ratio=0.4, member_ids=member_ids))

        return InMemoryRepository(
            cycles=cycles,
            tickets=tickets,
            members=self.generate_members(team_size),
            risks=self.generate_risks(num_risks),
        )
