"""
Pytest configuration and fixtures for all tests.

This file ensures the project root is in the Python path so that imports
work without installing the package, and provides literal record fixtures.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import pytest for fixtures
import pytest

from delivery_analytics.models import (
    AnalyticsOptions,
    Cycle,
    CycleSnapshot,
    CycleStatus,
    RiskFactor,
    RiskStatus,
    RiskType,
    TeamMember,
    Ticket,
    TicketStatus,
)
from delivery_analytics.utils.config import AnalyticsConfig

CYCLE_START = datetime(2025, 3, 3)


def make_ticket(
    ticket_id,
    points=None,
    status=TicketStatus.TODO,
    completed_at=None,
    assigned_to=None,
    cycle_id="CYCLE-1",
):
    """Build a ticket with sensible defaults"""
    return Ticket(
        id=ticket_id,
        title=f"Ticket {ticket_id}",
        status=status,
        story_points=points,
        assigned_to=assigned_to,
        cycle_id=cycle_id,
        created_at=CYCLE_START - timedelta(days=1),
        completed_at=completed_at,
    )


def make_cycle(cycle_id="CYCLE-1", days=10, status=CycleStatus.ACTIVE, number=1, start=CYCLE_START):
    return Cycle(
        id=cycle_id,
        name=f"Cycle {number}",
        cycle_number=number,
        start_date=start,
        end_date=start + timedelta(days=days),
        status=status,
    )


def make_history_cycle(number, committed, completed):
    """A closed cycle whose tickets add up to the given points (most recent = highest number)"""
    cycle = make_cycle(f"CYCLE-{number}", days=14, status=CycleStatus.COMPLETED, number=number,
                       start=CYCLE_START + timedelta(days=14 * number))
    tickets = []
    if completed:
        tickets.append(make_ticket(f"T{number}-done", completed, TicketStatus.DONE,
                                   completed_at=cycle.start_date + timedelta(days=3), cycle_id=cycle.id))
    if committed - completed:
        tickets.append(make_ticket(f"T{number}-open", committed - completed, TicketStatus.IN_PROGRESS,
                                   cycle_id=cycle.id))
    return CycleSnapshot(cycle=cycle, tickets=tickets)


@pytest.fixture
def project_root_path():
    """Return the project root path."""
    return project_root


@pytest.fixture
def cycle_start():
    return CYCLE_START


@pytest.fixture
def config():
    """Default configuration, independent of the environment"""
    return AnalyticsConfig()


@pytest.fixture
def options():
    """Options with defaults, as of day 5 of the sample cycle"""
    return AnalyticsOptions(as_of=CYCLE_START + timedelta(days=5))


@pytest.fixture
def sample_cycle():
    """
    10-day cycle with 20 points: 8 done by day 5 (3 on day 2, 5 on day 4),
    12 open.
    """
    cycle = make_cycle()
    tickets = [
        make_ticket("T1", 3, TicketStatus.DONE, completed_at=CYCLE_START + timedelta(days=2), assigned_to="u1"),
        make_ticket("T2", 5, TicketStatus.DONE, completed_at=CYCLE_START + timedelta(days=4), assigned_to="u1"),
        make_ticket("T3", 5, TicketStatus.IN_PROGRESS, assigned_to="u2"),
        make_ticket("T4", 4, TicketStatus.TODO, assigned_to="u2"),
        make_ticket("T5", 3, TicketStatus.BLOCKED),
    ]
    return CycleSnapshot(cycle=cycle, tickets=tickets)


@pytest.fixture
def sample_members():
    return [
        TeamMember(id="u1", name="Alice Chen", tickets=[
            make_ticket("A1", 5, TicketStatus.DONE, completed_at=CYCLE_START, assigned_to="u1"),
            make_ticket("A2", 5, TicketStatus.IN_PROGRESS, assigned_to="u1"),
            make_ticket("A3", 4, TicketStatus.TODO, assigned_to="u1"),
        ]),
        TeamMember(id="u2", name="Bob Smith", tickets=[]),
        TeamMember(id="u3", name="Charlie Johnson", tickets=[
            make_ticket("C1", 13, TicketStatus.IN_PROGRESS, assigned_to="u3"),
            make_ticket("C2", 2, TicketStatus.IN_REVIEW, assigned_to="u3"),
        ]),
        TeamMember(id="u4", name="Diana Martinez", tickets=[
            make_ticket("D1", 3, TicketStatus.TESTING, assigned_to="u4"),
            make_ticket("D2", 8, TicketStatus.BLOCKED, assigned_to="u4"),
        ]),
    ]


@pytest.fixture
def sample_risks():
    return [
        RiskFactor(id="R1", name="Vendor delay", risk_type=RiskType.EXTERNAL, probability=4, impact=5),
        RiskFactor(id="R2", name="Unclear scope", risk_type=RiskType.SCOPE, probability=3, impact=4,
                   status=RiskStatus.MITIGATING),
        RiskFactor(id="R3", name="Flaky CI", risk_type=RiskType.TECHNICAL, probability=2, impact=3,
                   status=RiskStatus.RESOLVED),
        RiskFactor(id="R4", name="Holiday season", risk_type=RiskType.RESOURCE, probability=1, impact=2,
                   status=RiskStatus.ACCEPTED),
    ]
