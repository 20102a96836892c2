"""
Tests for the workload distributor.
"""

import pytest

from conftest import make_ticket
from delivery_analytics.calculators.workload import WorkloadDistributor, classify_workload
from delivery_analytics.models import (
    ChartType, TeamMember, TicketStatus, WorkloadStatus, WorkloadThresholds,
)
from delivery_analytics.utils.errors import ValidationError


def member_with_active(member_id, active_points):
    tickets = [make_ticket(f"{member_id}-1", active_points, TicketStatus.IN_PROGRESS, assigned_to=member_id)] \
        if active_points else []
    return TeamMember(id=member_id, name=member_id.title(), tickets=tickets)


class TestClassification:
    """Test workload bucket boundaries"""

    @pytest.mark.parametrize("points,expected", [
        (0, WorkloadStatus.LIGHT),
        (1, WorkloadStatus.NORMAL),
        (8, WorkloadStatus.NORMAL),
        (9, WorkloadStatus.HEAVY),
        (13, WorkloadStatus.HEAVY),
        (14, WorkloadStatus.OVERLOADED),
        (40, WorkloadStatus.OVERLOADED),
    ])
    def test_default_boundaries(self, points, expected):
        assert classify_workload(points) == expected

    def test_custom_thresholds(self):
        thresholds = WorkloadThresholds(light_max=2, normal_max=5, heavy_max=10)

        assert classify_workload(2, thresholds) == WorkloadStatus.LIGHT
        assert classify_workload(5, thresholds) == WorkloadStatus.NORMAL
        assert classify_workload(10, thresholds) == WorkloadStatus.HEAVY
        assert classify_workload(11, thresholds) == WorkloadStatus.OVERLOADED


class TestMemberWorkload:
    """Test per-member aggregation"""

    def test_heavy_member(self):
        """An active load of 9 points is heavy"""
        member = TeamMember(id="u1", name="Alice Chen", tickets=[
            make_ticket("T1", 1, TicketStatus.DONE),
            make_ticket("T2", 4, TicketStatus.DONE),
            make_ticket("T3", 5, TicketStatus.IN_PROGRESS),
            make_ticket("T4", 4, TicketStatus.TODO),
        ])
        workload = WorkloadDistributor.member_workload(member)

        assert workload.active_points == 9
        assert workload.workload_status == WorkloadStatus.HEAVY
        assert workload.points_completed == 5
        assert workload.points_assigned == 14
        assert workload.completion_rate == 36

    def test_half_of_assigned_points_completed(self):
        """5 of 10 assigned points done is a 50% completion rate"""
        member = TeamMember(id="u1", name="Alice Chen", tickets=[
            make_ticket("T1", 5, TicketStatus.DONE),
            make_ticket("T2", 3, TicketStatus.IN_PROGRESS),
            make_ticket("T3", 2, TicketStatus.BLOCKED),
            make_ticket("T4", None, TicketStatus.TODO),
        ])
        workload = WorkloadDistributor.member_workload(member)

        assert workload.points_assigned == 10
        assert workload.points_completed == 5
        assert workload.completion_rate == 50
        assert workload.active_points == 3
        assert workload.workload_status == WorkloadStatus.NORMAL

    def test_blocked_and_done_are_not_active(self):
        member = TeamMember(id="u1", tickets=[
            make_ticket("T1", 3, TicketStatus.DONE),
            make_ticket("T2", 8, TicketStatus.BLOCKED),
            make_ticket("T3", 2, TicketStatus.BACKLOG),
            make_ticket("T4", 7, TicketStatus.TESTING),
        ])
        workload = WorkloadDistributor.member_workload(member)

        assert workload.active_points == 9
        assert workload.workload_status == WorkloadStatus.HEAVY
        assert workload.points_assigned == 20
        assert workload.completion_rate == 15
        assert workload.in_progress_tickets == 1
        assert workload.tickets_assigned == 4
        assert workload.tickets_completed == 1

    def test_no_tickets(self):
        workload = WorkloadDistributor.member_workload(TeamMember(id="u9", email="zoe@example.com"))

        assert workload.workload_status == WorkloadStatus.LIGHT
        assert workload.completion_rate == 0
        assert workload.name == "zoe"


class TestWorkloadReport:
    """Test team-level report"""

    def test_sorted_by_severity(self, sample_members):
        report = WorkloadDistributor.calculate(sample_members)

        assert [w.member_id for w in report.members] == ["u3", "u1", "u4", "u2"]
        assert [w.workload_status for w in report.members] == [
            WorkloadStatus.OVERLOADED,
            WorkloadStatus.HEAVY,
            WorkloadStatus.NORMAL,
            WorkloadStatus.LIGHT,
        ]

    def test_stable_within_bucket(self):
        members = [member_with_active("a", 3), member_with_active("b", 20), member_with_active("c", 5),
                   member_with_active("d", 15)]
        report = WorkloadDistributor.calculate(members)

        assert [w.member_id for w in report.members] == ["b", "d", "a", "c"]

    def test_summary(self, sample_members):
        report = WorkloadDistributor.calculate(sample_members, unassigned_open_tickets=2)

        assert report.summary.total_members == 4
        assert report.summary.total_tickets_assigned == 7
        assert report.summary.total_tickets_completed == 1
        assert report.summary.unassigned_tickets == 2
        assert report.summary.overloaded_members == 1
        assert report.summary.light_members == 1

    def test_all_alerts(self, sample_members):
        report = WorkloadDistributor.calculate(sample_members, unassigned_open_tickets=6)

        assert report.alerts == [
            "1 team member(s) are overloaded and may need help",
            "Consider redistributing work from overloaded to light-workload members",
            "6 tickets are unassigned in the backlog",
        ]

    def test_unassigned_threshold_is_strict(self):
        report = WorkloadDistributor.calculate([member_with_active("a", 3)], unassigned_open_tickets=5)

        assert report.alerts == []

    def test_overloaded_without_light_members(self):
        report = WorkloadDistributor.calculate([member_with_active("a", 20), member_with_active("b", 4)])

        assert report.alerts == ["1 team member(s) are overloaded and may need help"]

    def test_empty_team(self):
        report = WorkloadDistributor.calculate([])

        assert report.members == []
        assert report.summary.total_members == 0
        assert report.alerts == []


class TestWorkloadValidation:
    """Test input validation"""

    @pytest.mark.parametrize("unassigned", [-1, 2.5, True])
    def test_invalid_unassigned_count(self, unassigned):
        with pytest.raises(ValidationError) as exc_info:
            WorkloadDistributor.calculate([], unassigned_open_tickets=unassigned)
        assert exc_info.value.field == "unassigned_open_tickets"

    def test_unordered_thresholds(self):
        thresholds = WorkloadThresholds(light_max=0, normal_max=13, heavy_max=8)
        with pytest.raises(ValidationError) as exc_info:
            WorkloadDistributor.calculate([], thresholds=thresholds)
        assert exc_info.value.field == "workload_thresholds"


class TestWorkloadCharts:
    """Test chart rendering"""

    def test_charts(self, sample_members):
        report = WorkloadDistributor.calculate(sample_members)
        distribution, points = WorkloadDistributor.to_charts(report)

        assert distribution.chart_type == ChartType.DISTRIBUTION
        assert [p.label for p in distribution.series[0].data] == ["Light", "Normal", "Heavy", "Overloaded"]
        assert all(p.value == 1 for p in distribution.series[0].data)

        assert points.chart_type == ChartType.POINTS_BY_MEMBER
        assert [p.label for p in points.series[0].data] == ["Charlie Johnson", "Alice Chen", "Diana Martinez"]
