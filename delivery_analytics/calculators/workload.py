"""
Workload Distributor

Aggregates each team member's assigned tickets, classifies the active point
load into light/normal/heavy/overloaded buckets and raises team alerts.
"""

import logging
from typing import List, Optional, Sequence

from delivery_analytics.models import (
    ChartDataPoint, ChartResponse, ChartSeries, ChartType,
    MemberWorkload, TeamMember, TicketStatus,
    WorkloadReport, WorkloadStatus, WorkloadSummary, WorkloadThresholds,
)
from delivery_analytics.utils.errors import ValidationError
from delivery_analytics.utils.numeric import percentage

logger = logging.getLogger(__name__)

INACTIVE_STATUSES = frozenset({TicketStatus.DONE, TicketStatus.BLOCKED})
IN_PROGRESS_STATUSES = frozenset({TicketStatus.IN_PROGRESS, TicketStatus.IN_REVIEW, TicketStatus.TESTING})

SEVERITY_ORDER = {
    WorkloadStatus.OVERLOADED: 0,
    WorkloadStatus.HEAVY: 1,
    WorkloadStatus.NORMAL: 2,
    WorkloadStatus.LIGHT: 3,
}

BUCKET_COLORS = {
    WorkloadStatus.LIGHT: "#22C55E",
    WorkloadStatus.NORMAL: "#3B82F6",
    WorkloadStatus.HEAVY: "#F59E0B",
    WorkloadStatus.OVERLOADED: "#EF4444",
}

UNASSIGNED_ALERT_THRESHOLD = 5


def validate_thresholds(thresholds: WorkloadThresholds) -> None:
    if not 0 <= thresholds.light_max <= thresholds.normal_max <= thresholds.heavy_max:
        raise ValidationError(
            "workload thresholds must satisfy 0 <= light_max <= normal_max <= heavy_max",
            field="workload_thresholds",
            details=thresholds.model_dump(),
        )


def classify_workload(active_points: int, thresholds: Optional[WorkloadThresholds] = None) -> WorkloadStatus:
    """Bucket an active point load; boundaries are inclusive upper bounds"""
    thresholds = thresholds or WorkloadThresholds()
    if active_points <= thresholds.light_max:
        return WorkloadStatus.LIGHT
    elif active_points <= thresholds.normal_max:
        return WorkloadStatus.NORMAL
    elif active_points <= thresholds.heavy_max:
        return WorkloadStatus.HEAVY
    return WorkloadStatus.OVERLOADED


class WorkloadDistributor:
    """Calculates per-member workload and team alerts"""

    @staticmethod
    def member_workload(member: TeamMember, thresholds: Optional[WorkloadThresholds] = None) -> MemberWorkload:
        tickets = member.tickets
        completed = [t for t in tickets if t.is_done]
        points_assigned = sum(t.points for t in tickets)
        points_completed = sum(t.points for t in completed)
        active_points = sum(t.points for t in tickets if t.status not in INACTIVE_STATUSES)

        return MemberWorkload(
            member_id=member.id,
            name=member.display_name,
            email=member.email,
            role=member.role,
            tickets_assigned=len(tickets),
            tickets_completed=len(completed),
            in_progress_tickets=sum(1 for t in tickets if t.status in IN_PROGRESS_STATUSES),
            points_assigned=points_assigned,
            points_completed=points_completed,
            active_points=active_points,
            completion_rate=percentage(points_completed, points_assigned),
            workload_status=classify_workload(active_points, thresholds),
        )

    @staticmethod
    def calculate(
        members: Sequence[TeamMember],
        unassigned_open_tickets: int = 0,
        thresholds: Optional[WorkloadThresholds] = None,
    ) -> WorkloadReport:
        """
        Calculate workload across a team.

        Args:
            members: Team members with their assigned tickets
            unassigned_open_tickets: Open tickets without an assignee
            thresholds: Workload bucket cut points

        Returns:
            WorkloadReport with members sorted most loaded first
        """
        thresholds = thresholds or WorkloadThresholds()
        WorkloadDistributor.validate(unassigned_open_tickets, thresholds)

        workloads = [WorkloadDistributor.member_workload(m, thresholds) for m in members]
        # sorted() is stable, so members keep input order within a bucket
        workloads = sorted(workloads, key=lambda w: SEVERITY_ORDER[w.workload_status])

        overloaded = sum(1 for w in workloads if w.workload_status == WorkloadStatus.OVERLOADED)
        light = sum(1 for w in workloads if w.workload_status == WorkloadStatus.LIGHT)

        summary = WorkloadSummary(
            total_members=len(workloads),
            total_tickets_assigned=sum(w.tickets_assigned for w in workloads),
            total_tickets_completed=sum(w.tickets_completed for w in workloads),
            unassigned_tickets=unassigned_open_tickets,
            overloaded_members=overloaded,
            light_members=light,
        )

        logger.debug(
            "Workload for %d members: %d overloaded, %d light, %d unassigned tickets",
            len(workloads), overloaded, light, unassigned_open_tickets
        )

        return WorkloadReport(
            members=workloads,
            summary=summary,
            alerts=WorkloadDistributor._generate_alerts(overloaded, light, unassigned_open_tickets),
        )

    @staticmethod
    def validate(unassigned_open_tickets: int, thresholds: WorkloadThresholds) -> None:
        if (
            isinstance(unassigned_open_tickets, bool)
            or not isinstance(unassigned_open_tickets, int)
            or unassigned_open_tickets < 0
        ):
            raise ValidationError(
                f"unassigned_open_tickets must be a non-negative integer, got {unassigned_open_tickets!r}",
                field="unassigned_open_tickets",
            )
        validate_thresholds(thresholds)

    @staticmethod
    def to_charts(report: WorkloadReport) -> List[ChartResponse]:
        """Workload bucket pie and points-by-member bars"""
        distribution = []
        for status in reversed(list(SEVERITY_ORDER)):
            count = sum(1 for w in report.members if w.workload_status == status)
            if count > 0:
                distribution.append(ChartDataPoint(
                    label=status.value.capitalize(),
                    value=count,
                    metadata={"color": BUCKET_COLORS[status]},
                ))

        assigned = [w for w in report.members if w.points_assigned > 0]

        return [
            ChartResponse(
                chart_type=ChartType.DISTRIBUTION,
                title="Workload Distribution",
                series=[ChartSeries(name="Members", data=distribution, type="pie")],
            ),
            ChartResponse(
                chart_type=ChartType.POINTS_BY_MEMBER,
                title="Points by Team Member",
                series=[
                    ChartSeries(
                        name="Assigned",
                        data=[ChartDataPoint(label=w.name, value=w.points_assigned) for w in assigned],
                        color="#94a3b8",
                        type="bar",
                    ),
                    ChartSeries(
                        name="Completed",
                        data=[ChartDataPoint(label=w.name, value=w.points_completed) for w in assigned],
                        color="#10b981",
                        type="bar",
                    ),
                ],
            ),
        ]

    @staticmethod
    def _generate_alerts(overloaded: int, light: int, unassigned: int) -> List[str]:
        alerts = []

        if overloaded > 0:
            alerts.append(f"{overloaded} team member(s) are overloaded and may need help")

        if overloaded > 0 and light > 0:
            alerts.append("Consider redistributing work from overloaded to light-workload members")

        if unassigned > UNASSIGNED_ALERT_THRESHOLD:
            alerts.append(f"{unassigned} tickets are unassigned in the backlog")

        return alerts
