"""
Data models for delivery analytics.

Input records (tickets, cycles, members, risks) are read-only snapshots fetched
by the host. Result models are plain structured values that can be serialized
to JSON by whatever layer calls the engine.
"""

from datetime import datetime
from datetime import date as date_type
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field
from enum import Enum


class ChartType(str, Enum):
    """Supported chart types"""
    BURNDOWN = "burndown"
    VELOCITY = "velocity"
    DISTRIBUTION = "distribution"
    POINTS_BY_MEMBER = "points_by_member"


class ChartDataPoint(BaseModel):
    """A single data point in a chart series"""
    date: Optional[date_type] = Field(None, description="Date for time-series data")
    value: Optional[float] = Field(None, description="Numeric value (None when unknown)")
    label: Optional[str] = Field(None, description="Text label for categorical data")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Additional metadata")


class ChartSeries(BaseModel):
    """A data series in a chart (e.g., 'Actual' line in burndown)"""
    name: str = Field(..., description="Series name")
    data: List[ChartDataPoint] = Field(default_factory=list, description="Data points")
    color: Optional[str] = Field(None, description="Hex color code")
    type: Optional[str] = Field(None, description="Chart type for this series (line, bar, pie)")


class ChartResponse(BaseModel):
    """Chart-ready payload derived from an analytics result"""
    chart_type: ChartType = Field(..., description="Type of chart")
    title: str = Field(..., description="Chart title")
    series: List[ChartSeries] = Field(default_factory=list, description="Data series")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Chart metadata")


# Domain records

class TicketStatus(str, Enum):
    """Ticket workflow states"""
    BACKLOG = "backlog"
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    IN_REVIEW = "in_review"
    TESTING = "testing"
    DONE = "done"
    BLOCKED = "blocked"


class CycleStatus(str, Enum):
    """Cycle states; completed and cancelled are terminal"""
    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RiskStatus(str, Enum):
    IDENTIFIED = "identified"
    MITIGATING = "mitigating"
    RESOLVED = "resolved"
    ACCEPTED = "accepted"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RiskType(str, Enum):
    SCHEDULE = "schedule"
    SCOPE = "scope"
    TECHNICAL = "technical"
    RESOURCE = "resource"
    EXTERNAL = "external"


class WorkloadStatus(str, Enum):
    LIGHT = "light"
    NORMAL = "normal"
    HEAVY = "heavy"
    OVERLOADED = "overloaded"


class VelocityTrend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class Metric(str, Enum):
    """What a burndown measures"""
    POINTS = "points"
    COUNT = "count"


class Ticket(BaseModel):
    """A unit of trackable work"""
    id: str = Field(..., description="Unique identifier")
    title: Optional[str] = Field(None, description="Ticket title")
    status: TicketStatus = Field(..., description="Current workflow status")
    story_points: Optional[int] = Field(None, ge=0, description="Story points estimate")
    assigned_to: Optional[str] = Field(None, description="Assigned team member id")
    cycle_id: Optional[str] = Field(None, description="Cycle the ticket is planned into")
    created_at: datetime = Field(..., description="Creation timestamp")
    completed_at: Optional[datetime] = Field(None, description="Set once, when the ticket reaches done")

    @property
    def is_done(self) -> bool:
        return self.status == TicketStatus.DONE

    @property
    def points(self) -> int:
        return self.story_points or 0


class Cycle(BaseModel):
    """A fixed time-boxed work period"""
    id: str = Field(..., description="Cycle identifier")
    name: str = Field(..., description="Cycle name")
    cycle_number: Optional[int] = Field(None, description="Sequence number within the domain")
    start_date: datetime = Field(..., description="Cycle start")
    end_date: datetime = Field(..., description="Cycle end, after start_date")
    status: CycleStatus = Field(..., description="Lifecycle status")
    capacity: Optional[int] = Field(None, description="Planned capacity in story points")
    velocity: Optional[int] = Field(None, description="Completed points, recorded on completion")


class CycleSnapshot(BaseModel):
    """A cycle together with the tickets planned into it"""
    cycle: Cycle
    tickets: List[Ticket] = Field(default_factory=list)


class TeamMember(BaseModel):
    """A team member and the tickets currently assigned to them"""
    id: str = Field(..., description="Member identifier")
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Email address")
    role: Optional[str] = Field(None, description="Role in the organization")
    tickets: List[Ticket] = Field(default_factory=list, description="Assigned tickets")

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        if self.email:
            return self.email.split("@")[0]
        return self.id


class RiskFactor(BaseModel):
    """
    A tracked delivery risk.

    The score and level are always derived from probability and impact by the
    risk scorer and are never stored on the record.
    """
    id: str = Field(..., description="Risk identifier")
    name: str = Field(..., description="Short risk name")
    risk_type: RiskType = Field(RiskType.SCHEDULE, description="Risk category")
    probability: int = Field(..., description="Likelihood, 1-5")
    impact: int = Field(..., description="Severity if it happens, 1-5")
    status: RiskStatus = Field(RiskStatus.IDENTIFIED, description="Resolution status")
    mitigation_plan: Optional[str] = Field(None, description="Planned mitigation")
    owner_id: Optional[str] = Field(None, description="Owning team member")


class AnalyticsSnapshot(BaseModel):
    """Everything the engine needs for one invocation, already fetched by the host"""
    cycle: Optional[CycleSnapshot] = Field(None, description="Cycle to burn down")
    cycle_history: List[CycleSnapshot] = Field(
        default_factory=list, description="Closed cycles, most recent first"
    )
    members: List[TeamMember] = Field(default_factory=list)
    unassigned_open_tickets: int = Field(0, description="Open tickets nobody is assigned to")
    risks: List[RiskFactor] = Field(default_factory=list)


# Options

class WorkloadThresholds(BaseModel):
    """Inclusive upper bounds of the light/normal/heavy workload buckets"""
    light_max: int = 0
    normal_max: int = 8
    heavy_max: int = 13


class RiskThresholds(BaseModel):
    """Minimum scores for the medium/high/critical risk levels"""
    medium: int = 6
    high: int = 12
    critical: int = 20


class VelocitySettings(BaseModel):
    trend_window: int = 3
    improving_factor: float = 1.1
    declining_factor: float = 0.9
    high_variance_cv: float = 30.0
    min_cycles: int = 3
    low_completion_rate: int = 80
    high_completion_rate: int = 95


class AnalyticsOptions(BaseModel):
    """Per-call options; validated by the engine before anything is computed"""
    metric: str = Field(Metric.POINTS.value, description="'points' or 'count'")
    limit: int = Field(10, description="Number of historical cycles to analyse")
    as_of: datetime = Field(..., description="Reference instant, usually now")
    workload_thresholds: WorkloadThresholds = Field(default_factory=WorkloadThresholds)
    risk_thresholds: RiskThresholds = Field(default_factory=RiskThresholds)
    velocity: VelocitySettings = Field(default_factory=VelocitySettings)


# Results

class BurndownPoint(BaseModel):
    date: date_type = Field(..., description="Calendar date of the point")
    day_index: int = Field(..., description="Whole days since cycle start")
    ideal_remaining: float
    actual_remaining: Optional[float] = Field(None, description="None for dates after as_of")
    completed_to_date: Optional[float] = Field(None, description="None for dates after as_of")


class BurndownSummary(BaseModel):
    total_work: float
    completed_work: float
    remaining_work: float
    percent_complete: int
    days_total: int
    days_elapsed: int
    days_remaining: int
    velocity_per_day: float
    projected_completion: float
    on_track: bool


class BurndownResult(BaseModel):
    cycle_id: Optional[str] = None
    cycle_name: Optional[str] = None
    metric: Metric
    ideal_daily_burn: float
    summary: BurndownSummary
    points: List[BurndownPoint] = Field(default_factory=list)


class CycleVelocity(BaseModel):
    """Committed vs completed points for one closed cycle"""
    cycle_id: str
    cycle_name: str
    cycle_number: Optional[int] = None
    committed_points: int = 0
    completed_points: int = 0
    completion_rate: int = 0
    ticket_count: int = 0
    completed_tickets: int = 0


class VelocityReport(BaseModel):
    cycles: List[CycleVelocity] = Field(default_factory=list, description="Most recent first")
    total_cycles_analyzed: int = 0
    average_velocity: int = 0
    average_completion_rate: int = 0
    trend: VelocityTrend = VelocityTrend.STABLE
    best_cycle: Optional[CycleVelocity] = None
    worst_cycle: Optional[CycleVelocity] = None
    variance: float = 0.0
    std_dev: float = 0.0
    coefficient_of_variation: float = 0.0
    high_variance: bool = False
    recommendations: List[str] = Field(default_factory=list)


class MemberWorkload(BaseModel):
    member_id: str
    name: str
    email: Optional[str] = None
    role: Optional[str] = None
    tickets_assigned: int = 0
    tickets_completed: int = 0
    in_progress_tickets: int = 0
    points_assigned: int = 0
    points_completed: int = 0
    active_points: int = 0
    completion_rate: int = 0
    workload_status: WorkloadStatus


class WorkloadSummary(BaseModel):
    total_members: int = 0
    total_tickets_assigned: int = 0
    total_tickets_completed: int = 0
    unassigned_tickets: int = 0
    overloaded_members: int = 0
    light_members: int = 0


class WorkloadReport(BaseModel):
    members: List[MemberWorkload] = Field(default_factory=list, description="Most loaded first")
    summary: WorkloadSummary = Field(default_factory=WorkloadSummary)
    alerts: List[str] = Field(default_factory=list)


class RiskAssessment(BaseModel):
    probability: int
    impact: int
    risk_score: int
    risk_level: RiskLevel


class AssessedRisk(BaseModel):
    risk_id: str
    name: str
    risk_type: RiskType
    status: RiskStatus
    assessment: RiskAssessment


class RiskSummary(BaseModel):
    total: int = 0
    by_level: Dict[str, int] = Field(default_factory=dict)
    by_status: Dict[str, int] = Field(default_factory=dict)
    avg_score: float = 0.0


class RiskReport(BaseModel):
    risks: List[AssessedRisk] = Field(default_factory=list)
    summary: RiskSummary = Field(default_factory=RiskSummary)


class CycleProgress(BaseModel):
    cycle_id: str
    total_tickets: int = 0
    completed_tickets: int = 0
    total_points: int = 0
    completed_points: int = 0
    completion_percentage: int = 0
    days_total: int = 0
    days_elapsed: int = 0
    days_remaining: int = 0
    tickets_by_status: Dict[str, int] = Field(default_factory=dict)


class AnalyticsResult(BaseModel):
    """Combined output of one facade invocation"""
    as_of: datetime
    metric: Metric
    burndown: Optional[BurndownResult] = None
    progress: Optional[CycleProgress] = None
    velocity: VelocityReport
    workload: WorkloadReport
    risks: RiskReport
