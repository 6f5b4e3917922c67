"""Core data schema for project snapshots and metric reports."""

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Optional

PROJECT_STATUSES = frozenset({"planning", "active", "on_hold", "completed", "cancelled", "archived"})
TASK_STATUSES = frozenset({"todo", "in_progress", "in_review", "blocked", "completed", "closed", "cancelled"})
TASK_PRIORITIES = frozenset({"low", "normal", "high", "urgent", "critical"})
MILESTONE_STATUSES = frozenset({"pending", "completed"})

STATUS_GOOD = "good"
STATUS_WARNING = "warning"
STATUS_CRITICAL = "critical"


@dataclass
class ProjectSnapshot:
    """Read-only project fields needed by the engine."""

    id: str
    status: str
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    completed_at: Optional[date] = None
    budget: Optional[float] = None
    budget_currency: Optional[str] = None
    actual_cost: Optional[float] = None
    created_at: Optional[date] = None
    name: str = ""


@dataclass
class TaskSnapshot:
    id: str
    project_id: str
    status: str
    priority: str = "normal"
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    completed_date: Optional[date] = None
    estimated_hours: float = 0.0
    actual_hours: float = 0.0
    assignee_id: Optional[str] = None


@dataclass
class MilestoneSnapshot:
    id: str
    project_id: str
    due_date: Optional[date] = None
    is_critical: bool = False
    completion_percentage: float = 0.0
    status: str = "pending"


@dataclass
class MemberSnapshot:
    user_id: str
    project_id: str
    is_active: bool = True


@dataclass
class ProjectBundle:
    """A project together with its tasks, milestones and members."""

    project: ProjectSnapshot
    tasks: list[TaskSnapshot] = field(default_factory=list)
    milestones: list[MilestoneSnapshot] = field(default_factory=list)
    members: list[MemberSnapshot] = field(default_factory=list)


@dataclass
class BudgetReport:
    budget: float
    actual_cost: float
    labor_cost: float
    expenses_cost: float
    total_cost: float
    remaining_budget: float
    budget_utilization: int
    variance: float
    variance_percentage: int
    burn_rate: float
    projected_cost: float
    cost_performance_index: float
    currency: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class MemberUtilization:
    """Workload figures for one active project member."""

    user_id: str
    open_tasks: int
    utilization: int
    total_tasks: int = 0
    completed_tasks: int = 0
    in_progress_tasks: int = 0
    overdue_tasks: int = 0
    estimated_hours: float = 0.0
    remaining_hours: float = 0.0
    completion_rate: int = 0
    efficiency: int = 100


@dataclass
class TeamReport:
    members: list[MemberUtilization]
    active_members: int
    utilization: int
    efficiency: int
    average_completion_rate: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Indicator:
    """Status tier for one health dimension.

    ``metric`` names the value the tier was derived from and becomes the key of
    ``value`` in the serialized form, e.g. ``{"status": "good", "variance": 2.5}``.
    """

    status: str
    metric: str
    value: float
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, self.metric: self.value, "message": self.message}


@dataclass
class Risk:
    type: str
    severity: str
    title: str
    description: str
    mitigation: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class HealthReport:
    overall_status: str
    score: int
    indicators: dict[str, Indicator]
    risks: list[Risk]
    recommendations: list[str]
    deductions: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall_status": self.overall_status,
            "score": self.score,
            "indicators": {name: indicator.to_dict() for name, indicator in self.indicators.items()},
            "risks": [risk.to_dict() for risk in self.risks],
            "recommendations": list(self.recommendations),
            "deductions": dict(self.deductions),
        }


def is_task_done(task: TaskSnapshot) -> bool:
    return task.status in ("completed", "closed")


def is_task_open(task: TaskSnapshot) -> bool:
    return task.status not in ("completed", "cancelled")


def is_task_overdue(task: TaskSnapshot, now: date) -> bool:
    if task.due_date is None or task.status in ("completed", "cancelled"):
        return False
    return task.due_date < now


def is_milestone_completed(milestone: MilestoneSnapshot) -> bool:
    return milestone.status == "completed"


def is_milestone_overdue(milestone: MilestoneSnapshot, now: date) -> bool:
    if milestone.due_date is None or is_milestone_completed(milestone):
        return False
    return milestone.due_date < now


def is_project_overdue(project: ProjectSnapshot, now: date) -> bool:
    if project.due_date is None or project.status == "completed":
        return False
    return project.due_date < now


def active_members(members: list[MemberSnapshot]) -> list[MemberSnapshot]:
    return [member for member in members if member.is_active]
