"""Data models for roadsnap."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class StatusCategory(Enum):
    """Semantic category of a raw JIRA status name."""

    DONE = "Done"
    IN_PROGRESS = "InProgress"
    TO_DO = "ToDo"
    UNDEFINED = "Undefined"


class PlanningStatus(Enum):
    """Whether an epic's due date moved or is being met."""

    OVERDUE = "Overdue"
    POSTPONED = "Postponed"
    ADVANCED = "Advanced"
    OK = "Ok"
    REPLANNED = "Replanned"


class Bucket(Enum):
    """Mutually exclusive planning bucket of an epic within one snapshot."""

    DONE = "Done"
    ONGOING = "Ongoing"
    OVERDUE = "Overdue"
    OUTSTANDING = "To Do"


class Quarter(Enum):
    Q1 = 1
    Q2 = 2
    Q3 = 3
    Q4 = 4

    @classmethod
    def from_date(cls, value: date) -> "Quarter":
        return cls((value.month - 1) // 3 + 1)

    def __str__(self) -> str:
        return self.name


@dataclass
class Issue:
    """A JIRA issue as recorded in a snapshot."""

    key: str
    summary: str
    status: str  # raw status name, e.g. "In Review"
    labels: list[str] = field(default_factory=list)
    due_date: date | None = None


@dataclass
class EpicSnapshot:
    """An epic and its child issues as observed on ``snapshot_date``.

    Unset planning dates never compare before, after or equal to the
    snapshot date, so every predicate involving one is false.
    """

    epic: Issue
    snapshot_date: date
    issues: list[Issue] = field(default_factory=list)
    start_date: date | None = None
    due_date: date | None = None

    @property
    def key(self) -> str:
        return self.epic.key

    def is_past_due(self) -> bool:
        return self.due_date is not None and self.snapshot_date > self.due_date

    def is_pre_start(self) -> bool:
        return self.start_date is not None and self.snapshot_date < self.start_date

    def is_in_active_phase(self) -> bool:
        # An unset start date counts as the earliest possible date.
        start = self.start_date or date.min
        if self.snapshot_date == start:
            return True
        return self.due_date is not None and start < self.snapshot_date < self.due_date


@dataclass(frozen=True)
class HistoricDueDate:
    """Due date of an epic as recorded in one past snapshot."""

    key: str
    snapshot_date: date
    due_date: date | None


@dataclass
class SummaryItem:
    """An epic placed in a bucket, with its child issue counters."""

    snapshot: EpicSnapshot
    done: int = 0
    in_progress: int = 0
    to_do: int = 0
    total: int = 0
    status_alert: str | None = None

    @property
    def progress(self) -> float:
        if self.total == 0:
            return 0.0
        return self.done / self.total


@dataclass
class Summary:
    """Bucketed view of one project snapshot."""

    project: str
    snapshot_date: date
    done: list[SummaryItem] = field(default_factory=list)
    overdue: list[SummaryItem] = field(default_factory=list)
    ongoing: list[SummaryItem] = field(default_factory=list)
    outstanding: list[SummaryItem] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def items(self, bucket: Bucket) -> list[SummaryItem]:
        return {
            Bucket.DONE: self.done,
            Bucket.ONGOING: self.ongoing,
            Bucket.OVERDUE: self.overdue,
            Bucket.OUTSTANDING: self.outstanding,
        }[bucket]

    def all_count(self) -> int:
        return len(self.done) + len(self.overdue) + len(self.ongoing) + len(self.outstanding)

    def named_stats(self) -> list[tuple[str, list[SummaryItem]]]:
        """Buckets in display order paired with their labels."""
        return [(bucket.value, self.items(bucket)) for bucket in Bucket]


@dataclass
class PlanStory:
    """Planning record of a child issue on one side of a report."""

    snapshot_date: date
    key: str
    title: str
    link: str
    status: StatusCategory


@dataclass
class PlanEpic:
    """Planning record of an epic on one side of a report."""

    key: str
    title: str
    link: str
    snapshot_date: date
    start_date: date | None
    due_date: date | None
    status: StatusCategory
    planning_status: PlanningStatus = PlanningStatus.OK
    plan_stories: list[PlanStory] = field(default_factory=list)
    stories_done: int = 0


@dataclass
class ReportPair:
    """The same epic seen on the left (from) and right (to) snapshot."""

    key: str
    title: str
    link: str
    left: PlanEpic | None = None
    right: PlanEpic | None = None

    @property
    def has_left(self) -> bool:
        return self.left is not None

    @property
    def has_right(self) -> bool:
        return self.right is not None

    @property
    def planning_status(self) -> PlanningStatus:
        if self.left is None or self.right is None:
            return PlanningStatus.REPLANNED

        left_due, right_due = self.left.due_date, self.right.due_date
        if left_due is not None and right_due is not None:
            if left_due < right_due:
                return PlanningStatus.POSTPONED
            if left_due > right_due:
                return PlanningStatus.ADVANCED
        return PlanningStatus.OK

    @property
    def progress(self) -> float:
        """Stories done on the right against stories planned on the left."""
        if self.right is None or self.right.stories_done == 0:
            return 0.0
        planned = self.left.plan_stories if self.left is not None else self.right.plan_stories
        if not planned:
            return 0.0
        return self.right.stories_done / len(planned)


@dataclass
class SideCounters:
    epics_planned: int = 0
    epics_done: int = 0
    stories_planned: int = 0
    stories_done: int = 0


@dataclass
class Report:
    """Comparison of a project between two snapshots for a date window."""

    title: str
    date_from: date
    date_to: date
    snapshot_from: date
    snapshot_to: date
    left: SideCounters = field(default_factory=SideCounters)
    right: SideCounters = field(default_factory=SideCounters)
    pairs: list[ReportPair] = field(default_factory=list)

    def side(self, left: bool) -> SideCounters:
        return self.left if left else self.right

    @property
    def progress(self) -> float:
        if self.right.stories_done == 0 or self.left.stories_planned == 0:
            return 0.0
        return self.right.stories_done / self.left.stories_planned
