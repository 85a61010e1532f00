"""Status classification and planning evaluation."""

from datetime import date

from roadsnap.config import StatusNames
from roadsnap.models import HistoricDueDate, Issue, PlanningStatus, StatusCategory


class StatusClassifier:
    """Maps raw JIRA status names to a StatusCategory.

    A name listed under several categories resolves as
    Done, then InProgress, then ToDo.
    """

    def __init__(self, status_names: StatusNames) -> None:
        self._lookup: dict[str, StatusCategory] = {}
        # Lowest precedence first so higher ones overwrite.
        for category, names in (
            (StatusCategory.TO_DO, status_names.to_do),
            (StatusCategory.IN_PROGRESS, status_names.in_progress),
            (StatusCategory.DONE, status_names.done),
        ):
            for name in names:
                self._lookup[name] = category

    def classify(self, raw_status: str) -> StatusCategory:
        return self._lookup.get(raw_status, StatusCategory.UNDEFINED)

    def is_done(self, issue: Issue) -> bool:
        return self.classify(issue.status) is StatusCategory.DONE

    def is_in_progress(self, issue: Issue) -> bool:
        return self.classify(issue.status) is StatusCategory.IN_PROGRESS

    def is_to_do(self, issue: Issue) -> bool:
        return self.classify(issue.status) is StatusCategory.TO_DO

    def count(self, issues: list[Issue]) -> tuple[int, int, int]:
        """Count issues that are done, in progress and to do.

        Undefined issues are counted in none of the three.
        """
        done = in_progress = to_do = 0
        for issue in issues:
            category = self.classify(issue.status)
            if category is StatusCategory.DONE:
                done += 1
            elif category is StatusCategory.IN_PROGRESS:
                in_progress += 1
            elif category is StatusCategory.TO_DO:
                to_do += 1
        return done, in_progress, to_do


def _after(a: date | None, b: date | None) -> bool:
    return a is not None and b is not None and a > b


def latest_due_date(history: list[HistoricDueDate]) -> HistoricDueDate | None:
    """Return the due date observed in the most recent snapshot."""
    if not history:
        return None
    return max(history, key=lambda h: h.snapshot_date)


def evaluate_planning(
    status: StatusCategory,
    snapshot_date: date,
    start_date: date | None,
    due_date: date | None,
    history: list[HistoricDueDate],
) -> PlanningStatus:
    """Decide whether an epic is on time, postponed, advanced or overdue.

    A due date that moved since the most recent historic snapshot is
    reported before the schedule itself is checked.
    """
    latest = latest_due_date(history)
    if latest is not None:
        if _after(due_date, latest.due_date):
            return PlanningStatus.POSTPONED
        if _after(latest.due_date, due_date):
            return PlanningStatus.ADVANCED

    past_due = _after(snapshot_date, due_date)
    if (status is not StatusCategory.DONE and past_due) or (
        status is StatusCategory.TO_DO and snapshot_date > (start_date or date.min)
    ):
        return PlanningStatus.OVERDUE

    return PlanningStatus.OK
