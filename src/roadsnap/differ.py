"""Time-window diff reports between two project snapshots."""

import calendar
import logging
from datetime import date

from roadsnap.exceptions import NotFoundError
from roadsnap.models import (
    EpicSnapshot,
    HistoricDueDate,
    Issue,
    PlanEpic,
    PlanStory,
    Report,
    ReportPair,
    StatusCategory,
)
from roadsnap.status import StatusClassifier, evaluate_planning
from roadsnap.store import SnapshotStore

logger = logging.getLogger(__name__)


def find_snapshot_dates_for_period(
    dates: list[date], date_from: date, date_to: date
) -> tuple[date, date]:
    """Pick the snapshots bracketing ``[date_from, date_to]``.

    The from side is the earliest snapshot on or after ``date_from``, else
    the latest snapshot. The to side is the latest snapshot on or before
    ``date_to``, else the from side.

    Raises:
        NotFoundError: If there are no snapshots at all
    """
    if not dates:
        raise NotFoundError("No snapshots recorded")

    ordered = sorted(dates)
    start = next((d for d in ordered if d >= date_from), ordered[-1])
    end = next((d for d in reversed(ordered) if d <= date_to), start)
    return start, end


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


class TimeWindowDiffer:
    """Builds Reports comparing the snapshots around a date window."""

    def __init__(self, store: SnapshotStore, classifier: StatusClassifier, link_prefix: str) -> None:
        self.store = store
        self.classifier = classifier
        self.link_prefix = link_prefix.rstrip("/")
        self._loaded: dict[tuple[str, date], list[EpicSnapshot]] = {}

    def _load(self, project: str, snapshot_date: date) -> list[EpicSnapshot]:
        cache_key = (project, snapshot_date)
        if cache_key not in self._loaded:
            logger.debug("Loading snapshot %s %s", project, snapshot_date)
            self._loaded[cache_key] = self.store.load_epics_for_date(snapshot_date, project)
        return self._loaded[cache_key]

    def generate_link(self, key: str) -> str:
        return f"{self.link_prefix}/{key}"

    def due_date_history(self, project: str, before: date) -> dict[str, list[HistoricDueDate]]:
        """Due dates per epic key from every snapshot older than ``before``."""
        history: dict[str, list[HistoricDueDate]] = {}
        for snapshot_date in self.store.list_available_dates(project):
            if snapshot_date >= before:
                continue
            for epic in self._load(project, snapshot_date):
                history.setdefault(epic.key, []).append(
                    HistoricDueDate(key=epic.key, snapshot_date=snapshot_date, due_date=epic.due_date)
                )
        return history

    def report(self, project: str, date_from: date, date_to: date) -> Report:
        """Compare the project's snapshots at the start and end of a window.

        Raises:
            NotFoundError: If no snapshot or an epic's issues cannot be found
            CorruptDataError: If a stored snapshot cannot be parsed
        """
        snapshot_from, snapshot_to = find_snapshot_dates_for_period(
            self.store.list_available_dates(project), date_from, date_to
        )

        from_epics = self._load(project, snapshot_from)
        to_epics = from_epics if snapshot_from == snapshot_to else self._load(project, snapshot_to)

        report = Report(
            title=date_from.strftime("%b, %Y"),
            date_from=date_from,
            date_to=date_to,
            snapshot_from=snapshot_from,
            snapshot_to=snapshot_to,
        )

        pairs: dict[str, ReportPair] = {}
        self._write_side(report, pairs, project, from_epics, left=True)
        self._write_side(report, pairs, project, to_epics, left=False)
        return report

    def yearly_reports(self, project: str, year: int) -> list[Report]:
        """One report per calendar month of ``year``, January first."""
        reports = []
        for month in range(1, 13):
            month_start, month_end = month_bounds(year, month)
            logger.info("Generating report for %s %s", project, month_start.strftime("%b, %Y"))
            reports.append(self.report(project, month_start, month_end))
        return reports

    def _write_side(
        self,
        report: Report,
        pairs: dict[str, ReportPair],
        project: str,
        epics: list[EpicSnapshot],
        left: bool,
    ) -> None:
        counters = report.side(left)
        history: dict[str, list[HistoricDueDate]] | None = None

        for epic in epics:
            if epic.due_date is None or not (report.date_from <= epic.due_date <= report.date_to):
                continue

            if history is None:
                history = self.due_date_history(project, epic.snapshot_date)

            plan_epic = self._to_plan_epic(epic, history.get(epic.key, []))

            counters.epics_planned += 1
            counters.stories_planned += len(epic.issues)
            if plan_epic.status is StatusCategory.DONE:
                counters.epics_done += 1

            for issue in epic.issues:
                story = self._to_plan_story(epic.snapshot_date, issue)
                plan_epic.plan_stories.append(story)
                if story.status is StatusCategory.DONE:
                    plan_epic.stories_done += 1
                    counters.stories_done += 1

            pair = pairs.get(epic.key)
            if pair is None:
                pair = ReportPair(key=epic.key, title=plan_epic.title, link=plan_epic.link)
                pairs[epic.key] = pair
                report.pairs.append(pair)
            pair.title = plan_epic.title
            if left:
                pair.left = plan_epic
            else:
                pair.right = plan_epic

    def _to_plan_epic(self, epic: EpicSnapshot, history: list[HistoricDueDate]) -> PlanEpic:
        status = self.classifier.classify(epic.epic.status)
        return PlanEpic(
            key=epic.key,
            title=epic.epic.summary,
            link=self.generate_link(epic.key),
            snapshot_date=epic.snapshot_date,
            start_date=epic.start_date,
            due_date=epic.due_date,
            status=status,
            planning_status=evaluate_planning(
                status, epic.snapshot_date, epic.start_date, epic.due_date, history
            ),
        )

    def _to_plan_story(self, snapshot_date: date, issue: Issue) -> PlanStory:
        return PlanStory(
            snapshot_date=snapshot_date,
            key=issue.key,
            title=issue.summary,
            link=self.generate_link(issue.key),
            status=self.classifier.classify(issue.status),
        )
