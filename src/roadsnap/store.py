"""On-disk snapshot store.

Layout::

    <dir>/<Project>/<YYYY-MM-DD>/raw_data/<Project>/epics_<Project>.json
    <dir>/<Project>/<YYYY-MM-DD>/raw_data/<Project>/issues_<EPIC-KEY>.json

``<Project>`` is the project name with spaces removed. Each file holds a
JSON list of raw JIRA issue dicts (``{"key": ..., "fields": {...}}``).
"""

import json
import logging
from datetime import date, datetime
from pathlib import Path

from roadsnap.exceptions import CorruptDataError, NotFoundError
from roadsnap.models import EpicSnapshot, Issue

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
RAW_DATA_DIR = "raw_data"


def project_key(project: str) -> str:
    """Directory-safe form of a project name."""
    return project.replace(" ", "")


def _parse_date(value, what: str) -> date | None:
    """Parse a JIRA date value; empty values are unset."""
    if not value:
        return None
    try:
        # JIRA date fields are "YYYY-MM-DD", datetimes carry a time suffix
        return date.fromisoformat(str(value)[:10])
    except (ValueError, TypeError) as e:
        raise CorruptDataError(f"Cannot parse {what}: {value!r}") from e


def parse_issue(raw: dict) -> Issue:
    """Convert a raw JIRA issue dict into an Issue."""
    try:
        key = raw["key"]
        fields = raw.get("fields") or {}
    except (KeyError, TypeError, AttributeError) as e:
        raise CorruptDataError(f"Malformed issue record: {raw!r}") from e
    if not isinstance(fields, dict):
        raise CorruptDataError(f"Malformed fields in issue {key}: {fields!r}")

    status = fields.get("status") or {}
    return Issue(
        key=key,
        summary=fields.get("summary") or "",
        status=status.get("name", "") if isinstance(status, dict) else str(status),
        labels=list(fields.get("labels") or []),
        due_date=_parse_date(fields.get("duedate"), f"due date of {key}"),
    )


def parse_epic(raw: dict, snapshot_date: date, start_date_field: str | None = None) -> EpicSnapshot:
    """Convert a raw JIRA epic dict into an EpicSnapshot without issues."""
    epic = parse_issue(raw)
    start_date = None
    if start_date_field:
        fields = raw.get("fields") or {}
        start_date = _parse_date(
            fields.get(start_date_field), f"start date ({start_date_field}) of {epic.key}"
        )
    return EpicSnapshot(
        epic=epic,
        snapshot_date=snapshot_date,
        start_date=start_date,
        due_date=epic.due_date,
    )


def _read_json(path: Path) -> list:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CorruptDataError(f"Cannot decode {path}: {e}") from e
    if not isinstance(data, list):
        raise CorruptDataError(f"Expected a list of issues in {path}")
    return data


def _write_json(path: Path, data: list) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f)


class SnapshotStore:
    """Reads and writes project snapshots below ``base_dir``."""

    def __init__(self, base_dir: Path, start_date_field: str | None = None) -> None:
        self.base_dir = Path(base_dir)
        self.start_date_field = start_date_field

    def snapshot_dir(self, project: str, snapshot_date: date) -> Path:
        return self.base_dir / project_key(project) / snapshot_date.strftime(DATE_FORMAT) / RAW_DATA_DIR

    def epics_path(self, project: str, snapshot_date: date) -> Path:
        key = project_key(project)
        return self.snapshot_dir(project, snapshot_date) / key / f"epics_{key}.json"

    def issues_path(self, project: str, snapshot_date: date, epic_key: str) -> Path:
        key = project_key(project)
        return self.snapshot_dir(project, snapshot_date) / key / f"issues_{epic_key}.json"

    def save(
        self,
        project: str,
        snapshot_date: date,
        epics: list[dict],
        issues_by_epic: dict[str, list[dict]],
    ) -> Path:
        """Write raw epics and their issues. Returns the epics file path."""
        path = self.epics_path(project, snapshot_date)
        _write_json(path, epics)
        for epic in epics:
            epic_key = epic["key"]
            _write_json(
                self.issues_path(project, snapshot_date, epic_key),
                issues_by_epic.get(epic_key, []),
            )
        logger.debug("Stored %d epics for %s at %s", len(epics), project, path)
        return path

    def load_epics_for_date(self, snapshot_date: date, project: str) -> list[EpicSnapshot]:
        """Load a snapshot, epics ordered by due date ascending (unset first).

        Raises:
            NotFoundError: If the snapshot or an epic's issues were not recorded
            CorruptDataError: If a stored record cannot be parsed
        """
        path = self.epics_path(project, snapshot_date)
        if not path.exists():
            raise NotFoundError(f"No snapshot for project {project!r} on {snapshot_date.isoformat()}")

        epics = [parse_epic(raw, snapshot_date, self.start_date_field) for raw in _read_json(path)]

        for epic in epics:
            issues_path = self.issues_path(project, snapshot_date, epic.key)
            if not issues_path.exists():
                raise NotFoundError(
                    f"Issues for epic {epic.key} missing from snapshot "
                    f"{project!r} {snapshot_date.isoformat()}"
                )
            epic.issues = [parse_issue(raw) for raw in _read_json(issues_path)]

        epics.sort(key=lambda e: (e.due_date is not None, e.due_date or date.min))
        return epics

    def list_available_dates(self, project: str) -> list[date]:
        """Snapshot dates recorded for a project, ascending."""
        return self._dates_in(self.base_dir / project_key(project))

    def list_projects(self) -> dict[str, list[date]]:
        """Map every stored project directory to its snapshot dates."""
        if not self.base_dir.is_dir():
            return {}
        projects: dict[str, list[date]] = {}
        for child in sorted(self.base_dir.iterdir()):
            if not child.is_dir():
                continue
            dates = self._dates_in(child)
            if dates:
                projects[child.name] = dates
        return projects

    @staticmethod
    def _dates_in(project_dir: Path) -> list[date]:
        if not project_dir.is_dir():
            return []
        dates: list[date] = []
        for child in project_dir.iterdir():
            if not (child / RAW_DATA_DIR).is_dir():
                continue
            try:
                dates.append(datetime.strptime(child.name, DATE_FORMAT).date())
            except ValueError:
                continue
        return sorted(dates)
