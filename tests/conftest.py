"""Shared fixtures for roadsnap tests."""

from datetime import date

import pytest

from roadsnap.config import Config, StatusNames
from roadsnap.models import EpicSnapshot, Issue
from roadsnap.status import StatusClassifier
from roadsnap.store import SnapshotStore


@pytest.fixture
def status_names():
    return StatusNames(
        done=["Done", "Closed"],
        in_progress=["In Progress", "In Review"],
        to_do=["To Do", "Backlog"],
    )


@pytest.fixture
def classifier(status_names):
    return StatusClassifier(status_names)


@pytest.fixture
def config(status_names):
    return Config(
        jira_url="https://jira.example.com",
        jira_email="me@example.com",
        jira_api_token="secret",
        projects=["My Project"],
        start_date_field="cf_start",
        status_names=status_names,
    )


@pytest.fixture
def make_epic():
    """Factory for EpicSnapshots with child issues given by status name."""

    def _make(
        key="EPIC-1",
        status="In Progress",
        children=(),
        snapshot=date(2024, 2, 15),
        start=None,
        due=None,
        labels=None,
    ):
        issues = [
            Issue(key=f"{key}-S{i}", summary=f"Story {i}", status=child)
            for i, child in enumerate(children, start=1)
        ]
        return EpicSnapshot(
            epic=Issue(key=key, summary=f"Epic {key}", status=status, labels=labels or [], due_date=due),
            snapshot_date=snapshot,
            issues=issues,
            start_date=start,
            due_date=due,
        )

    return _make


@pytest.fixture
def store(tmp_path):
    return SnapshotStore(tmp_path, start_date_field="cf_start")


@pytest.fixture
def write_snapshot(store):
    """Write a snapshot from ``{epic_raw_dict: [issue_raw_dicts]}`` pairs."""

    def _write(project, snapshot_date, epics_with_issues):
        epics = [epic for epic, _ in epics_with_issues]
        issues = {epic["key"]: children for epic, children in epics_with_issues}
        return store.save(project, snapshot_date, epics, issues)

    return _write
