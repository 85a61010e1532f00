"""Capture project snapshots from JIRA into the snapshot store."""

import logging
from datetime import date

from roadsnap.config import Config
from roadsnap.exceptions import (
    JiraAuthError,
    JiraConnectionError,
    JiraRateLimitError,
    RoadsnapError,
)
from roadsnap.jira_client import (
    AuthenticationError,
    JiraClient,
    RateLimitError,
)
from roadsnap.jira_client import (
    ConnectionError as JiraClientConnectionError,
)
from roadsnap.store import SnapshotStore

logger = logging.getLogger(__name__)


def capture_project(
    client: JiraClient, store: SnapshotStore, project: str, snapshot_date: date
) -> int:
    """Fetch one project's epics and issues and store them. Returns the epic count.

    Raises:
        JiraAuthError: If JIRA authentication fails
        JiraRateLimitError: If rate limited
        JiraConnectionError: If cannot connect
        RoadsnapError: If JIRA rejects the query
    """
    try:
        epics = client.list_epics(project)
        issues_by_epic: dict[str, list[dict]] = {}
        for epic in epics:
            issues = client.list_epic_issues(epic["key"])
            issues_by_epic[epic["key"]] = issues
            logger.info(
                "Cached %d issues for epic %s: %s",
                len(issues),
                epic["key"],
                epic.get("fields", {}).get("summary", ""),
            )
    except AuthenticationError as e:
        raise JiraAuthError(
            "JIRA authentication failed. Check your credentials in ~/.roadsnap/config.toml."
        ) from e
    except RateLimitError as e:
        raise JiraRateLimitError(
            "JIRA rate limit exceeded. Please wait a moment and try again."
        ) from e
    except JiraClientConnectionError as e:
        raise JiraConnectionError(str(e)) from e
    except ValueError as e:
        raise RoadsnapError(f"Failed to fetch epics for project {project!r}: {e}") from e

    store.save(project, snapshot_date, epics, issues_by_epic)
    return len(epics)


def capture(
    config: Config,
    store: SnapshotStore,
    projects: list[str] | None = None,
    snapshot_date: date | None = None,
    client: JiraClient | None = None,
) -> dict[str, int]:
    """Snapshot every configured project (or ``projects``) for ``snapshot_date``."""
    snapshot_date = snapshot_date or date.today()
    client = client or JiraClient(config)
    counts: dict[str, int] = {}
    for project in projects or config.projects:
        logger.info("Caching project %s for %s", project, snapshot_date.isoformat())
        counts[project] = capture_project(client, store, project, snapshot_date)
    return counts
