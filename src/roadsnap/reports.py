"""Report building on top of the snapshot store."""

import logging
from datetime import date
from pathlib import Path

from roadsnap.config import Config, config_exists, load_config
from roadsnap.differ import TimeWindowDiffer
from roadsnap.exceptions import ConfigNotFoundError, ConfigurationError, NotFoundError
from roadsnap.models import Report, Summary
from roadsnap.status import StatusClassifier
from roadsnap.store import SnapshotStore
from roadsnap.summary import summarize

logger = logging.getLogger(__name__)


def get_config(path: Path | None = None) -> Config:
    """Load configuration.

    Raises:
        ConfigNotFoundError: If config file not found
        InvalidConfigError: If config is invalid
    """
    if not config_exists(path):
        raise ConfigNotFoundError(
            "Configuration not found. Create ~/.roadsnap/config.toml or pass --config."
        )
    return load_config(path)


def make_classifier(config: Config) -> StatusClassifier:
    """Build the status classifier, warning when no status names are configured."""
    try:
        config.status_names.ensure_configured()
    except ConfigurationError as e:
        logger.warning("%s", e)
    return StatusClassifier(config.status_names)


def make_store(config: Config, base_dir: Path) -> SnapshotStore:
    return SnapshotStore(base_dir, start_date_field=config.start_date_field)


def latest_snapshot_date(store: SnapshotStore, project: str) -> date:
    """Raises NotFoundError if the project has no snapshots."""
    dates = store.list_available_dates(project)
    if not dates:
        raise NotFoundError(f"No snapshots recorded for project {project!r}")
    return dates[-1]


def build_summary(
    config: Config,
    store: SnapshotStore,
    project: str,
    snapshot_date: date | None = None,
    classifier: StatusClassifier | None = None,
) -> Summary:
    """Summarize a project snapshot, the latest one unless ``snapshot_date`` is given."""
    snapshot_date = snapshot_date or latest_snapshot_date(store, project)
    epics = store.load_epics_for_date(snapshot_date, project)
    return summarize(
        epics,
        classifier or make_classifier(config),
        project=project,
        snapshot_date=snapshot_date,
    )


def build_summaries(config: Config, store: SnapshotStore, project: str) -> list[Summary]:
    """Summaries of every snapshot of a project, newest first."""
    classifier = make_classifier(config)
    return [
        build_summary(config, store, project, snapshot_date, classifier)
        for snapshot_date in reversed(store.list_available_dates(project))
    ]


def make_differ(config: Config, store: SnapshotStore) -> TimeWindowDiffer:
    return TimeWindowDiffer(store, make_classifier(config), config.browse_url)


def build_report(
    config: Config, store: SnapshotStore, project: str, date_from: date, date_to: date
) -> Report:
    return make_differ(config, store).report(project, date_from, date_to)


def build_yearly_reports(
    config: Config, store: SnapshotStore, project: str, year: int
) -> list[Report]:
    return make_differ(config, store).yearly_reports(project, year)
