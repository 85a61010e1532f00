"""Bucket summaries of a single project snapshot."""

import logging
from datetime import date

from roadsnap.models import EpicSnapshot, Summary, SummaryItem
from roadsnap.status import StatusClassifier

logger = logging.getLogger(__name__)

STATUS_NOT_IN_SYNC = "Epic Status Does not correspond Planning Dates"


def status_not_in_sync(epic: EpicSnapshot, classifier: StatusClassifier) -> str | None:
    """Return a warning when an epic is due or running but still marked to do."""
    if (epic.is_past_due() or epic.is_in_active_phase()) and classifier.is_to_do(epic.epic):
        return STATUS_NOT_IN_SYNC
    return None


def _summary_item(epic: EpicSnapshot, classifier: StatusClassifier) -> SummaryItem:
    done, in_progress, to_do = classifier.count(epic.issues)
    return SummaryItem(
        snapshot=epic,
        done=done,
        in_progress=in_progress,
        to_do=to_do,
        total=len(epic.issues),
        status_alert=status_not_in_sync(epic, classifier),
    )


def summarize(
    epics: list[EpicSnapshot],
    classifier: StatusClassifier,
    project: str = "",
    snapshot_date: date | None = None,
) -> Summary:
    """Place each epic into at most one of the Done, Overdue, To Do and Ongoing buckets.

    Rules are tried in that order and the first match wins. An epic whose
    status is neither done, to do nor in progress and which is not past due
    lands in no bucket.
    """
    if snapshot_date is None:
        snapshot_date = epics[0].snapshot_date if epics else date.today()

    summary = Summary(project=project, snapshot_date=snapshot_date)

    for epic in epics:
        item = _summary_item(epic, classifier)
        all_done = item.done == item.total
        epic_done = classifier.is_done(epic.epic)
        epic_to_do = classifier.is_to_do(epic.epic)

        if item.status_alert:
            summary.warnings.append(f"{epic.key}: {item.status_alert}")
            logger.warning("%s %s: %s", project, epic.key, item.status_alert)

        if epic_done and all_done:
            summary.done.append(item)
        elif epic.is_past_due() and not (epic_done and all_done) and not epic_to_do:
            summary.overdue.append(item)
        elif epic_to_do:
            summary.outstanding.append(item)
        elif classifier.is_in_progress(epic.epic):
            summary.ongoing.append(item)
        else:
            logger.debug("%s %s: status %r matches no bucket", project, epic.key, epic.epic.status)

    return summary
