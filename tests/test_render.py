"""Tests for markdown and dict rendering."""

from datetime import date

from roadsnap.models import (
    PlanEpic,
    PlanningStatus,
    PlanStory,
    Report,
    ReportPair,
    StatusCategory,
)
from roadsnap.render import (
    format_date,
    report_to_dict,
    reports_to_markdown,
    summary_to_dict,
    summary_to_markdown,
)
from roadsnap.summary import STATUS_NOT_IN_SYNC, summarize

LINK = "https://jira.example.com/browse"


def test_format_date():
    assert format_date(date(2024, 3, 5)) == "March 5, 2024"
    assert format_date(date(2024, 3, 5), "%b {day}, %Y") == "Mar 5, 2024"
    assert format_date(None) == "-"


class TestSummaryMarkdown:
    """Tests for summary_to_markdown."""

    def _summary(self, classifier, make_epic):
        epics = [
            make_epic(key="E-1", status="Done", children=["Done"], due=date(2024, 1, 31), labels=["infra", "q1"]),
            make_epic(key="E-2", status="To Do", start=date(2024, 1, 1), due=date(2024, 5, 31)),
            make_epic(key="E-3", status="In Progress", children=["Done", "To Do"], start=None, due=None),
        ]
        return summarize(epics, classifier, project="My Project", snapshot_date=date(2024, 2, 15))

    def test_sections_and_counts(self, classifier, make_epic):
        text = summary_to_markdown(self._summary(classifier, make_epic), LINK + "/")

        assert "My Project: February 15, 2024" in text
        assert "Done (1/3)" in text
        assert "Ongoing (1/3)" in text
        assert "Overdue (0/3)" in text
        assert "To Do (1/3)" in text
        assert text.index("Done (1/3)") < text.index("Ongoing (1/3)") < text.index("Overdue (0/3)")

    def test_epic_details(self, classifier, make_epic):
        text = summary_to_markdown(self._summary(classifier, make_epic), LINK)

        assert "#### Q1 2024 [E-1](https://jira.example.com/browse/E-1): Epic E-1" in text
        assert "`infra`, `q1`" in text
        assert f"> {STATUS_NOT_IN_SYNC}" in text
        assert "#### [E-3](https://jira.example.com/browse/E-3)" in text
        assert "Total: 2, Done: 1, InProgress: 0, Outstanding: 1" in text
        assert "Progress: 0.50" in text
        assert "Start: -" in text

    def test_summary_to_dict(self, classifier, make_epic):
        data = summary_to_dict(self._summary(classifier, make_epic), LINK)

        assert data["total"] == 3
        assert list(data["buckets"]) == ["Done", "Ongoing", "Overdue", "To Do"]
        outstanding = data["buckets"]["To Do"][0]
        assert outstanding["key"] == "E-2"
        assert outstanding["url"] == f"{LINK}/E-2"
        assert outstanding["status_alert"] == STATUS_NOT_IN_SYNC
        assert data["warnings"] == [f"E-2: {STATUS_NOT_IN_SYNC}"]


def _plan_epic(key, due, status=StatusCategory.IN_PROGRESS, stories=(), done=0):
    return PlanEpic(
        key=key,
        title=f"Epic {key}",
        link=f"{LINK}/{key}",
        snapshot_date=date(2024, 3, 1),
        start_date=None,
        due_date=due,
        status=status,
        planning_status=PlanningStatus.OK,
        plan_stories=[PlanStory(date(2024, 3, 1), s, s, "", StatusCategory.TO_DO) for s in stories],
        stories_done=done,
    )


def _report():
    report = Report(
        title="Mar, 2024",
        date_from=date(2024, 3, 1),
        date_to=date(2024, 3, 31),
        snapshot_from=date(2024, 3, 1),
        snapshot_to=date(2024, 3, 29),
    )
    report.left.epics_planned = 1
    report.left.stories_planned = 2
    report.right.epics_planned = 2
    report.right.stories_planned = 3
    report.right.stories_done = 1
    report.pairs = [
        ReportPair(
            key="E-1", title="Epic E-1", link=f"{LINK}/E-1",
            left=_plan_epic("E-1", date(2024, 3, 10), stories=("S-1", "S-2")),
            right=_plan_epic("E-1", date(2024, 3, 20), stories=("S-1", "S-2"), done=1),
        ),
        ReportPair(
            key="E-2", title="Epic E-2", link=f"{LINK}/E-2",
            right=_plan_epic("E-2", date(2024, 3, 25), status=StatusCategory.TO_DO, stories=("S-3",)),
        ),
    ]
    return report


class TestReportsMarkdown:
    """Tests for reports_to_markdown."""

    def test_overview_and_details(self):
        text = reports_to_markdown("My Project", [_report()])

        assert "My Project: Mar, 2024 - Mar, 2024" in text
        assert "| [Mar, 2024](#2024-03) | Mar 1, 2024 | Mar 29, 2024 | 0.50 | 1 -> 2 | 0 -> 0 | **2** -> 3 | 0 -> **1** |" in text
        assert '<a name="2024-03"></a>Mar, 2024' in text
        assert (
            f"| [E-1]({LINK}/E-1) Epic E-1 | InProgress -> InProgress | Postponed "
            "| Mar 10, 2024 -> Mar 20, 2024 | 0.50 | **2** -> 2 | 0 -> **1** |"
        ) in text
        assert "| - -> ToDo | Replanned | Rescheduled -> Mar 25, 2024 |" in text

    def test_empty(self):
        assert "No reports." in reports_to_markdown("P", [])


def test_report_to_dict():
    data = report_to_dict(_report())

    assert data["from"] == "2024-03-01"
    assert data["snapshot_to"] == "2024-03-29"
    assert data["left"]["stories_planned"] == 2
    assert data["progress"] == 0.5
    assert [p["planning_status"] for p in data["pairs"]] == ["Postponed", "Replanned"]
    assert data["pairs"][1]["left"] is None
    assert data["pairs"][0]["right"]["stories_done"] == 1
