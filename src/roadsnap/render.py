"""Markdown rendering of summaries and time-window reports."""

from datetime import date

from roadsnap.models import Quarter, Report, ReportPair, Summary, SummaryItem

DATE_FORMAT = "%B {day}, %Y"
VIEW_DATE_FORMAT = "%b {day}, %Y"
MONTH_FORMAT = "%b, %Y"


def format_date(value: date | None, fmt: str = DATE_FORMAT) -> str:
    """Format a date without zero-padding the day; unset dates render as ``-``."""
    if value is None:
        return "-"
    return value.strftime(fmt).format(day=value.day)


def _item_markdown(item: SummaryItem, link_prefix: str) -> str:
    snapshot = item.snapshot
    epic = snapshot.epic

    heading = f"[{epic.key}]({link_prefix}/{epic.key}): {epic.summary}"
    if snapshot.due_date:
        heading = f"{Quarter.from_date(snapshot.due_date)} {snapshot.due_date.year} {heading}"

    lines = ["", f"#### {heading}"]
    if item.status_alert:
        lines += ["", f"> {item.status_alert}", ""]
    if epic.labels:
        lines.append("`" + "`, `".join(epic.labels) + "`  ")
    lines += [
        f"Status: {epic.status}  ",
        f"Start: {format_date(snapshot.start_date)}  ",
        f"Due: {format_date(snapshot.due_date)}  ",
        f"Total: {item.total}, Done: {item.done}, InProgress: {item.in_progress}, "
        f"Outstanding: {item.to_do}  ",
        f"Progress: {item.progress:.2f}",
    ]
    return "\n".join(lines)


def summary_to_markdown(summary: Summary, link_prefix: str) -> str:
    """Render a bucket summary, one section per bucket."""
    link_prefix = link_prefix.rstrip("/")
    total = summary.all_count()
    parts = [
        "",
        f"{summary.project}: {format_date(summary.snapshot_date)}",
        "======================",
    ]

    for name, items in summary.named_stats():
        parts += ["", f"{name} ({len(items)}/{total})", "----------------------"]
        parts += [_item_markdown(item, link_prefix) for item in items]

    return "\n".join(parts) + "\n"


def _pair_due_date(pair: ReportPair, left: bool) -> str:
    side = pair.left if left else pair.right
    if side is None:
        return "Rescheduled"
    return format_date(side.due_date, VIEW_DATE_FORMAT)


def _pair_status(pair: ReportPair, left: bool) -> str:
    side = pair.left if left else pair.right
    return side.status.value if side else "-"


def _pair_row(pair: ReportPair) -> str:
    left_total = len(pair.left.plan_stories) if pair.left else 0
    right_total = len(pair.right.plan_stories) if pair.right else 0
    left_done = pair.left.stories_done if pair.left else 0
    right_done = pair.right.stories_done if pair.right else 0
    return (
        f"| [{pair.key}]({pair.link}) {pair.title} "
        f"| {_pair_status(pair, True)} -> {_pair_status(pair, False)} "
        f"| {pair.planning_status.value} "
        f"| {_pair_due_date(pair, True)} -> {_pair_due_date(pair, False)} "
        f"| {pair.progress:.2f} "
        f"| **{left_total}** -> {right_total} "
        f"| {left_done} -> **{right_done}** |"
    )


def reports_to_markdown(project: str, reports: list[Report]) -> str:
    """Render monthly reports as an overview table followed by per-month details."""
    if not reports:
        return f"\n{project}\n======\n\nNo reports.\n"

    overview = [
        "",
        f"{project}: {reports[0].date_from.strftime(MONTH_FORMAT)} - "
        f"{reports[-1].date_to.strftime(MONTH_FORMAT)}",
        "======",
        "",
        "| Month | Snapshot From | Snapshot To | Progress | Epics Planned | Epics Done "
        "| Stories Planned | Stories Done |",
        "| --- | --- | --- | --- | --- | --- | --- | --- |",
    ]
    details: list[str] = []

    for report in reports:
        anchor = report.date_to.strftime("%Y-%m")
        left, right = report.left, report.right
        overview.append(
            f"| [{report.title}](#{anchor}) "
            f"| {format_date(report.snapshot_from, VIEW_DATE_FORMAT)} "
            f"| {format_date(report.snapshot_to, VIEW_DATE_FORMAT)} "
            f"| {report.progress:.2f} "
            f"| {left.epics_planned} -> {right.epics_planned} "
            f"| {left.epics_done} -> {right.epics_done} "
            f"| **{left.stories_planned}** -> {right.stories_planned} "
            f"| {left.stories_done} -> **{right.stories_done}** |"
        )

        details += [
            "",
            "---",
            f'<a name="{anchor}"></a>{report.title}',
            "===",
            "",
            f"Snapshot From: {format_date(report.snapshot_from, VIEW_DATE_FORMAT)}  ",
            f"Snapshot To: {format_date(report.snapshot_to, VIEW_DATE_FORMAT)}  ",
            "",
            "| Epic Name | Status | Planning | Due Date | Progress | Stories Total | Stories Done |",
            "| --- | --- | --- | --- | --- | --- | --- |",
        ]
        details += [_pair_row(pair) for pair in report.pairs]

    return "\n".join(overview + details) + "\n"


def report_to_dict(report: Report) -> dict:
    """Convert a Report to a JSON-serializable dict."""

    def _date_str(d: date | None) -> str | None:
        return d.isoformat() if d else None

    def _side(epic) -> dict | None:
        if epic is None:
            return None
        return {
            "status": epic.status.value,
            "planning_status": epic.planning_status.value,
            "start_date": _date_str(epic.start_date),
            "due_date": _date_str(epic.due_date),
            "snapshot_date": _date_str(epic.snapshot_date),
            "stories_total": len(epic.plan_stories),
            "stories_done": epic.stories_done,
        }

    return {
        "title": report.title,
        "from": _date_str(report.date_from),
        "to": _date_str(report.date_to),
        "snapshot_from": _date_str(report.snapshot_from),
        "snapshot_to": _date_str(report.snapshot_to),
        "progress": report.progress,
        "left": vars(report.left).copy(),
        "right": vars(report.right).copy(),
        "pairs": [
            {
                "key": pair.key,
                "title": pair.title,
                "link": pair.link,
                "planning_status": pair.planning_status.value,
                "progress": pair.progress,
                "left": _side(pair.left),
                "right": _side(pair.right),
            }
            for pair in report.pairs
        ],
    }


def summary_to_dict(summary: Summary, link_prefix: str) -> dict:
    """Convert a Summary to a JSON-serializable dict."""
    link_prefix = link_prefix.rstrip("/")

    def _item(item: SummaryItem) -> dict:
        snapshot = item.snapshot
        return {
            "key": snapshot.key,
            "title": snapshot.epic.summary,
            "status": snapshot.epic.status,
            "url": f"{link_prefix}/{snapshot.key}",
            "start_date": snapshot.start_date.isoformat() if snapshot.start_date else None,
            "due_date": snapshot.due_date.isoformat() if snapshot.due_date else None,
            "total": item.total,
            "done": item.done,
            "in_progress": item.in_progress,
            "to_do": item.to_do,
            "progress": item.progress,
            "status_alert": item.status_alert,
        }

    return {
        "project": summary.project,
        "snapshot_date": summary.snapshot_date.isoformat(),
        "total": summary.all_count(),
        "buckets": {name: [_item(item) for item in items] for name, items in summary.named_stats()},
        "warnings": list(summary.warnings),
    }
