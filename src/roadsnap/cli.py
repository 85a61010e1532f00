"""roadsnap command line interface.

Subcommands:
  cache   -> snapshot JIRA epics and their issues into the work directory
  list    -> markdown bucket summary of the latest (or a given) snapshot
  chart   -> stacked bar chart of bucket sizes across all snapshots
  report  -> month-by-month planning diff report for a year
  serve   -> run the web interface
"""

import argparse
import logging
from datetime import date
from pathlib import Path

from roadsnap.chart import draw_bucket_chart
from roadsnap.config import Config
from roadsnap.exceptions import RoadsnapError
from roadsnap.render import reports_to_markdown, summary_to_markdown
from roadsnap.reports import (
    build_summaries,
    build_summary,
    build_yearly_reports,
    get_config,
    make_store,
)
from roadsnap.snapshot import capture
from roadsnap.store import SnapshotStore, project_key

logger = logging.getLogger("roadsnap")


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from e


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="roadsnap", description="Snapshot JIRA epics and report on their planning status"
    )
    p.add_argument("--dir", type=Path, default=Path.cwd(), help="Work directory for snapshots and reports")
    p.add_argument("--config", type=Path, default=None, help="Config file (default ~/.roadsnap/config.toml)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = p.add_subparsers(dest="cmd", required=True, metavar="<command>")

    pc = sub.add_parser("cache", help="Snapshot JIRA epics")
    pc.add_argument("--project", action="append", help="Project to snapshot (repeatable)")
    pc.add_argument("--date", type=_parse_date, help="Snapshot date (default today)")

    pl = sub.add_parser("list", help="Write a bucket summary report")
    pl.add_argument("--project", action="append", help="Project to report on (repeatable)")
    pl.add_argument("--date", type=_parse_date, help="Snapshot date (default latest)")

    pch = sub.add_parser("chart", help="Draw a bucket chart across snapshots")
    pch.add_argument("--project", action="append", help="Project to chart (repeatable)")

    pr = sub.add_parser("report", help="Write a yearly time-window diff report")
    pr.add_argument("--project", action="append", help="Project to report on (repeatable)")
    pr.add_argument("--year", type=int, default=date.today().year)

    ps = sub.add_parser("serve", help="Run the web interface")
    ps.add_argument("--host", default="127.0.0.1")
    ps.add_argument("--port", type=int, default=5000)

    return p


def _stored_projects(store: SnapshotStore, requested: list[str] | None) -> list[str]:
    if requested:
        return requested
    projects = list(store.list_projects())
    if not projects:
        logger.info("No cached snapshots in %s", store.base_dir)
    return projects


def _cmd_cache(cfg: Config, args: argparse.Namespace) -> int:
    store = make_store(cfg, args.dir)
    projects = args.project or cfg.projects
    if not projects:
        logger.error("No projects configured. Add [projects] names or pass --project.")
        return 1
    counts = capture(cfg, store, projects=projects, snapshot_date=args.date)
    for project, count in counts.items():
        logger.info("Cached %d epics for %s", count, project)
    return 0


def _cmd_list(cfg: Config, args: argparse.Namespace) -> int:
    store = make_store(cfg, args.dir)
    for project in _stored_projects(store, args.project):
        summary = build_summary(cfg, store, project, args.date)
        key = project_key(project)
        path = args.dir / key / summary.snapshot_date.isoformat() / f"{key}_roadsnap.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(summary_to_markdown(summary, cfg.browse_url), encoding="utf-8")
        logger.info("Wrote summary for %s to %s", project, path)
    return 0


def _cmd_chart(cfg: Config, args: argparse.Namespace) -> int:
    store = make_store(cfg, args.dir)
    for project in _stored_projects(store, args.project):
        summaries = build_summaries(cfg, store, project)
        if not summaries:
            logger.info("Skipping project %r - no cached raw data", project)
            continue
        draw_bucket_chart(summaries, project, args.dir / project_key(project) / "roadmap-stats.png")
    return 0


def _cmd_report(cfg: Config, args: argparse.Namespace) -> int:
    store = make_store(cfg, args.dir)
    for project in args.project or cfg.projects:
        reports = build_yearly_reports(cfg, store, project, args.year)
        key = project_key(project)
        path = args.dir / key / f"{key}-{args.year}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(reports_to_markdown(project, reports), encoding="utf-8")
        logger.info("Wrote report for %s to %s", project, path)
    return 0


def _cmd_serve(cfg: Config, args: argparse.Namespace) -> int:
    from roadsnap.web.app import create_app

    app = create_app(config_path=args.config, base_dir=args.dir)
    app.run(host=args.host, port=args.port)
    return 0


HANDLERS = {
    "cache": _cmd_cache,
    "list": _cmd_list,
    "chart": _cmd_chart,
    "report": _cmd_report,
    "serve": _cmd_serve,
}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = get_config(args.config)
        return HANDLERS[args.cmd](cfg, args)
    except RoadsnapError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
