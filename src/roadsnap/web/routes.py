"""HTTP route handlers for the roadsnap web interface."""

from datetime import date

from flask import Blueprint, current_app, jsonify, render_template, request

from roadsnap.config import config_exists
from roadsnap.differ import month_bounds
from roadsnap.exceptions import (
    ConfigNotFoundError,
    InvalidConfigError,
    NotFoundError,
    RoadsnapError,
)
from roadsnap.render import report_to_dict, summary_to_dict
from roadsnap.reports import build_report, build_summary, get_config, make_store

bp = Blueprint("main", __name__, template_folder="templates")


def _config_path():
    return current_app.config.get("ROADSNAP_CONFIG")


def _base_dir():
    return current_app.config["ROADSNAP_DIR"]


def _date_arg(name: str) -> date | None:
    value = request.args.get(name, "").strip()
    if not value:
        return None
    return date.fromisoformat(value)


def _error(e: RoadsnapError):
    if isinstance(e, NotFoundError):
        return jsonify({"error": str(e)}), 404
    if isinstance(e, (ConfigNotFoundError, InvalidConfigError)):
        return jsonify({"error": str(e)}), 503
    return jsonify({"error": str(e)}), 500


@bp.route("/health")
def health():
    """Health check endpoint."""
    if config_exists(_config_path()):
        return jsonify({"status": "ok", "config_loaded": True})
    return jsonify({
        "status": "error",
        "config_loaded": False,
        "message": "Configuration not found",
    }), 503


@bp.route("/")
def index():
    """List projects and their snapshot dates."""
    try:
        config = get_config(_config_path())
    except RoadsnapError as e:
        return render_template("index.html", projects={}, error=str(e)), 503

    projects = make_store(config, _base_dir()).list_projects()
    return render_template("index.html", projects=projects)


@bp.route("/api/projects/<project>/summary")
def api_summary(project: str):
    """Bucket summary of a snapshot (latest unless ``?date=`` is given)."""
    try:
        snapshot_date = _date_arg("date")
    except ValueError:
        return jsonify({"error": "date must be YYYY-MM-DD"}), 400

    try:
        config = get_config(_config_path())
        summary = build_summary(config, make_store(config, _base_dir()), project, snapshot_date)
    except RoadsnapError as e:
        return _error(e)

    return jsonify(summary_to_dict(summary, config.browse_url))


@bp.route("/api/projects/<project>/report")
def api_report(project: str):
    """Time-window report for ``?from=&to=``, the current month by default."""
    try:
        date_from = _date_arg("from")
        date_to = _date_arg("to")
    except ValueError:
        return jsonify({"error": "from and to must be YYYY-MM-DD"}), 400

    if date_from is None or date_to is None:
        today = date.today()
        month_start, month_end = month_bounds(today.year, today.month)
        date_from = date_from or month_start
        date_to = date_to or month_end

    if date_from > date_to:
        return jsonify({"error": "from must not be after to"}), 400

    try:
        config = get_config(_config_path())
        report = build_report(config, make_store(config, _base_dir()), project, date_from, date_to)
    except RoadsnapError as e:
        return _error(e)

    return jsonify(report_to_dict(report))
