"""Tests for the web interface."""

from datetime import date
from unittest.mock import patch

import pytest

from roadsnap.config import save_config
from roadsnap.web.app import create_app
from tests.factories import raw_issue


@pytest.fixture
def app_client(tmp_path, config, store, write_snapshot):
    config_path = tmp_path / "config.toml"
    save_config(config, config_path)
    write_snapshot("My Project", date(2024, 3, 1), [
        (raw_issue("E-1", "Alpha", "In Progress", "2024-03-20"), [raw_issue("S-1", status="Done")]),
    ])
    write_snapshot("My Project", date(2024, 3, 15), [
        (raw_issue("E-1", "Alpha", "Done", "2024-03-20"), [raw_issue("S-1", status="Done")]),
    ])
    app = create_app(config_path=config_path, base_dir=tmp_path)
    app.config["TESTING"] = True
    return app.test_client()


class TestRoutes:
    """Tests for HTTP route handlers."""

    def test_health(self, app_client):
        resp = app_client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json()["config_loaded"] is True

    def test_health_without_config(self, tmp_path):
        client = create_app(config_path=tmp_path / "missing.toml", base_dir=tmp_path).test_client()
        assert client.get("/health").status_code == 503

    def test_index_lists_projects(self, app_client):
        resp = app_client.get("/")
        assert resp.status_code == 200
        assert b"MyProject" in resp.data
        assert b"2024-03-15" in resp.data

    def test_index_without_config(self, tmp_path):
        client = create_app(config_path=tmp_path / "missing.toml", base_dir=tmp_path).test_client()
        resp = client.get("/")
        assert resp.status_code == 503
        assert b"Configuration not found" in resp.data

    def test_summary_latest(self, app_client):
        resp = app_client.get("/api/projects/My%20Project/summary")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["snapshot_date"] == "2024-03-15"
        assert [e["key"] for e in data["buckets"]["Done"]] == ["E-1"]

    def test_summary_for_date(self, app_client):
        data = app_client.get("/api/projects/My%20Project/summary?date=2024-03-01").get_json()
        assert [e["key"] for e in data["buckets"]["Ongoing"]] == ["E-1"]

    def test_summary_unknown_date(self, app_client):
        assert app_client.get("/api/projects/My%20Project/summary?date=2024-01-01").status_code == 404

    def test_summary_bad_date(self, app_client):
        assert app_client.get("/api/projects/My%20Project/summary?date=yesterday").status_code == 400

    def test_summary_unknown_project(self, app_client):
        assert app_client.get("/api/projects/Nope/summary").status_code == 404

    def test_report(self, app_client):
        resp = app_client.get("/api/projects/My%20Project/report?from=2024-03-01&to=2024-03-31")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["snapshot_from"] == "2024-03-01"
        assert data["snapshot_to"] == "2024-03-15"
        assert data["right"]["epics_done"] == 1
        assert data["pairs"][0]["planning_status"] == "Ok"

    def test_report_defaults_to_current_month(self, app_client):
        with patch("roadsnap.web.routes.build_report") as mock_build, patch(
            "roadsnap.web.routes.report_to_dict", return_value={}
        ):
            resp = app_client.get("/api/projects/My%20Project/report")
        assert resp.status_code == 200
        date_from, date_to = mock_build.call_args.args[3:5]
        assert date_from.day == 1
        assert date_from.month == date_to.month == date.today().month

    def test_report_inverted_range(self, app_client):
        resp = app_client.get("/api/projects/My%20Project/report?from=2024-04-01&to=2024-03-01")
        assert resp.status_code == 400

    def test_report_unknown_project(self, app_client):
        assert app_client.get("/api/projects/Nope/report?from=2024-03-01&to=2024-03-31").status_code == 404
