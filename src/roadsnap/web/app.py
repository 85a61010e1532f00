"""Flask application factory for the roadsnap web interface."""

from pathlib import Path

from flask import Flask


def create_app(config_path: Path | None = None, base_dir: Path | None = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    app.config["SECRET_KEY"] = "roadsnap-local-dev"
    app.config["ROADSNAP_CONFIG"] = config_path
    app.config["ROADSNAP_DIR"] = Path(base_dir) if base_dir else Path.cwd()

    from roadsnap.web.routes import bp
    app.register_blueprint(bp)

    return app
