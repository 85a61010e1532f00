"""Configuration management for roadsnap."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

import tomli_w

from roadsnap.exceptions import ConfigNotFoundError, ConfigurationError, InvalidConfigError


@dataclass
class StatusNames:
    """Raw JIRA status names accepted for each status category."""

    done: list[str] = field(default_factory=list)
    in_progress: list[str] = field(default_factory=list)
    to_do: list[str] = field(default_factory=list)

    def ensure_configured(self) -> None:
        """Raise ConfigurationError when no status names are configured at all."""
        if not (self.done or self.in_progress or self.to_do):
            raise ConfigurationError(
                "No status names configured. Add a [status_names] section with "
                "done, progress and todo lists; every status is undefined until then."
            )


@dataclass
class Config:
    """Configuration for JIRA connection and snapshot settings."""

    jira_url: str
    jira_email: str
    jira_api_token: str
    projects: list[str] = field(default_factory=list)
    start_date_field: str | None = None
    status_names: StatusNames = field(default_factory=StatusNames)

    @property
    def browse_url(self) -> str:
        """Prefix for issue links, e.g. ``https://x.atlassian.net/browse``."""
        return self.jira_url.rstrip("/") + "/browse"

    def validate(self) -> list[str]:
        """Validate configuration values. Returns list of error messages."""
        errors: list[str] = []

        if not self.jira_url:
            errors.append("JIRA URL is required")
        else:
            parsed = urlparse(self.jira_url)
            if parsed.scheme not in ("http", "https"):
                errors.append("JIRA URL must start with http:// or https://")
            if not parsed.netloc:
                errors.append("JIRA URL must include a domain")

        if not self.jira_email:
            errors.append("JIRA email is required")
        elif "@" not in self.jira_email:
            errors.append("JIRA email must be a valid email address")

        if not self.jira_api_token:
            errors.append("JIRA API token is required")

        if any(not name.strip() for name in self.projects):
            errors.append("Project names must not be empty")

        return errors


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    return Path.home() / ".roadsnap"


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return get_config_dir() / "config.toml"


def config_exists(path: Path | None = None) -> bool:
    """Check if configuration file exists."""
    return (path or get_config_path()).exists()


def load_config(path: Path | None = None) -> Config:
    """Load configuration from TOML file.

    Raises:
        ConfigNotFoundError: If config file doesn't exist
        InvalidConfigError: If config is invalid
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(
            f"Configuration not found at {config_path}. "
            "Create ~/.roadsnap/config.toml or pass --config."
        )

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise InvalidConfigError(f"Invalid configuration: {e}") from e

    jira_section = data.get("jira", {})
    projects_section = data.get("projects", {})
    epic_section = data.get("epic", {})
    status_section = data.get("status_names", {})

    config = Config(
        jira_url=jira_section.get("url", ""),
        jira_email=jira_section.get("email", ""),
        jira_api_token=jira_section.get("api_token", ""),
        projects=list(projects_section.get("names", [])),
        start_date_field=epic_section.get("start_date_field") or None,
        status_names=StatusNames(
            done=list(status_section.get("done", [])),
            in_progress=list(status_section.get("progress", [])),
            to_do=list(status_section.get("todo", [])),
        ),
    )

    errors = config.validate()
    if errors:
        raise InvalidConfigError(f"Invalid configuration: {'; '.join(errors)}")

    return config


def save_config(config: Config, path: Path | None = None) -> None:
    """Save configuration to TOML file."""
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict = {
        "jira": {
            "url": config.jira_url,
            "email": config.jira_email,
            "api_token": config.jira_api_token,
        },
        "projects": {"names": list(config.projects)},
        "status_names": {
            "done": list(config.status_names.done),
            "progress": list(config.status_names.in_progress),
            "todo": list(config.status_names.to_do),
        },
    }

    if config.start_date_field:
        data["epic"] = {"start_date_field": config.start_date_field}

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
