"""Exception hierarchy for roadsnap."""


class RoadsnapError(Exception):
    """Base exception for roadsnap errors."""

    pass


class ConfigNotFoundError(RoadsnapError):
    """Configuration file not found."""

    pass


class InvalidConfigError(RoadsnapError):
    """Configuration is invalid."""

    pass


class ConfigurationError(RoadsnapError):
    """Status names are missing, so every status classifies as undefined."""

    pass


class NotFoundError(RoadsnapError):
    """No snapshot recorded for the requested project and date."""

    pass


class CorruptDataError(RoadsnapError):
    """A stored snapshot record cannot be parsed."""

    pass


class JiraAuthError(RoadsnapError):
    """JIRA authentication failed."""

    pass


class JiraConnectionError(RoadsnapError):
    """Cannot connect to JIRA server."""

    pass


class JiraRateLimitError(RoadsnapError):
    """JIRA rate limit exceeded."""

    pass
