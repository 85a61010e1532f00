"""JIRA API client with retry logic."""

from jira import JIRA, JIRAError
from requests.exceptions import RequestException
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from roadsnap.config import Config

EPIC_FIELDS = ["summary", "status", "labels", "duedate", "issuetype"]
ISSUE_FIELDS = ["summary", "status", "labels", "duedate", "issuetype", "parent"]


class RateLimitError(Exception):
    """Raised when JIRA API rate limit is hit."""

    pass


class AuthenticationError(Exception):
    """Raised when JIRA authentication fails."""

    pass


class ConnectionError(Exception):
    """Raised when JIRA server cannot be reached."""

    pass


def _translate(error: Exception, server: str) -> Exception | None:
    """Map a jira or requests failure onto this module's errors, or None."""
    if isinstance(error, JIRAError):
        if error.status_code == 429:
            return RateLimitError("Rate limited by JIRA")
        if error.status_code == 401:
            return AuthenticationError("JIRA rejected the email / API token pair")
        if error.status_code == 400:
            return ValueError(f"Invalid JQL query: {error.text}")
    elif isinstance(error, RequestException):
        return ConnectionError(f"Cannot reach JIRA at {server}: {error}")
    return None


class JiraClient:
    """Client for reading epics and their issues from JIRA Cloud."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self._client: JIRA | None = None

    def _get_client(self) -> JIRA:
        if self._client is None:
            try:
                self._client = JIRA(
                    server=self.config.jira_url,
                    basic_auth=(self.config.jira_email, self.config.jira_api_token),
                    timeout=15,
                )
            except (JIRAError, RequestException) as e:
                mapped = _translate(e, self.config.jira_url)
                if mapped is None:
                    raise
                raise mapped from e
        return self._client

    @retry(
        retry=retry_if_exception_type(RateLimitError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=60),
        reraise=True,
    )
    def search(self, jql: str, fields: list[str]) -> list[dict]:
        """Run a JQL search and return raw issue dicts, fetching every page.

        Raises:
            RateLimitError: If rate limited (retried up to three attempts)
            AuthenticationError: If authentication fails
            ConnectionError: If the server cannot be reached
            ValueError: If the JQL is rejected
            JIRAError: For other JIRA API errors
        """
        client = self._get_client()
        try:
            result = client.enhanced_search_issues(jql, maxResults=0, fields=fields)
        except (JIRAError, RequestException) as e:
            mapped = _translate(e, self.config.jira_url)
            if mapped is None:
                raise
            raise mapped from e
        return [{"key": issue.key, "fields": issue.raw.get("fields", {})} for issue in result]

    def list_epics(self, project: str) -> list[dict]:
        """Fetch all epics of a project."""
        fields = list(EPIC_FIELDS)
        if self.config.start_date_field:
            fields.append(self.config.start_date_field)
        return self.search(f'project = "{project}" AND issuetype = Epic', fields)

    def list_epic_issues(self, epic_key: str) -> list[dict]:
        """Fetch the child issues of an epic."""
        return self.search(f"parent = {epic_key}", ISSUE_FIELDS)
