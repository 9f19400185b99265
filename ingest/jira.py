"""
Jira ingestion client: issues assigned to a user, via the enhanced JQL search endpoint.
The user may be given as a display name or an email; Jira resolves either inside JQL.
"""

import logging
from typing import List, Dict, Any, Optional

from errors import ConfigurationError
from ingest.http import request_json, DEFAULT_TIMEOUT
from normalize.models import Issue
from normalize.util import normalize_issue

logger = logging.getLogger(__name__)

ISSUE_FIELDS = ["summary", "status", "updated", "issuetype", "priority"]


class JiraClient:
    """Minimal Jira client for fetching a user's issues.

    Authentication is basic auth with the account email and an API token.
    """

    def __init__(self, host: Optional[str], user_email: Optional[str], api_token: Optional[str], timeout: float = DEFAULT_TIMEOUT):
        self.host = (host or '').rstrip('/')
        self.user_email = user_email
        self.api_token = api_token
        self.timeout = timeout
        self.headers = {"Accept": "application/json", "Content-Type": "application/json"}

    def _auth(self):
        if not self.host:
            raise ConfigurationError("JIRA_HOST is not set")
        if not self.user_email or not self.api_token:
            raise ConfigurationError("JIRA_USER_EMAIL or JIRA_API_TOKEN is not set")
        return (self.user_email, self.api_token)

    @staticmethod
    def _escape(user: str) -> str:
        return user.replace('\\', '\\\\').replace('"', '\\"')

    def search(self, jql: str, max_results: int = 50) -> List[Issue]:
        """Run a JQL search and return every page of results as normalized issues."""
        auth = self._auth()
        url = f"{self.host}/rest/api/3/search/jql"
        issues: List[Dict[str, Any]] = []
        next_token = None
        while True:
            body = {"jql": jql, "fields": ISSUE_FIELDS, "maxResults": max_results}
            if next_token:
                body["nextPageToken"] = next_token
            data = request_json('POST', url, 'jira', headers=self.headers, json_body=body, auth=auth, timeout=self.timeout) or {}
            issues.extend(data.get('issues', []))
            next_token = data.get('nextPageToken')
            if data.get('isLast', not next_token) or not next_token:
                break
        logger.debug("JQL %r returned %d issue(s)", jql, len(issues))
        return [normalize_issue(i, self.host) for i in issues]

    def active_issues_for_user(self, user: str) -> List[Issue]:
        """Issues assigned to user that are not in a Done status category, newest update first."""
        jql = f'assignee = "{self._escape(user)}" AND statusCategory != "Done" ORDER BY updated DESC'
        return self.search(jql)

    def all_issues_for_user(self, user: str) -> List[Issue]:
        """Every issue assigned to user regardless of status, newest update first."""
        jql = f'assignee = "{self._escape(user)}" ORDER BY updated DESC'
        return self.search(jql)
