"""
GitHub ingestion client: recent commits, open pull requests and repo discovery for a user.
Cross-repo queries are best-effort: a repo that fails is logged and skipped, not fatal.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Dict, Any, Optional, Callable

from errors import UpstreamError
from ingest.http import request_json, DEFAULT_TIMEOUT
from normalize.models import Commit, PullRequest, FanOutResult, SkippedItem
from normalize.util import normalize_commit, normalize_pull_request

logger = logging.getLogger(__name__)

RECENT_COMMIT_DAYS = 7
# the public events feed is capped at 300 events
EVENTS_MAX_PAGES = 3


class GitHubClient:
    """Simple GitHub client to fetch a user's commits, pull requests and contribution repos."""

    def __init__(self, token: Optional[str] = None, base_url: str = None, timeout: float = DEFAULT_TIMEOUT):
        self.token = token
        self.base_url = (base_url or "https://api.github.com").rstrip('/')
        self.timeout = timeout
        self.headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            self.headers["Authorization"] = f"Bearer {self.token}"

    def _get(self, path: str, params: Dict[str, Any]):
        return request_json('GET', f"{self.base_url}{path}", 'github', headers=self.headers, params=params, timeout=self.timeout)

    def _paginate(self, path: str, params: Dict[str, Any], per_page: int = 100, max_pages: Optional[int] = None) -> List[Dict[str, Any]]:
        page = 1
        items: List[Dict[str, Any]] = []
        while True:
            data = self._get(path, dict(params, page=page, per_page=per_page)) or []
            items.extend(data)
            if len(data) < per_page:
                break
            if max_pages is not None and page >= max_pages:
                break
            page += 1
        return items

    def recent_commits(self, user: str, owner: str, repo: str, now: Optional[datetime] = None) -> List[Commit]:
        """Commits authored by user in owner/repo over the trailing seven days."""
        since = (now or datetime.now(timezone.utc)) - timedelta(days=RECENT_COMMIT_DAYS)
        raw = self._paginate(f"/repos/{owner}/{repo}/commits", {"author": user, "since": since.strftime('%Y-%m-%dT%H:%M:%SZ')})
        return [normalize_commit(c, f"{owner}/{repo}") for c in raw]

    def active_pull_requests(self, user: str, owner: str, repo: str) -> List[PullRequest]:
        """Open pull requests in owner/repo opened by user."""
        raw = self._paginate(f"/repos/{owner}/{repo}/pulls", {"state": "open"})
        wanted = user.lower()
        return [
            normalize_pull_request(pr, f"{owner}/{repo}")
            for pr in raw
            if ((pr.get('user') or {}).get('login') or '').lower() == wanted
        ]

    def contribution_repos(self, user: str) -> List[str]:
        """Repo full names (owner/repo) seen in the user's recent public activity, deduplicated."""
        events = self._paginate(f"/users/{user}/events", {}, max_pages=EVENTS_MAX_PAGES)
        names = {(e.get('repo') or {}).get('name') for e in events}
        return sorted(n for n in names if n)

    def _fan_out(self, user: str, what: str, fetch: Callable[[str, str, str], list]) -> FanOutResult:
        result = FanOutResult()
        for full_name in self.contribution_repos(user):
            owner, _, repo = full_name.partition('/')
            if not owner or not repo:
                result.skipped.append(SkippedItem(full_name, 'malformed repository name'))
                continue
            try:
                result.items.extend(fetch(user, owner, repo))
            except UpstreamError as ex:
                logger.warning("Could not fetch %s for %s: %s", what, full_name, ex)
                result.skipped.append(SkippedItem(full_name, str(ex)))
        if result.skipped:
            logger.warning("Skipped %d repo(s) while gathering %s for %s: %s", len(result.skipped), what, user, ', '.join(result.skipped_items))
        return result

    def all_commits_for_user(self, user: str) -> FanOutResult:
        """Recent commits by user across every repo they recently touched."""
        return self._fan_out(user, 'commits', self.recent_commits)

    def all_pull_requests_for_user(self, user: str) -> FanOutResult:
        """Open pull requests by user across every repo they recently touched."""
        return self._fan_out(user, 'pull requests', self.active_pull_requests)
