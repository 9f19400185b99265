"""
Normalization utility helpers.
Small helpers to normalize raw Jira/GitHub payloads into normalize.models records,
plus the relative-time phrasing used when records are handed to the summarizer.
"""
import re
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from normalize.models import Issue, Commit, PullRequest

# Jira sends offsets without a colon, e.g. 2025-01-10T12:34:56.000+0000
_COMPACT_OFFSET = re.compile(r'([+-]\d{2})(\d{2})$')


def normalize_issue(raw: Dict[str, Any], host: str = '') -> Issue:
    """Create a normalized Issue from a raw Jira search result."""
    fields = raw.get('fields') or {}
    key = raw.get('key') or raw.get('id') or ''
    status = (fields.get('status') or {}).get('name') if isinstance(fields.get('status'), dict) else fields.get('status')
    issue_type = (fields.get('issuetype') or {}).get('name') if isinstance(fields.get('issuetype'), dict) else fields.get('issuetype')
    priority = (fields.get('priority') or {}).get('name') if isinstance(fields.get('priority'), dict) else fields.get('priority')
    link = f"{host.rstrip('/')}/browse/{key}" if host and key else None
    return Issue(
        id=key,
        title=fields.get('summary') or '',
        status=status or '',
        type=issue_type or 'Task',
        priority=priority or 'Not set',
        last_updated=fields.get('updated'),
        link=link,
    )


def normalize_commit(raw: Dict[str, Any], repo_full_name: str) -> Commit:
    """Create a normalized Commit from a raw GitHub commit listing entry."""
    commit = raw.get('commit') or {}
    git_author = commit.get('author') or {}
    author = (raw.get('author') or {}).get('login') or git_author.get('name') or ''
    return Commit(
        message=commit.get('message') or '',
        author=author,
        timestamp=git_author.get('date'),
        repo_full_name=repo_full_name,
        sha=raw.get('sha'),
        link=raw.get('html_url'),
    )


def normalize_pull_request(raw: Dict[str, Any], repo_full_name: str) -> PullRequest:
    """Create a normalized PullRequest from a raw GitHub pulls listing entry."""
    return PullRequest(
        title=raw.get('title') or '',
        author=(raw.get('user') or {}).get('login') or '',
        repo_full_name=repo_full_name,
        state=raw.get('state') or '',
        link=raw.get('html_url'),
        number=raw.get('number'),
        updated_at=raw.get('updated_at') or raw.get('created_at'),
    )


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse the ISO-8601 variants GitHub and Jira emit; naive values are taken as UTC."""
    if not value:
        return None
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    text = _COMPACT_OFFSET.sub(r'\1:\2', text)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n > 1 else ''} ago"


def relative_time(value: Optional[str], now: datetime) -> str:
    """Describe a timestamp relative to now, e.g. '2 hours ago'."""
    then = parse_timestamp(value)
    if then is None:
        return 'unknown'
    seconds = (now - then).total_seconds()
    days = int(seconds // 86400)
    hours = int(seconds // 3600)
    minutes = int(seconds // 60)
    if days > 0:
        return _plural(days, 'day')
    if hours > 0:
        return _plural(hours, 'hour')
    if minutes > 0:
        return _plural(minutes, 'minute')
    return 'just now'


def decorate(record, now: datetime) -> Dict[str, Any]:
    """Return the record as a dict with a freshly computed relativeTime."""
    data = record.to_dict()
    data['relativeTime'] = relative_time(record.timestamp, now)
    return data
