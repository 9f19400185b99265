"""
Unified data models for identities and the activity records fetched from Jira and GitHub.
Records serialize to camelCase dicts; that is the shape stored in the data cache.
"""

from typing import Optional, Dict, Any


class Identity:
    """
    One team member across both systems.
    primary_key is the alias that resolved to this identity; jira_id may be a display name or an email.
    """
    def __init__(self, primary_key: str, jira_id: str, github_id: str):
        self.primary_key = primary_key
        self.jira_id = jira_id
        self.github_id = github_id

    def __eq__(self, other):
        if not isinstance(other, Identity):
            return NotImplemented
        return (self.jira_id, self.github_id) == (other.jira_id, other.github_id)

    def __hash__(self):
        return hash((self.jira_id, self.github_id))

    def __repr__(self):
        return f"Identity(primary_key={self.primary_key!r}, jira_id={self.jira_id!r}, github_id={self.github_id!r})"


class Issue:
    """
    Normalized Jira issue.
    """
    def __init__(self, id: str, title: str, status: str, type: str, priority: str = 'Not set', last_updated: Optional[str] = None, link: Optional[str] = None):
        self.id = id  # issue key, e.g. TS-102
        self.title = title
        self.status = status
        self.type = type  # Story/Bug/Task
        self.priority = priority
        self.last_updated = last_updated
        self.link = link

    @property
    def timestamp(self) -> Optional[str]:
        return self.last_updated

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'status': self.status,
            'type': self.type,
            'priority': self.priority,
            'lastUpdated': self.last_updated,
            'link': self.link,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Issue':
        return cls(
            id=data.get('id', ''),
            title=data.get('title', ''),
            status=data.get('status', ''),
            type=data.get('type', ''),
            priority=data.get('priority') or 'Not set',
            last_updated=data.get('lastUpdated'),
            link=data.get('link'),
        )


class Commit:
    """
    Normalized GitHub commit.
    """
    def __init__(self, message: str, author: str, timestamp: Optional[str], repo_full_name: str, sha: Optional[str] = None, link: Optional[str] = None):
        self.message = message
        self.author = author
        self.timestamp = timestamp
        self.repo_full_name = repo_full_name
        self.sha = sha
        self.link = link

    def to_dict(self) -> Dict[str, Any]:
        return {
            'message': self.message,
            'author': self.author,
            'timestamp': self.timestamp,
            'repoFullName': self.repo_full_name,
            'sha': self.sha,
            'link': self.link,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Commit':
        return cls(
            message=data.get('message', ''),
            author=data.get('author', ''),
            timestamp=data.get('timestamp'),
            repo_full_name=data.get('repoFullName', ''),
            sha=data.get('sha'),
            link=data.get('link'),
        )


class PullRequest:
    """
    Normalized GitHub pull request (the "reviews" data kind).
    """
    def __init__(self, title: str, author: str, repo_full_name: str, state: str, link: Optional[str] = None, number: Optional[int] = None, updated_at: Optional[str] = None):
        self.title = title
        self.author = author
        self.repo_full_name = repo_full_name
        self.state = state
        self.link = link
        self.number = number
        self.updated_at = updated_at

    @property
    def timestamp(self) -> Optional[str]:
        return self.updated_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'author': self.author,
            'repoFullName': self.repo_full_name,
            'state': self.state,
            'link': self.link,
            'number': self.number,
            'updatedAt': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PullRequest':
        return cls(
            title=data.get('title', ''),
            author=data.get('author', ''),
            repo_full_name=data.get('repoFullName', ''),
            state=data.get('state', ''),
            link=data.get('link'),
            number=data.get('number'),
            updated_at=data.get('updatedAt'),
        )


class SkippedItem:
    """
    An item a batch operation gave up on, with the reason.
    """
    def __init__(self, item: str, reason: str):
        self.item = item
        self.reason = reason

    def __repr__(self):
        return f"SkippedItem(item={self.item!r}, reason={self.reason!r})"


class FanOutResult:
    """
    Outcome of a best-effort per-repo fan-out: the records gathered and the repos skipped.
    """
    def __init__(self, items=None, skipped=None):
        self.items = items or []
        self.skipped = skipped or []

    @property
    def skipped_items(self):
        return [s.item for s in self.skipped]
