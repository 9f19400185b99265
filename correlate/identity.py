"""
Identity resolution: find which known team member a free-text question is about.

Aliases (display names, logins, emails) map onto one Jira id + GitHub login pair.
When aliases of different people both occur in the text the longest alias wins,
and equal lengths fall back to the order the aliases were registered in.
"""
import json
import logging
from typing import Dict, Optional, Any

from errors import ConfigurationError, IdentityNotFound
from normalize.models import Identity

logger = logging.getLogger(__name__)


def build_identities(mapping: Dict[str, Dict[str, Any]]) -> Dict[str, Identity]:
    """Turn a raw alias table into alias -> Identity, rejecting entries missing either id."""
    table: Dict[str, Identity] = {}
    for alias, ids in mapping.items():
        key = (alias or '').strip().lower()
        ids = ids if isinstance(ids, dict) else {}
        jira_id = (ids.get('jiraId') or '').strip()
        github_id = (ids.get('githubId') or '').strip()
        if not key or not jira_id or not github_id:
            raise ConfigurationError(f"alias {alias!r} must have a non-empty jiraId and githubId")
        table[key] = Identity(key, jira_id, github_id)
    return table


def load_identities(path: str) -> Dict[str, Identity]:
    """Load the alias table from a JSON file: {"alias": {"jiraId": ..., "githubId": ...}}."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except (OSError, ValueError) as ex:
        raise ConfigurationError(f"Failed to read users file {path}: {ex}") from ex
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Users file {path} must contain a JSON object of aliases")
    table = build_identities(raw)
    logger.info("Loaded %d alias(es) from %s", len(table), path)
    return table


class IdentityResolver:
    """Read-only lookup of aliases inside free text."""

    def __init__(self, table: Dict[str, Identity]):
        # sort once: longest alias first, registration order kept for ties (sorted is stable)
        self._aliases = sorted(((a.lower(), i) for a, i in table.items()), key=lambda pair: len(pair[0]), reverse=True)

    def resolve(self, text: str) -> Optional[Identity]:
        """Return the identity whose alias appears in text (case-insensitive), or None."""
        haystack = (text or '').lower()
        for alias, identity in self._aliases:
            if alias in haystack:
                logger.debug("Matched alias %r -> %r", alias, identity)
                return Identity(alias, identity.jira_id, identity.github_id)
        return None

    def require(self, text: str) -> Identity:
        identity = self.resolve(text)
        if identity is None:
            raise IdentityNotFound(f"No known user found in {text!r}")
        return identity
