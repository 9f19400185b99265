"""
Question answering pipeline: identity -> intent -> selective cached fetch -> summary.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, Dict, List

from errors import WorkPulseError, describe_failure
from normalize.models import Identity, Issue, Commit, PullRequest
from report.context import render_summary_prompt
from storage.cache import DataCache, DataKind, identity_key_for
from .intent import Intent, kinds_for_intent

logger = logging.getLogger(__name__)

UNKNOWN_PERSON_MESSAGE = (
    "I'm sorry, I couldn't find a known user (from JIRA or GitHub) in your query. "
    "Please include a name I recognize."
)

_RECORD_TYPES = {
    DataKind.ISSUES: Issue,
    DataKind.COMMITS: Commit,
    DataKind.REVIEWS: PullRequest,
}


def no_activity_message(identity: Identity) -> str:
    return (
        f"I found {identity.jira_id} (JIRA) / {identity.github_id} (GitHub), "
        "but they have no recent activity based on your query."
    )


class ActivityAggregator:
    """Answers questions about one person's recent Jira and GitHub activity.

    Raw upstream data is cached per (kind, identity id); summaries never are, so
    different phrasings about the same person reuse the data and re-ask the model.
    """

    def __init__(self, resolver, classifier, github, jira, cache: DataCache, summarizer, clock: Callable[[], float] = time.time):
        self.resolver = resolver
        self.classifier = classifier
        self.github = github
        self.jira = jira
        self.cache = cache
        self.summarizer = summarizer
        self.clock = clock

    def _fetch_upstream(self, kind: DataKind, identity: Identity) -> list:
        if kind is DataKind.ISSUES:
            logger.info("API call: fetching JIRA issues for %s", identity.jira_id)
            return self.jira.active_issues_for_user(identity.jira_id)
        if kind is DataKind.COMMITS:
            logger.info("API call: fetching commits for %s", identity.github_id)
            return self.github.all_commits_for_user(identity.github_id).items
        logger.info("API call: fetching pull requests for %s", identity.github_id)
        return self.github.all_pull_requests_for_user(identity.github_id).items

    def fetch(self, kind: DataKind, identity: Identity) -> list:
        """Records of one kind for identity, from the cache when fresh, otherwise from upstream."""
        key = identity_key_for(kind, identity)
        record_type = _RECORD_TYPES[kind]
        cached = self.cache.get(kind, key)
        if cached is not None:
            return [record_type.from_dict(d) for d in cached]
        records = self._fetch_upstream(kind, identity)
        self.cache.put(kind, key, [r.to_dict() for r in records])
        return records

    def fetch_kinds(self, kinds: List[DataKind], identity: Identity) -> Dict[DataKind, list]:
        """Fetch several kinds; more than one runs concurrently and all are awaited."""
        if len(kinds) == 1:
            return {kinds[0]: self.fetch(kinds[0], identity)}
        with ThreadPoolExecutor(max_workers=len(kinds), thread_name_prefix='fetch') as pool:
            futures = {kind: pool.submit(self.fetch, kind, identity) for kind in kinds}
            # wait for every fetch to settle before surfacing the first failure
            for future in futures.values():
                future.exception()
            return {kind: future.result() for kind, future in futures.items()}

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self.clock(), tz=timezone.utc)

    def handle_query(self, question: str) -> str:
        identity = self.resolver.resolve(question)
        if identity is None:
            return UNKNOWN_PERSON_MESSAGE

        intent = self.classifier.classify(question)
        logger.info("Intent classified as %s for %s", intent.value, identity.primary_key)

        try:
            records_by_kind = self.fetch_kinds(kinds_for_intent(intent), identity)
        except WorkPulseError as e:
            logger.error("Error fetching data for %r: %s", question, e)
            return describe_failure(e)
        except Exception as e:
            logger.exception("Unexpected error fetching data for %r", question)
            return describe_failure(e)

        if not any(records_by_kind.values()):
            return no_activity_message(identity)

        prompt = render_summary_prompt(question, identity, records_by_kind, self._now())
        try:
            return self.summarizer.generate(prompt)
        except Exception as e:
            # SummarizerError from GeminiSummarizer, anything at all from other backends
            logger.error("Summary generation failed: %s", e)
            return f"I found activity for {identity.jira_id} but couldn't generate a summary right now: {e}"


__all__ = ["ActivityAggregator", "Intent", "UNKNOWN_PERSON_MESSAGE", "no_activity_message"]
