"""
Intent classification: decide which data kinds a question needs.

The language model is asked for exactly one label. Its reply is only trusted when it is
one of the known labels; everything else, including a failed call, means FULL_SUMMARY.
"""

import enum
import logging
from typing import List

from report.context import render_intent_prompt
from storage.cache import DataKind

logger = logging.getLogger(__name__)


class Intent(enum.Enum):
    ISSUES = 'ISSUES'
    COMMITS = 'COMMITS'
    REVIEWS = 'REVIEWS'
    FULL_SUMMARY = 'FULL_SUMMARY'


_KINDS_BY_INTENT = {
    Intent.ISSUES: [DataKind.ISSUES],
    Intent.COMMITS: [DataKind.COMMITS],
    Intent.REVIEWS: [DataKind.REVIEWS],
    Intent.FULL_SUMMARY: [DataKind.ISSUES, DataKind.COMMITS, DataKind.REVIEWS],
}


def kinds_for_intent(intent: Intent) -> List[DataKind]:
    return list(_KINDS_BY_INTENT[intent])


def parse_intent(reply: str) -> Intent:
    """Map a model reply onto an Intent, defaulting to FULL_SUMMARY when it is not an exact label."""
    label = (reply or '').strip().strip('"\'`').rstrip('.').strip().upper()
    try:
        return Intent(label)
    except ValueError:
        logger.warning("Unrecognized intent label %r; using FULL_SUMMARY", reply)
        return Intent.FULL_SUMMARY


class IntentClassifier:
    def __init__(self, summarizer):
        self.summarizer = summarizer

    def classify(self, question: str) -> Intent:
        try:
            reply = self.summarizer.generate(render_intent_prompt(question))
        except Exception as e:
            logger.warning("Intent classification failed (%s); using FULL_SUMMARY", e)
            return Intent.FULL_SUMMARY
        intent = parse_intent(reply)
        logger.info("Classified intent: %s", intent.value)
        return intent
