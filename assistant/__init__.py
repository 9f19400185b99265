"""
Assistant package: intent classification, the summarizer client and the question answering pipeline.
"""

from .intent import Intent, IntentClassifier, kinds_for_intent
from .aggregator import ActivityAggregator

__all__ = ["Intent", "IntentClassifier", "kinds_for_intent", "ActivityAggregator"]
