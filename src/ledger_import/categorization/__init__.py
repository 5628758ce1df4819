"""Keyword-based categorization of parsed statement rows.

Matching is deterministic and local: no network calls, no learned model.
"""

from .rules import KeywordRule, categorize, order_rules

__all__ = ["KeywordRule", "categorize", "order_rules"]
