"""Keyword-rule transaction categorization.

Statements carry no category, so each merchant string is matched against
the family's mapping rules: a rule applies when its keyword occurs in the
merchant text, ignoring case. Rules are checked in priority order (higher
first); among equal priorities the older rule wins.

Matching is linear in the number of rules, which stays small for a
single household.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol
from uuid import UUID


class RuleLike(Protocol):
    keyword: str
    category_id: UUID
    priority: int


@dataclass(frozen=True)
class KeywordRule:
    """A mapping rule reduced to what matching needs."""

    keyword: str
    category_id: UUID
    priority: int = 0


def _norm(text: str | None) -> str:
    return (text or "").strip().casefold()


def order_rules(rules: Iterable[RuleLike]) -> list[KeywordRule]:
    """Sort rules by priority descending.

    The sort is stable, so rules arriving in creation order keep that order
    on ties. Rules with a blank keyword are dropped.
    """
    prepared = [
        KeywordRule(keyword=_norm(r.keyword), category_id=r.category_id, priority=r.priority)
        for r in rules
        if _norm(r.keyword)
    ]
    return sorted(prepared, key=lambda r: r.priority, reverse=True)


def categorize(merchant_name: str | None, rules: list[KeywordRule]) -> UUID | None:
    """Return the category of the first rule whose keyword is in the merchant text.

    Args:
        merchant_name: Merchant text as parsed from the statement.
        rules: Rules already ordered by ``order_rules``.

    Returns:
        The matched category id, or None when no rule matches.
    """
    text = _norm(merchant_name)
    if not text:
        return None

    for rule in rules:
        if rule.keyword in text:
            return rule.category_id
    return None
