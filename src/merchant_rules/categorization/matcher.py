"""Resolve a category for an incoming transaction from learned rules."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from .normalizer import normalize_key

if TYPE_CHECKING:
    from merchant_rules.schemas.rule import Rule


class Matcher:
    """Probe a snapshot of rules with merchant and raw-text keys.

    Order of precedence:

    1. Exact match on the normalized merchant name. A merchant the user
       already named is authoritative and skips substring matching.
    2. Exact match on the normalized raw text.
    3. The longest rule key contained in the normalized raw text, ignoring
       keys shorter than ``min_match_length``.

    No match returns None, which callers treat as "needs review".
    """

    def __init__(self, min_match_length: int = 4):
        self.min_match_length = min_match_length

    def find_rule(
        self,
        rules: Sequence[Rule],
        merchant: str | None = None,
        raw_text: str | None = None,
    ) -> Rule | None:
        if not rules:
            return None

        by_key = {rule.key: rule for rule in rules}

        merchant_key = normalize_key(merchant)
        if merchant_key and merchant_key in by_key:
            return by_key[merchant_key]

        text_key = normalize_key(raw_text)
        if not text_key:
            return None

        if text_key in by_key:
            return by_key[text_key]

        best: Rule | None = None
        for rule in rules:
            if len(rule.key) < self.min_match_length or rule.key not in text_key:
                continue
            # Strictly longer only: ties keep the earlier rule.
            if best is None or len(rule.key) > len(best.key):
                best = rule
        return best

    def find_category(
        self,
        rules: Sequence[Rule],
        merchant: str | None = None,
        raw_text: str | None = None,
    ) -> str | None:
        rule = self.find_rule(rules, merchant=merchant, raw_text=raw_text)
        return rule.category if rule else None
