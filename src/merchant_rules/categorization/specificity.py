"""Specificity checks for learned merchant rules.

A key is only safe to remember if it identifies one merchant. Bank SMS bodies
are mostly shared boilerplate ("debited from HDFC Bank A/c xx..."), and a rule
built from that boilerplate would match every future SMS from the same bank.

Checks run in order and the first failure wins:

1. EmptyOrTooShort: the key is shorter than ``min_key_length``.
2. BoilerplateOnly: once sender headers, boilerplate phrases and digits are
   removed, fewer than ``min_signal_tokens`` real words remain.
3. UnsafeTruncation: the input looked truncated and the cut did not land on
   whitespace or punctuation. A one or two character fragment ("a/c xx")
   counts as a cut word.

The validator is pure: it holds a policy and nothing else.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field

from .normalizer import DEFAULT_TAIL_WINDOW

# Words and phrases that appear in bank/UPI notifications regardless of merchant.
DEFAULT_BOILERPLATE_PHRASES: list[str] = [
    # Direction
    "debited from",
    "debited to",
    "debited by",
    "debited",
    "credited to",
    "credited from",
    "credited by",
    "credited",
    "sent to",
    "sent from",
    "received from",
    "paid to",
    "paid via",
    "spent on",
    "spent at",
    "withdrawn from",
    "transferred to",
    "transferred from",
    # Accounts and cards
    "a/c no",
    "a/c",
    "ac no",
    "acct",
    "account",
    "card ending",
    "card no",
    "card",
    "ending",
    "xx",
    "bank",
    # Amounts and balances
    "rs",
    "inr",
    "amt",
    "amount",
    "avl bal",
    "avbl bal",
    "available balance",
    "balance",
    "avl",
    "avbl",
    "bal",
    # Rails and references
    "upi ref",
    "ref no",
    "upi",
    "imps",
    "neft",
    "rtgs",
    "vpa",
    "txn",
    "ref",
    "info",
    # Generic nouns
    "generic purchase",
    "purchase",
    "transaction",
    "payment",
    "debit",
    "credit",
    # Boilerplate endings
    "dear customer",
    "not you",
    "call",
    "sms",
    "block",
    "has been",
    # Glue words
    "for",
    "from",
    "the",
    "your",
    "via",
    "with",
    "and",
    "on",
    "at",
    "to",
    "by",
    # Bank short names
    "hdfc",
    "hdfcbk",
    "icici",
    "icicib",
    "sbi",
    "sbiinb",
    "axis",
    "axisbk",
    "kotak",
    "kotakb",
    "pnb",
    "idfc",
    "indusind",
    "canara",
    "federal",
]

# Indian SMS sender header at the start of a message, e.g. "vm-hdfcbk:".
DEFAULT_SENDER_PREFIX_PATTERN = r"^[a-z]{2}-[a-z0-9]{3,}\b:?"

_DIGITS = re.compile(r"\d")
_WORDS = re.compile(r"[^\W\d_]+")


class RejectReason(str, Enum):
    """Machine-readable reason a key was refused."""

    EMPTY_OR_TOO_SHORT = "EmptyOrTooShort"
    BOILERPLATE_ONLY = "BoilerplateOnly"
    UNSAFE_TRUNCATION = "UnsafeTruncation"


class SpecificityPolicy(BaseModel):
    """Tunable thresholds and vocabulary for the specificity checks."""

    min_key_length: int = Field(4, ge=1)
    min_signal_tokens: int = Field(1, ge=1)
    min_signal_token_length: int = Field(3, ge=1)
    boilerplate_phrases: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BOILERPLATE_PHRASES)
    )
    sender_prefix_pattern: str = DEFAULT_SENDER_PREFIX_PATTERN
    tail_window: int = Field(DEFAULT_TAIL_WINDOW, ge=2)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a specificity check."""

    accepted: bool
    reason: RejectReason | None = None


class SpecificityValidator:
    """Decide whether a normalized key may be stored as a rule."""

    def __init__(self, policy: SpecificityPolicy | None = None):
        self.policy = policy or SpecificityPolicy()

        phrases = sorted(
            {p.strip().lower() for p in self.policy.boilerplate_phrases if p.strip()},
            key=len,
            reverse=True,
        )
        self._single_words = frozenset(p for p in phrases if p.isalpha())
        self._boilerplate = (
            re.compile(
                r"(?<![^\W_])(?:" + "|".join(re.escape(p) for p in phrases) + r")(?![^\W_])"
            )
            if phrases
            else None
        )
        self._sender_prefix = (
            re.compile(self.policy.sender_prefix_pattern)
            if self.policy.sender_prefix_pattern
            else None
        )

    def signal_tokens(self, key: str) -> list[str]:
        """Return the merchant-identifying words left in a key.

        Sender headers, boilerplate phrases and digits are removed first; the
        remaining alphabetic tokens that are long enough and not themselves
        boilerplate are the signal.
        """
        text = key.lower()
        if self._sender_prefix is not None:
            text = self._sender_prefix.sub(" ", text)
        if self._boilerplate is not None:
            text = self._boilerplate.sub(" ", text)
        text = _DIGITS.sub(" ", text)

        min_len = self.policy.min_signal_token_length
        return [
            token
            for token in _WORDS.findall(text)
            if len(token) >= min_len and token not in self._single_words
        ]

    def validate(
        self,
        key: str,
        looks_truncated: bool = False,
        ends_on_boundary: bool | None = None,
    ) -> ValidationResult:
        """Run the ordered checks against a normalized key.

        Args:
            key: Normalized key produced by the normalizer.
            looks_truncated: Advisory flag from the normalizer.
            ends_on_boundary: Whether the raw text ended on whitespace or
                punctuation. Keys lose their trailing punctuation, so when
                this is not given a truncated key is treated as cut mid-word.

        Returns:
            ValidationResult; ``reason`` is set only when rejected.
        """
        key = key or ""

        if len(key) < self.policy.min_key_length:
            return ValidationResult(False, RejectReason.EMPTY_OR_TOO_SHORT)

        if len(self.signal_tokens(key)) < self.policy.min_signal_tokens:
            return ValidationResult(False, RejectReason.BOILERPLATE_ONLY)

        if ends_on_boundary is None:
            ends_on_boundary = not key[-1].isalnum()
        if looks_truncated and not ends_on_boundary:
            return ValidationResult(False, RejectReason.UNSAFE_TRUNCATION)

        return ValidationResult(True)
