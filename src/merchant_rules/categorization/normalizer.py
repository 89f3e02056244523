"""Canonical keys for merchant names and raw transaction text.

A merchant name ("Swiggy ") and a bank SMS ("VM-HDFCBK: Rs 50.00 debited...")
both go through the same normalization so that equivalent inputs collapse to
the same key. Digits are kept: erasing them would make unrelated SMS bodies
share generic keys such as "a/c xx".
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_WHITESPACE = re.compile(r"\s+")
# Anything that is not a word character at either end of the text.
_EDGE_PUNCTUATION = re.compile(r"^[\W_]+|[\W_]+$")

TERMINAL_PUNCTUATION = frozenset(".!?;:,)]}\"'")

DEFAULT_TAIL_WINDOW = 3
DEFAULT_TRUNCATION_PROBE_LENGTH = 32


@dataclass(frozen=True)
class NormalizedText:
    """Result of normalizing one input."""

    key: str
    looks_truncated: bool = False
    ends_on_boundary: bool = True


def ends_mid_token(text: str | None, tail_window: int = DEFAULT_TAIL_WINDOW) -> bool:
    """Return True when the text looks like it was cut inside a word.

    The last ``tail_window`` characters must all be alphanumeric: no trailing
    whitespace, no terminal punctuation and no word break close to the end.
    """
    if not text:
        return False
    window = max(tail_window, 2)
    if len(text) < window:
        return False
    tail = text[-window:]
    return all(ch.isalnum() for ch in tail)


def ends_on_boundary(text: str | None) -> bool:
    """Return True when the raw text stops on whitespace or punctuation.

    A cut that leaves even one character of a word behind ("a/c x") does not
    end on a boundary.
    """
    if not text:
        return True
    return not text[-1].isalnum()


def _canonical(text: str) -> str:
    collapsed = _WHITESPACE.sub(" ", text.strip().lower())
    return _EDGE_PUNCTUATION.sub("", collapsed)


def normalize(
    text: str | None,
    *,
    truncation_limit: int | None = None,
    source_length: int | None = None,
    truncation_probe_length: int = DEFAULT_TRUNCATION_PROBE_LENGTH,
    tail_window: int = DEFAULT_TAIL_WINDOW,
) -> NormalizedText:
    """Normalize a merchant name or transaction description.

    Args:
        text: Merchant name or raw description (may be None).
        truncation_limit: Known caller-side cut. Text at or beyond this
            length is flagged as possibly truncated.
        source_length: Length of the text before the caller cut it, when known.
        truncation_probe_length: Minimum length before the mid-token
            heuristic is applied. Short merchant names are never inferred
            as truncated.
        tail_window: Characters inspected by the mid-token heuristic.

    Returns:
        NormalizedText with the comparison key, the advisory truncation flag
        and whether the raw text ended on a word boundary.
    """
    if not text or not text.strip():
        return NormalizedText(key="", looks_truncated=False, ends_on_boundary=True)

    key = _canonical(text)

    looks_truncated = False
    if source_length is not None and source_length > len(text):
        looks_truncated = True
    elif truncation_limit is not None and len(text) >= truncation_limit:
        looks_truncated = True
    elif len(text) >= truncation_probe_length and ends_mid_token(text, tail_window):
        looks_truncated = True

    return NormalizedText(
        key=key,
        looks_truncated=looks_truncated,
        ends_on_boundary=ends_on_boundary(text),
    )


def normalize_key(text: str | None) -> str:
    """Shortcut returning only the comparison key."""
    return normalize(text).key
