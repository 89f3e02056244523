"""Merchant rule categorization.

Normalization, specificity checks and matching are pure and local; storage
and orchestration live in the repositories and services packages.
"""

from .normalizer import NormalizedText, ends_mid_token, ends_on_boundary, normalize, normalize_key
from .specificity import RejectReason, SpecificityPolicy, SpecificityValidator, ValidationResult
from .matcher import Matcher

__all__ = [
    "Matcher",
    "NormalizedText",
    "RejectReason",
    "SpecificityPolicy",
    "SpecificityValidator",
    "ValidationResult",
    "ends_mid_token",
    "ends_on_boundary",
    "normalize",
    "normalize_key",
]
