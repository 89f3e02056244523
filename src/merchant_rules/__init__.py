"""Merchant rule auto-categorization engine.

Learns a merchant -> category rule from a single user correction, refuses
rules too generic to generalize, and applies learned rules to new
transactions.

Typical use::

    service = RulesService(RuleStore(InMemoryKeyValueStore()))
    await service.set_category_with_rule("Swiggy", "food")
    await service.find_category("Swiggy", sms_text)  # -> "food"
"""

from merchant_rules.categorization import (
    Matcher,
    NormalizedText,
    RejectReason,
    SpecificityPolicy,
    SpecificityValidator,
    ValidationResult,
    normalize,
)
from merchant_rules.core.exceptions import CorruptDataError, PersistenceError, RulesEngineError
from merchant_rules.repositories.rule_store import RuleStore
from merchant_rules.schemas.rule import Rule
from merchant_rules.services.rules import LearnOutcome, RulesService
from merchant_rules.storage import InMemoryKeyValueStore, KeyValueStore, SqlKeyValueStore

__all__ = [
    "CorruptDataError",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "LearnOutcome",
    "Matcher",
    "NormalizedText",
    "PersistenceError",
    "RejectReason",
    "Rule",
    "RuleStore",
    "RulesEngineError",
    "RulesService",
    "SpecificityPolicy",
    "SpecificityValidator",
    "SqlKeyValueStore",
    "ValidationResult",
    "normalize",
]
