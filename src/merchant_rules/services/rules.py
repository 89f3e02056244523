"""Merchant rules service: learn categories from corrections, apply them later."""

import logging
from dataclasses import dataclass

from merchant_rules.categorization.matcher import Matcher
from merchant_rules.categorization.normalizer import normalize, normalize_key
from merchant_rules.categorization.specificity import (
    RejectReason,
    SpecificityPolicy,
    SpecificityValidator,
)
from merchant_rules.config import Settings
from merchant_rules.core.exceptions import InvalidCategoryError
from merchant_rules.repositories.rule_store import RuleStore
from merchant_rules.schemas.rule import Rule
from merchant_rules.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LearnOutcome:
    """Result of one attempt to learn a rule.

    Rejection is a normal outcome: the caller's categorization of the current
    transaction stands, only future auto-matching is skipped.
    """

    key: str
    accepted: bool
    reason: RejectReason | None = None
    rule: Rule | None = None


class RulesService:
    """Service layer composing normalization, validation, storage and matching."""

    def __init__(
        self,
        store: RuleStore,
        validator: SpecificityValidator | None = None,
        matcher: Matcher | None = None,
        truncation_limit: int | None = None,
        truncation_probe_length: int = 32,
    ):
        """Initialize the service.

        Args:
            store: Rule repository (owns the write lock)
            validator: Specificity validator; default policy when omitted
            matcher: Matcher; defaults to the validator's minimum key length
            truncation_limit: Known caller-side cut applied to learned text
            truncation_probe_length: Minimum length for truncation inference
        """
        self.store = store
        self.validator = validator or SpecificityValidator()
        self.matcher = matcher or Matcher(self.validator.policy.min_key_length)
        self.truncation_limit = truncation_limit
        self.truncation_probe_length = truncation_probe_length

    @classmethod
    def from_settings(cls, storage: KeyValueStore, config: Settings) -> "RulesService":
        """Build a service wired from application settings."""
        policy: SpecificityPolicy = config.specificity
        return cls(
            store=RuleStore(
                storage,
                storage_key=config.rules_storage_key,
                timeout_seconds=config.storage_timeout_seconds,
            ),
            validator=SpecificityValidator(policy),
            matcher=Matcher(config.effective_min_match_length),
            truncation_limit=config.truncation_limit,
            truncation_probe_length=config.truncation_probe_length,
        )

    async def learn(
        self, text: str | None, category: str, *, source_length: int | None = None
    ) -> LearnOutcome:
        """Validate ``text`` and remember ``category`` for it if it is specific.

        Raises:
            InvalidCategoryError: If category is blank
            PersistenceError: If the rule was accepted but could not be stored
        """
        category = (category or "").strip()
        if not category:
            raise InvalidCategoryError()

        normalized = normalize(
            text,
            truncation_limit=self.truncation_limit,
            source_length=source_length,
            truncation_probe_length=self.truncation_probe_length,
            tail_window=self.validator.policy.tail_window,
        )
        result = self.validator.validate(
            normalized.key, normalized.looks_truncated, normalized.ends_on_boundary
        )

        if not result.accepted:
            logger.info(
                "Skipped learning merchant rule",
                extra={
                    "reason": result.reason.value,
                    "key_length": len(normalized.key),
                    "looks_truncated": normalized.looks_truncated,
                    "ends_on_boundary": normalized.ends_on_boundary,
                },
            )
            return LearnOutcome(key=normalized.key, accepted=False, reason=result.reason)

        rule = await self.store.upsert(normalized.key, category, raw_pattern=text or "")
        return LearnOutcome(key=normalized.key, accepted=True, rule=rule)

    async def set_category_with_rule(
        self, text: str | None, category: str, *, source_length: int | None = None
    ) -> bool:
        """Remember a category for a merchant or description.

        Returns:
            True if a rule was stored, False if the text was not specific enough
        """
        outcome = await self.learn(text, category, source_length=source_length)
        return outcome.accepted

    async def find_category(
        self, merchant: str | None = None, raw_text: str | None = None
    ) -> str | None:
        """Return the learned category for a transaction, or None."""
        if not merchant and not raw_text:
            return None
        rules = await self.store.all()
        return self.matcher.find_category(rules, merchant=merchant, raw_text=raw_text)

    async def get_rules(self) -> list[Rule]:
        return await self.store.all()

    async def delete_rule(self, text: str) -> bool:
        """Delete the rule for a key or for the text that produced it."""
        return await self.store.delete(normalize_key(text))

    async def clear_rules(self) -> None:
        await self.store.clear()
