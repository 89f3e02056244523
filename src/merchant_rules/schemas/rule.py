"""Schemas for learned merchant rules and the rules API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from merchant_rules.categorization.specificity import RejectReason


class Rule(BaseModel):
    """A persisted mapping from a normalized key to a category."""

    key: str
    category: str
    raw_pattern: str = ""
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(frozen=True)


RuleList = TypeAdapter(list[Rule])


class LearnRuleRequest(BaseModel):
    """Request to remember a category for a merchant or description."""

    text: str = Field(..., min_length=1, description="Merchant name or transaction description")
    category: str = Field(..., min_length=1)
    source_length: int | None = Field(
        None, ge=0, description="Length of the text before any caller-side truncation"
    )


class LearnRuleResponse(BaseModel):
    """Outcome of a learn request; both outcomes are successful responses."""

    learned: bool
    key: str
    reason: RejectReason | None = None
    rule: Rule | None = None


class MatchRequest(BaseModel):
    """Probe for a category by merchant and/or raw transaction text."""

    merchant: str | None = None
    raw_text: str | None = None


class MatchResponse(BaseModel):
    """Matched category, or null when the transaction needs review."""

    category: str | None = None


class RuleListResult(BaseModel):
    """All learned rules."""

    rules: list[Rule]
    count: int
