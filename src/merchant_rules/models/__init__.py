"""Database models."""

from merchant_rules.models.base import Base, TimestampedModel
from merchant_rules.models.key_value import KeyValueEntry

__all__ = ["Base", "TimestampedModel", "KeyValueEntry"]
