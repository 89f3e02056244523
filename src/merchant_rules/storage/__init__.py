"""Storage collaborators for the rule store."""

from merchant_rules.storage.base import KeyValueStore
from merchant_rules.storage.memory import InMemoryKeyValueStore
from merchant_rules.storage.sql import SqlKeyValueStore

__all__ = ["KeyValueStore", "InMemoryKeyValueStore", "SqlKeyValueStore"]
