"""Durable key -> rule map kept as one serialized collection.

The whole collection is read and rewritten on every mutation. That is fine for
the tens-to-hundreds of rules a user learns, but it makes each mutation a
read/modify/write sequence, so mutations are serialized by a single lock.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, TypeVar

from pydantic import ValidationError

from merchant_rules.core.exceptions import CorruptDataError, PersistenceError
from merchant_rules.schemas.rule import Rule, RuleList
from merchant_rules.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_STORAGE_KEY = "merchant_rules_v1"


class RuleStore:
    """Repository for learned merchant rules."""

    def __init__(
        self,
        storage: KeyValueStore,
        storage_key: str = DEFAULT_STORAGE_KEY,
        timeout_seconds: float = 5.0,
    ):
        self.storage = storage
        self.storage_key = storage_key
        self.timeout_seconds = timeout_seconds
        self._write_lock = asyncio.Lock()

    async def all(self) -> list[Rule]:
        """Return the persisted rules.

        Read failures and corrupt data are logged and read as an empty
        collection; this never raises.
        """
        try:
            return await self._load()
        except PersistenceError as exc:
            logger.error(
                "Could not read merchant rules; treating as empty",
                extra={"error_code": exc.error_code, "storage_key": self.storage_key},
            )
        except CorruptDataError as exc:
            logger.warning(
                "Stored merchant rules are corrupt; treating as empty",
                extra={"error_code": exc.error_code, "storage_key": self.storage_key},
            )
        return []

    async def get(self, key: str) -> Rule | None:
        """Get a single rule by key."""
        for rule in await self.all():
            if rule.key == key:
                return rule
        return None

    async def upsert(self, key: str, category: str, raw_pattern: str = "") -> Rule:
        """Insert a rule or replace the category of the existing one.

        Raises:
            PersistenceError: If storage could not be read or written. The
                stored collection is left as it was.
        """
        async with self._write_lock:
            rules = await self._load_for_update()
            now = datetime.now(timezone.utc)

            for index, existing in enumerate(rules):
                if existing.key == key:
                    rule = existing.model_copy(
                        update={
                            "category": category,
                            "raw_pattern": raw_pattern or existing.raw_pattern,
                            "updated_at": now,
                        }
                    )
                    rules[index] = rule
                    break
            else:
                rule = Rule(
                    key=key,
                    category=category,
                    raw_pattern=raw_pattern,
                    created_at=now,
                    updated_at=now,
                )
                rules.append(rule)

            await self._save(rules)

        logger.info(
            "Merchant rule saved",
            extra={"rule_key": key, "category": category, "rule_count": len(rules)},
        )
        return rule

    async def delete(self, key: str) -> bool:
        """Delete a rule by key.

        Returns:
            True if a rule was removed, False if none had that key.
        """
        async with self._write_lock:
            rules = await self._load_for_update()
            remaining = [rule for rule in rules if rule.key != key]
            if len(remaining) == len(rules):
                return False
            await self._save(remaining)

        logger.info("Merchant rule deleted", extra={"rule_key": key})
        return True

    async def clear(self) -> None:
        """Remove every learned rule."""
        async with self._write_lock:
            await self._save([])
        logger.info("Merchant rules cleared", extra={"storage_key": self.storage_key})

    async def _load(self) -> list[Rule]:
        raw = await self._call(self.storage.get(self.storage_key), "read")
        if not raw:
            return []
        try:
            return RuleList.validate_json(raw)
        except ValidationError as exc:
            raise CorruptDataError(details={"errors": exc.error_count()}) from exc

    async def _load_for_update(self) -> list[Rule]:
        # Corrupt state is replaced by the write that follows; read failures abort.
        try:
            return await self._load()
        except CorruptDataError as exc:
            logger.warning(
                "Overwriting corrupt merchant rules",
                extra={"error_code": exc.error_code, "storage_key": self.storage_key},
            )
            return []

    async def _save(self, rules: list[Rule]) -> None:
        payload = RuleList.dump_json(rules).decode("utf-8")
        await self._call(self.storage.set(self.storage_key, payload), "write")

    async def _call(self, operation: Awaitable[T], action: str) -> T:
        try:
            return await asyncio.wait_for(operation, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise PersistenceError(
                details={"action": action, "reason": "timeout", "timeout": self.timeout_seconds}
            ) from exc
        except Exception as exc:
            raise PersistenceError(
                details={"action": action, "error_type": type(exc).__name__}
            ) from exc
