"""Key-value entries backing the SQL storage collaborator.

The rule engine keeps its whole collection as one serialized value under a
single key, so this table usually holds one row per installation.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from merchant_rules.models.base import TimestampedModel


class KeyValueEntry(TimestampedModel):
    """A single stored value."""

    __tablename__ = "key_value_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<KeyValueEntry(key={self.key}, size={len(self.value or '')})>"
