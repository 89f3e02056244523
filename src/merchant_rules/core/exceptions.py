"""Custom exception classes for the merchant rules engine.

Each exception carries an error_code that maps to the catalog in errors.py.
A rejected rule is an expected outcome, not an exception, so it has no class
here; see ``RejectReason`` in the categorization package.
"""

from typing import Any


class RulesEngineError(Exception):
    """Base exception for all merchant rules errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "RULE_001")
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return (default: 500)
    """

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        http_status: int = 500,
    ):
        self.error_code = error_code
        self.details = details or {}
        self.http_status = http_status
        super().__init__(error_code)


class PersistenceError(RulesEngineError):
    """Raised when the storage collaborator fails or times out.

    The mutation that raised it had no effect on the stored rules; callers
    may retry.
    """

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__("RULE_001", details=details, http_status=503)


class CorruptDataError(RulesEngineError):
    """Raised when the stored rules blob cannot be decoded.

    Never escapes the rule store: corrupt state is read as "no rules yet".
    """

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__("RULE_002", details=details, http_status=500)


class RuleNotFoundError(RulesEngineError):
    """Raised by the HTTP layer when a rule key does not exist."""

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__("RULE_003", details=details, http_status=404)


class InvalidCategoryError(RulesEngineError):
    """Raised when a rule is learned with a blank category."""

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__("VAL_002", details=details, http_status=400)
