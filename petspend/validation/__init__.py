"""Amount parsing and validation."""

from petspend.validation.validator import (
    AmountValidator,
    InvalidAmountError,
    ValidationIssue,
    ValidationResult,
    parse_amount,
)

__all__ = [
    "AmountValidator",
    "InvalidAmountError",
    "ValidationIssue",
    "ValidationResult",
    "parse_amount",
]
