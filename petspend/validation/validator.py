"""
Amount Validation

Amounts arrive as text typed by the user. Presentation code uses
AmountValidator to decide whether a "Save" action can proceed.

DESIGN DECISION: The store trusts its callers by default and will
keep a non-positive amount if handed one. Setting
reject_non_positive_amounts makes the store run the same check
itself and raise InvalidAmountError.

IMPORTANT: Validation never fixes values. It reports issues.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'non_positive')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """Outcome of validating one amount."""

    amount: Optional[Decimal] = Field(
        default=None,
        description="Parsed amount, when the input could be parsed"
    )
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues


class InvalidAmountError(ValueError):
    """Raised by the store when it is configured to reject bad amounts."""

    def __init__(self, amount: object, issues: list[ValidationIssue]):
        self.amount = amount
        self.issues = issues
        messages = "; ".join(issue.message for issue in issues)
        super().__init__(f"Invalid amount {amount!r}: {messages}")


def parse_amount(text: str) -> Optional[Decimal]:
    """
    Parse a user-typed amount.

    A comma is accepted as the decimal separator ("12,50").
    Returns None for empty or non-numeric text.
    """
    cleaned = text.strip().replace(",", ".")
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


class AmountValidator:
    """Checks that an amount is a finite number greater than zero."""

    def __init__(self, field: str = "amount"):
        self._field = field

    def validate(self, value: Union[str, Decimal, int]) -> ValidationResult:
        if isinstance(value, str):
            amount = parse_amount(value)
            if amount is None:
                issue_type = "missing" if not value.strip() else "invalid_format"
                return ValidationResult(issues=[
                    ValidationIssue(
                        field=self._field,
                        issue_type=issue_type,
                        message=f"'{value}' is not a number",
                    )
                ])
        else:
            amount = Decimal(value)

        if not amount.is_finite():
            # NaN/Infinity cannot be held in ValidationResult.amount
            return ValidationResult(issues=[
                ValidationIssue(
                    field=self._field,
                    issue_type="invalid_format",
                    message="Amount must be a finite number",
                )
            ])

        issues = []
        if amount <= 0:
            issues.append(ValidationIssue(
                field=self._field,
                issue_type="non_positive",
                message="Amount must be greater than zero",
            ))
        return ValidationResult(amount=amount, issues=issues)

    def ensure_valid(self, value: Union[str, Decimal, int]) -> Decimal:
        """
        Validate and return the parsed amount.

        Raises:
            InvalidAmountError: If any issue was found
        """
        result = self.validate(value)
        if not result.is_valid:
            raise InvalidAmountError(value, result.issues)
        return result.amount
