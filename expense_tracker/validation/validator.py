"""
Two-Stage Transaction Validation

DESIGN DECISION: Validation happens at the command boundary, in two stages:

STAGE 1 - SCHEMA VALIDATION:
- Required field presence (type, amount, category, date)
- Format validation (numeric amount, ISO date, known enum values)

STAGE 2 - SEMANTIC VALIDATION:
- Amount must be finite and greater than zero
- Category must belong to the catalog of the chosen type

Stage 2 only runs on the fields that passed stage 1, so every problem is
reported exactly once.

IMPORTANT: Validation NEVER silently fixes issues.
Non-numeric input is rejected instead of becoming NaN in the totals.
"""

import datetime as dt
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from expense_tracker.models.transaction import (
    Transaction,
    TransactionDraft,
    TransactionStatus,
    TransactionType,
    categories_for,
    find_category,
)
from expense_tracker.models.validation import ValidationIssue, ValidationResult
from expense_tracker.store import LedgerError


class InvalidTransactionError(LedgerError):
    """Transaction input was rejected. Nothing was created or changed."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        super().__init__(f"Invalid transaction: {messages}")


_THOUSANDS_GROUPED = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d+)?$")


def _parse_amount(value: Any) -> Decimal:
    """Parse user input into a Decimal. Raises ValueError if not numeric."""
    if isinstance(value, bool):
        raise ValueError("boolean is not an amount")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # Go through repr so 12.3 stays 12.3 instead of its binary expansion
        return Decimal(repr(value))
    text = str(value).strip()
    if "," in text:
        # Commas only as thousands separators; "12,50" is not 1250
        if not _THOUSANDS_GROUPED.match(text):
            raise ValueError(f"misplaced comma: {value!r}")
        text = text.replace(",", "")
    try:
        return Decimal(text)
    except InvalidOperation:
        raise ValueError(f"not a number: {value!r}")


def _parse_date(value: Any) -> dt.date:
    """Parse a calendar date. Raises ValueError on anything else."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = str(value).strip()
    if "T" in text:
        text = text.split("T", 1)[0]
    return dt.date.fromisoformat(text)


class TransactionValidator:
    """
    Validates a TransactionDraft and builds the Transaction it describes.

    Usage:
        result = validator.validate(draft)      # report only
        transaction = validator.build(draft, transaction_id)  # or raise
    """

    def _validate_schema(
        self,
        draft: TransactionDraft,
    ) -> tuple[dict[str, Any], list[ValidationIssue]]:
        """
        Stage 1: presence and format.

        Returns: (parsed_values, list_of_issues)
        Only fields that parsed cleanly appear in parsed_values.
        """
        issues = []
        parsed: dict[str, Any] = {}

        # Type
        if not draft.type:
            issues.append(ValidationIssue(
                field="type",
                issue_type="missing",
                message="Transaction type is required",
                suggested_fix="Choose income or expense",
            ))
        else:
            try:
                parsed["type"] = TransactionType(draft.type.lower())
            except ValueError:
                issues.append(ValidationIssue(
                    field="type",
                    issue_type="invalid_value",
                    message=f"Unknown transaction type: {draft.type}",
                    suggested_fix="Choose income or expense",
                ))

        # Amount
        if draft.amount is None or (isinstance(draft.amount, str) and not draft.amount):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
            ))
        else:
            try:
                parsed["amount"] = _parse_amount(draft.amount)
            except ValueError:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="not_numeric",
                    message=f"Amount is not a number: {draft.amount!r}",
                    suggested_fix="Enter digits only, e.g. 12.50",
                ))

        # Category
        if not draft.category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
            ))
        else:
            parsed["category"] = draft.category

        # Date
        if draft.date is None or (isinstance(draft.date, str) and not draft.date):
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
            ))
        else:
            try:
                parsed["date"] = _parse_date(draft.date)
            except ValueError:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="invalid_format",
                    message=f"Date is not a calendar date: {draft.date!r}",
                    suggested_fix="Use the YYYY-MM-DD format",
                ))

        # Status (optional, new records default to completed)
        if not draft.status:
            parsed["status"] = TransactionStatus.COMPLETED
        else:
            try:
                parsed["status"] = TransactionStatus(draft.status.lower())
            except ValueError:
                issues.append(ValidationIssue(
                    field="status",
                    issue_type="invalid_value",
                    message=f"Unknown status: {draft.status}",
                    suggested_fix="Choose pending or completed",
                ))

        parsed["description"] = draft.description or ""
        if len(parsed["description"]) > 500:
            issues.append(ValidationIssue(
                field="description",
                issue_type="too_long",
                message="Description must be at most 500 characters",
            ))

        return parsed, issues

    def _validate_semantic(self, parsed: dict[str, Any]) -> list[ValidationIssue]:
        """
        Stage 2: business rules on the values stage 1 could parse.
        """
        issues = []

        amount: Optional[Decimal] = parsed.get("amount")
        if amount is not None:
            if not amount.is_finite():
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="not_numeric",
                    message="Amount must be a finite number",
                ))
            elif amount <= 0:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message="Amount must be greater than zero",
                ))
            elif amount.as_tuple().exponent < -2:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="precision",
                    message="Amount has more than two decimal places",
                    severity="warning",
                    suggested_fix="It will be stored exactly as entered",
                ))

        transaction_type = parsed.get("type")
        category = parsed.get("category")
        if transaction_type is not None and category is not None:
            if find_category(transaction_type, category) is None:
                valid = ", ".join(c.id for c in categories_for(transaction_type))
                issues.append(ValidationIssue(
                    field="category",
                    issue_type="not_in_catalog",
                    message=(
                        f"Category '{category}' is not a {transaction_type.value} category"
                    ),
                    suggested_fix=f"Choose one of: {valid}",
                ))

        return issues

    def _run(self, draft: TransactionDraft) -> tuple[dict[str, Any], ValidationResult]:
        parsed, issues = self._validate_schema(draft)
        issues.extend(self._validate_semantic(parsed))
        is_valid = not any(issue.severity == "error" for issue in issues)
        return parsed, ValidationResult(is_valid=is_valid, issues=issues)

    def validate(self, draft: TransactionDraft) -> ValidationResult:
        """Run both stages and report every issue found."""
        _, result = self._run(draft)
        return result

    def build(self, draft: TransactionDraft, transaction_id: str) -> Transaction:
        """
        Validate a draft and turn it into a Transaction with the given id.

        Raises:
            InvalidTransactionError: If any error-level issue was found
        """
        parsed, result = self._run(draft)
        if not result.is_valid:
            raise InvalidTransactionError(result)

        return Transaction(
            id=transaction_id,
            type=parsed["type"],
            amount=parsed["amount"],
            category=parsed["category"],
            date=parsed["date"],
            description=parsed["description"],
            status=parsed["status"],
        )
