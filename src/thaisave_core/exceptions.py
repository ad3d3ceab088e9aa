"""Custom exceptions for the ThaiSave savings engine.

This module provides a hierarchy of exception classes for consistent error
handling across the engine. All exceptions inherit from ThaiSaveError,
making it easy to catch all application-specific errors.

Every error raised by the engine is a deterministic input error: the whole
calculation is aborted and no partial result is returned.

Example:
    try:
        result = compute_savings_daily_actual365(request)
    except SequencingError as e:
        # Ask the user to reorder same-day events
        show_form_error(e.message)
    except ThaiSaveError as e:
        # Handle any ThaiSave-related error
        logger.error("calculation_failed", error=e.message, **e.details)
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional


class ThaiSaveError(Exception):
    """Base exception for all ThaiSave errors.

    This is the root of the exception hierarchy. Catching this exception
    will catch all ThaiSave-specific errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error can be fixed by correcting the input.

    Example:
        >>> raise ThaiSaveError("Something went wrong", details={"code": 500})
        ThaiSaveError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ThaiSaveError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the caller can resubmit a corrected request.
                Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class FormatError(ThaiSaveError):
    """Error raised when a date string is malformed or not a real date.

    Raised both for pattern mismatches ("2025/01/01") and for values that
    match the pattern but do not exist on the calendar ("2025-02-30").

    Attributes:
        value: The offending input string.

    Example:
        >>> raise FormatError("Invalid date: 2025-02-30", value="2025-02-30")
        FormatError: Invalid date: 2025-02-30
    """

    def __init__(
        self,
        message: str,
        *,
        value: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.value = value

        if value is not None:
            self.details["value"] = value


class ValidationError(ThaiSaveError):
    """Error raised when request data fails validation.

    This exception is raised for negative principal or rate, non-positive or
    non-finite amounts, event dates outside the calculation range, an
    unsupported timezone, or an inverted date range.

    Attributes:
        field: The field that failed validation.
        value: The invalid value.
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Starting principal cannot be negative",
        ...     field="principal_start",
        ...     value="-1",
        ...     constraint=">= 0",
        ... )
        ValidationError: Starting principal cannot be negative
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
                Defaults to True since validation errors typically require
                user input correction.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = str(value)
        if constraint:
            self.details["constraint"] = constraint


class SequencingError(ThaiSaveError):
    """Error raised when a withdrawal is recorded before a same-day deposit.

    Deposits must be applied before withdrawals on the same day. Submitting
    them the other way around is a policy violation, not something the
    engine silently reorders.

    Attributes:
        event_date: The date on which the ordering violation occurred.
    """

    def __init__(
        self,
        message: str,
        *,
        event_date: Optional[date] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.event_date = event_date

        if event_date is not None:
            self.details["event_date"] = event_date.isoformat()


class InsufficientBalanceError(ThaiSaveError):
    """Error raised when a withdrawal would drive the balance negative.

    Attributes:
        balance: The balance before the withdrawal.
        amount: The requested withdrawal amount.
        event_date: The date of the withdrawal.
    """

    def __init__(
        self,
        message: str,
        *,
        balance: Optional[Decimal] = None,
        amount: Optional[Decimal] = None,
        event_date: Optional[date] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.balance = balance
        self.amount = amount
        self.event_date = event_date

        if balance is not None:
            self.details["balance"] = str(balance)
        if amount is not None:
            self.details["amount"] = str(amount)
        if event_date is not None:
            self.details["event_date"] = event_date.isoformat()


class ConfigurationError(ThaiSaveError):
    """Error raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


class RateUnavailableError(ThaiSaveError):
    """Error raised when no deposit rate table is found within the lookback window.

    Attributes:
        lookback_days: Number of business days searched.
        last_period: The oldest period that was tried.
    """

    def __init__(
        self,
        message: str,
        *,
        lookback_days: Optional[int] = None,
        last_period: Optional[date] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.lookback_days = lookback_days
        self.last_period = last_period

        if lookback_days is not None:
            self.details["lookback_days"] = lookback_days
        if last_period is not None:
            self.details["last_period"] = last_period.isoformat()


__all__ = [
    "ThaiSaveError",
    "FormatError",
    "ValidationError",
    "SequencingError",
    "InsufficientBalanceError",
    "ConfigurationError",
    "RateUnavailableError",
]
