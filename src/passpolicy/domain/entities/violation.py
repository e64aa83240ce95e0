"""Password violation entity.

A violation is an expected, data-carrying rejection produced by a rule check.
Violations are collected into lists and returned; they are never raised on
their own (see PasswordDataValidationError for the raising wrapper).
"""

from dataclasses import dataclass
from enum import Enum


class PasswordError(Enum):
    """Rejection codes a policy check can produce, with default messages."""

    PASSWORD_TOO_SHORT = "Password is too short."
    PASSWORD_TOO_LONG = "Password is too long."
    PASSWORD_NOT_ENOUGH_NUM = "Password does not contain enough numeric characters."
    PASSWORD_NOT_ENOUGH_ALPHA = "Password does not contain enough letters."
    PASSWORD_NOT_ENOUGH_NONALPHA = "Password does not contain enough non-letter characters."
    PASSWORD_NOT_ENOUGH_SPECIAL = "Password does not contain enough special characters."
    PASSWORD_NOT_ENOUGH_UPPER = "Password does not contain enough uppercase letters."
    PASSWORD_NOT_ENOUGH_LOWER = "Password does not contain enough lowercase letters."
    PASSWORD_NOT_ENOUGH_UNIQUE = "Password does not contain enough unique characters."
    PASSWORD_NOT_ENOUGH_GROUPS = "Password does not match enough character groups."
    PASSWORD_TOO_MANY_NUMERIC = "Password contains too many numeric characters."
    PASSWORD_TOO_MANY_ALPHA = "Password contains too many letters."
    PASSWORD_TOO_MANY_NONALPHA = "Password contains too many non-letter characters."
    PASSWORD_TOO_MANY_SPECIAL = "Password contains too many special characters."
    PASSWORD_TOO_MANY_UPPER = "Password contains too many uppercase letters."
    PASSWORD_TOO_MANY_LOWER = "Password contains too many lowercase letters."
    PASSWORD_TOO_MANY_UNIQUE = "Password contains too many unique characters."
    PASSWORD_TOO_MANY_REPEAT = "Password contains too many repeated characters."
    PASSWORD_TOO_MANY_CONSECUTIVE = "Password contains too many consecutive characters."
    PASSWORD_TOO_MANY_OLD_CHARS = "Password shares too many characters with the old password."
    PASSWORD_FIRST_IS_NUMERIC = "Password may not begin with a numeric character."
    PASSWORD_LAST_IS_NUMERIC = "Password may not end with a numeric character."
    PASSWORD_FIRST_IS_SPECIAL = "Password may not begin with a special character."
    PASSWORD_LAST_IS_SPECIAL = "Password may not end with a special character."
    PASSWORD_SAMEASOLD = "Password is the same as the old password."
    PASSWORD_SAMEASATTR = "Password contains a value of one of your profile attributes."
    PASSWORD_USING_DISALLOWED = "Password contains a disallowed value."
    PASSWORD_INWORDLIST = "Password is a common or previously used word."
    PASSWORD_TOO_WEAK = "Password is too weak."
    PASSWORD_INVALID_CHAR = "Password does not match the required format."
    PASSWORD_CUSTOM_ERROR = "Password was rejected by an external policy service."
    PASSWORD_UNKNOWN_VALIDATION = "Password does not satisfy the directory policy."
    ERROR_INTERNAL = "Password could not be checked."

    @property
    def default_message(self) -> str:
        return self.value


@dataclass(frozen=True)
class PasswordViolation:
    """Represents a single rule failure.

    Attributes:
        error: The rejection code.
        message: Human-readable error message.
        field: The field name (always 'password' for engine checks).
        detail: Optional extra context, e.g. the rule value or the failing pattern.
    """

    error: PasswordError
    message: str
    field: str = "password"
    detail: str | None = None

    @classmethod
    def of(cls, error: PasswordError, detail: str | None = None) -> "PasswordViolation":
        """Build a violation carrying the code's default message."""
        return cls(error=error, message=error.default_message, detail=detail)

    @property
    def code(self) -> str:
        """Machine-readable error code."""
        return self.error.name
