"""Exceptions for policy evaluation and password generation.

Ordinary rule failures are not exceptions; they are returned as lists of
PasswordViolation. The classes here cover the cases that must stop the
caller: a wrapped first violation for fail-on-first-error callers, an
unreachable collaborator, and a policy no password can satisfy.
"""

from passpolicy.domain.entities.violation import PasswordViolation


class PasswordPolicyError(Exception):
    """Base class for all policy engine errors."""
    pass


class PasswordDataValidationError(PasswordPolicyError):
    """Raised by single-result validation APIs for the first violation found."""

    def __init__(self, violation: PasswordViolation):
        self.violation = violation
        super().__init__(f"{violation.code}: {violation.message}")

    @property
    def code(self) -> str:
        return self.violation.code


class ServiceUnavailableError(PasswordPolicyError):
    """Raised when a required collaborator is unreachable or closed.

    This is unrecoverable for the current operation and is never retried by
    the engine.
    """

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"{service}: {message}")


class ImpossiblePasswordPolicyError(PasswordPolicyError):
    """Raised when generation needs a character from an empty pool."""
    pass


class PolicyConfigurationError(PasswordPolicyError):
    """Raised when a generation request exceeds the engine-wide ceilings."""
    pass
