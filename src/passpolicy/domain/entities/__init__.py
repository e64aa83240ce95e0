"""Domain entities for passpolicy.

Entities are pure Python types that represent the policy data model.
They have no dependencies on infrastructure or external frameworks.
"""

from passpolicy.domain.entities.password_policy import PasswordPolicy
from passpolicy.domain.entities.password_rule import (
    ADPolicyComplexity,
    PasswordRule,
    RuleType,
)
from passpolicy.domain.entities.user_context import UserContext
from passpolicy.domain.entities.violation import PasswordError, PasswordViolation

__all__ = [
    "ADPolicyComplexity",
    "PasswordError",
    "PasswordPolicy",
    "PasswordRule",
    "PasswordViolation",
    "RuleType",
    "UserContext",
]
