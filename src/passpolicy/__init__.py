"""passpolicy - Password policy engine.

Validates candidate passwords against configurable rule sets and
generates random passwords that satisfy them.
"""

__version__ = "0.1.0"

from passpolicy.domain.entities import PasswordPolicy, PasswordRule, UserContext
from passpolicy.domain.services import PasswordRuleValidator, RandomPasswordGenerator

__all__ = [
    "PasswordPolicy",
    "PasswordRule",
    "PasswordRuleValidator",
    "RandomPasswordGenerator",
    "UserContext",
    "__version__",
]
