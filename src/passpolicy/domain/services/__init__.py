"""Domain services for passpolicy.

Services hold the rule checks, the validator facade and the random
password generator built on top of the policy entities.
"""

from passpolicy.domain.services.password_validator import PasswordRuleValidator
from passpolicy.domain.services.random_generator import (
    GenerationResult,
    RandomGeneratorConfig,
    RandomPasswordGenerator,
    create_random_password,
    figure_minimum_strength,
)
from passpolicy.domain.services.strength import (
    ZxcvbnStrengthScorer,
    strength_scorer_for,
    traditional_strength,
)

__all__ = [
    "GenerationResult",
    "PasswordRuleValidator",
    "RandomGeneratorConfig",
    "RandomPasswordGenerator",
    "ZxcvbnStrengthScorer",
    "create_random_password",
    "figure_minimum_strength",
    "strength_scorer_for",
    "traditional_strength",
]
