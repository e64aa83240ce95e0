"""Password strength scoring.

A strength scorer maps a password to an int in [0, 100]. Two scorers are
provided: the entropy estimate from zxcvbn, bucketed into configured
thresholds, and a traditional heuristic based on character statistics.
"""

from collections.abc import Callable

import zxcvbn as _zxcvbn

from passpolicy.core.config import Settings, get_settings
from passpolicy.domain.services.char_classifier import CharacterCategory
from passpolicy.domain.services.char_counter import PasswordCharCounter

StrengthScorer = Callable[[str], int]

# zxcvbn refuses inputs longer than this
ZXCVBN_INPUT_LIMIT = 72


def traditional_strength(password: str) -> int:
    """Score a password with the unique/digit/special/mixed-case heuristic.

    Args:
        password: Password to score.

    Returns:
        Score clamped to [0, 100]. An empty password scores 0.
    """
    if not password:
        return 0

    counter = PasswordCharCounter(password)
    score = 0

    unique = counter.distinct_char_count()
    if unique > 7:
        score += 10
    score += unique * 3

    digits = counter.count_of(CharacterCategory.DIGIT)
    if digits > 0:
        score += 8 + digits * 4

    specials = counter.count_of(CharacterCategory.SPECIAL)
    if specials > 0:
        score += 14 + specials * 5

    letters = counter.count_of(CharacterCategory.LETTER)
    if letters != counter.count_of(CharacterCategory.UPPER) and letters != counter.count_of(
        CharacterCategory.LOWER
    ):
        score += 10

    digit_run = counter.longest_run_of_category(CharacterCategory.DIGIT)
    if digit_run > 2:
        score -= (digit_run - 1) * 4

    repeat_run = counter.longest_sequential_run()
    if repeat_run > 1:
        score -= repeat_run * 5

    return max(0, min(100, score))


class ZxcvbnStrengthScorer:
    """Maps the zxcvbn 0-4 score onto the configured strength thresholds."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self.max_test_length = min(settings.strength_max_test_length, ZXCVBN_INPUT_LIMIT)
        self.thresholds = {
            4: settings.strength_very_strong,
            3: settings.strength_strong,
            2: settings.strength_good,
            1: settings.strength_weak,
            0: settings.strength_very_weak,
        }

    def __call__(self, password: str) -> int:
        if not password:
            return self.thresholds[0]
        result = _zxcvbn.zxcvbn(password[: self.max_test_length])
        return self.thresholds.get(result["score"], self.thresholds[0])


def strength_scorer_for(settings: Settings | None = None) -> StrengthScorer:
    """Build the scorer selected by ``strength_meter_type``."""
    settings = settings or get_settings()
    if settings.strength_meter_type == "traditional":
        return traditional_strength
    return ZxcvbnStrengthScorer(settings)
