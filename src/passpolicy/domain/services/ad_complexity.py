"""Active Directory style complexity rules.

Two tiers are modelled. AD2003 requires three of four character classes
(upper, lower, digit, special-or-other-letter). AD2008 scores five classes
separately and tolerates a configurable number of missing ones. Both tiers
also reject passwords that contain the user's account name or a token of
their display name.
"""

import re
from collections.abc import Callable

from passpolicy.domain.entities.password_rule import ADPolicyComplexity
from passpolicy.domain.entities.user_context import UserContext
from passpolicy.domain.entities.violation import PasswordError, PasswordViolation
from passpolicy.domain.services.char_classifier import CharacterCategory
from passpolicy.domain.services.char_counter import PasswordCharCounter

AD_MINIMUM_LENGTH = 6
AD2008_CATEGORY_COUNT = 5

ACCOUNT_NAME_ATTRIBUTE = "sAMAccountName"
DISPLAY_NAME_ATTRIBUTE = "displayName"

DISPLAY_NAME_DELIMITERS = re.compile("[,.\\-–—_ £\t]+")

_MISSING_CATEGORY_ERRORS = (
    (CharacterCategory.UPPER, PasswordError.PASSWORD_NOT_ENOUGH_UPPER),
    (CharacterCategory.LOWER, PasswordError.PASSWORD_NOT_ENOUGH_LOWER),
    (CharacterCategory.DIGIT, PasswordError.PASSWORD_NOT_ENOUGH_NUM),
    (CharacterCategory.SPECIAL, PasswordError.PASSWORD_NOT_ENOUGH_SPECIAL),
)


def _base_points(counter: PasswordCharCounter) -> int:
    return sum(
        1
        for category in (CharacterCategory.UPPER, CharacterCategory.LOWER, CharacterCategory.DIGIT)
        if counter.has_any(category)
    )


def _passes_ad2003(counter: PasswordCharCounter, max_violations: int) -> bool:
    points = _base_points(counter)
    if counter.has_any(CharacterCategory.SPECIAL) or counter.has_any(CharacterCategory.OTHER_LETTER):
        points += 1
    return points >= 3


def _passes_ad2008(counter: PasswordCharCounter, max_violations: int) -> bool:
    points = _base_points(counter)
    points += counter.has_any(CharacterCategory.SPECIAL)
    points += counter.has_any(CharacterCategory.OTHER_LETTER)
    return AD2008_CATEGORY_COUNT - points <= max_violations


_TIER_SCORERS: dict[ADPolicyComplexity, Callable[[PasswordCharCounter, int], bool]] = {
    ADPolicyComplexity.AD2003: _passes_ad2003,
    ADPolicyComplexity.AD2008: _passes_ad2008,
}

_TIER_MAXIMUM_LENGTH: dict[ADPolicyComplexity, int] = {
    ADPolicyComplexity.AD2003: 128,
    ADPolicyComplexity.AD2008: 512,
}


def contains_display_name_token(password: str, display_name: str | None) -> bool:
    """Check whether any display name token longer than two chars is in the password."""
    if not password or not display_name:
        return False
    lowered = password.lower()
    return any(
        len(token) > 2 and token in lowered
        for token in DISPLAY_NAME_DELIMITERS.split(display_name.lower())
    )


def contains_account_name(password: str, account_name: str | None) -> bool:
    if not password or not account_name or len(account_name) <= 2:
        return False
    return account_name.lower() in password.lower()


def check_ad_complexity(
    level: ADPolicyComplexity,
    password: str,
    counter: PasswordCharCounter,
    max_violations: int,
    user: UserContext | None = None,
) -> list[PasswordViolation]:
    """Evaluate a password against an AD complexity tier.

    Args:
        level: Complexity tier. NONE performs no checks.
        password: The candidate password.
        counter: Character statistics for the candidate password.
        max_violations: Missing categories tolerated by the AD2008 tier.
        user: User whose account and display name must not appear.

    Returns:
        Violations found. Length failures are reported alone.
    """
    scorer = _TIER_SCORERS.get(level)
    if scorer is None:
        return []

    if len(password) < AD_MINIMUM_LENGTH:
        return [PasswordViolation.of(PasswordError.PASSWORD_TOO_SHORT)]
    if len(password) > _TIER_MAXIMUM_LENGTH[level]:
        return [PasswordViolation.of(PasswordError.PASSWORD_TOO_LONG)]

    violations: list[PasswordViolation] = []
    if user is not None:
        if contains_account_name(password, user.attribute(ACCOUNT_NAME_ATTRIBUTE)):
            violations.append(
                PasswordViolation.of(PasswordError.PASSWORD_INWORDLIST, detail=ACCOUNT_NAME_ATTRIBUTE)
            )
        display_name = user.attribute(DISPLAY_NAME_ATTRIBUTE)
        if display_name and len(display_name) > 2 and contains_display_name_token(password, display_name):
            violations.append(
                PasswordViolation.of(PasswordError.PASSWORD_INWORDLIST, detail=DISPLAY_NAME_ATTRIBUTE)
            )

    if scorer(counter, max_violations):
        return violations

    for category, error in _MISSING_CATEGORY_ERRORS:
        if not counter.has_any(category):
            violations.append(PasswordViolation.of(error))
    return violations
