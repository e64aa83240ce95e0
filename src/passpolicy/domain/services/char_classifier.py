"""Character classification.

Every character falls into exactly one primary bucket: UPPER, LOWER or
OTHER_LETTER for letters (OTHER_LETTER being caseless scripts such as CJK),
DIGIT or SPECIAL for everything else. LETTER and NON_LETTER are the coarse
split used by the alpha rules.
"""

from enum import Enum


class CharacterCategory(Enum):
    UPPER = "upper"
    LOWER = "lower"
    DIGIT = "digit"
    SPECIAL = "special"
    LETTER = "letter"
    NON_LETTER = "non_letter"
    OTHER_LETTER = "other_letter"


PRIMARY_CATEGORIES = (
    CharacterCategory.UPPER,
    CharacterCategory.LOWER,
    CharacterCategory.OTHER_LETTER,
    CharacterCategory.DIGIT,
    CharacterCategory.SPECIAL,
)


def classify(char: str) -> CharacterCategory:
    """Return the primary category of a single character."""
    if char.isalpha():
        if char.isupper():
            return CharacterCategory.UPPER
        if char.islower():
            return CharacterCategory.LOWER
        return CharacterCategory.OTHER_LETTER
    if char.isdecimal():
        return CharacterCategory.DIGIT
    return CharacterCategory.SPECIAL


def matches(char: str, category: CharacterCategory) -> bool:
    """Check whether a character belongs to a category, primary or coarse."""
    if category is CharacterCategory.LETTER:
        return char.isalpha()
    if category is CharacterCategory.NON_LETTER:
        return not char.isalpha()
    return classify(char) is category
