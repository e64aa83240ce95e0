"""Mutable password buffer used by the random generator.

All randomness comes from the Random instance handed to the buffer, so a
seeded generator is fully reproducible. The buffer never caches character
statistics; build a PasswordCharCounter from ``value`` after mutating.
"""

import random

from passpolicy.domain.exceptions import ImpossiblePasswordPolicyError
from passpolicy.domain.services.char_classifier import CharacterCategory, matches
from passpolicy.domain.services.seed_machine import SeedMachine

_INSERTABLE_CATEGORIES = (
    CharacterCategory.UPPER,
    CharacterCategory.LOWER,
    CharacterCategory.DIGIT,
    CharacterCategory.SPECIAL,
)

_COVERED_CATEGORIES = {
    CharacterCategory.LETTER: {CharacterCategory.UPPER, CharacterCategory.LOWER},
    CharacterCategory.NON_LETTER: {CharacterCategory.DIGIT, CharacterCategory.SPECIAL},
}


class MutablePasswordBuffer:
    """A password under construction with randomized edit operations."""

    # deletion scans stop after this many candidate positions
    MAX_DELETE_CANDIDATES = 25

    def __init__(self, rng: random.Random, seed_machine: SeedMachine, value: str = "") -> None:
        self.rng = rng
        self.seed_machine = seed_machine
        self._chars: list[str] = list(value)

    @property
    def value(self) -> str:
        return "".join(self._chars)

    def __len__(self) -> int:
        return len(self._chars)

    def __str__(self) -> str:
        return self.value

    def reset(self, value: str = "") -> None:
        self._chars = list(value)

    def append(self, text: str) -> None:
        self._chars.extend(text)

    def _insert_from(self, pool: str, category: CharacterCategory | None = None) -> None:
        if not pool:
            label = category.value if category else "any"
            raise ImpossiblePasswordPolicyError(
                f"No characters available for category '{label}'"
            )
        position = self.rng.randrange(len(self._chars) + 1)
        char = pool[self.rng.randrange(len(pool))]
        self._chars.insert(position, char)

    def add_random_char(self) -> None:
        """Insert a character from the full alphabet at a random position."""
        self._insert_from(self.seed_machine.all_chars)

    def add_random_char_of_type(self, category: CharacterCategory) -> None:
        """Insert a character of the given category at a random position.

        Raises:
            ImpossiblePasswordPolicyError: If the category's pool is empty.
        """
        self._insert_from(self.seed_machine.chars_for(category), category)

    def add_random_char_except_type(self, not_category: CharacterCategory) -> None:
        """Insert a character from a uniformly chosen category other than ``not_category``."""
        excluded = _COVERED_CATEGORIES.get(not_category, {not_category})
        candidates = [c for c in _INSERTABLE_CATEGORIES if c not in excluded]
        category = candidates[self.rng.randrange(len(candidates))]
        self.add_random_char_of_type(category)

    def delete_random_char(self) -> None:
        if self._chars:
            del self._chars[self.rng.randrange(len(self._chars))]

    def delete_char_at(self, index: int) -> None:
        if self._chars:
            del self._chars[index]

    def _delete_random_matching(self, predicate, label: str) -> None:
        positions: list[int] = []
        for index, char in enumerate(self._chars):
            if predicate(char):
                positions.append(index)
                if len(positions) >= self.MAX_DELETE_CANDIDATES:
                    break
        if not positions:
            raise ImpossiblePasswordPolicyError(f"No '{label}' character to delete")
        del self._chars[positions[self.rng.randrange(len(positions))]]

    def delete_random_char_of_type(self, category: CharacterCategory) -> None:
        """Delete a random character of the given category.

        Raises:
            ImpossiblePasswordPolicyError: If no character of the category is present.
        """
        self._delete_random_matching(lambda c: matches(c, category), category.value)

    def delete_random_char_except_type(self, not_category: CharacterCategory) -> None:
        self._delete_random_matching(
            lambda c: not matches(c, not_category), f"not {not_category.value}"
        )

    def randomize_casing(self) -> bool:
        """Flip the case of the first letter found from a random start position.

        Returns:
            True if a letter was flipped.
        """
        length = len(self._chars)
        if length == 0:
            return False
        start = self.rng.randrange(length)
        for offset in range(length):
            index = (start + offset) % length
            char = self._chars[index]
            if not char.isalpha():
                continue
            flipped = char.swapcase()
            if len(flipped) == 1 and flipped != char:
                self._chars[index] = flipped
                return True
        return False
