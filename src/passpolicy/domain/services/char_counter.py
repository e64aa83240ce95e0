"""Per-password character statistics.

PasswordCharCounter is a read-only view over one password string. Derived
statistics are computed on first access and cached on the instance; callers
that mutate a password build a new counter instead of reusing an old one.
"""

from collections import Counter
from functools import cached_property

from passpolicy.domain.services.char_classifier import (
    CharacterCategory,
    classify,
    matches,
)


class PasswordCharCounter:
    """Counts, subsets and runs of character categories in a password."""

    def __init__(self, password: str) -> None:
        self._password = password or ""

    @property
    def password(self) -> str:
        return self._password

    def __len__(self) -> int:
        return len(self._password)

    @cached_property
    def _primary(self) -> tuple[CharacterCategory, ...]:
        return tuple(classify(char) for char in self._password)

    @cached_property
    def _chars_by_category(self) -> dict[CharacterCategory, str]:
        return {
            category: "".join(c for c in self._password if matches(c, category))
            for category in CharacterCategory
        }

    def count_of(self, category: CharacterCategory) -> int:
        return len(self._chars_by_category[category])

    def chars_of(self, category: CharacterCategory) -> str:
        """Characters belonging to the category, in their original order."""
        return self._chars_by_category[category]

    def has_any(self, category: CharacterCategory) -> bool:
        return self.count_of(category) > 0

    @cached_property
    def _repeat_run(self) -> int:
        if len(self._password) < 2:
            return 0
        return max(Counter(self._password.lower()).values())

    def longest_repeat_run(self) -> int:
        """Occurrence count of the most frequent character, ignoring case.

        This is a total count over the whole password, not a run length:
        "abab" scores 2. Passwords shorter than two characters score 0.
        """
        return self._repeat_run

    @cached_property
    def _sequential_run(self) -> int:
        if len(self._password) < 2:
            return 0
        lowered = self._password.lower()
        longest = 0
        current = 0
        previous = None
        for char in lowered:
            current = current + 1 if char == previous else 1
            previous = char
            longest = max(longest, current)
        return longest

    def longest_sequential_run(self) -> int:
        """Length of the longest run of one repeated character, ignoring case.

        Passwords shorter than two characters score 0.
        """
        return self._sequential_run

    def longest_run_of_category(self, category: CharacterCategory) -> int:
        longest = 0
        current = 0
        for char in self._password:
            current = current + 1 if matches(char, category) else 0
            longest = max(longest, current)
        return longest

    @cached_property
    def _distinct(self) -> int:
        return len(set(self._password.lower()))

    def distinct_char_count(self) -> int:
        """Number of distinct characters, ignoring case."""
        return self._distinct

    def is_first_of_category(self, category: CharacterCategory) -> bool:
        return bool(self._password) and matches(self._password[0], category)

    def is_last_of_category(self, category: CharacterCategory) -> bool:
        return bool(self._password) and matches(self._password[-1], category)

    def primary_categories(self) -> tuple[CharacterCategory, ...]:
        """Primary category of each character, in password order."""
        return self._primary
