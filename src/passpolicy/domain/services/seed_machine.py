"""Character pools for random password generation.

A SeedMachine turns a corpus of seed phrases into the alphabets the
generator draws from. Pools that come out too small fall back to the pools
of the built-in default corpus, which are computed once at import time.
"""

import random
from collections.abc import Iterable
from functools import cached_property

from passpolicy.domain.services.char_classifier import CharacterCategory, matches

# Printable ASCII minus visually ambiguous characters (i, l, o, I, N, O, 0, 1).
DEFAULT_SEED_PHRASES: tuple[str, ...] = tuple(
    "abcdefghjkmnpqrstuvwxyz"
    "ABCDEFGHJKLMPQRSTUVWXYZ"
    "23456789"
    "@&!?%$#^)(+-=.,/\\"
)

# Pools with this many characters or fewer are replaced by the default pool.
MINIMUM_POOL_SIZE = 2


def normalize_seeds(seeds: Iterable[str] | None) -> tuple[str, ...]:
    """Drop empty and duplicate seeds, keeping first-seen order.

    Returns:
        The cleaned seeds, or DEFAULT_SEED_PHRASES when nothing is left.
    """
    if seeds is None:
        return DEFAULT_SEED_PHRASES
    cleaned = tuple(dict.fromkeys(seed for seed in seeds if seed))
    return cleaned or DEFAULT_SEED_PHRASES


def unique_chars(seeds: Iterable[str]) -> str:
    """Distinct characters across all seeds, in first-seen order."""
    return "".join(dict.fromkeys(char for seed in seeds for char in seed))


def _filter(chars: str, category: CharacterCategory) -> str:
    return "".join(char for char in chars if matches(char, category))


DEFAULT_ALL_CHARS = unique_chars(DEFAULT_SEED_PHRASES)
DEFAULT_POOLS: dict[CharacterCategory, str] = {
    category: _filter(DEFAULT_ALL_CHARS, category)
    for category in (
        CharacterCategory.UPPER,
        CharacterCategory.LOWER,
        CharacterCategory.DIGIT,
        CharacterCategory.SPECIAL,
    )
}


class SeedMachine:
    """Derives and memoizes character pools from seed phrases.

    Args:
        rng: Random source used to pick seeds.
        seeds: Seed phrases. Empty or missing seeds select the default corpus.
    """

    def __init__(self, rng: random.Random, seeds: Iterable[str] | None = None) -> None:
        self.rng = rng
        self.seeds = normalize_seeds(seeds)

    def random_seed(self) -> str:
        return self.seeds[self.rng.randrange(len(self.seeds))]

    @cached_property
    def all_chars(self) -> str:
        chars = unique_chars(self.seeds)
        return chars if len(chars) > MINIMUM_POOL_SIZE else DEFAULT_ALL_CHARS

    @cached_property
    def digit_chars(self) -> str:
        chars = _filter(self.all_chars, CharacterCategory.DIGIT)
        return chars if len(chars) > MINIMUM_POOL_SIZE else DEFAULT_POOLS[CharacterCategory.DIGIT]

    @cached_property
    def special_chars(self) -> str:
        chars = _filter(self.all_chars, CharacterCategory.SPECIAL)
        return chars if len(chars) > MINIMUM_POOL_SIZE else DEFAULT_POOLS[CharacterCategory.SPECIAL]

    @cached_property
    def upper_chars(self) -> str:
        return _filter(self.all_chars, CharacterCategory.UPPER) or DEFAULT_POOLS[CharacterCategory.UPPER]

    @cached_property
    def lower_chars(self) -> str:
        return _filter(self.all_chars, CharacterCategory.LOWER) or DEFAULT_POOLS[CharacterCategory.LOWER]

    def chars_for(self, category: CharacterCategory) -> str:
        """Pool for a category. Coarse categories combine the primary pools."""
        if category is CharacterCategory.UPPER:
            return self.upper_chars
        if category is CharacterCategory.LOWER:
            return self.lower_chars
        if category is CharacterCategory.DIGIT:
            return self.digit_chars
        if category is CharacterCategory.SPECIAL:
            return self.special_chars
        if category is CharacterCategory.LETTER:
            return self.upper_chars + self.lower_chars + _filter(
                self.all_chars, CharacterCategory.OTHER_LETTER
            )
        if category is CharacterCategory.NON_LETTER:
            return self.digit_chars + self.special_chars
        return _filter(self.all_chars, category)
