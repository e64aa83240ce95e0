"""Unit tests for seed phrase pools and the mutable password buffer."""

import random

import pytest

from passpolicy.domain.exceptions import ImpossiblePasswordPolicyError
from passpolicy.domain.services.char_classifier import CharacterCategory, matches
from passpolicy.domain.services.password_buffer import MutablePasswordBuffer
from passpolicy.domain.services.seed_machine import (
    DEFAULT_ALL_CHARS,
    DEFAULT_POOLS,
    DEFAULT_SEED_PHRASES,
    SeedMachine,
    normalize_seeds,
    unique_chars,
)


class TestSeedMachine:
    def test_default_seeds(self, rng):
        assert SeedMachine(rng).seeds == DEFAULT_SEED_PHRASES
        assert SeedMachine(rng, ["", ""]).seeds == DEFAULT_SEED_PHRASES

    def test_normalize_seeds_drops_empty_and_duplicates(self):
        assert normalize_seeds(["ab", "", "ab", "cd"]) == ("ab", "cd")

    def test_unique_chars_first_seen_order(self):
        assert unique_chars(["abc", "cde"]) == "abcde"

    def test_default_corpus_excludes_ambiguous_characters(self):
        for char in "01ilIoON":
            assert char not in DEFAULT_ALL_CHARS

    def test_pools_derived_from_seeds(self, rng):
        machine = SeedMachine(rng, ["abc1234", "XYZ!@#"])
        assert machine.all_chars == "abc1234XYZ!@#"
        assert machine.lower_chars == "abc"
        assert machine.upper_chars == "XYZ"
        assert machine.digit_chars == "1234"
        assert machine.special_chars == "!@#"

    def test_small_pools_fall_back_to_defaults(self, rng):
        machine = SeedMachine(rng, ["abcXYZ12"])
        assert machine.digit_chars == DEFAULT_POOLS[CharacterCategory.DIGIT]
        assert machine.special_chars == DEFAULT_POOLS[CharacterCategory.SPECIAL]
        assert machine.upper_chars == "XYZ"

        assert SeedMachine(rng, ["ab"]).all_chars == DEFAULT_ALL_CHARS

    def test_empty_case_pools_fall_back(self, rng):
        machine = SeedMachine(rng, ["12345"])
        assert machine.upper_chars == DEFAULT_POOLS[CharacterCategory.UPPER]
        assert machine.lower_chars == DEFAULT_POOLS[CharacterCategory.LOWER]

    def test_chars_for_coarse_categories(self, rng):
        machine = SeedMachine(rng)
        assert machine.chars_for(CharacterCategory.NON_LETTER) == machine.digit_chars + machine.special_chars
        assert all(char.isalpha() for char in machine.chars_for(CharacterCategory.LETTER))
        assert machine.chars_for(CharacterCategory.OTHER_LETTER) == ""

    def test_random_seed_is_deterministic(self):
        seeds = ["alpha", "beta", "gamma", "delta"]
        first = SeedMachine(random.Random(7), seeds)
        second = SeedMachine(random.Random(7), seeds)
        picks = [first.random_seed() for _ in range(10)]
        assert picks == [second.random_seed() for _ in range(10)]
        assert set(picks) <= set(seeds)


def make_buffer(value="", seed=99) -> MutablePasswordBuffer:
    rng = random.Random(seed)
    return MutablePasswordBuffer(rng, SeedMachine(rng), value)


class TestMutablePasswordBuffer:
    def test_append_and_reset(self):
        buffer = make_buffer()
        buffer.append("abc")
        assert buffer.value == "abc"
        assert len(buffer) == 3
        buffer.reset("xy")
        assert str(buffer) == "xy"

    def test_add_random_char_of_type(self):
        buffer = make_buffer("abc")
        buffer.add_random_char_of_type(CharacterCategory.DIGIT)
        assert len(buffer) == 4
        assert sum(char.isdigit() for char in buffer.value) == 1
        assert sorted(c for c in buffer.value if c.isalpha()) == ["a", "b", "c"]

    def test_add_random_char(self):
        buffer = make_buffer("abc")
        buffer.add_random_char()
        assert len(buffer) == 4

    def test_add_random_char_except_type(self):
        for seed in range(20):
            buffer = make_buffer("", seed=seed)
            buffer.add_random_char_except_type(CharacterCategory.LETTER)
            assert not buffer.value.isalpha()

    def test_add_from_empty_pool_raises(self):
        with pytest.raises(ImpossiblePasswordPolicyError):
            make_buffer("abc").add_random_char_of_type(CharacterCategory.OTHER_LETTER)

    def test_delete_random_char(self):
        buffer = make_buffer("abc")
        buffer.delete_random_char()
        assert len(buffer) == 2

        empty = make_buffer()
        empty.delete_random_char()
        assert empty.value == ""

    def test_delete_char_at(self):
        buffer = make_buffer("xabcy")
        buffer.delete_char_at(0)
        buffer.delete_char_at(len(buffer) - 1)
        assert buffer.value == "abc"

    def test_delete_random_char_of_type(self):
        buffer = make_buffer("a1b2")
        buffer.delete_random_char_of_type(CharacterCategory.DIGIT)
        assert sum(char.isdigit() for char in buffer.value) == 1
        assert "a" in buffer.value and "b" in buffer.value

    def test_delete_missing_type_raises(self):
        with pytest.raises(ImpossiblePasswordPolicyError):
            make_buffer("abc").delete_random_char_of_type(CharacterCategory.SPECIAL)

    def test_delete_random_char_except_type(self):
        buffer = make_buffer("a1")
        buffer.delete_random_char_except_type(CharacterCategory.DIGIT)
        assert buffer.value == "1"

    def test_randomize_casing(self):
        assert make_buffer("123").randomize_casing() is False
        buffer = make_buffer("a12")
        assert buffer.randomize_casing() is True
        assert buffer.value == "A12"

    def test_operations_are_deterministic(self):
        def mutate(buffer):
            buffer.add_random_char_of_type(CharacterCategory.SPECIAL)
            buffer.add_random_char()
            buffer.delete_random_char()
            buffer.randomize_casing()
            return buffer.value

        assert mutate(make_buffer("password", seed=5)) == mutate(make_buffer("password", seed=5))

    def test_inserted_char_matches_category(self):
        buffer = make_buffer("")
        buffer.add_random_char_of_type(CharacterCategory.UPPER)
        assert matches(buffer.value, CharacterCategory.UPPER)
