"""Unit tests for AD style complexity rules."""

from passpolicy.domain.entities.password_rule import ADPolicyComplexity
from passpolicy.domain.entities.user_context import UserContext
from passpolicy.domain.services.ad_complexity import (
    check_ad_complexity,
    contains_account_name,
    contains_display_name_token,
)
from passpolicy.domain.services.char_counter import PasswordCharCounter


def check(level, password, max_violations=2, user=None):
    violations = check_ad_complexity(
        level, password, PasswordCharCounter(password), max_violations, user
    )
    return [v.code for v in violations]


class TestLegacyTier:
    def test_three_of_four_classes_pass(self):
        assert check(ADPolicyComplexity.AD2003, "Abcdef12") == []
        assert check(ADPolicyComplexity.AD2003, "abcdef1!") == []

    def test_other_letter_counts_as_special(self):
        assert check(ADPolicyComplexity.AD2003, "abcdef漢1") == []

    def test_two_classes_fail_with_missing_categories(self):
        assert check(ADPolicyComplexity.AD2003, "abcdef12") == [
            "PASSWORD_NOT_ENOUGH_UPPER",
            "PASSWORD_NOT_ENOUGH_SPECIAL",
        ]

    def test_length_failures_reported_alone(self):
        assert check(ADPolicyComplexity.AD2003, "Ab1!") == ["PASSWORD_TOO_SHORT"]
        assert check(ADPolicyComplexity.AD2003, "Ab1!" * 33) == ["PASSWORD_TOO_LONG"]

    def test_none_level_checks_nothing(self):
        assert check(ADPolicyComplexity.NONE, "a") == []


class TestModernTier:
    def test_tolerates_configured_missing_categories(self):
        assert check(ADPolicyComplexity.AD2008, "Abcdefg1", max_violations=2) == []

    def test_fails_when_tolerance_exceeded(self):
        assert check(ADPolicyComplexity.AD2008, "Abcdefg1", max_violations=1) == [
            "PASSWORD_NOT_ENOUGH_SPECIAL",
        ]

    def test_missing_other_letter_not_reported(self):
        assert check(ADPolicyComplexity.AD2008, "abcdefgh", max_violations=2) == [
            "PASSWORD_NOT_ENOUGH_UPPER",
            "PASSWORD_NOT_ENOUGH_NUM",
            "PASSWORD_NOT_ENOUGH_SPECIAL",
        ]

    def test_allows_longer_passwords(self):
        assert check(ADPolicyComplexity.AD2008, "Ab1!" * 33) == []


class TestUserNameChecks:
    def test_account_name(self, user):
        assert check(ADPolicyComplexity.AD2003, "xJDOE123!", user=user) == ["PASSWORD_INWORDLIST"]

    def test_display_name_token(self, user):
        assert check(ADPolicyComplexity.AD2003, "Anderson99!", user=user) == ["PASSWORD_INWORDLIST"]

    def test_no_match(self, user):
        assert check(ADPolicyComplexity.AD2003, "Tr0ub4dor&3", user=user) == []

    def test_contains_display_name_token(self):
        assert contains_display_name_token("xxsmithxx", "Smith, John")
        assert contains_display_name_token("xxjohnxx", "Smith-John")
        assert not contains_display_name_token("xxjoxx", "Jo Li")
        assert not contains_display_name_token("abc", None)

    def test_contains_account_name(self):
        assert contains_account_name("myJdoe1", "jdoe")
        assert not contains_account_name("myjd1", "jd")
        assert not contains_account_name("abc", None)

    def test_short_display_name_ignored(self):
        user = UserContext(attributes={"displayName": "Al"})
        assert check(ADPolicyComplexity.AD2003, "Al12345!", user=user) == []
