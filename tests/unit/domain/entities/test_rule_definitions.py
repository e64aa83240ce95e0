"""Unit tests for rule definitions, violations and the user snapshot."""

from passpolicy.domain.entities.password_rule import (
    ADPolicyComplexity,
    PasswordRule,
    RuleType,
)
from passpolicy.domain.entities.user_context import UserContext
from passpolicy.domain.entities.violation import PasswordError, PasswordViolation


class TestPasswordRule:
    def test_for_key(self):
        assert PasswordRule.for_key("MinimumLength") is PasswordRule.MinimumLength
        assert PasswordRule.for_key("NoSuchRule") is None

    def test_rule_metadata(self):
        assert PasswordRule.MinimumLength.rule_type is RuleType.MIN
        assert PasswordRule.MaximumLength.rule_type is RuleType.MAX
        assert PasswordRule.AllowNumeric.default_value == "true"
        assert PasswordRule.DisallowCurrent.positive_boolean_merge is True
        assert PasswordRule.AllowSpecial.positive_boolean_merge is False

    def test_list_rules(self):
        assert PasswordRule.DisallowedValues.is_list
        assert PasswordRule.RegExMatch.separator == ";;;"
        assert PasswordRule.CharGroupsValues.separator == "\n"
        assert not PasswordRule.MinimumLength.is_list

    def test_keys_are_unique(self):
        keys = [rule.key for rule in PasswordRule]
        assert len(keys) == len(set(keys))


class TestADPolicyComplexity:
    def test_parse(self):
        assert ADPolicyComplexity.parse("AD2003") is ADPolicyComplexity.AD2003
        assert ADPolicyComplexity.parse(" ad2008 ") is ADPolicyComplexity.AD2008
        assert ADPolicyComplexity.parse("bogus") is ADPolicyComplexity.NONE
        assert ADPolicyComplexity.parse(None) is ADPolicyComplexity.NONE


class TestPasswordViolation:
    def test_of_uses_default_message(self):
        violation = PasswordViolation.of(PasswordError.PASSWORD_TOO_SHORT, detail="8")
        assert violation.code == "PASSWORD_TOO_SHORT"
        assert violation.message == PasswordError.PASSWORD_TOO_SHORT.default_message
        assert violation.field == "password"
        assert violation.detail == "8"

    def test_error_messages_are_unique(self):
        messages = [error.value for error in PasswordError]
        assert len(messages) == len(set(messages))
        assert len(PasswordError.__members__) == len(list(PasswordError))


class TestUserContext:
    def test_attribute_lookup(self, user):
        assert user.attribute("givenName") == "John"
        assert user.attribute("givenname") == "John"
        assert user.attribute("mail") is None

    def test_to_public_dict(self, user):
        data = user.to_public_dict()
        assert data["userID"] == user.user_id
        assert data["username"] == "jdoe"
        assert data["attributes"]["sn"] == "Anderson"

    def test_empty_context(self):
        context = UserContext()
        assert context.attribute("givenName") is None
        assert context.to_public_dict() == {"userID": None, "username": None, "attributes": {}}
