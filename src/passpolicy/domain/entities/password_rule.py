"""Password rule definitions.

Every rule a policy can carry is a member of PasswordRule. A member knows
its policy key, its value type, its default raw value, and how two values
of the rule combine when policies are merged.
"""

from enum import Enum


class RuleType(Enum):
    """Value type of a password rule, which also decides its merge behaviour."""

    MIN = "min"
    MAX = "max"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    TEXT = "text"


class ADPolicyComplexity(Enum):
    """Active Directory style complexity tier, ordered from lenient to strict."""

    NONE = 0
    AD2003 = 1
    AD2008 = 2

    @classmethod
    def parse(cls, value: str | None) -> "ADPolicyComplexity":
        """Parse a raw policy value, falling back to NONE when unrecognised."""
        if value:
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        return cls.NONE


class PasswordRule(Enum):
    """All rules understood by the policy engine.

    Each member value is ``(key, rule_type, default, positive_boolean_merge,
    separator)``. ``separator`` is set for rules whose raw value is a list.
    """

    PolicyEnabled = ("PolicyEnabled", RuleType.BOOLEAN, "false", True, None)
    MinimumLength = ("MinimumLength", RuleType.MIN, "0", False, None)
    MaximumLength = ("MaximumLength", RuleType.MAX, "0", False, None)
    MinimumUpperCase = ("MinimumUpperCase", RuleType.MIN, "0", False, None)
    MaximumUpperCase = ("MaximumUpperCase", RuleType.MAX, "0", False, None)
    MinimumLowerCase = ("MinimumLowerCase", RuleType.MIN, "0", False, None)
    MaximumLowerCase = ("MaximumLowerCase", RuleType.MAX, "0", False, None)
    AllowNumeric = ("AllowNumeric", RuleType.BOOLEAN, "true", False, None)
    MinimumNumeric = ("MinimumNumeric", RuleType.MIN, "0", False, None)
    MaximumNumeric = ("MaximumNumeric", RuleType.MAX, "0", False, None)
    MinimumUnique = ("MinimumUnique", RuleType.MIN, "0", False, None)
    MaximumUnique = ("MaximumUnique", RuleType.MAX, "0", False, None)
    AllowFirstCharNumeric = ("AllowFirstCharNumeric", RuleType.BOOLEAN, "true", False, None)
    AllowLastCharNumeric = ("AllowLastCharNumeric", RuleType.BOOLEAN, "true", False, None)
    AllowSpecial = ("AllowSpecial", RuleType.BOOLEAN, "true", False, None)
    MinimumSpecial = ("MinimumSpecial", RuleType.MIN, "0", False, None)
    MaximumSpecial = ("MaximumSpecial", RuleType.MAX, "0", False, None)
    AllowFirstCharSpecial = ("AllowFirstCharSpecial", RuleType.BOOLEAN, "true", False, None)
    AllowLastCharSpecial = ("AllowLastCharSpecial", RuleType.BOOLEAN, "true", False, None)
    MaximumRepeat = ("MaximumRepeat", RuleType.MAX, "0", False, None)
    MaximumSequentialRepeat = ("MaximumSequentialRepeat", RuleType.MAX, "0", False, None)
    ChangeMessage = ("ChangeMessage", RuleType.TEXT, "", False, None)
    ExpirationInterval = ("ExpirationInterval", RuleType.NUMERIC, "0", False, None)
    MinimumLifetime = ("MinimumLifetime", RuleType.NUMERIC, "0", False, None)
    CaseSensitive = ("CaseSensitive", RuleType.BOOLEAN, "true", True, None)
    EnforceAtLogin = ("EnforceAtLogin", RuleType.BOOLEAN, "false", False, None)
    ChallengeResponseEnabled = ("ChallengeResponseEnabled", RuleType.BOOLEAN, "false", False, None)
    UniqueRequired = ("UniqueRequired", RuleType.BOOLEAN, "false", True, None)
    DisallowedValues = ("DisallowedValues", RuleType.TEXT, "", False, "\n")
    DisallowedAttributes = ("DisallowedAttributes", RuleType.TEXT, "", False, "\n")
    DisallowCurrent = ("DisallowCurrent", RuleType.BOOLEAN, "false", True, None)
    AllowUserChange = ("AllowUserChange", RuleType.BOOLEAN, "true", True, None)
    AllowAdminChange = ("AllowAdminChange", RuleType.BOOLEAN, "true", True, None)
    ADComplexityMaxViolations = ("ADComplexityMaxViolations", RuleType.NUMERIC, "2", False, None)
    ADComplexityLevel = ("ADComplexityLevel", RuleType.TEXT, "NONE", False, None)
    MaximumOldChars = ("MaximumOldChars", RuleType.NUMERIC, "0", False, None)
    RegExMatch = ("RegExMatch", RuleType.TEXT, "", False, ";;;")
    RegExNoMatch = ("RegExNoMatch", RuleType.TEXT, "", False, ";;;")
    MinimumAlpha = ("MinimumAlpha", RuleType.MIN, "0", False, None)
    MaximumAlpha = ("MaximumAlpha", RuleType.MAX, "0", False, None)
    AllowNonAlpha = ("AllowNonAlpha", RuleType.BOOLEAN, "true", False, None)
    MinimumNonAlpha = ("MinimumNonAlpha", RuleType.MIN, "0", False, None)
    MaximumNonAlpha = ("MaximumNonAlpha", RuleType.MAX, "0", False, None)
    EnableWordlist = ("EnableWordlist", RuleType.BOOLEAN, "true", True, None)
    MinimumStrength = ("MinimumStrength", RuleType.MIN, "0", False, None)
    MaximumConsecutive = ("MaximumConsecutive", RuleType.MIN, "0", False, None)
    CharGroupsMinMatch = ("CharGroupsMinMatch", RuleType.MIN, "0", False, None)
    CharGroupsValues = ("CharGroupsValues", RuleType.TEXT, "", False, "\n")
    AllowMacroInRegExSetting = ("AllowMacroInRegExSetting", RuleType.BOOLEAN, "true", False, None)

    def __init__(
        self,
        key: str,
        rule_type: RuleType,
        default_value: str,
        positive_boolean_merge: bool,
        separator: str | None,
    ) -> None:
        self.key = key
        self.rule_type = rule_type
        self.default_value = default_value
        self.positive_boolean_merge = positive_boolean_merge
        self.separator = separator

    @property
    def is_list(self) -> bool:
        return self.separator is not None

    @classmethod
    def for_key(cls, key: str) -> "PasswordRule | None":
        """Find the rule with the given policy key, or None for unknown keys."""
        return _RULES_BY_KEY.get(key)


_RULES_BY_KEY: dict[str, PasswordRule] = {rule.key: rule for rule in PasswordRule}


# Rule pairs whose minimum must not exceed their (non-zero) maximum.
MIN_MAX_RULE_PAIRS: tuple[tuple[PasswordRule, PasswordRule], ...] = (
    (PasswordRule.MinimumLength, PasswordRule.MaximumLength),
    (PasswordRule.MinimumUpperCase, PasswordRule.MaximumUpperCase),
    (PasswordRule.MinimumLowerCase, PasswordRule.MaximumLowerCase),
    (PasswordRule.MinimumNumeric, PasswordRule.MaximumNumeric),
    (PasswordRule.MinimumSpecial, PasswordRule.MaximumSpecial),
    (PasswordRule.MinimumUnique, PasswordRule.MaximumUnique),
    (PasswordRule.MinimumAlpha, PasswordRule.MaximumAlpha),
    (PasswordRule.MinimumNonAlpha, PasswordRule.MaximumNonAlpha),
)
