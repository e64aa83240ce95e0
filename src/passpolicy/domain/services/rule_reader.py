"""Typed access to policy rule values."""

import re

from passpolicy.core.logging import get_logger
from passpolicy.core.macros.expander import MacroExpander
from passpolicy.domain.entities.password_policy import (
    PasswordPolicy,
    parse_bool,
    parse_int,
    split_list_value,
)
from passpolicy.domain.entities.password_rule import (
    ADPolicyComplexity,
    PasswordRule,
    RuleType,
)

logger = get_logger(__name__)

_INT_RULE_TYPES = frozenset({RuleType.MIN, RuleType.MAX, RuleType.NUMERIC})


class PolicyRuleReader:
    """Reads rule values from a policy as ints, bools, lists and regexes.

    Missing or unparsable values fall back to the rule's default. Asking for
    a value in a type the rule does not have is a programming error and
    raises ValueError.
    """

    def __init__(self, policy: PasswordPolicy) -> None:
        self.policy = policy

    def read_int(self, rule: PasswordRule) -> int:
        if rule.rule_type not in _INT_RULE_TYPES:
            raise ValueError(f"Rule {rule.key} is not a numeric rule")
        return parse_int(self.policy.value(rule), parse_int(rule.default_value))

    def read_bool(self, rule: PasswordRule) -> bool:
        if rule.rule_type is not RuleType.BOOLEAN:
            raise ValueError(f"Rule {rule.key} is not a boolean rule")
        return parse_bool(self.policy.value(rule))

    def read_text(self, rule: PasswordRule) -> str:
        return self.policy.value(rule)

    def read_list(self, rule: PasswordRule) -> list[str]:
        if not rule.is_list:
            raise ValueError(f"Rule {rule.key} is not a list rule")
        return split_list_value(rule, self.policy.value(rule))

    def read_ad_complexity(self) -> ADPolicyComplexity:
        return ADPolicyComplexity.parse(self.policy.value(PasswordRule.ADComplexityLevel))

    def read_regex_list(
        self,
        rule: PasswordRule,
        expander: MacroExpander | None = None,
    ) -> list[re.Pattern[str]]:
        """Compile a list rule's values as regular expressions.

        Macros are expanded first when the policy allows macros in regex
        settings and an expander is given. Patterns that fail to compile are
        logged and skipped.

        Args:
            rule: A list rule holding regex source strings.
            expander: Expander used for macro substitution.

        Returns:
            The compiled patterns, in configured order.
        """
        expand = expander is not None and self.read_bool(PasswordRule.AllowMacroInRegExSetting)
        patterns: list[re.Pattern[str]] = []
        for source in self.read_list(rule):
            if expand:
                source = expander.expand(source)
            try:
                patterns.append(re.compile(source))
            except re.error as e:
                logger.error(
                    "Invalid regex in password policy, skipping",
                    rule=rule.key,
                    pattern=source,
                    error=str(e),
                )
        return patterns
