"""Password policy entity.

A PasswordPolicy is an immutable mapping from rule key to raw string value.
Rules that are absent read as their default. Policies coming from different
sources (local configuration, directory policy, per-request overrides) are
combined with merge(), which applies a fixed per-rule merge strategy.
"""

from collections.abc import Iterable, Iterator, Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Any

from passpolicy.domain.entities.password_rule import (
    MIN_MAX_RULE_PAIRS,
    ADPolicyComplexity,
    PasswordRule,
    RuleType,
)


def parse_int(raw: str | None, default: int = 0) -> int:
    """Parse a raw rule value as an int, returning default when it is not one."""
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def parse_bool(raw: str | None) -> bool:
    """Parse a raw rule value as a bool; only "true" (any case) is true."""
    return raw is not None and raw.strip().lower() == "true"


def split_list_value(rule: PasswordRule, raw: str | None) -> list[str]:
    """Split a list rule's raw value into its non-blank items."""
    if not raw or rule.separator is None:
        return []
    return [item for item in raw.split(rule.separator) if item.strip()]


def _normalize_value(rule: PasswordRule | None, value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, ADPolicyComplexity):
        return value.name
    if isinstance(value, (list, tuple)):
        if rule is None or rule.separator is None:
            raise TypeError(f"Rule {rule.key if rule else '?'} does not accept a list value")
        return rule.separator.join(str(item) for item in value)
    if value is None:
        return rule.default_value if rule else ""
    return str(value)


def _merge_min(value1: str, value2: str) -> str:
    # take the largest value
    return value1 if parse_int(value1) > parse_int(value2) else value2


def _merge_max(value1: str, value2: str) -> str:
    i1, i2 = parse_int(value1), parse_int(value2)
    # zero means unlimited, so a zero side yields to the other
    if i1 == 0 or i2 == 0:
        return value1 if i1 > i2 else value2
    return value1 if i1 < i2 else value2


def _merge_rule(rule: PasswordRule, local: str | None, other: str | None) -> str:
    local_value = local if local is not None else rule.default_value
    other_value = other if other is not None else rule.default_value

    if rule.is_list:
        seen: dict[str, None] = {}
        for item in split_list_value(rule, local_value) + split_list_value(rule, other_value):
            seen.setdefault(item, None)
        return rule.separator.join(seen)

    if rule is PasswordRule.ChangeMessage:
        return local_value if local_value else other_value

    if rule is PasswordRule.ADComplexityLevel:
        local_level = ADPolicyComplexity.parse(local_value)
        other_level = ADPolicyComplexity.parse(other_value)
        return max(local_level, other_level, key=lambda level: level.value).name

    if rule in (PasswordRule.ExpirationInterval, PasswordRule.MinimumLifetime):
        return _merge_min(local_value, other_value)

    if rule.rule_type is RuleType.MIN:
        return _merge_min(local_value, other_value)
    if rule.rule_type is RuleType.MAX:
        return _merge_max(local_value, other_value)
    if rule.rule_type is RuleType.BOOLEAN:
        if rule.positive_boolean_merge:
            merged = parse_bool(local_value) or parse_bool(other_value)
        else:
            merged = parse_bool(local_value) and parse_bool(other_value)
        return "true" if merged else "false"

    # remaining numeric and text rules: an explicit local value wins
    return local if local is not None else other_value


class PasswordPolicy(Mapping[str, str]):
    """Immutable mapping of rule key to raw rule value.

    Keys may be given as PasswordRule members or as plain strings. Values are
    normalized to strings: bools become "true"/"false", ints their decimal
    form and lists are joined with the rule's separator. Unknown keys are
    preserved but ignored by the engine.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[Any, Any] | Iterable[tuple[Any, Any]] | None = None) -> None:
        normalized: dict[str, str] = {}
        items = values.items() if isinstance(values, Mapping) else (values or ())
        for key, value in items:
            rule = key if isinstance(key, PasswordRule) else PasswordRule.for_key(str(key))
            rule_key = rule.key if rule else str(key)
            normalized[rule_key] = _normalize_value(rule, value)
        self._values = MappingProxyType(normalized)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"PasswordPolicy({dict(self._values)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PasswordPolicy):
            return dict(self._values) == dict(other._values)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    @classmethod
    def default_policy(cls) -> "PasswordPolicy":
        """Return the shared policy holding every rule's default value."""
        return _default_policy()

    def value(self, rule: PasswordRule) -> str:
        """Raw value of a rule, or its default when the policy does not set it."""
        return self._values.get(rule.key, rule.default_value)

    def is_set(self, rule: PasswordRule) -> bool:
        return rule.key in self._values

    def policy_map(self) -> dict[str, str]:
        """Return a mutable copy of the explicitly set values."""
        return dict(self._values)

    def with_values(self, overrides: Mapping[Any, Any]) -> "PasswordPolicy":
        """Return a copy of this policy with some rule values replaced."""
        merged: dict[Any, Any] = dict(self._values)
        merged.update(PasswordPolicy(overrides))
        return PasswordPolicy(merged)

    def merge(self, other: "PasswordPolicy | None") -> "PasswordPolicy":
        """Combine this policy with another using each rule's merge strategy.

        Args:
            other: Policy to merge in. ``None`` returns this policy unchanged.

        Returns:
            A new policy carrying a value for every known rule.
        """
        if other is None:
            return self

        merged: dict[str, str] = {}
        for key, value in other.items():
            if PasswordRule.for_key(key) is None:
                merged[key] = value
        for key, value in self.items():
            if PasswordRule.for_key(key) is None:
                merged[key] = value

        for rule in PasswordRule:
            merged[rule.key] = _merge_rule(
                rule,
                self._values.get(rule.key),
                other._values.get(rule.key),
            )
        return PasswordPolicy(merged)

    def rule_dump(self) -> dict[str, str]:
        """Dump every known rule as ``{rule name: effective value}``."""
        return {rule.name: self.value(rule) for rule in PasswordRule}

    def health(self) -> list[str]:
        """Report configuration problems that make the policy unsatisfiable.

        Returns:
            Human readable problem descriptions. Empty when the policy is sound.
        """
        problems: list[str] = []
        for min_rule, max_rule in MIN_MAX_RULE_PAIRS:
            min_value = parse_int(self.value(min_rule))
            max_value = parse_int(self.value(max_rule))
            if max_value > 0 and min_value > max_value:
                problems.append(
                    f"{min_rule.key} ({min_value}) is greater than {max_rule.key} ({max_value})"
                )

        min_groups = parse_int(self.value(PasswordRule.CharGroupsMinMatch))
        groups = split_list_value(
            PasswordRule.CharGroupsValues, self.value(PasswordRule.CharGroupsValues)
        )
        if min_groups > len(groups):
            problems.append(
                f"{PasswordRule.CharGroupsMinMatch.key} ({min_groups}) is greater than "
                f"the number of configured character groups ({len(groups)})"
            )
        return problems


@lru_cache(maxsize=1)
def _default_policy() -> PasswordPolicy:
    return PasswordPolicy({rule: rule.default_value for rule in PasswordRule})
