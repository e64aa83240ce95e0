"""Password rule checks.

Each rule family is a plain function taking a RuleCheckContext and returning
a list of violations. RULE_CHECKS fixes the evaluation order, which only
matters for fail-fast runs: those stop after the first check that reports
anything.
"""

from collections.abc import Callable
from dataclasses import dataclass

from passpolicy.core.logging import get_logger
from passpolicy.core.macros.expander import MacroExpander
from passpolicy.domain.entities.password_policy import PasswordPolicy, parse_int
from passpolicy.domain.entities.password_rule import PasswordRule
from passpolicy.domain.entities.user_context import UserContext
from passpolicy.domain.entities.violation import PasswordError, PasswordViolation
from passpolicy.domain.exceptions import ServiceUnavailableError
from passpolicy.domain.services.ad_complexity import check_ad_complexity
from passpolicy.domain.services.char_classifier import CharacterCategory
from passpolicy.domain.services.char_counter import PasswordCharCounter
from passpolicy.domain.services.rule_reader import PolicyRuleReader
from passpolicy.domain.services.strength import StrengthScorer
from passpolicy.infrastructure.services.wordlist import ServiceStatus, WordlistService

logger = get_logger(__name__)


@dataclass
class RuleCheckContext:
    """Everything a rule check may look at for one password.

    Attributes:
        password: The candidate password.
        old_password: The user's current password, if known.
        reader: Typed reader over the effective policy.
        counter: Character statistics of the candidate password.
        user: Snapshot of the user the password is for.
        expander: Macro expander for disallowed values and regexes.
        strength_scorer: Scorer for the MinimumStrength rule.
        wordlist: Dictionary membership service.
        shared_history: Global password history membership service.
        wordlist_fail_when_closed: Raise when the wordlist is not available.
        shared_history_enabled: Whether shared history is consulted at all.
    """

    password: str
    old_password: str | None
    reader: PolicyRuleReader
    counter: PasswordCharCounter
    user: UserContext | None = None
    expander: MacroExpander | None = None
    strength_scorer: StrengthScorer | None = None
    wordlist: WordlistService | None = None
    shared_history: WordlistService | None = None
    wordlist_fail_when_closed: bool = False
    shared_history_enabled: bool = True

    @classmethod
    def build(
        cls,
        password: str,
        policy: PasswordPolicy,
        old_password: str | None = None,
        **kwargs,
    ) -> "RuleCheckContext":
        """Create a context with a fresh reader and counter for ``password``."""
        return cls(
            password=password,
            old_password=old_password,
            reader=PolicyRuleReader(policy),
            counter=PasswordCharCounter(password),
            **kwargs,
        )


RuleCheck = Callable[[RuleCheckContext], list[PasswordViolation]]


def _violation(error: PasswordError, detail: str | None = None) -> PasswordViolation:
    return PasswordViolation.of(error, detail=detail)


def too_many_consecutive_chars(password: str, maximum_consecutive: int) -> bool:
    """Check for a run of ``maximum_consecutive`` ascending code points.

    "abc" and "123" are runs of three. Comparison is done on the lowercased
    password, so "aBc" counts too.
    """
    if not password or maximum_consecutive <= 1 or len(password) < maximum_consecutive:
        return False

    last = -1
    count = 1
    for code_point in map(ord, password.lower()):
        count = count + 1 if code_point == last + 1 else 1
        last = code_point
        if count == maximum_consecutive:
            return True
    return False


def create_string_chunks(value: str, size: int) -> list[str]:
    """Split a value into every overlapping substring of ``size`` characters."""
    if size <= 0 or len(value) <= size:
        return [value]
    return [value[i:i + size] for i in range(len(value) - size + 1)]


def contains_disallowed_value(password: str, value: str | None, threshold: int) -> bool:
    """Check a password against one disallowed attribute value.

    With threshold 0 the whole value must appear in the password. With a
    positive threshold, any ``threshold``-long piece of the value appearing
    in the password is enough; values shorter than the threshold are ignored.
    """
    if not password or not value:
        return False
    lowered = password.lower()
    if threshold > 0:
        if len(value) < threshold:
            return False
        return any(chunk.lower() in lowered for chunk in create_string_chunks(value, threshold))
    return value.lower() in lowered


def check_old_password(ctx: RuleCheckContext) -> list[PasswordViolation]:
    if not ctx.old_password or not ctx.reader.read_bool(PasswordRule.DisallowCurrent):
        return []

    violations: list[PasswordViolation] = []
    if ctx.old_password.lower() == ctx.password.lower():
        violations.append(_violation(PasswordError.PASSWORD_SAMEASOLD))

    max_old_chars = ctx.reader.read_int(PasswordRule.MaximumOldChars)
    if max_old_chars > 0:
        shared = set(ctx.old_password.lower()) & set(ctx.password.lower())
        if len(shared) >= max_old_chars:
            violations.append(_violation(PasswordError.PASSWORD_TOO_MANY_OLD_CHARS))
    return violations


def check_length(ctx: RuleCheckContext) -> list[PasswordViolation]:
    length = len(ctx.password)
    minimum = ctx.reader.read_int(PasswordRule.MinimumLength)
    if length < minimum:
        return [_violation(PasswordError.PASSWORD_TOO_SHORT, detail=str(minimum))]

    maximum = ctx.reader.read_int(PasswordRule.MaximumLength)
    if maximum > 0 and length > maximum:
        return [_violation(PasswordError.PASSWORD_TOO_LONG, detail=str(maximum))]
    return []


def _check_limited_category(
    ctx: RuleCheckContext,
    category: CharacterCategory,
    allow_rule: PasswordRule,
    min_rule: PasswordRule,
    max_rule: PasswordRule,
    not_enough: PasswordError,
    too_many: PasswordError,
    first_rules: tuple[PasswordRule, PasswordError] | None = None,
    last_rules: tuple[PasswordRule, PasswordError] | None = None,
) -> list[PasswordViolation]:
    reader = ctx.reader
    counter = ctx.counter
    count = counter.count_of(category)

    if not reader.read_bool(allow_rule):
        return [_violation(too_many)] if count > 0 else []

    violations: list[PasswordViolation] = []
    if count < reader.read_int(min_rule):
        violations.append(_violation(not_enough))

    maximum = reader.read_int(max_rule)
    if maximum > 0 and count > maximum:
        violations.append(_violation(too_many))

    if first_rules is not None:
        rule, error = first_rules
        if not reader.read_bool(rule) and counter.is_first_of_category(category):
            violations.append(_violation(error))
    if last_rules is not None:
        rule, error = last_rules
        if not reader.read_bool(rule) and counter.is_last_of_category(category):
            violations.append(_violation(error))
    return violations


def check_numeric(ctx: RuleCheckContext) -> list[PasswordViolation]:
    return _check_limited_category(
        ctx,
        CharacterCategory.DIGIT,
        PasswordRule.AllowNumeric,
        PasswordRule.MinimumNumeric,
        PasswordRule.MaximumNumeric,
        PasswordError.PASSWORD_NOT_ENOUGH_NUM,
        PasswordError.PASSWORD_TOO_MANY_NUMERIC,
        first_rules=(PasswordRule.AllowFirstCharNumeric, PasswordError.PASSWORD_FIRST_IS_NUMERIC),
        last_rules=(PasswordRule.AllowLastCharNumeric, PasswordError.PASSWORD_LAST_IS_NUMERIC),
    )


def check_alpha(ctx: RuleCheckContext) -> list[PasswordViolation]:
    violations: list[PasswordViolation] = []
    letters = ctx.counter.count_of(CharacterCategory.LETTER)
    if letters < ctx.reader.read_int(PasswordRule.MinimumAlpha):
        violations.append(_violation(PasswordError.PASSWORD_NOT_ENOUGH_ALPHA))
    max_alpha = ctx.reader.read_int(PasswordRule.MaximumAlpha)
    if max_alpha > 0 and letters > max_alpha:
        violations.append(_violation(PasswordError.PASSWORD_TOO_MANY_ALPHA))

    violations.extend(
        _check_limited_category(
            ctx,
            CharacterCategory.NON_LETTER,
            PasswordRule.AllowNonAlpha,
            PasswordRule.MinimumNonAlpha,
            PasswordRule.MaximumNonAlpha,
            PasswordError.PASSWORD_NOT_ENOUGH_NONALPHA,
            PasswordError.PASSWORD_TOO_MANY_NONALPHA,
        )
    )
    return violations


def check_casing(ctx: RuleCheckContext) -> list[PasswordViolation]:
    violations: list[PasswordViolation] = []
    limits = (
        (
            CharacterCategory.UPPER,
            PasswordRule.MinimumUpperCase,
            PasswordRule.MaximumUpperCase,
            PasswordError.PASSWORD_NOT_ENOUGH_UPPER,
            PasswordError.PASSWORD_TOO_MANY_UPPER,
        ),
        (
            CharacterCategory.LOWER,
            PasswordRule.MinimumLowerCase,
            PasswordRule.MaximumLowerCase,
            PasswordError.PASSWORD_NOT_ENOUGH_LOWER,
            PasswordError.PASSWORD_TOO_MANY_LOWER,
        ),
    )
    for category, min_rule, max_rule, not_enough, too_many in limits:
        count = ctx.counter.count_of(category)
        if count < ctx.reader.read_int(min_rule):
            violations.append(_violation(not_enough))
        maximum = ctx.reader.read_int(max_rule)
        if maximum > 0 and count > maximum:
            violations.append(_violation(too_many))
    return violations


def check_special(ctx: RuleCheckContext) -> list[PasswordViolation]:
    return _check_limited_category(
        ctx,
        CharacterCategory.SPECIAL,
        PasswordRule.AllowSpecial,
        PasswordRule.MinimumSpecial,
        PasswordRule.MaximumSpecial,
        PasswordError.PASSWORD_NOT_ENOUGH_SPECIAL,
        PasswordError.PASSWORD_TOO_MANY_SPECIAL,
        first_rules=(PasswordRule.AllowFirstCharSpecial, PasswordError.PASSWORD_FIRST_IS_SPECIAL),
        last_rules=(PasswordRule.AllowLastCharSpecial, PasswordError.PASSWORD_LAST_IS_SPECIAL),
    )


def check_repeats(ctx: RuleCheckContext) -> list[PasswordViolation]:
    violations: list[PasswordViolation] = []

    max_sequential = ctx.reader.read_int(PasswordRule.MaximumSequentialRepeat)
    if max_sequential > 0 and ctx.counter.longest_sequential_run() > max_sequential:
        violations.append(_violation(PasswordError.PASSWORD_TOO_MANY_REPEAT, detail="sequential"))

    # counts the most frequent character overall, not the longest run
    max_repeat = ctx.reader.read_int(PasswordRule.MaximumRepeat)
    if max_repeat > 0 and ctx.counter.longest_repeat_run() > max_repeat:
        violations.append(_violation(PasswordError.PASSWORD_TOO_MANY_REPEAT, detail="total"))

    max_consecutive = ctx.reader.read_int(PasswordRule.MaximumConsecutive)
    if too_many_consecutive_chars(ctx.password, max_consecutive):
        violations.append(_violation(PasswordError.PASSWORD_TOO_MANY_CONSECUTIVE))
    return violations


def check_unique(ctx: RuleCheckContext) -> list[PasswordViolation]:
    violations: list[PasswordViolation] = []
    unique = ctx.counter.distinct_char_count()

    min_unique = ctx.reader.read_int(PasswordRule.MinimumUnique)
    if min_unique > 0 and unique < min_unique:
        violations.append(_violation(PasswordError.PASSWORD_NOT_ENOUGH_UNIQUE))

    max_unique = ctx.reader.read_int(PasswordRule.MaximumUnique)
    if max_unique > 0 and unique > max_unique:
        violations.append(_violation(PasswordError.PASSWORD_TOO_MANY_UNIQUE))
    return violations


def check_ad_rules(ctx: RuleCheckContext) -> list[PasswordViolation]:
    return check_ad_complexity(
        ctx.reader.read_ad_complexity(),
        ctx.password,
        ctx.counter,
        ctx.reader.read_int(PasswordRule.ADComplexityMaxViolations),
        ctx.user,
    )


def check_disallowed_values(ctx: RuleCheckContext) -> list[PasswordViolation]:
    violations: list[PasswordViolation] = []
    lowered = ctx.password.lower()
    for value in dict.fromkeys(ctx.reader.read_list(PasswordRule.DisallowedValues)):
        expanded = ctx.expander.expand(value) if ctx.expander else value
        if not expanded or not expanded.strip():
            continue
        if expanded.lower() in lowered:
            violations.append(_violation(PasswordError.PASSWORD_USING_DISALLOWED))
    return violations


def check_disallowed_attributes(ctx: RuleCheckContext) -> list[PasswordViolation]:
    if ctx.user is None:
        return []

    violations: list[PasswordViolation] = []
    for config in ctx.reader.read_list(PasswordRule.DisallowedAttributes):
        name, _, threshold = config.strip().partition(":")
        value = ctx.user.attribute(name)
        if contains_disallowed_value(ctx.password, value, parse_int(threshold)):
            logger.debug("Password rejected, contains user attribute", attribute=name)
            violations.append(_violation(PasswordError.PASSWORD_SAMEASATTR, detail=name))
    return violations


def check_strength(ctx: RuleCheckContext) -> list[PasswordViolation]:
    required = ctx.reader.read_int(PasswordRule.MinimumStrength)
    if required <= 0 or ctx.strength_scorer is None:
        return []

    strength = ctx.strength_scorer(ctx.password)
    if strength < required:
        logger.debug(
            "Password rejected, strength below policy requirement",
            strength=strength,
            required=required,
        )
        return [_violation(PasswordError.PASSWORD_TOO_WEAK, detail=str(required))]
    return []


def check_regex(ctx: RuleCheckContext) -> list[PasswordViolation]:
    violations: list[PasswordViolation] = []
    for pattern in ctx.reader.read_regex_list(PasswordRule.RegExMatch, ctx.expander):
        if pattern.fullmatch(ctx.password) is None:
            violations.append(_violation(PasswordError.PASSWORD_INVALID_CHAR, detail=pattern.pattern))
    for pattern in ctx.reader.read_regex_list(PasswordRule.RegExNoMatch, ctx.expander):
        if pattern.fullmatch(ctx.password) is not None:
            violations.append(_violation(PasswordError.PASSWORD_INVALID_CHAR, detail=pattern.pattern))
    return violations


def check_char_groups(ctx: RuleCheckContext) -> list[PasswordViolation]:
    required = ctx.reader.read_int(PasswordRule.CharGroupsMinMatch)
    if required <= 0:
        return []

    groups = ctx.reader.read_regex_list(PasswordRule.CharGroupsValues)
    if not groups:
        return []

    matched = sum(1 for pattern in groups if pattern.search(ctx.password))
    if matched < required:
        return [_violation(PasswordError.PASSWORD_NOT_ENOUGH_GROUPS, detail=str(required))]
    return []


def check_wordlist(ctx: RuleCheckContext) -> list[PasswordViolation]:
    if not ctx.reader.read_bool(PasswordRule.EnableWordlist):
        return []

    if ctx.wordlist is not None and ctx.wordlist.status() is ServiceStatus.OPEN:
        if ctx.wordlist.contains_word(ctx.password):
            return [_violation(PasswordError.PASSWORD_INWORDLIST, detail="wordlist")]
        return []

    if ctx.wordlist_fail_when_closed:
        raise ServiceUnavailableError("wordlist", "wordlist service is not available")
    return []


def check_shared_history(ctx: RuleCheckContext) -> list[PasswordViolation]:
    history = ctx.shared_history
    if not ctx.shared_history_enabled or history is None or history.status() is not ServiceStatus.OPEN:
        return []
    if history.contains_word(ctx.password):
        return [_violation(PasswordError.PASSWORD_INWORDLIST, detail="shared-history")]
    return []


RULE_CHECKS: tuple[RuleCheck, ...] = (
    check_old_password,
    check_length,
    check_numeric,
    check_alpha,
    check_casing,
    check_special,
    check_repeats,
    check_unique,
    check_ad_rules,
    check_disallowed_values,
    check_disallowed_attributes,
    check_strength,
    check_regex,
    check_char_groups,
    check_wordlist,
    check_shared_history,
)


def run_rule_checks(
    ctx: RuleCheckContext,
    fail_fast: bool = False,
    checks: tuple[RuleCheck, ...] = RULE_CHECKS,
) -> list[PasswordViolation]:
    """Run rule checks in order and collect their violations.

    Args:
        ctx: Check context for the candidate password.
        fail_fast: Stop after the first check that reports a violation.
        checks: Checks to run, defaulting to the full ordered set.

    Returns:
        All violations found, in check order.

    Raises:
        ServiceUnavailableError: If a required collaborator is unavailable.
    """
    if ctx.password is None:
        return [_violation(PasswordError.ERROR_INTERNAL, detail="missing password")]

    violations: list[PasswordViolation] = []
    for check in checks:
        found = check(ctx)
        if found:
            violations.extend(found)
            if fail_fast:
                break
    return violations
