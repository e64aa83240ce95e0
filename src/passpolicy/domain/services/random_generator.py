"""Random password generation.

Generation builds a candidate from whole seed phrases, validates it against
the policy in fail-fast mode and applies one targeted repair per failed
attempt. Every ``randomgen_jitter_count`` attempts the candidate is thrown
away and rebuilt so the repair loop cannot get stuck. When the attempt budget
runs out the last candidate is returned and the failure is logged; only an
empty character pool is raised, since retrying cannot fix that.
"""

import random
import re
from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from passpolicy.core.config import Settings, get_settings
from passpolicy.core.logging import get_logger
from passpolicy.domain.entities.password_policy import PasswordPolicy
from passpolicy.domain.entities.password_rule import PasswordRule
from passpolicy.domain.entities.violation import PasswordError, PasswordViolation
from passpolicy.domain.exceptions import PolicyConfigurationError
from passpolicy.domain.services.char_classifier import CharacterCategory
from passpolicy.domain.services.char_counter import PasswordCharCounter
from passpolicy.domain.services.password_buffer import MutablePasswordBuffer
from passpolicy.domain.services.password_validator import PasswordRuleValidator
from passpolicy.domain.services.rule_reader import PolicyRuleReader
from passpolicy.domain.services.seed_machine import SeedMachine
from passpolicy.domain.services.strength import StrengthScorer
from passpolicy.infrastructure.services.wordlist import WordlistService

logger = get_logger(__name__)

MINIMUM_STRENGTH = 0
MAXIMUM_STRENGTH = 100

_NOT_ENOUGH_REPAIRS = (
    (PasswordError.PASSWORD_NOT_ENOUGH_NUM, CharacterCategory.DIGIT),
    (PasswordError.PASSWORD_NOT_ENOUGH_SPECIAL, CharacterCategory.SPECIAL),
    (PasswordError.PASSWORD_NOT_ENOUGH_UPPER, CharacterCategory.UPPER),
    (PasswordError.PASSWORD_NOT_ENOUGH_LOWER, CharacterCategory.LOWER),
    (PasswordError.PASSWORD_NOT_ENOUGH_ALPHA, CharacterCategory.LETTER),
    (PasswordError.PASSWORD_NOT_ENOUGH_NONALPHA, CharacterCategory.NON_LETTER),
)

_TOO_MANY_REPAIRS = (
    (PasswordError.PASSWORD_TOO_MANY_NUMERIC, CharacterCategory.DIGIT),
    (PasswordError.PASSWORD_TOO_MANY_SPECIAL, CharacterCategory.SPECIAL),
    (PasswordError.PASSWORD_TOO_MANY_UPPER, CharacterCategory.UPPER),
    (PasswordError.PASSWORD_TOO_MANY_LOWER, CharacterCategory.LOWER),
    (PasswordError.PASSWORD_TOO_MANY_ALPHA, CharacterCategory.LETTER),
    (PasswordError.PASSWORD_TOO_MANY_NONALPHA, CharacterCategory.NON_LETTER),
)


def figure_minimum_strength(requested: int, policy_strength: int, ceiling_quirk: bool = False) -> int:
    """Combine the requested and policy minimum strength.

    Args:
        requested: Strength asked for by the caller.
        policy_strength: The policy's MinimumStrength.
        ceiling_quirk: Reproduce the legacy ``max(MAXIMUM_STRENGTH, policy)``
            behaviour, which pins any configured policy strength to 100.

    Returns:
        The effective minimum strength in [0, 100].
    """
    if ceiling_quirk and policy_strength > 0:
        return max(MAXIMUM_STRENGTH, policy_strength)
    strength = max(requested, policy_strength)
    return max(MINIMUM_STRENGTH, min(strength, MAXIMUM_STRENGTH))


@dataclass(frozen=True)
class RandomGeneratorConfig:
    """Caller-requested generation bounds.

    Attributes:
        seed_phrases: Phrases candidates are assembled from. Empty selects the default corpus.
        minimum_length: Desired minimum length.
        maximum_length: Desired maximum length.
        minimum_strength: Desired minimum strength score.
        max_attempts: Validation attempts before giving up. None uses settings.
    """

    seed_phrases: tuple[str, ...] = ()
    minimum_length: int = 6
    maximum_length: int = 16
    minimum_strength: int = 45
    max_attempts: int | None = None

    def __post_init__(self) -> None:
        if self.minimum_length < 0 or self.maximum_length < 0:
            raise ValueError("Generator lengths must not be negative")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        object.__setattr__(self, "seed_phrases", tuple(self.seed_phrases))

    def resolve(self, policy: PasswordPolicy, settings: Settings) -> "RandomGeneratorConfig":
        """Narrow the request against a policy and the engine ceilings.

        Raises:
            PolicyConfigurationError: If the required minimum length exceeds
                ``randomgen_max_length``.
        """
        reader = PolicyRuleReader(policy)
        ceiling = settings.randomgen_max_length

        minimum = max(self.minimum_length, reader.read_int(PasswordRule.MinimumLength))
        if minimum > ceiling:
            raise PolicyConfigurationError(
                f"Minimum random password length {minimum} exceeds the generator "
                f"limit of {ceiling}"
            )

        policy_max = reader.read_int(PasswordRule.MaximumLength)
        maximum = self.maximum_length if policy_max <= 0 else min(self.maximum_length, policy_max)
        maximum = max(min(maximum, ceiling), minimum)

        strength = figure_minimum_strength(
            self.minimum_strength,
            reader.read_int(PasswordRule.MinimumStrength),
            settings.randomgen_strength_ceiling_quirk,
        )
        return replace(
            self,
            minimum_length=minimum,
            maximum_length=maximum,
            minimum_strength=strength,
            max_attempts=self.max_attempts or settings.randomgen_max_attempts,
        )


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generation call.

    Attributes:
        password: The generated password.
        attempts: Validation attempts used.
        satisfied: False when the attempt budget ran out before the policy was met.
        config: The effective configuration used.
    """

    password: str
    attempts: int
    satisfied: bool
    config: RandomGeneratorConfig = field(repr=False)


class RandomPasswordGenerator:
    """Generates random passwords that satisfy a policy.

    Example:
        generator = RandomPasswordGenerator(policy, rng=random.Random(42))
        password = generator.generate().password
    """

    def __init__(
        self,
        policy: PasswordPolicy | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        strength_scorer: StrengthScorer | None = None,
        wordlist: WordlistService | None = None,
        shared_history: WordlistService | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            policy: Policy generated passwords must satisfy. Defaults to the default policy.
            settings: Engine settings. Loaded from the environment if omitted.
            rng: Random source. A fresh SystemRandom is used if omitted.
            strength_scorer: Scorer for MinimumStrength. Chosen from settings if omitted.
            wordlist: Dictionary membership service.
            shared_history: Global password history membership service.
        """
        self.policy = policy if policy is not None else PasswordPolicy.default_policy()
        self.settings = settings or get_settings()
        self.rng = rng if rng is not None else random.SystemRandom()
        self.strength_scorer = strength_scorer
        self.wordlist = wordlist
        self.shared_history = shared_history
        self._disallowed_inputs = self._compile_disallowed_inputs(self.settings.disallowed_http_inputs)

    @staticmethod
    def _compile_disallowed_inputs(sources: Iterable[str]) -> list[re.Pattern[str]]:
        patterns = []
        for source in sources:
            try:
                patterns.append(re.compile(source))
            except re.error as e:
                logger.error("Invalid disallowed input pattern, skipping", pattern=source, error=str(e))
        return patterns

    def effective_policy(self, config: RandomGeneratorConfig) -> PasswordPolicy:
        """Policy with length and strength rules replaced by the resolved bounds."""
        return self.policy.with_values(
            {
                PasswordRule.MinimumLength: config.minimum_length,
                PasswordRule.MaximumLength: config.maximum_length,
                PasswordRule.MinimumStrength: config.minimum_strength,
            }
        )

    def _is_disallowed_input(self, password: str) -> bool:
        return any(pattern.fullmatch(password) for pattern in self._disallowed_inputs)

    def _new_candidate(
        self,
        buffer: MutablePasswordBuffer,
        seed_machine: SeedMachine,
        config: RandomGeneratorConfig,
    ) -> None:
        if config.maximum_length - config.minimum_length <= 1:
            target = config.maximum_length
        else:
            target = self.rng.randint(config.minimum_length, config.maximum_length)

        buffer.reset()
        while len(buffer) < target:
            buffer.append(seed_machine.random_seed())

    def _randomize(self, buffer: MutablePasswordBuffer) -> None:
        choice = self.rng.randrange(7)
        if choice < 2:
            buffer.add_random_char_of_type(CharacterCategory.SPECIAL)
        elif choice < 4:
            buffer.add_random_char_of_type(CharacterCategory.DIGIT)
        elif choice == 4:
            buffer.add_random_char_of_type(CharacterCategory.UPPER)
        elif choice == 5:
            buffer.add_random_char_of_type(CharacterCategory.LOWER)
        else:
            buffer.randomize_casing()

    def _repair(self, buffer: MutablePasswordBuffer, violations: list[PasswordViolation]) -> None:
        """Apply the single highest-precedence repair for a set of violations."""
        errors = {violation.error for violation in violations}

        if PasswordError.PASSWORD_TOO_SHORT in errors:
            buffer.add_random_char()
            return
        if PasswordError.PASSWORD_TOO_LONG in errors:
            buffer.delete_random_char()
            return
        if errors & {PasswordError.PASSWORD_FIRST_IS_NUMERIC, PasswordError.PASSWORD_FIRST_IS_SPECIAL}:
            buffer.delete_char_at(0)
            return
        if errors & {PasswordError.PASSWORD_LAST_IS_NUMERIC, PasswordError.PASSWORD_LAST_IS_SPECIAL}:
            buffer.delete_char_at(len(buffer) - 1)
            return

        for error, category in _NOT_ENOUGH_REPAIRS:
            if error in errors:
                buffer.add_random_char_of_type(category)
                return

        counter = PasswordCharCounter(buffer.value)
        for error, category in _TOO_MANY_REPAIRS:
            if error in errors and counter.has_any(category):
                buffer.delete_random_char_of_type(category)
                return

        # too weak, or nothing targeted applies
        self._randomize(buffer)

    def generate(self, config: RandomGeneratorConfig | None = None) -> GenerationResult:
        """Generate a password satisfying the policy.

        Args:
            config: Requested bounds. Defaults to RandomGeneratorConfig().

        Returns:
            The generated password with attempt bookkeeping.

        Raises:
            PolicyConfigurationError: If the request exceeds the engine ceilings.
            ImpossiblePasswordPolicyError: If a required character pool is empty.
            ServiceUnavailableError: If a required wordlist is unavailable.
        """
        effective = (config or RandomGeneratorConfig()).resolve(self.policy, self.settings)
        policy = self.effective_policy(effective)
        validator = PasswordRuleValidator(
            policy,
            settings=self.settings,
            strength_scorer=self.strength_scorer,
            wordlist=self.wordlist,
            shared_history=self.shared_history,
        )
        seed_machine = SeedMachine(self.rng, effective.seed_phrases)
        buffer = MutablePasswordBuffer(self.rng, seed_machine)
        jitter_count = self.settings.randomgen_jitter_count

        self._new_candidate(buffer, seed_machine, effective)
        attempts = 0
        satisfied = False
        while attempts < effective.max_attempts:
            attempts += 1
            if attempts % jitter_count == 0:
                self._new_candidate(buffer, seed_machine, effective)

            violations = validator.internal_policy_validator(buffer.value, fail_fast=True)
            if violations:
                self._repair(buffer, violations)
                continue
            if self._is_disallowed_input(buffer.value):
                self._new_candidate(buffer, seed_machine, effective)
                continue
            satisfied = True
            break

        if satisfied:
            logger.debug("Finished random password generation", attempts=attempts)
        else:
            remaining = validator.internal_policy_validator(buffer.value)
            logger.error(
                "Random password generation exhausted attempts, returning last candidate",
                attempts=attempts,
                remaining_violations=[v.code for v in remaining],
                length=len(buffer),
            )
        return GenerationResult(
            password=buffer.value,
            attempts=attempts,
            satisfied=satisfied,
            config=effective,
        )


def create_random_password(
    policy: PasswordPolicy | None = None,
    config: RandomGeneratorConfig | None = None,
    settings: Settings | None = None,
    rng: random.Random | None = None,
    **kwargs,
) -> str:
    """Generate a password for a policy and return only the password string."""
    generator = RandomPasswordGenerator(policy, settings=settings, rng=rng, **kwargs)
    return generator.generate(config).password
