"""Password validation service.

Validates passwords against a PasswordPolicy. The rule checks run in-process;
an external REST rule service and the directory's own policy can be layered
on top. Rule failures come back as lists of PasswordViolation. Only
infrastructure failures raise.
"""

from passpolicy.core.config import Settings, get_settings
from passpolicy.core.logging import get_logger
from passpolicy.core.macros.expander import MacroExpander
from passpolicy.domain.entities.password_policy import PasswordPolicy
from passpolicy.domain.entities.user_context import UserContext
from passpolicy.domain.entities.violation import PasswordError, PasswordViolation
from passpolicy.domain.exceptions import PasswordDataValidationError
from passpolicy.domain.services.rule_checks import RuleCheckContext, run_rule_checks
from passpolicy.domain.services.strength import StrengthScorer, strength_scorer_for
from passpolicy.infrastructure.directory import (
    DirectoryPolicyTester,
    DirectoryPolicyViolation,
    DirectoryUnavailableError,
)
from passpolicy.infrastructure.services.external_rule_client import ExternalRuleClient
from passpolicy.infrastructure.services.wordlist import WordlistService

logger = get_logger(__name__)


class PasswordRuleValidator:
    """Validates passwords against one policy.

    Example:
        validator = PasswordRuleValidator(policy)
        violations = validator.validate("Secret123!", user=user)
    """

    def __init__(
        self,
        policy: PasswordPolicy,
        settings: Settings | None = None,
        strength_scorer: StrengthScorer | None = None,
        wordlist: WordlistService | None = None,
        shared_history: WordlistService | None = None,
        external_rule_client: ExternalRuleClient | None = None,
        static_macros: dict[str, str] | None = None,
    ) -> None:
        """Initialize the validator.

        Args:
            policy: Effective policy to validate against.
            settings: Engine settings. Loaded from the environment if omitted.
            strength_scorer: Scorer for MinimumStrength. Chosen from settings if omitted.
            wordlist: Dictionary membership service.
            shared_history: Global password history membership service.
            external_rule_client: REST rule service, consulted by validate().
            static_macros: Extra macros available to disallowed values and regexes.
        """
        self.policy = policy
        self.settings = settings or get_settings()
        self.strength_scorer = strength_scorer or strength_scorer_for(self.settings)
        self.wordlist = wordlist
        self.shared_history = shared_history
        self.external_rule_client = external_rule_client
        self.static_macros = dict(static_macros or {})

    def _context(
        self,
        password: str,
        old_password: str | None,
        user: UserContext | None,
    ) -> RuleCheckContext:
        return RuleCheckContext.build(
            password,
            self.policy,
            old_password=old_password,
            user=user,
            expander=MacroExpander(user, self.static_macros),
            strength_scorer=self.strength_scorer,
            wordlist=self.wordlist,
            shared_history=self.shared_history,
            wordlist_fail_when_closed=self.settings.wordlist_fail_when_closed,
            shared_history_enabled=self.settings.shared_history_enabled,
        )

    def internal_policy_validator(
        self,
        password: str,
        old_password: str | None = None,
        user: UserContext | None = None,
        fail_fast: bool = False,
    ) -> list[PasswordViolation]:
        """Run the in-process rule checks only.

        Args:
            password: The candidate password.
            old_password: The user's current password, if known.
            user: User the password is for.
            fail_fast: Stop after the first failing rule family.

        Returns:
            Violations found, in check order. Empty if the password passes.

        Raises:
            ServiceUnavailableError: If the wordlist is closed and required.
        """
        return run_rule_checks(self._context(password, old_password, user), fail_fast=fail_fast)

    def validate(
        self,
        password: str,
        old_password: str | None = None,
        user: UserContext | None = None,
    ) -> list[PasswordViolation]:
        """Run every rule check, then the external rule service if configured.

        Returns:
            All violations found. Empty if the password passes.

        Raises:
            ServiceUnavailableError: If a required collaborator is unavailable.
        """
        violations = self.internal_policy_validator(password, old_password, user)
        if self.external_rule_client is not None and password is not None:
            violations.extend(self.external_rule_client.check(password, self.policy, user))
        return violations

    def test_against_directory_policy(
        self,
        password: str,
        directory: DirectoryPolicyTester | None,
        bypass: bool = False,
    ) -> list[PasswordViolation]:
        """Test a password against the directory's native policy.

        Args:
            password: The candidate password.
            directory: Directory tester. None behaves like a bypass.
            bypass: Skip the directory check entirely.

        Returns:
            At most one violation translated from the directory's error.

        Raises:
            DirectoryUnavailableError: If the directory cannot be reached.
        """
        if directory is None or bypass:
            return []

        try:
            directory.test_password_policy(password)
        except NotImplementedError as e:
            logger.debug("Directory does not support password policy testing", error=str(e))
            return []
        except DirectoryUnavailableError as e:
            logger.warning("Directory unavailable while testing password policy", error=str(e))
            raise
        except DirectoryPolicyViolation as e:
            error = PasswordError.__members__.get(e.error_code or "", PasswordError.PASSWORD_UNKNOWN_VALIDATION)
            logger.debug("Directory rejected password", error_code=e.error_code)
            return [PasswordViolation(error=error, message=str(e) or error.default_message)]
        return []

    def test_password(
        self,
        password: str,
        old_password: str | None = None,
        user: UserContext | None = None,
        directory: DirectoryPolicyTester | None = None,
    ) -> bool:
        """Validate a password and raise on the first violation.

        Returns:
            True when the password passes every check.

        Raises:
            PasswordDataValidationError: Wrapping the first violation found.
            ServiceUnavailableError: If a required collaborator is unavailable.
            DirectoryUnavailableError: If the directory cannot be reached.
        """
        violations = self.validate(password, old_password, user)
        if violations:
            raise PasswordDataValidationError(violations[0])

        violations = self.test_against_directory_policy(password, directory)
        if violations:
            raise PasswordDataValidationError(violations[0])
        return True

    def is_valid(
        self,
        password: str,
        old_password: str | None = None,
        user: UserContext | None = None,
    ) -> bool:
        """Check if a password passes validate()."""
        return len(self.validate(password, old_password, user)) == 0
