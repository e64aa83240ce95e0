"""Command-line interface for passpolicy.

This module provides the CLI commands for checking passwords against a
policy, generating random passwords and inspecting policies. Policies are
read from a JSON object of rule key to value and/or ``--rule KEY=VALUE``
options, the latter taking precedence.
"""

import json
import random
from typing import Any, NoReturn

import click

from passpolicy.core.config import get_settings
from passpolicy.core.logging import LoggingContext, configure_logging, get_logger
from passpolicy.domain.entities.password_policy import PasswordPolicy
from passpolicy.domain.entities.password_rule import PasswordRule
from passpolicy.domain.entities.user_context import UserContext
from passpolicy.domain.exceptions import (
    ImpossiblePasswordPolicyError,
    PolicyConfigurationError,
    ServiceUnavailableError,
)
from passpolicy.domain.services.password_validator import PasswordRuleValidator
from passpolicy.domain.services.random_generator import (
    RandomGeneratorConfig,
    RandomPasswordGenerator,
)
from passpolicy.infrastructure.services.external_rule_client import ExternalRuleClient
from passpolicy.infrastructure.services.wordlist import StaticWordlist

logger = get_logger(__name__)


def _parse_pairs(values: tuple[str, ...], option: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint=option)
        pairs[key.strip()] = value
    return pairs


def _load_policy(policy_file: Any, rules: tuple[str, ...]) -> PasswordPolicy:
    values: dict[str, Any] = {}
    if policy_file is not None:
        try:
            data = json.load(policy_file)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"invalid JSON: {e}", param_hint="--policy")
        if not isinstance(data, dict):
            raise click.BadParameter("policy file must contain a JSON object", param_hint="--policy")
        values.update(data)
    values.update(_parse_pairs(rules, "--rule"))

    unknown = [key for key in values if PasswordRule.for_key(key) is None]
    if unknown:
        logger.warning("Ignoring unknown policy keys", keys=unknown)
    return PasswordPolicy(values)


def policy_options(func):
    """Add the --policy and --rule options to a command."""
    func = click.option(
        "--rule",
        "rules",
        multiple=True,
        metavar="KEY=VALUE",
        help="Set one policy rule (repeatable, overrides --policy)",
    )(func)
    func = click.option(
        "--policy",
        "policy_file",
        type=click.File("r"),
        default=None,
        help="JSON file with rule key/value pairs",
    )(func)
    return func


@click.group()
@click.version_option(version="0.1.0", prog_name="passpolicy")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides environment)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """passpolicy - Password policy engine.

    Validate passwords against configurable rule sets and generate
    random passwords that satisfy them.
    """
    settings = get_settings()
    if log_level is not None:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@click.argument("password", required=False)
@policy_options
@click.option("--old-password", default=None, help="Current password of the user")
@click.option("--username", default=None, help="Login name of the user")
@click.option(
    "--attr",
    "attrs",
    multiple=True,
    metavar="NAME=VALUE",
    help="User attribute for attribute rules (repeatable)",
)
@click.option(
    "--wordlist",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="File with one disallowed word per line",
)
@click.option("--json", "as_json", is_flag=True, help="Print violations as JSON")
@click.pass_context
def check(
    ctx: click.Context,
    password: str | None,
    policy_file: Any,
    rules: tuple[str, ...],
    old_password: str | None,
    username: str | None,
    attrs: tuple[str, ...],
    wordlist: str | None,
    as_json: bool,
) -> None:
    """Check a password against a policy.

    Exits with status 1 when the password breaks the policy and 2 when a
    required service is unavailable. Prompts for the password if it is
    not given.
    """
    settings = ctx.obj["settings"]
    policy = _load_policy(policy_file, rules)
    attributes = _parse_pairs(attrs, "--attr")
    if password is None:
        password = click.prompt("Password", hide_input=True)

    user = None
    if username or attributes:
        user = UserContext(user_id=username, username=username, attributes=attributes)

    validator = PasswordRuleValidator(
        policy,
        settings=settings,
        wordlist=StaticWordlist.from_file(wordlist) if wordlist else None,
        external_rule_client=ExternalRuleClient.from_settings(settings),
    )

    with LoggingContext(operation="check", username=username or ""):
        try:
            violations = validator.validate(password, old_password, user)
        except ServiceUnavailableError as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(2)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "valid": not violations,
                    "violations": [
                        {"code": v.code, "message": v.message, "detail": v.detail}
                        for v in violations
                    ],
                }
            )
        )
    elif violations:
        for v in violations:
            click.echo(f"{v.code}: {v.message}")
    else:
        click.echo("OK")

    if violations:
        raise SystemExit(1)


@cli.command()
@policy_options
@click.option("--min-length", type=click.IntRange(min=0), default=6, help="Desired minimum length")
@click.option("--max-length", type=click.IntRange(min=0), default=16, help="Desired maximum length")
@click.option(
    "--min-strength",
    type=click.IntRange(min=0, max=100),
    default=45,
    help="Desired minimum strength score",
)
@click.option(
    "--seed-phrase",
    "seed_phrases",
    multiple=True,
    help="Phrase to build passwords from (repeatable)",
)
@click.option("--seed", type=int, default=None, help="Random seed for reproducible output")
@click.option("--count", type=click.IntRange(min=1), default=1, help="Number of passwords")
@click.pass_context
def generate(
    ctx: click.Context,
    policy_file: Any,
    rules: tuple[str, ...],
    min_length: int,
    max_length: int,
    min_strength: int,
    seed_phrases: tuple[str, ...],
    seed: int | None,
    count: int,
) -> None:
    """Generate random passwords that satisfy a policy.

    Exits with status 1 if any password could not be made to satisfy the
    policy within the attempt budget, and 2 if the request is impossible.
    """
    settings = ctx.obj["settings"]
    policy = _load_policy(policy_file, rules)
    rng = random.Random(seed) if seed is not None else random.SystemRandom()
    generator = RandomPasswordGenerator(policy, settings=settings, rng=rng)
    config = RandomGeneratorConfig(
        seed_phrases=seed_phrases,
        minimum_length=min_length,
        maximum_length=max_length,
        minimum_strength=min_strength,
    )

    unsatisfied = 0
    with LoggingContext(operation="generate"):
        for _ in range(count):
            try:
                result = generator.generate(config)
            except (PolicyConfigurationError, ImpossiblePasswordPolicyError) as e:
                click.echo(f"Error: {e}", err=True)
                raise SystemExit(2)
            if not result.satisfied:
                unsatisfied += 1
            click.echo(result.password)

    if unsatisfied:
        click.echo(f"Warning: {unsatisfied} password(s) do not satisfy the policy", err=True)
        raise SystemExit(1)


@cli.command()
@policy_options
@click.option("--json", "as_json", is_flag=True, help="Print rules as a JSON object")
def rules(policy_file: Any, rules: tuple[str, ...], as_json: bool) -> None:
    """Show every rule with its effective value."""
    policy = _load_policy(policy_file, rules)

    if as_json:
        click.echo(json.dumps({rule.key: policy.value(rule) for rule in PasswordRule}, indent=2))
        return

    for rule in PasswordRule:
        value = policy.value(rule).replace("\n", "\\n")
        marker = "*" if policy.is_set(rule) else " "
        click.echo(f"{marker} {rule.key:<28} {rule.rule_type.value:<8} {value}")


@cli.command()
@policy_options
def health(policy_file: Any, rules: tuple[str, ...]) -> None:
    """Report policy settings no password can satisfy.

    Exits with status 1 when problems are found.
    """
    policy = _load_policy(policy_file, rules)
    problems = policy.health()
    if not problems:
        click.echo("Policy is healthy.")
        return

    for problem in problems:
        click.echo(f"- {problem}")
    raise SystemExit(1)


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `passpolicy` command is run
    or when using `python -m passpolicy`.
    """
    cli()


if __name__ == "__main__":
    main()
