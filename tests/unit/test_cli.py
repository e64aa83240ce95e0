"""Unit tests for the passpolicy command line."""

import json

import pytest
from click.testing import CliRunner

from passpolicy.cli import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def invoke(runner, *args, **kwargs):
    return runner.invoke(cli, ["--log-level", "ERROR", *args], **kwargs)


class TestCheckCommand:
    def test_passing_password(self, runner):
        result = invoke(runner, "check", "abcdefgh", "--rule", "MinimumLength=8")
        assert result.exit_code == 0
        assert "OK" in result.stdout

    def test_failing_password(self, runner):
        result = invoke(runner, "check", "abc", "--rule", "MinimumLength=8")
        assert result.exit_code == 1
        assert "PASSWORD_TOO_SHORT" in result.stdout

    def test_json_output(self, runner):
        result = invoke(
            runner, "check", "abc", "--rule", "MinimumLength=8", "--rule", "MinimumNumeric=1", "--json"
        )
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["valid"] is False
        assert [v["code"] for v in data["violations"]] == [
            "PASSWORD_TOO_SHORT",
            "PASSWORD_NOT_ENOUGH_NUM",
        ]
        assert data["violations"][0]["detail"] == "8"

    def test_policy_file(self, runner, tmp_path):
        policy_file = tmp_path / "policy.json"
        policy_file.write_text(json.dumps({"DisallowedValues": ["CompanyName"], "MinimumLength": 8}))

        result = invoke(runner, "check", "MyCompanyName123!", "--policy", str(policy_file))
        assert result.exit_code == 1
        assert "PASSWORD_USING_DISALLOWED" in result.stdout

        result = invoke(runner, "check", "MyOrg123!", "--policy", str(policy_file))
        assert result.exit_code == 0

    def test_rule_overrides_policy_file(self, runner, tmp_path):
        policy_file = tmp_path / "policy.json"
        policy_file.write_text(json.dumps({"MinimumLength": 20}))
        result = invoke(runner, "check", "abcdefgh", "--policy", str(policy_file), "--rule", "MinimumLength=8")
        assert result.exit_code == 0

    def test_invalid_policy_file(self, runner, tmp_path):
        policy_file = tmp_path / "policy.json"
        policy_file.write_text("[1, 2]")
        result = invoke(runner, "check", "abc", "--policy", str(policy_file))
        assert result.exit_code == 2

    def test_invalid_rule_option(self, runner):
        result = invoke(runner, "check", "abc", "--rule", "MinimumLength")
        assert result.exit_code == 2

    def test_user_attributes(self, runner):
        result = invoke(
            runner,
            "check",
            "John2024!",
            "--rule",
            "DisallowedAttributes=givenName",
            "--username",
            "jdoe",
            "--attr",
            "givenName=John",
        )
        assert result.exit_code == 1
        assert "PASSWORD_SAMEASATTR" in result.stdout

    def test_old_password(self, runner):
        result = invoke(
            runner, "check", "Secret1", "--rule", "DisallowCurrent=true", "--old-password", "secret1"
        )
        assert result.exit_code == 1
        assert "PASSWORD_SAMEASOLD" in result.stdout

    def test_wordlist(self, runner, tmp_path):
        words = tmp_path / "words.txt"
        words.write_text("letmein\n")
        result = invoke(runner, "check", "LetMeIn", "--wordlist", str(words))
        assert result.exit_code == 1
        assert "PASSWORD_INWORDLIST" in result.stdout

    def test_prompts_for_password(self, runner):
        result = invoke(runner, "check", "--rule", "MinimumLength=8", input="abcdefgh\n")
        assert result.exit_code == 0
        assert "OK" in result.stdout


class TestGenerateCommand:
    def test_generate_count(self, runner):
        result = invoke(
            runner,
            "generate",
            "--seed", "42",
            "--count", "3",
            "--min-strength", "0",
            "--rule", "MinimumNumeric=1",
            "--rule", "MinimumUpperCase=1",
        )
        assert result.exit_code == 0
        passwords = result.stdout.splitlines()
        assert len(passwords) == 3
        for password in passwords:
            assert 6 <= len(password) <= 16
            assert any(c.isdigit() for c in password)
            assert any(c.isupper() for c in password)

    def test_seed_is_reproducible(self, runner):
        args = ("generate", "--seed", "7", "--count", "2", "--min-strength", "0")
        assert invoke(runner, *args).stdout == invoke(runner, *args).stdout

    def test_length_options(self, runner):
        result = invoke(
            runner, "generate", "--seed", "1", "--min-length", "10", "--max-length", "10", "--min-strength", "0"
        )
        assert result.exit_code == 0
        assert len(result.stdout.strip()) == 10

    def test_impossible_request(self, runner):
        result = invoke(runner, "generate", "--rule", "MinimumLength=100")
        assert result.exit_code == 2


class TestPolicyCommands:
    def test_rules_json(self, runner):
        result = invoke(runner, "rules", "--json", "--rule", "MinimumLength=8")
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["MinimumLength"] == "8"
        assert data["AllowNumeric"] == "true"

    def test_rules_table_marks_set_rules(self, runner):
        result = invoke(runner, "rules", "--rule", "MinimumLength=8")
        assert result.exit_code == 0
        line = next(line for line in result.stdout.splitlines() if "MinimumLength" in line)
        assert line.startswith("*")
        assert line.rstrip().endswith("8")

    def test_health_ok(self, runner):
        result = invoke(runner, "health", "--rule", "MinimumLength=8")
        assert result.exit_code == 0
        assert "healthy" in result.stdout

    def test_health_problems(self, runner):
        result = invoke(runner, "health", "--rule", "MinimumLength=10", "--rule", "MaximumLength=8")
        assert result.exit_code == 1
        assert "MinimumLength" in result.stdout


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
