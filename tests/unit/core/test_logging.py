import json

from passpolicy.core.config import Settings
from passpolicy.core.logging import (
    LoggingContext,
    clear_context,
    configure_logging,
    get_logger,
)


def _json_lines(err: str) -> list[dict]:
    return [json.loads(line) for line in err.splitlines() if line.startswith("{")]


def test_json_logging_renames_event_to_message(capsys):
    configure_logging(Settings(_env_file=None, environment="testing", log_format="json"))

    get_logger("passpolicy.test").info("Policy loaded", rule="MinimumLength")

    entries = _json_lines(capsys.readouterr().err)
    assert entries
    entry = entries[-1]
    assert entry["message"] == "Policy loaded"
    assert "event" not in entry
    assert entry["rule"] == "MinimumLength"
    assert entry["level"] == "info"
    assert "timestamp" in entry
    assert "logger" in entry


def test_log_level_filters_entries(capsys):
    configure_logging(
        Settings(_env_file=None, environment="testing", log_format="json", log_level="WARNING")
    )

    logger = get_logger()
    logger.info("hidden")
    logger.warning("shown")

    messages = [entry["message"] for entry in _json_lines(capsys.readouterr().err)]
    assert "shown" in messages
    assert "hidden" not in messages


def test_console_format_is_not_json(capsys):
    configure_logging(Settings(_env_file=None, environment="testing", log_format="console"))

    get_logger().info("console entry")

    err = capsys.readouterr().err
    assert "console entry" in err
    assert not _json_lines(err)


def test_logging_context_binds_and_unbinds(capsys):
    configure_logging(Settings(_env_file=None, environment="testing", log_format="json"))
    logger = get_logger()

    with LoggingContext(username="jdoe", operation="generate"):
        logger.info("inside")
    logger.info("outside")

    entries = {entry["message"]: entry for entry in _json_lines(capsys.readouterr().err)}
    assert entries["inside"]["username"] == "jdoe"
    assert entries["inside"]["operation"] == "generate"
    assert "username" not in entries["outside"]


def test_clear_context(capsys):
    configure_logging(Settings(_env_file=None, environment="testing", log_format="json"))
    LoggingContext(request="abc").__enter__()
    clear_context()

    get_logger().info("after clear")

    entry = _json_lines(capsys.readouterr().err)[-1]
    assert "request" not in entry
