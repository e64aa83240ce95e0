"""Unit tests for the external REST rule-check client."""

import json

import httpx
import pytest

from passpolicy.core.config import Settings
from passpolicy.domain.entities.password_policy import PasswordPolicy
from passpolicy.domain.entities.violation import PasswordError
from passpolicy.domain.exceptions import ServiceUnavailableError
from passpolicy.infrastructure.services.external_rule_client import ExternalRuleClient

URL = "https://rules.example.com/check"


def make_client(handler, **kwargs) -> ExternalRuleClient:
    transport = httpx.MockTransport(handler)
    return ExternalRuleClient(URL, client=httpx.Client(transport=transport), **kwargs)


def respond(status_code=200, **kwargs):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, **kwargs)

    return handler


class TestExternalRuleClient:
    def test_request_body(self, user):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["method"] = request.method
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"error": False})

        client = make_client(handler)
        violations = client.check("Secret123!", PasswordPolicy({"MinimumLength": 8}), user)

        assert violations == []
        assert captured["method"] == "POST"
        assert captured["url"] == URL
        body = captured["body"]
        assert body["password"] == "Secret123!"
        assert body["policy"]["MinimumLength"] == "8"
        assert body["userInfo"]["username"] == "jdoe"
        assert body["userInfo"]["attributes"]["givenName"] == "John"

    def test_request_without_user(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"error": False})

        make_client(handler).check("Secret123!", PasswordPolicy())
        assert captured["body"]["userInfo"] == {}

    def test_rejection_carries_message(self):
        client = make_client(respond(json={"error": True, "errorMessage": "Too similar to username"}))
        violations = client.check("Secret123!", PasswordPolicy())
        assert len(violations) == 1
        assert violations[0].error is PasswordError.PASSWORD_CUSTOM_ERROR
        assert violations[0].message == "Too similar to username"

    def test_rejection_without_message(self):
        client = make_client(respond(json={"error": True}))
        violations = client.check("Secret123!", PasswordPolicy())
        assert violations[0].message == PasswordError.PASSWORD_CUSTOM_ERROR.default_message

    @pytest.mark.parametrize(
        "handler",
        [
            respond(500, text="Internal Server Error"),
            respond(200, text="not json"),
            respond(200, json={"status": "ok"}),
            respond(200, json={"error": "yes"}),
            respond(200, json=["error"]),
        ],
    )
    def test_failures_pass_by_default(self, handler):
        assert make_client(handler).check("Secret123!", PasswordPolicy()) == []

    @pytest.mark.parametrize(
        "handler",
        [
            respond(503, text="Unavailable"),
            respond(200, text="not json"),
            respond(200, json={"errorMessage": "missing flag"}),
        ],
    )
    def test_failures_raise_when_halting(self, handler):
        client = make_client(handler, halt_on_error=True)
        with pytest.raises(ServiceUnavailableError):
            client.check("Secret123!", PasswordPolicy())

    def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        assert make_client(handler).check("Secret123!", PasswordPolicy()) == []
        with pytest.raises(ServiceUnavailableError) as exc_info:
            make_client(handler, halt_on_error=True).check("Secret123!", PasswordPolicy())
        assert "Connectivity error" in str(exc_info.value)

    def test_from_settings(self):
        assert ExternalRuleClient.from_settings(Settings(_env_file=None)) is None

        settings = Settings(
            _env_file=None,
            external_rule_url=URL,
            external_rule_halt_on_error=True,
            external_rule_timeout_seconds=2.5,
        )
        client = ExternalRuleClient.from_settings(settings)
        assert client.url == URL
        assert client.halt_on_error is True
        assert client.timeout_seconds == 2.5
