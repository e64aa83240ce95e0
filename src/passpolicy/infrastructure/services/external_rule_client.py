"""Client for an external REST password rule service.

The service receives the candidate password, the effective policy and a
snapshot of the user, and answers whether it rejects the password:

    request:  {"password": str, "policy": {ruleName: value}, "userInfo": {...}}
    response: {"error": bool, "errorMessage": str | null}
"""

from typing import Any

import httpx

from passpolicy.core.config import Settings, get_settings
from passpolicy.core.logging import get_logger
from passpolicy.domain.entities.password_policy import PasswordPolicy
from passpolicy.domain.entities.user_context import UserContext
from passpolicy.domain.entities.violation import PasswordError, PasswordViolation
from passpolicy.domain.exceptions import ServiceUnavailableError

logger = get_logger(__name__)

SERVICE_NAME = "external-rule-service"


class ExternalRuleClient:
    """Synchronous httpx client for the external rule-check service."""

    def __init__(
        self,
        url: str,
        halt_on_error: bool = False,
        timeout_seconds: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            url: Endpoint receiving the JSON POST.
            halt_on_error: Raise instead of passing when the service misbehaves.
            timeout_seconds: Request timeout.
            client: Optional preconfigured httpx client (used by tests).
        """
        self.url = url
        self.halt_on_error = halt_on_error
        self.timeout_seconds = timeout_seconds
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ExternalRuleClient | None":
        """Build a client from settings, or None when no URL is configured."""
        settings = settings or get_settings()
        if not settings.external_rule_url:
            return None
        return cls(
            url=settings.external_rule_url,
            halt_on_error=settings.external_rule_halt_on_error,
            timeout_seconds=settings.external_rule_timeout_seconds,
        )

    def _post(self, body: dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return self._client.post(self.url, json=body, timeout=self.timeout_seconds)
        with httpx.Client(timeout=self.timeout_seconds) as client:
            return client.post(self.url, json=body)

    def _fail(self, message: str) -> list[PasswordViolation]:
        if self.halt_on_error:
            raise ServiceUnavailableError(SERVICE_NAME, message)
        logger.warning(
            "External rule service failed, treating as no violation",
            url=self.url,
            error=message,
        )
        return []

    def check(
        self,
        password: str,
        policy: PasswordPolicy,
        user: UserContext | None = None,
    ) -> list[PasswordViolation]:
        """Ask the external service whether it rejects a password.

        Args:
            password: The candidate password.
            policy: Effective policy, sent as a rule dump.
            user: User the password is for.

        Returns:
            One PASSWORD_CUSTOM_ERROR violation when the service rejects the
            password, otherwise an empty list.

        Raises:
            ServiceUnavailableError: If the service fails and halt_on_error is set.
        """
        body = {
            "password": password,
            "policy": policy.rule_dump(),
            "userInfo": user.to_public_dict() if user else {},
        }

        try:
            response = self._post(body)
        except httpx.HTTPError as e:
            return self._fail(f"Connectivity error: {str(e)}")

        if response.status_code < 200 or response.status_code >= 300:
            return self._fail(f"Unexpected status code {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            return self._fail("Response body is not valid JSON")
        if not isinstance(data, dict) or not isinstance(data.get("error"), bool):
            return self._fail("Response body is missing boolean 'error' field")

        if not data["error"]:
            return []

        message = data.get("errorMessage") or PasswordError.PASSWORD_CUSTOM_ERROR.default_message
        logger.debug("External rule service rejected password", url=self.url)
        return [
            PasswordViolation(
                error=PasswordError.PASSWORD_CUSTOM_ERROR,
                message=str(message),
            )
        ]
