"""Infrastructure services."""

from passpolicy.infrastructure.services.external_rule_client import ExternalRuleClient
from passpolicy.infrastructure.services.wordlist import (
    ServiceStatus,
    StaticWordlist,
    WordlistService,
)

__all__ = [
    "ExternalRuleClient",
    "ServiceStatus",
    "StaticWordlist",
    "WordlistService",
]
