"""User context entity for attribute-based password rules.

A UserContext is a read-only snapshot of the directory user a password is
being checked for. Rules such as DisallowedAttributes and the AD complexity
checks compare the password against these cached attribute values.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class UserContext:
    """Snapshot of a user's identity and cached directory attributes.

    Attributes:
        user_id: Identifier of the user (e.g. a DN or GUID).
        username: Login name of the user.
        attributes: Cached directory attribute values keyed by attribute name.
    """

    user_id: str | None = None
    username: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)

    def attribute(self, name: str) -> str | None:
        """Look up a cached attribute, matching the name case-insensitively.

        Args:
            name: Directory attribute name.

        Returns:
            The attribute value, or None when the user has no such attribute.
        """
        if name in self.attributes:
            return self.attributes[name]
        lowered = name.lower()
        for key, value in self.attributes.items():
            if key.lower() == lowered:
                return value
        return None

    def to_public_dict(self) -> dict[str, Any]:
        """Serialize the snapshot for the external rule-check request body."""
        return {
            "userID": self.user_id,
            "username": self.username,
            "attributes": dict(self.attributes),
        }
