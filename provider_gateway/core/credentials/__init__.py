"""
Storage abstraction for user-provided credentials.

The gateway only reads stored credentials; saving them belongs to the
application that collects keys from users. Backends:

- InMemoryCredentialStore: tests and ephemeral use
- FileCredentialStore: JSON file keyed by user id then endpoint name
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class UserKeyValues:
    """Credential values a user saved for one endpoint.

    Attributes:
        api_key: The user's API key for the endpoint, if saved
        base_url: The user's base URL for the endpoint, if saved
    """

    api_key: str | None = None
    base_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserKeyValues":
        """Build from a stored record; accepts camelCase or snake_case keys."""
        return cls(
            api_key=data.get("apiKey", data.get("api_key")),
            base_url=data.get("baseURL", data.get("base_url")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"apiKey": self.api_key, "baseURL": self.base_url}


class CredentialStore(ABC):
    """Read-only gateway to users' saved provider credentials."""

    @abstractmethod
    async def get_user_key_values(self, user_id: str, name: str) -> UserKeyValues | None:
        """Return the credential record for (user, endpoint), or None."""


__all__ = ["CredentialStore", "UserKeyValues"]
