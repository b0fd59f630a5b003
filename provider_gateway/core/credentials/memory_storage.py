"""
In-memory credential storage for testing and ephemeral use.

Data is lost when the process exits.
"""

from . import CredentialStore, UserKeyValues


class InMemoryCredentialStore(CredentialStore):
    """In-memory credential storage keyed by (user_id, endpoint name)."""

    def __init__(self, records: dict[tuple[str, str], UserKeyValues] | None = None) -> None:
        self._records: dict[tuple[str, str], UserKeyValues] = dict(records or {})

    async def get_user_key_values(self, user_id: str, name: str) -> UserKeyValues | None:
        return self._records.get((user_id, name))

    def put(self, user_id: str, name: str, values: UserKeyValues) -> None:
        """Store a record. Used by tests and the CLI, never by request handling."""
        self._records[(user_id, name)] = values

    def __repr__(self) -> str:
        return f"InMemoryCredentialStore(records={len(self._records)})"
