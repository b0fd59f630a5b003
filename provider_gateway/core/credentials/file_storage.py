"""
Filesystem-based credential storage.

Reads a JSON document shaped as::

    {"<user_id>": {"<endpoint name>": {"apiKey": "...", "baseURL": "..."}}}

The file is re-read on every lookup so that keys saved by another process
are visible without a restart.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from provider_gateway.core.exceptions import CredentialStorageError

from . import CredentialStore, UserKeyValues

_logger = logging.getLogger(__name__)


class FileCredentialStore(CredentialStore):
    """JSON file credential storage."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def _read_all(self) -> dict[str, Any]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            _logger.error("Corrupted credentials file %s: %s", self.path, e)
            raise CredentialStorageError(f"Invalid credentials data in {self.path}: {e}") from e
        except OSError as e:
            _logger.error("Failed to read credentials file %s: %s", self.path, e)
            raise CredentialStorageError(f"Cannot read credentials file: {e}") from e

        if not isinstance(data, dict):
            raise CredentialStorageError(f"Credentials file {self.path} must hold a JSON object")
        return data

    async def get_user_key_values(self, user_id: str, name: str) -> UserKeyValues | None:
        data = await asyncio.to_thread(self._read_all)
        user_records = data.get(user_id)
        if not isinstance(user_records, dict):
            return None
        record = user_records.get(name)
        if not isinstance(record, dict):
            return None
        return UserKeyValues.from_dict(record)

    def __repr__(self) -> str:
        return f"FileCredentialStore(path={str(self.path)!r})"
