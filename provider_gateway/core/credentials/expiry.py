"""Expiry check for user-provided credential claims.

The expiry timestamp comes from the caller's request, not from trusted
storage, and gates whether stored credentials are looked up at all.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from provider_gateway.core.exceptions import UserKeyExpiredError

logger = logging.getLogger(__name__)

ExpiresAt = datetime | str | int | float


def _from_epoch(seconds: float) -> datetime | None:
    # Out of range for the platform time_t, or nan
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _to_datetime(expires_at: ExpiresAt) -> datetime | None:
    if isinstance(expires_at, datetime):
        value = expires_at
    elif isinstance(expires_at, bool):
        return None
    elif isinstance(expires_at, (int, float)):
        return _from_epoch(expires_at)
    elif isinstance(expires_at, str):
        raw = expires_at.strip()
        try:
            epoch = float(raw)
        except ValueError:
            epoch = None
        if epoch is not None:
            return _from_epoch(epoch)
        # Accept both Z and +00:00 formats
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def check_user_key_expiry(expires_at: ExpiresAt, endpoint: str) -> None:
    """Fail when the credential claim is at or past its expiry.

    Args:
        expires_at: Epoch seconds, ISO-8601 string, or datetime. Naive
            values are taken as UTC.
        endpoint: Endpoint label included in the error payload.

    Raises:
        UserKeyExpiredError: If expired or the timestamp cannot be read.
    """
    expiry = _to_datetime(expires_at)
    if expiry is None:
        logger.warning(f"Unreadable user key expiry for {endpoint}", extra={"expires_at": expires_at})
        raise UserKeyExpiredError(expiredAt=str(expires_at), endpoint=endpoint)

    if datetime.now(timezone.utc) >= expiry:
        logger.info(f"User key for {endpoint} expired at {expiry.isoformat()}")
        raise UserKeyExpiredError(expiredAt=expiry.isoformat(), endpoint=endpoint)
