"""Minimal read-only client for the hosted backend's REST interface."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

import requests
from pydantic import ValidationError

from gamepulse.events import ACTIVITY_EVENT_TYPES, SNAPSHOT_EVENT_TYPE, RawEvent
from gamepulse.models import ALL, StrategicBrief

logger = logging.getLogger(__name__)

_REST_PATH = "/rest/v1"
_EVENTS_TABLE = "events"
_BRIEFS_TABLE = "strategic_briefs"

# Rows that are not community posts or comments.
NON_COMMUNITY_EVENT_TYPES: tuple[str, ...] = (*ACTIVITY_EVENT_TYPES, SNAPSHOT_EVENT_TYPE)


class BackendError(Exception):
    """Raised when the backend is unreachable or returns an unexpected response."""


class BackendClient:
    """Thin wrapper around ``GET /rest/v1/<table>`` queries."""

    def __init__(self, url: str, api_key: str, timeout: float = 30) -> None:
        if not url or not api_key:
            raise ValueError("BACKEND_URL and BACKEND_API_KEY are required but were empty.")
        self._base = url.rstrip("/") + _REST_PATH
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            }
        )

    # ── public ──────────────────────────────────────────────────────────
    def fetch_events(
        self,
        days: int = 90,
        *,
        include_types: Sequence[str] | None = None,
        exclude_types: Sequence[str] | None = None,
        limit: int | None = None,
        newest_first: bool = False,
        now: datetime | None = None,
    ) -> list[RawEvent]:
        """Fetch event rows from the last *days* days.

        *include_types* and *exclude_types* are mutually exclusive filters on
        ``event_type``. Rows that fail validation are skipped with a warning.
        """
        if include_types and exclude_types:
            raise ValueError("Pass include_types or exclude_types, not both.")

        since = (now or datetime.now(UTC)) - timedelta(days=days)
        params: dict[str, Any] = {
            "select": "*",
            "event_timestamp": f"gte.{since.isoformat()}",
            "order": f"event_timestamp.{'desc' if newest_first else 'asc'}",
        }
        if include_types:
            params["event_type"] = f"in.({','.join(include_types)})"
        elif exclude_types:
            params["event_type"] = f"not.in.({','.join(exclude_types)})"
        if limit is not None:
            params["limit"] = limit

        rows = self._get(_EVENTS_TABLE, params)
        events: list[RawEvent] = []
        for row in rows:
            try:
                events.append(RawEvent.model_validate(row))
            except ValidationError as exc:
                logger.warning("Skipping malformed event %s: %s", row.get("event_id"), exc)

        logger.info("Fetched %d events from the last %d days", len(events), days)
        return events

    def fetch_latest_brief(self, platform_filter: str = ALL) -> StrategicBrief | None:
        """Return the most recent strategic brief for *platform_filter*, if any."""
        rows = self._get(
            _BRIEFS_TABLE,
            {
                "select": "*",
                "platform_filter": f"eq.{platform_filter}",
                "order": "date.desc",
                "limit": 1,
            },
        )
        if not rows:
            logger.info("No strategic brief stored for platform filter '%s'", platform_filter)
            return None
        try:
            return StrategicBrief.model_validate(rows[0])
        except ValidationError as exc:
            raise BackendError(f"Malformed strategic brief row: {exc}") from exc

    # ── private ─────────────────────────────────────────────────────────
    def _get(self, table: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        url = f"{self._base}/{table}"
        try:
            resp = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as exc:
            raise BackendError(f"Backend request to {table} failed: {exc}") from exc

        if resp.status_code != 200:
            raise BackendError(
                f"Backend returned {resp.status_code} for {table}: {resp.text[:500]}"
            )
        try:
            data = resp.json()
        except ValueError as exc:
            raise BackendError(f"Backend returned non-JSON body for {table}") from exc
        if not isinstance(data, list):
            raise BackendError(f"Expected a list of rows from {table}, got {type(data).__name__}")
        return data
