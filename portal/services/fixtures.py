"""Read-only fixture store: static JSON documents fetched over HTTP.

One file per entity kind under a fixed base URL. Fixtures are the
server-of-record dataset; nothing here writes them.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from portal.config import get_settings
from portal.exceptions import FixtureError

logger = logging.getLogger(__name__)

PROPERTIES_FILE = "properties.json"
CABINS_FILE = "cabins.json"
USERS_FILE = "users.json"
TICKETS_FILE = "tickets.json"
NOTICES_FILE = "notices.json"
OUTAGES_FILE = "outages.json"
COMMUNITY_FILE = "community.json"
KB_FILE = "kb.json"


class FixtureStore:
    """Fetches fixture files from base_url.

    Transport failures are retried `retries` times; non-2xx responses and
    bad JSON fail immediately with FixtureError.
    """

    def __init__(self, base_url: str, *, client: httpx.Client | None = None, retries: int = 1, timeout: float = 10.0):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.retries = max(0, retries)
        self._client = client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, client: httpx.Client | None = None) -> "FixtureStore":
        settings = get_settings()
        return cls(
            settings.fixtures_base_url,
            client=client,
            retries=settings.fixtures_fetch_retries,
            timeout=settings.fixtures_fetch_timeout,
        )

    def close(self) -> None:
        self._client.close()

    def _get(self, filename: str) -> httpx.Response:
        url = f"{self.base_url}{filename}"
        attempt = 0
        while True:
            try:
                return self._client.get(url)
            except httpx.TransportError as e:
                if attempt >= self.retries:
                    logger.warning("Fixture fetch failed: %s (%s)", url, e)
                    raise FixtureError(f"Failed to fetch {filename}: {e}", filename=filename) from e
                attempt += 1
                logger.warning("Fixture fetch failed, retrying (%d/%d): %s (%s)", attempt, self.retries, url, e)

    def fetch_json(self, filename: str) -> Any:
        r = self._get(filename)
        if not (200 <= r.status_code < 300):
            raise FixtureError(
                f"Failed to fetch {filename}: {r.status_code} {r.reason_phrase}",
                filename=filename,
                status_code=r.status_code,
            )
        try:
            return r.json()
        except ValueError as e:
            raise FixtureError(f"Failed to parse {filename}: {e}", filename=filename) from e

    def _fetch_list(self, filename: str) -> list[dict[str, Any]]:
        data = self.fetch_json(filename)
        if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
            raise FixtureError(f"{filename} must contain a JSON array of objects", filename=filename)
        return data

    def properties(self) -> list[dict[str, Any]]:
        return self._fetch_list(PROPERTIES_FILE)

    def cabins(self) -> list[dict[str, Any]]:
        return self._fetch_list(CABINS_FILE)

    def users(self) -> list[dict[str, Any]]:
        return self._fetch_list(USERS_FILE)

    def tickets(self) -> list[dict[str, Any]]:
        return self._fetch_list(TICKETS_FILE)

    def notices(self) -> list[dict[str, Any]]:
        return self._fetch_list(NOTICES_FILE)

    def outages(self) -> list[dict[str, Any]]:
        return self._fetch_list(OUTAGES_FILE)

    def kb_articles(self) -> list[dict[str, Any]]:
        return self._fetch_list(KB_FILE)

    def community(self) -> dict[str, list[dict[str, Any]]]:
        """community.json: {"threads": [...], "replies": [...]}."""
        data = self.fetch_json(COMMUNITY_FILE)
        if (
            not isinstance(data, dict)
            or not isinstance(data.get("threads"), list)
            or not isinstance(data.get("replies"), list)
        ):
            raise FixtureError(f"{COMMUNITY_FILE} must contain threads and replies arrays", filename=COMMUNITY_FILE)
        return {"threads": data["threads"], "replies": data["replies"]}
