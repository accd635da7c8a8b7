import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import httpx

from pitch_counter.domain.player import GameSnapshot
from pitch_counter.repos.serialization import (
    SnapshotDecodeError,
    format_timestamp,
    snapshot_from_document,
    snapshot_to_document,
)
from pitch_counter.sync._retry import default_http_retry

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "pitchingCounterGames"
_DEFAULT_RETRY = default_http_retry("game document fetch")


def _utc_now() -> datetime:
    return datetime.now(UTC)


class RemoteGameStore:
    """HTTP client for the shared game document addressed by a game code.

    ``push`` is a shallow set-with-merge: only the fields it sends are
    overwritten, so concurrent writers replace each other's ``players``
    wholesale.
    """

    def __init__(
        self,
        base_url: str,
        *,
        collection: str = DEFAULT_COLLECTION,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
        retry: Callable[..., Callable[..., Any]] = _DEFAULT_RETRY,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._collection = collection
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout, connect=5.0))
        self._clock = clock
        self._get_with_retry = retry(self._do_get)

    def document_url(self, game_code: str) -> str:
        return f"{self._base_url}/{self._collection}/{game_code}"

    def fetch(self, game_code: str) -> GameSnapshot | None:
        """Return the stored snapshot, or ``None`` when no document exists yet."""
        document = self._get_with_retry(self.document_url(game_code))
        if document is None:
            return None
        if not isinstance(document, dict):
            raise SnapshotDecodeError(f"game document {game_code} is not a JSON object")
        return snapshot_from_document(document)

    def push(self, game_code: str, snapshot: GameSnapshot) -> None:
        body = snapshot_to_document(snapshot)
        body["lastUpdated"] = format_timestamp(self._clock())
        url = self.document_url(game_code)
        logger.debug("PATCH %s fields=%s", url, sorted(body))
        response = self._client.patch(url, json=body)
        response.raise_for_status()

    def _do_get(self, url: str) -> dict[str, Any] | None:
        logger.debug("GET %s", url)
        response = self._client.get(url)
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        return response.json()

    def close(self) -> None:
        self._client.close()
