"""Best-effort replication of the local game to the remote document.

Local durability never waits on this module. ``publish`` hands a snapshot to
a single worker thread (or runs inline) and drops it if the push fails; only
``push_now`` reports failure to the caller.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

import httpx

from pitch_counter.domain.errors import SyncUnavailable
from pitch_counter.domain.player import GameSnapshot
from pitch_counter.domain.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class SyncChannel(Protocol):
    def fetch(self, game_code: str) -> GameSnapshot | None: ...

    def push(self, game_code: str, snapshot: GameSnapshot) -> None: ...

    def close(self) -> None: ...


class Replicator:
    def __init__(self, channel: SyncChannel | None, *, background: bool = True) -> None:
        self._channel = channel
        self._executor: ThreadPoolExecutor | None = None
        if channel is not None and background:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pitch-sync")

    @property
    def enabled(self) -> bool:
        return self._channel is not None

    def publish(self, game_code: str, snapshot: GameSnapshot) -> None:
        """Push without waiting; failures are logged and dropped, never retried."""
        if self._channel is None:
            logger.debug("Sync not configured; keeping game %s local", game_code)
            return
        if self._executor is not None:
            self._executor.submit(self._push_and_log, game_code, snapshot)
        else:
            self._push_and_log(game_code, snapshot)

    def push_now(self, game_code: str, snapshot: GameSnapshot) -> Result[None, SyncUnavailable]:
        if self._channel is None:
            return Err(SyncUnavailable(message="Remote sync is not configured", game_code=game_code))
        try:
            self._channel.push(game_code, snapshot)
        except httpx.HTTPError as e:
            logger.warning("Manual sync of game %s failed: %s", game_code, e)
            return Err(SyncUnavailable(message=f"Sync failed: {e}", game_code=game_code))
        logger.info("Synced game %s", game_code)
        return Ok(None)

    def pull(self, game_code: str) -> Result[GameSnapshot | None, SyncUnavailable]:
        if self._channel is None:
            return Err(SyncUnavailable(message="Remote sync is not configured", game_code=game_code))
        try:
            return Ok(self._channel.fetch(game_code))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Could not load game %s from remote: %s", game_code, e)
            return Err(SyncUnavailable(message=f"Remote unavailable: {e}", game_code=game_code))

    def close(self) -> None:
        """Wait for queued pushes, then release the channel."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        if self._channel is not None:
            self._channel.close()

    def _push_and_log(self, game_code: str, snapshot: GameSnapshot) -> None:
        try:
            self._channel.push(game_code, snapshot)  # type: ignore[union-attr]
        except Exception as e:
            # Runs on the worker thread; nothing reads the future.
            logger.warning("Dropped remote update for game %s: %s", game_code, e)
        else:
            logger.debug("Synced game %s to remote", game_code)
