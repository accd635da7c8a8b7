from collections.abc import Iterator
from contextlib import contextmanager

from pitch_counter.config import AppSettings
from pitch_counter.db.connection import create_connection
from pitch_counter.repos.game_repo import LocalGameRepo
from pitch_counter.repos.kv_store import SqliteKeyValueStore
from pitch_counter.services.session import SessionController
from pitch_counter.sync.remote import RemoteGameStore
from pitch_counter.sync.replicator import Replicator


def build_replicator(settings: AppSettings) -> Replicator:
    if settings.sync_base_url is None:
        return Replicator(None)
    remote = RemoteGameStore(
        settings.sync_base_url,
        collection=settings.sync_collection,
        timeout=settings.sync_timeout,
    )
    return Replicator(remote, background=settings.sync_background)


@contextmanager
def build_session(settings: AppSettings, *, check_same_thread: bool = True) -> Iterator[SessionController]:
    """Composition root: opens the local DB, wires sync, yields a loaded controller, closes both."""
    conn = create_connection(settings.db_path, check_same_thread=check_same_thread)
    try:
        controller = SessionController.load(LocalGameRepo(SqliteKeyValueStore(conn)), build_replicator(settings))
        try:
            yield controller
        finally:
            controller.close()
    finally:
        conn.close()
