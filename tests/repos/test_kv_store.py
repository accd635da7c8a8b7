import sqlite3

from pitch_counter.repos.kv_store import SqliteKeyValueStore


class TestSqliteKeyValueStore:
    def test_get_missing(self, conn: sqlite3.Connection) -> None:
        assert SqliteKeyValueStore(conn).get("nope") is None

    def test_put_then_get(self, conn: sqlite3.Connection) -> None:
        store = SqliteKeyValueStore(conn)
        store.put("pitchingCounterGameName", "Tigers")
        assert store.get("pitchingCounterGameName") == "Tigers"

    def test_put_overwrites(self, conn: sqlite3.Connection) -> None:
        store = SqliteKeyValueStore(conn)
        store.put("k", "one")
        store.put("k", "two")
        assert store.get("k") == "two"
        assert conn.execute("SELECT COUNT(*) FROM kv_store").fetchone()[0] == 1

    def test_delete(self, conn: sqlite3.Connection) -> None:
        store = SqliteKeyValueStore(conn)
        store.put("k", "v")
        store.delete("k")
        store.delete("never-there")
        assert store.get("k") is None

    def test_writes_are_committed(self, conn: sqlite3.Connection) -> None:
        SqliteKeyValueStore(conn).put("k", "v")
        assert not conn.in_transaction
