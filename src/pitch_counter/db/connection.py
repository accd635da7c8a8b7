import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

_MIGRATIONS_DIR = Path(__file__).parent / "migrations"
_IN_MEMORY = ":memory:"


def create_connection(
    path: str | Path,
    *,
    check_same_thread: bool = True,
    migrations_dir: Path | None = None,
) -> sqlite3.Connection:
    """Open the local game database and bring its schema up to date.

    File databases get their parent directory created and run in WAL mode;
    ``":memory:"`` is passed through untouched for tests.
    """
    if str(path) == _IN_MEMORY:
        conn = sqlite3.connect(_IN_MEMORY, check_same_thread=check_same_thread)
    else:
        db_file = Path(path).expanduser()
        db_file.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(db_file, check_same_thread=check_same_thread)
        conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = sqlite3.Row
    _migrate(conn, migrations_dir or _MIGRATIONS_DIR)
    return conn


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Highest applied migration number, 0 for a fresh database."""
    try:
        (version,) = conn.execute("SELECT COALESCE(MAX(version), 0) FROM schema_version").fetchone()
    except sqlite3.OperationalError:
        return 0
    return int(version)


def _pending(directory: Path, current_version: int) -> list[tuple[int, Path]]:
    numbered = ((int(f.stem.split("_", 1)[0]), f) for f in directory.glob("*.sql"))
    return sorted((version, f) for version, f in numbered if version > current_version)


def _migrate(conn: sqlite3.Connection, directory: Path) -> None:
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_version ("
        " version INTEGER PRIMARY KEY,"
        " applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')))"
    )
    conn.commit()
    for version, migration in _pending(directory, get_schema_version(conn)):
        # One script per migration: its DDL and the version bump commit together.
        script = f"BEGIN;\n{migration.read_text()}\n;INSERT INTO schema_version (version) VALUES ({version});\nCOMMIT;"
        try:
            conn.executescript(script)
        except sqlite3.Error:
            conn.rollback()
            raise
        logger.debug("Applied migration %s", migration.name)
