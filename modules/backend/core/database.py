"""
Row Store.

SQLite-backed row store reached through a SQLAlchemy engine. Exposes three
parametrized primitives (get, run, list) over raw SQL text and owns the
schema of the proposals table, including the one-time upgrade from the
legacy single-mockup column to the mockups array column.

The handle is opened once per process by get_store() and passed to
repositories explicitly. All calls are blocking; async callers go through
modules.backend.core.concurrency.run_blocking.
"""

import threading
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sqlalchemy import Connection, create_engine, event, inspect, text
from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from modules.backend.core.config import IN_MEMORY_STORE
from modules.backend.core.exceptions import StoreError
from modules.backend.core.logging import get_logger
from modules.backend.models.proposal import LEGACY_MOCKUP_TITLE, Mockup, encode_mockups

logger = get_logger(__name__)

CREATE_PROPOSALS_TABLE = """
CREATE TABLE IF NOT EXISTS proposals (
    id TEXT PRIMARY KEY,
    title TEXT,
    markdown TEXT,
    mockup TEXT,
    passwordHash TEXT,
    createdAt TEXT
)
"""

ADD_MOCKUPS_COLUMN = "ALTER TABLE proposals ADD COLUMN mockups TEXT DEFAULT '[]'"

SELECT_LEGACY_MOCKUPS = (
    "SELECT id, mockup FROM proposals WHERE mockup IS NOT NULL AND mockup != ''"
)

UPDATE_MOCKUPS = "UPDATE proposals SET mockups = :mockups WHERE id = :id"


@dataclass(frozen=True)
class RunResult:
    """Outcome of a mutating statement."""

    changes: int


def _transactional(engine: Engine) -> Engine:
    """
    Let SQLAlchemy own transaction boundaries on a pysqlite engine.

    The driver otherwise commits implicitly before DDL, so an ALTER TABLE
    would survive a rollback of the block it ran in.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn: Connection) -> None:
        conn.exec_driver_sql("BEGIN")

    return engine


class RowStore:
    """
    Handle to the proposals row store.

    Construction opens (creating if needed) the backing file and brings the
    schema up to date. Construction failures raise StoreError and are meant
    to abort startup.

    Usage:
        store = RowStore("data/proposals.db")
        row = store.get("SELECT * FROM proposals WHERE id = :id", {"id": "a1b2c3d4"})
    """

    def __init__(self, location: str, echo: bool = False) -> None:
        self.location = location
        self.in_memory = location == IN_MEMORY_STORE
        self._engine = self._open(location, echo)
        # ':memory:' lives on one shared connection; serialize access to it
        self._lock = threading.RLock() if self.in_memory else None

        try:
            self._migrate()
        except SQLAlchemyError as e:
            self._engine.dispose()
            logger.error(
                "Row store initialization failed",
                extra={"location": location, "error": str(e)},
            )
            raise StoreError(f"Cannot open store at {location}") from e

        logger.info(
            "Row store opened",
            extra={"location": location, "in_memory": self.in_memory},
        )

    @staticmethod
    def _open(location: str, echo: bool) -> Engine:
        if location == IN_MEMORY_STORE:
            return _transactional(
                create_engine(
                    "sqlite://",
                    echo=echo,
                    hide_parameters=True,
                    poolclass=StaticPool,
                    connect_args={"check_same_thread": False},
                )
            )

        path = Path(location)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(
                "Cannot create store directory",
                extra={"directory": str(path.parent), "error": str(e)},
            )
            raise StoreError(f"Cannot create store directory {path.parent}") from e

        return _transactional(
            create_engine(
                f"sqlite:///{path}",
                echo=echo,
                hide_parameters=True,
                connect_args={"check_same_thread": False},
            )
        )

    def _migrate(self) -> None:
        """
        Create the proposals table and add the mockups column if missing.

        Rows that only carry the legacy single mockup get it copied into a
        one-element mockups array. This runs only in the startup that adds
        the column, so each row is migrated at most once; the legacy column
        itself is left untouched. Adding the column and copying the rows
        commit together, so a failed copy leaves the table as it was.
        """
        with self._serialized(), self._engine.begin() as conn:
            conn.execute(text(CREATE_PROPOSALS_TABLE))

            columns = {column["name"] for column in inspect(conn).get_columns("proposals")}
            if "mockups" in columns:
                return

            conn.execute(text(ADD_MOCKUPS_COLUMN))
            migrated = self._migrate_legacy_rows(conn)

        logger.info("Added mockups column", extra={"migrated_rows": migrated})

    @staticmethod
    def _migrate_legacy_rows(conn: Connection) -> int:
        legacy_rows = conn.execute(text(SELECT_LEGACY_MOCKUPS)).mappings().all()
        for row in legacy_rows:
            mockups = [Mockup(title=LEGACY_MOCKUP_TITLE, html=row["mockup"])]
            conn.execute(
                text(UPDATE_MOCKUPS),
                {"id": row["id"], "mockups": encode_mockups(mockups)},
            )
        return len(legacy_rows)

    def _serialized(self) -> Any:
        return self._lock if self._lock is not None else nullcontext()

    @contextmanager
    def _connection(self, operation: str, write: bool = False) -> Iterator[Connection]:
        """Yield a connection, translating driver failures into StoreError."""
        try:
            with self._serialized():
                if write:
                    with self._engine.begin() as conn:
                        yield conn
                else:
                    with self._engine.connect() as conn:
                        yield conn
        except SQLAlchemyError as e:
            logger.error(
                "Row store query failed",
                extra={"operation": operation, "error": str(e)},
            )
            raise StoreError() from e

    def get(self, query: str, params: Mapping[str, Any] | None = None) -> RowMapping | None:
        """Return the first row of a query, or None."""
        with self._connection("get") as conn:
            return conn.execute(text(query), dict(params or {})).mappings().first()

    def run(self, query: str, params: Mapping[str, Any] | None = None) -> RunResult:
        """Execute a mutating statement in its own transaction."""
        with self._connection("run", write=True) as conn:
            result = conn.execute(text(query), dict(params or {}))
            return RunResult(changes=result.rowcount)

    def ping(self) -> None:
        """Round-trip a trivial query. Raises StoreError when unavailable."""
        with self._connection("ping") as conn:
            conn.execute(text("SELECT 1"))

    def close(self) -> None:
        """Release all pooled connections."""
        self._engine.dispose()
        logger.info("Row store closed", extra={"location": self.location})

    def list(self, query: str, params: Mapping[str, Any] | None = None) -> Sequence[RowMapping]:
        """Return every row of a query."""
        with self._connection("list") as conn:
            return conn.execute(text(query), dict(params or {})).mappings().all()


# Process-wide handle, opened lazily on first use
_store: RowStore | None = None
_store_lock = threading.Lock()


def get_store() -> RowStore:
    """
    Get the process-wide row store, opening it on first use.

    Safe under concurrent first use: only one caller constructs the handle.

    Raises:
        StoreError: If the store cannot be opened or migrated
    """
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                from modules.backend.core.config import get_app_config, get_store_location

                _store = RowStore(
                    get_store_location(),
                    echo=get_app_config().database.echo,
                )
    return _store


def close_store() -> None:
    """Dispose the process-wide handle, if open."""
    global _store
    with _store_lock:
        if _store is not None:
            _store.close()
            _store = None
