"""SQLite record store for notes.

Uses a SQLAlchemy async engine with the aiosqlite driver. The engine is
opened lazily on first use; concurrent first callers share one open.
Failures are never swallowed: every SQLAlchemy or OS error surfaces as a
typed ``StoreError``.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from time import perf_counter
from typing import Iterator, Optional

from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from notes.config import settings
from notes.errors import ReadError, StorageUnavailable, WriteError
from notes.metrics import STORE_DURATION, STORE_OPENS, STORE_OPERATIONS
from notes.models import Note

logger = logging.getLogger(__name__)

TABLE_NAME = "DatabaseTable"
SCHEMA_VERSION = 1

_CREATE_TABLE_STMT = f"""CREATE TABLE {TABLE_NAME} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT,
    description TEXT,
    time TEXT
)"""


class StoreState(str, Enum):
    """Lifecycle of the underlying database handle."""

    UNOPENED = "unopened"
    OPENING = "opening"
    OPEN = "open"


@contextmanager
def _observe(operation: str) -> Iterator[None]:
    """Record count and duration of a store operation."""
    start = perf_counter()
    status = "success"
    try:
        yield
    except Exception:
        status = "error"
        raise
    finally:
        STORE_DURATION.labels(operation=operation).observe(perf_counter() - start)
        STORE_OPERATIONS.labels(operation=operation, status=status).inc()


class RecordStore:
    """Async CRUD access to the single note table."""

    def __init__(self, db_path: Optional[Path] = None, echo: Optional[bool] = None) -> None:
        self._path = Path(db_path) if db_path is not None else None
        self._echo = settings.echo_sql if echo is None else echo
        self._engine: Optional[AsyncEngine] = None
        self._state = StoreState.UNOPENED
        self._open_lock = asyncio.Lock()

    @property
    def state(self) -> StoreState:
        """Current connection state."""
        return self._state

    @property
    def path(self) -> Path:
        """Database file this store reads and writes."""
        return self._path if self._path is not None else settings.db_path

    async def __aenter__(self) -> RecordStore:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    async def handle(self) -> AsyncEngine:
        """Return the open engine, opening it on first use.

        Callers arriving while an open is in flight wait for it and get
        the same engine. A failed open leaves the store unopened so the
        next call tries again.
        """
        if self._engine is not None:
            return self._engine

        async with self._open_lock:
            if self._engine is None:
                self._state = StoreState.OPENING
                try:
                    self._engine = await self._open()
                except BaseException:
                    self._state = StoreState.UNOPENED
                    raise
                self._state = StoreState.OPEN
        return self._engine

    async def close(self) -> None:
        """Dispose of the engine. No-op when already closed."""
        async with self._open_lock:
            if self._engine is None:
                return
            await self._engine.dispose()
            self._engine = None
            self._state = StoreState.UNOPENED
            logger.info("Closed note database %s", self.path)

    def _resolve_path(self) -> Path:
        path = self.path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Data directory %s unavailable: %s", path.parent, e)
            raise StorageUnavailable(
                f"Cannot create data directory {path.parent}: {e}"
            ) from e
        return path

    async def _open(self) -> AsyncEngine:
        path = self._resolve_path()
        url = URL.create("sqlite+aiosqlite", database=str(path))
        engine = create_async_engine(url, echo=self._echo)
        try:
            async with engine.begin() as conn:
                result = await conn.execute(text("PRAGMA user_version"))
                created = result.scalar_one() == 0
                if created:
                    await self._create_schema(conn)
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            logger.warning("Cannot open note database %s: %s", path, e)
            raise StorageUnavailable(f"Cannot open database {path}: {e}") from e

        STORE_OPENS.labels(schema_created=str(created).lower()).inc()
        logger.info(
            "Note database open at %s%s", path, " — schema created" if created else ""
        )
        return engine

    async def _create_schema(self, conn: AsyncConnection) -> None:
        """Create the note table on a fresh database file."""
        await conn.execute(text(_CREATE_TABLE_STMT))
        await conn.execute(text(f"PRAGMA user_version = {SCHEMA_VERSION}"))

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def insert(self, title: str, description: str, time: str) -> int:
        """Append a note and return its assigned id."""
        engine = await self.handle()
        with _observe("insert"):
            try:
                async with engine.begin() as conn:
                    result = await conn.execute(
                        text(
                            f"INSERT INTO {TABLE_NAME} (title, description, time) "
                            "VALUES (:title, :description, :time)"
                        ),
                        {"title": title, "description": description, "time": time},
                    )
                    note_id = result.lastrowid
            except SQLAlchemyError as e:
                logger.warning("Failed to insert note: %s", e)
                raise WriteError(f"Insert failed: {e}") from e

        logger.info("Inserted note %d — '%s'", note_id, title)
        return note_id

    async def query_all(self) -> list[Note]:
        """Every note, most recently assigned id first."""
        engine = await self.handle()
        with _observe("query_all"):
            try:
                async with engine.connect() as conn:
                    result = await conn.execute(
                        text(
                            f"SELECT id, title, description, time FROM {TABLE_NAME} "
                            "ORDER BY id DESC"
                        )
                    )
                    rows = result.fetchall()
            except SQLAlchemyError as e:
                logger.warning("Failed to query notes: %s", e)
                raise ReadError(f"Query failed: {e}") from e

        return [Note.from_row(row) for row in rows]

    async def update(self, id: int, title: str, description: str, time: str) -> int:
        """Overwrite the note with ``id``. Returns the affected row count."""
        engine = await self.handle()
        with _observe("update"):
            try:
                async with engine.begin() as conn:
                    result = await conn.execute(
                        text(
                            f"UPDATE {TABLE_NAME} "
                            "SET title = :title, description = :description, time = :time "
                            "WHERE id = :id"
                        ),
                        {
                            "id": id,
                            "title": title,
                            "description": description,
                            "time": time,
                        },
                    )
                    affected = result.rowcount
            except SQLAlchemyError as e:
                logger.warning("Failed to update note %s: %s", id, e)
                raise WriteError(f"Update of note {id} failed: {e}") from e

        logger.info("Updated note %s — %d row(s)", id, affected)
        return affected

    async def delete(self, id: int) -> int:
        """Remove the note with ``id``. Returns the affected row count."""
        engine = await self.handle()
        with _observe("delete"):
            try:
                async with engine.begin() as conn:
                    result = await conn.execute(
                        text(f"DELETE FROM {TABLE_NAME} WHERE id = :id"),
                        {"id": id},
                    )
                    affected = result.rowcount
            except SQLAlchemyError as e:
                logger.warning("Failed to delete note %s: %s", id, e)
                raise WriteError(f"Delete of note {id} failed: {e}") from e

        logger.info("Deleted note %s — %d row(s)", id, affected)
        return affected

    # ------------------------------------------------------------------
    # Convenience
    # ------------------------------------------------------------------

    async def save(self, note: Note) -> Optional[Note]:
        """Insert ``note`` when it has no id, otherwise update it in place.

        Returns None when the note to update no longer exists.
        """
        if note.id is None:
            new_id = await self.insert(note.title, note.description, note.time)
            return note.model_copy(update={"id": new_id})
        affected = await self.update(note.id, note.title, note.description, note.time)
        return note if affected else None

    async def count(self) -> int:
        """Number of stored notes."""
        engine = await self.handle()
        with _observe("count"):
            try:
                async with engine.connect() as conn:
                    result = await conn.execute(text(f"SELECT COUNT(*) FROM {TABLE_NAME}"))
                    return result.scalar_one()
            except SQLAlchemyError as e:
                logger.warning("Failed to count notes: %s", e)
                raise ReadError(f"Count failed: {e}") from e
