"""Storage abstraction for wiki pages."""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

import asyncpg

from dowiki.config import Settings
from dowiki.core.errors import PageNotFoundError, StorageError
from dowiki.core.models import Page

logger = logging.getLogger(__name__)


class Storage(ABC):
    """Abstract base class for page storage."""

    async def open(self) -> None:
        """Prepare the store before the first request."""

    async def close(self) -> None:
        """Release anything held by the store."""

    @abstractmethod
    async def load(self, title: str) -> Page:
        """Get a page by title.

        Raises PageNotFoundError if nothing is stored under the title and
        StorageError for any other failure.
        """
        ...

    @abstractmethod
    async def save(self, title: str, body: bytes) -> Page:
        """Save a page, replacing any previous body. Creates if doesn't exist."""
        ...


class FileStorage(Storage):
    """File-based storage implementation.

    Pages are stored as raw bytes, one file per title.
    File naming: Title.txt
    """

    SUFFIX = ".txt"

    def __init__(self, base_path: Path):
        self.base_path = base_path

    def _title_to_filename(self, title: str) -> str:
        """Convert page title to filename."""
        return title + self.SUFFIX

    def _get_path(self, title: str) -> Path:
        """Get full path for a page."""
        return self.base_path / self._title_to_filename(title)

    async def open(self) -> None:
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"cannot use data directory {self.base_path}: {exc}") from exc
        logger.info("File storage ready at %s", self.base_path)

    async def load(self, title: str) -> Page:
        """Get a page by title."""
        path = self._get_path(title)
        try:
            body = path.read_bytes()
        except FileNotFoundError:
            raise PageNotFoundError(title) from None
        except OSError as exc:
            raise StorageError(str(exc)) from exc
        return Page(title=title, body=body)

    async def save(self, title: str, body: bytes) -> Page:
        """Save a page.

        The body is written to a private temporary file which then replaces
        the page file, so readers never observe a partial write.
        """
        path = self._get_path(title)
        tmp_name = None
        try:
            # mkstemp creates the file with 0600 permissions
            fd, tmp_name = tempfile.mkstemp(
                dir=self.base_path, prefix=f".{title}.", suffix=".tmp"
            )
            with os.fdopen(fd, "wb") as f:
                f.write(body)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(str(exc)) from exc
        return Page(title=title, body=body)


class PostgresStorage(Storage):
    """PostgreSQL storage implementation.

    Pages live in a single ``pages`` table, unique on title. A process-wide
    asyncpg pool is shared by all requests.
    """

    SCHEMA = """
        CREATE TABLE IF NOT EXISTS pages (
            id BIGSERIAL PRIMARY KEY,
            title TEXT NOT NULL UNIQUE,
            body BYTEA NOT NULL
        )
    """
    LOAD_QUERY = "SELECT id, body FROM pages WHERE title = $1"
    SAVE_QUERY = (
        "INSERT INTO pages (title, body) VALUES ($1, $2) "
        "ON CONFLICT (title) DO UPDATE SET body = EXCLUDED.body "
        "RETURNING id"
    )

    def __init__(
        self,
        dsn: str,
        min_size: int = 1,
        max_size: int = 10,
        create_schema: bool = False,
    ):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.create_schema = create_schema
        self._pool: asyncpg.Pool | None = None

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise StorageError("database pool is not open")
        return self._pool

    async def open(self) -> None:
        """Create the connection pool."""
        try:
            self._pool = await asyncpg.create_pool(
                self.dsn, min_size=self.min_size, max_size=self.max_size
            )
            if self.create_schema:
                await self._pool.execute(self.SCHEMA)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            raise StorageError(f"unable to connect to database: {exc}") from exc
        logger.info(
            "Database pool open (min=%d, max=%d)", self.min_size, self.max_size
        )

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("Database pool closed")

    async def load(self, title: str) -> Page:
        """Get a page by title."""
        try:
            row = await self.pool.fetchrow(self.LOAD_QUERY, title)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            raise StorageError(str(exc)) from exc
        if row is None:
            raise PageNotFoundError(title)
        return Page(id=row["id"], title=title, body=bytes(row["body"]))

    async def save(self, title: str, body: bytes) -> Page:
        """Save a page with a single upsert."""
        try:
            page_id = await self.pool.fetchval(self.SAVE_QUERY, title, body)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            raise StorageError(str(exc)) from exc
        return Page(id=page_id, title=title, body=body)


def create_storage(settings: Settings) -> Storage:
    """Build the page store selected by the settings."""
    if settings.storage == "postgres":
        if not settings.database_url:
            raise StorageError("postgres storage selected but no database URL is set")
        logger.info("Using PostgreSQL storage")
        return PostgresStorage(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            create_schema=settings.db_create_schema,
        )
    logger.info("Using file storage in %s", settings.data_dir)
    return FileStorage(settings.data_dir)
