import os
import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiosqlite


class AsyncDatabaseInitializer:
    """
    Manage the async SQLite database using the DATABASE_DIR environment variable.

    - The database file is located at: <DATABASE_DIR>/app.db
    - DATABASE_DIR is required. A RuntimeError is raised if it is missing
      or invalid (not a directory and cannot be created).
    - On the first call to `ensure_database()` for a given instance the
      CASES and DOCTOR tables are created if missing. When RESET_DATABASE
      is truthy the existing file is deleted first.
    - Subsequent calls to `ensure_database()` on the same instance are no-ops,
      so it is safe for `connection()` to call it.
    """

    def __init__(self, reset: bool | None = None) -> None:
        env_dir = os.getenv("DATABASE_DIR")

        if env_dir is None or not env_dir.strip():
            raise RuntimeError(
                "DATABASE_DIR environment variable must be set to a writable "
                "directory path where the SQLite database file will be stored."
            )

        db_dir = Path(env_dir).expanduser()

        if db_dir.exists() and not db_dir.is_dir():
            raise RuntimeError(
                f"DATABASE_DIR={env_dir!r} points to a file, not a directory "
                f"({db_dir}). Please set DATABASE_DIR to a directory path."
            )

        try:
            db_dir.mkdir(parents=True, exist_ok=True)
        except Exception as exc:
            raise RuntimeError(
                f"Failed to create or access database directory at {db_dir}"
            ) from exc

        self.db_dir = db_dir
        self.db_path = self.db_dir / "app.db"

        if reset is None:
            reset = os.getenv("RESET_DATABASE", "").strip().lower() in ("1", "true", "yes")
        self.reset = reset

        self._initialized = False

    async def ensure_database(self) -> None:
        """
        Ensure the SQLite database and its tables exist at `self.db_path`.

        Subsequent calls on the same instance are no-ops.
        """
        if self._initialized:
            return

        if self.reset and self.db_path.exists():
            try:
                self.db_path.unlink()
            except Exception as exc:
                raise RuntimeError(
                    f"Failed to delete existing database at {self.db_path}"
                ) from exc

        max_attempts = 3
        for attempt in range(1, max_attempts + 1):
            try:
                async with aiosqlite.connect(self.db_path) as db:
                    await db.execute(
                        """
                        CREATE TABLE IF NOT EXISTS CASES (
                            id TEXT PRIMARY KEY,
                            patient_name TEXT NOT NULL,
                            dentist_name TEXT NOT NULL,
                            tooth_numbers TEXT NOT NULL DEFAULT '',
                            prosthesis_type TEXT NOT NULL DEFAULT '',
                            material TEXT NOT NULL DEFAULT '',
                            shade TEXT NOT NULL DEFAULT '',
                            notes TEXT,
                            photo_data_uri TEXT,
                            created_at TEXT,
                            source TEXT,
                            due_date TEXT
                        )
                        """
                    )
                    await db.execute(
                        "CREATE INDEX IF NOT EXISTS idx_cases_dentist_name ON CASES(dentist_name)"
                    )
                    await db.execute(
                        """
                        CREATE TABLE IF NOT EXISTS DOCTOR (
                            id TEXT PRIMARY KEY,
                            name TEXT NOT NULL UNIQUE,
                            password_hash TEXT NOT NULL,
                            created_at TEXT
                        )
                        """
                    )

                    # Databases created before due dates were imported lack the column.
                    cur = await db.execute("PRAGMA table_info(CASES)")
                    cols = await cur.fetchall()
                    col_names = {col[1] for col in cols}
                    if "due_date" not in col_names:
                        await db.execute("ALTER TABLE CASES ADD COLUMN due_date TEXT")

                    await db.commit()
                break
            except FileNotFoundError:
                # On some platforms a transient missing file error may occur; retry a few times.
                if attempt >= max_attempts:
                    raise
                await asyncio.sleep(0.1 * attempt)

        self._initialized = True

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Async context manager yielding an `aiosqlite.Connection`.

        The database is created on the first use via `ensure_database()`.
        """
        await self.ensure_database()
        conn = await aiosqlite.connect(self.db_path)
        try:
            yield conn
        finally:
            await conn.close()
