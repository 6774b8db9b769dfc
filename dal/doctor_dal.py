"""Async Data Access Layer for the DOCTOR table."""

from __future__ import annotations

import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from models.doctor_record import DoctorRecord
from utils.database_init import AsyncDatabaseInitializer

LOGGER = logging.getLogger(__name__)


class DoctorDAL:
    """Doctor accounts that can sign in to the doctor portal."""

    _COLUMN_LIST = "id, name, password_hash, created_at"

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def list_doctors(self) -> List[DoctorRecord]:
        """Return every doctor ordered by name."""
        async with self._db.connection() as conn:
            cur = await conn.execute(f"SELECT {self._COLUMN_LIST} FROM DOCTOR ORDER BY name")
            rows = await cur.fetchall()
            return [self._row_to_record(r) for r in rows]

    async def get(self, doctor_id: str) -> Optional[DoctorRecord]:
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM DOCTOR WHERE id = ?",
                (doctor_id,),
            )
            row = await cur.fetchone()
            return self._row_to_record(row) if row else None

    async def get_by_name(self, name: str) -> Optional[DoctorRecord]:
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM DOCTOR WHERE name = ?",
                (name,),
            )
            row = await cur.fetchone()
            return self._row_to_record(row) if row else None

    async def add_doctor(self, name: str, password: str) -> DoctorRecord:
        """Create a doctor login.

        Raises:
            ValueError: If a doctor with this name already exists.
        """
        record = DoctorRecord(
            id=uuid.uuid4().hex,
            name=name,
            password_hash=generate_password_hash(password),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        async with self._db.connection() as conn:
            try:
                await conn.execute(
                    f"INSERT INTO DOCTOR ({self._COLUMN_LIST}) VALUES (?, ?, ?, ?)",
                    (record.id, record.name, record.password_hash, record.created_at),
                )
                await conn.commit()
            except sqlite3.IntegrityError as exc:
                raise ValueError(f"User with name {name!r} already exists.") from exc
        LOGGER.info("Added doctor %s", name)
        return record

    async def delete_doctor(self, doctor_id: str) -> bool:
        """Delete a doctor by id. Returns True if a row was deleted."""
        async with self._db.connection() as conn:
            await conn.execute("DELETE FROM DOCTOR WHERE id = ?", (doctor_id,))
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
            return bool(changed and changed[0] > 0)

    async def verify(self, name: str, password: str) -> bool:
        """Return True when `name` exists and `password` matches its hash."""
        record = await self.get_by_name(name)
        if record is None:
            return False
        return check_password_hash(record.password_hash, password)

    @staticmethod
    def _row_to_record(row: Sequence[object]) -> DoctorRecord:
        return DoctorRecord(id=row[0], name=row[1], password_hash=row[2], created_at=row[3])
