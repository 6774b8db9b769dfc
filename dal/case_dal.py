"""Async Data Access Layer for the CASES table.

Provides CaseDAL with the list/add/update/remove operations the lab pages
need, plus whole-collection writes used by JSON import. Multi-value fields
are stored in their legacy comma-joined text form.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from models.case_record import (
    CaseRecord,
    CaseSource,
    join_tokens,
    parse_tooth_numbers,
    split_tokens,
)
from utils.database_init import AsyncDatabaseInitializer

LOGGER = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class CaseDAL:
    """Data access layer for case records.

    The constructor accepts an `AsyncDatabaseInitializer` (or any object
    exposing an async `connection()` context manager that yields an
    `aiosqlite.Connection`).
    """

    _COLUMNS = (
        "id",
        "patient_name",
        "dentist_name",
        "tooth_numbers",
        "prosthesis_type",
        "material",
        "shade",
        "notes",
        "photo_data_uri",
        "created_at",
        "source",
        "due_date",
    )
    _COLUMN_LIST = ", ".join(_COLUMNS)
    _PLACEHOLDERS = ", ".join("?" for _ in _COLUMNS)

    # CaseRecord attribute -> column, for partial updates.
    _UPDATABLE = {
        "patient_name": "patient_name",
        "dentist_name": "dentist_name",
        "tooth_numbers": "tooth_numbers",
        "prosthesis_types": "prosthesis_type",
        "materials": "material",
        "shade": "shade",
        "notes": "notes",
        "photo_data_uri": "photo_data_uri",
        "source": "source",
        "due_date": "due_date",
    }

    def __init__(self, db_initializer: AsyncDatabaseInitializer) -> None:
        self._db = db_initializer

    async def list_all(self) -> List[CaseRecord]:
        """Return every case, newest first."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM CASES ORDER BY created_at DESC, rowid DESC"
            )
            rows = await cur.fetchall()
            return [self._row_to_record(r) for r in rows]

    async def list_by_dentist(self, dentist_name: str) -> List[CaseRecord]:
        """Return cases filed under exactly `dentist_name`, newest first."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM CASES WHERE dentist_name = ? "
                "ORDER BY created_at DESC, rowid DESC",
                (dentist_name,),
            )
            rows = await cur.fetchall()
            return [self._row_to_record(r) for r in rows]

    async def get(self, case_id: str) -> Optional[CaseRecord]:
        """Return the case for `case_id`, or None if not found."""
        async with self._db.connection() as conn:
            cur = await conn.execute(
                f"SELECT {self._COLUMN_LIST} FROM CASES WHERE id = ?",
                (case_id,),
            )
            row = await cur.fetchone()
            return self._row_to_record(row) if row else None

    async def add(self, record: CaseRecord) -> str:
        """Insert a new case and return its id.

        A uuid hex id is generated when `record.id` is empty and the creation
        timestamp is always assigned here. `record` is updated in place.
        """
        record.id = record.id or uuid.uuid4().hex
        record.created_at = utc_now_iso()

        async with self._db.connection() as conn:
            await conn.execute(
                f"INSERT INTO CASES ({self._COLUMN_LIST}) VALUES ({self._PLACEHOLDERS})",
                self._record_params(record),
            )
            await conn.commit()
        LOGGER.info("Added case %s for %s", record.id, record.dentist_name)
        return record.id

    async def update(self, case_id: str, fields: Dict[str, Any]) -> bool:
        """Update the given CaseRecord attributes of one case.

        Args:
            case_id: Case to change.
            fields: Mapping of CaseRecord attribute names to new values.

        Returns:
            True if a row was changed.

        Raises:
            ValueError: If `fields` names an attribute that cannot be updated.
        """
        unknown = set(fields) - set(self._UPDATABLE)
        if unknown:
            raise ValueError(f"Cannot update case fields: {', '.join(sorted(unknown))}")
        if not fields:
            return False

        assignments = [f"{self._UPDATABLE[name]} = ?" for name in fields]
        params = [self._to_column_value(name, value) for name, value in fields.items()]
        params.append(case_id)
        sql = f"UPDATE CASES SET {', '.join(assignments)} WHERE id = ?"

        async with self._db.connection() as conn:
            await conn.execute(sql, tuple(params))
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
        updated = bool(changed and changed[0] > 0)
        if updated:
            LOGGER.info("Updated case %s (%s)", case_id, ", ".join(fields))
        return updated

    async def remove(self, case_id: str) -> bool:
        """Delete a case by id. Returns True if a row was deleted."""
        async with self._db.connection() as conn:
            await conn.execute("DELETE FROM CASES WHERE id = ?", (case_id,))
            await conn.commit()
            cur = await conn.execute("SELECT changes()")
            changed = await cur.fetchone()
        deleted = bool(changed and changed[0] > 0)
        if deleted:
            LOGGER.info("Deleted case %s", case_id)
        return deleted

    async def replace_all(self, records: Sequence[CaseRecord]) -> int:
        """Replace the whole collection with `records` in one transaction."""
        return await self._write_many(records, clear=True)

    async def upsert_many(self, records: Sequence[CaseRecord]) -> int:
        """Insert or overwrite `records` by id in one transaction."""
        return await self._write_many(records, clear=False)

    async def _write_many(self, records: Iterable[CaseRecord], *, clear: bool) -> int:
        params = [self._record_params(r) for r in records]
        async with self._db.connection() as conn:
            try:
                if clear:
                    await conn.execute("DELETE FROM CASES")
                await conn.executemany(
                    f"INSERT OR REPLACE INTO CASES ({self._COLUMN_LIST}) VALUES ({self._PLACEHOLDERS})",
                    params,
                )
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise
        LOGGER.info("Wrote %d imported cases (clear=%s)", len(params), clear)
        return len(params)

    @classmethod
    def _to_column_value(cls, name: str, value: Any) -> Any:
        """Convert a CaseRecord attribute value into its stored form."""
        if name in ("tooth_numbers", "prosthesis_types", "materials"):
            return join_tokens(value or [])
        if isinstance(value, CaseSource):
            return value.value
        if isinstance(value, date):
            return value.isoformat()
        return value

    @classmethod
    def _record_params(cls, record: CaseRecord) -> tuple:
        return (
            record.id,
            record.patient_name,
            record.dentist_name,
            join_tokens(record.tooth_numbers),
            join_tokens(record.prosthesis_types),
            join_tokens(record.materials),
            record.shade,
            record.notes,
            record.photo_data_uri,
            record.created_at,
            record.source.value if record.source else None,
            record.due_date.isoformat() if record.due_date else None,
        )

    @staticmethod
    def _row_to_record(row: Sequence[object]) -> CaseRecord:
        """Convert a DB row tuple into a CaseRecord."""
        return CaseRecord(
            id=row[0],
            patient_name=row[1],
            dentist_name=row[2],
            tooth_numbers=parse_tooth_numbers(row[3]),
            prosthesis_types=split_tokens(row[4]),
            materials=split_tokens(row[5]),
            shade=row[6] or "",
            notes=row[7],
            photo_data_uri=row[8],
            created_at=row[9],
            source=CaseSource(row[10]) if row[10] else None,
            due_date=date.fromisoformat(row[11]) if row[11] else None,
        )
