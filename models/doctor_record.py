from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class DoctorRecord:
    """In-memory representation of a row in the DOCTOR table.

    Attributes:
        id: Primary key (uuid hex).
        name: Login name; also the `dentistName` the doctor's cases are filed under.
        password_hash: werkzeug password hash, never returned to clients.
        created_at: ISO-8601 UTC timestamp when the row was inserted.
    """

    id: str
    name: str
    password_hash: str
    created_at: Optional[str] = None

    def to_public(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "createdAt": self.created_at}
