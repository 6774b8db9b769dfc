"""Login session models."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
	OWNER = "owner"
	DOCTOR = "doctor"


@dataclass
class AuthSession:
	"""An authenticated owner or doctor, handed explicitly to controllers."""

	token: str
	role: Role
	user_name: str
	created_at: float = field(default_factory=lambda: time.time())
	last_seen: float = field(default_factory=lambda: time.time())
	closed: bool = False

	@property
	def is_owner(self) -> bool:
		return self.role is Role.OWNER
