"""Simple in-memory store for owner and doctor login sessions."""

from __future__ import annotations

import time
from typing import Callable, Dict, List
from uuid import uuid4

from models.session_models import AuthSession, Role

DEFAULT_IDLE_TIMEOUT = 12 * 60 * 60


class SessionStore:
	"""Issue, look up and close login sessions.

	A session unused for longer than `idle_timeout` seconds expires. Expired
	sessions are dropped on lookup and whenever a new session is created.
	"""

	def __init__(self, idle_timeout: float = DEFAULT_IDLE_TIMEOUT, clock: Callable[[], float] = time.time) -> None:
		self._sessions: Dict[str, AuthSession] = {}
		self.idle_timeout = idle_timeout
		self._clock = clock

	def __len__(self) -> int:
		return len(self._sessions)

	def _expired(self, session: AuthSession, now: float) -> bool:
		return now - session.last_seen > self.idle_timeout

	def purge_expired(self) -> int:
		"""Drop every idle session; returns how many were removed."""
		now = self._clock()
		tokens = [token for token, session in self._sessions.items() if self._expired(session, now)]
		for token in tokens:
			self._sessions.pop(token).closed = True
		return len(tokens)

	def create(self, role: Role, user_name: str) -> AuthSession:
		"""Open a new session for `user_name` with the given role."""
		self.purge_expired()
		now = self._clock()
		token = uuid4().hex
		session = AuthSession(token=token, role=role, user_name=user_name, created_at=now, last_seen=now)
		self._sessions[token] = session
		return session

	def get(self, token: str) -> AuthSession:
		"""Return an open session and mark it used; KeyError if missing, closed or idle too long."""
		session = self._sessions.get(token)
		if session is None or session.closed:
			raise KeyError(f"Session {token} not found")
		now = self._clock()
		if self._expired(session, now):
			self._sessions.pop(token).closed = True
			raise KeyError(f"Session {token} expired")
		session.last_seen = now
		return session

	def close(self, token: str) -> AuthSession:
		"""Log a session out."""
		session = self.get(token)
		session.closed = True
		del self._sessions[token]
		return session

	def close_user(self, user_name: str) -> int:
		"""Close every doctor session for `user_name`; returns how many were closed."""
		tokens: List[str] = [
			token
			for token, session in self._sessions.items()
			if session.role is Role.DOCTOR and session.user_name == user_name
		]
		for token in tokens:
			self._sessions.pop(token).closed = True
		return len(tokens)
