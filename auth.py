from __future__ import annotations

import hmac
import logging
import secrets
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional

Role = Literal["admin", "student"]

logger = logging.getLogger("app.auth")


@dataclass(frozen=True)
class SessionContext:
    token: str
    username: str
    role: Role
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class SessionRegistry:
    """Live sessions; one is created per login and dropped at logout."""

    def __init__(self, accounts: dict[str, tuple[str, str]]):
        self._accounts = accounts
        self._sessions: dict[str, SessionContext] = {}
        self._lock = threading.Lock()

    def login(self, username: str, password: str) -> Optional[SessionContext]:
        account = self._accounts.get(username)
        if account is None or not hmac.compare_digest(account[0], password):
            logger.warning("login_failed username=%s", username)
            return None

        ctx = SessionContext(token=secrets.token_urlsafe(32), username=username, role=account[1])  # type: ignore[arg-type]
        with self._lock:
            self._sessions[ctx.token] = ctx
        logger.info("login username=%s role=%s", username, ctx.role)
        return ctx

    def get(self, token: str) -> Optional[SessionContext]:
        with self._lock:
            return self._sessions.get(token)

    def logout(self, token: str) -> bool:
        with self._lock:
            ctx = self._sessions.pop(token, None)
        if ctx is None:
            return False
        logger.info("logout username=%s", ctx.username)
        return True

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
