from __future__ import annotations

import logging
from typing import Optional

from redis.exceptions import RedisError

from .auth_client import AuthClient
from .config import Settings, settings as default_settings
from .errors import SessionNotActiveError
from .models import AuthResult, Identity, SessionState
from .redis_repo import SnapshotRepo
from .token_store import CookieTokenStore, TokenStore

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the client-side session: who is logged in, if anyone.

    State is either Unauthenticated or Authenticated. It is derived from the
    identity service on every bootstrap and login; the Redis snapshot only
    mirrors it and is never read back into the state.

    Every mutating call swaps the whole ``SessionState`` once its network
    calls are done, so whichever call completes last wins and readers never
    see a half-built identity.
    """

    def __init__(self, auth: AuthClient, tokens: TokenStore, snapshots: SnapshotRepo):
        self.auth = auth
        self.tokens = tokens
        self.snapshots = snapshots
        self.last_result: Optional[AuthResult] = None
        self._state = SessionState.unauthenticated()
        self._active = False
        self._closed = False

    @classmethod
    def from_settings(cls, s: Optional[Settings] = None) -> "SessionManager":
        s = s or default_settings
        auth = AuthClient(s.AUTH_BASE_URL, s.HTTP_TIMEOUT_SEC)
        tokens = CookieTokenStore(auth.cookies, s.TOKEN_COOKIE_NAME)
        if s.SESSION_TOKEN:
            tokens.seed(s.SESSION_TOKEN)
        snapshots = SnapshotRepo(
            s.REDIS_HOST,
            s.REDIS_PORT,
            s.REDIS_DB,
            key=s.SNAPSHOT_KEY,
            ttl_sec=s.SNAPSHOT_TTL_SEC,
        )
        return cls(auth, tokens, snapshots)

    # lifecycle

    async def start(self) -> None:
        if self._closed:
            raise SessionNotActiveError("session manager was closed and cannot be restarted")
        if self._active:
            return
        self._active = True
        try:
            await self.bootstrap()
        except BaseException:
            self._active = False
            raise

    async def close(self) -> None:
        self._active = False
        if self._closed:
            return
        self._closed = True
        await self.auth.aclose()
        await self.snapshots.aclose()

    async def __aenter__(self) -> "SessionManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _ensure_active(self) -> None:
        if not self._active:
            raise SessionNotActiveError("session manager is not running; call start() first")

    # state

    @property
    def state(self) -> SessionState:
        self._ensure_active()
        return self._state

    @property
    def identity(self) -> Optional[Identity]:
        return self.state.identity

    @property
    def authenticated(self) -> bool:
        return self.state.authenticated

    async def cached_identity(self) -> Optional[Identity]:
        """Last stored snapshot, for display while the session is unknown."""
        self._ensure_active()
        try:
            return await self.snapshots.get()
        except RedisError as e:
            logger.warning("snapshot read failed: %s", e)
            return None

    # operations

    async def bootstrap(self) -> None:
        self._ensure_active()
        result = await self.auth.fetch_identity(self.tokens.get_token())
        self.last_result = result
        if result.ok:
            self._state = SessionState.authenticated_as(result.identity)
            await self._save_snapshot(result.identity)
            return
        # нет сессии - обычное состояние, не ошибка
        logger.info("no active session (%s)", result.reason)
        self._state = SessionState.unauthenticated()
        await self._clear_snapshot()

    refresh = bootstrap

    async def login(self, email: str, pin: str) -> bool:
        self._ensure_active()
        result = await self.auth.login(email, pin)
        self.last_result = result
        if not result.ok:
            logger.info("login rejected (%s)", result.reason)
            return False

        # cookie с токеном уже лежит в jar, подтверждаем его через get-user
        result = await self.auth.fetch_identity(self.tokens.get_token())
        self.last_result = result
        if not result.ok:
            logger.warning("login accepted but identity fetch failed (%s)", result.reason)
            return False

        self._state = SessionState.authenticated_as(result.identity)
        await self._save_snapshot(result.identity)
        return True

    async def signup(self, name: str, email: str, pin: str) -> bool:
        self._ensure_active()
        result = await self.auth.signup(name, email, pin)
        self.last_result = result
        if not result.ok:
            logger.info("signup rejected (%s)", result.reason)
        return result.ok

    async def logout(self) -> None:
        self._ensure_active()
        result = await self.auth.logout(self.tokens.get_token())
        self.last_result = result
        if not result.ok:
            logger.warning("remote logout failed (%s), clearing local session anyway", result.reason)
        self._state = SessionState.unauthenticated()
        await self._clear_snapshot()

    async def _save_snapshot(self, identity: Identity) -> None:
        try:
            await self.snapshots.set(identity)
        except RedisError as e:
            logger.warning("snapshot write failed: %s", e)

    async def _clear_snapshot(self) -> None:
        try:
            await self.snapshots.delete()
        except RedisError as e:
            logger.warning("snapshot delete failed: %s", e)
