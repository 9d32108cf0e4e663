"""Redis Session Store — sessões USSD com lock por chave e sweep seguro.

Estrutura no Redis:
    ussd:session:{id}      JSON da sessão, TTL de retenção (24h)
    ussd:sessions:active   sorted set de sessões ativas, score = last_activity
    ussd:lock:{id}         lock distribuído do ciclo read-modify-write

A retenção maior que a inatividade permite reconhecer replays de sessões
já encerradas.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from redis.exceptions import LockError, WatchError

from app.protocols.session_store import UssdSessionStoreProtocol
from app.sessions.session_entity import EndReason, UssdSession
from utils.errors import SessionLockTimeoutError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

SESSION_PREFIX = "ussd:session:"
LOCK_PREFIX = "ussd:lock:"
ACTIVE_INDEX_KEY = "ussd:sessions:active"
DEFAULT_RETENTION_SECONDS = 86400
DEFAULT_LOCK_TIMEOUT_SECONDS = 12.0


class RedisSessionStore(UssdSessionStoreProtocol):
    """Store de sessão usando Redis (async).

    Características:
        - Uma chave JSON por sessão com TTL de retenção
        - Índice de sessões ativas para o sweep (ZRANGEBYSCORE)
        - Lock por sessão via redis.asyncio Lock
        - Sweep com WATCH/MULTI: nunca sobrescreve requisição concorrente

    Args:
        redis_client: Cliente Redis assíncrono
        retention_seconds: TTL das chaves de sessão
        lock_timeout_seconds: Timeout de posse e de espera do lock
    """

    def __init__(
        self,
        redis_client: AsyncRedis,
        retention_seconds: int = DEFAULT_RETENTION_SECONDS,
        lock_timeout_seconds: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
    ) -> None:
        self._redis = redis_client
        self._retention_seconds = retention_seconds
        self._lock_timeout = lock_timeout_seconds

    def _key(self, session_id: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{SESSION_PREFIX}{session_id}"

    def _lock_key(self, session_id: str) -> str:
        return f"{LOCK_PREFIX}{session_id}"

    @staticmethod
    def _decode(session_id: str, data: bytes | str | None) -> UssdSession | None:
        if data is None:
            return None
        try:
            return UssdSession.from_dict(json.loads(data))
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            logger.warning("session_load_error", extra={"session_id": session_id, "error": str(e)})
            return None

    async def get(self, session_id: str) -> UssdSession | None:
        """Carrega sessão do Redis."""
        data = await self._redis.get(self._key(session_id))
        return self._decode(session_id, data)

    async def upsert(self, session: UssdSession) -> None:
        """Salva sessão e atualiza o índice de ativas numa transação."""
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.set(
                self._key(session.session_id),
                json.dumps(session.to_dict()),
                ex=self._retention_seconds,
            )
            if session.is_active:
                pipe.zadd(ACTIVE_INDEX_KEY, {session.session_id: session.last_activity.timestamp()})
            else:
                pipe.zrem(ACTIVE_INDEX_KEY, session.session_id)
            await pipe.execute()
        logger.debug(
            "session_saved",
            extra={"session_id": session.session_id, "is_active": session.is_active},
        )

    async def delete(self, session_id: str) -> bool:
        """Remove sessão e sua entrada no índice."""
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.delete(self._key(session_id))
            pipe.zrem(ACTIVE_INDEX_KEY, session_id)
            deleted, _ = await pipe.execute()
        return bool(deleted)

    @asynccontextmanager
    async def lock(self, session_id: str) -> AsyncIterator[None]:
        """Lock distribuído por sessão.

        Raises:
            SessionLockTimeoutError: se o lock não for obtido no timeout.
        """
        lock = self._redis.lock(
            self._lock_key(session_id),
            timeout=self._lock_timeout,
            blocking_timeout=self._lock_timeout,
        )
        if not await lock.acquire():
            raise SessionLockTimeoutError(session_id)
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError:
                # Lock expirou durante o processamento
                logger.warning("session_lock_release_failed", extra={"session_id": session_id})

    async def sweep_expired(
        self,
        max_age_minutes: int,
        now: datetime | None = None,
    ) -> list[str]:
        """Expira sessões ativas com last_activity anterior ao corte."""
        moment = now or datetime.now(UTC)
        cutoff = moment - timedelta(minutes=max_age_minutes)
        candidates = await self._redis.zrangebyscore(ACTIVE_INDEX_KEY, "-inf", cutoff.timestamp())

        expired: list[str] = []
        for raw_id in candidates:
            session_id = raw_id.decode() if isinstance(raw_id, bytes) else str(raw_id)
            if await self._expire_if_idle(session_id, cutoff, moment):
                expired.append(session_id)
        return expired

    async def _expire_if_idle(self, session_id: str, cutoff: datetime, moment: datetime) -> bool:
        key = self._key(session_id)
        async with self._redis.pipeline(transaction=True) as pipe:
            try:
                await pipe.watch(key)
                session = self._decode(session_id, await pipe.get(key))
                if session is None or not session.is_active:
                    await pipe.unwatch()
                    await self._redis.zrem(ACTIVE_INDEX_KEY, session_id)
                    return False
                if session.last_activity >= cutoff:
                    await pipe.unwatch()
                    return False

                session.terminate(EndReason.EXPIRED, moment)
                pipe.multi()
                pipe.set(key, json.dumps(session.to_dict()), ex=self._retention_seconds)
                pipe.zrem(ACTIVE_INDEX_KEY, session_id)
                await pipe.execute()
            except WatchError:
                logger.debug("session_sweep_conflict", extra={"session_id": session_id})
                return False
        return True
