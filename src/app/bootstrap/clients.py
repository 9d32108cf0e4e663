"""Factories de clientes externos — Redis, Firestore e HTTP.

Todos são singletons (lru_cache); `close_clients` libera os recursos
assíncronos no shutdown da aplicação.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

import httpx

from config.settings import (
    get_base_settings,
    get_firestore_settings,
    get_integration_settings,
)

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Redis Client Factory
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def create_async_redis_client() -> AsyncRedis:
    """Cria cliente Redis assíncrono (singleton).

    Returns:
        Cliente Redis assíncrono

    Raises:
        ValueError: Se REDIS_URL não configurado
    """
    from redis.asyncio import Redis as AsyncRedis

    redis_url = get_base_settings().redis_url
    if not redis_url:
        msg = "REDIS_URL não configurado"
        raise ValueError(msg)

    client: AsyncRedis = AsyncRedis.from_url(
        redis_url,
        decode_responses=False,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
    )

    host = client.connection_pool.connection_kwargs.get("host", "unknown")
    logger.info("async_redis_client_created", extra={"host": host})
    return client


# ──────────────────────────────────────────────────────────────────────────────
# Firestore Client Factory
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def create_firestore_client() -> FirestoreClient:
    """Cria cliente Firestore (singleton).

    Returns:
        Cliente Firestore
    """
    from google.cloud import firestore

    project_id = get_firestore_settings().project_id or get_base_settings().gcp_project
    client = firestore.Client(project=project_id or None)
    logger.info("firestore_client_created", extra={"project": project_id})
    return client


# ──────────────────────────────────────────────────────────────────────────────
# HTTP Client Factory
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def create_http_client() -> httpx.AsyncClient:
    """Cria cliente HTTP compartilhado (singleton).

    Usado pelos serviços financeiros e pelo push ao agregador. Cada
    chamada define seu próprio timeout; este é só o teto padrão.
    """
    timeout = get_integration_settings().http_timeout_seconds
    client = httpx.AsyncClient(timeout=httpx.Timeout(timeout))
    logger.info("http_client_created", extra={"timeout_seconds": timeout})
    return client


async def close_clients() -> None:
    """Fecha clientes assíncronos já criados (idempotente)."""
    if create_http_client.cache_info().currsize:
        await create_http_client().aclose()
        create_http_client.cache_clear()
        logger.info("http_client_closed")

    if create_async_redis_client.cache_info().currsize:
        await create_async_redis_client().aclose()
        create_async_redis_client.cache_clear()
        logger.info("async_redis_client_closed")
