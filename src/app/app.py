"""Entrypoint do gateway USSD GroChain.

Este módulo é o ponto de entrada principal do serviço.
Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080

Cloud Run:
    O container deve expor a porta 8080 (padrão do Cloud Run).
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import create_api_router
from app.bootstrap import (
    firestore_in_use,
    get_session_sweeper,
    initialize_app,
    reset_singletons,
    validate_runtime_settings,
)
from app.bootstrap.clients import (
    close_clients,
    create_async_redis_client,
    create_firestore_client,
)
from app.services import drain_background_tasks
from config.settings import get_session_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = logging.getLogger(__name__)

SERVICE_LABEL = "grochain-ussd"


async def _seed_firestore_health_doc(firestore_client: object) -> None:
    """Escreve documento mínimo de health para check de readiness."""

    def _write_doc() -> None:
        firestore_client.collection("_health").document("check").set(  # type: ignore[attr-defined]
            {
                "updated_at": datetime.now(UTC).isoformat(),
                "service": SERVICE_LABEL,
            }
        )

    await asyncio.to_thread(_write_doc)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Inicializa conexões configuradas (Redis, Firestore)
    - Inicia o sweep periódico de sessões expiradas

    Shutdown:
    - Para o sweep
    - Drena gravações em background
    - Fecha conexões gracefully
    """
    logger.info("app_starting", extra={"service": SERVICE_LABEL})
    validate_runtime_settings()
    app.state.redis_client = None
    app.state.firestore_client = None

    if get_session_settings().store_backend == "redis":
        try:
            app.state.redis_client = create_async_redis_client()
        except Exception as exc:
            logger.warning("redis_client_not_ready", extra={"error_type": type(exc).__name__})

    if firestore_in_use():
        try:
            app.state.firestore_client = create_firestore_client()
            await _seed_firestore_health_doc(app.state.firestore_client)
        except Exception as exc:
            logger.warning("firestore_client_not_ready", extra={"error_type": type(exc).__name__})

    sweeper = get_session_sweeper()
    sweeper.start()

    yield

    logger.info("app_shutting_down", extra={"service": SERVICE_LABEL})
    await sweeper.stop()
    # Gravações pendentes antes de fechar os clientes
    await drain_background_tasks(get_session_settings().shutdown_drain_seconds)
    await close_clients()
    reset_singletons()


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="GroChain USSD",
        description="Gateway USSD para agricultores: colheitas, mercado, crédito e suporte",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Chamadas vêm do agregador (servidor-servidor); CORS só para o helper de teste
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Registra todas as rotas
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": SERVICE_LABEL})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("Starting GroChain USSD in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
