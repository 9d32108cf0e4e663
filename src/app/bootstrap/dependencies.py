"""Factories de stores, colaboradores e do use case USSD.

Cada factory lê as settings e escolhe a implementação concreta
(memória para desenvolvimento/testes, Redis/Firestore/HTTP em produção).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import (
    create_async_redis_client,
    create_firestore_client,
    create_http_client,
)
from app.infra.aggregator import HttpAggregatorSender
from app.infra.fintech import (
    HttpCreditScoreProvider,
    HttpIdentityVerifier,
    MemoryCreditScoreProvider,
    MemoryIdentityVerifier,
)
from app.infra.stores import (
    FirestoreAuditStore,
    FirestoreHarvestRecordStore,
    FirestoreProductCatalog,
    MemoryAuditStore,
    MemoryHarvestRecordStore,
    MemoryProductCatalog,
    MemorySessionStore,
    RedisSessionStore,
)
from app.services import SessionSweeper
from app.sessions import SessionManager
from app.use_cases.ussd import ProcessUssdRequestUseCase
from app.ussd.flows import (
    BrowseProductsFlow,
    CheckCreditFlow,
    ContactSupportFlow,
    FaqFlow,
    FlowRegistry,
    LogHarvestFlow,
    ViewHarvestsFlow,
)
from app.ussd.renderer import ResponseRenderer
from config.settings import (
    get_base_settings,
    get_firestore_settings,
    get_integration_settings,
    get_session_settings,
    get_ussd_settings,
)

if TYPE_CHECKING:
    from app.protocols import (
        AggregatorSenderProtocol,
        CreditScoreProviderProtocol,
        HarvestRecordStoreProtocol,
        IdentityVerifierProtocol,
        ProductCatalogProtocol,
        SessionAuditStoreProtocol,
        UssdSessionStoreProtocol,
    )

logger = logging.getLogger(__name__)


def _warn_memory_outside_dev(component: str) -> None:
    base = get_base_settings()
    if not base.is_development:
        logger.warning(
            "memory_backend_in_non_dev",
            extra={
                "component": component,
                "backend": "memory",
                "environment": base.environment,
            },
        )


# ──────────────────────────────────────────────────────────────────────────────
# Session / Audit Store Factories
# ──────────────────────────────────────────────────────────────────────────────


def create_session_store() -> UssdSessionStoreProtocol:
    """Cria store de sessão baseado em SESSION_STORE_BACKEND.

    - "memory": MemorySessionStore (dev only)
    - "redis": RedisSessionStore (staging/production)
    """
    settings = get_session_settings()

    if settings.store_backend == "redis":
        store: UssdSessionStoreProtocol = RedisSessionStore(
            create_async_redis_client(),
            retention_seconds=settings.retention_seconds,
            lock_timeout_seconds=settings.lock_timeout_seconds,
        )
        logger.info("session_store_created", extra={"backend": "redis"})
        return store

    if settings.store_backend == "memory":
        _warn_memory_outside_dev("session_store")
        store = MemorySessionStore(retention_seconds=settings.retention_seconds)
        logger.info("session_store_created", extra={"backend": "memory"})
        return store

    msg = f"SESSION_STORE_BACKEND inválido: {settings.store_backend}"
    raise ValueError(msg)


def create_audit_store() -> SessionAuditStoreProtocol | None:
    """Cria log de eventos de sessão baseado em AUDIT_STORE_BACKEND.

    Retorna None quando o backend é "disabled".
    """
    backend = get_session_settings().audit_backend

    if backend == "firestore":
        collection = get_firestore_settings().collection_session_events
        store: SessionAuditStoreProtocol = FirestoreAuditStore(
            create_firestore_client(), collection_name=collection
        )
        logger.info("audit_store_created", extra={"backend": "firestore"})
        return store

    if backend == "memory":
        store = MemoryAuditStore()
        logger.info("audit_store_created", extra={"backend": "memory"})
        return store

    if backend == "disabled":
        logger.info("audit_store_created", extra={"backend": "disabled"})
        return None

    msg = f"AUDIT_STORE_BACKEND inválido: {backend}"
    raise ValueError(msg)


# ──────────────────────────────────────────────────────────────────────────────
# External Collaborators
# ──────────────────────────────────────────────────────────────────────────────


def create_record_store() -> HarvestRecordStoreProtocol:
    """Cria store de registros de colheita (RECORDS_BACKEND)."""
    backend = get_integration_settings().records_backend

    if backend == "firestore":
        collection = get_firestore_settings().collection_harvests
        store: HarvestRecordStoreProtocol = FirestoreHarvestRecordStore(
            create_firestore_client(), collection_name=collection
        )
    else:
        _warn_memory_outside_dev("record_store")
        store = MemoryHarvestRecordStore()

    logger.info("record_store_created", extra={"backend": backend})
    return store


def create_product_catalog() -> ProductCatalogProtocol:
    """Cria catálogo de produtos (CATALOG_BACKEND)."""
    backend = get_integration_settings().catalog_backend

    if backend == "firestore":
        collection = get_firestore_settings().collection_products
        catalog: ProductCatalogProtocol = FirestoreProductCatalog(
            create_firestore_client(), collection_name=collection
        )
    else:
        _warn_memory_outside_dev("product_catalog")
        catalog = MemoryProductCatalog()

    logger.info("product_catalog_created", extra={"backend": backend})
    return catalog


def create_identity_verifier() -> IdentityVerifierProtocol:
    """Cria verificador de BVN (VERIFICATION_BACKEND)."""
    settings = get_integration_settings()

    if settings.verification_backend == "http":
        verifier: IdentityVerifierProtocol = HttpIdentityVerifier(
            create_http_client(),
            settings.verification_url,
            api_key=settings.api_key,
            timeout_seconds=settings.http_timeout_seconds,
        )
    else:
        _warn_memory_outside_dev("identity_verifier")
        verifier = MemoryIdentityVerifier()

    logger.info(
        "identity_verifier_created", extra={"backend": settings.verification_backend}
    )
    return verifier


def create_credit_score_provider() -> CreditScoreProviderProtocol:
    """Cria provedor de score de crédito (CREDIT_SCORE_BACKEND)."""
    settings = get_integration_settings()

    if settings.credit_score_backend == "http":
        provider: CreditScoreProviderProtocol = HttpCreditScoreProvider(
            create_http_client(),
            settings.credit_score_url,
            api_key=settings.api_key,
            timeout_seconds=settings.http_timeout_seconds,
        )
    else:
        _warn_memory_outside_dev("credit_score_provider")
        provider = MemoryCreditScoreProvider()

    logger.info(
        "credit_score_provider_created", extra={"backend": settings.credit_score_backend}
    )
    return provider


def create_aggregator_sender() -> AggregatorSenderProtocol:
    """Cria sender do push de respostas ao agregador."""
    settings = get_ussd_settings()
    return HttpAggregatorSender(
        create_http_client(),
        settings.callback_url,
        api_key=settings.callback_api_key,
        timeout_seconds=settings.callback_timeout_seconds,
    )


# ──────────────────────────────────────────────────────────────────────────────
# USSD Core
# ──────────────────────────────────────────────────────────────────────────────


def create_flow_registry() -> FlowRegistry:
    """Registra um handler para cada nó FLOW da árvore de menus."""
    ussd = get_ussd_settings()
    records = create_record_store()
    registry = FlowRegistry(
        [
            LogHarvestFlow(records),
            ViewHarvestsFlow(records),
            BrowseProductsFlow(create_product_catalog()),
            CheckCreditFlow(create_identity_verifier(), create_credit_score_provider()),
            ContactSupportFlow(
                phone=ussd.support_phone,
                email=ussd.support_email,
                whatsapp=ussd.support_whatsapp,
            ),
            FaqFlow(),
        ]
    )
    missing = registry.missing()
    if missing:
        msg = f"Fluxos sem handler: {', '.join(missing)}"
        raise RuntimeError(msg)
    return registry


def create_session_manager() -> SessionManager:
    """Cria SessionManager com store, auditoria e política de expiração."""
    return SessionManager(
        create_session_store(),
        audit_store=create_audit_store(),
        inactivity_minutes=get_session_settings().inactivity_minutes,
    )


def create_renderer() -> ResponseRenderer:
    ussd = get_ussd_settings()
    return ResponseRenderer(ussd.service_code, brand_name=ussd.brand_name)


def create_process_ussd_use_case(session_manager: SessionManager) -> ProcessUssdRequestUseCase:
    """Monta o orquestrador de requisições USSD."""
    use_case = ProcessUssdRequestUseCase(
        session_manager=session_manager,
        flows=create_flow_registry(),
        renderer=create_renderer(),
    )
    logger.info("process_ussd_use_case_created")
    return use_case


def create_session_sweeper(session_manager: SessionManager) -> SessionSweeper:
    return SessionSweeper(
        session_manager,
        interval_seconds=get_session_settings().sweep_interval_seconds,
    )
