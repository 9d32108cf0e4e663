"""Exceções de infraestrutura e de colaboradores externos do gateway USSD."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""


class FirestoreUnavailableError(InfrastructureError):
    """Falha de indisponibilidade ao acessar Firestore."""


class SessionLockTimeoutError(InfrastructureError):
    """Lock da sessão não obtido dentro do timeout."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Lock da sessão não obtido: {session_id}")
        self.session_id = session_id


class DownstreamServiceError(InfrastructureError):
    """Falha de um colaborador externo chamado durante um fluxo.

    Fluxos convertem esta exceção em resposta terminal "tente mais tarde".
    """

    def __init__(self, message: str, *, service: str = "downstream") -> None:
        super().__init__(message)
        self.service = service


class IdentityVerificationError(DownstreamServiceError):
    """Serviço de verificação de BVN indisponível ou com resposta inválida."""

    def __init__(self, message: str) -> None:
        super().__init__(message, service="identity_verification")


class CreditScoreUnavailableError(DownstreamServiceError):
    """Consulta de score de crédito falhou."""

    def __init__(self, message: str) -> None:
        super().__init__(message, service="credit_score")


class CatalogUnavailableError(DownstreamServiceError):
    """Catálogo de produtos indisponível."""

    def __init__(self, message: str) -> None:
        super().__init__(message, service="product_catalog")


class RecordPersistenceError(DownstreamServiceError):
    """Falha ao gravar/ler registros produzidos pelos fluxos."""

    def __init__(self, message: str) -> None:
        super().__init__(message, service="record_persistence")


class AggregatorDeliveryError(DownstreamServiceError):
    """Entrega da resposta ao agregador de telecom falhou (sem retry)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, service="aggregator")
