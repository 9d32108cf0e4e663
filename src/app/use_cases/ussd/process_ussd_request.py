"""Use case canônico para processamento de uma requisição USSD.

Fluxo por requisição, sob o lock da sessão:
    1. Carrega ou cria a sessão (step 0, menu main)
    2. Sessão inativa ou expirada → resposta fixa de sessão expirada
    3. Tokens já vistos (retransmissão/fora de ordem) → última resposta
    4. Percorre os tokens novos pela árvore de menus até um fluxo
    5. Renderiza, aplica should_close e persiste (um único upsert)

Qualquer exceção inesperada em 3-5 encerra a sessão como `failed`.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime, timedelta, timezone
from typing import TYPE_CHECKING

from app.observability import (
    get_correlation_id,
    record_latency,
    record_session_closed,
    reset_ussd_session_id,
    set_ussd_session_id,
)
from app.protocols.models import UssdResponse
from app.sessions.session_entity import EndReason
from app.ussd.flows.base import FlowContext, FlowOutcome, FlowStatus
from app.ussd.input_parser import ParsedInput, parse_input
from app.ussd.renderer import (
    MenuOutcome,
    Outcome,
    RenderedReply,
    SystemOutcome,
    SystemReply,
)
from config.logging import phone_log_fields
from fsm.manager import MenuNavigator
from fsm.states import is_flow, is_menu, is_terminal

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.protocols.models import UssdRequest
    from app.sessions.manager import SessionManager
    from app.sessions.session_entity import UssdSession
    from app.ussd.flows.registry import FlowRegistry
    from app.ussd.renderer import ResponseRenderer

logger = logging.getLogger(__name__)

# West Africa Time (sem horário de verão); define o "hoje" dos fluxos
LOCAL_TIMEZONE = timezone(timedelta(hours=1), "WAT")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _end_reason(outcome: Outcome) -> EndReason:
    if isinstance(outcome, FlowOutcome) and outcome.status is FlowStatus.COMPLETED:
        return EndReason.COMPLETED
    if isinstance(outcome, SystemOutcome) and outcome.reply is SystemReply.GOODBYE:
        return EndReason.EXITED
    return EndReason.FAILED


class ProcessUssdRequestUseCase:
    """Orquestra sessão, árvore de menus, fluxos e renderização."""

    def __init__(
        self,
        *,
        session_manager: SessionManager,
        flows: FlowRegistry,
        renderer: ResponseRenderer,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sessions = session_manager
        self._flows = flows
        self._renderer = renderer
        self._clock = clock

    async def execute(self, request: UssdRequest) -> UssdResponse:
        """Processa a requisição e retorna {sessionId, response, shouldClose}."""
        start = time.perf_counter()
        token = set_ussd_session_id(request.session_id)
        try:
            reply = await self._execute_locked(request)
        finally:
            reset_ussd_session_id(token)

        record_latency(
            "ussd",
            "process_request",
            (time.perf_counter() - start) * 1000,
            get_correlation_id() or None,
        )
        return UssdResponse(
            session_id=request.session_id,
            response=reply.response,
            should_close=reply.should_close,
        )

    async def _execute_locked(self, request: UssdRequest) -> RenderedReply:
        now = self._clock()
        try:
            async with self._sessions.locked(request.session_id):
                return await self._process(request, now)
        except Exception:
            # Lock ou leitura falharam: não há sessão carregada para encerrar
            logger.exception(
                "ussd_request_infrastructure_error",
                extra={
                    "session_id": request.session_id,
                    **phone_log_fields(request.phone_number),
                },
            )
            return self._renderer.unavailable()

    async def _process(self, request: UssdRequest, now: datetime) -> RenderedReply:
        session, created = await self._sessions.load_or_create(request, now)

        if not session.is_active:
            logger.info(
                "ussd_stale_session_rejected",
                extra={"session_id": session.session_id, "end_reason": session.end_reason},
            )
            return self._renderer.stale(session.service_code or request.service_code)

        if self._sessions.is_stale(session, now):
            await self._sessions.expire(session, now)
            record_session_closed(EndReason.EXPIRED.value, session.current_menu.value, session.step)
            return self._renderer.stale(session.service_code or request.service_code)

        try:
            return await self._advance(session, request, created, now)
        except Exception:
            logger.exception(
                "ussd_request_failed",
                extra={
                    "session_id": session.session_id,
                    "menu": session.current_menu.value,
                    "step": session.step,
                    **phone_log_fields(session.phone_number),
                },
            )
            return await self._fail(session, now)

    async def _advance(
        self,
        session: UssdSession,
        request: UssdRequest,
        created: bool,
        now: datetime,
    ) -> RenderedReply:
        parsed = parse_input(request.text)

        if not created and parsed.step <= session.step:
            logger.info(
                "ussd_retransmission",
                extra={
                    "session_id": session.session_id,
                    "step": session.step,
                    "received_step": parsed.step,
                },
            )
            return RenderedReply(response=session.last_response, should_close=False)

        if not created and not parsed.extends(session.last_input):
            logger.warning(
                "ussd_history_diverged",
                extra={"session_id": session.session_id, "step": session.step},
            )

        outcome = await self._resolve(session, parsed, now)
        reply = self._renderer.render(outcome)

        session.step = parsed.step
        session.last_input = request.text
        session.last_response = reply.response
        session.touch(now)

        terminated = False
        if reply.should_close:
            terminated = session.terminate(_end_reason(outcome), now)
        await self._sessions.save(session, terminated=terminated)

        if terminated and session.end_reason is not None:
            record_session_closed(
                session.end_reason.value,
                session.current_menu.value,
                session.step,
                get_correlation_id() or None,
            )
        logger.info(
            "ussd_request_processed",
            extra={
                "session_id": session.session_id,
                "menu": session.current_menu.value,
                "step": session.step,
                "should_close": reply.should_close,
            },
        )
        return reply

    async def _resolve(
        self,
        session: UssdSession,
        parsed: ParsedInput,
        now: datetime,
    ) -> Outcome:
        node = session.current_menu
        if is_flow(node):
            return await self._run_flow(session, parsed, now)
        if not is_menu(node):
            return SystemOutcome(SystemReply.GOODBYE)

        navigator = MenuNavigator(session.session_id)
        navigation = navigator.walk(
            node,
            parsed.since(session.step),
            step_offset=session.step,
        )
        logger.info("ussd_menu_resolved", extra=navigator.summary(navigation))
        session.current_menu = navigation.node

        if is_flow(navigation.node):
            session.enter_flow(navigation.node, session.step + navigation.consumed)
            return await self._run_flow(session, parsed, now)
        if is_terminal(navigation.node):
            return SystemOutcome(SystemReply.GOODBYE)
        return MenuOutcome(navigation.node, invalid_option=navigation.last_unmatched)

    async def _run_flow(
        self,
        session: UssdSession,
        parsed: ParsedInput,
        now: datetime,
    ) -> FlowOutcome:
        handler = self._flows.get(session.current_menu)
        if handler is None:
            raise LookupError(f"Nenhum handler registrado para {session.current_menu}")

        context = FlowContext(
            session_id=session.session_id,
            phone_number=session.phone_number,
            service_code=session.service_code,
            today=now.astimezone(LOCAL_TIMEZONE).date(),
        )
        outcome = await handler.handle(context, parsed.since(session.flow_entry_step or 0))
        if outcome.data is not None:
            session.user_data = outcome.data
        return outcome

    async def _fail(self, session: UssdSession, now: datetime) -> RenderedReply:
        reply = self._renderer.unavailable()
        session.last_response = reply.response
        session.touch(now)
        terminated = session.terminate(EndReason.FAILED, now)
        try:
            await self._sessions.save(session, terminated=terminated)
        except Exception:
            logger.exception(
                "ussd_failed_session_persist_error",
                extra={"session_id": session.session_id},
            )
        if terminated:
            record_session_closed(EndReason.FAILED.value, session.current_menu.value, session.step)
        return reply
