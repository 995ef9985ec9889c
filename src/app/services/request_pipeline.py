"""Orquestrador do pipeline de segurança por requisição.

Compõe os guards em ordem fixa por classe de rota:

    webhook:   tamanho do payload → rate limit (webhook, ip) → assinatura
               → JSON + validação → replay → dispatch
    protected: autenticação → autorização → rate limit (classe da rota,
               user:<id>) → validação → dispatch
    public:    rate limit (ip) → dispatch

Em webhooks o rate limit vem antes do HMAC para descartar floods sem
custo de hash. Em rotas protegidas a identidade define o bucket, então
a autenticação vem primeiro.

Cada requisição percorre uma RequestStateMachine e termina em DISPATCHED,
DUPLICATE ou REJECTED. Toda rejeição vira o corpo uniforme de erro e um
log `request_rejected` com ip, user agent, identidade mascarada e payload
redigido. Rotas das classes lgpd e export geram ainda `audit_data_access`.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.domain.security import (
    DispatchedEvent,
    ReplayStatus,
    RouteClass,
    SignedWebhookEnvelope,
)
from app.observability.audit import is_audited, record_data_access
from app.observability.metrics import record_latency, record_rejection
from app.observability.redaction import mask_identifier, redact_payload
from app.services.signature_verifier import signature_error, verify_envelope
from fsm.manager.machine import RequestStateMachine
from fsm.states.request import RequestState
from utils.errors import (
    BridgeError,
    DispatchError,
    DuplicateEventError,
    InvalidJsonError,
    PayloadTooLargeError,
    RateLimitError,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.domain.security import InboundRequest, Principal, RateLimitDecision, RoutePolicy
    from app.protocols.dispatcher import DispatcherProtocol
    from app.services.auth_guard import AuthGuard
    from app.services.rate_limiter import RateLimiter
    from app.services.replay_guard import ReplayGuard
    from config.settings.chatwoot import ChatwootSettings
    from fsm.types.transition import StateTransition

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Resposta pronta para a camada HTTP.

    Attributes:
        status_code: Status HTTP
        body: Corpo JSON
        headers: Headers extras (X-RateLimit-*, Retry-After)
        state: Estado terminal da requisição
        history: Transições percorridas (auditoria)
        event: Evento entregue ao downstream (se aceito)
    """

    status_code: int
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)
    state: RequestState = RequestState.REJECTED
    history: tuple[StateTransition, ...] = ()
    event: DispatchedEvent | None = None

    @property
    def accepted(self) -> bool:
        return self.state == RequestState.DISPATCHED


@dataclass(slots=True)
class _RunContext:
    """Estado mutável de uma execução (uma requisição)."""

    request: InboundRequest
    policy: RoutePolicy
    fsm: RequestStateMachine
    headers: dict[str, str] = field(default_factory=dict)
    identity: str = ""
    principal: Principal | None = None
    payload: dict[str, Any] | None = None

    def advance(self, target: RequestState, trigger: str, **metadata: Any) -> None:
        result = self.fsm.transition(target, trigger, metadata or None)
        if not result.success:
            # Ordem de checks violada: erro de programação
            raise RuntimeError(result.error_reason)


class RequestPipeline:
    """Aplica os checks de segurança e entrega requisições aceitas.

    Args:
        rate_limiter: Limiter por classe/identidade
        replay_guard: Guard de idempotência de webhooks
        auth_guard: Guard de tokens e abilities
        dispatcher: Colaborador downstream (fila)
        chatwoot_settings: Secret, tolerância e limite de payload
        webhook_identifier: Deriva o identificador de replay do payload
    """

    def __init__(
        self,
        *,
        rate_limiter: RateLimiter,
        replay_guard: ReplayGuard,
        auth_guard: AuthGuard,
        dispatcher: DispatcherProtocol,
        chatwoot_settings: ChatwootSettings,
        webhook_identifier: Callable[[dict[str, Any], bytes], str],
    ) -> None:
        self._rate_limiter = rate_limiter
        self._replay_guard = replay_guard
        self._auth_guard = auth_guard
        self._dispatcher = dispatcher
        self._chatwoot = chatwoot_settings
        self._webhook_identifier = webhook_identifier

    @property
    def max_body_bytes(self) -> int:
        """Teto do corpo lido da rede, aplicado antes de bufferizar."""
        return self._chatwoot.max_payload_bytes

    def reject(
        self, request: InboundRequest, policy: RoutePolicy, exc: BridgeError
    ) -> PipelineResult:
        """Rejeita a requisição antes dos checks (ex.: corpo acima do teto na leitura)."""
        ctx = _new_context(request, policy)
        result = self._reject(ctx, exc)
        if is_audited(policy.limiter_class):
            self._audit(ctx, result)
        return result

    async def run(self, request: InboundRequest, policy: RoutePolicy) -> PipelineResult:
        """Executa o pipeline da rota e retorna a resposta final."""
        ctx = _new_context(request, policy)
        started = time.perf_counter()
        try:
            if policy.route_class == RouteClass.WEBHOOK:
                result = await self._run_webhook(ctx)
            elif policy.route_class == RouteClass.PROTECTED:
                result = await self._run_protected(ctx)
            else:
                result = await self._run_public(ctx)
        except DuplicateEventError as exc:
            result = self._duplicate(ctx, exc)
        except BridgeError as exc:
            result = self._reject(ctx, exc)
        finally:
            record_latency(
                "request_pipeline",
                str(policy.route_class),
                (time.perf_counter() - started) * 1000,
                request.request_id,
            )
        if is_audited(policy.limiter_class):
            self._audit(ctx, result)
        return result

    # ──────────────────────────────────────────────────────────────
    # Fluxos por classe de rota
    # ──────────────────────────────────────────────────────────────

    async def _run_webhook(self, ctx: _RunContext) -> PipelineResult:
        request = ctx.request
        max_bytes = self._chatwoot.max_payload_bytes
        if len(request.body) > max_bytes:
            raise PayloadTooLargeError("Payload too large", details={"max_bytes": max_bytes})

        await self._check_rate_limit(ctx)

        envelope = SignedWebhookEnvelope.from_request(
            request,
            self._chatwoot.signature_header,
            self._chatwoot.timestamp_header,
        )
        check = verify_envelope(
            envelope,
            self._chatwoot.webhook_secret,
            self._chatwoot.timestamp_tolerance_seconds,
        )
        if not check.ok:
            raise signature_error(check.failure)
        ctx.advance(RequestState.SIGNATURE_CHECKED, "signature")

        ctx.payload = _parse_json_object(request.body)
        payload = self._validate(ctx, ctx.payload)

        webhook_id = self._webhook_identifier(payload, request.body)
        status = await self._replay_guard.check_and_record(webhook_id)
        if status == ReplayStatus.DUPLICATE:
            raise DuplicateEventError(webhook_id)
        ctx.advance(RequestState.REPLAY_CHECKED, "replay", webhook_id=webhook_id)

        event = self._build_event(ctx, payload, webhook_id=webhook_id)
        try:
            await self._dispatcher.dispatch(event)
        except Exception as exc:
            # Sem release, a reentrega do remetente seria tratada como duplicada
            await self._replay_guard.release(webhook_id)
            raise DispatchError(
                "Webhook processing failed", details={"webhook_id": webhook_id}
            ) from exc

        ctx.advance(RequestState.DISPATCHED, "dispatch")
        body = {
            "success": True,
            "webhook_id": webhook_id,
            "queued_at": event.received_at.isoformat(),
            "processing_status": "queued",
            "request_id": request.request_id,
        }
        logger.info(
            "webhook_accepted",
            extra={"route": ctx.policy.name, "webhook_id": webhook_id, "ip": request.client_ip},
        )
        return self._result(ctx, 200, body, event)

    async def _run_protected(self, ctx: _RunContext) -> PipelineResult:
        request = ctx.request
        policy = ctx.policy
        principal = self._auth_guard.authenticate(
            request.header("authorization"),
            client_ip=request.client_ip,
            user_agent=request.user_agent,
        )
        ctx.principal = principal
        ctx.identity = principal.identity
        if policy.required_ability:
            self._auth_guard.authorize(
                principal,
                policy.required_ability,
                client_ip=request.client_ip,
                user_agent=request.user_agent,
            )
        ctx.advance(RequestState.AUTH_CHECKED, "auth", ability=policy.required_ability)

        await self._check_rate_limit(ctx)

        payload: dict[str, Any] = {}
        if policy.validator is not None:
            body = _parse_json_object(request.body) if request.body.strip() else {}
            ctx.payload = {**body, **request.path_params}
            payload = self._validate(ctx, ctx.payload)

        return await self._dispatch_and_finish(ctx, payload)

    async def _run_public(self, ctx: _RunContext) -> PipelineResult:
        await self._check_rate_limit(ctx)
        return await self._dispatch_and_finish(ctx, {})

    # ──────────────────────────────────────────────────────────────
    # Etapas compartilhadas
    # ──────────────────────────────────────────────────────────────

    async def _check_rate_limit(self, ctx: _RunContext) -> RateLimitDecision:
        limiter_class = ctx.policy.limiter_class
        decision = await self._rate_limiter.check(limiter_class, ctx.identity)
        ctx.headers.update(decision.headers())
        if decision.limited:
            raise RateLimitError(limiter_class, decision.retry_after_seconds)
        ctx.advance(RequestState.RATE_LIMIT_CHECKED, "rate_limit", limiter=limiter_class)
        return decision

    def _validate(self, ctx: _RunContext, data: dict[str, Any]) -> dict[str, Any]:
        validator = ctx.policy.validator
        if validator is None:
            return data
        return validator(data)

    async def _dispatch_and_finish(
        self, ctx: _RunContext, payload: dict[str, Any]
    ) -> PipelineResult:
        event = self._build_event(ctx, payload)
        status_code = 200
        if ctx.policy.dispatch:
            try:
                await self._dispatcher.dispatch(event)
            except Exception as exc:
                raise DispatchError("Request processing failed") from exc
            status_code = 202

        ctx.advance(RequestState.DISPATCHED, "dispatch")
        body: dict[str, Any] = {"success": True, "request_id": ctx.request.request_id}
        if ctx.policy.dispatch:
            body["status"] = "queued"
        return self._result(ctx, status_code, body, event)

    def _build_event(
        self,
        ctx: _RunContext,
        payload: dict[str, Any],
        webhook_id: str | None = None,
    ) -> DispatchedEvent:
        request = ctx.request
        return DispatchedEvent(
            request_id=request.request_id,
            route_name=ctx.policy.name,
            route_class=ctx.policy.route_class,
            payload=payload,
            path_params=dict(request.path_params),
            principal=ctx.principal,
            webhook_id=webhook_id,
            client_ip=request.client_ip,
            user_agent=request.user_agent,
        )

    # ──────────────────────────────────────────────────────────────
    # Respostas
    # ──────────────────────────────────────────────────────────────

    def _result(
        self,
        ctx: _RunContext,
        status_code: int,
        body: dict[str, Any],
        event: DispatchedEvent | None = None,
    ) -> PipelineResult:
        return PipelineResult(
            status_code=status_code,
            body=body,
            headers=dict(ctx.headers),
            state=ctx.fsm.current_state,
            history=tuple(ctx.fsm.history),
            event=event,
        )

    def _duplicate(self, ctx: _RunContext, exc: DuplicateEventError) -> PipelineResult:
        ctx.advance(RequestState.DUPLICATE, "replay", webhook_id=exc.webhook_id)
        logger.info(
            "webhook_duplicate_ignored",
            extra={
                "route": ctx.policy.name,
                "webhook_id": exc.webhook_id,
                "ip": ctx.request.client_ip,
            },
        )
        body = {
            "success": True,
            "message": exc.message,
            "webhook_id": exc.webhook_id,
            "status": "duplicate",
            "timestamp": datetime.now(UTC).isoformat(),
            "request_id": ctx.request.request_id,
        }
        return self._result(ctx, exc.status_code, body)

    def _reject(self, ctx: _RunContext, exc: BridgeError) -> PipelineResult:
        failed_at = ctx.fsm.current_state
        ctx.advance(RequestState.REJECTED, "reject", error_code=exc.error_code)

        request = ctx.request
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "request_rejected",
            extra={
                "route": ctx.policy.name,
                "route_class": str(ctx.policy.route_class),
                "error_code": exc.error_code,
                "status_code": exc.status_code,
                "failed_after": failed_at.name,
                "ip": request.client_ip,
                "user_agent": request.user_agent,
                "identity": mask_identifier(ctx.identity),
                "payload": _loggable_payload(ctx, exc),
            },
        )
        record_rejection(
            str(ctx.policy.route_class), exc.error_code, exc.status_code, request.request_id
        )

        headers = dict(ctx.headers)
        headers.update(exc.headers())
        if isinstance(exc, RateLimitError):
            headers["X-RateLimit-Remaining"] = "0"
        return PipelineResult(
            status_code=exc.status_code,
            body=exc.to_error_body(request.request_id),
            headers=headers,
            state=ctx.fsm.current_state,
            history=tuple(ctx.fsm.history),
        )

    def _audit(self, ctx: _RunContext, result: PipelineResult) -> None:
        request = ctx.request
        record_data_access(
            route_name=ctx.policy.name,
            method=request.method,
            outcome=result.state.value.lower(),
            status_code=result.status_code,
            identity=ctx.identity,
            path_params=request.path_params,
            payload=ctx.payload,
            client_ip=request.client_ip,
            user_agent=request.user_agent,
            request_id=request.request_id,
        )


def _new_context(request: InboundRequest, policy: RoutePolicy) -> _RunContext:
    return _RunContext(
        request=request,
        policy=policy,
        fsm=RequestStateMachine(policy.route_class, request.request_id),
        identity=request.ip_identity,
    )


def _loggable_payload(ctx: _RunContext, exc: BridgeError) -> Any:
    """Payload redigido para o log de rejeição (None se não há corpo legível)."""
    if ctx.payload is not None:
        return redact_payload(ctx.payload)
    if isinstance(exc, PayloadTooLargeError) or not ctx.request.body.strip():
        return None
    try:
        return redact_payload(_parse_json_object(ctx.request.body))
    except InvalidJsonError:
        return None


def _parse_json_object(raw_body: bytes) -> dict[str, Any]:
    """Decodifica o corpo como objeto JSON.

    Raises:
        InvalidJsonError: Corpo não é JSON válido ou não é um objeto.
    """
    try:
        data = json.loads(raw_body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidJsonError("Invalid JSON payload") from exc
    if not isinstance(data, dict):
        raise InvalidJsonError("JSON payload must be an object")
    return data
