"""Runtime do chat guiado: liga motor de fluxo, store e agendador.

Fluxo de uma conversa ativa:
1. Cursor muda → indicador de digitação → após `delay_ms` a mensagem do bot
   é anexada e os patches de progresso/sidebar aplicados
2. Passo informativo com next literal → avanço automático após 500ms
3. Resposta do usuário → sidebar/scratch atualizados → avanço após 800ms

Regras:
- Só a conversa ativa avança; trocar de conversa cancela todos os timers dela
- A fase da transição fica persistida na conversa (step_activated,
  pending_step_id) e é retomada ao voltar para ela
- Nenhuma operação pública lança exceção por falha esperada; tudo vira dado
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from guided_chat.application.agents import AgentConnection, AgentConnector, agent_joined_message
from guided_chat.application.attachments import (
    UploadSimulator,
    new_attachment,
    validate_attachments,
)
from guided_chat.application.conversation_store import ConversationStore
from guided_chat.application.flow_engine import FlowEngine
from guided_chat.config.settings import Settings, get_settings
from guided_chat.domain.enums import (
    AttachmentStatus,
    ConnectionStatus,
    DomainId,
    InputFieldType,
    MessageType,
)
from guided_chat.domain.flow import FlowStep
from guided_chat.domain.models import (
    Attachment,
    Conversation,
    InputField,
    Message,
    ProgressStep,
    QuickReply,
    SidebarSection,
    clone_progress,
    clone_sidebar,
)
from guided_chat.domain.patches import PatchContext, apply_sidebar_patches
from guided_chat.domain.validation import ValidationResult, validate_field
from guided_chat.flows.agents import SupportAgent
from guided_chat.flows.registry import DomainProfile, DomainRegistry, load_registry
from guided_chat.infra.scheduler import AsyncioScheduler, Scheduler, TimerHandle
from guided_chat.observability.logging import get_logger, log_flow_event, short_id
from guided_chat.utils.ids import new_conversation_id, new_message_id

logger: logging.Logger = get_logger(__name__)


@dataclass(slots=True)
class SubmitResult:
    """Resultado de uma entrada do usuário.

    reason: None quando aceita; senão "not_found", "inactive", "empty" ou "invalid".
    """

    accepted: bool
    reason: str | None = None
    validation: ValidationResult | None = None
    message_id: str | None = None


class HistoryItem(BaseModel):
    """Resumo de conversa para a listagem de histórico."""

    id: str
    title: str
    domain: DomainId
    timestamp: datetime
    message_count: int
    last_message: str | None = None


class ChatSnapshot(BaseModel):
    """Estado completo lido pela camada de apresentação após cada mutação."""

    conversation_id: str
    domain: DomainId
    title: str
    messages: list[Message]
    progress_steps: list[ProgressStep]
    sidebar_sections: list[SidebarSection]
    is_typing: bool
    expected_input: InputField | None = None
    current_flow_step_id: str | None = None
    selected_primary_action: str | None = None
    exclusive_selections: dict[str, str] = {}
    agent_connection: AgentConnection | None = None


@dataclass(slots=True)
class _ConversationTimers:
    activation: TimerHandle | None = None
    advance: TimerHandle | None = None
    agent: TimerHandle | None = None
    # Próximo tick pendente de cada upload em andamento, por id do anexo
    uploads: dict[str, TimerHandle] = field(default_factory=dict)

    def cancel_advance(self) -> bool:
        if self.advance is None or self.advance.cancelled():
            self.advance = None
            return False
        self.advance.cancel()
        self.advance = None
        return True

    def cancel_agent(self) -> None:
        if self.agent is not None:
            self.agent.cancel()
            self.agent = None

    def cancel_all(self) -> int:
        cancelled = 0
        for handle in (self.activation, self.advance, self.agent, *self.uploads.values()):
            if handle is not None and not handle.cancelled():
                handle.cancel()
                cancelled += 1
        self.activation = None
        self.advance = None
        self.agent = None
        self.uploads.clear()
        return cancelled


class ChatService:
    """Operações de entrada da apresentação + snapshot de saída."""

    def __init__(
        self,
        settings: Settings | None = None,
        registry: DomainRegistry | None = None,
        scheduler: Scheduler | None = None,
        store: ConversationStore | None = None,
        engine: FlowEngine | None = None,
        rng: random.Random | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._registry = registry or load_registry(self._settings.enabled_domains)
        self._scheduler = scheduler or AsyncioScheduler()
        self._store = store or ConversationStore(self._settings.title_max_chars)
        self._engine = engine or FlowEngine()
        self._today = today or self._default_today
        self._uploader = UploadSimulator(
            self._scheduler,
            rng=rng,
            tick_ms=self._settings.upload_tick_ms,
            failure_rate=self._settings.upload_failure_rate,
        )
        self._connector = AgentConnector(
            self._scheduler, connect_delay_ms=self._settings.agent_connect_delay_ms
        )

        self._active_id: str | None = None
        self._selected_domain: DomainId | None = None
        self._timers: dict[str, _ConversationTimers] = {}
        self._typing: set[str] = set()
        # Estado transitório da conversa ativa (não persistido)
        self._primary_action: str | None = None
        self._exclusive: dict[str, str] = {}
        self._uploads: dict[str, dict[str, Attachment]] = {}
        self._connections: dict[str, AgentConnection] = {}

    def _default_today(self) -> date:
        return datetime.now(ZoneInfo(self._settings.timezone)).date()

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------

    @property
    def registry(self) -> DomainRegistry:
        return self._registry

    @property
    def store(self) -> ConversationStore:
        return self._store

    @property
    def active_conversation_id(self) -> str | None:
        return self._active_id

    @property
    def selected_domain(self) -> DomainId | None:
        return self._selected_domain

    def is_typing(self, conversation_id: str | None = None) -> bool:
        target = conversation_id or self._active_id
        return target is not None and target in self._typing

    def current_step(self, conversation_id: str | None = None) -> FlowStep | None:
        conversation = self._store.get(conversation_id or self._active_id or "")
        if conversation is None:
            return None
        profile = self._profile(conversation)
        if profile is None:
            return None
        return profile.flow.get_step(conversation.current_flow_step_id)

    def expected_input(self, conversation_id: str | None = None) -> InputField | None:
        """Input esperado pelo passo corrente, apenas depois que a mensagem foi exibida."""
        conversation = self._store.get(conversation_id or self._active_id or "")
        if conversation is None or not conversation.step_activated:
            return None
        profile = self._profile(conversation)
        if profile is None:
            return None
        return self._engine.expected_input(profile.flow, conversation.current_flow_step_id)

    def snapshot(self, conversation_id: str | None = None) -> ChatSnapshot | None:
        conversation = self._store.get(conversation_id or self._active_id or "")
        if conversation is None:
            return None
        is_active = conversation.id == self._active_id
        return ChatSnapshot(
            conversation_id=conversation.id,
            domain=conversation.domain,
            title=conversation.title,
            messages=[m.model_copy(deep=True) for m in conversation.messages],
            progress_steps=clone_progress(conversation.steps),
            sidebar_sections=clone_sidebar(conversation.sidebar_sections),
            is_typing=self.is_typing(conversation.id),
            expected_input=self.expected_input(conversation.id),
            current_flow_step_id=conversation.current_flow_step_id,
            selected_primary_action=self._primary_action if is_active else None,
            exclusive_selections=dict(self._exclusive) if is_active else {},
            agent_connection=self._connections.get(conversation.id),
        )

    def list_history(self, domain: DomainId | str) -> list[HistoryItem]:
        items: list[HistoryItem] = []
        for conversation in self._store.list_for_domain(domain):
            last = conversation.messages[-1].content if conversation.messages else None
            items.append(
                HistoryItem(
                    id=conversation.id,
                    title=conversation.title,
                    domain=conversation.domain,
                    timestamp=conversation.timestamp,
                    message_count=len(conversation.messages),
                    last_message=last,
                )
            )
        return items

    def find_quick_reply(self, conversation_id: str, reply_id: str) -> QuickReply | None:
        """Procura a quick reply nas mensagens do bot, da mais recente para a mais antiga."""
        conversation = self._store.get(conversation_id)
        if conversation is None:
            return None
        for message in reversed(conversation.messages):
            if message.type != MessageType.BOT or not message.quick_replies:
                continue
            for reply in message.quick_replies:
                if reply.id == reply_id or reply.value == reply_id:
                    return reply
        return None

    # ------------------------------------------------------------------
    # Ciclo de vida das conversas
    # ------------------------------------------------------------------

    def open_domain(self, domain: DomainId | str) -> Conversation | None:
        """Seleciona o domínio: retoma a conversa mais recente ou cria uma nova."""
        profile = self._registry.get(domain)
        if profile is None:
            logger.debug("Unknown domain requested", extra={"domain": str(domain)})
            return None

        self._selected_domain = profile.id
        existing = self._store.most_recent(profile.id)
        if existing is not None:
            self.select_conversation(existing.id)
            return existing
        return self.create_conversation(profile.id)

    def create_conversation(self, domain: DomainId | str) -> Conversation | None:
        """Cria conversa com o estado inicial do domínio e a torna ativa."""
        profile = self._registry.get(domain)
        if profile is None:
            logger.debug("Unknown domain requested", extra={"domain": str(domain)})
            return None

        conversation = Conversation(
            id=new_conversation_id(),
            domain=profile.id,
            title=profile.fallback_title,
        )
        self._reset_flow_state(conversation, profile)
        self._store.create(conversation)

        self._deactivate_current()
        self._active_id = conversation.id
        self._selected_domain = profile.id
        self._reset_transient()

        log_flow_event(
            logger,
            "conversation_created",
            conversation.id,
            step_id=conversation.current_flow_step_id,
            level=logging.INFO,
            domain=profile.id,
        )
        self._schedule_activation(conversation)
        return conversation

    def new_conversation(self, domain: DomainId | str | None = None) -> Conversation | None:
        """"New chat": usa o domínio selecionado quando nenhum é informado."""
        target = domain or self._selected_domain
        if target is None:
            return None
        return self.create_conversation(target)

    def select_conversation(self, conversation_id: str) -> bool:
        conversation = self._store.get(conversation_id)
        if conversation is None:
            logger.debug(
                "Select ignored for unknown conversation",
                extra={"conversation_id": short_id(conversation_id)},
            )
            return False

        if conversation.id == self._active_id:
            self._reset_transient()
            return True

        self._deactivate_current()
        self._active_id = conversation.id
        self._selected_domain = conversation.domain
        self._reset_transient()
        log_flow_event(
            logger,
            "conversation_selected",
            conversation.id,
            step_id=conversation.current_flow_step_id,
        )
        self._resume(conversation)
        return True

    def delete_conversation(self, conversation_id: str) -> bool:
        conversation = self._store.get(conversation_id)
        if conversation is None:
            logger.debug(
                "Delete ignored for unknown conversation",
                extra={"conversation_id": short_id(conversation_id)},
            )
            return False

        self._discard_runtime(conversation.id)
        self._connections.pop(conversation.id, None)
        self._store.delete(conversation.id)
        log_flow_event(logger, "conversation_deleted", conversation.id, level=logging.INFO)

        if conversation.id != self._active_id:
            return True

        self._active_id = None
        self._reset_transient()
        domain = self._selected_domain or conversation.domain
        successor = self._store.most_recent(domain)
        if successor is None:
            self._selected_domain = None
            return True

        self._active_id = successor.id
        self._selected_domain = successor.domain
        self._resume(successor)
        return True

    def restart_conversation(self, conversation_id: str) -> bool:
        """Volta ao passo inicial com mensagens, progresso e sidebar do domínio."""
        conversation = self._store.get(conversation_id)
        if conversation is None:
            logger.debug(
                "Restart ignored for unknown conversation",
                extra={"conversation_id": short_id(conversation_id)},
            )
            return False
        profile = self._profile(conversation)
        if profile is None:
            return False

        self._discard_runtime(conversation.id)
        self._connections.pop(conversation.id, None)
        self._reset_flow_state(conversation, profile)
        self._store.save(conversation, profile.fallback_title)
        log_flow_event(
            logger,
            "conversation_restarted",
            conversation.id,
            step_id=conversation.current_flow_step_id,
            level=logging.INFO,
        )

        if conversation.id == self._active_id:
            self._reset_transient()
            self._schedule_activation(conversation)
        return True

    def close_session(self) -> int:
        """Encerra a sessão: cancela tudo e descarta todas as conversas."""
        for conversation_id in list(self._timers):
            self._discard_runtime(conversation_id)
        self._typing.clear()
        self._uploads.clear()
        self._connections.clear()
        self._active_id = None
        self._selected_domain = None
        self._reset_transient()
        discarded = self._store.clear()
        logger.info("Chat session closed", extra={"discarded": discarded})
        return discarded

    # ------------------------------------------------------------------
    # Entradas do usuário
    # ------------------------------------------------------------------

    def submit_user_input(
        self,
        conversation_id: str,
        raw_text: str,
        attachments: Sequence[Attachment] | None = None,
    ) -> SubmitResult:
        """Texto livre (com anexos opcionais) enviado pelo usuário.

        Valida contra o input esperado do passo corrente; entrada inválida não
        altera estado algum.
        """
        conversation, rejection = self._writable(conversation_id)
        if conversation is None:
            return rejection

        sent = [a for a in (attachments or []) if a.status == AttachmentStatus.SUCCESS]
        step = self._awaiting_step(conversation)
        input_field = step.input_field if step else None
        is_blank = not raw_text.strip()

        if is_blank and not sent and (input_field is None or input_field.required):
            return SubmitResult(accepted=False, reason="empty")

        if input_field is not None and input_field.type != InputFieldType.FILE:
            if not (is_blank and (sent or not input_field.required)):
                result = validate_field(
                    input_field.type, input_field.id, raw_text, today=self._today()
                )
                if not result.is_valid:
                    log_flow_event(
                        logger,
                        "input_rejected",
                        conversation.id,
                        step_id=conversation.current_flow_step_id,
                        field_id=input_field.id,
                    )
                    return SubmitResult(accepted=False, reason="invalid", validation=result)

        message = self._append_user_message(conversation, raw_text, sent)
        if step is not None:
            self._respond(conversation, raw_text)
        else:
            self._save(conversation)
        return SubmitResult(accepted=True, message_id=message.id)

    def select_quick_reply(self, conversation_id: str, reply: QuickReply) -> SubmitResult:
        """Clique em quick reply: registra ação primária/grupo exclusivo e responde.

        Quick replies de mensagens antigas (não oferecidas pelo passo corrente)
        atualizam as seleções e o log, mas não movem o fluxo.
        """
        conversation, rejection = self._writable(conversation_id)
        if conversation is None:
            return rejection

        if reply.is_primary_action and self._primary_action is None:
            self._primary_action = reply.value
        if reply.exclusive_group:
            self._exclusive[reply.exclusive_group] = reply.value

        step = self._awaiting_step(conversation)
        offered = step is not None and reply in (step.quick_replies or ())

        message = self._append_user_message(conversation, reply.value, [])
        if offered:
            self._respond(conversation, reply.value)
        else:
            log_flow_event(
                logger,
                "stale_quick_reply",
                conversation.id,
                step_id=conversation.current_flow_step_id,
            )
            self._save(conversation)
        return SubmitResult(accepted=True, message_id=message.id)

    def edit_message(self, conversation_id: str, message_id: str, new_content: str) -> bool:
        """Edição in-place de mensagem do usuário (id preservado, fluxo inalterado)."""
        conversation = self._store.get(conversation_id)
        if conversation is None or not new_content.strip():
            return False
        for index, message in enumerate(conversation.messages):
            if message.id != message_id:
                continue
            if message.type != MessageType.USER:
                return False
            conversation.messages[index] = message.model_copy(update={"content": new_content})
            self._save(conversation)
            return True
        return False

    # ------------------------------------------------------------------
    # Anexos e atendentes (colaboradores simulados)
    # ------------------------------------------------------------------

    def start_upload(
        self, conversation_id: str, name: str, size: int, mime_type: str
    ) -> Attachment | None:
        """Valida e inicia o upload simulado. Falhas vêm como status=error."""
        conversation, _ = self._writable(conversation_id)
        if conversation is None:
            return None
        profile = self._profile(conversation)
        if profile is None:
            return None

        uploads = self._uploads.setdefault(conversation.id, {})
        current = sum(1 for a in uploads.values() if a.status != AttachmentStatus.ERROR)
        attachment = new_attachment(name, size, mime_type)
        uploads[attachment.id] = attachment

        check = validate_attachments(profile.file_rules, [(mime_type, size)], current)
        if not check.valid:
            attachment.status = AttachmentStatus.ERROR
            attachment.error = check.error
            return attachment

        timers = self._timers_for(conversation.id)

        def track(handle: TimerHandle) -> None:
            timers.uploads[attachment.id] = handle

        def on_update(updated: Attachment) -> None:
            if updated.status != AttachmentStatus.UPLOADING:
                timers.uploads.pop(updated.id, None)

        self._uploader.start(attachment, on_update=on_update, track=track)
        return attachment

    def get_upload(self, conversation_id: str, file_id: str) -> Attachment | None:
        return self._uploads.get(conversation_id, {}).get(file_id)

    def connect_agent(self, conversation_id: str, agent_id: str) -> AgentConnection | None:
        conversation, _ = self._writable(conversation_id)
        if conversation is None:
            return None
        profile = self._profile(conversation)
        if profile is None:
            return None

        timers = self._timers_for(conversation.id)
        # Reconectar durante CONNECTING substitui a tentativa anterior
        timers.cancel_agent()

        def on_connected(connection: AgentConnection, agent: SupportAgent) -> None:
            timers.agent = None
            if conversation.id != self._active_id:
                return
            self._connections[conversation.id] = connection
            conversation.messages.append(
                Message(
                    id=new_message_id(),
                    type=MessageType.BOT,
                    content=agent_joined_message(agent),
                )
            )
            self._save(conversation)
            log_flow_event(logger, "agent_connected", conversation.id, agent_id=agent.id)

        connection, handle = self._connector.connect(profile.agents, agent_id, on_connected)
        self._connections[conversation.id] = connection
        timers.agent = handle
        return connection

    # ------------------------------------------------------------------
    # Transições do fluxo
    # ------------------------------------------------------------------

    def _respond(self, conversation: Conversation, value: str) -> None:
        profile = self._profile(conversation)
        if profile is None:
            return

        plan = self._engine.respond(
            profile.flow,
            conversation.current_flow_step_id,
            value,
            conversation.sidebar_sections,
            conversation.flow_scratch,
        )
        conversation.sidebar_sections = plan.sidebar
        conversation.flow_scratch = plan.scratch

        timers = self._timers_for(conversation.id)
        if timers.cancel_advance():
            log_flow_event(
                logger,
                "advance_replaced",
                conversation.id,
                step_id=conversation.current_flow_step_id,
            )

        conversation.pending_step_id = plan.next_step_id
        self._save(conversation)

        if plan.next_step_id is None:
            log_flow_event(
                logger, "flow_terminal", conversation.id, step_id=plan.step_id
            )
            return
        self._schedule_advance(
            conversation, plan.next_step_id, self._settings.response_advance_delay_ms
        )

    def _enter_step(self, conversation: Conversation, step_id: str) -> None:
        conversation.current_flow_step_id = step_id
        conversation.step_activated = False
        conversation.pending_step_id = None
        self._save(conversation)
        self._schedule_activation(conversation)

    def _schedule_activation(self, conversation: Conversation) -> None:
        profile = self._profile(conversation)
        if profile is None:
            return
        step_id = conversation.current_flow_step_id
        step = profile.flow.get_step(step_id)
        if step is None:
            if step_id is not None:
                logger.warning(
                    "Flow step not found; conversation is inert",
                    extra={"conversation_id": short_id(conversation.id), "step_id": step_id},
                )
            return

        delay_ms = step.delay_ms if step.delay_ms is not None else self._settings.default_step_delay_ms
        timers = self._timers_for(conversation.id)
        if timers.activation is not None:
            timers.activation.cancel()
        timers.activation = self._scheduler.call_later(
            delay_ms, lambda: self._on_activation_timer(conversation.id, step.id)
        )
        self._typing.add(conversation.id)
        log_flow_event(
            logger, "step_scheduled", conversation.id, step_id=step.id, delay_ms=delay_ms
        )

    def _on_activation_timer(self, conversation_id: str, step_id: str) -> None:
        timers = self._timers.get(conversation_id)
        if timers is not None:
            timers.activation = None
        self._typing.discard(conversation_id)

        conversation = self._store.get(conversation_id)
        if conversation is None or not self._is_current(conversation, step_id):
            return
        if conversation.step_activated:
            return
        profile = self._profile(conversation)
        if profile is None:
            return

        plan = self._engine.activate(
            profile.flow,
            step_id,
            conversation.steps,
            conversation.sidebar_sections,
            conversation.flow_scratch,
        )
        if plan is None:
            return

        conversation.messages.append(plan.message)
        conversation.steps = plan.progress
        conversation.sidebar_sections = plan.sidebar
        conversation.step_activated = True
        self._save(conversation)
        log_flow_event(logger, "step_activated", conversation.id, step_id=step_id)

        if plan.auto_advance_to is not None:
            self._schedule_advance(
                conversation, plan.auto_advance_to, self._settings.auto_advance_delay_ms
            )

    def _schedule_advance(self, conversation: Conversation, next_step_id: str, delay_ms: int) -> None:
        from_step_id = conversation.current_flow_step_id
        timers = self._timers_for(conversation.id)
        timers.cancel_advance()
        timers.advance = self._scheduler.call_later(
            delay_ms,
            lambda: self._on_advance_timer(conversation.id, from_step_id, next_step_id),
        )
        log_flow_event(
            logger,
            "advance_scheduled",
            conversation.id,
            step_id=from_step_id,
            next_step_id=next_step_id,
            delay_ms=delay_ms,
        )

    def _on_advance_timer(
        self, conversation_id: str, from_step_id: str | None, next_step_id: str
    ) -> None:
        timers = self._timers.get(conversation_id)
        if timers is not None:
            timers.advance = None
        conversation = self._store.get(conversation_id)
        if conversation is None or not self._is_current(conversation, from_step_id):
            return
        self._enter_step(conversation, next_step_id)

    def _resume(self, conversation: Conversation) -> None:
        """Reagenda a transição interrompida pela troca de conversa."""
        profile = self._profile(conversation)
        if profile is None or conversation.current_flow_step_id is None:
            return

        if not conversation.step_activated:
            self._schedule_activation(conversation)
            return

        if conversation.pending_step_id is not None:
            self._schedule_advance(
                conversation,
                conversation.pending_step_id,
                self._settings.response_advance_delay_ms,
            )
            return

        step = profile.flow.get_step(conversation.current_flow_step_id)
        if step is not None and step.auto_advance_target is not None:
            self._schedule_advance(
                conversation, step.auto_advance_target, self._settings.auto_advance_delay_ms
            )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _profile(self, conversation: Conversation) -> DomainProfile | None:
        return self._registry.get(conversation.domain)

    def _is_current(self, conversation: Conversation, step_id: str | None) -> bool:
        """Guarda dos timers: conversa ainda ativa e cursor inalterado."""
        return (
            conversation.id == self._active_id
            and conversation.current_flow_step_id == step_id
        )

    def _writable(self, conversation_id: str) -> tuple[Conversation | None, SubmitResult]:
        conversation = self._store.get(conversation_id)
        if conversation is None:
            return None, SubmitResult(accepted=False, reason="not_found")
        if conversation.id != self._active_id:
            log_flow_event(logger, "input_ignored_inactive", conversation.id)
            return None, SubmitResult(accepted=False, reason="inactive")
        return conversation, SubmitResult(accepted=True)

    def _awaiting_step(self, conversation: Conversation) -> FlowStep | None:
        """Passo que aceita resposta agora (mensagem exibida e input/escolha esperada)."""
        if not conversation.step_activated:
            return None
        profile = self._profile(conversation)
        if profile is None:
            return None
        step = profile.flow.get_step(conversation.current_flow_step_id)
        if step is None or not step.expects_response:
            return None
        return step

    def _append_user_message(
        self, conversation: Conversation, content: str, attachments: list[Attachment]
    ) -> Message:
        message = Message(
            id=new_message_id(),
            type=MessageType.USER,
            content=content,
            attachments=[
                Attachment(
                    id=a.id,
                    name=a.name,
                    size=a.size,
                    type=a.type,
                    url=a.url,
                    upload_progress=100,
                    status=AttachmentStatus.SUCCESS,
                )
                for a in attachments
            ]
            or None,
        )
        conversation.messages.append(message)
        uploads = self._uploads.get(conversation.id)
        if uploads:
            for attachment in attachments:
                uploads.pop(attachment.id, None)
        return message

    def _reset_flow_state(self, conversation: Conversation, profile: DomainProfile) -> None:
        conversation.messages = []
        conversation.steps = clone_progress(list(profile.initial_progress))
        sidebar = clone_sidebar(list(profile.initial_sidebar))
        if profile.creation_patches:
            ctx = PatchContext(value=self._today().isoformat())
            sidebar = apply_sidebar_patches(sidebar, profile.creation_patches, ctx)
        conversation.sidebar_sections = sidebar
        conversation.current_flow_step_id = profile.flow.start_step_id
        conversation.step_activated = False
        conversation.pending_step_id = None
        conversation.flow_scratch = {}
        conversation.title = profile.fallback_title

    def _save(self, conversation: Conversation) -> None:
        profile = self._profile(conversation)
        fallback = profile.fallback_title if profile else conversation.title
        self._store.save(conversation, fallback)

    def _timers_for(self, conversation_id: str) -> _ConversationTimers:
        return self._timers.setdefault(conversation_id, _ConversationTimers())

    def _cancel_timers(self, conversation_id: str) -> int:
        timers = self._timers.pop(conversation_id, None)
        self._typing.discard(conversation_id)
        cancelled = timers.cancel_all() if timers else 0
        if cancelled:
            log_flow_event(logger, "timers_cancelled", conversation_id, cancelled=cancelled)
        return cancelled

    def _discard_runtime(self, conversation_id: str) -> None:
        """Cancela timers e descarta uploads/conexão em andamento da conversa."""
        self._cancel_timers(conversation_id)
        self._uploads.pop(conversation_id, None)
        connection = self._connections.get(conversation_id)
        if connection is None or connection.status != ConnectionStatus.CONNECTED:
            self._connections.pop(conversation_id, None)

    def _deactivate_current(self) -> None:
        if self._active_id is not None:
            self._discard_runtime(self._active_id)

    def _reset_transient(self) -> None:
        self._primary_action = None
        self._exclusive = {}
