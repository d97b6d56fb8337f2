"""Modelos de domínio (contratos entre motor de fluxo, store e apresentação).

- Message: entrada imutável do log (exceto edição explícita do usuário)
- ProgressStep / SidebarSection: estado espelhado no painel de resumo
- Conversation: unidade de persistência em memória do store
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from guided_chat.domain.enums import (
    AttachmentStatus,
    BadgeVariant,
    DomainId,
    InputFieldType,
    MessageType,
    StepStatus,
)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class QuickReply(BaseModel):
    """Opção selecionável exibida junto à mensagem do bot.

    - is_primary_action: exclusiva com todas as outras ações primárias da conversa
    - exclusive_group: exclusiva apenas entre opções do mesmo grupo
    """

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    value: str
    is_primary_action: bool = False
    exclusive_group: str | None = None


class InputField(BaseModel):
    """Descritor de input livre/tipado esperado pelo passo."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: InputFieldType = InputFieldType.TEXT
    label: str
    placeholder: str | None = None
    required: bool = True


class Attachment(BaseModel):
    """Anexo enviado junto a uma mensagem do usuário."""

    id: str
    name: str
    size: int
    type: str  # MIME type
    url: str | None = None
    upload_progress: int = 0
    status: AttachmentStatus = AttachmentStatus.UPLOADING
    error: str | None = None


class Message(BaseModel):
    """Mensagem do log da conversa."""

    id: str
    type: MessageType
    content: str
    timestamp: datetime = Field(default_factory=_utcnow)
    quick_replies: list[QuickReply] | None = None
    input_field: InputField | None = None
    attachments: list[Attachment] | None = None


class ProgressStep(BaseModel):
    """Passo do tracker de progresso."""

    id: str
    label: str
    sublabel: str | None = None
    status: StepStatus = StepStatus.UPCOMING


class SidebarBadge(BaseModel):
    label: str
    variant: BadgeVariant = BadgeVariant.DEFAULT


class SidebarField(BaseModel):
    """Campo exibido numa seção da sidebar.

    `label` é a chave estável usada pelas atualizações direcionadas.
    """

    label: str
    value: str | int
    editable: bool | None = None
    bold: bool | None = None
    highlight: bool | None = None


class SidebarSection(BaseModel):
    """Seção do painel de resumo; `fields` está em ordem de exibição."""

    id: str
    title: str
    icon: str | None = None
    badge: SidebarBadge | None = None
    fields: list[SidebarField] = Field(default_factory=list)
    collapsible: bool | None = None
    default_open: bool | None = None

    def field(self, label: str) -> SidebarField | None:
        """Retorna o primeiro campo com o label informado."""
        for item in self.fields:
            if item.label == label:
                return item
        return None


class Conversation(BaseModel):
    """Thread de conversa de um domínio.

    Além do estado visível (mensagens, progresso, sidebar), guarda o cursor do
    fluxo e a fase da transição para permitir retomar após troca de conversa:
    - step_activated: mensagem do passo corrente já foi emitida
    - pending_step_id: próximo passo já resolvido, aguardando o avanço
    - flow_scratch: valores lembrados pelo fluxo (ex.: trip_type)
    """

    id: str
    domain: DomainId
    title: str
    messages: list[Message] = Field(default_factory=list)
    steps: list[ProgressStep] = Field(default_factory=list)
    sidebar_sections: list[SidebarSection] = Field(default_factory=list)
    current_flow_step_id: str | None = None
    step_activated: bool = False
    pending_step_id: str | None = None
    flow_scratch: dict[str, str] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=_utcnow)

    def first_user_message(self) -> Message | None:
        for message in self.messages:
            if message.type == MessageType.USER:
                return message
        return None


def clone_progress(steps: list[ProgressStep]) -> list[ProgressStep]:
    """Cópia profunda da lista de progresso (config nunca é mutada in place)."""
    return [step.model_copy(deep=True) for step in steps]


def clone_sidebar(sections: list[SidebarSection]) -> list[SidebarSection]:
    """Cópia profunda das seções da sidebar."""
    return [section.model_copy(deep=True) for section in sections]
