"""Store de conversas em memória (vida útil = sessão da aplicação).

- Ordenado do mais recente para o mais antigo
- save() é síncrono e recalcula o título a cada chamada
- Não há persistência: close/clear descarta tudo
"""

from __future__ import annotations

import logging

from guided_chat.config.settings import TITLE_MAX_CHARS
from guided_chat.domain.enums import DomainId
from guided_chat.domain.models import Conversation
from guided_chat.observability.logging import get_logger, short_id

logger: logging.Logger = get_logger(__name__)


def derive_title(conversation: Conversation, fallback: str, max_chars: int = TITLE_MAX_CHARS) -> str:
    """Título a partir da primeira mensagem do usuário (truncada) ou fallback do domínio."""
    first = conversation.first_user_message()
    if first is None:
        return fallback
    content = first.content
    if not content.strip():
        return fallback
    if len(content) > max_chars:
        return content[:max_chars] + "..."
    return content


class ConversationStore:
    """Armazenamento em memória das conversas da sessão."""

    def __init__(self, title_max_chars: int = TITLE_MAX_CHARS) -> None:
        self._conversations: dict[str, Conversation] = {}
        self._order: list[str] = []
        self._title_max_chars = title_max_chars

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self._conversations

    def create(self, conversation: Conversation) -> Conversation:
        """Insere a conversa no topo da lista."""
        self._conversations[conversation.id] = conversation
        self._order.insert(0, conversation.id)
        logger.debug(
            "Conversation created (in-memory)",
            extra={
                "conversation_id": short_id(conversation.id),
                "domain": conversation.domain,
            },
        )
        return conversation

    def get(self, conversation_id: str) -> Conversation | None:
        return self._conversations.get(conversation_id)

    def save(self, conversation: Conversation, fallback_title: str) -> Conversation:
        """Sobrescreve a cópia do store e recalcula o título."""
        if conversation.id not in self._conversations:
            logger.debug(
                "Save ignored for unknown conversation",
                extra={"conversation_id": short_id(conversation.id)},
            )
            return conversation

        conversation.title = derive_title(conversation, fallback_title, self._title_max_chars)
        self._conversations[conversation.id] = conversation
        return conversation

    def delete(self, conversation_id: str) -> bool:
        if conversation_id not in self._conversations:
            return False
        del self._conversations[conversation_id]
        self._order.remove(conversation_id)
        logger.debug(
            "Conversation deleted (in-memory)",
            extra={"conversation_id": short_id(conversation_id)},
        )
        return True

    def list_for_domain(self, domain: DomainId | str) -> list[Conversation]:
        """Conversas do domínio, da mais recente para a mais antiga."""
        return [
            self._conversations[cid]
            for cid in self._order
            if self._conversations[cid].domain == domain
        ]

    def most_recent(self, domain: DomainId | str) -> Conversation | None:
        items = self.list_for_domain(domain)
        return items[0] if items else None

    def all(self) -> list[Conversation]:
        return [self._conversations[cid] for cid in self._order]

    def clear(self) -> int:
        """Remove todas as conversas. Retorna quantas foram descartadas."""
        count = len(self._order)
        self._conversations.clear()
        self._order.clear()
        logger.debug("Conversation store cleared", extra={"discarded": count})
        return count
