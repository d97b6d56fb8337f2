"""Testes do store de conversas em memória."""

from __future__ import annotations

from guided_chat.application.conversation_store import ConversationStore, derive_title
from guided_chat.domain.enums import DomainId, MessageType
from guided_chat.domain.models import Conversation, Message


def _conversation(conversation_id: str, domain: DomainId = DomainId.INSURANCE) -> Conversation:
    return Conversation(id=conversation_id, domain=domain, title="Insurance Chat")


def _user(content: str) -> Message:
    return Message(id=content[:8] or "empty", type=MessageType.USER, content=content)


def test_title_falls_back_without_user_message():
    conversation = _conversation("c1")
    conversation.messages.append(Message(id="b", type=MessageType.BOT, content="Hello"))
    assert derive_title(conversation, "Insurance Chat") == "Insurance Chat"


def test_title_uses_first_user_message():
    conversation = _conversation("c1")
    conversation.messages += [_user("887654321"), _user("John Doe")]
    assert derive_title(conversation, "Insurance Chat") == "887654321"


def test_title_is_truncated_at_fifty_chars():
    conversation = _conversation("c1")
    long_text = "a" * 60
    conversation.messages.append(_user(long_text))
    assert derive_title(conversation, "x") == "a" * 50 + "..."

    exact = _conversation("c2")
    exact.messages.append(_user("b" * 50))
    assert derive_title(exact, "x") == "b" * 50


def test_blank_first_message_uses_fallback():
    conversation = _conversation("c1")
    conversation.messages.append(_user("   "))
    assert derive_title(conversation, "Insurance Chat") == "Insurance Chat"


def test_store_orders_most_recent_first():
    store = ConversationStore()
    store.create(_conversation("old"))
    store.create(_conversation("new"))
    store.create(_conversation("bank", DomainId.BANKING))

    assert [c.id for c in store.list_for_domain(DomainId.INSURANCE)] == ["new", "old"]
    assert store.most_recent(DomainId.INSURANCE).id == "new"
    assert store.most_recent(DomainId.HEALTHCARE) is None
    assert len(store) == 3


def test_save_recomputes_title():
    store = ConversationStore()
    conversation = store.create(_conversation("c1"))
    conversation.messages.append(_user("Hello there"))
    store.save(conversation, "Insurance Chat")
    assert store.get("c1").title == "Hello there"


def test_delete_and_clear():
    store = ConversationStore()
    store.create(_conversation("c1"))
    store.create(_conversation("c2"))

    assert store.delete("c1") is True
    assert store.delete("c1") is False
    assert "c1" not in store
    assert store.clear() == 1
    assert store.all() == []
