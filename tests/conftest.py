from __future__ import annotations

import random
from datetime import date

import pytest
from fastapi.testclient import TestClient

from guided_chat.api.app import create_app
from guided_chat.application.chat_service import ChatService, ChatSnapshot, SubmitResult
from guided_chat.config.settings import Settings, get_settings
from guided_chat.domain.models import Conversation
from guided_chat.infra.scheduler import ManualScheduler

FIXED_TODAY = date(2026, 10, 19)


class ChatHarness:
    """Dirige o ChatService sobre relógio virtual (cada ação roda os timers até parar)."""

    def __init__(self, service: ChatService, scheduler: ManualScheduler) -> None:
        self.service = service
        self.scheduler = scheduler

    @property
    def active_id(self) -> str:
        assert self.service.active_conversation_id is not None
        return self.service.active_conversation_id

    def settle(self) -> None:
        self.scheduler.run_until_idle()

    def open(self, domain: str) -> Conversation:
        conversation = self.service.open_domain(domain)
        assert conversation is not None
        self.settle()
        return conversation

    def send(self, text: str) -> SubmitResult:
        result = self.service.submit_user_input(self.active_id, text)
        self.settle()
        return result

    def choose(self, value: str) -> SubmitResult:
        reply = self.service.find_quick_reply(self.active_id, value)
        assert reply is not None, f"quick reply {value!r} not offered"
        result = self.service.select_quick_reply(self.active_id, reply)
        self.settle()
        return result

    def snapshot(self) -> ChatSnapshot:
        snapshot = self.service.snapshot()
        assert snapshot is not None
        return snapshot

    @property
    def step(self) -> str | None:
        return self.snapshot().current_flow_step_id

    def field(self, section_id: str, label: str) -> str | int | None:
        for section in self.snapshot().sidebar_sections:
            if section.id == section_id:
                item = section.field(label)
                return item.value if item else None
        return None


@pytest.fixture()
def settings() -> Settings:
    return Settings()


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def service(settings: Settings, scheduler: ManualScheduler) -> ChatService:
    return ChatService(
        settings=settings,
        scheduler=scheduler,
        rng=random.Random(7),
        today=lambda: FIXED_TODAY,
    )


@pytest.fixture()
def harness(service: ChatService, scheduler: ManualScheduler) -> ChatHarness:
    return ChatHarness(service, scheduler)


@pytest.fixture()
def api_scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def client(api_scheduler: ManualScheduler):
    get_settings.cache_clear()
    app = create_app(scheduler=api_scheduler, rng=random.Random(7))
    app.state.chat_service._today = lambda: FIXED_TODAY  # noqa: SLF001 - data fixa nos testes
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_harness():
    """Fábrica de harness com Settings sob medida (ex.: taxa de falha do upload)."""

    def factory(**overrides) -> ChatHarness:
        scheduler = ManualScheduler()
        service = ChatService(
            settings=Settings(**overrides),
            scheduler=scheduler,
            rng=random.Random(11),
            today=lambda: FIXED_TODAY,
        )
        return ChatHarness(service, scheduler)

    return factory
