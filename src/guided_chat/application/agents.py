"""Conexão simulada com atendente humano.

Falhas (agente inexistente ou offline) são retornadas como status da
conexão, nunca como exceção.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from pydantic import BaseModel

from guided_chat.domain.enums import AgentStatus, ConnectionStatus
from guided_chat.flows.agents import SupportAgent
from guided_chat.infra.scheduler import Scheduler, TimerHandle
from guided_chat.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

AGENT_NOT_FOUND = "Agent not found"
AGENT_OFFLINE = "This agent is currently offline"


class AgentConnection(BaseModel):
    status: ConnectionStatus
    agent_id: str
    agent_name: str | None = None
    error: str | None = None


def agent_joined_message(agent: SupportAgent) -> str:
    return (
        f"🟢 {agent.name} has joined the conversation. "
        "You're now speaking with a human agent who can provide personalized assistance."
    )


def find_agent(agents: Iterable[SupportAgent], agent_id: str) -> SupportAgent | None:
    for agent in agents:
        if agent.id == agent_id:
            return agent
    return None


class AgentConnector:
    """Simula a entrada do atendente após `connect_delay_ms`."""

    def __init__(self, scheduler: Scheduler, connect_delay_ms: int = 2000) -> None:
        self._scheduler = scheduler
        self._connect_delay_ms = connect_delay_ms

    def connect(
        self,
        agents: Iterable[SupportAgent],
        agent_id: str,
        on_connected: Callable[[AgentConnection, SupportAgent], None],
    ) -> tuple[AgentConnection, TimerHandle | None]:
        """Inicia a conexão.

        Returns:
            Tupla (estado inicial da conexão, timer agendado ou None em caso de erro)
        """
        agent = find_agent(agents, agent_id)
        if agent is None:
            logger.info("Agent connection rejected", extra={"agent_id": agent_id, "reason": "not_found"})
            return (
                AgentConnection(status=ConnectionStatus.ERROR, agent_id=agent_id, error=AGENT_NOT_FOUND),
                None,
            )
        if agent.status == AgentStatus.OFFLINE:
            logger.info("Agent connection rejected", extra={"agent_id": agent_id, "reason": "offline"})
            return (
                AgentConnection(
                    status=ConnectionStatus.ERROR,
                    agent_id=agent_id,
                    agent_name=agent.name,
                    error=AGENT_OFFLINE,
                ),
                None,
            )

        connection = AgentConnection(
            status=ConnectionStatus.CONNECTING, agent_id=agent.id, agent_name=agent.name
        )

        def finish() -> None:
            on_connected(
                connection.model_copy(update={"status": ConnectionStatus.CONNECTED}), agent
            )

        handle = self._scheduler.call_later(self._connect_delay_ms, finish)
        return connection, handle
