"""Atendentes humanos disponíveis por domínio (conexão simulada)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from guided_chat.domain.enums import AgentStatus, DomainId


class SupportAgent(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    role: str
    avatar: str
    status: AgentStatus
    specialization: str
    rating: float
    response_time: str


def _agent(
    agent_id: str,
    name: str,
    role: str,
    avatar: str,
    status: AgentStatus,
    specialization: str,
    rating: float,
    response_time: str,
) -> SupportAgent:
    return SupportAgent(
        id=agent_id,
        name=name,
        role=role,
        avatar=avatar,
        status=status,
        specialization=specialization,
        rating=rating,
        response_time=response_time,
    )


ONLINE = AgentStatus.ONLINE
BUSY = AgentStatus.BUSY

AGENTS: dict[DomainId, tuple[SupportAgent, ...]] = {
    DomainId.INSURANCE: (
        _agent("ins-1", "Sarah Martinez", "Claims Adjuster", "👩‍💼", ONLINE,
               "Auto & Property Claims", 4.9, "< 2 min"),
        _agent("ins-2", "Michael Chen", "Senior Adjuster", "👨‍💼", ONLINE,
               "Complex Claims & Appeals", 4.8, "< 3 min"),
        _agent("ins-3", "Emma Johnson", "Claims Specialist", "👩‍💻", BUSY,
               "Health & Life Insurance", 4.7, "< 5 min"),
    ),
    DomainId.BANKING: (
        _agent("bank-1", "David Williams", "Banking Advisor", "👨‍💼", ONLINE,
               "Accounts & Transfers", 4.9, "< 1 min"),
        _agent("bank-2", "Lisa Anderson", "Financial Specialist", "👩‍💼", ONLINE,
               "Loans & Investments", 4.8, "< 2 min"),
        _agent("bank-3", "Robert Taylor", "Senior Advisor", "👨‍💻", BUSY,
               "Business Banking", 4.9, "< 4 min"),
    ),
    DomainId.BOOKING: (
        _agent("book-1", "Jessica Brown", "Travel Consultant", "👩‍✈️", ONLINE,
               "Flight & Hotel Bookings", 4.9, "< 2 min"),
        _agent("book-2", "Alex Turner", "Senior Travel Agent", "👨‍✈️", ONLINE,
               "Package Deals & Groups", 4.8, "< 3 min"),
        _agent("book-3", "Maria Garcia", "Booking Specialist", "👩‍💼", BUSY,
               "International Travel", 4.7, "< 5 min"),
    ),
    DomainId.HEALTHCARE: (
        _agent("health-1", "Dr. Emily White", "Patient Coordinator", "👩‍⚕️", ONLINE,
               "Appointments & Records", 4.9, "< 2 min"),
        _agent("health-2", "James Wilson", "Healthcare Advisor", "👨‍⚕️", ONLINE,
               "Insurance & Billing", 4.8, "< 3 min"),
        _agent("health-3", "Sophia Lee", "Medical Support", "👩‍💼", BUSY,
               "Specialist Referrals", 4.7, "< 5 min"),
    ),
}
