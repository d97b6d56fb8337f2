"""Corpos de requisição/resposta da API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from guided_chat.domain.enums import DomainId


class DomainInfo(BaseModel):
    id: DomainId
    name: str
    title: str
    subtitle: str
    start_step_id: str
    file_rules_description: str


class NewConversationRequest(BaseModel):
    domain: DomainId | None = None


class SubmitMessageRequest(BaseModel):
    content: str = ""
    attachment_ids: list[str] = Field(default_factory=list)


class QuickReplyRequest(BaseModel):
    reply_id: str


class EditMessageRequest(BaseModel):
    content: str = Field(min_length=1)


class UploadRequest(BaseModel):
    name: str
    size: int = Field(ge=0)
    type: str


class SubmitResponse(BaseModel):
    accepted: bool
    message_id: str | None = None


class ValidationErrorDetail(BaseModel):
    reason: str
    error: str | None = None


class SessionClosedResponse(BaseModel):
    discarded: int
