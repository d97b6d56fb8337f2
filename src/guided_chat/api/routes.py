"""Rotas HTTP do chat guiado.

Todas as rotas são async: os timers do fluxo são agendados no event loop
em execução.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from guided_chat.api.dependencies import get_chat_service, get_settings
from guided_chat.api.schemas import (
    DomainInfo,
    EditMessageRequest,
    NewConversationRequest,
    QuickReplyRequest,
    SessionClosedResponse,
    SubmitMessageRequest,
    SubmitResponse,
    UploadRequest,
    ValidationErrorDetail,
)
from guided_chat.application.agents import AgentConnection
from guided_chat.application.chat_service import (
    ChatService,
    ChatSnapshot,
    HistoryItem,
    SubmitResult,
)
from guided_chat.config.settings import Settings
from guided_chat.domain.enums import DomainId
from guided_chat.domain.models import Attachment

router = APIRouter()


def _not_found(detail: str = "conversation_not_found") -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _snapshot_or_404(service: ChatService, conversation_id: str) -> ChatSnapshot:
    snapshot = service.snapshot(conversation_id)
    if snapshot is None:
        raise _not_found()
    return snapshot


def _submit_response(result: SubmitResult) -> SubmitResponse:
    """Converte SubmitResult em resposta HTTP (erros esperados viram 4xx)."""
    if result.accepted:
        return SubmitResponse(accepted=True, message_id=result.message_id)
    if result.reason == "not_found":
        raise _not_found()
    if result.reason == "inactive":
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="conversation_inactive")

    error = result.validation.error if result.validation else None
    raise HTTPException(
        status_code=422,
        detail=ValidationErrorDetail(reason=result.reason or "invalid", error=error).model_dump(),
    )


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Healthcheck simples."""
    return {"status": "ok", "service": settings.service_name, "version": settings.version}


@router.get("/domains")
async def list_domains(service: ChatService = Depends(get_chat_service)) -> list[DomainInfo]:
    return [
        DomainInfo(
            id=profile.id,
            name=profile.name,
            title=profile.title,
            subtitle=profile.subtitle,
            start_step_id=profile.flow.start_step_id,
            file_rules_description=profile.file_rules.description,
        )
        for profile in service.registry.profiles()
    ]


@router.post("/domains/{domain}/open")
async def open_domain(
    domain: str, service: ChatService = Depends(get_chat_service)
) -> ChatSnapshot:
    """Seleciona o domínio (retoma a conversa mais recente ou cria uma nova)."""
    conversation = service.open_domain(domain)
    if conversation is None:
        raise _not_found("domain_not_found")
    return _snapshot_or_404(service, conversation.id)


@router.post("/conversations", status_code=status.HTTP_201_CREATED)
async def new_conversation(
    body: NewConversationRequest, service: ChatService = Depends(get_chat_service)
) -> ChatSnapshot:
    conversation = service.new_conversation(body.domain)
    if conversation is None:
        raise _not_found("domain_not_found")
    return _snapshot_or_404(service, conversation.id)


@router.get("/conversations")
async def list_conversations(
    domain: DomainId = Query(...), service: ChatService = Depends(get_chat_service)
) -> list[HistoryItem]:
    return service.list_history(domain)


@router.get("/conversations/{conversation_id}")
async def get_conversation(
    conversation_id: str, service: ChatService = Depends(get_chat_service)
) -> ChatSnapshot:
    return _snapshot_or_404(service, conversation_id)


@router.delete("/conversations/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_conversation(
    conversation_id: str, service: ChatService = Depends(get_chat_service)
) -> None:
    if not service.delete_conversation(conversation_id):
        raise _not_found()


@router.post("/conversations/{conversation_id}/select")
async def select_conversation(
    conversation_id: str, service: ChatService = Depends(get_chat_service)
) -> ChatSnapshot:
    if not service.select_conversation(conversation_id):
        raise _not_found()
    return _snapshot_or_404(service, conversation_id)


@router.post("/conversations/{conversation_id}/restart")
async def restart_conversation(
    conversation_id: str, service: ChatService = Depends(get_chat_service)
) -> ChatSnapshot:
    if not service.restart_conversation(conversation_id):
        raise _not_found()
    return _snapshot_or_404(service, conversation_id)


@router.post("/conversations/{conversation_id}/messages")
async def submit_message(
    conversation_id: str,
    body: SubmitMessageRequest,
    service: ChatService = Depends(get_chat_service),
) -> SubmitResponse:
    attachments: list[Attachment] = []
    for file_id in body.attachment_ids:
        attachment = service.get_upload(conversation_id, file_id)
        if attachment is None:
            raise _not_found("attachment_not_found")
        attachments.append(attachment)

    result = service.submit_user_input(conversation_id, body.content, attachments)
    return _submit_response(result)


@router.post("/conversations/{conversation_id}/quick-replies")
async def select_quick_reply(
    conversation_id: str,
    body: QuickReplyRequest,
    service: ChatService = Depends(get_chat_service),
) -> SubmitResponse:
    reply = service.find_quick_reply(conversation_id, body.reply_id)
    if reply is None:
        raise _not_found("quick_reply_not_found")
    return _submit_response(service.select_quick_reply(conversation_id, reply))


@router.patch("/conversations/{conversation_id}/messages/{message_id}")
async def edit_message(
    conversation_id: str,
    message_id: str,
    body: EditMessageRequest,
    service: ChatService = Depends(get_chat_service),
) -> ChatSnapshot:
    if not service.edit_message(conversation_id, message_id, body.content):
        raise _not_found("message_not_found")
    return _snapshot_or_404(service, conversation_id)


@router.post(
    "/conversations/{conversation_id}/attachments", status_code=status.HTTP_202_ACCEPTED
)
async def upload_attachment(
    conversation_id: str,
    body: UploadRequest,
    service: ChatService = Depends(get_chat_service),
) -> Attachment:
    """Inicia upload simulado; rejeições de regra vêm como status=error no anexo."""
    attachment = service.start_upload(conversation_id, body.name, body.size, body.type)
    if attachment is None:
        raise _not_found()
    return attachment


@router.get("/conversations/{conversation_id}/attachments/{file_id}")
async def get_attachment(
    conversation_id: str, file_id: str, service: ChatService = Depends(get_chat_service)
) -> Attachment:
    attachment = service.get_upload(conversation_id, file_id)
    if attachment is None:
        raise _not_found("attachment_not_found")
    return attachment


@router.post("/conversations/{conversation_id}/agents/{agent_id}/connect")
async def connect_agent(
    conversation_id: str, agent_id: str, service: ChatService = Depends(get_chat_service)
) -> AgentConnection:
    connection = service.connect_agent(conversation_id, agent_id)
    if connection is None:
        raise _not_found()
    return connection


@router.post("/session/close")
async def close_session(service: ChatService = Depends(get_chat_service)) -> SessionClosedResponse:
    return SessionClosedResponse(discarded=service.close_session())
