"""Validação e upload simulado de anexos.

Falhas (tipo, tamanho, quantidade, upload) são dados no próprio anexo
(`status="error"` + mensagem), nunca exceções.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from guided_chat.domain.enums import AttachmentStatus
from guided_chat.domain.models import Attachment
from guided_chat.flows.attachments import FILE_TYPE_LABELS, FileRules
from guided_chat.infra.scheduler import Scheduler, TimerHandle
from guided_chat.observability.logging import get_logger
from guided_chat.utils.ids import new_file_id

logger: logging.Logger = get_logger(__name__)

UPLOAD_FAILED_MESSAGE = "Upload failed. Please try again."
_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


@dataclass(frozen=True, slots=True)
class FileCheck:
    valid: bool
    error: str | None = None


def format_file_size(size: int) -> str:
    """Tamanho legível (ex.: 1536 → '1.5 KB')."""
    if size <= 0:
        return "0 Bytes"
    index = min(int(math.floor(math.log(size, 1024))), len(_SIZE_UNITS) - 1)
    scaled = round(size / (1024**index), 2)
    if scaled == int(scaled):
        scaled = int(scaled)
    return f"{scaled} {_SIZE_UNITS[index]}"


def file_label(mime_type: str) -> str:
    return FILE_TYPE_LABELS.get(mime_type, "File")


def validate_file_type(rules: FileRules, mime_type: str) -> FileCheck:
    if mime_type in rules.allowed_types:
        return FileCheck(valid=True)
    allowed = ", ".join(t.split("/", 1)[1].upper() for t in rules.allowed_types)
    return FileCheck(
        valid=False, error=f'File type "{mime_type}" not supported. Allowed: {allowed}'
    )


def validate_file_size(rules: FileRules, size: int) -> FileCheck:
    if size <= rules.max_size_bytes:
        return FileCheck(valid=True)
    return FileCheck(
        valid=False,
        error=f"File size {format_file_size(size)} exceeds maximum {rules.max_size_mb}MB",
    )


def validate_file_count(rules: FileRules, current_count: int, new_count: int) -> FileCheck:
    if current_count + new_count <= rules.max_files:
        return FileCheck(valid=True)
    return FileCheck(
        valid=False,
        error=(
            f"Maximum {rules.max_files} files allowed. "
            f"You have {current_count} file(s) attached."
        ),
    )


def validate_attachments(
    rules: FileRules, files: Sequence[tuple[str, int]], current_count: int = 0
) -> FileCheck:
    """Valida um lote de arquivos (mime_type, size); a primeira falha vence.

    Quantidade é checada antes de tipo e tamanho de cada arquivo.
    """
    count_check = validate_file_count(rules, current_count, len(files))
    if not count_check.valid:
        return count_check
    for mime_type, size in files:
        for check in (validate_file_type(rules, mime_type), validate_file_size(rules, size)):
            if not check.valid:
                return check
    return FileCheck(valid=True)


def new_attachment(name: str, size: int, mime_type: str) -> Attachment:
    return Attachment(id=new_file_id(), name=name, size=size, type=mime_type)


class UploadSimulator:
    """Upload simulado: progresso aleatório por tick e taxa de falha configurável.

    O progresso fica limitado a 95% até a conclusão; o resultado final é
    sucesso (100%, url) ou erro com mensagem.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        rng: random.Random | None = None,
        tick_ms: int = 200,
        failure_rate: float = 0.05,
    ) -> None:
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._tick_ms = tick_ms
        self._failure_rate = failure_rate

    def start(
        self,
        attachment: Attachment,
        on_update: Callable[[Attachment], None],
        track: Callable[[TimerHandle], None],
    ) -> None:
        """Inicia o upload; cada timer agendado é entregue a `track` para cancelamento."""
        state = {"progress": 0.0}

        def tick() -> None:
            state["progress"] += self._rng.random() * 30
            if state["progress"] < 100:
                attachment.upload_progress = int(min(state["progress"], 95))
                on_update(attachment)
                track(self._scheduler.call_later(self._tick_ms, tick))
                return

            if self._rng.random() > self._failure_rate:
                attachment.upload_progress = 100
                attachment.status = AttachmentStatus.SUCCESS
                attachment.url = f"memory://uploads/{attachment.id}"
            else:
                attachment.status = AttachmentStatus.ERROR
                attachment.error = UPLOAD_FAILED_MESSAGE
                logger.info(
                    "Simulated upload failed",
                    extra={"file_id": attachment.id, "size": attachment.size},
                )
            on_update(attachment)

        track(self._scheduler.call_later(self._tick_ms, tick))
