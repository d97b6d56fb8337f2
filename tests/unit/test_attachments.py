"""Testes das regras de anexos e do upload simulado."""

from __future__ import annotations

import random

from guided_chat.application.attachments import (
    UPLOAD_FAILED_MESSAGE,
    UploadSimulator,
    file_label,
    format_file_size,
    new_attachment,
    validate_attachments,
    validate_file_count,
    validate_file_size,
    validate_file_type,
)
from guided_chat.domain.enums import AttachmentStatus, DomainId
from guided_chat.flows.attachments import FILE_RULES, MB
from guided_chat.infra.scheduler import ManualScheduler

BANKING = FILE_RULES[DomainId.BANKING]


def test_format_file_size():
    assert format_file_size(0) == "0 Bytes"
    assert format_file_size(512) == "512 Bytes"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(5 * MB) == "5 MB"


def test_file_label():
    assert file_label("application/pdf") == "PDF Document"
    assert file_label("application/zip") == "File"


def test_type_rule():
    assert validate_file_type(BANKING, "application/pdf").valid
    result = validate_file_type(BANKING, "application/zip")
    assert not result.valid
    assert result.error.startswith('File type "application/zip" not supported.')


def test_size_rule():
    assert validate_file_size(BANKING, 5 * MB).valid
    result = validate_file_size(BANKING, 6 * MB)
    assert result.error == "File size 6 MB exceeds maximum 5MB"


def test_count_rule():
    assert validate_file_count(BANKING, 2, 1).valid
    result = validate_file_count(BANKING, 3, 1)
    assert result.error == "Maximum 3 files allowed. You have 3 file(s) attached."


def test_batch_checks_count_first():
    files = [("application/zip", 1)] * 4
    result = validate_attachments(BANKING, files)
    assert result.error.startswith("Maximum 3 files allowed.")


def _run_upload(failure_rate: float):
    scheduler = ManualScheduler()
    simulator = UploadSimulator(scheduler, random.Random(3), tick_ms=200, failure_rate=failure_rate)
    attachment = new_attachment("photo.png", 1024, "image/png")
    seen: list[int] = []
    simulator.start(
        attachment,
        on_update=lambda a: seen.append(a.upload_progress),
        track=lambda handle: None,
    )
    scheduler.run_until_idle()
    return attachment, seen


def test_upload_success_reaches_full_progress():
    attachment, seen = _run_upload(failure_rate=0.0)
    assert attachment.status == AttachmentStatus.SUCCESS
    assert attachment.upload_progress == 100
    assert attachment.url == f"memory://uploads/{attachment.id}"
    assert all(progress <= 95 for progress in seen[:-1])


def test_upload_failure_is_reported_as_data():
    attachment, _ = _run_upload(failure_rate=1.0)
    assert attachment.status == AttachmentStatus.ERROR
    assert attachment.error == UPLOAD_FAILED_MESSAGE
    assert attachment.url is None
