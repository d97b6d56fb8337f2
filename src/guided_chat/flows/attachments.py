"""Regras de anexos por domínio (tipos MIME, tamanho e quantidade)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from guided_chat.domain.enums import DomainId

MB = 1024 * 1024


class FileRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed_types: tuple[str, ...]
    max_size_mb: int
    max_files: int
    description: str

    @property
    def max_size_bytes(self) -> int:
        return self.max_size_mb * MB


FILE_TYPE_LABELS: dict[str, str] = {
    "image/jpeg": "JPEG Image",
    "image/jpg": "JPG Image",
    "image/png": "PNG Image",
    "image/heic": "HEIC Image",
    "application/pdf": "PDF Document",
    "application/msword": "Word Document",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "Word Document",
    "text/calendar": "Calendar File",
    "text/plain": "Text File",
    "application/dicom": "DICOM Image",
}

FILE_RULES: dict[DomainId, FileRules] = {
    DomainId.INSURANCE: FileRules(
        allowed_types=(
            "image/jpeg",
            "image/jpg",
            "image/png",
            "image/heic",
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ),
        max_size_mb=10,
        max_files=5,
        description="Images (JPEG, PNG, HEIC), PDFs, or Documents (DOC, DOCX) up to 10MB",
    ),
    DomainId.BANKING: FileRules(
        allowed_types=("image/jpeg", "image/jpg", "image/png", "application/pdf", "image/heic"),
        max_size_mb=5,
        max_files=3,
        description="Images (JPEG, PNG, HEIC) or PDFs up to 5MB",
    ),
    DomainId.BOOKING: FileRules(
        allowed_types=(
            "image/jpeg",
            "image/jpg",
            "image/png",
            "application/pdf",
            "text/calendar",
            "text/plain",
        ),
        max_size_mb=8,
        max_files=4,
        description="Images (JPEG, PNG), PDFs, Calendar files (ICS), or Text files up to 8MB",
    ),
    DomainId.HEALTHCARE: FileRules(
        allowed_types=(
            "image/jpeg",
            "image/jpg",
            "image/png",
            "image/heic",
            "application/pdf",
            "application/dicom",
        ),
        max_size_mb=15,
        max_files=10,
        description="Medical images (JPEG, PNG, HEIC, DICOM) or PDFs up to 15MB",
    ),
}
