from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

BYTES_PER_MB = 1024 * 1024


class VerificationStatus(str, Enum):
    """Lifecycle tag on a business document, owned by the review process."""

    PENDING = "pending"
    VERIFIED = "verified"
    UNDER_REVIEW = "under_review"
    REJECTED = "rejected"


# Rejected documents never count toward the required set.
QUALIFYING_STATUSES: tuple[VerificationStatus, ...] = (
    VerificationStatus.PENDING,
    VerificationStatus.VERIFIED,
    VerificationStatus.UNDER_REVIEW,
)


@dataclass(frozen=True)
class UploadedFile:
    """A file received in one intake request."""

    content: bytes
    filename: str
    mime_type: str
    size_bytes: int

    @property
    def size_mb(self) -> float:
        return self.size_bytes / BYTES_PER_MB

    @property
    def extension(self) -> str:
        """Text after the last dot of the filename, or '' when there is none."""
        _, dot, ext = self.filename.rpartition(".")
        return ext if dot else ""


@dataclass(frozen=True)
class UploadedDocumentSummary:
    """One successfully stored and recorded document."""

    id: str
    document_type: str
    file_name: str
    url: str
    status: str
    uploaded_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "documentType": self.document_type,
            "fileName": self.file_name,
            "url": self.url,
            "status": self.status,
            "uploadedAt": self.uploaded_at.isoformat() if self.uploaded_at else None,
        }


@dataclass
class IntakeResult:
    """Outcome of one batch: per-file successes and errors plus readiness."""

    uploaded: list[UploadedDocumentSummary] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    all_required_uploaded: bool = False
    required_documents: list[str] = field(default_factory=list)
    uploaded_document_types: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Render the caller-facing payload with camelCase keys."""
        return {
            "uploaded": [summary.to_dict() for summary in self.uploaded],
            "errors": list(self.errors),
            "allRequiredUploaded": self.all_required_uploaded,
            "requiredDocuments": list(self.required_documents),
            "uploadedDocumentTypes": list(self.uploaded_document_types),
        }
