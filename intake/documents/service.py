import json
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from intake.config.settings import Settings
from intake.database.repositories.business_documents_repository import (
    BusinessDocumentsRepository,
)
from intake.database.repositories.business_profiles_repository import (
    BusinessProfilesRepository,
)
from intake.database.repositories.providers_repository import ProvidersRepository
from intake.documents.exceptions import (
    BusinessNotOwnedError,
    EmptyBatchError,
    InvalidDocumentMappingError,
    MissingIdentifierError,
    RequestFileTooLargeError,
    TooManyFilesError,
    UnsupportedFileTypeError,
)
from intake.documents.models import BYTES_PER_MB, IntakeResult, UploadedFile
from intake.documents.orchestrator import UploadOrchestrator
from intake.logging.logger import Log
from intake.storage.factory import ObjectStoreFactory


def parse_document_mappings(raw: str | Mapping[str, Any] | None) -> dict[str, str]:
    """Parse the filename -> document-type mapping supplied with a request.

    Accepts a JSON object string or an already-decoded mapping. ``None`` and
    the empty string mean no mapping. Key order is preserved.

    Raises:
        InvalidDocumentMappingError: if the value is not an object of strings.
    """
    if raw is None or raw == "":
        return {}
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise InvalidDocumentMappingError(f"Invalid document mappings: {exc}") from exc
    else:
        decoded = raw

    if not isinstance(decoded, Mapping):
        raise InvalidDocumentMappingError("Invalid document mappings: expected an object")
    for key, value in decoded.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise InvalidDocumentMappingError(
                f"Invalid document mappings: entry {key!r} must map a filename to a string"
            )
    return dict(decoded)


class DocumentIntakeService:
    """Validates an intake request and hands the batch to the orchestrator.

    Every check here is request-fatal and runs before any file is stored.
    """

    def __init__(
        self,
        orchestrator: UploadOrchestrator,
        providers_repo: ProvidersRepository,
        *,
        max_files_per_batch: int = 10,
        max_request_file_size_bytes: int = 10 * BYTES_PER_MB,
        allowed_mime_types: Iterable[str] = ("image/jpeg", "image/png", "application/pdf"),
    ) -> None:
        self._orchestrator = orchestrator
        self._providers_repo = providers_repo
        self._max_files_per_batch = max_files_per_batch
        self._max_request_file_size_bytes = max_request_file_size_bytes
        self._allowed_mime_types = frozenset(allowed_mime_types)

    def handle(
        self,
        user_id: str,
        business_id: str,
        files: Sequence[UploadedFile],
        document_mappings: str | Mapping[str, Any] | None = None,
    ) -> IntakeResult:
        """Run request preconditions, then process the batch.

        Raises:
            PreconditionError: subclasses for each failed precondition.
        """
        if not user_id or not business_id:
            raise MissingIdentifierError("Missing userId or businessId")
        if not files:
            raise EmptyBatchError("No files uploaded")
        if len(files) > self._max_files_per_batch:
            raise TooManyFilesError(
                f"Too many files: {len(files)} (max {self._max_files_per_batch})"
            )
        self._check_files(files)
        mapping = parse_document_mappings(document_mappings)

        if self._providers_repo.find_owner(user_id, business_id) is None:
            raise BusinessNotOwnedError("Business profile not found or not owned by user")

        Log.info(
            f"Intake request from user {user_id} for business {business_id}: "
            f"{len(files)} file(s), {len(mapping)} mapping(s)"
        )
        return self._orchestrator.process_batch(business_id, files, mapping)

    def _check_files(self, files: Sequence[UploadedFile]) -> None:
        for uploaded_file in files:
            if uploaded_file.mime_type not in self._allowed_mime_types:
                raise UnsupportedFileTypeError(
                    f"Invalid file type for {uploaded_file.filename}: "
                    f"only {', '.join(sorted(self._allowed_mime_types))} files are allowed"
                )
            if uploaded_file.size_bytes > self._max_request_file_size_bytes:
                limit_mb = self._max_request_file_size_bytes / BYTES_PER_MB
                raise RequestFileTooLargeError(
                    f"File {uploaded_file.filename} is too large "
                    f"({uploaded_file.size_mb:.2f} MB, limit {limit_mb:g}MB)"
                )


def build_intake_service(settings: Settings) -> DocumentIntakeService:
    """Build a DocumentIntakeService with adapters selected by settings."""
    orchestrator = UploadOrchestrator(
        object_store=ObjectStoreFactory.create(settings),
        documents_repo=BusinessDocumentsRepository(),
        profiles_repo=BusinessProfilesRepository(),
        max_document_size_bytes=settings.max_document_size_bytes,
        storage_prefix=settings.storage_prefix,
    )
    return DocumentIntakeService(
        orchestrator=orchestrator,
        providers_repo=ProvidersRepository(),
        max_files_per_batch=settings.max_files_per_batch,
        max_request_file_size_bytes=settings.max_request_file_size_bytes,
        allowed_mime_types=settings.allowed_mime_types,
    )
