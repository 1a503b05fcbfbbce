import time
from collections.abc import Callable, Mapping, Sequence

from intake.database.models import BusinessProfileRecord, NewBusinessDocument
from intake.database.repositories.business_documents_repository import (
    BusinessDocumentsRepository,
)
from intake.database.repositories.business_profiles_repository import (
    BusinessProfilesRepository,
)
from intake.documents.exceptions import (
    DocumentProcessingError,
    EmptyBatchError,
    MissingIdentifierError,
)
from intake.documents.models import (
    BYTES_PER_MB,
    QUALIFYING_STATUSES,
    IntakeResult,
    UploadedDocumentSummary,
    UploadedFile,
    VerificationStatus,
)
from intake.documents.requirements import RequirementEvaluator
from intake.documents.resolver import DocumentTypeResolver
from intake.logging.logger import Log
from intake.storage.base import BaseObjectStore
from intake.storage.exceptions import StorageError, StorageSizeLimitError

DEFAULT_MAX_DOCUMENT_SIZE_BYTES = 5 * BYTES_PER_MB
DEFAULT_STORAGE_PREFIX = "provider-documents"
DOCUMENTS_SETUP_STEP = 2


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class UploadOrchestrator:
    """Stores a batch of business documents and records them one by one.

    Per file: size check -> type resolution -> blob write -> public URL ->
    row insert. A failed insert deletes the blob it just wrote. Per-file
    failures are collected as messages; only missing identifiers, an empty
    batch or an unknown business abort the whole batch.
    """

    def __init__(
        self,
        object_store: BaseObjectStore,
        documents_repo: BusinessDocumentsRepository,
        profiles_repo: BusinessProfilesRepository,
        *,
        max_document_size_bytes: int = DEFAULT_MAX_DOCUMENT_SIZE_BYTES,
        storage_prefix: str = DEFAULT_STORAGE_PREFIX,
        requirement_evaluator: RequirementEvaluator | None = None,
        clock: Callable[[], int] = _epoch_millis,
    ) -> None:
        self._object_store = object_store
        self._documents_repo = documents_repo
        self._profiles_repo = profiles_repo
        self._max_document_size_bytes = max_document_size_bytes
        self._storage_prefix = storage_prefix.strip("/")
        self._requirements = requirement_evaluator or RequirementEvaluator()
        self._clock = clock
        self._last_timestamp = 0

    def process_batch(
        self,
        business_id: str,
        files: Sequence[UploadedFile],
        mapping: Mapping[str, str],
    ) -> IntakeResult:
        """Process every file of the batch and report per-file outcomes.

        Raises:
            MissingIdentifierError: if business_id is empty.
            EmptyBatchError: if files is empty.
            BusinessProfileNotFoundError: if the business does not exist.
        """
        if not business_id:
            raise MissingIdentifierError("Missing businessId")
        if not files:
            raise EmptyBatchError("No files uploaded")

        profile = self._profiles_repo.find_by_id(business_id)
        prior_documents = self._count_prior_documents(business_id)
        resolver = DocumentTypeResolver(mapping)
        Log.info(f"Processing {len(files)} document(s) for business {business_id}")

        result = IntakeResult()
        for index, uploaded_file in enumerate(files):
            try:
                summary = self._process_file(business_id, uploaded_file, index, resolver)
            except DocumentProcessingError as exc:
                Log.warning(str(exc))
                result.errors.append(str(exc))
            except Exception as exc:
                Log.error(f"Unexpected error processing {uploaded_file.filename}: {exc}")
                reason = str(exc) or "Unknown error"
                result.errors.append(f"Failed to process {uploaded_file.filename}: {reason}")
            else:
                result.uploaded.append(summary)

        if result.uploaded and prior_documents == 0:
            self._advance_setup_step(business_id)

        self._evaluate_requirements(business_id, profile, result)
        Log.info(
            f"Business {business_id}: {len(result.uploaded)} uploaded, "
            f"{len(result.errors)} failed, all required uploaded: "
            f"{result.all_required_uploaded}"
        )
        return result

    def _process_file(
        self,
        business_id: str,
        uploaded_file: UploadedFile,
        index: int,
        resolver: DocumentTypeResolver,
    ) -> UploadedDocumentSummary:
        name = uploaded_file.filename
        if uploaded_file.size_bytes > self._max_document_size_bytes:
            raise DocumentProcessingError(
                f"Failed to process {name}: File size ({uploaded_file.size_mb:.2f} MB) "
                f"exceeds the {self._limit_label()} limit"
            )

        resolution = resolver.resolve(name, index)
        document_type = resolution.document_type
        Log.info(f'File "{name}" mapped to type "{document_type}" ({resolution.source})')

        locator = self._build_locator(business_id, document_type, uploaded_file.extension)
        try:
            stored_locator = self._object_store.write(
                locator, uploaded_file.content, uploaded_file.mime_type
            )
        except StorageSizeLimitError as exc:
            raise DocumentProcessingError(
                f"Failed to upload {name}: File size ({uploaded_file.size_mb:.2f} MB) "
                f"is too large. Please upload a file smaller than {self._limit_label()}."
            ) from exc
        except StorageError as exc:
            raise DocumentProcessingError(f"Failed to upload {name}: {exc}") from exc
        Log.info(f"Stored {uploaded_file.size_bytes} bytes at {stored_locator}")

        try:
            url = self._object_store.public_url(stored_locator)
            record = self._documents_repo.insert(
                NewBusinessDocument(
                    business_id=business_id,
                    document_type=document_type,
                    document_name=name,
                    file_url=url,
                    file_size_bytes=uploaded_file.size_bytes,
                    verification_status=VerificationStatus.PENDING.value,
                )
            )
        except Exception as exc:
            self._discard_blob(stored_locator)
            raise DocumentProcessingError(
                f"Failed to save record for {name}: {exc}"
            ) from exc

        Log.info(f"Recorded document {record.id} ({document_type}) for business {business_id}")
        return UploadedDocumentSummary(
            id=record.id,
            document_type=document_type,
            file_name=name,
            url=url,
            status=record.verification_status,
            uploaded_at=record.uploaded_at,
        )

    def _build_locator(self, business_id: str, document_type: str, extension: str) -> str:
        filename = f"{document_type}_{self._next_timestamp()}"
        if extension:
            filename = f"{filename}.{extension}"
        return "/".join(part for part in (self._storage_prefix, business_id, filename) if part)

    def _next_timestamp(self) -> int:
        # Strictly increasing per instance so same-type files never share a locator.
        timestamp = max(self._clock(), self._last_timestamp + 1)
        self._last_timestamp = timestamp
        return timestamp

    def _discard_blob(self, locator: str) -> None:
        Log.info(f"Removing {locator} after failed record write")
        try:
            self._object_store.delete(locator)
        except Exception as exc:
            Log.warning(f"Could not remove orphaned object {locator}: {exc}")

    def _count_prior_documents(self, business_id: str) -> int | None:
        """Documents on file before this batch, or None when the count is unavailable."""
        try:
            count = self._documents_repo.count_for_business(business_id)
        except Exception as exc:
            Log.warning(f"Could not count documents for business {business_id}: {exc}")
            return None
        Log.debug(f"Business {business_id} has {count} document(s) on file")
        return count

    def _advance_setup_step(self, business_id: str) -> None:
        try:
            self._profiles_repo.advance_setup_step(business_id, DOCUMENTS_SETUP_STEP)
        except Exception as exc:
            Log.warning(f"Could not advance setup step for business {business_id}: {exc}")
            return
        Log.info(f"Business {business_id} advanced to setup step {DOCUMENTS_SETUP_STEP}")

    def _evaluate_requirements(
        self, business_id: str, profile: BusinessProfileRecord, result: IntakeResult
    ) -> None:
        try:
            document_types = self._documents_repo.list_document_types(
                business_id, [status.value for status in QUALIFYING_STATUSES]
            )
        except Exception as exc:
            Log.error(f"Could not read document types for business {business_id}: {exc}")
            document_types = [summary.document_type for summary in result.uploaded]

        status = self._requirements.evaluate(profile.business_type, document_types)
        result.required_documents = status.required
        result.all_required_uploaded = status.satisfied
        result.uploaded_document_types = list(dict.fromkeys(document_types))

    def _limit_label(self) -> str:
        return f"{self._max_document_size_bytes / BYTES_PER_MB:g}MB"
