class IntakeError(Exception):
    """Base exception for all document intake errors."""


class PreconditionError(IntakeError):
    """Request-level failure reported before any file is processed."""


class MissingIdentifierError(PreconditionError):
    """Raised when the user id or business id is missing."""


class EmptyBatchError(PreconditionError):
    """Raised when a request carries no files."""


class TooManyFilesError(PreconditionError):
    """Raised when a request carries more files than one batch allows."""


class UnsupportedFileTypeError(PreconditionError):
    """Raised when a file's MIME type is not accepted for intake."""


class RequestFileTooLargeError(PreconditionError):
    """Raised when a file exceeds the request-level size boundary."""


class InvalidDocumentMappingError(PreconditionError):
    """Raised when the filename to document-type mapping cannot be parsed."""


class BusinessNotOwnedError(PreconditionError):
    """Raised when the user is not the owner of the business."""


class BusinessProfileNotFoundError(PreconditionError):
    """Raised when the business profile does not exist."""


class DocumentProcessingError(IntakeError):
    """Per-file failure; the message is reported to the caller verbatim."""
