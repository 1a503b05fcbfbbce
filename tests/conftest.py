import pytest

from intake.documents.models import BYTES_PER_MB, UploadedFile


@pytest.fixture()
def pdf_file() -> UploadedFile:
    """A small PDF well under every size limit."""
    return UploadedFile(
        content=b"%PDF-1.4 fake",
        filename="license.pdf",
        mime_type="application/pdf",
        size_bytes=2048,
    )


@pytest.fixture()
def oversized_file() -> UploadedFile:
    """A 6 MB scan: above the per-document ceiling, below the request boundary.

    The declared size is what the limits check; the content stays tiny.
    """
    return UploadedFile(
        content=b"\x89PNG fake",
        filename="scan.png",
        mime_type="image/png",
        size_bytes=6 * BYTES_PER_MB,
    )
