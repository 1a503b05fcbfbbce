from pathlib import Path

import pytest

from intake.database.repositories.business_documents_repository import (
    BusinessDocumentsRepository,
)
from intake.database.repositories.business_profiles_repository import (
    BusinessProfilesRepository,
)
from intake.documents.models import UploadedFile
from intake.documents.orchestrator import UploadOrchestrator
from intake.storage.local_adapter import LocalObjectStore


def _file(name: str, size: int = 4) -> UploadedFile:
    return UploadedFile(
        content=b"%PDF", filename=name, mime_type="application/pdf", size_bytes=size
    )


@pytest.mark.integration
class TestUploadOrchestratorEndToEnd:
    def test_batch_stores_records_and_advances_setup(
        self, seed_business: str, tmp_path: Path
    ) -> None:
        orchestrator = UploadOrchestrator(
            LocalObjectStore(root=tmp_path),
            BusinessDocumentsRepository(),
            BusinessProfilesRepository(),
        )
        files = [
            _file("id.pdf"),
            _file("address.pdf"),
            _file("license.pdf"),
            _file("cert.pdf"),
            _file("too-big.pdf", size=6 * 1024 * 1024),
        ]
        mapping = {
            "id.pdf": "drivers_license",
            "address.pdf": "proof_of_address",
            "license.pdf": "professional_license",
            "cert.pdf": "professional_certificate",
        }

        result = orchestrator.process_batch(seed_business, files, mapping)

        assert len(result.uploaded) == 4
        assert len(result.errors) == 1
        assert result.all_required_uploaded is True
        stored = list((tmp_path / "provider-documents" / seed_business).iterdir())
        assert len(stored) == 4
        profile = BusinessProfilesRepository().find_by_id(seed_business)
        assert profile.setup_step == 2
