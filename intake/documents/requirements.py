from collections.abc import Iterable
from dataclasses import dataclass, field

SOLE_PROPRIETORSHIP = "sole_proprietorship"

BASE_REQUIRED_DOCUMENTS: tuple[str, ...] = (
    "drivers_license",
    "proof_of_address",
    "professional_license",
    "professional_certificate",
)
BUSINESS_LICENSE = "business_license"


def required_documents(business_type: str | None) -> list[str]:
    """Document types a business of this legal form must provide."""
    required = list(BASE_REQUIRED_DOCUMENTS)
    if business_type != SOLE_PROPRIETORSHIP:
        required.append(BUSINESS_LICENSE)
    return required


@dataclass(frozen=True)
class RequirementStatus:
    required: list[str]
    missing: list[str] = field(default_factory=list)

    @property
    def satisfied(self) -> bool:
        return not self.missing


class RequirementEvaluator:
    """Checks whether a business has every mandatory document on file.

    ``document_types`` must already be filtered to qualifying statuses
    (pending, verified, under_review).
    """

    def evaluate(
        self, business_type: str | None, document_types: Iterable[str]
    ) -> RequirementStatus:
        present = set(document_types)
        required = required_documents(business_type)
        missing = [doc_type for doc_type in required if doc_type not in present]
        return RequirementStatus(required=required, missing=missing)
