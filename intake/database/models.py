from dataclasses import dataclass
from datetime import datetime


@dataclass
class NewBusinessDocument:
    """Column values for a business_documents row about to be inserted."""

    business_id: str
    document_type: str
    document_name: str
    file_url: str
    file_size_bytes: int
    verification_status: str


@dataclass
class BusinessDocumentRecord:
    """Represents a row from the business_documents table."""

    id: str
    business_id: str
    document_type: str
    document_name: str
    file_url: str
    file_size_bytes: int
    verification_status: str
    uploaded_at: datetime | None = None


@dataclass
class BusinessProfileRecord:
    """Represents a row from the business_profiles table (subset of columns)."""

    id: str
    business_type: str
    verification_status: str
    setup_step: int | None = None


@dataclass
class ProviderRecord:
    """Represents a row from the providers table."""

    user_id: str
    business_id: str
    provider_role: str
