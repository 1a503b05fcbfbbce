from collections.abc import Mapping
from dataclasses import dataclass

from intake.documents.normalizer import normalize_filename

SOURCE_EXACT = "exact"
SOURCE_NORMALIZED = "normalized"
SOURCE_POSITIONAL = "positional"


@dataclass(frozen=True)
class TypeResolution:
    document_type: str
    source: str


def positional_document_type(index: int) -> str:
    return f"document_{index}"


class DocumentTypeResolver:
    """Maps uploaded filenames to document-type labels.

    Lookup order: exact filename key, then the first key whose normalized
    form equals the normalized filename, then ``document_<index>``. Keys are
    scanned in mapping insertion order, so duplicate normalized keys resolve
    to whichever was supplied first.
    """

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._exact = {name: label for name, label in mapping.items() if label}
        self._normalized = [
            (normalize_filename(name), label) for name, label in self._exact.items()
        ]

    def resolve(self, filename: str, index: int) -> TypeResolution:
        label = self._exact.get(filename)
        if label:
            return TypeResolution(label, SOURCE_EXACT)

        normalized = normalize_filename(filename)
        for key, candidate in self._normalized:
            if key == normalized:
                return TypeResolution(candidate, SOURCE_NORMALIZED)

        return TypeResolution(positional_document_type(index), SOURCE_POSITIONAL)
