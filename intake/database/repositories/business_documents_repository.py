from collections.abc import Iterable

from psycopg.rows import dict_row

from intake.database.connection import get_connection
from intake.database.models import BusinessDocumentRecord, NewBusinessDocument


class BusinessDocumentsRepository:
    """Database operations for the business_documents table."""

    def insert(self, document: NewBusinessDocument) -> BusinessDocumentRecord:
        """Insert one document row and return it with generated columns."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    INSERT INTO business_documents
                        (business_id, document_type, document_name, file_url,
                         file_size_bytes, verification_status)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING id, uploaded_at
                    """,
                    (
                        document.business_id,
                        document.document_type,
                        document.document_name,
                        document.file_url,
                        document.file_size_bytes,
                        document.verification_status,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT INTO business_documents returned no row")

        return BusinessDocumentRecord(
            id=str(row["id"]),
            business_id=document.business_id,
            document_type=document.document_type,
            document_name=document.document_name,
            file_url=document.file_url,
            file_size_bytes=document.file_size_bytes,
            verification_status=document.verification_status,
            uploaded_at=row["uploaded_at"],
        )

    def count_for_business(self, business_id: str) -> int:
        """Number of document rows of any status owned by the business."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT COUNT(*) FROM business_documents WHERE business_id = %s",
                    (business_id,),
                )
                row = cur.fetchone()
        return int(row[0]) if row is not None else 0

    def list_document_types(self, business_id: str, statuses: Iterable[str]) -> list[str]:
        """Document types of the business's rows whose status is in ``statuses``.

        Ordered by upload time; a type appears once per matching row.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT document_type
                    FROM business_documents
                    WHERE business_id = %s
                      AND verification_status = ANY(%s)
                    ORDER BY uploaded_at, id
                    """,
                    (business_id, list(statuses)),
                )
                rows = cur.fetchall()
        return [row[0] for row in rows]
