from psycopg.rows import dict_row

from intake.database.connection import get_connection
from intake.database.models import BusinessProfileRecord
from intake.documents.exceptions import BusinessProfileNotFoundError


class BusinessProfilesRepository:
    """Database operations for the business_profiles table."""

    def find_by_id(self, business_id: str) -> BusinessProfileRecord:
        """Find a business profile by ID.

        Raises:
            BusinessProfileNotFoundError: if no profile with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, business_type, verification_status, setup_step
                    FROM business_profiles
                    WHERE id = %s
                    """,
                    (business_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise BusinessProfileNotFoundError(f"Business profile {business_id} not found")

        return BusinessProfileRecord(
            id=str(row["id"]),
            business_type=row["business_type"],
            verification_status=row["verification_status"],
            setup_step=row["setup_step"],
        )

    def advance_setup_step(self, business_id: str, step: int) -> None:
        """Raise setup_step to at least ``step``; never moves it backwards."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE business_profiles
                SET setup_step = GREATEST(COALESCE(setup_step, 0), %s),
                    updated_at = NOW()
                WHERE id = %s
                """,
                (step, business_id),
            )
            conn.commit()
