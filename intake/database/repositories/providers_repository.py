from psycopg.rows import dict_row

from intake.database.connection import get_connection
from intake.database.models import ProviderRecord

OWNER_ROLE = "owner"


class ProvidersRepository:
    """Database operations for the providers table."""

    def find_owner(self, user_id: str, business_id: str) -> ProviderRecord | None:
        """Return the owner link between a user and a business, if any."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT user_id, business_id, provider_role
                    FROM providers
                    WHERE user_id = %s
                      AND business_id = %s
                      AND provider_role = %s
                    LIMIT 1
                    """,
                    (user_id, business_id, OWNER_ROLE),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return ProviderRecord(
            user_id=str(row["user_id"]),
            business_id=str(row["business_id"]),
            provider_role=row["provider_role"],
        )
