import logging

from psycopg2 import Error as Psycopg2Error
from psycopg2.extras import RealDictCursor
from sqlalchemy.exc import SQLAlchemyError

from app.core.database import get_db
from app.core.exceptions import RecordStoreError

logger = logging.getLogger(__name__)


class BaseRepository:
    """
    Base repository providing DB helpers.

    Guarantees:
    - fetchall() returns List[Dict]
    - driver and pool failures surface as RecordStoreError
    """

    def __init__(self, connection_factory=get_db):
        self._connection_factory = connection_factory

    def fetchall(self, query: str, params: tuple | None = None):
        try:
            with self._connection_factory() as conn:
                cur = conn.cursor(cursor_factory=RealDictCursor)
                try:
                    cur.execute(query, params or ())
                    return cur.fetchall()
                finally:
                    cur.close()
        except (Psycopg2Error, SQLAlchemyError) as exc:
            logger.error("Record store query failed: %s", exc)
            raise RecordStoreError(f"Failed to fetch clinics: {exc}") from exc
