"""
Base Repository.

Base class for repositories over the row store, with the id-keyed
operations every table shares.
"""

from sqlalchemy.engine import RowMapping

from modules.backend.core.database import RowStore
from modules.backend.core.exceptions import NotFoundError
from modules.backend.core.logging import get_logger

logger = get_logger(__name__)


class BaseRepository:
    """
    Base repository with common id-keyed operations.

    Subclasses set the table name and the entity name used in errors:

        class ProposalRepository(BaseRepository):
            table = "proposals"
            entity = "Proposal"

    Repositories are synchronous. They do no authorization; callers
    check credentials before invoking them.
    """

    table: str
    entity: str

    def __init__(self, store: RowStore) -> None:
        self.store = store

    def get_row_or_none(self, id: str) -> RowMapping | None:
        """Get a single row by id, returning None if not found."""
        return self.store.get(f"SELECT * FROM {self.table} WHERE id = :id", {"id": id})

    def get_row(self, id: str) -> RowMapping:
        """
        Get a single row by id.

        Raises:
            NotFoundError: If the row does not exist
        """
        row = self.get_row_or_none(id)
        if row is None:
            raise NotFoundError(f"{self.entity} not found")
        return row

    def exists(self, id: str) -> bool:
        """Check if a row exists by id."""
        row = self.store.get(f"SELECT id FROM {self.table} WHERE id = :id", {"id": id})
        return row is not None

    def delete(self, id: str) -> None:
        """
        Delete a row by id.

        Raises:
            NotFoundError: If the id does not exist, or if the delete ran
                but removed nothing (the row vanished in between)
        """
        if not self.exists(id):
            raise NotFoundError(f"{self.entity} not found")

        result = self.store.run(f"DELETE FROM {self.table} WHERE id = :id", {"id": id})
        if result.changes == 0:
            logger.warning("Delete affected no rows", extra={"table": self.table, "id": id})
            raise NotFoundError(f"{self.entity} not found")
