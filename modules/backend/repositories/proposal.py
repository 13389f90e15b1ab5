"""
Proposal Repository.

Data access layer for proposals. Validates mockup arrays, serializes them
to the row store, and decodes rows (including legacy single-mockup rows)
into Proposal records.
"""

from collections.abc import Mapping, Sequence
from typing import Any
from uuid import uuid4

from modules.backend.core.database import RowStore
from modules.backend.core.exceptions import NotFoundError, StoreError, ValidationError
from modules.backend.core.logging import get_logger
from modules.backend.core.utils import utc_timestamp
from modules.backend.models.proposal import (
    Mockup,
    Proposal,
    ProposalRow,
    ProposalSummary,
    encode_mockups,
)
from modules.backend.repositories.base import BaseRepository

logger = get_logger(__name__)

MAX_MOCKUPS = 5
MAX_MOCKUP_TITLE_LENGTH = 50
PROPOSAL_ID_LENGTH = 8
MAX_ID_ATTEMPTS = 5

INSERT_PROPOSAL = """
INSERT INTO proposals (id, title, markdown, mockup, mockups, passwordHash, createdAt)
VALUES (:id, :title, :markdown, '', :mockups, :passwordHash, :createdAt)
"""

UPDATE_PROPOSAL = """
UPDATE proposals SET title = :title, markdown = :markdown, mockups = :mockups
WHERE id = :id
"""

LIST_PROPOSALS = "SELECT id, title, createdAt FROM proposals ORDER BY createdAt DESC"


def new_proposal_id() -> str:
    """Eight lowercase hex characters."""
    return uuid4().hex[:PROPOSAL_ID_LENGTH]


def validate_mockups(mockups: Any) -> list[Mockup]:
    """
    Validate a caller-supplied mockup array.

    Accepts Mockup instances or mappings with title/html keys.

    Returns:
        The mockups as Mockup records, in order

    Raises:
        ValidationError: If the value is not an array, has more than five
            entries, or any entry lacks a title or html or has a title
            longer than 50 characters
    """
    if isinstance(mockups, (str, bytes)) or not isinstance(mockups, Sequence):
        raise ValidationError(
            "Mockups must be an array",
            details={"mockups": "Expected an array of {title, html} objects"},
        )

    if len(mockups) > MAX_MOCKUPS:
        raise ValidationError(
            f"Maximum {MAX_MOCKUPS} mockups allowed",
            details={"mockups": f"Got {len(mockups)}, maximum is {MAX_MOCKUPS}"},
        )

    validated: list[Mockup] = []
    for index, item in enumerate(mockups):
        if isinstance(item, Mockup):
            title, html = item.title, item.html
        elif isinstance(item, Mapping):
            title, html = item.get("title"), item.get("html")
        else:
            title = html = None

        if not isinstance(title, str) or not title or not isinstance(html, str) or not html:
            raise ValidationError(
                "Each mockup must have a title and html content",
                details={"index": index},
            )
        if len(title) > MAX_MOCKUP_TITLE_LENGTH:
            raise ValidationError(
                f"Mockup titles must be {MAX_MOCKUP_TITLE_LENGTH} characters or less",
                details={"index": index, "title": f"Maximum length is {MAX_MOCKUP_TITLE_LENGTH}"},
            )
        validated.append(Mockup(title=title, html=html))

    return validated


class ProposalRepository(BaseRepository):
    """
    Repository for proposals.

    Every read goes through ProposalRow.to_proposal, so rows that only
    carry the legacy single mockup come back as a one-element array.
    Listing is the exception: it never returns content.
    """

    table = "proposals"
    entity = "Proposal"

    def __init__(self, store: RowStore) -> None:
        super().__init__(store)

    def _allocate_id(self) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            proposal_id = new_proposal_id()
            if not self.exists(proposal_id):
                return proposal_id
            logger.warning("Proposal id collision", extra={"id": proposal_id})
        raise StoreError("Could not allocate a proposal id")

    def create(
        self,
        title: str,
        markdown: str,
        mockups: Any,
        password_hash: str,
    ) -> str:
        """
        Insert a new proposal.

        Args:
            title: Proposal title
            markdown: Markdown body
            mockups: Up to five {title, html} entries
            password_hash: bcrypt hash of the access password

        Returns:
            The new proposal id

        Raises:
            ValidationError: If the mockups are invalid (nothing is written)
        """
        validated = validate_mockups(mockups)
        proposal_id = self._allocate_id()

        self.store.run(
            INSERT_PROPOSAL,
            {
                "id": proposal_id,
                "title": title,
                "markdown": markdown,
                "mockups": encode_mockups(validated),
                "passwordHash": password_hash,
                "createdAt": utc_timestamp(),
            },
        )
        return proposal_id

    def read(self, id: str) -> Proposal:
        """
        Get a proposal by id with its mockups decoded.

        Raises:
            NotFoundError: If the proposal does not exist
        """
        row = self.get_row(id)
        return ProposalRow.model_validate(dict(row)).to_proposal()

    def update(
        self,
        id: str,
        title: str,
        markdown: str,
        mockups: Any,
    ) -> None:
        """
        Replace title, markdown and the whole mockup array.

        The password hash and creation time are left as they are.

        Raises:
            ValidationError: If the mockups are invalid (nothing is written)
            NotFoundError: If the proposal does not exist
        """
        validated = validate_mockups(mockups)

        if not self.exists(id):
            raise NotFoundError("Proposal not found")

        result = self.store.run(
            UPDATE_PROPOSAL,
            {
                "id": id,
                "title": title,
                "markdown": markdown,
                "mockups": encode_mockups(validated),
            },
        )
        if result.changes == 0:
            raise NotFoundError("Proposal not found")

    def list_summaries(self) -> list[ProposalSummary]:
        """All proposals, newest first, without content."""
        rows = self.store.list(LIST_PROPOSALS)
        return [
            ProposalSummary(
                id=row["id"],
                title=row["title"] or "",
                created_at=row["createdAt"] or "",
            )
            for row in rows
        ]
