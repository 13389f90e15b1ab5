"""
Proposal Records.

Typed records for the proposals table and the normalized domain types
built from them. The mockup array is stored as JSON text; decode_mockups
is the only place that text is parsed.
"""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

# Title given to the mockup synthesized from a legacy single-mockup row
LEGACY_MOCKUP_TITLE = "Mockup"


class Mockup(BaseModel):
    """A named raw-HTML fragment attached to a proposal."""

    title: str
    html: str

    model_config = ConfigDict(frozen=True)


_MOCKUP_LIST = TypeAdapter(list[Mockup])


class Proposal(BaseModel):
    """A proposal with its mockups decoded into the canonical array form."""

    id: str
    title: str
    markdown: str
    mockups: list[Mockup]
    password_hash: str = Field(repr=False)
    created_at: str

    model_config = ConfigDict(frozen=True)


class ProposalSummary(BaseModel):
    """Listing view of a proposal. Never carries content or the hash."""

    id: str
    title: str
    created_at: str

    model_config = ConfigDict(frozen=True)


class ProposalRow(BaseModel):
    """
    One row of the proposals table, exactly as stored.

    Column names are camelCase in the table; fields are exposed in
    snake_case via aliases. `mockup` is the legacy single-mockup column
    and `mockups` the JSON array column (absent on rows read before the
    upgrade ran).
    """

    id: str
    title: str | None = None
    markdown: str | None = None
    mockup: str | None = None
    mockups: str | None = None
    password_hash: str | None = Field(default=None, alias="passwordHash", repr=False)
    created_at: str | None = Field(default=None, alias="createdAt")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    def decoded_mockups(self) -> list[Mockup]:
        return decode_mockups(self.mockups, self.mockup)

    def to_proposal(self) -> Proposal:
        return Proposal(
            id=self.id,
            title=self.title or "",
            markdown=self.markdown or "",
            mockups=self.decoded_mockups(),
            password_hash=self.password_hash or "",
            created_at=self.created_at or "",
        )


class MockupDecodeError(ValueError):
    """Stored mockups text is not a JSON array of {title, html} objects."""


def encode_mockups(mockups: list[Mockup]) -> str:
    """Serialize mockups to the JSON text stored in the mockups column."""
    return _MOCKUP_LIST.dump_json(mockups).decode("utf-8")


def parse_mockups(raw: str) -> list[Mockup]:
    """
    Parse stored mockups text.

    Raises:
        MockupDecodeError: If the text is not a JSON array of mockups
    """
    try:
        return _MOCKUP_LIST.validate_json(raw)
    except PydanticValidationError as e:
        raise MockupDecodeError(str(e)) from e


def decode_mockups(raw: str | None, legacy: str | None) -> list[Mockup]:
    """
    Resolve a row's mockups from the canonical column and the legacy one.

    - canonical column populated: parse it; unparseable text yields []
    - canonical column absent (NULL or empty) and legacy populated:
      a single mockup titled "Mockup" holding the legacy HTML
    - neither: []

    Never touches storage.
    """
    if raw:
        try:
            return parse_mockups(raw)
        except MockupDecodeError as e:
            logger.warning(
                "Unreadable mockups column, treating as empty",
                extra={"error": str(e)},
            )
            return []
    if legacy:
        return [Mockup(title=LEGACY_MOCKUP_TITLE, html=legacy)]
    return []
