"""
Proposal Schemas.

Pydantic schemas for proposal API request/response validation.

Mockup entries are accepted loosely here (missing fields default to "")
so that the mockup rules are enforced in one place, the repository,
and reported as VAL_VALIDATION_ERROR with the offending index.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MockupPayload(BaseModel):
    """A mockup as sent by the caller."""

    title: str = Field(default="", description="Mockup title (1-50 characters)", examples=["V1"])
    html: str = Field(default="", description="Raw HTML fragment", examples=["<h1>Hi</h1>"])


class _ProposalContent(BaseModel):
    title: str = Field(..., description="Proposal title", examples=["Redesign"])
    markdown: str = Field(default="", description="Markdown body", examples=["# Hi"])
    mockups: list[MockupPayload] = Field(
        default_factory=list,
        description="Up to five mockups, in display order",
    )

    def mockup_dicts(self) -> list[dict[str, Any]]:
        return [mockup.model_dump() for mockup in self.mockups]


class ProposalCreate(_ProposalContent):
    """Schema for creating a proposal."""

    password: str = Field(..., description="Password readers use to unlock the proposal")


class ProposalUpdate(_ProposalContent):
    """Schema for replacing a proposal's title, markdown and mockups."""


class UnlockRequest(BaseModel):
    """Schema for unlocking a proposal."""

    password: str = Field(default="", description="Proposal password")


class MockupResponse(BaseModel):
    """Schema for a mockup in API responses."""

    title: str
    html: str

    model_config = ConfigDict(from_attributes=True)


class ProposalIdResponse(BaseModel):
    """Schema returned after creating or updating a proposal."""

    id: str = Field(description="Proposal identifier (8 hex characters)")


class ProposalResponse(BaseModel):
    """Authoring view of a proposal. Never includes the password hash."""

    id: str
    title: str
    markdown: str
    mockups: list[MockupResponse]
    created_at: str = Field(description="ISO 8601 creation timestamp")

    model_config = ConfigDict(from_attributes=True)


class ProposalListResponse(BaseModel):
    """Schema for listing proposals."""

    id: str
    title: str
    created_at: str

    model_config = ConfigDict(from_attributes=True)


class UnlockedProposalResponse(BaseModel):
    """Reader view of an unlocked proposal."""

    title: str
    markdown: str
    mockups: list[MockupResponse]

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    """Schema returned when the admin key is accepted."""

    authenticated: bool = True
