"""
Mockups API Endpoints.

Serves one mockup of a proposal as a standalone HTML document, meant to
be loaded in an iframe by the reader UI. Errors use the JSON envelope
like every other route.
"""

from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse

from modules.backend.core.dependencies import ProposalServiceDep

router = APIRouter()


@router.get(
    "/{proposal_id}/{mockup_index}",
    response_class=HTMLResponse,
    summary="Render a mockup",
    description=(
        "Render a mockup inside an isolated document with form submission "
        "disabled. Requires the proposal password."
    ),
)
async def render_mockup(
    proposal_id: str,
    mockup_index: int,
    service: ProposalServiceDep,
    password: str | None = Query(default=None, description="Proposal password"),
) -> HTMLResponse:
    """Render a mockup as HTML."""
    rendered = await service.render_mockup(proposal_id, mockup_index, password)
    return HTMLResponse(
        content=rendered.body,
        headers=rendered.headers,
        media_type=rendered.media_type,
    )
