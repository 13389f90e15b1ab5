"""
Proposals API Endpoints.

Authoring endpoints require the X-Admin-Key header. The unlock endpoint
is the reader path and requires the proposal's password instead.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import AdminKey, ProposalServiceDep, RequestId
from modules.backend.schemas.base import ApiResponse, ResponseMetadata
from modules.backend.schemas.proposal import (
    ProposalCreate,
    ProposalIdResponse,
    ProposalListResponse,
    ProposalResponse,
    ProposalUpdate,
    UnlockedProposalResponse,
    UnlockRequest,
)

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[ProposalIdResponse],
    status_code=201,
    summary="Create a proposal",
    description="Create a password-protected proposal with up to five mockups.",
)
async def create_proposal(
    data: ProposalCreate,
    service: ProposalServiceDep,
    request_id: RequestId,
    admin_key: AdminKey = None,
) -> ApiResponse[ProposalIdResponse]:
    """Create a new proposal."""
    proposal_id = await service.create_proposal(admin_key, data)
    return ApiResponse(
        data=ProposalIdResponse(id=proposal_id),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "",
    response_model=ApiResponse[list[ProposalListResponse]],
    summary="List proposals",
    description="All proposals, newest first. Titles and dates only.",
)
async def list_proposals(
    service: ProposalServiceDep,
    request_id: RequestId,
    admin_key: AdminKey = None,
) -> ApiResponse[list[ProposalListResponse]]:
    """List proposals."""
    proposals = await service.list_proposals(admin_key)
    return ApiResponse(
        data=[ProposalListResponse.model_validate(p) for p in proposals],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{proposal_id}",
    response_model=ApiResponse[ProposalResponse],
    summary="Get a proposal",
    description="Get a proposal's full content for editing.",
)
async def get_proposal(
    proposal_id: str,
    service: ProposalServiceDep,
    request_id: RequestId,
    admin_key: AdminKey = None,
) -> ApiResponse[ProposalResponse]:
    """Get a proposal by ID."""
    proposal = await service.get_proposal(admin_key, proposal_id)
    return ApiResponse(
        data=ProposalResponse.model_validate(proposal),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{proposal_id}",
    response_model=ApiResponse[ProposalIdResponse],
    summary="Update a proposal",
    description="Replace title, markdown and the whole mockup array. The password is unchanged.",
)
async def update_proposal(
    proposal_id: str,
    data: ProposalUpdate,
    service: ProposalServiceDep,
    request_id: RequestId,
    admin_key: AdminKey = None,
) -> ApiResponse[ProposalIdResponse]:
    """Update a proposal."""
    await service.update_proposal(admin_key, proposal_id, data)
    return ApiResponse(
        data=ProposalIdResponse(id=proposal_id),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{proposal_id}",
    status_code=204,
    summary="Delete a proposal",
    description="Permanently delete a proposal.",
)
async def delete_proposal(
    proposal_id: str,
    service: ProposalServiceDep,
    admin_key: AdminKey = None,
) -> None:
    """Delete a proposal."""
    await service.delete_proposal(admin_key, proposal_id)


@router.post(
    "/{proposal_id}/unlock",
    response_model=ApiResponse[UnlockedProposalResponse],
    summary="Unlock a proposal",
    description="Reader view: returns the content when the password matches, 403 otherwise.",
)
async def unlock_proposal(
    proposal_id: str,
    data: UnlockRequest,
    service: ProposalServiceDep,
    request_id: RequestId,
) -> ApiResponse[UnlockedProposalResponse]:
    """Unlock a proposal with its password."""
    proposal = await service.unlock_proposal(proposal_id, data.password)
    return ApiResponse(
        data=UnlockedProposalResponse.model_validate(proposal),
        metadata=ResponseMetadata(request_id=request_id),
    )
