"""
Auth API Endpoints.

Lets the authoring UI check an admin key before it starts editing.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import AdminKey, ProposalServiceDep, RequestId
from modules.backend.schemas.base import ApiResponse, ResponseMetadata
from modules.backend.schemas.proposal import LoginResponse

router = APIRouter()


@router.post(
    "/login",
    response_model=ApiResponse[LoginResponse],
    summary="Check the admin key",
    description="Succeeds when X-Admin-Key matches the configured admin key, 401 otherwise.",
)
async def login(
    service: ProposalServiceDep,
    request_id: RequestId,
    admin_key: AdminKey = None,
) -> ApiResponse[LoginResponse]:
    await service.login(admin_key)
    return ApiResponse(
        data=LoginResponse(),
        metadata=ResponseMetadata(request_id=request_id),
    )
