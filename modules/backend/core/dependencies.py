"""
FastAPI Dependencies.

Shared dependencies for request handling. Tests replace get_row_store,
get_admin_secret and get_hash_rounds through app.dependency_overrides.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header

from modules.backend.core.config import get_app_config, get_settings
from modules.backend.core.database import RowStore, get_store
from modules.backend.core.logging import get_logger
from modules.backend.services.proposal import ProposalService

logger = get_logger(__name__)


def get_row_store() -> RowStore:
    """The process-wide row store."""
    return get_store()


def get_admin_secret() -> str:
    return get_settings().admin_key


def get_hash_rounds() -> int:
    return get_app_config().security.password_hashing.rounds


def get_max_password_bytes() -> int:
    return get_app_config().security.password_hashing.max_password_bytes


Store = Annotated[RowStore, Depends(get_row_store)]


def get_proposal_service(
    store: Store,
    admin_secret: Annotated[str, Depends(get_admin_secret)],
    rounds: Annotated[int, Depends(get_hash_rounds)],
    max_password_bytes: Annotated[int, Depends(get_max_password_bytes)],
) -> ProposalService:
    return ProposalService(
        store,
        admin_secret,
        password_rounds=rounds,
        max_password_bytes=max_password_bytes,
    )


ProposalServiceDep = Annotated[ProposalService, Depends(get_proposal_service)]

# Missing header arrives as None and fails the admin check (401), not validation (422)
AdminKey = Annotated[str | None, Header(alias="X-Admin-Key")]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """
    Extract or generate request ID from headers.

    Used for request tracing and correlation.
    """
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]
