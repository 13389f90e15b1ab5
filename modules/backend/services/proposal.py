"""
Proposal Service.

Authorizes callers and drives the proposal repository and the mockup
renderer. Authoring operations require the admin key; reading content
and rendering mockups require the proposal's password.
"""

from modules.backend.core.database import RowStore
from modules.backend.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ValidationError,
)
from modules.backend.core.security import (
    BCRYPT_MAX_PASSWORD_BYTES,
    DEFAULT_ROUNDS,
    hash_password_async,
    verify_admin_key,
    verify_password_async,
)
from modules.backend.models.proposal import Proposal, ProposalSummary
from modules.backend.repositories.proposal import ProposalRepository, validate_mockups
from modules.backend.schemas.proposal import ProposalCreate, ProposalUpdate
from modules.backend.services.base import BaseService
from modules.backend.services.mockup_renderer import MockupRenderer, RenderedMockup

DEFAULT_MAX_PASSWORD_BYTES = BCRYPT_MAX_PASSWORD_BYTES


class ProposalService(BaseService):
    """
    Service for proposal business logic.

    Credential checks happen here, before the repository is touched:
    the repository itself trusts its caller.
    """

    def __init__(
        self,
        store: RowStore,
        admin_secret: str,
        password_rounds: int = DEFAULT_ROUNDS,
        max_password_bytes: int = DEFAULT_MAX_PASSWORD_BYTES,
    ) -> None:
        super().__init__(store)
        self.repo = ProposalRepository(store)
        self.renderer = MockupRenderer()
        self._admin_secret = admin_secret
        self._password_rounds = password_rounds
        self._max_password_bytes = max_password_bytes

    def _require_admin(self, admin_key: str | None, operation: str) -> None:
        if not verify_admin_key(admin_key, self._admin_secret):
            self._logger.warning(
                "Admin key rejected",
                extra={"operation": operation, "key_present": bool(admin_key)},
            )
            raise AuthenticationError()

    async def _require_password(self, proposal: Proposal, password: str | None) -> None:
        if password is None or not await verify_password_async(password, proposal.password_hash):
            self._logger.info("Proposal password rejected", extra={"proposal_id": proposal.id})
            raise AuthorizationError("Wrong password")

    def _validate_password(self, password: str) -> None:
        self._validate_required({"password": password}, ["password"])
        if len(password.encode("utf-8")) > self._max_password_bytes:
            raise ValidationError(
                "password too long",
                details={"password": f"Maximum length is {self._max_password_bytes} bytes"},
            )

    async def login(self, admin_key: str | None) -> None:
        """
        Check an admin key without doing anything else.

        Raises:
            AuthenticationError: If the key is wrong
        """
        self._require_admin(admin_key, "login")
        self._log_debug("Admin key accepted")

    async def create_proposal(self, admin_key: str | None, data: ProposalCreate) -> str:
        """
        Create a proposal protected by data.password.

        Returns:
            The new 8-character proposal id

        Raises:
            AuthenticationError: If the admin key is wrong
            ValidationError: If the mockups or the password are invalid
        """
        self._require_admin(admin_key, "create_proposal")
        self._validate_password(data.password)
        # Reject bad mockups before paying for the hash
        validate_mockups(data.mockup_dicts())

        password_hash = await hash_password_async(data.password, self._password_rounds)
        proposal_id = await self._run_store(
            "create_proposal",
            self.repo.create,
            data.title,
            data.markdown,
            data.mockup_dicts(),
            password_hash,
        )

        self._log_operation(
            "Proposal created",
            proposal_id=proposal_id,
            mockup_count=len(data.mockups),
        )
        return proposal_id

    async def get_proposal(self, admin_key: str | None, proposal_id: str) -> Proposal:
        """
        Get a proposal for editing.

        Raises:
            AuthenticationError: If the admin key is wrong
            NotFoundError: If the proposal does not exist
        """
        self._require_admin(admin_key, "get_proposal")
        return await self._run_store("read_proposal", self.repo.read, proposal_id)

    async def update_proposal(
        self,
        admin_key: str | None,
        proposal_id: str,
        data: ProposalUpdate,
    ) -> None:
        """
        Replace a proposal's title, markdown and mockups.

        Raises:
            AuthenticationError: If the admin key is wrong
            ValidationError: If the mockups are invalid
            NotFoundError: If the proposal does not exist
        """
        self._require_admin(admin_key, "update_proposal")
        await self._run_store(
            "update_proposal",
            self.repo.update,
            proposal_id,
            data.title,
            data.markdown,
            data.mockup_dicts(),
        )
        self._log_operation(
            "Proposal updated",
            proposal_id=proposal_id,
            mockup_count=len(data.mockups),
        )

    async def delete_proposal(self, admin_key: str | None, proposal_id: str) -> None:
        """
        Delete a proposal.

        Raises:
            AuthenticationError: If the admin key is wrong
            NotFoundError: If the proposal does not exist
        """
        self._require_admin(admin_key, "delete_proposal")
        await self._run_store("delete_proposal", self.repo.delete, proposal_id)
        self._log_operation("Proposal deleted", proposal_id=proposal_id)

    async def list_proposals(self, admin_key: str | None) -> list[ProposalSummary]:
        """
        List all proposals, newest first, without their content.

        Raises:
            AuthenticationError: If the admin key is wrong
        """
        self._require_admin(admin_key, "list_proposals")
        return await self._run_store("list_proposals", self.repo.list_summaries)

    async def unlock_proposal(self, proposal_id: str, password: str | None) -> Proposal:
        """
        Get a proposal's content for a reader holding its password.

        Raises:
            NotFoundError: If the proposal does not exist
            AuthorizationError: If the password is wrong
        """
        proposal = await self._run_store("read_proposal", self.repo.read, proposal_id)
        await self._require_password(proposal, password)
        return proposal

    async def render_mockup(
        self,
        proposal_id: str,
        mockup_index: int,
        password: str | None,
    ) -> RenderedMockup:
        """
        Render one mockup as an isolated HTML document.

        Raises:
            ValidationError: If no password was given
            NotFoundError: If the proposal or the mockup index does not exist
            AuthorizationError: If the password is wrong
        """
        if not password:
            raise ValidationError(
                "Password is required",
                details={"missing_fields": ["password"]},
            )

        proposal = await self._run_store("read_proposal", self.repo.read, proposal_id)
        await self._require_password(proposal, password)

        self._log_debug(
            "Rendering mockup",
            proposal_id=proposal_id,
            mockup_index=mockup_index,
        )
        return self.renderer.render(proposal, mockup_index)
