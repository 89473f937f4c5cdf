"""Cast vote use case."""

from typing import Optional

import logfire
from pydantic import BaseModel

from tally.application.usecase.parsing import parse_enum, parse_user_id, parse_uuid
from tally.config import LedgerSettings
from tally.domain.error import ConflictError
from tally.domain.service import VoteService
from tally.domain.value import ResourceType, VoteDirection, VoteOutcome


class CastVoteRequest(BaseModel):
    """Cast vote request."""

    resource_id: str  # UUID string
    resource_type: str  # "post" or "comment"
    direction: str  # "up" or "down"
    user_id: Optional[str] = None  # User ID from authenticated caller


class CastVoteResponse(BaseModel):
    """Cast vote response."""

    result: VoteOutcome
    direction: Optional[VoteDirection]
    score: int


class CastVoteUseCase:
    """Use case for voting on a post or comment.

    The vote toggles: repeating the same direction removes the vote, the
    opposite direction flips it.
    """

    def __init__(self, vote_service: VoteService, ledger_settings: LedgerSettings) -> None:
        """Initialize cast vote use case.

        Args:
            vote_service: Vote domain service
            ledger_settings: Conflict retry configuration
        """
        self.vote_service = vote_service
        self.ledger_settings = ledger_settings

    async def execute(self, request: CastVoteRequest) -> CastVoteResponse:
        """Execute cast vote flow.

        A ``ConflictError`` means another request by the same user changed
        the vote in between; the transition is re-applied against the new
        state a bounded number of times.

        Args:
            request: Cast vote request

        Returns:
            Transition applied and the resulting score

        Raises:
            UnauthenticatedError: If no user is given
            InvalidArgumentError: If an ID or enum value is malformed
            NotFoundError: If the resource does not exist
            ConflictError: If conflicts persist after all retries
        """
        user_id = parse_user_id(request.user_id)
        resource_type = parse_enum(ResourceType, request.resource_type, "resource_type")
        direction = parse_enum(VoteDirection, request.direction, "direction")
        resource_id = parse_uuid(request.resource_id, "resource_id")

        retries = self.ledger_settings.conflict_retries
        for attempt in range(retries + 1):
            try:
                result = await self.vote_service.apply_vote(
                    user_id, resource_id, resource_type, direction
                )
                break
            except ConflictError:
                if attempt >= retries:
                    logfire.error(
                        "Vote conflict persisted after retries",
                        resource_id=str(resource_id),
                        attempts=attempt + 1,
                    )
                    raise
                logfire.warn(
                    "Vote conflict, re-applying against current state",
                    resource_id=str(resource_id),
                    attempt=attempt + 1,
                )

        return CastVoteResponse(
            result=result.outcome,
            direction=result.direction,
            score=result.score,
        )
