"""Domain layer DI providers."""

from dishka import Scope, provide

from tally.config import AuthSettings, LedgerSettings, RankingSettings
from tally.domain.repository import CommentRepository, PostRepository, VoteRepository
from tally.domain.service import (
    CommentService,
    IdentityService,
    PostService,
    RankingEngine,
    ReconciliationService,
    VoteService,
)
from tally.util.clock import Clock
from tally.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_identity_service(self, auth_settings: AuthSettings) -> IdentityService:
        """Provide identity domain service."""
        return IdentityService(auth_settings=auth_settings)

    @provide
    def get_vote_service(
        self,
        vote_repository: VoteRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
        ledger_settings: LedgerSettings,
        clock: Clock,
    ) -> VoteService:
        """Provide vote ledger domain service."""
        return VoteService(
            vote_repository=vote_repository,
            post_repository=post_repository,
            comment_repository=comment_repository,
            ledger_settings=ledger_settings,
            clock=clock,
        )

    @provide
    def get_post_service(
        self,
        post_repository: PostRepository,
        ranking_settings: RankingSettings,
        clock: Clock,
    ) -> PostService:
        """Provide post domain service."""
        return PostService(
            post_repository=post_repository,
            ranking_settings=ranking_settings,
            clock=clock,
        )

    @provide
    def get_comment_service(
        self,
        comment_repository: CommentRepository,
        post_repository: PostRepository,
        clock: Clock,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository,
            post_repository=post_repository,
            clock=clock,
        )

    @provide
    def get_ranking_engine(
        self,
        post_repository: PostRepository,
        ranking_settings: RankingSettings,
        clock: Clock,
    ) -> RankingEngine:
        """Provide ranking engine."""
        return RankingEngine(
            post_repository=post_repository,
            ranking_settings=ranking_settings,
            clock=clock,
        )

    @provide
    def get_reconciliation_service(
        self,
        vote_repository: VoteRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
        ranking_settings: RankingSettings,
    ) -> ReconciliationService:
        """Provide counter reconciliation service."""
        return ReconciliationService(
            vote_repository=vote_repository,
            post_repository=post_repository,
            comment_repository=comment_repository,
            ranking_settings=ranking_settings,
        )
