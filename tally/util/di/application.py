"""Application layer DI providers."""

from dishka import Scope, provide

from tally.application.usecase.comment import CreateCommentUseCase, GetCommentsUseCase
from tally.application.usecase.post import (
    CreatePostUseCase,
    DeletePostUseCase,
    ListPostsUseCase,
)
from tally.application.usecase.ranking import RecomputeRanksUseCase
from tally.application.usecase.vote import (
    CastVoteUseCase,
    GetVoteStateUseCase,
    GetVoteStatesUseCase,
)
from tally.config import LedgerSettings, RankingSettings
from tally.domain.service import (
    CommentService,
    PostService,
    RankingEngine,
    ReconciliationService,
    VoteService,
)
from tally.util.clock import Clock
from tally.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Vote use cases
    @provide(scope=Scope.REQUEST)
    def get_cast_vote_use_case(
        self, vote_service: VoteService, ledger_settings: LedgerSettings
    ) -> CastVoteUseCase:
        """Provide cast vote use case."""
        return CastVoteUseCase(
            vote_service=vote_service, ledger_settings=ledger_settings
        )

    @provide(scope=Scope.REQUEST)
    def get_vote_state_use_case(self, vote_service: VoteService) -> GetVoteStateUseCase:
        """Provide get vote state use case."""
        return GetVoteStateUseCase(vote_service=vote_service)

    @provide(scope=Scope.REQUEST)
    def get_vote_states_use_case(
        self, vote_service: VoteService
    ) -> GetVoteStatesUseCase:
        """Provide batch vote state use case."""
        return GetVoteStatesUseCase(vote_service=vote_service)

    # Post use cases
    @provide(scope=Scope.REQUEST)
    def get_create_post_use_case(self, post_service: PostService) -> CreatePostUseCase:
        """Provide create post use case."""
        return CreatePostUseCase(post_service=post_service)

    @provide(scope=Scope.REQUEST)
    def get_list_posts_use_case(
        self, post_service: PostService, vote_service: VoteService
    ) -> ListPostsUseCase:
        """Provide list posts use case."""
        return ListPostsUseCase(post_service=post_service, vote_service=vote_service)

    @provide(scope=Scope.REQUEST)
    def get_delete_post_use_case(self, post_service: PostService) -> DeletePostUseCase:
        """Provide delete post use case."""
        return DeletePostUseCase(post_service=post_service)

    # Comment use cases
    @provide(scope=Scope.REQUEST)
    def get_create_comment_use_case(
        self, comment_service: CommentService
    ) -> CreateCommentUseCase:
        """Provide create comment use case."""
        return CreateCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_get_comments_use_case(
        self, comment_service: CommentService, vote_service: VoteService
    ) -> GetCommentsUseCase:
        """Provide get comments use case."""
        return GetCommentsUseCase(
            comment_service=comment_service, vote_service=vote_service
        )

    # Ranking use cases
    @provide(scope=Scope.REQUEST)
    def get_recompute_ranks_use_case(
        self,
        ranking_engine: RankingEngine,
        reconciliation_service: ReconciliationService,
        ranking_settings: RankingSettings,
        clock: Clock,
    ) -> RecomputeRanksUseCase:
        """Provide recompute ranks use case."""
        return RecomputeRanksUseCase(
            ranking_engine=ranking_engine,
            reconciliation_service=reconciliation_service,
            ranking_settings=ranking_settings,
            clock=clock,
        )
