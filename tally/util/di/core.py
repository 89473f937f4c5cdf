"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from tally.config import AuthSettings, LedgerSettings, RankingSettings, Settings
from tally.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_ledger_settings(self, settings: Settings) -> LedgerSettings:
        """Provide vote ledger settings."""
        return settings.ledger

    @provide(scope=Scope.APP)
    def provide_ranking_settings(self, settings: Settings) -> RankingSettings:
        """Provide ranking settings."""
        return settings.ranking
