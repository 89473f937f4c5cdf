"""Mock clock provider for testing."""

from dishka import Scope, provide

from tally.util.clock import Clock, FrozenClock
from tally.util.di.infrastructure.clock import ClockProvider


class MockClockProvider(ClockProvider):
    """Frozen clock shared by the whole container.

    Tests fetch it as ``Clock`` and move it with ``advance``/``set``.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_clock(self) -> Clock:
        """Provide a frozen clock starting at the current time."""
        return FrozenClock()
