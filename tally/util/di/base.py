"""Base class for dependency injection providers."""

from typing import ClassVar, Literal

from dishka import Provider

# Components with a production and a test implementation
Component = Literal["clock", "persistence"]


class ProviderBase(Provider):
    """Provider carrying the metadata used to pick prod or mock implementations.

    Attributes:
        __mock_component__: Component this provider implements, None when concrete
        __is_mock__: True for the test implementation of a component
        __depends_on__: Components that must also be real when this one is unmocked
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
    __depends_on__: ClassVar[set[Component]] = set()
