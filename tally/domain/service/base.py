"""Base class for domain services."""


class Service:
    """Base class for domain services.

    Services receive repositories, settings and a clock through the
    container and never manage sessions or transactions themselves.
    """
