"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class UnauthenticatedError(DomainError):
    """Raised when no valid caller identity is available."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class MissingCredentialError(UnauthenticatedError):
    """Raised when the bearer credential is absent or malformed."""

    def __init__(self, message: str = "Missing or invalid authorization header"):
        super().__init__(message)


class InvalidCredentialError(UnauthenticatedError):
    """Raised when the bearer credential is expired or fails verification."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class InvalidArgumentError(DomainError):
    """Raised for bad enum values or malformed identifiers."""

    def __init__(self, message: str):
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class NotAuthorizedError(DomainError):
    """Raised when a user attempts to change content they don't own."""

    def __init__(self, resource: str, resource_id: str, user_id: str):
        super().__init__(
            f"User {user_id} is not authorized to modify {resource} {resource_id}"
        )


class ConflictError(DomainError):
    """Raised when a concurrent write invalidated the state a transition was based on.

    Typical cause: two requests from the same user both saw "no vote" and
    both tried to create one. The loser should re-read and re-apply.
    """

    def __init__(self, message: str):
        super().__init__(message)


class StorageUnavailableError(DomainError):
    """Raised when a storage call fails for reasons other than a conflict."""

    def __init__(self, operation: str, cause: str | None = None):
        self.operation = operation
        message = f"Storage unavailable during {operation}"
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message)
