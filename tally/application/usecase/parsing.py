"""Request field parsing shared by use cases.

Requests carry identifiers and enum values as plain strings so that a bad
value is reported as ``InvalidArgumentError`` rather than a schema error.
"""

from enum import Enum
from typing import Optional, Type, TypeVar
from uuid import UUID

from tally.domain.error import InvalidArgumentError
from tally.domain.value import UserId

E = TypeVar("E", bound=Enum)


def parse_uuid(value: str, field: str) -> UUID:
    """Parse a UUID string or raise ``InvalidArgumentError``."""
    try:
        return UUID(value)
    except (ValueError, TypeError):
        raise InvalidArgumentError(f"Invalid {field}: {value!r}")


def parse_enum(enum_type: Type[E], value: str, field: str) -> E:
    """Parse an enum value or raise ``InvalidArgumentError``."""
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(str(member.value) for member in enum_type)
        raise InvalidArgumentError(f"Invalid {field}: {value!r} (expected {allowed})")


def parse_user_id(value: Optional[str]) -> Optional[UserId]:
    """Parse the caller's user ID; None stays None (anonymous)."""
    if value is None:
        return None
    return UserId(parse_uuid(value, "user_id"))
