"""Unit tests for request field parsing."""

from uuid import uuid4

import pytest

from tally.application.usecase.parsing import parse_enum, parse_user_id, parse_uuid
from tally.domain.error import InvalidArgumentError
from tally.domain.value import ResourceType, VoteDirection


class TestParsing:
    def test_parse_uuid(self):
        value = uuid4()

        assert parse_uuid(str(value), "resource_id") == value
        with pytest.raises(InvalidArgumentError, match="resource_id"):
            parse_uuid("1234", "resource_id")

    def test_parse_enum(self):
        assert parse_enum(VoteDirection, "down", "direction") == VoteDirection.DOWN
        with pytest.raises(InvalidArgumentError, match="expected post, comment"):
            parse_enum(ResourceType, "user", "resource_type")

    def test_enum_values_are_case_sensitive(self):
        with pytest.raises(InvalidArgumentError):
            parse_enum(VoteDirection, "UP", "direction")

    def test_parse_user_id(self):
        assert parse_user_id(None) is None
        with pytest.raises(InvalidArgumentError):
            parse_user_id("someone")
