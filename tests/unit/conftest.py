"""Pytest configuration for unit tests."""

import pytest

from passpolicy.domain.entities.user_context import UserContext


@pytest.fixture
def user() -> UserContext:
    """A directory user with the attributes the attribute rules look at."""
    return UserContext(
        user_id="cn=jdoe,ou=users,o=example",
        username="jdoe",
        attributes={
            "givenName": "John",
            "sn": "Anderson",
            "sAMAccountName": "jdoe",
            "displayName": "John Anderson",
        },
    )
