"""Fixtures shared by the HTTP-level tests."""

from __future__ import annotations

import pytest

from tests.helpers.auth import logged_in_user


@pytest.fixture()
def user(client, session):
    """A user whose session cookies are held by ``client``."""
    return logged_in_user(client, session)
