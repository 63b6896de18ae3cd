"""Session helpers for tests driving the API through the test client."""

from __future__ import annotations

from tests.factories.user import DEFAULT_PASSWORD, CredentialFactory, UserFactory

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"


def cookie(client, name: str) -> str | None:
    """Return the value of cookie ``name`` held by ``client``, if any."""

    found = client.get_cookie(name)
    return found.value if found is not None else None


def login(client, user, password: str = DEFAULT_PASSWORD):
    """Log ``user`` in so the client carries both session cookies."""

    return client.post("/api/v1/user/credentials", json={"email": user.email, "password": password})


def logged_in_user(client, session, **overrides):
    """Create a committed user and open a session for it.

    Returns
    -------
    myroutine.models.user.User
        The persisted user.
    """

    user = UserFactory(**overrides)
    CredentialFactory(user_id=user.id)
    session.commit()
    response = login(client, user)
    assert response.status_code == 200, response.get_json()
    return user
