"""Shared helpers for API tests."""


async def register(client, handle="alice", email="alice@example.com", password="secret1"):
    """Register a user through the API and return the bearer header value."""
    res = await client.post("/api/users/register", json={
        "handle": handle, "email": email,
        "password": password, "password2": password,
    })
    assert res.status_code == 200, res.text
    return res.json()["token"]
