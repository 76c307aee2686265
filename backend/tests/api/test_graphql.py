"""GraphQL Endpoint — queries, mutations, IDE toggle, and body parsing in front of it.

Invariants:
    - /graphql answers queries over users, tweets, and cats
    - addCat persists and is visible to later queries
    - GraphiQL is served only when the graphiql setting is on
    - Malformed JSON is rejected by the pipeline before GraphQL sees it
"""

from uuid import uuid4

from httpx import ASGITransport, AsyncClient

from app.main import create_app

from tests.api.helpers import register


async def _gql(client, query, variables=None):
    res = await client.post(
        "/graphql", json={"query": query, "variables": variables or {}},
    )
    assert res.status_code == 200, res.text
    return res.json()


async def test_add_cat_then_query(client):
    added = await _gql(
        client,
        "mutation($name: String!, $age: Int) "
        "{ addCat(name: $name, age: $age) { id name age } }",
        {"name": "Tom", "age": 3},
    )
    cat = added["data"]["addCat"]
    assert cat["name"] == "Tom"
    assert cat["age"] == 3

    listed = await _gql(client, "{ cats { id name } }")
    assert listed["data"]["cats"] == [{"id": cat["id"], "name": "Tom"}]

    one = await _gql(client, "query($id: ID!) { cat(id: $id) { name } }", {"id": cat["id"]})
    assert one["data"]["cat"] == {"name": "Tom"}


async def test_add_cat_rejects_blank_name(client):
    res = await _gql(client, 'mutation { addCat(name: "  ") { id } }')
    assert res["errors"]
    assert res["data"] is None


async def test_users_and_tweets_queries(client):
    token = await register(client)
    await client.post(
        "/api/tweets", json={"text": "graph chirp"},
        headers={"Authorization": token},
    )

    res = await _gql(client, "{ users { id handle } tweets { text userId } }")
    users = res["data"]["users"]
    assert [u["handle"] for u in users] == ["alice"]
    assert res["data"]["tweets"] == [{"text": "graph chirp", "userId": users[0]["id"]}]

    user = await _gql(
        client, "query($id: ID!) { user(id: $id) { handle } }", {"id": users[0]["id"]},
    )
    assert user["data"]["user"] == {"handle": "alice"}


async def test_user_type_has_no_password_field(client):
    res = await client.post("/graphql", json={"query": "{ users { password } }"})
    assert res.json()["errors"]


async def test_unknown_or_malformed_ids_resolve_to_null(client):
    res = await _gql(
        client,
        "query($a: ID!, $b: ID!) { tweet(id: $a) { id } user(id: $b) { id } }",
        {"a": str(uuid4()), "b": "not-a-uuid"},
    )
    assert res["data"] == {"tweet": None, "user": None}


async def test_malformed_json_rejected_before_graphql(client):
    res = await client.post(
        "/graphql", content=b"{query",
        headers={"content-type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MALFORMED_BODY"


async def test_graphiql_disabled_by_default(client):
    res = await client.get("/graphql", headers={"Accept": "text/html"})
    assert res.status_code == 404


async def test_graphiql_served_when_enabled(settings):
    app = create_app(settings.model_copy(update={"graphiql": True}))
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        res = await c.get("/graphql", headers={"Accept": "text/html"})
    assert res.status_code == 200
    assert "graphiql" in res.text.lower()
