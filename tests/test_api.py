from __future__ import annotations


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


async def test_create_post_requires_bearer_token(client):
    resp = await client.post("/posts", json={"title": "T", "content": "C", "category": "general"})

    assert resp.status_code == 401
    assert resp.json() == {"error": "Missing Authorization header."}


async def test_post_reply_and_detail_flow(client, make_user, auth_headers):
    author = await make_user()
    headers = auth_headers(author)

    created = await client.post(
        "/posts",
        json={"title": "T", "content": "C", "category": "general", "tags": [{"name": "x"}]},
        headers=headers,
    )
    assert created.status_code == 200
    post = created.json()
    assert post["author_id"] == author.id
    assert [tag["name"] for tag in post["tags"]] == ["x"]

    replied = await client.post(f"/threads/{post['id']}/replies", json={"content": "R"}, headers=headers)
    assert replied.status_code == 200
    reply = replied.json()
    assert reply["category"] == "general"
    assert [tag["name"] for tag in reply["tags"]] == ["x"]

    detail = (await client.get(f"/threads/{post['id']}")).json()
    assert [r["id"] for r in detail["replies"]] == [reply["id"]]

    replies = (await client.get(f"/threads/{post['id']}/replies")).json()
    assert [r["content"] for r in replies] == ["R"]

    recent = (await client.get("/posts/recent")).json()
    assert [p["id"] for p in recent] == [post["id"]]


async def test_store_errors_map_to_status_codes(client, make_user, auth_headers):
    author = await make_user()
    headers = auth_headers(author)
    post = (
        await client.post("/posts", json={"title": "T", "content": "C", "category": "general"}, headers=headers)
    ).json()

    missing = await client.get("/threads/999")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Thread [999] not found"}

    orphan = await client.post("/threads/999/replies", json={"content": "R"}, headers=headers)
    assert orphan.status_code == 404

    assert (await client.post(f"/threads/{post['id']}/like", headers=headers)).status_code == 200
    twice = await client.post(f"/threads/{post['id']}/like", headers=headers)
    assert twice.status_code == 409
    assert "already liked" in twice.json()["error"]

    assert (await client.post(f"/threads/{post['id']}/unlike", headers=headers)).status_code == 200
    not_liked = await client.post(f"/threads/{post['id']}/unlike", headers=headers)
    assert not_liked.status_code == 409
    assert "has not liked" in not_liked.json()["error"]


async def test_delete_routes(client, make_user, auth_headers):
    author = await make_user()
    headers = auth_headers(author)
    post = (
        await client.post("/posts", json={"title": "T", "content": "C", "category": "general"}, headers=headers)
    ).json()
    reply = (await client.post(f"/threads/{post['id']}/replies", json={"content": "R"}, headers=headers)).json()
    await client.post(f"/threads/{reply['id']}/replies", json={"content": "nested"}, headers=headers)

    soft = await client.delete(f"/replies/{reply['id']}", headers=headers)
    assert soft.status_code == 200
    assert soft.json()["deleted"] is True

    hard = await client.delete(f"/threads/{post['id']}", headers=headers)
    assert hard.status_code == 200
    assert (await client.get(f"/threads/{reply['id']}")).status_code == 404


async def test_project_and_bookmark_flow(client, make_user, auth_headers):
    owner = await make_user()
    helper = await make_user()
    headers = auth_headers(owner)

    project = (await client.post("/projects", json={"title": "Hub"}, headers=headers)).json()
    with_helper = (
        await client.post(
            f"/projects/{project['id']}/collaborators",
            json={"user_id": helper.id},
            headers=headers,
        )
    ).json()
    assert len(with_helper["collaborators"]) == 2

    idea = (
        await client.post(f"/projects/{project['id']}/ideas", json={"title": "Search"}, headers=headers)
    ).json()
    patched = await client.patch(
        f"/projects/{project['id']}/ideas/{idea['id']}",
        json={"title": "Full-text search"},
        headers=headers,
    )
    assert patched.json()["title"] == "Full-text search"

    assert (await client.post(f"/ideas/{idea['id']}/bookmark", headers=headers)).status_code == 200
    bookmarked = await client.get("/ideas/bookmarked", headers=headers)
    assert [i["id"] for i in bookmarked.json()] == [idea["id"]]

    assert (await client.get(f"/projects/{project['id']}")).json()["ideas"][0]["id"] == idea["id"]
    assert (await client.delete(f"/projects/{project['id']}", headers=headers)).status_code == 200
    gone = await client.get(f"/projects/{project['id']}/ideas/{idea['id']}")
    assert gone.status_code == 404
    assert gone.json() == {"error": f"Idea [{idea['id']}] not found"}


async def test_missing_project_returns_404_body(client):
    resp = await client.get("/projects/321")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Project [321] not found"}


async def test_bookmarked_ideas_requires_login(client):
    resp = await client.get("/ideas/bookmarked")
    assert resp.status_code == 401
    assert "error" in resp.json()


async def test_register_login_and_me(client):
    registered = await client.post(
        "/auth/register",
        json={"username": "ada", "email": "Ada@Example.com", "password": "correct-horse"},
    )
    assert registered.status_code == 200
    body = registered.json()
    assert body["user"]["username"] == "ada"
    assert body["user"]["profile"]["display_name"] == "ada"

    duplicate = await client.post(
        "/auth/register",
        json={"username": "ada", "email": "other@example.com", "password": "correct-horse"},
    )
    assert duplicate.status_code == 409

    bad = await client.post("/auth/login", json={"username": "ada", "password": "wrong-password"})
    assert bad.status_code == 401
    assert bad.json() == {"error": "Invalid username or password."}

    login = await client.post("/auth/login", json={"username": "ada", "password": "correct-horse"})
    token = login.json()["access_token"]
    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["username"] == "ada"
