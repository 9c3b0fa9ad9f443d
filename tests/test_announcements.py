# File: tests/test_announcements.py


def test_admin_posts_and_everyone_lists(client, admin_headers, assembler_headers):
    for title in ("First", "Second"):
        resp = client.post(
            "/api/v1/announcements/",
            json={"title": title, "content": f"{title} body"},
            headers=admin_headers,
        )
        assert resp.status_code == 201
        assert resp.json()["audience"] == "all"

    listed = client.get("/api/v1/announcements/", headers=assembler_headers).json()
    assert {a["title"] for a in listed} == {"First", "Second"}

    notes = client.get("/api/v1/notifications/", headers=assembler_headers).json()
    assert len(notes) == 2
    assert all(n["title"] == "New Announcement" for n in notes)
    assert client.get("/api/v1/notifications/", headers=admin_headers).json() == []


def test_assemblers_cannot_post(client, assembler_headers):
    resp = client.post(
        "/api/v1/announcements/",
        json={"title": "Hi", "content": "x"},
        headers=assembler_headers,
    )
    assert resp.status_code == 403


def test_audience_must_be_known(client, admin_headers):
    resp = client.post(
        "/api/v1/announcements/",
        json={"title": "Hi", "content": "x", "audience": "everyone"},
        headers=admin_headers,
    )
    assert resp.status_code == 422
