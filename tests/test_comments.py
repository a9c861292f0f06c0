"""Test post comments and their one-level reply threads."""

from __future__ import annotations

import pytest

from postedit import models


@pytest.fixture
def post_id(client, alice, auth_headers) -> int:
    response = client.post(
        "/posts/create",
        json={"title": "Commented", "content": "Body"},
        headers=auth_headers(alice),
    )
    return response.json()["post"]["id"]


def _comment(client, headers, post_id, content="First!", owner="alice"):
    return client.post(
        f"/users/{owner}/posts/{post_id}/comments/create",
        json={"content": content},
        headers=headers,
    )


def test_create_comment(client, bob, post_id, auth_headers):
    response = _comment(client, auth_headers(bob), post_id)
    assert response.status_code == 201
    comment = response.json()["comment"]
    assert comment["postId"] == post_id
    assert comment["userId"] == bob.id
    assert comment["parentId"] is None


def test_create_comment_requires_auth(client, post_id):
    response = client.post(
        f"/users/alice/posts/{post_id}/comments/create", json={"content": "anon"}
    )
    assert response.status_code == 401


def test_comment_on_post_of_wrong_user(client, bob, post_id, auth_headers):
    response = _comment(client, auth_headers(bob), post_id, owner="bob")
    assert response.status_code == 404


def test_empty_comment_is_rejected(client, bob, post_id, auth_headers):
    response = _comment(client, auth_headers(bob), post_id, content="")
    assert response.status_code == 400


def test_list_threads_with_replies(client, alice, bob, post_id, auth_headers):
    first = _comment(client, auth_headers(bob), post_id, "one").json()["comment"]
    second = _comment(client, auth_headers(alice), post_id, "two").json()["comment"]
    response = client.post(
        f"/users/alice/posts/{post_id}/comments/{first['id']}/reply",
        json={"content": "reply to one"},
        headers=auth_headers(alice),
    )
    assert response.status_code == 201
    reply = response.json()["reply"]
    assert reply["parentId"] == first["id"]

    response = client.get(f"/users/alice/posts/{post_id}/comments")
    assert response.status_code == 200
    threads = response.json()["comments"]
    assert [t["id"] for t in threads] == [first["id"], second["id"]]
    assert [r["id"] for r in threads[0]["replies"]] == [reply["id"]]
    assert threads[1]["replies"] == []

    response = client.get(f"/users/alice/posts/{post_id}/comments/{first['id']}/replies")
    assert [r["content"] for r in response.json()["replies"]] == ["reply to one"]


def test_reply_to_reply_is_rejected(client, alice, bob, post_id, auth_headers):
    parent = _comment(client, auth_headers(bob), post_id).json()["comment"]
    reply = client.post(
        f"/users/alice/posts/{post_id}/comments/{parent['id']}/reply",
        json={"content": "level one"},
        headers=auth_headers(alice),
    ).json()["reply"]

    response = client.post(
        f"/users/alice/posts/{post_id}/comments/{reply['id']}/reply",
        json={"content": "level two"},
        headers=auth_headers(bob),
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Replies can only be made to top-level comments"


def test_read_comment(client, bob, post_id, auth_headers):
    comment = _comment(client, auth_headers(bob), post_id).json()["comment"]
    response = client.get(f"/users/alice/posts/{post_id}/comments/{comment['id']}")
    assert response.status_code == 200
    assert response.json()["comment"]["content"] == "First!"

    response = client.get(f"/users/alice/posts/{post_id}/comments/9999")
    assert response.status_code == 404


def test_only_author_edits_comment(client, alice, bob, post_id, auth_headers):
    comment = _comment(client, auth_headers(bob), post_id).json()["comment"]
    url = f"/users/alice/posts/{post_id}/comments/{comment['id']}/edit"

    # The post owner is not the comment author
    response = client.put(url, json={"content": "censored"}, headers=auth_headers(alice))
    assert response.status_code == 403

    response = client.put(url, json={"content": "Second thoughts"}, headers=auth_headers(bob))
    assert response.status_code == 200
    edited = response.json()["comment"]
    assert edited["content"] == "Second thoughts"
    assert edited["editedAt"] is not None


def test_admin_edits_comment_acting_as_author(client, bob, admin, post_id, auth_headers):
    comment = _comment(client, auth_headers(bob), post_id).json()["comment"]
    response = client.put(
        f"/users/alice/posts/{post_id}/comments/{comment['id']}/edit",
        params={"actingAsUserId": bob.id},
        json={"content": "[removed]"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["comment"]["content"] == "[removed]"


def test_delete_comment_removes_replies(client, db, alice, bob, post_id, auth_headers):
    parent = _comment(client, auth_headers(bob), post_id).json()["comment"]
    client.post(
        f"/users/alice/posts/{post_id}/comments/{parent['id']}/reply",
        json={"content": "reply"},
        headers=auth_headers(alice),
    )
    url = f"/users/alice/posts/{post_id}/comments/{parent['id']}/delete"

    assert client.delete(url, headers=auth_headers(alice)).status_code == 403
    assert client.delete(url, headers=auth_headers(bob)).status_code == 200

    db.expire_all()
    assert db.query(models.Comment).count() == 0


def test_deleting_post_removes_comments(client, db, alice, bob, post_id, auth_headers):
    _comment(client, auth_headers(bob), post_id)
    response = client.delete(f"/posts/{post_id}/delete", headers=auth_headers(alice))
    assert response.status_code == 200

    db.expire_all()
    assert db.query(models.Comment).count() == 0


def test_comments_by_user(client, alice, bob, post_id, auth_headers):
    mine = _comment(client, auth_headers(bob), post_id, "bob says").json()["comment"]
    _comment(client, auth_headers(alice), post_id, "alice says")

    response = client.get("/users/bob/post-comments")
    assert response.status_code == 200
    assert [c["content"] for c in response.json()["comments"]] == ["bob says"]

    response = client.get(f"/users/bob/post-comments/{mine['id']}")
    assert response.status_code == 200
    assert response.json()["comment"]["id"] == mine["id"]

    assert client.get(f"/users/alice/post-comments/{mine['id']}").status_code == 404
