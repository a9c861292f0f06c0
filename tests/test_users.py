"""Test registration, login and account management."""

from __future__ import annotations

from sqlalchemy.orm import Session

from postedit import models
from postedit.auth import decode_token
from postedit.services.accounts import verify_password


def _register(client, name="dave", email="dave@example.com", password="dave-password"):
    return client.post(
        "/users/register", json={"name": name, "email": email, "password": password}
    )


def test_register(client, db: Session):
    response = _register(client)
    assert response.status_code == 201
    body = response.json()
    assert decode_token(body["token"]).name == "dave"
    assert "BEGIN PUBLIC KEY" in body["publicKey"]

    user = db.query(models.User).filter(models.User.name == "dave").one()
    assert user.id == body["id"]
    assert user.is_admin is False
    assert verify_password("dave-password", user.password_hash)


def test_register_duplicate_name(client):
    assert _register(client).status_code == 201
    response = _register(client, email="other@example.com")
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


def test_register_duplicate_email(client):
    assert _register(client).status_code == 201
    response = _register(client, name="dave2")
    assert response.status_code == 400


def test_register_validation_error_is_400(client):
    response = client.post("/users/register", json={"name": "eve"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid request data"
    fields = {error["field"] for error in response.json()["errors"]}
    assert "body.email" in fields


def test_register_rejects_short_password(client):
    response = _register(client, password="short")
    assert response.status_code == 400


def test_login(client, alice, password):
    response = client.post("/users/login", json={"name": "alice", "password": password})
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == alice.id
    assert decode_token(body["token"]).user_id == alice.id


def test_login_wrong_password(client, alice):
    response = client.post("/users/login", json={"name": "alice", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Incorrect password"
    assert response.headers["WWW-Authenticate"] == 'Basic realm="User Visible Realm"'


def test_login_unknown_user(client):
    response = client.post("/users/login", json={"name": "ghost", "password": "whatever"})
    assert response.status_code == 404
    assert response.json()["detail"] == "No user found with name ghost"


def test_login_deactivated_user(client, make_user, password):
    make_user("carol", is_active=False)
    response = client.post("/users/login", json={"name": "carol", "password": password})
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"].startswith("Basic")


def test_list_and_get_users(client, alice, bob):
    response = client.get("/users")
    assert response.status_code == 200
    names = [u["name"] for u in response.json()["users"]]
    assert names == ["alice", "bob"]
    assert "email" not in response.json()["users"][0]

    response = client.get("/users/bob")
    assert response.status_code == 200
    assert response.json()["user"]["id"] == bob.id

    assert client.get("/users/nobody").status_code == 404


def test_set_password(client, db: Session, alice, password):
    response = client.post(
        "/users/alice/set-password",
        json={"oldPassword": password, "newPassword": "brand-new-password"},
    )
    assert response.status_code == 200

    db.expire_all()
    assert verify_password("brand-new-password", db.get(models.User, alice.id).password_hash)
    login = client.post("/users/login", json={"name": "alice", "password": password})
    assert login.status_code == 401


def test_set_password_requires_old_password(client, alice):
    response = client.post(
        "/users/alice/set-password",
        json={"oldPassword": "wrong", "newPassword": "brand-new-password"},
    )
    assert response.status_code == 401


def test_set_email(client, alice, password):
    response = client.post(
        "/users/alice/set-email",
        json={"password": password, "newEmail": "alice@new.example.com"},
    )
    assert response.status_code == 200


def test_set_email_taken(client, alice, bob, password):
    response = client.post(
        "/users/alice/set-email",
        json={"password": password, "newEmail": "bob@example.com"},
    )
    assert response.status_code == 400


def test_delete_user_requires_password(client, alice):
    response = client.request("DELETE", "/users/alice/delete", json={"password": "wrong"})
    assert response.status_code == 401
    assert client.get("/users/alice").status_code == 200


def test_delete_user_cascades(client, db: Session, alice, bob, password, auth_headers):
    alice_id = alice.id
    headers = auth_headers(alice)

    assert client.post(
        "/users/alice/profile/create", json={"displayName": "Alice"}, headers=headers
    ).status_code == 201
    post_id = client.post(
        "/posts/create", json={"title": "Hello", "content": "First post"}, headers=headers
    ).json()["post"]["id"]
    bob_post_id = client.post(
        "/posts/create", json={"title": "Bob's", "content": "Bob writes"}, headers=auth_headers(bob)
    ).json()["post"]["id"]
    assert client.post(
        f"/users/bob/posts/{bob_post_id}/comments/create", json={"content": "Nice"}, headers=headers
    ).status_code == 201
    assert client.post(
        "/users/bob/user-comments/create", json={"content": "Hi Bob"}, headers=headers
    ).status_code == 201
    assert client.post(
        "/users/alice/user-comments/create", json={"content": "Hi Alice"}, headers=auth_headers(bob)
    ).status_code == 201

    response = client.request("DELETE", "/users/alice/delete", json={"password": password})
    assert response.status_code == 200

    db.expire_all()
    assert db.get(models.User, alice_id) is None
    assert db.query(models.Profile).filter(models.Profile.user_id == alice_id).count() == 0
    assert db.get(models.Post, post_id) is None
    assert db.query(models.Comment).filter(models.Comment.user_id == alice_id).count() == 0
    assert db.query(models.UserComment).filter(models.UserComment.user_id == alice_id).count() == 0
    assert db.query(models.UserComment).filter(models.UserComment.user_page_id == alice_id).count() == 0
    # Bob's own content survives
    assert db.get(models.Post, bob_post_id) is not None


def test_list_user_posts(client, alice, bob, auth_headers):
    client.post("/posts/create", json={"title": "A1", "content": "x"}, headers=auth_headers(alice))
    client.post("/posts/create", json={"title": "B1", "content": "y"}, headers=auth_headers(bob))
    response = client.get("/users/alice/posts")
    assert response.status_code == 200
    assert [p["title"] for p in response.json()["posts"]] == ["A1"]
