"""Test profile CRUD and ownership rules."""

from __future__ import annotations


def _create(client, headers, name="alice", **fields):
    body = {"displayName": "Alice A.", "bio": "Hello", **fields}
    return client.post(f"/users/{name}/profile/create", json=body, headers=headers)


def test_create_and_get_profile(client, alice, auth_headers):
    response = _create(client, auth_headers(alice), profilePictureUrl="https://example.com/a.png")
    assert response.status_code == 201
    profile = response.json()["profile"]
    assert profile["userId"] == alice.id
    assert profile["displayName"] == "Alice A."
    assert profile["profilePictureUrl"] == "https://example.com/a.png"

    response = client.get("/users/alice/profile")
    assert response.status_code == 200
    assert response.json()["profile"]["bio"] == "Hello"


def test_get_missing_profile(client, alice):
    response = client.get("/users/alice/profile")
    assert response.status_code == 404
    assert response.json()["detail"] == "No profile found for user alice"


def test_create_requires_authentication(client, alice):
    response = client.post("/users/alice/profile/create", json={"displayName": "A"})
    assert response.status_code == 401


def test_create_for_someone_else_is_forbidden(client, alice, bob, auth_headers):
    response = _create(client, auth_headers(bob))
    assert response.status_code == 403
    assert response.json()["detail"] == "You can only create a profile for yourself"


def test_create_twice_is_400(client, alice, auth_headers):
    assert _create(client, auth_headers(alice)).status_code == 201
    response = _create(client, auth_headers(alice))
    assert response.status_code == 400


def test_edit_profile_partial(client, alice, auth_headers):
    _create(client, auth_headers(alice))
    response = client.put(
        "/users/alice/profile/edit", json={"about": "Writes things"}, headers=auth_headers(alice)
    )
    assert response.status_code == 200
    profile = response.json()["profile"]
    assert profile["about"] == "Writes things"
    # Untouched fields keep their values
    assert profile["bio"] == "Hello"
    assert profile["displayName"] == "Alice A."


def test_edit_profile_can_clear_a_field(client, alice, auth_headers):
    _create(client, auth_headers(alice))
    response = client.put(
        "/users/alice/profile/edit", json={"bio": None}, headers=auth_headers(alice)
    )
    assert response.status_code == 200
    assert response.json()["profile"]["bio"] is None


def test_edit_profile_without_fields(client, alice, auth_headers):
    _create(client, auth_headers(alice))
    response = client.put("/users/alice/profile/edit", json={}, headers=auth_headers(alice))
    assert response.status_code == 400
    assert response.json()["detail"] == "No fields to update"


def test_edit_other_users_profile_is_forbidden(client, alice, bob, auth_headers):
    _create(client, auth_headers(alice))
    response = client.put(
        "/users/alice/profile/edit", json={"bio": "hacked"}, headers=auth_headers(bob)
    )
    assert response.status_code == 403
    assert client.get("/users/alice/profile").json()["profile"]["bio"] == "Hello"


def test_admin_can_edit_profile_acting_as_owner(client, alice, admin, auth_headers):
    _create(client, auth_headers(alice))
    response = client.put(
        "/users/alice/profile/edit",
        params={"actingAsUserId": alice.id},
        json={"bio": "Moderated"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["profile"]["bio"] == "Moderated"


def test_admin_without_acting_as_is_still_checked(client, alice, admin, auth_headers):
    _create(client, auth_headers(alice))
    response = client.put(
        "/users/alice/profile/edit", json={"bio": "Moderated"}, headers=auth_headers(admin)
    )
    assert response.status_code == 403


def test_delete_profile(client, alice, bob, auth_headers):
    _create(client, auth_headers(alice))
    assert client.delete("/users/alice/profile/delete", headers=auth_headers(bob)).status_code == 403
    response = client.delete("/users/alice/profile/delete", headers=auth_headers(alice))
    assert response.status_code == 200
    assert client.get("/users/alice/profile").status_code == 404


def test_own_profile_routes(client, alice, auth_headers):
    headers = auth_headers(alice)
    assert client.get("/profile", headers=headers).status_code == 404

    response = client.post("/profile/create", json={"displayName": "Me"}, headers=headers)
    assert response.status_code == 201

    response = client.put("/profile/edit", json={"displayName": "Still me"}, headers=headers)
    assert response.status_code == 200
    assert client.get("/profile", headers=headers).json()["profile"]["displayName"] == "Still me"

    assert client.delete("/profile/delete", headers=headers).status_code == 200
    assert client.get("/profile", headers=headers).status_code == 404


def test_own_profile_routes_require_token(client):
    assert client.get("/profile").status_code == 401


def test_admin_creates_profile_for_user(client, bob, admin, auth_headers):
    response = client.post(
        "/profile/create",
        params={"actingAsUserId": bob.id},
        json={"displayName": "Bob"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 201
    assert response.json()["profile"]["userId"] == bob.id
