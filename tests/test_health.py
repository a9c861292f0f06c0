from __future__ import annotations

from postedit.auth import public_key_pem


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["uptimeS"] >= 0


def test_api_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "API Root"}


def test_public_key_is_published(client):
    response = client.get("/public-key")
    assert response.status_code == 200
    assert response.json()["publicKey"] == public_key_pem()
    assert "BEGIN PUBLIC KEY" in response.json()["publicKey"]


def test_security_headers(client):
    response = client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "Content-Security-Policy" in response.headers


def test_docs_are_served_without_csp(client):
    response = client.get("/docs")
    assert response.status_code == 200
    assert "Content-Security-Policy" not in response.headers
