############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# test_auth_api.py: Integration tests for login, signup and guards
#
############################################################

"""Integration tests for unified login, author signup and bearer guards."""

from datetime import datetime, timedelta, timezone

from backend.app.core.access import Principal
from backend.app.security.tokens import issue_token

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, auth_headers


SIGNUP = {
    "email": "New.Writer@Example.com",
    "password": "writer-pass",
    "displayName": "New Writer",
    "title": "Staff Writer",
    "socialLinks": {"twitter": "@newwriter"},
}


class TestLogin:
    async def test_admin_login(self, client):
        response = await client.post("/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful!"
        assert body["user"] == {"id": "admin", "email": ADMIN_EMAIL, "name": "Administrator", "role": "admin"}
        assert body["token"]

    async def test_admin_wrong_password(self, client):
        response = await client.post("/admin/login", json={"email": ADMIN_EMAIL, "password": "nope"})
        assert response.status_code == 401
        assert response.json()["error"]["type"] == "unauthorized"

    async def test_unknown_email(self, client):
        response = await client.post("/admin/login", json={"email": "ghost@example.com", "password": "x"})
        assert response.status_code == 404
        assert response.json()["error"]["type"] == "not_found"

    async def test_missing_password(self, client):
        response = await client.post("/admin/login", json={"email": ADMIN_EMAIL})
        assert response.status_code == 400
        assert response.json()["error"]["type"] == "validation_error"


class TestSignup:
    async def test_signup_then_login(self, client):
        response = await client.post("/admin/authors", json=SIGNUP)
        assert response.status_code == 201
        created = response.json()
        assert created["email"] == "new.writer@example.com"
        assert created["displayName"] == "New Writer"
        assert created["socialLinks"]["twitter"] == "@newwriter"
        assert "password" not in created and "passwordHash" not in created

        login = await client.post("/admin/login", json={"email": "new.writer@example.com", "password": "writer-pass"})
        assert login.status_code == 200
        user = login.json()["user"]
        assert user["role"] == "author"
        assert user["id"] == str(created["id"])
        assert user["name"] == "New Writer"

    async def test_duplicate_email_case_insensitive(self, client):
        await client.post("/admin/authors", json=SIGNUP)
        response = await client.post("/admin/authors", json={**SIGNUP, "email": "new.writer@EXAMPLE.com"})
        assert response.status_code == 400
        assert response.json()["error"]["type"] == "duplicate_error"

    async def test_invalid_email(self, client):
        response = await client.post("/admin/authors", json={**SIGNUP, "email": "not-an-email"})
        assert response.status_code == 400


class TestGuards:
    async def test_missing_token(self, client):
        response = await client.get("/admin/me")
        assert response.status_code == 401

    async def test_garbage_token(self, client):
        response = await client.get("/admin/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    async def test_expired_token(self, client, author):
        token = issue_token(Principal.for_author(author), now=datetime.now(timezone.utc) - timedelta(days=3))
        response = await client.get("/admin/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_me_as_author(self, client, author):
        response = await client.get("/admin/me", headers=auth_headers(author))
        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "author"
        assert body["author"]["email"] == author.email

    async def test_me_as_admin(self, client, admin_headers):
        response = await client.get("/admin/me", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["id"] == "admin"
        assert response.json()["author"] is None

    async def test_author_cannot_use_admin_routes(self, client, author):
        response = await client.post("/admin/categories", json={"name": "Sneaky"}, headers=auth_headers(author))
        assert response.status_code == 403
        assert response.json()["error"]["type"] == "forbidden"

    async def test_admin_cannot_use_author_self_service(self, client, admin_headers):
        response = await client.put("/admin/authors/me", json={"title": "x"}, headers=admin_headers)
        assert response.status_code == 403

    async def test_deleted_author_token_rejected(self, client, author, admin_headers):
        headers = auth_headers(author)
        response = await client.delete(f"/admin/authors/{author.id}", headers=admin_headers)
        assert response.status_code == 204

        response = await client.get("/admin/me", headers=headers)
        assert response.status_code == 401

    async def test_deleted_author_on_admin_route_is_forbidden(self, client, author, admin_headers):
        headers = auth_headers(author)
        await client.delete(f"/admin/authors/{author.id}", headers=admin_headers)

        # Role is checked from the token before the author row is looked up
        response = await client.post("/admin/categories", json={"name": "Late"}, headers=headers)
        assert response.status_code == 403


class TestAuthorManagement:
    async def test_self_update(self, client, author):
        response = await client.put(
            "/admin/authors/me", json={"bio": "Hello", "displayName": "Writer Two"}, headers=auth_headers(author)
        )
        assert response.status_code == 200
        assert response.json()["bio"] == "Hello"
        assert response.json()["displayName"] == "Writer Two"

    async def test_admin_updates_email_in_use(self, client, author, other_author, admin_headers):
        response = await client.put(
            f"/admin/authors/{author.id}", json={"email": other_author.email}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["error"]["type"] == "duplicate_error"

    async def test_list_authors(self, client, author, other_author, admin_headers):
        response = await client.get("/admin/authors", headers=admin_headers)
        assert response.status_code == 200
        assert {a["email"] for a in response.json()} == {author.email, other_author.email}
