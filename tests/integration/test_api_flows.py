"""
End-to-end API flows.

Exercises every layer (routes, dependencies, domain services, record
store) through the HTTP interface, backed by the in-memory store.
"""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from tests.support import token_from


def pre_register(client: TestClient, document_number: str = "12345678", name: str = "Juan Pérez") -> dict:
    response = client.post("/v1/voters/pre-register", json={"name": name, "document_number": document_number})
    assert response.status_code == 201, response.text
    return response.json()["data"]


def activate(client: TestClient, email_sender: Mock, document_number: str, email: str, password: str) -> None:
    response = client.post("/v1/users/register-email", json={"document_number": document_number, "email": email})
    assert response.status_code == 200, response.text
    response = client.post(
        "/v1/users/activate-account", json={"token": token_from(email_sender), "password": password}
    )
    assert response.status_code == 200, response.text


class TestScenarioA:
    """Pre-register, bind email, activate, reject the reused token."""

    def test_activation_flow(self, client: TestClient, email_sender: Mock) -> None:
        voter = pre_register(client)
        assert voter["user"]["is_active"] is False

        response = client.post(
            "/v1/users/register-email", json={"document_number": "12345678", "email": "juan@x.pe"}
        )
        assert response.status_code == 200
        assert response.json()["data"] == {"email": "juan@x.pe"}
        token = token_from(email_sender)

        response = client.post("/v1/users/activate-account", json={"token": token, "password": "Secret123"})
        assert response.status_code == 200
        account = response.json()["data"]
        assert account["is_active"] is True
        assert "password_hash" not in account
        assert "activation_token" not in account

        response = client.post("/v1/users/activate-account", json={"token": token, "password": "Other456"})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_duplicate_pre_registration_conflicts(self, client: TestClient) -> None:
        pre_register(client)

        response = client.post("/v1/voters/pre-register", json={"name": "Otro", "document_number": "12345678"})

        assert response.status_code == 409


class TestScenarioB:
    def test_register_email_without_voter_is_not_found(self, client: TestClient) -> None:
        response = client.post("/v1/users/register-email", json={"document_number": "99999999", "email": "x@y.pe"})

        assert response.status_code == 404
        assert response.json()["data"] is None


class TestScenarioC:
    """Login after activation."""

    @pytest.fixture(autouse=True)
    def activated(self, client: TestClient, email_sender: Mock) -> None:
        pre_register(client)
        activate(client, email_sender, "12345678", "juan@x.pe", "Secret123")

    def test_wrong_password_is_unauthorized(self, client: TestClient) -> None:
        response = client.post("/v1/auth/login", json={"email": "juan@x.pe", "password": "WrongPass"})

        assert response.status_code == 401
        assert response.json()["message"] == "Credenciales inválidas"

    def test_unknown_email_matches_wrong_password(self, client: TestClient) -> None:
        unknown = client.post("/v1/auth/login", json={"email": "nadie@x.pe", "password": "Secret123"})
        wrong = client.post("/v1/auth/login", json={"email": "juan@x.pe", "password": "WrongPass"})

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json()

    def test_login_and_profile(self, client: TestClient) -> None:
        response = client.post("/v1/auth/login", json={"email": "juan@x.pe", "password": "Secret123"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token_type"] == "bearer"
        assert data["account"]["email"] == "juan@x.pe"
        assert "password_hash" not in data["account"]

        response = client.get("/v1/auth/profile", headers={"Authorization": f"Bearer {data['access_token']}"})
        assert response.status_code == 200
        assert response.json()["data"]["id"] == data["account"]["id"]

    def test_profile_with_forged_token_is_unauthorized(self, client: TestClient) -> None:
        response = client.get("/v1/auth/profile", headers={"Authorization": "Bearer forged.token.value"})

        assert response.status_code == 401


class TestResendActivation:
    def test_resend_replaces_token(self, client: TestClient, email_sender: Mock) -> None:
        pre_register(client)
        client.post("/v1/users/register-email", json={"document_number": "12345678", "email": "juan@x.pe"})
        first = token_from(email_sender)

        response = client.post("/v1/users/resend-activation/juan@x.pe")
        assert response.status_code == 200
        second = token_from(email_sender)

        stale = client.post("/v1/users/activate-account", json={"token": first, "password": "Secret123"})
        fresh = client.post("/v1/users/activate-account", json={"token": second, "password": "Secret123"})
        assert stale.status_code == 400
        assert fresh.status_code == 200

    def test_resend_for_unknown_email_is_not_found(self, client: TestClient) -> None:
        assert client.post("/v1/users/resend-activation/nadie@x.pe").status_code == 404


class TestCrudEndpoints:
    """Generic CRUD over the voting and electoral entities."""

    def create(self, client: TestClient, path: str, body: dict) -> dict:
        response = client.post(path, json=body)
        assert response.status_code == 201, response.text
        assert response.json()["statusCode"] == 201
        return response.json()["data"]

    def test_voting_center_table_and_voter(self, client: TestClient) -> None:
        center = self.create(client, "/v1/voting-centers", {"name": "IE 1234", "address": "Av. Lima 100"})
        table = self.create(client, "/v1/voting-tables", {"code": "000123", "voting_center_id": center["id"]})
        voter = pre_register(client)

        response = client.patch(f"/v1/voters/{voter['id']}", json={"voting_table_id": table["id"]})
        assert response.status_code == 200
        assert response.json()["data"]["voting_table"]["code"] == "000123"

        response = client.patch(f"/v1/voters/{voter['id']}", json={"voting_table_id": None})
        assert response.json()["data"]["voting_table"] is None

        response = client.patch(f"/v1/voters/{voter['id']}", json={"document_number": None})
        assert response.status_code == 422

    def test_duplicate_table_code_conflicts(self, client: TestClient) -> None:
        center = self.create(client, "/v1/voting-centers", {"name": "IE 1234", "address": "Av. Lima 100"})
        self.create(client, "/v1/voting-tables", {"code": "000123", "voting_center_id": center["id"]})

        response = client.post("/v1/voting-tables", json={"code": "000123", "voting_center_id": center["id"]})

        assert response.status_code == 409

    def test_vote_intention_triple(self, client: TestClient) -> None:
        user = self.create(client, "/v1/users", {"name": "Juan", "email": "juan@x.pe", "password": "Secret123"})
        group = self.create(client, "/v1/political-groups", {"name": "Partido Uno"})
        candidate = self.create(
            client,
            "/v1/candidates",
            {"full_name": "Candidata", "office": "PRESIDENT", "political_group_id": group["id"]},
        )
        election = self.create(
            client, "/v1/elections", {"name": "EG 2026", "type": "GENERAL", "date": "2026-04-12T00:00:00Z"}
        )
        triple = {"user_id": user["id"], "candidate_id": candidate["id"], "election_id": election["id"]}

        self.create(client, "/v1/vote-intentions", triple)
        response = client.post("/v1/vote-intentions", json=triple)

        assert response.status_code == 409

    def test_table_member_promotes_role(self, client: TestClient) -> None:
        center = self.create(client, "/v1/voting-centers", {"name": "IE 1234", "address": "Av. Lima 100"})
        table = self.create(client, "/v1/voting-tables", {"code": "000123", "voting_center_id": center["id"]})
        user = self.create(client, "/v1/users", {"name": "Ana"})

        self.create(client, "/v1/table-members", {"user_id": user["id"], "voting_table_id": table["id"]})

        response = client.get(f"/v1/users/{user['id']}")
        assert response.json()["data"]["role"] == "TABLE_MEMBER"

    def test_moderation_review_flow(self, client: TestClient) -> None:
        admin = self.create(
            client, "/v1/users", {"name": "Admin", "email": "admin@x.pe", "password": "Secret123", "role": "ADMIN"}
        )
        post = self.create(client, "/v1/posts", {"title": "Debate", "content": "Texto", "author_id": admin["id"]})
        assert post["status"] == "PUBLISHED"
        alert = self.create(client, "/v1/post-moderation-alerts", {"post_id": post["id"], "ai_summary": "Revisar"})
        assert alert["status"] == "PENDING"

        response = client.patch(
            f"/v1/post-moderation-alerts/{alert['id']}",
            json={"status": "APPROVED", "reviewed_by_admin_id": admin["id"]},
        )

        data = response.json()["data"]
        assert data["status"] == "APPROVED"
        assert data["reviewed_at"] is not None

    def test_comment_parent_on_other_post_is_bad_request(self, client: TestClient) -> None:
        author = self.create(client, "/v1/users", {"name": "Autora"})
        first = self.create(client, "/v1/posts", {"title": "A", "content": "a", "author_id": author["id"]})
        second = self.create(client, "/v1/posts", {"title": "B", "content": "b", "author_id": author["id"]})
        parent = self.create(client, "/v1/comments", {"post_id": first["id"], "author_id": author["id"], "content": "x"})

        response = client.post(
            "/v1/comments",
            json={"post_id": second["id"], "author_id": author["id"], "content": "y", "parent_id": parent["id"]},
        )

        assert response.status_code == 400

    def test_list_get_and_delete(self, client: TestClient) -> None:
        group = self.create(client, "/v1/political-groups", {"name": "Partido Uno"})

        listed = client.get("/v1/political-groups").json()
        assert [item["name"] for item in listed["data"]] == ["Partido Uno"]

        removed = client.delete(f"/v1/political-groups/{group['id']}")
        assert removed.status_code == 200
        assert removed.json()["data"]["id"] == group["id"]

        missing = client.get(f"/v1/political-groups/{group['id']}")
        assert missing.status_code == 404
        assert missing.json()["message"] == "Agrupación política no encontrada"

    def test_user_responses_hide_credentials(self, client: TestClient) -> None:
        self.create(client, "/v1/users", {"name": "Admin", "email": "admin@x.pe", "password": "Secret123"})

        for user in client.get("/v1/users").json()["data"]:
            assert "password_hash" not in user
            assert "activation_token" not in user


class TestHealth:
    def test_health_pings_store(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
