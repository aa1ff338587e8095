"""
Tests for FastAPI endpoints.
"""
import pytest

from cryptozoo.infrastructure.auth_client import AuthSession


class TestCatalogEndpoints:
    """Test catalog browsing endpoints."""

    def test_home(self, client, sample_catalog):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["vertex_count"] == 3
        assert data["edge_type_counts"]["construction"] == 1
        assert [v["id"] for v in data["vertices"]] == ["owf", "prg", "pke"]

    def test_vertex_detail(self, client, sample_catalog):
        response = client.get("/v/prg")
        assert response.status_code == 200
        data = response.json()
        assert data["vertex"]["abbreviation"] == "PRG"
        assert [e["id"] for e in data["incoming_edges"]] == ["owf-to-prg"]
        assert [v["id"] for v in data["incoming_vertices"]] == ["owf"]

    def test_missing_vertex(self, client):
        response = client.get("/v/nope")
        assert response.status_code == 404
        assert response.json() == {"detail": "Vertex not found: nope"}

    def test_edge_detail(self, client, sample_catalog):
        response = client.get("/edge/ir-separation")
        assert response.status_code == 200
        assert response.json()["dangling_ids"] == ["ghost"]

    def test_search(self, client, sample_catalog):
        response = client.get("/search", params={"q": "PRG"})
        assert response.status_code == 200
        data = response.json()
        assert [v["id"] for v in data["vertices"]] == ["prg"]
        assert [e["id"] for e in data["edges"]] == ["owf-to-prg"]

    def test_list_filters(self, client, sample_catalog):
        assert [v["id"] for v in client.get("/vertices", params={"type": "scheme"}).json()] == ["pke"]
        assert [e["id"] for e in client.get("/edges", params={"tag": "classic"}).json()] == ["owf-to-prg"]

    def test_graph(self, client, sample_catalog):
        data = client.get("/graph").json()
        assert len(data["nodes"]) == 3
        assert len(data["links"]) == 2


class TestToolEndpoints:

    def test_vertex_tool(self, client):
        response = client.post("/tool/vertex", json={"name": "Bit Commitment", "tags": "a, b"})
        assert response.status_code == 200
        data = response.json()
        assert data["document"]["tags"] == ["a", "b"]
        assert '"name": "Bit Commitment"' in data["json_text"]

    def test_edge_tool_bad_references(self, client):
        previous = [{"title": "Kept", "author": "", "year": None, "url": ""}]
        response = client.post("/tool/edge", json={
            "name": "X", "references": "[oops", "previous_references": previous,
        })
        assert response.json()["document"]["references"] == previous


class TestEditRequestEndpoints:
    """Test submission and review over HTTP."""

    def test_anonymous_submit_then_admin_approves(self, client, sample_catalog, admin_headers, email_provider):
        response = client.post("/submit-edit", json={
            "type": "vertex", "action": "update", "target_id": "owf",
            "data": {"description": "Updated text"}, "email": "a@b.com",
        })
        assert response.status_code == 201
        assert response.json()["id"] == "temp-id"

        pending = client.get("/admin/edit-requests", params={"status": "pending"}, headers=admin_headers)
        assert pending.status_code == 200
        request_id = pending.json()[0]["id"]

        detail = client.get(f"/admin/edit-requests/{request_id}", headers=admin_headers).json()
        assert detail["has_changes"] is True
        assert detail["original"]["description"] == "Easy to compute, hard to invert"
        assert [c["field"] for c in detail["changes"] if c["changed"]] == ["description"]

        review = client.post(f"/admin/edit-requests/{request_id}/review",
                             json={"decision": "approved"}, headers=admin_headers)
        assert review.status_code == 200
        assert review.json()["status"] == "approved"
        assert client.get("/v/owf").json()["vertex"]["description"] == "Updated text"
        assert email_provider.send_email.call_count == 2

        again = client.post(f"/admin/edit-requests/{request_id}/review",
                            json={"decision": "rejected"}, headers=admin_headers)
        assert again.status_code == 409

    def test_signed_in_submit_returns_stored_request(self, client, sample_catalog, user_headers):
        response = client.post("/submit-edit", headers=user_headers, json={
            "type": "edge", "action": "delete", "target_id": "ir-separation",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["id"] != "temp-id"
        assert data["submitted_by"] == "user-1"

    def test_anonymous_submit_without_email(self, client, sample_catalog):
        response = client.post("/submit-edit", json={
            "type": "vertex", "action": "update", "target_id": "owf", "data": {"notes": "x"},
        })
        assert response.status_code == 400

    def test_unknown_field_rejected(self, client, sample_catalog):
        response = client.post("/submit-edit", json={
            "type": "vertex", "action": "update", "target_id": "owf",
            "data": {"colour": "blue"}, "email": "a@b.com",
        })
        assert response.status_code == 400
        assert "Invalid vertex payload" in response.json()["detail"]

    def test_prefill_target(self, client, sample_catalog):
        response = client.get("/submit-edit/target/edge/owf-to-prg")
        assert response.status_code == 200
        assert response.json()["name"] == "HILL"
        assert client.get("/submit-edit/target/vertex/ghost").status_code == 404

    def test_admin_routes_need_admin(self, client, user_headers):
        assert client.get("/admin/edit-requests").status_code == 401
        assert client.get("/admin/edit-requests", headers=user_headers).status_code == 403
        response = client.get("/admin/edit-requests", headers={"Authorization": "Bearer forged"})
        assert response.status_code == 401


class TestUserEndpoints:

    def test_list_and_promote(self, client, admin_headers, regular_user):
        listed = client.get("/manage-users", headers=admin_headers)
        assert listed.status_code == 200
        names = {u["id"]: u["display_name"] for u in listed.json()}
        assert names == {"admin-1": "Ada Admin", "user-1": "Uma"}

        response = client.put("/manage-users/user-1", json={"role": "admin"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["role"] == "admin"

    def test_invalid_role_is_rejected(self, client, admin_headers, regular_user):
        response = client.put("/manage-users/user-1", json={"role": "owner"}, headers=admin_headers)
        assert response.status_code == 422

    def test_missing_user(self, client, admin_headers):
        assert client.put("/manage-users/ghost", json={"first_name": "G"}, headers=admin_headers).status_code == 404

    def test_regular_user_denied(self, client, user_headers):
        assert client.get("/manage-users", headers=user_headers).status_code == 403


class TestAuthEndpoints:

    def test_sign_up(self, client, auth_client, users):
        auth_client.sign_up.return_value = {"id": "new-1", "email": "new@zoo.test"}
        response = client.post("/auth/sign-up", json={"email": "new@zoo.test", "password": "secret1"})
        assert response.status_code == 201
        assert response.json()["role"] == "pending"

    def test_duplicate_sign_up(self, client, regular_user):
        response = client.post("/auth/sign-up", json={"email": "user@zoo.test", "password": "secret1"})
        assert response.status_code == 409
        assert "already exists" in response.json()["detail"]

    def test_sign_in(self, client, regular_user):
        response = client.post("/auth/sign-in", json={"email": "user@zoo.test", "password": "secret1"})
        assert response.status_code == 200
        data = response.json()
        assert data["access_token"] == "user-token"
        assert data["user"]["role"] == "user"

    def test_refresh(self, client, auth_client, regular_user, user_headers):
        auth_client.refresh.return_value = AuthSession("user-token-2", "refresh-2", {"id": "user-1"})
        response = client.post("/auth/refresh", json={"refresh_token": "refresh-1"}, headers=user_headers)
        assert response.status_code == 200
        assert response.json()["access_token"] == "user-token-2"

    def test_me(self, client, user_headers):
        response = client.get("/auth/me", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["email"] == "user@zoo.test"
        assert client.get("/auth/me").status_code == 401

    def test_sign_out(self, client, auth_client, user_headers):
        response = client.post("/auth/sign-out", headers=user_headers)
        assert response.json() == {"success": True}
        auth_client.sign_out.assert_called_once_with("user-token")


class TestHealthEndpoints:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_database_health(self, client):
        assert client.get("/health/database").json()["status"] == "healthy"
