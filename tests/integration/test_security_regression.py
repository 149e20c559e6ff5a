"""
Security Regression Tests
Session revocation, role gating, credential storage and log hygiene
"""
import io
import logging
from datetime import datetime, timedelta

from fastapi.testclient import TestClient

from aib_hub.api_server import app
from aib_hub.auth import AUTH_COOKIE_NAME, create_access_token, token_hash
from aib_hub.db import User, UserSession
from aib_hub.logging_config import StructuredFormatter, bind_actor, describe_actor
from aib_hub.logging_filter import PIIRedactionFilter, setup_pii_redaction


def register(client, email="secure@example.com", password="MyP@ssw0rd123"):
    response = client.post("/api/auth/register", json={
        "email": email,
        "password": password,
        "full_name": "Secure Creator",
        "city": "Indore",
    })
    assert response.status_code == 201, response.text
    return response.json()["access_token"]


class TestSessionRevocation:
    """Logged-out and forged tokens are rejected"""

    def test_logged_out_token_rejected(self, client):
        token = register(client)
        headers = {"Authorization": f"Bearer {token}"}
        assert client.get("/api/auth/me", headers=headers).status_code == 200

        assert client.post("/api/auth/logout", headers=headers).status_code == 200

        assert client.get("/api/auth/me", headers=headers).status_code == 401

    def test_refreshed_token_replaces_old_one(self, client):
        token = register(client)
        old_headers = {"Authorization": f"Bearer {token}"}

        new_token = client.post("/api/auth/refresh", headers=old_headers).json()["access_token"]

        assert client.get("/api/auth/me", headers=old_headers).status_code == 401
        assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {new_token}"}).status_code == 200

    def test_token_without_session_row_rejected(self, client, test_user):
        """A validly signed token that was never issued through login"""
        forged = create_access_token({"sub": str(test_user.id)})

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {forged}"})

        assert response.status_code == 401

    def test_tampered_token_rejected(self, client):
        token = register(client)

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token[:-4]}abcd"})

        assert response.status_code == 401

    def test_expired_session_rejected(self, client, db_session):
        token = register(client)
        session = db_session.query(UserSession).filter(UserSession.token_hash == token_hash(token)).one()
        session.expires_at = datetime.utcnow() - timedelta(minutes=1)
        db_session.commit()

        assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401

    def test_inactive_account_rejected(self, client, test_user, db_session):
        test_user.is_active = False
        db_session.commit()

        response = client.post("/api/auth/login", json={"email": test_user.email, "password": "testpassword123"})

        assert response.status_code == 403

    def test_cookie_authentication(self, db_session):
        cookie_client = TestClient(app)
        register(cookie_client, email="cookie@example.com")

        assert AUTH_COOKIE_NAME in cookie_client.cookies
        assert cookie_client.get("/api/auth/me").status_code == 200


class TestRoleGating:
    """No role escalation through the API"""

    def test_visitor_cannot_use_creator_routes(self, client, make_user, login_as):
        make_user("visitor@example.com", role="VISITOR")
        headers = login_as("visitor@example.com")

        assert client.get("/api/me/creator", headers=headers).status_code == 403
        assert client.post("/api/applications", json={"job_id": 1}, headers=headers).status_code == 403

    def test_creator_cannot_approve_self(self, authenticated_client):
        creator_id = authenticated_client.get("/api/auth/me").json()["creator_id"]

        response = authenticated_client.patch(f"/api/admin/creators/{creator_id}/status", json={"status": "APPROVED"})

        assert response.status_code == 403

    def test_creator_cannot_edit_moderation_fields(self, authenticated_client):
        response = authenticated_client.patch("/api/me/creator/info", json={"status": "APPROVED", "is_featured": True})

        assert response.status_code == 200
        assert response.json()["is_featured"] is False


class TestCredentialStorage:
    def test_password_is_hashed(self, client, db_session):
        register(client, password="MyP@ssw0rd123")

        user = db_session.query(User).filter(User.email == "secure@example.com").one()

        assert user.hashed_password != "MyP@ssw0rd123"
        assert user.hashed_password.startswith("$2")

    def test_session_rows_store_token_hash(self, client, db_session):
        token = register(client)

        stored = [row.token_hash for row in db_session.query(UserSession).all()]

        assert token not in stored
        assert token_hash(token) in stored


class TestLoggingSecurity:
    """Logs do not contain emails, phone numbers, tokens or passwords"""

    def setup_method(self):
        self.filter = PIIRedactionFilter()

    def test_email_redacted(self):
        redacted = self.filter.redact_pii("Invitation sent to brand@example.com")

        assert "brand@example.com" not in redacted
        assert redacted.endswith("@example.com")

    def test_phone_redacted(self):
        assert "98765 43210" not in self.filter.redact_pii("WhatsApp +91 98765 43210 added")

    def test_bearer_token_redacted(self):
        token = create_access_token({"sub": "1"})

        redacted = self.filter.redact_pii(f"Authorization: Bearer {token}")

        assert token not in redacted
        assert "***REDACTED***" in redacted

    def test_password_redacted(self):
        assert "hunter2222" not in self.filter.redact_pii("password=hunter2222")

    def test_ids_untouched(self):
        assert self.filter.redact_pii("Creator 12 applied to job 7") == "Creator 12 applied to job 7"

    def test_filter_rewrites_record(self):
        record = logging.LogRecord("aib_hub", logging.INFO, __file__, 1, "User %s signed in", ("asha@example.com",), None)

        assert self.filter.filter(record) is True
        assert "asha@example.com" not in record.getMessage()

    def test_setup_is_idempotent(self):
        handler = logging.StreamHandler()

        setup_pii_redaction(handler)
        setup_pii_redaction(handler)

        assert len(handler.filters) == 1

    def test_passwords_not_logged(self, client, caplog):
        with caplog.at_level(logging.DEBUG):
            register(client, password="MyP@ssw0rd123")

        assert "MyP@ssw0rd123" not in caplog.text


class TestLogContext:
    """Log lines name the request and the caller"""

    def capture(self):
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(StructuredFormatter(env="test"))
        return stream, handler

    def test_outside_request(self):
        stream, handler = self.capture()
        record = logging.LogRecord("aib_hub", logging.INFO, __file__, 1, "Loaded tiers", (), None)

        line = handler.format(record)

        assert "[test] [-] [-]" in line
        bind_actor(7, "ADMIN")
        assert "[-] [-]" in handler.format(record)

    def test_describe_actor(self):
        assert describe_actor(None, None) == "anon"
        assert describe_actor(12, "CREATOR") == "user:12/CREATOR"

    def test_admin_action_logged_with_actor(self, admin_client, admin_user, make_job):
        job = make_job()
        stream, handler = self.capture()
        route_logger = logging.getLogger("aib_hub.admin_routes")
        previous_level = route_logger.level
        route_logger.addHandler(handler)
        route_logger.setLevel(logging.INFO)
        try:
            response = admin_client.delete(f"/api/admin/jobs/{job.id}", headers={"X-Request-ID": "req-42"})
        finally:
            route_logger.removeHandler(handler)
            route_logger.setLevel(previous_level)

        assert response.status_code == 200, response.text
        line = next(line for line in stream.getvalue().splitlines() if "deleting job" in line)
        assert "[req-42]" in line
        assert f"[user:{admin_user.id}/ADMIN]" in line


class TestCORS:
    def test_cors_headers_present(self, client):
        response = client.get("/api/jobs", headers={"Origin": "http://localhost:3000"})

        assert response.headers.get("access-control-allow-origin") == "http://localhost:3000"
        assert response.headers.get("access-control-allow-credentials") == "true"
