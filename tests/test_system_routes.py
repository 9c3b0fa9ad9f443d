# File: tests/test_system_routes.py

"""
Tests for the /api system endpoints (health, send-email, test-email,
test-smtp). Email runs in console mode.
"""


def test_health_reports_healthy(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["services"]["database"] == "connected"
    assert data["environment"] == "test"
    assert "timestamp" in data


def test_health_lists_missing_env_vars(client, monkeypatch):
    monkeypatch.delenv("SMTP_HOST")
    monkeypatch.delenv("SECRET_KEY")

    resp = client.get("/api/health")
    assert resp.status_code == 500
    data = resp.json()
    assert data["status"] == "error"
    assert data["missing"] == ["SECRET_KEY", "SMTP_HOST"]


def test_send_email_requires_fields(client):
    resp = client.post("/api/send-email", json={"to": "a@fundiflow.app", "subject": "Hi"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Missing required fields"}


def test_send_email_rejects_malformed_json(client):
    resp = client.post(
        "/api/send-email",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_send_email_console_mode(client):
    resp = client.post(
        "/api/send-email",
        json={"to": "a@fundiflow.app", "subject": "Hi", "text": "Hello"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["messageId"] == "console-log"


def test_test_email_usage(client):
    resp = client.get("/api/test-email")
    assert resp.status_code == 200
    assert "POST /api/test-email" in resp.json()["endpoints"]


def test_test_email_basic_requires_recipient(client):
    resp = client.post("/api/test-email", json={"type": "basic"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Recipient email required for basic test"


def test_test_email_unknown_type(client):
    resp = client.post("/api/test-email", json={"type": "everything"})
    assert resp.status_code == 400


def test_test_email_quick_renders_all_templates(client):
    resp = client.post("/api/test-email", json={"type": "quick"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert all(data["results"].values())


def test_test_email_basic_console(client):
    resp = client.post("/api/test-email", json={"type": "basic", "recipientEmail": "qa@fundiflow.app"})
    assert resp.status_code == 200
    assert resp.json()["success"] is True


def test_test_smtp_usage_masks_user(client):
    resp = client.get("/api/test-smtp")
    assert resp.status_code == 200
    assert resp.json()["smtpUser"] == "mai***@fundiflow.app"


def test_test_smtp_email_requires_recipient(client):
    resp = client.post("/api/test-smtp", json={"action": "email"})
    assert resp.status_code == 400


def test_test_smtp_unknown_action(client):
    resp = client.post("/api/test-smtp", json={"action": "ping"})
    assert resp.status_code == 400
    assert "connection, email, or full" in resp.json()["error"]


def test_test_smtp_connection_without_password_fails(client):
    # SMTP_PASS is unset in the test environment.
    resp = client.post("/api/test-smtp", json={"action": "full"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is False
    assert data["details"] == {"connection": False, "email": False}
