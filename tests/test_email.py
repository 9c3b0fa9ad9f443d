# File: tests/test_email.py

"""
Email rendering and delivery. SMTP is replaced by an in-memory fake.
"""

import base64

import aiosmtplib
import pytest

from fundiflow.models.user import User
from fundiflow.services import email_check, email_service, smtp_check
from fundiflow.services.email_service import EmailConfig, EmailRecipient
from fundiflow.services.notification_service import update_notification_preferences


class FakeSMTP:
    instances = []

    def __init__(self, hostname, port, timeout, use_tls):
        self.hostname = hostname
        self.port = port
        self.use_tls = use_tls
        self.sent = []
        self.logged_in = None
        self.quit_called = False
        FakeSMTP.instances.append(self)

    async def connect(self):
        pass

    async def login(self, user, password):
        if password == "wrong":
            raise aiosmtplib.SMTPAuthenticationError(535, "bad credentials")
        self.logged_in = user

    async def send_message(self, msg):
        self.sent.append(msg)

    async def quit(self):
        self.quit_called = True


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(aiosmtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def smtp_config(**overrides):
    values = dict(
        provider="smtp",
        from_email="notifications@fundiflow.app",
        from_name="FundiFlow",
        smtp_host="smtp.fundiflow.app",
        smtp_port=587,
        smtp_user="mailer@fundiflow.app",
        smtp_pass="app-password",
    )
    values.update(overrides)
    return EmailConfig(**values)


def test_render_template_fills_variables():
    rendered = email_service.render_template("PROJECT_ASSIGNED_TO_ASSEMBLER", {
        "assemblerName": "Alice",
        "projectName": "Rover",
        "assignedDate": "2026-01-01",
        "actionUrl": "http://x/p/1",
    })
    assert rendered.subject == "Project Assigned - Rover"
    assert "Hello Alice," in rendered.text
    assert 'href="http://x/p/1"' in rendered.html


@pytest.mark.asyncio
async def test_announcement_html_escapes_user_text(db, monkeypatch):
    user = User(email="erin@fundiflow.app", name="Erin <3", role="assembler", hashed_password="x")
    db.add(user)
    db.commit()

    sent = []

    async def capture(to, subject, html=None, text=None, config=None):
        sent.append((subject, html, text))
        return email_service.EmailResult(success=True, message_id="m1", provider="console")

    monkeypatch.setattr(email_service, "send_email", capture)

    count = await email_service.send_announcement_emails(
        db, [user.id], "<script>alert(1)</script>", "<img src=x onerror=alert(1)>", "a1"
    )
    assert count == 1

    subject, html, text = sent[0]
    assert "<script>" not in html
    assert "<img" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "&lt;img src=x onerror=alert(1)&gt;" in html
    assert "Erin &lt;3" in html
    # Plain-text parts keep the raw values.
    assert subject == "New Announcement - <script>alert(1)</script>"
    assert "<img src=x onerror=alert(1)>" in text


def test_unknown_placeholders_survive_escaping():
    rendered = email_service.render_template("NEW_ANNOUNCEMENT", {"announcementTitle": "A & B"})
    assert "<strong>A &amp; B</strong>" in rendered.html
    assert "{recipientName}" in rendered.html


def test_quick_email_test_passes_for_every_template():
    results = email_check.quick_email_test()
    assert set(results) == set(email_service.EMAIL_TEMPLATES)
    assert all(results.values())


@pytest.mark.asyncio
async def test_console_provider_logs_instead_of_sending(fake_smtp):
    result = await email_service.send_email("a@fundiflow.app", "Hi", text="Hello")
    assert result.success is True
    assert result.message_id == "console-log"
    assert result.provider == "console"
    assert fake_smtp.instances == []


@pytest.mark.asyncio
async def test_smtp_provider_sends_with_from_header(fake_smtp):
    result = await email_service.send_email(
        "a@fundiflow.app", "Hi", html="<p>Hello</p>", text="Hello", config=smtp_config()
    )
    assert result.success is True
    assert result.provider == "smtp"

    smtp = fake_smtp.instances[0]
    assert smtp.use_tls is False
    assert smtp.logged_in == "mailer@fundiflow.app"
    assert smtp.quit_called
    msg = smtp.sent[0]
    assert msg["From"] == "FundiFlow <notifications@fundiflow.app>"
    assert msg["To"] == "a@fundiflow.app"
    assert msg["Message-ID"] == result.message_id


@pytest.mark.asyncio
async def test_port_465_uses_implicit_tls(fake_smtp):
    await email_service.send_email("a@fundiflow.app", "Hi", text="x", config=smtp_config(smtp_port=465))
    assert fake_smtp.instances[0].use_tls is True


@pytest.mark.asyncio
async def test_smtp_failure_is_reported_not_raised(fake_smtp):
    result = await email_service.send_email(
        "a@fundiflow.app", "Hi", text="x", config=smtp_config(smtp_pass="wrong")
    )
    assert result.success is False
    assert "bad credentials" in result.error
    assert fake_smtp.instances[0].quit_called


@pytest.mark.asyncio
async def test_smtp_without_credentials_falls_back_to_console(fake_smtp):
    result = await email_service.send_email("a@fundiflow.app", "Hi", text="x", config=smtp_config(smtp_pass=None))
    assert result.message_id == "console-log"
    assert fake_smtp.instances == []


@pytest.mark.asyncio
async def test_smtp_connection_check(fake_smtp):
    assert await smtp_check.test_smtp_connection(smtp_config()) is True
    assert await smtp_check.test_smtp_connection(smtp_config(smtp_pass="wrong")) is False
    assert await smtp_check.test_smtp_connection(smtp_config(smtp_host=None)) is False


def test_mask_email():
    assert smtp_check.mask_email("abcdef@example.org") == "abc***@example.org"
    assert smtp_check.mask_email(None) == "Not configured"


def test_unsubscribe_url_carries_base64_user_id():
    url = email_service.unsubscribe_url("user-42")
    token = url.split("token=")[1]
    assert base64.b64decode(token).decode() == "user-42"


@pytest.mark.asyncio
async def test_preferences_footer_and_skip(db, monkeypatch):
    user = User(email="dan@fundiflow.app", name="Dan", role="assembler", hashed_password="x")
    db.add(user)
    db.commit()

    sent = []

    async def capture(to, subject, html=None, text=None, config=None):
        sent.append((to, subject, html, text))
        return email_service.EmailResult(success=True, message_id="m1", provider="console")

    monkeypatch.setattr(email_service, "send_email", capture)

    recipient = EmailRecipient(email=user.email, name="Dan", user_id=user.id)
    rendered = email_service.EmailTemplate(subject="S", html="<p>H</p>", text="T")

    assert await email_service.send_email_with_preferences(db, recipient, rendered, "announcements")
    _, _, html, text = sent[0]
    assert "Manage email preferences" in html
    assert "Unsubscribe: " + email_service.unsubscribe_url(user.id) in text

    update_notification_preferences(db, user.id, {"email_notifications": False})
    assert not await email_service.send_email_with_preferences(db, recipient, rendered, "announcements")
    assert len(sent) == 1


@pytest.mark.asyncio
async def test_event_emails_skip_unknown_users(db):
    sent = await email_service.send_project_created_email(db, ["nobody"], "Rover", "p1")
    assert sent == 0
