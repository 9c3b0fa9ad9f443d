# File: fundiflow/api/routes_system.py

"""
Operational endpoints mounted at /api.

  - GET  /api/health       store check + required environment check
  - POST /api/send-email   send one email through the configured provider
  - /api/test-email        email self-tests (GET describes usage)
  - /api/test-smtp         SMTP diagnostics (GET describes configuration)

Bodies are parsed by hand so a malformed request gets a 400 with our own
error body instead of FastAPI's 422.
"""

import logging
import os
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fundiflow.api.deps import get_db
from fundiflow.core.config import settings
from fundiflow.models.project import Project
from fundiflow.schemas.email import SendEmailRequest, TestEmailRequest, TestSmtpRequest
from fundiflow.services import email_check, smtp_check
from fundiflow.services.email_service import send_email

logger = logging.getLogger(__name__)

router = APIRouter()

REQUIRED_ENV_VARS = ["DATABASE_URL", "SECRET_KEY", "SMTP_HOST", "SMTP_USER"]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


async def _parse(request: Request, model: type[BaseModel]) -> BaseModel:
    """Raises ValueError for invalid JSON or a body that does not fit ``model``."""
    body = await request.json()
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return model.model_validate(body)


def _bad_request(error: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": error, **extra})


# ----------------------------------------------------
# Health
# ----------------------------------------------------

@router.get("/health", summary="Health check")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(select(Project.id).limit(1))
    except SQLAlchemyError as e:
        logger.error("[HEALTH] Database check failed: %s", e)
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": "Health check failed",
                "timestamp": _now_iso(),
            },
        )

    missing = [name for name in REQUIRED_ENV_VARS if not os.getenv(name)]
    if missing:
        logger.warning("[HEALTH] Missing environment variables: %s", ", ".join(missing))
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": "Missing environment variables",
                "missing": missing,
            },
        )

    return {
        "status": "healthy",
        "timestamp": _now_iso(),
        "version": settings.VERSION,
        "environment": settings.environment,
        "services": {
            "database": "connected",
            "email": "configured" if settings.smtp_configured else "console",
        },
    }


# ----------------------------------------------------
# Send email
# ----------------------------------------------------

@router.post("/send-email", summary="Send an email")
async def send_email_route(request: Request):
    try:
        req = await _parse(request, SendEmailRequest)
    except (ValueError, ValidationError):
        return JSONResponse(status_code=400, content={"success": False, "error": "Invalid request body"})

    if not req.to or not req.subject or not (req.html or req.text):
        return JSONResponse(status_code=400, content={"success": False, "error": "Missing required fields"})

    result = await send_email(req.to, req.subject, req.html, req.text)
    if not result.success:
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Failed to send email", "details": result.error},
        )

    message = (
        "Email logged to console (SMTP not configured)"
        if result.provider == "console" else "Email sent successfully"
    )
    return {"success": True, "messageId": result.message_id, "message": message}


# ----------------------------------------------------
# Email self-tests
# ----------------------------------------------------

@router.get("/test-email", summary="Describe the email test API")
def test_email_usage():
    return {
        "message": "FundiFlow Email Test API",
        "endpoints": {
            "POST /api/test-email": {
                "description": "Test email notifications",
                "body": {
                    "type": "basic | quick | all",
                    "recipientEmail": "email@example.com (required for basic test)",
                },
            }
        },
        "examples": {
            "basicTest": {"type": "basic", "recipientEmail": "test@example.com"},
            "quickTest": {"type": "quick"},
            "allTests": {"type": "all", "recipientEmail": "test@example.com"},
        },
    }


@router.post("/test-email", summary="Run email self-tests")
async def test_email_run(request: Request):
    try:
        req = await _parse(request, TestEmailRequest)
    except (ValueError, ValidationError):
        return _bad_request("Invalid request body")

    if req.type == "basic":
        if not req.recipientEmail:
            return _bad_request("Recipient email required for basic test")
        ok = await email_check.test_basic_email(req.recipientEmail)
        return {"success": ok, "message": "Basic email test passed" if ok else "Basic email test failed"}

    if req.type == "quick":
        results = email_check.quick_email_test()
        return {
            "success": True,
            "message": "Quick test completed. Check server console for output.",
            "results": results,
        }

    if req.type == "all":
        results = await email_check.run_all_email_tests(req.recipientEmail)
        return {
            "success": True,
            "message": "All tests completed. Check server console for detailed results.",
            "results": results,
        }

    return _bad_request("Invalid test type. Use: basic, quick, or all")


# ----------------------------------------------------
# SMTP diagnostics
# ----------------------------------------------------

@router.get("/test-smtp", summary="Describe the SMTP configuration")
def test_smtp_usage():
    return {
        "message": "FundiFlow SMTP Test API",
        "provider": settings.email_provider,
        "smtpHost": settings.smtp_host,
        "smtpPort": settings.smtp_port,
        "smtpUser": smtp_check.mask_email(settings.smtp_user),
        "fromEmail": settings.from_email,
        "endpoints": {
            "POST /api/test-smtp": {
                "description": "Test SMTP configuration",
                "actions": {
                    "connection": "Test SMTP connection only",
                    "email": "Test sending email (requires recipientEmail)",
                    "full": "Test both connection and email",
                },
            }
        },
        "examples": {
            "connectionTest": {"action": "connection"},
            "emailTest": {"action": "email", "recipientEmail": "test@example.com"},
            "fullTest": {"action": "full", "recipientEmail": "test@example.com"},
        },
        "gmailSetup": {
            "note": "For Gmail, you need an App Password",
            "steps": [
                "Enable 2-Factor Authentication",
                "Go to Google Account > Security > App passwords",
                "Generate App Password for Mail",
                "Use the 16-character password in SMTP_PASS",
            ],
            "link": "https://support.google.com/accounts/answer/185833",
        },
    }


@router.post("/test-smtp", summary="Run SMTP diagnostics")
async def test_smtp_run(request: Request):
    try:
        req = await _parse(request, TestSmtpRequest)
    except (ValueError, ValidationError):
        return _bad_request("Invalid request body")

    if req.action == "connection":
        ok = await smtp_check.test_smtp_connection()
        return {
            "success": ok,
            "message": "SMTP connection successful" if ok else "SMTP connection failed - check server logs",
        }

    if req.action == "email":
        if not req.recipientEmail:
            return _bad_request("Recipient email required for email test")
        if not await smtp_check.test_smtp_connection():
            return {"success": False, "message": "SMTP connection failed - cannot send email"}
        sent = await smtp_check.send_smtp_test_email(req.recipientEmail)
        return {
            "success": sent,
            "message": f"Test email sent to {req.recipientEmail}"
            if sent else "Failed to send test email - check server logs",
        }

    if req.action == "full":
        if not await smtp_check.test_smtp_connection():
            return {
                "success": False,
                "message": "SMTP connection failed",
                "details": {"connection": False, "email": False},
            }
        if not req.recipientEmail:
            return {
                "success": True,
                "message": "Connection test passed",
                "details": {"connection": True, "email": None},
            }
        sent = await smtp_check.send_smtp_test_email(req.recipientEmail)
        return {
            "success": sent,
            "message": f"Connection: OK, Email: {'Sent' if sent else 'Failed'}",
            "details": {"connection": True, "email": sent},
        }

    return _bad_request("Invalid action. Use: connection, email, or full")
