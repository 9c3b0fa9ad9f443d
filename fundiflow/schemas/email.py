# File: fundiflow/schemas/email.py

from typing import Literal, Optional

from pydantic import BaseModel


class SendEmailRequest(BaseModel):
    # Fields are optional so a missing one yields our own 400 body, not a 422.
    to: Optional[str] = None
    subject: Optional[str] = None
    html: Optional[str] = None
    text: Optional[str] = None


class TestEmailRequest(BaseModel):
    type: Optional[str] = None
    recipientEmail: Optional[str] = None


class TestSmtpRequest(BaseModel):
    action: Optional[str] = None
    recipientEmail: Optional[str] = None


class EmailResult(BaseModel):
    success: bool
    message_id: Optional[str] = None
    provider: Literal["smtp", "console"] = "console"
    error: Optional[str] = None
