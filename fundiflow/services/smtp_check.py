# fundiflow/services/smtp_check.py
"""
SMTP configuration diagnostics used by /api/test-smtp.
"""

import asyncio
import logging
import re
from typing import Optional

import aiosmtplib

from fundiflow.services.email_service import EmailConfig, send_test_email

logger = logging.getLogger(__name__)


def mask_email(address: Optional[str]) -> str:
    """abcdef@example.com -> abc***@example.com"""
    if not address:
        return "Not configured"
    return re.sub(r"^(.{3}).*(@.*)$", r"\1***\2", address)


async def test_smtp_connection(config: Optional[EmailConfig] = None) -> bool:
    """Connect, authenticate and disconnect. Returns False on any failure."""
    config = config or EmailConfig.from_settings()
    if not (config.smtp_host and config.smtp_user and config.smtp_pass):
        logger.warning("[SMTP] Credentials not configured")
        return False

    logger.info("[SMTP] Testing %s:%s as %s", config.smtp_host, config.smtp_port, mask_email(config.smtp_user))
    smtp = aiosmtplib.SMTP(
        hostname=config.smtp_host,
        port=config.smtp_port,
        timeout=config.timeout,
        use_tls=config.smtp_port == 465,
    )
    try:
        await smtp.connect()
        await smtp.login(config.smtp_user, config.smtp_pass)
        await smtp.quit()
    except asyncio.TimeoutError:
        logger.error("[SMTP] Connection timed out after %ss", config.timeout)
        return False
    except (aiosmtplib.SMTPException, OSError) as e:
        logger.error("[SMTP] Connection failed: %s", e)
        return False

    logger.info("[SMTP] Connection successful")
    return True


async def send_smtp_test_email(recipient_email: str, config: Optional[EmailConfig] = None) -> bool:
    config = config or EmailConfig.from_settings()
    if not (config.smtp_user and config.smtp_pass):
        logger.error("[SMTP] Credentials not configured; test email not sent")
        return False
    config.provider = "smtp"
    return await send_test_email(recipient_email, config=config)
