# fundiflow/services/email_service.py
"""
Transactional email for FundiFlow.

Providers:
  - "smtp":    deliver through aiosmtplib using the SMTP_* settings
  - "console": log the message instead of sending it

When the smtp provider is selected but credentials are missing, messages
are logged as in console mode. There is no queueing or retry: a failed
send is logged and reported as False to the caller.
"""

import base64
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Dict, List, Optional

import aiosmtplib
from markupsafe import escape
from sqlalchemy.orm import Session

from fundiflow.core.config import Settings, settings
from fundiflow.models.base import utcnow
from fundiflow.models.user import User
from fundiflow.schemas.email import EmailResult
from fundiflow.services.notification_service import (
    fill_placeholders,
    get_notification_preferences,
)

logger = logging.getLogger(__name__)

replace_template_variables = fill_placeholders


@dataclass
class EmailTemplate:
    subject: str
    html: str
    text: str


@dataclass
class EmailRecipient:
    email: str
    name: str
    user_id: str


@dataclass
class EmailConfig:
    provider: str
    from_email: str
    from_name: str
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_pass: Optional[str] = None
    timeout: float = 30

    @classmethod
    def from_settings(cls, s: Settings = settings) -> "EmailConfig":
        return cls(
            provider=s.email_provider,
            from_email=s.from_email,
            from_name=s.from_name,
            smtp_host=s.smtp_host,
            smtp_port=s.smtp_port,
            smtp_user=s.smtp_user,
            smtp_pass=s.smtp_pass,
        )

    @property
    def smtp_ready(self) -> bool:
        return self.provider == "smtp" and bool(self.smtp_host and self.smtp_user and self.smtp_pass)


def _html_card(color: str, heading: str, body: str, button: str) -> str:
    return f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2 style="color: {color};">{heading}</h2>
        {body}
        <p>
          <a href="{{actionUrl}}" style="background-color: {color}; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; display: inline-block;">
            {button}
          </a>
        </p>
        <p>Best regards,<br>FundiFlow Team</p>
      </div>
    """


EMAIL_TEMPLATES: Dict[str, EmailTemplate] = {
    "PROJECT_CREATED_FOR_ASSEMBLERS": EmailTemplate(
        subject="New Project Available - {projectName}",
        html=_html_card(
            "#2563eb", "New Project Available",
            "<p>Hello {assemblerName},</p>"
            '<p>A new project "<strong>{projectName}</strong>" has been created and is now available for assignment.</p>'
            "<ul><li><strong>Project Name:</strong> {projectName}</li>"
            "<li><strong>Created:</strong> {createdDate}</li>"
            "<li><strong>Status:</strong> Available for Assignment</li></ul>",
            "View Project Details",
        ),
        text="New Project Available - {projectName}\n\n"
             "Hello {assemblerName},\n\n"
             'A new project "{projectName}" has been created and is now available for assignment.\n\n'
             "Project Details:\n- Project Name: {projectName}\n- Created: {createdDate}\n"
             "- Status: Available for Assignment\n\n"
             "View project details: {actionUrl}\n\nBest regards,\nFundiFlow Team\n",
    ),
    "PROJECT_ASSIGNED_TO_ASSEMBLER": EmailTemplate(
        subject="Project Assigned - {projectName}",
        html=_html_card(
            "#16a34a", "Project Assigned to You",
            "<p>Hello {assemblerName},</p>"
            '<p>You have been assigned to work on project "<strong>{projectName}</strong>".</p>'
            "<ul><li><strong>Project:</strong> {projectName}</li>"
            "<li><strong>Assigned Date:</strong> {assignedDate}</li>"
            "<li><strong>Expected Start:</strong> As soon as possible</li></ul>"
            "<p>Please review the project details and start your work session when ready.</p>",
            "Start Work Session",
        ),
        text="Project Assigned - {projectName}\n\n"
             "Hello {assemblerName},\n\n"
             'You have been assigned to work on project "{projectName}".\n\n'
             "Assignment Details:\n- Project: {projectName}\n- Assigned Date: {assignedDate}\n"
             "- Expected Start: As soon as possible\n\n"
             "Please review the project details and start your work session when ready.\n\n"
             "Start work session: {actionUrl}\n\nBest regards,\nFundiFlow Team\n",
    ),
    "WORK_SESSION_COMPLETED": EmailTemplate(
        subject="Work Session Completed - {projectName}",
        html=_html_card(
            "#2563eb", "Work Session Completed",
            "<p>Hello Project Lead,</p>"
            '<p><strong>{assemblerName}</strong> has completed a work session on project "<strong>{projectName}</strong>".</p>'
            "<ul><li><strong>Assembler:</strong> {assemblerName}</li>"
            "<li><strong>Duration:</strong> {duration} hours</li>"
            "<li><strong>Progress:</strong> {progress}%</li>"
            "<li><strong>Completed:</strong> {completedDate}</li></ul>"
            "<p><strong>Notes:</strong> {notes}</p>",
            "Review Work Session",
        ),
        text="Work Session Completed - {projectName}\n\n"
             "Hello Project Lead,\n\n"
             '{assemblerName} has completed a work session on project "{projectName}".\n\n'
             "Session Summary:\n- Assembler: {assemblerName}\n- Duration: {duration} hours\n"
             "- Progress: {progress}%\n- Completed: {completedDate}\n- Notes: {notes}\n\n"
             "Review work session: {actionUrl}\n\nBest regards,\nFundiFlow Team\n",
    ),
    "PROJECT_DEADLINE_APPROACHING": EmailTemplate(
        subject="Deadline Alert - {projectName} ({days} days remaining)",
        html=_html_card(
            "#dc2626", "Project Deadline Approaching",
            "<p>Hello {recipientName},</p>"
            '<p>This is a reminder that project "<strong>{projectName}</strong>" is due in <strong>{days} days</strong>.</p>'
            "<ul><li><strong>Project:</strong> {projectName}</li>"
            "<li><strong>Days Remaining:</strong> {days}</li>"
            "<li><strong>Current Progress:</strong> {progress}%</li>"
            "<li><strong>Deadline:</strong> {deadlineDate}</li></ul>"
            "<p>{actionMessage}</p>",
            "{actionButtonText}",
        ),
        text="Project Deadline Approaching - {projectName}\n\n"
             "Hello {recipientName},\n\n"
             'This is a reminder that project "{projectName}" is due in {days} days.\n\n'
             "Project Status:\n- Project: {projectName}\n- Days Remaining: {days}\n"
             "- Current Progress: {progress}%\n- Deadline: {deadlineDate}\n\n"
             "{actionMessage}\n\n{actionButtonText}: {actionUrl}\n\nBest regards,\nFundiFlow Team\n",
    ),
    "NEW_ANNOUNCEMENT": EmailTemplate(
        subject="New Announcement - {announcementTitle}",
        html=_html_card(
            "#7c3aed", "New Announcement",
            "<p>Hello {recipientName},</p>"
            "<p>A new announcement has been posted: <strong>{announcementTitle}</strong></p>"
            "<blockquote>{announcementPreview}</blockquote>",
            "Read Announcement",
        ),
        text="New Announcement - {announcementTitle}\n\n"
             "Hello {recipientName},\n\n"
             "A new announcement has been posted: {announcementTitle}\n\n"
             "{announcementPreview}\n\n"
             "Read the full announcement: {actionUrl}\n\nBest regards,\nFundiFlow Team\n",
    ),
}


def render_template(template_type: str, variables: Dict[str, object]) -> EmailTemplate:
    """Fill a template; values placed in the HTML part are escaped."""
    template = EMAIL_TEMPLATES[template_type]
    html_variables = {key: escape(value) for key, value in variables.items()}
    return EmailTemplate(
        subject=replace_template_variables(template.subject, variables),
        html=replace_template_variables(template.html, html_variables),
        text=replace_template_variables(template.text, variables),
    )


def project_url(project_id: str) -> str:
    return f"{settings.app_url}/dashboard/projects/{project_id}"


def _today() -> str:
    return utcnow().strftime("%Y-%m-%d")


# ----------------------------------------------------
# Delivery
# ----------------------------------------------------

def build_message(
    config: EmailConfig, to: str, subject: str, html: Optional[str], text: Optional[str]
) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = formataddr((config.from_name, config.from_email))
    msg["To"] = to
    msg["Subject"] = subject
    msg["Message-ID"] = make_msgid(domain=config.from_email.split("@")[-1])
    msg.set_content(text or "")
    if html:
        msg.add_alternative(html, subtype="html")
    return msg


def _log_to_console(to: str, subject: str, html: Optional[str], text: Optional[str]) -> EmailResult:
    logger.info(
        "[EMAIL] (console mode)\nTo: %s\nSubject: %s\n--- TEXT CONTENT ---\n%s",
        to, subject, text or "",
    )
    if settings.debug_email and html:
        logger.info("[EMAIL] --- HTML CONTENT ---\n%s", html)
    return EmailResult(success=True, message_id="console-log", provider="console")


async def deliver_smtp(config: EmailConfig, msg: EmailMessage) -> None:
    """Send one message. Port 465 uses implicit TLS, other ports STARTTLS when offered."""
    smtp = aiosmtplib.SMTP(
        hostname=config.smtp_host,
        port=config.smtp_port,
        timeout=config.timeout,
        use_tls=config.smtp_port == 465,
    )
    await smtp.connect()
    try:
        await smtp.login(config.smtp_user, config.smtp_pass)
        await smtp.send_message(msg)
    finally:
        await smtp.quit()


async def send_email(
    to: str,
    subject: str,
    html: Optional[str] = None,
    text: Optional[str] = None,
    config: Optional[EmailConfig] = None,
) -> EmailResult:
    config = config or EmailConfig.from_settings()

    if not config.smtp_ready:
        return _log_to_console(to, subject, html, text)

    msg = build_message(config, to, subject, html, text)
    try:
        await deliver_smtp(config, msg)
    except (aiosmtplib.SMTPException, OSError) as e:
        logger.error("[EMAIL] Failed to send to %s: %s", to, e)
        return EmailResult(success=False, provider="smtp", error=str(e))

    logger.info("[EMAIL] Sent to %s (%s)", to, msg["Message-ID"])
    return EmailResult(success=True, message_id=msg["Message-ID"], provider="smtp")


# ----------------------------------------------------
# Recipients and preferences
# ----------------------------------------------------

def get_user_email_info(db: Session, user_id: str) -> Optional[EmailRecipient]:
    user = db.get(User, user_id)
    if user is None:
        logger.warning("[EMAIL] User %s not found", user_id)
        return None
    if not user.email:
        logger.warning("[EMAIL] User %s has no email address", user_id)
        return None
    return EmailRecipient(email=user.email, name=user.display_name, user_id=user.id)


def should_send_email(db: Session, user_id: str, event: str) -> bool:
    prefs = get_notification_preferences(db, user_id)
    return prefs.email_notifications and prefs.email_events.get(event, True)


def unsubscribe_url(user_id: str) -> str:
    token = base64.b64encode(user_id.encode()).decode()
    return f"{settings.app_url}/unsubscribe?token={token}"


def _with_footer(rendered: EmailTemplate, user_id: str) -> EmailTemplate:
    prefs_url = f"{settings.app_url}/dashboard/settings/notifications"
    unsub = unsubscribe_url(user_id)
    html = rendered.html + f"""
      <div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #e5e7eb; font-size: 12px; color: #6b7280;">
        <p>You received this email because you're subscribed to FundiFlow notifications.</p>
        <p>
          <a href="{prefs_url}" style="color: #2563eb;">Manage email preferences</a> |
          <a href="{unsub}" style="color: #6b7280;">Unsubscribe</a>
        </p>
      </div>
    """
    text = (
        rendered.text
        + "\n\n---\nYou received this email because you're subscribed to FundiFlow notifications.\n"
        + f"Manage preferences: {prefs_url}\nUnsubscribe: {unsub}"
    )
    return EmailTemplate(subject=rendered.subject, html=html, text=text)


async def send_email_with_preferences(
    db: Session, recipient: EmailRecipient, rendered: EmailTemplate, event: str
) -> bool:
    if not should_send_email(db, recipient.user_id, event):
        logger.info("[EMAIL] Skipped %s - %s disabled in preferences", recipient.email, event)
        return False

    message = _with_footer(rendered, recipient.user_id)
    result = await send_email(recipient.email, message.subject, message.html, message.text)
    return result.success


# ----------------------------------------------------
# Event emails
# ----------------------------------------------------

async def send_project_created_email(
    db: Session, assembler_ids: List[str], project_name: str, project_id: str
) -> int:
    sent = 0
    for assembler_id in assembler_ids:
        recipient = get_user_email_info(db, assembler_id)
        if recipient is None:
            continue
        rendered = render_template("PROJECT_CREATED_FOR_ASSEMBLERS", {
            "assemblerName": recipient.name,
            "projectName": project_name,
            "createdDate": _today(),
            "actionUrl": project_url(project_id),
        })
        if await send_email_with_preferences(db, recipient, rendered, "project_created"):
            sent += 1
    logger.info("[EMAIL] Project created: %d/%d emails sent", sent, len(assembler_ids))
    return sent


async def send_project_assigned_email(
    db: Session, assembler_id: str, assembler_name: str, project_name: str, project_id: str
) -> bool:
    recipient = get_user_email_info(db, assembler_id)
    if recipient is None:
        return False
    rendered = render_template("PROJECT_ASSIGNED_TO_ASSEMBLER", {
        "assemblerName": assembler_name,
        "projectName": project_name,
        "assignedDate": _today(),
        "actionUrl": project_url(project_id),
    })
    return await send_email_with_preferences(db, recipient, rendered, "project_assigned")


async def send_work_session_completed_email(
    db: Session,
    project_lead_id: str,
    assembler_name: str,
    project_name: str,
    project_id: str,
    duration_hours: float,
    progress: float,
    notes: Optional[str] = None,
) -> bool:
    recipient = get_user_email_info(db, project_lead_id)
    if recipient is None:
        return False
    rendered = render_template("WORK_SESSION_COMPLETED", {
        "assemblerName": assembler_name,
        "projectName": project_name,
        "duration": duration_hours,
        "progress": progress,
        "completedDate": _today(),
        "notes": notes or "No additional notes provided.",
        "actionUrl": project_url(project_id),
    })
    return await send_email_with_preferences(db, recipient, rendered, "work_session_completed")


async def send_deadline_approaching_emails(
    db: Session,
    user_ids: List[str],
    project_name: str,
    project_id: str,
    days_until_deadline: int,
    current_progress: float,
    assembler_flags: List[bool],
) -> int:
    deadline_date = (utcnow() + timedelta(days=days_until_deadline)).strftime("%Y-%m-%d")
    sent = 0
    for user_id, is_assembler in zip(user_ids, assembler_flags):
        recipient = get_user_email_info(db, user_id)
        if recipient is None:
            continue
        rendered = render_template("PROJECT_DEADLINE_APPROACHING", {
            "recipientName": recipient.name,
            "projectName": project_name,
            "days": days_until_deadline,
            "progress": current_progress,
            "deadlineDate": deadline_date,
            "actionMessage": "Please ensure your work is completed on time."
            if is_assembler else "Please review the project status and take necessary actions.",
            "actionButtonText": "View Project" if is_assembler else "Manage Project",
            "actionUrl": project_url(project_id),
        })
        if await send_email_with_preferences(db, recipient, rendered, "deadline_approaching"):
            sent += 1
    return sent


async def send_announcement_emails(
    db: Session,
    user_ids: List[str],
    announcement_title: str,
    announcement_content: str,
    announcement_id: str,
) -> int:
    sent = 0
    for user_id in user_ids:
        recipient = get_user_email_info(db, user_id)
        if recipient is None:
            continue
        rendered = render_template("NEW_ANNOUNCEMENT", {
            "recipientName": recipient.name,
            "announcementTitle": announcement_title,
            "announcementPreview": announcement_content[:150],
            "actionUrl": f"{settings.app_url}/dashboard/announcements/{announcement_id}",
        })
        if await send_email_with_preferences(db, recipient, rendered, "announcements"):
            sent += 1
    return sent


async def send_test_email(recipient_email: str, config: Optional[EmailConfig] = None) -> bool:
    sent_at = datetime.utcnow().strftime("%Y-%m-%d %H:%M:%S UTC")
    html = f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2 style="color: #2563eb;">Email Test Successful!</h2>
        <p>Hello Test User,</p>
        <p>This is a test email to verify that your FundiFlow email notifications are working correctly.</p>
        <ul>
          <li><strong>Sent:</strong> {sent_at}</li>
          <li><strong>Status:</strong> Working</li>
        </ul>
        <p>Best regards,<br>FundiFlow Team</p>
      </div>
    """
    text = (
        "FundiFlow Email Test\n\nHello Test User,\n\n"
        "This is a test email to verify that your FundiFlow email notifications are working correctly.\n\n"
        f"- Sent: {sent_at}\n- Status: Working\n\nBest regards,\nFundiFlow Team\n"
    )
    result = await send_email(recipient_email, "FundiFlow Email Test", html, text, config=config)
    logger.info("[EMAIL] Test email to %s: %s", recipient_email, "SUCCESS" if result.success else "FAILED")
    return result.success
