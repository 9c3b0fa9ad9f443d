# fundiflow/services/email_check.py
"""
Email self-tests used by /api/test-email.

``basic`` sends one test message; ``quick`` renders every template without
sending; ``all`` does both.
"""

import logging
from typing import Dict, Optional

from fundiflow.services.email_service import EMAIL_TEMPLATES, render_template, send_test_email

logger = logging.getLogger(__name__)

SAMPLE_VARIABLES = {
    "assemblerName": "John Doe",
    "recipientName": "Jane Lead",
    "projectName": "Test Circuit Board Assembly",
    "createdDate": "2024-01-01",
    "assignedDate": "2024-01-01",
    "completedDate": "2024-01-01",
    "deadlineDate": "2024-01-04",
    "duration": 4.5,
    "progress": 75,
    "days": 3,
    "notes": "Completed soldering work on main board",
    "actionMessage": "Please ensure your work is completed on time.",
    "actionButtonText": "View Project",
    "announcementTitle": "Safety Drill",
    "announcementPreview": "There will be a safety drill on Friday.",
    "actionUrl": "http://localhost:9002/dashboard/projects/test-project-123",
}


async def test_basic_email(recipient_email: str) -> bool:
    result = await send_test_email(recipient_email)
    logger.info("[EMAIL-TEST] Basic email test %s", "passed" if result else "failed")
    return result


def quick_email_test() -> Dict[str, bool]:
    """Render every template; a template passes when no placeholder is left unfilled."""
    results = {}
    for template_type in EMAIL_TEMPLATES:
        rendered = render_template(template_type, SAMPLE_VARIABLES)
        ok = all("{" not in part for part in (rendered.subject, rendered.html, rendered.text))
        results[template_type] = ok
        logger.info("[EMAIL-TEST] %s: %s", template_type, "OK" if ok else "UNFILLED PLACEHOLDERS")
    return results


async def run_all_email_tests(recipient_email: Optional[str] = None) -> Dict[str, object]:
    results: Dict[str, object] = {"templates": quick_email_test()}
    if recipient_email:
        results["basic"] = await test_basic_email(recipient_email)
    passed = all(results["templates"].values()) and results.get("basic", True)
    logger.info("[EMAIL-TEST] All tests %s", "passed" if passed else "had failures")
    results["passed"] = passed
    return results
