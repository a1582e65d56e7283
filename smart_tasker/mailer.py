import logging
import smtplib
from datetime import datetime
from email.mime.text import MIMEText
from email.utils import formataddr
from html import escape

from . import config

logger = logging.getLogger(__name__)


def _format_calendar_date(value) -> str:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return f"{value.month}/{value.day}/{value.year}"


def render_recurring_task_email(task: dict) -> tuple:
    """Return ``(subject, html)`` for a newly created recurring task."""
    subject = f"Recurring Task Added: {task['title']}"
    html_body = f"""
      <h3>New Recurring Task Created</h3>
      <p><strong>Title:</strong> {escape(str(task['title']))}</p>
      <p><strong>Due Date:</strong> {_format_calendar_date(task['dueDate'])}</p>
      <p><strong>Priority:</strong> {escape(str(task['priority']))}</p>
      <p><strong>Category:</strong> {escape(str(task['category']))}</p>
      <p><strong>Recurrence:</strong> {escape(str(task['recurrence']))}</p>
    """
    return subject, html_body


def send_recurring_task_email(task: dict) -> bool:
    """Make one attempt to send the recurring-task email.

    Never raises: any failure is logged and ``False`` is returned.
    """
    if not config.EMAIL_USER or not config.EMAIL_PASS:
        logger.warning("EMAIL_USER or EMAIL_PASS is not set; skipping email for task %s", task.get("id"))
        return False

    try:
        subject, html_body = render_recurring_task_email(task)
        msg = MIMEText(html_body, "html", "utf-8")
        msg["Subject"] = subject
        msg["From"] = formataddr(("SmartTasker", config.EMAIL_USER))
        msg["To"] = config.EMAIL_TO or config.EMAIL_USER

        with smtplib.SMTP_SSL(config.SMTP_HOST, config.SMTP_PORT, timeout=15) as server:
            server.login(config.EMAIL_USER, config.EMAIL_PASS)
            server.send_message(msg)
    except Exception:
        logger.exception("Failed to send email for recurring task %s", task.get("id"))
        return False

    logger.info("Email sent for recurring task: %s", task["title"])
    return True
