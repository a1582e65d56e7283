from unittest.mock import MagicMock, patch

import pytest

from smart_tasker import config, mailer

TASK = {
    "id": "t1",
    "title": "Pay <rent>",
    "priority": "High",
    "category": "Home",
    "dueDate": "2024-03-01T00:00:00",
    "recurrence": "Monthly",
}


@pytest.fixture()
def credentials(monkeypatch):
    monkeypatch.setattr(config, "EMAIL_USER", "tasker@example.com")
    monkeypatch.setattr(config, "EMAIL_PASS", "app-password")
    monkeypatch.setattr(config, "EMAIL_TO", "")


def test_render_lists_task_details():
    subject, html = mailer.render_recurring_task_email(TASK)

    assert subject == "Recurring Task Added: Pay <rent>"
    assert "Pay &lt;rent&gt;" in html
    assert "<strong>Due Date:</strong> 3/1/2024" in html
    assert "<strong>Priority:</strong> High" in html
    assert "<strong>Category:</strong> Home" in html
    assert "<strong>Recurrence:</strong> Monthly" in html


def test_send_uses_smtp_once(credentials):
    with patch("smart_tasker.mailer.smtplib.SMTP_SSL") as smtp:
        server = MagicMock()
        smtp.return_value.__enter__.return_value = server

        assert mailer.send_recurring_task_email(TASK) is True

    smtp.assert_called_once_with(config.SMTP_HOST, config.SMTP_PORT, timeout=15)
    server.login.assert_called_once_with("tasker@example.com", "app-password")
    message = server.send_message.call_args.args[0]
    assert message["To"] == "tasker@example.com"
    assert message["From"] == "SmartTasker <tasker@example.com>"


def test_send_skips_without_credentials(monkeypatch):
    monkeypatch.setattr(config, "EMAIL_USER", "")
    with patch("smart_tasker.mailer.smtplib.SMTP_SSL") as smtp:
        assert mailer.send_recurring_task_email(TASK) is False
    smtp.assert_not_called()


def test_send_failure_is_logged_not_raised(credentials, caplog):
    with patch("smart_tasker.mailer.smtplib.SMTP_SSL", side_effect=OSError("network down")) as smtp:
        assert mailer.send_recurring_task_email(TASK) is False

    smtp.assert_called_once()
    assert "Failed to send email" in caplog.text


def test_transport_failure_does_not_change_create_response(client, credentials):
    body = {"title": "Pay rent", "priority": "High", "dueDate": "2024-03-01", "recurrence": "Monthly"}

    with patch("smart_tasker.mailer.smtplib.SMTP_SSL", side_effect=OSError("network down")) as smtp:
        response = client.post("/api/tasks", json=body)

    assert response.status_code == 201
    smtp.assert_called_once()
