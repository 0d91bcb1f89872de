# Path: logdeck/domain/notification/services/builder.py
import html
from typing import Dict

from logdeck.domain.logs.models.entry import LogEntry
from logdeck.shared.config.settings import EmailAlertRule

DEFAULT_SUBJECT = "Log alert: {level}"


def build_alert_content(rule: EmailAlertRule, entry: LogEntry) -> Dict[str, str]:
    """Build subject, plain-text and HTML bodies for an alert e-mail."""
    subject = rule.subject or DEFAULT_SUBJECT.format(level=entry.level.upper())
    text = (
        f"Log alert ({entry.level.upper()})\n"
        f"Timestamp: {entry.timestamp}\n"
        f"Message: {entry.message}\n"
    )
    body = (
        f"<h2>Log alert ({html.escape(entry.level.upper())})</h2>"
        f"<p><strong>Timestamp:</strong> {html.escape(entry.timestamp)}</p>"
        f"<p><strong>Message:</strong></p>"
        f"<pre>{html.escape(entry.message)}</pre>"
    )
    return {"subject": subject, "text": text, "html": body}
