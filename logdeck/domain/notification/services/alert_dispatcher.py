# Path: logdeck/domain/notification/services/alert_dispatcher.py
from typing import List, Optional, Sequence

from logdeck.domain.logs.models.entry import LogEntry
from logdeck.domain.notification.services.builder import build_alert_content
from logdeck.infrastructure.mail.smtp_client import SmtpMailer
from logdeck.shared.config.settings import EmailAlertRule
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService

logger = LoggingService(LogConfig())


def rule_matches(rule: EmailAlertRule, entry: LogEntry) -> bool:
    """Exact level match and, when a pattern is set, substring match on the message."""
    if entry.level != rule.level:
        return False
    return not rule.pattern or rule.pattern in entry.message


class AlertDispatcher:
    """Best-effort e-mail alerts for entries matching configured rules."""

    def __init__(self, rules: Sequence[EmailAlertRule], mailer: Optional[SmtpMailer] = None):
        self.rules: List[EmailAlertRule] = list(rules)
        self.mailer = mailer or SmtpMailer()

    async def dispatch(self, entry: LogEntry) -> int:
        """
        Send one e-mail per matching rule.

        Failures are logged and never retried or raised.

        Returns:
            Number of e-mails sent successfully.
        """
        sent = 0
        for rule in self.rules:
            if not rule_matches(rule, entry):
                continue
            content = build_alert_content(rule, entry)
            try:
                await self.mailer.send(
                    smtp=rule.smtp,
                    sender=rule.sender,
                    recipients=rule.recipients,
                    subject=content["subject"],
                    text=content["text"],
                    html=content["html"]
                )
                sent += 1
            except Exception as e:
                logger.error("Failed to send alert e-mail", context={
                    "level": entry.level,
                    "to": rule.to,
                    "host": rule.smtp.host,
                    "error": str(e)
                })
        return sent
