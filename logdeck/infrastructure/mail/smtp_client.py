# Path: logdeck/infrastructure/mail/smtp_client.py
import asyncio
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List

from logdeck.shared.config.settings import SmtpConfig
from logdeck.shared.errors.infrastructure.external import SmtpServiceError
from logdeck.shared.logging.config import LogConfig
from logdeck.shared.logging.service import LoggingService

logger = LoggingService(LogConfig())


def build_message(sender: str, recipients: List[str], subject: str, text: str, html: str) -> MIMEMultipart:
    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = sender
    message["To"] = ", ".join(recipients)
    message.attach(MIMEText(text, "plain", "utf-8"))
    message.attach(MIMEText(html, "html", "utf-8"))
    return message


class SmtpMailer:
    """Sends multipart (text + HTML) e-mails through a configured SMTP server."""

    def _deliver(self, smtp: SmtpConfig, message: MIMEMultipart, recipients: List[str]) -> None:
        if smtp.secure:
            server = smtplib.SMTP_SSL(
                smtp.host, smtp.effective_port, timeout=smtp.timeout,
                context=ssl.create_default_context()
            )
        else:
            server = smtplib.SMTP(smtp.host, smtp.effective_port, timeout=smtp.timeout)
        with server:
            if not smtp.secure:
                server.ehlo()
                if server.has_extn("starttls"):
                    server.starttls(context=ssl.create_default_context())
                    server.ehlo()
            if smtp.auth is not None and smtp.auth.user:
                server.login(smtp.auth.user, smtp.auth.password or "")
            server.send_message(message, to_addrs=recipients)

    async def send(
            self,
            smtp: SmtpConfig,
            sender: str,
            recipients: List[str],
            subject: str,
            text: str,
            html: str
    ) -> None:
        """
        Send one e-mail; SMTP work runs in a worker thread.

        Raises:
            SmtpServiceError: If connecting, authenticating or sending fails.
        """
        message = build_message(sender, recipients, subject, text, html)
        try:
            await asyncio.to_thread(self._deliver, smtp, message, recipients)
        except (smtplib.SMTPException, OSError) as e:
            raise SmtpServiceError(host=smtp.host, details={"host": smtp.host, "error": str(e)}) from e
        logger.info("Alert e-mail sent", context={"host": smtp.host, "recipients": recipients, "subject": subject})
