"""Tests for e-mail alert matching, content and delivery."""

import smtplib
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from logdeck.domain.notification.services.alert_dispatcher import AlertDispatcher, rule_matches
from logdeck.domain.notification.services.builder import build_alert_content
from logdeck.infrastructure.mail.smtp_client import SmtpMailer
from logdeck.shared.config.settings import EmailAlertRule, SmtpConfig
from logdeck.shared.errors.infrastructure.external import SmtpServiceError


def make_rule(**overrides) -> EmailAlertRule:
    data = {
        "level": "error",
        "smtp": {"host": "smtp.example.com", "port": 2525, "auth": {"user": "bot", "pass": "secret"}},
        "from": "logs@example.com",
        "to": "ops@example.com",
    }
    data.update(overrides)
    return EmailAlertRule.model_validate(data)


class TestRuleMatching:
    """Test rule_matches."""

    def test_level_must_match_exactly(self, make_entry) -> None:
        rule = make_rule()

        assert rule_matches(rule, make_entry("error", "boom")) is True
        assert rule_matches(rule, make_entry("info", "boom")) is False

    def test_pattern_is_substring(self, make_entry) -> None:
        rule = make_rule(pattern="database")

        assert rule_matches(rule, make_entry("error", "database down")) is True
        assert rule_matches(rule, make_entry("error", "disk full")) is False


class TestAlertContent:
    """Test build_alert_content."""

    def test_default_subject_and_escaped_html(self, make_entry) -> None:
        content = build_alert_content(make_rule(), make_entry("error", "<script>x</script>"))

        assert content["subject"] == "Log alert: ERROR"
        assert "<script>" not in content["html"]
        assert "&lt;script&gt;" in content["html"]
        assert "<script>x</script>" in content["text"]

    def test_custom_subject(self, make_entry) -> None:
        content = build_alert_content(make_rule(subject="Prod is on fire"), make_entry("error"))

        assert content["subject"] == "Prod is on fire"


class TestAlertDispatcher:
    """Test AlertDispatcher."""

    @pytest.mark.asyncio
    async def test_sends_one_mail_per_matching_rule(self, make_entry) -> None:
        mailer = MagicMock()
        mailer.send = AsyncMock()
        dispatcher = AlertDispatcher([make_rule(), make_rule(pattern="nothing"), make_rule(level="info")], mailer)

        sent = await dispatcher.dispatch(make_entry("error", "boom"))

        assert sent == 1
        kwargs = mailer.send.await_args.kwargs
        assert kwargs["sender"] == "logs@example.com"
        assert kwargs["recipients"] == ["ops@example.com"]

    @pytest.mark.asyncio
    async def test_failure_is_swallowed(self, make_entry) -> None:
        mailer = MagicMock()
        mailer.send = AsyncMock(side_effect=SmtpServiceError(host="smtp.example.com"))
        dispatcher = AlertDispatcher([make_rule()], mailer)

        assert await dispatcher.dispatch(make_entry("error", "boom")) == 0


class TestSmtpMailer:
    """Test SmtpMailer against a patched smtplib."""

    @pytest.mark.asyncio
    async def test_plain_connection_uses_starttls_and_login(self) -> None:
        with patch("logdeck.infrastructure.mail.smtp_client.smtplib.SMTP") as smtp_class:
            server = smtp_class.return_value
            server.__enter__.return_value = server
            server.has_extn.return_value = True

            await SmtpMailer().send(
                smtp=SmtpConfig(host="smtp.example.com", port=2525, auth={"user": "bot", "pass": "secret"}),
                sender="logs@example.com",
                recipients=["ops@example.com"],
                subject="subject",
                text="text",
                html="<p>html</p>"
            )

        smtp_class.assert_called_once_with("smtp.example.com", 2525, timeout=10.0)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("bot", "secret")
        server.send_message.assert_called_once()

    @pytest.mark.asyncio
    async def test_smtp_errors_become_service_errors(self) -> None:
        with patch("logdeck.infrastructure.mail.smtp_client.smtplib.SMTP", side_effect=smtplib.SMTPConnectError(421, "busy")):
            with pytest.raises(SmtpServiceError):
                await SmtpMailer().send(
                    smtp=SmtpConfig(host="smtp.example.com"),
                    sender="logs@example.com",
                    recipients=["ops@example.com"],
                    subject="subject",
                    text="text",
                    html="html"
                )
