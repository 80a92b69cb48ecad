# storefront/core/email_client.py
"""
Outgoing mail (back-in-stock notifications).

SMTP settings come from Settings (.env), e.g. for Gmail with an app password:

    SMTP_HOST=smtp.gmail.com
    SMTP_PORT=465
    SMTP_USERNAME=studio@example.com
    SMTP_PASSWORD=<app password>
    SMTP_FROM_NAME=Lade Studio
    SMTP_USE_SSL=true
    SMTP_USE_TLS=false
"""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from storefront.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

SMTP_TIMEOUT = 30


def _connect() -> smtplib.SMTP:
    """
    Open an authenticated SMTP connection.

    SMTP_USE_SSL wins over SMTP_USE_TLS (implicit TLS, port 465);
    otherwise a plain connection is upgraded with STARTTLS when
    SMTP_USE_TLS is set (port 587).
    """
    if settings.SMTP_USE_SSL:
        server: smtplib.SMTP = smtplib.SMTP_SSL(
            settings.SMTP_HOST, settings.SMTP_PORT, timeout=SMTP_TIMEOUT
        )
    else:
        server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=SMTP_TIMEOUT)

    try:
        if settings.SMTP_USE_TLS and not settings.SMTP_USE_SSL:
            server.starttls()
        server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)  # type: ignore[arg-type]
    except (smtplib.SMTPException, OSError):
        server.close()
        raise
    return server


def build_message(
    to_email: str,
    subject: str,
    text_body: str,
    html_body: str | None = None,
) -> EmailMessage:
    msg = EmailMessage()
    sender = settings.SMTP_FROM_EMAIL or settings.SMTP_USERNAME or ""
    msg["From"] = formataddr((settings.SMTP_FROM_NAME, sender))
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(text_body)
    if html_body:
        msg.add_alternative(html_body, subtype="html")
    return msg


def send_email(
    to_email: str,
    subject: str,
    text_body: str,
    html_body: str | None = None,
) -> None:
    """
    Send one message to one recipient.

    Raises:
        RuntimeError: SMTP_HOST / SMTP_USERNAME / SMTP_PASSWORD missing.
        smtplib.SMTPException, OSError: connection or delivery failed.
    """
    if not settings.smtp_configured:
        raise RuntimeError(
            "SMTP is not configured. Set SMTP_HOST, SMTP_USERNAME and SMTP_PASSWORD."
        )

    msg = build_message(to_email, subject, text_body, html_body)
    with _connect() as server:
        server.send_message(msg)
    logger.debug("Mail %r sent to %s", subject, to_email)
