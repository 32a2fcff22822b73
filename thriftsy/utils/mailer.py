import logging
import smtplib
from email.message import EmailMessage

from flask import current_app

logger = logging.getLogger(__name__)


def send_mail(to: str, subject: str, text: str, from_addr: str = None) -> bool:
    """Send a plain-text email.

    Without SMTP_HOST configured the message is only logged.
    """
    config = current_app.config
    msg = EmailMessage()
    msg["From"] = from_addr or config.get("SMTP_FROM")
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content(text)

    host = config.get("SMTP_HOST")
    if not host:
        logger.info(f"Mail (not sent, no SMTP_HOST): to={to} subject={subject!r}")
        return False

    port = int(config.get("SMTP_PORT") or 587)
    user = config.get("SMTP_USER")
    if port == 465:
        server = smtplib.SMTP_SSL(host, port, timeout=10)
    else:
        server = smtplib.SMTP(host, port, timeout=10)
    with server:
        if port != 465:
            server.starttls()
        if user:
            server.login(user, config.get("SMTP_PASS") or "")
        server.send_message(msg)
    logger.info(f"Mail sent: to={to} subject={subject!r}")
    return True
