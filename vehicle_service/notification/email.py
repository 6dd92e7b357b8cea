"""
Outgoing email over SMTP.
"""
import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from vehicle_service.config import get_settings

logger = logging.getLogger(__name__)

AUTO_NOTICE = "\n\nThis is an automated message. Please do not reply to this email."


def send_email(to_email: str, subject: str, body: str, html: Optional[str] = None) -> bool:
    """
    Send a message through the configured SMTP server.

    Returns False without sending when SMTP is not configured; the message is
    logged instead so reset links stay usable in development.
    """
    settings = get_settings()
    if not settings.smtp_host:
        logger.info("SMTP not configured, email to %s not sent: %s\n%s", to_email, subject, body)
        return False

    sender = settings.mail_sender or settings.smtp_username
    msg = MIMEMultipart("alternative")
    msg["From"] = sender
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.attach(MIMEText(body + AUTO_NOTICE, "plain"))
    if html:
        msg.attach(MIMEText(html, "html"))

    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=10) as server:
            if settings.smtp_use_tls:
                server.starttls()
            if settings.smtp_username:
                server.login(settings.smtp_username, settings.smtp_password or "")
            server.sendmail(sender, [to_email], msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email to %s: %s", to_email, e)
        return False

    logger.info("Email sent to %s: %s", to_email, subject)
    return True


def send_password_reset(user: dict, token: str) -> bool:
    """Email a password reset link to ``user``."""
    settings = get_settings()
    reset_link = f"{settings.frontend_url.rstrip('/')}/reset-password/{token}"
    body = f"""Hello {user.get('name', '')},

You have requested to reset your password. Open the link below to choose a new one:

{reset_link}

This link will expire in {settings.reset_token_expire_minutes} minutes.

If you did not request this, please ignore this email."""
    html_body = f"""
    <html>
    <body>
        <h2>Password Reset Request</h2>
        <p>Hello {html.escape(user.get('name', ''))},</p>
        <p>Click the link below to reset your password:</p>
        <p><a href="{reset_link}">Reset Password</a></p>
        <p>This link will expire in {settings.reset_token_expire_minutes} minutes.</p>
    </body>
    </html>
    """
    return send_email(user["email"], "Password Reset Request", body, html_body)
