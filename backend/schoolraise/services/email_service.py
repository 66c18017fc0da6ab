"""
SMTP email service.
Sends an email copy of a notification when NOTIFICATION_EMAILS_ENABLED is set.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from schoolraise.config import settings

logger = logging.getLogger(__name__)


def send_notification_email(to_email: str, title: str, message: str) -> None:
    """
    Sends an HTML + plain text email carrying a notification.
    Raises on SMTP failure; callers decide whether it is fatal.
    """
    msg = MIMEMultipart("alternative")
    msg["From"] = settings.SMTP_FROM
    msg["To"] = to_email
    msg["Subject"] = f"SchoolRaise: {title}"

    html_content = f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: auto;">
        <h2 style="color: #4f46e5;">{escape(title)}</h2>
        <p>{escape(message)}</p>
        <hr style="border: none; border-top: 1px solid #eee;" />
        <p style="font-size: 12px; color: #888;">
          This message was sent automatically by SchoolRaise. Please do not reply.
        </p>
      </body>
    </html>
    """

    msg.attach(MIMEText(f"{title}\n\n{message}", "plain", "utf-8"))
    msg.attach(MIMEText(html_content, "html", "utf-8"))

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        if settings.SMTP_USE_TLS:
            server.starttls()
        if settings.SMTP_USERNAME:
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.send_message(msg)

    logger.info("Notification email sent to %s: %s", to_email, title)
