# eventhub/core/email.py
"""
Email service using Resend for sending transactional emails.
"""
import logging

import resend
from eventhub.core.config import settings

logger = logging.getLogger(__name__)


def init_resend():
    """Initialize Resend with API key."""
    resend.api_key = settings.RESEND_API_KEY


def send_password_reset_email(to_email: str, recipient_name: str, reset_url: str) -> dict:
    """
    Send the password reset link.

    Args:
        to_email: Recipient email address
        recipient_name: Name of the recipient
        reset_url: Frontend URL carrying the one-time token

    Returns:
        Resend API response, or an empty dict when no API key is configured
    """
    if not settings.RESEND_API_KEY:
        logger.warning(
            f"RESEND_API_KEY not configured, password reset email to {to_email} not sent"
        )
        return {}

    init_resend()

    minutes = settings.RESET_TOKEN_EXPIRE_MINUTES
    html_content = f"""
    <!DOCTYPE html>
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <p>Hi {recipient_name},</p>
        <p>Forgot your password? Use the link below to choose a new one.</p>
        <p><a href="{reset_url}">{reset_url}</a></p>
        <p>If you did not request this, please ignore this email.
           This link is valid for {minutes} minutes.</p>
    </body>
    </html>
    """

    params = {
        "from": settings.EMAIL_FROM,
        "to": [to_email],
        "subject": "Password Reset Token",
        "html": html_content,
    }
    response = resend.Emails.send(params)
    logger.info(f"Password reset email sent to {to_email}")
    return response
