"""Email service for account notifications.

Supports SendGrid (default) and Office 365 SMTP. When neither is configured
the message is not sent and the link it carries is logged instead, so local
development works without an email provider.
"""

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from bookclub.config import settings

logger = logging.getLogger(__name__)

BRAND_COLOR = "#cf6f4e"


def _wrap_html(title: str, body: str) -> str:
    return f"""
<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
    <h1 style="color: {BRAND_COLOR};">{title}</h1>
    {body}
    <hr style="border: none; border-top: 1px solid #eee; margin: 24px 0;" />
    <p style="color: #999; font-size: 12px;">{settings.email_from_name}</p>
</div>"""


def _button(link: str, label: str) -> str:
    return (
        f'<a href="{link}" style="display: inline-block; background-color: {BRAND_COLOR}; '
        f'color: white; padding: 12px 24px; text-decoration: none; border-radius: 8px; '
        f'margin: 16px 0;">{label}</a>'
    )


class EmailService:
    """Email service supporting SendGrid and Office 365 SMTP."""

    def __init__(
        self,
        provider: str = "sendgrid",
        from_email: Optional[str] = None,
        from_name: str = "Triple A Book Club",
        sendgrid_api_key: Optional[str] = None,
        smtp_host: str = "smtp.office365.com",
        smtp_port: int = 587,
        smtp_username: Optional[str] = None,
        smtp_password: Optional[str] = None,
    ):
        self.provider = provider.lower()
        self.from_email = from_email
        self.from_name = from_name
        self.sendgrid_api_key = sendgrid_api_key
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username
        self.smtp_password = smtp_password

    @property
    def is_configured(self) -> bool:
        if not self.from_email:
            return False
        if self.provider == "office365":
            return bool(self.smtp_username and self.smtp_password) or bool(self.sendgrid_api_key)
        return bool(self.sendgrid_api_key)

    def _send_with_sendgrid(
        self,
        to_email: str,
        subject: str,
        plain_content: str,
        html_content: str,
    ) -> dict:
        """Send email using SendGrid."""
        if not self.sendgrid_api_key or not self.from_email:
            return {"sent": False, "error": "SendGrid is not configured"}

        from sendgrid import SendGridAPIClient
        from sendgrid.helpers.mail import Mail

        try:
            mail = Mail(
                from_email=(self.from_email, self.from_name),
                to_emails=to_email,
                subject=subject,
                plain_text_content=plain_content,
                html_content=html_content,
            )

            client = SendGridAPIClient(self.sendgrid_api_key)
            response = client.send(mail)
            sent = 200 <= response.status_code < 300
            if sent:
                logger.info(f"Email sent via SendGrid to {to_email}")
            return {"sent": sent, "status_code": response.status_code, "provider": "sendgrid"}
        except Exception as exc:
            logger.error(f"SendGrid email error: {exc}", exc_info=True)
            return {"sent": False, "error": str(exc)}

    def _send_with_office365(
        self,
        to_email: str,
        subject: str,
        plain_content: str,
        html_content: str,
    ) -> dict:
        """Send email using Office 365 SMTP."""
        if not (self.from_email and self.smtp_username and self.smtp_password):
            return {"sent": False, "error": "Office 365 SMTP is not configured"}

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = to_email

        msg.attach(MIMEText(plain_content, "plain"))
        msg.attach(MIMEText(html_content, "html"))

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.sendmail(self.from_email, [to_email], msg.as_string())
            logger.info(f"Email sent via Office 365 to {to_email}")
            return {"sent": True, "provider": "office365"}
        except Exception as exc:
            logger.error(f"Office 365 SMTP email error: {exc}", exc_info=True)
            return {"sent": False, "error": str(exc)}

    def send_email(
        self,
        to_email: str,
        subject: str,
        plain_content: str,
        html_content: str,
    ) -> dict:
        """Send an email using the configured provider."""
        if self.provider == "office365":
            result = self._send_with_office365(to_email, subject, plain_content, html_content)
            if result.get("sent"):
                return result
            # Fall back to SendGrid if configured
            if self.sendgrid_api_key:
                fallback = self._send_with_sendgrid(to_email, subject, plain_content, html_content)
                return {"sent": fallback.get("sent", False), "error": result.get("error")}
            return result

        # Default to SendGrid
        return self._send_with_sendgrid(to_email, subject, plain_content, html_content)

    def _send_or_log_link(self, to_email: str, subject: str, plain: str, html_body: str, link: str, label: str) -> dict:
        if not self.is_configured:
            logger.info(f"Email not configured - {label} for {to_email}: {link}")
            return {"sent": False, "error": "Email is not configured"}
        return self.send_email(to_email, subject, plain, html_body)

    def send_welcome_email(self, to_email: str, full_name: str, password: str, login_url: str) -> dict:
        """Send account details to a user created with a password."""
        subject = f"Welcome to {self.from_name} - Your Account Details"

        plain_content = f"""Hi {full_name},

Your account has been created. Here are your login details:

Email: {to_email}
Password: {password}

Log in here: {login_url}

For security, we recommend changing your password after your first login.

- {self.from_name}"""

        safe_name = html.escape(full_name or "")
        html_content = _wrap_html(f"Welcome to {self.from_name}!", f"""
    <p>Hi {safe_name},</p>
    <p>Your account has been created. Here are your login details:</p>
    <div style="background-color: #f5f5f5; padding: 16px; border-radius: 8px; margin: 16px 0;">
        <p style="margin: 0;"><strong>Email:</strong> {html.escape(to_email)}</p>
        <p style="margin: 8px 0 0 0;"><strong>Password:</strong> {html.escape(password)}</p>
    </div>
    <p>Click the button below to log in:</p>
    {_button(login_url, "Log In to Your Account")}
    <p style="color: #666; font-size: 14px;">For security, we recommend changing your password after your first login.</p>""")

        return self._send_or_log_link(to_email, subject, plain_content, html_content, login_url, "login link")

    def send_invite_email(self, to_email: str, full_name: str, set_password_url: str, expires_days: int = 7) -> dict:
        """Send a set-your-password link to a user created without a password."""
        subject = f"Welcome to {self.from_name} - Set Your Password"

        plain_content = f"""Hi {full_name},

You've been invited to join {self.from_name}. To get started, set your password here:
{set_password_url}

This link will expire in {expires_days} days.

- {self.from_name}"""

        safe_name = html.escape(full_name or "")
        html_content = _wrap_html(f"Welcome to {self.from_name}!", f"""
    <p>Hi {safe_name},</p>
    <p>You've been invited to join {self.from_name}. To get started, please set your password by clicking the button below:</p>
    {_button(set_password_url, "Set Your Password")}
    <p style="color: #666; font-size: 14px;">This link will expire in {expires_days} days.</p>""")

        return self._send_or_log_link(to_email, subject, plain_content, html_content, set_password_url, "invite link")

    def send_password_reset_email(self, to_email: str, full_name: Optional[str], reset_url: str) -> dict:
        """Send a password reset link (valid for one hour)."""
        name = full_name or "there"
        subject = f"Reset Your Password - {self.from_name}"

        plain_content = f"""Hi {name},

We received a request to reset your password for your {self.from_name} account.
Set a new password here:
{reset_url}

This link will expire in 1 hour. If you didn't request this, you can safely ignore this email.

- {self.from_name}"""

        html_content = _wrap_html("Reset Your Password", f"""
    <p>Hi {html.escape(name)},</p>
    <p>We received a request to reset your password for your {self.from_name} account.</p>
    <p>Click the button below to set a new password:</p>
    {_button(reset_url, "Reset Password")}
    <p style="color: #666; font-size: 14px;">This link will expire in 1 hour.</p>
    <p style="color: #666; font-size: 14px;">If you didn't request this, you can safely ignore this email.</p>""")

        return self._send_or_log_link(to_email, subject, plain_content, html_content, reset_url, "password reset link")


# Singleton instance (initialized lazily)
_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    """Get or create the email service singleton."""
    global _email_service

    if _email_service is None:
        _email_service = EmailService(
            provider=settings.email_provider,
            from_email=settings.email_from_email,
            from_name=settings.email_from_name,
            sendgrid_api_key=settings.sendgrid_api_key,
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_username=settings.smtp_username,
            smtp_password=settings.smtp_password,
        )

    return _email_service
