import html
import logging
import smtplib
from abc import ABC, abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from functools import lru_cache

from skillshub.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


class MailSender(ABC):
    """Delivers a single email. Implementations never raise on delivery failure."""

    @abstractmethod
    def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        """Send an email. Returns True on success."""


class SmtpMailSender(MailSender):
    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        from_email: str,
        secure: bool = False,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_email = from_email or user
        self.secure = secure
        self.timeout = timeout

    def _connect(self) -> smtplib.SMTP:
        if self.secure:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        server.starttls()
        return server

    def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"Salone SkillsHub <{self.from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        try:
            with self._connect() as server:
                server.login(self.user, self.password)
                server.send_message(msg)
            logger.info(f"Email sent to {to_email}: {subject[:50]}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False


class ConsoleMailSender(MailSender):
    """Used when SMTP credentials are missing. Writes the email to the log."""

    def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        logger.warning("SMTP credentials not configured, logging email instead of sending")
        logger.info("Email to %s: %s\n%s", to_email, subject, text_body)
        return True


@lru_cache
def get_mail_sender() -> MailSender:
    """Process-wide mail sender, built on first use."""
    if not settings.smtp_configured:
        return ConsoleMailSender()
    return SmtpMailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_password,
        from_email=settings.from_email,
        secure=settings.smtp_secure,
        timeout=settings.smtp_timeout_seconds,
    )


def send_otp_email(sender: MailSender, to_email: str, code: str, name: str | None = None) -> bool:
    """Send the email verification code.

    Returns True if email was sent successfully, False otherwise. On failure
    the code is logged so an operator can still complete the verification.
    """
    safe_name = html.escape(name) if name else "there"
    minutes = settings.otp_expire_minutes

    subject = "Verify your Salone SkillsHub account"
    html_body = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
            .code {{
                display: inline-block;
                padding: 12px 24px;
                background-color: #f0fdf4;
                color: #15803d;
                font-size: 28px;
                letter-spacing: 6px;
                font-weight: 700;
                border-radius: 4px;
                margin: 20px 0;
            }}
            .footer {{ color: #666; font-size: 12px; margin-top: 30px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h1>Welcome to Salone SkillsHub!</h1>
            <p>Hi {safe_name},</p>
            <p>Use the code below to verify your email address and finish creating your account.</p>
            <div class="code">{code}</div>
            <p>This code will expire in {minutes} minutes.</p>
            <div class="footer">
                <p>If you didn't create an account with Salone SkillsHub, you can safely ignore this email.</p>
            </div>
        </div>
    </body>
    </html>
    """

    text_body = f"""
    Welcome to Salone SkillsHub!

    Hi {name or 'there'},

    Your verification code is: {code}

    This code will expire in {minutes} minutes.

    If you didn't create an account with Salone SkillsHub, you can safely ignore this email.
    """

    sent = sender.send(to_email, subject, html_body, text_body)
    if not sent:
        logger.warning("Verification email to %s not delivered; code is %s", to_email, code)
    return sent
