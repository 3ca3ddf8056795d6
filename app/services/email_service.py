import logging

from fastapi import Depends
from fastapi_mail import FastMail, MessageSchema, ConnectionConfig

from config import Settings, get_settings

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self, settings: Settings):
        self.enabled = settings.email_enabled
        self.config = ConnectionConfig(
            MAIL_USERNAME="",
            MAIL_PASSWORD="",
            MAIL_FROM=settings.email_from,
            MAIL_PORT=settings.email_port,
            MAIL_SERVER=settings.email_server,
            MAIL_FROM_NAME=settings.email_from_name,
            MAIL_STARTTLS=False,
            MAIL_SSL_TLS=False,
            USE_CREDENTIALS=False,
            VALIDATE_CERTS=False,
            SUPPRESS_SEND=0 if settings.email_enabled else 1,
        )
        self.mailer = FastMail(self.config)

    async def send_email(self, to_email: str, subject: str, body: str):
        """Send a plain-text email"""
        message = MessageSchema(
            subject=subject,
            recipients=[to_email],
            body=body,
            subtype="plain",
        )
        await self.mailer.send_message(message)
        logger.info("Sent '%s' email to %s", subject, to_email)

    async def send_new_password_email(self, email: str, new_password: str):
        await self.send_email(
            email,
            "Your New Password - Action Required",
            f"""Hello,

Your password has been reset.

Your new password: {new_password}

For security reasons, please change this temporary password after logging in.

If you didn't request this password reset, please contact our support team immediately.

Best regards,
The Support Team""",
        )


def get_email_service(settings: Settings = Depends(get_settings)) -> EmailService:
    return EmailService(settings)
