"""
인증 메일 발송 서비스 (SMTP)

MAIL_HOST가 비어 있으면 메일을 보내지 않고 인증 링크를 로그로 남깁니다.
"""
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from starlette.concurrency import run_in_threadpool

from app.core.config import settings

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify Your Email - Proxima Share"


def build_verification_link(token: str, frontend_url: Optional[str] = None) -> str:
    base = (frontend_url or settings.FRONTEND_URL).rstrip("/")
    return f"{base}/verify-email?token={token}"


def build_verification_email(username: str, verification_link: str, expiry_hours: int) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
    <style>
        body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
        .header {{ background-color: #4CAF50; color: white; padding: 20px; text-align: center; }}
        .content {{ background-color: #f9f9f9; padding: 30px; border-radius: 5px; }}
        .button {{ display: inline-block; padding: 12px 30px; background-color: #4CAF50; color: white;
                  text-decoration: none; border-radius: 5px; margin: 20px 0; }}
        .footer {{ text-align: center; margin-top: 20px; font-size: 12px; color: #666; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>Welcome to Proxima Share!</h1>
        </div>
        <div class="content">
            <h2>Hello {username},</h2>
            <p>Thank you for registering with Proxima Share. To complete your registration and activate
            your account, please verify your email address by clicking the button below:</p>

            <a href="{verification_link}" class="button">Verify Email Address</a>

            <p>Or copy and paste this link into your browser:</p>
            <p style="word-break: break-all; color: #4CAF50;">{verification_link}</p>

            <p><strong>This verification link will expire in {expiry_hours} hours.</strong></p>

            <p>If you didn't create an account with Proxima Share, please ignore this email.</p>
        </div>
        <div class="footer">
            <p>&copy; Proxima Share. All rights reserved.</p>
        </div>
    </div>
</body>
</html>
"""


class EmailService:

    def __init__(self, host: Optional[str] = None, port: Optional[int] = None,
                 username: Optional[str] = None, password: Optional[str] = None,
                 use_tls: Optional[bool] = None):
        self.host = settings.MAIL_HOST if host is None else host
        self.port = port or settings.MAIL_PORT
        self.username = settings.MAIL_USERNAME if username is None else username
        self.password = settings.MAIL_PASSWORD if password is None else password
        self.use_tls = settings.MAIL_USE_TLS if use_tls is None else use_tls

    async def send_verification_email(self, to_email: str, username: str, token: str) -> None:
        link = build_verification_link(token)

        if not self.host:
            logger.warning(f"MAIL_HOST 미설정 - 인증 메일 대신 링크 출력 ({to_email}): {link}")
            return

        message = EmailMessage()
        message["Subject"] = VERIFICATION_SUBJECT
        message["From"] = self.username
        message["To"] = to_email
        message.set_content(f"Verify your email address: {link}")
        message.add_alternative(
            build_verification_email(username, link, settings.EMAIL_TOKEN_EXPIRY_HOURS),
            subtype="html",
        )

        try:
            await run_in_threadpool(self._send, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"인증 메일 발송 실패 ({to_email}): {e}")
            raise RuntimeError("Failed to send verification email") from e

        logger.info(f"인증 메일 발송 완료: {to_email}")

    def _send(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(message)
