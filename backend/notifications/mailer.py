"""Outbound email over SMTP."""

import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from backend.core import config

logger = logging.getLogger(__name__)


class EmailSender:
    """Async SMTP sender. Raises on delivery failure; callers decide what to do."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str = "",
        password: str = "",
        from_email: str = "",
        from_name: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email
        self.from_name = from_name
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_config(cls) -> "EmailSender":
        return cls(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            username=config.SMTP_USER,
            password=config.SMTP_PASSWORD,
            from_email=config.EMAIL_FROM,
            from_name=config.EMAIL_FROM_NAME,
            use_tls=config.SMTP_USE_TLS,
            timeout=config.SMTP_TIMEOUT_SECONDS,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.from_email)

    def build_message(self, to_email: str, subject: str, html: str, text: str | None = None) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["From"] = f"{self.from_name} <{self.from_email}>" if self.from_name else self.from_email
        message["To"] = to_email
        message["Subject"] = subject

        if text:
            message.attach(MIMEText(text, "plain"))
        message.attach(MIMEText(html, "html"))
        return message

    async def send(self, to_email: str, subject: str, html: str, text: str | None = None) -> None:
        message = self.build_message(to_email, subject, html, text)
        await aiosmtplib.send(
            message,
            hostname=self.host,
            port=self.port,
            username=self.username or None,
            password=self.password or None,
            start_tls=self.use_tls,
            timeout=self.timeout,
        )
        logger.info("[Email/SMTP] Sent '%s' to %s", subject, to_email)
