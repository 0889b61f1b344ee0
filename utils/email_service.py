"""
Transactional email — verification, password reset, welcome.

Messages are built with ``email.mime`` and delivered over SMTP.  The
blocking ``smtplib`` calls are offloaded to a thread via
``asyncio.to_thread()`` so they never block the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from urllib.parse import urlencode

from config.settings import Settings, config
from core.errors import EmailDeliveryError

logger = logging.getLogger(__name__)

_BUTTON_STYLE = (
    "background-color: #10b981; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block;"
)


def _layout(heading: str, body: str) -> str:
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<h2 style="color: #10b981;">{heading}</h2>'
        f"{body}"
        "</div>"
    )


def _button(url: str, label: str) -> str:
    return (
        '<div style="text-align: center; margin: 30px 0;">'
        f'<a href="{escape(url)}" style="{_BUTTON_STYLE}">{label}</a>'
        "</div>"
    )


def _fallback_link(url: str) -> str:
    return (
        "<p>If the button doesn't work, copy and paste this link into your browser:</p>"
        f'<p style="word-break: break-all; color: #666;">{escape(url)}</p>'
    )


class EmailService:
    """Sends the account lifecycle emails through the configured SMTP relay."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or config

    # ── Link helpers ───────────────────────────────────────────────────

    def _frontend_link(self, path: str, **params: str) -> str:
        base = self.settings.frontend_url.rstrip("/")
        url = f"{base}/{path.lstrip('/')}"
        if params:
            url += "?" + urlencode(params)
        return url

    # ── Transport ──────────────────────────────────────────────────────

    def _build_message(self, to: str, subject: str, html: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = self.settings.email_sender()
        msg["To"] = to
        msg["Subject"] = subject
        msg.attach(MIMEText(html, "html", "utf-8"))
        return msg

    def _deliver(self, msg: MIMEMultipart) -> None:
        s = self.settings
        with smtplib.SMTP(s.email_host, s.email_port, timeout=30) as smtp:
            if s.email_use_tls:
                smtp.starttls()
            if s.email_user:
                smtp.login(s.email_user, s.email_pass)
            smtp.send_message(msg)

    async def send(self, to: str, subject: str, html: str) -> None:
        """Deliver one HTML message.  Raises ``EmailDeliveryError``."""
        msg = self._build_message(to, subject, html)
        try:
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise EmailDeliveryError(details=str(exc)) from exc

    # ── Account emails ─────────────────────────────────────────────────

    async def send_verification_email(self, email: str, token: str) -> None:
        url = self._frontend_link("verify-email", token=token)
        html = _layout(
            f"Welcome to {escape(self.settings.email_from_name)}!",
            "<p>Thank you for signing up. Please verify your email address "
            "to complete your registration.</p>"
            + _button(url, "Verify Email Address")
            + _fallback_link(url),
        )
        try:
            await self.send(email, f"Verify Your Email - {self.settings.email_from_name}", html)
        except EmailDeliveryError as exc:
            logger.error("Error sending verification email to %s: %s", email, exc.details)
            raise EmailDeliveryError("Failed to send verification email", exc.details) from exc
        logger.info("Verification email sent to %s", email)

    async def send_password_reset_email(self, email: str, token: str) -> None:
        url = self._frontend_link("reset-password", token=token)
        minutes = self.settings.password_reset_expiry_seconds // 60
        html = _layout(
            "Password Reset Request",
            "<p>You requested to reset your password. Click the button below to reset it.</p>"
            + _button(url, "Reset Password")
            + _fallback_link(url)
            + f'<p style="color: #666; font-size: 14px;">This link will expire in {minutes} minutes.</p>'
            '<p style="color: #666; font-size: 14px;">If you didn\'t request this, '
            "please ignore this email.</p>",
        )
        try:
            await self.send(email, f"Reset Your Password - {self.settings.email_from_name}", html)
        except EmailDeliveryError as exc:
            logger.error("Error sending password reset email to %s: %s", email, exc.details)
            raise EmailDeliveryError("Failed to send password reset email", exc.details) from exc
        logger.info("Password reset email sent to %s", email)

    async def send_welcome_email(self, email: str, name: str) -> None:
        """Best effort: failures are logged, never raised."""
        app_name = escape(self.settings.email_from_name)
        html = _layout(
            f"Welcome to {app_name}, {escape(name)}!",
            "<p>Your email has been verified and your account is now active.</p>"
            "<p>You can now start creating and organizing your notes with the power of AI.</p>"
            + _button(self._frontend_link("notes"), "Start Taking Notes")
            + '<p style="color: #666; font-size: 14px;">Happy note-taking!</p>',
        )
        try:
            await self.send(email, f"Welcome to {self.settings.email_from_name}!", html)
        except EmailDeliveryError as exc:
            logger.warning("Welcome email to %s failed: %s", email, exc.details)
            return
        logger.info("Welcome email sent to %s", email)
