"""
Transactional email through the Resend HTTP API

Registration emails are best-effort: a missing configuration or a failed send
is logged and the registration stands. Winner emails are not: failures raise
NotificationError.
"""
import logging
from datetime import datetime
from html import escape
from typing import List, Optional
from zoneinfo import ZoneInfo

import httpx

from founders_cup.models import MailSettings, Player, TeamRegistration


logger = logging.getLogger(__name__)


class NotificationError(RuntimeError):
    pass


class Mailer:
    """Thin client for POST https://api.resend.com/emails"""

    def __init__(
        self,
        api_key: Optional[str],
        sender: Optional[str],
        admin_email: Optional[str] = None,
        organizer: str = "The Founders Official",
        timezone: str = "Asia/Kolkata",
        api_url: str = "https://api.resend.com/emails",
        timeout: float = 15.0,
    ):
        self.api_key = api_key
        self.sender = sender
        self.admin_email = admin_email
        self.organizer = organizer
        self.timezone = timezone
        self.api_url = api_url
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: MailSettings, organizer: str, timezone: str) -> "Mailer":
        return cls(
            api_key=settings.api_key,
            sender=settings.sender,
            admin_email=settings.admin_email,
            organizer=organizer,
            timezone=timezone,
            api_url=settings.api_url,
            timeout=settings.timeout,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.sender)

    @property
    def from_address(self) -> str:
        return f'"{self.organizer}" <{self.sender}>'

    def local_time(self, value: datetime) -> str:
        return value.astimezone(ZoneInfo(self.timezone)).strftime("%B %d, %Y, %I:%M %p")

    async def send(self, to: str, subject: str, html: str) -> None:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                self.api_url,
                json={"from": self.from_address, "to": to, "subject": subject, "html": html},
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            response.raise_for_status()


def _players_html(players: List[Player]) -> str:
    items = "".join(
        f"<li><b>ID:</b> {escape(p.id)}, <b>Level:</b> {p.level}</li>" for p in players
    )
    return f"<ul>{items}</ul>"


async def send_new_registration_email(mailer: Mailer, team: TeamRegistration, screenshot_url: Optional[str]) -> None:
    """Notify the admin of a verified registration"""
    if not mailer.is_configured or not mailer.admin_email:
        logger.warning("Admin/Resend email not configured. Skipping admin notification.")
        return

    if screenshot_url:
        screenshot_html = f'<p><a href="{escape(screenshot_url)}" target="_blank"><b>View Screenshot</b></a></p>'
    else:
        screenshot_html = "<p><b>Screenshot upload failed. Please verify UTR manually.</b></p>"

    registered_at = mailer.local_time(datetime.fromisoformat(team.registration_time))
    html = f"""
        <h1>New Team Registration!</h1>
        <p>A new team has registered for the tournament and the payment has been successfully verified by the AI.</p>
        <p><strong>AI Verification Result:</strong> Payment details verified successfully by AI.</p>
        {screenshot_html}
        <hr>
        <h2>Team Details:</h2>
        <ul>
            <li><strong>Team Name:</strong> {escape(team.team_name)}</li>
            <li><strong>Contact Email:</strong> {escape(team.contact_email)}</li>
            <li><strong>Contact Phone:</strong> {escape(team.contact_phone)}</li>
            <li><strong>UTR Number:</strong> {escape(team.utr_number)}</li>
            <li><strong>Registration Time:</strong> {registered_at}</li>
        </ul>
        <h3>Players:</h3>
        {_players_html(team.players)}
        <hr>
        <p>This is an automated notification.</p>
    """

    try:
        await mailer.send(mailer.admin_email, f"New Tournament Registration: {team.team_name}", html)
        logger.info(f"📧 Registration email sent for team: {team.team_name}")
    except Exception as e:
        logger.error(f"❌ Error sending new registration email: {type(e).__name__}: {e}")


async def send_confirmation_email_to_user(mailer: Mailer, team: TeamRegistration) -> None:
    """Confirm a successful registration to the team's contact address"""
    if not mailer.is_configured:
        logger.warning("Email API keys not configured. Skipping confirmation email to user.")
        return

    registered_at = mailer.local_time(datetime.fromisoformat(team.registration_time))
    html = f"""
        <h1>Registration Confirmed!</h1>
        <p>Hello {escape(team.team_name)},</p>
        <p>Thank you for registering for the {escape(mailer.organizer)} tournament. Your registration has been received.</p>
        <hr>
        <h2>Your Registration Details:</h2>
        <ul>
            <li><strong>Team Name:</strong> {escape(team.team_name)}</li>
            <li><strong>UTR Number:</strong> {escape(team.utr_number)}</li>
            <li><strong>Registration Time:</strong> {registered_at}</li>
        </ul>
        <h3>Your Players:</h3>
        {_players_html(team.players)}
        <hr>
        <p>Your payment and registration details have been verified. Please join the WhatsApp group for match updates.</p>
        <p>Good luck!</p>
        <p>Best regards,<br>{escape(mailer.organizer)}</p>
    """

    try:
        await mailer.send(team.contact_email, f"Registration Confirmation for the {mailer.organizer} Tournament", html)
        logger.info(f"📧 Confirmation email sent to user for team: {team.team_name}")
    except Exception as e:
        logger.error(f"❌ Error sending confirmation email to user: {type(e).__name__}: {e}")


async def send_winner_email(mailer: Mailer, team: TeamRegistration, rank: str, prize: str) -> None:
    """
    Congratulate a winning team

    Raises:
        NotificationError: If email is not configured or the send fails
    """
    if not mailer.api_key:
        logger.error("Resend API key is missing. Cannot send winner email.")
        raise NotificationError("Resend API key is missing. Cannot send winner email.")
    if not mailer.sender:
        logger.error("Sender email not configured. Cannot send winner email.")
        raise NotificationError("Sender email not configured. Cannot send winner email.")

    if rank == "1st":
        subject = "🏆 Congratulations on Your 1st Place Victory! 🏆"
        message = "Your skill and dedication have paid off. You are the champions of this week's tournament!"
    else:
        subject = "🎉 Congratulations on Securing 2nd Place! 🎉"
        message = "You fought hard and showed incredible spirit. A well-deserved 2nd place finish!"

    html = f"""
        <h1>Congratulations, {escape(team.team_name)}!</h1>
        <p>On behalf of {escape(mailer.organizer)}, congratulations to you and your team for securing <strong>{rank} Place</strong> in the tournament.</p>
        <p>{message}</p>
        <hr>
        <h2>Prize Information:</h2>
        <p><strong>Your Prize:</strong> {escape(prize)}</p>
        <p>Your prize money will be sent to you shortly. We will contact you for the payment details.</p>
        <hr>
        <p>Best regards,<br>{escape(mailer.organizer)}</p>
    """

    try:
        await mailer.send(team.contact_email, subject, html)
    except Exception as e:
        logger.error(f"❌ Error sending winner email to {team.team_name}: {type(e).__name__}: {e}")
        raise NotificationError("Failed to send the congratulatory email.") from e

    logger.info(f"🏆 Winner email sent to {rank} place team: {team.team_name}")
