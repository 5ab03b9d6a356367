"""
Email bodies for the onboarding workflow.
"""

from html import escape
from urllib.parse import urlencode

from onboarding.config import Settings
from onboarding.kernel.notifications.mailer import Notification

_LAYOUT = """
<div>
	Hi, {given_name}!<br /><br />
	{body}<br /><br />
	Regards,<br />
	{product} Operation Team
</div>
"""


def build_link(settings: Settings, path: str, email_address: str, token: str) -> str:
    """Absolute link carrying the email address and token as query parameters."""
    query = urlencode({"email_address": email_address, "token": token})
    return f"{settings.base_url}{path}?{query}"


def _render(settings: Settings, given_name: str, body: str) -> str:
    return _LAYOUT.format(
        given_name=escape(given_name),
        body=body,
        product=escape(settings.product_name),
    )


def _anchor(link: str) -> str:
    link = escape(link)
    return f'<a href="{link}">{link}</a>'


def activation_email(settings: Settings, given_name: str, email_address: str, token: str) -> Notification:
    link = build_link(settings, "activate", email_address, token)
    body = (
        f"Welcome to {escape(settings.product_name)}! "
        f"Please activate your account by clicking on this link: {_anchor(link)}"
    )
    return Notification(
        to=email_address,
        sender=settings.mail_from,
        subject=f"Activate your {settings.product_name} account!",
        html=_render(settings, given_name, body),
    )


def welcome_email(settings: Settings, given_name: str, email_address: str) -> Notification:
    body = (
        f"Welcome to {escape(settings.product_name)}! Your account has been successfully "
        "activated. You now may sign in to enjoy our services."
    )
    return Notification(
        to=email_address,
        sender=settings.mail_from,
        subject=f"Welcome to {settings.product_name}!",
        html=_render(settings, given_name, body),
    )


def recovery_email(settings: Settings, given_name: str, email_address: str, token: str) -> Notification:
    link = build_link(settings, "recover", email_address, token)
    body = (
        f"To recover your {escape(settings.product_name)} account, "
        f"please click this link: {_anchor(link)}"
    )
    return Notification(
        to=email_address,
        sender=settings.mail_from,
        subject=f"Recover your {settings.product_name} account",
        html=_render(settings, given_name, body),
    )
