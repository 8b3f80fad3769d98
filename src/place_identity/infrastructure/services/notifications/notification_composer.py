"""Notification composer: renders outbound messages with Jinja2 templates.

Confirmation and email-change messages carry a link of the form::

    {EMAIL_CONFIRMATION_URL_BASE}?userId=<id>&code=<token>[&changedEmail=<address>]

Password-reset messages carry the bare code, which the user pastes into the
reset form together with their email and new password.
"""

from pathlib import Path
from typing import Dict, Optional, Tuple
from urllib.parse import urlencode

import structlog
from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound

from place_identity.core.exceptions import TemplateRenderError
from place_identity.domain.value_objects.notification import (
    Notification,
    NotificationKind,
    OutboundMessage,
)

logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parents[3] / "templates" / "email"

TEMPLATES: Dict[NotificationKind, Tuple[str, str]] = {
    NotificationKind.EMAIL_CONFIRMATION: ("confirm_email.html", "Confirm your email"),
    NotificationKind.EMAIL_CHANGE: ("change_email.html", "Confirm your new email address"),
    NotificationKind.PASSWORD_RESET: ("password_reset.html", "Reset your password"),
}


class NotificationComposer:
    """Turns an ``OutboundMessage`` into a rendered ``Notification``.

    Args:
        confirmation_url_base: Target of confirmation and email-change links.
        project_name: Shown in message bodies.
        templates_dir: Template directory; the bundled templates when empty.
    """

    def __init__(
        self,
        confirmation_url_base: str,
        project_name: str = "Place Identity",
        templates_dir: Optional[str] = None,
    ):
        self._confirmation_url_base = confirmation_url_base
        self._project_name = project_name
        self._jinja_env = Environment(
            loader=FileSystemLoader(str(templates_dir or DEFAULT_TEMPLATES_DIR)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def confirmation_link(
        self, account_id: str, token: str, changed_email: Optional[str] = None
    ) -> str:
        params = {"userId": account_id, "code": token}
        if changed_email:
            params["changedEmail"] = changed_email
        return f"{self._confirmation_url_base}?{urlencode(params)}"

    def render(self, message: OutboundMessage) -> Notification:
        """Render ``message``.

        Raises:
            TemplateRenderError: If the template is missing or fails to render.
        """
        template_name, subject = TEMPLATES[message.kind]
        context = dict(message.context)
        if message.kind is NotificationKind.EMAIL_CONFIRMATION:
            context["link"] = self.confirmation_link(context["account_id"], context["token"])
        elif message.kind is NotificationKind.EMAIL_CHANGE:
            context["link"] = self.confirmation_link(
                context["account_id"], context["token"], context["new_email"]
            )

        try:
            body = self._jinja_env.get_template(template_name).render(
                project_name=self._project_name, **context
            )
        except TemplateNotFound as e:
            logger.error("Template not found", template=template_name, error=str(e))
            raise TemplateRenderError(f"Template file not found: {template_name}") from e
        except TemplateError as e:
            logger.error("Template rendering failed", template=template_name, error=str(e))
            raise TemplateRenderError(f"Template rendering failed: {e}") from e

        return Notification(
            kind=message.kind,
            destination=message.destination,
            subject=subject,
            body=body,
            context=context,
        )
