"""Mail service: renders transactional emails and logs them.

There is no delivery backend: "sending" renders the Jinja2 template and
emits a structured log event with the recipient and content. Nothing is
queued or retried.
"""

import uuid
from dataclasses import dataclass
from pathlib import Path

import structlog
from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from sqlalchemy.ext.asyncio import AsyncSession

from pomodoro_api.core.config import settings
from pomodoro_api.services.user_service import UserService

logger = structlog.get_logger()

# Template name -> subject line. Bodies live in pomodoro_api/templates/mail/.
MAIL_SUBJECTS: dict[str, str] = {
    "verification": "Confirm your email",
}

_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "mail"

_environment = Environment(
    loader=FileSystemLoader(_TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
    enable_async=True,
)


@dataclass(frozen=True)
class MailMessage:
    """A rendered email.

    Attributes:
        sender: From address.
        to: Recipient address.
        subject: Subject line.
        html: Rendered HTML body.
    """

    sender: str
    to: str
    subject: str
    html: str


async def render_template(template: str, **context: object) -> str:
    """Render a mail template by name.

    Raises:
        KeyError: Unknown template name.
        jinja2.UndefinedError: A variable the template uses was not passed.
    """
    if template not in MAIL_SUBJECTS:
        msg = f"Unknown mail template: {template}"
        raise KeyError(msg)
    return await _environment.get_template(f"{template}.html").render_async(
        **context
    )


class MailService:
    """Sends templated mail to a user by id.

    Args:
        db: Async database session used to resolve the recipient.
        users: User service for the recipient lookup. Built from ``db``
            when omitted.
    """

    def __init__(self, db: AsyncSession, users: UserService | None = None) -> None:
        self._users = users or UserService(db)

    async def send_mail(
        self,
        user_id: uuid.UUID,
        template: str,
        **context: object,
    ) -> MailMessage:
        """Render ``template`` for the user and log it as sent.

        Raises:
            NotFoundError: The user does not exist.
            KeyError: Unknown template name.
        """
        user = await self._users.get_by_id(user_id)
        html = await render_template(template, email=user.email, **context)
        message = MailMessage(
            sender=settings.mail_from,
            to=user.email,
            subject=MAIL_SUBJECTS[template],
            html=html,
        )
        logger.info(
            "Mail sent",
            template=template,
            sender=message.sender,
            to=message.to,
            subject=message.subject,
            html=message.html,
        )
        return message
