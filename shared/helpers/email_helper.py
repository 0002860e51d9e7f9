import logging
import re
from typing import List

from ..utils.email_client import EmailClient
from ..utils.email_templates import TEMPLATES
from ..core.config import settings

logger = logging.getLogger(__name__)


class EmailHelper:
    """Sends templated emails. Never raises; returns whether the mail went out."""

    def __init__(self, mailer: EmailClient | None = None):
        self.mailer = mailer
        if self.mailer is None and settings.SMTP_HOST:
            self.mailer = EmailClient(
                smtp_host=settings.SMTP_HOST,
                smtp_port=settings.SMTP_PORT,
                username=settings.SMTP_USERNAME,
                password=settings.SMTP_PASSWORD,
                use_ssl=settings.SMTP_USE_SSL,
            )

    def send_email(
        self,
        template_code: str,
        recipients: List[str],
        subject: str,
        context: dict
    ) -> bool:
        if not self.mailer:
            logger.warning("SMTP is not configured, skipping '%s' email", template_code)
            return False

        recipients = [r for r in recipients if r]
        if not recipients:
            logger.warning("No recipients for '%s' email", template_code)
            return False

        try:
            html_body = TEMPLATES[template_code].format(**context)
        except KeyError as e:
            logger.error("Cannot render email '%s': missing %s", template_code, e)
            return False

        return self.mailer.send_email(
            sender=settings.EMAIL_SENDER,
            recipients=recipients,
            subject=subject,
            text_body=self._strip_html_tags(html_body),
            html_body=html_body,
        )

    @staticmethod
    def _strip_html_tags(html: str) -> str:
        """Basic HTML to plain text converter."""
        return re.sub("<.*?>", "", html or "")
