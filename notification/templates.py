"""
Template resolution with a built-in fallback.

A missing (or inactive) template is not an error: the notification's own
title and message become the email content.
"""

import logging

from notification.models import EmailTemplate, Notification

logger = logging.getLogger(__name__)


def build_fallback_template(notification: Notification) -> EmailTemplate:
    return EmailTemplate(
        type=notification.type,
        subject=notification.title,
        html_body=f"<p>{notification.message}</p>",
        text_body=notification.message,
        is_fallback=True,
    )


class TemplateResolver:
    def __init__(self, repo):
        self.repo = repo

    def resolve(self, notification: Notification) -> EmailTemplate:
        row = self.repo.get_template(notification.type)

        if row is None or row.is_active is False:
            logger.info(f"No email template for type: {notification.type}, using default")
            return build_fallback_template(notification)

        # Blank fields fall back individually
        fallback = build_fallback_template(notification)
        return EmailTemplate(
            type=row.type,
            subject=row.subject or fallback.subject,
            html_body=row.html_body or fallback.html_body,
            text_body=row.text_body or fallback.text_body,
        )
