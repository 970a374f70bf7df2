import json
import re
from typing import Any, Dict, Optional

from notification.models import EmailTemplate, Notification, RecipientProfile, RenderedEmail

DEFAULT_DONOR_NAME = "Donor"
DEFAULT_APP_NAME = "ClearCause"


class NotificationMessageBuilder:
    @staticmethod
    def build_variables(
        notification: Notification,
        recipient: RecipientProfile,
        app_name: str = DEFAULT_APP_NAME
    ) -> Dict[str, Any]:
        """Build substitution variables. Metadata keys win over the defaults."""
        variables: Dict[str, Any] = dict(notification.metadata)
        variables.setdefault('donorName', recipient.full_name or DEFAULT_DONOR_NAME)
        variables.setdefault('appName', app_name)
        return variables

    @staticmethod
    def stringify(value: Any) -> str:
        """String form of a JSON value as it should appear in an email."""
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False)
        return str(value)

    @staticmethod
    def _token_pattern(variables: Dict[str, Any]) -> Optional["re.Pattern[str]"]:
        if not variables:
            return None
        # Longest first so a key never shadows a longer key it prefixes
        tokens = sorted((f"{{{{{key}}}}}" for key in variables), key=len, reverse=True)
        return re.compile("|".join(re.escape(token) for token in tokens))

    @staticmethod
    def substitute(text: str, variables: Dict[str, Any]) -> str:
        """
        Replace every literal {{key}} token in a single pass.

        Replacement values are not re-scanned and unknown tokens are
        left untouched.
        """
        pattern = NotificationMessageBuilder._token_pattern(variables)
        if pattern is None:
            return text

        def _replace(match: "re.Match[str]") -> str:
            key = match.group(0)[2:-2]
            return NotificationMessageBuilder.stringify(variables[key])

        return pattern.sub(_replace, text)

    @staticmethod
    def render(template: EmailTemplate, variables: Dict[str, Any]) -> RenderedEmail:
        substitute = NotificationMessageBuilder.substitute
        return RenderedEmail(
            subject=substitute(template.subject, variables),
            html_body=substitute(template.html_body, variables),
            text_body=substitute(template.text_body, variables),
        )

    @staticmethod
    def build_email(
        template: EmailTemplate,
        notification: Notification,
        recipient: RecipientProfile,
        app_name: str = DEFAULT_APP_NAME
    ) -> RenderedEmail:
        """Render a template for one notification and recipient."""
        variables = NotificationMessageBuilder.build_variables(notification, recipient, app_name)
        return NotificationMessageBuilder.render(template, variables)
