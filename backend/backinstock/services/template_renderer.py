"""
Merchant template rendering for back-in-stock emails.

Placeholders are {{name}}: literal, global, case-sensitive. Unknown placeholders
stay in the output verbatim. Substitution is single-pass, so a value that itself
looks like a placeholder is never expanded again.
"""
import html
import re
from dataclasses import dataclass

from backinstock.core import constants
from backinstock.services.types import NotificationSettings, ResolvedRestock

_PLACEHOLDER = re.compile(r"\{\{([^{}]*)\}\}")


def render(template: str, variables: dict[str, str]) -> str:
    """Replace every {{name}} whose name is in variables; leave the rest untouched."""
    if not template:
        return ""

    def _sub(match: re.Match) -> str:
        name = match.group(1)
        if name in variables:
            return variables[name]
        return match.group(0)

    return _PLACEHOLDER.sub(_sub, template)


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    text_body: str
    html_body: str


def build_variables(restock: ResolvedRestock, email: str) -> dict[str, str]:
    return {
        constants.VAR_PRODUCT_TITLE: restock.product_title,
        constants.VAR_PRODUCT_URL: restock.product_url,
        constants.VAR_SHOP_NAME: restock.shop_name or restock.shop,
        constants.VAR_CUSTOMER_EMAIL: email,
    }


def _html_layout(body: str, restock: ResolvedRestock) -> str:
    shop_name = html.escape(restock.shop_name or restock.shop)
    title = html.escape(restock.product_title)
    content = html.escape(body).replace("\n", "<br>")
    image = ""
    if restock.product_image_url:
        image = (
            f'<img src="{html.escape(restock.product_image_url, quote=True)}" alt="{title}" '
            'style="max-width: 200px; height: auto; margin: 20px 0;">'
        )
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<h2 style="color: #333;">Good news from {shop_name}!</h2>'
        f"{image}"
        f'<div style="line-height: 1.6; color: #555;">{content}</div>'
        '<div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #eee; '
        'color: #888; font-size: 12px;">'
        "<p>You received this email because you subscribed to back-in-stock "
        f"notifications for {title}.</p>"
        "</div>"
        "</div>"
    )


def render_email(settings: NotificationSettings, restock: ResolvedRestock, email: str) -> RenderedEmail:
    """Render subject, plain-text body and HTML body for one recipient."""
    variables = build_variables(restock, email)
    subject = render(settings.email_subject, variables)
    text_body = render(settings.email_template, variables)
    return RenderedEmail(
        subject=subject,
        text_body=text_body,
        html_body=_html_layout(text_body, restock),
    )
