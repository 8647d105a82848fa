"""Notification templates for account review decisions."""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Any

ACCEPTED_SUBJECT = "Felicitaciones su cuenta fue aceptada"
REJECTED_SUBJECT = "Disculpe pero hemos bloqueado su cuenta"
SIGN_OFF = "Saludos La Comanda"


@dataclass
class RenderedTemplate:
    subject: str
    text_body: str
    html_body: str


def _display_name(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def render_account_decision(recipient_name: Any, *, accepted: bool) -> RenderedTemplate:
    """Render the acceptance or rejection notice sent after an account review."""

    name = _display_name(recipient_name)
    greeting = "Felicitaciones" if accepted else "Disculpe"
    outcome = "aceptada" if accepted else "rechazada"
    subject = ACCEPTED_SUBJECT if accepted else REJECTED_SUBJECT

    headline = f"{greeting} {name}".rstrip()
    text_body = f"{headline}\n\nSu cuenta fue {outcome}\n\n{SIGN_OFF}"
    html_body = f"""<html>
  <body>
    <h1>{html.escape(headline)}</h1>
    <p>Su cuenta fue {outcome}</p>
    <p>{SIGN_OFF}</p>
  </body>
</html>"""

    return RenderedTemplate(subject=subject, text_body=text_body, html_body=html_body)


__all__ = [
    "ACCEPTED_SUBJECT",
    "REJECTED_SUBJECT",
    "RenderedTemplate",
    "render_account_decision",
]
