"""Review notice rendering helpers.

Keeping rendering here prevents drift between the HTML banner and the
terminal output, and keeps the core free of any markup.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

from core.models import ReviewAction


@dataclass(frozen=True)
class NoticeMessages:
    """User-facing texts of the review notice.

    ``intro`` may contain ``{plugin_name}``.
    """

    intro: str = "You’ve been using {plugin_name} for a while now. We’d love your feedback!"
    rate_link_text: str = "Rate the plugin"
    remind_link_text: str = "Remind me later"
    nobug_link_text: str = "Don’t ask again"
    notice_class: str = "notice-info"


def build_messages(overrides: Optional[Mapping[str, Any]]) -> NoticeMessages:
    """Merge configured texts over the defaults, ignoring unknown or empty keys."""

    known = {field.name for field in fields(NoticeMessages)}
    values = {
        key: str(value)
        for key, value in (overrides or {}).items()
        if key in known and value not in (None, "")
    }
    return replace(NoticeMessages(), **values)


def format_plugin_label(entity_id: str, plugin_names: Mapping[str, str]) -> str:
    """Return the display name for an entity, falling back to its id."""

    return plugin_names.get(entity_id) or entity_id


@dataclass(frozen=True)
class NoticeContext:
    """Everything needed to render one due notice."""

    entity_id: str
    plugin_name: str
    prefix: str
    review_url: str
    ajax_action: str
    nonce: str


def render_notice_html(context: NoticeContext, messages: NoticeMessages) -> str:
    """Create the dismissible banner markup.

    The action links carry their wire tokens in data attributes; the host
    page is responsible for posting them with the embedded nonce. Closing the
    banner posts ``data-dismiss-action``, which snoozes like "remind later".
    """

    def attr(value: str) -> str:
        return html.escape(value, quote=True)

    prefix = attr(context.prefix)
    slug = attr(context.entity_id)
    intro = html.escape(messages.intro.replace("{plugin_name}", context.plugin_name))

    lines = [
        f'<div class="notice {attr(messages.notice_class)} is-dismissible" id="{prefix}-{slug}"'
        f' data-action="{attr(context.ajax_action)}" data-security="{attr(context.nonce)}"'
        f' data-dismiss-action="{ReviewAction.REMIND_LATER.value}">',
        f"<p>{intro}</p>",
        '<p class="actions">',
        f'<a id="{prefix}-rate-{slug}" href="{attr(context.review_url)}" target="_blank"'
        f' class="{prefix}-rate {prefix}-action button button-primary"'
        f' data-action-performed="{ReviewAction.RATE_NOW.value}">'
        f"{html.escape(messages.rate_link_text)}</a>",
        f'<a id="{prefix}-later-{slug}" href="#" class="{prefix}-action {prefix}-later"'
        f' data-action-performed="{ReviewAction.REMIND_LATER.value}">'
        f"{html.escape(messages.remind_link_text)}</a>",
        f'<a id="{prefix}-nobug-{slug}" href="#" class="{prefix}-action {prefix}-nobug"'
        f' data-action-performed="{ReviewAction.NEVER_ASK.value}">'
        f"{html.escape(messages.nobug_link_text)}</a>",
        "</p>",
        "</div>",
    ]
    return "\n".join(lines)


def render_notice_text(context: NoticeContext, messages: NoticeMessages) -> str:
    """Create the plain-text notice used by the terminal."""

    intro = messages.intro.replace("{plugin_name}", context.plugin_name)
    lines = [
        intro,
        "",
        f"  [{ReviewAction.RATE_NOW.value}] {messages.rate_link_text}: {context.review_url}",
        f"  [{ReviewAction.REMIND_LATER.value}] {messages.remind_link_text}",
        f"  [{ReviewAction.NEVER_ASK.value}] {messages.nobug_link_text}",
    ]
    return "\n".join(lines)
