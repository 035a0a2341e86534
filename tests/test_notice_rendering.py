from __future__ import annotations

from adapters.notice_rendering import (
    NoticeContext,
    NoticeMessages,
    build_messages,
    format_plugin_label,
    render_notice_html,
    render_notice_text,
)


def _context(**overrides) -> NoticeContext:
    values = {
        "entity_id": "my-plugin",
        "plugin_name": "My <Plugin>",
        "prefix": "worb",
        "review_url": "https://wordpress.org/support/plugin/my-plugin/reviews/",
        "ajax_action": "worb_my_plugin",
        "nonce": "abc123def0",
    }
    values.update(overrides)
    return NoticeContext(**values)


def test_build_messages_merges_overrides() -> None:
    messages = build_messages({"rate_link_text": "Leave a review", "unknown": "x", "intro": ""})

    assert messages.rate_link_text == "Leave a review"
    assert messages.intro == NoticeMessages().intro
    assert messages.remind_link_text == "Remind me later"


def test_format_plugin_label_falls_back_to_slug() -> None:
    assert format_plugin_label("my-plugin", {"my-plugin": "My Plugin"}) == "My Plugin"
    assert format_plugin_label("other", {}) == "other"


def test_html_contains_ids_links_and_tokens() -> None:
    markup = render_notice_html(_context(), NoticeMessages())

    assert 'id="worb-my-plugin"' in markup
    assert 'id="worb-rate-my-plugin"' in markup
    assert 'id="worb-later-my-plugin"' in markup
    assert 'id="worb-nobug-my-plugin"' in markup
    assert 'href="https://wordpress.org/support/plugin/my-plugin/reviews/"' in markup
    assert 'data-action="worb_my_plugin"' in markup
    assert 'data-security="abc123def0"' in markup
    assert 'data-action-performed="remind-later"' in markup
    assert 'data-action-performed="never-ask"' in markup
    assert "is-dismissible" in markup
    assert 'data-dismiss-action="remind-later"' in markup


def test_html_escapes_text_and_attributes() -> None:
    markup = render_notice_html(
        _context(review_url='https://example.com/?a=1&b="2"'),
        build_messages({"notice_class": 'x" onclick="y'}),
    )

    assert "My &lt;Plugin&gt;" in markup
    assert "&amp;b=&quot;2&quot;" in markup
    assert 'onclick="y' not in markup


def test_text_notice_lists_all_actions() -> None:
    text = render_notice_text(_context(plugin_name="My Plugin"), NoticeMessages())

    assert text.startswith("You’ve been using My Plugin")
    assert "[rate] Rate the plugin: https://wordpress.org/support/plugin/my-plugin/reviews/" in text
    assert "[remind-later] Remind me later" in text
    assert "[never-ask] Don’t ask again" in text
