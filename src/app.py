"""Command-line entry point for reviewbug."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

import settings
from adapters.action_requests import ActionRequestHandler
from adapters.nonce import NonceSigner
from adapters.notice_rendering import (
    NoticeContext,
    build_messages,
    format_plugin_label,
    render_notice_html,
    render_notice_text,
)
from adapters.sqlite_storage import SQLiteOptionStore
from adapters.system import StaticCapabilities, SystemClock
from core.config import build_notifier_config
from core.errors import ReviewBugError, StorageUnavailable
from core.models import NoticeDecision
from core.notifier import SnoozeNotifier
from core.option_keys import resolve_entity_id

NAME = "REVIEWBUG"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/reviewbug.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _build_notifier() -> SnoozeNotifier:
    storage = SQLiteOptionStore(settings.DB_PATH)
    storage.init_db()
    return SnoozeNotifier(
        config=build_notifier_config(settings.NOTIFIER),
        store=storage,
        capabilities=StaticCapabilities(settings.CAPABILITIES),
        clock=SystemClock(),
    )


def _build_handler(notifier: SnoozeNotifier) -> ActionRequestHandler:
    secret = os.getenv("REVIEWBUG_SECRET")
    # Fail fast on a missing signing secret.
    if not secret:
        raise RuntimeError("REVIEWBUG_SECRET is required to sign review actions")
    signer = NonceSigner(secret, lifetime_seconds=settings.NONCE_LIFETIME_SECONDS)
    return ActionRequestHandler(notifier, signer)


def _notice_context(
    notifier: SnoozeNotifier, handler: Optional[ActionRequestHandler], entity_id: str
) -> NoticeContext:
    return NoticeContext(
        entity_id=entity_id,
        plugin_name=format_plugin_label(entity_id, settings.PLUGIN_NAMES),
        prefix=notifier.config.prefix,
        review_url=notifier.review_url(entity_id),
        ajax_action=handler.ajax_action(entity_id) if handler else "",
        nonce=handler.create_nonce(entity_id) if handler else "",
    )


def _entities(entity_id: Optional[str]) -> list[str]:
    if entity_id:
        return [entity_id]
    if not settings.PLUGINS:
        raise RuntimeError("No entity given and no enabled plugins in config.json")
    return list(settings.PLUGINS)


def _activate(args: argparse.Namespace) -> None:
    notifier = _build_notifier()
    notifier.on_activate(args.entity)
    LOGGER.info("Activated %s", args.entity)


def _check(args: argparse.Namespace) -> None:
    notifier = _build_notifier()
    console = Console()
    messages = build_messages(settings.MESSAGES)
    handler = _build_handler(notifier) if args.html else None

    for entity_id in _entities(args.entity):
        decision = notifier.evaluate(entity_id)
        if decision is not NoticeDecision.DUE:
            console.print(f"{entity_id}: {decision.value}")
            continue
        context = _notice_context(notifier, handler, entity_id)
        if args.html:
            print(render_notice_html(context, messages))
        else:
            console.print(Panel(Text(render_notice_text(context, messages)), title=context.plugin_name))


def _act(args: argparse.Namespace) -> None:
    notifier = _build_notifier()
    handler = _build_handler(notifier)
    # The terminal is a trusted caller, so it mints its own token.
    payload = {
        "action": handler.ajax_action(args.entity),
        "security": handler.create_nonce(args.entity),
        "action_performed": args.token,
    }
    action = handler.handle(args.entity, payload)
    if action is None:
        Console().print(Text(f"{args.entity}: ignored unknown action {args.token!r}"))
        return
    Console().print(f"{args.entity}: applied {action.value}")


def _deactivate(args: argparse.Namespace) -> None:
    notifier = _build_notifier()
    notifier.on_deactivate(args.entity)


def _status(args: argparse.Namespace) -> None:
    notifier = _build_notifier()
    console = Console()
    for entity_id in _entities(args.entity):
        state = notifier.state(entity_id)
        first_seen = state.first_seen_at.isoformat() if state.first_seen_at else "-"
        last_checked = state.last_checked_at.isoformat() if state.last_checked_at else "-"
        console.print(
            f"{entity_id}: first_seen={first_seen} last_checked={last_checked} "
            f"silenced={'yes' if state.silenced else 'no'}"
        )


def _render(args: argparse.Namespace) -> None:
    notifier = _build_notifier()
    handler = _build_handler(notifier)
    context = _notice_context(notifier, handler, args.entity)
    print(render_notice_html(context, build_messages(settings.MESSAGES)))


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="reviewbug")
    parser.add_argument("--no-banner", action="store_true", help="Skip the startup banner")
    subparsers = parser.add_subparsers(dest="command", required=True)

    activate = subparsers.add_parser("activate", help="Record the first check timestamp")
    activate.add_argument("entity", help="Plugin slug or path to its main .php file")
    activate.set_defaults(func=_activate)

    check = subparsers.add_parser("check", help="Show the review notice if it is due")
    check.add_argument("entity", nargs="?", help="Plugin slug or path to its main .php file")
    check.add_argument("--html", action="store_true", help="Print banner markup instead")
    check.set_defaults(func=_check)

    act = subparsers.add_parser("act", help="Apply rate, remind-later, or never-ask")
    act.add_argument("entity", help="Plugin slug or path to its main .php file")
    act.add_argument("token")
    act.set_defaults(func=_act)

    deactivate = subparsers.add_parser("deactivate", help="Forget all review state")
    deactivate.add_argument("entity", help="Plugin slug or path to its main .php file")
    deactivate.set_defaults(func=_deactivate)

    status = subparsers.add_parser("status", help="Show stored review state")
    status.add_argument("entity", nargs="?", help="Plugin slug or path to its main .php file")
    status.set_defaults(func=_status)

    render = subparsers.add_parser("render", help="Print the notice markup")
    render.add_argument("entity", help="Plugin slug or path to its main .php file")
    render.set_defaults(func=_render)

    args = parser.parse_args(argv)
    if getattr(args, "entity", None):
        args.entity = resolve_entity_id(args.entity)

    load_dotenv()
    if not args.no_banner:
        _print_banner()
    _configure_logging()

    try:
        args.func(args)
    except StorageUnavailable:
        LOGGER.exception("Option store unavailable")
        sys.exit(1)
    except ReviewBugError as e:
        LOGGER.error("%s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
