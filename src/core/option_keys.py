"""Helpers for composing option store keys and related identifiers."""

from __future__ import annotations

import logging
import os
import re

LOGGER = logging.getLogger(__name__)

SUFFIX_CHECK = "check"
SUFFIX_ACTIVATION = "activation"
SUFFIX_NOBUG = "nobug"

ALL_SUFFIXES = (SUFFIX_CHECK, SUFFIX_ACTIVATION, SUFFIX_NOBUG)

# Option names longer than this are truncated by some hosts.
MAX_OPTION_NAME_LENGTH = 150


def build_option_name(prefix: str, entity_id: str, suffix: str) -> str:
    """Return the store key for one entity/suffix pair."""

    option_name = "_".join((prefix, entity_id, suffix))
    if len(option_name) > MAX_OPTION_NAME_LENGTH:
        LOGGER.warning("long option name. consider revising. %s", option_name)
    return option_name


def build_nonce_action(prefix: str, entity_id: str) -> str:
    """Return the action string the per-entity nonce is bound to."""

    return f"{prefix}-n-{entity_id}"


def build_ajax_action(prefix: str, entity_id: str) -> str:
    """Return the ajax action name used by the notice to post actions."""

    return f"{prefix}_{entity_id}".replace("-", "_")


def slug_from_plugin_file(plugin_file: str) -> str:
    """Derive an entity id from a plugin's main file path."""

    basename = os.path.basename(plugin_file.replace("\\", "/")).lower()
    if basename.endswith(".php"):
        basename = basename[: -len(".php")]
    return basename


def sanitize_prefix(raw_prefix: str) -> str:
    """Reduce a prefix to a lowercase slug (letters, digits, hyphens)."""

    slug = re.sub(r"[^a-z0-9_\s-]", "", raw_prefix.strip().lower())
    slug = re.sub(r"[\s_]+", "-", slug)
    return re.sub(r"-{2,}", "-", slug).strip("-")


def resolve_entity_id(value: str) -> str:
    """Accept either an entity id or a plugin's main file path."""

    value = value.strip()
    if value.lower().endswith(".php"):
        return slug_from_plugin_file(value)
    return value
