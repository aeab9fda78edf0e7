"""Profile snapshot export, import and restore helpers.

Only the shared profile is persisted. Per-run answers and navigation are
rebuilt from it when a questionnaire run starts.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Mapping

import streamlit as st

from constants.keys import StateKeys
from core.profile_schema import PROFILE_SCHEMA, ProfileSchema
from state.profile_store import ProfileStore

logger = logging.getLogger(__name__)

AutosavePayload = dict[str, Any]


def _sanitize_profile(profile_data: Mapping[str, Any] | None, schema: ProfileSchema) -> dict[str, dict[str, Any]]:
    if not isinstance(profile_data, Mapping):
        return {}
    sanitized: dict[str, dict[str, Any]] = {}
    for section, values in profile_data.items():
        key = str(section)
        if key not in schema:
            logger.debug("Dropping unknown section '%s' from snapshot", key)
            continue
        if not isinstance(values, Mapping):
            logger.debug("Dropping malformed section '%s' from snapshot", key)
            continue
        sanitized[key] = {str(field_name): value for field_name, value in values.items() if value is not None}
    return sanitized


def build_snapshot(
    profile_data: Mapping[str, Any] | None,
    *,
    schema: ProfileSchema = PROFILE_SCHEMA,
    captured_at: datetime | None = None,
) -> AutosavePayload:
    """Return a portable snapshot that can be exported or restored later."""

    timestamp = captured_at or datetime.now(timezone.utc)
    return {
        "profile": _sanitize_profile(profile_data, schema),
        "meta": {"captured_at": timestamp.isoformat()},
    }


def _resolve_snapshot_components(payload: Mapping[str, Any]) -> tuple[Mapping[str, Any], Mapping[str, Any]]:
    if "profile" in payload:
        candidate = payload.get("profile")
        profile_data = candidate if isinstance(candidate, Mapping) else {}
        meta_raw = payload.get("meta")
        meta = meta_raw if isinstance(meta_raw, Mapping) else {}
        return profile_data, meta
    # Bare profile mappings (e.g. a hand-written export) are accepted as-is.
    return payload, {}


def _parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        logger.debug("Ignoring malformed captured_at '%s'", value)
        return None


def parse_snapshot(payload: Mapping[str, Any], *, schema: ProfileSchema = PROFILE_SCHEMA) -> AutosavePayload:
    """Normalise a snapshot payload from autosave or upload."""

    profile_data, meta = _resolve_snapshot_components(payload)
    return build_snapshot(profile_data, schema=schema, captured_at=_parse_timestamp(meta.get("captured_at")))


def serialize_snapshot(snapshot: Mapping[str, Any]) -> bytes:
    """Return a JSON representation of ``snapshot`` for download."""

    return json.dumps(snapshot, ensure_ascii=False, indent=2).encode("utf-8")


def load_snapshot(raw: bytes | str) -> AutosavePayload:
    """Decode an uploaded JSON snapshot.

    Raises:
        ValueError: If ``raw`` is not a JSON object.
    """

    data = json.loads(raw)
    if not isinstance(data, Mapping):
        raise ValueError("Snapshot must be a JSON object")
    return parse_snapshot(data)


def restore_snapshot(store: ProfileStore, payload: Mapping[str, Any]) -> AutosavePayload:
    """Replace the profile held by ``store`` with the snapshot's profile."""

    parsed = parse_snapshot(payload)
    store.replace(parsed["profile"])
    logger.info("Restored profile snapshot with %d section(s)", len(parsed["profile"]))
    return parsed


def persist_session_snapshot(store: ProfileStore) -> AutosavePayload:
    """Capture the current profile into ``StateKeys.AUTOSAVE``."""

    snapshot = build_snapshot(store.snapshot())
    st.session_state[StateKeys.AUTOSAVE] = snapshot
    return snapshot


__all__ = [
    "AutosavePayload",
    "build_snapshot",
    "load_snapshot",
    "parse_snapshot",
    "persist_session_snapshot",
    "restore_snapshot",
    "serialize_snapshot",
]
