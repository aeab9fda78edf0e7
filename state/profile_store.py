"""Shared, long-lived profile store backed by Streamlit session state.

The store keeps one mapping per profile section under
``StateKeys.PROFILE``. Writers only ever merge into a single section, so two
questionnaire runs for different sections can push in any interleaving
without clobbering each other.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Mapping, MutableMapping, Protocol

import streamlit as st

from constants.keys import StateKeys

logger = logging.getLogger(__name__)

ProfileListener = Callable[[str, Mapping[str, Any]], None]


class ProfileRepository(Protocol):
    """Boundary the questionnaire engine writes through."""

    def get_section(self, section: str) -> dict[str, Any]: ...

    def merge_section(self, section: str, values: Mapping[str, Any]) -> None: ...


class ProfileStore:
    """Section-scoped view over the canonical profile mapping."""

    def __init__(self, session_state: MutableMapping[str, Any] | None = None) -> None:
        self._session_state = session_state if session_state is not None else st.session_state
        self._listeners: list[ProfileListener] = []

    def _profile(self) -> dict[str, Any]:
        raw = self._session_state.get(StateKeys.PROFILE)
        if isinstance(raw, dict):
            return raw
        profile: dict[str, Any] = dict(raw) if isinstance(raw, Mapping) else {}
        self._session_state[StateKeys.PROFILE] = profile
        return profile

    def get_section(self, section: str) -> dict[str, Any]:
        """Return a copy of the stored values for ``section``."""

        values = self._profile().get(str(section))
        if not isinstance(values, Mapping):
            return {}
        return copy.deepcopy(dict(values))

    def merge_section(self, section: str, values: Mapping[str, Any]) -> None:
        """Merge ``values`` into ``section`` without touching other sections.

        Keys mapped to ``None`` are removed from the section.
        """

        key = str(section)
        profile = self._profile()
        current = profile.get(key)
        merged: dict[str, Any] = dict(current) if isinstance(current, Mapping) else {}
        for field_name, value in values.items():
            if value is None:
                merged.pop(field_name, None)
            else:
                merged[field_name] = copy.deepcopy(value)
        profile[key] = merged
        logger.debug("Merged %d field(s) into section '%s'", len(values), key)
        self._notify(key, merged)

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Return a deep copy of every stored section."""

        return {
            section: copy.deepcopy(dict(values))
            for section, values in self._profile().items()
            if isinstance(values, Mapping)
        }

    def replace(self, profile: Mapping[str, Mapping[str, Any]]) -> None:
        """Replace the whole profile, e.g. when restoring a saved snapshot."""

        self._session_state[StateKeys.PROFILE] = {
            str(section): copy.deepcopy(dict(values)) for section, values in profile.items()
        }
        for section, values in self._profile().items():
            self._notify(section, values)

    def reset(self) -> None:
        """Drop every stored section."""

        self._session_state[StateKeys.PROFILE] = {}
        logger.info("Profile store reset")

    def subscribe(self, listener: ProfileListener) -> Callable[[], None]:
        """Register a read-only observer and return a callable that removes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, section: str, values: Mapping[str, Any]) -> None:
        for listener in list(self._listeners):
            listener(section, copy.deepcopy(dict(values)))


__all__ = ["ProfileListener", "ProfileRepository", "ProfileStore"]
