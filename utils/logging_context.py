"""Questionnaire context (browser session, profile section, question) on every log record."""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator

PLACEHOLDER = "-"

LOG_FORMAT = (
    "%(asctime)s %(levelname)s [session=%(session_id)s section=%(profile_section)s "
    "question=%(question_id)s] %(name)s: %(message)s"
)

# record attribute -> context variable
_FIELDS: dict[str, contextvars.ContextVar[str]] = {
    name: contextvars.ContextVar(name, default=PLACEHOLDER)
    for name in ("session_id", "profile_section", "question_id")
}
_base_factory = logging.getLogRecordFactory()
_factory_installed = False


def _context_record_factory(*args: object, **kwargs: object) -> logging.LogRecord:
    record = _base_factory(*args, **kwargs)
    for name, var in _FIELDS.items():
        setattr(record, name, var.get())
    return record


def _clean(value: str | None) -> str:
    text = "" if value is None else str(value).strip()
    return text or PLACEHOLDER


def configure_logging(*, level: int = logging.INFO) -> None:
    """Install the context-aware record factory and the questionnaire log format."""

    global _factory_installed
    if not _factory_installed:
        logging.setLogRecordFactory(_context_record_factory)
        _factory_installed = True

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        for handler in root.handlers:
            if handler.formatter is None:
                handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)


def set_session_id(session_id: str | None) -> None:
    _FIELDS["session_id"].set(_clean(session_id))


def set_section(section: str | None) -> None:
    """Bind the profile section currently being collected."""

    _FIELDS["profile_section"].set(_clean(section))


def set_question(question_id: str | None) -> None:
    _FIELDS["question_id"].set(_clean(question_id))


@contextmanager
def log_context(
    *,
    session_id: str | None = None,
    section: str | None = None,
    question_id: str | None = None,
) -> Iterator[None]:
    """Bind the given fields for the duration of the block.

    Arguments left as ``None`` keep their current binding.
    """

    overrides = {"session_id": session_id, "profile_section": section, "question_id": question_id}
    tokens = [
        (_FIELDS[name], _FIELDS[name].set(_clean(value)))
        for name, value in overrides.items()
        if value is not None
    ]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
