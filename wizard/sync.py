"""Debounced bridge between a run's answers and the shared profile store.

Data flows one way per direction and every step is an event in a FIFO inbox
processed by :meth:`ProfileSynchronizer._drain`:

* ``_PullRequested`` copies stored values into the answer store once per run.
* ``_AnswersEdited`` (re)arms the debounce timer.
* ``_PushDue`` / ``_FlushRequested`` merge the section's answers into the store.

Pull reacts only to the run starting and push only to local edits, so the
store's own change notifications never feed back into either path. Events
posted while the inbox is draining are queued behind the current one.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Union

from state.profile_store import ProfileRepository
from utils.timers import ScheduledCall, TimerQueue
from wizard.answers import AnswersChanged, AnswerStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _PullRequested:
    pass


@dataclass(frozen=True)
class _AnswersEdited:
    question_ids: tuple[str, ...]


@dataclass(frozen=True)
class _PushDue:
    pass


@dataclass(frozen=True)
class _FlushRequested:
    reason: str


_SyncEvent = Union[_PullRequested, _AnswersEdited, _PushDue, _FlushRequested]


class ProfileSynchronizer:
    """Keep one section of the shared profile in step with a run's answers."""

    def __init__(
        self,
        section: str,
        *,
        answers: AnswerStore,
        store: ProfileRepository,
        timers: TimerQueue,
        debounce_seconds: float,
    ) -> None:
        self._section = str(section)
        self._answers = answers
        self._store = store
        self._timers = timers
        self._debounce_seconds = debounce_seconds
        self._inbox: deque[_SyncEvent] = deque()
        self._draining = False
        self._pulled = False
        self._dirty = False
        self._closed = False
        self._pending_push: ScheduledCall | None = None
        self._push_count = 0
        self._unsubscribe: Callable[[], None] = answers.subscribe(self._on_answers_changed)

    @property
    def section(self) -> str:
        return self._section

    @property
    def has_pulled(self) -> bool:
        return self._pulled

    @property
    def has_pending_push(self) -> bool:
        return self._dirty

    @property
    def push_count(self) -> int:
        return self._push_count

    def pull(self) -> None:
        """Load stored values into the answer store; repeated calls are ignored."""

        self._post(_PullRequested())

    def flush(self, reason: str = "flush") -> None:
        """Push pending answers immediately instead of waiting for the debounce."""

        self._post(_FlushRequested(reason=reason))

    def close(self) -> None:
        """Flush pending answers and stop listening for edits."""

        if self._closed:
            return
        self.flush(reason="close")
        self._unsubscribe()
        self._closed = True

    def _on_answers_changed(self, event: AnswersChanged) -> None:
        self._post(_AnswersEdited(question_ids=event.question_ids))

    def _post(self, event: _SyncEvent) -> None:
        if self._closed:
            logger.debug("Ignoring %s for closed synchronizer", type(event).__name__)
            return
        self._inbox.append(event)
        if self._draining:
            return
        self._draining = True
        try:
            self._drain()
        finally:
            self._draining = False

    def _drain(self) -> None:
        while self._inbox:
            event = self._inbox.popleft()
            match event:
                case _PullRequested():
                    self._handle_pull()
                case _AnswersEdited(question_ids=question_ids):
                    self._handle_edit(question_ids)
                case _PushDue():
                    self._pending_push = None
                    self._push("debounce")
                case _FlushRequested(reason=reason):
                    self._cancel_pending_push()
                    if self._dirty:
                        logger.info("Flushing pending answers for section '%s' (%s)", self._section, reason)
                        self._push(reason)

    def _handle_pull(self) -> None:
        if self._pulled:
            logger.debug("Section '%s' already pulled for this run", self._section)
            return
        stored = self._store.get_section(self._section)
        by_field = {question.field_name: question.id for question in self._answers.questions()}
        seed = {by_field[name]: value for name, value in stored.items() if name in by_field and value is not None}
        seeded = self._answers.seed(seed)
        self._pulled = True
        logger.debug("Pulled %d stored answer(s) for section '%s'", len(seeded), self._section)

    def _handle_edit(self, question_ids: tuple[str, ...]) -> None:
        self._dirty = True
        self._cancel_pending_push()
        self._pending_push = self._timers.call_later(self._debounce_seconds, lambda: self._post(_PushDue()))
        logger.debug("Answer change on %s; push scheduled", ", ".join(question_ids))

    def _push(self, reason: str) -> None:
        payload = self._answers.field_values()
        self._store.merge_section(self._section, payload)
        self._dirty = False
        self._push_count += 1
        logger.debug("Pushed %d field(s) to section '%s' (%s)", len(payload), self._section, reason)

    def _cancel_pending_push(self) -> None:
        if self._pending_push is not None:
            self._pending_push.cancel()
            self._pending_push = None


__all__ = ["ProfileSynchronizer"]
