"""Multi-section onboarding: one questionnaire run per profile section."""

from __future__ import annotations

import logging
from typing import Sequence

from config import QuestionnaireSettings
from constants.flow_mode import QuestionLayout
from core.completion import completion_percentage
from core.profile_schema import PROFILE_SCHEMA, SECTION_ORDER, ProfileSchema
from state.profile_store import ProfileStore
from utils.timers import TimerQueue
from wizard.session import QuestionnaireRun
from wizard.submission import ProfileSubmitter, SubmissionResult, submit_profile_sections

logger = logging.getLogger(__name__)


class OnboardingFlow:
    """Walk the user through every profile section in order.

    Only one :class:`QuestionnaireRun` is open at a time. Leaving a section in
    either direction closes its run, which flushes pending answers, and the
    section that becomes current gets a fresh run that pulls stored answers.
    """

    def __init__(
        self,
        store: ProfileStore,
        *,
        schema: ProfileSchema = PROFILE_SCHEMA,
        sections: Sequence[str] | None = None,
        settings: QuestionnaireSettings | None = None,
        timers: TimerQueue | None = None,
    ) -> None:
        self._store = store
        self._schema = schema
        self._settings = settings or QuestionnaireSettings()
        self._timers = timers or TimerQueue()
        ordered = [str(section) for section in (sections or SECTION_ORDER) if str(section) in schema]
        if not ordered:
            raise ValueError("Onboarding needs at least one schema section")
        self._sections: tuple[str, ...] = tuple(ordered)
        self._index = 0
        self._completed: set[str] = set()
        self._layout = self._settings.layout
        self._finished = False
        self._run: QuestionnaireRun | None = self._open_run()

    @property
    def sections(self) -> tuple[str, ...]:
        return self._sections

    @property
    def current_section(self) -> str:
        return self._sections[self._index]

    @property
    def current_step(self) -> int:
        return self._index

    @property
    def completed_sections(self) -> frozenset[str]:
        return frozenset(self._completed)

    @property
    def run(self) -> QuestionnaireRun:
        if self._run is None:
            raise RuntimeError("Onboarding flow has already finished")
        return self._run

    @property
    def timers(self) -> TimerQueue:
        return self._timers

    @property
    def layout(self) -> QuestionLayout:
        return self._layout

    @property
    def is_first_section(self) -> bool:
        return self._index == 0

    @property
    def is_last_section(self) -> bool:
        return self._index == len(self._sections) - 1

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def completion_percentage(self) -> int:
        return completion_percentage(self._store.snapshot(), self._schema)

    def set_layout(self, layout: QuestionLayout) -> None:
        """Switch layouts by restarting the current section's run."""

        layout = QuestionLayout(layout)
        if layout is self._layout:
            return
        self._layout = layout
        self._reopen(self._index)

    def next_section(self) -> bool:
        """Complete the current section and open the next one.

        Returns ``False`` without changing anything when the current run is
        not valid yet or when the last section is already current.
        """

        run = self.run
        if not run.is_valid:
            logger.debug("Section '%s' is not complete yet", self.current_section)
            return False
        if self.is_last_section:
            return False
        self._completed.add(self.current_section)
        self._reopen(self._index + 1)
        return True

    def previous_section(self) -> bool:
        if self.is_first_section:
            return False
        self._reopen(self._index - 1)
        return True

    def finish(self, submitter: ProfileSubmitter) -> list[SubmissionResult]:
        """Close the active run and submit every non-empty section."""

        if self._run is not None:
            if self._run.is_valid:
                self._completed.add(self.current_section)
            self._run.close()
            self._run = None
        self._finished = True
        logger.info("Onboarding finished; submitting %d section(s)", len(self._sections))
        return submit_profile_sections(self._store, submitter, self._sections)

    def tick(self) -> int:
        return self._timers.run_due()

    def _reopen(self, index: int) -> None:
        if self._run is not None:
            self._run.close()
        self._index = index
        self._run = self._open_run()

    def _open_run(self) -> QuestionnaireRun:
        return QuestionnaireRun(
            self.current_section,
            store=self._store,
            schema=self._schema,
            only_required=self._settings.only_required,
            layout=self._layout,
            timers=self._timers,
            settings=self._settings,
        )


__all__ = ["OnboardingFlow"]
