# app.py: profile onboarding entrypoint (Streamlit)
from __future__ import annotations

import logging
from pathlib import Path
import sys
from uuid import uuid4

import streamlit as st

APP_ROOT = Path(__file__).resolve().parent
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from config import QuestionnaireSettings, load_settings  # noqa: E402
from constants.flow_mode import QuestionLayout  # noqa: E402
from constants.keys import StateKeys, UIKeys  # noqa: E402
from core.profile_schema import Section  # noqa: E402
from state.autosave import (  # noqa: E402
    build_snapshot,
    load_snapshot,
    persist_session_snapshot,
    restore_snapshot,
    serialize_snapshot,
)
from state.profile_store import ProfileStore  # noqa: E402
from utils.logging_context import configure_logging, set_question, set_section, set_session_id  # noqa: E402
from wizard.layout import render_run  # noqa: E402
from wizard.onboarding import OnboardingFlow  # noqa: E402
from wizard.submission import SessionStateSubmitter  # noqa: E402

APP_VERSION = "1.0.0"
TIMER_POLL_SECONDS = 0.1

SECTION_TITLES: dict[str, str] = {
    Section.SKIN: "🧴 Skin",
    Section.HAIR: "💇 Hair",
    Section.LIFESTYLE: "🏃 Lifestyle",
    Section.HEALTH: "🩺 Health",
    Section.MAKEUP: "💄 Makeup",
    Section.PREFERENCES: "⭐ Preferences",
}

SETTINGS: QuestionnaireSettings = load_settings()
configure_logging(level=logging.DEBUG if SETTINGS.debug_logs else logging.INFO)
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Profile onboarding", page_icon="🧴", layout="centered")
st.session_state.setdefault("app_version", APP_VERSION)


def _get_flow() -> OnboardingFlow:
    """Return the onboarding flow of this browser session, creating it once."""

    flow = st.session_state.get(StateKeys.ONBOARDING_FLOW)
    if isinstance(flow, OnboardingFlow):
        return flow
    store = ProfileStore()
    store.subscribe(lambda _section, _values: persist_session_snapshot(store))
    persist_session_snapshot(store)
    flow = OnboardingFlow(store, settings=SETTINGS)
    st.session_state[StateKeys.ONBOARDING_FLOW] = flow
    logger.info("Created onboarding flow")
    return flow


def _on_layout_change(flow: OnboardingFlow) -> None:
    flow.set_layout(QuestionLayout(st.session_state[UIKeys.LAYOUT_SELECT]))


def _finish(flow: OnboardingFlow) -> None:
    results = flow.finish(SessionStateSubmitter())
    st.session_state[StateKeys.SUBMISSION_RESULTS] = results


@st.fragment(run_every=TIMER_POLL_SECONDS)
def _pump_timers(flow: OnboardingFlow) -> None:
    """Fire due debounce and auto-advance timers while any are pending."""

    if flow.tick():
        st.rerun(scope="app")


def render_sidebar(flow: OnboardingFlow) -> None:
    with st.sidebar:
        st.markdown("### Your profile")
        st.progress(flow.completion_percentage / 100, text=f"{flow.completion_percentage}% complete")
        for index, section in enumerate(flow.sections):
            if flow.is_finished or section in flow.completed_sections:
                badge = "✅"
            elif index == flow.current_step:
                badge = "👉"
            else:
                badge = "○"
            st.markdown(f"{badge} {SECTION_TITLES.get(section, section.title())}")

        st.session_state.setdefault(UIKeys.LAYOUT_SELECT, flow.layout.value)
        st.radio(
            "Question layout",
            [layout.value for layout in QuestionLayout],
            format_func=lambda value: "One at a time" if value == QuestionLayout.ONE_AT_A_TIME else "All at once",
            key=UIKeys.LAYOUT_SELECT,
            on_change=_on_layout_change,
            args=(flow,),
            disabled=flow.is_finished,
        )

        st.divider()
        st.download_button(
            "💾 Export profile",
            data=serialize_snapshot(
                st.session_state.get(StateKeys.AUTOSAVE) or build_snapshot(ProfileStore().snapshot())
            ),
            file_name="profile.json",
            mime="application/json",
        )
        uploaded = st.file_uploader("Restore profile", type=["json"])
        if uploaded is not None and st.button("Restore", key="autosave.restore"):
            try:
                snapshot = load_snapshot(uploaded.getvalue())
            except ValueError as exc:
                st.error(f"Could not read snapshot: {exc}")
            else:
                restore_snapshot(ProfileStore(), snapshot)
                st.session_state.pop(StateKeys.ONBOARDING_FLOW, None)
                for key in [key for key in st.session_state if str(key).startswith(UIKeys.ANSWER_PREFIX)]:
                    del st.session_state[key]
                st.toast("Profile restored.", icon="💾")
                st.rerun()


def render_section_controls(flow: OnboardingFlow) -> None:
    run = flow.run
    col_prev, col_next = st.columns(2)
    col_prev.button(
        "← Previous section",
        key="onboarding.previous",
        disabled=flow.is_first_section,
        on_click=flow.previous_section,
        use_container_width=True,
    )
    if flow.is_last_section:
        col_next.button(
            "Complete profile",
            key="onboarding.finish",
            type="primary",
            disabled=not run.can_complete,
            on_click=_finish,
            args=(flow,),
            use_container_width=True,
        )
    else:
        col_next.button(
            "Next section →",
            key="onboarding.next",
            type="primary",
            disabled=not run.can_complete,
            on_click=flow.next_section,
            use_container_width=True,
        )


def render_summary(flow: OnboardingFlow) -> None:
    st.success("Thanks! Your profile has been saved.")
    st.metric("Profile completion", f"{flow.completion_percentage}%")
    for result in st.session_state.get(StateKeys.SUBMISSION_RESULTS, []):
        icon = "✅" if result.ok else "⚠️"
        st.write(f"{icon} {SECTION_TITLES.get(result.section, result.section)}: {result.message or ''}")


def main() -> None:
    set_session_id(st.session_state.setdefault(StateKeys.SESSION_ID, uuid4().hex[:12]))
    flow = _get_flow()
    flow.tick()
    render_sidebar(flow)

    if flow.is_finished:
        render_summary(flow)
        return

    set_section(flow.current_section)
    set_question(flow.run.active_question.id if flow.run.active_question else None)
    st.header(SECTION_TITLES.get(flow.current_section, flow.current_section.title()))
    st.caption(f"Step {flow.current_step + 1} of {len(flow.sections)}")
    render_run(flow.run)
    st.divider()
    render_section_controls(flow)

    if flow.timers.pending_count():
        _pump_timers(flow)


main()
