class UIKeys:
    """Keys for UI widgets in ``st.session_state``."""

    LAYOUT_SELECT = "ui.layout_select"
    ANSWER_PREFIX = "ui.answer."


class StateKeys:
    """Keys for data stored in ``st.session_state``."""

    PROFILE = "profile_data"
    ONBOARDING_FLOW = "onboarding_flow"
    SESSION_ID = "session_id"
    AUTOSAVE = "autosave_snapshot"
    SUBMISSION_RESULTS = "submission_results"
    SUBMITTED_PROFILE = "submitted_profile"
