"""Streamlit UI for chatting with uploaded PDFs.

Run with: streamlit run ui/app.py
"""

import sys
from pathlib import Path

# Add project root to sys.path for imports to work when run via streamlit
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st  # noqa: E402

from ui.client import BackendError, ChatApiClient  # noqa: E402
from ui.config import get_client_settings  # noqa: E402
from ui.helpers import (  # noqa: E402
    WELCOME_MESSAGE,
    build_answer_view,
    build_document_status,
    build_question_rows,
)
from ui.notifications import Level  # noqa: E402
from ui.runtime import BackgroundLoop, log_future_exception  # noqa: E402
from ui.session import AuthenticationRequired, ChatSession, SessionState  # noqa: E402

TOAST_ICONS = {
    Level.success: "✅",
    Level.info: "ℹ️",
    Level.warning: "⚠️",
    Level.error: "❌",
}

# Page config
st.set_page_config(
    page_title="RAG LLM",
    page_icon="🤖",
    layout="wide",
)


@st.cache_resource
def get_runtime() -> BackgroundLoop:
    """One event loop shared by every browser session of this server process."""
    return BackgroundLoop()


runtime = get_runtime()

# Initialize session state
if "chat_session" not in st.session_state:
    st.session_state.chat_session = ChatSession(ChatApiClient.from_settings(get_client_settings()))

session: ChatSession = st.session_state.chat_session

# Resume from the token kept in the URL (the page's stand-in for local storage)
if session.state is SessionState.unauthenticated and "token" in st.query_params:
    try:
        runtime.run(session.restore(st.query_params.get("token"), st.query_params.get("user")))
    except AuthenticationRequired:
        st.query_params.clear()


def show_notifications() -> None:
    for notification in session.notifier.drain():
        st.toast(notification.message, icon=TOAST_ICONS[notification.level])


# =============================================================================
# LOGIN / REGISTER
# =============================================================================
def render_auth() -> None:
    st.title("🤖 RAG LLM")
    st.markdown("*Sign in to chat with your documents*")

    login_tab, register_tab = st.tabs(["Login", "Register"])

    with login_tab, st.form("login_form"):
        username = st.text_input("Username or email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", type="primary", use_container_width=True)

        if submitted:
            try:
                runtime.run(session.login(username.strip(), password))
            except BackendError as e:
                st.error(f"❌ {e.message}")
            else:
                st.query_params.update({"token": session.token or "", "user": session.username or ""})
                st.rerun()

    with register_tab, st.form("register_form"):
        new_username = st.text_input("Username")
        email = st.text_input("Email")
        new_password = st.text_input("Password", type="password", key="register_password")
        submitted = st.form_submit_button("Create account", type="primary", use_container_width=True)

        if submitted:
            try:
                runtime.run(session.register(new_username.strip(), email.strip(), new_password))
            except BackendError as e:
                st.error(f"❌ {e.message}")
            else:
                session.notifier.success("Registration successful!")
                st.query_params.update({"token": session.token or "", "user": session.username or ""})
                st.rerun()


# =============================================================================
# SIDEBAR - ACCOUNT + DOCUMENTS
# =============================================================================
def on_toggle(name: str) -> None:
    runtime.call(session.toggle_document, name)


def render_sidebar() -> None:
    registry = session.registry
    if registry is None:
        return

    with st.sidebar:
        st.markdown(f"**👤 {session.username}**")
        if st.button("Log out", use_container_width=True):
            runtime.call(session.logout)
            st.query_params.clear()
            st.rerun()

        st.divider()
        st.subheader("📄 Documents")

        with st.form("upload_form", clear_on_submit=True):
            uploaded = st.file_uploader("Upload a PDF", type=["pdf"])
            if st.form_submit_button("Upload", use_container_width=True) and uploaded is not None:
                runtime.run(session.upload_document(uploaded.name, uploaded.getvalue(), uploaded.type))

        if not registry.documents:
            st.caption("_No documents uploaded yet_")

        for name in registry.documents:
            key = f"doc:{name}"
            # Widget state follows the registry (a refresh re-selects everything)
            st.session_state[key] = registry.is_selected(name)

            col_check, col_delete = st.columns([5, 1])
            with col_check:
                st.checkbox(name, key=key, on_change=on_toggle, args=(name,))
            with col_delete:
                if st.button("🗑️", key=f"delete:{name}", help=f"Delete {name}"):
                    runtime.run(session.remove_document(name))
                    st.rerun()


# =============================================================================
# MAIN - QUESTIONS + ANSWERS
# =============================================================================
def render_transcript(polling: bool) -> None:
    exchanges = session.transcript.exchanges
    col_questions, col_answers = st.columns(2)

    with col_questions:
        header, clear = st.columns([4, 1])
        header.subheader("Your Questions")
        if exchanges and clear.button("Clear"):
            runtime.call(session.clear_transcript)
            st.rerun()

        rows = build_question_rows(exchanges)
        if not rows:
            st.info("No questions asked yet. Start by asking a question about your documents below.")
        for question in rows:
            st.markdown(f"> {question}")

        registry = session.registry
        if registry is not None:
            status = build_document_status(
                registry.documents, registry.list_selected(), registry.upload_state
            )
            getattr(st, status["level"])(status["message"])

    with col_answers:
        st.subheader("AI Answers")
        if not exchanges:
            with st.chat_message("assistant"):
                st.markdown(WELCOME_MESSAGE)

        for item in build_answer_view(exchanges):
            with st.chat_message("assistant"):
                if item["status"] == "error":
                    st.error(item["text"])
                elif item["status"] == "pending":
                    st.caption(item["text"])
                else:
                    st.markdown(item["text"])
                    if item["document"]:
                        st.caption(f"📄 {item['document']}")

    # Full rerun once everything has landed so polling stops
    if polling and session.dispatcher.in_flight == 0:
        st.rerun()


def render_chat() -> None:
    st.title("Business Document Intelligence")
    st.markdown(
        "*Upload your documents and ask questions. Get instant answers powered by AI "
        "with accurate source references.*"
    )
    st.divider()

    render_sidebar()
    polling = session.dispatcher.in_flight > 0
    st.fragment(run_every=1.0 if polling else None)(render_transcript)(polling)

    question = st.chat_input("Ask a question about your documents...")
    if question:
        runtime.submit(session.ask(question)).add_done_callback(log_future_exception)
        # Barrier: the submission's slot is reserved before this returns
        runtime.call(lambda: None)
        st.rerun()


if session.state is SessionState.ready:
    render_chat()
else:
    render_auth()

show_notifications()
