from __future__ import annotations

import json

import requests
import streamlit as st


st.set_page_config(page_title="Hospital Front Desk Assistant", page_icon="🏥", layout="wide")

EXAMPLE_QUESTIONS = [
    "which branches do you have",
    "where is Rwanda Branch",
    "show doctors for cardiology",
    "which doctors are available on monday",
    "emergency number",
]


def _http_session() -> requests.Session:
    # The API keeps conversation memory per sessionId cookie, so reuse one session.
    if "http_session" not in st.session_state:
        st.session_state["http_session"] = requests.Session()
    return st.session_state["http_session"]


def _call_api(path: str, payload: dict | None = None) -> tuple[int, dict]:
    base_url = st.session_state.get("api_base_url", "http://localhost:8000")
    url = base_url.rstrip("/") + path
    response = _http_session().post(url, json=payload or {})
    data = {}
    try:
        data = response.json()
    except json.JSONDecodeError:
        pass
    return response.status_code, data


def _render_answer(answer) -> str:
    if isinstance(answer, list):
        lines = [f"- {line}" if line else "" for line in answer]
        return "\n".join(lines) or "(empty)"
    return str(answer)


def _chat_interface() -> None:
    st.header("Ask about our branches, doctors and schedules")

    if "messages" not in st.session_state:
        st.session_state["messages"] = []

    for entry in st.session_state["messages"]:
        with st.chat_message(entry["role"]):
            st.markdown(entry["content"])

    user_prompt = st.chat_input("e.g. " + EXAMPLE_QUESTIONS[0])
    if not user_prompt:
        return

    st.session_state["messages"].append({"role": "user", "content": user_prompt})
    with st.chat_message("user"):
        st.markdown(user_prompt)

    status, data = _call_api("/api/v1/search", {"question": user_prompt})
    if status != 200:
        assistant_reply = f"Request failed with status {status}. Response: {data}"
    else:
        assistant_reply = _render_answer(data.get("answer", "(no answer)"))
        intent = data.get("intent") or "none"
        assistant_reply += f"\n\n_intent: {intent}_"

    st.session_state["messages"].append({"role": "assistant", "content": assistant_reply})
    with st.chat_message("assistant"):
        st.markdown(assistant_reply)


def _sidebar_controls() -> None:
    st.sidebar.title("Session Settings")
    st.session_state["api_base_url"] = st.sidebar.text_input(
        "API base URL",
        st.session_state.get("api_base_url", "http://localhost:8000"),
    )
    st.sidebar.markdown("**Try asking:**")
    for question in EXAMPLE_QUESTIONS:
        st.sidebar.markdown(f"- {question}")

    if st.sidebar.button("Reset conversation"):
        status, _ = _call_api("/api/v1/reset")
        if status != 200:
            st.sidebar.error(f"Reset failed ({status}).")
        st.session_state["messages"] = []
        st.rerun()


def main() -> None:
    _sidebar_controls()
    _chat_interface()


if __name__ == "__main__":
    main()
