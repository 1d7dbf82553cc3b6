"""Streamlit page running a registration form as a step-by-step wizard."""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date
from html import escape as html_escape
from typing import Any, Dict, List, Optional

import requests
import streamlit as st

from formwizard.form_store import FormStore
from formwizard.github_backend import GitHubBackend
from formwizard.models import Form, Question
from formwizard.schema_defaults import (
    DEFAULT_BACK_LABEL,
    DEFAULT_DEBUG_LABEL,
    DEFAULT_NEXT_LABEL,
    DEFAULT_PAGE_TITLE,
    DEFAULT_SUBMIT_LABEL,
    DEFAULT_SUBMIT_SUCCESS_MESSAGE,
    UNSELECTED_LABEL,
)
from formwizard.session import FormSession, NavigationResult, StepView
from formwizard.submissions import (
    DEFAULT_SUBMISSIONS_PATH,
    build_submission,
    save_submission,
    submission_path,
)
from formwizard.theme import style_descriptor, style_markup

SESSIONS_STATE_KEY = "registration_sessions"
COMPLETED_STATE_KEY = "registration_completed"
SELECTED_FORM_STATE_KEY = "registration_selected_form"
FORM_QUERY_PARAM = "form"


def _secrets_dict(name: str) -> Dict[str, Any]:
    """Return a mapping stored under ``name`` in Streamlit secrets."""

    try:
        value = st.secrets.get(name, {})  # type: ignore[arg-type]
    except FileNotFoundError:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    return {}


def _github_settings() -> Dict[str, Any]:
    """Return GitHub configuration from secrets, or ``{}`` when incomplete."""

    secrets = _secrets_dict("github")
    repo = secrets.get("repo")
    token = secrets.get("token")
    if not repo:
        return {}
    forms = secrets.get("forms", [])
    if isinstance(forms, str) or not isinstance(forms, (list, tuple)):
        forms = []
    return {
        "repo": repo,
        "token": token,
        "branch": secrets.get("branch", "main"),
        "api_url": secrets.get("api_url") or "https://api.github.com",
        "path": secrets.get("path", "form_schemas/{form_id}/form_schema.json"),
        "forms": [str(item).strip() for item in forms if str(item).strip()],
        "submissions_path": secrets.get("submissions_path") or DEFAULT_SUBMISSIONS_PATH,
    }


def _backend(settings: Dict[str, Any]) -> GitHubBackend:
    return GitHubBackend(
        token=settings.get("token") or "",
        repo=settings["repo"],
        branch=settings.get("branch", "main"),
        api_url=settings.get("api_url") or "https://api.github.com",
    )


def load_forms() -> Dict[str, Form]:
    """Return the forms to offer, preferring GitHub when it is configured."""

    settings = _github_settings()
    if settings.get("forms") and settings.get("token"):
        try:
            forms = _backend(settings).load_forms(settings["path"], settings["forms"])
        except requests.RequestException:
            st.error("Unable to load forms from GitHub right now. Showing the local forms instead.")
        except (ValueError, json.JSONDecodeError):
            st.error("A form definition on GitHub is not valid JSON. Showing the local forms instead.")
        else:
            if forms:
                return forms
    return {form.id: form for form in FormStore().list()}


def store_submission(form: Form, answers: Dict[str, Any]) -> Optional[str]:
    """Persist a finished answer set and return the submission id."""

    submission = build_submission(form, answers)
    settings = _github_settings()
    if settings.get("token"):
        try:
            path = submission_path(settings["submissions_path"], submission)
        except KeyError as exc:
            st.error(f"Invalid submissions path template; missing placeholder: {exc}.")
            return None
        try:
            _backend(settings).write_json(path, submission, f"Add registration {submission['id']}")
        except requests.RequestException as exc:
            st.error(f"Unable to store the submission on GitHub: {exc}.")
            return None
        return submission["id"]

    save_submission(submission)
    return submission["id"]


def answer_from_widget(question: Question, value: Any) -> Any:
    """Convert a widget value into the answer recorded for ``question``."""

    if value is None:
        return ""
    if question.type == "multiselect":
        return [str(item) for item in value]
    if question.type == "select":
        return "" if value == UNSELECTED_LABEL else str(value)
    if question.type == "date" and isinstance(value, date):
        return value.isoformat()
    return str(value)


def _session_for(form: Form) -> FormSession:
    sessions: Dict[str, FormSession] = st.session_state.setdefault(SESSIONS_STATE_KEY, {})
    session = sessions.get(form.id)
    if session is None or session.form != form:
        completed: Dict[str, Optional[str]] = st.session_state.setdefault(COMPLETED_STATE_KEY, {})

        def _on_complete(answers: Dict[str, Any]) -> None:
            completed[form.id] = store_submission(form, answers)

        session = FormSession(form, on_complete=_on_complete)
        sessions[form.id] = session
    return session


def _render_question(form: Form, session: FormSession, question: Question) -> None:
    widget_key = f"{form.id}_question_{question.id}"
    label = question.label + (" *" if question.required else "")
    current = session.answers.get(question.id)
    current_plain = current.to_plain() if current is not None else None
    placeholder = question.placeholder

    if question.type == "select":
        values = [option.value for option in question.options]
        labels = {option.value: option.label for option in question.options}
        choices = [UNSELECTED_LABEL, *values]
        index = choices.index(current_plain) if current_plain in values else 0
        value = st.selectbox(
            label,
            choices,
            index=index,
            key=widget_key,
            format_func=lambda item: labels.get(item, item),
        )
    elif question.type == "multiselect":
        values = [option.value for option in question.options]
        labels = {option.value: option.label for option in question.options}
        default = [item for item in (current_plain or []) if item in values]
        value = st.multiselect(
            label,
            options=values,
            default=default,
            key=widget_key,
            format_func=lambda item: labels.get(item, item),
        )
    elif question.type == "date":
        default_date = None
        if isinstance(current_plain, str):
            try:
                default_date = date.fromisoformat(current_plain)
            except ValueError:
                default_date = None
        value = st.date_input(label, value=default_date, key=widget_key)
    else:
        value = st.text_input(
            label,
            value=current_plain if isinstance(current_plain, str) else "",
            key=widget_key,
            placeholder=placeholder,
        )

    answer = answer_from_widget(question, value)
    session.record_answer(question.id, answer)

    validation = question.validation
    if validation is not None and isinstance(answer, str) and answer and not validation.check(answer):
        st.caption(f"⚠️ {validation.message or 'This value does not look right.'}")


def _render_step(form: Form, session: FormSession, view: StepView) -> None:
    if view.group is not None:
        st.markdown(
            f"<h3 class='form-title'>{html_escape(view.group.title)}</h3>",
            unsafe_allow_html=True,
        )
        if view.group.description:
            st.caption(view.group.description)
    columns = 1
    if view.group is not None and view.group.layout != "vertical":
        columns = max(1, view.group.columns or len(view.questions) or 1)
    if columns == 1:
        for question in view.questions:
            _render_question(form, session, question)
        return
    slots = st.columns(columns)
    for position, question in enumerate(view.questions):
        with slots[position % columns]:
            _render_question(form, session, question)


def run_wizard(form: Form) -> None:
    """Render the current step of ``form`` and its navigation controls."""

    descriptor = style_descriptor(form.theme)
    st.markdown(style_markup(descriptor), unsafe_allow_html=True)
    logo = descriptor.get("logo")
    if logo:
        st.image(logo["src"], width=int(logo["width"]))

    st.markdown(f"<h1 class='form-title'>{html_escape(form.title)}</h1>", unsafe_allow_html=True)
    if form.description:
        st.caption(form.description)

    session = _session_for(form)
    completed: Dict[str, Optional[str]] = st.session_state.setdefault(COMPLETED_STATE_KEY, {})
    if session.completed:
        st.success(DEFAULT_SUBMIT_SUCCESS_MESSAGE)
        submission_id = completed.get(form.id)
        if submission_id:
            st.info(f"Submission saved with ID `{submission_id}`.")
        if st.button("Start again", key=f"restart_{form.id}"):
            session.reset()
            completed.pop(form.id, None)
            st.rerun()
        return

    st.progress(session.progress())
    view = session.current_display()
    if not view.questions:
        st.info("No questions to answer in this form.")
    _render_step(form, session, view)

    view = session.current_display()
    back_col, next_col = st.columns(2)
    with back_col:
        if st.button(DEFAULT_BACK_LABEL, disabled=view.is_first_step, key=f"back_{form.id}"):
            session.retreat()
            st.rerun()
    with next_col:
        label = DEFAULT_SUBMIT_LABEL if view.is_last_step else DEFAULT_NEXT_LABEL
        if st.button(label, disabled=not view.can_advance, key=f"next_{form.id}", type="primary"):
            if session.advance() is not NavigationResult.BLOCKED:
                st.rerun()

    with st.expander(DEFAULT_DEBUG_LABEL, expanded=False):
        st.json(session.answers.to_dict())


def _selected_form_id(forms: Dict[str, Form]) -> str:
    keys: List[str] = list(forms.keys())
    selected = st.query_params.get(FORM_QUERY_PARAM) or st.session_state.get(SELECTED_FORM_STATE_KEY)
    if selected not in forms:
        published = [key for key in keys if forms[key].status == "published"]
        selected = (published or keys)[0]
    if len(keys) > 1:
        selected = st.selectbox(
            "Form",
            options=keys,
            index=keys.index(selected),
            format_func=lambda key: f"{forms[key].title} ({forms[key].status})",
        )
    st.session_state[SELECTED_FORM_STATE_KEY] = selected
    st.query_params[FORM_QUERY_PARAM] = selected
    return selected


def main() -> None:
    """Render the registration page."""

    st.set_page_config(page_title=DEFAULT_PAGE_TITLE, page_icon="📝", layout="centered")
    forms = load_forms()
    if not forms:
        st.error("No forms configured. Add one under form_schemas/<form_id>/form_schema.json.")
        return
    form = forms[_selected_form_id(forms)]
    if form.status != "published":
        st.warning(f"Previewing a {form.status} form. Submissions are still recorded.")
    run_wizard(form)


if __name__ == "__main__":
    main()
