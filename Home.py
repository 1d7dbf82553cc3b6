"""Streamlit home screen listing registration forms and their submissions."""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
import streamlit as st

from formwizard.form_store import FormNotFoundError, FormStore
from formwizard.models import FORM_STATUSES, Form
from formwizard.submissions import SUBMISSIONS_ROOT, delete_submission_files, load_submissions

FORM_TABLE_COLUMNS = ("Form ID", "Title", "Status", "Questions", "Groups", "Submissions")
SUBMISSION_TABLE_COLUMNS = ("Submission ID", "Form", "Submitted at", "Answers")
SELECTED_FORM_STATE_KEY = "registration_selected_form"


def form_rows(forms: Iterable[Form], submissions: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Return one table row per form with its submission count."""

    counts = Counter(str(item.get("form_id") or "") for item in submissions)
    return [
        {
            "Form ID": form.id,
            "Title": form.title,
            "Status": form.status,
            "Questions": len(form.questions),
            "Groups": len(form.groups),
            "Submissions": counts.get(form.id, 0),
        }
        for form in forms
    ]


def forms_dataframe(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    """Build the overview table, keeping the column order stable when empty."""

    return pd.DataFrame(rows, columns=list(FORM_TABLE_COLUMNS))


def submissions_dataframe(submissions: Iterable[Dict[str, Any]]) -> pd.DataFrame:
    rows = []
    for item in submissions:
        answers = item.get("answers")
        rows.append(
            {
                "Submission ID": str(item.get("id") or ""),
                "Form": str(item.get("form_title") or item.get("form_id") or ""),
                "Submitted at": str(item.get("submitted_at") or ""),
                "Answers": len(answers) if isinstance(answers, dict) else 0,
            }
        )
    return pd.DataFrame(rows, columns=list(SUBMISSION_TABLE_COLUMNS))


def new_form_payload(title: str, description: str = "") -> Dict[str, Any]:
    """Return the payload for a blank draft form."""

    payload: Dict[str, Any] = {"title": title.strip(), "status": "draft", "questions": [], "groups": []}
    if description.strip():
        payload["description"] = description.strip()
    return payload


def status_update(status: str, scheduled_date: Optional[date] = None) -> Dict[str, Any]:
    """Return the store update for a status change; only scheduled forms keep a date."""

    if status not in FORM_STATUSES:
        raise ValueError(f"Unknown form status: {status}")
    when = scheduled_date.isoformat() if status == "scheduled" and scheduled_date else None
    return {"status": status, "scheduledDate": when}


def submission_forms(submissions: Iterable[Dict[str, Any]]) -> Dict[str, str]:
    """Map each stored submission id to the form it belongs to."""

    return {
        str(item["id"]): str(item.get("form_id") or "")
        for item in submissions
        if item.get("id")
    }


def _render_form_admin(store: FormStore, forms: List[Form]) -> None:
    st.subheader("Manage forms")

    with st.form("home_create_form", clear_on_submit=True):
        title = st.text_input("Form title")
        description = st.text_area("Description")
        if st.form_submit_button("Create form"):
            if not title.strip():
                st.error("A form title is required.")
            else:
                created = store.create(new_form_payload(title, description))
                st.success(f"Created draft form `{created.id}`.")
                st.rerun()

    if not forms:
        return

    titles = {form.id: form.title for form in forms}
    by_id = {form.id: form for form in forms}
    form_id = st.selectbox(
        "Form",
        options=list(titles),
        format_func=lambda key: titles.get(key, key),
        key="home_admin_form",
    )
    current = by_id[form_id]
    statuses = sorted(FORM_STATUSES)
    status = st.selectbox(
        "Status",
        options=statuses,
        index=statuses.index(current.status),
        key=f"home_admin_status_{form_id}",
    )
    scheduled_date = None
    if status == "scheduled":
        default_date = None
        if current.scheduled_date:
            try:
                default_date = date.fromisoformat(current.scheduled_date[:10])
            except ValueError:
                default_date = None
        scheduled_date = st.date_input("Scheduled date", value=default_date, key=f"home_admin_date_{form_id}")

    save_col, delete_col = st.columns(2)
    with save_col:
        if st.button("Save status", key="home_admin_save"):
            store.update(form_id, status_update(status, scheduled_date))
            st.rerun()
    with delete_col:
        confirm = st.checkbox("I understand deleting cannot be undone", key=f"home_admin_confirm_{form_id}")
        if st.button("Delete form", key="home_admin_delete", disabled=not confirm):
            try:
                store.delete(form_id)
            except FormNotFoundError:
                st.error(f"Form `{form_id}` no longer exists.")
            st.rerun()


def _render_submissions(submissions: List[Dict[str, Any]]) -> None:
    st.subheader("Submissions")
    if not submissions:
        st.caption("No submissions stored locally yet.")
        return

    st.dataframe(submissions_dataframe(submissions), hide_index=True, use_container_width=True)
    owners = submission_forms(submissions)
    selected = st.selectbox("Submission", options=list(owners), key="home_submission_select")
    if st.button("Delete submission", key="home_submission_delete"):
        removed, failed = delete_submission_files(selected, SUBMISSIONS_ROOT, form_id=owners.get(selected))
        for path in failed:
            st.error(f"Unable to delete {path}.")
        if removed:
            st.success(f"Deleted submission `{selected}`.")
            st.rerun()


def main() -> None:
    """Render the home screen."""

    st.set_page_config(page_title="Registration forms", page_icon="🗂️", layout="wide")
    st.title("Registration forms")
    st.caption("Pick a form to preview or run it as a respondent.")

    store = FormStore()
    forms = store.list()
    submissions = load_submissions(SUBMISSIONS_ROOT)
    rows = form_rows(forms, submissions)
    if not rows:
        st.info("No forms stored yet.")
    else:
        st.dataframe(forms_dataframe(rows), hide_index=True, use_container_width=True)

        form_ids = [form.id for form in forms]
        titles = {form.id: form.title for form in forms}
        selected = st.selectbox("Open form", options=form_ids, format_func=lambda key: titles.get(key, key))
        if st.button("Open in wizard", type="primary"):
            st.session_state[SELECTED_FORM_STATE_KEY] = selected
            st.switch_page("pages/01_Registration.py")

    _render_form_admin(store, forms)
    _render_submissions(submissions)


if __name__ == "__main__":
    main()
