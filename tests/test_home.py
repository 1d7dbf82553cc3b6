"""Tests for the home screen helpers."""

from __future__ import annotations

import importlib
from datetime import date

import pytest

from formwizard.form_store import FormStore
from formwizard.models import Form, Group, Question


@pytest.fixture
def home():
    return importlib.import_module("Home")


def test_form_rows_count_submissions_per_form(home):
    forms = [
        Form(id="a", title="Alpha", questions=(Question(id="q1"), Question(id="q2")), groups=(Group(id="g"),)),
        Form(id="b", title="Beta", status="published"),
    ]
    submissions = [{"form_id": "a"}, {"form_id": "a"}, {"form_id": "other"}, {}]

    rows = home.form_rows(forms, submissions)

    assert rows == [
        {"Form ID": "a", "Title": "Alpha", "Status": "draft", "Questions": 2, "Groups": 1, "Submissions": 2},
        {"Form ID": "b", "Title": "Beta", "Status": "published", "Questions": 0, "Groups": 0, "Submissions": 0},
    ]


def test_forms_dataframe_keeps_columns_when_empty(home):
    frame = home.forms_dataframe([])

    assert list(frame.columns) == list(home.FORM_TABLE_COLUMNS)
    assert frame.empty


def test_submissions_dataframe_summarises_answers(home):
    frame = home.submissions_dataframe(
        [
            {"id": "s1", "form_id": "a", "form_title": "Alpha", "submitted_at": "2026-01-01", "answers": {"x": "1"}},
            {"id": "s2", "form_id": "b", "answers": None},
        ]
    )

    assert frame["Submission ID"].tolist() == ["s1", "s2"]
    assert frame["Form"].tolist() == ["Alpha", "b"]
    assert frame["Answers"].tolist() == [1, 0]


def test_new_form_payload_creates_blank_draft(home, tmp_path):
    store = FormStore(tmp_path, seed_default=False)

    created = store.create(home.new_form_payload("  Mentors ", "Sign up to mentor"))

    assert created.title == "Mentors"
    assert created.description == "Sign up to mentor"
    assert created.status == "draft"
    assert created.questions == ()
    assert "description" not in home.new_form_payload("Mentors", "  ")


def test_status_update_keeps_date_only_for_scheduled_forms(home, tmp_path):
    store = FormStore(tmp_path, seed_default=False)
    form = store.create(home.new_form_payload("Mentors"))

    scheduled = store.update(form.id, home.status_update("scheduled", date(2026, 11, 1)))
    assert scheduled.status == "scheduled"
    assert scheduled.scheduled_date == "2026-11-01"

    published = store.update(form.id, home.status_update("published", date(2026, 11, 1)))
    assert published.status == "published"
    assert published.scheduled_date is None

    with pytest.raises(ValueError):
        home.status_update("archived")


def test_submission_forms_maps_ids_to_forms(home):
    owners = home.submission_forms([{"id": "s1", "form_id": "a"}, {"id": "s2"}, {"form_id": "b"}])

    assert owners == {"s1": "a", "s2": ""}
