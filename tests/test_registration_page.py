"""Tests for the registration page helpers."""

from __future__ import annotations

import importlib
from datetime import date
from pathlib import Path

import pytest

from formwizard.models import Form, Question


@pytest.fixture
def registration():
    return importlib.import_module("pages.01_Registration")


@pytest.fixture
def form() -> Form:
    return Form(id="volunteers", title="Volunteers", questions=(Question(id="name", type="text", label="Name"),))


def test_store_submission_on_github(monkeypatch, registration, form: Form):
    """Finished answers should be written to GitHub when a token is configured."""

    captured = {}

    class DummyBackend:
        def write_json(self, path, data, message):
            captured["path"] = path
            captured["payload"] = data
            captured["message"] = message
            return {"ok": True}

    settings = {
        "token": "secret-token",
        "repo": "example/repo",
        "branch": "main",
        "api_url": "https://enterprise.example/api/v3",
        "submissions_path": "registrations/{form_id}/{submission_id}.json",
    }
    monkeypatch.setattr(registration, "_github_settings", lambda: settings)
    monkeypatch.setattr(registration, "_backend", lambda _settings: DummyBackend())

    errors = []
    monkeypatch.setattr(registration.st, "error", lambda message: errors.append(message))

    submission_id = registration.store_submission(form, {"name": "Ada"})

    assert submission_id
    assert captured["path"] == f"registrations/volunteers/{submission_id}.json"
    assert captured["payload"]["answers"] == {"name": "Ada"}
    assert submission_id in captured["message"]
    assert errors == []


def test_store_submission_reports_bad_template(monkeypatch, registration, form: Form):
    settings = {"token": "secret-token", "repo": "example/repo", "submissions_path": "subs/{nope}.json"}
    monkeypatch.setattr(registration, "_github_settings", lambda: settings)

    errors = []
    monkeypatch.setattr(registration.st, "error", lambda message: errors.append(message))

    assert registration.store_submission(form, {"name": "Ada"}) is None
    assert errors


def test_store_submission_reports_github_failure(monkeypatch, registration, form: Form):
    class FailingBackend:
        def write_json(self, path, data, message):
            raise registration.requests.ConnectionError("offline")

    settings = {"token": "secret-token", "repo": "example/repo", "submissions_path": "subs/{submission_id}.json"}
    monkeypatch.setattr(registration, "_github_settings", lambda: settings)
    monkeypatch.setattr(registration, "_backend", lambda _settings: FailingBackend())

    errors = []
    monkeypatch.setattr(registration.st, "error", lambda message: errors.append(message))

    assert registration.store_submission(form, {"name": "Ada"}) is None
    assert errors


def test_store_submission_saves_locally_without_github(monkeypatch, registration, form: Form):
    saved = []
    monkeypatch.setattr(registration, "_github_settings", lambda: {})
    monkeypatch.setattr(registration, "save_submission", lambda submission: saved.append(submission) or Path("x"))

    submission_id = registration.store_submission(form, {"name": "Ada"})

    assert [item["id"] for item in saved] == [submission_id]
    assert saved[0]["form_id"] == "volunteers"


@pytest.mark.parametrize(
    "question,value,expected",
    [
        (Question(id="q", type="text"), None, ""),
        (Question(id="q", type="text"), "Ada", "Ada"),
        (Question(id="q", type="select"), "— Select an option —", ""),
        (Question(id="q", type="select"), "blue", "blue"),
        (Question(id="q", type="multiselect"), ("a", "b"), ["a", "b"]),
        (Question(id="q", type="date"), date(2026, 10, 16), "2026-10-16"),
    ],
)
def test_answer_from_widget(registration, question: Question, value, expected):
    assert registration.answer_from_widget(question, value) == expected
