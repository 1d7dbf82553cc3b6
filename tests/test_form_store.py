"""Tests for the form definition store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from formwizard.form_store import (
    FORM_SCHEMA_FILENAME,
    FormNotFoundError,
    FormStore,
    resolve_remote_form_path,
)
from formwizard.schema_defaults import DEFAULT_THEME


def test_empty_store_is_seeded_with_default_form(tmp_path: Path) -> None:
    store = FormStore(tmp_path / "forms")

    forms = store.list()

    assert [form.id for form in forms] == ["default-user-registration"]
    assert (tmp_path / "forms" / "default-user-registration" / FORM_SCHEMA_FILENAME).exists()


def test_seeding_can_be_disabled(tmp_path: Path) -> None:
    assert FormStore(tmp_path / "forms", seed_default=False).list() == []


def test_create_assigns_id_status_and_theme(tmp_path: Path) -> None:
    store = FormStore(tmp_path, seed_default=False)

    form = store.create({"id": "ignored", "title": "Volunteers", "theme": {"primaryColor": "#222222"}})

    assert form.id != "ignored"
    assert form.status == "draft"
    assert form.theme["primaryColor"] == "#222222"
    assert form.theme["spacing"] == DEFAULT_THEME["spacing"]
    assert store.get(form.id) == form


def test_update_merges_theme_and_fields(tmp_path: Path) -> None:
    store = FormStore(tmp_path, seed_default=False)
    form = store.create({"title": "Volunteers", "theme": {"primaryColor": "#222222"}})

    updated = store.update(
        form.id,
        {
            "status": "published",
            "questions": [{"id": "name", "type": "text", "required": True}],
            "theme": {"buttonStyle": "outline"},
        },
    )

    assert updated.status == "published"
    assert [q.id for q in updated.questions] == ["name"]
    assert updated.theme["primaryColor"] == "#222222"
    assert updated.theme["buttonStyle"] == "outline"

    with (tmp_path / form.id / FORM_SCHEMA_FILENAME).open("r", encoding="utf-8") as handle:
        stored = json.load(handle)
    assert stored["theme"]["buttonStyle"] == "outline"


def test_delete_removes_form(tmp_path: Path) -> None:
    store = FormStore(tmp_path, seed_default=False)
    form = store.create({"title": "Temp"})

    store.delete(form.id)

    assert store.form_ids() == []
    with pytest.raises(FormNotFoundError):
        store.get(form.id)
    with pytest.raises(FormNotFoundError):
        store.delete(form.id)


def test_deleted_default_form_is_not_reseeded(tmp_path: Path) -> None:
    store = FormStore(tmp_path / "forms")
    assert store.form_ids() == ["default-user-registration"]

    store.delete("default-user-registration")

    assert store.list() == []


@pytest.mark.parametrize(
    "template,expected",
    [
        ("forms/{form_id}.json", "forms/abc.json"),
        ("forms/{form}/schema.json", "forms/abc/schema.json"),
        ("forms/all.json", "forms/all.json"),
        ("form_schemas/", "form_schemas/abc/form_schema.json"),
    ],
)
def test_resolve_remote_form_path(template: str, expected: str) -> None:
    assert resolve_remote_form_path(template, "abc") == expected
