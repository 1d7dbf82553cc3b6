"""Helpers for storing registration form definitions as JSON files."""

from __future__ import annotations

import json
import logging
import shutil
import uuid
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from formwizard.models import Form, _ensure_list, _ensure_mapping
from formwizard.schema_defaults import DEFAULT_THEME, default_form

log = logging.getLogger("formwizard.store")

FORM_SCHEMA_FILENAME = "form_schema.json"
FORMS_ROOT = Path("form_schemas")


class FormNotFoundError(KeyError):
    """Raised when a form id has no stored definition."""


def _normalise_form_payload(form_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Fill in the keys every stored form is expected to carry."""

    entry = _ensure_mapping(payload)
    entry["id"] = str(entry.get("id") or form_id)
    entry["title"] = str(entry.get("title") or entry["id"]).strip() or entry["id"]
    entry["status"] = entry.get("status") or "draft"
    entry["questions"] = _ensure_list(entry.get("questions"))
    entry["groups"] = _ensure_list(entry.get("groups"))
    entry["theme"] = {**DEFAULT_THEME, **_ensure_mapping(entry.get("theme"))}
    return entry


def resolve_remote_form_path(base_path: str, form_id: str) -> str:
    """Return the remote path for ``form_id`` using the ``base_path`` template."""

    if "{form_id}" in base_path:
        return base_path.format(form_id=form_id)
    if "{form}" in base_path:
        return base_path.format(form=form_id)
    if base_path.endswith(".json"):
        return base_path
    return f"{base_path.rstrip('/')}/{form_id}/{FORM_SCHEMA_FILENAME}"


def forms_from_payloads(payloads: Mapping[str, Mapping[str, Any]]) -> Dict[str, Form]:
    """Build :class:`Form` objects from already-loaded payloads."""

    return {key: Form.from_dict(_normalise_form_payload(key, value)) for key, value in payloads.items()}


class FormStore:
    """Create, read, update and delete form definitions under ``root``.

    Each form lives in ``<root>/<form_id>/form_schema.json``. When the store
    directory does not exist yet the default registration form is written on
    first read.
    """

    def __init__(self, root: Optional[Path] = None, *, seed_default: bool = True) -> None:
        self.root = Path(root) if root is not None else FORMS_ROOT
        self.seed_default = seed_default

    def _path(self, form_id: str) -> Path:
        return self.root / form_id / FORM_SCHEMA_FILENAME

    def _discover(self) -> Dict[str, Path]:
        forms: Dict[str, Path] = {}
        if self.root.exists():
            for entry in sorted(self.root.iterdir()):
                if not entry.is_dir():
                    continue
                schema_path = entry / FORM_SCHEMA_FILENAME
                if schema_path.exists():
                    forms[entry.name] = schema_path
        return forms

    def _write(self, payload: Dict[str, Any]) -> None:
        path = self._path(payload["id"])
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)

    def _ensure_seeded(self) -> None:
        if self.seed_default and not self.root.exists():
            log.info("store seeding default form • root=%s", self.root)
            self._write(_normalise_form_payload("", default_form()))

    def load_payloads(self) -> Dict[str, Dict[str, Any]]:
        """Return the raw stored payloads keyed by form id."""

        self._ensure_seeded()
        payloads: Dict[str, Dict[str, Any]] = {}
        for form_id, path in self._discover().items():
            with path.open("r", encoding="utf-8") as handle:
                payloads[form_id] = _normalise_form_payload(form_id, json.load(handle))
        return payloads

    def list(self) -> List[Form]:
        return list(forms_from_payloads(self.load_payloads()).values())

    def form_ids(self) -> List[str]:
        self._ensure_seeded()
        return list(self._discover().keys())

    def get_payload(self, form_id: str) -> Dict[str, Any]:
        self._ensure_seeded()
        path = self._path(form_id)
        if not path.exists():
            raise FormNotFoundError(form_id)
        with path.open("r", encoding="utf-8") as handle:
            return _normalise_form_payload(form_id, json.load(handle))

    def get(self, form_id: str) -> Form:
        return Form.from_dict(self.get_payload(form_id))

    def create(self, payload: Mapping[str, Any]) -> Form:
        """Store a new form under a fresh id and return it.

        The status defaults to ``draft`` and missing theme values are filled
        from the defaults.
        """

        form_id = uuid.uuid4().hex
        entry = _normalise_form_payload(form_id, {**_ensure_mapping(payload), "id": form_id})
        self._write(entry)
        log.info("store created • form=%s", form_id)
        return Form.from_dict(entry)

    def update(self, form_id: str, updates: Mapping[str, Any]) -> Form:
        """Merge ``updates`` into the stored form; theme keys are merged one level deep."""

        current = self.get_payload(form_id)
        changes = _ensure_mapping(updates)
        theme = {**current.get("theme", {}), **_ensure_mapping(changes.pop("theme", None))}
        merged = _normalise_form_payload(form_id, {**current, **changes, "id": form_id, "theme": theme})
        self._write(merged)
        log.info("store updated • form=%s • keys=%s", form_id, sorted(changes))
        return Form.from_dict(merged)

    def delete(self, form_id: str) -> None:
        path = self._path(form_id)
        if not path.exists():
            raise FormNotFoundError(form_id)
        shutil.rmtree(path.parent)
        log.info("store deleted • form=%s", form_id)
