"""Utilities for building and storing finished registration submissions."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from formwizard.models import Form

log = logging.getLogger("formwizard.submissions")

SUBMISSIONS_ROOT = Path("submissions")
DEFAULT_SUBMISSIONS_PATH = "submissions/{form_id}/{submission_id}.json"


def build_submission(
    form: Form,
    answers: Mapping[str, Any],
    *,
    submission_id: Optional[str] = None,
    submitted_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Return the JSON payload recorded for a completed ``form``."""

    timestamp = submitted_at or datetime.now(timezone.utc)
    return {
        "id": submission_id or uuid.uuid4().hex,
        "form_id": form.id,
        "form_title": form.title,
        "submitted_at": timestamp.isoformat(),
        "answers": json.loads(json.dumps(dict(answers))),
    }


def submission_path(template: str, submission: Mapping[str, Any]) -> str:
    """Format ``template`` with the submission and form identifiers.

    Raises ``KeyError`` when the template uses an unknown placeholder.
    """

    return template.format(submission_id=submission["id"], form_id=submission["form_id"])


def save_submission(submission: Mapping[str, Any], directory: Optional[Path] = None) -> Path:
    """Write ``submission`` to ``<directory>/<form_id>/<id>.json`` and return the path."""

    root = Path(directory) if directory is not None else SUBMISSIONS_ROOT
    target = root / str(submission["form_id"]) / f"{submission['id']}.json"
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        json.dump(dict(submission), handle, indent=2)
    log.info("submission saved • form=%s • id=%s", submission["form_id"], submission["id"])
    return target


def load_submissions(directory: Path) -> List[Dict[str, Any]]:
    """Return every readable submission under ``directory``, newest first."""

    if not directory.exists():
        return []
    records: List[Dict[str, Any]] = []
    for candidate in sorted(directory.rglob("*.json")):
        try:
            with candidate.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError):
            log.warning("submission unreadable • path=%s", candidate)
            continue
        if isinstance(payload, dict):
            records.append(payload)
    return sorted(records, key=lambda item: str(item.get("submitted_at") or ""), reverse=True)


def _stored_id(path: Path) -> str:
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except (OSError, json.JSONDecodeError):
        return ""
    if not isinstance(payload, dict):
        return ""
    return str(payload.get("id") or "").strip()


def delete_submission_files(
    submission_id: str,
    directory: Path,
    *,
    form_id: Optional[str] = None,
) -> Tuple[List[Path], List[Path]]:
    """Delete the stored copies of ``submission_id`` and return ``(removed, failed)``.

    With ``form_id`` only ``<directory>/<form_id>/<submission_id>.json`` is
    removed. Without it every form folder is searched, matching either the
    file name or the ``id`` recorded inside the file.
    """

    normalized_id = str(submission_id or "").strip()
    if not normalized_id or not directory.exists():
        return [], []

    if form_id:
        target = directory / str(form_id) / f"{normalized_id}.json"
        candidates = [target] if target.exists() else []
    else:
        candidates = [
            path
            for path in sorted(directory.rglob("*.json"))
            if path.stem == normalized_id or _stored_id(path) == normalized_id
        ]

    removed: List[Path] = []
    failed: List[Path] = []
    for candidate in candidates:
        try:
            candidate.unlink()
        except OSError:
            log.warning("submission delete failed • path=%s", candidate)
            failed.append(candidate)
        else:
            removed.append(candidate)
    log.info("submission deleted • id=%s • removed=%s • failed=%s", normalized_id, len(removed), len(failed))
    return removed, failed


__all__ = [
    "build_submission",
    "delete_submission_files",
    "load_submissions",
    "save_submission",
    "submission_path",
]
