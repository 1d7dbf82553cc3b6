"""Read form definitions from and write submissions to a GitHub repository."""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

import requests

from formwizard.form_store import forms_from_payloads, resolve_remote_form_path
from formwizard.models import Form

log = logging.getLogger("formwizard.github")

REQUEST_TIMEOUT = 10


@dataclass
class GitHubBackend:
    """GitHub Contents API wrapper for JSON files in one repository branch."""

    token: str
    repo: str
    branch: str = "main"
    api_url: str = "https://api.github.com"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
        }

    def _url(self, path: str) -> str:
        return f"{self.api_url.rstrip('/')}/repos/{self.repo}/contents/{path.lstrip('/')}"

    def get_file_sha(self, path: str) -> Optional[str]:
        """Return the blob SHA of ``path`` or ``None`` when it does not exist."""

        response = requests.get(
            self._url(path),
            headers=self._headers(),
            params={"ref": self.branch},
            timeout=REQUEST_TIMEOUT,
        )
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json().get("sha")

    def read_json(self, path: str) -> Dict[str, Any]:
        """Read and decode the JSON document stored at ``path``."""

        response = requests.get(
            self._url(path),
            headers=self._headers(),
            params={"ref": self.branch},
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        payload = response.json()
        encoding = payload.get("encoding", "base64")
        if encoding != "base64":
            raise ValueError(f"Unsupported encoding: {encoding}")
        decoded = base64.b64decode(payload.get("content", "")).decode("utf-8")
        return json.loads(decoded)

    def write_json(self, path: str, data: Dict[str, Any], message: str) -> Dict[str, Any]:
        """Create or replace ``path`` with ``data`` in a single commit."""

        body: Dict[str, Any] = {
            "message": message,
            "branch": self.branch,
            "content": base64.b64encode(json.dumps(data, indent=2).encode("utf-8")).decode("utf-8"),
        }
        sha = self.get_file_sha(path)
        if sha:
            body["sha"] = sha

        response = requests.put(
            self._url(path),
            headers=self._headers(),
            json=body,
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        log.info("github wrote • repo=%s • path=%s", self.repo, path)
        return response.json()

    def load_forms(self, path_template: str, form_ids: Iterable[str]) -> Dict[str, Form]:
        """Fetch every form in ``form_ids`` using ``path_template`` for their paths."""

        payloads = {
            form_id: self.read_json(resolve_remote_form_path(path_template, form_id))
            for form_id in form_ids
        }
        return forms_from_payloads(payloads)
