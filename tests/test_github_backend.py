"""Tests for the GitHub Contents API backend."""

from __future__ import annotations

import base64
import json
from typing import Any, Dict, List, Optional

import pytest
import requests

from formwizard import github_backend
from formwizard.github_backend import GitHubBackend


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Optional[Dict[str, Any]] = None) -> None:
        self.status_code = status_code
        self._payload = payload or {}

    def json(self) -> Dict[str, Any]:
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")


def _encoded(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "encoding": "base64",
        "content": base64.b64encode(json.dumps(data).encode("utf-8")).decode("utf-8"),
        "sha": "abc",
    }


@pytest.fixture
def backend() -> GitHubBackend:
    return GitHubBackend(token="t0ken", repo="acme/forms", branch="dev", api_url="https://ghe.example/api/v3/")


def test_read_json_decodes_content(monkeypatch, backend: GitHubBackend) -> None:
    calls: List[Dict[str, Any]] = []

    def fake_get(url, headers, params, timeout):
        calls.append({"url": url, "headers": headers, "params": params})
        return FakeResponse(payload=_encoded({"id": "f1"}))

    monkeypatch.setattr(github_backend.requests, "get", fake_get)

    assert backend.read_json("forms/f1.json") == {"id": "f1"}
    assert calls[0]["url"] == "https://ghe.example/api/v3/repos/acme/forms/contents/forms/f1.json"
    assert calls[0]["params"] == {"ref": "dev"}
    assert calls[0]["headers"]["Authorization"] == "Bearer t0ken"


def test_read_json_rejects_unknown_encoding(monkeypatch, backend: GitHubBackend) -> None:
    monkeypatch.setattr(
        github_backend.requests,
        "get",
        lambda *args, **kwargs: FakeResponse(payload={"encoding": "none", "content": "{}"}),
    )

    with pytest.raises(ValueError):
        backend.read_json("forms/f1.json")


def test_write_json_includes_existing_sha(monkeypatch, backend: GitHubBackend) -> None:
    captured: Dict[str, Any] = {}

    monkeypatch.setattr(
        github_backend.requests, "get", lambda *args, **kwargs: FakeResponse(payload={"sha": "old-sha"})
    )

    def fake_put(url, headers, json, timeout):
        captured["url"] = url
        captured["body"] = json
        return FakeResponse(payload={"content": {"path": "subs/1.json"}})

    monkeypatch.setattr(github_backend.requests, "put", fake_put)

    result = backend.write_json("subs/1.json", {"id": "1"}, "Add registration 1")

    assert result == {"content": {"path": "subs/1.json"}}
    assert captured["body"]["sha"] == "old-sha"
    assert captured["body"]["branch"] == "dev"
    decoded = base64.b64decode(captured["body"]["content"]).decode("utf-8")
    assert json.loads(decoded) == {"id": "1"}


def test_write_json_creates_new_file(monkeypatch, backend: GitHubBackend) -> None:
    captured: Dict[str, Any] = {}
    monkeypatch.setattr(github_backend.requests, "get", lambda *args, **kwargs: FakeResponse(status_code=404))

    def fake_put(url, headers, json, timeout):
        captured["body"] = json
        return FakeResponse(payload={})

    monkeypatch.setattr(github_backend.requests, "put", fake_put)

    backend.write_json("subs/2.json", {"id": "2"}, "Add registration 2")

    assert "sha" not in captured["body"]


def test_load_forms_resolves_paths(monkeypatch, backend: GitHubBackend) -> None:
    requested: List[str] = []

    def fake_get(url, headers, params, timeout):
        requested.append(url)
        form_id = url.rsplit("/", 2)[-2]
        return FakeResponse(payload=_encoded({"title": form_id.upper(), "questions": [{"id": "q"}]}))

    monkeypatch.setattr(github_backend.requests, "get", fake_get)

    forms = backend.load_forms("form_schemas/{form_id}/form_schema.json", ["alpha", "beta"])

    assert sorted(forms) == ["alpha", "beta"]
    assert forms["alpha"].id == "alpha"
    assert forms["beta"].title == "BETA"
    assert requested[0].endswith("/contents/form_schemas/alpha/form_schema.json")


def test_http_errors_propagate(monkeypatch, backend: GitHubBackend) -> None:
    monkeypatch.setattr(github_backend.requests, "get", lambda *args, **kwargs: FakeResponse(status_code=500))

    with pytest.raises(requests.RequestException):
        backend.read_json("forms/f1.json")
