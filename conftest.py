"""Shared fixtures: an in-memory sharing service used as the client's HTTP session."""

import copy
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import pytest
import requests

from nbshare_mcp.clients.sharing import SharingClient
from nbshare_mcp.document import NotebookDocument
from nbshare_mcp.store import NotebookStore
from nbshare_mcp.workflow import ShareWorkflow

API_URL = "http://share.test/api/v1/"

_NO_BODY = object()


class FakeResponse:
    """The subset of ``requests.Response`` the client uses."""

    def __init__(self, status_code: int = 200, body: Any = _NO_BODY, reason: str = "OK"):
        self.status_code = status_code
        self.reason = reason
        self._body = body

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def text(self) -> str:
        if self._body is _NO_BODY:
            return ""
        if isinstance(self._body, str):
            return self._body
        import json

        return json.dumps(self._body)

    def json(self):
        if self._body is _NO_BODY or isinstance(self._body, str):
            raise ValueError("No JSON object could be decoded")
        return copy.deepcopy(self._body)


@dataclass
class RecordedRequest:
    method: str
    path: str
    headers: Dict[str, str]
    body: Any


class FakeSharingBackend:
    """Implements the sharing API in memory and records every request."""

    def __init__(self):
        self.requests: List[RecordedRequest] = []
        self.notebooks: Dict[str, Dict[str, Any]] = {}
        self.valid_tokens: set = set()
        self.queued: List[Any] = []
        self.on_request: Optional[Callable[[RecordedRequest], None]] = None
        self._counter = 0

    # --- Test controls ---

    def queue(self, response) -> None:
        """Answer the next request with ``response`` (a FakeResponse or an exception)."""
        self.queued.append(response)

    def revoke_tokens(self) -> None:
        self.valid_tokens.clear()

    def calls(self, method: str, prefix: str = "") -> List[RecordedRequest]:
        return [r for r in self.requests if r.method == method and r.path.startswith(prefix)]

    # --- requests.Session interface ---

    def request(self, method, url, headers=None, json=None, timeout=None):
        assert url.startswith(API_URL), url
        recorded = RecordedRequest(method, url[len(API_URL):], dict(headers or {}), json)
        self.requests.append(recorded)
        if self.on_request is not None:
            self.on_request(recorded)
        if self.queued:
            queued = self.queued.pop(0)
            if isinstance(queued, Exception):
                raise queued
            return queued
        return self._route(recorded)

    def _route(self, req: RecordedRequest) -> FakeResponse:
        if req.method == "POST" and req.path == "auth/issue":
            return FakeResponse(200, {"token": self._new_token()})
        if req.method == "POST" and req.path == "auth/refresh":
            if (req.body or {}).get("token") not in self.valid_tokens:
                return FakeResponse(401, {"detail": "invalid token"}, reason="Unauthorized")
            return FakeResponse(200, {"token": self._new_token()})

        if not self._authorized(req):
            return FakeResponse(401, {"detail": "invalid token"}, reason="Unauthorized")

        if req.method == "POST" and req.path == "notebooks":
            self._counter += 1
            record = {
                "id": str(uuid.uuid4()),
                "readable_id": f"notebook-{self._counter}",
                "domain_id": "classroom",
                "content": req.body["notebook"],
                "password": req.body.get("password"),
            }
            self.notebooks[record["id"]] = record
            return FakeResponse(201, self._share_body("Notebook created", record), "Created")

        if req.path.startswith("notebooks/get-by-readable-id/"):
            readable_id = req.path.rsplit("/", 1)[1]
            for record in self.notebooks.values():
                if record["readable_id"] == readable_id:
                    return FakeResponse(200, self._notebook_body(record))
            return FakeResponse(404, {"detail": "not found"}, reason="Not Found")

        if req.path.startswith("notebooks/"):
            record = self.notebooks.get(req.path.split("/", 1)[1])
            if record is None:
                return FakeResponse(404, {"detail": "not found"}, reason="Not Found")
            if req.method == "PUT":
                record["content"] = req.body["notebook"]
                return FakeResponse(200, self._share_body("Notebook updated", record))
            if req.method == "GET":
                return FakeResponse(200, self._notebook_body(record))

        return FakeResponse(405, {"detail": "method not allowed"}, reason="Method Not Allowed")

    def _new_token(self) -> str:
        token = f"token-{len(self.valid_tokens) + len(self.requests)}"
        self.valid_tokens.add(token)
        return token

    def _authorized(self, req: RecordedRequest) -> bool:
        auth = req.headers.get("Authorization", "")
        return auth.startswith("Bearer ") and auth[len("Bearer "):] in self.valid_tokens

    @staticmethod
    def _share_body(message, record):
        notebook = {"id": record["id"], "readable_id": record["readable_id"]}
        return {"message": message, "notebook": notebook}

    @staticmethod
    def _notebook_body(record):
        return {
            "id": record["id"],
            "domain_id": record["domain_id"],
            "readable_id": record["readable_id"],
            "content": record["content"],
        }


def make_notebook_dict(source: str = "print('hello')", **metadata) -> Dict[str, Any]:
    """A valid nbformat 4 notebook as decoded JSON."""
    return {
        "cells": [
            {
                "cell_type": "markdown",
                "metadata": {},
                "source": ["# Lab 1\n", "Intro"],
            },
            {
                "cell_type": "code",
                "execution_count": 1,
                "metadata": {"tags": ["setup"]},
                "outputs": [],
                "source": source,
            },
            {"cell_type": "raw", "metadata": {}, "source": ""},
        ],
        "metadata": {
            "kernelspec": {"name": "python3", "display_name": "Python 3"},
            **metadata,
        },
        "nbformat": 4,
        "nbformat_minor": 5,
    }


@pytest.fixture
def backend():
    return FakeSharingBackend()


@pytest.fixture
def client(backend):
    return SharingClient(API_URL, session=backend)


@pytest.fixture
def notebook_dict():
    return make_notebook_dict()


@pytest.fixture
def notebook(notebook_dict):
    return NotebookDocument.from_dict(notebook_dict)


@pytest.fixture
def store(tmp_path):
    return NotebookStore(tmp_path / "notebooks")


@pytest.fixture
def workflow(client, store):
    return ShareWorkflow(client, store, app_url="https://notebooks.test/")


@pytest.fixture
def network_error():
    return requests.ConnectionError("connection refused")
