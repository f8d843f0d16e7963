from __future__ import annotations

import json
import sys
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import vocab_cards.app as app_module
from vocab_cards.config import ClientSettings
from vocab_cards.services.file_access import FileAccessChain
from vocab_cards.storage.files import FileStore

LESSONS = {
    "lesson1": [
        {"eng": "dog", "rus": "sobaka", "display": 1},
        {"eng": "fox", "rus": "lisa", "display": 0},
    ],
    "lesson2": [
        {"eng": "cat", "rus": "kot", "display": 1},
        {"eng": "house", "rus": "dom", "display": 1},
    ],
}


@pytest.fixture()
def temp_store(tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    for name, items in LESSONS.items():
        (data_dir / f"{name}.json").write_text(json.dumps(items, indent=2), encoding="utf-8")
    return FileStore(data_dir)


@pytest.fixture()
def client(temp_store, monkeypatch):
    monkeypatch.setattr(app_module, "store", temp_store)
    with TestClient(app_module.app) as c:
        yield c


def offline_client(static_lessons: dict | None = None) -> httpx.Client:
    """Client whose API calls fail to connect while /data/<name>.json serves `static_lessons`."""
    static_lessons = static_lessons or {}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith("/api/"):
            raise httpx.ConnectError("connection refused", request=request)
        name = request.url.path.rsplit("/", 1)[-1].removesuffix(".json")
        if name in static_lessons:
            return httpx.Response(200, json=static_lessons[name])
        return httpx.Response(404)

    return httpx.Client(transport=httpx.MockTransport(handler))


def chain_for(http_client: httpx.Client, tmp_path) -> FileAccessChain:
    settings = ClientSettings(
        api_base_url="http://testserver",
        static_base_url="http://testserver",
        fallback_files=("lesson1", "lesson2", "lesson3"),
    )
    return FileAccessChain.default(settings, client=http_client, downloads_dir=tmp_path / "downloads")


@pytest.fixture()
def api_chain(client, tmp_path):
    return chain_for(client, tmp_path)


@pytest.fixture()
def offline_chain(tmp_path):
    def make(static_lessons: dict | None = None) -> FileAccessChain:
        return chain_for(offline_client(static_lessons), tmp_path)

    return make
