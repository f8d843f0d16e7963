from __future__ import annotations

import json

import httpx
import pytest

from vocab_cards.errors import Corrupt, InvalidName, NotFound, StorageUnavailable
from vocab_cards.config import ClientSettings
from vocab_cards.services.file_access import ApiFileService, Download, FileAccessChain

STATIC_LESSON = [{"eng": "dog", "rus": "sobaka", "display": 1}]


def test_api_chain_lists_reads_and_writes(api_chain, temp_store):
    listed = api_chain.list_files()
    assert listed.ok and listed.provider == "api"
    assert listed.value == ["lesson1", "lesson2"]

    read = api_chain.read_file("lesson2")
    assert read.provider == "api"
    assert read.value[0] == {"eng": "cat", "rus": "kot", "display": 1}

    items = [{"eng": "bird", "rus": "ptitsa", "display": 1}]
    written = api_chain.write_file("lesson2", items)
    assert written.ok and written.provider == "api"
    assert written.value == "lesson2.json updated successfully"
    assert temp_store.read_file("lesson2") == items


def test_invalid_name_never_reaches_a_provider(api_chain):
    result = api_chain.read_file("../secrets")

    assert isinstance(result.error, InvalidName)
    assert result.provider is None
    assert isinstance(api_chain.write_file("a b", []).error, InvalidName)


def test_corrupt_api_file_does_not_fall_through(api_chain, temp_store):
    (temp_store.data_dir / "broken.json").write_text("[{", encoding="utf-8")
    result = api_chain.read_file("broken")

    assert isinstance(result.error, Corrupt)
    assert result.provider == "api"
    assert len(result.failures) == 1


def test_offline_read_falls_back_to_static_copy(offline_chain):
    chain = offline_chain({"lesson1": STATIC_LESSON})

    result = chain.read_file("lesson1")

    assert result.ok
    assert result.provider == "static"
    assert result.value == STATIC_LESSON
    assert isinstance(result.failures[0][1], StorageUnavailable)


def test_offline_missing_everywhere_reports_not_found(offline_chain):
    chain = offline_chain()

    result = chain.read_file("lesson7")

    assert isinstance(result.error, NotFound)
    assert [provider for provider, _ in result.failures] == ["api", "static"]


def test_offline_listing_uses_fallback_names(offline_chain):
    chain = offline_chain()

    result = chain.list_files()

    assert result.provider == "fallback-list"
    assert result.value == ["lesson1", "lesson2", "lesson3"]


def test_offline_write_prepares_download(offline_chain):
    chain = offline_chain()
    items = [{"eng": "window", "rus": "окно", "display": 0}]

    result = chain.write_file("lesson1", items)

    assert result.provider == "download"
    assert isinstance(result.value, Download)
    assert result.value.filename == "lesson1.json"
    assert json.loads(result.value.content) == items
    assert result.value.path.read_text(encoding="utf-8") == result.value.content


def test_timeout_maps_to_storage_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow server", request=request)

    service = ApiFileService(
        "http://slow",
        timeout=0.5,
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )
    with pytest.raises(StorageUnavailable):
        service.read_file("lesson1")


def test_health_endpoint_through_client(client):
    service = ApiFileService("http://testserver", client=client)
    assert service.health()["status"] == "Server is running"


def test_malformed_listing_falls_back_to_known_names(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"files": ["lesson1"]})

    settings = ClientSettings(api_base_url="http://testserver", static_base_url="http://testserver")
    chain = FileAccessChain.default(
        settings,
        client=httpx.Client(transport=httpx.MockTransport(handler)),
        downloads_dir=tmp_path,
    )

    result = chain.list_files()

    assert result.provider == "fallback-list"
    assert isinstance(result.failures[0][1], Corrupt)
