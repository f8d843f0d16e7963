from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

import httpx

from vocab_cards.config import DOWNLOADS_DIR, ClientSettings, client_settings
from vocab_cards.errors import (
    FILE_ACCESS_ERRORS,
    Corrupt,
    FileAccessError,
    InvalidName,
    NotFound,
    StorageUnavailable,
    VocabError,
)
from vocab_cards.storage.files import dump_word_pairs, validate_name, validate_word_pairs

logger = logging.getLogger(__name__)


@dataclass
class Download:
    filename: str
    content: str
    path: Path | None = None


@dataclass
class AccessResult:
    value: Any = None
    provider: str | None = None
    error: VocabError | None = None
    failures: list[tuple[str, FileAccessError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


class _HttpProvider:
    name = "http"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = client

    def _request(self, method: str, path: str, *, name: str | None = None, **kwargs) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            if self.client is not None:
                return self.client.request(method, url, timeout=self.timeout, **kwargs)
            with httpx.Client(timeout=self.timeout) as client:
                return client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise StorageUnavailable(name, f"{self.name} timed out after {self.timeout}s") from exc
        except httpx.TransportError as exc:
            raise StorageUnavailable(name, f"{self.name} unreachable: {exc}") from exc

    @staticmethod
    def _json(resp: httpx.Response, name: str | None) -> Any:
        try:
            return resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise Corrupt(name, f"response for {name or 'request'} is not valid JSON") from exc


class ApiFileService(_HttpProvider):
    """Client for the File Access Service HTTP surface."""

    name = "api"

    def list_files(self) -> list[str]:
        resp = self._request("GET", "/api/files")
        if resp.status_code >= 400:
            # Older servers have no listing endpoint at all.
            raise StorageUnavailable(None, f"file listing unavailable (HTTP {resp.status_code})")
        data = self._json(resp, None)
        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            raise Corrupt(None, "file listing is not an array of names")
        return list(data)

    def read_file(self, name: str) -> list[dict]:
        resp = self._request("GET", f"/api/data/{name}", name=name)
        self._raise_for_error(resp, name)
        return validate_word_pairs(self._json(resp, name), name=name)

    def write_file(self, name: str, items: Sequence[dict]) -> str:
        payload = json.loads(dump_word_pairs(items))
        resp = self._request("POST", f"/api/save/{name}", name=name, json=payload)
        self._raise_for_error(resp, name)
        body = self._json(resp, name)
        if not isinstance(body, dict) or not body.get("success"):
            raise StorageUnavailable(name, f"save of {name} was not acknowledged")
        return str(body.get("message") or f"{name}.json updated successfully")

    def health(self) -> dict:
        resp = self._request("GET", "/api/health")
        self._raise_for_error(resp, None)
        return self._json(resp, None)

    def _raise_for_error(self, resp: httpx.Response, name: str | None) -> None:
        if resp.status_code < 400:
            return
        detail: Any = None
        try:
            detail = resp.json().get("detail")
        except (ValueError, AttributeError):
            detail = None
        if isinstance(detail, dict) and detail.get("error") in FILE_ACCESS_ERRORS:
            raise FILE_ACCESS_ERRORS[detail["error"]](name, str(detail.get("message") or detail["error"]))
        if resp.status_code == 400:
            raise InvalidName(name, "Invalid file name")
        if resp.status_code == 404:
            raise NotFound(name, f"{name}.json not found")
        raise StorageUnavailable(name, f"file service error (HTTP {resp.status_code})")


class StaticFileSource(_HttpProvider):
    """Read-only copy of the lessons served alongside the page under /data."""

    name = "static"

    def read_file(self, name: str) -> list[dict]:
        resp = self._request("GET", f"/data/{name}.json", name=name)
        if resp.status_code == 404:
            raise NotFound(name, f"static {name}.json not found")
        if resp.status_code >= 400:
            raise StorageUnavailable(name, f"static copy unavailable (HTTP {resp.status_code})")
        return validate_word_pairs(self._json(resp, name), name=name)


class StaticFileList:
    name = "fallback-list"

    def __init__(self, names: Sequence[str]) -> None:
        self.names = list(names)

    def list_files(self) -> list[str]:
        return list(self.names)


class DownloadSink:
    """Last resort for writes: render the lesson JSON for the user to save by hand."""

    name = "download"

    def __init__(self, directory: Path | None = DOWNLOADS_DIR) -> None:
        self.directory = directory

    def write_file(self, name: str, items: Sequence[dict]) -> Download:
        download = Download(filename=f"{name}.json", content=dump_word_pairs(items))
        if self.directory is None:
            return download
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            target = self.directory / download.filename
            target.write_text(download.content, encoding="utf-8")
        except OSError as exc:
            raise StorageUnavailable(name, f"cannot prepare download for {name}: {exc}") from exc
        download.path = target
        return download


class FileAccessChain:
    """Ordered providers per capability; the first one that answers wins."""

    def __init__(self, *, listers: Sequence, readers: Sequence, writers: Sequence) -> None:
        self.listers = list(listers)
        self.readers = list(readers)
        self.writers = list(writers)

    @classmethod
    def default(
        cls,
        settings: ClientSettings | None = None,
        *,
        client: httpx.Client | None = None,
        downloads_dir: Path | None = DOWNLOADS_DIR,
    ) -> FileAccessChain:
        settings = settings or client_settings()
        api = ApiFileService(settings.api_base_url, timeout=settings.timeout_sec, client=client)
        static = StaticFileSource(settings.static_base_url, timeout=settings.timeout_sec, client=client)
        return cls(
            listers=[api, StaticFileList(settings.fallback_files)],
            readers=[api, static],
            writers=[api, DownloadSink(downloads_dir)],
        )

    def list_files(self) -> AccessResult:
        return self._run(self.listers, "list_files", (), fallthrough=(StorageUnavailable, Corrupt))

    def read_file(self, name: str) -> AccessResult:
        try:
            validate_name(name)
        except InvalidName as exc:
            return AccessResult(error=exc, failures=[("validation", exc)])
        return self._run(self.readers, "read_file", (name,), fallthrough=(StorageUnavailable, NotFound))

    def write_file(self, name: str, items: Sequence[dict]) -> AccessResult:
        try:
            validate_name(name)
        except InvalidName as exc:
            return AccessResult(error=exc, failures=[("validation", exc)])
        return self._run(self.writers, "write_file", (name, items), fallthrough=(StorageUnavailable,))

    def _run(self, providers: Sequence, method: str, args: tuple, *, fallthrough: tuple) -> AccessResult:
        failures: list[tuple[str, FileAccessError]] = []
        for provider in providers:
            try:
                value = getattr(provider, method)(*args)
            except FileAccessError as exc:
                failures.append((provider.name, exc))
                if isinstance(exc, fallthrough):
                    logger.info("%s.%s failed (%s), trying next provider", provider.name, method, exc)
                    continue
                return AccessResult(provider=provider.name, error=exc, failures=failures)
            return AccessResult(value=value, provider=provider.name, failures=failures)

        if failures:
            return AccessResult(provider=failures[-1][0], error=failures[-1][1], failures=failures)
        return AccessResult(error=StorageUnavailable(None, f"no provider for {method}"))
