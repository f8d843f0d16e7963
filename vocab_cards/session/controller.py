from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from vocab_cards.errors import FileAccessError, NotFoundError, SessionError, ValidationError
from vocab_cards.services.file_access import AccessResult, Download, FileAccessChain
from vocab_cards.session import transitions
from vocab_cards.session.models import (
    DisplayFilter,
    LoadedScope,
    PrimaryLanguage,
    SessionState,
    WordRecord,
)
from vocab_cards.session.transitions import Transition

logger = logging.getLogger(__name__)


@dataclass
class Notice:
    severity: str
    summary: str
    detail: str


@dataclass
class LoadReport:
    loaded: list[str] = field(default_factory=list)
    failed: dict[str, FileAccessError] = field(default_factory=dict)
    applied: bool = False

    @property
    def ok(self) -> bool:
        return self.applied and not self.failed


class VocabularySession:
    """Holds one study session and wires pure transitions to file access and notices."""

    def __init__(
        self,
        files: FileAccessChain | None = None,
        *,
        notify: Callable[[Notice], None] | None = None,
        state: SessionState | None = None,
    ) -> None:
        self.files = files or FileAccessChain.default()
        self.state = state or SessionState()
        self.available_files: list[str] = []
        self.notices: list[Notice] = []
        self.downloads: list[Download] = []
        self._notify = notify

    # -- notifications -------------------------------------------------

    def _show(self, severity: str, summary: str, detail: str) -> Notice:
        notice = Notice(severity=severity, summary=summary, detail=detail)
        self.notices.append(notice)
        if self._notify is not None:
            self._notify(notice)
        return notice

    # -- loading -------------------------------------------------------

    def refresh_files(self) -> list[str]:
        result = self.files.list_files()
        if not result.ok:
            logger.error("Error getting file list: %s", result.error)
            self._show("error", "Error", "Failed to list vocabulary files")
            self.available_files = []
            return self.available_files
        self.available_files = list(result.value)
        logger.info("Loaded files from %s: %s", result.provider, self.available_files)
        return self.available_files

    def _fetch(self, names: Sequence[str], report: LoadReport) -> list[tuple[str, list[dict]]]:
        loaded: list[tuple[str, list[dict]]] = []
        for name in names:
            result = self.files.read_file(name)
            if not result.ok:
                logger.error("Error loading %s.json: %s", name, result.error)
                report.failed[name] = result.error
                continue
            if result.provider != "api":
                logger.info("Loaded %s.json from %s", name, result.provider)
            loaded.append((name, result.value))
            report.loaded.append(name)
        return loaded

    def _complete(self, request_id: int, scope: LoadedScope, loaded, report: LoadReport) -> None:
        before = self.state
        self.state = transitions.complete_load(self.state, request_id, scope, loaded).state
        report.applied = self.state is not before
        if not report.applied:
            logger.warning("Discarding stale load %s for %s", request_id, list(scope.names))

    def load_single(self, name: str) -> LoadReport:
        report = LoadReport()
        self.state, request_id = transitions.begin_load(self.state)
        loaded = self._fetch([name], report)
        if report.failed:
            self._show("error", "Error", f"Failed to load {name}.json")
            return report
        self._complete(request_id, LoadedScope.single(name), loaded, report)
        return report

    def load_multiple(self, names: Sequence[str]) -> LoadReport:
        names = list(names)
        report = LoadReport()
        self.state, request_id = transitions.begin_load(self.state)
        loaded = self._fetch(names, report)
        self._complete(request_id, LoadedScope.multi(names), loaded, report)
        self._report_partial(report)
        if report.applied:
            self._show("success", "Loaded", f"Loaded {len(report.loaded)} files: {', '.join(report.loaded)}")
        return report

    def load_all(self) -> LoadReport:
        names = self.available_files or self.refresh_files()
        report = LoadReport()
        self.state, request_id = transitions.begin_load(self.state)
        loaded = self._fetch(names, report)
        self._complete(request_id, LoadedScope.all_files(names), loaded, report)
        self._report_partial(report)
        return report

    def _report_partial(self, report: LoadReport) -> None:
        if report.failed:
            self._show(
                "warn",
                "Partially loaded",
                f"Failed to load: {', '.join(f'{name}.json' for name in report.failed)}",
            )

    def select_file(self, name: str, *, extend: bool = False) -> LoadReport:
        """Plain click loads one lesson; shift-click toggles it in a multi selection."""
        self.state = transitions.select_file(self.state, name, extend=extend)
        if not extend:
            return self.load_single(name)
        if self.state.selected_files:
            return self.load_multiple(self.state.selected_files)
        self.state = transitions.clear_records(self.state)
        return LoadReport(applied=True)

    # -- mutations -----------------------------------------------------

    def _attempt(self, func, *args) -> Transition | None:
        try:
            transition = func(self.state, *args)
        except NotFoundError as exc:
            self._show("error", "Error", str(exc))
            return None
        except SessionError as exc:
            self._show("warn", "Warning", str(exc))
            return None
        self.state = transition.state
        for name in transition.persist:
            self._save(name)
        return transition

    def add_record(self, eng: str, rus: str, display: int = 1, target_file: str | None = None) -> WordRecord | None:
        target = target_file if target_file is not None else self.state.single_file
        transition = self._attempt(transitions.add_record, eng, rus, display, target)
        if transition is None:
            return None
        self._show("success", "Success", "New word added successfully")
        return transition.record

    def edit_record(self, record_id: str, eng: str, rus: str, display: int) -> WordRecord | None:
        transition = self._attempt(transitions.edit_record, record_id, eng, rus, display)
        if transition is None:
            return None
        self._show("success", "Success", "Word updated successfully")
        return transition.record

    def delete_record(self, record_id: str) -> bool:
        transition = self._attempt(transitions.delete_record, record_id)
        if transition is None:
            return False
        self._show("success", "Success", "Word deleted successfully")
        return True

    def toggle_active(self, record_id: str) -> WordRecord | None:
        return self._status_changed(self._attempt(transitions.toggle_active, record_id))

    def toggle_current(self) -> WordRecord | None:
        return self._status_changed(self._attempt(transitions.toggle_current))

    def _status_changed(self, transition: Transition | None) -> WordRecord | None:
        if transition is None or transition.record is None:
            return None
        record = transition.record
        status = "Active" if record.active else "Inactive"
        self._show("info", "Status Changed", f'Word "{record.eng}" is now {status}')
        return record

    # -- persistence ---------------------------------------------------

    def _save(self, name: str) -> AccessResult:
        try:
            items = transitions.records_for_file(self.state, name)
        except ValidationError as exc:
            logger.error("Refusing to save %s.json: %s", name, exc)
            self._show("error", "Error", f"Failed to save changes: {exc}")
            return AccessResult(error=exc)
        result = self.files.write_file(name, items)
        if not result.ok:
            logger.error("Error saving %s.json: %s", name, result.error)
            self._show("error", "Error", f"Failed to save changes: {result.error}")
            return result
        if isinstance(result.value, Download):
            self.downloads.append(result.value)
            logger.warning("File service offline, prepared %s for download", result.value.filename)
            self._show("warn", "Server Offline", "Server not running. Downloading file instead.")
            self._show("info", "Downloaded", f"{name}.json downloaded. Replace in public/data/ folder.")
            return result
        self.state = transitions.mark_saved(self.state, name)
        logger.info("Successfully saved %s.json (%d words)", name, len(items))
        self._show("success", "Saved", f"Changes saved to {name}.json")
        return result

    def save_dirty(self) -> dict[str, AccessResult]:
        """Persist lessons edited while a multi-file or all-files view was open."""
        return {name: self._save(name) for name in sorted(self.state.dirty_files)}

    # -- view state ----------------------------------------------------

    def set_display_filter(self, display_filter: DisplayFilter) -> None:
        self.state = transitions.set_display_filter(self.state, display_filter)

    def advance_card(self, direction: int) -> None:
        self.state = transitions.advance_card(self.state, direction)

    def next_card(self) -> None:
        self.advance_card(1)

    def prev_card(self) -> None:
        self.advance_card(-1)

    def reveal_card(self) -> None:
        self.state = transitions.reveal_card(self.state)

    def set_primary_language(self, language: PrimaryLanguage) -> None:
        self.state = transitions.set_primary_language(self.state, language)

    def search(self, text: str) -> None:
        self.state = transitions.set_search_query(self.state, text)

    def clear_search(self) -> None:
        self.state = transitions.clear_search(self.state)
