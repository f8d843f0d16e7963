from __future__ import annotations

from typing import Iterable

from vocab_cards.session.models import (
    DisplayFilter,
    PrimaryLanguage,
    ScopeKind,
    SessionState,
    WordRecord,
)

SEARCH_FIELDS = ("eng", "rus", "source")


def current_record(state: SessionState) -> WordRecord | None:
    visible = state.visible_records
    if not visible or not 0 <= state.cursor < len(visible):
        return None
    return visible[state.cursor]


def primary_text(state: SessionState) -> str:
    record = current_record(state)
    if record is None:
        return ""
    return record.eng if state.primary_language is PrimaryLanguage.SOURCE else record.rus


def secondary_text(state: SessionState) -> str:
    record = current_record(state)
    if record is None:
        return ""
    return record.rus if state.primary_language is PrimaryLanguage.SOURCE else record.eng


def primary_hint(state: SessionState) -> str:
    if state.primary_language is PrimaryLanguage.SOURCE:
        return "Click to reveal Russian translation"
    return "Click to reveal English translation"


def secondary_hint(state: SessionState) -> str:
    if state.primary_language is PrimaryLanguage.SOURCE:
        return "Russian translation"
    return "English translation"


def display_title(state: SessionState) -> str:
    scope = state.scope
    if scope is None:
        base = ""
    elif scope.kind is ScopeKind.ALL:
        base = "All Vocabulary Files"
    elif scope.kind is ScopeKind.MULTI:
        base = f"Selected Files ({', '.join(scope.names)})"
    else:
        name = scope.names[0] if scope.names else ""
        base = name[:1].upper() + name[1:]
    suffix = " (Active Words)" if state.display_filter is DisplayFilter.ACTIVE else " (All Words)"
    return base + suffix


def search_records(records: Iterable[WordRecord], query: str | None) -> list[WordRecord]:
    """Case-insensitive substring match over the table's searchable columns."""
    needle = str(query or "").strip().lower()
    if not needle:
        return list(records)
    return [
        record
        for record in records
        if any(needle in str(getattr(record, name)).lower() for name in SEARCH_FIELDS)
    ]


def table_rows(state: SessionState) -> list[dict]:
    return [
        {
            "id": record.id,
            "eng": record.eng,
            "rus": record.rus,
            "source": record.source,
            "status": "Active" if record.active else "Inactive",
        }
        for record in search_records(state.visible_records, state.search_query)
    ]
