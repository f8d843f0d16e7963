from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from vocab_cards.errors import DuplicateError, NotFoundError, ValidationError
from vocab_cards.session.models import (
    DisplayFilter,
    LoadedScope,
    PrimaryLanguage,
    ScopeKind,
    SessionState,
    WordRecord,
    new_record_id,
)


@dataclass(frozen=True)
class Transition:
    state: SessionState
    persist: tuple[str, ...] = ()
    record: WordRecord | None = None


def clamp_cursor(cursor: int, length: int) -> int:
    if length <= 0:
        return 0
    return max(0, min(cursor, length - 1))


def _with_records(state: SessionState, records: Iterable[WordRecord], **changes) -> SessionState:
    updated = replace(state, all_records=tuple(records), **changes)
    return replace(updated, cursor=clamp_cursor(updated.cursor, len(updated.visible_records)))


def _persist_owner(state: SessionState, source: str, record: WordRecord | None = None) -> Transition:
    # Only a single-file view writes through; multi/all views remember the lesson instead.
    if state.single_file is not None:
        return Transition(state=state, persist=(source,), record=record)
    return Transition(state=replace(state, dirty_files=state.dirty_files | {source}), record=record)


def _require_text(eng: str | None, rus: str | None) -> tuple[str, str]:
    eng_clean = str(eng or "").strip()
    rus_clean = str(rus or "").strip()
    if not eng_clean or not rus_clean:
        raise ValidationError("Please fill in both English and Russian fields")
    return eng_clean, rus_clean


def _require_display(display) -> int:
    if isinstance(display, bool):
        return int(display)
    if display not in (0, 1):
        raise ValidationError("display must be 0 or 1")
    return int(display)


def _require_record(state: SessionState, record_id: str) -> WordRecord:
    record = state.find(record_id)
    if record is None:
        raise NotFoundError(f"word {record_id} not found")
    return record


def begin_load(state: SessionState) -> tuple[SessionState, int]:
    request_id = state.load_request + 1
    return replace(state, load_request=request_id), request_id


def complete_load(
    state: SessionState,
    request_id: int,
    scope: LoadedScope,
    loaded: Sequence[tuple[str, Sequence[dict]]],
) -> Transition:
    """Replace the record set with freshly loaded lessons.

    A completion whose `request_id` is older than the newest `begin_load`
    is stale and leaves the state untouched.
    """
    if request_id != state.load_request:
        return Transition(state=state)

    records = [
        WordRecord.from_file_item(item, source=name)
        for name, items in loaded
        for item in items
    ]
    selected = scope.names if scope.kind is ScopeKind.MULTI else ()
    return Transition(
        state=replace(
            state,
            all_records=tuple(records),
            scope=scope,
            cursor=0,
            revealed=False,
            selected_files=selected,
            dirty_files=frozenset(),
        )
    )


def clear_records(state: SessionState) -> SessionState:
    return replace(
        state,
        all_records=(),
        scope=None,
        cursor=0,
        revealed=False,
        selected_files=(),
        dirty_files=frozenset(),
    )


def select_file(state: SessionState, name: str, *, extend: bool) -> SessionState:
    if not extend:
        return replace(state, selected_files=())
    if name in state.selected_files:
        selected = tuple(item for item in state.selected_files if item != name)
    else:
        selected = state.selected_files + (name,)
    return replace(state, selected_files=selected)


def set_display_filter(state: SessionState, display_filter: DisplayFilter) -> SessionState:
    return replace(state, display_filter=DisplayFilter(display_filter), cursor=0, revealed=False)


def add_record(
    state: SessionState,
    eng: str,
    rus: str,
    display: int,
    target_file: str | None,
    *,
    record_id: str | None = None,
) -> Transition:
    eng_clean, rus_clean = _require_text(eng, rus)
    target = str(target_file or "").strip()
    if not target:
        raise ValidationError("Please fill in all required fields")
    if state.scope is None:
        raise ValidationError("Load a vocabulary file before adding words")
    if state.scope.kind is not ScopeKind.SINGLE:
        raise ValidationError("Select a single vocabulary file to add words")
    if target != state.single_file:
        raise ValidationError(f"New words can only be added to {state.single_file}")
    display_value = _require_display(display)

    key = (eng_clean.lower(), rus_clean.lower())
    if any(record.source == target and record.pair_key() == key for record in state.all_records):
        raise DuplicateError("This word combination already exists in the selected file")

    record = WordRecord(
        id=record_id or new_record_id(),
        eng=eng_clean,
        rus=rus_clean,
        display=display_value,
        source=target,
    )
    updated = _with_records(state, state.all_records + (record,))
    return Transition(state=updated, persist=(target,), record=record)


def edit_record(state: SessionState, record_id: str, eng: str, rus: str, display: int) -> Transition:
    current = _require_record(state, record_id)
    eng_clean, rus_clean = _require_text(eng, rus)
    edited = replace(current, eng=eng_clean, rus=rus_clean, display=_require_display(display))
    records = [edited if record.id == record_id else record for record in state.all_records]
    return _persist_owner(_with_records(state, records), current.source, edited)


def delete_record(state: SessionState, record_id: str) -> Transition:
    current = _require_record(state, record_id)
    records = [record for record in state.all_records if record.id != record_id]
    return _persist_owner(_with_records(state, records), current.source, current)


def toggle_active(state: SessionState, record_id: str) -> Transition:
    current = _require_record(state, record_id)
    toggled = replace(current, display=0 if current.display == 1 else 1)
    records = [toggled if record.id == record_id else record for record in state.all_records]
    return _persist_owner(_with_records(state, records), current.source, toggled)


def toggle_current(state: SessionState) -> Transition:
    visible = state.visible_records
    if not visible:
        return Transition(state=state)
    return toggle_active(state, visible[clamp_cursor(state.cursor, len(visible))].id)


def advance_card(state: SessionState, direction: int) -> SessionState:
    if direction not in (1, -1):
        raise ValueError("direction must be +1 or -1")
    length = len(state.visible_records)
    if length == 0:
        return state
    hidden = replace(state, revealed=False)
    return replace(hidden, cursor=(hidden.cursor + direction) % length)


def jump_to_card(state: SessionState, index: int) -> SessionState:
    return replace(state, revealed=False, cursor=clamp_cursor(index, len(state.visible_records)))


def reveal_card(state: SessionState) -> SessionState:
    return replace(state, revealed=not state.revealed)


def set_primary_language(state: SessionState, language: PrimaryLanguage) -> SessionState:
    return replace(state, primary_language=PrimaryLanguage(language), revealed=False)


def set_search_query(state: SessionState, text: str | None) -> SessionState:
    return replace(state, search_query=str(text or ""))


def clear_search(state: SessionState) -> SessionState:
    return replace(state, search_query="")


def mark_saved(state: SessionState, name: str) -> SessionState:
    return replace(state, dirty_files=state.dirty_files - {name})


def file_items(records: Iterable[WordRecord], name: str) -> list[dict]:
    """Serialize records owned by `name`, refusing records tagged with another lesson."""
    items: list[dict] = []
    for record in records:
        if record.source != name:
            raise ValidationError(f"word {record.id} belongs to {record.source}, not {name}")
        items.append(record.to_file_item())
    return items


def records_for_file(state: SessionState, name: str) -> list[dict]:
    """Items to write for `name`.

    A single-lesson scope writes every loaded record, so each one must belong to
    that lesson. Multi and all scopes write only the records sourced from it.
    """
    scope = state.scope
    if scope is not None and scope.kind is ScopeKind.SINGLE and scope.single_file == name:
        return file_items(state.all_records, name)
    return file_items((record for record in state.all_records if record.source == name), name)
