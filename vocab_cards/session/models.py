from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum


class DisplayFilter(str, Enum):
    ACTIVE = "active"
    ALL = "all"


class PrimaryLanguage(str, Enum):
    SOURCE = "english"
    TARGET = "russian"


class ScopeKind(str, Enum):
    SINGLE = "SINGLE"
    MULTI = "MULTI"
    ALL = "ALL"


def new_record_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class WordRecord:
    id: str
    eng: str
    rus: str
    display: int
    source: str

    @property
    def active(self) -> bool:
        return self.display == 1

    def pair_key(self) -> tuple[str, str]:
        return (self.eng.strip().lower(), self.rus.strip().lower())

    def to_file_item(self) -> dict:
        return {"eng": self.eng, "rus": self.rus, "display": self.display}

    @classmethod
    def from_file_item(cls, item: dict, source: str, record_id: str | None = None) -> WordRecord:
        return cls(
            id=record_id or new_record_id(),
            eng=str(item["eng"]),
            rus=str(item["rus"]),
            display=1 if int(item["display"]) == 1 else 0,
            source=source,
        )


@dataclass(frozen=True)
class LoadedScope:
    kind: ScopeKind
    names: tuple[str, ...] = ()

    @classmethod
    def single(cls, name: str) -> LoadedScope:
        return cls(ScopeKind.SINGLE, (name,))

    @classmethod
    def multi(cls, names) -> LoadedScope:
        return cls(ScopeKind.MULTI, tuple(names))

    @classmethod
    def all_files(cls, names=()) -> LoadedScope:
        return cls(ScopeKind.ALL, tuple(names))

    @property
    def single_file(self) -> str | None:
        if self.kind is ScopeKind.SINGLE and self.names:
            return self.names[0]
        return None


def apply_display_filter(records, display_filter: DisplayFilter) -> tuple[WordRecord, ...]:
    if display_filter is DisplayFilter.ACTIVE:
        return tuple(record for record in records if record.display == 1)
    return tuple(records)


@dataclass(frozen=True)
class SessionState:
    all_records: tuple[WordRecord, ...] = ()
    display_filter: DisplayFilter = DisplayFilter.ACTIVE
    scope: LoadedScope | None = None
    cursor: int = 0
    revealed: bool = False
    primary_language: PrimaryLanguage = PrimaryLanguage.SOURCE
    selected_files: tuple[str, ...] = ()
    search_query: str = ""
    load_request: int = 0
    dirty_files: frozenset[str] = field(default_factory=frozenset)

    @property
    def visible_records(self) -> tuple[WordRecord, ...]:
        return apply_display_filter(self.all_records, self.display_filter)

    @property
    def single_file(self) -> str | None:
        return self.scope.single_file if self.scope else None

    def find(self, record_id: str) -> WordRecord | None:
        for record in self.all_records:
            if record.id == record_id:
                return record
        return None
