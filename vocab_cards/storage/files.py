from __future__ import annotations

import json
import logging
import os
import re
import stat
import tempfile
from pathlib import Path
from typing import Any, Sequence

from vocab_cards.config import DATA_DIR
from vocab_cards.errors import Corrupt, InvalidName, NotFound, StorageUnavailable

logger = logging.getLogger(__name__)

FILE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
FILE_SUFFIX = ".json"


def is_valid_name(name: str | None) -> bool:
    return bool(name) and FILE_NAME_PATTERN.fullmatch(str(name)) is not None


def validate_name(name: str | None) -> str:
    if not is_valid_name(name):
        raise InvalidName(name, "Invalid file name")
    return str(name)


def validate_word_pairs(data: Any, *, name: str | None = None) -> list[dict]:
    """Check the on-disk lesson shape and return normalized `{eng, rus, display}` dicts.

    Extra keys on an element are dropped. `display` must equal 0 or 1 and is
    coerced to int, so NaN, infinities and other numbers are corrupt.
    """
    if not isinstance(data, list):
        raise Corrupt(name, "lesson content is not a JSON array")

    items: list[dict] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise Corrupt(name, f"element {index} is not an object")
        eng = item.get("eng")
        rus = item.get("rus")
        display = item.get("display")
        if not isinstance(eng, str) or not isinstance(rus, str):
            raise Corrupt(name, f"element {index} needs string 'eng' and 'rus'")
        if isinstance(display, bool) or not isinstance(display, (int, float)):
            raise Corrupt(name, f"element {index} needs numeric 'display'")
        if display not in (0, 1):
            raise Corrupt(name, f"element {index} has 'display' {display!r}, expected 0 or 1")
        items.append({"eng": eng, "rus": rus, "display": int(display)})
    return items


def dump_word_pairs(items: Sequence[dict]) -> str:
    payload = [
        {"eng": item["eng"], "rus": item["rus"], "display": int(item["display"])}
        for item in items
    ]
    return json.dumps(payload, ensure_ascii=False, indent=2)


def _file_mode(path: Path) -> int:
    """Mode for a rewritten lesson: the existing file's, or 0644 for a new one."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return 0o644


class FileStore:
    def __init__(self, data_dir: Path = DATA_DIR) -> None:
        self.data_dir = data_dir

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{validate_name(name)}{FILE_SUFFIX}"

    def list_files(self) -> list[str]:
        try:
            names = [
                path.stem
                for path in self.data_dir.iterdir()
                if path.is_file() and path.suffix == FILE_SUFFIX and is_valid_name(path.stem)
            ]
        except OSError as exc:
            raise StorageUnavailable(None, f"cannot read data directory: {exc}") from exc
        return sorted(names)

    def read_file(self, name: str) -> list[dict]:
        path = self.path_for(name)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise NotFound(name, f"{name}{FILE_SUFFIX} does not exist") from exc
        except UnicodeDecodeError as exc:
            raise Corrupt(name, f"{name}{FILE_SUFFIX} is not valid UTF-8") from exc
        except OSError as exc:
            raise StorageUnavailable(name, f"cannot read {name}{FILE_SUFFIX}: {exc}") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise Corrupt(name, f"{name}{FILE_SUFFIX} is not valid JSON: {exc.msg}") from exc
        return validate_word_pairs(data, name=name)

    def write_file(self, name: str, items: Sequence[dict]) -> Path:
        path = self.path_for(name)
        content = dump_word_pairs(items)
        tmp_name = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.data_dir,
                prefix=f".{name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(content)
            os.chmod(tmp_name, _file_mode(path))
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageUnavailable(name, f"cannot write {name}{FILE_SUFFIX}: {exc}") from exc

        logger.info("Successfully updated %s%s (%d words)", name, FILE_SUFFIX, len(items))
        return path
