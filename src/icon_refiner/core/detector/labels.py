"""Bảng ánh xạ class id sang tên nhãn, nạp từ file JSON hoặc URL."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, Tuple

from icon_refiner.core.errors import LabelNotFoundError, LabelTableError

logger = logging.getLogger("detector.labels")


@dataclass(frozen=True)
class LabelEntry:
    id: int
    name: str


class LabelTable:
    """Danh sách có thứ tự các mục ``{id, name}``.

    Tra cứu đòi hỏi đúng một mục khớp; thiếu hoặc trùng id đều là lỗi cấu hình.
    """

    def __init__(self, entries: Iterable[LabelEntry]) -> None:
        self._entries: Tuple[LabelEntry, ...] = tuple(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def lookup(self, class_id: int) -> str:
        matches = [entry for entry in self._entries if entry.id == class_id]
        if len(matches) != 1:
            raise LabelNotFoundError(class_id, matches=len(matches))
        return matches[0].name

    @classmethod
    def from_records(cls, records: Any) -> "LabelTable":
        """Tạo bảng từ danh sách dict dạng ``[{"id": 1, "name": "clock"}, ...]``."""
        if not isinstance(records, list):
            raise LabelTableError(f"Label table must be a JSON list, got {type(records).__name__}")
        entries = []
        for position, record in enumerate(records):
            try:
                entries.append(LabelEntry(id=int(record["id"]), name=str(record["name"])))
            except (TypeError, KeyError, ValueError) as exc:
                raise LabelTableError(f"Invalid label entry at position {position}: {record!r}") from exc
        return cls(entries)

    @classmethod
    def from_names(cls, names: Mapping[int, str]) -> "LabelTable":
        """Tạo bảng từ thuộc tính ``names`` của mô hình (dict id -> tên)."""
        return cls(LabelEntry(id=int(key), name=str(value)) for key, value in sorted(names.items()))


def load_label_table(source: str | Path, timeout_s: float = 10.0) -> LabelTable:
    """Nạp bảng nhãn từ file JSON cục bộ hoặc URL http(s)."""

    text = str(source)
    if text.startswith(("http://", "https://")):
        logger.info("Fetching label table from %s", text)
        try:
            with urllib.request.urlopen(text, timeout=timeout_s) as response:
                payload = response.read().decode("utf-8")
        except (urllib.error.URLError, TimeoutError, OSError) as exc:
            raise LabelTableError(f"Unable to fetch label table from {text}: {exc}") from exc
    else:
        path = Path(text).expanduser()
        if not path.exists():
            raise LabelTableError(f"Label table not found at {path}")
        payload = path.read_text(encoding="utf-8")

    try:
        records = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise LabelTableError(f"Label table at {text} is not valid JSON: {exc}") from exc

    table = LabelTable.from_records(records)
    logger.debug("Loaded %d label entries from %s", len(table), text)
    return table
