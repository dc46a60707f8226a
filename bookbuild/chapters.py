"""
Chapter metadata: `chapters.json` -> ChapterIndex.

The file is an array of {id, title[, ordinal]} objects, or a mapping with a
`chapters` array. Without an explicit ordinal, declaration order is used.
YAML files are accepted too.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MetadataError
from .models import describe


NUMERIC_PREFIX_RE = re.compile(r"^\d+[_-]")


class ChapterRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", strict=True, str_strip_whitespace=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    ordinal: int


@dataclass(frozen=True)
class ChapterIndex:
    records: tuple[ChapterRecord, ...]
    _positions: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.records, key=lambda r: r.ordinal))
        positions: dict[str, int] = {}
        last = None
        for i, rec in enumerate(ordered):
            if last is not None and rec.ordinal == last:
                raise MetadataError(f"duplicate chapter ordinal: {rec.ordinal}")
            if rec.id in positions:
                raise MetadataError(f"duplicate chapter id: {rec.id!r}")
            positions[rec.id] = i
            last = rec.ordinal
        object.__setattr__(self, "records", ordered)
        object.__setattr__(self, "_positions", positions)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[ChapterRecord]:
        return iter(self.records)

    def find(self, page_id: str) -> ChapterRecord | None:
        i = self._positions.get(page_id)
        return None if i is None else self.records[i]

    def position(self, record: ChapterRecord) -> int:
        """1-based position of `record` in ordinal order."""
        return self._positions[record.id] + 1

    def neighbors(self, record: ChapterRecord) -> tuple[ChapterRecord | None, ChapterRecord | None]:
        i = self._positions[record.id]
        prev_rec = self.records[i - 1] if i > 0 else None
        next_rec = self.records[i + 1] if i + 1 < len(self.records) else None
        return prev_rec, next_rec


def normalize_page_id(stem: str) -> str:
    """`00_preface` -> `preface`."""
    return NUMERIC_PREFIX_RE.sub("", stem, count=1)


def _parse_text(text: str, path: Path) -> Any:
    try:
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise MetadataError(f"{path}: not valid structured data: {e}") from e


def _records(raw: list[Any], path: Path) -> Iterable[ChapterRecord]:
    for n, item in enumerate(raw, start=1):
        if isinstance(item, dict):
            item = {"ordinal": n, **item}
        try:
            yield ChapterRecord.model_validate(item)
        except ValidationError as e:
            raise MetadataError(describe(e, f"{path}: chapter #{n}")) from e


def parse_chapters(text: str, path: Path) -> ChapterIndex:
    data = _parse_text(text, path)
    if isinstance(data, dict):
        data = data.get("chapters")
    if not isinstance(data, list):
        raise MetadataError(f"{path}: expected a list of chapters")
    return ChapterIndex(tuple(_records(data, path)))


def load_chapters(path: Path) -> ChapterIndex:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MetadataError(f"cannot read chapter metadata {path}: {e}") from e
    return parse_chapters(text, path)
