from __future__ import annotations

import json

import pytest

from bookbuild.chapters import ChapterIndex, ChapterRecord, load_chapters, normalize_page_id
from bookbuild.errors import MetadataError, ParseError


def write(tmp_path, name, text):
    p = tmp_path / name
    p.write_text(text, encoding="utf-8")
    return p


def test_load_json_uses_declaration_order(tmp_path):
    p = write(tmp_path, "chapters.json", json.dumps([
        {"id": "preface", "title": "Preface"},
        {"id": "arithmetic", "title": "Arithmetic"},
    ]))
    index = load_chapters(p)
    assert [(r.id, r.ordinal) for r in index] == [("preface", 1), ("arithmetic", 2)]


def test_explicit_ordinals_are_sorted(tmp_path):
    p = write(tmp_path, "chapters.json", json.dumps([
        {"id": "functions", "title": "Functions", "ordinal": 30},
        {"id": "preface", "title": "Preface", "ordinal": 10},
        {"id": "arithmetic", "title": "Arithmetic", "ordinal": 20},
    ]))
    assert [r.id for r in load_chapters(p)] == ["preface", "arithmetic", "functions"]


def test_load_yaml_mapping_form(tmp_path):
    p = write(tmp_path, "chapters.yaml", "chapters:\n  - id: preface\n    title: Preface\n")
    index = load_chapters(p)
    assert len(index) == 1
    assert index.find("preface") == ChapterRecord(id="preface", title="Preface", ordinal=1)


@pytest.mark.parametrize(
    "text, fragment",
    [
        ("[{", "not valid structured data"),
        ('{"title": "no list"}', "expected a list"),
        ('["preface"]', "chapter #1: Input should be a valid dictionary"),
        ('[{"id": "preface"}]', "title: Field required"),
        ('[{"title": "Preface"}]', "id: Field required"),
        ('[{"id": "  ", "title": "Preface"}]', "id: String should have at least 1 character"),
        ('[{"id": "a", "title": 7}]', "title: Input should be a valid string"),
        ('[{"id": "a", "title": "A", "ordinal": "1"}]', "ordinal: Input should be a valid integer"),
        ('[{"id": "a", "title": "A", "ordinal": true}]', "ordinal: Input should be a valid integer"),
        ('[{"id": "a", "title": "A", "colour": "red"}]', "colour: Extra inputs are not permitted"),
        ('[{"id": "a", "title": "A"}, {"id": "a", "title": "Again"}]', "duplicate chapter id"),
        ('[{"id": "a", "title": "A", "ordinal": 1}, {"id": "b", "title": "B", "ordinal": 1}]', "duplicate chapter ordinal"),
    ],
)
def test_malformed_metadata(tmp_path, text, fragment):
    p = write(tmp_path, "chapters.json", text)
    with pytest.raises(MetadataError, match=fragment):
        load_chapters(p)


def test_metadata_error_is_a_parse_error(tmp_path):
    with pytest.raises(ParseError):
        load_chapters(tmp_path / "missing.json")


def test_invalid_utf8_is_a_metadata_error(tmp_path):
    p = tmp_path / "chapters.json"
    p.write_bytes(b'[{"id": "a", "title": "\xff\xfe"}]')
    with pytest.raises(MetadataError, match="cannot read chapter metadata"):
        load_chapters(p)


def test_ids_and_titles_are_stripped(tmp_path):
    p = write(tmp_path, "chapters.json", '[{"id": " preface ", "title": " Preface "}]')
    assert load_chapters(p).find("preface") == ChapterRecord(id="preface", title="Preface", ordinal=1)


def test_find_is_exact(chapters):
    assert chapters.find("arithmetic").title == "Arithmetic"
    # No substring matching: "arith" is not a chapter, nor is a prefixed path.
    assert chapters.find("arith") is None
    assert chapters.find("book/arithmetic") is None
    assert chapters.find("index") is None


def test_neighbors_at_the_ends(chapters):
    first, middle, last = chapters.records
    assert chapters.neighbors(first) == (None, middle)
    assert chapters.neighbors(middle) == (first, last)
    assert chapters.neighbors(last) == (middle, None)
    assert [chapters.position(r) for r in (first, middle, last)] == [1, 2, 3]


def test_single_chapter_has_no_neighbors():
    index = ChapterIndex((ChapterRecord(id="only", title="Only", ordinal=1),))
    assert index.neighbors(index.records[0]) == (None, None)


@pytest.mark.parametrize(
    "stem, expected",
    [
        ("00_preface", "preface"),
        ("03-functions", "functions"),
        ("arithmetic", "arithmetic"),
        ("2024_01_notes", "01_notes"),
        ("v2_intro", "v2_intro"),
    ],
)
def test_normalize_page_id(stem, expected):
    assert normalize_page_id(stem) == expected
