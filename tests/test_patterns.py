"""Tests for entity-ruler pattern records and pattern files."""

import json

import pytest

from recognizer.errors import PatternFileError
from recognizer.patterns import PatternRecord, keywords_to_patterns, load_patterns, save_patterns


class TestPatternRecord:
    def test_phrase_record(self):
        rec = PatternRecord.from_dict({"label": "BRAND", "pattern": "Armani"})
        assert rec.is_phrase
        assert rec.to_dict() == {"label": "BRAND", "pattern": "Armani"}

    def test_token_record_keeps_id(self):
        rec = PatternRecord.from_dict(
            {"label": "BRAND", "pattern": [{"LOWER": "d&g"}], "id": "dolce-gabbana"}
        )
        assert not rec.is_phrase
        assert rec.to_dict()["id"] == "dolce-gabbana"

    @pytest.mark.parametrize("data", [
        {"pattern": "Armani"},
        {"label": "", "pattern": "Armani"},
        {"label": "BRAND", "pattern": ""},
        {"label": "BRAND", "pattern": []},
        {"label": "BRAND", "pattern": ["armani"]},
        {"label": "BRAND", "pattern": 3},
        ["BRAND", "Armani"],
    ])
    def test_invalid_records_rejected(self, data):
        with pytest.raises(PatternFileError):
            PatternRecord.from_dict(data)


class TestKeywordsToPatterns:
    def test_phrase_patterns(self, brands):
        records = keywords_to_patterns(brands, "BRAND")
        assert [r.pattern for r in records] == list(brands)
        assert all(r.label == "BRAND" for r in records)

    def test_lowercase_token_patterns(self, nlp, brands):
        records = keywords_to_patterns(brands, "BRAND", nlp=nlp, token_attr="LOWER")
        assert records[2].pattern == [{"LOWER": "monique"}, {"LOWER": "lhuillier"}]

    def test_token_patterns_need_a_pipeline(self, brands):
        with pytest.raises(ValueError):
            keywords_to_patterns(brands, "BRAND", token_attr="LOWER")


class TestPatternFiles:
    def test_jsonl_is_one_record_per_line(self, tmp_path, nlp, brands):
        path = tmp_path / "patterns.jsonl"
        records = keywords_to_patterns(brands, "BRAND", nlp=nlp, token_attr="LOWER")
        save_patterns(str(path), records)

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 4
        assert json.loads(lines[0]) == {"label": "BRAND", "pattern": [{"LOWER": "armani"}]}
        assert load_patterns(str(path)) == records

    def test_json_list_file(self, tmp_path):
        path = tmp_path / "entity_ruler_patterns.json"
        path.write_text(json.dumps([{"label": "ORG", "pattern": "Zeiss"}]), encoding="utf-8")
        assert load_patterns(str(path)) == [PatternRecord("ORG", "Zeiss")]

    def test_json_file_must_hold_a_list(self, tmp_path):
        path = tmp_path / "patterns.json"
        path.write_text(json.dumps({"label": "ORG", "pattern": "Zeiss"}), encoding="utf-8")
        with pytest.raises(PatternFileError):
            load_patterns(str(path))

    def test_bad_line_reports_path_and_line(self, tmp_path):
        path = tmp_path / "patterns.jsonl"
        path.write_text(
            '{"label": "BRAND", "pattern": "Armani"}\n\n{"label": "BRAND", "pattern": \n',
            encoding="utf-8",
        )
        with pytest.raises(PatternFileError) as exc:
            load_patterns(str(path))
        assert exc.value.line == 3
        assert str(path) in str(exc.value)

    def test_invalid_record_line(self, tmp_path):
        path = tmp_path / "patterns.jsonl"
        path.write_text('{"pattern": "Armani"}\n', encoding="utf-8")
        with pytest.raises(PatternFileError) as exc:
            load_patterns(str(path))
        assert exc.value.line == 1
