"""Tests for model loading and entity-ruler placement around ner."""

import json

import pytest

from recognizer.errors import ModelLoadError
from recognizer.patterns import keywords_to_patterns
from recognizer.pipeline import add_entity_ruler, build_pipeline, extract_entities, load_model

TEXT = "Monique Lhuillier opened a store next to Prada"


def _labels(nlp, text=TEXT):
    return [(s.text, s.label) for s in extract_entities(nlp, text)]


class TestLoadModel:
    def test_blank_model(self):
        nlp = load_model(["blank:en"])
        assert nlp.lang == "en"
        assert nlp.pipe_names == []

    def test_falls_back_to_next_name(self):
        nlp = load_model(["no_such_model_xx", "blank:en"])
        assert nlp.lang == "en"

    def test_raises_when_nothing_loads(self):
        with pytest.raises(ModelLoadError):
            load_model(["no_such_model_xx"])


class TestEntityRulerPlacement:
    def test_before_ner_rules_win(self, nlp_with_ner, brands):
        add_entity_ruler(nlp_with_ner, keywords_to_patterns(brands, "BRAND"), position="before")
        assert nlp_with_ner.pipe_names == ["entity_ruler", "ner"]
        assert _labels(nlp_with_ner) == [("Monique Lhuillier", "BRAND"), ("Prada", "ORG")]

    def test_after_ner_keeps_model_predictions(self, nlp_with_ner, brands):
        add_entity_ruler(nlp_with_ner, keywords_to_patterns(brands, "BRAND"), position="after")
        assert nlp_with_ner.pipe_names == ["ner", "entity_ruler"]
        assert _labels(nlp_with_ner) == [("Monique Lhuillier", "ORG"), ("Prada", "ORG")]

    def test_after_ner_with_overwrite(self, nlp_with_ner, brands):
        add_entity_ruler(
            nlp_with_ner, keywords_to_patterns(brands, "BRAND"),
            position="after", overwrite_ents=True,
        )
        assert _labels(nlp_with_ner) == [("Monique Lhuillier", "BRAND"), ("Prada", "ORG")]

    def test_after_ner_fills_gaps(self, nlp_with_ner, brands):
        add_entity_ruler(
            nlp_with_ner, keywords_to_patterns(brands, "BRAND"),
            position="after", phrase_matcher_attr="LOWER",
        )
        assert _labels(nlp_with_ner, "armani and Prada") == [("armani", "BRAND"), ("Prada", "ORG")]

    def test_lowercase_phrase_matching(self, nlp, brands):
        add_entity_ruler(nlp, keywords_to_patterns(brands, "BRAND"), phrase_matcher_attr="LOWER")
        text = "armani and monique Lhuillier are both brands"
        assert _labels(nlp, text) == [("armani", "BRAND"), ("monique Lhuillier", "BRAND")]

    def test_no_ner_appends_last(self, nlp, brands):
        add_entity_ruler(nlp, keywords_to_patterns(brands, "BRAND"), position="before")
        assert nlp.pipe_names == ["entity_ruler"]

    def test_readding_replaces_the_ruler(self, nlp_with_ner, brands):
        add_entity_ruler(nlp_with_ner, keywords_to_patterns(brands, "BRAND"), position="before")
        add_entity_ruler(nlp_with_ner, keywords_to_patterns(["Prada"], "BRAND"), position="after")
        assert nlp_with_ner.pipe_names == ["ner", "entity_ruler"]
        assert _labels(nlp_with_ner, "Prada") == [("Prada", "ORG")]

    def test_bad_position(self, nlp_with_ner):
        with pytest.raises(ValueError):
            add_entity_ruler(nlp_with_ner, [], position="middle")


class TestBuildPipeline:
    def test_keywords_and_pattern_file(self, settings, brands, tmp_path):
        with open(settings.patterns_file, "w", encoding="utf-8") as f:
            f.write(json.dumps({"label": "BRAND", "pattern": [{"LOWER": "d&g"}]}) + "\n")
        nlp = build_pipeline(settings, keywords=brands)
        assert nlp.pipe_names == ["entity_ruler"]
        assert _labels(nlp, "RALPH LAUREN or d&g") == [("RALPH LAUREN", "BRAND"), ("d&g", "BRAND")]

    def test_no_patterns_no_ruler(self, settings):
        nlp = build_pipeline(settings)
        assert nlp.pipe_names == []

    def test_extract_filters_labels(self, nlp_with_ner, brands):
        add_entity_ruler(nlp_with_ner, keywords_to_patterns(brands, "BRAND"))
        spans = extract_entities(nlp_with_ner, TEXT, labels={"ORG"})
        assert [s.text for s in spans] == ["Prada"]
        assert (spans[0].start_char, spans[0].end_char) == (41, 46)
