"""Shared fixtures: blank English pipelines, a stand-in ner, brand keywords, SQLite session."""

import pytest
import spacy
from spacy.language import Language
from spacy.tokens import Span
from spacy.util import filter_spans

from data.db.review_model import get_session
from recognizer.config import Settings
from recognizer.keywords import KeywordList

BRANDS = ["Armani", "Ralph Lauren", "Monique Lhuillier", "Norma Kamali"]


@Language.component("title_case_ner")
def title_case_ner(doc):
    """Label every run of title-case tokens ORG, keeping entities already set."""
    taken = {i for ent in doc.ents for i in range(ent.start, ent.end)}
    spans = list(doc.ents)
    start = None
    for i in range(len(doc) + 1):
        if i < len(doc) and doc[i].is_title and i not in taken:
            if start is None:
                start = i
            continue
        if start is not None:
            spans.append(Span(doc, start, i, label="ORG"))
            start = None
    doc.ents = filter_spans(spans)
    return doc


@pytest.fixture
def nlp():
    return spacy.blank("en")


@pytest.fixture
def nlp_with_ner():
    nlp = spacy.blank("en")
    nlp.add_pipe("title_case_ner", name="ner")
    return nlp


@pytest.fixture
def brands():
    return KeywordList(BRANDS)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        model_names=["blank:en"],
        ruler_position="before",
        phrase_matcher_attr="LOWER",
        label="BRAND",
        keywords_file=str(tmp_path / "keywords.txt"),
        patterns_file=str(tmp_path / "patterns.jsonl"),
        database_url="sqlite://",
    )


@pytest.fixture
def session():
    s = get_session("sqlite://")
    yield s
    s.close()
