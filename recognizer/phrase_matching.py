# recognizer/phrase_matching.py
import logging
from dataclasses import dataclass
from typing import List

from spacy.matcher import Matcher, PhraseMatcher
from spacy.tokens import Doc

logger = logging.getLogger(__name__)

# attributes the tokenizer alone sets; anything else needs the full pipeline
TOKENIZER_ATTRS = {"ORTH", "TEXT", "LOWER", "NORM"}


@dataclass
class KeywordMatch:
    text: str
    label: str
    start: int  # token offsets, exclusive end
    end: int
    start_char: int
    end_char: int


def build_phrase_matcher(nlp, keywords, attr="ORTH", label="KEYWORD") -> PhraseMatcher:
    """
    PhraseMatcher over a keyword list.

    With attr="LOWER" the pattern "Monique Lhuillier" also matches
    "monique Lhuillier"; with the default ORTH only the exact casing matches.
    """
    attr = (attr or "ORTH").upper()
    matcher = PhraseMatcher(nlp.vocab, attr=attr)
    keywords = [kw for kw in keywords if kw and kw.strip()]
    if attr in TOKENIZER_ATTRS:
        docs = [nlp.make_doc(kw) for kw in keywords]
    else:
        docs = list(nlp.pipe(keywords))
    if docs:
        matcher.add(label, docs)
    logger.debug("PhraseMatcher(%s) built with %d phrases under %s", attr, len(docs), label)
    return matcher


def build_token_matcher(nlp, records) -> Matcher:
    """Matcher from the token-pattern records; phrase records are skipped."""
    matcher = Matcher(nlp.vocab)
    by_label = {}
    for rec in records:
        if rec.is_phrase:
            continue
        by_label.setdefault(rec.label, []).append(rec.pattern)
    for label, patterns in by_label.items():
        matcher.add(label, patterns)
    return matcher


def find_matches(nlp, matcher, text) -> List[KeywordMatch]:
    doc = text if isinstance(text, Doc) else nlp(text or "")
    out = []
    for match_id, start, end in sorted(matcher(doc), key=lambda m: (m[1], m[2])):
        span = doc[start:end]
        out.append(KeywordMatch(
            text=span.text,
            label=nlp.vocab.strings[match_id],
            start=start,
            end=end,
            start_char=span.start_char,
            end_char=span.end_char,
        ))
    return out


def match_keywords(nlp, keywords, text, attr="ORTH", label="KEYWORD") -> List[KeywordMatch]:
    matcher = build_phrase_matcher(nlp, keywords, attr=attr, label=label)
    return find_matches(nlp, matcher, text)
