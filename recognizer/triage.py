# recognizer/triage.py
"""
Sort model predictions against the keyword list.

    Case 3  span is on the list                  -> accepted
    Case 2  not on the list, shares a token      -> review (short form? error?)
    Case 1  not on the list, no shared tokens    -> review, add to list if valid

Shared tokens are compared lowercased; punctuation, whitespace and stop words
never count as overlap ("The Row" does not overlap "The North Face").
"""
import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List

from recognizer.pipeline import PredictedSpan

logger = logging.getLogger(__name__)


class ReviewCase(IntEnum):
    NEW_CANDIDATE = 1
    PARTIAL_OVERLAP = 2
    KNOWN = 3


@dataclass
class TriageResult:
    span: PredictedSpan
    case: ReviewCase
    matched_keywords: List[str] = field(default_factory=list)

    @property
    def needs_review(self) -> bool:
        return self.case != ReviewCase.KNOWN


class KeywordTriage:
    def __init__(self, nlp, keywords):
        self.nlp = nlp
        self.keywords = keywords
        self._token_sets = []
        self.refresh()

    def _content_tokens(self, text):
        return {
            t.lower_ for t in self.nlp.make_doc(text or "")
            if not (t.is_punct or t.is_space or t.is_stop)
        }

    def refresh(self):
        """Recompute keyword tokens; call after the keyword list changes."""
        self._token_sets = [(kw, self._content_tokens(kw)) for kw in self.keywords]

    def classify(self, span) -> TriageResult:
        if isinstance(span, str):
            span = PredictedSpan(text=span, label="", start_char=0, end_char=len(span))

        known = self.keywords.find(span.text)
        if known is not None:
            return TriageResult(span, ReviewCase.KNOWN, [known])

        tokens = self._content_tokens(span.text)
        overlapping = [kw for kw, kw_tokens in self._token_sets if tokens & kw_tokens]
        if overlapping:
            return TriageResult(span, ReviewCase.PARTIAL_OVERLAP, overlapping)
        return TriageResult(span, ReviewCase.NEW_CANDIDATE)

    def triage(self, spans, labels=None) -> List[TriageResult]:
        results = [
            self.classify(span) for span in spans
            if not labels or span.label in labels
        ]
        logger.debug(
            "Triaged %d spans: %s",
            len(results),
            {c.name: sum(r.case == c for r in results) for c in ReviewCase},
        )
        return results
