# recognizer/patterns.py
"""
Entity-ruler pattern records and their JSONL files.

A record is what spaCy's entity ruler accepts in ``add_patterns``:

    {"label": "BRAND", "pattern": "Ralph Lauren"}
    {"label": "BRAND", "pattern": [{"LOWER": "ralph"}, {"LOWER": "lauren"}], "id": "ralph-lauren"}
"""
import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Union

import srsly

from recognizer.errors import PatternFileError

logger = logging.getLogger(__name__)


@dataclass
class PatternRecord:
    label: str
    pattern: Union[str, List[dict]]
    id: Optional[str] = None

    @property
    def is_phrase(self) -> bool:
        return isinstance(self.pattern, str)

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise PatternFileError(f"pattern record must be an object, got {type(data).__name__}")
        label = data.get("label")
        if not isinstance(label, str) or not label.strip():
            raise PatternFileError("pattern record needs a non-empty 'label'")
        pattern = data.get("pattern")
        if isinstance(pattern, str):
            if not pattern.strip():
                raise PatternFileError(f"empty phrase pattern for label {label}")
        elif isinstance(pattern, list) and pattern and all(isinstance(t, dict) for t in pattern):
            pass
        else:
            raise PatternFileError(
                f"'pattern' must be a string or a non-empty list of token objects (label {label})"
            )
        rec_id = data.get("id")
        return cls(label=label, pattern=pattern, id=str(rec_id) if rec_id is not None else None)

    def to_dict(self):
        out = {"label": self.label, "pattern": self.pattern}
        if self.id is not None:
            out["id"] = self.id
        return out


def keywords_to_patterns(keywords, label, nlp=None, token_attr=None):
    """
    Turn a keyword list into pattern records.

    Without ``token_attr`` every keyword becomes a literal phrase pattern.
    With e.g. ``token_attr="LOWER"`` each keyword is split by the pipeline's
    tokenizer into a token pattern such as [{"LOWER": "norma"}, {"LOWER": "kamali"}].
    """
    if token_attr is not None and nlp is None:
        raise ValueError("token patterns need a pipeline to tokenize the keywords")

    records = []
    for kw in keywords:
        if token_attr is None:
            records.append(PatternRecord(label=label, pattern=kw))
            continue
        attr = token_attr.upper()
        tokens = [t for t in nlp.make_doc(kw) if not t.is_space]
        if attr == "LOWER":
            pattern = [{attr: t.lower_} for t in tokens]
        else:
            pattern = [{attr: t.text} for t in tokens]
        records.append(PatternRecord(label=label, pattern=pattern))
    return records


def _read_jsonl(path):
    records = []
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                data = srsly.json_loads(line)
            except ValueError as e:
                raise PatternFileError(f"invalid JSON ({e})", path, lineno) from e
            try:
                records.append(PatternRecord.from_dict(data))
            except PatternFileError as e:
                raise PatternFileError(str(e), path, lineno) from e
    return records


def load_patterns(path) -> List[PatternRecord]:
    """Read a .jsonl pattern file, or a .json file holding a list of records."""
    path = os.fspath(path)
    if path.endswith(".jsonl"):
        records = _read_jsonl(path)
    else:
        try:
            data = srsly.read_json(path)
        except ValueError as e:
            raise PatternFileError(f"invalid JSON ({e})", path) from e
        if not isinstance(data, list):
            raise PatternFileError("expected a list of pattern records", path)
        records = []
        for i, item in enumerate(data):
            try:
                records.append(PatternRecord.from_dict(item))
            except PatternFileError as e:
                raise PatternFileError(f"record {i}: {e}", path) from e
    logger.info("Loaded %d patterns from %s", len(records), path)
    return records


def save_patterns(path, records):
    parent = os.path.dirname(os.fspath(path))
    if parent:
        os.makedirs(parent, exist_ok=True)
    srsly.write_jsonl(path, [r.to_dict() for r in records])
