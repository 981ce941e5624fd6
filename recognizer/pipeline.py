# recognizer/pipeline.py
import logging
import os
from dataclasses import dataclass
from typing import List

import spacy

from recognizer.config import DEFAULT_MODELS
from recognizer.errors import ModelLoadError
from recognizer.patterns import PatternRecord, keywords_to_patterns, load_patterns

logger = logging.getLogger(__name__)

RULER_NAME = "entity_ruler"


@dataclass
class PredictedSpan:
    text: str
    label: str
    start_char: int
    end_char: int


def load_model(names=None):
    """
    Load the first spaCy pipeline that is installed.

    "blank:en" builds an empty English pipeline (tokenizer only, no ner).
    """
    names = list(names or DEFAULT_MODELS)
    errors = []
    for name in names:
        try:
            if name.startswith("blank:"):
                nlp = spacy.blank(name.split(":", 1)[1])
            else:
                nlp = spacy.load(name)
        except (OSError, ImportError) as e:
            logger.warning("Could not load spaCy model %s: %s", name, e)
            errors.append(f"{name}: {e}")
            continue
        logger.info("Loaded spaCy pipeline %s (%s)", name, ", ".join(nlp.pipe_names) or "tokenizer only")
        return nlp
    raise ModelLoadError(
        "No spaCy model could be loaded. Run: python -m spacy download en_core_web_sm\n"
        + "\n".join(errors)
    )


def add_entity_ruler(nlp, patterns, position="before", overwrite_ents=False, phrase_matcher_attr=None):
    """
    Insert an entity ruler next to the statistical ner component.

    before: rule entities are set first and the model predicts around them.
    after:  the model predicts first; rules fill the gaps, or replace
            overlapping predictions when overwrite_ents is true.
    """
    if RULER_NAME in nlp.pipe_names:
        nlp.remove_pipe(RULER_NAME)

    config = {"overwrite_ents": overwrite_ents}
    if phrase_matcher_attr:
        config["phrase_matcher_attr"] = phrase_matcher_attr

    placement = {}
    if position is not None:
        if position not in ("before", "after"):
            raise ValueError(f"position must be 'before', 'after' or None, got {position!r}")
        if "ner" in nlp.pipe_names:
            placement[position] = "ner"
        else:
            logger.info("Pipeline has no ner component; entity ruler appended last")

    ruler = nlp.add_pipe(RULER_NAME, config=config, **placement)
    ruler.add_patterns([
        p.to_dict() if isinstance(p, PatternRecord) else p for p in patterns
    ])
    logger.info("Entity ruler added %s with %d patterns", placement or "last", len(patterns))
    return ruler


def build_pipeline(settings, keywords=None, extra_patterns=()):
    nlp = load_model(settings.model_names)

    patterns = []
    if keywords is not None:
        patterns.extend(keywords_to_patterns(keywords, settings.label))
    if settings.patterns_file and os.path.exists(settings.patterns_file):
        patterns.extend(load_patterns(settings.patterns_file))
    patterns.extend(extra_patterns)

    if patterns:
        add_entity_ruler(
            nlp,
            patterns,
            position=settings.ruler_position,
            overwrite_ents=settings.overwrite_ents,
            phrase_matcher_attr=settings.phrase_matcher_attr,
        )
    return nlp


def extract_entities(nlp, text, labels=None) -> List[PredictedSpan]:
    doc = nlp(text or "")
    out = []
    for ent in doc.ents:
        if labels and ent.label_ not in labels:
            continue
        out.append(PredictedSpan(
            text=ent.text.strip(),
            label=ent.label_,
            start_char=ent.start_char,
            end_char=ent.end_char,
        ))
    return out
