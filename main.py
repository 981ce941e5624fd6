# main.py
import argparse
import logging
import sys

import spacy

from recognizer.config import load_settings
from recognizer.keywords import load_keywords
from recognizer.patterns import load_patterns
from recognizer.phrase_matching import build_token_matcher, find_matches, match_keywords
from recognizer.pipeline import build_pipeline, extract_entities
from recognizer.triage import KeywordTriage

ACTIONS = {1: "review, add to list if valid", 2: "review, partial match", 3: "accept"}


def cmd_match(settings, keywords, text, attr, patterns_file=None):
    nlp = spacy.blank("en")
    matches = match_keywords(nlp, keywords, text, attr=attr, label=settings.label)
    if patterns_file:
        # token patterns, e.g. the output of scripts/export_patterns.py --token-attr LOWER
        matcher = build_token_matcher(nlp, load_patterns(patterns_file))
        matches += find_matches(nlp, matcher, text)
    for m in sorted(matches, key=lambda m: (m.start, m.end)):
        print(f"{m.text}\t{m.label}\t[{m.start_char}, {m.end_char})")


def cmd_extract(settings, keywords, text):
    nlp = build_pipeline(settings, keywords=keywords)
    for ent in extract_entities(nlp, text):
        print(f"{ent.text}\t{ent.label}\t[{ent.start_char}, {ent.end_char})")


def cmd_triage(settings, keywords, text):
    nlp = build_pipeline(settings, keywords=keywords)
    triage = KeywordTriage(nlp, keywords)
    spans = extract_entities(nlp, text, labels=settings.review_labels)
    for r in triage.triage(spans):
        related = f" ({', '.join(r.matched_keywords)})" if r.matched_keywords else ""
        print(f"case {int(r.case)}\t{r.span.text}\t{r.span.label}\t{ACTIONS[r.case]}{related}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Keyword-list entity recognition for one text.")
    parser.add_argument("--settings", default=None, help="Path to settings YAML")
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("match", help="Phrase-match the keyword list (tokenizer only)")
    p.add_argument("text")
    p.add_argument("--attr", default="LOWER", help="Token attribute to match on (ORTH, LOWER, ...)")
    p.add_argument("--patterns", default=None, help="Also run the token patterns in this .jsonl/.json file")

    p = sub.add_parser("extract", help="Entities predicted by model + entity ruler")
    p.add_argument("text")

    p = sub.add_parser("triage", help="Sort predicted entities into review cases")
    p.add_argument("text")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    settings = load_settings(args.settings)
    keywords = load_keywords(settings.keywords_file)
    if args.command == "match":
        cmd_match(settings, keywords, args.text, args.attr, args.patterns)
    elif args.command == "extract":
        cmd_extract(settings, keywords, args.text)
    else:
        cmd_triage(settings, keywords, args.text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
