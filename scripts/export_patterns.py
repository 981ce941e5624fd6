# scripts/export_patterns.py
import argparse
import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import spacy

from recognizer.config import load_settings
from recognizer.keywords import load_keywords
from recognizer.patterns import keywords_to_patterns, save_patterns


def export_patterns(keywords_file, out_path, label, token_attr=None, lang="en"):
    keywords = load_keywords(keywords_file)
    nlp = spacy.blank(lang) if token_attr else None
    records = keywords_to_patterns(keywords, label, nlp=nlp, token_attr=token_attr)
    save_patterns(out_path, records)
    print(f"[Export] Wrote {len(records)} patterns to {out_path}")
    return records


if __name__ == "__main__":
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Write the keyword list as an entity-ruler JSONL pattern file.")
    parser.add_argument("--keywords", default=settings.keywords_file, help="Keyword list (one per line)")
    parser.add_argument("--out", default=os.path.join("data", "keyword_patterns.jsonl"), help="Output .jsonl path")
    parser.add_argument("--label", default=settings.label, help="Entity label for every pattern")
    parser.add_argument("--token-attr", default=None, help="Write token patterns on this attribute (e.g. LOWER) instead of phrases")
    args = parser.parse_args()

    export_patterns(args.keywords, args.out, args.label, token_attr=args.token_attr)
