# scripts/import_documents.py
import argparse
import os
import sys
from datetime import datetime

import yaml

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from data.db.review_model import get_session, Document, text_checksum
from recognizer.config import load_settings


def load_documents(path):
    """
    YAML:  documents: [{title, text, source}, ...]
    other: one document per non-empty line
    """
    if path.endswith((".yaml", ".yml")):
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        docs = data.get("documents", []) if isinstance(data, dict) else data
        out = []
        for d in docs or []:
            if isinstance(d, str):
                d = {"text": d}
            if d.get("text"):
                out.append(d)
        return out

    with open(path, "r", encoding="utf-8") as f:
        return [{"text": ln.strip()} for ln in f if ln.strip()]


def run_import(docs, source=None, session=None, settings=None):
    if session is None:
        settings = settings or load_settings()
        session = get_session(settings.database_url)
    total_new = 0
    for d in docs:
        text = d["text"].strip()
        checksum = text_checksum(text)
        # dedupe on text
        if session.query(Document).filter_by(checksum=checksum).first():
            continue
        session.add(Document(
            title=d.get("title") or text[:80],
            text=text,
            source=d.get("source") or source,
            checksum=checksum,
            created_at=datetime.utcnow(),
        ))
        session.commit()
        total_new += 1
    print(f"[Import] Inserted {total_new} new documents.")
    return total_new


def main(argv=None):
    parser = argparse.ArgumentParser(description="Import documents for entity review.")
    parser.add_argument("path", help="YAML file with a documents list, or a text file (one document per line)")
    parser.add_argument("--source", default=None, help="Source name stored with each document")
    parser.add_argument("--settings", default=None, help="Path to settings YAML")
    args = parser.parse_args(argv)

    settings = load_settings(args.settings)
    return run_import(
        load_documents(args.path),
        source=args.source or os.path.basename(args.path),
        settings=settings,
    )


if __name__ == "__main__":
    main()
