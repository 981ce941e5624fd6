# scripts/process_documents.py
import argparse
import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from data.db.review_model import get_session, Document
from recognizer.config import load_settings
from recognizer.keywords import load_keywords
from recognizer.pipeline import build_pipeline, extract_entities
from recognizer.review import record_triage
from recognizer.triage import KeywordTriage


def process_unprocessed_documents(nlp, triage, session, labels=None, batch_limit=500):
    to_process = (
        session.query(Document)
        .filter(Document.processed_at == None)  # noqa: E711
        .order_by(Document.id)
        .limit(batch_limit)
        .all()
    )

    processed = 0
    for document in to_process:
        try:
            spans = extract_entities(nlp, document.text, labels=labels)
            results = triage.triage(spans)
            record_triage(session, document, results)
            session.commit()
            processed += 1
            review = sum(r.needs_review for r in results)
            print(f"[Process] Document {document.id}: {len(results)} entities, {review} to review")
        except Exception as ex:
            session.rollback()
            print(f"[Error] Document {document.id}: {ex}")

    print(f"[Done] Processed {processed} documents.")
    return processed


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run NER + keyword triage over new documents.")
    parser.add_argument("--settings", default=None, help="Path to settings YAML")
    parser.add_argument("--limit", type=int, default=500, help="Max documents per run")
    args = parser.parse_args(argv)

    settings = load_settings(args.settings)
    keywords = load_keywords(settings.keywords_file)
    nlp = build_pipeline(settings, keywords=keywords)
    triage = KeywordTriage(nlp, keywords)
    session = get_session(settings.database_url)
    return process_unprocessed_documents(
        nlp, triage, session, labels=settings.review_labels, batch_limit=args.limit
    )


if __name__ == "__main__":
    main()
