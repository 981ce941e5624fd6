# recognizer/review.py
"""Persist triage results and apply the reviewer's decisions."""
import logging
from datetime import datetime

from data.db.review_model import ACCEPTED, PENDING, REJECTED, PredictedEntity
from recognizer.errors import ReviewError
from recognizer.triage import ReviewCase

logger = logging.getLogger(__name__)


def record_triage(session, document, results):
    """
    Replace the document's predicted entities with ``results``.

    Known keywords (case 3) are accepted on the spot; everything else waits
    for a reviewer. The caller commits.
    """
    # idempotent replace of entities
    session.query(PredictedEntity).filter_by(document_id=document.id).delete()

    now = datetime.utcnow()
    for r in results:
        known = r.case == ReviewCase.KNOWN
        session.add(PredictedEntity(
            document_id=document.id,
            text=r.span.text,
            label=r.span.label,
            start_char=r.span.start_char,
            end_char=r.span.end_char,
            review_case=int(r.case),
            status=ACCEPTED if known else PENDING,
            matched_keywords=",".join(r.matched_keywords),
            reviewer="auto" if known else None,
            reviewed_at=now if known else None,
        ))
    document.processed_at = now
    return len(results)


def pending_entities(session, case=None):
    q = session.query(PredictedEntity).filter(PredictedEntity.status == PENDING)
    if case is not None:
        q = q.filter(PredictedEntity.review_case == int(case))
    return q.order_by(PredictedEntity.id).all()


def apply_decisions(session, decisions, keywords, reviewer="manual"):
    """
    decisions: {entity_id: "accepted" | "rejected" | "pending"}

    A confirmed case 1 span is a name the list did not know yet, so it is
    appended to ``keywords``. Case 2 confirmations stay out of the list: the
    overlapping entry already covers the name. Returns the keywords added.
    The caller commits and saves the keyword list.
    """
    added = []
    now = datetime.utcnow()
    for entity_id, status in decisions.items():
        if status not in (ACCEPTED, REJECTED, PENDING):
            raise ReviewError(f"Unknown review status {status!r} for entity {entity_id}")
        ent = session.get(PredictedEntity, int(entity_id))
        if ent is None:
            raise ReviewError(f"No predicted entity with id {entity_id}")
        if ent.status == status:
            continue

        ent.status = status
        ent.reviewer = None if status == PENDING else reviewer
        ent.reviewed_at = None if status == PENDING else now

        if status == ACCEPTED and ent.review_case == ReviewCase.NEW_CANDIDATE:
            if keywords.add(ent.text):
                added.append(ent.text)
                logger.info("Keyword added after review: %s", ent.text)
    return added


def review_summary(session):
    """{(review_case, status): count}"""
    rows = session.query(PredictedEntity.review_case, PredictedEntity.status).all()
    summary = {}
    for case, status in rows:
        summary[(case, status)] = summary.get((case, status), 0) + 1
    return summary
