# data/db/review_model.py
import hashlib
import os
from datetime import datetime

from sqlalchemy import (
    create_engine, Column, Integer, String, Text, ForeignKey, DateTime
)
from sqlalchemy.orm import declarative_base, sessionmaker, relationship
from dotenv import load_dotenv

load_dotenv()

Base = declarative_base()

# review status values
PENDING = "pending"
ACCEPTED = "accepted"
REJECTED = "rejected"
STATUSES = (PENDING, ACCEPTED, REJECTED)


def text_checksum(text):
    return hashlib.sha1((text or "").encode("utf-8")).hexdigest()


class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True)
    title = Column(String)
    text = Column(Text)
    source = Column(String)
    checksum = Column(String(40), unique=True, index=True)   # sha1 of text, dedupe key
    created_at = Column(DateTime, default=datetime.utcnow)
    processed_at = Column(DateTime)                          # NULL until the pipeline ran

    entities = relationship("PredictedEntity", back_populates="document", cascade="all, delete-orphan")


class PredictedEntity(Base):
    __tablename__ = "predicted_entities"

    id = Column(Integer, primary_key=True)
    document_id = Column(Integer, ForeignKey("documents.id"), index=True)
    text = Column(String)
    label = Column(String, index=True)        # spaCy label (ORG, BRAND, ...)

    start_char = Column(Integer)              # inclusive
    end_char = Column(Integer)                # exclusive

    review_case = Column(Integer, index=True)          # 1 new, 2 partial overlap, 3 known
    status = Column(String, index=True, default=PENDING)
    matched_keywords = Column(String)                  # comma-separated
    reviewer = Column(String)
    reviewed_at = Column(DateTime)

    document = relationship("Document", back_populates="entities")


def _resolve_db_url():
    """
    Resolve the database URL with this priority:
      1. DATABASE_URL environment variable (local .env or Streamlit secrets bridge in Home.py)
      2. Default SQLite path for local development
    """
    url = os.environ.get("DATABASE_URL") or "sqlite:///data/reviews.db"
    # Heroku-style postgres:// URIs; SQLAlchemy 1.4+ requires postgresql://
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def get_session(db_url=None):
    if db_url is None:
        db_url = _resolve_db_url()
    elif db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql://", 1)

    engine_kwargs = {}
    if not db_url.startswith("sqlite"):
        # Keep connections alive across Streamlit reruns
        engine_kwargs["pool_pre_ping"] = True

    engine = create_engine(db_url, **engine_kwargs)
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    return Session()
