# streamlit_app/Home.py: main entry point
#
#   streamlit run streamlit_app/Home.py
#
# It also bridges st.secrets → os.environ so that every page and every
# script (import_documents, process_documents) can read os.environ["DATABASE_URL"].

import os
import sys
from pathlib import Path

# ── import path ──────────────────────────────────────────────────────────────
ROOT = Path(__file__).resolve().parent.parent   # project root
sys.path.insert(0, str(ROOT))

# ── secrets bridge ───────────────────────────────────────────────────────────
import streamlit as st

_SECRET_KEYS = ["DATABASE_URL", "RECOGNIZER_MODELS"]
for _k in _SECRET_KEYS:
    if _k in st.secrets and not os.environ.get(_k):
        os.environ[_k] = st.secrets[_k]

# ── page ─────────────────────────────────────────────────────────────────────
import pandas as pd

from data.db.review_model import get_session, Document, PENDING, STATUSES
from recognizer.config import load_settings
from recognizer.keywords import load_keywords
from recognizer.review import review_summary

st.set_page_config(
    page_title="Brand Entity Review",
    page_icon="🏷️",
    layout="wide",
)

st.title("🏷️ Brand Entity Review")
st.caption("Keyword-list entity ruler + NER predictions, reconciled by a human reviewer.")

st.divider()

settings = load_settings()

# ── quick stats ──────────────────────────────────────────────────────────────
try:
    session = get_session(settings.database_url)
    n_docs = session.query(Document).count()
    summary = review_summary(session)
    n_keywords = len(load_keywords(settings.keywords_file))
    session.close()

    n_entities = sum(summary.values())
    n_pending = sum(n for (_, status), n in summary.items() if status == PENDING)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Documents", f"{n_docs:,}")
    col2.metric("Predicted entities", f"{n_entities:,}")
    col3.metric("Waiting for review", f"{n_pending:,}")
    col4.metric("Keywords", f"{n_keywords:,}")

    if summary:
        st.markdown("#### By review case")
        st.dataframe(
            pd.DataFrame(
                [{"Case": case, "Status": status, "Entities": n} for (case, status), n in summary.items()]
            )
            .pivot_table(index="Case", columns="Status", values="Entities", fill_value=0, aggfunc="sum")
            .reindex(columns=list(STATUSES), fill_value=0),
            use_container_width=True,
        )
except Exception as e:
    st.warning(f"Could not connect to the database: {e}")

st.divider()

st.markdown("""
### Pages

| Page | What it does |
|------|-------------|
| **Review Queue** | Confirm or reject predicted entities that are not (exactly) on the keyword list |
| **Keyword Matcher** | Try the phrase matcher and the full pipeline on a piece of text |

### Review cases

| Case | Prediction | Action |
|------|------------|--------|
| 1 | not on the list, no shared words | review; confirmed names are added to the list |
| 2 | not on the list, shares words with an entry | review (short form or error?) |
| 3 | on the list | accepted automatically |
""")

st.markdown("""
### Pipeline

```bash
python scripts/import_documents.py docs.yaml
python scripts/process_documents.py
python scripts/export_patterns.py --token-attr LOWER
```
""")
