# streamlit_app/pages/01_Review_Queue.py

# --- bootstrap import path BEFORE anything else that depends on it ---
import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT))
# --------------------------------------------------------------------

import pandas as pd
import streamlit as st

from data.db.review_model import get_session, PredictedEntity, Document, STATUSES
from recognizer.config import load_settings
from recognizer.highlight import extract_context
from recognizer.keywords import load_keywords, save_keywords
from recognizer.review import apply_decisions, pending_entities

CASE_NAMES = {1: "1 · new name", 2: "2 · partial match", 3: "3 · known"}

st.set_page_config(page_title="Review Queue", layout="wide")
st.title("🧠 Entity Review Queue")

settings = load_settings()
session = get_session(settings.database_url)

rows = []
for ent in pending_entities(session):
    doc = session.get(Document, ent.document_id)
    rows.append({
        "Entity ID": ent.id,
        "Entity": ent.text,
        "Label": ent.label,
        "Case": CASE_NAMES.get(ent.review_case, str(ent.review_case)),
        "Related keywords": ent.matched_keywords or "",
        "Decision": ent.status,
        "Context": extract_context(ent.text, doc.text if doc else ""),
        "Document": doc.title if doc else "",
    })

df = pd.DataFrame(rows)
if df.empty:
    st.success("Nothing to review. Import & process documents, then reload.")
    st.stop()

st.sidebar.title("Filters")
st.sidebar.info(f"{len(df)} entities waiting for review.")

case_opts = sorted(df["Case"].unique().tolist())
case_sel = st.sidebar.multiselect("Review case", options=case_opts, default=case_opts)
label_opts = sorted([x for x in df["Label"].dropna().unique().tolist() if x])
label_sel = st.sidebar.multiselect("Label", options=label_opts, default=label_opts)
text_filter = st.sidebar.text_input("Search (entity/document)")

mask = pd.Series([True] * len(df))
if case_sel:
    mask &= df["Case"].isin(case_sel)
if label_sel:
    mask &= df["Label"].isin(label_sel)
if text_filter:
    t = text_filter.lower()
    mask &= df.apply(
        lambda r: t in (r.get("Entity", "") or "").lower()
               or t in (r.get("Document", "") or "").lower(),
        axis=1
    )

df_view = df[mask].copy()

edited = st.data_editor(
    df_view,
    use_container_width=True,
    num_rows="fixed",
    column_config={
        "Decision": st.column_config.SelectboxColumn(options=list(STATUSES)),
    },
    disabled=["Entity ID", "Entity", "Label", "Case", "Related keywords", "Context", "Document"],
    key="review_editor"
)

reviewer = st.text_input("Reviewer", value="manual")

if st.button("💾 Save decisions"):
    decisions = {
        int(row["Entity ID"]): row["Decision"]
        for _, row in edited.iterrows()
    }
    keywords = load_keywords(settings.keywords_file)
    try:
        added = apply_decisions(session, decisions, keywords, reviewer=reviewer or "manual")
        session.commit()
    except Exception as e:
        session.rollback()
        st.error(f"Could not save decisions: {e}")
    else:
        if added:
            save_keywords(settings.keywords_file, keywords)
            st.success(f"Saved. Added {len(added)} keyword(s): {', '.join(added)}")
        else:
            st.success("Saved.")
        st.rerun()

st.markdown("### 🔍 Context")
for _, row in edited.iterrows():
    with st.expander(f"{row['Entity']} — {row['Case']}"):
        st.markdown(f"**Label**: {row['Label']}")
        st.markdown(f"**Related keywords**: {row['Related keywords'] or '—'}")
        st.markdown(f"**Document**: {row['Document']}")
        st.markdown(row["Context"])
