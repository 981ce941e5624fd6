# streamlit_app/pages/02_Keyword_Matcher.py

# --- bootstrap path ---
import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT))
# ----------------------

import spacy
import streamlit as st

from recognizer.config import load_settings
from recognizer.highlight import CASE_COLORS, PALETTE, highlight_spans
from recognizer.keywords import load_keywords
from recognizer.phrase_matching import match_keywords
from recognizer.pipeline import build_pipeline, extract_entities
from recognizer.triage import KeywordTriage

st.set_page_config(page_title="Keyword Matcher", layout="wide")
st.title("🔎 Keyword Matcher")

settings = load_settings()
keywords = load_keywords(settings.keywords_file)


@st.cache_resource
def get_pipeline(keyword_items):
    # keyed on the list so names added in the Review Queue reach the ruler
    return build_pipeline(settings, keywords=list(keyword_items))


def show(text, highlights):
    html_preview = highlight_spans(text, highlights)
    st.markdown(f"<div style='white-space:pre-wrap; font-family: ui-monospace, SFMono-Regular, Menlo, monospace;'>{html_preview}</div>", unsafe_allow_html=True)


text = st.text_area("Text", value="armani and monique Lhuillier are both brands")
with st.expander(f"Keyword list ({len(keywords)})"):
    st.write(list(keywords))

st.markdown("### Phrase matcher")
attr = st.radio("Match on", options=["ORTH", "LOWER"], index=1, horizontal=True)
matches = match_keywords(spacy.blank("en"), keywords, text, attr=attr, label=settings.label)
st.caption(f"{len(matches)} match(es).")
show(text, [
    {"start": m.start_char, "end": m.end_char, "label": m.label, "color": PALETTE[i % len(PALETTE)]}
    for i, m in enumerate(matches)
])

st.divider()
st.markdown("### Pipeline (entity ruler + NER)")
if st.button("Run pipeline"):
    try:
        nlp = get_pipeline(tuple(keywords))
    except Exception as e:
        st.error(f"Could not build the pipeline: {e}")
        st.stop()
    triage = KeywordTriage(nlp, keywords)
    results = triage.triage(extract_entities(nlp, text), labels=settings.review_labels)
    show(text, [
        {"start": r.span.start_char, "end": r.span.end_char,
         "label": f"{r.span.label} · case {int(r.case)}", "color": CASE_COLORS[int(r.case)]}
        for r in results
    ])
    for r in results:
        st.markdown(f"- **{r.span.text}** `{r.span.label}` → case {int(r.case)}"
                    + (f" (related: {', '.join(r.matched_keywords)})" if r.matched_keywords else ""))
