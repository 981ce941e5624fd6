# recognizer/highlight.py
import re
from html import escape

# review case -> highlight colour
CASE_COLORS = {1: "#f48fb1", 2: "#ffe082", 3: "#a5d6a7"}
PALETTE = ["#ffeb3b", "#a5d6a7", "#90caf9", "#f48fb1", "#ffe082", "#b39ddb", "#80deea"]


def extract_context(entity_text: str, full_text: str, window_chars: int = 200) -> str:
    if not full_text:
        return "No text available."
    pattern = re.compile(re.escape(entity_text), flags=re.IGNORECASE)
    m = pattern.search(full_text)
    if not m:
        return "Not found in text"
    start = max(m.start() - window_chars, 0)
    end = min(m.end() + window_chars, len(full_text))
    snippet = full_text[start:end]
    return pattern.sub(lambda hit: f"**{hit.group(0)}**", snippet)


def highlight_spans(text: str, highlights: list) -> str:
    """
    highlights: list of dicts with keys:
       - start, end (char offsets, exclusive end)
       - label (string)
       - color (string HEX or name)
    Returns HTML with <mark> wrappers for spans. A span overlapping an
    earlier one is skipped.
    """
    if not text:
        return "<i>No text</i>"

    out = []
    curr = 0
    for h in sorted(highlights, key=lambda h: (h["start"], -h["end"])):
        s, e = h["start"], h["end"]
        if s < curr or e <= s:
            continue
        color = h.get("color", "#ffd54f")
        lab = h.get("label", "")
        if s > curr:
            out.append(escape(text[curr:s]))
        out.append(
            f'<mark style="background:{color}; padding:0 2px; border-radius:3px;" '
            f'title="{escape(lab)}">{escape(text[s:e])}</mark>'
        )
        curr = e
    if curr < len(text):
        out.append(escape(text[curr:]))
    return "".join(out)
