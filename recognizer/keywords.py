# recognizer/keywords.py
import logging
import os

logger = logging.getLogger(__name__)


def normalize_keyword(text: str) -> str:
    return " ".join((text or "").split()).casefold()


class KeywordList:
    """
    Ordered list of known names (brands, labs, ...).

    Membership ignores case and extra whitespace, so "ralph  lauren" is found
    when "Ralph Lauren" was added. The first spelling added is the one kept.
    """

    def __init__(self, keywords=()):
        self._items = []
        self._index = {}
        for kw in keywords:
            self.add(kw)

    def add(self, keyword: str) -> bool:
        key = normalize_keyword(keyword)
        if not key or key in self._index:
            return False
        self._index[key] = len(self._items)
        self._items.append(" ".join(keyword.split()))
        return True

    def find(self, text: str):
        i = self._index.get(normalize_keyword(text))
        return None if i is None else self._items[i]

    def __contains__(self, text):
        return isinstance(text, str) and normalize_keyword(text) in self._index

    def __iter__(self):
        return iter(list(self._items))

    def __len__(self):
        return len(self._items)

    def __repr__(self):
        return f"KeywordList({self._items!r})"


def load_keywords(path) -> KeywordList:
    if not os.path.exists(path):
        logger.info("Keyword file %s not found, starting with an empty list", path)
        return KeywordList()
    with open(path, "r", encoding="utf-8") as f:
        lines = [ln.strip() for ln in f]
    keywords = KeywordList(ln for ln in lines if ln and not ln.startswith("#"))
    logger.info("Loaded %d keywords from %s", len(keywords), path)
    return keywords


def save_keywords(path, keywords):
    """Write one keyword per line; comment lines already in the file are kept at the top."""
    header = []
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            header = [ln.rstrip("\n") for ln in f if ln.strip().startswith("#")]
    parent = os.path.dirname(os.fspath(path))
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for line in header:
            f.write(line + "\n")
        for kw in keywords:
            f.write(kw + "\n")
