# recognizer/config.py
import os
from dataclasses import dataclass, field
from typing import List, Optional

import yaml
from dotenv import load_dotenv

from recognizer.errors import ConfigError

load_dotenv()

DEFAULT_SETTINGS_PATH = os.path.join("config", "settings.yaml")

# transformer → better NER; small model when the transformer is not installed
DEFAULT_MODELS = ["en_core_web_trf", "en_core_web_sm"]

RULER_POSITIONS = {"before", "after", None}
MATCHER_ATTRS = {None, "ORTH", "TEXT", "LOWER", "NORM", "SHAPE", "LEMMA", "POS", "TAG"}


@dataclass
class Settings:
    model_names: List[str] = field(default_factory=lambda: list(DEFAULT_MODELS))
    ruler_position: Optional[str] = "before"
    overwrite_ents: bool = False
    phrase_matcher_attr: Optional[str] = "LOWER"
    label: str = "BRAND"
    keywords_file: str = os.path.join("config", "keywords.txt")
    patterns_file: Optional[str] = os.path.join("config", "entity_ruler_patterns.jsonl")
    review_labels: Optional[List[str]] = None
    database_url: Optional[str] = None


def _section(data, name):
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(value).__name__}")
    return value


def _position(value):
    # YAML reads a bare `none` as a string
    if isinstance(value, str) and value.lower() in {"none", "last", ""}:
        return None
    if value not in RULER_POSITIONS:
        raise ConfigError(f"ruler.position must be 'before', 'after' or none, got {value!r}")
    return value


def settings_from_dict(data):
    """Build Settings from the parsed YAML document (missing keys keep defaults)."""
    data = data or {}
    model = _section(data, "model")
    ruler = _section(data, "ruler")
    review = _section(data, "review")
    s = Settings()

    names = model.get("names")
    if names:
        s.model_names = [names] if isinstance(names, str) else list(names)

    if "position" in ruler:
        s.ruler_position = _position(ruler["position"])
    s.overwrite_ents = bool(ruler.get("overwrite_ents", s.overwrite_ents))
    if "phrase_matcher_attr" in ruler:
        attr = ruler["phrase_matcher_attr"]
        attr = attr.upper() if isinstance(attr, str) else attr
        if attr not in MATCHER_ATTRS:
            raise ConfigError(f"Unsupported ruler.phrase_matcher_attr: {attr!r}")
        s.phrase_matcher_attr = attr
    s.label = ruler.get("label", s.label)
    s.patterns_file = ruler.get("patterns_file", s.patterns_file)

    s.keywords_file = data.get("keywords_file", s.keywords_file)
    labels = review.get("labels")
    s.review_labels = list(labels) if labels else None
    s.database_url = data.get("database_url", s.database_url)
    return s


def load_settings(path=None):
    """
    Load settings with this priority:
      1. environment (DATABASE_URL, RECOGNIZER_MODELS as a comma-separated list)
      2. YAML file (config/settings.yaml unless a path is given)
      3. built-in defaults
    """
    yaml_path = path or DEFAULT_SETTINGS_PATH
    data = {}
    if os.path.exists(yaml_path):
        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}
    elif path is not None:
        raise ConfigError(f"Settings file not found: {path}")
    if not isinstance(data, dict):
        raise ConfigError(f"{yaml_path}: top level must be a mapping")

    s = settings_from_dict(data)

    if os.environ.get("DATABASE_URL"):
        s.database_url = os.environ["DATABASE_URL"]
    models = os.environ.get("RECOGNIZER_MODELS")
    if models:
        s.model_names = [m.strip() for m in models.split(",") if m.strip()]
    return s
