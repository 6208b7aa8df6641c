import json
import os
from config import Config
from log import get_logger

logger = get_logger(__name__)

LOCALES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "locales")

_strings = {}


def load(lang=None):
    lang = lang or Config.LANG
    path = os.path.join(LOCALES_DIR, f"{lang}.json")
    if not os.path.exists(path):
        logger.warning(f"Locale {lang} not found, falling back to en")
        path = os.path.join(LOCALES_DIR, "en.json")

    with open(path, "r", encoding="utf-8") as f:
        _strings.clear()
        _strings.update(json.load(f))


def translate(key, **kwargs):
    """Look up ``key``; unknown keys come back as the key itself."""
    if not _strings:
        load()
    text = _strings.get(key, key)
    return text.format(**kwargs) if kwargs else text
