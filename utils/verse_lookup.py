# utils/verse_lookup.py
import json
import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional

from utils.reference import build_lookup_key

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def load_bible_data(path: str) -> Mapping[str, str]:
    """Load the static verse table (lookup key -> verse text) once per path"""
    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning(f"Verse table not found at {path}; verse text will come from the model")
        return MappingProxyType({})

    if not isinstance(data, dict):
        raise ValueError(f"Verse table at {path} must be a JSON object")

    logger.info(f"Loaded {len(data)} verses from {path}")
    return MappingProxyType({str(k): str(v) for k, v in data.items()})


def lookup_verse_text(bible_data: Mapping[str, str], canonical: str) -> Optional[str]:
    key = build_lookup_key(canonical)
    text = bible_data.get(key)
    if text is None:
        return None
    return text.strip()
