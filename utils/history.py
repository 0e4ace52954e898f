# utils/history.py
"""Client-side history helper: the list rules a front end applies to past results."""
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

MAX_HISTORY = 3


@dataclass
class HistoryEntry:
    verse_input: str
    response: Dict[str, Any]
    timestamp: float = field(default_factory=lambda: time.time() * 1000)

    @classmethod
    def from_result(cls, data: Dict[str, Any], timestamp: Optional[float] = None):
        """Build an entry from the `data` object of a success envelope"""
        response = {k: v for k, v in data.items() if k != 'verseInput'}
        entry = cls(verse_input=data['verseInput'], response=response)
        if timestamp is not None:
            entry.timestamp = timestamp
        return entry

    def to_json(self):
        return {
            'verseInput': self.verse_input,
            'response': self.response,
            'timestamp': self.timestamp,
        }


def push_history(history: List[HistoryEntry], entry: HistoryEntry, limit: int = MAX_HISTORY) -> List[HistoryEntry]:
    """Return a new history with entry first, older copies of its verse dropped, capped at limit"""
    rest = [item for item in history if item.verse_input != entry.verse_input]
    return ([entry] + rest)[:limit]
