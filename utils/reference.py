# utils/reference.py
import re
from dataclasses import dataclass
from typing import Optional

from utils.errors import InvalidReference

# Korean book names (개역개정) to their standard abbreviations
BOOK_ABBREVIATIONS = {
    '창세기': '창',
    '출애굽기': '출',
    '레위기': '레',
    '민수기': '민',
    '신명기': '신',
    '여호수아': '수',
    '사사기': '삿',
    '룻기': '룻',
    '사무엘상': '삼상',
    '사무엘하': '삼하',
    '열왕기상': '왕상',
    '열왕기하': '왕하',
    '역대상': '대상',
    '역대하': '대하',
    '에스라': '스',
    '느헤미야': '느',
    '에스더': '에',
    '욥기': '욥',
    '시편': '시',
    '잠언': '잠',
    '전도서': '전',
    '아가': '아',
    '이사야': '사',
    '예레미야': '렘',
    '예레미야애가': '애',
    '에스겔': '겔',
    '다니엘': '단',
    '호세아': '호',
    '요엘': '욜',
    '아모스': '암',
    '오바댜': '옵',
    '요나': '욘',
    '미가': '미',
    '나훔': '나',
    '하박국': '합',
    '스바냐': '습',
    '학개': '학',
    '스가랴': '슥',
    '말라기': '말',
    '마태복음': '마',
    '마가복음': '막',
    '누가복음': '눅',
    '요한복음': '요',
    '사도행전': '행',
    '로마서': '롬',
    '고린도전서': '고전',
    '고린도후서': '고후',
    '갈라디아서': '갈',
    '에베소서': '엡',
    '빌립보서': '빌',
    '골로새서': '골',
    '데살로니가전서': '살전',
    '데살로니가후서': '살후',
    '디모데전서': '딤전',
    '디모데후서': '딤후',
    '디도서': '딛',
    '빌레몬서': '몬',
    '히브리서': '히',
    '야고보서': '약',
    '베드로전서': '벧전',
    '베드로후서': '벧후',
    '요한일서': '요일',
    '요한이서': '요이',
    '요한삼서': '요삼',
    '유다서': '유',
    '요한계시록': '계',
}

QUOTE_CHARS = re.compile(r'["“”\'‘’‛‹›«»「」『』]')
WHITESPACE = re.compile(r'\s+')

# Book (non-greedy), chapter, optional ":verse", optional "-verse"
VERSE_PATTERN = re.compile(
    r'^([가-힣A-Za-z0-9\s]+?)\s*([0-9]{1,3})(?::([0-9]{1,3})(?:-([0-9]{1,3}))?)?$'
)

# Applied in order. "편" is the chapter unit used for Psalms.
INPUT_REWRITES = (
    (re.compile(r'([0-9]+)\s*[장편]\s*([0-9]+)'), r'\1:\2'),
    (re.compile(r'([0-9]+)\s*[장편]'), r'\1'),
    (re.compile(r'([0-9]+)\s*절'), r'\1'),
    (re.compile(r'~'), '-'),
    (re.compile(r'\s*-\s*'), '-'),
)


@dataclass(frozen=True)
class ParsedReference:
    book: str
    chapter: int
    start_verse: Optional[int] = None
    end_verse: Optional[int] = None


def _collapse_whitespace(value: str) -> str:
    return WHITESPACE.sub(' ', value).strip()


def _clean_input(raw: str) -> str:
    compacted = _collapse_whitespace(raw)
    for pattern, replacement in INPUT_REWRITES:
        compacted = pattern.sub(replacement, compacted)
    return compacted.strip()


def parse_reference(raw: str) -> Optional[ParsedReference]:
    """Parse a loosely formatted verse reference.

    Accepts the colon form ("마가복음 10:27"), the unit-word form
    ("마태복음 5장 1절-4절") and the Psalms form ("시편 23편 1절"), mixed
    freely. Returns None when the text is not a reference.
    """
    if not isinstance(raw, str):
        return None

    sanitized = QUOTE_CHARS.sub('', raw).strip()
    if not sanitized:
        return None

    match = VERSE_PATTERN.match(_clean_input(sanitized))
    if not match:
        return None

    book_raw, chapter_raw, start_raw, end_raw = match.groups()
    book = _collapse_whitespace(book_raw)
    if not book:
        return None

    try:
        chapter = int(chapter_raw)
        start_verse = int(start_raw) if start_raw else None
        end_verse = int(end_raw) if end_raw else None
    except ValueError:
        return None

    if chapter < 1:
        return None
    if start_verse is not None and start_verse < 1:
        return None
    if start_verse is not None and end_verse is not None and end_verse < start_verse:
        return None

    return ParsedReference(
        book=book,
        chapter=chapter,
        start_verse=start_verse,
        end_verse=end_verse if end_verse is not None else start_verse,
    )


def format_reference(parsed: ParsedReference) -> str:
    """Format a parsed reference in canonical "book chapter:start-end" form"""
    if parsed.start_verse is None:
        return f'{parsed.book} {parsed.chapter}'
    if parsed.end_verse and parsed.end_verse != parsed.start_verse:
        return f'{parsed.book} {parsed.chapter}:{parsed.start_verse}-{parsed.end_verse}'
    return f'{parsed.book} {parsed.chapter}:{parsed.start_verse}'


def normalize_reference(raw: str) -> str:
    """Return the canonical form of a reference or raise InvalidReference"""
    parsed = parse_reference(raw)
    if parsed is None:
        raise InvalidReference(raw)
    return format_reference(parsed)


def abbreviate(book: str) -> str:
    """Map a full book name to its abbreviation.

    Unknown books come back with whitespace removed, so "Unknown Book"
    becomes "UnknownBook".
    """
    compact = WHITESPACE.sub('', book or '')
    return BOOK_ABBREVIATIONS.get(compact, compact)


def build_lookup_key(canonical: str) -> str:
    """Build the verse table key for a canonical reference ("시편 23:1" -> "시23:1")"""
    book, _, rest = canonical.strip().rpartition(' ')
    if not book:
        return WHITESPACE.sub('', canonical)
    return abbreviate(book) + WHITESPACE.sub('', rest)
