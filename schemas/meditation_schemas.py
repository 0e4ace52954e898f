import json
from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from utils.errors import GENERIC_INPUT_MESSAGE, InvalidReference
from utils.reference import build_lookup_key, normalize_reference

EMPTY_INPUT_MESSAGE = '성경 구절을 입력해 주세요.'
COMPLETION_REFERENCE_MESSAGE = 'verseInput은 예: 마가복음 1:1 형식으로 전달되어야 해요.'
REFERENCE_MISMATCH_MESSAGE = 'verseInput이 요청한 구절과 일치하지 않아요.'


class StrictModel(BaseModel):
    model_config = ConfigDict(extra='forbid', populate_by_name=True)


class VerseInputRequest(StrictModel):
    verse_input: StrictStr = Field(..., alias='verseInput', min_length=1)


class Keyword(StrictModel):
    term: StrictStr
    meaning: StrictStr


class RelatedVerse(StrictModel):
    reference: StrictStr
    reason: StrictStr


class MeditationResult(StrictModel):
    verse_input: StrictStr = Field(..., alias='verseInput', min_length=1)
    background: StrictStr
    keywords: List[Keyword] = Field(..., min_length=3, max_length=3)
    related_verses: List[RelatedVerse] = Field(..., alias='relatedVerses', min_length=2, max_length=3)
    reflections: List[StrictStr] = Field(..., min_length=3, max_length=3)
    prayer: StrictStr
    verse_text: Optional[StrictStr] = Field(None, alias='verseText')

    def to_json(self):
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation step: either a value or a message for one field"""

    ok: bool
    value: Any = None
    error: Optional[str] = None
    field: Optional[str] = None

    @classmethod
    def success(cls, value):
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error, field=None):
        return cls(ok=False, error=error, field=field)


def _first_issue(exc: ValidationError):
    issue = exc.errors()[0]
    field = '.'.join(str(part) for part in issue.get('loc', ()))
    return field or None, issue.get('msg', GENERIC_INPUT_MESSAGE)


def validate_request(body) -> ValidationResult:
    """Validate the inbound request body and normalize its verse reference"""
    if not isinstance(body, dict):
        return ValidationResult.failure(GENERIC_INPUT_MESSAGE)

    try:
        request_model = VerseInputRequest.model_validate(body)
    except ValidationError as e:
        field, _ = _first_issue(e)
        if field == 'verseInput':
            return ValidationResult.failure(EMPTY_INPUT_MESSAGE, field)
        return ValidationResult.failure(GENERIC_INPUT_MESSAGE, field)

    try:
        canonical = normalize_reference(request_model.verse_input)
    except InvalidReference as e:
        return ValidationResult.failure(e.message, 'verseInput')

    return ValidationResult.success(canonical)


def validate_completion(raw_json, expected_reference: Optional[str] = None) -> ValidationResult:
    """Validate a provider completion against the meditation contract.

    Parsing and validation are separate phases; either failing yields a
    failure result naming the offending field. The embedded verseInput has
    to normalize on its own and, when expected_reference is given, has to
    name the same passage.
    """
    if isinstance(raw_json, (str, bytes, bytearray)):
        try:
            payload = json.loads(raw_json)
        except ValueError as e:
            return ValidationResult.failure(f'invalid JSON: {e}')
    else:
        payload = raw_json

    if not isinstance(payload, dict):
        return ValidationResult.failure('completion must be a JSON object')

    try:
        result = MeditationResult.model_validate(payload)
    except ValidationError as e:
        field, message = _first_issue(e)
        return ValidationResult.failure(message, field)

    try:
        embedded = normalize_reference(result.verse_input)
    except InvalidReference:
        return ValidationResult.failure(COMPLETION_REFERENCE_MESSAGE, 'verseInput')

    if expected_reference is not None:
        try:
            expected = normalize_reference(expected_reference)
        except InvalidReference:
            return ValidationResult.failure(COMPLETION_REFERENCE_MESSAGE, 'verseInput')
        if build_lookup_key(embedded) != build_lookup_key(expected):
            return ValidationResult.failure(REFERENCE_MISMATCH_MESSAGE, 'verseInput')

    return ValidationResult.success(result.model_copy(update={'verse_input': embedded}))
