# utils/meditation.py
import json
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from schemas.meditation_schemas import MeditationResult, validate_completion, validate_request
from utils.errors import (
    InvalidReference,
    LumiError,
    MalformedRequest,
    MissingCredential,
    ModelContractViolation,
    ProviderQuotaExceeded,
)
from utils.llm import OPENAI_API_URL, call_openai_api, extract_message_content
from utils.prompts import RESPONSE_FORMAT, SYSTEM_PROMPT, USER_PROMPT_TEMPLATE
from utils.verse_lookup import lookup_verse_text

logger = logging.getLogger(__name__)

VERSE_TEXT_UNAVAILABLE = '개역개정 본문을 불러오지 못했습니다.'

FALLBACK_CONTENT = {
    'background': (
        '이 구절은 하나님께서 인간으로서는 불가능해 보이는 일도 이루실 수 있다는 희망을 전합니다. '
        '특히 제자들이 제시한 의문에 대한 예수님의 응답으로, 구원은 사람의 노력보다 '
        '하나님의 은혜로 가능함을 보여 줍니다.'
    ),
    'keywords': [
        {'term': '하나님', 'meaning': '모든 가능성과 능력의 근원이자 구원을 완성하시는 분.'},
        {'term': '불가능', 'meaning': '인간의 한계 속에서 발견되는, 하나님께 맡겨야 할 영역.'},
        {'term': '은혜', 'meaning': '사람의 조건과 상관없이 하나님이 베푸시는 구원의 선물.'},
    ],
    'relatedVerses': [
        {
            'reference': '창세기 18:14',
            'reason': '아브라함과 사라에게 주신 약속처럼, 하나님께는 불가능이 없음을 상기시킵니다.',
        },
        {
            'reference': '예레미야 32:17',
            'reason': '창조주 하나님의 전능하심을 고백하며 믿음의 시선을 돌려 줍니다.',
        },
        {
            'reference': '에베소서 2:8-9',
            'reason': '구원이 인간의 행위가 아닌 하나님의 은혜로 주어짐을 확인해 줍니다.',
        },
    ],
    'reflections': [
        '나는 지금 인간적인 계산으로만 포기해 버린 기도 제목이 있는가?',
        '하나님의 은혜가 아니고는 얻을 수 없던 구원의 확신을 어떻게 누리고 있는가?',
        '불가능하다고 느끼는 상황 속에서 하나님께 어떤 순종을 드릴 수 있을까?',
    ],
    'prayer': (
        '주님, 사람에게는 불가능해 보이는 상황 속에서도 주님의 은혜와 능력을 바라보며 '
        '믿음으로 순종하게 해 주세요.'
    ),
    'verseText': VERSE_TEXT_UNAVAILABLE,
}


def fallback_result(verse_input: str) -> MeditationResult:
    """Fixed example meditation used when the model cannot be called"""
    return MeditationResult.model_validate({'verseInput': verse_input, **FALLBACK_CONTENT})


def _fallback_envelope(verse_input: str, warning: str) -> Dict[str, Any]:
    return {
        'success': True,
        'data': fallback_result(verse_input).to_json(),
        'warning': warning,
        'fallback': True,
    }


def _parse_body(raw_body):
    if isinstance(raw_body, (str, bytes, bytearray)):
        try:
            return json.loads(raw_body)
        except ValueError as e:
            raise MalformedRequest() from e
    return raw_body


def generate_meditation(
    verse_input: str,
    api_key: str,
    bible_data: Mapping[str, str],
    model: str = 'gpt-4o-mini',
    temperature: float = 0.6,
    api_url: str = OPENAI_API_URL,
) -> MeditationResult:
    """Ask the model for a meditation on a canonical reference and merge in verse text"""
    verse_text = lookup_verse_text(bible_data, verse_input)
    if verse_text:
        logger.info(f"Verse text for {verse_input} found in lookup table")

    messages = [
        {'role': 'system', 'content': SYSTEM_PROMPT},
        {'role': 'user', 'content': USER_PROMPT_TEMPLATE(verse_input)},
    ]
    completion = call_openai_api(
        messages=messages,
        api_key=api_key,
        model=model,
        temperature=temperature,
        response_format=RESPONSE_FORMAT,
        api_url=api_url,
    )

    validation = validate_completion(extract_message_content(completion), expected_reference=verse_input)
    if not validation.ok:
        logger.error(f"Completion failed validation at {validation.field}: {validation.error}")
        raise ModelContractViolation(validation.error)

    result = validation.value
    if verse_text is None:
        verse_text = result.verse_text if result.verse_text is not None else VERSE_TEXT_UNAVAILABLE
    return result.model_copy(update={'verse_input': verse_input, 'verse_text': verse_text})


def handle_meditation_request(
    raw_body,
    config: Mapping[str, Any],
    bible_data: Optional[Mapping[str, str]] = None,
) -> Tuple[Dict[str, Any], int]:
    """Run one meditation request end to end.

    Returns the response envelope and the HTTP status to send with it.
    Missing credentials and provider quota errors answer with the fixed
    example meditation flagged as a fallback instead of failing.
    """
    try:
        body = _parse_body(raw_body)

        validation = validate_request(body)
        if not validation.ok:
            raise InvalidReference(body, validation.error)
        verse_input = validation.value

        try:
            api_key = config.get('OPENAI_API_KEY')
            if not api_key:
                raise MissingCredential()
            result = generate_meditation(
                verse_input,
                api_key=api_key,
                bible_data=bible_data or {},
                model=config.get('OPENAI_MODEL', 'gpt-4o-mini'),
                temperature=config.get('OPENAI_TEMPERATURE', 0.6),
                api_url=config.get('OPENAI_API_URL', OPENAI_API_URL),
            )
        except (MissingCredential, ProviderQuotaExceeded) as e:
            logger.warning(f"{e}; returning fallback meditation")
            return _fallback_envelope(verse_input, e.message), 200

        return {'success': True, 'data': result.to_json()}, 200

    except LumiError as e:
        logger.error(f"[lumi] {e}")
        return e.to_envelope(), e.status_code
    except Exception as e:
        logger.error(f"[lumi] unexpected error: {str(e)}", exc_info=True)
        return LumiError().to_envelope(), 500
