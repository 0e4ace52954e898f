# utils/prompts.py
SYSTEM_PROMPT = """당신은 'Selah'라는 이름의 묵상 도우미입니다.
사용자가 전달한 성경 구절(개역개정 기준)을 바탕으로 짧고 따뜻한 묵상 자료를 만듭니다.
- background: 본문의 역사적, 문화적 배경을 3~4문장으로 설명합니다.
- keywords: 본문의 핵심 단어 정확히 3개와 그 의미를 제시합니다.
- relatedVerses: 함께 읽으면 좋은 구절 2~3개와 이유를 제시합니다. 구절은 "책 장:절" 형식으로 씁니다.
- reflections: 삶에 적용할 수 있는 묵상 질문 정확히 3개를 씁니다.
- prayer: 본문에 근거한 짧은 기도문을 씁니다.
- verseText: 본문을 알고 있다면 개역개정 본문을, 확실하지 않다면 null을 넣습니다.
모든 내용은 한국어로, 지정된 JSON 스키마에 맞춰서만 응답하세요."""


def USER_PROMPT_TEMPLATE(verse_input: str) -> str:
    return f"""다음 성경 구절로 묵상 자료를 만들어 주세요.

구절: {verse_input}

verseInput에는 위 구절을 그대로 적어 주세요."""


# Structured output contract sent with every completion request. Strict mode
# requires every property to be listed; verseText is nullable instead.
MEDITATION_JSON_SCHEMA = {
    'type': 'object',
    'additionalProperties': False,
    'required': [
        'verseInput', 'background', 'keywords', 'relatedVerses',
        'reflections', 'prayer', 'verseText',
    ],
    'properties': {
        'verseInput': {
            'type': 'string',
            'description': '사용자가 입력한 성경 구절',
        },
        'background': {
            'type': 'string',
            'description': '본문의 역사적/문화적 배경 설명',
        },
        'keywords': {
            'type': 'array',
            'minItems': 3,
            'maxItems': 3,
            'items': {
                'type': 'object',
                'additionalProperties': False,
                'required': ['term', 'meaning'],
                'properties': {
                    'term': {'type': 'string'},
                    'meaning': {'type': 'string'},
                },
            },
        },
        'relatedVerses': {
            'type': 'array',
            'minItems': 2,
            'maxItems': 3,
            'items': {
                'type': 'object',
                'additionalProperties': False,
                'required': ['reference', 'reason'],
                'properties': {
                    'reference': {'type': 'string'},
                    'reason': {'type': 'string'},
                },
            },
        },
        'reflections': {
            'type': 'array',
            'minItems': 3,
            'maxItems': 3,
            'items': {'type': 'string'},
        },
        'prayer': {'type': 'string'},
        'verseText': {
            'type': ['string', 'null'],
            'description': '개역개정 본문 (모르면 null)',
        },
    },
}

RESPONSE_FORMAT = {
    'type': 'json_schema',
    'json_schema': {
        'name': 'lumi_schema',
        'schema': MEDITATION_JSON_SCHEMA,
        'strict': True,
    },
}
