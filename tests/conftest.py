"""
Test configuration

Shared fixtures for the meditation API tests.
"""

from typing import Any, Dict

import pytest


@pytest.fixture
def valid_completion() -> Dict[str, Any]:
    """A completion payload that satisfies the meditation contract."""
    return {
        "verseInput": "마가복음 10:27",
        "background": "부자 청년과의 대화 직후 제자들이 누가 구원을 얻을 수 있는지 묻는 장면입니다.",
        "keywords": [
            {"term": "사람", "meaning": "스스로 구원에 이를 수 없는 존재."},
            {"term": "하나님", "meaning": "모든 것을 하실 수 있는 분."},
            {"term": "가능", "meaning": "하나님의 능력 안에서 열리는 길."},
        ],
        "relatedVerses": [
            {"reference": "창세기 18:14", "reason": "여호와께 능치 못한 일이 없음을 보여 줍니다."},
            {"reference": "누가복음 1:37", "reason": "하나님의 말씀은 능치 못함이 없습니다."},
        ],
        "reflections": [
            "내가 불가능하다고 단정한 일은 무엇인가?",
            "구원을 내 힘으로 얻으려 한 적은 없는가?",
            "오늘 하나님께 맡길 한 가지는 무엇인가?",
        ],
        "prayer": "주님, 제 한계 너머에서 일하시는 주님을 신뢰하게 하소서.",
        "verseText": None,
    }


@pytest.fixture
def bible_data() -> Dict[str, str]:
    return {
        "막10:27": " 예수께서 저희를 보시며 가라사대 사람으로는 할 수 없으되 하나님으로는 그렇지 아니하니 ",
        "시23:1": "여호와는 나의 목자시니 내가 부족함이 없으리로다",
    }


@pytest.fixture
def provider_config() -> Dict[str, Any]:
    return {
        "OPENAI_API_KEY": "sk-test",
        "OPENAI_MODEL": "gpt-4o-mini",
        "OPENAI_TEMPERATURE": 0.6,
        "OPENAI_API_URL": "https://api.openai.test/v1/chat/completions",
    }


@pytest.fixture
def flask_app():
    from app import app

    app.config.update(TESTING=True, OPENAI_API_KEY=None)
    yield app
    app.config["OPENAI_API_KEY"] = None


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()
