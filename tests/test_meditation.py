"""
Tests for the meditation request handler.
"""
import json
from unittest.mock import patch

import pytest
import requests

from tests.helpers import FakeResponse, completion_body
from utils.errors import MissingCredential, ProviderError, ProviderQuotaExceeded
from utils.meditation import (
    FALLBACK_CONTENT,
    VERSE_TEXT_UNAVAILABLE,
    fallback_result,
    handle_meditation_request,
)
from utils.prompts import RESPONSE_FORMAT

POST = "utils.llm.requests.post"


def body(verse_input):
    return json.dumps({"verseInput": verse_input}, ensure_ascii=False)


class TestRequestFailures:

    @pytest.mark.parametrize("raw", ["{", "", "verseInput=요한복음"])
    def test_malformed_body(self, raw, provider_config):
        payload, status = handle_meditation_request(raw, provider_config)
        assert status == 400
        assert payload == {"success": False, "error": "올바른 JSON 형식이 필요해요."}

    def test_invalid_reference(self, provider_config):
        with patch(POST) as post:
            payload, status = handle_meditation_request(body("요한복음 abc"), provider_config)
        assert status == 400
        assert payload["success"] is False
        assert "마가복음 10:27" in payload["error"]
        post.assert_not_called()


class TestFallbacks:

    def test_missing_credential(self):
        with patch(POST) as post:
            payload, status = handle_meditation_request(body("시편 23편 1절"), {"OPENAI_API_KEY": None})
        assert status == 200
        assert payload["success"] is True
        assert payload["fallback"] is True
        assert "OPENAI_API_KEY" in payload["warning"]
        assert payload["data"]["verseInput"] == "시편 23:1"
        assert payload["data"]["prayer"] == FALLBACK_CONTENT["prayer"]
        post.assert_not_called()

    @pytest.mark.parametrize("status_code", [429, 402])
    def test_quota_exceeded(self, status_code, provider_config):
        error = {"error": {"message": "You exceeded your current quota", "type": "insufficient_quota"}}
        with patch(POST, return_value=FakeResponse(status_code, error)):
            payload, status = handle_meditation_request(body("마가복음 10:27"), provider_config)
        assert status == 200
        assert payload["success"] is True
        assert payload["fallback"] is True
        assert payload["warning"]
        assert payload["data"]["verseInput"] == "마가복음 10:27"

    @pytest.mark.parametrize("error_body", [
        {"error": "Too Many Requests"},
        ["rate limited"],
        {"error": {"message": 42}},
        "slow down",
    ])
    def test_quota_with_gateway_error_body(self, error_body, provider_config):
        with patch(POST, return_value=FakeResponse(429, error_body)):
            payload, status = handle_meditation_request(body("마가복음 10:27"), provider_config)
        assert status == 200
        assert payload["success"] is True
        assert payload["fallback"] is True
        assert payload["warning"] == ProviderQuotaExceeded.default_message

    def test_missing_credential_warning(self):
        payload, _ = handle_meditation_request(body("요한복음 3:16"), {})
        assert payload["warning"] == MissingCredential.default_message

    def test_fallback_result_satisfies_contract(self):
        result = fallback_result("마가복음 10:27")
        assert len(result.keywords) == 3
        assert len(result.reflections) == 3
        assert 2 <= len(result.related_verses) <= 3
        assert result.verse_text == VERSE_TEXT_UNAVAILABLE


class TestProviderCall:

    def test_success_envelope(self, provider_config, valid_completion):
        with patch(POST, return_value=FakeResponse(200, completion_body(valid_completion))) as post:
            payload, status = handle_meditation_request(body("마가복음 10:27"), provider_config)

        assert status == 200
        assert payload["success"] is True
        assert "fallback" not in payload
        data = payload["data"]
        assert data["verseInput"] == "마가복음 10:27"
        assert len(data["keywords"]) == 3
        assert len(data["relatedVerses"]) == 2
        assert data["verseText"] == VERSE_TEXT_UNAVAILABLE

        sent = post.call_args.kwargs
        assert sent["headers"]["Authorization"] == "Bearer sk-test"
        assert post.call_args.args[0] == provider_config["OPENAI_API_URL"]
        assert sent["json"]["model"] == "gpt-4o-mini"
        assert sent["json"]["temperature"] == 0.6
        assert sent["json"]["response_format"] == RESPONSE_FORMAT
        roles = [m["role"] for m in sent["json"]["messages"]]
        assert roles == ["system", "user"]
        assert "마가복음 10:27" in sent["json"]["messages"][1]["content"]

    def test_single_attempt(self, provider_config):
        with patch(POST, return_value=FakeResponse(503, {"error": {"message": "overloaded"}})) as post:
            handle_meditation_request(body("마가복음 10:27"), provider_config)
        assert post.call_count == 1

    def test_lookup_text_wins(self, provider_config, valid_completion, bible_data):
        valid_completion["verseText"] = "모델이 적은 본문"
        with patch(POST, return_value=FakeResponse(200, completion_body(valid_completion))):
            payload, _ = handle_meditation_request(body("막 10:27"), provider_config, bible_data)
        assert payload["data"]["verseText"].startswith("예수께서")
        assert not payload["data"]["verseText"].endswith(" ")

    def test_empty_provider_text_is_kept(self, provider_config, valid_completion):
        valid_completion["verseText"] = ""
        with patch(POST, return_value=FakeResponse(200, completion_body(valid_completion))):
            payload, _ = handle_meditation_request(body("마가복음 10:27"), provider_config, {})
        assert payload["data"]["verseText"] == ""

    def test_list_error_body_keeps_provider_status(self, provider_config):
        with patch(POST, return_value=FakeResponse(503, ["upstream down"])):
            payload, status = handle_meditation_request(body("마가복음 10:27"), provider_config)
        assert status == 503
        assert payload == {"success": False, "error": ProviderError.default_message}

    def test_string_error_body_is_surfaced(self, provider_config):
        with patch(POST, return_value=FakeResponse(502, {"error": "Bad Gateway"})):
            payload, status = handle_meditation_request(body("마가복음 10:27"), provider_config)
        assert status == 502
        assert payload == {"success": False, "error": "Bad Gateway"}

    def test_provider_text_used_without_lookup(self, provider_config, valid_completion):
        valid_completion["verseText"] = "모델이 적은 본문"
        with patch(POST, return_value=FakeResponse(200, completion_body(valid_completion))):
            payload, _ = handle_meditation_request(body("마가복음 10:27"), provider_config, {})
        assert payload["data"]["verseText"] == "모델이 적은 본문"

    def test_request_reference_is_authoritative(self, provider_config, valid_completion):
        valid_completion["verseInput"] = "막 10:27"
        with patch(POST, return_value=FakeResponse(200, completion_body(valid_completion))):
            payload, _ = handle_meditation_request(body("마가복음 10장 27절"), provider_config)
        assert payload["data"]["verseInput"] == "마가복음 10:27"

    def test_provider_error_passes_status(self, provider_config):
        error = {"error": {"message": "Incorrect API key provided", "type": "invalid_request_error"}}
        with patch(POST, return_value=FakeResponse(401, error)):
            payload, status = handle_meditation_request(body("마가복음 10:27"), provider_config)
        assert status == 401
        assert payload == {"success": False, "error": "Incorrect API key provided"}

    def test_provider_error_without_body(self, provider_config):
        with patch(POST, return_value=FakeResponse(500, None, text="upstream")):
            payload, status = handle_meditation_request(body("마가복음 10:27"), provider_config)
        assert status == 500
        assert payload["success"] is False
        assert payload["error"]

    def test_connection_failure(self, provider_config):
        with patch(POST, side_effect=requests.ConnectionError("boom")):
            payload, status = handle_meditation_request(body("마가복음 10:27"), provider_config)
        assert status == 500
        assert payload["success"] is False

    def test_contract_violation(self, provider_config, valid_completion):
        valid_completion["reflections"].append("하나 더")
        with patch(POST, return_value=FakeResponse(200, completion_body(valid_completion))):
            payload, status = handle_meditation_request(body("마가복음 10:27"), provider_config)
        assert status == 500
        assert payload == {
            "success": False,
            "error": "모델 응답이 예상한 형식을 벗어났어요. 다시 시도해 주세요.",
        }

    def test_mismatched_reference_is_contract_violation(self, provider_config, valid_completion):
        valid_completion["verseInput"] = "요한복음 3:16"
        with patch(POST, return_value=FakeResponse(200, completion_body(valid_completion))):
            payload, status = handle_meditation_request(body("마가복음 10:27"), provider_config)
        assert status == 500
        assert payload["success"] is False

    def test_empty_content_is_contract_violation(self, provider_config):
        with patch(POST, return_value=FakeResponse(200, completion_body(None))):
            payload, status = handle_meditation_request(body("마가복음 10:27"), provider_config)
        assert status == 500
        assert payload["success"] is False
