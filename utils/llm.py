# utils/llm.py
import logging
from typing import Any, Dict, List, Optional

import requests

from utils.errors import ModelContractViolation, ProviderError, ProviderQuotaExceeded

logger = logging.getLogger(__name__)

OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"


def _error_message(response) -> Optional[str]:
    """Pull a message out of an error body of any JSON shape"""
    try:
        error_json = response.json()
    except ValueError:
        return None

    error = error_json.get("error") if isinstance(error_json, dict) else None
    if isinstance(error, dict):
        message = error.get("message")
        return message if isinstance(message, str) else None
    if isinstance(error, str):
        return error
    return None


def call_openai_api(
    messages: List[Dict[str, str]],
    api_key: str,
    model: str = "gpt-4o-mini",
    temperature: float = 0.6,
    response_format: Optional[Dict[str, Any]] = None,
    api_url: str = OPENAI_API_URL,
) -> Dict[str, Any]:
    """Call the OpenAI chat completions API once and return the decoded body.

    Raises ProviderQuotaExceeded for rate limit and billing statuses and
    ProviderError for every other failure. There is no retry here; the
    caller decides whether to ask again.
    """
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    data = {
        "model": model,
        "temperature": temperature,
        "messages": messages,
    }
    if response_format:
        data["response_format"] = response_format

    try:
        response = requests.post(api_url, headers=headers, json=data)
    except requests.RequestException as e:
        logger.error(f"Error calling OpenAI API: {str(e)}")
        raise ProviderError(f"OpenAI API에 연결하지 못했어요: {str(e)}") from e

    if response.status_code != 200:
        logger.error(f"API error: {response.status_code}, {response.text}")

        if response.status_code in ProviderQuotaExceeded.QUOTA_STATUSES:
            raise ProviderQuotaExceeded(status_code=response.status_code)
        raise ProviderError(_error_message(response), status_code=response.status_code)

    try:
        return response.json()
    except ValueError as e:
        raise ModelContractViolation("provider body is not JSON") from e


def extract_message_content(completion: Dict[str, Any]) -> str:
    """Pull the single assistant message out of a chat completion body"""
    try:
        content = completion["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None

    if not content:
        raise ModelContractViolation("모델에서 응답을 받지 못했어요.")
    return content
