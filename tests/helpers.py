"""
Fakes for the completion provider.
"""
import json
from typing import Any, Dict


class FakeResponse:
    """Minimal stand-in for requests.Response"""

    def __init__(self, status_code: int = 200, payload: Any = None, text: str = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload, ensure_ascii=False)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


def completion_body(content: Any) -> Dict[str, Any]:
    """Wrap message content the way the chat completions API does"""
    if not isinstance(content, str) and content is not None:
        content = json.dumps(content, ensure_ascii=False)
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
    }


