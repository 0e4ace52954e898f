# utils/errors.py
from typing import Any, Dict, Optional

GENERIC_INPUT_MESSAGE = '입력값을 확인해 주세요.'
REFERENCE_FORMAT_MESSAGE = (
    '구절은 예: 마가복음 10:27, 마가복음 1장 1절, 시편 23편 1절, '
    '마태복음 5장 1절-4절 형식으로 입력해 주세요.'
)


class LumiError(Exception):
    """Base exception for the meditation API.

    Every subclass knows the HTTP status it maps to and how to render
    itself as the uniform failure envelope.
    """

    error_code = 'LUMI_ERROR'
    status_code = 500
    default_message = 'Selah가 지금은 응답할 수 없어요. 잠시 후 다시 시도해 주세요.'

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return f'[{self.error_code}] {self.message}'

    def to_envelope(self) -> Dict[str, Any]:
        return {'success': False, 'error': self.message}


class MalformedRequest(LumiError):
    error_code = 'MALFORMED_REQUEST'
    status_code = 400
    default_message = '올바른 JSON 형식이 필요해요.'


class InvalidReference(LumiError):
    """Raised when text does not match any supported reference convention"""

    error_code = 'INVALID_REFERENCE'
    status_code = 400
    default_message = REFERENCE_FORMAT_MESSAGE

    def __init__(self, reference: Any = None, message: Optional[str] = None):
        self.reference = reference
        super().__init__(message)


class MissingCredential(LumiError):
    error_code = 'MISSING_CREDENTIAL'
    default_message = 'OPENAI_API_KEY가 설정되지 않아 예시 응답을 반환했어요.'


class ProviderError(LumiError):
    """Non-success answer (or no answer at all) from the completion provider"""

    error_code = 'PROVIDER_ERROR'
    default_message = 'OpenAI 호출 중 오류가 발생했어요.'


class ProviderQuotaExceeded(ProviderError):
    error_code = 'PROVIDER_QUOTA_EXCEEDED'
    status_code = 429
    default_message = 'OpenAI 호출 제한으로 예시 응답을 반환했어요.'

    # HTTP statuses the provider uses for rate limits and exhausted billing
    QUOTA_STATUSES = frozenset({402, 429})


class ModelContractViolation(LumiError):
    error_code = 'MODEL_CONTRACT_VIOLATION'
    default_message = '모델 응답이 예상한 형식을 벗어났어요. 다시 시도해 주세요.'

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        super().__init__()
