"""Contract error envelope and the mapping from internal failures onto it.

Every 4xx/5xx from the API routes has the shape::

    {"error": {"type": ..., "code": ..., "message": ..., "details": {}}}

so clients can branch on ``error.code`` alone.
"""
from typing import Optional
from fastapi.responses import JSONResponse
from textintel.auth import AuthError, AuthFailure
from textintel.provider import ProviderError, ProviderFailure
from textintel.validation import InputError, InputFailure

AUTHENTICATION_ERROR = 'AuthenticationError'
VALIDATION_ERROR = 'validation_error'
PROCESSING_ERROR = 'processing_error'

MISSING_TOKEN = 'MISSING_TOKEN'
INVALID_TOKEN = 'INVALID_TOKEN'
INVALID_TEXT = 'INVALID_TEXT'
INVALID_URL = 'INVALID_URL'
TEXT_TOO_LONG = 'TEXT_TOO_LONG'

GENERIC_PROCESSING_MESSAGE = 'Text processing failed'

AUTH_MESSAGES = {
    AuthFailure.MISSING_TOKEN: (MISSING_TOKEN, 'Authorization header with Bearer token is required'),
    AuthFailure.EXPIRED: (INVALID_TOKEN, 'Session expired, please refresh the page'),
    AuthFailure.INVALID: (INVALID_TOKEN, 'Invalid session token'),
}

URL_INPUT_FAILURES = {
    InputFailure.EMPTY_INPUT,
    InputFailure.BOTH_PROVIDED,
    InputFailure.INVALID_URL_SCHEME,
}

PROVIDER_CODES = {
    ProviderFailure.TEXT: INVALID_TEXT,
    ProviderFailure.URL: INVALID_URL,
    ProviderFailure.LENGTH: TEXT_TOO_LONG,
}


class ContractError(Exception):
    def __init__(self, status: int, error_type: str, code: str, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.status = status
        self.type = error_type
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        return {
            'error': {
                'type': self.type,
                'code': self.code,
                'message': self.message,
                'details': self.details,
            }
        }


def error_response(err: ContractError) -> JSONResponse:
    return JSONResponse(status_code=err.status, content=err.to_dict())


def from_auth_error(err: AuthError) -> ContractError:
    code, message = AUTH_MESSAGES[err.failure]
    return ContractError(401, AUTHENTICATION_ERROR, code, message)


def malformed_body() -> ContractError:
    return ContractError(400, VALIDATION_ERROR, INVALID_TEXT, 'Request body must be valid JSON')


def from_input_error(err: InputError) -> ContractError:
    url_related = err.failure in URL_INPUT_FAILURES or (
        err.failure is InputFailure.WRONG_TYPE and err.field == 'url')
    code = INVALID_URL if url_related else INVALID_TEXT
    return ContractError(400, VALIDATION_ERROR, code, err.message)


def from_provider_error(err: ProviderError) -> ContractError:
    code = PROVIDER_CODES.get(err.kind)
    if code is None:
        return internal_error()
    return ContractError(400, PROCESSING_ERROR, code, err.message)


def internal_error() -> ContractError:
    # INVALID_TEXT on the 500 path is what existing clients expect
    return ContractError(500, PROCESSING_ERROR, INVALID_TEXT, GENERIC_PROCESSING_MESSAGE)
