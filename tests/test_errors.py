import pytest
from textintel.auth import AuthError, AuthFailure
from textintel.errors import from_auth_error, from_input_error, from_provider_error, internal_error, malformed_body
from textintel.provider import ProviderError, ProviderFailure, classify_message
from textintel.validation import InputError, InputFailure

@pytest.mark.parametrize('failure,code', [
    (AuthFailure.MISSING_TOKEN, 'MISSING_TOKEN'),
    (AuthFailure.EXPIRED, 'INVALID_TOKEN'),
    (AuthFailure.INVALID, 'INVALID_TOKEN'),
])
def test_auth_errors(failure, code):
    err = from_auth_error(AuthError(failure))
    assert (err.status, err.type, err.code) == (401, 'AuthenticationError', code)

def test_expired_message_asks_for_refresh():
    assert 'expired' in from_auth_error(AuthError(AuthFailure.EXPIRED)).message.lower()

@pytest.mark.parametrize('failure,field,code', [
    (InputFailure.EMPTY_INPUT, None, 'INVALID_URL'),
    (InputFailure.BOTH_PROVIDED, None, 'INVALID_URL'),
    (InputFailure.INVALID_URL_SCHEME, 'url', 'INVALID_URL'),
    (InputFailure.EMPTY_TEXT, 'text', 'INVALID_TEXT'),
    (InputFailure.WRONG_TYPE, 'text', 'INVALID_TEXT'),
    (InputFailure.WRONG_TYPE, 'url', 'INVALID_URL'),
    (InputFailure.UNSUPPORTED_SUMMARIZE_VERSION, 'summarize', 'INVALID_TEXT'),
])
def test_input_errors(failure, field, code):
    err = from_input_error(InputError(failure, 'msg', field=field))
    assert (err.status, err.type, err.code, err.message) == (400, 'validation_error', code, 'msg')

def test_malformed_body():
    assert malformed_body().to_dict() == {'error': {
        'type': 'validation_error', 'code': 'INVALID_TEXT',
        'message': 'Request body must be valid JSON', 'details': {}}}

@pytest.mark.parametrize('message,kind', [
    ('Deepgram API error (400): Invalid text input', ProviderFailure.TEXT),
    ('Deepgram API error (400): could not fetch URL', ProviderFailure.URL),
    ('Deepgram API error (413): input is too long', ProviderFailure.LENGTH),
    ('Deepgram API error (400): Text too long', ProviderFailure.TEXT),
    ('Deepgram API error (503): upstream unavailable', ProviderFailure.OTHER),
])
def test_classify_message(message, kind):
    assert classify_message(message) is kind

@pytest.mark.parametrize('message,code', [
    ('Deepgram API error (400): bad text', 'INVALID_TEXT'),
    ('Deepgram API error (400): bad url', 'INVALID_URL'),
    ('Deepgram API error (400): payload too long', 'TEXT_TOO_LONG'),
])
def test_client_correctable_provider_errors(message, code):
    err = from_provider_error(ProviderError(message, http_status=400))
    assert (err.status, err.type, err.code, err.message) == (400, 'processing_error', code, message)

def test_other_provider_error_is_generic_500():
    err = from_provider_error(ProviderError('Deepgram API error (500): secret stack detail', http_status=500))
    assert (err.status, err.type, err.code) == (500, 'processing_error', 'INVALID_TEXT')
    assert 'secret' not in err.message
    assert err.to_dict() == internal_error().to_dict()

def test_explicit_kind_wins_over_message():
    err = ProviderError('request to url failed', kind=ProviderFailure.OTHER)
    assert from_provider_error(err).status == 500
