from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

URL_SCHEMES = ('http://', 'https://')
DEFAULT_LANGUAGE = 'en'
SUMMARIZE_VERSIONS = ('true', 'v2')
BOOLEAN_FEATURES = ('topics', 'sentiment', 'intents')


class InputFailure(str, Enum):
    EMPTY_INPUT = 'empty_input'
    BOTH_PROVIDED = 'both_provided'
    INVALID_URL_SCHEME = 'invalid_url_scheme'
    EMPTY_TEXT = 'empty_text'
    WRONG_TYPE = 'wrong_type'
    UNSUPPORTED_SUMMARIZE_VERSION = 'unsupported_summarize_version'


class InputError(ValueError):
    def __init__(self, failure: InputFailure, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.failure = failure
        self.message = message
        self.field = field


@dataclass(frozen=True)
class Source:
    kind: str
    value: str

    def payload(self) -> dict:
        return {self.kind: self.value}


def _as_str(value, name: str) -> str:
    if not isinstance(value, str):
        raise InputError(InputFailure.WRONG_TYPE, f"'{name}' must be a string", field=name)
    return value


def validate_text_input(body: Mapping) -> Source:
    """Return the single source named by the body.

    Presence is checked before exclusivity, and both before the per-field
    rules, so a body that breaks several rules reports the first one. A falsy
    value of any type counts as absent.
    """
    text = body.get('text')
    url = body.get('url')

    if not text and not url:
        raise InputError(InputFailure.EMPTY_INPUT, "Request must contain either 'text' or 'url' field")
    if text and url:
        raise InputError(InputFailure.BOTH_PROVIDED, "Request must contain either 'text' or 'url', not both")

    if url:
        url = _as_str(url, 'url')
        if not url.startswith(URL_SCHEMES):
            raise InputError(InputFailure.INVALID_URL_SCHEME, 'Invalid URL format', field='url')
        return Source('url', url)

    text = _as_str(text, 'text')
    if not text.strip():
        raise InputError(InputFailure.EMPTY_TEXT, 'Text content cannot be empty', field='text')
    return Source('text', text)


def build_options(params: Mapping) -> dict:
    """Map request query parameters onto provider options."""
    language = params.get('language')
    options = {'language': DEFAULT_LANGUAGE if language is None else language}

    summarize = params.get('summarize')
    if summarize == 'v1':
        raise InputError(
            InputFailure.UNSUPPORTED_SUMMARIZE_VERSION,
            'Summarization v1 is no longer supported. Please use v2 or true.',
            field='summarize',
        )
    if summarize in SUMMARIZE_VERSIONS:
        options['summarize'] = summarize

    for feature in BOOLEAN_FEATURES:
        if params.get(feature) == 'true':
            options[feature] = 'true'
    return options
