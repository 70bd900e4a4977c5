import json, time
from enum import Enum
from typing import Optional
import requests
from textintel.config import DEEPGRAM_READ_URL, PROVIDER_TIMEOUT_S
from textintel.obs import log
from textintel.validation import Source


class ProviderFailure(str, Enum):
    TEXT = 'text'
    URL = 'url'
    LENGTH = 'length'
    OTHER = 'other'


def classify_message(message: str) -> ProviderFailure:
    # keyword order is part of the client contract
    low = (message or '').lower()
    if 'text' in low:
        return ProviderFailure.TEXT
    if 'url' in low:
        return ProviderFailure.URL
    if 'too long' in low:
        return ProviderFailure.LENGTH
    return ProviderFailure.OTHER


class ProviderError(Exception):
    def __init__(self, message: str, http_status: Optional[int] = None, kind: Optional[ProviderFailure] = None):
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.kind = kind if kind is not None else classify_message(message)


def _error_detail(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text
    if isinstance(body, dict) and body.get('err_msg'):
        return str(body['err_msg'])
    return resp.text


class AnalysisProxy:
    """Forwards a validated source to the Deepgram Read API."""

    def __init__(self, api_key: str, base_url: str = DEEPGRAM_READ_URL,
                 timeout_s: float = PROVIDER_TIMEOUT_S, session: Optional[requests.Session] = None):
        self._api_key = api_key
        self.base_url = base_url
        self.timeout_s = timeout_s
        self._session = session or requests.Session()

    def analyze(self, source: Source, options: dict) -> dict:
        t0 = time.time()
        try:
            resp = self._session.post(
                self.base_url,
                params=options,
                data=json.dumps(source.payload()),
                headers={
                    'Authorization': f'Token {self._api_key}',
                    'Content-Type': 'application/json',
                },
                timeout=self.timeout_s,
            )
        except requests.RequestException as e:
            log.warning('provider_unreachable', error=type(e).__name__, url=self.base_url)
            raise ProviderError(f'Deepgram API request failed: {type(e).__name__}', kind=ProviderFailure.OTHER) from e

        dt = int((time.time() - t0) * 1000)
        if not 200 <= resp.status_code < 300:
            message = f'Deepgram API error ({resp.status_code}): {_error_detail(resp)}'
            log.info('provider_error', status=resp.status_code, ms=dt)
            raise ProviderError(message, http_status=resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            raise ProviderError('Deepgram API returned a non-JSON body',
                                http_status=resp.status_code, kind=ProviderFailure.OTHER) from e
        log.info('provider_ok', status=resp.status_code, ms=dt)
        if not isinstance(body, dict):
            return {}
        return body.get('results') or {}
