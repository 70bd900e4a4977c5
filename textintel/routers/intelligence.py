import json, time
from fastapi import APIRouter, Depends, Request
from textintel.auth import AuthError
from textintel.errors import ContractError, from_auth_error, from_input_error, from_provider_error, internal_error, malformed_body
from textintel.metrics import H_LAT, P_PROVIDER_ERRORS, P_REQUESTS, inc, observe_ms
from textintel.obs import log
from textintel.provider import ProviderError
from textintel.schemas import ERROR_RESPONSES, TextIntelligenceResponse
from textintel.validation import InputError, build_options, validate_text_input

router = APIRouter(prefix='/api', tags=['text-intelligence'])

def require_session(request: Request) -> dict:
    try:
        return request.app.state.tokens.verify_header(request.headers.get('Authorization'))
    except AuthError as e:
        inc('auth_failures_total', 1)
        log.info('auth_failed', failure=e.failure.value, rid=getattr(request.state, 'request_id', None))
        raise from_auth_error(e) from e

async def read_body(request: Request) -> bytes:
    return await request.body()

def _parse_body(raw: bytes) -> dict:
    try:
        body = json.loads(raw)
    except ValueError:
        raise malformed_body()
    if not isinstance(body, dict):
        raise malformed_body()
    return body

def _run(request: Request, raw: bytes) -> dict:
    body = _parse_body(raw)
    try:
        source = validate_text_input(body)
        options = build_options(request.query_params)
    except InputError as e:
        inc('validation_errors_total', 1)
        raise from_input_error(e) from e

    try:
        results = request.app.state.proxy.analyze(source, options)
    except ProviderError as e:
        P_PROVIDER_ERRORS.labels(kind=e.kind.value).inc()
        inc('provider_errors_total', 1)
        log.warning('text_intelligence_error', message=e.message, status=e.http_status, kind=e.kind.value)
        raise from_provider_error(e) from e
    return {'results': results}

# session check runs before the body is read, so an unauthenticated
# malformed request is a 401 rather than a 400
@router.post('/text-intelligence', response_model=TextIntelligenceResponse, responses=ERROR_RESPONSES)
def text_intelligence(request: Request, claims: dict = Depends(require_session), raw: bytes = Depends(read_body)):
    start = time.time()
    outcome = 'ok'
    try:
        return _run(request, raw)
    except ContractError as e:
        outcome = str(e.status)
        raise
    except Exception as e:
        outcome = '500'
        log.exception('text_intelligence_unhandled', error=type(e).__name__)
        raise internal_error() from e
    finally:
        dt = int((time.time() - start) * 1000)
        observe_ms('text_intelligence_ms', dt)
        inc('text_intelligence_requests_total', 1)
        P_REQUESTS.labels(outcome=outcome).inc()
        H_LAT.observe(dt)
