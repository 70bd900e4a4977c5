import time, traceback
import uvicorn
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from textintel.auth import SessionTokenService
from textintel.config import Settings
from textintel.errors import ContractError, error_response, internal_error
from textintel.metadata import MetadataSource
from textintel.metrics import observe_ms
from textintel.obs import REQUEST_ID_HEADER, log, request_id, should_sample
from textintel.provider import AnalysisProxy
from textintel.routers.intelligence import router as intelligence_router
from textintel.routers.ops import router as ops_router
from textintel.routers.session import router as session_router

ROUTES_BANNER = (
    'GET  /api/session',
    'POST /api/text-intelligence (auth required)',
    'GET  /api/metadata',
    'GET  /health',
)


def create_app(settings: Optional[Settings] = None,
               tokens: Optional[SessionTokenService] = None,
               proxy: Optional[AnalysisProxy] = None,
               metadata: Optional[MetadataSource] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title='Text Intelligence')
    app.state.settings = settings
    app.state.tokens = tokens or SessionTokenService(settings.session_secret, lifetime_s=settings.session_lifetime_s)
    app.state.proxy = proxy or AnalysisProxy(settings.api_key, base_url=settings.read_url, timeout_s=settings.provider_timeout_s)
    app.state.metadata = metadata or MetadataSource(settings.metadata_path)

    # registered first so it sits inside CORS and the header middlewares
    @app.middleware('http')
    async def all_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            tb = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            log.error('unhandled_error', path=request.url.path, rid=getattr(request.state, 'request_id', None), traceback=tb)
            return error_response(internal_error())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=['*'],
        allow_methods=['GET', 'POST', 'OPTIONS'],
        allow_headers=['Content-Type', 'Authorization'],
        expose_headers=[REQUEST_ID_HEADER],
    )

    @app.middleware('http')
    async def add_request_context(request: Request, call_next):
        rid = request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid
        start = time.time()
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            dt = int((time.time() - start) * 1000)
            observe_ms('http_request_ms', dt)
            if should_sample():
                log.info('http_request', rid=rid, path=request.url.path, ms=dt, method=request.method)

    @app.middleware('http')
    async def security_headers(request: Request, call_next):
        resp = await call_next(request)
        resp.headers['X-Frame-Options'] = 'DENY'
        return resp

    @app.exception_handler(ContractError)
    async def contract_errors(request: Request, exc: ContractError):
        return error_response(exc)

    app.include_router(session_router)
    app.include_router(intelligence_router)
    app.include_router(ops_router)
    return app


def serve() -> None:
    settings = Settings.from_env()
    log.info('server_start', url=f'http://localhost:{settings.port}', routes=list(ROUTES_BANNER))
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == '__main__':
    serve()
