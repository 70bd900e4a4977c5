from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from textintel.metadata import MetadataUnavailable
from textintel.metrics import prometheus_payload, snapshot_metrics
from textintel.schemas import HealthResponse

SERVICE_NAME = 'text-intelligence'

router = APIRouter(prefix='', tags=['ops'])

@router.get('/health', response_model=HealthResponse)
def health():
    return {'status': 'ok', 'service': SERVICE_NAME}

@router.get('/api/metadata')
def metadata(request: Request):
    try:
        return request.app.state.metadata.get()
    except MetadataUnavailable as e:
        return JSONResponse(status_code=500, content={'error': 'INTERNAL_SERVER_ERROR', 'message': str(e)})

@router.get('/metrics')
def metrics():
    return snapshot_metrics()

@router.get('/metrics.prom')
def metrics_prom():
    payload, content_type = prometheus_payload()
    return Response(payload, media_type=content_type)
