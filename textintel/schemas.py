from pydantic import BaseModel

class TextIntelligenceResponse(BaseModel):
    results: dict

class SessionResponse(BaseModel):
    token: str

class HealthResponse(BaseModel):
    status: str
    service: str

class ErrorBody(BaseModel):
    type: str
    code: str
    message: str
    details: dict = {}

class ErrorEnvelope(BaseModel):
    error: ErrorBody

ERROR_RESPONSES = {
    400: {'model': ErrorEnvelope},
    401: {'model': ErrorEnvelope},
    500: {'model': ErrorEnvelope},
}
