from fastapi import APIRouter, Request
from textintel.metrics import inc
from textintel.schemas import SessionResponse

router = APIRouter(prefix='/api', tags=['session'])

@router.get('/session', response_model=SessionResponse)
def issue_session(request: Request):
    token = request.app.state.tokens.issue()
    inc('sessions_issued_total', 1)
    return {'token': token}
