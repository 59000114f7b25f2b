# Endpoints for starting quiz sessions and driving them question by question
# quiz_app/endpoints/sessions.py
from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel

from quiz_app.models.session import SessionView
from quiz_app.services import reporter
from quiz_app.services.errors import (
    InvalidCategory,
    InvalidDifficulty,
    InvalidTransition,
    NoQuestionsAvailable,
    QuizError,
    RateLimitExhausted,
)
from quiz_app.services.quiz_session import QuizSession
from quiz_app.services.session_engine import SessionEngine, SessionNotFound
from quiz_app.utils.dependencies import get_engine

router = APIRouter()

class StartSessionRequest(BaseModel):
    topic: str
    difficulty: str

class SelectionRequest(BaseModel):
    answer: str

class SummaryResponse(BaseModel):
    answered: int
    correct: int
    total: int
    message: str

# --- Error mapping ---
def _status_for(error: QuizError) -> int:
    if isinstance(error, (InvalidCategory, InvalidDifficulty)):
        return 422
    if isinstance(error, NoQuestionsAvailable):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, RateLimitExhausted):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_502_BAD_GATEWAY

def _quiz_error(error: QuizError) -> HTTPException:
    return HTTPException(status_code=_status_for(error), detail={"kind": error.kind, "message": error.message})

def _conflict(error: InvalidTransition) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail={"kind": "invalid_transition", "message": str(error)})

def _lookup(engine: SessionEngine, session_id: str) -> QuizSession:
    try:
        return engine.get_session(session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")

# --- Routes ---
@router.post("/", response_model=SessionView, status_code=status.HTTP_201_CREATED)
async def start_session(request: StartSessionRequest, engine: SessionEngine = Depends(get_engine)):
    try:
        session = await engine.start_session(request.topic, request.difficulty)
    except QuizError as e:
        raise _quiz_error(e)
    return session.view()

@router.get("/{session_id}", response_model=SessionView)
async def get_session(session_id: str, engine: SessionEngine = Depends(get_engine)):
    return _lookup(engine, session_id).view()

@router.put("/{session_id}/selection", response_model=SessionView)
async def select_answer(session_id: str, request: SelectionRequest, engine: SessionEngine = Depends(get_engine)):
    session = _lookup(engine, session_id)
    try:
        accepted = session.select_answer(request.answer)
    except ValueError as e:
        raise HTTPException(status_code=422, detail={"kind": "invalid_answer", "message": str(e)})
    if not accepted:
        raise _conflict(InvalidTransition("select an answer", session.phase))
    return session.view()

@router.post("/{session_id}/submit", response_model=SessionView)
async def submit_answer(session_id: str, engine: SessionEngine = Depends(get_engine)):
    session = _lookup(engine, session_id)
    try:
        session.submit_answer()
    except InvalidTransition as e:
        raise _conflict(e)
    return session.view()

@router.post("/{session_id}/advance", response_model=SessionView)
async def advance(session_id: str, engine: SessionEngine = Depends(get_engine)):
    # Safe to call while the automatic advance is still pending; repeated calls are ignored.
    session = _lookup(engine, session_id)
    session.advance()
    return session.view()

@router.get("/{session_id}/summary", response_model=SummaryResponse)
async def get_summary(session_id: str, engine: SessionEngine = Depends(get_engine)):
    session = _lookup(engine, session_id)
    try:
        summary = session.summary()
    except InvalidTransition as e:
        raise _conflict(e)
    return SummaryResponse(**summary.model_dump(), message=reporter.completion_message(summary))

@router.post("/{session_id}/retry", response_model=SessionView)
async def retry_session(session_id: str, engine: SessionEngine = Depends(get_engine)):
    _lookup(engine, session_id)
    try:
        session = await engine.retry_session(session_id)
    except QuizError as e:
        raise _quiz_error(e)
    return session.view()

@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(session_id: str, engine: SessionEngine = Depends(get_engine)):
    try:
        engine.close_session(session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
