# Read models exposed by a quiz session (current question, summary, full view)
# quiz_app/models/session.py
from pydantic import BaseModel
from typing import List
from quiz_app.models.enums import SessionPhase

class QuestionView(BaseModel):
    index: int
    total: int
    prompt: str
    answer_options: List[str]

class SessionSummary(BaseModel):
    answered: int
    correct: int
    total: int

class ErrorDetail(BaseModel):
    kind: str
    message: str

class SessionView(BaseModel):
    session_id: str
    topic: str
    difficulty: str
    phase: SessionPhase
    score: int
    remaining_seconds: int
    selected_answer: str | None = None
    question: QuestionView | None = None
    correct_answer: str | None = None  # Only revealed after submission
    is_correct: bool | None = None
    error: ErrorDetail | None = None
