# quiz_app/services/reporter.py
from quiz_app.models.enums import SessionPhase
from quiz_app.models.session import SessionSummary
from quiz_app.services.errors import InvalidTransition

def build_summary(session) -> SessionSummary:
    """Final tally for a finished session. Asking before the last question is done is a usage error."""
    if session.phase != SessionPhase.FINISHED:
        raise InvalidTransition("report a summary", session.phase)
    return SessionSummary(answered=session.answered, correct=session.score, total=session.total)

def completion_message(summary: SessionSummary) -> str:
    message = f"You answered {summary.answered} questions and got {summary.correct} out of {summary.total}."
    if summary.total and summary.correct == summary.total:
        return f"{message} A perfect score!"
    if summary.total and summary.correct * 2 >= summary.total:
        return f"{message} That's a great effort!"
    return f"{message} Keep practicing and try again!"
