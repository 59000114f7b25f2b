# quiz_app/models/enums.py
from enum import Enum

class Difficulty(str, Enum):
    """Difficulty levels accepted by the trivia provider."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

class SessionPhase(str, Enum):
    """Lifecycle phases of a single quiz session."""
    LOADING = "loading"
    ACTIVE = "active"
    REVEALED = "revealed"
    FINISHED = "finished"
    ERRORED = "errored"
