# Error kinds raised while preparing or driving a quiz session
# quiz_app/services/errors.py

class QuizError(Exception):
    """Base class for failures that end session initialization."""
    kind = "quiz_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidCategory(QuizError):
    kind = "invalid_category"

    def __init__(self, topic: str):
        super().__init__(f"Invalid quiz category selected: '{topic}'.")
        self.topic = topic


class InvalidDifficulty(QuizError):
    kind = "invalid_difficulty"

    def __init__(self, difficulty: str):
        super().__init__(f"Invalid difficulty selected: '{difficulty}'.")
        self.difficulty = difficulty


class HttpError(QuizError):
    kind = "http_error"

    def __init__(self, status_code: int):
        super().__init__(f"Failed to fetch questions: HTTP error! status: {status_code}")
        self.status_code = status_code


class RateLimitExhausted(QuizError):
    kind = "rate_limit_exhausted"

    def __init__(self, attempts: int):
        super().__init__(
            f"The trivia provider is rate limiting requests (gave up after {attempts} attempts). "
            "Please try again in a moment."
        )
        self.attempts = attempts


class NoQuestionsAvailable(QuizError):
    kind = "no_questions_available"

    def __init__(self, response_code: int):
        super().__init__(
            "Could not find questions for this category and difficulty. "
            "Please try a different selection."
        )
        self.response_code = response_code


class TransportError(QuizError):
    kind = "transport_error"

    def __init__(self, reason: str):
        super().__init__(f"Failed to fetch questions: {reason}")
        self.reason = reason


class MalformedResponse(QuizError):
    kind = "malformed_response"

    def __init__(self, reason: str):
        super().__init__(f"The trivia provider returned an unexpected payload: {reason}")
        self.reason = reason


class InvalidTransition(Exception):
    """Raised when a session operation is called in a phase that does not allow it."""

    def __init__(self, operation: str, phase):
        super().__init__(f"Cannot {operation} while session is {getattr(phase, 'value', phase)}.")
        self.operation = operation
        self.phase = phase
