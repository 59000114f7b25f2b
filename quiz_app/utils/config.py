# quiz_app/utils/config.py
import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load .env file before defining settings
load_dotenv()

class Settings(BaseSettings):
    # Trivia provider settings
    trivia_api_url: str = os.getenv("TRIVIA_API_URL", "https://opentdb.com/api.php")
    questions_per_quiz: int = 10
    question_type: str = "multiple"
    request_timeout_s: float = 10.0

    # Rate-limit recovery (HTTP 429)
    max_retries: int = 5
    initial_backoff_ms: int = 1000

    # Session timing
    question_time_limit_s: int = 30
    tick_interval_ms: int = 1000
    correct_advance_delay_ms: int = 2000 # Shorter reveal when the answer was right
    incorrect_advance_delay_ms: int = 3000
    session_retention_s: float = 600 # Finished or errored sessions are dropped after this long

    # Fixed-credential login gate
    login_username: str = os.getenv("QUIZ_LOGIN_USERNAME", "user")
    login_password: str = os.getenv("QUIZ_LOGIN_PASSWORD", "pass")

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()

# --- Validation for timing and retry values ---
if settings.questions_per_quiz <= 0:
    raise ValueError("questions_per_quiz must be a positive number")
if settings.max_retries < 0:
    raise ValueError("max_retries cannot be negative")
if settings.question_time_limit_s <= 0 or settings.tick_interval_ms <= 0:
    raise ValueError("question_time_limit_s and tick_interval_ms must be positive")
if settings.session_retention_s < 0:
    raise ValueError("session_retention_s cannot be negative")
