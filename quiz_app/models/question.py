# Data model for provider questions and the fixed-size sets served to a session
# quiz_app/models/question.py
from pydantic import BaseModel, ConfigDict
from typing import Tuple
from quiz_app.models.enums import Difficulty

class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt: str
    correct_answer: str
    distractors: Tuple[str, ...]
    answer_options: Tuple[str, ...]  # correct_answer + distractors, shuffled once
    category: str = ""
    difficulty: str = ""

class QuestionSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    topic: str
    difficulty: Difficulty
    questions: Tuple[Question, ...]

    def __len__(self) -> int:
        return len(self.questions)
