# quiz_app/services/shuffler.py
import random
from typing import Sequence, Tuple

def shuffle_answers(correct_answer: str, distractors: Sequence[str],
                    rng: random.Random | None = None) -> Tuple[str, ...]:
    """
    Combines the correct answer with its distractors and applies a
    Fisher-Yates shuffle. The result is a tuple so it cannot be reshuffled later.
    """
    rng = rng or random
    options = [*distractors, correct_answer]
    for i in range(len(options) - 1, 0, -1):
        j = rng.randint(0, i)  # inclusive on both ends
        options[i], options[j] = options[j], options[i]
    return tuple(options)
