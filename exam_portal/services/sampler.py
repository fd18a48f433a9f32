"""Random selection of the questions that make up an exam session."""
import random
from typing import List, Optional, Sequence

from exam_portal.models.question import Question


def sample_question_ids(pool: Sequence[Question], count: int, rng: Optional[random.Random] = None) -> List[int]:
    """
    Pick ``count`` distinct questions from ``pool`` and return their ids.

    ``random.sample`` draws without replacement, every subset of the requested
    size is equally likely and the result comes back in selection order, so the
    returned list is also a uniformly shuffled presentation order. The pool is
    not modified.

    Raises:
        ValueError: if ``count`` is not between 1 and ``len(pool)``. Callers are
            expected to reject oversized requests before getting here.
    """
    if count < 1:
        raise ValueError("Cannot sample fewer than one question")
    if count > len(pool):
        raise ValueError(f"Cannot sample {count} questions from a pool of {len(pool)}")

    rng = rng or random
    return [question.id for question in rng.sample(list(pool), count)]
