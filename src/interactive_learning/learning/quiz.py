"""Quiz session tracking and percentage scoring."""

from collections.abc import Hashable, Mapping, Sequence

import structlog

from interactive_learning.models.quiz import QuizQuestion

logger = structlog.get_logger()

DEFAULT_RESULT_MESSAGE = "Keep it up!"


def compute_score(correct: int, total: int) -> int:
    """Percentage of correct answers, rounded down. An empty quiz scores 0."""
    if total <= 0:
        return 0
    return (correct * 100) // total


def result_message(score: int, thresholds: Mapping[int, str]) -> str:
    """Pick the message of the highest threshold the score reaches."""
    for threshold in sorted(thresholds, reverse=True):
        if score >= threshold:
            return thresholds[threshold]
    return DEFAULT_RESULT_MESSAGE


class QuizEngine:
    """Runs one pass over an ordered question set.

    Args:
        questions: Questions in display order.
        reset_token: Any hashable value; passing a different one to
            :meth:`reset` restarts the session.
    """

    def __init__(self, questions: Sequence[QuizQuestion], reset_token: Hashable = 0):
        self.questions = list(questions)
        self._reset_token = reset_token
        self.current_index = 0
        self.selected_option = ""
        self.results: list[bool] = []
        self.final_score: int | None = None

    @property
    def reset_token(self) -> Hashable:
        return self._reset_token

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def position(self) -> int:
        """1-based number of the question on display."""
        return min(self.current_index + 1, self.total)

    @property
    def current_question(self) -> QuizQuestion | None:
        if self.is_complete or not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def correct_count(self) -> int:
        return sum(1 for r in self.results if r)

    @property
    def is_complete(self) -> bool:
        return self.final_score is not None

    def reset(self, token: Hashable) -> bool:
        """Reinitialize the session if ``token`` differs from the current one.

        Returns:
            True if the session was reset.
        """
        if token == self._reset_token:
            return False
        self._reset_token = token
        self.current_index = 0
        self.selected_option = ""
        self.results = []
        self.final_score = None
        return True

    def select_option(self, option: str) -> bool:
        """Mark ``option`` as pending; options not offered by the question are ignored."""
        question = self.current_question
        if question is None or option not in question.options:
            return False
        self.selected_option = option
        return True

    def confirm_and_advance(self) -> int | None:
        """Grade the pending selection and move on.

        Returns:
            The final score once the last question is answered, else None.
            Without a selection nothing happens and None is returned.
        """
        if self.is_complete:
            return self.final_score
        if not self.questions:
            self.final_score = 0
            return self.final_score
        if not self.selected_option.strip():
            return None

        question = self.questions[self.current_index]
        self.results.append(self.selected_option == question.correct_answer)
        self.selected_option = ""

        if self.current_index < self.total - 1:
            self.current_index += 1
            return None

        self.final_score = compute_score(self.correct_count, self.total)
        logger.info(
            "quiz_completed",
            correct=self.correct_count,
            total=self.total,
            score=self.final_score,
        )
        return self.final_score
