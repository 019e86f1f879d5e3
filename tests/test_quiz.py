"""Tests for learning/quiz.py."""

import pytest

from interactive_learning.learning.content import SOLAR_QUESTIONS
from interactive_learning.learning.quiz import (
    DEFAULT_RESULT_MESSAGE,
    QuizEngine,
    compute_score,
    result_message,
)
from interactive_learning.models.quiz import QuizQuestion


def _answer(engine: QuizEngine, option: str) -> int | None:
    engine.select_option(option)
    return engine.confirm_and_advance()


@pytest.fixture
def questions():
    return [
        QuizQuestion(text=f"Q{i}", correct_answer="right", options=("right", "wrong"))
        for i in range(5)
    ]


class TestComputeScore:
    @pytest.mark.parametrize(
        "correct,total,expected",
        [(3, 5, 60), (5, 5, 100), (0, 5, 0), (1, 3, 33), (2, 3, 66)],
    )
    def test_floor_percentage(self, correct, total, expected):
        assert compute_score(correct, total) == expected

    def test_empty_quiz_scores_zero(self):
        assert compute_score(0, 0) == 0


class TestResultMessage:
    def test_picks_highest_reached_threshold(self):
        thresholds = {100: "perfect", 80: "great", 0: "try"}
        assert result_message(100, thresholds) == "perfect"
        assert result_message(85, thresholds) == "great"
        assert result_message(60, thresholds) == "try"

    def test_default_when_no_threshold_reached(self):
        assert result_message(10, {50: "half"}) == DEFAULT_RESULT_MESSAGE


class TestQuizEngine:
    def test_three_of_five(self, questions):
        engine = QuizEngine(questions)
        answers = ["right", "right", "wrong", "right", "wrong"]
        scores = [_answer(engine, a) for a in answers]
        assert scores[:-1] == [None, None, None, None]
        assert scores[-1] == 60
        assert engine.results == [True, True, False, True, False]
        assert engine.is_complete

    def test_all_correct(self):
        engine = QuizEngine(SOLAR_QUESTIONS)
        for question in SOLAR_QUESTIONS:
            score = _answer(engine, question.correct_answer)
        assert score == 100

    def test_confirm_without_selection_is_noop(self, questions):
        engine = QuizEngine(questions)
        assert engine.confirm_and_advance() is None
        assert engine.current_index == 0
        assert engine.results == []

    def test_selection_cleared_after_confirm(self, questions):
        engine = QuizEngine(questions)
        _answer(engine, "right")
        assert engine.selected_option == ""
        assert engine.position == 2

    def test_position_and_current_question(self, questions):
        engine = QuizEngine(questions)
        assert engine.position == 1
        assert engine.total == 5
        assert engine.current_question is questions[0]

    def test_no_current_question_after_completion(self, questions):
        engine = QuizEngine(questions)
        for _ in questions:
            _answer(engine, "right")
        assert engine.current_question is None
        engine.select_option("wrong")
        assert engine.selected_option == ""
        assert engine.confirm_and_advance() == 100

    def test_empty_quiz_does_not_raise(self):
        engine = QuizEngine([])
        assert engine.current_question is None
        assert engine.confirm_and_advance() == 0
        assert engine.is_complete


class TestReset:
    def test_same_token_keeps_progress(self, questions):
        engine = QuizEngine(questions, reset_token=1)
        _answer(engine, "right")
        assert engine.reset(1) is False
        assert engine.current_index == 1

    def test_new_token_restarts(self, questions):
        engine = QuizEngine(questions, reset_token=1)
        _answer(engine, "right")
        engine.select_option("wrong")
        assert engine.reset(2) is True
        assert engine.current_index == 0
        assert engine.selected_option == ""
        assert engine.results == []
        assert engine.reset_token == 2

    def test_reset_after_completion(self, questions):
        engine = QuizEngine(questions)
        for _ in questions:
            _answer(engine, "wrong")
        assert engine.final_score == 0
        engine.reset(1)
        assert not engine.is_complete
        assert engine.current_question is questions[0]


class TestSelectOption:
    def test_option_not_offered_is_ignored(self, questions):
        engine = QuizEngine(questions)
        assert engine.select_option("Banana") is False
        assert engine.selected_option == ""
        assert engine.confirm_and_advance() is None
        assert engine.results == []

    def test_offered_option_replaces_pending_one(self, questions):
        engine = QuizEngine(questions)
        assert engine.select_option("wrong") is True
        assert engine.select_option("right") is True
        assert engine.selected_option == "right"
