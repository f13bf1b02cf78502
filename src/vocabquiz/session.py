"""The quiz session state machine.

A session moves through ``Phase`` values according to ``TRANSITIONS``. Every
phase change cancels pending timers (the one second tick and the delayed move
to the next question). Scheduled callbacks also carry the generation they were
created in, so a callback from a reset session does nothing even if it fires.
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Tuple

from .config import settings as default_settings
from .errors import InvalidTransition, PersistenceError
from .generator import QuizGenerator, RandomQuizGenerator
from .models import (
    SKIPPED,
    AnswerFeedback,
    GameStats,
    Mistake,
    PlayerScore,
    Question,
    QuestionView,
    SessionView,
    Word,
)
from .ranking import accuracy, completed_at_now, is_perfect_score, rank
from .scores import ScoreRepository, new_player_score
from .timers import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

SAVE_FAILED = "保存分数失败"
LOAD_FAILED = "加载排行榜失败"


class Phase(str, Enum):
    START = "start"
    PLAYING = "playing"
    OVER = "over"
    REVIEW = "review"
    SUBMIT_SCORE = "submitScore"
    LEADERBOARD = "leaderboard"


TRANSITIONS: Dict[Tuple[Phase, str], Phase] = {
    (Phase.START, "start_game"): Phase.PLAYING,
    (Phase.START, "view_leaderboard"): Phase.LEADERBOARD,
    (Phase.PLAYING, "expire"): Phase.OVER,
    (Phase.OVER, "review"): Phase.REVIEW,
    (Phase.REVIEW, "back"): Phase.OVER,
    (Phase.OVER, "proceed"): Phase.SUBMIT_SCORE,
    (Phase.SUBMIT_SCORE, "submit"): Phase.LEADERBOARD,
    (Phase.SUBMIT_SCORE, "skip"): Phase.LEADERBOARD,
}


class QuizSession:
    def __init__(
        self,
        vocabulary: List[Word],
        score_repository: ScoreRepository,
        scheduler: Scheduler,
        generator: Optional[QuizGenerator] = None,
        settings=None,
    ):
        self.vocabulary = vocabulary
        self.score_repository = score_repository
        self.scheduler = scheduler
        self.generator = generator or RandomQuizGenerator()
        self.settings = settings or default_settings

        self.phase = Phase.START
        self.generation = 0
        self._timers: List[TimerHandle] = []
        self.leaderboard: List[PlayerScore] = []
        self.error: Optional[str] = None
        self._clear()

    def _clear(self):
        self.score = 0
        self.question_number = 1
        self.used_terms: Set[str] = set()
        self.time_remaining = self.settings.GAME_DURATION
        self.mistakes: List[Mistake] = []
        self.question: Optional[Question] = None
        self.selected_answer: Optional[str] = None
        self.stats: Optional[GameStats] = None

    # --- State machine ---

    def _transition(self, action: str):
        if action == "reset":
            target = Phase.START
        else:
            target = TRANSITIONS.get((self.phase, action))
            if target is None:
                raise InvalidTransition(
                    f"Cannot {action.replace('_', ' ')} while {self.phase.value}"
                )
        self._cancel_timers()
        logger.debug(f"Session phase {self.phase.value} -> {target.value} ({action})")
        self.phase = target

    def _schedule(self, delay: float, callback: Callable[[], None]):
        generation = self.generation
        handle = None

        def run():
            if handle in self._timers:
                self._timers.remove(handle)
            if generation == self.generation:
                callback()

        handle = self.scheduler.call_later(delay, run)
        self._timers.append(handle)

    def _cancel_timers(self):
        for handle in self._timers:
            handle.cancel()
        self._timers = []

    # --- Playing ---

    def start_game(self):
        if self.phase is not Phase.START:
            raise InvalidTransition(f"Cannot start game while {self.phase.value}")
        used_terms: Set[str] = set()
        question = self.generator.generate(self.vocabulary, used_terms)

        self._transition("start_game")
        self.generation += 1
        self._clear()
        self.error = None
        self._show(question)
        self._schedule(1, self._tick)
        logger.info(f"Game started with {len(self.vocabulary)} words")

    def _show(self, question: Question):
        self.question = question
        self.selected_answer = None
        self.used_terms.add(question.word.term)

    def _tick(self):
        if self.phase is not Phase.PLAYING or self.time_remaining <= 0:
            return
        self.time_remaining -= 1
        if self.time_remaining <= 0:
            self.end_game()
        else:
            self._schedule(1, self._tick)

    def end_game(self):
        self.time_remaining = 0
        self._transition("expire")
        logger.info(
            f"Game over: {self.score} correct, {self.wrong_count} wrong, "
            f"{self.skipped_count} skipped"
        )

    def answer(self, selected: str, skip: bool = False) -> Optional[AnswerFeedback]:
        """Record an answer. Returns None when the answer is ignored."""
        if (
            self.phase is not Phase.PLAYING
            or self.question is None
            or self.selected_answer is not None
            or self.time_remaining <= 0
        ):
            return None

        word = self.question.word
        is_correct = not skip and selected == word.translation
        self.selected_answer = SKIPPED if skip else selected

        if is_correct:
            self.score += 1
            self._schedule(self.settings.CORRECT_ANSWER_DELAY, self._next_question)
        else:
            self.mistakes.append(
                Mistake(
                    term=word.term,
                    correct_translation=word.translation,
                    selected_answer=self.selected_answer,
                )
            )
            self._schedule(self.settings.INCORRECT_ANSWER_DELAY, self._next_question)

        return AnswerFeedback(
            correct=is_correct,
            selected_answer=self.selected_answer,
            correct_translation=word.translation,
        )

    def answer_option(self, index: int) -> Optional[AnswerFeedback]:
        if self.question is None or not (0 <= index < len(self.question.options)):
            return None
        return self.answer(self.question.options[index])

    def skip(self) -> Optional[AnswerFeedback]:
        return self.answer(SKIPPED, skip=True)

    def _next_question(self):
        if self.phase is not Phase.PLAYING:
            return
        self.question_number += 1
        self._show(self.generator.generate(self.vocabulary, self.used_terms))

    # --- After the game ---

    def review_mistakes(self):
        self._transition("review")

    def back(self):
        self._transition("back")

    def proceed_to_submit(self):
        self._transition("proceed")
        self.stats = GameStats(
            correct_count=self.score,
            wrong_count=self.wrong_count,
            skipped_count=self.skipped_count,
            completed_at=completed_at_now(self.settings.UTC_OFFSET_HOURS),
        )

    def submit(self, name: str, school: str, class_name: str) -> PlayerScore:
        if self.phase is not Phase.SUBMIT_SCORE:
            raise InvalidTransition(f"Cannot submit while {self.phase.value}")
        player_score = new_player_score(self.stats, name, school, class_name)
        try:
            self.score_repository.append_score(player_score)
        except PersistenceError:
            self.error = SAVE_FAILED
            logger.exception("Failed to save score")
            raise
        self._transition("submit")
        self._load_leaderboard()
        return player_score

    def skip_submit(self):
        self._transition("skip")
        self._load_leaderboard()

    def view_leaderboard(self):
        self._transition("view_leaderboard")
        self._load_leaderboard()

    def _load_leaderboard(self):
        try:
            self.leaderboard = rank(self.score_repository.get_scores())
            self.error = None
        except PersistenceError:
            logger.exception("Failed to load scores")
            self.leaderboard = []
            self.error = LOAD_FAILED

    def reset(self):
        self._transition("reset")
        self.generation += 1
        self._clear()
        self.error = None

    def close(self):
        """Drop pending callbacks. Used when the session is discarded."""
        self.generation += 1
        self._cancel_timers()

    # --- Derived values ---

    @property
    def wrong_count(self) -> int:
        return sum(1 for m in self.mistakes if not m.skipped)

    @property
    def skipped_count(self) -> int:
        return sum(1 for m in self.mistakes if m.skipped)

    @property
    def questions_answered(self) -> int:
        return self.score + len(self.mistakes)

    @property
    def accuracy(self) -> int:
        return accuracy(self.score, self.questions_answered)

    @property
    def perfect_score(self) -> bool:
        return is_perfect_score(self.score, self.questions_answered)

    def snapshot(self) -> SessionView:
        question = None
        if self.phase is Phase.PLAYING and self.question is not None:
            question = QuestionView(
                term=self.question.word.term,
                options=self.question.options,
                number=self.question_number,
            )
        correct_translation = None
        if question is not None and self.selected_answer is not None:
            correct_translation = self.question.word.translation

        return SessionView(
            phase=self.phase.value,
            time_remaining=self.time_remaining,
            duration=self.settings.GAME_DURATION,
            score=self.score,
            question_number=self.question_number,
            questions_answered=self.questions_answered,
            accuracy=self.accuracy,
            perfect_score=self.perfect_score,
            question=question,
            selected_answer=self.selected_answer if question else None,
            correct_translation=correct_translation,
            mistakes=list(self.mistakes),
            stats=self.stats,
            leaderboard=list(self.leaderboard),
            error=self.error,
        )

