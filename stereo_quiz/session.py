"""
session.py
======================

1 回分のクイズ（セッション）の状態と遷移を管理する。

状態遷移:
    LOADING --load()--> ACTIVE --finish()/時間切れ--> FINISHED
    LOADING --load() で 0 問--> EMPTY
    どの状態からでも exit() で CLOSED

UI (Streamlit) には依存しない。画面側は select / prev / next / finish / exit を
呼び、poll() で残り時間を進めるだけ。
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .config import DEFAULT_QUESTION_COUNT, DEFAULT_TIME_LIMIT_SECONDS
from .models import UNANSWERED, FetchResult, Question, QuizConfig
from .question_source import QuestionSource
from .timer import Clock, Countdown, format_clock

logger = logging.getLogger(__name__)

LOW_TIME_SECONDS = 60
NOT_ANSWERED_LABEL = "Tidak dijawab"
NO_EXPLANATION_LABEL = "Tidak ada penjelasan tersedia."


class SessionPhase(str, Enum):
    LOADING = "loading"
    ACTIVE = "active"
    FINISHED = "finished"
    EMPTY = "empty"
    CLOSED = "closed"


@dataclass(frozen=True)
class ReviewItem:
    """結果画面の 1 問分"""

    number: int
    question: Question
    selected: int
    is_correct: bool
    is_skipped: bool
    chosen_text: str
    correct_text: Optional[str]
    explanation: str


class QuizSession:
    """
    クイズ 1 回分のセッション。

    answers は questions と同じ長さで、未回答は -1。
    score は finish() で一度だけ確定する。
    """

    def __init__(
        self,
        config: QuizConfig,
        source: QuestionSource,
        *,
        question_count: int = DEFAULT_QUESTION_COUNT,
        time_limit_seconds: int = DEFAULT_TIME_LIMIT_SECONDS,
        clock: Clock = time.monotonic,
        on_exit: Optional[Callable[[], None]] = None,
    ) -> None:
        self.config = config
        self._source = source
        self.question_count = question_count
        self.time_limit_seconds = time_limit_seconds
        self._on_exit = on_exit

        self.phase = SessionPhase.LOADING
        self.questions: List[Question] = []
        self.answers: List[int] = []
        self.current_index = 0
        self.time_left_seconds = time_limit_seconds
        self.score: Optional[int] = None
        self.correct_count: Optional[int] = None

        self.degraded = False
        self.degraded_reason: Optional[str] = None
        self.fetch_source: Optional[str] = None

        self._countdown = Countdown(on_tick=self._on_tick, clock=clock)

    # ------------------------------------------------------------------
    # 状態参照
    # ------------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self.phase is SessionPhase.ACTIVE

    @property
    def finished(self) -> bool:
        return self.phase is SessionPhase.FINISHED

    @property
    def timer_armed(self) -> bool:
        return self._countdown.armed

    @property
    def current_question(self) -> Optional[Question]:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def current_answer(self) -> int:
        if not self.answers:
            return UNANSWERED
        return self.answers[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return bool(self.questions) and self.current_index == len(self.questions) - 1

    @property
    def progress(self) -> float:
        """現在位置の割合 (0.0〜1.0)。1 問目は 0.0。"""
        if not self.questions:
            return 0.0
        return self.current_index / len(self.questions)

    @property
    def time_left_label(self) -> str:
        return format_clock(self.time_left_seconds)

    @property
    def is_low_time(self) -> bool:
        return self.time_left_seconds < LOW_TIME_SECONDS

    # ------------------------------------------------------------------
    # LOADING → ACTIVE / EMPTY
    # ------------------------------------------------------------------
    def load(self) -> FetchResult:
        """問題を取得してセッションを開始する。LOADING 以外で呼ぶと RuntimeError。"""
        if self.phase is not SessionPhase.LOADING:
            raise RuntimeError(f"load() called in phase {self.phase.value}")

        result = self._source.fetch(
            self.config.level, self.config.subject, self.question_count
        )
        self.degraded = not result.ok
        self.degraded_reason = result.reason
        self.fetch_source = result.source

        if not result.questions:
            logger.warning(
                "No questions for %s / %s", self.config.level.value, self.config.subject
            )
            self.phase = SessionPhase.EMPTY
            return result

        self.questions = list(result.questions)
        self.answers = [UNANSWERED] * len(self.questions)
        self.current_index = 0
        self.time_left_seconds = self.time_limit_seconds
        self.phase = SessionPhase.ACTIVE
        self._countdown.arm()
        logger.info(
            "Quiz started: %s / %s, %d questions (source=%s)",
            self.config.level.value, self.config.subject,
            len(self.questions), result.source,
        )
        return result

    # ------------------------------------------------------------------
    # カウントダウン
    # ------------------------------------------------------------------
    def poll(self) -> int:
        """経過時間ぶん残り時間を進める。発火した tick 数を返す。"""
        return self._countdown.poll()

    def tick(self) -> None:
        """残り時間を 1 秒進める（ACTIVE のときのみ）。"""
        if self.is_active:
            self._on_tick()

    def _on_tick(self) -> None:
        if not self.is_active:
            self._countdown.cancel()
            return
        self.time_left_seconds = max(self.time_left_seconds - 1, 0)
        if self.time_left_seconds == 0:
            logger.info("Time is up, finishing quiz")
            self.finish()

    # ------------------------------------------------------------------
    # 解答・移動
    # ------------------------------------------------------------------
    def select(self, option_index: int) -> bool:
        """現在の問題の解答を記録（上書き）する。記録できたら True。"""
        if not self.is_active:
            logger.debug("select() ignored in phase %s", self.phase.value)
            return False
        question = self.questions[self.current_index]
        if not 0 <= option_index < len(question.options):
            logger.debug("select() ignored, option %d out of range", option_index)
            return False
        self.answers[self.current_index] = option_index
        return True

    def prev(self) -> bool:
        if not self.is_active:
            return False
        self.current_index = max(0, self.current_index - 1)
        return True

    def next(self) -> bool:
        if not self.is_active:
            return False
        self.current_index = min(len(self.questions) - 1, self.current_index + 1)
        return True

    # ------------------------------------------------------------------
    # 終了
    # ------------------------------------------------------------------
    def finish(self) -> Optional[int]:
        """
        採点して FINISHED にする。2 回目以降は何もせず確定済みの score を返す。
        未回答 (-1) は正解と一致しないので不正解扱い。
        """
        if not self.is_active:
            return self.score

        self._countdown.cancel()
        correct = sum(
            1 for q, a in zip(self.questions, self.answers) if a == q.correct_answer
        )
        self.correct_count = correct
        self.score = compute_score(correct, len(self.questions))
        self.phase = SessionPhase.FINISHED
        logger.info(
            "Quiz finished: %d/%d correct, score=%d",
            correct, len(self.questions), self.score,
        )
        return self.score

    def exit(self) -> None:
        """どの状態からでも終了する。状態は破棄し、保存はしない。"""
        self._countdown.cancel()
        self.questions = []
        self.answers = []
        self.current_index = 0
        self.phase = SessionPhase.CLOSED
        if self._on_exit is not None:
            self._on_exit()

    # ------------------------------------------------------------------
    # 結果表示
    # ------------------------------------------------------------------
    def review(self) -> List[ReviewItem]:
        if not self.finished:
            raise RuntimeError("review() is only available after finish()")
        return [
            build_review_item(i + 1, q, a)
            for i, (q, a) in enumerate(zip(self.questions, self.answers))
        ]

    @property
    def result_message(self) -> str:
        return result_message(self.score or 0)


# ----------------------------------------------------------------------
# ユーティリティ
# ----------------------------------------------------------------------
def compute_score(correct: int, total: int) -> int:
    """100 点満点に換算し、0.5 は切り上げる。"""
    if total <= 0:
        raise ValueError("total must be positive")
    return (200 * correct + total) // (2 * total)


def build_review_item(number: int, question: Question, selected: int) -> ReviewItem:
    is_skipped = selected == UNANSWERED
    is_correct = selected == question.correct_answer
    chosen = NOT_ANSWERED_LABEL if is_skipped else question.option_label(selected)
    return ReviewItem(
        number=number,
        question=question,
        selected=selected,
        is_correct=is_correct,
        is_skipped=is_skipped,
        chosen_text=chosen,
        correct_text=None if is_correct else question.option_label(question.correct_answer),
        explanation=question.explanation or NO_EXPLANATION_LABEL,
    )


def result_message(score: int) -> str:
    if score == 100:
        return "Sempurna! Kamu adalah STEREO KING!"
    if score > 75:
        return "Kerja bagus! Terus tingkatkan!"
    return "Jangan menyerah, coba lagi!"
