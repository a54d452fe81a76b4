"""
Pytest configuration and fixtures for stereo_quiz tests.
"""
import os
import sys

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from stereo_quiz.models import EducationLevel, FetchResult, Question, QuizConfig, SubjectType


class FakeClock:
    """time.monotonic の代わりに使う手動時計"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubSource:
    """決まった FetchResult を返す QuestionSource の代用品"""

    def __init__(self, result: FetchResult):
        self.result = result
        self.calls = []

    def fetch(self, level, subject, count):
        self.calls.append((level, subject, count))
        return self.result


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def quiz_config():
    return QuizConfig(
        level=EducationLevel.SMP,
        subject="Matematika",
        type=SubjectType.UMUM,
        is_festival=False,
        school_name="SMP Bintang Juara",
    )


@pytest.fixture
def five_questions():
    """正解 index が [0, 1, 2, 3, 0] の 5 問"""
    return [
        Question(
            id=i + 1,
            text=f"Soal nomor {i + 1}?",
            options=["A1", "B2", "C3", "D4"],
            correct_answer=correct,
            explanation=f"Penjelasan {i + 1}",
        )
        for i, correct in enumerate([0, 1, 2, 3, 0])
    ]


@pytest.fixture
def live_source(five_questions):
    return StubSource(FetchResult.success(five_questions))


@pytest.fixture
def empty_source():
    return StubSource(FetchResult.success([]))


@pytest.fixture
def sample_payload():
    """Gemini が返す想定の JSON 配列"""
    return [
        {
            "id": 7,
            "text": "Berapakah 2 + 2?",
            "options": ["3", "4", "5", "6"],
            "correctAnswer": 1,
            "explanation": "2 ditambah 2 sama dengan 4.",
        },
        {
            "id": 42,
            "text": "Ibu kota Jawa Barat adalah?",
            "options": ["Bandung", "Bogor", "Depok", "Bekasi"],
            "correctAnswer": 0,
            "explanation": "Bandung adalah ibu kota Jawa Barat.",
        },
    ]


@pytest.fixture
def make_source():
    """任意の FetchResult を返す StubSource を作る"""
    return StubSource
