"""
models.py
======================

クイズアプリで扱うデータ型をまとめたモジュール。

- EducationLevel / SubjectType : 学校段階・教科区分
- Question                     : 四択問題 1 問（生成後は不変）
- QuizConfig                   : セッション開始時に確定するクイズ設定
- FetchResult                  : QuestionSource の取得結果（成功 / 劣化を区別）
- SchoolRank / VideoContent    : 画面表示用のモックデータ
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Literal, Optional

FetchSource = Literal["live", "mock", "error"]

UNANSWERED = -1


class EducationLevel(str, Enum):
    SD = "SD"
    SMP = "SMP"
    SMA = "SMA"


class SubjectType(str, Enum):
    UMUM = "Umum"
    AGAMA = "Agama"


# ----------------------------------------------------------------------
#  Question
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Question:
    """四択問題。correct_answer は options の index (0〜3)。"""

    id: int
    text: str
    options: List[str]
    correct_answer: int
    explanation: Optional[str] = None

    def option_label(self, index: int) -> str:
        """'A. Jakarta' のような表示用ラベル。"""
        return f"{chr(65 + index)}. {self.options[index]}"


# ----------------------------------------------------------------------
#  QuizConfig
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class QuizConfig:
    level: EducationLevel
    subject: str
    type: SubjectType = SubjectType.UMUM
    is_festival: bool = False
    school_name: Optional[str] = None


# ----------------------------------------------------------------------
#  FetchResult
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class FetchResult:
    """
    QuestionSource.fetch() の戻り値。

    ok=True  : Gemini から正常に取得できた (source="live")
    ok=False : モック (source="mock") またはエラー時の代替問題 (source="error")
               reason に理由を入れる。questions には代替問題が入る。
    """

    ok: bool
    questions: List[Question] = field(default_factory=list)
    reason: Optional[str] = None
    source: FetchSource = "live"

    @classmethod
    def success(cls, questions: List[Question]) -> "FetchResult":
        return cls(ok=True, questions=list(questions), source="live")

    @classmethod
    def degraded(
        cls, reason: str, fallback: List[Question], source: FetchSource
    ) -> "FetchResult":
        return cls(ok=False, questions=list(fallback), reason=reason, source=source)


# ----------------------------------------------------------------------
#  画面表示用レコード
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class SchoolRank:
    rank: int
    school_name: str
    points: int
    level: EducationLevel


@dataclass(frozen=True)
class VideoContent:
    id: str
    title: str
    thumbnail: str
    duration: str
    level: EducationLevel
    subject: str
