"""
stereo_quiz パッケージ
======================

このパッケージは、STEREO KING 教育クイズアプリの内部ロジックを提供する。

主な役割:
- 設定管理（config）
- データ型（models）
- カリキュラム・モックデータ（catalog）
- Gemini API 呼び出し（gemini）
- 問題の取得とフォールバック（question_source）
- 制限時間付きクイズセッション（session / timer）
- 管理画面のモック（admin）
- UI コンポーネント（ui）

app.py は Streamlit の画面遷移のみを担当し、内部ロジックはすべて本パッケージから呼ぶ。
ui は streamlit を import するため、ここでは再エクスポートしない。
"""

from .config import AppConfig
from .models import (
    EducationLevel,
    FetchResult,
    Question,
    QuizConfig,
    SchoolRank,
    SubjectType,
    VideoContent,
)
from .question_source import QuestionSource
from .session import QuizSession, ReviewItem, SessionPhase
from .timer import Countdown, format_clock

__all__ = [
    "AppConfig",
    "EducationLevel",
    "FetchResult",
    "Question",
    "QuizConfig",
    "SchoolRank",
    "SubjectType",
    "VideoContent",
    "QuestionSource",
    "QuizSession",
    "ReviewItem",
    "SessionPhase",
    "Countdown",
    "format_clock",
]
