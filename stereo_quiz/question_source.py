"""
question_source.py
===========================

クイズ問題の取得元。

- APIキーあり : Gemini に count 問の四択問題を JSON スキーマ付きで依頼する
- APIキーなし : 固定のモック問題 3 問を返す（count まで水増ししない）
- 失敗時      : 例外を外に出さず、エラー用の代替問題 1 問を返す

戻り値は FetchResult で、ok=False のときは「劣化モード」であることを
呼び出し側（QuizSession / UI）が判別できる。
リトライ・キャッシュはしない。
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Optional, Protocol, Union

from google.api_core.exceptions import GoogleAPIError, ResourceExhausted

from .config import DEFAULT_MODEL, AppConfig
from .gemini import GeminiClient
from .models import EducationLevel, FetchResult, Question

logger = logging.getLogger(__name__)

OPTION_COUNT = 4

# Gemini に渡すレスポンススキーマ（id は受け取っても使わない）
QUESTION_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "id": {"type": "integer"},
            "text": {"type": "string"},
            "options": {"type": "array", "items": {"type": "string"}},
            "correctAnswer": {"type": "integer"},
            "explanation": {"type": "string"},
        },
        "required": ["text", "options", "correctAnswer", "explanation"],
    },
}


class JsonGenerator(Protocol):
    def generate_json(self, prompt: str, response_schema: Optional[dict] = None) -> str:
        ...


class InvalidResponse(ValueError):
    """Gemini の応答が問題リストとして使えない場合"""


# ----------------------------------------------------------------------
#  固定の代替問題
# ----------------------------------------------------------------------
def mock_questions(level: str, subject: str) -> List[Question]:
    """APIキーが無いとき用のモック問題。level / subject を問題文に埋め込む。"""
    tag = f"(Level: {level}, Mapel: {subject})"
    return [
        Question(
            id=1,
            text=f"(MOCK) Apa ibu kota Indonesia? {tag}",
            options=["Jakarta", "Bandung", "Surabaya", "Medan"],
            correct_answer=0,
            explanation="Jakarta adalah ibu kota negara Indonesia saat ini.",
        ),
        Question(
            id=2,
            text=f"(MOCK) Berapakah hasil 10 + 10? {tag}",
            options=["10", "20", "30", "40"],
            correct_answer=1,
            explanation="10 ditambah 10 sama dengan 20.",
        ),
        Question(
            id=3,
            text=f"(MOCK) Salah satu sila Pancasila? {tag}",
            options=["Makan siang gratis", "Ketuhanan Yang Maha Esa", "Tidur siang", "Main game"],
            correct_answer=1,
            explanation="Sila pertama adalah Ketuhanan Yang Maha Esa.",
        ),
    ]


def error_questions(subject: str) -> List[Question]:
    """Gemini 呼び出し失敗時の代替問題（1 問）"""
    return [
        Question(
            id=1,
            text=f"Maaf, gagal memuat soal AI. Coba lagi nanti. (Error: {subject})",
            options=["Opsi A", "Opsi B", "Opsi C", "Opsi D"],
            correct_answer=0,
            explanation="Terjadi kesalahan koneksi.",
        )
    ]


# ----------------------------------------------------------------------
#  プロンプト
# ----------------------------------------------------------------------
def build_prompt(level: str, subject: str, count: int) -> str:
    """問題生成用プロンプト（インドネシア語）"""
    return f"""
Buatkan {count} soal pilihan ganda untuk mata pelajaran {subject} tingkat {level} sekolah di Indonesia.
Format JSON harus valid. Setiap soal harus memiliki 'text' (pertanyaan), 'options' (array 4 jawaban string), 'correctAnswer' (index integer 0-3 yang benar), dan 'explanation' (penjelasan singkat bahasa Indonesia).
Pastikan soal relevan dengan kurikulum nasional Indonesia.
"""


# ----------------------------------------------------------------------
#  応答のパース・検証
# ----------------------------------------------------------------------
_FENCE_RE = re.compile(r"```(?:json)?\s*(.+?)\s*```", re.DOTALL)


def parse_questions(raw_text: str) -> List[Question]:
    """
    Gemini の JSON 応答を Question のリストにする。

    - ```json ... ``` で囲まれていても読む
    - 形が不正な要素は警告を出して捨てる
    - id は 1..N に振り直す（応答側の id は無視）
    - 空配列 [] はそのまま空リスト（問題 0 件）
    - 要素はあるのに有効な問題が 1 つも無ければ InvalidResponse
    """
    text = raw_text.strip()
    match = _FENCE_RE.search(text)
    if match:
        text = match.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidResponse(f"invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise InvalidResponse(f"expected a JSON array, got {type(data).__name__}")
    if not data:
        return []

    questions: List[Question] = []
    for item in data:
        if not _is_valid_item(item):
            logger.warning("Skipping invalid question: %r", item)
            continue
        questions.append(
            Question(
                id=len(questions) + 1,
                text=item["text"].strip(),
                options=[opt.strip() for opt in item["options"]],
                correct_answer=item["correctAnswer"],
                explanation=_explanation(item.get("explanation")),
            )
        )

    if not questions:
        raise InvalidResponse("no valid questions in response")
    return questions


def _explanation(value: Any) -> Optional[str]:
    # 解説は原文のまま。空・欠落・空白のみは None
    if not isinstance(value, str) or not value.strip():
        return None
    return value


def _is_valid_item(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    text = item.get("text")
    options = item.get("options")
    correct = item.get("correctAnswer")
    if not isinstance(text, str) or not text.strip():
        return False
    if not isinstance(options, list) or len(options) != OPTION_COUNT:
        return False
    if not all(isinstance(opt, str) for opt in options):
        return False
    # bool は int のサブクラスなので除外する
    if isinstance(correct, bool) or not isinstance(correct, int):
        return False
    return 0 <= correct < OPTION_COUNT


# ----------------------------------------------------------------------
#  QuestionSource
# ----------------------------------------------------------------------
class QuestionSource:
    """
    問題の取得元。

    APIキーの有無はコンストラクタで決まる。
    テストでは client に generate_json() を持つ偽物を渡せる。
    """

    def __init__(
        self,
        api_key: str = "",
        model_name: str = DEFAULT_MODEL,
        client: Optional[JsonGenerator] = None,
    ):
        self.model_name = model_name
        if client is not None:
            self._client: Optional[JsonGenerator] = client
        elif api_key:
            self._client = GeminiClient(api_key=api_key, model_name=model_name)
        else:
            self._client = None

    @classmethod
    def from_config(cls, config: AppConfig) -> "QuestionSource":
        return cls(api_key=config.gemini_api_key, model_name=config.gemini_model)

    @property
    def is_live(self) -> bool:
        return self._client is not None

    def fetch(
        self, level: Union[EducationLevel, str], subject: str, count: int
    ) -> FetchResult:
        """
        count 問を取得する。例外は送出しない。
        """
        level_label = level.value if isinstance(level, EducationLevel) else str(level)

        if self._client is None:
            logger.warning("API_KEY not found. Using mock data.")
            return FetchResult.degraded(
                "missing_api_key", mock_questions(level_label, subject), source="mock"
            )

        prompt = build_prompt(level_label, subject, count)
        try:
            raw = self._client.generate_json(prompt, response_schema=QUESTION_SCHEMA)
            questions = parse_questions(raw)
        except ResourceExhausted as e:
            logger.error("Gemini quota exhausted: %s", e)
            reason = "quota_exhausted"
        except GoogleAPIError as e:
            logger.error("Gemini API error: %s", e)
            reason = "api_error"
        except InvalidResponse as e:
            logger.error("Gemini returned an unusable response: %s", e)
            reason = "invalid_response"
        except Exception:
            logger.exception("Gemini request failed")
            reason = "request_failed"
        else:
            logger.info(
                "Fetched %d questions (%s / %s) from %s",
                len(questions), level_label, subject, self.model_name,
            )
            return FetchResult.success(questions)

        return FetchResult.degraded(reason, error_questions(subject), source="error")
