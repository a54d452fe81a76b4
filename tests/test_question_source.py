"""QuestionSource / parse_questions / GeminiClient のテスト"""
import json
import logging
from unittest.mock import MagicMock

import pytest
from google.api_core.exceptions import GoogleAPIError, ResourceExhausted

from stereo_quiz import gemini
from stereo_quiz.config import AppConfig
from stereo_quiz.models import EducationLevel
from stereo_quiz.question_source import (
    QUESTION_SCHEMA,
    InvalidResponse,
    QuestionSource,
    build_prompt,
    parse_questions,
)


class FakeGenerator:
    """generate_json() を持つ偽クライアント"""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.prompts = []
        self.schemas = []

    def generate_json(self, prompt, response_schema=None):
        self.prompts.append(prompt)
        self.schemas.append(response_schema)
        if self.error is not None:
            raise self.error
        return self.response


# ============================================================================
# APIキーなし（モック）
# ============================================================================


class TestMockFallback:
    def test_returns_fixed_three_questions(self):
        """APIキーなし → 固定の 3 問（水増ししない）"""
        result = QuestionSource(api_key="").fetch(EducationLevel.SD, "IPA", 5)

        assert [q.id for q in result.questions] == [1, 2, 3]
        assert result.questions[0].correct_answer == 0
        assert result.questions[0].options == ["Jakarta", "Bandung", "Surabaya", "Medan"]
        assert result.questions[1].correct_answer == 1
        assert result.questions[2].correct_answer == 1

    def test_tagged_as_mock(self):
        result = QuestionSource().fetch(EducationLevel.SD, "IPA", 5)

        assert result.ok is False
        assert result.source == "mock"
        assert result.reason == "missing_api_key"

    def test_level_and_subject_embedded(self):
        result = QuestionSource().fetch(EducationLevel.SMA, "Fisika", 5)

        for q in result.questions:
            assert q.text.startswith("(MOCK)")
            assert "(Level: SMA, Mapel: Fisika)" in q.text

    def test_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="stereo_quiz.question_source"):
            QuestionSource().fetch(EducationLevel.SD, "IPA", 5)

        assert "API_KEY not found" in caplog.text

    def test_is_live_false(self):
        assert QuestionSource().is_live is False


# ============================================================================
# Gemini 正常系
# ============================================================================


class TestLiveFetch:
    def test_success_reassigns_ids(self, sample_payload):
        """応答側の id (7, 42) は無視して 1..N を振る"""
        client = FakeGenerator(response=json.dumps(sample_payload))
        result = QuestionSource(client=client).fetch(EducationLevel.SMP, "Matematika", 2)

        assert result.ok is True
        assert result.source == "live"
        assert result.reason is None
        assert [q.id for q in result.questions] == [1, 2]
        assert result.questions[0].text == "Berapakah 2 + 2?"
        assert result.questions[0].correct_answer == 1
        assert result.questions[1].explanation == "Bandung adalah ibu kota Jawa Barat."

    def test_single_request_with_schema(self, sample_payload):
        client = FakeGenerator(response=json.dumps(sample_payload))
        QuestionSource(client=client).fetch(EducationLevel.SMP, "Matematika", 5)

        assert len(client.prompts) == 1
        assert client.schemas == [QUESTION_SCHEMA]
        assert "Buatkan 5 soal pilihan ganda" in client.prompts[0]
        assert "Matematika" in client.prompts[0]
        assert "SMP" in client.prompts[0]

    def test_accepts_string_level(self, sample_payload):
        client = FakeGenerator(response=json.dumps(sample_payload))
        result = QuestionSource(client=client).fetch("SD", "IPA", 2)

        assert result.ok is True
        assert "tingkat SD" in client.prompts[0]

    def test_code_fence_is_tolerated(self, sample_payload):
        raw = "```json\n" + json.dumps(sample_payload) + "\n```"
        client = FakeGenerator(response=raw)
        result = QuestionSource(client=client).fetch(EducationLevel.SD, "IPA", 2)

        assert result.ok is True
        assert len(result.questions) == 2

    def test_empty_array_is_empty_success(self):
        """[] は失敗ではなく 0 問（代替問題を入れない）"""
        client = FakeGenerator(response="[]")
        result = QuestionSource(client=client).fetch(EducationLevel.SD, "IPA", 5)

        assert result.ok is True
        assert result.source == "live"
        assert result.questions == []

    def test_from_config_without_key_is_mock(self):
        source = QuestionSource.from_config(AppConfig(gemini_api_key=""))
        assert source.is_live is False


# ============================================================================
# Gemini 失敗系（例外は外に出さない）
# ============================================================================


class TestFailures:
    @pytest.mark.parametrize(
        "error, reason",
        [
            (ResourceExhausted("quota"), "quota_exhausted"),
            (GoogleAPIError("boom"), "api_error"),
            (ConnectionError("offline"), "request_failed"),
            (ValueError("No text response from Gemini"), "request_failed"),
        ],
    )
    def test_client_errors_become_placeholder(self, error, reason):
        client = FakeGenerator(error=error)
        result = QuestionSource(client=client).fetch(EducationLevel.SMA, "Kimia", 5)

        assert result.ok is False
        assert result.source == "error"
        assert result.reason == reason
        assert len(result.questions) == 1
        assert result.questions[0].text.startswith("Maaf, gagal memuat soal AI")
        assert "(Error: Kimia)" in result.questions[0].text

    def test_invalid_json(self):
        client = FakeGenerator(response="ini bukan json")
        result = QuestionSource(client=client).fetch(EducationLevel.SD, "IPA", 5)

        assert result.ok is False
        assert result.reason == "invalid_response"
        assert len(result.questions) == 1

    def test_error_is_logged(self, caplog):
        client = FakeGenerator(error=GoogleAPIError("boom"))
        with caplog.at_level(logging.ERROR, logger="stereo_quiz.question_source"):
            QuestionSource(client=client).fetch(EducationLevel.SD, "IPA", 5)

        assert "Gemini API error" in caplog.text


# ============================================================================
# parse_questions（検証）
# ============================================================================


class TestParseQuestions:
    def test_drops_malformed_items(self, sample_payload):
        bad = [
            {"text": "Tiga opsi", "options": ["a", "b", "c"], "correctAnswer": 0},
            {"text": "Di luar jangkauan", "options": ["a", "b", "c", "d"], "correctAnswer": 4},
            {"text": "", "options": ["a", "b", "c", "d"], "correctAnswer": 0},
            {"text": "Bool", "options": ["a", "b", "c", "d"], "correctAnswer": True},
            "bukan objek",
        ]
        questions = parse_questions(json.dumps(bad + sample_payload[:1]))

        assert len(questions) == 1
        assert questions[0].id == 1
        assert questions[0].text == "Berapakah 2 + 2?"

    def test_all_invalid_raises(self):
        bad = [{"text": "x", "options": ["a"], "correctAnswer": 0}]
        with pytest.raises(InvalidResponse):
            parse_questions(json.dumps(bad))

    def test_object_instead_of_array_raises(self):
        with pytest.raises(InvalidResponse):
            parse_questions(json.dumps({"questions": []}))

    def test_missing_explanation_becomes_none(self):
        item = {"text": "Soal?", "options": ["a", "b", "c", "d"], "correctAnswer": 2}
        questions = parse_questions(json.dumps([item]))

        assert questions[0].explanation is None

    def test_explanation_kept_verbatim(self):
        item = {
            "text": "Soal?",
            "options": ["a", "b", "c", "d"],
            "correctAnswer": 0,
            "explanation": "  Karena a benar.\n",
        }
        questions = parse_questions(json.dumps([item]))

        assert questions[0].explanation == "  Karena a benar.\n"

    def test_blank_explanation_becomes_none(self):
        item = {"text": "Soal?", "options": ["a", "b", "c", "d"], "correctAnswer": 0, "explanation": "  "}
        questions = parse_questions(json.dumps([item]))

        assert questions[0].explanation is None

    def test_empty_array_returns_empty_list(self):
        assert parse_questions("[]") == []
        assert parse_questions("```json\n[]\n```") == []

    def test_prompt_mentions_schema_fields(self):
        prompt = build_prompt("SMA", "Biologi", 30)

        assert "Buatkan 30 soal" in prompt
        assert "'correctAnswer'" in prompt
        assert "kurikulum nasional Indonesia" in prompt


# ============================================================================
# GeminiClient（google.generativeai はモック）
# ============================================================================


class TestGeminiClient:
    def test_generate_json_uses_schema(self, monkeypatch):
        fake_genai = MagicMock()
        fake_genai.GenerativeModel.return_value.generate_content.return_value.text = " [] "
        monkeypatch.setattr(gemini, "genai", fake_genai)

        client = gemini.GeminiClient(api_key="fake_key", model_name="gemini-2.5-flash")
        text = client.generate_json("prompt", response_schema=QUESTION_SCHEMA)

        assert text == "[]"
        fake_genai.configure.assert_called_once_with(api_key="fake_key")
        fake_genai.GenerativeModel.assert_called_once_with("gemini-2.5-flash")
        fake_genai.GenerationConfig.assert_called_once_with(
            response_mime_type="application/json",
            response_schema=QUESTION_SCHEMA,
        )

    def test_empty_response_raises(self, monkeypatch):
        fake_genai = MagicMock()
        fake_genai.GenerativeModel.return_value.generate_content.return_value.text = ""
        monkeypatch.setattr(gemini, "genai", fake_genai)

        client = gemini.GeminiClient(api_key="fake_key", model_name="m")
        with pytest.raises(ValueError):
            client.generate_json("prompt")

    def test_source_with_key_builds_gemini_client(self, monkeypatch, sample_payload):
        fake_genai = MagicMock()
        fake_genai.GenerativeModel.return_value.generate_content.return_value.text = (
            json.dumps(sample_payload)
        )
        monkeypatch.setattr(gemini, "genai", fake_genai)

        source = QuestionSource(api_key="fake_key", model_name="gemini-2.5-flash")
        result = source.fetch(EducationLevel.SMP, "IPA", 2)

        assert source.is_live is True
        assert result.ok is True
        assert len(result.questions) == 2
