"""
gemini.py
======================

Google Gemini API の薄いラッパー。

要件:
- APIキーはコンストラクタで受け取る（環境変数は読まない）
- JSON スキーマ付きで generateContent を 1 回だけ呼ぶ
- リトライ・フェールオーバーはしない（失敗は呼び出し側で処理する）
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import google.generativeai as genai

logger = logging.getLogger(__name__)


class GeminiClient:
    """
    Gemini モデル呼び出しクラス。

    主な機能:
    - generate_json(): レスポンススキーマを指定して JSON テキストを取得
    """

    def __init__(self, api_key: str, model_name: str):
        self.api_key = api_key
        self.model_name = model_name
        genai.configure(api_key=api_key)
        self._model = genai.GenerativeModel(model_name)

    # ------------------------------------------------------------
    # generate_json()
    # ------------------------------------------------------------
    def generate_json(
        self,
        prompt: str,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        プロンプトを送り、レスポンスのテキスト（JSON 文字列のはず）を返す。
        応答が空なら ValueError。API エラーはそのまま送出する。
        """
        generation_config = genai.GenerationConfig(
            response_mime_type="application/json",
            response_schema=response_schema,
        )
        logger.debug("Calling Gemini model %s", self.model_name)
        response = self._model.generate_content(
            prompt,
            generation_config=generation_config,
        )
        text = response.text.strip() if getattr(response, "text", None) else ""
        if not text:
            raise ValueError("No text response from Gemini")
        return text
