"""
config.py
=========

アプリ全体で利用する設定値を一元管理する。
Gemini API キー、モデル名、クイズの問題数・制限時間、管理画面の認証情報など
すべてこのクラスを通じて取得する。

読み込み順:
- APIキー: 環境変数 GEMINI_API_KEY → API_KEY → ルートの .env
- その他: ルート config.toml（無ければ既定値）
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import toml

logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# 基本パス定義
# ------------------------------------------------------------

ROOT_DIR = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT_DIR / "config.toml"
ENV_PATH = ROOT_DIR / ".env"

API_KEY_ENV_NAMES = ("GEMINI_API_KEY", "API_KEY")

DEFAULT_MODEL = "gemini-2.5-flash"
# デモ用の問題数。本番想定は 30 問だが、生成待ちを短くするため 5 問にしている。
DEFAULT_QUESTION_COUNT = 5
DEFAULT_TIME_LIMIT_SECONDS = 30 * 60


# ------------------------------------------------------------
# AppConfig
# ------------------------------------------------------------

@dataclass
class AppConfig:
    """
    アプリ設定クラス。

    - APIキーの読み取り
    - Gemini モデル名
    - クイズの問題数・制限時間
    - 管理画面のモック認証情報
    """

    # ---------- API ----------
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_MODEL

    # ---------- クイズ ----------
    question_count: int = DEFAULT_QUESTION_COUNT
    time_limit_seconds: int = DEFAULT_TIME_LIMIT_SECONDS

    # ---------- 管理画面（モック） ----------
    admin_username: str = "admin"
    admin_password: str = "admin123"

    # ---------- 表示 ----------
    app_name: str = "STEREO KING"
    theme: str = "dark"

    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    # ============================================================
    # 生成
    # ============================================================

    @classmethod
    def load(
        cls,
        path: Optional[Path] = None,
        env: Optional[Dict[str, str]] = None,
        env_path: Optional[Path] = None,
    ) -> "AppConfig":
        """
        config.toml と環境変数から AppConfig を組み立てる。
        config.toml が読めなくても既定値で起動できるようにする。
        """
        cfg = read_toml(path or CONFIG_PATH)

        gemini = _section(cfg, "gemini")
        quiz = _section(cfg, "quiz")
        admin = _section(cfg, "admin")
        app = _section(cfg, "app")

        config = cls(
            gemini_api_key=load_api_key(env=env, env_path=env_path),
            gemini_model=str(gemini.get("model") or DEFAULT_MODEL),
            question_count=_positive_int(
                quiz.get("question_count"), DEFAULT_QUESTION_COUNT
            ),
            time_limit_seconds=_positive_int(
                quiz.get("time_limit_seconds"), DEFAULT_TIME_LIMIT_SECONDS
            ),
            admin_username=str(admin.get("username", "admin")),
            admin_password=str(admin.get("password", "admin123")),
            app_name=str(app.get("name", "STEREO KING")),
            theme=str(app.get("theme", "dark")),
            raw=cfg,
        )
        return config

    @property
    def has_api_key(self) -> bool:
        return bool(self.gemini_api_key)


# ============================================================
# 内部関数
# ============================================================

def load_api_key(
    env: Optional[Dict[str, str]] = None,
    env_path: Optional[Path] = None,
) -> str:
    """
    Streamlit Cloud / ローカルどちらでも
    GEMINI_API_KEY (または API_KEY) が使えるようにする。
    """
    environ = os.environ if env is None else env

    for name in API_KEY_ENV_NAMES:
        key = environ.get(name)
        if key:
            return key.strip()

    # ローカル開発などで .env を使いたい場合にも対応
    path = env_path or ENV_PATH
    if path.exists():
        for line in path.read_text(encoding="utf-8").splitlines():
            for name in API_KEY_ENV_NAMES:
                if line.startswith(f"{name}="):
                    return line.split("=", 1)[1].strip().strip('"')

    return ""  # キーなし → モック出題へ


def read_toml(path: Path) -> Dict[str, Any]:
    """config.toml を読み込む。存在しない・壊れている場合は空 dict。"""
    if not path.exists():
        return {}
    try:
        return toml.load(path)
    except (toml.TomlDecodeError, OSError) as e:
        logger.warning("Could not read %s, using defaults: %s", path, e)
        return {}


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = cfg.get(name)
    return value if isinstance(value, dict) else {}


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default
