"""
admin.py
======================

管理画面（モック）のロジック。

認証は config.toml で上書きできる固定の ID / パスワードを照合するだけで、
本物の認証・権限管理ではない。ランキングもモックデータをそのまま表示する。
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import pandas as pd

from .catalog import MOCK_LEADERBOARD
from .config import AppConfig
from .models import SchoolRank

logger = logging.getLogger(__name__)

LOGIN_ERROR = "Username atau password salah!"

# ダッシュボード上部のカード（表示専用の固定値）
OVERVIEW_CARDS: List[Dict[str, str]] = [
    {"label": "Total Sekolah", "value": "1,240", "delta": "+12% bulan ini"},
    {"label": "Kuis Diselesaikan", "value": "45.2K", "delta": "+5.4% minggu ini"},
    {"label": "Status Server", "value": "Online", "delta": "Latency: 24ms"},
]


def check_credentials(config: AppConfig, username: str, password: str) -> Optional[str]:
    """一致すれば None、不一致ならエラーメッセージを返す。"""
    if username == config.admin_username and password == config.admin_password:
        logger.info("Admin login: %s", username)
        return None
    logger.warning("Rejected admin login for %r", username)
    return LOGIN_ERROR


def leaderboard_frame(ranks: Optional[List[SchoolRank]] = None) -> pd.DataFrame:
    """ランキング表を DataFrame にする（ポイントは桁区切り表示）。"""
    rows = [
        {
            "Rank": f"#{r.rank}",
            "Sekolah": r.school_name,
            "Jenjang": r.level.value,
            "Poin": f"{r.points:,}",
        }
        for r in (MOCK_LEADERBOARD if ranks is None else ranks)
    ]
    return pd.DataFrame(rows, columns=["Rank", "Sekolah", "Jenjang", "Poin"])
