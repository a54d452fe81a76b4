"""
catalog.py
===========================

画面に表示する固定データ（カリキュラム・モックのランキング・学習動画）。
永続化はしないので、すべてモジュール定数として持つ。
"""

from __future__ import annotations

from typing import Dict, List

from .models import EducationLevel, QuizConfig, SchoolRank, SubjectType, VideoContent

# ----------------------------------------------------------------------
#  カリキュラム（学校段階 × 教科区分）
# ----------------------------------------------------------------------
_AGAMA = [
    "Pendidikan Agama Islam",
    "Pendidikan Agama Kristen",
    "Pendidikan Agama Katolik",
    "Pendidikan Agama Hindu",
    "Pendidikan Agama Buddha",
]

CURRICULUM: Dict[EducationLevel, Dict[SubjectType, List[str]]] = {
    EducationLevel.SD: {
        SubjectType.UMUM: [
            "Matematika", "Bahasa Indonesia", "IPA", "IPS", "PPKn", "SBdP", "PJOK",
        ],
        SubjectType.AGAMA: list(_AGAMA),
    },
    EducationLevel.SMP: {
        SubjectType.UMUM: [
            "Matematika", "Bahasa Indonesia", "Bahasa Inggris", "IPA", "IPS",
            "PPKn", "Informatika",
        ],
        SubjectType.AGAMA: list(_AGAMA),
    },
    EducationLevel.SMA: {
        SubjectType.UMUM: [
            "Matematika", "Bahasa Indonesia", "Bahasa Inggris", "Fisika", "Kimia",
            "Biologi", "Sejarah", "Geografi", "Ekonomi", "Sosiologi", "Informatika",
        ],
        SubjectType.AGAMA: list(_AGAMA),
    },
}


def subjects_for(level: EducationLevel, subject_type: SubjectType) -> List[str]:
    """指定した学校段階・教科区分の教科一覧"""
    return list(CURRICULUM[level][subject_type])


# ----------------------------------------------------------------------
#  フェスティバル
# ----------------------------------------------------------------------
FESTIVAL_SUBJECT = "Pengetahuan Umum Nasional"


def festival_config(school_name: str) -> QuizConfig:
    """フェスティバル用のクイズ設定（SMA / Umum 固定）"""
    return QuizConfig(
        level=EducationLevel.SMA,
        subject=FESTIVAL_SUBJECT,
        type=SubjectType.UMUM,
        is_festival=True,
        school_name=school_name or None,
    )


FESTIVAL_CHART = [
    {"name": "SDN 1", "points": 4000},
    {"name": "SMP 2", "points": 3000},
    {"name": "SMA 3", "points": 2000},
    {"name": "SDN 5", "points": 2780},
    {"name": "SMA 1", "points": 1890},
]


# ----------------------------------------------------------------------
#  モックデータ
# ----------------------------------------------------------------------
MOCK_LEADERBOARD: List[SchoolRank] = [
    SchoolRank(1, "SDN 1 Nusantara", 15400, EducationLevel.SD),
    SchoolRank(2, "SMP Bintang Juara", 14250, EducationLevel.SMP),
    SchoolRank(3, "SMA Harapan Bangsa", 13900, EducationLevel.SMA),
    SchoolRank(4, "SD Mentari Pagi", 12100, EducationLevel.SD),
    SchoolRank(5, "SMA Negeri 1 Kota", 11800, EducationLevel.SMA),
]

MOCK_VIDEOS: List[VideoContent] = [
    VideoContent(
        "1", "Trik Cepat Matematika Dasar",
        "https://picsum.photos/300/170?random=1", "10:05",
        EducationLevel.SD, "Matematika",
    ),
    VideoContent(
        "2", "Sejarah Kemerdekaan Indonesia",
        "https://picsum.photos/300/170?random=2", "15:30",
        EducationLevel.SMP, "IPS",
    ),
    VideoContent(
        "3", "Hukum Newton & Penerapannya",
        "https://picsum.photos/300/170?random=3", "20:15",
        EducationLevel.SMA, "Fisika",
    ),
    VideoContent(
        "4", "Basic English Conversation",
        "https://picsum.photos/300/170?random=4", "08:45",
        EducationLevel.SMP, "Bahasa Inggris",
    ),
    VideoContent(
        "5", "Memahami Ekosistem Laut",
        "https://picsum.photos/300/170?random=5", "12:20",
        EducationLevel.SD, "IPA",
    ),
]
