"""
ui.py
======================

Streamlit ベースの UI コンポーネントをまとめたモジュール。

責務:
- テーマ（ダーク / ライト）と CSS
- ナビゲーションバー・フッター
- クイズ画面（ヘッダー・残り時間・進捗・選択肢・移動ボタン）
- 結果画面（得点・メッセージ・解説一覧）

ここでは「見た目」と「ユーザー操作の入力」を扱い、
採点や状態遷移などのロジックは session.py / app.py 側に任せる。

戻り値として「何が押されたか」「どの選択肢が新たに選ばれたか」を返す。
"""

from __future__ import annotations

from html import escape
from typing import Any, Dict, List, Optional, Tuple

import streamlit as st

from .models import QuizConfig
from .session import QuizSession, ReviewItem

# ----------------------------------------------------------------------
#  テーマ定義
# ----------------------------------------------------------------------


THEMES: Dict[str, Dict[str, str]] = {
    "dark": {
        "bg": "#141414",
        "text": "#f5f5f5",
        "surface": "#1f1f1f",
        "surface_alt": "#262626",
        "border": "#333333",
        "primary": "#E50914",  # king-red
        "correct": "#22c55e",
        "incorrect": "#ef4444",
        "muted": "#9ca3af",
    },
    "light": {
        "bg": "#ffffff",
        "text": "#1c1c1e",
        "surface": "#f2f2f7",
        "surface_alt": "#ffffff",
        "border": "#d1d1d6",
        "primary": "#E50914",
        "correct": "#16a34a",
        "incorrect": "#dc2626",
        "muted": "#6b7280",
    },
}

# (ページキー, ナビ表示名, 学校名が必須か)
NAV_ITEMS: List[Tuple[str, str, bool]] = [
    ("home", "BERANDA", False),
    ("setup", "MULAI KUIS", True),
    ("festival", "FESTIVAL", True),
    ("learning", "BELAJAR", False),
    ("admin", "ADMIN", False),
]


# ----------------------------------------------------------------------
#  CSS 生成
# ----------------------------------------------------------------------
def _generate_css(theme: Dict[str, str]) -> str:
    """テーマに応じたグローバル CSS を生成する。"""

    return f"""
    <style>
    .sk-brand {{
        font-weight: 900;
        font-size: 1.4rem;
        letter-spacing: 0.05em;
    }}

    .sk-brand span {{
        color: {theme['primary']};
    }}

    .sk-subject {{
        font-weight: 700;
        font-size: 1.1rem;
    }}

    .sk-meta {{
        color: {theme['primary']};
        font-size: 0.75rem;
        font-weight: 700;
        text-transform: uppercase;
        letter-spacing: 0.08em;
    }}

    .sk-school {{
        color: {theme['muted']};
        font-size: 0.8rem;
    }}

    .sk-timer {{
        font-family: monospace;
        font-weight: 700;
        padding: 0.4rem 0.8rem;
        border-radius: 8px;
        background: {theme['surface_alt']};
    }}

    .sk-timer-low {{
        color: {theme['incorrect']};
        background: {theme['incorrect']}33;
    }}

    .sk-question-box {{
        background: {theme['surface']};
        padding: 1.2rem;
        border-radius: 14px;
        border: 1px solid {theme['border']};
        font-size: 1.2rem;
        line-height: 1.6;
        margin: 0.75rem 0;
    }}

    .sk-counter {{
        color: {theme['muted']};
        font-size: 0.85rem;
        font-weight: 700;
    }}

    .sk-score {{
        font-size: 4rem;
        font-weight: 900;
        text-align: center;
    }}

    .sk-score small {{
        font-size: 1.5rem;
        color: {theme['muted']};
    }}

    .sk-review {{
        padding: 1rem;
        border-radius: 12px;
        margin-bottom: 1rem;
        border: 2px solid {theme['incorrect']}55;
        background: {theme['incorrect']}11;
    }}

    .sk-review-correct {{
        border-color: {theme['correct']}55;
        background: {theme['correct']}11;
    }}

    .sk-answer {{
        font-weight: 600;
    }}

    .sk-answer-correct {{
        color: {theme['correct']};
    }}

    .sk-answer-incorrect {{
        color: {theme['incorrect']};
    }}

    .sk-label {{
        color: {theme['muted']};
        font-size: 0.7rem;
        font-weight: 700;
        text-transform: uppercase;
        letter-spacing: 0.1em;
    }}

    .sk-explanation {{
        border-top: 1px solid {theme['border']};
        margin-top: 0.6rem;
        padding-top: 0.6rem;
        font-size: 0.9rem;
    }}

    .sk-footer {{
        margin-top: 2rem;
        text-align: center;
        font-size: 0.8rem;
        color: {theme['muted']};
    }}
    </style>
    """


# ----------------------------------------------------------------------
#  テーマ関連
# ----------------------------------------------------------------------
def inject_theme(default: str = "dark") -> Dict[str, str]:
    """セッションのテーマを決めて CSS を注入し、テーマ辞書を返す。"""
    if "theme" not in st.session_state:
        st.session_state["theme"] = default
    theme_key = st.session_state.get("theme", default)
    if theme_key not in THEMES:
        theme_key = "dark"
        st.session_state["theme"] = theme_key
    theme = THEMES[theme_key]
    st.markdown(_generate_css(theme), unsafe_allow_html=True)
    return theme


# ----------------------------------------------------------------------
#  ナビゲーション / フッター
# ----------------------------------------------------------------------
def render_navbar(current_page: str) -> Optional[str]:
    """ナビゲーションを描画し、押されたページキーを返す。"""
    st.markdown(
        "<div class='sk-brand'>STEREO<span>KING</span></div>",
        unsafe_allow_html=True,
    )
    clicked: Optional[str] = None
    cols = st.columns(len(NAV_ITEMS))
    for col, (page, label, _needs_school) in zip(cols, NAV_ITEMS):
        with col:
            if st.button(
                label,
                key=f"sk_nav_{page}",
                type="primary" if page == current_page else "secondary",
                width="stretch",
            ):
                clicked = page
    return clicked


def render_footer() -> None:
    st.markdown(
        "<div class='sk-footer'>"
        "<div class='sk-brand'>STEREO<span>KING</span></div>"
        "<div>© 2024 FAM WI. All rights reserved.</div>"
        "<div>\"Kuis yang punya otak, mendidik generasi Indonesia\"</div>"
        "</div>",
        unsafe_allow_html=True,
    )


# ----------------------------------------------------------------------
#  残り時間（1 秒ごとに再実行されるフラグメント）
# ----------------------------------------------------------------------
@st.fragment(run_every=1)
def render_countdown(session: QuizSession) -> None:
    """
    残り時間を表示する。毎秒 session.poll() で時計を進め、
    時間切れで FINISHED になったらアプリ全体を再実行して結果画面へ移る。
    """
    session.poll()
    if not session.is_active:
        st.rerun()

    classes = "sk-timer sk-timer-low" if session.is_low_time else "sk-timer"
    st.markdown(
        f"<div style='text-align:right;'><span class='{classes}'>"
        f"⏱ {session.time_left_label}</span></div>",
        unsafe_allow_html=True,
    )


# ----------------------------------------------------------------------
#  公開 API: クイズページの描画
# ----------------------------------------------------------------------
def render_quiz_page(session: QuizSession) -> Dict[str, Any]:
    """
    ACTIVE 状態のクイズページを描画し、ユーザー操作の結果を返す。

    戻り値:
        {
          "selected_choice": Optional[int],   # 新たに押された選択肢 index (なければ None)
          "clicked_prev": bool,
          "clicked_next": bool,
          "clicked_finish": bool,
        }
    """
    config = session.config
    q = session.current_question
    total = len(session.questions)

    selected_choice: Optional[int] = None
    clicked_prev = False
    clicked_next = False
    clicked_finish = False

    if session.degraded:
        render_degraded_banner(session)

    # ----------------------------------------
    # ヘッダー
    # ----------------------------------------
    col_left, col_right = st.columns([2.2, 1.8])
    with col_left:
        st.markdown(quiz_header_html(config), unsafe_allow_html=True)
    with col_right:
        render_countdown(session)

    # 進捗バー
    st.progress(session.progress)

    # ----------------------------------------
    # 問題文
    # ----------------------------------------
    st.markdown(
        f"<div class='sk-counter'>Soal {session.current_index + 1} dari {total}</div>"
        f"<div class='sk-question-box'>{escape(q.text)}</div>",
        unsafe_allow_html=True,
    )

    # ----------------------------------------
    # 選択肢
    # ----------------------------------------
    answered_index = session.current_answer
    for idx in range(len(q.options)):
        if st.button(
            q.option_label(idx),
            key=f"sk_choice_{session.current_index}_{idx}",
            type="primary" if answered_index == idx else "secondary",
            width="stretch",
        ):
            selected_choice = idx

    # ----------------------------------------
    # ナビゲーション
    # ----------------------------------------
    col_prev, col_next = st.columns(2)
    with col_prev:
        if st.button(
            "Sebelumnya",
            key="sk_prev",
            disabled=session.current_index == 0,
            width="stretch",
        ):
            clicked_prev = True
    with col_next:
        if session.is_last_question:
            if st.button("Selesai", key="sk_finish", type="primary", width="stretch"):
                clicked_finish = True
        elif st.button("Selanjutnya", key="sk_next", type="primary", width="stretch"):
            clicked_next = True

    return {
        "selected_choice": selected_choice,
        "clicked_prev": clicked_prev,
        "clicked_next": clicked_next,
        "clicked_finish": clicked_finish,
    }


def render_degraded_banner(session: QuizSession) -> None:
    """モック / エラー代替問題で動いていることを知らせる。"""
    if session.fetch_source == "mock":
        st.info("Mode demo: API key belum diatur, soal contoh digunakan.")
    else:
        st.warning(
            "Soal AI gagal dimuat, soal cadangan ditampilkan. "
            f"(alasan: {session.degraded_reason})"
        )


def render_empty_page() -> bool:
    """0 問だった場合の行き止まり画面。戻るボタンが押されたら True。"""
    st.markdown("### ⚠️ Gagal memuat soal.")
    return st.button("Kembali", key="sk_empty_back")


# ----------------------------------------------------------------------
#  公開 API: 結果ページの描画
# ----------------------------------------------------------------------
def render_results_page(session: QuizSession) -> Dict[str, Any]:
    """
    FINISHED 状態の結果ページを描画する。

    戻り値:
        {"clicked_exit": bool}
    """
    config = session.config
    score = session.score or 0
    clicked_exit = False

    trophy = "🏆" if score > 70 else "🥈"
    festival = " Festival" if config.is_festival else ""
    st.markdown(f"## {trophy} Hasil Kuis{festival}")
    st.markdown(f"**{config.subject} - {config.level.value}**")
    st.markdown(
        f"<div class='sk-score'>{score}<small>/100</small></div>",
        unsafe_allow_html=True,
    )
    st.write(session.result_message)

    if config.school_name:
        st.caption(f"🏫 Poin tercatat untuk: **{config.school_name}**")

    if st.button("Kembali ke Beranda", key="sk_result_home", type="primary"):
        clicked_exit = True

    st.markdown("### Pembahasan & Penjelasan AI")
    for item in session.review():
        _render_review_item(item)

    if st.button("Selesai Review", key="sk_review_done", width="stretch"):
        clicked_exit = True

    return {"clicked_exit": clicked_exit}


def _render_review_item(item: ReviewItem) -> None:
    st.markdown(review_item_html(item), unsafe_allow_html=True)


# ----------------------------------------------------------------------
#  HTML 片（入力・AI 生成テキストはすべてエスケープする）
# ----------------------------------------------------------------------
def quiz_header_html(config: QuizConfig) -> str:
    school_html = (
        f"<div class='sk-school'>🏫 {escape(config.school_name)}</div>"
        if config.school_name
        else ""
    )
    return (
        f"<div class='sk-subject'>{escape(config.subject)}</div>"
        f"<div class='sk-meta'>{config.level.value} • {config.type.value}</div>"
        f"{school_html}"
    )


def review_item_html(item: ReviewItem) -> str:
    box_class = "sk-review sk-review-correct" if item.is_correct else "sk-review"
    mark = "✅" if item.is_correct else "❌"
    answer_class = "sk-answer-correct" if item.is_correct else "sk-answer-incorrect"

    correct_html = ""
    if item.correct_text is not None:
        correct_html = (
            "<div class='sk-label'>Jawaban Benar</div>"
            f"<div class='sk-answer sk-answer-correct'>{escape(item.correct_text)}</div>"
        )

    return (
        f"<div class='{box_class}'>"
        f"<div class='sk-counter'>{mark} Soal {item.number}</div>"
        f"<div>{escape(item.question.text)}</div>"
        "<div class='sk-label'>Jawaban Anda</div>"
        f"<div class='sk-answer {answer_class}'>{escape(item.chosen_text)}</div>"
        f"{correct_html}"
        "<div class='sk-explanation'>"
        "<div class='sk-label'>🧠 Penjelasan AI</div>"
        f"<div>{escape(item.explanation)}</div>"
        "</div>"
        "</div>"
    )
