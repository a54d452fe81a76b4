"""
app.py
======================

STEREO KING 教育クイズアプリ（Streamlit）エントリーポイント。

特徴:
- ホーム（学校名の入力必須）+ メニュー構成
- クイズ設定（学校段階 → Umum/Agama → 教科）
- Gemini による問題生成（APIキーが無ければモック問題）
- 制限時間付きクイズ / 結果と解説
- フェスティバル / 学習動画 / 管理画面（いずれもモック表示）

前提:
- 環境変数 GEMINI_API_KEY（または API_KEY）が設定されていればオンライン出題
- config.toml があれば問題数・制限時間などを上書きする

状態はすべて st.session_state に置き、永続化はしない。
"""

from __future__ import annotations

import logging
from typing import Optional

import pandas as pd
import streamlit as st

from stereo_quiz.admin import OVERVIEW_CARDS, check_credentials, leaderboard_frame
from stereo_quiz.catalog import FESTIVAL_CHART, MOCK_VIDEOS, festival_config, subjects_for
from stereo_quiz.config import AppConfig
from stereo_quiz.logging_config import configure_logging
from stereo_quiz.models import EducationLevel, QuizConfig, SubjectType
from stereo_quiz.question_source import QuestionSource
from stereo_quiz.session import QuizSession, SessionPhase
from stereo_quiz.ui import (
    NAV_ITEMS,
    inject_theme,
    render_empty_page,
    render_footer,
    render_navbar,
    render_quiz_page,
    render_results_page,
)

logger = logging.getLogger("stereo_quiz.app")

SCHOOL_REQUIRED_PAGES = {page for page, _label, needs in NAV_ITEMS if needs}


# ----------------------------------------------------------------------
#  アプリ設定 / QuestionSource
# ----------------------------------------------------------------------
def load_app_config() -> AppConfig:
    """AppConfig をセッションに保持して返す。"""
    if "app_config" not in st.session_state:
        st.session_state["app_config"] = AppConfig.load()
    return st.session_state["app_config"]


def get_question_source() -> QuestionSource:
    if "question_source" not in st.session_state:
        st.session_state["question_source"] = QuestionSource.from_config(load_app_config())
    return st.session_state["question_source"]


# ----------------------------------------------------------------------
#  ページ遷移
# ----------------------------------------------------------------------
def set_page(page: str) -> None:
    st.session_state["page"] = page


def get_page() -> str:
    return st.session_state.get("page", "home")


def get_school_name() -> str:
    return st.session_state.get("school_name", "").strip()


def request_page(page: str) -> None:
    """
    学校名が必要なページは、未入力ならホームに戻して入力エラーを出す。
    """
    if page in SCHOOL_REQUIRED_PAGES and not get_school_name():
        st.session_state["school_error"] = True
        set_page("home")
        return
    st.session_state["school_error"] = False
    set_page(page)


# ----------------------------------------------------------------------
#  QuizSession のラッパー
# ----------------------------------------------------------------------
def get_quiz_session() -> Optional[QuizSession]:
    return st.session_state.get("quiz_session")


def _close_quiz() -> None:
    st.session_state.pop("quiz_session", None)
    set_page("home")


def start_quiz(config: QuizConfig) -> None:
    """新しいセッションを作ってクイズページへ移る（前のセッションは破棄）。"""
    previous = get_quiz_session()
    if previous is not None:
        previous.exit()

    app_config = load_app_config()
    st.session_state["quiz_session"] = QuizSession(
        config,
        get_question_source(),
        question_count=app_config.question_count,
        time_limit_seconds=app_config.time_limit_seconds,
        on_exit=_close_quiz,
    )
    logger.info("Starting quiz: %s", config)
    set_page("quiz")


# ----------------------------------------------------------------------
#  ページ: ホーム
# ----------------------------------------------------------------------
def render_home_page() -> None:
    st.caption("⚡ Kuis Pendidikan No.1 Indonesia")
    st.markdown("# Asah Otak, Raih Juara.")
    st.write(
        "Platform kuis cerdas untuk SD, SMP, dan SMA. Tersedia ribuan soal umum "
        "dan agama yang dibuat oleh AI canggih."
    )

    school = st.text_input(
        "Nama sekolah",
        value=st.session_state.get("school_name", ""),
        placeholder="Masukkan Nama Sekolahmu (Wajib)",
        label_visibility="collapsed",
    )
    st.session_state["school_name"] = school
    if school.strip():
        st.session_state["school_error"] = False

    if st.session_state.get("school_error"):
        st.error("⚠️ Mohon isi nama sekolah untuk mulai mencetak poin!")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Mulai Kuis Sekarang", type="primary", width="stretch"):
            request_page("setup")
            st.rerun()
    with col2:
        if st.button("Lihat Festival", width="stretch"):
            request_page("festival")
            st.rerun()


# ----------------------------------------------------------------------
#  ページ: クイズ設定
# ----------------------------------------------------------------------
def render_setup_page() -> None:
    st.markdown("## Pilih Kuis Kamu")
    st.caption(f"Sekolah: **{get_school_name()}**")

    st.markdown("### 1. Jenjang Pendidikan")
    selected_level: Optional[EducationLevel] = st.session_state.get("selected_level")
    cols = st.columns(len(EducationLevel))
    for col, level in zip(cols, EducationLevel):
        with col:
            if st.button(
                level.value,
                key=f"level_{level.value}",
                type="primary" if level == selected_level else "secondary",
                width="stretch",
            ):
                st.session_state["selected_level"] = level
                st.rerun()

    if selected_level is None:
        return

    st.markdown("### 2. Mata Pelajaran")
    subject_type = st.radio(
        "Jenis mata pelajaran",
        list(SubjectType),
        index=list(SubjectType).index(
            st.session_state.get("selected_subject_type", SubjectType.UMUM)
        ),
        horizontal=True,
        format_func=lambda t: t.value,
        label_visibility="collapsed",
    )
    st.session_state["selected_subject_type"] = subject_type

    for subject in subjects_for(selected_level, subject_type):
        if st.button(f"{subject}  →", key=f"subject_{subject}", width="stretch"):
            start_quiz(
                QuizConfig(
                    level=selected_level,
                    subject=subject,
                    type=subject_type,
                    is_festival=False,
                    school_name=get_school_name() or None,
                )
            )
            st.rerun()


# ----------------------------------------------------------------------
#  ページ: クイズ
# ----------------------------------------------------------------------
def render_quiz_main_page() -> None:
    session = get_quiz_session()
    if session is None:
        set_page("home")
        st.rerun()
        return

    if session.phase is SessionPhase.LOADING:
        with st.spinner(
            f"Sedang Membuat Soal... AI sedang menyusun kuis "
            f"{session.config.subject} untuk {session.config.level.value}"
        ):
            session.load()

    # 画面操作の前に経過時間を反映する（時間切れならここで FINISHED になる）
    session.poll()

    if session.phase is SessionPhase.EMPTY:
        if render_empty_page():
            session.exit()
            st.rerun()
        return

    if session.phase is SessionPhase.FINISHED:
        result = render_results_page(session)
        if result["clicked_exit"]:
            session.exit()
            st.rerun()
        return

    ui_result = render_quiz_page(session)

    if ui_result["selected_choice"] is not None:
        session.select(ui_result["selected_choice"])
        st.rerun()
    elif ui_result["clicked_prev"]:
        session.prev()
        st.rerun()
    elif ui_result["clicked_next"]:
        session.next()
        st.rerun()
    elif ui_result["clicked_finish"]:
        session.finish()
        st.rerun()


# ----------------------------------------------------------------------
#  ページ: フェスティバル
# ----------------------------------------------------------------------
def render_festival_page() -> None:
    st.markdown("## 🏆 Festival Nasional")
    st.write(
        "Kompetisi bergengsi antar sekolah se-Indonesia. Kumpulkan poin tertinggi "
        "untuk sekolahmu dan menangkan piala STEREO KING!"
    )
    st.caption(f"Mewakili: **{get_school_name()}**")

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("🔴 **LIVE**")
        st.markdown("### Ikuti Kompetisi")
        st.write("Jawab soal spesial festival dengan poin ganda. Durasi terbatas.")
        if st.button("Masuk Arena Festival", type="primary", width="stretch"):
            start_quiz(festival_config(get_school_name()))
            st.rerun()
    with col2:
        st.markdown("### 📊 Klasemen Sementara")
        chart = pd.DataFrame(FESTIVAL_CHART).set_index("name")
        st.bar_chart(chart, y="points", color="#E50914")


# ----------------------------------------------------------------------
#  ページ: 学習動画
# ----------------------------------------------------------------------
def render_learning_page() -> None:
    st.markdown("## 🎬 Video Pembelajaran")
    st.write("Pelajari materi sebelum mengikuti kuis.")

    cols = st.columns(3)
    for i, video in enumerate(MOCK_VIDEOS):
        with cols[i % 3]:
            st.image(video.thumbnail)
            st.markdown(f"**{video.title}**")
            st.caption(f"{video.level.value} • {video.subject} • {video.duration}")


# ----------------------------------------------------------------------
#  ページ: 管理画面
# ----------------------------------------------------------------------
def render_admin_page() -> None:
    config = load_app_config()

    if not st.session_state.get("admin_logged_in"):
        st.markdown("## 🔒 Admin Panel")
        st.caption("Akses khusus pengelola STEREO KING")
        with st.form("admin_login"):
            username = st.text_input("Username", placeholder="Masukkan username")
            password = st.text_input(
                "Password", type="password", placeholder="Masukkan password"
            )
            submitted = st.form_submit_button("Masuk")
        if submitted:
            error = check_credentials(config, username, password)
            if error is None:
                st.session_state["admin_logged_in"] = True
                st.rerun()
            else:
                st.error(error)
        return

    st.markdown("## Dashboard")
    st.caption("Administrator")

    cols = st.columns(len(OVERVIEW_CARDS))
    for col, card in zip(cols, OVERVIEW_CARDS):
        with col:
            st.metric(card["label"], card["value"], card["delta"])

    st.markdown("### Peringkat Sekolah (Live)")
    st.dataframe(leaderboard_frame(), hide_index=True, width="stretch")

    if st.button("Keluar"):
        st.session_state["admin_logged_in"] = False
        st.rerun()


# ----------------------------------------------------------------------
#  メイン
# ----------------------------------------------------------------------
def main() -> None:
    st.set_page_config(
        page_title="STEREO KING",
        page_icon="👑",
        layout="centered",
    )

    config = load_app_config()
    inject_theme(config.theme)

    page = get_page()

    clicked = render_navbar(page)
    if clicked is not None and clicked != page:
        # クイズ中にメニューを押したらセッションは破棄する
        session = get_quiz_session()
        if session is not None:
            session.exit()
        request_page(clicked)
        st.rerun()

    if page == "setup":
        render_setup_page()
    elif page == "quiz":
        render_quiz_main_page()
    elif page == "festival":
        render_festival_page()
    elif page == "learning":
        render_learning_page()
    elif page == "admin":
        render_admin_page()
    else:
        # デフォルトはホーム
        set_page("home")
        render_home_page()

    render_footer()


if __name__ == "__main__":
    configure_logging()
    main()
