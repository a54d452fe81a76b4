"""
timer.py
======================

セッションが所有する 1 秒刻みのカウントダウン。

Streamlit はスクリプトを再実行するモデルなので、バックグラウンドスレッドは使わず、
単調時計 (time.monotonic) を poll() で見て「経過した分だけ」on_tick を呼ぶ。

- arm()    : 計測開始（armed = True）
- cancel() : 停止（armed = False）。以降 on_tick は一切呼ばれない
- poll()   : 期限を過ぎた tick を順に発火し、発火した回数を返す
"""

from __future__ import annotations

import time
from typing import Callable, Optional

Clock = Callable[[], float]


class Countdown:
    def __init__(
        self,
        on_tick: Callable[[], None],
        clock: Clock = time.monotonic,
        interval: float = 1.0,
    ):
        self._on_tick = on_tick
        self._clock = clock
        self.interval = interval
        self._armed = False
        self._next_due: Optional[float] = None

    @property
    def armed(self) -> bool:
        return self._armed

    def arm(self) -> None:
        self._armed = True
        self._next_due = self._clock() + self.interval

    def cancel(self) -> None:
        self._armed = False
        self._next_due = None

    def poll(self) -> int:
        """期限到来済みの tick を発火する。on_tick 内で cancel() されたらそこで止まる。"""
        fired = 0
        now = self._clock()
        while self._armed and self._next_due is not None and now >= self._next_due:
            self._next_due += self.interval
            fired += 1
            self._on_tick()
        return fired


def format_clock(seconds: int) -> str:
    """秒数を MM:SS 表記にする（例: 1800 → '30:00'）"""
    seconds = max(int(seconds), 0)
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"
