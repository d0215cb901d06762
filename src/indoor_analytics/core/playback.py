"""アニメーションマップの再生制御（進行度 0-100 とタイマーハンドル）。"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from matplotlib.backend_bases import TimerBase

MAX_PROGRESS = 100
DEFAULT_INTERVAL_MS = 100

TimerFactory = Callable[[int], TimerBase]
ProgressListener = Callable[[int], None]


def _default_timer(interval_ms: int) -> TimerBase:
    # イベントループを持たないバックエンドでは start() しても発火しない
    return TimerBase(interval=interval_ms)


class PlaybackController:
    """再生進行度と繰り返しタイマーを保持する。

    タイマーは同時に1つだけ。start() は冪等で、stop() は進行度を保持したまま
    停止、reset() は停止して進行度を 0 に戻す。進行度が 100 に達すると自動停止する。
    """

    def __init__(
        self,
        timer_factory: Optional[TimerFactory] = None,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._timer_factory = timer_factory or _default_timer
        self.interval_ms = interval_ms
        self.logger = logger or logging.getLogger(__name__)
        self._timer: Optional[TimerBase] = None
        self._listeners: List[ProgressListener] = []
        self.progress = 0
        self.tick_count = 0

    @property
    def running(self) -> bool:
        return self._timer is not None

    def bind_figure(self, fig) -> None:
        """Figure のキャンバスが持つイベントループタイマーを使う。"""
        self._timer_factory = lambda interval: fig.canvas.new_timer(interval=interval)

    def subscribe(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.progress)

    def start(self) -> bool:
        if self._timer is not None:
            return False
        if self.progress >= MAX_PROGRESS:
            self.logger.info("playback already finished progress=%d", self.progress)
            return False
        timer = self._timer_factory(self.interval_ms)
        timer.add_callback(self.tick)
        self._timer = timer
        timer.start()
        self.logger.info("playback start progress=%d interval_ms=%d", self.progress, self.interval_ms)
        return True

    def stop(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.stop()
            timer.remove_callback(self.tick)

    def reset(self) -> None:
        self.stop()
        self.progress = 0
        self.tick_count = 0
        self._notify()

    def tick(self) -> None:
        # 停止後に遅れて届いたコールバックは無視
        if self._timer is None:
            return
        self.tick_count += 1
        self.progress = min(self.progress + 1, MAX_PROGRESS)
        if self.progress >= MAX_PROGRESS:
            self.stop()
            self.logger.info("playback finished")
        self._notify()

    def close(self) -> None:
        self.stop()
        self._listeners.clear()
