"""アニメーションマップの再生 (進行度 0→100) をMP4に書き出す。"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional

import imageio_ffmpeg
import matplotlib
import matplotlib.animation as animation
import matplotlib.pyplot as plt
from tqdm import tqdm

from . import naming
from .errors import AnalyticsError, EC_STORAGE_DST_INVALID, EC_STORAGE_IO, EC_STORAGE_PERM
from .filters import FilterSnapshot
from .modes import VisualizationMode
from .playback import MAX_PROGRESS, PlaybackController
from .spatial import CANVAS_HEIGHT, CANVAS_WIDTH, SpatialRenderer


@dataclass
class RecordingParams:
    fps: int = 10
    bitrate: int = 1500
    dpi: int = 100
    out_dir: Optional[str] = None
    overwrite: bool = False


def _ffmpeg_exe() -> str:
    # imageio-ffmpeg 同梱バイナリを優先
    exe = imageio_ffmpeg.get_ffmpeg_exe()
    matplotlib.rcParams["animation.ffmpeg_path"] = exe
    return exe


class PlaybackRecorder:
    """再生の全フレームを描画してMP4へエンコードする。

    録画用に専用の `PlaybackController` を持つため、対話中の再生状態には触れない。
    """

    def __init__(self, params: Optional[RecordingParams] = None, logger: Optional[logging.Logger] = None) -> None:
        self.params = params or RecordingParams()
        self.logger = logger or logging.getLogger(__name__)
        self.playback = PlaybackController(logger=self.logger)
        self.renderer = SpatialRenderer(playback=self.playback, logger=self.logger)

    def output_path(self, snapshot: FilterSnapshot, dt: Optional[str] = None) -> str:
        basename = naming.build_basename(
            snapshot.building_id, snapshot.floor_id, VisualizationMode.ANIMATION.value, dt or naming.now_jst()
        )
        return naming.result_path("movie", basename, self.params.out_dir)

    def render(self, snapshot: FilterSnapshot):
        dpi = self.params.dpi
        fig, ax = plt.subplots(figsize=(CANVAS_WIDTH / dpi, CANVAS_HEIGHT / dpi), dpi=dpi)

        def _frame(progress: int):
            self.playback.progress = progress
            self.playback.tick_count = progress
            self.renderer.render(VisualizationMode.ANIMATION, snapshot, ax)
            return ()

        anim = animation.FuncAnimation(
            fig, _frame, frames=range(MAX_PROGRESS + 1),
            interval=1000 / self.params.fps, blit=False, cache_frame_data=False,
        )
        return fig, anim

    def save_mp4(self, anim: animation.FuncAnimation, out_path: str) -> str:
        """エンコードして保存パスを返す。

        Raises:
            AnalyticsError: ffmpeg 未導入・権限不足・I/O失敗の場合。
        """
        total = MAX_PROGRESS + 1
        try:
            _ffmpeg_exe()
            writer = animation.FFMpegWriter(
                fps=self.params.fps, bitrate=self.params.bitrate,
                codec="libx264", extra_args=["-pix_fmt", "yuv420p", "-movflags", "+faststart"],
            )
            with tqdm(total=total, desc="Encoding", unit="frame") as pbar:
                def _progress(i, n):
                    delta = (i + 1) - pbar.n
                    if delta > 0:
                        pbar.update(delta)

                anim.save(out_path, writer=writer, progress_callback=_progress)
            return out_path
        except FileNotFoundError as e:
            self.logger.error(f"EC={EC_STORAGE_DST_INVALID} ffmpeg_or_path_missing err={e}")
            raise AnalyticsError(EC_STORAGE_DST_INVALID, "ffmpeg未導入、または出力先が不正") from e
        except PermissionError as e:
            self.logger.error(f"EC={EC_STORAGE_PERM} perm err={e}")
            raise AnalyticsError(EC_STORAGE_PERM, "書込権限不足") from e
        except OSError as e:
            self.logger.error(f"EC={EC_STORAGE_IO} io err={e}")
            raise AnalyticsError(EC_STORAGE_IO, "I/O例外") from e

    def run(self, snapshot: FilterSnapshot, out_path: Optional[str] = None) -> Dict[str, object]:
        out_path = out_path or self.output_path(snapshot)
        if (not self.params.overwrite) and os.path.exists(out_path):
            self.logger.error(f"EC={EC_STORAGE_DST_INVALID} already_exists path={out_path}")
            raise AnalyticsError(EC_STORAGE_DST_INVALID, f"既存ファイルあり: {out_path}")

        fig, anim = self.render(snapshot)
        try:
            saved = self.save_mp4(anim, out_path)
        finally:
            plt.close(fig)
        stats = {"mp4_path": saved, "frames": MAX_PROGRESS + 1, "fps": self.params.fps}
        self.logger.info("summary %s", stats)
        return stats
