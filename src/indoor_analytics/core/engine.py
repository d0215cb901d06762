"""フィルタ・可視化タイプ選択・描画・出力を束ねるダッシュボード。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes

from . import naming
from .dispatcher import ModeDispatcher, ModeSelection
from .errors import AnalyticsError, EC_STORAGE_DST_INVALID, EC_STORAGE_IO, EC_STORAGE_PERM
from .export import export_json
from .filters import FilterSnapshot, FilterState, describe_targets
from .logging_util import get_logger, log_summary
from .modes import VisualizationMode, descriptor_of
from .playback import DEFAULT_INTERVAL_MS, PlaybackController
from .recording import PlaybackRecorder, RecordingParams
from .spatial import CANVAS_HEIGHT, CANVAS_WIDTH, SpatialRenderer
from .statistical import StatisticalRenderer


@dataclass
class RenderConfig:
    """描画サイズ。既定は 600x400px 相当。"""

    dpi: int = 100
    width_px: int = CANVAS_WIDTH
    height_px: int = CANVAS_HEIGHT

    @property
    def size_inches(self) -> Tuple[float, float]:
        return self.width_px / self.dpi, self.height_px / self.dpi


@dataclass
class DashboardConfig:
    """ダッシュボードの挙動を制御する設定値群。"""

    render: RenderConfig = field(default_factory=RenderConfig)
    out_dir: Optional[str] = None
    overwrite: bool = False
    playback_interval_ms: int = DEFAULT_INTERVAL_MS
    run_id: Optional[str] = None
    log_to_file: bool = False


class Dashboard:
    """分析ダッシュボードの実行エントリーポイント。

    可視化は常に適用済みスナップショット `applied` だけを参照する。
    編集中の値 (`filters`) は `apply_filters()` を呼ぶまで描画に反映されない。
    """

    def __init__(
        self,
        config: Optional[DashboardConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """設定を受け取り状態・描画クラス・ロガーを初期化する。

        Args:
            config: `DashboardConfig`。未指定なら既定値。
            rng: グラフ系の乱数生成器。未指定なら描画ごとに非シード。
        """
        self.config = config or DashboardConfig()
        self.run_id = self.config.run_id or naming.now_jst()
        log_path = naming.meta_paths(self.run_id)["log_path"] if self.config.log_to_file else None
        self.logger = get_logger(self.run_id, log_path)

        self.filters = FilterState()
        self.applied: FilterSnapshot = self.filters.current_edits()
        self.filters.subscribe(self._on_apply)

        self.selection = ModeSelection(logger=self.logger)
        self.playback = PlaybackController(interval_ms=self.config.playback_interval_ms, logger=self.logger)
        self.playback.subscribe(self._on_progress)
        self.spatial = SpatialRenderer(playback=self.playback, logger=self.logger)
        self.statistical = StatisticalRenderer(rng=rng, logger=self.logger)
        self.dispatcher = ModeDispatcher(self.spatial, self.statistical, logger=self.logger)

        self._rng = rng
        self.fig: Optional[plt.Figure] = None
        self.ax: Optional[Axes] = None
        self._owns_fig = False

    # --- 状態 ---
    def _on_apply(self, snapshot: FilterSnapshot) -> None:
        self.applied = snapshot

    def apply_filters(self) -> FilterSnapshot:
        snap = self.filters.apply()
        self.logger.info("フィルタが適用されました: %d個のGUIDが選択されています", snap.identifier_count)
        return snap

    def reset_filters(self) -> None:
        self.filters.reset()
        self.logger.info("フィルタをリセットしました")

    def select_mode(self, mode) -> bool:
        previous = self.selection.mode
        changed = self.selection.select(mode)
        if changed and previous is VisualizationMode.ANIMATION and self.selection.mode is not previous:
            # アニメーション表示を離れたらタイマーを破棄
            self.playback.reset()
        return changed

    def switch_family(self, family) -> VisualizationMode:
        previous = self.selection.mode
        mode = self.selection.switch_family(family)
        if previous is VisualizationMode.ANIMATION and mode is not previous:
            self.playback.reset()
        return mode

    # --- 描画 ---
    def _ensure_axes(self) -> Axes:
        if self.ax is None:
            cfg = self.config.render
            self.fig, self.ax = plt.subplots(figsize=cfg.size_inches, dpi=cfg.dpi)
            self._owns_fig = True
            self.playback.bind_figure(self.fig)
        return self.ax

    def render(self, ax: Optional[Axes] = None):
        """適用済みフィルタで選択中のモードを描画する。

        Args:
            ax: 描画先。未指定ならダッシュボード所有の Figure を作る。

        Returns:
            描画に使ったデータセット（マップ系は点群DataFrame）。
        """
        if ax is not None and ax is not self.ax:
            self._release_figure()
            self.fig, self.ax = ax.figure, ax
            self.playback.bind_figure(self.fig)
        ax = self._ensure_axes()
        result = self.dispatcher.render(self.selection.mode, self.applied, ax)
        if self.fig is not None:
            self.fig.suptitle(describe_targets(self.applied), fontsize=9)
        return result

    def _on_progress(self, progress: int) -> None:
        if self.ax is None or self.selection.mode is not VisualizationMode.ANIMATION:
            return
        self.spatial.render(VisualizationMode.ANIMATION, self.applied, self.ax)
        if self.fig is not None:
            self.fig.canvas.draw_idle()

    # --- 出力 ---
    def output_basename(self) -> str:
        return naming.build_basename(
            self.applied.building_id, self.applied.floor_id, self.selection.mode.value, naming.now_jst()
        )

    def save_png(self, path: Optional[str] = None) -> str:
        """現在の描画をPNGとして保存する。

        Raises:
            AnalyticsError: 既存ファイルあり・権限不足・I/O失敗の場合。
        """
        if self.fig is None:
            self.render()
        out_path = Path(path or naming.result_path("image", self.output_basename(), self.config.out_dir))
        if (not self.config.overwrite) and out_path.exists():
            self.logger.error(f"EC={EC_STORAGE_DST_INVALID} already_exists path={out_path}")
            raise AnalyticsError(EC_STORAGE_DST_INVALID, f"既存ファイルあり: {out_path}")
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            self.fig.savefig(out_path, dpi=self.config.render.dpi)
        except PermissionError as e:
            self.logger.error(f"EC={EC_STORAGE_PERM} perm err={e}")
            raise AnalyticsError(EC_STORAGE_PERM, "書込権限不足") from e
        except OSError as e:
            self.logger.error(f"EC={EC_STORAGE_IO} io err={e}")
            raise AnalyticsError(EC_STORAGE_IO, f"failed to save png: {e}") from e
        self.logger.info("saved %s png=%s", descriptor_of(self.selection.mode).label, out_path)
        return str(out_path)

    def export(self, out_dir: Optional[str] = None) -> str:
        return export_json(
            self.applied, self.selection.mode,
            out_dir=out_dir or self.config.out_dir, rng=self._rng, logger=self.logger,
        )

    def record_playback(self, fps: int = 10, out_path: Optional[str] = None) -> dict:
        params = RecordingParams(
            fps=fps, dpi=self.config.render.dpi, out_dir=self.config.out_dir, overwrite=self.config.overwrite,
        )
        return PlaybackRecorder(params, logger=self.logger).run(self.applied, out_path)

    def summary(self, **extra) -> None:
        stats = {
            "mode": self.selection.mode.value,
            "family": self.selection.family.value,
            "building": self.applied.building_id,
            "floor": self.applied.floor_id,
            "guids": self.applied.identifier_count,
        }
        stats.update({k: v for k, v in extra.items() if v})
        log_summary(self.logger, stats)

    def _release_figure(self) -> None:
        # 呼び出し側から渡された Figure は閉じない
        if self._owns_fig and self.fig is not None:
            plt.close(self.fig)
        self.fig, self.ax = None, None
        self._owns_fig = False

    def close(self) -> None:
        self.playback.close()
        self._release_figure()

    def __enter__(self) -> "Dashboard":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


__all__ = ["Dashboard", "DashboardConfig", "RenderConfig"]
