"""フロアプラン上に点群を描くマップ系可視化（密度・クラスター・軌跡・再生）。"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

import numpy as np
import pandas as pd
from matplotlib.axes import Axes
from matplotlib.patches import Circle, Rectangle

from .fontconfig import setup_fonts
from .filters import FilterSnapshot
from .modes import VisualizationMode, descriptor_of
from .playback import PlaybackController
from .validation import POINT_COLUMNS, require_columns

setup_fonts()

CANVAS_WIDTH = 600
CANVAS_HEIGHT = 400

MAX_POINTS = 100
POINTS_PER_IDENTIFIER = 10
EPOCH_MS = 1704067200000  # 2024-01-01T00:00:00Z
STEP_MS = 3600 * 1000
POINT_AREAS = ("エントランス", "オフィス", "会議室", "カフェ")

HEAT_RADIUS = 30
CLUSTER_COLORS = ("#ff4444", "#44ff44", "#4444ff", "#ffff44", "#ff44ff")
CLUSTER_RADIUS = 8
PATH_COLOR = "#2196f3"
START_COLOR = "#4caf50"
END_COLOR = "#f44336"
ENDPOINT_RADIUS = 6
CURRENT_COLOR = "#ff9800"

# (x, y, w, h, 塗り, ラベル, ラベル位置)
FLOOR_ROOMS: Tuple[Tuple[int, int, int, int, str, str, Tuple[int, int]], ...] = (
    (50, 50, 100, 80, "#f0f0f0", "エントランス", (70, 95)),
    (150, 50, 200, 150, "#f8f8f8", "オフィス", (230, 130)),
    (350, 50, 100, 80, "#fff8e1", "会議室", (380, 95)),
    (450, 50, 100, 150, "#e8f5e8", "カフェ", (485, 130)),
    (50, 130, 500, 70, "#f5f5f5", "廊下", (290, 170)),
)


def point_count(n_selected: int) -> int:
    if n_selected > 0:
        return min(n_selected * POINTS_PER_IDENTIFIER, MAX_POINTS)
    return MAX_POINTS


def generate_points(selected_identifiers: Iterable[str]) -> pd.DataFrame:
    """選択GUIDから決定的な点群を生成する。

    位置は添字の三角関数で決まるため、同じGUID集合なら毎回同じ配置になる。

    Args:
        selected_identifiers: 選択GUID。空なら汎用ユーザーIDを割り当てる。

    Returns:
        id/x/y/intensity/cluster/timestamp/user_id/area 列を持つDataFrame。
    """
    ids = tuple(selected_identifiers)
    n = point_count(len(ids))
    i = np.arange(n)

    x = 50 + (np.sin(i * 0.1) + 1) * 250 + np.cos(i * 0.05) * 100
    y = 50 + (np.cos(i * 0.1) + 1) * 150 + np.sin(i * 0.08) * 75
    intensity = np.clip(0.3 + np.sin(i * 0.2) * 0.4 + 0.3, 0.3, 1.0)
    cluster = (i // 20) % 5
    timestamp = pd.to_datetime(EPOCH_MS + i * STEP_MS, unit="ms", utc=True)

    if ids:
        user_id = [ids[k % len(ids)] for k in range(n)]
    else:
        user_id = [f"user-{(k % 20) + 1}" for k in range(n)]

    return pd.DataFrame({
        "id": [f"point-{k}" for k in range(n)],
        "x": x,
        "y": y,
        "intensity": intensity,
        "cluster": cluster.astype(int),
        "timestamp": timestamp,
        "user_id": user_id,
        "area": [POINT_AREAS[k % len(POINT_AREAS)] for k in range(n)],
    })


def sort_by_time(points: pd.DataFrame) -> pd.DataFrame:
    return points.sort_values("timestamp", kind="mergesort").reset_index(drop=True)


def playback_index(progress: int, count: int) -> int:
    return int(np.floor((progress / 100.0) * count))


def pulse_radius(tick: int) -> float:
    return 12 + np.sin(tick / 10.0) * 4


# --- 描画 ---
def prepare_surface(ax: Axes) -> None:
    """キャンバス相当 (600x400px, y軸下向き) に座標系を合わせる。"""
    ax.clear()
    ax.set_xlim(0, CANVAS_WIDTH)
    ax.set_ylim(CANVAS_HEIGHT, 0)
    ax.set_aspect("equal")
    ax.axis("off")


def draw_floor_plan(ax: Axes) -> None:
    # 外壁
    ax.add_patch(Rectangle((50, 50), 500, 300, fill=False, edgecolor="#333333", linewidth=3, zorder=2))
    # 部屋の仕切り
    for x, y, w, h, fill, label, (tx, ty) in FLOOR_ROOMS:
        ax.add_patch(Rectangle((x, y), w, h, facecolor=fill, edgecolor="#666666", linewidth=1, zorder=1))
        ax.text(tx, ty, label, fontsize=8, color="#333333", zorder=2)


def _gradient_rgba(t: np.ndarray, intensity: float) -> np.ndarray:
    # 中心: 赤 α=0.8I → 半径中間: 黄 α=0.4I → 外周: 透明
    stops = [0.0, 0.5, 1.0]
    rgba = np.empty(t.shape + (4,))
    rgba[..., 0] = 1.0
    rgba[..., 1] = np.interp(t, stops, [0.0, 1.0, 1.0])
    rgba[..., 2] = 0.0
    rgba[..., 3] = np.interp(t, stops, [intensity * 0.8, intensity * 0.4, 0.0])
    rgba[..., 3][t > 1.0] = 0.0
    return rgba


def density_layer(
    points: pd.DataFrame,
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
    radius: int = HEAT_RADIUS,
) -> np.ndarray:
    """各点の放射グラデーションを描画順に source-over 合成した RGBA 配列。

    Returns:
        (height, width, 4) の非乗算 RGBA 配列 (値域 0-1)。
    """
    layer = np.zeros((height, width, 4))
    for x, y, intensity in points[["x", "y", "intensity"]].itertuples(index=False):
        x0, x1 = max(int(np.floor(x - radius)), 0), min(int(np.ceil(x + radius)) + 1, width)
        y0, y1 = max(int(np.floor(y - radius)), 0), min(int(np.ceil(y + radius)) + 1, height)
        if x0 >= x1 or y0 >= y1:
            continue
        gx, gy = np.meshgrid(np.arange(x0, x1) + 0.5, np.arange(y0, y1) + 0.5)
        src = _gradient_rgba(np.hypot(gx - x, gy - y) / radius, float(intensity))
        dst = layer[y0:y1, x0:x1]

        sa = src[..., 3:4]
        da = dst[..., 3:4]
        out_a = sa + da * (1.0 - sa)
        num = src[..., :3] * sa + dst[..., :3] * da * (1.0 - sa)
        out_rgb = np.divide(num, out_a, out=np.zeros_like(num), where=out_a > 0)
        layer[y0:y1, x0:x1, :3] = out_rgb
        layer[y0:y1, x0:x1, 3:4] = out_a
    return layer


def draw_density(ax: Axes, points: pd.DataFrame) -> None:
    layer = density_layer(points)
    ax.imshow(layer, extent=(0, CANVAS_WIDTH, CANVAS_HEIGHT, 0), interpolation="bilinear", zorder=3)
    ax.set_xlim(0, CANVAS_WIDTH)
    ax.set_ylim(CANVAS_HEIGHT, 0)


def draw_clusters(ax: Axes, points: pd.DataFrame) -> None:
    for x, y, cluster in points[["x", "y", "cluster"]].itertuples(index=False):
        ax.add_patch(Circle((x, y), CLUSTER_RADIUS, color=CLUSTER_COLORS[int(cluster) % len(CLUSTER_COLORS)], zorder=3))
        ax.text(x, y, str(int(cluster)), color="white", fontsize=6, ha="center", va="center", zorder=4)


def draw_trajectory(ax: Axes, points: pd.DataFrame) -> None:
    ordered = sort_by_time(points)
    if ordered.empty:
        return
    ax.plot(ordered["x"], ordered["y"], color=PATH_COLOR, linewidth=2, zorder=3)
    # 開始点（緑）・終了点（赤）
    ax.add_patch(Circle((ordered["x"].iloc[0], ordered["y"].iloc[0]), ENDPOINT_RADIUS, color=START_COLOR, zorder=4))
    ax.add_patch(Circle((ordered["x"].iloc[-1], ordered["y"].iloc[-1]), ENDPOINT_RADIUS, color=END_COLOR, zorder=4))


def draw_playback(ax: Axes, points: pd.DataFrame, progress: int, tick: Optional[int] = None) -> Optional[int]:
    """進行度までの軌跡と現在位置を描く。

    Returns:
        現在位置の添字。進行度100で末尾を越えた場合は None。
    """
    ordered = sort_by_time(points)
    tick = progress if tick is None else tick
    current = playback_index(progress, len(ordered))

    if current > 0:
        head = ordered.iloc[:current]
        ax.plot(head["x"], head["y"], color=PATH_COLOR, linewidth=2, zorder=3)

    if current >= len(ordered):
        return None
    cx, cy = ordered["x"].iloc[current], ordered["y"].iloc[current]
    ax.add_patch(Circle((cx, cy), CLUSTER_RADIUS, color=CURRENT_COLOR, zorder=4))
    # パルス効果
    ax.add_patch(Circle((cx, cy), pulse_radius(tick), fill=False, edgecolor=CURRENT_COLOR, linewidth=3, zorder=4))
    return current


class SpatialRenderer:
    """マップ系4モードの描画を受け持つ。"""

    def __init__(
        self,
        playback: Optional[PlaybackController] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.playback = playback or PlaybackController()
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def dataset(snapshot: FilterSnapshot) -> pd.DataFrame:
        return generate_points(snapshot.selected_identifiers)

    def render(self, mode, snapshot: FilterSnapshot, ax: Optional[Axes]) -> Optional[pd.DataFrame]:
        if ax is None:
            return None
        mode = VisualizationMode(mode)
        points = self.dataset(snapshot)
        require_columns(points, POINT_COLUMNS)

        prepare_surface(ax)
        draw_floor_plan(ax)
        if mode is VisualizationMode.HEATMAP:
            draw_density(ax, points)
        elif mode is VisualizationMode.CLUSTER:
            draw_clusters(ax, points)
        elif mode is VisualizationMode.TRAJECTORY:
            draw_trajectory(ax, points)
        elif mode is VisualizationMode.ANIMATION:
            draw_playback(ax, points, self.playback.progress, self.playback.tick_count)

        title = descriptor_of(mode).label
        caption = f"表示データ数: {len(points)}件"
        if mode is VisualizationMode.ANIMATION:
            caption += f"  進行度: {self.playback.progress}%"
        ax.set_title(f"{title}\n{caption}", fontsize=10)
        self.logger.debug("spatial render mode=%s points=%d", mode.value, len(points))
        return points

