"""グラフ系可視化: 適用済みフィルタから集計データセットを合成し、表・グラフで描画する。

データは実測ではなく合成値。マップ系と異なり、乱数は描画のたびに引き直す
（`rng` を渡した場合のみ再現可能）。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

import numpy as np
import pandas as pd
from matplotlib.axes import Axes
from matplotlib.colors import ListedColormap
from matplotlib.patches import Rectangle

from .catalog import label_with_alias
from .filters import FilterSnapshot
from .fontconfig import setup_fonts
from .modes import VisualizationMode
from .validation import require_columns

setup_fonts()

M = VisualizationMode

AREAS: Tuple[str, ...] = ("エントランス", "オフィス", "会議室A", "会議室B", "カフェ", "休憩室", "薬剤エリア", "看護室")
COLORS = ("#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#8884D8", "#82ca9d", "#ffc658", "#ff7300", "#a4de6c")
INTENSITY_COLORS = ("#f7fbff", "#deebf7", "#c6dbef", "#9ecae1", "#6baed6", "#4292c6", "#2171b5", "#08519c", "#08306b")
TIME_SLOTS = tuple(f"{h:02d}:00-{h + 1:02d}:00" for h in range(9, 18))
WEEKDAYS = ("月", "火", "水", "木", "金")
WEEK = ("月", "火", "水", "木", "金", "土", "日")
STAY_RANGES = (("0-15分", 45), ("15-30分", 78), ("30-60分", 92), ("60-120分", 67), ("120分以上", 23))
FLOOR_KPIS = (("1階→2階移動", 47, "#2563eb"), ("2階→3階移動", 23, "#16a34a"), ("階段利用回数", 31, "#ea580c"))

DEFAULT_PAIR = ("GUID-A1-001", "GUID-A1-002")
DEFAULT_TRIO = ("GUID-A1-001", "GUID-A1-002", "GUID-A2-001")
FALLBACK_TREND_START = "2024-01-01"
FALLBACK_TREND_DAYS = 30
MAX_TREND_DAYS = 366
CROSS_TAB_TOP = 15

PLACEHOLDER_TITLE = "グラフ分析"

_TITLES: Dict[VisualizationMode, Tuple[str, str]] = {
    M.GUID_TIMELINE: ("GUIDタイムライン - 時間帯別エリア滞在状況",
                      "選択されたGUIDの時間帯別エリア滞在パターンを表形式で詳細表示"),
    M.GUID_MOVEMENT_STATS: ("GUID移動統計 - 移動回数と滞在時間", "GUIDごとの移動回数と滞在時間を棒グラフで比較"),
    M.GUID_AREA_DISTRIBUTION: ("GUIDエリア分布 - エリア別滞在割合", "選択されたGUIDのエリア別滞在分布を円グラフで可視化"),
    M.STAY_TIME_DISTRIBUTION: ("滞在時間分布", "全体の滞在時間分布を滞在時間帯ごとの件数で表示"),
    M.AREA_CROSS_TABULATION: ("エリア間移動クロス集計", "エリア間の移動パターンを集計し、高頻度の移動経路を特定"),
    M.AREA_TIME_RATIO: ("エリア別滞在時間割合 - 円グラフ", "エリア別の総滞在時間の割合を円グラフで表示"),
    M.AREA_TIME_HEATMAP: ("エリア別滞在時間ヒートマップ", "エリア別の滞在時間をヒートマップで色分け表示"),
    M.AREA_TIME_COMPARISON: ("エリア別滞在時間比較 - 箱ひげ図", "エリアごとの滞在時間のばらつきと分布を箱ひげ図で比較"),
    M.FLOOR_MOVEMENT_ANALYSIS: ("フロア間移動分析", "フロア間移動の回数分析による垂直移動負荷の把握"),
    M.BEHAVIOR_TRENDS: ("行動傾向分析 - 曜日・時間帯別ヒートマップ", "曜日と時間帯の組み合わせによる行動傾向をヒートマップで可視化"),
    M.HOURLY_ACTIVITY: ("時間帯別活動分析", "時間帯別の移動回数・滞在時間で混雑度や業務集中時間を把握"),
    M.DAILY_MOVEMENT_TREND: ("日別移動推移 - 折れ線グラフ", "日別の移動回数推移を折れ線グラフで時系列分析"),
    M.CONTINUOUS_STAY_DETECTION: ("連続滞在検出 - 業務集中度分析",
                                  "同一エリアでの連続滞在時間を検出し、業務集中度や休憩傾向を分析"),
    M.ANOMALY_DETECTION: ("異常行動検出 - パターン分析", "通常と異なる移動パターンを検出し、業務異常やトラブルの兆候を特定"),
}


@dataclass(frozen=True, eq=False)
class StatisticalDataset:
    """1回の描画で生成される集計データ。生成後は変更しない。

    Args:
        mode: 対応する可視化タイプ。未対応タグなら None。
        presentation: `table` / `bar` / `pie` / `grid` / `line` / `composed` / `box` / `kpi` / `placeholder`。
        frame: 描画対象のDataFrame。
        title: 見出し。
        description: 説明文。
        category_column: 軸・ラベルに使う列。
        value_columns: 値列と凡例名の組。
        headers: 表形式のときの列見出し。
        empty_message: データが空のときに表示する文言。
        cell_units: 表形式のとき値の後ろに付ける単位 (列名と単位の組)。
    """

    mode: Optional[VisualizationMode]
    presentation: str
    frame: pd.DataFrame
    title: str
    description: str = ""
    category_column: str = ""
    value_columns: Tuple[Tuple[str, str], ...] = ()
    headers: Tuple[str, ...] = ()
    empty_message: str = ""
    colors: Tuple[str, ...] = COLORS
    cell_units: Tuple[Tuple[str, str], ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.frame.empty


def density_factor(n_selected: int) -> float:
    """選択GUID数による活動量の倍率。未選択(全ユーザー)は1.0。"""
    if n_selected <= 0:
        return 1.0
    return 0.6 + 0.1 * n_selected


def trend_factor(n_selected: int) -> float:
    """曜日×時間帯グリッド用の倍率。GUID選択時は一律 0.7。"""
    return 0.7 if n_selected > 0 else 1.0


def clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def intensity_color_index(intensity: float) -> int:
    return int(math.floor(clamp01(intensity) * (len(INTENSITY_COLORS) - 1)))


def _scaled(rng: np.random.Generator, low: int, high: int, factor: float, size: Optional[int] = None):
    values = rng.integers(low, high, size=size)
    return np.floor(values * factor).astype(int) if size is not None else int(math.floor(values * factor))


def _dataset(mode: VisualizationMode, presentation: str, frame: pd.DataFrame, **kwargs) -> StatisticalDataset:
    title, description = _TITLES[mode]
    return StatisticalDataset(mode=mode, presentation=presentation, frame=frame,
                              title=title, description=description, **kwargs)


# ====== 個人レベル分析 ======
def guid_timeline(snap: FilterSnapshot, rng: np.random.Generator) -> StatisticalDataset:
    ids = snap.selected_identifiers or DEFAULT_PAIR
    n_areas = len(AREAS)
    rows = []
    for guid in ids:
        seed = ord(guid[0]) if guid else 0
        for index, slot in enumerate(TIME_SLOTS):
            # 時間帯と GUID の先頭文字から業務パターン風にエリアを決める
            area_index = int(math.floor(math.sin(index + seed) * n_areas / 2 + n_areas / 2)) % n_areas
            rows.append({
                "guid": label_with_alias(guid),
                "time_slot": slot,
                "area": AREAS[area_index],
                "duration": int(rng.integers(15, 60)),
            })
    frame = pd.DataFrame(rows, columns=["guid", "time_slot", "area", "duration"])
    return _dataset(M.GUID_TIMELINE, "table", frame, headers=("GUID", "時間帯", "滞在エリア", "滞在時間"),
                    cell_units=(("duration", "分"),))


def guid_movement_stats(snap: FilterSnapshot, rng: np.random.Generator) -> StatisticalDataset:
    ids = snap.selected_identifiers or DEFAULT_TRIO
    frame = pd.DataFrame([
        {
            "guid": label_with_alias(guid),
            "movements": int(rng.integers(20, 70)),
            "total_stay": int(rng.integers(200, 500)),
            "avg_stay": int(rng.integers(15, 45)),
        }
        for guid in ids
    ])
    return _dataset(M.GUID_MOVEMENT_STATS, "bar", frame, category_column="guid",
                    value_columns=(("movements", "移動回数"), ("avg_stay", "平均滞在時間(分)")),
                    colors=("#8884d8", "#82ca9d"))


def area_distribution(snap: FilterSnapshot, rng: np.random.Generator,
                      mode: VisualizationMode = M.GUID_AREA_DISTRIBUTION) -> StatisticalDataset:
    frame = pd.DataFrame({
        "name": list(AREAS),
        "value": rng.integers(50, 150, size=len(AREAS)),
        "percentage": np.round(rng.uniform(10, 40, size=len(AREAS)), 1),
    })
    return _dataset(mode, "pie", frame, category_column="name", value_columns=(("value", "滞在回数"),))


def area_time_ratio(snap: FilterSnapshot, rng: np.random.Generator) -> StatisticalDataset:
    return area_distribution(snap, rng, mode=M.AREA_TIME_RATIO)


# ====== エリアレベル分析 ======
def stay_time_distribution(snap: FilterSnapshot, rng: np.random.Generator) -> StatisticalDataset:
    factor = density_factor(snap.identifier_count)
    frame = pd.DataFrame({
        "range": [r for r, _ in STAY_RANGES],
        "count": [int(math.floor(c * factor)) for _, c in STAY_RANGES],
    })
    return _dataset(M.STAY_TIME_DISTRIBUTION, "bar", frame, category_column="range",
                    value_columns=(("count", "件数"),), colors=("#8884d8",))


def frequency_label(count: int) -> str:
    if count > 20:
        return "高頻度"
    if count > 10:
        return "中頻度"
    return "低頻度"


def area_cross_tabulation(snap: FilterSnapshot, rng: np.random.Generator) -> StatisticalDataset:
    pairs = [(a, b) for a in AREAS for b in AREAS if a != b]
    frame = pd.DataFrame(pairs, columns=["from", "to"])
    frame["count"] = rng.integers(5, 35, size=len(frame))
    frame = frame.sort_values("count", ascending=False, kind="mergesort").head(CROSS_TAB_TOP).reset_index(drop=True)
    frame["trend"] = frame["count"].map(frequency_label)
    return _dataset(M.AREA_CROSS_TABULATION, "table", frame, headers=("移動元", "移動先", "訪問回数", "傾向"),
                    cell_units=(("count", "回"),))


def area_time_heatmap(snap: FilterSnapshot, rng: np.random.Generator) -> StatisticalDataset:
    factor = density_factor(snap.identifier_count)
    rows = []
    for day_index, day in enumerate(WEEKDAYS):
        for hour in range(9, 19):
            intensity = clamp01((math.sin((day_index + hour) * 0.3) * 0.5 + 0.5) * factor)
            rows.append({"day": day, "hour": hour, "intensity": intensity, "value": int(math.floor(intensity * 100))})
    return _dataset(M.AREA_TIME_HEATMAP, "grid", pd.DataFrame(rows))


def area_time_comparison(snap: FilterSnapshot, rng: np.random.Generator) -> StatisticalDataset:
    factor = density_factor(snap.identifier_count)
    samples = max(5, int(round(20 * factor)))
    frame = pd.DataFrame({
        "area": np.repeat(AREAS, samples),
        "minutes": rng.integers(5, 120, size=samples * len(AREAS)),
    })
    return _dataset(M.AREA_TIME_COMPARISON, "box", frame, category_column="area",
                    value_columns=(("minutes", "滞在時間(分)"),))


def floor_movement_analysis(snap: FilterSnapshot, rng: np.random.Generator) -> StatisticalDataset:
    factor = density_factor(snap.identifier_count)
    frame = pd.DataFrame({
        "label": [label for label, _, _ in FLOOR_KPIS],
        "value": [int(math.floor(value * factor)) for _, value, _ in FLOOR_KPIS],
    })
    return _dataset(M.FLOOR_MOVEMENT_ANALYSIS, "kpi", frame, category_column="label",
                    value_columns=(("value", "回数"),), colors=tuple(c for _, _, c in FLOOR_KPIS))


# ====== 時間分析 ======
def activity_intensity(day_index: int, hour: int, identifier_factor: float) -> float:
    """曜日×時間帯の活動度 (0-1)。"""
    base_activity = 0.7 if 9 <= hour <= 18 else 0.2
    weekend_factor = 0.3 if day_index >= 5 else 1.0
    hour_factor = 1.2 if hour in (12, 13) else 1.0
    return clamp01(
        (base_activity + math.sin((day_index + hour) * 0.2) * 0.3) * weekend_factor * hour_factor * identifier_factor
    )


def behavior_trends(snap: FilterSnapshot, rng: np.random.Generator) -> StatisticalDataset:
    factor = trend_factor(snap.identifier_count)
    rows = []
    for day_index, day in enumerate(WEEK):
        for hour in range(24):
            intensity = activity_intensity(day_index, hour, factor)
            rows.append({"day": day, "hour": hour, "intensity": intensity, "value": int(math.floor(intensity * 100))})
    return _dataset(M.BEHAVIOR_TRENDS, "grid", pd.DataFrame(rows))


def hourly_activity(snap: FilterSnapshot, rng: np.random.Generator) -> StatisticalDataset:
    hours = list(range(9, 19))
    frame = pd.DataFrame({
        "time": [f"{h}:00" for h in hours],
        "movements": rng.integers(20, 70, size=len(hours)),
        "stay": rng.integers(30, 90, size=len(hours)),
    })
    return _dataset(M.HOURLY_ACTIVITY, "composed", frame, category_column="time",
                    value_columns=(("movements", "移動回数"), ("stay", "滞在時間")),
                    colors=("#8884d8", "#ff7300"))


def _parse_day(text: str) -> pd.Timestamp:
    # オフセット付きは表記どおりの日付として扱う (tz-naive に揃える)
    ts = pd.to_datetime(text, errors="coerce")
    if pd.isna(ts):
        return pd.NaT
    return ts.tz_localize(None) if ts.tzinfo is not None else ts


def trend_dates(snap: FilterSnapshot) -> pd.DatetimeIndex:
    """データ期間の日付列。解釈できない期間は 2024-01-01 から30日間とする。"""
    start = _parse_day(snap.date_range.start)
    end = _parse_day(snap.date_range.end)
    if pd.isna(start) or pd.isna(end) or end < start:
        days = pd.date_range(FALLBACK_TREND_START, periods=FALLBACK_TREND_DAYS, freq="D")
    else:
        days = pd.date_range(start.normalize(), end.normalize(), freq="D")[:MAX_TREND_DAYS]
    if snap.day_type == "weekday":
        days = days[days.dayofweek < 5]
    elif snap.day_type == "holiday":
        days = days[days.dayofweek >= 5]
    return days


def daily_movement_trend(snap: FilterSnapshot, rng: np.random.Generator) -> StatisticalDataset:
    factor = density_factor(snap.identifier_count)
    days = trend_dates(snap)
    frame = pd.DataFrame({
        "date": [f"{d.month}/{d.day}" for d in days],
        "movements": _scaled(rng, 50, 150, factor, size=len(days)),
    })
    return _dataset(M.DAILY_MOVEMENT_TREND, "line", frame, category_column="date",
                    value_columns=(("movements", "移動回数"),), colors=("#8884d8",),
                    empty_message="指定期間に該当する日がありません")


# ====== 異常分析 ======
def stay_status(minutes: int, abnormal: bool) -> str:
    if abnormal:
        return "要注意"
    if minutes > 90:
        return "集中作業"
    return "正常"


def continuous_stay_detection(snap: FilterSnapshot, rng: np.random.Generator) -> StatisticalDataset:
    ids = snap.selected_identifiers or DEFAULT_PAIR
    rows = []
    for guid in ids:
        for area in AREAS:
            minutes = int(rng.integers(30, 150))
            abnormal = bool(rng.random() > 0.7)
            rows.append({"guid": label_with_alias(guid), "area": area, "minutes": minutes,
                         "status": stay_status(minutes, abnormal)})
    frame = pd.DataFrame(rows, columns=["guid", "area", "minutes", "status"])
    frame = frame.sort_values("minutes", ascending=False, kind="mergesort").reset_index(drop=True)
    return _dataset(M.CONTINUOUS_STAY_DETECTION, "table", frame, headers=("GUID", "エリア", "連続滞在時間", "状態"),
                    cell_units=(("minutes", "分"),))


def anomaly_detection(snap: FilterSnapshot, rng: np.random.Generator) -> StatisticalDataset:
    ids = snap.selected_identifiers or DEFAULT_PAIR
    rows = []
    for guid in ids:
        label = label_with_alias(guid)
        if rng.random() > 0.5:
            rows.append({"severity": "高", "type": "短時間多エリア移動", "timestamp": "14:25",
                         "description": "10分間で5つのエリアを移動", "guid": label})
        if rng.random() > 0.6:
            rows.append({"severity": "中", "type": "長時間同一エリア滞在", "timestamp": "11:00",
                         "description": "オフィスで180分連続滞在", "guid": label})
    frame = pd.DataFrame(rows, columns=["severity", "type", "timestamp", "description", "guid"])
    return _dataset(M.ANOMALY_DETECTION, "table", frame, headers=("重要度", "種別", "時刻", "内容", "GUID"),
                    empty_message="選択期間中に異常行動は検出されませんでした")


Generator = Callable[[FilterSnapshot, np.random.Generator], StatisticalDataset]

GENERATORS: Dict[VisualizationMode, Generator] = {
    M.GUID_TIMELINE: guid_timeline,
    M.GUID_MOVEMENT_STATS: guid_movement_stats,
    M.GUID_AREA_DISTRIBUTION: area_distribution,
    M.STAY_TIME_DISTRIBUTION: stay_time_distribution,
    M.AREA_CROSS_TABULATION: area_cross_tabulation,
    M.AREA_TIME_RATIO: area_time_ratio,
    M.AREA_TIME_HEATMAP: area_time_heatmap,
    M.AREA_TIME_COMPARISON: area_time_comparison,
    M.FLOOR_MOVEMENT_ANALYSIS: floor_movement_analysis,
    M.BEHAVIOR_TRENDS: behavior_trends,
    M.HOURLY_ACTIVITY: hourly_activity,
    M.DAILY_MOVEMENT_TREND: daily_movement_trend,
    M.CONTINUOUS_STAY_DETECTION: continuous_stay_detection,
    M.ANOMALY_DETECTION: anomaly_detection,
}


def placeholder_dataset(mode) -> StatisticalDataset:
    return StatisticalDataset(mode=None, presentation="placeholder", frame=pd.DataFrame(),
                              title=PLACEHOLDER_TITLE, empty_message=f"{getattr(mode, 'value', mode)} は未対応の可視化タイプです")


# ====== 描画 ======
def _prepare(ax: Axes) -> None:
    ax.clear()
    ax.set_axis_on()


def _draw_message(ax: Axes, message: str) -> None:
    ax.axis("off")
    ax.text(0.5, 0.5, message, ha="center", va="center", color="#6b7280", transform=ax.transAxes)


def present_table(ax: Axes, ds: StatisticalDataset) -> None:
    ax.axis("off")
    shown = ds.frame.astype(str)
    for col, unit in ds.cell_units:
        shown[col] = shown[col] + unit
    cells = shown.values.tolist()
    table = ax.table(cellText=cells, colLabels=list(ds.headers) or list(ds.frame.columns),
                     loc="upper center", cellLoc="center")
    table.auto_set_font_size(False)
    table.set_fontsize(7)
    table.scale(1, 1.2)
    for (row, _col), cell in table.get_celld().items():
        if row == 0:
            cell.set_facecolor("#f3f4f6")


def present_bar(ax: Axes, ds: StatisticalDataset) -> None:
    require_columns(ds.frame, [ds.category_column] + [c for c, _ in ds.value_columns])
    x = np.arange(len(ds.frame))
    width = 0.8 / max(1, len(ds.value_columns))
    for k, (col, label) in enumerate(ds.value_columns):
        offset = (k - (len(ds.value_columns) - 1) / 2) * width
        ax.bar(x + offset, ds.frame[col], width, label=label, color=ds.colors[k % len(ds.colors)])
    ax.set_xticks(x)
    rotate = ds.frame[ds.category_column].astype(str).str.len().max() > 8
    ax.set_xticklabels(ds.frame[ds.category_column], rotation=45 if rotate else 0, ha="right" if rotate else "center")
    ax.grid(True, axis="y", linestyle="--", alpha=0.3)
    if len(ds.value_columns) > 1:
        ax.legend()


def present_pie(ax: Axes, ds: StatisticalDataset) -> None:
    require_columns(ds.frame, ["name", "value", "percentage"])
    labels = [f"{n} ({p:.1f}%)" for n, p in zip(ds.frame["name"], ds.frame["percentage"])]
    ax.pie(ds.frame["value"], labels=labels, colors=[COLORS[i % len(COLORS)] for i in range(len(ds.frame))],
           textprops={"fontsize": 7})
    ax.set_aspect("equal")


def present_grid(ax: Axes, ds: StatisticalDataset) -> None:
    require_columns(ds.frame, ["day", "hour", "intensity", "value"])
    days = list(dict.fromkeys(ds.frame["day"]))
    hours = sorted(ds.frame["hour"].unique())
    pivot = ds.frame.pivot(index="day", columns="hour", values="intensity").reindex(index=days, columns=hours)
    index = np.vectorize(intensity_color_index)(pivot.fillna(0.0).to_numpy())
    ax.imshow(index, cmap=ListedColormap(INTENSITY_COLORS), vmin=-0.5, vmax=len(INTENSITY_COLORS) - 0.5, aspect="auto")
    for r, day in enumerate(days):
        for c, hour in enumerate(hours):
            intensity = float(pivot.loc[day, hour])
            ax.text(c, r, str(int(math.floor(intensity * 100))), ha="center", va="center", fontsize=6,
                    color="white" if intensity > 0.5 else "black")
    ax.set_xticks(range(len(hours)))
    ax.set_xticklabels([f"{h}時" for h in hours], fontsize=6)
    ax.set_yticks(range(len(days)))
    ax.set_yticklabels(days)


def present_line(ax: Axes, ds: StatisticalDataset) -> None:
    if ds.is_empty:
        _draw_message(ax, ds.empty_message)
        return
    x = np.arange(len(ds.frame))
    for k, (col, label) in enumerate(ds.value_columns):
        ax.plot(x, ds.frame[col], color=ds.colors[k % len(ds.colors)],
                linewidth=2, marker="o", markersize=3, label=label)
    step = max(1, len(ds.frame) // 15)
    ax.set_xticks(range(0, len(ds.frame), step))
    ax.set_xticklabels(ds.frame[ds.category_column].iloc[::step], rotation=45, ha="right")
    ax.grid(True, linestyle="--", alpha=0.3)


def present_composed(ax: Axes, ds: StatisticalDataset) -> None:
    (bar_col, bar_label), (line_col, line_label) = ds.value_columns[:2]
    require_columns(ds.frame, [ds.category_column, bar_col, line_col])
    x = np.arange(len(ds.frame))
    ax.bar(x, ds.frame[bar_col], color=ds.colors[0], label=bar_label)
    ax.plot(x, ds.frame[line_col], color=ds.colors[1], linewidth=3, label=line_label)
    ax.set_xticks(x)
    ax.set_xticklabels(ds.frame[ds.category_column])
    ax.grid(True, axis="y", linestyle="--", alpha=0.3)
    ax.legend()


def present_box(ax: Axes, ds: StatisticalDataset) -> None:
    (value_col, value_label), = ds.value_columns
    groups = list(dict.fromkeys(ds.frame[ds.category_column]))
    data = [ds.frame.loc[ds.frame[ds.category_column] == g, value_col].to_numpy() for g in groups]
    ax.boxplot(data)
    ax.set_xticks(range(1, len(groups) + 1))
    ax.set_xticklabels(groups, rotation=45, ha="right")
    ax.set_ylabel(value_label)
    ax.grid(True, axis="y", linestyle="--", alpha=0.3)


def present_kpi(ax: Axes, ds: StatisticalDataset) -> None:
    ax.axis("off")
    n = len(ds.frame)
    for k, (label, value) in enumerate(zip(ds.frame["label"], ds.frame["value"])):
        left = k / n + 0.02
        ax.add_patch(Rectangle((left, 0.25), 1 / n - 0.04, 0.5, fill=False, edgecolor="#d1d5db",
                               transform=ax.transAxes))
        center = left + (1 / n - 0.04) / 2
        ax.text(center, 0.55, str(value), ha="center", va="center", fontsize=20, fontweight="bold",
                color=ds.colors[k % len(ds.colors)], transform=ax.transAxes)
        ax.text(center, 0.38, label, ha="center", va="center", fontsize=9, transform=ax.transAxes)


def present_placeholder(ax: Axes, ds: StatisticalDataset) -> None:
    _draw_message(ax, ds.empty_message)


PRESENTERS: Dict[str, Callable[[Axes, StatisticalDataset], None]] = {
    "table": present_table,
    "bar": present_bar,
    "pie": present_pie,
    "grid": present_grid,
    "line": present_line,
    "composed": present_composed,
    "box": present_box,
    "kpi": present_kpi,
    "placeholder": present_placeholder,
}


def present(ax: Axes, ds: StatisticalDataset) -> None:
    """データセットを描画する。データセット自体は変更しない。"""
    _prepare(ax)
    if ds.is_empty and ds.presentation != "placeholder":
        _draw_message(ax, ds.empty_message or "データがありません")
    else:
        PRESENTERS.get(ds.presentation, present_placeholder)(ax, ds)
    ax.set_title(ds.title, fontsize=10)


class StatisticalRenderer:
    """グラフ系14モードのデータ生成と描画。

    Args:
        rng: 乱数生成器。None なら描画ごとに新しい非シード生成器を使う。
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, logger: Optional[logging.Logger] = None) -> None:
        self._rng = rng
        self.logger = logger or logging.getLogger(__name__)

    def dataset(self, mode, snapshot: FilterSnapshot) -> StatisticalDataset:
        rng = self._rng if self._rng is not None else np.random.default_rng()
        try:
            generator = GENERATORS.get(VisualizationMode(mode))
        except ValueError:
            generator = None
        if generator is None:
            return placeholder_dataset(mode)
        return generator(snapshot, rng)

    def render(self, mode, snapshot: FilterSnapshot, ax: Optional[Axes]) -> Optional[StatisticalDataset]:
        if ax is None:
            return None
        ds = self.dataset(mode, snapshot)
        present(ax, ds)
        self.logger.debug("statistical render mode=%s presentation=%s rows=%d",
                          getattr(mode, "value", mode), ds.presentation, len(ds.frame))
        return ds


__all__ = [
    "StatisticalDataset",
    "StatisticalRenderer",
    "GENERATORS",
    "PRESENTERS",
    "density_factor",
    "activity_intensity",
    "present",
]
