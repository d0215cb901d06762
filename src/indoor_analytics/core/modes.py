"""可視化タイプの一覧と系統（マップ系 / グラフ系）の分類表。"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union


class Family(str, Enum):
    SPATIAL = "map"
    STATISTICAL = "graph"


class VisualizationMode(str, Enum):
    # マップ系
    HEATMAP = "heatmap"
    CLUSTER = "cluster"
    TRAJECTORY = "trajectory"
    ANIMATION = "animation"
    # 個人レベル分析
    GUID_TIMELINE = "guid-timeline"
    GUID_MOVEMENT_STATS = "guid-movement-stats"
    GUID_AREA_DISTRIBUTION = "guid-area-distribution"
    # エリアレベル分析
    STAY_TIME_DISTRIBUTION = "stay-time-distribution"
    AREA_CROSS_TABULATION = "area-cross-tabulation"
    AREA_TIME_RATIO = "area-time-ratio"
    AREA_TIME_HEATMAP = "area-time-heatmap"
    AREA_TIME_COMPARISON = "area-time-comparison"
    FLOOR_MOVEMENT_ANALYSIS = "floor-movement-analysis"
    # 時間分析
    BEHAVIOR_TRENDS = "behavior-trends"
    HOURLY_ACTIVITY = "hourly-activity"
    DAILY_MOVEMENT_TREND = "daily-movement-trend"
    # 異常分析
    CONTINUOUS_STAY_DETECTION = "continuous-stay-detection"
    ANOMALY_DETECTION = "anomaly-detection"


@dataclass(frozen=True)
class ModeDescriptor:
    tag: VisualizationMode
    family: Family
    label: str
    description: str
    category: str = ""


M = VisualizationMode

# 系統の分類はこの表だけで決まる（モード追加は1行）
_MODE_TABLE: Dict[Family, Tuple[Tuple[VisualizationMode, str, str, str], ...]] = {
    Family.SPATIAL: (
        (M.HEATMAP, "ヒートマップ", "人の密度を色の濃淡で表現", ""),
        (M.CLUSTER, "クラスターマップ", "人の集合パターンを可視化", ""),
        (M.TRAJECTORY, "トラジェクトリーマップ", "移動経路を線で表示", ""),
        (M.ANIMATION, "アニメーションマップ", "時系列での移動をアニメーション表示", ""),
    ),
    Family.STATISTICAL: (
        (M.GUID_TIMELINE, "GUIDタイムライン",
         "GUIDごとのエリア滞在タイムライン（例：9:00～10:00 エリアA）", "個人レベル分析"),
        (M.GUID_MOVEMENT_STATS, "GUID移動統計", "GUIDごとの移動回数と滞在時間の棒グラフ", "個人レベル分析"),
        (M.GUID_AREA_DISTRIBUTION, "GUIDエリア分布", "GUIDごとの滞在エリア分布円グラフ", "個人レベル分析"),
        (M.STAY_TIME_DISTRIBUTION, "滞在時間分布", "滞在時間の分布を箱ひげ図で表示", "エリアレベル分析"),
        (M.AREA_CROSS_TABULATION, "エリア間移動集計",
         "エリア間の訪問頻度クロス集計（例：看護室→薬剤エリア）", "エリアレベル分析"),
        (M.AREA_TIME_RATIO, "エリア滞在割合", "エリア別滞在時間の割合を円グラフで表示", "エリアレベル分析"),
        (M.AREA_TIME_HEATMAP, "エリア滞在ヒートマップ", "エリア別滞在時間をヒートマップで可視化", "エリアレベル分析"),
        (M.AREA_TIME_COMPARISON, "エリア滞在比較",
         "エリア別滞在時間の分布とばらつきを箱ひげ図で比較", "エリアレベル分析"),
        (M.FLOOR_MOVEMENT_ANALYSIS, "フロア間移動分析",
         "フロア間移動回数分析による垂直移動負荷の把握", "エリアレベル分析"),
        (M.BEHAVIOR_TRENDS, "行動傾向分析", "曜日・時間帯別の行動傾向をヒートマップで表示", "時間分析"),
        (M.HOURLY_ACTIVITY, "時間帯別活動", "時間帯別の移動回数・滞在時間で混雑度を把握", "時間分析"),
        (M.DAILY_MOVEMENT_TREND, "日別移動推移", "日時別移動回数の推移を折れ線グラフで表示", "時間分析"),
        (M.CONTINUOUS_STAY_DETECTION, "連続滞在検出",
         "同一エリア連続滞在の検出による業務集中度分析", "異常分析"),
        (M.ANOMALY_DETECTION, "異常行動検出",
         "通常と異なる移動パターンの検出（短時間多エリア移動等）", "異常分析"),
    ),
}

_DESCRIPTORS: Dict[VisualizationMode, ModeDescriptor] = {
    tag: ModeDescriptor(tag=tag, family=family, label=label, description=desc, category=cat)
    for family, rows in _MODE_TABLE.items()
    for tag, label, desc, cat in rows
}

FAMILY_LABELS = {Family.SPATIAL: "マップ系", Family.STATISTICAL: "グラフ系"}


def _coerce(tag: Union[VisualizationMode, str, None]) -> Optional[VisualizationMode]:
    if isinstance(tag, VisualizationMode):
        return tag
    try:
        return VisualizationMode(tag)
    except ValueError:
        return None


def all_modes() -> Tuple[VisualizationMode, ...]:
    """メニュー表示順の全モード（マップ系 → グラフ系）。"""
    return tuple(tag for rows in _MODE_TABLE.values() for tag, *_ in rows)


def modes_of(family: Family) -> Tuple[VisualizationMode, ...]:
    return tuple(tag for tag, *_ in _MODE_TABLE.get(Family(family), ()))


def family_of(tag: Union[VisualizationMode, str, None]) -> Optional[Family]:
    mode = _coerce(tag)
    for family, rows in _MODE_TABLE.items():
        if any(mode is row[0] for row in rows):
            return family
    return None


def first_mode_of(family: Family) -> VisualizationMode:
    return modes_of(family)[0]


def descriptor_of(
    tag: Union[VisualizationMode, str, None],
    family: Family = Family.SPATIAL,
) -> ModeDescriptor:
    """モードの説明を返す。未知のタグなら指定系統の先頭モードの説明を返す。"""
    mode = _coerce(tag)
    if mode is not None:
        return _DESCRIPTORS[mode]
    return _DESCRIPTORS[first_mode_of(family)]


def mode_counts() -> Dict[Family, int]:
    return {family: len(rows) for family, rows in _MODE_TABLE.items()}
