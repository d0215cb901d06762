"""フィルタ編集状態と適用済みスナップショット。"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, List, Tuple

from . import catalog
from .catalog import ALL_AREAS

DAY_TYPES: Tuple[Tuple[str, str], ...] = (
    ("all", "期間全体"),
    ("weekday", "平日"),
    ("holiday", "祝休日"),
)


@dataclass(frozen=True)
class DateRange:
    start: str
    end: str


@dataclass(frozen=True)
class TimeRange:
    start: str
    end: str


@dataclass(frozen=True)
class StayDuration:
    min: str
    max: str


@dataclass(frozen=True)
class FilterSnapshot:
    """可視化に渡される確定済みフィルタ。

    Args:
        building_id: 建物ID。
        floor_id: フロアID。
        area_id: エリアID (`all-areas` は全エリア)。
        selected_identifiers: 選択GUID。空タプルは「全GUID」を意味する。
        date_range: データ期間。検証はしない。
        day_type: `all` / `weekday` / `holiday`。
        time_range: 時間帯 (HH:MM)。
        stay_duration: 滞在時間の下限・上限 (分, 文字列のまま)。
    """

    building_id: str = "building-a"
    floor_id: str = "floor-1"
    area_id: str = ALL_AREAS
    selected_identifiers: Tuple[str, ...] = ()
    date_range: DateRange = field(default_factory=lambda: DateRange("2024-01-01", "2024-01-31"))
    day_type: str = "all"
    time_range: TimeRange = field(default_factory=lambda: TimeRange("09:00", "18:00"))
    stay_duration: StayDuration = field(default_factory=lambda: StayDuration("5", "120"))

    @property
    def identifier_count(self) -> int:
        return len(self.selected_identifiers)


DEFAULT_FILTERS = FilterSnapshot()

FilterListener = Callable[[FilterSnapshot], None]


class FilterState:
    """編集中のフィルタを保持し、apply() で不変スナップショットを発行する。

    建物変更時はフロアを先頭フロアへ、エリア・GUID選択を初期値へ戻す。
    フロア変更時はエリア・GUID選択のみ戻す。
    """

    def __init__(self) -> None:
        self._listeners: List[FilterListener] = []
        self._load(DEFAULT_FILTERS)

    def _load(self, snap: FilterSnapshot) -> None:
        self.building = snap.building_id
        self.floor = snap.floor_id
        self.area = snap.area_id
        self.selected: List[str] = list(snap.selected_identifiers)
        self.date_start, self.date_end = snap.date_range.start, snap.date_range.end
        self.day_type = snap.day_type
        self.time_start, self.time_end = snap.time_range.start, snap.time_range.end
        self.stay_min, self.stay_max = snap.stay_duration.min, snap.stay_duration.max

    # --- 参照 ---
    def current_edits(self) -> FilterSnapshot:
        """編集中の値をスナップショット形式で返す（内部状態とは独立したコピー）。"""
        return FilterSnapshot(
            building_id=self.building,
            floor_id=self.floor,
            area_id=self.area,
            selected_identifiers=tuple(self.selected),
            date_range=DateRange(self.date_start, self.date_end),
            day_type=self.day_type,
            time_range=TimeRange(self.time_start, self.time_end),
            stay_duration=StayDuration(self.stay_min, self.stay_max),
        )

    def available_floors(self) -> List[Tuple[str, str]]:
        return catalog.floors_of(self.building)

    def available_areas(self) -> List[Tuple[str, str]]:
        return catalog.areas_of(self.building, self.floor)

    def available_identifiers(self) -> List[str]:
        return catalog.floor_identifiers(self.building, self.floor)

    # --- 属性条件 ---
    def set_building(self, building: str) -> None:
        self.building = building
        # 建物に存在しないフロアを残さない
        self.floor = catalog.first_floor_of(building) or ""
        self._reset_area_and_identifiers()

    def set_floor(self, floor: str) -> None:
        self.floor = floor
        self._reset_area_and_identifiers()

    def set_area(self, area: str) -> None:
        self.area = area

    def _reset_area_and_identifiers(self) -> None:
        self.area = ALL_AREAS
        self.selected = []

    def toggle_identifier(self, identifier: str) -> None:
        if identifier in self.selected:
            self.selected.remove(identifier)
        else:
            self.selected.append(identifier)

    def remove_identifier(self, identifier: str) -> None:
        self.selected = [g for g in self.selected if g != identifier]

    # --- 期間・時間 ---
    def set_date_range(self, start: str, end: str) -> None:
        self.date_start, self.date_end = start, end

    def set_day_type(self, day_type: str) -> None:
        self.day_type = day_type

    def set_time_range(self, start: str, end: str) -> None:
        self.time_start, self.time_end = start, end

    def set_stay_duration(self, min_minutes: str, max_minutes: str) -> None:
        self.stay_min, self.stay_max = min_minutes, max_minutes

    # --- 適用・リセット ---
    def subscribe(self, listener: FilterListener) -> None:
        self._listeners.append(listener)

    def apply(self) -> FilterSnapshot:
        snap = self.current_edits()
        for listener in list(self._listeners):
            listener(snap)
        return snap

    def reset(self) -> None:
        self._load(DEFAULT_FILTERS)


def with_identifiers(snap: FilterSnapshot, identifiers) -> FilterSnapshot:
    """GUID選択だけ差し替えたスナップショット（重複は先勝ちで除去）。"""
    return replace(snap, selected_identifiers=tuple(dict.fromkeys(identifiers)))


def describe_targets(snap: FilterSnapshot) -> str:
    """計算対象の見出し文字列。"""
    if not snap.selected_identifiers:
        return "計算対象: 全ユーザー"
    labels = ", ".join(catalog.label_with_alias(g) for g in snap.selected_identifiers)
    return f"計算対象 ({snap.identifier_count}件): {labels}"
