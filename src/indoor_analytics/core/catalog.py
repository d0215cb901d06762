"""建物・フロア・エリア・GUID の静的参照データと検索関数。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

ALL_AREAS = "all-areas"
ALL_AREAS_LABEL = "全エリア"


@dataclass(frozen=True)
class Floor:
    id: str
    display_name: str
    areas: Mapping[str, str]
    identifiers: Tuple[str, ...]


@dataclass(frozen=True)
class Building:
    id: str
    display_name: str
    floors: Mapping[str, Floor]


@dataclass(frozen=True)
class IdentifierAlias:
    identifier_id: str
    alias_name: str
    building_id: str
    floor_id: str


def _floor(floor_id: str, name: str, areas: Dict[str, str], identifiers: List[str]) -> Floor:
    return Floor(id=floor_id, display_name=name, areas=dict(areas), identifiers=tuple(identifiers))


BUILDINGS: Dict[str, Building] = {
    "building-a": Building(
        id="building-a",
        display_name="ビルディングA",
        floors={
            "floor-1": _floor(
                "floor-1", "1階",
                {"area-entrance": "エントランス", "area-lobby": "ロビー", "area-elevator": "エレベーターホール"},
                ["GUID-A1-001", "GUID-A1-002", "GUID-A1-003", "GUID-A1-004"],
            ),
            "floor-2": _floor(
                "floor-2", "2階",
                {"area-office": "オフィス", "area-meeting": "会議室", "area-break": "休憩室"},
                ["GUID-A2-001", "GUID-A2-002", "GUID-A2-003", "GUID-A2-004", "GUID-A2-005"],
            ),
            "floor-3": _floor(
                "floor-3", "3階",
                {"area-dev": "開発室", "area-server": "サーバー室", "area-storage": "倉庫"},
                ["GUID-A3-001", "GUID-A3-002", "GUID-A3-003"],
            ),
        },
    ),
    "building-b": Building(
        id="building-b",
        display_name="ビルディングB",
        floors={
            "floor-1": _floor(
                "floor-1", "1階",
                {"area-cafe": "カフェ", "area-shop": "ショップ", "area-entrance-b": "エントランス"},
                ["GUID-B1-001", "GUID-B1-002", "GUID-B1-003"],
            ),
            "floor-2": _floor(
                "floor-2", "2階",
                {"area-restaurant": "レストラン", "area-kitchen": "キッチン"},
                ["GUID-B2-001", "GUID-B2-002", "GUID-B2-003", "GUID-B2-004"],
            ),
        },
    ),
    "building-c": Building(
        id="building-c",
        display_name="ビルディングC",
        floors={
            "floor-1": _floor(
                "floor-1", "1階",
                {"area-gym": "ジム", "area-pool": "プール", "area-locker": "ロッカールーム"},
                ["GUID-C1-001", "GUID-C1-002", "GUID-C1-003", "GUID-C1-004"],
            ),
        },
    ),
}

IDENTIFIER_ALIASES: Tuple[IdentifierAlias, ...] = tuple(
    IdentifierAlias(guid, alias, building, floor)
    for guid, alias, building, floor in [
        # Building A - Floor 1
        ("GUID-A1-001", "受付スタッフ", "building-a", "floor-1"),
        ("GUID-A1-002", "警備員", "building-a", "floor-1"),
        ("GUID-A1-003", "清掃員", "building-a", "floor-1"),
        ("GUID-A1-004", "来訪者A", "building-a", "floor-1"),
        # Building A - Floor 2
        ("GUID-A2-001", "営業部長", "building-a", "floor-2"),
        ("GUID-A2-002", "営業担当A", "building-a", "floor-2"),
        ("GUID-A2-003", "営業担当B", "building-a", "floor-2"),
        ("GUID-A2-004", "マネージャー", "building-a", "floor-2"),
        ("GUID-A2-005", "アシスタント", "building-a", "floor-2"),
        # Building A - Floor 3
        ("GUID-A3-001", "開発リーダー", "building-a", "floor-3"),
        ("GUID-A3-002", "エンジニアA", "building-a", "floor-3"),
        ("GUID-A3-003", "エンジニアB", "building-a", "floor-3"),
        # Building B - Floor 1
        ("GUID-B1-001", "店長", "building-b", "floor-1"),
        ("GUID-B1-002", "スタッフA", "building-b", "floor-1"),
        ("GUID-B1-003", "スタッフB", "building-b", "floor-1"),
        # Building B - Floor 2
        ("GUID-B2-001", "シェフ", "building-b", "floor-2"),
        ("GUID-B2-002", "コック", "building-b", "floor-2"),
        ("GUID-B2-003", "ウェイター", "building-b", "floor-2"),
        ("GUID-B2-004", "店員", "building-b", "floor-2"),
        # Building C - Floor 1
        ("GUID-C1-001", "トレーナーA", "building-c", "floor-1"),
        ("GUID-C1-002", "トレーナーB", "building-c", "floor-1"),
        ("GUID-C1-003", "スタッフ", "building-c", "floor-1"),
        ("GUID-C1-004", "利用者", "building-c", "floor-1"),
    ]
)

_ALIAS_BY_ID: Dict[str, str] = {m.identifier_id: m.alias_name for m in IDENTIFIER_ALIASES}


def alias_of(identifier: str) -> str:
    """GUID に対応するエイリアスを返す。未登録なら GUID そのものを返す。"""
    return _ALIAS_BY_ID.get(identifier, identifier)


def label_with_alias(identifier: str) -> str:
    return f"{identifier} ({alias_of(identifier)})"


def identifiers_for(building: str, floor: str) -> List[str]:
    """エイリアス表から建物・フロアに属する GUID を登録順で返す。"""
    return [m.identifier_id for m in IDENTIFIER_ALIASES if m.building_id == building and m.floor_id == floor]


def building_options() -> List[Tuple[str, str]]:
    return [(b.id, b.display_name) for b in BUILDINGS.values()]


def floors_of(building: str) -> List[Tuple[str, str]]:
    b = BUILDINGS.get(building)
    if b is None:
        return []
    return [(f.id, f.display_name) for f in b.floors.values()]


def first_floor_of(building: str) -> Optional[str]:
    floors = floors_of(building)
    return floors[0][0] if floors else None


def _lookup_floor(building: str, floor: str) -> Optional[Floor]:
    b = BUILDINGS.get(building)
    if b is None:
        return None
    return b.floors.get(floor)


def areas_of(building: str, floor: str) -> List[Tuple[str, str]]:
    f = _lookup_floor(building, floor)
    return list(f.areas.items()) if f is not None else []


def area_options(building: str, floor: str) -> List[Tuple[str, str]]:
    """エリア選択肢。先頭は常に全エリア。"""
    return [(ALL_AREAS, ALL_AREAS_LABEL)] + areas_of(building, floor)


def floor_identifiers(building: str, floor: str) -> List[str]:
    f = _lookup_floor(building, floor)
    return list(f.identifiers) if f is not None else []


def area_name(building: str, floor: str, area: str) -> str:
    if area == ALL_AREAS:
        return ALL_AREAS_LABEL
    f = _lookup_floor(building, floor)
    if f is None:
        return area
    return f.areas.get(area, area)
