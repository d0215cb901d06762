import pytest

from indoor_analytics.core import catalog
from indoor_analytics.core.catalog import ALL_AREAS


def test_alias_of_known_and_unknown():
    assert catalog.alias_of("GUID-A1-001") == "受付スタッフ"
    assert catalog.alias_of("GUID-C1-004") == "利用者"
    # 未登録は入力そのまま
    assert catalog.alias_of("GUID-Z9-999") == "GUID-Z9-999"
    assert catalog.alias_of("") == ""


@pytest.mark.parametrize("identifier", ["x", "GUID-A1-001 ", "ｸﾞｲﾄﾞ", "GUID-a1-001"])
def test_alias_of_never_empty_for_non_empty(identifier):
    assert catalog.alias_of(identifier)


def test_alias_table_size():
    assert len(catalog.IDENTIFIER_ALIASES) == 23


def test_identifiers_for_catalog_order():
    assert catalog.identifiers_for("building-a", "floor-1") == [
        "GUID-A1-001", "GUID-A1-002", "GUID-A1-003", "GUID-A1-004",
    ]
    assert catalog.identifiers_for("building-b", "floor-2") == [
        "GUID-B2-001", "GUID-B2-002", "GUID-B2-003", "GUID-B2-004",
    ]
    assert catalog.identifiers_for("building-x", "floor-1") == []


def test_derived_options_for_unknown_ids_are_empty():
    assert catalog.floors_of("building-x") == []
    assert catalog.first_floor_of("building-x") is None
    assert catalog.areas_of("building-a", "floor-9") == []
    assert catalog.floor_identifiers("building-x", "floor-1") == []
    # 全エリアだけは常に選べる
    assert catalog.area_options("building-x", "floor-1") == [(ALL_AREAS, catalog.ALL_AREAS_LABEL)]


def test_floors_and_first_floor():
    assert [f for f, _ in catalog.floors_of("building-a")] == ["floor-1", "floor-2", "floor-3"]
    assert [f for f, _ in catalog.floors_of("building-b")] == ["floor-1", "floor-2"]
    assert catalog.first_floor_of("building-c") == "floor-1"


def test_area_options_and_names():
    options = catalog.area_options("building-a", "floor-2")
    assert options[0][0] == ALL_AREAS
    assert ("area-meeting", "会議室") in options
    assert catalog.area_name("building-a", "floor-2", "area-meeting") == "会議室"
    assert catalog.area_name("building-a", "floor-2", ALL_AREAS) == "全エリア"
    assert catalog.area_name("building-a", "floor-2", "area-unknown") == "area-unknown"


def test_label_with_alias():
    assert catalog.label_with_alias("GUID-A2-001") == "GUID-A2-001 (営業部長)"
    assert catalog.label_with_alias("foo") == "foo (foo)"
