import pytest

from indoor_analytics.core.modes import (
    Family,
    VisualizationMode,
    all_modes,
    descriptor_of,
    family_of,
    first_mode_of,
    mode_counts,
    modes_of,
)


def test_all_modes_order_and_count():
    modes = all_modes()
    assert len(modes) == 18
    assert len(set(modes)) == 18
    assert modes[:4] == (
        VisualizationMode.HEATMAP,
        VisualizationMode.CLUSTER,
        VisualizationMode.TRAJECTORY,
        VisualizationMode.ANIMATION,
    )
    assert modes[4] is VisualizationMode.GUID_TIMELINE
    assert modes[-1] is VisualizationMode.ANOMALY_DETECTION
    assert all_modes() == modes


def test_every_mode_has_exactly_one_family():
    for mode in VisualizationMode:
        fam = family_of(mode)
        assert fam is not None
        assert mode in modes_of(fam)
        other = Family.STATISTICAL if fam is Family.SPATIAL else Family.SPATIAL
        assert mode not in modes_of(other)


def test_mode_counts():
    assert mode_counts() == {Family.SPATIAL: 4, Family.STATISTICAL: 14}


def test_family_of_accepts_strings():
    assert family_of("heatmap") is Family.SPATIAL
    assert family_of("anomaly-detection") is Family.STATISTICAL
    assert family_of("no-such-mode") is None
    assert family_of(None) is None


def test_first_mode_of():
    assert first_mode_of(Family.SPATIAL) is VisualizationMode.HEATMAP
    assert first_mode_of(Family.STATISTICAL) is VisualizationMode.GUID_TIMELINE


def test_descriptor_of_known():
    d = descriptor_of(VisualizationMode.CLUSTER)
    assert d.tag is VisualizationMode.CLUSTER
    assert d.family is Family.SPATIAL
    assert d.label == "クラスターマップ"
    assert descriptor_of("behavior-trends").category == "時間分析"


@pytest.mark.parametrize("family, expected", [
    (Family.SPATIAL, VisualizationMode.HEATMAP),
    (Family.STATISTICAL, VisualizationMode.GUID_TIMELINE),
])
def test_descriptor_of_unknown_falls_back_to_first_mode(family, expected):
    assert descriptor_of("bogus", family).tag is expected


def test_statistical_categories():
    categories = {descriptor_of(m).category for m in modes_of(Family.STATISTICAL)}
    assert categories == {"個人レベル分析", "エリアレベル分析", "時間分析", "異常分析"}
