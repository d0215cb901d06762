import numpy as np
import pandas as pd
import pytest
from matplotlib.patches import Circle

from indoor_analytics.core import spatial
from indoor_analytics.core.filters import FilterSnapshot, with_identifiers
from indoor_analytics.core.modes import VisualizationMode
from indoor_analytics.core.playback import PlaybackController
from indoor_analytics.core.spatial import (
    SpatialRenderer,
    density_layer,
    generate_points,
    playback_index,
    point_count,
    pulse_radius,
)

GUIDS = [f"GUID-{k:03d}" for k in range(15)]


@pytest.mark.parametrize("n", range(0, 13))
def test_point_count_law(n):
    expected = min(10 * n, 100) if n > 0 else 100
    assert point_count(n) == expected
    assert len(generate_points(GUIDS[:n])) == expected


def test_points_are_deterministic():
    a = generate_points(["GUID-A1-001", "GUID-A1-002"])
    b = generate_points(["GUID-A1-001", "GUID-A1-002"])
    pd.testing.assert_frame_equal(a, b)


def test_point_fields():
    pts = generate_points([])
    assert pts["intensity"].between(0.3, 1.0).all()
    assert set(pts["cluster"]) <= set(range(5))
    assert list(pts["cluster"].iloc[[0, 19, 20, 99]]) == [0, 0, 1, 4]
    assert pts["timestamp"].iloc[0] == pd.Timestamp("2024-01-01T00:00:00Z")
    assert (pts["timestamp"].diff().dropna() == pd.Timedelta(hours=1)).all()
    assert pts["user_id"].iloc[0] == "user-1"
    assert pts["user_id"].iloc[20] == "user-1"
    assert pts["x"].iloc[0] == pytest.approx(50 + 250 + 100)
    assert pts["y"].iloc[0] == pytest.approx(50 + 300)


def test_owner_cycles_selected_identifiers():
    pts = generate_points(["g1", "g2", "g3"])
    assert list(pts["user_id"].iloc[:4]) == ["g1", "g2", "g3", "g1"]


def test_playback_index_and_pulse():
    assert playback_index(0, 30) == 0
    assert playback_index(50, 30) == 15
    assert playback_index(99, 100) == 99
    assert playback_index(100, 30) == 30
    assert pulse_radius(0) == pytest.approx(12)
    radii = [pulse_radius(t) for t in range(200)]
    assert min(radii) >= 8 - 1e-9 and max(radii) <= 16 + 1e-9


def test_density_layer_compositing():
    pts = pd.DataFrame({"x": [100.0, 100.0], "y": [100.0, 100.0], "intensity": [1.0, 1.0]})
    layer = density_layer(pts)
    assert layer.shape == (400, 600, 4)
    assert layer[..., 3].min() >= 0.0 and layer[..., 3].max() <= 1.0
    # 同じ位置に2回描くと中心の不透明度は 1-(1-0.8)^2 に近づく
    assert layer[100, 100, 3] == pytest.approx(1 - (1 - 0.8) ** 2, abs=0.05)
    assert layer[100, 100, 0] == pytest.approx(1.0)
    # 半径外は透明
    assert layer[100, 200, 3] == 0.0


def test_density_layer_far_corner_is_transparent():
    layer = density_layer(generate_points([]))
    assert layer[0, 0, 3] == 0.0
    assert layer[..., 3].max() > 0.5


def test_render_without_surface_is_noop():
    assert SpatialRenderer().render(VisualizationMode.HEATMAP, FilterSnapshot(), None) is None


def test_default_scenario_heatmap(ax):
    points = SpatialRenderer().render(VisualizationMode.HEATMAP, FilterSnapshot(), ax)
    assert len(points) == 100
    assert len(ax.images) == 1
    # 外壁 + 5部屋
    assert len(ax.patches) == 1 + len(spatial.FLOOR_ROOMS)
    assert "表示データ数: 100件" in ax.get_title()
    assert ax.get_ylim() == (400, 0)


def test_three_identifiers_cluster_scenario(ax):
    snap = with_identifiers(FilterSnapshot(), ["GUID-A1-001", "GUID-A1-002", "GUID-A1-003"])
    points = SpatialRenderer().render(VisualizationMode.CLUSTER, snap, ax)
    assert len(points) == 30
    assert set(points["cluster"]) == {0, 1}
    discs = [p for p in ax.patches if isinstance(p, Circle)]
    assert len(discs) == 30


def test_trajectory_marks_start_and_end(ax):
    SpatialRenderer().render(VisualizationMode.TRAJECTORY, FilterSnapshot(), ax)
    assert len(ax.lines) == 1
    assert len(ax.lines[0].get_xdata()) == 100
    discs = [p for p in ax.patches if isinstance(p, Circle)]
    assert len(discs) == 2


def test_playback_draws_up_to_progress(ax):
    playback = PlaybackController()
    playback.progress = 50
    renderer = SpatialRenderer(playback=playback)
    renderer.render(VisualizationMode.ANIMATION, FilterSnapshot(), ax)
    assert len(ax.lines[0].get_xdata()) == 50
    discs = [p for p in ax.patches if isinstance(p, Circle)]
    assert len(discs) == 2  # 現在位置 + パルス
    assert "進行度: 50%" in ax.get_title()


def test_playback_at_start_and_end(ax):
    playback = PlaybackController()
    renderer = SpatialRenderer(playback=playback)
    renderer.render(VisualizationMode.ANIMATION, FilterSnapshot(), ax)
    assert len(ax.lines) == 0
    playback.progress = 100
    renderer.render(VisualizationMode.ANIMATION, FilterSnapshot(), ax)
    assert len(ax.lines[0].get_xdata()) == 100
    assert not [p for p in ax.patches if isinstance(p, Circle)]
