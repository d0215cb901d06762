import json
import logging
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd
import pytest

from indoor_analytics.core.engine import Dashboard, DashboardConfig, RenderConfig
from indoor_analytics.core.errors import AnalyticsError
from indoor_analytics.core.modes import Family, VisualizationMode
from indoor_analytics.core.statistical import StatisticalDataset


@pytest.fixture
def dash(rng):
    d = Dashboard(DashboardConfig(run_id="test"), rng=rng)
    yield d
    d.close()


def test_render_config_size():
    cfg = RenderConfig()
    assert cfg.size_inches == (6.0, 4.0)


def test_default_heatmap_scenario(dash):
    points = dash.render()
    assert isinstance(points, pd.DataFrame)
    assert len(points) == 100
    assert dash.fig._suptitle.get_text() == "計算対象: 全ユーザー"


def test_edits_are_invisible_until_applied(dash):
    dash.filters.toggle_identifier("GUID-A1-001")
    assert len(dash.render()) == 100
    snap = dash.apply_filters()
    assert dash.applied is snap
    assert len(dash.render()) == 10


def test_apply_logs(dash, caplog):
    dash.filters.toggle_identifier("GUID-A1-001")
    with caplog.at_level(logging.INFO, logger=dash.logger.name):
        dash.apply_filters()
    assert "フィルタが適用されました" in caplog.text


def test_cluster_scenario_with_three_identifiers(dash):
    for g in ("GUID-A1-001", "GUID-A1-002", "GUID-A1-003"):
        dash.filters.toggle_identifier(g)
    dash.apply_filters()
    dash.select_mode(VisualizationMode.CLUSTER)
    points = dash.render()
    assert len(points) == 30
    assert set(points["cluster"]) == {0, 1}


def test_switch_family_renders_statistical(dash):
    assert dash.switch_family(Family.STATISTICAL) is VisualizationMode.GUID_TIMELINE
    ds = dash.render()
    assert isinstance(ds, StatisticalDataset)


def test_external_axes(dash):
    fig, ax = plt.subplots()
    try:
        dash.render(ax)
        assert dash.ax is ax
    finally:
        plt.close(fig)


def test_playback_redraws_on_progress(dash, fake_timers):
    dash.select_mode(VisualizationMode.ANIMATION)
    dash.render()
    dash.playback._timer_factory = fake_timers
    dash.playback.start()
    for _ in range(10):
        fake_timers.created[0].fire()
    assert dash.playback.progress == 10
    assert "進行度: 10%" in dash.ax.get_title()
    assert len(dash.ax.lines[0].get_xdata()) == 10


def test_leaving_animation_tears_down_timer(dash, fake_timers):
    dash.select_mode(VisualizationMode.ANIMATION)
    dash.render()
    dash.playback._timer_factory = fake_timers
    dash.playback.start()
    fake_timers.created[0].fire()
    dash.select_mode(VisualizationMode.TRAJECTORY)
    assert not dash.playback.running
    assert dash.playback.progress == 0
    assert fake_timers.created[0].stopped


def test_save_png(dash, tmp_path):
    path = dash.save_png()
    assert Path(path).is_file()
    assert Path(path).parent == tmp_path / "results" / "images"
    assert Path(path).name.startswith("viz_building-a-floor-1-heatmap-")


def test_save_png_refuses_overwrite(dash, tmp_path):
    target = tmp_path / "fixed.png"
    dash.save_png(str(target))
    with pytest.raises(AnalyticsError) as ei:
        dash.save_png(str(target))
    assert ei.value.code == -2701


def test_save_png_overwrite_allowed(tmp_path, rng):
    with Dashboard(DashboardConfig(overwrite=True, run_id="ow"), rng=rng) as d:
        target = tmp_path / "fixed.png"
        d.save_png(str(target))
        assert d.save_png(str(target)) == str(target)


def test_export(dash, tmp_path):
    dash.select_mode("hourly-activity")
    path = dash.export()
    doc = json.loads(Path(path).read_text(encoding="utf-8"))
    assert doc["visualizationType"] == "hourly-activity"


def test_log_file(tmp_path, rng):
    with Dashboard(DashboardConfig(run_id="filelog", log_to_file=True), rng=rng) as d:
        d.apply_filters()
        d.summary()
    log_path = tmp_path / "meta" / "logs" / "run_filelog.log"
    assert log_path.is_file()
    assert "summary" in log_path.read_text(encoding="utf-8")


def test_close_releases_figure(rng):
    d = Dashboard(DashboardConfig(run_id="close"), rng=rng)
    d.render()
    fig = d.fig
    d.close()
    assert d.fig is None
    assert not plt.fignum_exists(fig.number)


def test_close_keeps_caller_figure(rng):
    fig, ax = plt.subplots()
    try:
        d = Dashboard(DashboardConfig(run_id="external"), rng=rng)
        d.render(ax)
        d.close()
        assert plt.fignum_exists(fig.number)
        assert d.fig is None
    finally:
        plt.close(fig)


def test_switching_to_caller_axes_releases_own_figure(rng):
    fig, ax = plt.subplots()
    try:
        with Dashboard(DashboardConfig(run_id="handover"), rng=rng) as d:
            d.render()
            own = d.fig
            d.render(ax)
            assert not plt.fignum_exists(own.number)
            assert d.fig is fig
        assert plt.fignum_exists(fig.number)
    finally:
        plt.close(fig)
