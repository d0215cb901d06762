import json
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import pytest

from indoor_analytics.core.errors import AnalyticsError
from indoor_analytics.core.export import build_export_document, export_json, unix_millis
from indoor_analytics.core.filters import FilterState, with_identifiers
from indoor_analytics.core.modes import VisualizationMode

NOW = datetime(2024, 3, 1, 12, 30, 15, 250000, tzinfo=timezone.utc)


def test_document_shape(rng):
    state = FilterState()
    state.toggle_identifier("GUID-A1-002")
    snap = state.apply()
    doc = build_export_document(snap, VisualizationMode.CLUSTER, rng=rng, now=NOW)

    assert set(doc) == {"filters", "visualizationType", "exportTime", "totalRecords"}
    assert doc["filters"] == {
        "dateRange": "2024-01-01 to 2024-01-31",
        "dayType": "all",
        "timeRange": "09:00 to 18:00",
        "stayDuration": "5-120分",
        "building": "building-a",
        "floor": "floor-1",
        "area": "all-areas",
        "selectedGuids": ["GUID-A1-002"],
    }
    assert doc["visualizationType"] == "cluster"
    assert doc["exportTime"] == "2024-03-01T12:30:15.250Z"
    assert 1000 <= doc["totalRecords"] < 11000


def test_total_records_range():
    rng = np.random.default_rng(0)
    snap = FilterState().apply()
    values = [build_export_document(snap, "heatmap", rng=rng, now=NOW)["totalRecords"] for _ in range(200)]
    assert min(values) >= 1000 and max(values) < 11000


def test_export_json_writes_file(tmp_path, rng):
    snap = with_identifiers(FilterState().apply(), ["GUID-A1-001"])
    path = export_json(snap, VisualizationMode.ANOMALY_DETECTION, rng=rng, now=NOW)

    assert Path(path).name == f"indoor_analytics_{unix_millis(NOW)}.json"
    assert Path(path).parent == tmp_path / "results" / "exports"
    text = Path(path).read_text(encoding="utf-8")
    assert "5-120分" in text  # ensure_ascii=False
    doc = json.loads(text)
    assert doc["visualizationType"] == "anomaly-detection"
    assert doc["filters"]["selectedGuids"] == ["GUID-A1-001"]


def test_export_json_out_dir(tmp_path, rng):
    out = tmp_path / "custom"
    path = export_json(FilterState().apply(), "heatmap", out_dir=str(out), rng=rng, now=NOW)
    assert Path(path).parent == out


def test_export_json_io_error(tmp_path, rng):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x")
    with pytest.raises(AnalyticsError) as ei:
        export_json(FilterState().apply(), "heatmap", out_dir=str(blocker / "sub"), rng=rng, now=NOW)
    assert ei.value.code in (-2702, -2704)
