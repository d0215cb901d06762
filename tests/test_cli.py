import json
from pathlib import Path

from indoor_analytics import cli


def test_list_modes(capsys):
    assert cli.main(["--list-modes"]) == 0
    out = capsys.readouterr().out.strip().splitlines()
    assert len(out) == 18
    assert out[0].split()[1] == "heatmap"


def test_parse_args_repeated_guid():
    args = cli.parse_args(["--guid", "GUID-A1-001", "--guid", "GUID-A1-002", "--mode", "cluster"])
    assert args.guid == ["GUID-A1-001", "GUID-A1-002"]
    assert args.mode == "cluster"


def test_default_run_writes_png(tmp_path, capsys):
    assert cli.main([]) == 0
    pngs = list((tmp_path / "results" / "images").glob("viz_*-heatmap-*.png"))
    assert len(pngs) == 1


def test_mode_guid_and_export(tmp_path, capsys):
    out_dir = tmp_path / "out"
    rc = cli.main([
        "--building", "building-b", "--floor", "floor-2",
        "--guid", "GUID-B2-001", "--guid", "GUID-B2-001",
        "--day-type", "weekday", "--stay-min", "10",
        "--mode", "guid-timeline", "--export", "--out-dir", str(out_dir),
    ])
    assert rc == 0
    assert len(list(out_dir.glob("viz_building-b-floor-2-guid-timeline-*.png"))) == 1
    exports = list(out_dir.glob("indoor_analytics_*.json"))
    assert len(exports) == 1
    doc = json.loads(exports[0].read_text(encoding="utf-8"))
    assert doc["filters"]["selectedGuids"] == ["GUID-B2-001"]
    assert doc["filters"]["dayType"] == "weekday"
    assert doc["filters"]["stayDuration"] == "10-120分"


def test_family_selects_first_mode(tmp_path):
    out_dir = tmp_path / "fam"
    assert cli.main(["--family", "graph", "--out-dir", str(out_dir)]) == 0
    assert len(list(out_dir.glob("*-guid-timeline-*.png"))) == 1


def test_all_modes(tmp_path):
    out_dir = tmp_path / "all"
    assert cli.main(["--all-modes", "--out-dir", str(out_dir)]) == 0
    assert len(list(out_dir.glob("viz_*.png"))) == 18


def test_unknown_mode_fails(tmp_path):
    assert cli.main(["--mode", "bogus"]) == 2
    assert not (tmp_path / "results" / "images").exists()


def test_family_goes_through_dashboard(tmp_path, monkeypatch):
    calls = []
    original = cli.Dashboard.switch_family

    def _switch(self, family):
        calls.append(family)
        return original(self, family)

    monkeypatch.setattr(cli.Dashboard, "switch_family", _switch)
    assert cli.main(["--family", "map", "--out-dir", str(tmp_path / "map")]) == 0
    assert calls == ["map"]
    assert len(list((tmp_path / "map").glob("*-heatmap-*.png"))) == 1
