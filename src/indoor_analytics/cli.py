"""
indoor-analytics CLI
- フィルタ条件と可視化タイプを指定してPNGを出力する
- --export で JSON 出力、--record でアニメーションマップをMP4化
- 出力先は INDOOR_ANALYTICS_RESULT_ROOT（未設定なら ./indoor_analytics_data/output）
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Sequence

import matplotlib

from indoor_analytics.core.engine import Dashboard, DashboardConfig
from indoor_analytics.core.errors import AnalyticsError
from indoor_analytics.core.filters import DAY_TYPES
from indoor_analytics.core.modes import Family, all_modes, descriptor_of, family_of


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="indoor-analytics", description="屋内測位データ分析ダッシュボード: フィルタ → 可視化PNG / JSON")
    p.add_argument("--building", type=str, default=None, help="建物ID（例: building-a）")
    p.add_argument("--floor", type=str, default=None, help="フロアID（省略時は建物の先頭フロア）")
    p.add_argument("--area", type=str, default=None, help="エリアID（省略時は全エリア）")
    p.add_argument("--guid", action="append", default=[], help="分析対象GUID（複数指定可）")
    p.add_argument("--date-start", type=str, default=None)
    p.add_argument("--date-end", type=str, default=None)
    p.add_argument("--day-type", choices=[k for k, _ in DAY_TYPES], default=None)
    p.add_argument("--time-start", type=str, default=None, help="HH:MM")
    p.add_argument("--time-end", type=str, default=None, help="HH:MM")
    p.add_argument("--stay-min", type=str, default=None, help="最小滞在時間（分）")
    p.add_argument("--stay-max", type=str, default=None, help="最大滞在時間（分）")
    p.add_argument("--mode", type=str, default=None, help="可視化タイプ（--list-modes で一覧）")
    p.add_argument("--family", choices=[f.value for f in Family], default=None, help="系統を指定（先頭モードを選択）")
    p.add_argument("--all-modes", action="store_true", help="全18モードを出力")
    p.add_argument("--list-modes", action="store_true", help="可視化タイプ一覧を表示して終了")
    p.add_argument("--export", action="store_true", help="JSONを出力")
    p.add_argument("--record", action="store_true", help="アニメーションマップをMP4で出力")
    p.add_argument("--fps", type=int, default=10, help="録画FPS")
    p.add_argument("--out-dir", type=str, default=None, help="出力ディレクトリ")
    p.add_argument("--overwrite", action="store_true", help="既存ファイルを上書き")
    p.add_argument("--log-file", action="store_true", help="メタ領域にログファイルを残す")
    return p.parse_args(argv)


def list_modes() -> List[str]:
    lines = []
    for mode in all_modes():
        d = descriptor_of(mode)
        lines.append(f"{d.family.value:5s} {mode.value:28s} {d.label}")
    return lines


def apply_args(dash: Dashboard, args: argparse.Namespace) -> None:
    f = dash.filters
    if args.building:
        f.set_building(args.building)
    if args.floor:
        f.set_floor(args.floor)
    if args.area:
        f.set_area(args.area)
    for guid in args.guid:
        if guid not in f.selected:
            f.toggle_identifier(guid)
    if args.date_start or args.date_end:
        f.set_date_range(args.date_start or f.date_start, args.date_end or f.date_end)
    if args.day_type:
        f.set_day_type(args.day_type)
    if args.time_start or args.time_end:
        f.set_time_range(args.time_start or f.time_start, args.time_end or f.time_end)
    if args.stay_min or args.stay_max:
        f.set_stay_duration(args.stay_min or f.stay_min, args.stay_max or f.stay_max)
    dash.apply_filters()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    if args.list_modes:
        print("\n".join(list_modes()))
        return 0

    matplotlib.use("Agg")
    config = DashboardConfig(out_dir=args.out_dir, overwrite=args.overwrite, log_to_file=args.log_file)
    with Dashboard(config) as dash:
        apply_args(dash, args)

        if args.all_modes:
            targets = list(all_modes())
        elif args.mode:
            if family_of(args.mode) is None:
                dash.logger.error("unknown mode=%s (--list-modes で一覧を確認)", args.mode)
                return 2
            targets = [args.mode]
        elif args.family:
            targets = [dash.switch_family(args.family)]
        else:
            targets = [dash.selection.mode]

        outputs = {}
        try:
            for mode in targets:
                dash.select_mode(mode)
                dash.render()
                outputs[dash.selection.mode.value] = dash.save_png()
            if args.export:
                outputs["export"] = dash.export()
            if args.record:
                outputs["movie"] = dash.record_playback(fps=args.fps)["mp4_path"]
        except AnalyticsError as exc:
            dash.logger.error("%s output failed: %s", exc.code, exc.message)
            return 1
        dash.summary(outputs=len(outputs))
        for key, path in outputs.items():
            print(f"{key}: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
