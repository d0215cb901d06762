"""適用済みフィルタと可視化タイプを JSON に書き出すモック出力。"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

import numpy as np

from . import naming
from .errors import AnalyticsError, EC_STORAGE_IO, EC_STORAGE_PERM
from .filters import FilterSnapshot


def _iso_utc(now: datetime) -> str:
    # 2024-01-01T00:00:00.000Z 形式
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def unix_millis(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def build_export_document(
    snapshot: FilterSnapshot,
    mode,
    rng: Optional[np.random.Generator] = None,
    now: Optional[datetime] = None,
) -> Dict[str, object]:
    """出力用ドキュメントを組み立てる。

    Args:
        snapshot: 適用済みフィルタ。
        mode: 可視化タイプ (enum または文字列)。
        rng: totalRecords 用の乱数生成器。
        now: 出力時刻。未指定なら現在時刻 (UTC)。

    Returns:
        JSON 直列化可能な辞書。`totalRecords` は 1000 以上 11000 未満の乱数。
    """
    rng = rng if rng is not None else np.random.default_rng()
    now = now or datetime.now(timezone.utc)
    return {
        "filters": {
            "dateRange": f"{snapshot.date_range.start} to {snapshot.date_range.end}",
            "dayType": snapshot.day_type,
            "timeRange": f"{snapshot.time_range.start} to {snapshot.time_range.end}",
            "stayDuration": f"{snapshot.stay_duration.min}-{snapshot.stay_duration.max}分",
            "building": snapshot.building_id,
            "floor": snapshot.floor_id,
            "area": snapshot.area_id,
            "selectedGuids": list(snapshot.selected_identifiers),
        },
        "visualizationType": getattr(mode, "value", mode),
        "exportTime": _iso_utc(now),
        "totalRecords": int(rng.integers(1000, 11000)),
    }


def export_json(
    snapshot: FilterSnapshot,
    mode,
    out_dir: Optional[str] = None,
    rng: Optional[np.random.Generator] = None,
    now: Optional[datetime] = None,
    logger: Optional[logging.Logger] = None,
) -> str:
    """`indoor_analytics_<unixMillis>.json` を書き出しパスを返す。

    Raises:
        AnalyticsError: 書込権限不足・I/O失敗の場合。
    """
    logger = logger or logging.getLogger(__name__)
    now = now or datetime.now(timezone.utc)
    doc = build_export_document(snapshot, mode, rng=rng, now=now)
    try:
        path = Path(naming.result_path("export", str(unix_millis(now)), out_dir))
        path.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
    except PermissionError as e:
        logger.error(f"EC={EC_STORAGE_PERM} perm err={e}")
        raise AnalyticsError(EC_STORAGE_PERM, "書込権限不足") from e
    except OSError as e:
        logger.error(f"EC={EC_STORAGE_IO} io err={e}")
        raise AnalyticsError(EC_STORAGE_IO, f"failed to export: {e}") from e
    logger.info("データをダウンロードしました: %d件のレコード path=%s", doc["totalRecords"], path)
    return str(path)
