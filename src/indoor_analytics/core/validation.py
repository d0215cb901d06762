from __future__ import annotations

from typing import Iterable

import pandas as pd

from .errors import AnalyticsError, EC_INPUT_FORMAT


POINT_COLUMNS = ("id", "x", "y", "intensity", "cluster", "timestamp", "user_id")


def require_columns(df: pd.DataFrame, required: Iterable[str]) -> None:
    """描画対象データセットに要求列が揃っているかを確認する。

    Args:
        df: チェック対象DataFrame。
        required: 必須列の反復可能オブジェクト。

    Raises:
        AnalyticsError: DataFrameでない、または列不足の場合。
    """
    if df is None or not isinstance(df, pd.DataFrame):
        raise AnalyticsError(EC_INPUT_FORMAT, "dataset is not a DataFrame")
    missing = set(required) - set(df.columns)
    if missing:
        raise AnalyticsError(EC_INPUT_FORMAT, f"missing required columns: {sorted(missing)}")
