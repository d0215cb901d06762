# エラーコード（ファイル出力系のみ。ドメイン処理は全てフォールバックで完結する）
EC_INPUT_FORMAT = -2102
EC_STORAGE_DST_INVALID = -2701
EC_STORAGE_PERM = -2702
EC_STORAGE_IO = -2704


class AnalyticsError(Exception):
    """エラーコード付き例外。"""

    def __init__(self, code: int, message: str):
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


__all__ = [
    "AnalyticsError",
    "EC_INPUT_FORMAT",
    "EC_STORAGE_DST_INVALID",
    "EC_STORAGE_PERM",
    "EC_STORAGE_IO",
]
