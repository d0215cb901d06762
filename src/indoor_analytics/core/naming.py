import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

# ルートは環境変数で差し替え可
DEFAULT_RESULT_ROOT = str((Path.cwd() / "indoor_analytics_data/output").resolve())
RESULT_ROOT = os.getenv("INDOOR_ANALYTICS_RESULT_ROOT") or DEFAULT_RESULT_ROOT
META_ROOT = os.getenv("INDOOR_ANALYTICS_META_ROOT") or str(Path(RESULT_ROOT) / "meta")

TZ_JST = ZoneInfo("Asia/Tokyo")


def now_jst() -> str:
    return datetime.now(TZ_JST).strftime("%Y%m%d_%H%M%S")


def result_root() -> Path:
    """
    出力ルートを返す。
    優先: INDOOR_ANALYTICS_RESULT_ROOT > RESULT_ROOT
    """
    return Path(os.getenv("INDOOR_ANALYTICS_RESULT_ROOT", RESULT_ROOT))


def meta_root() -> Path:
    return Path(os.getenv("INDOOR_ANALYTICS_META_ROOT") or result_root() / "meta")


def build_basename(building: str, floor: str, mode: str, dt: str) -> str:
    # building – floor – mode – datetime
    return f"{building}-{floor}-{mode}-{dt}"


def result_path(kind: str, basename: str, out_dir: str | os.PathLike | None = None) -> str:
    """
    出力ファイルの絶対パスを生成。
    out_dir 指定時はその直下、未指定なら result_root()/<kind別サブディレクトリ>。
    """
    subdir_map = {"image": "images", "movie": "movies", "export": "exports"}
    ext_map = {"image": "png", "movie": "mp4", "export": "json"}
    prefix_map = {"image": "viz", "movie": "playback", "export": "indoor_analytics"}

    ext = ext_map.get(kind, "dat")
    prefix = prefix_map.get(kind, "artifact")

    out = Path(out_dir) if out_dir is not None else result_root() / subdir_map.get(kind, "")
    out.mkdir(parents=True, exist_ok=True)
    return str(out / f"{prefix}_{basename}.{ext}")


def meta_paths(dt: str) -> dict:
    root = meta_root()
    return {
        "log_path": str(root / "logs" / f"run_{dt}.log"),
    }
