import os


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# ------------------ Layout ------------------
LAYOUT_BASE_OFFSET = _env_float("LAYOUT_BASE_OFFSET", 8.0)
LAYOUT_VERTICAL_SPACING = _env_float("LAYOUT_VERTICAL_SPACING", 12.0)

# ------------------ Playback ------------------
MIN_SPEED_MS = 100
MAX_SPEED_MS = 3000
DEFAULT_SPEED_MS = max(MIN_SPEED_MS, min(MAX_SPEED_MS, _env_int("AVLTRACE_SPEED_MS", 800)))

# ------------------ Server ------------------
HOST = os.environ.get("AVLTRACE_HOST", "127.0.0.1")
PORT = _env_int("AVLTRACE_PORT", 5000)
DEBUG = os.environ.get("AVLTRACE_DEBUG", "false").strip().lower() in ("1", "true", "yes")

# Comma separated keys inserted at startup, e.g. "30,20,10"
SEED_KEYS = os.environ.get("AVLTRACE_SEED", "")
