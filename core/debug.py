# core/debug.py
import os
import time
from pathlib import Path


_DEBUG = os.getenv("SMP_DEBUG") == "1"
LOG_FILE_NAME = "smp_debug.log"


def debug_enabled() -> bool:
    return _DEBUG


def debug_log(message: str) -> None:
    if not debug_enabled():
        return

    try:
        ts = time.strftime("%Y-%m-%d %H:%M:%S")
    except Exception:
        ts = "unknown-time"

    line = f"[{ts}] {message}\n"
    try:
        log_path = Path(__file__).resolve().parents[1] / LOG_FILE_NAME
        with log_path.open("a", encoding="utf-8") as f:
            f.write(line)
    except Exception:
        pass

    try:
        print(f"[DEBUG] {message}")
    except Exception:
        pass
