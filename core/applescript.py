# core/applescript.py
import subprocess
from typing import Optional

from .debug import debug_log


OSASCRIPT_TIMEOUT = 5


def run_applescript(script: str, timeout: float = OSASCRIPT_TIMEOUT) -> Optional[str]:
    """Run ``script`` through osascript and return its trimmed output, or None on any failure."""
    try:
        out = subprocess.check_output(
            ["osascript", "-e", script],
            text=True,
            stderr=subprocess.PIPE,
            timeout=timeout,
        )
    except subprocess.CalledProcessError as e:
        debug_log(f"AppleScript failed ({e.returncode}): {(e.stderr or '').strip()}")
        return None
    except Exception as e:
        debug_log(f"AppleScript unavailable: {e}")
        return None

    return out.strip()
