#core/spotify_macos.py
import hashlib
import io
import os
import subprocess
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

import requests
from PIL import Image

from .applescript import run_applescript
from .debug import debug_log
from .models import Artwork, TrackSnapshot


APP_NAME = "Spotify"
APP_PATH = os.getenv("SMP_APP_PATH", "/Applications/Spotify.app")
ARTWORK_TIMEOUT = 4
FIELD_SEPARATOR = "||"
NOT_PLAYING = "not_playing"

NOW_PLAYING_SCRIPT = r'''
tell application "Spotify"
    if player state is playing then
        set trackName to name of current track
        set artistName to artist of current track
        set albumName to album of current track
        set artworkURL to artwork url of current track
        set currentTime to player position
        set trackDuration to (duration of current track) / 1000
        return trackName & "||" & artistName & "||" & albumName & "||" & artworkURL & "||" & currentTime & "||" & trackDuration
    else
        return "not_playing"
    end if
end tell
'''

PROCESS_RUNNING_SCRIPT = '''
tell application "System Events"
    set isRunning to (name of processes) contains "{app}"
end tell
return isRunning
'''

COMMAND_SCRIPT = '''
tell application "Spotify"
    {command}
end tell
'''


def _to_float(v: str) -> float:
    try:
        return float(v)
    except Exception:
        return 0.0


def parse_now_playing(output: Optional[str]) -> Optional[TrackSnapshot]:
    if not output or output == NOT_PLAYING:
        return None

    parts = output.split(FIELD_SEPARATOR)
    if len(parts) != 6:
        debug_log(f"Malformed now-playing response ({len(parts)} fields)")
        return None

    return TrackSnapshot(
        track_name=parts[0],
        artist_name=parts[1],
        album_name=parts[2],
        artwork_url=parts[3].strip(),
        position_seconds=max(0.0, _to_float(parts[4])),
        duration_seconds=max(0.0, _to_float(parts[5])),
    )


def decode_artwork(url: str, data: bytes) -> Optional[Artwork]:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except Exception as e:
        debug_log(f"Artwork decode failed for {url}: {e}")
        return None

    return Artwork(
        url=url,
        data=data,
        image=image,
        digest=hashlib.md5(data).hexdigest(),
    )


class SpotifyClient:
    """Queries and commands for the Spotify desktop app over AppleScript."""

    def __init__(
        self,
        run_script: Callable[[str], Optional[str]] = run_applescript,
        session: Optional[requests.Session] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        app_name: str = APP_NAME,
        app_path: str = APP_PATH,
    ):
        self.run_script = run_script
        self.session = session or requests.Session()
        self.app_name = app_name
        self.app_path = app_path
        self._executor = executor or ThreadPoolExecutor(max_workers=1)

    # ---------- Queries ----------

    def is_app_running(self) -> bool:
        out = self.run_script(PROCESS_RUNNING_SCRIPT.format(app=self.app_name))
        return (out or "").strip() == "true"

    def query_now_playing(self) -> Optional[TrackSnapshot]:
        return parse_now_playing(self.run_script(NOW_PLAYING_SCRIPT))

    def fetch_artwork(self, url: str) -> Optional[Artwork]:
        if not url:
            return None

        try:
            r = self.session.get(url, timeout=ARTWORK_TIMEOUT)
            r.raise_for_status()
        except Exception as e:
            debug_log(f"Artwork fetch failed for {url}: {e}")
            return None

        return decode_artwork(url, r.content)

    # ---------- Playback commands ----------

    def _command(self, command: str) -> Future:
        script = COMMAND_SCRIPT.format(command=command)

        def _run():
            if self.run_script(script) is None:
                debug_log(f"Command may have failed: {command}")

        return self._executor.submit(_run)

    def previous_track(self) -> Future:
        return self._command("previous track")

    def next_track(self) -> Future:
        return self._command("next track")

    def toggle_play_pause(self) -> Future:
        return self._command("playpause")

    def seek(self, seconds: float) -> Future:
        return self._command(f"set player position to {max(0.0, float(seconds))}")

    # ---------- App lifecycle ----------

    def open_app(self) -> bool:
        if not os.path.exists(self.app_path):
            debug_log(f"{self.app_name} not found at {self.app_path}")
            return False

        try:
            subprocess.Popen(["open", self.app_path])
        except Exception as e:
            debug_log(f"Opening {self.app_name} failed: {e}")
            return False
        return True

    def shutdown(self):
        try:
            self._executor.shutdown(wait=False, cancel_futures=True)
        except Exception:
            pass
