# core/poller.py
import math
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from .color import dominant_color
from .debug import debug_log
from .models import WHITE, Artwork, Color, NowPlayingState, TrackSnapshot
from .spotify_macos import SpotifyClient


ACTIVE_INTERVAL = 2.0
IDLE_INTERVAL = 5.0

Completion = Optional[Callable[[bool], None]]


def _run_inline(fn: Callable[[], None]) -> None:
    fn()


class PlaybackPoller:
    """
    Polls Spotify and keeps a NowPlayingState in sync.

    ``tick`` is meant to be called from a frequent UI timer. Actual queries are
    throttled (2s while playing, 5s while idle) and never overlap: a tick that
    arrives while a query is in flight is dropped.

    Blocking work goes through ``submit`` (a worker pool); results come back
    through ``post``, which must run the callable on the UI thread. State is
    only ever written from posted callables.
    """

    def __init__(
        self,
        client: SpotifyClient,
        state: NowPlayingState,
        submit: Optional[Callable[[Callable[[], None]], object]] = None,
        post: Callable[[Callable[[], None]], None] = _run_inline,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.state = state
        self._post = post
        self._clock = clock

        self._executor = None
        if submit is None:
            self._executor = ThreadPoolExecutor(max_workers=2)
            submit = self._executor.submit
        self._submit = submit

        self.update_interval = ACTIVE_INTERVAL
        self.last_update_time = -math.inf
        self._busy = False
        self._closed = False
        self._generation = 0
        self._last_track_key = ""
        self._last_artwork_key: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def closed(self) -> bool:
        return self._closed

    # ---------- Polling ----------

    def tick(self, completion: Completion = None) -> None:
        if self._closed:
            if completion:
                completion(False)
            return

        if self._busy:
            if completion:
                completion(True)
            return

        now = self._clock()
        if now - self.last_update_time < self.update_interval:
            if completion:
                completion(True)
            return

        self._busy = True
        self.last_update_time = now
        track_key = self._last_track_key
        generation = self._generation

        try:
            self._submit(lambda: self._poll(track_key, generation, completion))
        except Exception as e:
            debug_log(f"Poll could not be scheduled: {e}")
            self._busy = False
            if completion:
                completion(False)

    def _poll(self, track_key: str, generation: int, completion: Completion) -> None:
        # Worker thread: no state writes here.
        try:
            if not self.client.is_app_running():
                self._deliver(self._clear, completion)
                return

            snapshot = self.client.query_now_playing()
            if snapshot is None:
                self._deliver(self._clear, completion)
                return

            artwork = None
            fetched = False
            if snapshot.identity(True) != track_key and snapshot.artwork_url:
                artwork = self.client.fetch_artwork(snapshot.artwork_url)
                fetched = True

            self._deliver(
                lambda: self._apply_snapshot(snapshot, artwork, fetched, generation),
                completion,
            )
        except Exception as e:
            debug_log(f"Poll failed: {e}")
            self._deliver(None, completion, success=False)

    def _deliver(self, action, completion: Completion, success: bool = True) -> None:
        def _on_ui_thread():
            if self._closed:
                return
            ok = success
            try:
                if action:
                    action()
            except Exception as e:
                debug_log(f"State update failed: {e}")
                ok = False
            finally:
                self._busy = False
            if completion:
                completion(ok)

        self._post(_on_ui_thread)

    # ---------- State writes (UI thread) ----------

    def _clear(self) -> None:
        self.update_interval = IDLE_INTERVAL
        self._last_track_key = ""
        self._last_artwork_key = None
        self.state.reset()

    def _apply_snapshot(
        self,
        snapshot: TrackSnapshot,
        artwork: Optional[Artwork],
        fetched: bool,
        generation: int,
    ) -> None:
        self.update_interval = ACTIVE_INTERVAL
        track_key = snapshot.identity(True)

        if track_key == self._last_track_key:
            self.state.apply(
                position_seconds=snapshot.position_seconds,
                duration_seconds=snapshot.duration_seconds,
            )
            return

        # A poll that started before an invalidate must not re-arm the dedup cache.
        if generation == self._generation:
            self._last_track_key = track_key

        fields = {
            "track_name": snapshot.track_name,
            "artist_name": snapshot.artist_name,
            "album_name": snapshot.album_name,
            "position_seconds": snapshot.position_seconds,
            "duration_seconds": snapshot.duration_seconds,
            "is_playing": True,
        }

        sample = None
        if artwork is not None:
            artwork_key = f"{snapshot.track_name}|{snapshot.album_name}|{artwork.digest}"
            if artwork_key != self._last_artwork_key:
                self._last_artwork_key = artwork_key
                fields["artwork"] = artwork
                sample = (artwork, artwork_key)
        elif fetched or not snapshot.artwork_url:
            self._last_artwork_key = None
            fields["artwork"] = None
            fields["dominant_color"] = WHITE

        self.state.apply(**fields)

        if sample:
            self._sample_color(*sample)

    def _sample_color(self, artwork: Artwork, artwork_key: str) -> None:
        def _job():
            color = dominant_color(artwork.image) or WHITE
            self._post(lambda: self._apply_color(artwork_key, color))

        try:
            self._submit(_job)
        except Exception as e:
            debug_log(f"Color sampling could not be scheduled: {e}")

    def _apply_color(self, artwork_key: str, color: Color) -> None:
        if self._closed or artwork_key != self._last_artwork_key:
            return
        self.state.apply(dominant_color=color)

    # ---------- Commands ----------

    def invalidate(self) -> None:
        """Force the next tick to run a full, unthrottled query."""
        if self._closed:
            return
        self._generation += 1
        self._last_track_key = ""
        self.last_update_time = -math.inf

    def _after_command(self, future: Future) -> Future:
        future.add_done_callback(lambda _f: self._post(self.invalidate))
        return future

    def previous_track(self) -> Future:
        return self._after_command(self.client.previous_track())

    def next_track(self) -> Future:
        return self._after_command(self.client.next_track())

    def toggle_play_pause(self) -> Future:
        return self._after_command(self.client.toggle_play_pause())

    def seek(self, seconds: float) -> Future:
        return self._after_command(self.client.seek(seconds))

    def open_app(self) -> bool:
        return self.client.open_app()

    def close(self) -> None:
        self._closed = True
        if self._executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
        self.client.shutdown()
