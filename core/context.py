# core/context.py
from dataclasses import dataclass
from typing import Callable, Optional

from .models import NowPlayingState
from .poller import PlaybackPoller
from .seek import SeekTracker
from .spotify_macos import SpotifyClient


@dataclass
class PlayerContext:
    state: NowPlayingState
    client: SpotifyClient
    poller: PlaybackPoller
    seek: SeekTracker

    def close(self):
        self.poller.close()


def build_context(
    post: Callable[[Callable[[], None]], None],
    schedule: Callable[[float, Callable[[], None]], None],
    client: Optional[SpotifyClient] = None,
    submit=None,
) -> PlayerContext:
    state = NowPlayingState()
    client = client or SpotifyClient()
    poller = PlaybackPoller(client, state, submit=submit, post=post)
    seek = SeekTracker(state, seek=poller.seek, schedule=schedule)
    return PlayerContext(state=state, client=client, poller=poller, seek=seek)
