# core/models.py
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

from PIL import Image


NO_TRACK = "No Song Playing"
NO_ARTIST = "Unknown Artist"
NO_ALBUM = "Unknown Album"


@dataclass(frozen=True)
class Color:
    red: float
    green: float
    blue: float
    alpha: float = 1.0

    def to_rgb255(self):
        return (
            round(self.red * 255),
            round(self.green * 255),
            round(self.blue * 255),
        )

    def hex(self) -> str:
        r, g, b = self.to_rgb255()
        return f"#{r:02x}{g:02x}{b:02x}"


WHITE = Color(1.0, 1.0, 1.0, 1.0)


@dataclass(frozen=True)
class TrackSnapshot:
    track_name: str
    artist_name: str
    album_name: str
    artwork_url: str
    position_seconds: float
    duration_seconds: float

    def identity(self, is_playing: bool = True) -> str:
        return f"{self.track_name}|{self.artist_name}|{self.album_name}|{is_playing}"


@dataclass(frozen=True, eq=False)
class Artwork:
    url: str
    data: bytes
    image: Image.Image
    digest: str


STATE_FIELDS = (
    "track_name",
    "artist_name",
    "album_name",
    "artwork",
    "dominant_color",
    "position_seconds",
    "duration_seconds",
    "is_playing",
)

# Fields compared by object identity rather than value.
_IDENTITY_FIELDS = {"artwork", "dominant_color"}

StateObserver = Callable[["NowPlayingState", Set[str]], None]


@dataclass
class NowPlayingState:
    """
    Current track, playback position and theming color.

    Written only by the polling coordinator on the UI thread; everything else
    reads it or subscribes to change notifications.
    """

    track_name: str = NO_TRACK
    artist_name: str = NO_ARTIST
    album_name: str = NO_ALBUM
    artwork: Optional[Artwork] = None
    dominant_color: Color = WHITE
    position_seconds: float = 0.0
    duration_seconds: float = 0.0
    is_playing: bool = False

    _observers: List[StateObserver] = field(default_factory=list, repr=False, compare=False)

    def subscribe(self, callback: StateObserver) -> None:
        if callback not in self._observers:
            self._observers.append(callback)

    def unsubscribe(self, callback: StateObserver) -> None:
        try:
            self._observers.remove(callback)
        except ValueError:
            pass

    def apply(self, **fields: Any) -> Set[str]:
        changed = set()
        for name, value in fields.items():
            if name not in STATE_FIELDS:
                raise AttributeError(f"NowPlayingState has no field {name!r}")
            if name in ("position_seconds", "duration_seconds"):
                value = max(0.0, float(value))
            current = getattr(self, name)
            same = current is value if name in _IDENTITY_FIELDS else current == value
            if not same:
                setattr(self, name, value)
                changed.add(name)

        if changed:
            for callback in list(self._observers):
                callback(self, changed)
        return changed

    def reset(self) -> Set[str]:
        return self.apply(
            track_name=NO_TRACK,
            artist_name=NO_ARTIST,
            album_name=NO_ALBUM,
            artwork=None,
            dominant_color=WHITE,
            is_playing=False,
        )

    def snapshot(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in STATE_FIELDS}
