import pytest

from conftest import make_artwork
from core.models import WHITE, Color, NowPlayingState


class TestNowPlayingState:
    def test_defaults(self):
        s = NowPlayingState()
        assert s.track_name == "No Song Playing"
        assert s.artist_name == "Unknown Artist"
        assert s.album_name == "Unknown Album"
        assert s.artwork is None
        assert s.dominant_color is WHITE
        assert s.position_seconds == 0.0
        assert s.duration_seconds == 0.0
        assert s.is_playing is False

    def test_apply_notifies_once_with_changed_fields(self):
        s = NowPlayingState()
        seen = []
        s.subscribe(lambda state, changed: seen.append((state, changed)))

        changed = s.apply(track_name="Song", artist_name="Unknown Artist", is_playing=True)

        assert changed == {"track_name", "is_playing"}
        assert seen == [(s, {"track_name", "is_playing"})]

    def test_apply_without_changes_is_silent(self):
        s = NowPlayingState()
        seen = []
        s.subscribe(lambda state, changed: seen.append(changed))

        assert s.apply(track_name="No Song Playing") == set()
        assert seen == []

    def test_color_and_artwork_compare_by_identity(self):
        s = NowPlayingState()
        assert s.apply(dominant_color=Color(1.0, 1.0, 1.0, 1.0)) == {"dominant_color"}

        art = make_artwork()
        s.apply(artwork=art)
        assert s.apply(artwork=art) == set()
        assert s.apply(artwork=make_artwork()) == {"artwork"}

    def test_negative_times_are_clamped(self):
        s = NowPlayingState()
        s.apply(position_seconds=-4, duration_seconds=-1.0)
        assert s.position_seconds == 0.0
        assert s.duration_seconds == 0.0

    def test_unknown_field(self):
        s = NowPlayingState()
        with pytest.raises(AttributeError):
            s.apply(subscribe=None)
        with pytest.raises(AttributeError):
            s.apply(_observers=[])

    def test_reset_keeps_times(self):
        s = NowPlayingState()
        s.apply(track_name="Song", is_playing=True, artwork=make_artwork(), position_seconds=5.0)

        s.reset()

        assert s.track_name == "No Song Playing"
        assert s.artwork is None
        assert s.dominant_color is WHITE
        assert s.is_playing is False
        assert s.position_seconds == 5.0

    def test_unsubscribe(self):
        s = NowPlayingState()
        seen = []
        cb = lambda state, changed: seen.append(changed)
        s.subscribe(cb)
        s.unsubscribe(cb)
        s.unsubscribe(cb)

        s.apply(track_name="x")
        assert seen == []

    def test_snapshot(self):
        s = NowPlayingState()
        snap = s.snapshot()
        assert snap["track_name"] == "No Song Playing"
        assert "_observers" not in snap


class TestColor:
    def test_hex(self):
        assert WHITE.hex() == "#ffffff"
        assert Color(0.5, 0.0, 1.0).to_rgb255() == (128, 0, 255)
