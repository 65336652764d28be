import io
from concurrent.futures import Future

import pytest
from PIL import Image

from core.spotify_macos import decode_artwork


def png_bytes(rgb=(200, 40, 40), size=(4, 4)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, rgb).save(buf, format="PNG")
    return buf.getvalue()


def make_artwork(url="http://x/art.jpg", rgb=(200, 40, 40)):
    return decode_artwork(url, png_bytes(rgb))


def done_future(result=None) -> Future:
    f = Future()
    f.set_result(result)
    return f


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class ManualExecutor:
    """Queues submitted jobs until the test runs them."""

    def __init__(self):
        self.jobs = []

    def submit(self, fn):
        self.jobs.append(fn)

    def run_next(self):
        self.jobs.pop(0)()

    def run_last(self):
        self.jobs.pop()()

    def run_all(self):
        while self.jobs:
            self.run_next()


class FakeClient:
    def __init__(self, running=True, snapshot=None, artwork=None):
        self.running = running
        self.snapshot = snapshot
        self.artwork = artwork
        self.running_checks = 0
        self.queries = 0
        self.fetched_urls = []
        self.commands = []
        self.opened = False
        self.shut_down = False

    def is_app_running(self):
        self.running_checks += 1
        return self.running

    def query_now_playing(self):
        self.queries += 1
        return self.snapshot

    def fetch_artwork(self, url):
        self.fetched_urls.append(url)
        return self.artwork

    def previous_track(self):
        self.commands.append("previous")
        return done_future()

    def next_track(self):
        self.commands.append("next")
        return done_future()

    def toggle_play_pause(self):
        self.commands.append("playpause")
        return done_future()

    def seek(self, seconds):
        self.commands.append(("seek", seconds))
        return done_future()

    def open_app(self):
        self.opened = True
        return True

    def shutdown(self):
        self.shut_down = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def executor():
    return ManualExecutor()
