# ui/worker.py
from typing import Callable

from PySide6.QtCore import QObject, Qt, QTimer, Signal

from core.debug import debug_log
from core.poller import PlaybackPoller


TICK_SECONDS = 1.0


class MainThreadDispatcher(QObject):
    """Runs callables on the thread that owns this object (the UI thread)."""

    _invoke = Signal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._invoke.connect(self._run, Qt.QueuedConnection)

    def post(self, fn: Callable[[], None]) -> None:
        # Signal emission is thread-safe; the queued slot runs on our thread.
        self._invoke.emit(fn)

    def _run(self, fn):
        try:
            fn()
        except Exception as e:
            debug_log(f"UI callback failed: {e}")


def schedule_on_ui(delay_seconds: float, fn: Callable[[], None]) -> None:
    QTimer.singleShot(int(delay_seconds * 1000), fn)


class PollWorker(QObject):
    tick_done = Signal(bool)

    def __init__(self, poller: PlaybackPoller, tick_seconds: float = TICK_SECONDS, parent=None):
        super().__init__(parent)
        self.poller = poller
        self._timer = QTimer(self)
        self._timer.setInterval(int(tick_seconds * 1000))
        self._timer.timeout.connect(self._on_tick)

    def start(self):
        self._on_tick()
        self._timer.start()

    def stop(self):
        self._timer.stop()

    def is_running(self) -> bool:
        return self._timer.isActive()

    def _on_tick(self):
        self.poller.tick(self.tick_done.emit)
