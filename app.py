import sys
from pathlib import Path
from PySide6.QtWidgets import QApplication
from PySide6.QtGui import QIcon
from core.context import build_context
from ui.main_window import PlayerWindow
from ui.worker import MainThreadDispatcher, schedule_on_ui

def main():
    app = QApplication(sys.argv)
    icon_path = Path(__file__).resolve().parent / "logo.png"
    if icon_path.exists():
        app.setWindowIcon(QIcon(str(icon_path)))
    dispatcher = MainThreadDispatcher()
    context = build_context(post=dispatcher.post, schedule=schedule_on_ui)
    win = PlayerWindow(context)
    win.show()
    win.start_worker()
    app.aboutToQuit.connect(win.stop_worker)
    sys.exit(app.exec())

if __name__ == "__main__":
    main()
