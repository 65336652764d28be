# ui/main_window.py
from pathlib import Path

from PySide6.QtCore import Qt, QEasingCurve, QPoint, QPointF, QPropertyAnimation, QParallelAnimationGroup
from PySide6.QtGui import QColor, QIcon, QPainter, QPainterPath, QPixmap
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QFrame, QSlider,
    QGraphicsBlurEffect, QGraphicsDropShadowEffect, QGraphicsOpacityEffect,
)

from core.context import PlayerContext
from core.models import NO_TRACK, Color, NowPlayingState
from .worker import PollWorker

BG = "#121212"
SLIDER_STEPS = 1000


class PlayerWindow(QMainWindow):
    def __init__(self, context: PlayerContext):
        super().__init__()

        self.setWindowTitle("Spotify Mini Player")
        self.setFixedSize(400, 520)

        self.context = context
        self.state = context.state
        self.seek = context.seek
        self.worker = None
        self._artwork = None
        self._glow_effect = None
        self._glow_anim = None
        self._bg_margin = 36
        self._icon = self._load_app_icon()
        if self._icon:
            self.setWindowIcon(self._icon)

        root = QWidget()
        root.setObjectName("Root")
        root_layout = QVBoxLayout(root)
        root_layout.setAlignment(Qt.AlignCenter)
        root_layout.setContentsMargins(0, 0, 0, 0)

        self.bg_label = QLabel(root)
        self.bg_label.setObjectName("BgArt")
        self.bg_label.setAttribute(Qt.WA_TransparentForMouseEvents)
        self.bg_label.setVisible(False)

        self.player_page = self._build_player_page()
        root_layout.addWidget(self.player_page)
        self.setCentralWidget(root)

        self._update_background_geometry()
        self.bg_label.lower()
        self.player_page.raise_()

        self._apply_styles()
        self._fade_in_root()

        self.state.subscribe(self._on_state_changed)
        self._render_all()

    # ==================================================
    # PLAYER PAGE
    # ==================================================

    def _build_player_page(self):
        page = QWidget()
        page.setObjectName("PlayerPage")
        layout = QVBoxLayout(page)
        layout.setAlignment(Qt.AlignTop)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(16)

        now = QFrame()
        self.now_card = now
        now.setObjectName("NowCard")
        nv = QVBoxLayout(now)
        nv.setContentsMargins(24, 22, 24, 22)
        nv.setSpacing(8)

        self.d_art = QLabel("♪")
        self.d_art.setObjectName("AlbumArtBig")
        self.d_art.setFixedSize(200, 200)
        self.d_art.setAlignment(Qt.AlignCenter)

        self.d_song = QLabel(NO_TRACK)
        self.d_song.setObjectName("SongTitle")
        self.d_song.setWordWrap(True)
        self.d_song.setAlignment(Qt.AlignCenter)

        self.d_artist = QLabel("")
        self.d_artist.setObjectName("ArtistName")
        self.d_artist.setWordWrap(True)
        self.d_artist.setAlignment(Qt.AlignCenter)

        self.d_album = QLabel("")
        self.d_album.setObjectName("AlbumName")
        self.d_album.setWordWrap(True)
        self.d_album.setAlignment(Qt.AlignCenter)

        self.d_progress = QSlider(Qt.Horizontal)
        self.d_progress.setObjectName("TrackProgress")
        self.d_progress.setRange(0, SLIDER_STEPS)
        self.d_progress.setValue(0)
        self.d_progress.sliderPressed.connect(self._on_slider_pressed)
        self.d_progress.sliderMoved.connect(self._on_slider_moved)
        self.d_progress.sliderReleased.connect(self._on_slider_released)

        time_row = QWidget()
        time_layout = QHBoxLayout(time_row)
        time_layout.setContentsMargins(0, 0, 0, 0)
        time_layout.setSpacing(8)

        self.d_time_left = QLabel("0:00")
        self.d_time_left.setObjectName("TimeText")

        self.d_time_right = QLabel("0:00")
        self.d_time_right.setObjectName("TimeText")

        time_layout.addWidget(self.d_time_left, 0, Qt.AlignLeft)
        time_layout.addStretch()
        time_layout.addWidget(self.d_time_right, 0, Qt.AlignRight)

        controls = QWidget()
        cl = QHBoxLayout(controls)
        cl.setContentsMargins(0, 0, 0, 0)
        cl.setSpacing(18)

        self.prev_btn = self._control_button("⏮", self.context.poller.previous_track)
        self.play_btn = self._control_button("▶", self.context.poller.toggle_play_pause)
        self.next_btn = self._control_button("⏭", self.context.poller.next_track)

        cl.addStretch()
        cl.addWidget(self.prev_btn)
        cl.addWidget(self.play_btn)
        cl.addWidget(self.next_btn)
        cl.addStretch()

        self.open_btn = QPushButton("Open Spotify")
        self.open_btn.setObjectName("CTA")
        self.open_btn.clicked.connect(self.context.poller.open_app)

        nv.addWidget(self.d_art, 0, Qt.AlignHCenter)
        nv.addWidget(self.d_song)
        nv.addWidget(self.d_artist)
        nv.addWidget(self.d_album)
        nv.addWidget(self.d_progress)
        nv.addWidget(time_row)
        nv.addWidget(controls)
        nv.addWidget(self.open_btn)

        layout.addWidget(now)
        return page

    def _control_button(self, text: str, action):
        btn = QPushButton(text)
        btn.setObjectName("Control")
        btn.setFixedSize(48, 48)
        btn.clicked.connect(lambda: action())
        return btn

    # ==================================================
    # WORKER HOOKUP
    # ==================================================

    def start_worker(self):
        if self.worker:
            return
        self.worker = PollWorker(self.context.poller, parent=self)
        self.worker.start()

    def _on_state_changed(self, state: NowPlayingState, changed: set):
        if changed & {"track_name", "artist_name", "album_name", "is_playing"}:
            self._render_track()
        if "artwork" in changed:
            self._set_artwork(state.artwork)
        if "dominant_color" in changed:
            self._set_accent(state.dominant_color)
        self._render_progress()

    def _render_all(self):
        self._render_track()
        self._set_artwork(self.state.artwork)
        self._set_accent(self.state.dominant_color)
        self._render_progress()

    def _render_track(self):
        s = self.state
        self.d_song.setText(s.track_name)
        self.d_artist.setText(s.artist_name if s.is_playing else "")
        self.d_album.setText(s.album_name if s.is_playing else "")
        self.play_btn.setText("⏸" if s.is_playing else "▶")
        self.open_btn.setVisible(not s.is_playing)
        self._set_playing_glow(s.is_playing)

    def _format_time(self, seconds: float) -> str:
        try:
            total = max(0, int(seconds))
        except Exception:
            total = 0
        mins = total // 60
        secs = total % 60
        return f"{mins}:{secs:02d}"

    def _render_progress(self):
        duration = self.state.duration_seconds
        position = self.seek.display_position()

        if not self.seek.dragging:
            if duration > 0:
                progress = max(0.0, min(1.0, position / duration))
                self.d_progress.setValue(int(progress * SLIDER_STEPS))
            else:
                self.d_progress.setValue(0)

        if duration > 0:
            self.d_time_left.setText(self._format_time(position))
            self.d_time_right.setText(self._format_time(duration))
        else:
            self.d_time_left.setText("0:00")
            self.d_time_right.setText("0:00")

    # ==================================================
    # SEEKING
    # ==================================================

    def _slider_position(self, value: int) -> float:
        return self.seek.position_from_fraction(value / SLIDER_STEPS)

    def _on_slider_pressed(self):
        self.seek.begin_drag(self._slider_position(self.d_progress.value()))
        self._render_progress()

    def _on_slider_moved(self, value: int):
        self.seek.update_drag(self._slider_position(value))
        self._render_progress()

    def _on_slider_released(self):
        self.seek.release(self._slider_position(self.d_progress.value()))
        self._render_progress()

    # ==================================================
    # ARTWORK & COLOR
    # ==================================================

    def _set_artwork(self, artwork):
        if artwork is self._artwork and artwork is not None:
            return
        self._artwork = artwork

        pix = QPixmap()
        if artwork is not None and pix.loadFromData(artwork.data):
            scaled = pix.scaled(
                self.d_art.size(),
                Qt.KeepAspectRatioByExpanding,
                Qt.SmoothTransformation,
            )
            self.d_art.setPixmap(self._rounded_pixmap(scaled, radius=18))
            self.d_art.setText("")
            self._set_background_pixmap(pix)
            return

        self.d_art.setPixmap(QPixmap())
        self.d_art.setText("♪")
        self._clear_background()

    def _set_accent(self, color: Color):
        r, g, b = color.to_rgb255()
        self.d_progress.setStyleSheet(f"""
            QSlider#TrackProgress::sub-page:horizontal {{
                background-color: rgb({r}, {g}, {b});
                border-radius: 3px;
            }}
            QSlider#TrackProgress::handle:horizontal {{
                background-color: rgb({r}, {g}, {b});
                width: 12px;
                margin: -4px 0;
                border-radius: 6px;
            }}
        """)
        if self._glow_effect:
            self._glow_effect.setColor(QColor(r, g, b, 130 if self.state.is_playing else 40))

    def _set_background_pixmap(self, pixmap: QPixmap):
        if pixmap.isNull():
            self._clear_background()
            return

        self._update_background_geometry()
        target_size = self.bg_label.size()

        scaled = pixmap.scaled(
            target_size,
            Qt.KeepAspectRatioByExpanding,
            Qt.SmoothTransformation,
        )

        composed = QPixmap(target_size)
        composed.fill(Qt.transparent)
        painter = QPainter(composed)
        painter.setOpacity(0.35)

        x = (target_size.width() - scaled.width()) // 2
        y = (target_size.height() - scaled.height()) // 2
        painter.drawPixmap(x, y, scaled)
        painter.end()

        self.bg_label.setPixmap(composed)
        self.bg_label.setVisible(True)

        if not isinstance(self.bg_label.graphicsEffect(), QGraphicsBlurEffect):
            blur = QGraphicsBlurEffect(self.bg_label)
            blur.setBlurRadius(60)
            self.bg_label.setGraphicsEffect(blur)

    def _clear_background(self):
        self.bg_label.setPixmap(QPixmap())
        self.bg_label.setVisible(False)
        self.bg_label.setGraphicsEffect(None)

    def _update_background_geometry(self):
        w = self.width()
        h = self.height()
        margin = self._bg_margin
        self.bg_label.setGeometry(-margin, -margin, w + margin * 2, h + margin * 2)

    def _set_playing_glow(self, playing: bool):
        if not self._glow_effect:
            effect = QGraphicsDropShadowEffect(self.now_card)
            effect.setBlurRadius(14)
            effect.setOffset(QPointF(0.0, 0.0))
            effect.setColor(QColor(255, 255, 255, 40))
            self._glow_effect = effect
            self.now_card.setGraphicsEffect(effect)

        if self._glow_anim:
            self._glow_anim.stop()
            self._glow_anim = None

        r, g, b = self.state.dominant_color.to_rgb255()
        target_blur = 42 if playing else 14
        target_color = QColor(r, g, b, 130 if playing else 40)

        blur_anim = QPropertyAnimation(self._glow_effect, b"blurRadius")
        blur_anim.setDuration(320)
        blur_anim.setEndValue(target_blur)
        blur_anim.setEasingCurve(QEasingCurve.OutCubic)

        color_anim = QPropertyAnimation(self._glow_effect, b"color")
        color_anim.setDuration(320)
        color_anim.setEndValue(target_color)
        color_anim.setEasingCurve(QEasingCurve.OutCubic)

        group = QParallelAnimationGroup(self)
        group.addAnimation(blur_anim)
        group.addAnimation(color_anim)
        self._glow_anim = group
        group.start()

    def _fade_in_root(self):
        effect = QGraphicsOpacityEffect(self.player_page)
        self.player_page.setGraphicsEffect(effect)
        effect.setOpacity(0.0)

        start_pos = self.player_page.pos() + QPoint(0, 10)
        end_pos = self.player_page.pos()
        self.player_page.move(start_pos)

        anim = QPropertyAnimation(effect, b"opacity")
        anim.setDuration(420)
        anim.setStartValue(0.0)
        anim.setEndValue(1.0)
        anim.setEasingCurve(QEasingCurve.OutCubic)

        move = QPropertyAnimation(self.player_page, b"pos")
        move.setDuration(420)
        move.setStartValue(start_pos)
        move.setEndValue(end_pos)
        move.setEasingCurve(QEasingCurve.OutCubic)

        group = QParallelAnimationGroup(self)
        group.addAnimation(anim)
        group.addAnimation(move)
        group.start()

        def _finish():
            self.player_page.setGraphicsEffect(None)
            self.player_page.move(end_pos)

        group.finished.connect(_finish)
        # Keep a ref so GC doesn't stop the animation
        self._root_fade = group

    def _rounded_pixmap(self, pixmap: QPixmap, radius: int) -> QPixmap:
        size = self.d_art.size()
        rounded = QPixmap(size)
        rounded.fill(Qt.transparent)

        painter = QPainter(rounded)
        painter.setRenderHints(QPainter.Antialiasing | QPainter.SmoothPixmapTransform)

        path = QPainterPath()
        path.addRoundedRect(0, 0, size.width(), size.height(), radius, radius)
        painter.setClipPath(path)
        painter.drawPixmap(0, 0, pixmap)
        painter.end()

        return rounded

    # ==================================================
    # CLEAN SHUTDOWN
    # ==================================================

    def closeEvent(self, event):
        self.stop_worker()
        event.accept()

    def _load_app_icon(self):
        icon_path = Path(__file__).resolve().parents[1] / "logo.png"
        if icon_path.exists():
            return QIcon(str(icon_path))
        return None

    def stop_worker(self):
        self.state.unsubscribe(self._on_state_changed)
        if self.worker:
            self.worker.stop()
            self.worker = None
        self.context.close()

    # ==================================================
    # STYLES
    # ==================================================

    def _apply_styles(self):
        self.setStyleSheet(f"""
            * {{
                background: transparent;
                outline: none;
                selection-background-color: transparent;
                selection-color: white;
            }}

            QWidget {{
                color: white;
                font-family: -apple-system, BlinkMacSystemFont,
                             "Segoe UI", Inter, Arial;
            }}

            QMainWindow, QWidget#Root {{
                background-color: {BG};
            }}

            QLabel {{
                background: transparent;
                qproperty-textInteractionFlags: NoTextInteraction;
            }}

            QFrame#NowCard {{
                background-color: rgba(255,255,255,0.10);
                border: 1px solid rgba(255,255,255,0.18);
                border-radius: 28px;
            }}

            QLabel#SongTitle {{
                font-size: 18px;
                font-weight: 900;
            }}

            QLabel#ArtistName {{
                font-size: 14px;
                color: rgba(255,255,255,0.90);
            }}

            QLabel#AlbumName {{
                font-size: 12px;
                color: rgba(255,255,255,0.75);
            }}

            QLabel#AlbumArtBig {{
                background-color: rgba(255,255,255,0.16);
                border-radius: 18px;
                color: rgba(255,255,255,0.85);
                font-size: 28px;
                font-weight: 800;
            }}

            QSlider#TrackProgress::groove:horizontal {{
                background-color: rgba(255,255,255,0.22);
                height: 4px;
                border-radius: 2px;
            }}

            QLabel#TimeText {{
                font-size: 11px;
                color: rgba(255,255,255,0.75);
            }}

            QPushButton#Control {{
                background-color: rgba(255,255,255,0.12);
                border-radius: 24px;
                font-size: 18px;
            }}

            QPushButton#Control:hover {{
                background-color: rgba(255,255,255,0.22);
            }}

            QPushButton#CTA {{
                background-color: white;
                color: {BG};
                border-radius: 14px;
                padding: 10px;
                font-size: 14px;
                font-weight: 800;
            }}
        """)
