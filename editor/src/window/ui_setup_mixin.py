"""UI setup for the drill editor"""

from PyQt5.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QSlider, QComboBox
from PyQt5.QtCore import Qt

from components.arena_canvas import ArenaCanvas
from constants import PLAYBACK_SPEEDS

# Slider ticks per second of drill time
SLIDER_RESOLUTION = 100


class UISetupMixin:
    """UI initialization and component wiring"""
    
    def setup_ui(self):
        """Initialize and wire up all UI components"""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        
        main_layout = QVBoxLayout(central_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)
        
        self.canvas = ArenaCanvas(self.document, self.editor_state, self.engine,
                                  self.interaction, self.playback, self)
        main_layout.addWidget(self.canvas, 1)
        main_layout.addWidget(self._create_timeline_bar())
        
        # Menu bar references the canvas for zoom actions
        self._create_menu_bar()
        
        # Status bar with left and right sections
        self.status_left = QLabel("Ready")
        self.status_right = QLabel("")
        self.statusBar().addWidget(self.status_left, 1)
        self.statusBar().addPermanentWidget(self.status_right)
        
        self.playback.add_listener(self._update_timeline)
        self.document.add_listener(self._update_timeline)
        self.document.add_listener(self._update_status_bar)
        self.editor_state.add_selection_listener(lambda ids: self._update_status_bar())
        self._update_timeline()
        self._update_status_bar()
    
    def _create_timeline_bar(self):
        """Play/stop buttons, speed selector and time scrubber"""
        bar = QWidget()
        layout = QHBoxLayout(bar)
        layout.setContentsMargins(8, 4, 8, 4)
        
        self.play_button = QPushButton("Play")
        self.play_button.setFocusPolicy(Qt.NoFocus)
        self.play_button.clicked.connect(self.playback.toggle)
        layout.addWidget(self.play_button)
        
        stop_button = QPushButton("Stop")
        stop_button.setFocusPolicy(Qt.NoFocus)
        stop_button.clicked.connect(self.playback.stop)
        layout.addWidget(stop_button)
        
        self.speed_combo = QComboBox()
        self.speed_combo.setFocusPolicy(Qt.NoFocus)
        for speed in PLAYBACK_SPEEDS:
            self.speed_combo.addItem(f"x{speed}", speed)
        self.speed_combo.currentIndexChanged.connect(
            lambda i: self.playback.set_playback_speed(self.speed_combo.itemData(i))
        )
        layout.addWidget(self.speed_combo)
        
        self.time_slider = QSlider(Qt.Horizontal)
        self.time_slider.setFocusPolicy(Qt.NoFocus)
        self.time_slider.sliderMoved.connect(lambda v: self.playback.seek(v / SLIDER_RESOLUTION))
        layout.addWidget(self.time_slider, 1)
        
        self.time_label = QLabel("0.0s / 0.0s")
        layout.addWidget(self.time_label)
        return bar
    
    def _update_timeline(self):
        """Sync the timeline widgets with the playback state"""
        if not hasattr(self, 'time_slider'):
            return
        total = self.playback.total_duration
        current = self.playback.current_time
        self.time_slider.blockSignals(True)
        self.time_slider.setRange(0, int(total * SLIDER_RESOLUTION))
        self.time_slider.setValue(int(current * SLIDER_RESOLUTION))
        self.time_slider.blockSignals(False)
        self.time_label.setText(f"{current:.1f}s / {total:.1f}s")
        self.play_button.setText("Pause" if self.playback.is_playing else "Play")
        
        index = self.speed_combo.findData(self.playback.playback_speed)
        if index >= 0 and index != self.speed_combo.currentIndex():
            self.speed_combo.blockSignals(True)
            self.speed_combo.setCurrentIndex(index)
            self.speed_combo.blockSignals(False)
