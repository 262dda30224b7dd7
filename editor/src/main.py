import sys
import os
import logging

# Configure logging
logging.basicConfig(
    level=logging.WARNING,  # Only show warnings and errors
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)  # Output to console
    ]
)

# Add editor/src to path so imports work when running directly
if __name__ == "__main__":
    current_dir = os.path.dirname(os.path.abspath(__file__))
    if current_dir not in sys.path:
        sys.path.insert(0, current_dir)

# PyQt5 import/s
from PyQt5 import QtWidgets
from PyQt5.QtWidgets import QMainWindow
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPalette, QColor

# Model imports
from models.document import DrillDocument
from models.editor_state import EditorState

# Utility imports
from utils.history_manager import HistoryManager
from utils.logger import set_main_window

# Service imports
from services.group_transform import GroupTransformEngine
from services.playback import PlaybackController

# Component imports
from components.interaction_controller import InteractionController
from components.playback_clock import PlaybackClock
from constants import MAX_HISTORY_ENTRIES

# Action imports
from actions.file_actions import FileActions
from actions.arrangement_actions import ArrangementActions

# Mixin imports
from window.menu_mixin import MenuMixin
from window.config_mixin import ConfigMixin
from window.history_mixin import HistoryMixin
from window.ui_setup_mixin import UISetupMixin


class DrillEditor(MenuMixin, ConfigMixin, HistoryMixin, UISetupMixin, QMainWindow):
    def __init__(self, config_dir=None):
        super().__init__()
        self.resize(1280, 720)
        
        # Recent files and settings
        self._init_config_paths(config_dir)
        self._load_config()
        
        # Document store with its history (single source of truth for drill data)
        self.history_manager = HistoryManager(max_history=MAX_HISTORY_ENTRIES)
        self.document = DrillDocument(self.history_manager)
        self.document.create_new_drill()
        
        self.editor_state = EditorState()
        self.editor_state.show_direction_arrows = self.show_direction_arrows
        
        # Group transforms write through the document store
        self.engine = GroupTransformEngine(
            get_frame=self.document.get_current_frame,
            get_selection=lambda: self.editor_state.selected_horse_ids,
            commit=lambda frame_id, updates, skip_history, description: self.document.batch_update_horses(
                frame_id, updates, skip_history=skip_history, description=description
            ),
        )
        self.editor_state.add_selection_listener(self.engine.on_selection_changed)
        
        self.playback = PlaybackController(self.document.get_document, on_frame_change=self._on_playback_frame)
        self.playback.set_playback_speed(self.default_playback_speed)
        self.playback_clock = PlaybackClock(self.playback, self)
        
        self.interaction = InteractionController(self.document, self.editor_state, self.engine, self.playback)
        
        # Track current file
        self.current_file = None
        
        # Initialize global logger with main window reference
        set_main_window(self)
        
        # Initialize action handlers (composition pattern)
        self.file_actions = FileActions(self)
        self.arrangement_actions = ArrangementActions(self.document, self.editor_state)
        
        self.setup_ui()
        self.history_manager.add_listener(self._on_history_changed)
        self._update_window_title()
    
    def _on_playback_frame(self, index):
        """Follow playback with the frame cursor"""
        self.document.set_current_frame(index)
    
    def closeEvent(self, event):
        self.playback.stop()
        self._save_config()
        super().closeEvent(event)


def main():
    """Main entry point for the Drill Team Choreographer application"""
    app = QtWidgets.QApplication(sys.argv)
    
    # Use Fusion style with dark palette
    app.setStyle("Fusion")
    
    dark_palette = QPalette()
    dark_palette.setColor(QPalette.Window, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.WindowText, Qt.white)
    dark_palette.setColor(QPalette.Base, QColor(25, 25, 25))
    dark_palette.setColor(QPalette.AlternateBase, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ToolTipBase, Qt.white)
    dark_palette.setColor(QPalette.ToolTipText, Qt.white)
    dark_palette.setColor(QPalette.Text, Qt.white)
    dark_palette.setColor(QPalette.Button, QColor(53, 53, 53))
    dark_palette.setColor(QPalette.ButtonText, Qt.white)
    dark_palette.setColor(QPalette.BrightText, Qt.red)
    dark_palette.setColor(QPalette.Link, QColor(42, 130, 218))
    dark_palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
    dark_palette.setColor(QPalette.HighlightedText, Qt.black)
    
    app.setPalette(dark_palette)
    
    window = DrillEditor()
    if len(sys.argv) > 1:
        window.file_actions.load_file(sys.argv[1])
    window.show()
    app.exec_()


if __name__ == "__main__":
    main()
