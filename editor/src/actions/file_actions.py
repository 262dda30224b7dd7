"""File operations for the main window - new, open, save"""
import os

from PyQt5.QtWidgets import QFileDialog

from constants import DRILL_FILE_EXTENSION
from services.file_operations import save_drill_to_file, load_drill_from_file, default_filename
from utils.logger import loggerRaise

FILE_FILTER = f"Drill Files (*{DRILL_FILE_EXTENSION});;JSON Files (*.json);;All Files (*)"


class FileActions:
	"""Handles all file menu operations"""

	def __init__(self, main_window):
		"""Initialize with reference to main window

		Args:
			main_window: The DrillEditor main window instance
		"""
		self.main_window = main_window

	def new_drill(self):
		"""Start a new drill, discarding history"""
		self.main_window.playback.stop()
		self.main_window.document.create_new_drill()
		self.main_window.editor_state.clear_selection()
		self.main_window.current_file = None
		self.main_window._update_window_title()

	def save_drill(self):
		"""Save the current drill"""
		if self.main_window.current_file:
			self._save_to_file(self.main_window.current_file)
		else:
			self.save_drill_as()

	def save_drill_as(self):
		"""Save the current drill to a new file"""
		drill = self.main_window.document.get_document()
		if drill is None:
			return
		filename, _ = QFileDialog.getSaveFileName(
			self.main_window,
			"Save Drill",
			default_filename(drill),
			FILE_FILTER
		)
		if filename:
			self._save_to_file(filename)

	def _save_to_file(self, filename):
		"""Internal save method

		Args:
			filename: Path to save file to
		"""
		try:
			save_drill_to_file(self.main_window.document.get_document(), filename)
		except Exception as e:
			loggerRaise(e, f"Failed to save file: {e}")

		self.main_window.current_file = filename
		self.main_window._update_window_title()
		self.main_window._add_to_recent_files(filename)
		self.main_window.statusBar().showMessage(f"Saved to {os.path.basename(filename)}", 3000)

	def open_drill(self):
		"""Load a drill chosen from a file dialog"""
		filename, _ = QFileDialog.getOpenFileName(
			self.main_window,
			"Open Drill",
			"",
			FILE_FILTER
		)
		if filename:
			self.load_file(filename)

	def load_file(self, filename):
		"""Load a drill from a path and make it the current document"""
		try:
			drill = load_drill_from_file(filename)
		except Exception as e:
			loggerRaise(e, f"Failed to load file: {e}")

		self.main_window.playback.stop()
		self.main_window.document.load(drill)
		self.main_window.editor_state.clear_selection()
		self.main_window.current_file = filename
		self.main_window._update_window_title()
		self.main_window._add_to_recent_files(filename)
