"""Configuration management for the drill editor"""

import os
import json
import logging
from PyQt5.QtWidgets import QMessageBox

from constants import DEFAULT_PLAYBACK_SPEED, MAX_RECENT_FILES
from utils.logger import loggerRaise

_logger = logging.getLogger('Config')


class ConfigMixin:
	"""Configuration file operations, recent files, and window title"""
	
	def _init_config_paths(self, config_dir=None):
		self.config_dir = config_dir or os.path.join(os.path.expanduser("~"), ".drillteam")
		self.config_file = os.path.join(self.config_dir, "config.json")
		self.recent_files = []
		self.max_recent_files = MAX_RECENT_FILES
		self.default_playback_speed = DEFAULT_PLAYBACK_SPEED
		self.show_direction_arrows = True
	
	def _load_config(self):
		"""Load recent files and settings from config file"""
		if not os.path.exists(self.config_file):
			return
		try:
			with open(self.config_file, 'r', encoding='utf-8') as f:
				config = json.load(f)
		except (OSError, ValueError) as e:
			# A broken config should not stop the editor from starting
			_logger.warning(f"Ignoring unreadable config {self.config_file}: {e}")
			return
		
		self.recent_files = [f for f in config.get('recent_files', []) if os.path.exists(f)]
		self.default_playback_speed = float(config.get('default_playback_speed', DEFAULT_PLAYBACK_SPEED))
		self.show_direction_arrows = bool(config.get('show_direction_arrows', True))
	
	def _save_config(self):
		"""Save recent files and settings to config file"""
		try:
			os.makedirs(self.config_dir, exist_ok=True)
			
			config = {
				'recent_files': self.recent_files[:self.max_recent_files],
				'default_playback_speed': self.playback.playback_speed if hasattr(self, 'playback') else self.default_playback_speed,
				'show_direction_arrows': self.editor_state.show_direction_arrows if hasattr(self, 'editor_state') else self.show_direction_arrows,
			}
			
			with open(self.config_file, 'w', encoding='utf-8') as f:
				json.dump(config, f, indent=2)
		except Exception as e:
			loggerRaise(e, "Error saving config")
	
	def _add_to_recent_files(self, filepath):
		"""Add a file to the front of the recent files list"""
		if filepath in self.recent_files:
			self.recent_files.remove(filepath)
		self.recent_files.insert(0, filepath)
		self.recent_files = self.recent_files[:self.max_recent_files]
		
		if hasattr(self, 'recent_menu'):
			self._update_recent_files_menu()
		
		self._save_config()
	
	def _update_recent_files_menu(self):
		"""Update the Recent Files submenu"""
		self.recent_menu.clear()
		
		if not self.recent_files:
			no_recent = self.recent_menu.addAction("No recent files")
			no_recent.setEnabled(False)
		else:
			for filepath in self.recent_files:
				if os.path.exists(filepath):
					action = self.recent_menu.addAction(os.path.basename(filepath))
					action.setToolTip(filepath)
					# Default argument captures filepath
					action.triggered.connect(lambda checked, f=filepath: self._open_recent_file(f))
			
			self.recent_menu.addSeparator()
			clear_action = self.recent_menu.addAction("Clear Recent Files")
			clear_action.triggered.connect(self._clear_recent_files)
	
	def _clear_recent_files(self):
		self.recent_files = []
		self._update_recent_files_menu()
		self._save_config()
	
	def _open_recent_file(self, filepath):
		"""Open a file from the recent files list"""
		if not os.path.exists(filepath):
			QMessageBox.warning(self, "File Not Found", f"The file no longer exists:\n{filepath}")
			self.recent_files.remove(filepath)
			self._update_recent_files_menu()
			self._save_config()
			return
		
		self.file_actions.load_file(filepath)
	
	def _update_window_title(self):
		"""Update window title with current file and drill name"""
		drill = self.document.get_document()
		name = drill.name if drill is not None else "Untitled"
		if self.current_file:
			self.setWindowTitle(f"{os.path.basename(self.current_file)} ({name}) - Drill Team Choreographer")
		else:
			self.setWindowTitle(f"{name} - Drill Team Choreographer")
