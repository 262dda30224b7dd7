"""Menu bar creation and menu action handlers for the drill editor"""

from PyQt5.QtWidgets import QMessageBox, QInputDialog, QShortcut
from PyQt5.QtGui import QKeySequence
from PyQt5.QtCore import Qt

from constants import PLAYBACK_SPEEDS
from models.transform import Vec2
from utils.logger import loggerNotice


class MenuMixin:
	"""Menu bar and menu action handlers"""
	
	def _create_menu_bar(self):
		"""Create the menu bar with File, Edit, Frame, Arrange, View, Playback menus"""
		menubar = self.menuBar()
		
		# File Menu
		file_menu = menubar.addMenu("&File")
		
		new_action = file_menu.addAction("&New")
		new_action.setShortcut("Ctrl+N")
		new_action.triggered.connect(self.file_actions.new_drill)
		
		open_action = file_menu.addAction("&Open...")
		open_action.setShortcut("Ctrl+O")
		open_action.triggered.connect(self.file_actions.open_drill)
		
		self.recent_menu = file_menu.addMenu("Recent Files")
		self._update_recent_files_menu()
		
		file_menu.addSeparator()
		
		save_action = file_menu.addAction("&Save")
		save_action.setShortcut("Ctrl+S")
		save_action.triggered.connect(self.file_actions.save_drill)
		
		save_as_action = file_menu.addAction("Save &As...")
		save_as_action.setShortcut("Ctrl+Shift+S")
		save_as_action.triggered.connect(self.file_actions.save_drill_as)
		
		file_menu.addSeparator()
		
		exit_action = file_menu.addAction("E&xit")
		exit_action.setShortcut("Alt+F4")
		exit_action.triggered.connect(self.close)
		
		# Edit Menu
		self.edit_menu = menubar.addMenu("&Edit")
		
		self.undo_action = self.edit_menu.addAction("&Undo")
		self.undo_action.setShortcut("Ctrl+Z")
		self.undo_action.triggered.connect(self.undo)
		self.undo_action.setEnabled(False)
		
		self.redo_action = self.edit_menu.addAction("&Redo")
		self.redo_action.setShortcuts([QKeySequence("Ctrl+Shift+Z"), QKeySequence("Ctrl+Y")])
		self.redo_action.triggered.connect(self.redo)
		self.redo_action.setEnabled(False)
		
		self.edit_menu.addSeparator()
		
		add_horse_action = self.edit_menu.addAction("Add &Horse")
		add_horse_action.setShortcut("Ctrl+H")
		add_horse_action.triggered.connect(self._add_horse)
		
		self.remove_horses_action = self.edit_menu.addAction("&Remove Selected Horses")
		self.remove_horses_action.setShortcut(Qt.Key_Delete)
		self.remove_horses_action.triggered.connect(self._remove_selected_horses)
		
		select_all_action = self.edit_menu.addAction("Select &All")
		select_all_action.setShortcut("Ctrl+A")
		select_all_action.triggered.connect(self._select_all)
		
		# Frame Menu
		frame_menu = menubar.addMenu("F&rame")
		
		add_frame_action = frame_menu.addAction("&Add Frame")
		add_frame_action.setShortcut("Ctrl+Shift+N")
		add_frame_action.triggered.connect(self._add_frame)
		
		duplicate_frame_action = frame_menu.addAction("&Duplicate Frame")
		duplicate_frame_action.triggered.connect(self._duplicate_frame)
		
		delete_frame_action = frame_menu.addAction("De&lete Frame")
		delete_frame_action.triggered.connect(self._delete_frame)
		
		frame_menu.addSeparator()
		
		previous_frame_action = frame_menu.addAction("&Previous Frame")
		previous_frame_action.setShortcut("Ctrl+Left")
		previous_frame_action.triggered.connect(lambda: self._step_frame(-1))
		
		next_frame_action = frame_menu.addAction("&Next Frame")
		next_frame_action.setShortcut("Ctrl+Right")
		next_frame_action.triggered.connect(lambda: self._step_frame(1))
		
		frame_menu.addSeparator()
		
		duration_action = frame_menu.addAction("Set D&uration...")
		duration_action.triggered.connect(self._set_frame_duration)
		
		auto_duration_action = frame_menu.addAction("Auto Duration from &Movement")
		auto_duration_action.triggered.connect(self._auto_frame_duration)
		
		maneuver_action = frame_menu.addAction("&Maneuver Name...")
		maneuver_action.triggered.connect(self._set_maneuver_name)
		
		# Arrange Menu
		arrange_menu = menubar.addMenu("&Arrange")
		
		self.align_h_action = arrange_menu.addAction("Align &Horizontally")
		self.align_h_action.setShortcut("Ctrl+Shift+H")
		self.align_h_action.triggered.connect(lambda: self._arrange('align_horizontally'))
		
		self.align_v_action = arrange_menu.addAction("Align &Vertically")
		self.align_v_action.setShortcut("Ctrl+Shift+V")
		self.align_v_action.triggered.connect(lambda: self._arrange('align_vertically'))
		
		arrange_menu.addSeparator()
		
		self.distribute_line_action = arrange_menu.addAction("Distribute on &Line")
		self.distribute_line_action.setShortcut("Ctrl+Alt+D")
		self.distribute_line_action.triggered.connect(lambda: self._arrange('distribute_on_line'))
		
		self.distribute_circle_action = arrange_menu.addAction("Distribute on &Circle")
		self.distribute_circle_action.setShortcut("Ctrl+Alt+C")
		self.distribute_circle_action.triggered.connect(lambda: self._arrange('distribute_around_circle'))
		
		# View Menu
		view_menu = menubar.addMenu("&View")
		
		self.arrows_action = view_menu.addAction("Show Direction &Arrows")
		self.arrows_action.setCheckable(True)
		self.arrows_action.setChecked(self.editor_state.show_direction_arrows)
		self.arrows_action.toggled.connect(self._on_arrows_toggled)
		
		self.snap_action = view_menu.addAction("&Snap to Grid")
		self.snap_action.setCheckable(True)
		self.snap_action.setChecked(self.editor_state.snap_to_grid)
		self.snap_action.toggled.connect(self._on_snap_toggled)
		
		view_menu.addSeparator()
		
		zoom_in_action = view_menu.addAction("Zoom &In")
		zoom_in_action.setShortcut("Ctrl+=")
		zoom_in_action.triggered.connect(lambda: self.canvas.zoom_in())
		
		zoom_out_action = view_menu.addAction("Zoom &Out")
		zoom_out_action.setShortcut("Ctrl+-")
		zoom_out_action.triggered.connect(lambda: self.canvas.zoom_out())
		
		zoom_reset_action = view_menu.addAction("&Reset View")
		zoom_reset_action.setShortcut("Ctrl+0")
		zoom_reset_action.triggered.connect(self.canvas.zoom_reset)
		
		# Playback Menu
		playback_menu = menubar.addMenu("&Playback")
		
		self.play_action = playback_menu.addAction("&Play / Pause")
		self.play_action.triggered.connect(self.playback.toggle)
		
		stop_action = playback_menu.addAction("&Stop")
		stop_action.triggered.connect(self.playback.stop)
		
		speed_menu = playback_menu.addMenu("Playback S&peed")
		for speed in PLAYBACK_SPEEDS:
			action = speed_menu.addAction(f"x{speed}")
			action.triggered.connect(lambda checked, s=speed: self.playback.set_playback_speed(s))
		
		# Space must work while the canvas has focus
		self.play_shortcut = QShortcut(QKeySequence(Qt.Key_Space), self)
		self.play_shortcut.setContext(Qt.ApplicationShortcut)
		self.play_shortcut.activated.connect(self.playback.toggle)
		
		# Help Menu
		help_menu = menubar.addMenu("&Help")
		about_action = help_menu.addAction("&About")
		about_action.triggered.connect(self._show_about)
	
	# ========================================
	# Edit handlers
	# ========================================
	
	def _editable_frame(self):
		"""Current frame, or None while playing"""
		if self.playback.is_playing:
			loggerNotice("Pause playback to edit")
			return None
		return self.document.get_current_frame()
	
	def _add_horse(self):
		frame = self._editable_frame()
		if frame is None:
			return
		horse = self.document.add_horse(frame.id, Vec2(0.0, 0.0))
		if horse is not None:
			self.editor_state.set_selection([horse.id])
	
	def _remove_selected_horses(self):
		frame = self._editable_frame()
		if frame is None:
			return
		selected = [h for h in self.editor_state.selected_horse_ids if frame.get_horse(h) is not None]
		self.document.remove_horses(frame.id, selected)
		self.editor_state.clear_selection()
	
	def _select_all(self):
		frame = self._editable_frame()
		if frame is not None:
			self.editor_state.set_selection([h.id for h in frame.horses])
	
	def _arrange(self, operation):
		if self._editable_frame() is None:
			return
		if not getattr(self.arrangement_actions, operation)():
			loggerNotice("Not enough horses selected to arrange")
	
	# ========================================
	# Frame handlers
	# ========================================
	
	def _add_frame(self):
		if self._editable_frame() is None:
			return
		self.document.add_frame()
	
	def _duplicate_frame(self):
		frame = self._editable_frame()
		if frame is None:
			return
		self.document.duplicate_frame(frame.id)
	
	def _delete_frame(self):
		frame = self._editable_frame()
		if frame is None:
			return
		if not self.document.delete_frame(frame.id):
			loggerNotice("A drill needs at least one frame")
	
	def _step_frame(self, step):
		if self.playback.is_playing:
			return
		self.editor_state.clear_selection()
		self.document.set_current_frame(self.document.current_frame_index + step)
	
	def _set_frame_duration(self):
		frame = self._editable_frame()
		if frame is None:
			return
		seconds, ok = QInputDialog.getDouble(self, "Frame Duration", "Seconds:", frame.duration, 0.1, 3600.0, 1)
		if ok:
			self.document.set_frame_duration(frame.id, seconds)
	
	def _auto_frame_duration(self):
		frame = self._editable_frame()
		if frame is not None:
			seconds = self.document.auto_frame_duration(frame.id)
			self.statusBar().showMessage(f"Frame duration set to {seconds:.1f}s", 3000)
	
	def _set_maneuver_name(self):
		frame = self._editable_frame()
		if frame is None:
			return
		name, ok = QInputDialog.getText(self, "Maneuver Name", "Name:", text=frame.maneuver_name or "")
		if ok:
			self.document.update_frame(frame.id, maneuver_name=name or None)
	
	# ========================================
	# View handlers
	# ========================================
	
	def _on_arrows_toggled(self, checked):
		self.editor_state.show_direction_arrows = checked
		self.canvas.update()
		self._save_config()
	
	def _on_snap_toggled(self, checked):
		self.editor_state.snap_to_grid = checked
	
	def _show_about(self):
		QMessageBox.about(
			self,
			"About Drill Team Choreographer",
			"Drill Team Choreographer\n\n"
			"Plan equestrian drill team formations frame by frame and play them back."
		)
