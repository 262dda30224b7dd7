"""Undo/redo wiring and status bar updates for the drill editor"""

from utils.logger import loggerNotice


class HistoryMixin:
	"""Undo/redo menu state and status bar text"""
	
	def _on_history_changed(self, can_undo, can_redo):
		"""Called when history state changes to update UI"""
		if hasattr(self, 'undo_action'):
			self.undo_action.setEnabled(can_undo)
		if hasattr(self, 'redo_action'):
			self.redo_action.setEnabled(can_redo)
		self._update_status_bar()
	
	def _update_status_bar(self):
		"""Update status bar with last action and frame stats"""
		current_desc = self.document.history.get_current_description()
		left_msg = f"Last action: {current_desc}" if current_desc else "Ready"
		
		drill = self.document.get_document()
		frame_count = len(drill.frames) if drill is not None else 0
		frame = self.document.get_current_frame()
		horse_count = len(frame.horses) if frame is not None else 0
		selected = len(self.editor_state.selected_horse_ids)
		right_msg = (f"Frame {self.document.current_frame_index + 1}/{frame_count} | "
			f"Horses: {horse_count} | Selected: {selected}")
		
		if hasattr(self, 'status_left'):
			self.status_left.setText(left_msg)
		if hasattr(self, 'status_right'):
			self.status_right.setText(right_msg)
	
	def undo(self):
		"""Undo the last action"""
		if self.playback.is_playing:
			loggerNotice("Pause playback to undo")
			return
		self.interaction.cancel()
		if self.document.undo():
			self._prune_selection()
	
	def redo(self):
		"""Redo the last undone action"""
		if self.playback.is_playing:
			loggerNotice("Pause playback to redo")
			return
		self.interaction.cancel()
		if self.document.redo():
			self._prune_selection()
	
	def _prune_selection(self):
		"""Drop selected ids that no longer exist in the current frame"""
		frame = self.document.get_current_frame()
		valid = {h.id for h in frame.horses} if frame is not None else set()
		self.editor_state.set_selection([h for h in self.editor_state.selected_horse_ids if h in valid])
