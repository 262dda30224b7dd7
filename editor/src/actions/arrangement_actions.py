"""Horse arrangement operations - align and distribute"""
import logging

from services.alignment import align_horizontally, align_vertically
from services.distribution import distribute_on_line, distribute_around_circle


class ArrangementActions:
	"""Handles align/distribute commands on the selected horses"""

	def __init__(self, document, editor_state):
		"""Initialize with the document store and editor state

		Args:
			document: DrillDocument being edited
			editor_state: EditorState holding the selection
		"""
		self.document = document
		self.editor_state = editor_state
		self._logger = logging.getLogger('ArrangementActions')

	def selected_horses(self):
		frame = self.document.get_current_frame()
		if frame is None:
			return []
		selected = set(self.editor_state.selected_horse_ids)
		return [h for h in frame.horses if h.id in selected]

	def _apply_positions(self, positions, description):
		if not positions:
			self._logger.debug(f"{description}: nothing to do")
			return False
		frame = self.document.get_current_frame()
		updates = {horse_id: {'position': position} for horse_id, position in positions.items()}
		self.document.batch_update_horses(frame.id, updates, description=description)
		return True

	def align_horizontally(self):
		"""Put the selected horses on one row (mean Y)"""
		return self._apply_positions(align_horizontally(self.selected_horses()), "Align horizontally")

	def align_vertically(self):
		"""Put the selected horses in one column (mean X)"""
		return self._apply_positions(align_vertically(self.selected_horses()), "Align vertically")

	def distribute_on_line(self):
		"""Space the selected horses evenly between the two farthest apart"""
		return self._apply_positions(distribute_on_line(self.selected_horses()), "Distribute evenly")

	def distribute_around_circle(self):
		"""Space the selected horses evenly around their circle"""
		results = distribute_around_circle(self.selected_horses())
		if not results:
			self._logger.debug("Distribute around circle: nothing to do")
			return False
		frame = self.document.get_current_frame()
		updates = {
			horse_id: {'position': result.position, 'direction': result.direction}
			for horse_id, result in results.items()
		}
		self.document.batch_update_horses(frame.id, updates, description="Distribute around circle")
		return True
