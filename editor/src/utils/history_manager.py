"""
Undo/Redo History Manager for Drill Team Choreographer

Manages a linear history of reversible operations.
Each entry carries undo/redo callables that restore whole-document
snapshots, so history never needs to understand the change itself.
"""

import logging
import time
import uuid as uuid_module
from dataclasses import dataclass, field
from typing import Callable

from constants import MAX_HISTORY_ENTRIES


@dataclass
class HistoryEntry:
	"""One undoable operation"""
	description: str
	undo: Callable[[], None]
	redo: Callable[[], None]
	id: str = field(default_factory=lambda: str(uuid_module.uuid4()))
	timestamp: float = field(default_factory=time.time)


class HistoryManager:
	"""Manages undo/redo history as a flat list with a cursor"""

	def __init__(self, max_history=MAX_HISTORY_ENTRIES):
		"""
		Initialize the history manager

		Args:
			max_history: Maximum number of entries to keep in history
		"""
		self.max_history = max_history
		self.history = []  # List of HistoryEntry
		self.current_index = -1  # Index of the last applied entry (-1 means nothing applied)
		self._listeners = []  # Callbacks to notify on state changes
		self._logger = logging.getLogger('History')

	def push(self, entry: HistoryEntry):
		"""
		Record an operation that has already been applied

		Any redo branch beyond the cursor is discarded.

		Args:
			entry: The HistoryEntry to record
		"""
		# If we're not at the end of history, remove everything after current position
		if self.current_index < len(self.history) - 1:
			self.history = self.history[:self.current_index + 1]

		self.history.append(entry)
		self.current_index = len(self.history) - 1

		# Trim oldest entries if over capacity
		overflow = len(self.history) - self.max_history
		if overflow > 0:
			self.history = self.history[overflow:]
			self.current_index -= overflow

		self._notify_listeners()

		self._logger.info(f"Pushed: {entry.description} (index: {self.current_index}, total: {len(self.history)})")

	def record(self, description: str, undo: Callable[[], None], redo: Callable[[], None]) -> HistoryEntry:
		"""Build and push an entry from a pair of callables"""
		entry = HistoryEntry(description=description, undo=undo, redo=redo)
		self.push(entry)
		return entry

	def undo(self) -> bool:
		"""
		Revert the entry at the cursor

		Returns:
			True if an entry was undone, False if there was nothing to undo
		"""
		if not self.can_undo():
			self._logger.debug("Cannot undo - at beginning of history")
			return False

		entry = self.history[self.current_index]
		entry.undo()
		self.current_index -= 1

		self._notify_listeners()

		self._logger.info(f"Undo: {entry.description} (index: {self.current_index})")
		return True

	def redo(self) -> bool:
		"""
		Re-apply the entry after the cursor

		Returns:
			True if an entry was redone, False if there was nothing to redo
		"""
		if not self.can_redo():
			self._logger.debug("Cannot redo - at end of history")
			return False

		self.current_index += 1
		entry = self.history[self.current_index]
		entry.redo()

		self._notify_listeners()

		self._logger.info(f"Redo: {entry.description} (index: {self.current_index})")
		return True

	def can_undo(self):
		"""Check if undo is available"""
		return self.current_index >= 0

	def can_redo(self):
		"""Check if redo is available"""
		return self.current_index < len(self.history) - 1

	def clear(self):
		"""Clear all history"""
		self.history = []
		self.current_index = -1
		self._notify_listeners()
		self._logger.info("History cleared")

	def __len__(self):
		return len(self.history)

	def add_listener(self, callback):
		"""
		Add a listener to be notified when history state changes

		Args:
			callback: Function to call when history changes (receives can_undo, can_redo)
		"""
		self._listeners.append(callback)

	def remove_listener(self, callback):
		"""Remove a listener"""
		if callback in self._listeners:
			self._listeners.remove(callback)

	def _notify_listeners(self):
		"""Notify all listeners of history state change"""
		for callback in list(self._listeners):
			try:
				callback(self.can_undo(), self.can_redo())
			except Exception as e:
				self._logger.warning(f"Error notifying listener: {e}")

	def get_current_description(self):
		"""Get the description of the last applied entry"""
		if 0 <= self.current_index < len(self.history):
			return self.history[self.current_index].description
		return ""

	def get_redo_description(self):
		"""Get the description of the entry that redo would re-apply"""
		if self.can_redo():
			return self.history[self.current_index + 1].description
		return ""
