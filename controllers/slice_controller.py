#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Slice controller - slice list actions from the editor page

Wraps the session's SliceStore and turns every outcome into a user
notification. The store itself stays silent.
"""

from typing import Iterable, Optional, Sequence

from .base_controller import BaseController
from core.models import MoveDirection, SliceDescriptor
from core.notifications import NotificationCenter
from core.result_types import NoOpReason, StoreOperationResult
from core.session import EditorSession


class SliceController(BaseController):
    """Coordinates slice list edits and their notifications"""

    def __init__(self, session: EditorSession, notifications: Optional[NotificationCenter] = None):
        super().__init__("SliceController", notifications)
        self.session = session

    @property
    def store(self):
        return self.session.slices

    def add_files(self, paths: Optional[Sequence[str]]) -> StoreOperationResult:
        """Append files picked in a dialog or dropped onto the page"""
        result = self.store.append_by_paths(paths)
        message = None
        if result.changed:
            count = len(result.value)
            message = "Added a new file" if count == 1 else f"Added {count} files"
        return self._report("add_files", result, message)

    def add_slice(self, descriptor: SliceDescriptor) -> StoreOperationResult:
        result = self.store.add(descriptor)
        self._log_operation("add_slice", result.value.key, level="debug")
        return result

    def remove_selected(self, keys: Optional[Iterable[str]]) -> StoreOperationResult:
        keys = list(keys or [])
        if not keys:
            self.notifications.warning("Please select the files to remove first")
            return StoreOperationResult.noop(NoOpReason.EMPTY_INPUT)

        return self._report("remove_selected", self.store.remove_many(keys),
                            "Removed the selected files")

    def clear_all(self) -> StoreOperationResult:
        return self._report("clear_all", self.store.clear(), "Cleared all files")

    def move_up(self, key: Optional[str]) -> StoreOperationResult:
        return self._move(key, MoveDirection.UP)

    def move_down(self, key: Optional[str]) -> StoreOperationResult:
        return self._move(key, MoveDirection.DOWN)

    def _move(self, key: Optional[str], direction: MoveDirection) -> StoreOperationResult:
        if not key:
            self.notifications.warning("Please select one file to move")
            return StoreOperationResult.noop(NoOpReason.KEY_NOT_FOUND)

        return self._report(f"move_{direction.value}", self.store.move(key, direction),
                            f"Moved the file {direction.value}")

    def swap(self, key1: str, key2: str) -> StoreOperationResult:
        """Drag-and-drop reorder of two rows; silent on success"""
        return self._report("swap", self.store.swap(key1, key2))

    def update_slice(self, key: str, /, **fields) -> StoreOperationResult:
        """Inline edit of name or trim points; warnings are only logged"""
        result = self.store.update(key, **fields)
        if result.has_warnings():
            self._log_operation("update_slice", '; '.join(result.warnings), level="warning")
        return result
