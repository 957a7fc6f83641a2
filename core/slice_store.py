#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Ordered, uniquely-keyed collection of slice descriptors

The store is the only writer of ``order``: every mutation that changes
positions renumbers the whole list so that orders are exactly 1..N in
sequence order. Entries are frozen records; callers only ever see them or
tuples of them.
"""

import logging
import random
import string
import time
from dataclasses import replace
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple, Union

from PySide6.QtCore import QObject, Signal

from .models import MoveDirection, SliceDescriptor
from .path_utils import last_path_segment
from .result_types import NoOpReason, StoreOperationResult

# Fields update() is allowed to merge
EDITABLE_FIELDS = ('file_name', 'start_time', 'end_time')

# Fields update() accepts in its input but never applies
PROTECTED_FIELDS = ('key', 'order', 'file_path')

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
_SUFFIX_LENGTH = 9


def _random_suffix(length: int = _SUFFIX_LENGTH) -> str:
    return ''.join(random.choices(_SUFFIX_ALPHABET, k=length))


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class SliceStore(QObject):
    """
    Session-scoped slice collection

    Mutations never raise for user-level misuse; they return a
    StoreOperationResult that is either applied or a no-op with a reason.
    ``slices_changed`` fires with the new snapshot after every applied
    mutation.
    """

    slices_changed = Signal(object)  # Tuple[SliceDescriptor, ...]

    def __init__(self, parent=None):
        super().__init__(parent)
        self.logger = logging.getLogger('SimpleCut.SliceStore')
        self._slices: List[SliceDescriptor] = []
        self._index: Dict[str, int] = {}
        self._issued_keys: Set[str] = set()

    # Queries

    def snapshot(self) -> Tuple[SliceDescriptor, ...]:
        """Immutable view of the current collection in order"""
        return tuple(self._slices)

    def get(self, key: str) -> Optional[SliceDescriptor]:
        index = self._index.get(key)
        return self._slices[index] if index is not None else None

    def index_of(self, key: str) -> Optional[int]:
        """0-based position of ``key``, or None"""
        return self._index.get(key)

    def keys(self) -> List[str]:
        return [s.key for s in self._slices]

    @property
    def is_empty(self) -> bool:
        return not self._slices

    def __len__(self) -> int:
        return len(self._slices)

    def __iter__(self) -> Iterator[SliceDescriptor]:
        return iter(tuple(self._slices))

    def __contains__(self, key: object) -> bool:
        return key in self._index

    # Mutations

    def add(self, descriptor: SliceDescriptor) -> StoreOperationResult:
        """
        Append one descriptor

        The supplied order is ignored and set to count + 1. A missing or
        duplicate key is replaced by a freshly generated one.
        """
        warnings = []
        key = descriptor.key
        if not key or key in self._index:
            if key:
                warnings.append(f"Duplicate key '{key}' replaced with a generated key")
            key = self._generate_key(descriptor.file_path or 'video')

        stored = replace(descriptor, key=key, order=len(self._slices) + 1)
        self._slices.append(stored)
        self._issued_keys.add(key)
        self._commit(f"Added slice {key}")
        return StoreOperationResult.applied(stored, warnings=warnings, key=key)

    def append_by_paths(self, paths: Optional[Sequence[str]]) -> StoreOperationResult:
        """
        Create one descriptor per source path and append them in order

        Returns the tuple of created descriptors as the value.
        """
        if not paths:
            return StoreOperationResult.noop(NoOpReason.EMPTY_INPUT)

        timestamp = _epoch_ms()
        created = []
        warnings = []
        for index, path in enumerate(paths):
            if path is None or not str(path).strip():
                warnings.append(f"Skipped blank path at position {index}")
                continue
            path = str(path)
            key = self._generate_batch_key(timestamp, index)
            descriptor = SliceDescriptor(
                key=key,
                order=len(self._slices) + 1,
                file_name=last_path_segment(path),
                file_path=path,
            )
            self._slices.append(descriptor)
            self._issued_keys.add(key)
            created.append(descriptor)

        if not created:
            return StoreOperationResult.noop(NoOpReason.EMPTY_INPUT, warnings=warnings)

        self._commit(f"Appended {len(created)} slice(s)")
        return StoreOperationResult.applied(tuple(created), warnings=warnings, count=len(created))

    def remove(self, key: str) -> StoreOperationResult:
        index = self._index.get(key)
        if index is None:
            return StoreOperationResult.noop(NoOpReason.KEY_NOT_FOUND, key=key)

        removed = self._slices.pop(index)
        self._renumber()
        self._commit(f"Removed slice {key}")
        return StoreOperationResult.applied(removed, key=key)

    def remove_many(self, keys: Iterable[str]) -> StoreOperationResult:
        """Remove every present key in a single mutation"""
        wanted = set(keys or ())
        if not wanted:
            return StoreOperationResult.noop(NoOpReason.EMPTY_INPUT)

        removed = tuple(s for s in self._slices if s.key in wanted)
        if not removed:
            return StoreOperationResult.noop(NoOpReason.KEY_NOT_FOUND)

        self._slices = [s for s in self._slices if s.key not in wanted]
        self._renumber()
        missing = wanted - {s.key for s in removed}
        warnings = [f"Key not found: {key}" for key in sorted(missing)]
        self._commit(f"Removed {len(removed)} slice(s)")
        return StoreOperationResult.applied(removed, warnings=warnings, count=len(removed))

    def update(self, key: str, /, **fields) -> StoreOperationResult:
        """
        Merge editable fields into one descriptor

        Only file_name, start_time and end_time are applied. key, order and
        file_path are reported as warnings and left untouched, as are
        unknown names.
        """
        index = self._index.get(key)
        if index is None:
            return StoreOperationResult.noop(NoOpReason.KEY_NOT_FOUND, key=key)

        warnings = []
        changes = {}
        for name, value in fields.items():
            if name in EDITABLE_FIELDS:
                changes[name] = value
            elif name in PROTECTED_FIELDS:
                warnings.append(f"Field '{name}' is managed by the store and was ignored")
            else:
                warnings.append(f"Unknown field '{name}' was ignored")

        if warnings:
            self.logger.warning(f"update({key}): {'; '.join(warnings)}")

        if not changes:
            return StoreOperationResult.noop(NoOpReason.UNKNOWN_FIELD, warnings=warnings, key=key)

        updated = replace(self._slices[index], **changes)
        self._slices[index] = updated
        self._commit(f"Updated slice {key}: {', '.join(sorted(changes))}")
        return StoreOperationResult.applied(updated, warnings=warnings, key=key)

    def clear(self) -> StoreOperationResult:
        if not self._slices:
            return StoreOperationResult.noop(NoOpReason.ALREADY_EMPTY)

        count = len(self._slices)
        self._slices.clear()
        self._commit("Cleared all slices")
        return StoreOperationResult.applied(count, count=count)

    def move(self, key: str, direction: Union[MoveDirection, str]) -> StoreOperationResult:
        """Swap an entry with its neighbour above or below"""
        if not isinstance(direction, MoveDirection):
            try:
                direction = MoveDirection(str(direction).lower())
            except ValueError:
                return StoreOperationResult.noop(
                    NoOpReason.INVALID_VALUE,
                    warnings=[f"Unknown move direction: {direction}"],
                    key=key
                )

        index = self._index.get(key)
        if index is None:
            return StoreOperationResult.noop(NoOpReason.KEY_NOT_FOUND, key=key)

        if direction == MoveDirection.UP:
            if index == 0:
                return StoreOperationResult.noop(NoOpReason.AT_TOP, key=key)
            target = index - 1
        else:
            if index == len(self._slices) - 1:
                return StoreOperationResult.noop(NoOpReason.AT_BOTTOM, key=key)
            target = index + 1

        self._slices[index], self._slices[target] = self._slices[target], self._slices[index]
        self._renumber()
        self._commit(f"Moved slice {key} {direction.value}")
        return StoreOperationResult.applied(self._slices[target], key=key)

    def swap(self, key1: str, key2: str) -> StoreOperationResult:
        """Exchange the positions of two entries"""
        if key1 == key2:
            return StoreOperationResult.noop(NoOpReason.SAME_KEY, key=key1)

        first = self._index.get(key1)
        second = self._index.get(key2)
        if first is None or second is None:
            missing = key1 if first is None else key2
            return StoreOperationResult.noop(NoOpReason.KEY_NOT_FOUND, key=missing)

        self._slices[first], self._slices[second] = self._slices[second], self._slices[first]
        self._renumber()
        self._commit(f"Swapped slices {key1} and {key2}")
        return StoreOperationResult.applied(self.snapshot())

    # Internals

    def _renumber(self):
        self._slices = [
            s if s.order == position else replace(s, order=position)
            for position, s in enumerate(self._slices, start=1)
        ]

    def _commit(self, message: str):
        self._index = {s.key: i for i, s in enumerate(self._slices)}
        self.logger.debug(message)
        self.slices_changed.emit(self.snapshot())

    def _key_taken(self, key: str) -> bool:
        return key in self._index or key in self._issued_keys

    def _generate_key(self, prefix: str) -> str:
        while True:
            key = f"{prefix}_{_epoch_ms()}_{_random_suffix()}"
            if not self._key_taken(key):
                return key

    def _generate_batch_key(self, timestamp: int, index: int) -> str:
        while True:
            key = f"video_{timestamp}_{index}_{_random_suffix()}"
            if not self._key_taken(key):
                return key
