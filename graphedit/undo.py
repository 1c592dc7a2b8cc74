"""Undo history that stores compressed differences between scene snapshots."""

from __future__ import annotations

import zlib
from dataclasses import dataclass
from typing import Protocol


class SnapshotScene(Protocol):
    """A scene that can serialize its state to bytes and restore it."""

    def store_state(self) -> bytes: ...

    def restore_state(self, data: bytes) -> None: ...


@dataclass(frozen=True)
class _Command:
    index: int
    size_to_replace: int
    data: bytes


class DiffUndoManager:
    """Keeps undo and redo steps as compressed byte-range replacements."""

    def __init__(self, scene: SnapshotScene) -> None:
        self._scene = scene
        self._undo_stack: list[_Command] = []
        self._redo_stack: list[_Command] = []
        self._undo_stack_temp: list[_Command] = []
        self._redo_stack_temp: list[_Command] = []
        self._last_state = b""

    def reset(self) -> None:
        """Forget all history."""
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._undo_stack_temp.clear()
        self._redo_stack_temp.clear()
        self._last_state = b""

    def add_state(self) -> None:
        """Record the scene's current state as a new undo step."""
        self._redo_stack.clear()
        self._undo_stack_temp.clear()

        snap = self._scene.store_state()
        last = self._last_state

        if not last and not self._undo_stack and not self._redo_stack:
            self._last_state = snap
            return

        left = 0
        common = min(len(snap), len(last))
        while left < common and snap[left] == last[left]:
            left += 1

        right_last = len(last) - 1
        right_snap = len(snap) - 1
        while (
            right_last > left
            and right_snap > left
            and snap[right_snap] == last[right_last]
        ):
            right_last -= 1
            right_snap -= 1

        len_last = right_last - left + 1
        len_snap = right_snap - left + 1

        self._undo_stack.append(
            _Command(left, len_snap, zlib.compress(last[left : left + len_last]))
        )
        self._redo_stack_temp.append(
            _Command(left, len_last, zlib.compress(snap[left : left + len_snap]))
        )
        self._last_state = snap

    def revert_state(self) -> None:
        """Restore the scene to the last recorded state."""
        self._scene.restore_state(self._last_state)

    def _apply(self, command: _Command) -> None:
        start = command.index
        self._last_state = (
            self._last_state[:start]
            + zlib.decompress(command.data)
            + self._last_state[start + command.size_to_replace :]
        )
        self._scene.restore_state(self._last_state)

    def undo(self) -> None:
        """Step back one state, if there is one."""
        if not self._undo_stack:
            return
        command = self._undo_stack.pop()
        self._apply(command)
        self._redo_stack.append(self._redo_stack_temp.pop())
        self._undo_stack_temp.append(command)

    def redo(self) -> None:
        """Step forward one state, if there is one."""
        if not self._redo_stack:
            return
        command = self._redo_stack.pop()
        self._apply(command)
        self._undo_stack.append(self._undo_stack_temp.pop())
        self._redo_stack_temp.append(command)

    def available_undo_count(self) -> int:
        """Number of steps that can be undone."""
        return len(self._undo_stack)

    def available_redo_count(self) -> int:
        """Number of steps that can be redone."""
        return len(self._redo_stack)