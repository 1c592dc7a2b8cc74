"""Document session state: settings, recent files and running instances."""

from __future__ import annotations

import copy
import errno
import json
import os
from typing import Any, Callable, Protocol

from graphedit.documents import DocumentRegistry
from graphedit.graph import GraphFormatError
from graphedit.platform import running_pids

_RECENT_KEY = "recentFiles"
_INSTANCES_KEY = "instances"
_NO_FILE_TITLE = "New File"


def _file_suffix(file_name: str) -> str:
    base = file_name.replace("\\", "/").rsplit("/", 1)[-1]
    head, dot, tail = base.rpartition(".")
    return tail.lower() if dot else ""


def _same_file(first: str, second: str) -> bool:
    if os.name == "nt":
        return first.lower() == second.lower()
    return first == second


class Settings:
    """A key-value store persisted as a JSON file."""

    def __init__(self, path: str | None = None, values: dict[str, Any] | None = None) -> None:
        self.path = path
        self._values: dict[str, Any] = copy.deepcopy(values) if values else {}

    @classmethod
    def load(cls, path: str) -> "Settings":
        """Open the settings stored at ``path``; a missing file gives empty settings."""
        try:
            with open(path, encoding="utf-8") as stream:
                values = json.load(stream)
        except FileNotFoundError:
            values = {}
        if not isinstance(values, dict):
            raise ValueError(f"{path}: settings must be a JSON object")
        return cls(path, values)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a copy of the value under ``key``, or ``default``."""
        return copy.deepcopy(self._values.get(key, default))

    def set(self, key: str, value: Any) -> None:
        """Store a copy of ``value`` under ``key``."""
        self._values[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        """Remove ``key`` if present."""
        self._values.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def sync(self) -> None:
        """Write the settings to their file, if they have one."""
        if self.path is None:
            return
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        temp_path = self.path + ".tmp"
        with open(temp_path, "w", encoding="utf-8") as stream:
            json.dump(self._values, stream, indent=2, sort_keys=True)
        os.replace(temp_path, self.path)


class RecentFiles:
    """The most recently used files, newest first."""

    def __init__(self, settings: Settings, limit: int = 20) -> None:
        self._settings = settings
        self.limit = limit

    def files(self) -> list[str]:
        """The recent files, newest first."""
        return list(self._settings.get(_RECENT_KEY, []))

    def touch(self, file_name: str) -> None:
        """Move ``file_name`` to the front, adding it if new."""
        if not file_name:
            return
        files = self.files()
        if file_name in files:
            if files.index(file_name) == 0:
                return
            files.remove(file_name)
            files.insert(0, file_name)
        else:
            files.insert(0, file_name)
            if len(files) > self.limit:
                files.pop()
        self._settings.set(_RECENT_KEY, files)

    def remove(self, file_name: str) -> bool:
        """Remove every entry equal to ``file_name``; True if any was removed."""
        files = self.files()
        kept = [name for name in files if name != file_name]
        if len(kept) == len(files):
            return False
        self._settings.set(_RECENT_KEY, kept)
        return True

    def remove_at(self, index: int) -> None:
        """Remove the entry at ``index``; raises IndexError if out of range."""
        files = self.files()
        del files[index]
        self._settings.set(_RECENT_KEY, files)

    def clear(self) -> None:
        """Forget all recent files."""
        self._settings.remove(_RECENT_KEY)


def _pid_of(key: str) -> int:
    try:
        return int(key)
    except ValueError:
        return 0


class InstanceRegistry:
    """Records of the running application instances, keyed by process id."""

    def __init__(
        self,
        settings: Settings,
        pid: int | str,
        living_pids: Callable[[], set[int]] | None = None,
    ) -> None:
        self._settings = settings
        self.pid = str(pid)
        self._living_pids = living_pids or running_pids

    def active(self) -> dict[str, dict[str, Any]]:
        """Return the records of live instances, dropping those of dead ones."""
        instances = self._settings.get(_INSTANCES_KEY, {})
        living = self._living_pids()
        alive = {key: value for key, value in instances.items() if _pid_of(key) in living}
        if len(alive) != len(instances):
            self._settings.set(_INSTANCES_KEY, alive)
        return alive

    def update(self, title: str, file_name: str) -> None:
        """Store the title and file of this instance."""
        instances = self._settings.get(_INSTANCES_KEY, {})
        entry = instances.get(self.pid, {})
        entry.update(title=title, file=file_name, spid=self.pid)
        instances[self.pid] = entry
        self._settings.set(_INSTANCES_KEY, instances)

    def remove(self) -> None:
        """Remove the record of this instance."""
        instances = self._settings.get(_INSTANCES_KEY, {})
        instances.pop(self.pid, None)
        self._settings.set(_INSTANCES_KEY, instances)

    def find_by_file(self, file_name: str) -> dict[str, Any] | None:
        """Return the record of a live instance that has ``file_name`` open, or None."""
        for entry in self.active().values():
            if _same_file(str(entry.get("file", "")), file_name):
                return entry
        return None


class _Backend(Protocol):
    def create(self, doc_type: str) -> bool: ...

    def open(self, file_name: str, doc_type: str) -> str | None: ...

    def save(self, file_name: str, doc_type: str) -> bool: ...


class DocumentSession:
    """The document held by one application instance and its file bookkeeping.

    The backend creates, opens and saves documents: ``open`` returns the type
    of the document it opened (None on failure) and may raise on bad input;
    ``create`` and ``save`` return whether they succeeded.
    """

    def __init__(
        self,
        registry: DocumentRegistry,
        settings: Settings,
        backend: _Backend,
        pid: int | str | None = None,
    ) -> None:
        self.registry = registry
        self.settings = settings
        self.backend = backend
        self.pid = str(os.getpid() if pid is None else pid)
        self.recent = RecentFiles(settings)
        self.instances = InstanceRegistry(settings, self.pid)

        self.current_file_name = ""
        self.current_doc_type = ""
        self.is_changed = False
        self.last_path = str(settings.get("lastPath", ""))
        self.last_save_filter = ""

    def title(self) -> str:
        """The title of the document: file name or "New File", starred if changed."""
        text = self.current_file_name or _NO_FILE_TITLE
        return f"* {text}" if self.is_changed else text

    def _on_current_file_changed(self) -> None:
        self.instances.update(self.title(), self.current_file_name)
        self.recent.touch(self.current_file_name)

    def create_document(self, doc_type: str) -> bool:
        """Create a new document in place.

        Returns False when a document is already held or the backend cannot
        create this type.
        """
        if self.current_doc_type:
            return False
        if not self.backend.create(doc_type):
            return False
        self.current_doc_type = doc_type
        self.is_changed = False
        self._on_current_file_changed()
        return True

    def open_document(self, file_name: str) -> bool:
        """Open ``file_name`` in this session.

        Returns True if the file is now open here or in another live instance,
        False if this session already holds a document.
        """
        if not os.path.exists(file_name):
            raise FileNotFoundError(
                errno.ENOENT, "Document file does not exist or not accessible.", file_name
            )
        normalized = os.path.realpath(file_name)

        if self.current_file_name and _same_file(normalized, self.current_file_name):
            return True
        if self.instances.find_by_file(normalized) is not None:
            return True
        if self.current_doc_type:
            return False

        match = self.registry.find_format(normalized)
        doc_type = match.document.type if match else ""
        opened_type = self.backend.open(normalized, doc_type)
        if opened_type is None:
            raise GraphFormatError("Document cannot be opened. Check access rights and path.")

        self.current_file_name = normalized
        self.current_doc_type = opened_type
        self.is_changed = False
        self.last_path = os.path.dirname(normalized)
        self._on_current_file_changed()
        return True

    def _do_save(self, file_name: str, selected_filter: str) -> bool:
        if not self.backend.save(file_name, self.current_doc_type):
            raise GraphFormatError("Document cannot be saved. Check access rights and path.")
        self.current_file_name = file_name
        self.is_changed = False
        self.last_save_filter = selected_filter
        self.last_path = os.path.dirname(os.path.abspath(file_name))
        self._on_current_file_changed()
        return True

    def save(self) -> bool:
        """Save the document under its current file name."""
        if not self.current_file_name:
            raise ValueError("the document has no file name yet; use save_as")
        return self._do_save(self.current_file_name, "")

    def save_as(self, file_name: str, selected_filter: str = "") -> bool:
        """Save the document as ``file_name``.

        A name without a suffix gets the default suffix of ``selected_filter``.
        """
        if not self.current_doc_type:
            return True
        _, to_suffix = self.registry.save_filters(self.current_doc_type)
        if not _file_suffix(file_name) and selected_filter in to_suffix:
            file_name = f"{file_name}.{to_suffix[selected_filter]}"
        return self._do_save(os.path.normpath(file_name), selected_filter)

    def mark_changed(self, changed: bool = True) -> None:
        """Set whether the document has unsaved changes."""
        if self.is_changed == changed:
            return
        self.is_changed = changed
        self._on_current_file_changed()

    def process_args(self, args: list[str]) -> bool:
        """Act on command line arguments (program name first).

        ``create TYPE`` creates, ``open FILE`` or a lone ``FILE`` opens.
        """
        if len(args) >= 3:
            if args[1] == "create":
                return self.create_document(args[2])
            if args[1] == "open":
                return self.open_document(args[2])
        if len(args) == 2:
            return self.open_document(args[1])
        self._on_current_file_changed()
        return True