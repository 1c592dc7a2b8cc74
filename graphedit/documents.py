"""Document types, their file formats and the file dialog filters built from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple


def cut_last_suffix(file_name: str) -> str:
    """Return ``file_name`` without the text from its last dot on."""
    index = file_name.rfind(".")
    return file_name if index < 0 else file_name[:index]


def _suffix(file_name: str) -> str:
    base = file_name.replace("\\", "/").rsplit("/", 1)[-1]
    index = base.rfind(".")
    return "" if index < 0 else base[index + 1 :].lower()


@dataclass(frozen=True)
class DocumentFormat:
    """A file format a document type can be read from or saved to.

    ``filters`` is a dialog pattern such as ``"*.png *.jpg"``; the first
    entry of ``suffixes`` is the default suffix.
    """

    name: str
    filters: str
    suffixes: tuple[str, ...]
    can_save: bool = True
    can_read: bool = True

    @property
    def dialog_filter(self) -> str:
        """The format as a single file dialog filter entry."""
        return f"{self.name} ({self.filters})"


@dataclass(frozen=True)
class Document:
    """A kind of document the application handles."""

    name: str
    description: str
    type: str
    can_create: bool = True
    formats: tuple[DocumentFormat, ...] = field(default_factory=tuple)


class FormatMatch(NamedTuple):
    """The document type and format found for a file name."""

    document: Document
    format: DocumentFormat
    suffix: str


class DocumentRegistry:
    """Registered document types, kept in order of their type id."""

    def __init__(self) -> None:
        self._types: dict[str, Document] = {}
        self._creatable: list[str] = []

    def add_document(self, doc: Document) -> None:
        """Register ``doc``, replacing any earlier one of the same type."""
        if doc.can_create and doc.type not in self._creatable:
            self._creatable.append(doc.type)
        self._types[doc.type] = doc

    def documents(self) -> list[Document]:
        """All registered document types, sorted by type id."""
        return [self._types[key] for key in sorted(self._types)]

    def creatable_types(self) -> list[str]:
        """Type ids of documents that can be created, in registration order."""
        return list(self._creatable)

    def get(self, doc_type: str) -> Document | None:
        """The document registered under ``doc_type``, or None."""
        return self._types.get(doc_type)

    def find_format(self, file_name: str) -> FormatMatch | None:
        """Find the document type and format whose suffixes match ``file_name``."""
        ext = _suffix(file_name)
        for doc in self.documents():
            for fmt in doc.formats:
                if ext in fmt.suffixes:
                    return FormatMatch(doc, fmt, ext)
        return None

    def open_filter(self) -> tuple[str, str]:
        """Return the open dialog filter and the filter to select by default.

        The default is the combined "Any supported format" entry, or empty
        when no format can be read.
        """
        filter_text = ""
        patterns: list[str] = []
        for doc in self.documents():
            for fmt in doc.formats:
                if fmt.can_read:
                    filter_text += fmt.dialog_filter + " ;;"
                    patterns.append(fmt.filters)

        if not patterns:
            return filter_text, ""

        combined = f"Any supported format ({' '.join(patterns)})"
        return filter_text + combined, combined

    def save_filters(self, doc_type: str) -> tuple[str, dict[str, str]]:
        """Return the save dialog filter for ``doc_type`` and each entry's default suffix."""
        doc = self._types.get(doc_type)
        if doc is None:
            return "", {}

        entries: list[str] = []
        to_suffix: dict[str, str] = {}
        for fmt in doc.formats:
            if fmt.can_save:
                entry = fmt.dialog_filter
                entries.append(entry)
                to_suffix[entry] = fmt.suffixes[0]
        return ";;".join(entries), to_suffix