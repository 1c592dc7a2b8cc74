"""The graph editor and DOT assistant applications: documents, backends and start-up."""

from __future__ import annotations

import os
import sys

from graphedit.documents import Document, DocumentFormat, DocumentRegistry
from graphedit.dot import DotFormat
from graphedit.graph import Graph, GraphFormatError
from graphedit.graphml import GraphMLFormat
from graphedit.plaindot import PlainDotFormat
from graphedit.platform import platform_bits
from graphedit.session import DocumentSession, Settings

ORGANIZATION = "qvge"
GRAPH_EDITOR_NAME = "Qt Visual Graph Editor"
GRAPH_EDITOR_VERSION = "0.7.0"
GRAPH_EDITOR_INI = "qvge.ini"
DOT_ASSISTANT_NAME = "Qt Visual GraphViz Assistent"
DOT_ASSISTANT_VERSION = "0.0.1"
DOT_ASSISTANT_INI = "qdot.ini"

_XGR = DocumentFormat("XGR binary graph format", "*.xgr", ("xgr",), True, True)
_GEXF = DocumentFormat("GEXF", "*.gexf", ("gexf",), True, True)
_GRAPHML = DocumentFormat("GraphML", "*.graphml", ("graphml",), True, True)
_GML = DocumentFormat("GML", "*.gml", ("gml",), False, True)
_CSV = DocumentFormat("CSV text file", "*.csv", ("csv",), False, True)
_DOT = DocumentFormat("DOT/GraphViz", "*.dot *.gv", ("dot", "gv"), True, True)
_PLAIN_DOT = DocumentFormat("Plain DOT/GraphViz", "*.plain *.txt", ("plain", "txt"), False, True)


def _suffix(file_name: str) -> str:
    base = os.path.basename(file_name)
    _, dot, tail = base.rpartition(".")
    return tail.lower() if dot else ""


def graph_editor_registry() -> DocumentRegistry:
    """Document types of the graph editor."""
    registry = DocumentRegistry()
    registry.add_document(
        Document(
            "Graph Document",
            "Directed or undirected graph",
            "graph",
            True,
            (_XGR, _GEXF, _GRAPHML, _GML, _CSV, _DOT, _PLAIN_DOT),
        )
    )
    return registry


def dot_assistant_registry() -> DocumentRegistry:
    """Document types of the DOT assistant."""
    registry = DocumentRegistry()
    registry.add_document(
        Document(
            "GraphViz Document",
            "Graph in GraphViz format",
            "graphviz",
            True,
            (_DOT, _PLAIN_DOT),
        )
    )
    return registry


def display_name(app_name: str, version: str) -> str:
    """Application name shown in window titles: name, version and word size."""
    bits = platform_bits()
    bit_text = f"{bits}bit" if bits > 0 else ""
    return f"{app_name} {version} ({bit_text})"


def _user_config_dir() -> str:
    if os.name == "nt":
        return os.environ.get("APPDATA") or os.path.expanduser("~")
    return os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")


def settings_path(app_dir: str, ini_name: str) -> str:
    """Where settings live: beside the program if a file is there, else per user."""
    local = os.path.join(app_dir, ini_name)
    if os.path.exists(local):
        return local
    return os.path.join(_user_config_dir(), ORGANIZATION, ini_name)


def about_text(app_name: str, version: str) -> str:
    """HTML text of the About box."""
    return (
        f"<b>{app_name}</b><br>Version {version}"
        "<p>This is a free software."
        "<br>It comes without warranty of any kind. Use it on your own risk."
    )


class GraphBackend:
    """Holds the graph editor's document: a graph or a plain text."""

    def __init__(self) -> None:
        self.graph: Graph | None = None
        self.text: str | None = None

    def create(self, doc_type: str) -> bool:
        """Create an empty document of ``doc_type``; False if the type is unknown."""
        if doc_type == "graph":
            if self.graph is None:
                self.graph = Graph()
            return True
        if doc_type == "text":
            if self.text is None:
                self.text = ""
            return True
        return False

    @staticmethod
    def _load_graph(file_name: str) -> Graph:
        fmt = _suffix(file_name)
        if fmt == "graphml":
            return GraphMLFormat().load(file_name)
        if fmt in ("dot", "gv"):
            return DotFormat().load(file_name)
        if fmt in ("plain", "txt"):
            return PlainDotFormat().load(file_name)
        raise GraphFormatError(f"{file_name}: unsupported graph format '{fmt}'")

    def open(self, file_name: str, doc_type: str) -> str | None:
        """Open ``file_name`` and return the type it was opened as.

        A graph file that cannot be read raises GraphFormatError; any other
        file is read as text, and None is returned if that fails.
        """
        if doc_type == "graph":
            self.create(doc_type)
            self.graph = self._load_graph(file_name)
            return doc_type

        self.create("text")
        try:
            with open(file_name, encoding="utf-8", errors="replace") as stream:
                self.text = stream.read()
        except OSError:
            return None
        return "text"

    def save(self, file_name: str, doc_type: str) -> bool:
        """Save the document to ``file_name``; False if it cannot be saved."""
        if doc_type == "text":
            try:
                with open(file_name, "w", encoding="utf-8") as stream:
                    stream.write(self.text or "")
            except OSError:
                return False
            return True

        if doc_type == "graph" and _suffix(file_name) == "graphml":
            try:
                GraphMLFormat().save(file_name, self.graph or Graph())
            except GraphFormatError:
                return False
            return True

        return False


class DotBackend:
    """Holds the DOT assistant's document: the DOT source text."""

    def __init__(self) -> None:
        self.text: str | None = None
        self.dot_file_name = ""

    def create(self, doc_type: str) -> bool:
        """Create an empty GraphViz document; False for any other type."""
        if doc_type != "graphviz":
            return False
        if self.text is None:
            self.text = ""
        return True

    def open(self, file_name: str, doc_type: str) -> str | None:
        """Load the DOT text of ``file_name``; None if the type is not GraphViz."""
        if doc_type != "graphviz":
            return None
        self.create(doc_type)
        with open(file_name, encoding="utf-8", errors="replace") as stream:
            self.text = stream.read()
        self.dot_file_name = file_name
        return doc_type

    def save(self, file_name: str, doc_type: str) -> bool:
        """Saving is not supported by the assistant: always False."""
        return False


def main(argv: list[str] | None = None) -> int:
    """Start a session: ``[--dot] [create TYPE | open FILE | FILE]``."""
    args = list(sys.argv[1:] if argv is None else argv)

    if args and args[0] == "--dot":
        args = args[1:]
        prog, app_name, version, ini_name = "qdot", DOT_ASSISTANT_NAME, DOT_ASSISTANT_VERSION, DOT_ASSISTANT_INI
        registry, backend = dot_assistant_registry(), DotBackend()
    else:
        prog, app_name, version, ini_name = "qvge", GRAPH_EDITOR_NAME, GRAPH_EDITOR_VERSION, GRAPH_EDITOR_INI
        registry, backend = graph_editor_registry(), GraphBackend()

    app_dir = os.path.dirname(os.path.abspath(sys.argv[0] or "."))
    portable = os.path.exists(os.path.join(app_dir, ini_name))
    path = settings_path(app_dir, ini_name)
    try:
        settings = Settings.load(path)
    except (OSError, ValueError) as exc:
        print(f"Cannot read settings: {exc}", file=sys.stderr)
        return 1

    session = DocumentSession(registry, settings, backend)
    edition = " (portable edition)" if portable else ""
    print(f"{display_name(app_name, version)}: {prog} started{edition}.")

    status = 0
    try:
        if session.process_args([prog, *args]):
            print(session.title())
        else:
            print("Cannot create document.", file=sys.stderr)
            status = 1
    except (OSError, GraphFormatError) as exc:
        print(f"Failed to open: {exc}", file=sys.stderr)
        status = 1
    finally:
        session.instances.remove()
        settings.set("lastPath", session.last_path)
        try:
            settings.sync()
        except OSError as exc:
            print(f"Cannot write settings: {exc}", file=sys.stderr)
            status = 1
    return status