"""Reading graphs written in the plain text output format of GraphViz."""

from __future__ import annotations

from typing import Iterable, Iterator

from graphedit.graph import Edge, Graph, GraphFormatError, Node

_POINTS_PER_INCH = 72.0


def from_dot_node_shape(shape: str) -> str:
    """Map a DOT node shape name onto the editor's shape name."""
    if shape == "ellipse":
        return "disc"
    if shape in ("rect", "box"):
        return "square"
    if shape == "invtriangle":
        return "triangle2"
    return shape


def _apply_node_style(style: str, attrs: dict) -> None:
    if "dashed" in style:
        attrs["stroke.style"] = "dashed"
    elif "dotted" in style:
        attrs["stroke.style"] = "dotted"

    if "invis" in style:
        attrs["stroke.size"] = 0
    elif "solid" in style:
        attrs["stroke.size"] = 1
    elif "bold" in style:
        attrs["stroke.size"] = 3


def _is_html_end(line: str) -> bool:
    return line.startswith(">") and (len(line) == 1 or line[1].isspace())


def tokenize(lines: Iterable[str]) -> Iterator[list[str]]:
    """Yield the tokens of each statement found in ``lines``.

    Quoted tokens lose their quotes; a ``<`` at the end of a line opens an
    HTML label that runs until a line starting with ``>``.
    """
    source = iter(lines)
    for raw in source:
        line = raw.strip()
        if not line:
            continue

        tokens: list[str] = []
        i = 0
        while True:
            while i < len(line) and line[i].isspace():
                i += 1
            if i >= len(line):
                break

            if line[i] == '"':
                end = line.find('"', i + 1)
                if end < 0:
                    end = len(line)
                tokens.append(line[i + 1 : end])
                i = end + 1
                continue

            if line[i] == "<" and i + 1 == len(line):
                parts: list[str] = []
                closed = False
                for next_raw in source:
                    text = next_raw.rstrip("\r\n")
                    trimmed = text.strip()
                    if _is_html_end(trimmed):
                        tokens.append("".join(parts))
                        line, i, closed = trimmed, 1, True
                        break
                    parts.append(text + "\n")
                if closed:
                    continue

            end = i
            while end < len(line) and not line[end].isspace():
                end += 1
            tokens.append(line[i:end])
            i = end

        yield tokens


def split_port_id(node_id: str) -> tuple[str, str]:
    """Split ``node:port`` into node id and port id (port is empty if absent)."""
    index = node_id.find(":")
    if index <= 0:
        return node_id, ""
    return node_id[:index], node_id[index + 1 :]


class _Cursor:
    """Consumes tokens one by one; a failed conversion still consumes one."""

    def __init__(self, tokens: list[str]) -> None:
        self._tokens = tokens
        self._pos = 0

    def can_next(self) -> bool:
        return self._pos < len(self._tokens)

    def rest_count(self) -> int:
        return len(self._tokens) - self._pos

    def skip(self) -> None:
        if self.can_next():
            self._pos += 1

    def text(self, default: str = "") -> str:
        if not self.can_next():
            return default
        self._pos += 1
        return self._tokens[self._pos - 1]

    def number(self, default: float) -> float:
        if not self.can_next():
            return default
        self._pos += 1
        try:
            return float(self._tokens[self._pos - 1])
        except ValueError:
            return default

    def integer(self, default: int) -> int:
        if not self.can_next():
            return default
        self._pos += 1
        try:
            return int(self._tokens[self._pos - 1])
        except ValueError:
            return default


class PlainDotFormat:
    """Loads graphs from GraphViz plain output."""

    def load(self, file_name: str) -> Graph:
        """Read a plain DOT file and return its graph."""
        try:
            with open(file_name, encoding="utf-8") as stream:
                text = stream.read()
        except OSError as exc:
            raise GraphFormatError("Cannot open file") from exc
        return self.loads(text)

    def loads(self, text: str) -> Graph:
        """Parse plain DOT text and return its graph."""
        graph = Graph()
        scale = 1.0

        for tokens in tokenize(text.splitlines()):
            if not tokens:
                continue
            head = tokens[0]
            if head == "stop":
                break
            if head == "graph":
                cursor = _Cursor(tokens)
                cursor.skip()
                scale = cursor.number(scale)
            elif head == "node":
                graph.nodes.append(self._parse_node(tokens, scale))
            elif head == "edge":
                graph.edges.append(self._parse_edge(tokens, scale))

        return graph

    @staticmethod
    def _parse_node(tokens: list[str], scale: float) -> Node:
        cursor = _Cursor(tokens)
        cursor.skip()

        node = Node(cursor.text())
        x = cursor.number(0.0)
        y = cursor.number(0.0)
        width = cursor.number(0.0)
        height = cursor.number(0.0)
        label = cursor.text()
        style = cursor.text()
        shape = cursor.text()
        color = cursor.text()
        fillcolor = cursor.text()

        factor = _POINTS_PER_INCH * scale
        node.attrs["x"] = x * factor
        node.attrs["y"] = y * factor
        node.attrs["width"] = width * factor
        node.attrs["height"] = height * factor
        node.attrs["label"] = label.replace("\\n", "\n")
        node.attrs["shape"] = from_dot_node_shape(shape)
        _apply_node_style(style, node.attrs)
        node.attrs["color"] = fillcolor
        node.attrs["stroke.color"] = color
        return node

    @staticmethod
    def _parse_edge(tokens: list[str], scale: float) -> Edge:
        cursor = _Cursor(tokens)
        cursor.skip()

        edge = Edge()
        start_id = cursor.text()
        end_id = cursor.text()

        x = y = 0.0
        # joint points are read past but not kept
        for _ in range(max(cursor.integer(0), 0)):
            x = cursor.number(x)
            y = cursor.number(y)

        if cursor.rest_count() > 2:
            label = cursor.text().replace("\\n", "\n")
            x = cursor.number(x)
            y = cursor.number(y)
            factor = _POINTS_PER_INCH * scale
            edge.attrs["label"] = label
            edge.attrs["label.x"] = x * factor
            edge.attrs["label.y"] = y * factor
            edge.id = label

        if cursor.can_next():
            edge.attrs["style"] = cursor.text()
        if cursor.can_next():
            edge.attrs["color"] = cursor.text()

        if not edge.id:
            edge.id = f"{start_id}-{end_id}"

        edge.start_node_id, edge.start_port_id = split_port_id(start_id)
        edge.end_node_id, edge.end_port_id = split_port_id(end_id)
        return edge