"""Reading graphs written in the DOT language."""

from __future__ import annotations

import re
from typing import Any

from graphedit.graph import Edge, Graph, GraphFormatError, Node

_POINTS_PER_INCH = 72.0

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<comment>//[^\n]*|/\*.*?\*/)
    |(?P<edgeop>->|--)
    |(?P<num>-?(?:\.\d+|\d+(?:\.\d*)?))
    |(?P<id>[A-Za-z_\x80-\U0010ffff][\w\x80-\U0010ffff]*)
    |(?P<op>[{}\[\];,=:+])
    """,
    re.S | re.X,
)

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

_ID_KINDS = {"ID", "NUM", "STR", "HTML"}


def from_dot_shape(shape: str) -> str:
    """Map a DOT node shape name onto the editor's shape name."""
    if shape == "ellipse":
        return "disc"
    if shape in ("rect", "box"):
        return "square"
    if shape == "invtriangle":
        return "triangle2"
    return shape


def parse_font(fontname: str, fontsize: float) -> dict[str, Any] | None:
    """Describe the font given by a DOT font name and size, or None."""
    if not fontname and fontsize <= 0:
        return None
    font: dict[str, Any] = {"family": "", "bold": False, "italic": False, "size": None}
    if fontname:
        text = fontname.lower()
        if "bold" in text:
            text = text.replace("bold", "")
            font["bold"] = True
        if "italic" in text:
            text = text.replace("italic", "")
            font["italic"] = True
        font["family"] = text
    if fontsize > 0:
        font["size"] = fontsize
    return font


def _tokenize(text: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char == "#" and (pos == 0 or text[pos - 1] == "\n"):
            end = text.find("\n", pos)
            pos = len(text) if end < 0 else end
            continue
        if char == '"':
            pos = _read_quoted(text, pos, tokens)
            continue
        if char == "<":
            pos = _read_html(text, pos, tokens)
            continue
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise GraphFormatError(f"unexpected character {char!r} at offset {pos}")
        kind = match.lastgroup
        if kind == "edgeop":
            tokens.append(("EDGEOP", match.group()))
        elif kind == "num":
            tokens.append(("NUM", match.group()))
        elif kind == "id":
            tokens.append(("ID", match.group()))
        elif kind == "op":
            tokens.append(("OP", match.group()))
        pos = match.end()
    return tokens


def _read_quoted(text: str, pos: int, tokens: list[tuple[str, str]]) -> int:
    parts: list[str] = []
    i = pos + 1
    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text):
            following = text[i + 1]
            if following == '"':
                parts.append('"')
            elif following != "\n":
                parts.append(char + following)
            i += 2
            continue
        if char == '"':
            tokens.append(("STR", "".join(parts)))
            return i + 1
        parts.append(char)
        i += 1
    raise GraphFormatError("unterminated string")


def _read_html(text: str, pos: int, tokens: list[tuple[str, str]]) -> int:
    depth = 0
    for i in range(pos, len(text)):
        if text[i] == "<":
            depth += 1
        elif text[i] == ">":
            depth -= 1
            if depth == 0:
                tokens.append(("HTML", text[pos + 1 : i]))
                return i + 1
    raise GraphFormatError("unterminated HTML string")


class _Parser:
    def __init__(self, tokens: list[tuple[str, str]]) -> None:
        self._tokens = tokens
        self._pos = 0
        self.nodes: dict[str, dict[str, str]] = {}
        self.edges: list[tuple[str, str, dict[str, str]]] = []
        self._directed = True

    def _peek(self, offset: int = 0) -> tuple[str, str]:
        index = self._pos + offset
        return self._tokens[index] if index < len(self._tokens) else ("EOF", "")

    def _next(self) -> tuple[str, str]:
        token = self._peek()
        if token[0] == "EOF":
            raise GraphFormatError("unexpected end of input")
        self._pos += 1
        return token

    def _is_op(self, value: str, offset: int = 0) -> bool:
        return self._peek(offset) == ("OP", value)

    def _is_keyword(self, word: str, offset: int = 0) -> bool:
        kind, value = self._peek(offset)
        return kind == "ID" and value.lower() == word

    def _expect(self, value: str) -> None:
        token = self._next()
        if token != ("OP", value):
            raise GraphFormatError(f"expected {value!r}, got {token[1]!r}")

    def _is_id(self) -> bool:
        return self._peek()[0] in _ID_KINDS

    def _id(self) -> str:
        kind, value = self._next()
        if kind not in _ID_KINDS:
            raise GraphFormatError(f"expected identifier, got {value!r}")
        if kind == "STR":
            while self._is_op("+") and self._peek(1)[0] == "STR":
                self._pos += 1
                value += self._next()[1]
        return value

    def parse(self) -> None:
        if self._is_keyword("strict"):
            self._next()
        kind, value = self._next()
        if kind != "ID" or value.lower() not in ("graph", "digraph"):
            raise GraphFormatError("expected 'graph' or 'digraph'")
        if value.lower() != "digraph":
            raise GraphFormatError("Wanted directed graph but got undirected graph")
        if self._is_id():
            self._id()
        self._expect("{")
        self._stmt_list({}, {})
        self._expect("}")
        if self._peek()[0] != "EOF":
            raise GraphFormatError(f"unexpected {self._peek()[1]!r} after graph")

    def _stmt_list(self, node_defaults: dict, edge_defaults: dict) -> list[str]:
        members: list[str] = []
        while not self._is_op("}"):
            if self._peek()[0] == "EOF":
                raise GraphFormatError("unexpected end of input")
            self._stmt(node_defaults, edge_defaults, members)
            if self._is_op(";"):
                self._next()
        return members

    def _ensure_node(self, name: str, node_defaults: dict, members: list[str]) -> None:
        if name not in self.nodes:
            self.nodes[name] = dict(node_defaults)
        if name not in members:
            members.append(name)

    def _attr_list(self) -> dict[str, str]:
        attrs: dict[str, str] = {}
        while self._is_op("["):
            self._next()
            while not self._is_op("]"):
                key = self._id()
                value = "true"
                if self._is_op("="):
                    self._next()
                    value = self._id()
                attrs[key] = value
                if self._is_op(",") or self._is_op(";"):
                    self._next()
            self._expect("]")
        return attrs

    def _subgraph(self, node_defaults: dict, edge_defaults: dict, members: list[str]) -> list[str]:
        if self._is_keyword("subgraph"):
            self._next()
            if self._is_id():
                self._id()
        self._expect("{")
        inner = self._stmt_list(dict(node_defaults), dict(edge_defaults))
        self._expect("}")
        for name in inner:
            if name not in members:
                members.append(name)
        return inner

    def _endpoint(self, node_defaults: dict, edge_defaults: dict, members: list[str]) -> list[str]:
        if self._is_keyword("subgraph") or self._is_op("{"):
            return self._subgraph(node_defaults, edge_defaults, members)
        name = self._id()
        while self._is_op(":"):
            self._next()
            self._id()
        self._ensure_node(name, node_defaults, members)
        return [name]

    def _stmt(self, node_defaults: dict, edge_defaults: dict, members: list[str]) -> None:
        for word, target in (("graph", None), ("node", node_defaults), ("edge", edge_defaults)):
            if self._is_keyword(word) and self._is_op("[", 1):
                self._next()
                attrs = self._attr_list()
                if target is not None:
                    target.update(attrs)
                return

        if self._is_id() and self._is_op("=", 1):
            self._id()
            self._next()
            self._id()
            return

        if not (self._is_id() or self._is_op("{")):
            raise GraphFormatError(f"unexpected {self._peek()[1]!r}")

        endpoints = [self._endpoint(node_defaults, edge_defaults, members)]
        while self._peek()[0] == "EDGEOP":
            op = self._next()[1]
            if op != "->":
                raise GraphFormatError("undirected edge in a directed graph")
            endpoints.append(self._endpoint(node_defaults, edge_defaults, members))

        attrs = self._attr_list()
        if len(endpoints) == 1:
            if not (self._is_keyword("subgraph", -1) or len(endpoints[0]) != 1):
                for name in endpoints[0]:
                    self.nodes[name].update(attrs)
            return

        edge_attrs = {**edge_defaults, **attrs}
        for sources, targets in zip(endpoints, endpoints[1:]):
            for source in sources:
                for target in targets:
                    self.edges.append((source, target, dict(edge_attrs)))


def _number(attrs: dict[str, str], key: str) -> float:
    text = attrs.get(key, "")
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError as exc:
        raise GraphFormatError(f"invalid value of {key}: {text!r}") from exc


def _read_label(source: dict[str, str], attrs: dict[str, Any]) -> None:
    if source.get("label"):
        attrs["label"] = source["label"]
    elif source.get("xlabel"):
        attrs["label"] = source["xlabel"]
    if source.get("fontcolor"):
        attrs["label.color"] = source["fontcolor"]
    font = parse_font(source.get("fontname", ""), _number(source, "fontsize"))
    if font is not None:
        attrs["label.font"] = font


class DotFormat:
    """Loads directed graphs from DOT files."""

    def load(self, file_name: str) -> Graph:
        """Read a DOT file and return its graph."""
        try:
            with open(file_name, encoding="utf-8") as stream:
                text = stream.read()
        except OSError as exc:
            raise GraphFormatError("Failed reading DOT format") from exc
        return self.loads(text)

    def loads(self, text: str) -> Graph:
        """Parse DOT text and return its graph."""
        parser = _Parser(_tokenize(text))
        parser.parse()

        graph = Graph()
        order = {name: index for index, name in enumerate(parser.nodes)}
        for name, source in parser.nodes.items():
            graph.nodes.append(self._make_node(name, source))

        for start, end, source in sorted(parser.edges, key=lambda e: order[e[0]]):
            graph.edges.append(self._make_edge(start, end, source))
        return graph

    @staticmethod
    def _make_node(name: str, source: dict[str, str]) -> Node:
        node = Node(name)
        attrs = node.attrs
        if source.get("fillcolor"):
            attrs["color"] = source["fillcolor"]
        width = _number(source, "width")
        if width > 0:
            attrs["width"] = width * _POINTS_PER_INCH
        height = _number(source, "height")
        if height > 0:
            attrs["height"] = height * _POINTS_PER_INCH
        if source.get("pos"):
            values = [float(v) for v in _NUMBER_RE.findall(source["pos"])[:2]]
            values += [0.0] * (2 - len(values))
            attrs["x"] = values[0] * _POINTS_PER_INCH
            attrs["y"] = -values[1] * _POINTS_PER_INCH
        if source.get("shape"):
            attrs["shape"] = from_dot_shape(source["shape"])
        if source.get("color"):
            attrs["stroke.color"] = source["color"]
        if source.get("style"):
            attrs["stroke.style"] = source["style"]
        penwidth = _number(source, "penwidth")
        if penwidth > 0:
            attrs["stroke.size"] = penwidth
        _read_label(source, attrs)
        return node

    @staticmethod
    def _make_edge(start: str, end: str, source: dict[str, str]) -> Edge:
        edge = Edge(start_node_id=start, end_node_id=end)
        weight = _number(source, "weight")
        penwidth = _number(source, "penwidth")
        if weight > 0:
            edge.attrs["weight"] = weight
        elif penwidth > 0:
            edge.attrs["weight"] = penwidth
        direction = source.get("dir", "")
        if direction == "both":
            edge.attrs["direction"] = "mutual"
        elif direction == "none":
            edge.attrs["direction"] = "undirected"
        if source.get("style"):
            edge.attrs["style"] = source["style"]
        _read_label(source, edge.attrs)
        return edge