"""Core graph data model shared by the file formats."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class GraphFormatError(Exception):
    """Raised when graph data cannot be read or written."""


class AttrFlags(enum.IntFlag):
    """Behaviour flags of an attribute."""

    NONE = 0
    VIRTUAL = 1  # read only, neither stored nor read
    FIXED = 2  # not user defined
    NODEFAULT = 4  # has no default value
    MAPPED = 8  # mapped to a system value such as a coordinate


class ValueType(enum.IntEnum):
    """Type of an attribute value."""

    INVALID = 0
    BOOL = 1
    INT = 2
    LONG = 4
    DOUBLE = 6
    STRING = 10
    STRING_LIST = 11
    SIZE = 20
    FLOAT = 38

    @classmethod
    def of(cls, value: Any) -> "ValueType":
        """Return the value type that describes ``value``."""
        if value is None:
            return cls.INVALID
        if isinstance(value, bool):
            return cls.BOOL
        if isinstance(value, int):
            return cls.INT if _INT32_MIN <= value <= _INT32_MAX else cls.LONG
        if isinstance(value, float):
            return cls.DOUBLE
        if isinstance(value, str):
            return cls.STRING
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return cls.STRING_LIST
        if (
            isinstance(value, tuple)
            and len(value) == 2
            and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value)
        ):
            return cls.SIZE
        raise TypeError(f"unsupported attribute value: {value!r}")


@dataclass
class AttrInfo:
    """Description of an attribute: its id, display name, type and default."""

    id: str = ""
    name: str = ""
    value_type: ValueType = ValueType.INVALID
    default_value: Any = None


@dataclass
class NodePort:
    """A named connection point on a node."""

    name: str = ""
    x: float = 0.0
    y: float = 0.0
    color: str = ""
    anchor: int = 0


@dataclass
class Node:
    """A graph node with its attributes and ports."""

    id: str = ""
    attrs: dict[str, Any] = field(default_factory=dict)
    ports: dict[str, NodePort] = field(default_factory=dict)


@dataclass
class Edge:
    """A connection between two nodes, optionally between ports."""

    id: str = ""
    attrs: dict[str, Any] = field(default_factory=dict)
    start_node_id: str = ""
    end_node_id: str = ""
    start_port_id: str = ""
    end_port_id: str = ""


@dataclass
class Graph:
    """Nodes, edges, graph attributes and attribute descriptions."""

    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    attrs: dict[str, Any] = field(default_factory=dict)
    node_attrs: dict[str, AttrInfo] = field(default_factory=dict)
    edge_attrs: dict[str, AttrInfo] = field(default_factory=dict)
    graph_attrs: dict[str, AttrInfo] = field(default_factory=dict)

    def clear(self) -> None:
        """Remove all content."""
        self.attrs.clear()
        self.nodes.clear()
        self.edges.clear()
        self.node_attrs.clear()
        self.edge_attrs.clear()
        self.graph_attrs.clear()

    def find_node_index(self, node_id: str) -> int:
        """Return the index of the node with ``node_id``, or -1 if absent."""
        return next(
            (index for index, node in enumerate(self.nodes) if node.id == node_id), -1
        )