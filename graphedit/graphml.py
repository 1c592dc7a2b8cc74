"""Reading and writing graphs in the GraphML format."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Callable

from graphedit.graph import (
    AttrInfo,
    Edge,
    Graph,
    GraphFormatError,
    Node,
    NodePort,
    ValueType,
)

_NAMESPACE = "http://graphml.graphdrawing.org/xmlns"
_XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
_SCHEMA_LOCATION = f"{_NAMESPACE} http://graphml.graphdrawing.org/xmlns/1.0/graphml.xsd"

_TYPE_NAMES = {
    ValueType.INT: "integer",
    ValueType.LONG: "long",
    ValueType.DOUBLE: "double",
    ValueType.FLOAT: "float",
    ValueType.BOOL: "boolean",
}


def _to_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return 0


def _to_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        return 0.0


_TYPE_READERS: dict[str, tuple[ValueType, Callable[[str], Any]]] = {
    "integer": (ValueType.INT, _to_int),
    "long": (ValueType.LONG, _to_int),
    "double": (ValueType.DOUBLE, _to_float),
    "float": (ValueType.FLOAT, _to_float),
    "boolean": (ValueType.BOOL, lambda text: bool(_to_int(text))),
}


def _local_name(tag: Any) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _find_all(elem: ET.Element, name: str, include_self: bool = False) -> list[ET.Element]:
    return [
        e
        for e in elem.iter()
        if (include_self or e is not elem) and _local_name(e.tag) == name
    ]


def _text(elem: ET.Element) -> str:
    return "".join(elem.itertext())


def _to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e15:
            return str(int(value))
        return repr(value)
    if isinstance(value, list):
        return "|".join(str(item) for item in value)
    return str(value)


class GraphMLFormat:
    """Loads and saves :class:`Graph` objects as GraphML files."""

    def __init__(self) -> None:
        self.edge_type = ""

    # reading

    def load(self, file_name: str) -> Graph:
        """Read a GraphML file and return the graph it holds."""
        try:
            tree = ET.parse(file_name)
        except OSError as exc:
            raise GraphFormatError(f"{file_name}: File cannot be opened for reading") from exc
        except ET.ParseError as exc:
            line, column = exc.position
            raise GraphFormatError(f"{exc.msg}\nline: {line}, column: {column}") from exc

        root = tree.getroot()
        graph = Graph()

        graphs = _find_all(root, "graph", include_self=True)
        if graphs:
            self.edge_type = graphs[0].get("edgedefault", "undirected")

        class_keys: dict[str, dict[str, str]] = {}
        for key_elem in _find_all(root, "key", include_self=True):
            self._read_attr_key(key_elem, graph, class_keys)

        node_keys = class_keys.get("node", {})
        for node_elem in _find_all(root, "node", include_self=True):
            graph.nodes.append(self._read_node(node_elem, node_keys))

        edge_keys = class_keys.get("edge", {})
        for edge_elem in _find_all(root, "edge", include_self=True):
            graph.edges.append(self._read_edge(edge_elem, edge_keys))

        return graph

    @staticmethod
    def _read_attr_key(
        elem: ET.Element, graph: Graph, class_keys: dict[str, dict[str, str]]
    ) -> None:
        defaults = _find_all(elem, "default")
        default_text = _text(defaults[0]) if defaults else ""

        key_id = elem.get("id", "")
        attr_id = elem.get("attr.id", "")
        attr_name = elem.get("attr.name", "")
        class_id = elem.get("for", "").lower()
        type_name = elem.get("attr.type", "")

        if not key_id:
            key_id = attr_id or attr_name
        if not key_id:
            return
        if not attr_id:
            attr_id = attr_name or key_id
        if not attr_name:
            attr_name = attr_id or key_id

        value_type, convert = _TYPE_READERS.get(type_name, (ValueType.STRING, str))
        attr = AttrInfo(attr_id, attr_name, value_type, convert(default_text))

        if class_id == "node":
            infos = graph.node_attrs
        elif class_id == "edge":
            infos = graph.edge_attrs
        else:
            infos = graph.graph_attrs
        infos[attr.id] = attr

        if class_id == "graph":
            class_id = ""
        class_keys.setdefault(class_id, {})[key_id] = attr.id

    @staticmethod
    def _read_data(elem: ET.Element, keys: dict[str, str]):
        for data in _find_all(elem, "data"):
            key_id = data.get("key", "")
            attr_id = keys.get(key_id, key_id)
            if attr_id:
                yield attr_id, _text(data)

    def _read_node(self, elem: ET.Element, keys: dict[str, str]) -> Node:
        node = Node(elem.get("id", ""))

        for attr_id, value in self._read_data(elem, keys):
            node.attrs[attr_id] = value
            # coordinates written by social network tools
            if attr_id == "x_coordinate":
                node.attrs["x"] = _to_float(value) * 1000
            elif attr_id == "y_coordinate":
                node.attrs["y"] = _to_float(value) * 1000

        for port_elem in _find_all(elem, "port"):
            port_name = port_elem.get("name", "")
            if not port_name:
                continue
            node.ports[port_name] = NodePort(
                name=port_name,
                color=port_elem.get("color", ""),
                anchor=_to_int(port_elem.get("anchor", "")),
                x=_to_float(port_elem.get("x", "")),
                y=_to_float(port_elem.get("y", "")),
            )

        return node

    def _read_edge(self, elem: ET.Element, keys: dict[str, str]) -> Edge:
        edge = Edge(
            id=elem.get("id", ""),
            start_node_id=elem.get("source", ""),
            start_port_id=elem.get("sourceport", ""),
            end_node_id=elem.get("target", ""),
            end_port_id=elem.get("targetport", ""),
        )
        for attr_id, value in self._read_data(elem, keys):
            edge.attrs[attr_id] = value
        return edge

    # writing

    def save(self, file_name: str, graph: Graph) -> None:
        """Write ``graph`` to ``file_name`` as GraphML."""
        root = ET.Element(
            "graphml",
            {
                "xmlns": _NAMESPACE,
                "xmlns:xsi": _XSI_NAMESPACE,
                "xsi:schemaLocation": _SCHEMA_LOCATION,
            },
        )

        self._write_keys(root, graph.graph_attrs, "graph")
        self._write_keys(root, graph.edge_attrs, "edge")
        self._write_keys(root, graph.node_attrs, "node")

        graph_elem = ET.SubElement(root, "graph")
        direction = graph.edge_attrs.get("direction")
        if direction is not None:
            graph_elem.set("edgedefault", _to_string(direction.default_value))

        self._write_nodes(graph_elem, graph)
        self._write_edges(graph_elem, graph)

        tree = ET.ElementTree(root)
        ET.indent(tree, space="    ")
        try:
            with open(file_name, "wb") as stream:
                tree.write(stream, encoding="UTF-8", xml_declaration=True)
        except OSError as exc:
            raise GraphFormatError(f"{file_name}: File cannot be opened for writing") from exc

    @staticmethod
    def _write_keys(root: ET.Element, infos: dict[str, AttrInfo], class_id: str) -> None:
        for attr_key in sorted(infos):
            attr = infos[attr_key]
            key_elem = ET.SubElement(root, "key", {"id": attr.id, "attr.name": attr.id})
            if class_id:
                key_elem.set("for", class_id)
            key_elem.set("attr.type", _TYPE_NAMES.get(attr.value_type, "string"))

            if attr.default_value is not None:
                default_elem = ET.SubElement(key_elem, "default")
                if attr.value_type == ValueType.STRING_LIST:
                    default_elem.text = "|".join(attr.default_value)
                else:
                    default_elem.text = _to_string(attr.default_value)

    @staticmethod
    def _write_data(parent: ET.Element, attrs: dict[str, Any]) -> None:
        for key_id in sorted(attrs):
            data = ET.SubElement(parent, "data", {"key": key_id})
            data.text = _to_string(attrs[key_id])

    def _write_nodes(self, parent: ET.Element, graph: Graph) -> None:
        for node in graph.nodes:
            node_elem = ET.SubElement(parent, "node", {"id": node.id})
            for port_name in sorted(node.ports):
                port = node.ports[port_name]
                ET.SubElement(
                    node_elem,
                    "port",
                    {
                        "name": port.name,
                        "color": port.color or "#000000",
                        "anchor": str(port.anchor),
                        "x": f"{port.x:g}",
                        "y": f"{port.y:g}",
                    },
                )
            self._write_data(node_elem, node.attrs)

    def _write_edges(self, parent: ET.Element, graph: Graph) -> None:
        for edge in graph.edges:
            edge_elem = ET.SubElement(
                parent,
                "edge",
                {"id": edge.id, "source": edge.start_node_id, "target": edge.end_node_id},
            )
            if edge.start_port_id:
                edge_elem.set("sourceport", edge.start_port_id)
            if edge.end_port_id:
                edge_elem.set("endport", edge.end_port_id)
            self._write_data(edge_elem, edge.attrs)