import os

import pytest

from graphedit.app import (
    DotBackend,
    GraphBackend,
    about_text,
    display_name,
    dot_assistant_registry,
    graph_editor_registry,
    main,
    settings_path,
)
from graphedit.graph import Edge, Graph, GraphFormatError, Node
from graphedit.graphml import GraphMLFormat
from graphedit.platform import platform_bits
from graphedit.session import Settings


def test_graph_editor_registry_types_and_formats():
    registry = graph_editor_registry()
    assert registry.creatable_types() == ["graph"]
    assert registry.find_format("a.graphml").document.type == "graph"
    assert registry.find_format("x.gv").format.name == "DOT/GraphViz"


def test_graph_editor_save_filter_excludes_read_only_formats():
    text, to_suffix = graph_editor_registry().save_filters("graph")
    assert "GML (*.gml)" not in text
    assert to_suffix["DOT/GraphViz (*.dot *.gv)"] == "dot"


def test_dot_assistant_registry():
    registry = dot_assistant_registry()
    assert registry.find_format("a.txt").format.name == "Plain DOT/GraphViz"
    assert registry.find_format("a.graphml") is None
    assert registry.creatable_types() == ["graphviz"]


def test_display_name():
    name = display_name("Qt Visual Graph Editor", "0.7.0")
    assert name == f"Qt Visual Graph Editor 0.7.0 ({platform_bits()}bit)"


def test_settings_path_prefers_local_file(tmp_path):
    (tmp_path / "qvge.ini").write_text("{}")
    assert settings_path(str(tmp_path), "qvge.ini") == str(tmp_path / "qvge.ini")


def test_settings_path_falls_back_to_user_dir(tmp_path, monkeypatch):
    config = tmp_path / "config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config))
    monkeypatch.setenv("APPDATA", str(config))
    path = settings_path(str(tmp_path / "app"), "qvge.ini")
    assert path == os.path.join(str(config), "qvge", "qvge.ini")


def test_about_text_header():
    assert about_text("app", "1.0").startswith("<b>app</b><br>Version 1.0")


def test_graph_backend_create():
    backend = GraphBackend()
    assert backend.create("graph") is True
    assert backend.create("unknown") is False


def test_graph_backend_opens_graphml(tmp_path):
    path = str(tmp_path / "g.graphml")
    graph = Graph(nodes=[Node("a"), Node("b")], edges=[Edge("e", start_node_id="a", end_node_id="b")])
    GraphMLFormat().save(path, graph)
    backend = GraphBackend()
    assert backend.open(path, "graph") == "graph"
    assert [node.id for node in backend.graph.nodes] == ["a", "b"]
    assert backend.graph.edges[0].end_node_id == "b"


def test_graph_backend_opens_plain_dot(tmp_path):
    path = tmp_path / "g.plain"
    path.write_text("graph 1 2 2\nnode n1 1 1 0.5 0.5 n1 solid ellipse black white\nstop\n")
    backend = GraphBackend()
    assert backend.open(str(path), "graph") == "graph"
    assert backend.graph.nodes[0].attrs["shape"] == "disc"


def test_graph_backend_unsupported_graph_format_raises(tmp_path):
    path = tmp_path / "g.xgr"
    path.write_bytes(b"data")
    with pytest.raises(GraphFormatError):
        GraphBackend().open(str(path), "graph")


def test_graph_backend_falls_back_to_text(tmp_path):
    path = tmp_path / "notes.md"
    path.write_text("hello")
    backend = GraphBackend()
    assert backend.open(str(path), "") == "text"
    assert backend.text == "hello"


def test_graph_backend_text_save_round_trip(tmp_path):
    backend = GraphBackend()
    backend.create("text")
    backend.text = "some text"
    path = str(tmp_path / "out.md")
    assert backend.save(path, "text") is True
    other = GraphBackend()
    assert other.open(path, "text") == "text"
    assert other.text == "some text"


def test_graph_backend_graph_save_round_trip(tmp_path):
    backend = GraphBackend()
    backend.create("graph")
    backend.graph.nodes.append(Node("x"))
    path = str(tmp_path / "out.graphml")
    assert backend.save(path, "graph") is True
    assert GraphMLFormat().load(path).find_node_index("x") == 0


def test_graph_backend_cannot_save_dot(tmp_path):
    backend = GraphBackend()
    backend.create("graph")
    assert backend.save(str(tmp_path / "out.dot"), "graph") is False


def test_dot_backend(tmp_path):
    path = tmp_path / "g.dot"
    path.write_text("digraph { a -> b }")
    backend = DotBackend()
    assert backend.open(str(path), "graphviz") == "graphviz"
    assert backend.text == "digraph { a -> b }"
    assert backend.open(str(path), "graph") is None
    assert backend.save(str(path), "graphviz") is False
    assert backend.create("graph") is False


def test_dot_backend_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        DotBackend().open(str(tmp_path / "missing.dot"), "graphviz")


def _config_env(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setenv("APPDATA", str(tmp_path))
    return tmp_path / "qvge" / "qvge.ini"


def test_main_create_writes_settings_and_removes_instance(tmp_path, monkeypatch):
    path = _config_env(tmp_path, monkeypatch)
    assert main(["create", "graph"]) == 0
    assert Settings.load(str(path)).get("instances") == {}


def test_main_opens_file_and_records_recent(tmp_path, monkeypatch):
    path = _config_env(tmp_path, monkeypatch)
    graph_file = tmp_path / "g.graphml"
    GraphMLFormat().save(str(graph_file), Graph(nodes=[Node("a")]))
    assert main([str(graph_file)]) == 0
    recent = Settings.load(str(path)).get("recentFiles")
    assert recent == [os.path.realpath(str(graph_file))]


def test_main_missing_file_fails(tmp_path, monkeypatch):
    _config_env(tmp_path, monkeypatch)
    assert main(["open", str(tmp_path / "missing.graphml")]) == 1


def test_main_unknown_type_fails(tmp_path, monkeypatch):
    _config_env(tmp_path, monkeypatch)
    assert main(["create", "spreadsheet"]) == 1