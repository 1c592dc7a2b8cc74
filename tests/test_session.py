import os

import pytest

from graphedit.documents import Document, DocumentFormat, DocumentRegistry
from graphedit.graph import GraphFormatError
from graphedit.session import DocumentSession, InstanceRegistry, RecentFiles, Settings


class FakeBackend:
    def __init__(self, can_create=True, open_result="graph", can_save=True):
        self.can_create = can_create
        self.open_result = open_result
        self.can_save = can_save
        self.saved = []
        self.opened = []

    def create(self, doc_type):
        return self.can_create and doc_type == "graph"

    def open(self, file_name, doc_type):
        self.opened.append((file_name, doc_type))
        return self.open_result

    def save(self, file_name, doc_type):
        self.saved.append((file_name, doc_type))
        return self.can_save


def make_registry():
    registry = DocumentRegistry()
    fmt = DocumentFormat("GraphML", "*.graphml", ("graphml",))
    registry.add_document(Document("Graph", "A graph", "graph", True, (fmt,)))
    return registry


def make_session(backend=None):
    return DocumentSession(make_registry(), Settings(), backend or FakeBackend())


# Settings


def test_settings_round_trip(tmp_path):
    path = str(tmp_path / "conf" / "app.json")
    settings = Settings.load(path)
    settings.set("lastPath", "/tmp/x")
    settings.set("recentFiles", ["a", "b"])
    settings.sync()
    reloaded = Settings.load(path)
    assert reloaded.get("lastPath") == "/tmp/x"
    assert reloaded.get("recentFiles") == ["a", "b"]


def test_settings_get_default_and_remove():
    settings = Settings()
    assert settings.get("missing", 5) == 5
    settings.set("key", 1)
    settings.remove("key")
    assert "key" not in settings


def test_settings_values_are_copied():
    settings = Settings()
    items = ["a"]
    settings.set("k", items)
    items.append("b")
    assert settings.get("k") == ["a"]


def test_settings_rejects_non_object(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        Settings.load(str(path))


# RecentFiles


def test_recent_touch_orders_newest_first():
    recent = RecentFiles(Settings())
    recent.touch("a")
    recent.touch("b")
    recent.touch("a")
    assert recent.files() == ["a", "b"]


def test_recent_ignores_empty_name():
    recent = RecentFiles(Settings())
    recent.touch("")
    assert recent.files() == []


def test_recent_limit_drops_oldest():
    recent = RecentFiles(Settings(), limit=3)
    for name in ["a", "b", "c", "d"]:
        recent.touch(name)
    assert recent.files() == ["d", "c", "b"]


def test_recent_default_limit_is_twenty():
    recent = RecentFiles(Settings())
    for index in range(25):
        recent.touch(f"f{index}")
    assert len(recent.files()) == 20


def test_recent_remove_and_remove_at_and_clear():
    recent = RecentFiles(Settings())
    for name in ["a", "b", "c"]:
        recent.touch(name)
    assert recent.remove("b") is True
    assert recent.remove("zzz") is False
    assert recent.files() == ["c", "a"]
    recent.remove_at(0)
    assert recent.files() == ["a"]
    with pytest.raises(IndexError):
        recent.remove_at(5)
    recent.clear()
    assert recent.files() == []


# InstanceRegistry


def test_instances_drop_dead_pids():
    settings = Settings()
    live = InstanceRegistry(settings, 10, living_pids=lambda: {10})
    dead = InstanceRegistry(settings, 20, living_pids=lambda: {10, 20})
    live.update("T1", "/a")
    dead.update("T2", "/b")
    active = live.active()
    assert list(active) == ["10"]
    assert "20" not in settings.get("instances")


def test_instances_find_by_file_and_remove():
    settings = Settings()
    registry = InstanceRegistry(settings, 7, living_pids=lambda: {7})
    registry.update("title", "/doc.graphml")
    found = registry.find_by_file("/doc.graphml")
    assert found["spid"] == "7"
    assert registry.find_by_file("/other") is None
    registry.remove()
    assert registry.active() == {}


# DocumentSession


def test_new_session_title():
    assert make_session().title() == "New File"


def test_create_document():
    session = make_session()
    assert session.create_document("graph") is True
    assert session.current_doc_type == "graph"
    assert session.create_document("graph") is False


def test_create_unknown_type_fails():
    session = make_session()
    assert session.create_document("text") is False
    assert session.current_doc_type == ""


def test_open_document(tmp_path):
    path = tmp_path / "g.graphml"
    path.write_text("<graphml/>", encoding="utf-8")
    backend = FakeBackend()
    session = make_session(backend)
    assert session.open_document(str(path)) is True
    expected = os.path.realpath(str(path))
    assert session.current_file_name == expected
    assert backend.opened == [(expected, "graph")]
    assert session.recent.files()[0] == expected
    assert session.title() == expected
    assert session.instances.active()[session.pid]["file"] == expected


def test_open_same_file_again_is_noop(tmp_path):
    path = tmp_path / "g.graphml"
    path.write_text("x", encoding="utf-8")
    backend = FakeBackend()
    session = make_session(backend)
    session.open_document(str(path))
    assert session.open_document(str(path)) is True
    assert len(backend.opened) == 1


def test_open_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        make_session().open_document(str(tmp_path / "none.graphml"))


def test_open_backend_failure(tmp_path):
    path = tmp_path / "g.graphml"
    path.write_text("x", encoding="utf-8")
    session = make_session(FakeBackend(open_result=None))
    with pytest.raises(GraphFormatError):
        session.open_document(str(path))
    assert session.current_file_name == ""


def test_mark_changed_title_and_save(tmp_path):
    path = tmp_path / "g.graphml"
    path.write_text("x", encoding="utf-8")
    backend = FakeBackend()
    session = make_session(backend)
    session.open_document(str(path))
    session.mark_changed()
    assert session.title().startswith("* ")
    assert session.save() is True
    assert session.is_changed is False
    assert backend.saved == [(session.current_file_name, "graph")]


def test_save_without_name_raises():
    session = make_session()
    session.create_document("graph")
    with pytest.raises(ValueError):
        session.save()


def test_save_as_appends_default_suffix(tmp_path):
    backend = FakeBackend()
    session = make_session(backend)
    session.create_document("graph")
    target = str(tmp_path / "out")
    assert session.save_as(target, "GraphML (*.graphml)") is True
    assert session.current_file_name == os.path.normpath(target + ".graphml")
    assert session.last_save_filter == "GraphML (*.graphml)"


def test_save_as_failure_raises(tmp_path):
    session = make_session(FakeBackend(can_save=False))
    session.create_document("graph")
    with pytest.raises(GraphFormatError):
        session.save_as(str(tmp_path / "out.graphml"))
    assert session.current_file_name == ""


def test_process_args_create():
    session = make_session()
    assert session.process_args(["prog", "create", "graph"]) is True
    assert session.current_doc_type == "graph"