import pytest

from graphedit.imageexport import ImageExportOptions
from graphedit.session import Settings


SCENE = (0, 0, 800, 600)
ITEMS = (10, 10, 100, 50)


def test_same_resolution_keeps_scene_size():
    options = ImageExportOptions(dpi=96, resolution=96)
    assert options.target_size(SCENE, ITEMS) == (800, 600)


def test_cut_to_content_adds_margin_around_items():
    options = ImageExportOptions(dpi=96, resolution=96, cut_to_content=True)
    assert options.target_size(SCENE, ITEMS) == (100 + 40, 50 + 40)


def test_double_resolution_doubles_size():
    base = ImageExportOptions(dpi=96, resolution=96).target_size(SCENE, ITEMS)
    doubled = ImageExportOptions(dpi=96, resolution=192).target_size(SCENE, ITEMS)
    assert doubled == (base[0] * 2, base[1] * 2)


@pytest.mark.parametrize("resolution", [0, -5])
def test_non_positive_resolution_falls_back_to_dpi(resolution):
    options = ImageExportOptions(dpi=72, resolution=resolution)
    assert options.target_size(SCENE, ITEMS) == (800, 600)


def test_non_positive_dpi_defaults():
    assert ImageExportOptions(dpi=0).dpi == 96


def test_settings_round_trip():
    settings = Settings()
    ImageExportOptions(resolution=300, cut_to_content=True).write_settings(settings)
    restored = ImageExportOptions()
    restored.read_settings(settings)
    assert restored.resolution == 300
    assert restored.cut_to_content is True


def test_settings_round_trip_through_file(tmp_path):
    path = str(tmp_path / "settings.json")
    settings = Settings(path)
    ImageExportOptions(resolution=150, cut_to_content=False).write_settings(settings)
    settings.sync()
    restored = ImageExportOptions(resolution=1, cut_to_content=True)
    restored.read_settings(Settings.load(path))
    assert (restored.resolution, restored.cut_to_content) == (150, False)


def test_missing_settings_keep_current_values():
    options = ImageExportOptions(resolution=200, cut_to_content=True)
    options.read_settings(Settings())
    assert (options.resolution, options.cut_to_content) == (200, True)


def test_invalid_stored_resolution_reads_as_zero():
    settings = Settings(values={"ImageExport/DPI": "abc"})
    options = ImageExportOptions(resolution=200)
    options.read_settings(settings)
    assert options.resolution == 0