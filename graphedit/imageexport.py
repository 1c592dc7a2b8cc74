"""Options for exporting a scene as an image and the size they produce."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence

from graphedit.session import Settings

_GROUP = "ImageExport"
_DPI_KEY = f"{_GROUP}/DPI"
_CUT_KEY = f"{_GROUP}/CutContent"
_DEFAULT_DPI = 96
_CONTENT_MARGIN = 20


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def _to_uint(value: Any) -> int:
    try:
        number = int(str(value).strip())
    except ValueError:
        return 0
    return number if number >= 0 else 0


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false")
    return bool(value)


@dataclass
class ImageExportOptions:
    """Resolution and cropping chosen for an image export.

    ``dpi`` is the screen resolution the scene is measured in; ``resolution``
    is the one the image is written at (0 or less means ``dpi``).
    """

    dpi: int = _DEFAULT_DPI
    resolution: int = _DEFAULT_DPI
    cut_to_content: bool = False

    def __post_init__(self) -> None:
        if self.dpi <= 0:
            self.dpi = _DEFAULT_DPI

    def read_settings(self, settings: Settings) -> None:
        """Take the options stored in ``settings``, keeping those not stored."""
        if _DPI_KEY in settings:
            self.resolution = _to_uint(settings.get(_DPI_KEY))
        if _CUT_KEY in settings:
            self.cut_to_content = _to_bool(settings.get(_CUT_KEY))

    def write_settings(self, settings: Settings) -> None:
        """Store the options in ``settings``."""
        settings.set(_DPI_KEY, str(self.resolution))
        settings.set(_CUT_KEY, self.cut_to_content)

    def target_size(
        self, scene_rect: Sequence[float], items_rect: Sequence[float]
    ) -> tuple[int, int]:
        """Pixel size of the exported image.

        Both rectangles are ``(x, y, width, height)``; the items' bounds are
        used, with a margin around them, when cutting to content.
        """
        if self.cut_to_content:
            width = _round(items_rect[2] + 2 * _CONTENT_MARGIN)
            height = _round(items_rect[3] + 2 * _CONTENT_MARGIN)
        else:
            width = _round(scene_rect[2])
            height = _round(scene_rect[3])

        res = self.resolution if self.resolution > 0 else self.dpi
        coeff = res / self.dpi
        return _round(width * coeff), _round(height * coeff)