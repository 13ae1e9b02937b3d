"""Chart rendering backends."""

from ganttline.backends.base import ChartBackend
from ganttline.backends.svg import SvgBackend
from ganttline.backends.text import TextBackend

__all__ = [
    "ChartBackend",
    "SvgBackend",
    "TextBackend",
]
