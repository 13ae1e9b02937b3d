"""Base abstractions for chart rendering backends."""

from __future__ import annotations

from typing import Protocol

from ganttline.models import ChartFrame


class ChartBackend(Protocol):
    """Protocol for turning a rendered :class:`ChartFrame` into output.

    Backends only draw. All geometry has already been computed by the
    chart, so a backend never needs to know about dates or gestures.
    """

    name: str

    def render(self, frame: ChartFrame) -> str:
        """Render the frame to a complete document in the backend's format."""
        ...
