from __future__ import annotations

from typing import Any, Protocol


class ScalarField(Protocol):
    """Pure scalar field contract: point in R^n -> float (NaN if undefined)."""

    def __call__(self, p: Any) -> float:
        ...


class Drawable2D(Protocol):
    """2D debug drawable contract."""

    def polyline(self, num: int = 600) -> Any:
        """Return a (N,2) polyline suitable for plotting."""
        ...
