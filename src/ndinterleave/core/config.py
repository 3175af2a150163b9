from __future__ import annotations

from dataclasses import dataclass, replace

from .shape import COLUMN_MAJOR, ROW_MAJOR

_ORDER_ALIASES = {
    "row-major": ROW_MAJOR,
    "row_major": ROW_MAJOR,
    "c": ROW_MAJOR,
    "column-major": COLUMN_MAJOR,
    "column_major": COLUMN_MAJOR,
    "f": COLUMN_MAJOR,
}

BACKENDS = ("auto", "numpy", "torch", "jax")


@dataclass(frozen=True)
class IterationConfig:
    """
    Switches controlling how interleaved subarrays are produced.

    * ``order`` selects how the leading (outer) axes are stepped once an
      array's stacking axis wraps: ``"row-major"`` (last outer axis fastest,
      the default) or ``"column-major"`` (first outer axis fastest). ``"C"``
      and ``"F"`` are accepted as aliases.
    * ``backend`` picks the array library used for broadcasting and view
      construction. ``"auto"`` inspects the inputs.
    """

    order: str = ROW_MAJOR  # "row-major" | "column-major"
    backend: str = "auto"  # "auto" | "numpy" | "torch" | "jax"

    def normalized(self) -> "IterationConfig":
        order = _ORDER_ALIASES.get(str(self.order or ROW_MAJOR).lower())
        if order is None:
            raise ValueError(f"Unsupported iteration order: {self.order}")
        backend = str(self.backend or "auto").lower()
        if backend not in BACKENDS:
            raise ValueError(f"Unsupported array backend: {self.backend}")
        return replace(self, order=order, backend=backend)
