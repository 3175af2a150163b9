from __future__ import annotations

from typing import Any, List, MutableSequence, Optional, Sequence, Tuple

# Marks an axis that is taken in full rather than pinned to one position.
FULL = None

ROW_MAJOR = "row-major"
COLUMN_MAJOR = "column-major"


def shape_of(array: Any) -> Tuple[int, ...]:
    return tuple(int(extent) for extent in array.shape)


def numel(shape: Sequence[int]) -> int:
    """Number of elements described by ``shape`` (``1`` for a 0-d shape)."""

    result = 1
    for extent in shape:
        result *= int(extent)
    return int(result)


def next_cartesian_index(
    shape: Sequence[int],
    index: Sequence[Optional[int]],
    max_axis: int,
    order: str = ROW_MAJOR,
    out: Optional[MutableSequence[Optional[int]]] = None,
) -> MutableSequence[Optional[int]]:
    """
    Advance ``index`` to the next cartesian position over axes ``0..max_axis``.

    The counter behaves like an odometer restricted to the leading
    ``max_axis + 1`` axes:

    * ``order="row-major"`` steps axis ``max_axis`` fastest and carries toward
      axis ``0``.
    * ``order="column-major"`` steps axis ``0`` fastest and carries toward
      ``max_axis``.

    Entries past ``max_axis`` are copied through untouched. When every axis in
    the prefix overflows the prefix comes back as all zeros. ``max_axis=-1``
    denotes an empty prefix and leaves the index unchanged.

    The result is written into ``out`` (which may be ``index`` itself) and
    returned; a new list is allocated when ``out`` is omitted.
    """

    ndim = len(shape)
    if len(index) != ndim:
        raise ValueError(f"Index of length {len(index)} does not match shape {tuple(shape)}")
    if max_axis < -1 or max_axis >= ndim:
        raise ValueError(f"max_axis {max_axis} out of range for {ndim}-d shape")
    if out is None:
        out = list(index)
    elif out is not index:
        if len(out) != ndim:
            raise ValueError("Output buffer length does not match shape")
        for axis in range(ndim):
            out[axis] = index[axis]

    if order == ROW_MAJOR:
        axes = range(max_axis, -1, -1)
    elif order == COLUMN_MAJOR:
        axes = range(0, max_axis + 1)
    else:
        raise ValueError(f"Unsupported index order: {order}")

    for axis in axes:
        extent = int(shape[axis])
        value = int(out[axis] or 0) + 1
        if value < extent:
            out[axis] = value
            return out
        # overflow: reset and carry into the next slower axis
        out[axis] = 0
    return out


def args_to_multislice(index: Sequence[Optional[int]]) -> Tuple[Any, ...]:
    parts: List[Any] = []
    for entry in index:
        if entry is FULL:
            parts.append(slice(None))
        else:
            parts.append(int(entry))
    return tuple(parts)
