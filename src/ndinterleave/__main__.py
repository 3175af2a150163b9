from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .core.config import IterationConfig
from .core.exceptions import InterleaveError
from .core.iterator import nditer_interleave_subarrays


def _parse_shape(text: str) -> Tuple[int, ...]:
    text = text.strip().strip("()[]")
    if not text:
        return ()
    try:
        shape = tuple(int(part) for part in text.replace("x", ",").split(",") if part.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid shape: {text!r}") from exc
    if any(extent < 0 for extent in shape):
        raise argparse.ArgumentTypeError(f"Shape extents must be non-negative: {text!r}")
    return shape


def _build_arrays(shapes: List[Tuple[int, ...]]) -> List[np.ndarray]:
    # Consecutive integers, continuing from one array to the next.
    arrays = []
    start = 1
    for shape in shapes:
        size = int(np.prod(shape, dtype=np.int64))
        arrays.append(np.arange(start, start + size, dtype=np.int64).reshape(shape))
        start += size
    return arrays


def _demo(
    shapes: List[Tuple[int, ...]],
    ndims: int,
    order: str,
    out: Optional[Path],
) -> None:
    arrays = _build_arrays(shapes)
    iterator = nditer_interleave_subarrays(arrays, ndims, config=IterationConfig(order=order))
    records: List[Dict[str, Any]] = []
    source = 0
    while True:
        result = iterator.next()
        if result.done:
            break
        records.append({"source": source, "value": np.asarray(result.value).tolist()})
        source = (source + 1) % len(arrays)

    if out is None:
        print(f"# broadcast shape {iterator.shape}, ndims={ndims}, {len(records)} view(s)")
        for record in records:
            print(f"[{record['source']}] {record['value']}")
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    payload = {"shape": list(iterator.shape), "ndims": ndims, "views": records}
    out.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ndinterleave command line utilities")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="cmd")

    demo_parser = subparsers.add_parser(
        "demo", help="Interleave subarrays of arrays filled with consecutive integers"
    )
    demo_parser.add_argument(
        "--shape",
        dest="shapes",
        type=_parse_shape,
        action="append",
        required=True,
        help="Array shape such as 2,2,2 or 2x2x2; repeat once per input array",
    )
    demo_parser.add_argument("--ndims", type=int, default=1, help="Trailing dimensions per view")
    demo_parser.add_argument(
        "--order",
        default="row-major",
        choices=["row-major", "column-major"],
        help="Stepping order of the outer axes (default: row-major)",
    )
    demo_parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Optional .json output path. If omitted, prints the views",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "demo":
        try:
            _demo(args.shapes, ndims=args.ndims, order=args.order, out=args.out)
        except InterleaveError as exc:
            raise SystemExit(str(exc)) from exc
        return

    parser.print_help()


if __name__ == "__main__":  # pragma: no cover
    main(sys.argv[1:])
