try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _load_version
except ImportError:  # pragma: no cover
    from importlib_metadata import (  # type: ignore
        PackageNotFoundError,
    )
    from importlib_metadata import (
        version as _load_version,
    )

from .core.config import IterationConfig
from .core.exceptions import BackendError, InterleaveError, InvalidArgumentError
from .core.iterator import (
    MISSING,
    InterleaveSubarraysIterator,
    IteratorResult,
    nditer_interleave_subarrays,
)
from .core.shape import FULL, args_to_multislice, next_cartesian_index, numel, shape_of

try:
    __version__ = _load_version("ndinterleave")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "nditer_interleave_subarrays",
    "InterleaveSubarraysIterator",
    "IteratorResult",
    "IterationConfig",
    "MISSING",
    "FULL",
    "InterleaveError",
    "InvalidArgumentError",
    "BackendError",
    "args_to_multislice",
    "next_cartesian_index",
    "numel",
    "shape_of",
    "__version__",
]
