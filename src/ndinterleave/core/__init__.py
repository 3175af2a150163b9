"""Core iteration modules for ndinterleave."""

__all__ = [
    "backends",
    "config",
    "exceptions",
    "iterator",
    "shape",
]
