from __future__ import annotations

import importlib
from typing import Any, List, Sequence, Tuple

import numpy as np

from .exceptions import BackendError


class ArrayBackend:
    """Broadcasting and read-only view construction for one array library."""

    name = "base"

    def broadcast(self, arrays: Sequence[Any]) -> List[Any]:
        raise NotImplementedError

    def view(self, array: Any, index: Tuple[Any, ...]) -> Any:
        raise NotImplementedError


class NumpyBackend(ArrayBackend):
    name = "numpy"

    def broadcast(self, arrays: Sequence[Any]) -> List[Any]:
        return list(np.broadcast_arrays(*[np.asarray(arr) for arr in arrays]))

    def view(self, array: Any, index: Tuple[Any, ...]) -> Any:
        out = array[index]
        out.flags.writeable = False
        return out


class TorchBackend(ArrayBackend):
    name = "torch"

    def __init__(self) -> None:
        self._torch = _import_optional("torch")

    def broadcast(self, arrays: Sequence[Any]) -> List[Any]:
        torch = self._torch
        return list(torch.broadcast_tensors(*[torch.as_tensor(arr) for arr in arrays]))

    def view(self, array: Any, index: Tuple[Any, ...]) -> Any:
        # torch has no per-tensor write protection; the view shares storage.
        return array[index].detach()


class JaxBackend(ArrayBackend):
    name = "jax"

    def __init__(self) -> None:
        self._jnp = _import_optional("jax.numpy")

    def broadcast(self, arrays: Sequence[Any]) -> List[Any]:
        jnp = self._jnp
        return list(jnp.broadcast_arrays(*[jnp.asarray(arr) for arr in arrays]))

    def view(self, array: Any, index: Tuple[Any, ...]) -> Any:
        # jax arrays are immutable
        return array[index]


_BACKEND_TYPES = {
    "numpy": NumpyBackend,
    "torch": TorchBackend,
    "jax": JaxBackend,
}


def _import_optional(module: str) -> Any:
    try:
        return importlib.import_module(module)
    except ImportError as exc:
        raise BackendError(f"Array backend requires '{module}' to be installed") from exc


def _library_of(array: Any) -> str:
    root = type(array).__module__.split(".", 1)[0]
    if root in ("jax", "jaxlib"):
        return "jax"
    if root == "torch":
        return "torch"
    return "numpy"


def resolve_backend(name: str, arrays: Sequence[Any]) -> ArrayBackend:
    if name != "auto":
        try:
            backend_type = _BACKEND_TYPES[name]
        except KeyError as exc:
            raise BackendError(f"Unknown array backend '{name}'") from exc
        return backend_type()
    libraries = {_library_of(arr) for arr in arrays}
    if "torch" in libraries:
        return TorchBackend()
    if "jax" in libraries:
        return JaxBackend()
    return NumpyBackend()
