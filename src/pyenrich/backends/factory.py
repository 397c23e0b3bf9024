"""Backend factory for IMF integration kernels."""

from __future__ import annotations

from .base import IntegrationKernel
from .numba_backend import build_numba_backend
from .numpy_backend import build_numpy_backend


def build_backend(name: str) -> IntegrationKernel:
    if name == "numpy":
        return build_numpy_backend()
    if name == "numba":
        return build_numba_backend()
    if name == "auto":
        try:
            return build_numba_backend()
        except Exception:
            return build_numpy_backend()
    raise ValueError(f"Unknown backend: {name}")
