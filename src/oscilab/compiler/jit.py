# src/oscilab/compiler/jit.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import warnings

# JIT toggle applied *only here*.
# If numba missing or jit=False, we return original Python callables.

__all__ = ["JittedCallable", "jit_compile"]


@dataclass(frozen=True)
class JittedCallable:
    fn: Callable
    jitted: bool
    component: str | None = None

try:
    from numba import njit
    _NUMBA_OK = True
except ImportError:
    _NUMBA_OK = False
    njit = None  # type: ignore


def jit_compile(fn: Callable, *, jit: bool = True, component: str | None = None) -> JittedCallable:
    """
    Centralized JIT compilation with consistent error handling.

    Behavior:
        - If jit=False: returns original Python function
        - If jit=True and numba not installed: warns and returns original function
        - If jit=True and numba installed but compilation fails: raises RuntimeError with details

    Args:
        fn: Function to compile
        jit: Whether to apply JIT compilation (default True)
        component: Optional label carried along for diagnostics

    Returns:
        JittedCallable wrapping the compiled function or the original one
    """
    if not jit:
        return JittedCallable(fn=fn, jitted=False, component=component)

    if not _NUMBA_OK:
        warnings.warn(
            "Numba not found; falling back to pure Python (slower). "
            "Install numba for faster vector fields: pip install numba",
            RuntimeWarning,
            stacklevel=3,
        )
        return JittedCallable(fn=fn, jitted=False, component=component)

    try:
        compiled = njit(cache=False)(fn)
        return JittedCallable(fn=compiled, jitted=True, component=component)
    except Exception as e:
        raise RuntimeError(
            f"JIT compilation with numba failed: {type(e).__name__}: {e}"
        ) from e
