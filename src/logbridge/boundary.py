"""
Caller-boundary resolution.

The facade adds a few frames of its own between the application and the
engine. To attribute records to application code the engine is told the
fully-qualified name of the outermost adapter type on the stack (the caller
boundary); the first frame past that type is the call site.

The boundary is a property of the adapter type hierarchy, so it is computed
once per adapter type on first write and reused for the process lifetime.
"""

from __future__ import annotations

import inspect
import threading
from types import FrameType
from typing import NamedTuple

# =============================================================================
# Adapter Type Registry
# =============================================================================

_adapter_types: set[str] = set()
_boundaries: dict[type, str] = {}
_boundary_lock = threading.Lock()


class CallSite(NamedTuple):
    filename: str
    lineno: int
    funcname: str


UNKNOWN_CALL_SITE = CallSite("(unknown file)", 0, "(unknown function)")


def type_name(cls: type) -> str:
    """Fully-qualified name of a type, e.g. ``logbridge.logger.EngineLogger``."""
    return f"{cls.__module__}.{cls.__qualname__}"


def register_adapter_type(cls: type) -> type:
    """Mark ``cls`` as part of the adapter layer. Usable as a decorator."""
    _adapter_types.add(type_name(cls))
    return cls


def is_adapter_type(name: str) -> bool:
    return name in _adapter_types


def declaring_type(frame: FrameType) -> str:
    """
    Name of the type that declares the function running in ``frame``.

    Nested functions and lambdas belong to the type of their enclosing
    method. Module-level functions are declared by the module itself.
    """
    module = frame.f_globals.get("__name__", "")
    owner = frame.f_code.co_qualname.rpartition(".")[0]
    while owner.endswith("<locals>"):
        owner = owner[: -len("<locals>")].rstrip(".").rpartition(".")[0]
    return f"{module}.{owner}" if owner else module


# =============================================================================
# Resolution
# =============================================================================


def _adapter_names(adapter_type: type) -> frozenset[str]:
    return frozenset(
        name for name in (type_name(cls) for cls in adapter_type.__mro__) if is_adapter_type(name)
    )


def _walk(frame: FrameType, adapter_type: type, fallback: type) -> str:
    known = _adapter_names(adapter_type)
    previous = declaring_type(frame)
    frame = frame.f_back
    while frame is not None:
        current = declaring_type(frame)
        if current not in known:
            return previous
        previous = current
        frame = frame.f_back
    return type_name(fallback)


def resolve_caller_boundary(adapter_type: type, fallback: type, frame: FrameType | None = None) -> str:
    """
    Return the cached caller boundary for ``adapter_type``, computing it on first use.

    Args:
        adapter_type: Runtime type of the adapter performing the write.
        fallback: Type recorded when the stack holds no frame outside the adapter.
        frame: Innermost adapter frame. Defaults to the caller's frame.
    """
    boundary = _boundaries.get(adapter_type)
    if boundary is not None:
        return boundary

    if frame is None:
        current = inspect.currentframe()
        frame = current.f_back if current is not None else None

    with _boundary_lock:
        boundary = _boundaries.get(adapter_type)
        if boundary is None:
            boundary = _walk(frame, adapter_type, fallback) if frame is not None else type_name(fallback)
            _boundaries[adapter_type] = boundary
    return boundary


def reset_caller_boundaries() -> None:
    """Forget every published boundary. Test helper."""
    with _boundary_lock:
        _boundaries.clear()


def find_caller(boundary: str, frame: FrameType | None) -> CallSite:
    """
    Locate the call site for a write made through the adapter.

    Frames are skipped until one declared by ``boundary`` is found, then
    until one that is not; that frame is the call site.
    """
    seen_boundary = False
    while frame is not None:
        inside = declaring_type(frame) == boundary
        if seen_boundary and not inside:
            code = frame.f_code
            return CallSite(code.co_filename, frame.f_lineno, code.co_name)
        seen_boundary = seen_boundary or inside
        frame = frame.f_back
    return UNKNOWN_CALL_SITE
