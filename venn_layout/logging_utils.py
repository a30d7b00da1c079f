"""Logging helpers: verbose call tracing and structured layout warnings."""

from __future__ import annotations

import inspect
import logging
import reprlib
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Dict, Iterable, List, MutableMapping, Optional, Protocol, Set, TypeVar, cast

import numpy as np

from .types import Circle

F = TypeVar("F", bound=Callable[..., Any])

_repr = reprlib.Repr()
_repr.maxother = 160
_repr.maxdict = 8
_repr.maxlist = 8
_repr.maxtuple = 8


def _safe_repr(value: Any, *, max_items: int = 5, max_length: int = 400) -> str:
    if isinstance(value, np.ndarray):
        summary = f"ndarray(shape={tuple(value.shape)}, dtype={value.dtype})"
        if value.size == 0:
            return summary
        if value.size <= max_items:
            return f"{summary}, values={_repr.repr(value.tolist())}"
        return f"{summary}, min={float(value.min()):.6g}, max={float(value.max()):.6g}"

    if isinstance(value, Circle):
        label = f"{value.setid}:" if value.setid is not None else ""
        return f"<{label}({value.x:.4g}, {value.y:.4g}) r={value.radius:.4g}>"

    if isinstance(value, dict):
        items = []
        for idx, (key, val) in enumerate(value.items()):
            if idx >= max_items:
                items.append("...")
                break
            items.append(f"{_safe_repr(key)}: {_safe_repr(val)}")
        return "{" + ", ".join(items) + "}"

    if isinstance(value, (list, tuple)):
        items = [_safe_repr(item) for item in list(value)[:max_items]]
        if len(value) > max_items:
            items.append(f"... ({len(value)} items)")
        open_br, close_br = ("(", ")") if isinstance(value, tuple) else ("[", "]")
        return f"{open_br}{', '.join(items)}{close_br}"

    rendered = _repr.repr(value)
    if len(rendered) > max_length:
        return rendered[:max_length] + "... (truncated)"
    return rendered


def _format_arguments(args: Iterable[Any], kwargs: MutableMapping[str, Any]) -> str:
    parts = []
    args = list(args)
    if args:
        parts.append("args=[" + ", ".join(_safe_repr(arg) for arg in args) + "]")
    if kwargs:
        parts.append("kwargs={" + ", ".join(f"{k}={_safe_repr(v)}" for k, v in kwargs.items()) + "}")
    return ", ".join(parts) if parts else "no-args"


def debug_log_call(
    logger: logging.Logger, *, name: Optional[str] = None, log_result: bool = True
) -> Callable[[F], F]:
    """Return a decorator that emits DEBUG logs on entry and exit of a call."""

    def decorator(func: F) -> F:
        if getattr(func, "_debug_logging_wrapped", False):
            return func

        qualname = name or getattr(func, "__qualname__", getattr(func, "__name__", "<callable>"))

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            if not logger.isEnabledFor(logging.DEBUG):
                return func(*args, **kwargs)
            logger.debug("Entering %s (%s)", qualname, _format_arguments(args, kwargs))
            try:
                result = func(*args, **kwargs)
            except Exception:
                logger.exception("Exception in %s", qualname)
                raise
            if log_result:
                logger.debug("Exiting %s -> %s", qualname, _safe_repr(result))
            else:
                logger.debug("Exiting %s", qualname)
            return result

        setattr(wrapper, "_debug_logging_wrapped", True)
        return cast(F, wrapper)

    return decorator


def apply_debug_logging(
    namespace: MutableMapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
    skip: Optional[Iterable[str]] = None,
) -> None:
    """Wrap the public module-level functions of ``namespace`` with DEBUG tracing.

    Private helpers (leading underscore) stay unwrapped; they sit on the hot
    path of the optimizers.
    """

    module_name = namespace.get("__name__")
    logger = logger or logging.getLogger(module_name if isinstance(module_name, str) else __name__)
    skip_set: Set[str] = set(skip or [])

    for name, value in list(namespace.items()):
        if name in skip_set or name.startswith("_"):
            continue
        if inspect.isfunction(value) and getattr(value, "__module__", None) == module_name:
            namespace[name] = debug_log_call(logger, name=name)(value)


@dataclass
class LayoutWarning:
    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)


class LayoutObserver(Protocol):
    """Receiver for non-fatal conditions met while laying out a diagram."""

    def warning(self, code: str, message: str, **context: Any) -> None:
        ...


class LoggingObserver:
    """Forward layout warnings to :mod:`logging`."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("venn_layout")

    def warning(self, code: str, message: str, **context: Any) -> None:
        if context:
            self.logger.warning("%s: %s (%s)", code, message, _safe_repr(context))
        else:
            self.logger.warning("%s: %s", code, message)


class CollectingObserver:
    """Record layout warnings, optionally forwarding them to another observer."""

    def __init__(self, forward: Optional[LayoutObserver] = None):
        self.warnings: List[LayoutWarning] = []
        self.forward = forward

    def warning(self, code: str, message: str, **context: Any) -> None:
        self.warnings.append(LayoutWarning(code, message, dict(context)))
        if self.forward is not None:
            self.forward.warning(code, message, **context)

    def codes(self) -> List[str]:
        return [w.code for w in self.warnings]


__all__ = [
    "debug_log_call",
    "apply_debug_logging",
    "LayoutWarning",
    "LayoutObserver",
    "LoggingObserver",
    "CollectingObserver",
]
