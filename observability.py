"""Logging setup and the call observer wrapped around computations."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, TypeVar

T = TypeVar("T")

# attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED = set(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class KeyValueFormatter(logging.Formatter):
    """Append ``extra`` fields to the message as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        fields = {
            k: v for k, v in vars(record).items() if k not in _RESERVED
        }
        if not fields:
            return base
        pairs = " ".join(f"{k}={v}" for k, v in sorted(fields.items()))
        return f"{base} {pairs}"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Install a single stream handler on the root logger."""
    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root.setLevel(level)
    for handler in list(root.handlers):
        if getattr(handler, "_trainer_handler", False):
            root.removeHandler(handler)
    handler = logging.StreamHandler()
    handler._trainer_handler = True
    handler.setFormatter(
        KeyValueFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root.addHandler(handler)
    return root


class CallObserver:
    """Run a computation and report its start, finish and failure.

    The computations themselves stay free of logging; services hand
    every call through an observer instead.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    def call(self, name: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        self.logger.debug("call started", extra={"call": name})
        start = time.perf_counter()
        try:
            result = fn(*args, **kwargs)
        except Exception:
            self.logger.exception("call failed", extra={"call": name})
            raise
        elapsed_ms = round((time.perf_counter() - start) * 1000, 3)
        self.logger.debug(
            "call finished", extra={"call": name, "elapsed_ms": elapsed_ms}
        )
        return result


class RecordingObserver(CallObserver):
    """Observer that remembers call names, for tests and diagnostics."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        super().__init__(logger)
        self.calls: list[str] = []

    def call(self, name: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        self.calls.append(name)
        return super().call(name, fn, *args, **kwargs)
